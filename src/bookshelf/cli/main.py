"""Bookshelf CLI — talk to a running Bookshelf API from the terminal.

Usage:
    bookshelf serve                                  # Run the API with uvicorn
    bookshelf signup me@example.com "Me"             # Create an account (prompts for password)
    bookshelf login me@example.com                   # Print a token for BOOKSHELF_TOKEN
    bookshelf whoami                                 # Current user, library and books
    bookshelf books                                  # List all books
    bookshelf add-book "Dune" --author "F. Herbert"  # Create a book
    bookshelf library                                # Show your library
    bookshelf shelve 5                               # Add book 5 to your library
    bookshelf unshelve 5                             # Remove it again
    bookshelf notes                                  # Your notes
    bookshelf add-note "Reread ch. 3"                # Create a note
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Optional

import click
import httpx

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3000"


def _api_url() -> str:
    return os.environ.get("BOOKSHELF_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: Optional[str] = None) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Bookshelf API."""
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    return httpx.AsyncClient(base_url=_api_url(), headers=headers, timeout=30.0)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    return asyncio.run(coro)


def _require_token(token: Optional[str]) -> str:
    tok = token or os.environ.get("BOOKSHELF_TOKEN")
    if not tok:
        click.secho(
            "Error: --token required (or set BOOKSHELF_TOKEN; see `bookshelf login`)",
            fg="red",
            err=True,
        )
        sys.exit(1)
    return tok


def _check(r: httpx.Response) -> dict | list:
    """Return the JSON body, or print the API's message and exit."""
    if r.is_success:
        return r.json()
    try:
        message = r.json().get("message", r.text)
    except ValueError:
        message = r.text
    click.secho(f"Error {r.status_code}: {message}", fg="red", err=True)
    sys.exit(1)


def _pretty_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, default=str)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "-")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


BOOK_COLUMNS = [("ID", "id", 6), ("Title", "title", 40), ("Author", "author", 24), ("Owner", "createdById", 6)]

token_option = click.option("--token", envvar="BOOKSHELF_TOKEN", help="Auth token (or BOOKSHELF_TOKEN)")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version="0.1.0", prog_name="bookshelf")
def main():
    """Bookshelf — books, your library, and private notes."""


@main.command()
@click.option("--host", default=None, help="Bind address (default from BOOKSHELF_HOST)")
@click.option("--port", default=None, type=int, help="Port (default from BOOKSHELF_PORT)")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    from bookshelf.config import settings

    uvicorn.run(
        "bookshelf.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.argument("name")
@click.password_option()
def signup(email: str, name: str, password: str):
    """Create an account."""

    async def _impl():
        async with _client() as c:
            user = _check(await c.post("/signup", json={"email": email, "password": password, "name": name}))
        click.secho(f"Created user #{user['id']} ({user['email']})", fg="green")

    _run(_impl())


@main.command()
@click.argument("email")
@click.password_option(confirmation_prompt=False)
def login(email: str, password: str):
    """Log in and print a token. Export it as BOOKSHELF_TOKEN."""

    async def _impl():
        async with _client() as c:
            data = _check(await c.post("/login", json={"email": email, "password": password}))
        click.echo(data["authToken"])

    _run(_impl())


@main.command()
@token_option
def whoami(token: Optional[str]):
    """Show the current user with their library and books."""
    tok = _require_token(token)

    async def _impl():
        async with _client(tok) as c:
            click.echo(_pretty_json(_check(await c.get("/user"))))

    _run(_impl())


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------


@main.command()
def books():
    """List all books."""

    async def _impl():
        async with _client() as c:
            _print_table(_check(await c.get("/books")), BOOK_COLUMNS)

    _run(_impl())


@main.command("add-book")
@click.argument("title")
@click.option("--author", default=None)
@click.option("--description", default=None)
@click.option("--pages", default=None, type=int)
@click.option("--image", default=None, help="Cover image URL")
@token_option
def add_book(title: str, author: Optional[str], description: Optional[str],
             pages: Optional[int], image: Optional[str], token: Optional[str]):
    """Create a book owned by you."""
    tok = _require_token(token)
    body = {"title": title, "author": author, "description": description, "pages": pages, "image": image}

    async def _impl():
        async with _client(tok) as c:
            book = _check(await c.post("/books", json={k: v for k, v in body.items() if v is not None}))
        click.secho(f"Book #{book['id']} created: {book['title']}", fg="green")

    _run(_impl())


# ---------------------------------------------------------------------------
# Library
# ---------------------------------------------------------------------------


async def _my_library_id(c: httpx.AsyncClient) -> int:
    user = _check(await c.get("/user"))
    if not user.get("library"):
        click.secho("You don't have a library yet. Create one with `bookshelf library --create NAME`.", fg="yellow")
        sys.exit(1)
    return user["library"]["id"]


@main.command()
@click.option("--create", "create_name", default=None, help="Create your library with this name")
@token_option
def library(create_name: Optional[str], token: Optional[str]):
    """Show (or create) your library."""
    tok = _require_token(token)

    async def _impl():
        async with _client(tok) as c:
            if create_name:
                lib = _check(await c.post("/libraries", json={"name": create_name}))
                click.secho(f"Library #{lib['id']} created: {lib['name']}", fg="green")
                return
            lib_id = await _my_library_id(c)
            lib = _check(await c.get(f"/libraries/{lib_id}"))
        click.secho(f"{lib['name']} (#{lib['id']}) — {len(lib['books'])} book(s)", bold=True)
        _print_table(lib["books"], BOOK_COLUMNS)

    _run(_impl())


@main.command()
@click.argument("book_id", type=int)
@token_option
def shelve(book_id: int, token: Optional[str]):
    """Add a book to your library."""
    tok = _require_token(token)

    async def _impl():
        async with _client(tok) as c:
            lib_id = await _my_library_id(c)
            lib = _check(await c.put(f"/libraries/{lib_id}", json={"bookId": book_id}))
        click.secho(f"Added book #{book_id}; library now has {len(lib['books'])} book(s)", fg="green")

    _run(_impl())


@main.command()
@click.argument("book_id", type=int)
@token_option
def unshelve(book_id: int, token: Optional[str]):
    """Remove a book from your library."""
    tok = _require_token(token)

    async def _impl():
        async with _client(tok) as c:
            lib_id = await _my_library_id(c)
            lib = _check(await c.put(f"/libraries/{lib_id}/remove-book", json={"bookId": book_id}))
        click.secho(f"Removed book #{book_id}; library now has {len(lib['books'])} book(s)", fg="green")

    _run(_impl())


# ---------------------------------------------------------------------------
# Notes
# ---------------------------------------------------------------------------


@main.command()
@token_option
def notes(token: Optional[str]):
    """List your notes."""
    tok = _require_token(token)

    async def _impl():
        async with _client(tok) as c:
            rows = _check(await c.get("/notes"))
        _print_table(rows, [("ID", "id", 6), ("Title", "title", 40), ("Description", "description", 40)])

    _run(_impl())


@main.command("add-note")
@click.argument("title")
@click.option("--description", "-d", default=None)
@token_option
def add_note(title: str, description: Optional[str], token: Optional[str]):
    """Create a private note."""
    tok = _require_token(token)

    async def _impl():
        async with _client(tok) as c:
            note = _check(await c.post("/notes", json={"title": title, "description": description}))
        click.secho(f"Note #{note['id']} created", fg="green")

    _run(_impl())


if __name__ == "__main__":
    main()
