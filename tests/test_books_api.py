"""Book API tests.

Pattern: test_<verb>_<noun>_<scenario>. Listing is public; reading by id
needs any valid token; deleting needs the creator's token.
"""

import pytest


@pytest.mark.asyncio
async def test_create_book_requires_token(client):
    r = await client.post("/books", json={"title": "Dune"})
    assert r.status_code == 401
    assert r.json() == {"message": "No token provided"}


@pytest.mark.asyncio
async def test_create_book_owned_by_caller(client, alice):
    r = await client.post(
        "/books",
        json={
            "title": "Sample Book",
            "author": "John Doe",
            "description": "A fascinating read",
            "pages": 250,
            "image": "https://example.com/book-image.jpg",
        },
        headers=alice["headers"],
    )
    assert r.status_code == 201
    book = r.json()
    assert book["createdById"] == alice["id"]
    assert book["title"] == "Sample Book"
    assert book["pages"] == 250
    assert "id" in book


@pytest.mark.asyncio
async def test_create_book_ignores_client_supplied_owner(client, alice, bob):
    r = await client.post(
        "/books",
        json={"title": "Mine", "createdById": bob["id"], "created_by_id": bob["id"]},
        headers=alice["headers"],
    )
    assert r.status_code == 201
    assert r.json()["createdById"] == alice["id"]


@pytest.mark.asyncio
async def test_create_book_validates_body(client, alice):
    r = await client.post("/books", json={"author": "No Title"}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid request body"


@pytest.mark.asyncio
async def test_list_books_is_public(client, alice, bob, book):
    await client.post("/books", json={"title": "Emma"}, headers=bob["headers"])

    r = await client.get("/books")
    assert r.status_code == 200
    titles = [b["title"] for b in r.json()]
    assert titles == ["Dune", "Emma"]


@pytest.mark.asyncio
async def test_get_book_any_authenticated_user(client, bob, book):
    r = await client.get(f"/books/{book['id']}", headers=bob["headers"])
    assert r.status_code == 200
    assert r.json()["title"] == "Dune"


@pytest.mark.asyncio
async def test_get_book_requires_token(client, book):
    r = await client.get(f"/books/{book['id']}")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_get_book_not_found(client, alice):
    r = await client.get("/books/999", headers=alice["headers"])
    assert r.status_code == 404
    assert r.json() == {"message": "Book not found"}


@pytest.mark.asyncio
async def test_get_book_invalid_id(client, alice):
    r = await client.get("/books/abc", headers=alice["headers"])
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid Book ID"}


@pytest.mark.asyncio
async def test_get_book_huge_id_is_invalid(client, alice):
    r = await client.get("/books/99999999999999999999", headers=alice["headers"])
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid Book ID"}

    r = await client.delete("/books/0", headers=alice["headers"])
    assert r.status_code == 400
    assert r.json() == {"message": "Invalid Book ID"}


@pytest.mark.asyncio
async def test_create_book_rejects_out_of_range_pages(client, alice):
    r = await client.post(
        "/books", json={"title": "Tome", "pages": 99999999999999999999}, headers=alice["headers"]
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid request body"


@pytest.mark.asyncio
async def test_delete_book_by_non_owner_forbidden(client, bob, book):
    r = await client.delete(f"/books/{book['id']}", headers=bob["headers"])
    assert r.status_code == 403
    assert r.json() == {"message": "Unauthorized - you can only delete books you've created"}

    # Still there
    r = await client.get(f"/books/{book['id']}", headers=bob["headers"])
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_delete_missing_book_is_404_not_403(client, bob):
    """Existence is checked before ownership."""
    r = await client.delete("/books/999", headers=bob["headers"])
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_book_by_owner(client, alice, book):
    r = await client.delete(f"/books/{book['id']}", headers=alice["headers"])
    assert r.status_code == 200
    assert r.json() == {"message": "Book successfully deleted"}

    r = await client.get(f"/books/{book['id']}", headers=alice["headers"])
    assert r.status_code == 404

    # Hard delete: a second delete finds nothing
    r = await client.delete(f"/books/{book['id']}", headers=alice["headers"])
    assert r.status_code == 404
