"""Bookshelf — multi-tenant books, libraries and notes API.

Users sign up, log in for a signed token, and then create books,
gather them into a personal library, and keep private notes. Every
mutation is gated on ownership: only the creator may change a resource.
"""

__version__ = "0.1.0"
