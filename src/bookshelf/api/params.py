"""Path parameter helpers.

Path ids arrive as strings. A non-numeric or out-of-range id is a 400
with a message naming the resource, rather than FastAPI's generic
validation error or a storage overflow.
"""

from bookshelf.db.models import MAX_ID
from bookshelf.errors import ValidationError


def parse_id(raw: str, resource: str) -> int:
    try:
        value = int(raw, 10)
    except ValueError:
        raise ValidationError(f"Invalid {resource} ID")
    if not 1 <= value <= MAX_ID:
        raise ValidationError(f"Invalid {resource} ID")
    return value
