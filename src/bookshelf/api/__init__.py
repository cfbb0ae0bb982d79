"""API route aggregation.

All routers registered here get mounted in main.py.

Learn: Auth is applied at the include_router level for libraries and
notes, which are fully protected. Books mix a public listing with
protected routes, so those handlers declare the dependency themselves.
Health and account routes are open (login and signup obviously have no
token yet; /verify and /user declare their own dependency).
"""

from fastapi import APIRouter, Depends

from bookshelf.api.auth import router as auth_router
from bookshelf.api.books import router as books_router
from bookshelf.api.health import router as health_router
from bookshelf.api.libraries import router as libraries_router
from bookshelf.api.notes import router as notes_router
from bookshelf.auth.dependencies import get_current_user

# All protected routers require authentication
_auth = [Depends(get_current_user)]

api_router = APIRouter()

# Open (or per-route protected) routes
api_router.include_router(health_router, tags=["health"])
api_router.include_router(auth_router, tags=["auth"])
api_router.include_router(books_router, tags=["books"])

# Protected routes: require a valid Bearer token
api_router.include_router(libraries_router, tags=["libraries"], dependencies=_auth)
api_router.include_router(notes_router, tags=["notes"], dependencies=_auth)
