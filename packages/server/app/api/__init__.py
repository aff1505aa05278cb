"""
API Router

/auth/* is mounted separately by the application; everything else lives
under /api.
"""

from fastapi import APIRouter
from . import organisations, users
from .auth import router as auth_router  # noqa: F401

router = APIRouter()

router.include_router(users.router, prefix="/users", tags=["Users"])
router.include_router(organisations.router, prefix="/organisations", tags=["Organisations"])
