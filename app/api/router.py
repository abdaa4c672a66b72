"""
DevMatch — Main API Router

Aggregates all sub-routers so that ``app.main`` can mount the entire API
surface with one ``include_router`` call.
"""

from fastapi import APIRouter

from app.api import auth, connection_requests, profile, users

router = APIRouter()

router.include_router(auth.router, tags=["Auth"])
router.include_router(profile.router, prefix="/profile", tags=["Profile"])
router.include_router(connection_requests.router, tags=["Connection Requests"])
router.include_router(users.router, prefix="/user", tags=["User"])
