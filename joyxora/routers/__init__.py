"""API routers."""

from joyxora.routers.auth import router as auth_router
from joyxora.routers.signup_lists import router as signup_lists_router

__all__ = ["auth_router", "signup_lists_router"]
