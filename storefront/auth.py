"""Account endpoints: register, login, logout and the current user."""
import logging

from fastapi import APIRouter, FastAPI, Request

from . import session
from .models import LoginRequest, PublicUser, UserCreate
from .storage import storage

logger = logging.getLogger(__name__)


def register_auth_routes(app: FastAPI) -> None:
    """
    Adds the /api/auth endpoints to the FastAPI app.

    Logging in keeps the session cookie and moves any guest cart and
    favorites of that session onto the account.
    """
    router = APIRouter(prefix="/api/auth", tags=["auth"])

    @router.post("/register", status_code=201)
    async def register(body: UserCreate, request: Request):
        user = storage.create_user(body)
        session.login(request, user.id)
        return PublicUser.from_user(user)

    @router.post("/login")
    async def login(body: LoginRequest, request: Request):
        user = storage.authenticate(body.username, body.password)
        session.login(request, user.id)
        logger.info(f"User {user.username} logged in")
        return PublicUser.from_user(user)

    @router.post("/logout")
    async def logout(request: Request):
        session.logout(request)
        return {"success": True}

    @router.get("/me")
    async def me(request: Request):
        user_id = session.require_user(request)
        return PublicUser.from_user(storage.get_user(user_id))

    app.include_router(router)
