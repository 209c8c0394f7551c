"""Who is making the request: logged-in user or anonymous guest of this session."""
import uuid

from fastapi import Request

from .errors import AuthenticationError
from .storage import storage

USER_KEY = "userId"
GUEST_KEY = "guestId"


def current_user_id(request: Request) -> str:
    """Logged-in user id, otherwise a guest id stored in the session cookie."""
    user_id = request.session.get(USER_KEY)
    if user_id and storage.get_user(user_id):
        return user_id

    guest_id = request.session.get(GUEST_KEY)
    if not guest_id:
        guest_id = f"guest-{uuid.uuid4()}"
        request.session[GUEST_KEY] = guest_id
    return guest_id


def require_user(request: Request) -> str:
    user_id = request.session.get(USER_KEY)
    if not user_id or not storage.get_user(user_id):
        raise AuthenticationError("Authentication required")
    return user_id


def login(request: Request, user_id: str):
    guest_id = request.session.pop(GUEST_KEY, None)
    if guest_id:
        storage.merge_guest(guest_id, user_id)
    request.session[USER_KEY] = user_id


def logout(request: Request):
    request.session.clear()
