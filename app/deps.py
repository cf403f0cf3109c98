"""
Request-scoped identity dependencies.
"""
import uuid

from fastapi import HTTPException, Request

from app.config import settings


def get_visitor_id(request: Request) -> str:
    """Return the caller's visitor id, minting one on first contact.

    A minted id is written to the cookie by ``issue_visitor_cookie`` so the
    caller receives it even when the route fails.
    """
    visitor_id = request.cookies.get(settings.VISITOR_COOKIE_NAME)
    if not visitor_id:
        visitor_id = getattr(request.state, "new_visitor_id", None) or str(uuid.uuid4())
        request.state.new_visitor_id = visitor_id
    return visitor_id


async def issue_visitor_cookie(request: Request, call_next):
    response = await call_next(request)
    visitor_id = getattr(request.state, "new_visitor_id", None)
    if visitor_id:
        response.set_cookie(
            settings.VISITOR_COOKIE_NAME,
            visitor_id,
            max_age=settings.VISITOR_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
        )
    return response


def is_admin_authenticated(request: Request) -> bool:
    return bool(request.session.get("admin_id"))


def require_admin(request: Request) -> str:
    if not is_admin_authenticated(request):
        raise HTTPException(status_code=401, detail="Admin authentication required")
    return request.session["admin_id"]
