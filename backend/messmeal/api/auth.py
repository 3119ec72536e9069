from typing import Optional

from fastapi import APIRouter, Depends, Response

from messmeal.api.deps import require_user, session_cookie
from messmeal.context import AppContext, get_context
from messmeal.logging import get_logger
from messmeal.schemas.user import CurrentUser
from messmeal.services.auth import AuthUser

router = APIRouter(prefix="/auth")
logger = get_logger(__name__)


@router.get("/me", response_model=CurrentUser)
def me(user: AuthUser = Depends(require_user)) -> CurrentUser:
    return CurrentUser(
        id=user.id,
        name=user.name,
        username=user.username,
        email=user.email,
        role=user.role,
        status=user.status,
    )


@router.get("/logout")
def logout(
    response: Response,
    cookie: Optional[str] = Depends(session_cookie),
    context: AppContext = Depends(get_context),
) -> dict:
    user = context.auth.current_user(cookie)
    remote_ok = context.auth.logout(cookie)
    dropped = context.sessions.discard_user(user.id) if user else 0
    response.delete_cookie(context.settings.auth_cookie_name)
    logger.info("auth.logout user=%s remote_ok=%s sessions_dropped=%s", user.id if user else None, remote_ok, dropped)
    return {"ok": True}
