from typing import Literal, Optional

from fastapi import Depends, HTTPException, Query, Request

from messmeal.config import settings
from messmeal.context import AppContext, get_context
from messmeal.services.auth import AuthUser


def page_params(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=10, ge=1, le=settings.page_size_max),
    sort_by: str = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    search: str = "",
) -> dict:
    return {
        "skip": skip,
        "limit": limit,
        "sort_by": sort_by,
        "sort_order": sort_order,
        "search": search,
    }


def session_cookie(request: Request, context: AppContext = Depends(get_context)) -> Optional[str]:
    return request.cookies.get(context.settings.auth_cookie_name)


def require_user(
    cookie: Optional[str] = Depends(session_cookie),
    context: AppContext = Depends(get_context),
) -> AuthUser:
    user = context.auth.current_user(cookie)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(user: AuthUser = Depends(require_user)) -> AuthUser:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
