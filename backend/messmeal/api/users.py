from fastapi import APIRouter, Depends, HTTPException

from messmeal.api.deps import page_params, require_admin
from messmeal.schemas.user import UserPage, UserRead, UserUpdate
from messmeal.storage.db import get_session
from messmeal.storage.models import User
from messmeal.storage.repositories import get_user, list_users, update_user

router = APIRouter(prefix="/user")

USER_ROLES = ("user", "admin")
USER_STATUSES = ("active", "inactive", "banned")


def user_read(user: User) -> UserRead:
    return UserRead(
        id=user.id,
        name=user.name,
        username=user.username,
        email=user.email,
        role=user.role,
        status=user.status,
        dob=user.dob,
        address=user.address,
        created_at=user.created_at,
    )


@router.get("/all", response_model=UserPage)
def list_all_users(paging: dict = Depends(page_params), _admin=Depends(require_admin)) -> UserPage:
    with get_session() as session:
        users, total = list_users(session, **paging)
        return UserPage(
            users=[user_read(u) for u in users],
            total=total,
            limit=paging["limit"],
            skip=paging["skip"],
        )


@router.post("/update", response_model=UserRead)
def update(body: UserUpdate, _admin=Depends(require_admin)) -> UserRead:
    changes = body.changes()
    if changes.get("role", "user") not in USER_ROLES:
        raise HTTPException(status_code=422, detail=f"Unknown role '{changes['role']}'")
    if changes.get("status", "active") not in USER_STATUSES:
        raise HTTPException(status_code=422, detail=f"Unknown status '{changes['status']}'")
    with get_session() as session:
        user = get_user(session, body.id)
        if user is None:
            raise HTTPException(status_code=404, detail="User not found")
        if changes:
            user = update_user(session, user, changes)
        return user_read(user)
