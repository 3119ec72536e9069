from datetime import datetime

from pydantic import BaseModel


class UserUpdate(BaseModel):
    """Partial update. Empty strings leave the field unchanged."""

    id: int
    name: str = ""
    email: str = ""
    role: str = ""
    status: str = ""
    dob: str = ""
    address: str = ""

    def changes(self) -> dict[str, str]:
        fields = ("name", "email", "role", "status", "dob", "address")
        return {f: getattr(self, f).strip() for f in fields if getattr(self, f).strip()}


class UserRead(BaseModel):
    id: int
    name: str
    username: str
    email: str
    role: str
    status: str
    dob: str | None = None
    address: str | None = None
    created_at: datetime


class UserPage(BaseModel):
    users: list[UserRead]
    total: int
    limit: int
    skip: int


class CurrentUser(BaseModel):
    id: str
    name: str
    username: str
    email: str
    role: str
    status: str
