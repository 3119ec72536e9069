"""Session-cookie auth against the external auth service."""

from dataclasses import dataclass
from typing import Optional

import httpx

from messmeal.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthUser:
    id: str
    name: str = ""
    username: str = ""
    email: str = ""
    role: str = "user"
    status: str = "active"

    @property
    def is_admin(self) -> bool:
        return self.role.lower() == "admin"

    @classmethod
    def from_payload(cls, data: dict) -> "AuthUser":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            username=str(data.get("username") or ""),
            email=str(data.get("email") or ""),
            role=str(data.get("role") or "user"),
            status=str(data.get("status") or "active"),
        )


class AuthProvider:
    def __init__(self, http: httpx.Client, path: str, cookie_name: str) -> None:
        self._http = http
        self._path = path.rstrip("/")
        self.cookie_name = cookie_name

    def _headers(self, session_cookie: str) -> dict:
        return {"Cookie": f"{self.cookie_name}={session_cookie}"}

    def current_user(self, session_cookie: Optional[str]) -> Optional[AuthUser]:
        """The user behind the cookie, or None when missing, rejected or unreachable."""
        if not session_cookie:
            return None
        try:
            resp = self._http.get(f"{self._path}/", headers=self._headers(session_cookie))
            resp.raise_for_status()
            client = resp.json().get("client")
            if not client:
                return None
            return AuthUser.from_payload(client)
        except (httpx.HTTPError, ValueError, KeyError, AttributeError) as e:
            logger.info("auth.current_user_failed error=%s", e)
            return None

    def logout(self, session_cookie: Optional[str]) -> bool:
        """End the remote session. The caller drops its local state whatever this returns."""
        if not session_cookie:
            return False
        try:
            resp = self._http.get(f"{self._path}/logout", headers=self._headers(session_cookie))
            resp.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.warning("auth.logout_failed error=%s", e)
            return False
