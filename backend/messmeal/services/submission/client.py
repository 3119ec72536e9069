from typing import Any

import httpx

from messmeal.errors import SubmissionError
from messmeal.logging import get_logger
from messmeal.utils.timing import time_span

logger = get_logger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to save selections. Please try again."


def _server_message(resp: httpx.Response) -> str | None:
    try:
        data = resp.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("message") or data.get("detail")
        if isinstance(message, str) and message.strip():
            return message.strip()
    return None


class SubmissionClient:
    """POSTs selection payloads to the submission endpoint."""

    def __init__(self, http: httpx.Client, path: str, cookie_name: str = "session") -> None:
        self._http = http
        self._path = path
        self._cookie_name = cookie_name

    def submit(self, payload: dict[str, Any], session_cookie: str | None = None) -> dict:
        headers = {"Cookie": f"{self._cookie_name}={session_cookie}"} if session_cookie else None
        summary = payload.get("summary", {})
        with time_span("selection.submit", path=self._path, items=summary.get("totalItems")):
            try:
                resp = self._http.post(self._path, json=payload, headers=headers)
            except httpx.HTTPError as e:
                logger.warning("submission.transport_failed path=%s error=%s", self._path, e)
                raise SubmissionError(DEFAULT_FAILURE_MESSAGE) from e
        if resp.status_code not in (200, 201):
            message = _server_message(resp) or DEFAULT_FAILURE_MESSAGE
            logger.warning(
                "submission.rejected path=%s status=%s message=%s",
                self._path,
                resp.status_code,
                message,
            )
            raise SubmissionError(message)
        try:
            body = resp.json()
        except ValueError:
            body = {}
        logger.info("submission.accepted path=%s status=%s", self._path, resp.status_code)
        return body if isinstance(body, dict) else {"data": body}
