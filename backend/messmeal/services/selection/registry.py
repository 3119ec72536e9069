import threading
import time
from typing import Callable, Optional

from messmeal.logging import get_logger
from messmeal.services.budget.calculator import BudgetThresholds, PricingRule
from messmeal.services.catalog.models import Catalog
from messmeal.services.selection.session import SelectionSession

logger = get_logger(__name__)


class SessionRegistry:
    """In-process selection sessions keyed by id, each owned by one user.

    Sessions idle longer than idle_ttl_s are evicted, and a user keeps at
    most max_per_user sessions (the least recently used go first).
    """

    def __init__(
        self,
        pricing_rule: PricingRule,
        thresholds: BudgetThresholds,
        idle_ttl_s: float = 3600,
        max_per_user: int = 5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._pricing_rule = pricing_rule
        self._thresholds = thresholds
        self._idle_ttl_s = idle_ttl_s
        self._max_per_user = max_per_user
        self._clock = clock
        self._sessions: dict[str, SelectionSession] = {}
        self._last_seen: dict[str, float] = {}
        self._lock = threading.Lock()

    def _drop(self, session_id: str) -> bool:
        self._last_seen.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    def _evict_idle(self, now: float) -> None:
        expired = [sid for sid, seen in self._last_seen.items() if now - seen > self._idle_ttl_s]
        for sid in expired:
            self._drop(sid)
        if expired:
            logger.info("selection.session.expired count=%s", len(expired))

    def _enforce_user_cap(self, user_id: Optional[str]) -> None:
        owned = sorted(
            (sid for sid, s in self._sessions.items() if s.user_id == user_id),
            key=lambda sid: self._last_seen[sid],
        )
        for sid in owned[: max(0, len(owned) - self._max_per_user)]:
            self._drop(sid)
            logger.info("selection.session.evicted id=%s user=%s", sid, user_id)

    def create(self, catalog: Catalog, user_id: Optional[str]) -> SelectionSession:
        session = SelectionSession(
            catalog,
            user_id=user_id,
            pricing_rule=self._pricing_rule,
            thresholds=self._thresholds,
        )
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            self._sessions[session.id] = session
            self._last_seen[session.id] = now
            self._enforce_user_cap(user_id)
        logger.info("selection.session.created id=%s user=%s", session.id, user_id)
        return session

    def get(self, session_id: str, user_id: Optional[str]) -> Optional[SelectionSession]:
        with self._lock:
            now = self._clock()
            self._evict_idle(now)
            session = self._sessions.get(session_id)
            if session is None or session.user_id != user_id:
                return None
            self._last_seen[session_id] = now
        return session

    def discard(self, session_id: str) -> bool:
        with self._lock:
            return self._drop(session_id)

    def discard_user(self, user_id: Optional[str]) -> int:
        with self._lock:
            ids = [sid for sid, s in self._sessions.items() if s.user_id == user_id]
            for sid in ids:
                self._drop(sid)
        if ids:
            logger.info("selection.session.discarded user=%s count=%s", user_id, len(ids))
        return len(ids)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
