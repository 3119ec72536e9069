"""Application context: the collaborators every request handler shares.

Built once at startup, kept on app.state and closed at shutdown.
"""

from dataclasses import dataclass

import httpx
from fastapi import Request
from redis import Redis

from messmeal.config import Settings
from messmeal.logging import get_logger
from messmeal.services.auth import AuthProvider
from messmeal.services.budget.calculator import BudgetThresholds, PricingRule
from messmeal.services.catalog.models import Catalog
from messmeal.services.catalog.providers import build_catalog_provider
from messmeal.services.preferences import BudgetPreferenceCache
from messmeal.services.selection.registry import SessionRegistry
from messmeal.services.submission.client import SubmissionClient

logger = get_logger(__name__)


@dataclass
class AppContext:
    settings: Settings
    http: httpx.Client
    auth: AuthProvider
    submission: SubmissionClient
    catalog: Catalog
    preferences: BudgetPreferenceCache
    sessions: SessionRegistry
    pricing_rule: PricingRule

    def close(self) -> None:
        self.http.close()
        self.preferences.close()
        logger.info("context.closed")


def build_http_client(settings: Settings) -> httpx.Client:
    return httpx.Client(
        base_url=settings.api_base_url,
        headers={"Content-Type": "application/json"},
        timeout=settings.http_timeout_s,
    )


def build_context(settings: Settings, http: httpx.Client | None = None, redis_client: Redis | None = None) -> AppContext:
    http = http or build_http_client(settings)
    redis_client = redis_client or Redis.from_url(settings.redis_url, socket_connect_timeout=1.0)
    pricing_rule = PricingRule(settings.pricing_rule)
    thresholds = BudgetThresholds.from_floats(
        settings.budget_high_utilization, settings.budget_low_remaining
    )
    catalog = build_catalog_provider(settings.catalog_source, http, settings.catalog_path).load()
    context = AppContext(
        settings=settings,
        http=http,
        auth=AuthProvider(http, settings.auth_path, settings.auth_cookie_name),
        submission=SubmissionClient(http, settings.submission_path, settings.auth_cookie_name),
        catalog=catalog,
        preferences=BudgetPreferenceCache(redis_client, settings.preferences_ttl_s),
        sessions=SessionRegistry(
            pricing_rule,
            thresholds,
            idle_ttl_s=settings.session_idle_ttl_s,
            max_per_user=settings.sessions_per_user_max,
        ),
        pricing_rule=pricing_rule,
    )
    logger.info(
        "context.built base_url=%s catalog_source=%s items=%s pricing=%s",
        settings.api_base_url,
        settings.catalog_source,
        len(catalog),
        pricing_rule.value,
    )
    return context


def get_context(request: Request) -> AppContext:
    return request.app.state.context
