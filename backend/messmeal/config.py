from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "messmeal"
    env: str = "local"
    log_level: str = "INFO"

    database_dsn: str = "sqlite:///./messmeal.db"
    redis_url: str = "redis://redis:6379/0"
    # Budget and mess-day preferences live this long in Redis
    preferences_ttl_s: int = 30 * 24 * 3600

    # Shared HTTP client for the auth provider, submission endpoint and remote catalog
    api_base_url: str = "http://localhost:1024"
    http_timeout_s: float = 10.0
    auth_path: str = "/auth"
    auth_cookie_name: str = "session"
    submission_path: str = "/api/order/add/selection"

    catalog_source: str = "static"  # static | remote
    catalog_path: str = "/api/product/get/category/all"

    # flat: sum of item prices; per_meal: price x number of active meal times
    pricing_rule: str = "flat"
    budget_high_utilization: float = 0.8
    budget_low_remaining: float = 0.2

    page_size_max: int = 100

    # Selection sessions left without a request this long are dropped
    session_idle_ttl_s: int = 3600
    sessions_per_user_max: int = 5

    class Config:
        env_file = ".env"


settings = Settings()
