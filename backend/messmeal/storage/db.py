from sqlmodel import Session, SQLModel, create_engine

from messmeal.config import settings
from messmeal.logging import get_logger

logger = get_logger(__name__)


def _connect_args(dsn: str) -> dict:
    # SQLite connections are shared across FastAPI's threadpool
    if dsn.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.database_dsn,
    pool_pre_ping=True,
    connect_args=_connect_args(settings.database_dsn),
)


def create_db_and_tables() -> None:
    # Imported for their side effect of registering tables on SQLModel.metadata
    from messmeal.storage import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("db.tables_ready dsn=%s", engine.url.render_as_string(hide_password=True))


def get_session() -> Session:
    return Session(engine)
