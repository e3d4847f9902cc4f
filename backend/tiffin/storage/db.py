from sqlmodel import SQLModel, Session, create_engine

from tiffin.config import settings
from tiffin.logging import get_logger

# Register tables on SQLModel.metadata before create_all
from tiffin.storage import models  # noqa: F401

logger = get_logger(__name__)

engine = create_engine(settings.database_dsn, pool_pre_ping=True)


def create_db_and_tables() -> None:
    SQLModel.metadata.create_all(engine)
    logger.info("db.tables_ready dialect=%s", engine.dialect.name)


def get_session() -> Session:
    return Session(engine)
