"""Engine creation and schema initialization"""

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

# table registration
from answerkit.crud import models  # noqa: F401


def make_engine(db_url: str) -> Engine:
    """Create an engine; in-memory/thread-shared SQLite needs check_same_thread off."""
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, echo=False, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)
