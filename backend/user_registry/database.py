from pathlib import Path

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the engine handed to the persistence gateway"""
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}

    if is_sqlite and ":memory:" not in database_url:
        db_path = database_url.replace("sqlite:///", "", 1)
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    return create_engine(database_url, echo=echo, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Initialize database - create all tables"""
    # Import models so they're registered with SQLModel metadata
    from user_registry.models.user import User  # noqa: F401

    SQLModel.metadata.create_all(engine)
