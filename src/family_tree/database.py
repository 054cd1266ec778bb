"""Database connection and session management for family-tree-core.

This module provides SQLAlchemy database setup for storing the three
storage slots of a family tree (members, owner profile, canvas positions).

Database location: ~/.family-tree/family_tree.db
"""

from pathlib import Path
from typing import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session


# SQLAlchemy Base class for all models
Base = declarative_base()


class DatabaseError(Exception):
    """Raised when database operations fail."""
    pass


def get_database_path() -> Path:
    """
    Get the path to the SQLite database file.

    Returns:
        Path to ~/.family-tree/family_tree.db
    """
    db_dir = Path.home() / ".family-tree"
    db_dir.mkdir(parents=True, exist_ok=True)
    return db_dir / "family_tree.db"


def create_db_engine(db_path: Path | None = None, echo: bool = False) -> Engine:
    """
    Create SQLAlchemy engine for SQLite database.

    Args:
        db_path: Optional custom database path (defaults to ~/.family-tree/family_tree.db)
        echo: If True, log all SQL statements (useful for debugging)

    Returns:
        SQLAlchemy Engine instance
    """
    if db_path is None:
        db_path = get_database_path()
    else:
        db_path.parent.mkdir(parents=True, exist_ok=True)

    connection_string = f"sqlite:///{db_path}"

    return create_engine(connection_string, echo=echo)


def create_tables(engine: Engine) -> None:
    """
    Create all database tables.

    Imports all models before calling create_all to ensure every table is
    registered with Base.metadata.

    Args:
        engine: SQLAlchemy engine instance
    """
    # Must stay in sync with models/__init__.py.
    from family_tree.models import StorageSlot  # noqa: F401
    Base.metadata.create_all(engine)


def get_session_factory(engine: Engine) -> sessionmaker:
    """
    Create a session factory for the given engine.

    Args:
        engine: SQLAlchemy engine instance

    Returns:
        Sessionmaker instance for creating sessions
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def get_session(engine: Engine | None = None) -> Generator[Session, None, None]:
    """
    Context manager for database sessions.

    Usage:
        with get_session(engine) as session:
            slot = session.get(StorageSlot, "members")

    Args:
        engine: Optional engine (creates default if not provided)

    Yields:
        SQLAlchemy Session

    Raises:
        DatabaseError: If session operations fail
    """
    if engine is None:
        engine = create_db_engine()

    SessionFactory = get_session_factory(engine)
    session = SessionFactory()

    try:
        yield session
        session.commit()
    except Exception as e:
        session.rollback()
        raise DatabaseError(f"Database operation failed: {e}") from e
    finally:
        session.close()


def initialize_database(db_path: Path | None = None, echo: bool = False) -> Engine:
    """
    Initialize the database with all tables.

    Args:
        db_path: Optional custom database path
        echo: If True, log all SQL statements

    Returns:
        SQLAlchemy Engine instance

    Example:
        engine = initialize_database()
        with get_session(engine) as session:
            slots = session.query(StorageSlot).all()
    """
    engine = create_db_engine(db_path, echo)
    create_tables(engine)
    return engine
