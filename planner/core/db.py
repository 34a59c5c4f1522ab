"""
SQLAlchemy engine, session, and base. DB URL from config or default.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()

DEFAULT_DB_DIR = Path.home() / ".academic_planner"


def database_url_from_config(config_data: Optional[Dict[str, Any]] = None) -> str:
    """
    Resolve the SQLAlchemy URL.
    database.url wins; else database.path as a SQLite file; else ~/.academic_planner/planner.db.
    """
    db_config = (config_data or {}).get("database") or {}
    url = db_config.get("url")
    if url:
        return url
    path = db_config.get("path")
    if path:
        path = Path(path).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        return f"sqlite:///{path}"
    DEFAULT_DB_DIR.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{DEFAULT_DB_DIR / 'planner.db'}"


def _is_memory_url(db_url: str) -> bool:
    return db_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in db_url


class Database:
    """Owns one engine and its session factory. Construct once, pass to stores."""

    def __init__(self, db_url: str):
        self.url = db_url
        if _is_memory_url(db_url):
            # One shared connection, otherwise every session sees an empty database
            self.engine = create_engine(
                db_url,
                echo=False,
                future=True,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            self.engine = create_engine(db_url, echo=False, future=True)
        self._session_factory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        logger.info(f"Database engine created: {db_url.split('?')[0]}")

    def create_all(self) -> None:
        """Create tables for every model registered on Base."""
        Base.metadata.create_all(self.engine)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Context manager for a single DB session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
