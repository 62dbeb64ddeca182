"""Database handle

The application builds one Database, initialises it in the FastAPI lifespan
and disposes it on shutdown. Nothing here connects at import time.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base class for models
Base = declarative_base()


class Database:
    """Explicitly constructed engine + session factory"""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def init(self) -> "Database":
        """Connect, create tables and run pending schema migrations."""
        if self.is_initialized:
            return self

        url = make_url(self.url)
        if url.get_backend_name() == "sqlite":
            print(f"🔌 Using SQLite database: {url.database or ':memory:'}")
            kwargs = {"connect_args": {"check_same_thread": False}}
            if not url.database or url.database == ":memory:":
                # one shared connection, otherwise every session sees an empty database
                kwargs["poolclass"] = StaticPool
        else:
            print(f"🔌 Connecting to database: {url.render_as_string(hide_password=True)}")
            kwargs = {
                "pool_pre_ping": True,  # Verify connections before using
                "pool_size": 10,
                "max_overflow": 20,
            }

        self.engine = create_engine(self.url, echo=self.echo, **kwargs)
        # autoflush=False means we need to explicitly flush before commit
        self._session_factory = sessionmaker(autoflush=False, bind=self.engine)

        from helpdesk.infrastructure.database import models  # noqa: F401  register models
        from helpdesk.infrastructure.database.migrations import migrate_legacy_audit

        Base.metadata.create_all(bind=self.engine)
        with self.session_scope() as db:
            migrated = migrate_legacy_audit(db)
        if migrated:
            print(f"✅ Migrated legacy audit history on {migrated} tickets")
        print("✅ Database initialized")
        return self

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self._session_factory = None

    def new_session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not initialized; call init() first")
        return self._session_factory()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session for work outside a request; rolls back on error."""
        db = self.new_session()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def session(self) -> Iterator[Session]:
        """Per-request session generator.

        Repositories commit their own transactions; this only guarantees the
        session is rolled back on error and closed afterwards.
        """
        db = self.new_session()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
