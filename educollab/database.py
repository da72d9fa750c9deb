import logging
from collections.abc import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from educollab.core import config

Base = declarative_base()

logger = logging.getLogger(__name__)


class Database:
    """Handle on the backing store.

    The engine is created by ``connect()`` when the application starts and
    released by ``dispose()`` at shutdown. Request handlers receive sessions
    through ``get_db``.
    """

    def __init__(self, url: str | None = None):
        self.url = url or config.DATABASE_URL
        self.engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    def connect(self) -> None:
        if self.engine is not None:
            return

        engine_options: dict = {}
        if self.url.startswith("sqlite"):
            engine_options["connect_args"] = {"check_same_thread": False}
            if ":memory:" in self.url or self.url == "sqlite://":
                # every session must see the same in-memory database
                engine_options["poolclass"] = StaticPool

        self.engine = create_engine(self.url, **engine_options)
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
        )
        self.create_schema()
        logger.info("Connected to database %s", self.engine.url.render_as_string(hide_password=True))

    def create_schema(self) -> None:
        # models register themselves on Base when imported
        from educollab.models import account, booking, study_session  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected.")
        return self._session_factory()

    def dispose(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._session_factory = None
        logger.info("Database connection released")


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()
