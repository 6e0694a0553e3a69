import logging
import threading
from typing import Generator, Optional

from fastapi import Depends, Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from diary.app.config import Settings
from diary.app.core.exceptions import ConfigurationError, StoreError
from diary.app.core.logging import mask_credentials

logger = logging.getLogger(__name__)

DISCONNECTED = "disconnected"
CONNECTED = "connected"
ERROR = "error"


class DiaryStore:
    """
    Owns the single engine/session factory used by the process.

    ``connect()`` is lazy and idempotent; concurrent first calls are serialized
    so exactly one engine is created.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.state = DISCONNECTED
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._lock = threading.Lock()

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        return self.connect()

    def connect(self) -> Engine:
        if self._engine is not None:
            return self._engine

        with self._lock:
            if self._engine is not None:
                return self._engine

            url = (self.settings.database_url or "").strip()
            if not url:
                logger.error("DATABASE_URL is not set")
                raise ConfigurationError(
                    "Store is not configured",
                    "Set DATABASE_URL to the diary database connection string",
                )

            logger.info("Connecting to diary store at %s", mask_credentials(url))
            try:
                engine = create_engine(url, **self._engine_options(url))
                self._attach_listeners(engine)
                with engine.connect() as conn:
                    conn.execute(text("SELECT 1"))

                # Create tables in the database
                from diary.app.models.models import Base
                Base.metadata.create_all(bind=engine)
            except SQLAlchemyError as exc:
                self.state = ERROR
                logger.error("Diary store connection failed: %s", mask_credentials(str(exc)))
                raise StoreError(
                    "Store unavailable", mask_credentials(str(exc))
                ) from exc

            self._engine = engine
            self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
            self.state = CONNECTED
            logger.info("Diary store connected")
            return engine

    def session(self) -> Session:
        self.connect()
        return self._session_factory()

    def dispose(self) -> None:
        with self._lock:
            if self._engine is None:
                return
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
            self.state = DISCONNECTED
            logger.info("Diary store disconnected")

    def _engine_options(self, url: str) -> dict:
        s = self.settings
        if url.startswith("sqlite"):
            # sqlite has no server; the busy timeout stands in for the socket timeout
            return {
                "connect_args": {
                    "check_same_thread": False,
                    "timeout": s.db_socket_timeout_ms / 1000,
                },
            }

        return {
            "pool_size": s.db_pool_min_size,
            "max_overflow": max(s.db_pool_max_size - s.db_pool_min_size, 0),
            "pool_timeout": s.db_server_selection_timeout_ms / 1000,
            "pool_pre_ping": s.db_retry_writes,
            "connect_args": {
                "connect_timeout": max(int(s.db_server_selection_timeout_ms / 1000), 1),
            },
        }

    def _attach_listeners(self, engine: Engine) -> None:
        def on_connect(dbapi_connection, connection_record):
            logger.debug("Opened store connection")
            self.state = CONNECTED

        def on_close(dbapi_connection, connection_record):
            logger.debug("Closed store connection")

        def on_invalidate(dbapi_connection, connection_record, exception):
            logger.warning("Store connection invalidated: %s", exception)
            self.state = ERROR

        def on_error(context):
            logger.error("Store error: %s", context.original_exception)

        event.listen(engine, "connect", on_connect)
        event.listen(engine, "close", on_close)
        event.listen(engine, "invalidate", on_invalidate)
        event.listen(engine, "handle_error", on_error)


# Dependencies

def get_store(request: Request) -> DiaryStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db_session(store: DiaryStore = Depends(get_store)) -> Generator[Session, None, None]:
    db = store.session()
    try:
        yield db
    finally:
        db.close()
