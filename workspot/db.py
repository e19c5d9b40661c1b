import logging
import os
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from workspot.utils.errors import StoreError

logger = logging.getLogger(__name__)


Base = declarative_base()


class Database:
    """Engine and session factory for one configured database URL."""

    def __init__(self, url: str):
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args = {"check_same_thread": False}
        self.url = url
        self.engine = create_engine(url, connect_args=connect_args)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, bind=self.engine
        )

    def ping(self):
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))


def init_database(database: Database):
    # importing the models registers their tables on Base.metadata
    from workspot.models import booking, spot, user  # noqa: F401

    if database.url.startswith("sqlite:///./"):
        folder = os.path.dirname(database.url[len("sqlite:///"):])
        if folder and not os.path.exists(folder):
            os.makedirs(folder)
    Base.metadata.create_all(bind=database.engine)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request):
    """Provide a database session."""
    db = request.app.state.database.SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit(db: Session):
    """Commit the session, turning store failures into StoreError.

    StaleDataError passes through untouched so the caller can retry.
    """
    try:
        db.commit()
    except StaleDataError:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Store failure while committing: {e}")
        raise StoreError("Error while saving changes.") from e
