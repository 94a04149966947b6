# helpdesk/core/database.py
import threading
from contextlib import contextmanager

from sqlalchemy import create_engine, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from helpdesk.core.config import get_settings
from helpdesk.core.errors import StorageError

settings = get_settings()

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

# One writer at a time per resource table
_write_locks: dict[str, threading.Lock] = {}
_registry_lock = threading.Lock()


def write_lock(resource: str) -> threading.Lock:
    with _registry_lock:
        lock = _write_locks.get(resource)
        if lock is None:
            lock = _write_locks[resource] = threading.Lock()
        return lock


def next_id(db: Session, model) -> int:
    """max(existing id) + 1, or 1 for an empty table."""
    current = db.scalar(select(func.max(model.id)))
    return (current or 0) + 1


@contextmanager
def committing(db: Session):
    """Commit on success; roll back and raise StorageError on database failure."""
    try:
        yield
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise StorageError(f"Storage failure: {exc.__class__.__name__}") from exc


# Common DB dependency
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
