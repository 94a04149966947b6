# tests/conftest.py
import os
import shutil
import tempfile
from pathlib import Path

import pytest

_TMP = Path(tempfile.mkdtemp(prefix="helpdesk-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["UPLOAD_DIR"] = str(_TMP / "uploads")
os.environ["LOG_JSON"] = "false"
os.environ.pop("LEGACY_DATA_DIR", None)

from fastapi.testclient import TestClient  # noqa: E402

from helpdesk.core.database import Base, SessionLocal, engine  # noqa: E402
from helpdesk.main import app  # noqa: E402

UPLOAD_DIR = _TMP / "uploads"


@pytest.fixture(autouse=True)
def clean_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    shutil.rmtree(UPLOAD_DIR, ignore_errors=True)
    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def png(name: str = "shot.png") -> tuple[str, bytes, str]:
    return (name, b"\x89PNG\r\n\x1a\nfake", "image/png")
