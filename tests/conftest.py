"""pytest configuration: environment, per-test database and upload directory."""
from __future__ import annotations

import io
import os
import shutil
import tempfile
from decimal import Decimal
from pathlib import Path

# Settings are read at import time, so the environment must be ready first.
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="garage-sale-tests-"))
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'bootstrap.db'}"
os.environ["UPLOAD_DIR"] = str(_TEST_ROOT / "uploads")

import pytest
from fastapi.testclient import TestClient
from PIL import Image as PILImage
from sqlalchemy.orm import sessionmaker

from garage_sale.core.config import settings
from garage_sale.core.jwt import create_access_token
from garage_sale.database import Base, build_engine, get_db
from garage_sale.main import app
from garage_sale.models.images import Image
from garage_sale.models.users import ROLE_ADMIN, ROLE_SUPER_ADMIN


def _clear(directory: Path) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    for entry in directory.iterdir():
        if entry.is_dir():
            shutil.rmtree(entry)
        else:
            entry.unlink()


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def count_rows(session_factory):
    """Row count read through a short-lived session (no lock is held afterwards)."""

    def _count(model, *criteria) -> int:
        with session_factory() as session:
            return session.query(model).filter(*criteria).count()

    return _count


@pytest.fixture
def fetch_image(session_factory):
    def _fetch(image_id: int) -> Image | None:
        with session_factory() as session:
            return session.get(Image, image_id)

    return _fetch


@pytest.fixture
def upload_dir():
    directory = Path(settings.UPLOAD_DIR)
    _clear(directory)
    yield directory
    _clear(directory)


@pytest.fixture
def client(session_factory, upload_dir):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def bearer(role: str, user_id: int = 1, username: str | None = None) -> dict:
    token = create_access_token(user_id=user_id, username=username or role, role=role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return bearer(ROLE_ADMIN, user_id=2)


@pytest.fixture
def super_admin_headers():
    return bearer(ROLE_SUPER_ADMIN, user_id=1)


def make_image_bytes(fmt: str = "PNG", size: tuple[int, int] = (1600, 1200), mode: str = "RGB") -> bytes:
    color = (200, 30, 30, 128) if mode == "RGBA" else (200, 30, 30)
    buffer = io.BytesIO()
    PILImage.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def make_listing(session_factory, upload_dir):
    """Insert a listing row directly, with a processed file on disk."""
    counter = {"n": 0}

    def _make(title: str = "Lamp", price: str = "25.00", **flags) -> Image:
        counter["n"] += 1
        name = f"1700000000000-{counter['n']:09d}.webp"
        (upload_dir / name).write_bytes(make_image_bytes("WEBP", (80, 60)))

        image = Image(
            title=title,
            price=Decimal(price),
            image_url=f"/uploads/{name}",
            **flags,
        )
        with session_factory() as session:
            session.add(image)
            session.commit()
            session.refresh(image)
        return image

    return _make


@pytest.fixture
def token_for():
    return bearer


@pytest.fixture
def image_bytes():
    return make_image_bytes
