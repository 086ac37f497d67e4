"""Shared test fixtures and configuration for backend tests."""
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from smartfarm.config import JWTSecrets, UploadSettings, get_config
from smartfarm.main import app
from smartfarm.uploads.router import get_upload_service
from smartfarm.uploads.schemas import UploadedFile
from smartfarm.uploads.service import UploadService
from smartfarm.uploads.storage import ensure_layout

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


def create_access_token(
    data: dict,
    secrets: JWTSecrets,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a JWT the way the main Smart Farm backend issues them."""
    to_encode = data.copy()
    to_encode["exp"] = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    return jwt.encode(to_encode, secrets.secret_key, algorithm=secrets.algorithm)


def make_image(
    size: int = 1024,
    mimetype: str = "image/png",
    originalname: str = "cat.png",
) -> UploadedFile:
    """Build an UploadedFile whose buffer is exactly ``size`` bytes."""
    buffer = (PNG_HEADER + b"\x00" * size)[:size]
    return UploadedFile(
        fieldname="file",
        originalname=originalname,
        mimetype=mimetype,
        buffer=buffer,
        size=len(buffer),
    )


@pytest.fixture
def upload_settings(tmp_path) -> UploadSettings:
    """Upload settings rooted in a per-test temp directory."""
    return UploadSettings(root_dir=str(tmp_path / "uploads"))


@pytest.fixture
def upload_root(upload_settings) -> Path:
    ensure_layout(upload_settings.root_dir, upload_settings.folders)
    return Path(upload_settings.root_dir)


@pytest.fixture
def upload_service(upload_settings, upload_root) -> UploadService:
    return UploadService(upload_settings)


@pytest.fixture
def api_client(upload_service):
    """Provide a TestClient for the main FastAPI app backed by a temp upload root."""
    app.dependency_overrides[get_upload_service] = lambda: upload_service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict:
    token = create_access_token({"sub": "farmer-1", "role": "FARMER"}, get_config().secrets.jwt)
    return {"Authorization": f"Bearer {token}"}


def stored_files(root: Path) -> list:
    """All regular files under ``root``, sorted."""
    return sorted(p for p in root.rglob("*") if p.is_file())
