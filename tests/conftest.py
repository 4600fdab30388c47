import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT", "10000/minute")
os.environ.setdefault("UPLOAD_TEMP_DIR", tempfile.mkdtemp(prefix="videotube-uploads-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel, Session, create_engine  # noqa: E402

from videotube.config import settings  # noqa: E402
from videotube.db.session import get_session  # noqa: E402
from videotube.main import app  # noqa: E402
from videotube.media.host import UploadResult, discard_local_file, get_media_host  # noqa: E402


class FakeMediaHost:
    """In-process media host that records every call."""

    def __init__(self):
        self.uploads = []
        self.deletes = []
        self.fail_upload_numbers = set()  # 1-based upload call numbers that fail
        self.fail_delete_urls = set()

    def upload(self, local_path):
        self.uploads.append(local_path)
        try:
            if len(self.uploads) in self.fail_upload_numbers:
                return None
            extension = os.path.splitext(local_path)[1]
            kind = "video" if extension == ".mp4" else "image"
            url = f"https://res.cloudinary.com/demo/{kind}/upload/v1/asset{len(self.uploads)}{extension}"
            return UploadResult(url=url, duration=42.0 if kind == "video" else 0)
        finally:
            discard_local_file(local_path)

    def delete(self, asset_url):
        self.deletes.append(asset_url)
        return asset_url not in self.fail_delete_urls


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def media_host():
    return FakeMediaHost()


@pytest.fixture
def client(engine, media_host):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_media_host] = lambda: media_host
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def temp_dir():
    return settings.UPLOAD_TEMP_DIR


@pytest.fixture
def make_user(client):
    def _make(username: str):
        r = client.post(
            "/api/auth/signup",
            json={"username": username, "email": f"{username}@example.com", "password": "Passw0rd1"},
        )
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        return {"Authorization": f"Bearer {data['access_token']}"}, data["user"]["id"]

    return _make


@pytest.fixture
def publish(client):
    def _publish(headers, title="Clip", description="desc"):
        r = client.post(
            "/api/videos/",
            headers=headers,
            data={"title": title, "description": description},
            files={
                "videoFile": ("clip.mp4", b"video-bytes", "video/mp4"),
                "thumbnail": ("thumb.png", b"png-bytes", "image/png"),
            },
        )
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _publish
