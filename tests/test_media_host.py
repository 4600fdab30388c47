import cloudinary.exceptions
import cloudinary.uploader
import pytest

from videotube.media.host import (
    CloudinaryMediaHost,
    MediaHostConfig,
    asset_key_from_url,
    resource_type_from_url,
)

VIDEO_URL = "https://res.cloudinary.com/demo/video/upload/v1712/abc123.mp4"
IMAGE_URL = "https://res.cloudinary.com/demo/image/upload/v1712/thumb9.png"


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def host(sleeps):
    config = MediaHostConfig(cloud_name="demo", api_key="key", api_secret="secret", timeout=5, max_retries=2, backoff=0.5)
    return CloudinaryMediaHost(config, sleep=sleeps.append)


@pytest.fixture
def local_file(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"video-bytes")
    return path


def test_asset_key_is_last_segment_without_extension():
    assert asset_key_from_url(VIDEO_URL) == "abc123"
    assert asset_key_from_url("https://example.com/a/b/name.tar.gz") == "name"


def test_resource_type_follows_delivery_url():
    assert resource_type_from_url(VIDEO_URL) == "video"
    assert resource_type_from_url(IMAGE_URL) == "image"
    assert resource_type_from_url("https://example.com/file.png") == "image"


def test_upload_returns_url_and_duration_and_removes_file(host, local_file, monkeypatch):
    calls = []

    def fake_upload(path, **options):
        calls.append((path, options))
        return {"secure_url": VIDEO_URL, "url": "http://insecure", "duration": 12.5}

    monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)

    result = host.upload(str(local_file))
    assert result.url == VIDEO_URL
    assert result.duration == 12.5
    assert not local_file.exists()

    path, options = calls[0]
    assert path == str(local_file)
    assert options["resource_type"] == "auto"
    assert options["cloud_name"] == "demo"
    assert options["timeout"] == 5


def test_upload_retries_with_backoff_then_gives_up(host, local_file, sleeps, monkeypatch):
    attempts = []

    def failing_upload(path, **options):
        attempts.append(path)
        raise cloudinary.exceptions.GeneralError("timeout")

    monkeypatch.setattr(cloudinary.uploader, "upload", failing_upload)

    assert host.upload(str(local_file)) is None
    assert len(attempts) == 3
    assert sleeps == [0.5, 1.0]
    assert not local_file.exists()


def test_upload_succeeds_after_transient_failure(host, local_file, sleeps, monkeypatch):
    responses = [cloudinary.exceptions.GeneralError("reset"), {"url": IMAGE_URL}]

    def flaky_upload(path, **options):
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(cloudinary.uploader, "upload", flaky_upload)

    result = host.upload(str(local_file))
    assert result.url == IMAGE_URL
    assert result.duration == 0
    assert sleeps == [0.5]


def test_delete_uses_public_id_and_resource_type(host, monkeypatch):
    calls = []

    def fake_destroy(public_id, **options):
        calls.append((public_id, options["resource_type"]))
        return {"result": "ok"}

    monkeypatch.setattr(cloudinary.uploader, "destroy", fake_destroy)

    assert host.delete(VIDEO_URL) is True
    assert host.delete(IMAGE_URL) is True
    assert calls == [("abc123", "video"), ("thumb9", "image")]


def test_delete_reports_missing_asset(host, monkeypatch):
    monkeypatch.setattr(cloudinary.uploader, "destroy", lambda public_id, **options: {"result": "not found"})
    assert host.delete(IMAGE_URL) is False
    assert host.delete("") is False
