import logging
import os
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Optional, Protocol, TypeVar
from urllib.parse import urlparse

import cloudinary.exceptions
import cloudinary.uploader

from videotube.config import Settings, settings

logger = logging.getLogger("media")

T = TypeVar("T")


@dataclass(frozen=True)
class MediaHostConfig:
    cloud_name: str
    api_key: str
    api_secret: str
    timeout: float = 60
    max_retries: int = 2
    backoff: float = 0.5

    @classmethod
    def from_settings(cls, source: Settings) -> "MediaHostConfig":
        return cls(
            cloud_name=source.CLOUDINARY_CLOUD_NAME,
            api_key=source.CLOUDINARY_API_KEY,
            api_secret=source.CLOUDINARY_API_SECRET,
            timeout=source.MEDIA_TIMEOUT_SECONDS,
            max_retries=source.MEDIA_MAX_RETRIES,
            backoff=source.MEDIA_RETRY_BACKOFF_SECONDS,
        )


@dataclass(frozen=True)
class UploadResult:
    url: str
    duration: float = 0


class MediaHost(Protocol):
    def upload(self, local_path: str) -> Optional[UploadResult]:
        ...

    def delete(self, asset_url: str) -> bool:
        ...


def asset_key_from_url(asset_url: str) -> str:
    """The public id of an asset: last path segment without its extension."""
    segment = urlparse(asset_url).path.rstrip("/").split("/")[-1]
    return segment.split(".")[0]


def resource_type_from_url(asset_url: str) -> str:
    # Delivery URLs look like https://res.cloudinary.com/<cloud>/<type>/upload/...
    parts = urlparse(asset_url).path.split("/")
    if "upload" in parts:
        index = parts.index("upload")
        if index > 0 and parts[index - 1] in {"image", "video", "raw"}:
            return parts[index - 1]
    return "image"


def discard_local_file(local_path: Optional[str]) -> None:
    if not local_path:
        return
    try:
        os.remove(local_path)
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.error(f"Could not remove temp file {local_path}: {e}")


class CloudinaryMediaHost:
    """Media host backed by Cloudinary.

    Every call is bounded by ``config.timeout`` and retried up to
    ``config.max_retries`` more times with exponential backoff. Uploads
    always remove the local file, whatever the outcome.
    """

    def __init__(self, config: MediaHostConfig, sleep: Callable[[float], None] = time.sleep):
        self.config = config
        self._sleep = sleep

    def _options(self, **extra) -> dict:
        return dict(
            cloud_name=self.config.cloud_name,
            api_key=self.config.api_key,
            api_secret=self.config.api_secret,
            timeout=self.config.timeout,
            **extra,
        )

    def _with_retries(self, description: str, call: Callable[[], T]) -> Optional[T]:
        attempts = self.config.max_retries + 1
        for attempt in range(attempts):
            try:
                return call()
            except (cloudinary.exceptions.Error, OSError) as e:
                logger.warning(f"Media host {description} failed (attempt {attempt + 1}/{attempts}): {e}")
                if attempt + 1 < attempts:
                    self._sleep(self.config.backoff * (2 ** attempt))
        logger.error(f"Media host {description} gave up after {attempts} attempts")
        return None

    def upload(self, local_path: str) -> Optional[UploadResult]:
        if not local_path:
            return None
        try:
            response = self._with_retries(
                f"upload of {local_path}",
                lambda: cloudinary.uploader.upload(local_path, **self._options(resource_type="auto")),
            )
        finally:
            discard_local_file(local_path)
        if not response:
            return None
        url = response.get("secure_url") or response.get("url")
        if not url:
            return None
        logger.info(f"Uploaded {url}")
        return UploadResult(url=url, duration=float(response.get("duration") or 0))

    def delete(self, asset_url: str) -> bool:
        if not asset_url:
            return False
        public_id = asset_key_from_url(asset_url)
        response = self._with_retries(
            f"delete of {public_id}",
            lambda: cloudinary.uploader.destroy(
                public_id, **self._options(resource_type=resource_type_from_url(asset_url))
            ),
        )
        deleted = bool(response) and response.get("result") == "ok"
        if deleted:
            logger.info(f"Deleted {asset_url}")
        else:
            logger.error(f"Media host did not delete {asset_url}: {response}")
        return deleted


@lru_cache
def get_media_host() -> MediaHost:
    return CloudinaryMediaHost(MediaHostConfig.from_settings(settings))
