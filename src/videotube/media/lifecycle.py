import logging
from typing import Optional

from videotube.db.models import Video
from videotube.db.store import ResourceStore
from videotube.errors import ApiError, InvalidArgument, NotFound, RemoteDeleteError, UploadError
from videotube.media.host import MediaHost, discard_local_file

logger = logging.getLogger("media")


class MediaLifecycleManager:
    """Keeps a Video record and its hosted media in step.

    Each operation is a short saga: the record change and the remote asset
    changes are separate steps with no shared commit. When a later step
    fails the earlier remote work is compensated where possible, and any
    asset left behind on the host is reported through RemoteDeleteError.
    """

    def __init__(self, host: MediaHost, store: ResourceStore[Video]):
        self.host = host
        self.store = store

    def publish(
        self,
        video_path: Optional[str],
        thumbnail_path: Optional[str],
        *,
        owner_id: str,
        title: str,
        description: str,
    ) -> Video:
        if not video_path or not thumbnail_path:
            discard_local_file(video_path)
            discard_local_file(thumbnail_path)
            raise InvalidArgument("Video is required." if not video_path else "Thumbnail is required.")

        video_upload = self.host.upload(video_path)
        if not video_upload:
            discard_local_file(thumbnail_path)
            raise UploadError("There was an error uploading video.")

        thumbnail_upload = self.host.upload(thumbnail_path)
        if not thumbnail_upload:
            self._compensate([video_upload.url])
            raise UploadError("There was an error uploading thumbnail.")

        try:
            video = self.store.create(
                owner_id=owner_id,
                title=title,
                description=description,
                media_url=video_upload.url,
                thumbnail_url=thumbnail_upload.url,
                duration=video_upload.duration,
            )
        except ApiError:
            self._compensate([video_upload.url, thumbnail_upload.url])
            raise
        logger.info(f"User {owner_id} published video {video.id}")
        return video

    def replace_thumbnail(self, video: Video, thumbnail_path: Optional[str]) -> Video:
        if not thumbnail_path:
            raise InvalidArgument("Thumbnail is required.")
        previous_url = video.thumbnail_url
        video_id = video.id

        thumbnail_upload = self.host.upload(thumbnail_path)
        if not thumbnail_upload:
            raise UploadError("There was an error uploading thumbnail.")

        try:
            updated = self.store.update(video_id, {"thumbnail_url": thumbnail_upload.url})
        except ApiError:
            self._compensate([thumbnail_upload.url])
            raise
        if updated is None:
            logger.warning(f"Video {video_id} disappeared while its thumbnail was replaced")
            self._compensate([thumbnail_upload.url])
            raise NotFound("Video not found.")

        if not self.host.delete(previous_url):
            logger.error(f"Orphaned thumbnail {previous_url} left after updating video {video_id}")
            raise RemoteDeleteError(
                "Something went wrong while deleting previous thumbnail.",
                orphaned_urls=[previous_url],
            )
        logger.info(f"Replaced thumbnail of video {video_id}")
        return updated

    def delete_video(self, video: Video) -> None:
        video_id = video.id
        owned_urls = [("video file", video.media_url), ("thumbnail", video.thumbnail_url)]

        self.store.delete(video_id)

        failed = [(label, url) for label, url in owned_urls if not self.host.delete(url)]
        if failed:
            for label, url in failed:
                logger.error(f"Orphaned {label} {url} left after deleting video {video_id}")
            raise RemoteDeleteError(
                "Something went wrong while deleting " + " and ".join(label for label, _ in failed) + ".",
                orphaned_urls=[url for _, url in failed],
            )
        logger.info(f"Deleted video {video_id} and its media")

    def _compensate(self, urls: list[str]) -> None:
        for url in urls:
            if not self.host.delete(url):
                logger.error(f"Compensating delete failed, orphaned asset {url}")
