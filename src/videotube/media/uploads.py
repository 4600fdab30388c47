import logging
import os
import shutil
from typing import Optional

from fastapi import UploadFile

from videotube.config import settings
from videotube.utils import generate_id

logger = logging.getLogger("media")


def stage_upload(upload: Optional[UploadFile], temp_dir: Optional[str] = None) -> Optional[str]:
    """Write an incoming multipart file to the temp directory and return its path.

    Returns None when no file was sent. The media host removes the file
    once it has been uploaded.
    """
    if upload is None or not upload.filename:
        return None
    temp_dir = temp_dir or settings.UPLOAD_TEMP_DIR
    os.makedirs(temp_dir, exist_ok=True)

    # Create a safe filename
    destination = os.path.join(temp_dir, f"{generate_id()}{os.path.splitext(upload.filename)[1]}")
    with open(destination, "wb") as f:
        shutil.copyfileobj(upload.file, f)
    logger.debug(f"Staged upload {upload.filename} at {destination}")
    return destination
