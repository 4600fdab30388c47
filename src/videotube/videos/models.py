from typing import Optional

from pydantic import BaseModel


class VideoUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
