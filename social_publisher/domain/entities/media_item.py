from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class MediaType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class MediaItem:
    """A library asset attached to a post at a given position."""

    media_id: UUID
    url: str
    media_type: MediaType
    sort_order: int = 0

    @property
    def is_video(self) -> bool:
        return self.media_type == MediaType.VIDEO
