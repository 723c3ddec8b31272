"""
Outbound port for social post persistence.

Each mutating method is its own unit of work: implementations commit
before returning, so partial progress of a publish attempt stays visible.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from uuid import UUID

from ..entities import MediaItem, PlatformStatus, SocialPost, TargetAccount


class SocialPostRepository(ABC):
    """Outbound port for posts and the target/media rows they own."""

    @abstractmethod
    async def get_post(self, post_id: UUID) -> SocialPost | None:
        """Retrieve a post by ID."""
        ...

    @abstractmethod
    async def get_media(self, post_id: UUID) -> list[MediaItem]:
        """Retrieve a post's media ordered by sort order."""
        ...

    @abstractmethod
    async def get_targets(self, post_id: UUID) -> list[TargetAccount]:
        """
        Retrieve a post's target accounts in stored order.

        Each target carries its ConnectedAccount (token, platform ids).
        """
        ...

    @abstractmethod
    async def add_post(self, post: SocialPost) -> None:
        """Insert a new post."""
        ...

    @abstractmethod
    async def update_post(self, post: SocialPost) -> None:
        """Persist a post's mutable fields."""
        ...

    @abstractmethod
    async def delete_post(self, post_id: UUID) -> None:
        """Delete a post along with its target and media rows."""
        ...

    @abstractmethod
    async def replace_targets(
        self, post_id: UUID, account_ids: Sequence[UUID]
    ) -> list[TargetAccount]:
        """Delete all target rows of a post and insert fresh pending ones."""
        ...

    @abstractmethod
    async def replace_media(self, post_id: UUID, media_ids: Sequence[UUID]) -> None:
        """Delete all media rows of a post and insert them in list order."""
        ...

    @abstractmethod
    async def set_targets_status(self, post_id: UUID, status: PlatformStatus) -> None:
        """Set platform_status on every target row of a post."""
        ...

    @abstractmethod
    async def update_target(self, target: TargetAccount) -> None:
        """Persist one target row's publish outcome."""
        ...
