"""
In-memory implementation of the SocialPostRepository port.

Stores copies of every entity so callers only ever observe what was
explicitly persisted. Suitable for tests and local runs; the SQLAlchemy
repository is the production store.
"""

from collections.abc import Sequence
from copy import deepcopy
from dataclasses import replace
from uuid import UUID, uuid4

import structlog

from ...domain.entities import (
    ConnectedAccount,
    MediaItem,
    MediaType,
    PlatformStatus,
    SocialPost,
    TargetAccount,
)
from ...domain.ports import SocialPostRepository

logger = structlog.get_logger()


class InMemorySocialPostRepository(SocialPostRepository):
    """Dict-backed store for posts, targets, media and connected accounts."""

    def __init__(self) -> None:
        self._posts: dict[UUID, SocialPost] = {}
        self._targets: dict[UUID, list[TargetAccount]] = {}
        self._post_media: dict[UUID, list[tuple[UUID, int]]] = {}
        self._library: dict[UUID, tuple[str, MediaType]] = {}
        self._accounts: dict[UUID, ConnectedAccount] = {}

    # Seeding helpers for collaborators outside the publish path

    def add_account(self, account: ConnectedAccount) -> None:
        self._accounts[account.id] = account

    def add_library_media(self, url: str, media_type: MediaType, media_id: UUID | None = None) -> UUID:
        media_id = media_id or uuid4()
        self._library[media_id] = (url, media_type)
        return media_id

    # SocialPostRepository

    async def get_post(self, post_id: UUID) -> SocialPost | None:
        post = self._posts.get(post_id)
        return deepcopy(post) if post else None

    async def get_media(self, post_id: UUID) -> list[MediaItem]:
        items = []
        for media_id, sort_order in self._post_media.get(post_id, []):
            url, media_type = self._library[media_id]
            items.append(
                MediaItem(media_id=media_id, url=url, media_type=media_type, sort_order=sort_order)
            )
        return sorted(items, key=lambda m: m.sort_order)

    async def get_targets(self, post_id: UUID) -> list[TargetAccount]:
        targets = []
        for target in self._targets.get(post_id, []):
            copy = deepcopy(target)
            copy.account = self._accounts.get(target.account_id)
            targets.append(copy)
        return targets

    async def add_post(self, post: SocialPost) -> None:
        self._posts[post.id] = deepcopy(post)
        self._targets.setdefault(post.id, [])
        self._post_media.setdefault(post.id, [])

    async def update_post(self, post: SocialPost) -> None:
        if post.id not in self._posts:
            logger.warning("Update of unknown post ignored", post_id=str(post.id))
            return
        self._posts[post.id] = deepcopy(post)

    async def delete_post(self, post_id: UUID) -> None:
        self._posts.pop(post_id, None)
        self._targets.pop(post_id, None)
        self._post_media.pop(post_id, None)

    async def replace_targets(
        self, post_id: UUID, account_ids: Sequence[UUID]
    ) -> list[TargetAccount]:
        targets = [TargetAccount.create(post_id, account_id) for account_id in account_ids]
        self._targets[post_id] = [replace(t, account=None) for t in targets]
        return targets

    async def replace_media(self, post_id: UUID, media_ids: Sequence[UUID]) -> None:
        self._post_media[post_id] = [(media_id, i) for i, media_id in enumerate(media_ids)]

    async def set_targets_status(self, post_id: UUID, status: PlatformStatus) -> None:
        for target in self._targets.get(post_id, []):
            target.platform_status = status

    async def update_target(self, target: TargetAccount) -> None:
        rows = self._targets.get(target.post_id, [])
        for i, row in enumerate(rows):
            if row.id == target.id:
                rows[i] = replace(deepcopy(target), account=None)
                return
        logger.warning("Update of unknown target ignored", target_id=str(target.id))
