"""
Application service for the social post lifecycle outside of publishing.

Every operation is scoped to the owning user; a post owned by someone
else is reported exactly like a missing one.
"""

from datetime import datetime
from uuid import UUID

import structlog

from ...domain.entities import SocialPost
from ...domain.exceptions import NotFoundError
from ...domain.ports import SocialPostRepository
from ..dtos import CreateSocialPostDTO, SocialPostResponseDTO, UpdateSocialPostDTO

logger = structlog.get_logger()


class SocialPostService:
    """Create, edit, reschedule, duplicate and delete social posts."""

    def __init__(self, repository: SocialPostRepository, default_max_retries: int = 3) -> None:
        self._repository = repository
        self._default_max_retries = default_max_retries

    async def create(self, user_id: str, dto: CreateSocialPostDTO) -> SocialPostResponseDTO:
        post = SocialPost.create(
            user_id=user_id,
            caption=dto.caption,
            hashtags=dto.hashtags,
            post_kind=dto.post_type,
            scheduled_at=dto.scheduled_at,
            content_item_id=dto.content_item_id,
            max_retries=self._default_max_retries,
        )
        await self._repository.add_post(post)
        await self._repository.replace_media(post.id, dto.media_ids)
        await self._repository.replace_targets(post.id, dto.account_ids)

        logger.info(
            "Post created",
            post_id=str(post.id),
            status=post.status.value,
            account_count=len(dto.account_ids),
        )
        return await self._view(post)

    async def get(self, user_id: str, post_id: UUID) -> SocialPostResponseDTO:
        post = await self._load_owned(user_id, post_id)
        return await self._view(post)

    async def update(
        self, user_id: str, post_id: UUID, dto: UpdateSocialPostDTO
    ) -> SocialPostResponseDTO:
        """
        Apply a partial update.

        Raises:
            NotFoundError: Post missing or owned by another user
            PolicyViolationError: Post is publishing or published
        """
        post = await self._load_owned(user_id, post_id)
        post.ensure_editable()

        fields = dto.model_fields_set
        changed = False
        if "caption" in fields and dto.caption is not None:
            post.caption = dto.caption
            changed = True
        if "hashtags" in fields and dto.hashtags is not None:
            post.hashtags = dto.hashtags
            changed = True
        if "post_type" in fields and dto.post_type is not None:
            post.post_kind = dto.post_type
            changed = True
        if "scheduled_at" in fields:
            post.apply_schedule(dto.scheduled_at)
            changed = True

        if changed:
            post.touch()
            await self._repository.update_post(post)
        if "media_ids" in fields and dto.media_ids is not None:
            await self._repository.replace_media(post_id, dto.media_ids)
        if "account_ids" in fields and dto.account_ids is not None:
            await self._repository.replace_targets(post_id, dto.account_ids)

        logger.info("Post edited", post_id=str(post_id), updated_fields=sorted(fields))
        return await self._view(post)

    async def reschedule(
        self, user_id: str, post_id: UUID, scheduled_at: datetime | None
    ) -> SocialPostResponseDTO:
        post = await self._load_owned(user_id, post_id)
        post.reschedule(scheduled_at)
        await self._repository.update_post(post)

        logger.info(
            "Post rescheduled",
            post_id=str(post_id),
            scheduled_at=scheduled_at.isoformat() if scheduled_at else None,
        )
        return await self._view(post)

    async def duplicate(self, user_id: str, post_id: UUID) -> SocialPostResponseDTO:
        """Copy a post's content, media and accounts into a new draft."""
        original = await self._load_owned(user_id, post_id)
        media = await self._repository.get_media(post_id)
        targets = await self._repository.get_targets(post_id)

        copy = SocialPost.create(
            user_id=user_id,
            caption=original.caption,
            hashtags=original.hashtags,
            post_kind=original.post_kind,
            content_item_id=original.content_item_id,
            max_retries=original.max_retries,
        )
        await self._repository.add_post(copy)
        await self._repository.replace_media(copy.id, [m.media_id for m in media])
        await self._repository.replace_targets(copy.id, [t.account_id for t in targets])

        logger.info("Post duplicated", post_id=str(copy.id), original_id=str(post_id))
        return await self._view(copy)

    async def delete(self, user_id: str, post_id: UUID) -> None:
        """
        Delete a post with its target and media rows.

        Raises:
            PolicyViolationError: Post is currently publishing
        """
        post = await self._load_owned(user_id, post_id)
        post.ensure_deletable()
        await self._repository.delete_post(post_id)
        logger.info("Post deleted", post_id=str(post_id))

    async def _load_owned(self, user_id: str, post_id: UUID) -> SocialPost:
        post = await self._repository.get_post(post_id)
        if post is None or post.user_id != user_id:
            raise NotFoundError("Post", post_id)
        return post

    async def _view(self, post: SocialPost) -> SocialPostResponseDTO:
        targets = await self._repository.get_targets(post.id)
        media = await self._repository.get_media(post.id)
        return SocialPostResponseDTO.from_entities(post, targets, media)
