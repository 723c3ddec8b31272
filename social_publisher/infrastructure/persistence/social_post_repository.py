"""
SQLAlchemy implementation of the SocialPostRepository port.

Every mutating method commits before returning. A publish attempt is a
series of single-record units of work, never one enclosing transaction.
"""

from collections.abc import Sequence
from uuid import UUID, uuid4

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ...domain.entities import MediaItem, PlatformStatus, SocialPost, TargetAccount
from ...domain.ports import SocialPostRepository
from .models import (
    ConnectedAccountModel,
    MediaLibraryModel,
    SocialPostAccountModel,
    SocialPostMediaModel,
    SocialPostModel,
    media_item_from_row,
)

logger = structlog.get_logger()


class SqlAlchemySocialPostRepository(SocialPostRepository):
    """PostgreSQL implementation of SocialPostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_post(self, post_id: UUID) -> SocialPost | None:
        model = await self._session.get(SocialPostModel, post_id, populate_existing=True)
        return model.to_entity() if model else None

    async def get_media(self, post_id: UUID) -> list[MediaItem]:
        stmt = (
            select(SocialPostMediaModel, MediaLibraryModel)
            .join(MediaLibraryModel, SocialPostMediaModel.media_id == MediaLibraryModel.id)
            .where(SocialPostMediaModel.social_post_id == post_id)
            .order_by(SocialPostMediaModel.sort_order)
        )
        result = await self._session.execute(stmt)
        return [media_item_from_row(link, asset) for link, asset in result.all()]

    async def get_targets(self, post_id: UUID) -> list[TargetAccount]:
        stmt = (
            select(SocialPostAccountModel, ConnectedAccountModel)
            .join(
                ConnectedAccountModel,
                SocialPostAccountModel.social_account_id == ConnectedAccountModel.id,
            )
            .where(SocialPostAccountModel.social_post_id == post_id)
            .order_by(SocialPostAccountModel.position)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return [target.to_entity(account.to_entity()) for target, account in result.all()]

    async def add_post(self, post: SocialPost) -> None:
        self._session.add(SocialPostModel.from_entity(post))
        await self._session.commit()

    async def update_post(self, post: SocialPost) -> None:
        await self._session.execute(
            update(SocialPostModel)
            .where(SocialPostModel.id == post.id)
            .values(**SocialPostModel.mutable_fields(post))
        )
        await self._session.commit()

        logger.info(
            "Post updated",
            post_id=str(post.id),
            status=post.status.value,
        )

    async def delete_post(self, post_id: UUID) -> None:
        await self._session.execute(
            delete(SocialPostAccountModel).where(SocialPostAccountModel.social_post_id == post_id)
        )
        await self._session.execute(
            delete(SocialPostMediaModel).where(SocialPostMediaModel.social_post_id == post_id)
        )
        await self._session.execute(delete(SocialPostModel).where(SocialPostModel.id == post_id))
        await self._session.commit()

    async def replace_targets(
        self, post_id: UUID, account_ids: Sequence[UUID]
    ) -> list[TargetAccount]:
        await self._session.execute(
            delete(SocialPostAccountModel).where(SocialPostAccountModel.social_post_id == post_id)
        )
        targets = [TargetAccount.create(post_id, account_id) for account_id in account_ids]
        self._session.add_all(
            SocialPostAccountModel.from_entity(t, position=i) for i, t in enumerate(targets)
        )
        await self._session.commit()
        return targets

    async def replace_media(self, post_id: UUID, media_ids: Sequence[UUID]) -> None:
        await self._session.execute(
            delete(SocialPostMediaModel).where(SocialPostMediaModel.social_post_id == post_id)
        )
        self._session.add_all(
            SocialPostMediaModel(id=uuid4(), social_post_id=post_id, media_id=media_id, sort_order=i)
            for i, media_id in enumerate(media_ids)
        )
        await self._session.commit()

    async def set_targets_status(self, post_id: UUID, status: PlatformStatus) -> None:
        await self._session.execute(
            update(SocialPostAccountModel)
            .where(SocialPostAccountModel.social_post_id == post_id)
            .values(platform_status=status.value)
        )
        await self._session.commit()

    async def update_target(self, target: TargetAccount) -> None:
        await self._session.execute(
            update(SocialPostAccountModel)
            .where(SocialPostAccountModel.id == target.id)
            .values(
                platform_status=target.platform_status.value,
                platform_post_id=target.platform_post_id,
                platform_error=target.platform_error,
                published_at=target.published_at,
            )
        )
        await self._session.commit()

        logger.info(
            "Target account updated",
            post_id=str(target.post_id),
            account_id=str(target.account_id),
            platform_status=target.platform_status.value,
        )
