from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ...domain.entities import (
    AccountType,
    ConnectedAccount,
    MediaItem,
    MediaType,
    PlatformStatus,
    PostKind,
    PostStatus,
    SocialPost,
    TargetAccount,
)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    pass


class ConnectedAccountModel(Base):
    """Connected Facebook Page / Instagram Business account."""

    __tablename__ = "social_accounts"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    provider: Mapped[str] = mapped_column(String(50), nullable=False, default="meta")
    provider_account_id: Mapped[str] = mapped_column(String(255), nullable=False)
    account_type: Mapped[str] = mapped_column(String(50), nullable=False)
    account_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    access_token: Mapped[str] = mapped_column(Text, nullable=False)
    page_id: Mapped[str | None] = mapped_column(String(255))
    instagram_account_id: Mapped[str | None] = mapped_column(String(255))
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def to_entity(self) -> ConnectedAccount:
        return ConnectedAccount(
            id=self.id,
            account_type=AccountType(self.account_type),
            access_token=self.access_token,
            provider_account_id=self.provider_account_id,
            page_id=self.page_id,
            instagram_account_id=self.instagram_account_id,
            account_name=self.account_name,
        )


class MediaLibraryModel(Base):
    """Uploaded media asset; only the columns the publisher reads."""

    __tablename__ = "media_library"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    file_name: Mapped[str] = mapped_column(String(500), nullable=False)
    file_type: Mapped[str] = mapped_column(String(100), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)


class SocialPostModel(Base):
    """SQLAlchemy model for SocialPost entity."""

    __tablename__ = "social_posts"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    content_item_id: Mapped[UUID | None] = mapped_column(PG_UUID(as_uuid=True), index=True)
    caption: Mapped[str] = mapped_column(Text, nullable=False, default="")
    hashtags: Mapped[str] = mapped_column(Text, nullable=False, default="")
    post_type: Mapped[str] = mapped_column(String(50), nullable=False, default="image")
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="draft", index=True)
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), index=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    error_message: Mapped[str | None] = mapped_column(Text)
    retry_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_retries: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=_utcnow)

    @classmethod
    def from_entity(cls, post: SocialPost) -> "SocialPostModel":
        return cls(
            id=post.id,
            user_id=post.user_id,
            created_at=post.created_at,
            **cls.mutable_fields(post),
        )

    @staticmethod
    def mutable_fields(post: SocialPost) -> dict:
        """Column values that may change after insert."""
        return {
            "content_item_id": post.content_item_id,
            "caption": post.caption,
            "hashtags": post.hashtags,
            "post_type": post.post_kind.value,
            "status": post.status.value,
            "scheduled_at": post.scheduled_at,
            "published_at": post.published_at,
            "error_message": post.error_message,
            "retry_count": post.retry_count,
            "max_retries": post.max_retries,
            "updated_at": post.updated_at,
        }

    def to_entity(self) -> SocialPost:
        return SocialPost(
            id=self.id,
            user_id=self.user_id,
            caption=self.caption,
            hashtags=self.hashtags,
            post_kind=PostKind(self.post_type),
            status=PostStatus(self.status),
            content_item_id=self.content_item_id,
            scheduled_at=self.scheduled_at,
            published_at=self.published_at,
            error_message=self.error_message,
            retry_count=self.retry_count,
            max_retries=self.max_retries,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class SocialPostAccountModel(Base):
    """Per-post, per-account publish tracking."""

    __tablename__ = "social_post_accounts"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    social_post_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("social_posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    social_account_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("social_accounts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    platform_post_id: Mapped[str | None] = mapped_column(String(255))
    platform_status: Mapped[str] = mapped_column(String(50), nullable=False, default="pending")
    platform_error: Mapped[str | None] = mapped_column(Text)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    # Order the accounts were attached in; accounts are published in this order
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @classmethod
    def from_entity(cls, target: TargetAccount, position: int = 0) -> "SocialPostAccountModel":
        return cls(
            id=target.id,
            position=position,
            social_post_id=target.post_id,
            social_account_id=target.account_id,
            platform_post_id=target.platform_post_id,
            platform_status=target.platform_status.value,
            platform_error=target.platform_error,
            published_at=target.published_at,
        )

    def to_entity(self, account: ConnectedAccount | None = None) -> TargetAccount:
        return TargetAccount(
            id=self.id,
            post_id=self.social_post_id,
            account_id=self.social_account_id,
            account=account,
            platform_status=PlatformStatus(self.platform_status),
            platform_post_id=self.platform_post_id,
            platform_error=self.platform_error,
            published_at=self.published_at,
        )


class SocialPostMediaModel(Base):
    """Ordered link between a post and a media library asset."""

    __tablename__ = "social_post_media"

    id: Mapped[UUID] = mapped_column(PG_UUID(as_uuid=True), primary_key=True)
    social_post_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("social_posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    media_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True), ForeignKey("media_library.id", ondelete="CASCADE"), nullable=False
    )
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


def media_item_from_row(link: SocialPostMediaModel, asset: MediaLibraryModel) -> MediaItem:
    # file_type is free text; anything that is not a video is sent as an image
    media_type = MediaType.VIDEO if asset.file_type == MediaType.VIDEO.value else MediaType.IMAGE
    return MediaItem(
        media_id=asset.id,
        url=asset.url,
        media_type=media_type,
        sort_order=link.sort_order,
    )
