"""Social post DTOs for the lifecycle service."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from ...domain.entities import MediaItem, PostKind, SocialPost, TargetAccount


class CreateSocialPostDTO(BaseModel):
    """DTO for creating a new social post."""

    caption: str = ""
    hashtags: str = ""
    post_type: PostKind = PostKind.IMAGE
    scheduled_at: datetime | None = None
    content_item_id: UUID | None = None
    account_ids: list[UUID] = Field(default_factory=list)
    media_ids: list[UUID] = Field(default_factory=list)


class UpdateSocialPostDTO(BaseModel):
    """
    DTO for a partial update.

    Only fields explicitly present are applied; ``scheduled_at=None``
    clears the schedule, and ``account_ids`` / ``media_ids`` replace the
    whole list.
    """

    caption: str | None = None
    hashtags: str | None = None
    post_type: PostKind | None = None
    scheduled_at: datetime | None = None
    account_ids: list[UUID] | None = None
    media_ids: list[UUID] | None = None


class TargetAccountDTO(BaseModel):
    id: UUID
    social_account_id: UUID
    account_type: str | None = None
    account_name: str | None = None
    platform_status: str
    platform_post_id: str | None = None
    platform_error: str | None = None
    published_at: datetime | None = None

    @classmethod
    def from_entity(cls, target: TargetAccount) -> "TargetAccountDTO":
        account = target.account
        return cls(
            id=target.id,
            social_account_id=target.account_id,
            account_type=account.account_type.value if account else None,
            account_name=account.account_name if account else None,
            platform_status=target.platform_status.value,
            platform_post_id=target.platform_post_id,
            platform_error=target.platform_error,
            published_at=target.published_at,
        )


class MediaDTO(BaseModel):
    id: UUID
    url: str
    file_type: str
    sort_order: int


class SocialPostResponseDTO(BaseModel):
    """DTO for social post response."""

    id: UUID
    user_id: str
    content_item_id: UUID | None
    caption: str
    hashtags: str
    post_type: str
    status: str
    scheduled_at: datetime | None
    published_at: datetime | None
    error_message: str | None
    retry_count: int
    max_retries: int
    created_at: datetime
    updated_at: datetime
    target_accounts: list[TargetAccountDTO] = Field(default_factory=list)
    media: list[MediaDTO] = Field(default_factory=list)

    @classmethod
    def from_entities(
        cls,
        post: SocialPost,
        targets: list[TargetAccount],
        media: list[MediaItem],
    ) -> "SocialPostResponseDTO":
        return cls(
            id=post.id,
            user_id=post.user_id,
            content_item_id=post.content_item_id,
            caption=post.caption,
            hashtags=post.hashtags,
            post_type=post.post_kind.value,
            status=post.status.value,
            scheduled_at=post.scheduled_at,
            published_at=post.published_at,
            error_message=post.error_message,
            retry_count=post.retry_count,
            max_retries=post.max_retries,
            created_at=post.created_at,
            updated_at=post.updated_at,
            target_accounts=[TargetAccountDTO.from_entity(t) for t in targets],
            media=[
                MediaDTO(
                    id=m.media_id,
                    url=m.url,
                    file_type=m.media_type.value,
                    sort_order=m.sort_order,
                )
                for m in media
            ],
        )
