from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4

from ..exceptions import PolicyViolationError


class PostStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    FAILED = "failed"


class PostKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    CAROUSEL = "carousel"
    TEXT = "text"
    REEL = "reel"
    STORY = "story"


# Statuses in which a post can no longer be edited or rescheduled
LOCKED_FOR_EDIT = frozenset({PostStatus.PUBLISHING, PostStatus.PUBLISHED})
LOCKED_FOR_DELETE = frozenset({PostStatus.PUBLISHING})
PUBLISHABLE = frozenset({PostStatus.DRAFT, PostStatus.SCHEDULED, PostStatus.FAILED})


@dataclass
class SocialPost:
    """Social post aggregate root and owner of its lifecycle."""

    id: UUID
    user_id: str
    caption: str = ""
    hashtags: str = ""
    post_kind: PostKind = PostKind.IMAGE
    status: PostStatus = PostStatus.DRAFT
    content_item_id: UUID | None = None
    scheduled_at: datetime | None = None
    published_at: datetime | None = None
    error_message: str | None = None
    retry_count: int = 0
    max_retries: int = 3
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        user_id: str,
        caption: str = "",
        hashtags: str = "",
        post_kind: PostKind = PostKind.IMAGE,
        scheduled_at: datetime | None = None,
        content_item_id: UUID | None = None,
        max_retries: int = 3,
    ) -> "SocialPost":
        """Factory method to create a new post."""
        return cls(
            id=uuid4(),
            user_id=user_id,
            caption=caption,
            hashtags=hashtags,
            post_kind=post_kind,
            status=PostStatus.SCHEDULED if scheduled_at else PostStatus.DRAFT,
            content_item_id=content_item_id,
            scheduled_at=scheduled_at,
            max_retries=max_retries,
        )

    @property
    def full_caption(self) -> str:
        """Caption as sent to the platforms, with hashtags appended verbatim."""
        if self.hashtags:
            return f"{self.caption}\n\n{self.hashtags}"
        return self.caption

    def ensure_editable(self) -> None:
        if self.status in LOCKED_FOR_EDIT:
            raise PolicyViolationError(f"Cannot edit a post in {self.status.value} status")

    def ensure_deletable(self) -> None:
        if self.status in LOCKED_FOR_DELETE:
            raise PolicyViolationError("Cannot delete a post that is currently publishing")

    def apply_schedule(self, scheduled_at: datetime | None) -> None:
        """
        Set or clear the scheduled time on an editable post.

        Only toggles draft <-> scheduled; a failed post keeps its status.
        """
        self.ensure_editable()
        self.scheduled_at = scheduled_at
        if scheduled_at and self.status == PostStatus.DRAFT:
            self.status = PostStatus.SCHEDULED
        elif not scheduled_at and self.status == PostStatus.SCHEDULED:
            self.status = PostStatus.DRAFT
        self.touch()

    def reschedule(self, scheduled_at: datetime | None) -> None:
        """Move an editable post (failed included) back onto the calendar."""
        self.ensure_editable()
        self.scheduled_at = scheduled_at
        self.status = PostStatus.SCHEDULED if scheduled_at else PostStatus.DRAFT
        self.touch()

    def start_publishing(self) -> None:
        """Enter the publishing state; rejected while publishing or published."""
        if self.status not in PUBLISHABLE:
            raise PolicyViolationError(
                f"Post {self.id} is already {self.status.value}"
            )
        self.status = PostStatus.PUBLISHING
        self.touch()

    def mark_published(self, at: datetime | None = None) -> None:
        self._ensure_publishing()
        self.status = PostStatus.PUBLISHED
        self.published_at = at or datetime.now(UTC)
        self.error_message = None
        self.touch()

    def mark_failed(self, error: str) -> None:
        """Record a failed attempt; the post stays retryable."""
        self._ensure_publishing()
        self.status = PostStatus.FAILED
        self.error_message = error
        self.retry_count += 1
        self.touch()

    def _ensure_publishing(self) -> None:
        if self.status != PostStatus.PUBLISHING:
            raise PolicyViolationError(
                f"Post {self.id} is {self.status.value}, not publishing"
            )

    def touch(self) -> None:
        self.updated_at = datetime.now(UTC)
