from collections.abc import Sequence
from dataclasses import dataclass
from uuid import UUID

from .social_post import PostStatus


@dataclass(frozen=True)
class PublishOutcome:
    """Result of publishing a post to one connected account."""

    account_id: UUID
    success: bool
    platform_post_id: str | None = None
    error: str | None = None


def aggregate_status(outcomes: Sequence[PublishOutcome]) -> PostStatus | None:
    """
    Reduce per-account outcomes to the post's status.

    Any success publishes the post, even when other accounts failed.
    Returns None when nothing was attempted.
    """
    if not outcomes:
        return None
    if any(o.success for o in outcomes):
        return PostStatus.PUBLISHED
    return PostStatus.FAILED


def summarize_errors(outcomes: Sequence[PublishOutcome]) -> str:
    return "; ".join(o.error or "Unknown error" for o in outcomes if not o.success)
