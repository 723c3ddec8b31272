from .account import AccountType, ConnectedAccount, PlatformStatus, TargetAccount
from .media_item import MediaItem, MediaType
from .publish_outcome import PublishOutcome, aggregate_status, summarize_errors
from .social_post import PostKind, PostStatus, SocialPost

__all__ = [
    "AccountType",
    "ConnectedAccount",
    "MediaItem",
    "MediaType",
    "PlatformStatus",
    "PostKind",
    "PostStatus",
    "PublishOutcome",
    "SocialPost",
    "TargetAccount",
    "aggregate_status",
    "summarize_errors",
]
