from .platform_adapter import PlatformAdapter, PublishRequest
from .social_post_repository import SocialPostRepository

__all__ = [
    "PlatformAdapter",
    "PublishRequest",
    "SocialPostRepository",
]
