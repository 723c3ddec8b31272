from .fan_out_publisher import FanOutPublisher
from .social_post_service import SocialPostService

__all__ = ["FanOutPublisher", "SocialPostService"]
