from .facebook import FacebookAdapter
from .graph import GraphApiClient
from .instagram import InstagramAdapter
from .media_readiness import MediaReadinessPoller

__all__ = [
    "FacebookAdapter",
    "GraphApiClient",
    "InstagramAdapter",
    "MediaReadinessPoller",
]
