from .in_memory_repository import InMemorySocialPostRepository
from .platform_adapter_registry import PlatformAdapterRegistry

__all__ = [
    "InMemorySocialPostRepository",
    "PlatformAdapterRegistry",
]
