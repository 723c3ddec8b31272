"""
Outbound port for platform publishing.

One adapter per AccountType translates a normalized PublishRequest into the
provider's call sequence and returns the platform post id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..entities import AccountType, ConnectedAccount, MediaItem, PostKind


@dataclass(frozen=True)
class PublishRequest:
    """Normalized post content handed to every adapter."""

    caption: str
    post_kind: PostKind
    media: tuple[MediaItem, ...] = field(default_factory=tuple)


class PlatformAdapter(ABC):
    """Publishes a request to one connected account."""

    @property
    @abstractmethod
    def account_type(self) -> AccountType:
        """Return the account variant this adapter handles."""
        ...

    @abstractmethod
    async def publish(self, account: ConnectedAccount, request: PublishRequest) -> str:
        """
        Publish to the account.

        Returns:
            The platform post id

        Raises:
            PlatformError: On any provider or validation failure
        """
        ...
