from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import UUID, uuid4


class AccountType(str, Enum):
    """Connected account variants the publisher can target."""

    FACEBOOK_PAGE = "facebook_page"
    INSTAGRAM_BUSINESS = "instagram_business"


class PlatformStatus(str, Enum):
    PENDING = "pending"
    PUBLISHING = "publishing"
    PUBLISHED = "published"
    FAILED = "failed"


@dataclass(frozen=True)
class ConnectedAccount:
    """A connected Facebook Page or Instagram Business account."""

    id: UUID
    account_type: AccountType
    access_token: str
    provider_account_id: str
    page_id: str | None = None
    instagram_account_id: str | None = None
    account_name: str = ""

    @property
    def platform_id(self) -> str:
        """Graph object id the adapter publishes under."""
        if self.account_type == AccountType.FACEBOOK_PAGE:
            return self.page_id or self.provider_account_id
        return self.instagram_account_id or self.provider_account_id


@dataclass
class TargetAccount:
    """Per-post, per-account publish outcome."""

    id: UUID
    post_id: UUID
    account_id: UUID
    account: ConnectedAccount | None = None
    platform_status: PlatformStatus = PlatformStatus.PENDING
    platform_post_id: str | None = None
    platform_error: str | None = None
    published_at: datetime | None = None

    @classmethod
    def create(cls, post_id: UUID, account_id: UUID) -> "TargetAccount":
        return cls(id=uuid4(), post_id=post_id, account_id=account_id)

    def mark_published(self, platform_post_id: str, at: datetime | None = None) -> None:
        self.platform_status = PlatformStatus.PUBLISHED
        self.platform_post_id = platform_post_id
        self.platform_error = None
        self.published_at = at or datetime.now(UTC)

    def mark_failed(self, error: str) -> None:
        self.platform_status = PlatformStatus.FAILED
        self.platform_error = error
