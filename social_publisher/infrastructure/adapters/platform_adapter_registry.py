"""
Registry mapping connected-account variants to platform adapters.

This is the single dispatch point between AccountType and the adapter
that knows the provider's protocol.
"""

from collections.abc import Iterable, Iterator, Mapping

import httpx

from ...channels import FacebookAdapter, GraphApiClient, InstagramAdapter, MediaReadinessPoller
from ...config import Settings
from ...domain.entities import AccountType
from ...domain.ports import PlatformAdapter


class PlatformAdapterRegistry(Mapping[AccountType, PlatformAdapter]):
    """Read-only mapping holding exactly one adapter per AccountType."""

    def __init__(self, adapters: Iterable[PlatformAdapter]) -> None:
        self._adapters: dict[AccountType, PlatformAdapter] = {}
        for adapter in adapters:
            if adapter.account_type in self._adapters:
                raise ValueError(f"Duplicate adapter for {adapter.account_type.value}")
            self._adapters[adapter.account_type] = adapter

    @classmethod
    def from_settings(
        cls, http_client: httpx.AsyncClient, settings: Settings
    ) -> "PlatformAdapterRegistry":
        """Build the Facebook and Instagram adapters over one shared httpx client."""
        facebook_graph = GraphApiClient(http_client, platform="Facebook", base_url=settings.graph_url)
        instagram_graph = GraphApiClient(http_client, platform="Instagram", base_url=settings.graph_url)
        poller = MediaReadinessPoller(
            instagram_graph,
            interval=settings.media_poll_interval_seconds,
            max_attempts=settings.media_poll_max_attempts,
        )
        return cls([
            FacebookAdapter(facebook_graph),
            InstagramAdapter(instagram_graph, poller),
        ])

    def __getitem__(self, account_type: AccountType) -> PlatformAdapter:
        return self._adapters[account_type]

    def __iter__(self) -> Iterator[AccountType]:
        return iter(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)
