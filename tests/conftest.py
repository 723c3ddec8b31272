from collections import defaultdict, deque
from typing import Any
from unittest.mock import AsyncMock
from urllib.parse import parse_qsl
from uuid import UUID, uuid4

import httpx
import pytest

from social_publisher.channels import (
    FacebookAdapter,
    GraphApiClient,
    InstagramAdapter,
    MediaReadinessPoller,
)
from social_publisher.domain.entities import (
    AccountType,
    ConnectedAccount,
    MediaType,
    PostKind,
    SocialPost,
)
from social_publisher.infrastructure.adapters import (
    InMemorySocialPostRepository,
    PlatformAdapterRegistry,
)

GRAPH_VERSION = "v21.0"
GRAPH_URL = f"https://graph.test/{GRAPH_VERSION}"


class ScriptedGraph:
    """
    Fake Graph API behind httpx.MockTransport.

    Responses are queued per (method, path); the last queued response for a
    route keeps being returned once the queue is down to one entry.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, dict[str, str]]] = []
        self._responses: dict[tuple[str, str], deque] = defaultdict(deque)

    def on(self, method: str, path: str, *bodies: Any, status_code: int = 200) -> "ScriptedGraph":
        for body in bodies:
            self._responses[(method, path)].append((status_code, body))
        return self

    def calls_to(self, method: str, path: str) -> list[dict[str, str]]:
        return [params for m, p, params in self.calls if m == method and p == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix(f"/{GRAPH_VERSION}/")
        if request.method == "POST":
            params = dict(parse_qsl(request.content.decode(), keep_blank_values=True))
        else:
            params = dict(request.url.params)
        self.calls.append((request.method, path, params))

        queue = self._responses.get((request.method, path))
        if not queue:
            return httpx.Response(
                400, json={"error": {"message": f"unscripted {request.method} {path}"}}
            )
        status_code, body = queue.popleft() if len(queue) > 1 else queue[0]
        return httpx.Response(status_code, json=body)


@pytest.fixture
def graph() -> ScriptedGraph:
    return ScriptedGraph()


@pytest.fixture
def http_client(graph) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(graph.handler))


@pytest.fixture
def facebook_graph(http_client) -> GraphApiClient:
    return GraphApiClient(http_client, platform="Facebook", base_url=GRAPH_URL)


@pytest.fixture
def instagram_graph(http_client) -> GraphApiClient:
    return GraphApiClient(http_client, platform="Instagram", base_url=GRAPH_URL)


@pytest.fixture
def sleep() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def poller(instagram_graph, sleep) -> MediaReadinessPoller:
    return MediaReadinessPoller(instagram_graph, interval=2.0, max_attempts=30, sleep=sleep)


@pytest.fixture
def facebook_adapter(facebook_graph) -> FacebookAdapter:
    return FacebookAdapter(facebook_graph)


@pytest.fixture
def instagram_adapter(instagram_graph, poller) -> InstagramAdapter:
    return InstagramAdapter(instagram_graph, poller)


@pytest.fixture
def registry(facebook_adapter, instagram_adapter) -> PlatformAdapterRegistry:
    return PlatformAdapterRegistry([facebook_adapter, instagram_adapter])


@pytest.fixture
def repository() -> InMemorySocialPostRepository:
    return InMemorySocialPostRepository()


@pytest.fixture
def facebook_account(repository) -> ConnectedAccount:
    account = ConnectedAccount(
        id=uuid4(),
        account_type=AccountType.FACEBOOK_PAGE,
        access_token="fb-token",
        provider_account_id="provider-page",
        page_id="page1",
        account_name="Shop Page",
    )
    repository.add_account(account)
    return account


@pytest.fixture
def instagram_account(repository) -> ConnectedAccount:
    account = ConnectedAccount(
        id=uuid4(),
        account_type=AccountType.INSTAGRAM_BUSINESS,
        access_token="ig-token",
        provider_account_id="provider-ig",
        instagram_account_id="ig1",
        account_name="shop.ig",
    )
    repository.add_account(account)
    return account


async def seed_post(
    repository: InMemorySocialPostRepository,
    accounts: list[ConnectedAccount],
    media: list[tuple[str, MediaType]] = (),
    caption: str = "Sale!",
    hashtags: str = "",
    post_kind: PostKind = PostKind.IMAGE,
    user_id: str = "user-1",
) -> SocialPost:
    """Insert a post with its targets and media straight into the store."""
    post = SocialPost.create(
        user_id=user_id,
        caption=caption,
        hashtags=hashtags,
        post_kind=post_kind,
    )
    await repository.add_post(post)
    await repository.replace_targets(post.id, [a.id for a in accounts])
    media_ids: list[UUID] = [repository.add_library_media(url, media_type) for url, media_type in media]
    await repository.replace_media(post.id, media_ids)
    return post


@pytest.fixture
def seed(repository):
    async def _seed(accounts: list[ConnectedAccount], **kwargs: Any) -> SocialPost:
        return await seed_post(repository, accounts, **kwargs)

    return _seed
