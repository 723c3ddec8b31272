from unittest.mock import patch
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from social_publisher.application.services import FanOutPublisher
from social_publisher.domain.entities import (
    AccountType,
    MediaType,
    PlatformStatus,
    PostKind,
    PostStatus,
    SocialPost,
)
from social_publisher.infrastructure.persistence import Database, SqlAlchemySocialPostRepository
from social_publisher.infrastructure.persistence.models import (
    ConnectedAccountModel,
    MediaLibraryModel,
)


@pytest_asyncio.fixture
async def database(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'publisher.db'}")
    await database.create_tables()
    yield database
    await database.close()


@pytest_asyncio.fixture
async def session(database):
    async with database.session() as session:
        yield session


@pytest.fixture
def store(session) -> SqlAlchemySocialPostRepository:
    return SqlAlchemySocialPostRepository(session)


async def add_page(session, page_id: str) -> UUID:
    account_id = uuid4()
    session.add(
        ConnectedAccountModel(
            id=account_id,
            user_id="user-1",
            provider_account_id=page_id,
            account_type=AccountType.FACEBOOK_PAGE.value,
            account_name=f"Page {page_id}",
            access_token=f"token-{page_id}",
            page_id=page_id,
        )
    )
    await session.commit()
    return account_id


async def add_asset(session, url: str, file_type: str) -> UUID:
    media_id = uuid4()
    session.add(
        MediaLibraryModel(
            id=media_id, user_id="user-1", file_name=url.rsplit("/", 1)[-1], file_type=file_type, url=url
        )
    )
    await session.commit()
    return media_id


class TestSqlAlchemySocialPostRepository:
    @pytest.mark.asyncio
    async def test_post_round_trip(self, store):
        post = SocialPost.create(user_id="user-1", caption="Hello", hashtags="#hi", post_kind=PostKind.VIDEO)

        await store.add_post(post)
        loaded = await store.get_post(post.id)

        assert loaded.id == post.id
        assert (loaded.caption, loaded.hashtags, loaded.post_kind) == ("Hello", "#hi", PostKind.VIDEO)
        assert loaded.status == PostStatus.DRAFT
        assert await store.get_post(uuid4()) is None

    @pytest.mark.asyncio
    async def test_update_post_persists_status_fields(self, store):
        post = SocialPost.create(user_id="user-1")
        await store.add_post(post)

        post.start_publishing()
        post.mark_failed("Facebook API: Invalid token")
        await store.update_post(post)
        loaded = await store.get_post(post.id)

        assert loaded.status == PostStatus.FAILED
        assert loaded.error_message == "Facebook API: Invalid token"
        assert loaded.retry_count == 1

    @pytest.mark.asyncio
    async def test_media_ordered_by_sort_order(self, session, store):
        post = SocialPost.create(user_id="user-1")
        await store.add_post(post)
        first = await add_asset(session, "https://cdn.test/1.mp4", "video")
        second = await add_asset(session, "https://cdn.test/2.jpg", "image")
        third = await add_asset(session, "https://cdn.test/3.gif", "animation")

        await store.replace_media(post.id, [third, first, second])
        media = await store.get_media(post.id)

        assert [m.media_id for m in media] == [third, first, second]
        assert [m.sort_order for m in media] == [0, 1, 2]
        assert [m.media_type for m in media] == [MediaType.IMAGE, MediaType.VIDEO, MediaType.IMAGE]

    @pytest.mark.asyncio
    async def test_targets_keep_attachment_order_with_accounts(self, session, store):
        post = SocialPost.create(user_id="user-1")
        await store.add_post(post)
        account_ids = [await add_page(session, f"page-{i}") for i in range(4)]

        await store.replace_targets(post.id, list(reversed(account_ids)))
        targets = await store.get_targets(post.id)

        assert [t.account_id for t in targets] == list(reversed(account_ids))
        assert all(t.platform_status == PlatformStatus.PENDING for t in targets)
        assert targets[0].account.page_id == "page-3"
        assert targets[0].account.access_token == "token-page-3"

    @pytest.mark.asyncio
    async def test_target_status_updates(self, session, store):
        post = SocialPost.create(user_id="user-1")
        await store.add_post(post)
        account_ids = [await add_page(session, "page-a"), await add_page(session, "page-b")]
        await store.replace_targets(post.id, account_ids)

        await store.set_targets_status(post.id, PlatformStatus.PUBLISHING)
        first, second = await store.get_targets(post.id)
        first.mark_published("fb_1")
        await store.update_target(first)
        targets = await store.get_targets(post.id)

        assert [t.platform_status for t in targets] == [
            PlatformStatus.PUBLISHED,
            PlatformStatus.PUBLISHING,
        ]
        assert targets[0].platform_post_id == "fb_1"

    @pytest.mark.asyncio
    async def test_each_mutation_commits(self, session, store):
        post = SocialPost.create(user_id="user-1")
        account_id = await add_page(session, "page-a")
        media_id = await add_asset(session, "https://cdn.test/a.jpg", "image")

        with patch.object(session, "commit", wraps=session.commit) as commit:
            await store.add_post(post)
            await store.replace_targets(post.id, [account_id])
            await store.replace_media(post.id, [media_id])
            await store.set_targets_status(post.id, PlatformStatus.PUBLISHING)
            await store.update_post(post)
            await store.delete_post(post.id)

        assert commit.await_count == 6

    @pytest.mark.asyncio
    async def test_delete_keeps_connected_accounts(self, session, store):
        post = SocialPost.create(user_id="user-1")
        await store.add_post(post)
        account_id = await add_page(session, "page-a")
        media_id = await add_asset(session, "https://cdn.test/a.jpg", "image")
        await store.replace_targets(post.id, [account_id])
        await store.replace_media(post.id, [media_id])

        await store.delete_post(post.id)

        assert await store.get_post(post.id) is None
        assert await store.get_targets(post.id) == []
        assert await store.get_media(post.id) == []
        accounts = await session.scalar(select(func.count()).select_from(ConnectedAccountModel))
        assert accounts == 1

    @pytest.mark.asyncio
    async def test_publish_through_sql_store(self, session, store, graph, facebook_adapter):
        graph.on("POST", "page-a/feed", {"id": "fb_feed"})
        graph.on("POST", "page-b/feed", {"error": {"message": "Page not published"}})
        post = SocialPost.create(user_id="user-1", caption="Hello")
        await store.add_post(post)
        account_ids = [await add_page(session, "page-a"), await add_page(session, "page-b")]
        await store.replace_targets(post.id, account_ids)
        publisher = FanOutPublisher(store, {AccountType.FACEBOOK_PAGE: facebook_adapter})

        outcomes = await publisher.publish(post.id)

        assert [o.success for o in outcomes] == [True, False]
        targets = await store.get_targets(post.id)
        assert [t.platform_status for t in targets] == [
            PlatformStatus.PUBLISHED,
            PlatformStatus.FAILED,
        ]
        assert targets[1].platform_error == "Facebook API: Page not published"
        assert (await store.get_post(post.id)).status == PostStatus.PUBLISHED
