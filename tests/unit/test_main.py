from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest

from social_publisher.domain.entities import PublishOutcome
from social_publisher.domain.exceptions import NotFoundError, PolicyViolationError
from social_publisher.main import main, parse_args


@pytest.fixture
def wiring():
    """Replace the database and publisher so main runs without external services."""
    with patch("social_publisher.main.Database") as database_cls, patch(
        "social_publisher.main.SqlAlchemySocialPostRepository"
    ), patch("social_publisher.main.FanOutPublisher") as publisher_cls:
        database = database_cls.return_value
        database.close = AsyncMock()
        publisher = publisher_cls.return_value
        publisher.publish = AsyncMock(return_value=[])
        yield MagicMock(database=database, publisher=publisher)


def outcome(success: bool) -> PublishOutcome:
    if success:
        return PublishOutcome(account_id=uuid4(), success=True, platform_post_id="fb_1")
    return PublishOutcome(account_id=uuid4(), success=False, error="boom")


class TestMain:
    @pytest.mark.asyncio
    async def test_success_exits_zero(self, wiring):
        post_id = uuid4()
        wiring.publisher.publish.return_value = [outcome(False), outcome(True)]

        assert await main(post_id, "job-1") == 0
        wiring.publisher.publish.assert_awaited_once_with(post_id)
        wiring.database.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_targets_exits_zero(self, wiring):
        wiring.publisher.publish.return_value = []

        assert await main(uuid4()) == 0

    @pytest.mark.asyncio
    async def test_all_failed_exits_one(self, wiring):
        wiring.publisher.publish.return_value = [outcome(False), outcome(False)]

        assert await main(uuid4()) == 1
        wiring.database.close.assert_awaited_once()

    @pytest.mark.parametrize(
        "error",
        [NotFoundError("Post", "p1"), PolicyViolationError("Post p1 is already published")],
    )
    @pytest.mark.asyncio
    async def test_rejected_publish_exits_two(self, wiring, error):
        wiring.publisher.publish.side_effect = error

        assert await main(uuid4()) == 2
        wiring.database.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unexpected_error_propagates_and_closes_database(self, wiring):
        wiring.publisher.publish.side_effect = ConnectionError("db down")

        with pytest.raises(ConnectionError):
            await main(uuid4())

        wiring.database.close.assert_awaited_once()


class TestParseArgs:
    def test_parses_post_id_and_correlation_id(self):
        post_id = uuid4()

        args = parse_args([str(post_id), "--correlation-id", "job-7"])

        assert args.post_id == post_id
        assert args.correlation_id == "job-7"

    def test_rejects_malformed_post_id(self):
        with pytest.raises(SystemExit):
            parse_args(["not-a-uuid"])
