import argparse
import asyncio
import sys
from uuid import UUID, uuid4

import httpx
import structlog

from .application.services import FanOutPublisher
from .config import settings
from .domain.exceptions import NotFoundError, PolicyViolationError
from .infrastructure.adapters import PlatformAdapterRegistry
from .infrastructure.logging import configure_logging, set_correlation_id
from .infrastructure.persistence import Database, SqlAlchemySocialPostRepository

logger = structlog.get_logger()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="social-publisher",
        description="Publish a social post to all of its target accounts.",
    )
    parser.add_argument("post_id", type=UUID, help="UUID of the post to publish")
    parser.add_argument(
        "--correlation-id",
        default=None,
        help="Correlation ID to attach to every log line (generated when omitted)",
    )
    return parser.parse_args(argv)


async def main(post_id: UUID, correlation_id: str | None = None) -> int:
    """Publish one post and return the process exit code."""
    set_correlation_id(correlation_id or str(uuid4()))
    logger.info("Starting publisher", service=settings.service_name, post_id=str(post_id))

    database = Database(settings.database_url)
    timeout = httpx.Timeout(settings.graph_timeout_seconds)

    try:
        async with httpx.AsyncClient(timeout=timeout) as http_client:
            async with database.session() as session:
                # Wire up dependencies (Composition Root)
                publisher = FanOutPublisher(
                    repository=SqlAlchemySocialPostRepository(session),
                    adapters=PlatformAdapterRegistry.from_settings(http_client, settings),
                )
                outcomes = await publisher.publish(post_id)
    except (NotFoundError, PolicyViolationError) as e:
        logger.error("Publish rejected", post_id=str(post_id), error=str(e))
        return 2
    finally:
        await database.close()

    for outcome in outcomes:
        logger.info(
            "Publish outcome",
            account_id=str(outcome.account_id),
            success=outcome.success,
            platform_post_id=outcome.platform_post_id,
            error=outcome.error,
        )

    if outcomes and not any(o.success for o in outcomes):
        return 1
    return 0


def run() -> None:
    args = parse_args()
    configure_logging(settings.service_name, settings.log_level)
    sys.exit(asyncio.run(main(args.post_id, args.correlation_id)))


if __name__ == "__main__":
    run()
