import asyncio
from collections.abc import Awaitable, Callable

import structlog

from ..domain.exceptions import ProcessingError, ProcessingTimeoutError
from .graph import GraphApiClient

logger = structlog.get_logger()

STATUS_FINISHED = "FINISHED"
STATUS_ERROR = "ERROR"

DEFAULT_POLL_INTERVAL_SECONDS = 2.0
DEFAULT_MAX_ATTEMPTS = 30


class MediaReadinessPoller:
    """
    Waits for an Instagram media container to finish processing.

    Polls the container's ``status_code`` every ``interval`` seconds for at
    most ``max_attempts`` polls. Sleeping is injectable so tests do not wait.
    """

    def __init__(
        self,
        graph: GraphApiClient,
        interval: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._graph = graph
        self._interval = interval
        self._max_attempts = max_attempts
        self._sleep = sleep

    async def await_ready(self, ig_account_id: str, container_id: str, access_token: str) -> None:
        """
        Block until the container is FINISHED.

        Raises:
            ProcessingError: The container reported ERROR
            ProcessingTimeoutError: Attempts exhausted without a terminal status
        """
        for attempt in range(1, self._max_attempts + 1):
            data = await self._graph.get(
                container_id,
                params={"fields": "status_code", "access_token": access_token},
                raise_on_error=False,
            )
            status = data.get("status_code")

            if status == STATUS_FINISHED:
                logger.info(
                    "Media container ready",
                    container_id=container_id,
                    attempts=attempt,
                )
                return
            if status == STATUS_ERROR:
                raise ProcessingError(
                    f"Instagram media processing failed for container {container_id}"
                )

            logger.debug(
                "Media container not ready",
                container_id=container_id,
                status=status,
                attempt=attempt,
            )
            if attempt < self._max_attempts:
                await self._sleep(self._interval)

        raise ProcessingTimeoutError(
            f"Instagram media processing timed out for account {ig_account_id}, "
            f"container {container_id}"
        )
