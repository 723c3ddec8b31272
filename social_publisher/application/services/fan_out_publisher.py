"""
Application service that publishes one post to all of its target accounts.

The post and every target row are marked publishing before any provider
call. Each account's result is persisted as soon as it is known, and the
post's own status is written only after every account was attempted.
"""

from collections.abc import Mapping
from dataclasses import replace
from uuid import UUID

import structlog

from ...domain.entities import (
    AccountType,
    PlatformStatus,
    PostStatus,
    PublishOutcome,
    SocialPost,
    TargetAccount,
    aggregate_status,
    summarize_errors,
)
from ...domain.exceptions import NotFoundError, ValidationError
from ...domain.ports import PlatformAdapter, PublishRequest, SocialPostRepository
from ...infrastructure.logging import Timer

logger = structlog.get_logger()


class FanOutPublisher:
    """
    Publishes a post to each target account, one account at a time.

    Failures of one account never stop the others; only a missing post
    or a state guard violation propagates before anything is written.
    """

    def __init__(
        self,
        repository: SocialPostRepository,
        adapters: Mapping[AccountType, PlatformAdapter],
    ) -> None:
        """
        Args:
            repository: Durable store for posts and target rows
            adapters: Adapter per connected-account variant
        """
        self._repository = repository
        self._adapters = adapters

    async def publish(self, post_id: UUID) -> list[PublishOutcome]:
        """
        Publish a post to all of its target accounts.

        Args:
            post_id: UUID of the post

        Returns:
            One PublishOutcome per target account, in stored order. Empty
            when the post has no target accounts, in which case nothing is
            written.

        Raises:
            NotFoundError: The post does not exist
            PolicyViolationError: The post is already publishing or published
        """
        with structlog.contextvars.bound_contextvars(post_id=str(post_id)):
            with Timer() as timer:
                outcomes = await self._publish(post_id)

            logger.info(
                "Post publish finished",
                accounts=len(outcomes),
                successful=sum(1 for o in outcomes if o.success),
                duration_ms=timer.duration_ms,
            )
            return outcomes

    async def _publish(self, post_id: UUID) -> list[PublishOutcome]:
        post = await self._repository.get_post(post_id)
        if post is None:
            raise NotFoundError("Post", post_id)

        # Guard before any write
        post.start_publishing()

        targets = await self._repository.get_targets(post_id)
        if not targets:
            logger.warning("Post has no target accounts, nothing to publish")
            return []

        media = await self._repository.get_media(post_id)
        request = PublishRequest(
            caption=post.full_caption,
            post_kind=post.post_kind,
            media=tuple(media),
        )

        await self._repository.update_post(post)
        await self._repository.set_targets_status(post_id, PlatformStatus.PUBLISHING)

        logger.info(
            "Publishing post",
            post_kind=post.post_kind.value,
            accounts=len(targets),
            media=len(media),
            retry_count=post.retry_count,
        )

        try:
            outcomes = [await self._publish_target(target, request) for target in targets]
            await self._finalize(post, outcomes)
        except Exception as e:
            await self._abort(post, e)
            raise

        return outcomes

    async def _publish_target(
        self, target: TargetAccount, request: PublishRequest
    ) -> PublishOutcome:
        """Publish to one account and persist that account's result."""
        account = target.account
        log = logger.bind(
            account_id=str(target.account_id),
            account_type=account.account_type.value if account else None,
        )

        try:
            adapter = self._select_adapter(target)
            platform_post_id = await adapter.publish(account, request)
        except Exception as e:
            error = str(e) or type(e).__name__
            log.error("Account publish failed", error=error)
            target.mark_failed(error)
            await self._repository.update_target(target)
            return PublishOutcome(account_id=target.account_id, success=False, error=error)

        log.info("Account published", platform_post_id=platform_post_id)
        target.mark_published(platform_post_id)
        await self._repository.update_target(target)
        return PublishOutcome(
            account_id=target.account_id,
            success=True,
            platform_post_id=platform_post_id,
        )

    def _select_adapter(self, target: TargetAccount) -> PlatformAdapter:
        if target.account is None:
            raise ValidationError(f"Connected account {target.account_id} not found")
        adapter = self._adapters.get(target.account.account_type)
        if adapter is None:
            raise ValidationError(
                f"Unsupported account type: {target.account.account_type.value}"
            )
        return adapter

    async def _finalize(self, post: SocialPost, outcomes: list[PublishOutcome]) -> None:
        """Persist the aggregate status; `post` stays publishing until the write lands."""
        final = replace(post)
        if aggregate_status(outcomes) == PostStatus.PUBLISHED:
            final.mark_published()
        else:
            final.mark_failed(summarize_errors(outcomes))
        await self._repository.update_post(final)

    async def _abort(self, post: SocialPost, error: Exception) -> None:
        """Leave a visible failed state when the attempt itself blew up."""
        logger.error("Publish attempt aborted", error=str(error))
        if post.status == PostStatus.PUBLISHING:
            post.mark_failed(str(error) or type(error).__name__)
            await self._repository.update_post(post)
