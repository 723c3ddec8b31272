from collections.abc import Sequence

import structlog

from ..domain.entities import AccountType, ConnectedAccount, MediaItem, PostKind
from ..domain.exceptions import ValidationError
from ..domain.ports import PlatformAdapter, PublishRequest
from .graph import GraphApiClient
from .media_readiness import MediaReadinessPoller

logger = structlog.get_logger()


class InstagramAdapter(PlatformAdapter):
    """Instagram Graph API adapter using the two-step container flow."""

    def __init__(self, graph: GraphApiClient, poller: MediaReadinessPoller) -> None:
        self._graph = graph
        self._poller = poller

    @property
    def account_type(self) -> AccountType:
        return AccountType.INSTAGRAM_BUSINESS

    async def publish(self, account: ConnectedAccount, request: PublishRequest) -> str:
        return await self.publish_to_account(
            ig_account_id=account.platform_id,
            access_token=account.access_token,
            caption=request.caption,
            media=request.media,
            post_kind=request.post_kind,
        )

    async def publish_to_account(
        self,
        ig_account_id: str,
        access_token: str,
        caption: str,
        media: Sequence[MediaItem],
        post_kind: PostKind,
    ) -> str:
        """Create the media container(s) and publish them."""
        if not media:
            raise ValidationError("Instagram requires at least one media item")

        if post_kind == PostKind.CAROUSEL and len(media) > 1:
            container_id = await self._create_carousel(ig_account_id, access_token, caption, media)
        else:
            container_id = await self._create_single(
                ig_account_id, access_token, caption, media[0], post_kind
            )

        data = await self._graph.post(
            f"{ig_account_id}/media_publish",
            data={"creation_id": container_id, "access_token": access_token},
        )
        post_id = data.get("id") or ""
        logger.info("Instagram post published", ig_account_id=ig_account_id, post_id=post_id)
        return post_id

    async def _create_single(
        self,
        ig_account_id: str,
        access_token: str,
        caption: str,
        item: MediaItem,
        post_kind: PostKind,
    ) -> str:
        is_reel = post_kind == PostKind.REEL
        needs_processing = is_reel or item.is_video

        if is_reel:
            media_type = "REELS"
        elif item.is_video:
            media_type = "VIDEO"
        else:
            media_type = "IMAGE"

        payload = {
            "video_url" if needs_processing else "image_url": item.url,
            "media_type": media_type,
            "caption": caption,
            "access_token": access_token,
        }
        data = await self._graph.post(f"{ig_account_id}/media", data=payload)
        container_id = data.get("id") or ""

        # Video and reel containers are processed asynchronously
        if needs_processing:
            await self._poller.await_ready(ig_account_id, container_id, access_token)

        return container_id

    async def _create_carousel(
        self,
        ig_account_id: str,
        access_token: str,
        caption: str,
        media: Sequence[MediaItem],
    ) -> str:
        children: list[str] = []
        for item in media:
            payload = {
                "video_url" if item.is_video else "image_url": item.url,
                "media_type": "VIDEO" if item.is_video else "IMAGE",
                "is_carousel_item": "true",
                "access_token": access_token,
            }
            data = await self._graph.post(f"{ig_account_id}/media", data=payload)
            children.append(data.get("id") or "")

        data = await self._graph.post(
            f"{ig_account_id}/media",
            data={
                "media_type": "CAROUSEL",
                "children": ",".join(children),
                "caption": caption,
                "access_token": access_token,
            },
        )
        logger.info(
            "Instagram carousel container created",
            ig_account_id=ig_account_id,
            children=len(children),
        )
        return data.get("id") or ""
