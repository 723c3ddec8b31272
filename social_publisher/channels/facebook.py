from collections.abc import Sequence

import structlog

from ..domain.entities import AccountType, ConnectedAccount, MediaItem, MediaType
from ..domain.ports import PlatformAdapter, PublishRequest
from .graph import GraphApiClient

logger = structlog.get_logger()


class FacebookAdapter(PlatformAdapter):
    """Facebook Graph API adapter for Page posts."""

    def __init__(self, graph: GraphApiClient) -> None:
        self._graph = graph

    @property
    def account_type(self) -> AccountType:
        return AccountType.FACEBOOK_PAGE

    async def publish(self, account: ConnectedAccount, request: PublishRequest) -> str:
        return await self.publish_to_page(
            page_id=account.platform_id,
            access_token=account.access_token,
            message=request.caption,
            media=request.media,
        )

    async def publish_to_page(
        self,
        page_id: str,
        access_token: str,
        message: str,
        media: Sequence[MediaItem],
    ) -> str:
        """
        Post to a Facebook Page.

        Only the first media item is used: an image becomes a photo post,
        a video becomes a video post, no media becomes a feed post.
        """
        if not media:
            path = f"{page_id}/feed"
            payload = {"message": message}
        elif media[0].media_type == MediaType.IMAGE:
            path = f"{page_id}/photos"
            payload = {"url": media[0].url, "caption": message}
        else:
            path = f"{page_id}/videos"
            payload = {"file_url": media[0].url, "description": message}

        payload["access_token"] = access_token
        data = await self._graph.post(path, data=payload)

        post_id = data.get("id") or data.get("post_id") or ""
        logger.info("Facebook post created", page_id=page_id, post_id=post_id)
        return post_id
