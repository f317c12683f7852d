from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from tiktok_open_api.models.videos import Video, VideoField, VideoPage, VideoQueryData
from tiktok_open_api.services.base import BaseService, join_fields

VIDEO_LIST_PATH = "/v2/video/list/"
VIDEO_QUERY_PATH = "/v2/video/query/"

MAX_LIST_COUNT = 20


class VideoService(BaseService):
    """Display API access to the authorized user's own videos."""

    async def list_videos(
        self,
        access_token: str,
        fields: Iterable[VideoField | str],
        cursor: int | None = None,
        max_count: int | None = None,
    ) -> VideoPage:
        """List the user's public videos, newest first.

        Args:
            access_token: User access token with video.list scope
            fields: Video fields to return
            cursor: Cursor from the previous page, if any
            max_count: Page size; the platform default is 10, maximum 20
        """
        if max_count is not None and not (1 <= max_count <= MAX_LIST_COUNT):
            raise ValueError(f"max_count must be between 1 and {MAX_LIST_COUNT}")

        body: dict[str, Any] = {}
        if cursor is not None:
            body["cursor"] = cursor
        if max_count is not None:
            body["max_count"] = max_count

        return await self._post_envelope(
            VIDEO_LIST_PATH,
            access_token,
            VideoPage,
            json=body,
            params={"fields": join_fields(fields)},
        )

    async def query_videos(
        self,
        access_token: str,
        video_ids: Sequence[str],
        fields: Iterable[VideoField | str],
    ) -> list[Video]:
        data = await self._post_envelope(
            VIDEO_QUERY_PATH,
            access_token,
            VideoQueryData,
            json={"filters": {"video_ids": list(video_ids)}},
            params={"fields": join_fields(fields)},
        )
        return data.videos
