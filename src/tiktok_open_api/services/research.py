"""Research API service.

All endpoints take a client access token (see ``ClientCredentialsService``)
and a JSON body; most also take a ``fields`` query parameter.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel

from tiktok_open_api.models.research import (
    CommentField,
    CommentsPage,
    FollowersPage,
    FollowingPage,
    LikedVideosPage,
    PinnedVideos,
    RepostedVideosPage,
    ResearchUserField,
    ResearchUserInfo,
    ResearchVideoField,
    ResearchVideoPage,
    VideoQueryRequest,
)
from tiktok_open_api.services.base import BaseService, join_fields

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT", bound=BaseModel)

USER_INFO_PATH = "/v2/research/user/info/"
LIKED_VIDEOS_PATH = "/v2/research/user/liked_videos/"
PINNED_VIDEOS_PATH = "/v2/research/user/pinned_videos/"
FOLLOWERS_PATH = "/v2/research/user/followers/"
FOLLOWING_PATH = "/v2/research/user/following/"
REPOSTED_VIDEOS_PATH = "/v2/research/user/reposted_videos/"
VIDEO_QUERY_PATH = "/v2/research/video/query/"
VIDEO_COMMENTS_PATH = "/v2/research/video/comment/list/"


def _paging(max_count: int | None, cursor: int | None) -> dict[str, Any]:
    body: dict[str, Any] = {}
    if max_count is not None:
        body["max_count"] = max_count
    if cursor is not None:
        body["cursor"] = cursor
    return body


class ResearchService(BaseService):
    async def _research_query(
        self,
        path: str,
        access_token: str,
        data_model: type[DataT],
        body: dict[str, Any],
        fields: Iterable[Enum | str] | None = None,
    ) -> DataT:
        params = {"fields": join_fields(fields)} if fields is not None else None
        logger.debug(f"Research query {path}")
        return await self._post_envelope(
            path, access_token, data_model, json=body, params=params
        )

    async def query_user_info(
        self,
        access_token: str,
        username: str,
        fields: Iterable[ResearchUserField | str],
    ) -> ResearchUserInfo:
        return await self._research_query(
            USER_INFO_PATH,
            access_token,
            ResearchUserInfo,
            {"username": username},
            fields,
        )

    async def query_liked_videos(
        self,
        access_token: str,
        username: str,
        fields: Iterable[ResearchVideoField | str],
        max_count: int | None = None,
        cursor: int | None = None,
    ) -> LikedVideosPage:
        return await self._research_query(
            LIKED_VIDEOS_PATH,
            access_token,
            LikedVideosPage,
            {"username": username, **_paging(max_count, cursor)},
            fields,
        )

    async def query_pinned_videos(
        self,
        access_token: str,
        username: str,
        fields: Iterable[ResearchVideoField | str],
    ) -> PinnedVideos:
        return await self._research_query(
            PINNED_VIDEOS_PATH,
            access_token,
            PinnedVideos,
            {"username": username},
            fields,
        )

    async def query_user_followers(
        self,
        access_token: str,
        username: str,
        max_count: int | None = None,
        cursor: int | None = None,
    ) -> FollowersPage:
        return await self._research_query(
            FOLLOWERS_PATH,
            access_token,
            FollowersPage,
            {"username": username, **_paging(max_count, cursor)},
        )

    async def query_user_following(
        self,
        access_token: str,
        username: str,
        max_count: int | None = None,
        cursor: int | None = None,
    ) -> FollowingPage:
        return await self._research_query(
            FOLLOWING_PATH,
            access_token,
            FollowingPage,
            {"username": username, **_paging(max_count, cursor)},
        )

    async def query_reposted_videos(
        self,
        access_token: str,
        username: str,
        fields: Iterable[ResearchVideoField | str],
        max_count: int | None = None,
        cursor: int | None = None,
    ) -> RepostedVideosPage:
        return await self._research_query(
            REPOSTED_VIDEOS_PATH,
            access_token,
            RepostedVideosPage,
            {"username": username, **_paging(max_count, cursor)},
            fields,
        )

    async def query_videos(
        self,
        access_token: str,
        request: VideoQueryRequest,
        fields: Iterable[ResearchVideoField | str],
    ) -> ResearchVideoPage:
        """Search public videos matching ``request.query`` in a date range.

        Pass ``search_id`` and ``cursor`` from the previous page to continue
        the same search.
        """
        return await self._research_query(
            VIDEO_QUERY_PATH,
            access_token,
            ResearchVideoPage,
            request.model_dump(mode="json", by_alias=True, exclude_none=True),
            fields,
        )

    async def query_video_comments(
        self,
        access_token: str,
        video_id: int,
        fields: Iterable[CommentField | str],
        max_count: int | None = None,
        cursor: int | None = None,
    ) -> CommentsPage:
        return await self._research_query(
            VIDEO_COMMENTS_PATH,
            access_token,
            CommentsPage,
            {"video_id": video_id, **_paging(max_count, cursor)},
            fields,
        )
