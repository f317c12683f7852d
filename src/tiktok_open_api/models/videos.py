from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class VideoField(str, Enum):
    ID = "id"
    CREATE_TIME = "create_time"
    COVER_IMAGE_URL = "cover_image_url"
    SHARE_URL = "share_url"
    VIDEO_DESCRIPTION = "video_description"
    DURATION = "duration"
    HEIGHT = "height"
    WIDTH = "width"
    TITLE = "title"
    EMBED_HTML = "embed_html"
    EMBED_LINK = "embed_link"
    LIKE_COUNT = "like_count"
    COMMENT_COUNT = "comment_count"
    SHARE_COUNT = "share_count"
    VIEW_COUNT = "view_count"


class Video(BaseModel):
    id: str = ""
    create_time: int | None = None
    cover_image_url: str | None = None
    share_url: str | None = None
    video_description: str | None = None
    duration: int | None = None
    height: int | None = None
    width: int | None = None
    title: str | None = None
    embed_html: str | None = None
    embed_link: str | None = None
    like_count: int | None = None
    comment_count: int | None = None
    share_count: int | None = None
    view_count: int | None = None


class VideoPage(BaseModel):
    """One page of the user's videos, newest first."""

    videos: list[Video] = Field(default_factory=list)
    cursor: int = 0
    has_more: bool = False


class VideoQueryData(BaseModel):
    videos: list[Video] = Field(default_factory=list)
