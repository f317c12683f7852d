from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class UserField(str, Enum):
    OPEN_ID = "open_id"
    UNION_ID = "union_id"
    AVATAR_URL = "avatar_url"
    AVATAR_URL_100 = "avatar_url_100"
    AVATAR_LARGE_URL = "avatar_large_url"
    DISPLAY_NAME = "display_name"
    BIO_DESCRIPTION = "bio_description"
    PROFILE_DEEP_LINK = "profile_deep_link"
    IS_VERIFIED = "is_verified"
    USERNAME = "username"
    FOLLOWER_COUNT = "follower_count"
    FOLLOWING_COUNT = "following_count"
    LIKES_COUNT = "likes_count"
    VIDEO_COUNT = "video_count"


class UserInfo(BaseModel):
    """Profile of the authorized user; only requested fields are set."""

    open_id: str | None = None
    union_id: str | None = None
    avatar_url: str | None = None
    avatar_url_100: str | None = None
    avatar_large_url: str | None = None
    display_name: str | None = None
    bio_description: str | None = None
    profile_deep_link: str | None = None
    is_verified: bool | None = None
    username: str | None = None
    follower_count: int | None = None
    following_count: int | None = None
    likes_count: int | None = None
    video_count: int | None = None


class UserInfoData(BaseModel):
    user: UserInfo = Field(default_factory=UserInfo)
