"""Research API models.

Requests are sent as JSON with ``None`` fields omitted. Response data
models default every field so error-only envelopes decode cleanly.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ResearchVideoField(str, Enum):
    ID = "id"
    CREATE_TIME = "create_time"
    USERNAME = "username"
    REGION_CODE = "region_code"
    VIDEO_DESCRIPTION = "video_description"
    MUSIC_ID = "music_id"
    LIKE_COUNT = "like_count"
    COMMENT_COUNT = "comment_count"
    SHARE_COUNT = "share_count"
    VIEW_COUNT = "view_count"
    EFFECT_IDS = "effect_ids"
    HASHTAG_NAMES = "hashtag_names"
    PLAYLIST_ID = "playlist_id"
    VOICE_TO_TEXT = "voice_to_text"
    IS_STEM_VERIFIED = "is_stem_verified"
    FAVOURITES_COUNT = "favourites_count"
    VIDEO_DURATION = "video_duration"


class ResearchUserField(str, Enum):
    DISPLAY_NAME = "display_name"
    BIO_DESCRIPTION = "bio_description"
    AVATAR_URL = "avatar_url"
    IS_VERIFIED = "is_verified"
    FOLLOWER_COUNT = "follower_count"
    FOLLOWING_COUNT = "following_count"
    LIKES_COUNT = "likes_count"
    VIDEO_COUNT = "video_count"


class CommentField(str, Enum):
    ID = "id"
    VIDEO_ID = "video_id"
    TEXT = "text"
    LIKE_COUNT = "like_count"
    REPLY_COUNT = "reply_count"
    PARENT_COMMENT_ID = "parent_comment_id"
    CREATE_TIME = "create_time"


class ConditionOperation(str, Enum):
    EQ = "EQ"
    IN = "IN"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"


class ResearchCondition(BaseModel):
    field_name: str
    operation: ConditionOperation | str
    field_values: list[str]


class ResearchQuery(BaseModel):
    """Boolean combination of conditions; serialized as and/or/not."""

    model_config = ConfigDict(populate_by_name=True)

    and_: list[ResearchCondition] | None = Field(default=None, alias="and")
    or_: list[ResearchCondition] | None = Field(default=None, alias="or")
    not_: list[ResearchCondition] | None = Field(default=None, alias="not")


class VideoQueryRequest(BaseModel):
    """Body of ``/v2/research/video/query/``. Dates are YYYYMMDD strings."""

    query: ResearchQuery
    start_date: str
    end_date: str
    max_count: int | None = None
    cursor: int | None = None
    search_id: str | None = None
    is_random: bool | None = None


class ResearchVideo(BaseModel):
    id: int = 0
    create_time: int = 0
    username: str | None = None
    region_code: str | None = None
    video_description: str | None = None
    music_id: int | None = None
    like_count: int | None = None
    comment_count: int | None = None
    share_count: int | None = None
    view_count: int | None = None
    effect_ids: list[str] | None = None
    hashtag_names: list[str] | None = None
    playlist_id: int | None = None
    voice_to_text: str | None = None
    is_stem_verified: bool | None = None
    video_duration: int | None = None
    favourites_count: int | None = None


class ResearchVideoPage(BaseModel):
    videos: list[ResearchVideo] = Field(default_factory=list)
    cursor: int = 0
    has_more: bool = False
    search_id: str | None = None


class ResearchUserInfo(BaseModel):
    display_name: str = ""
    bio_description: str = ""
    avatar_url: str = ""
    is_verified: bool = False
    follower_count: int = 0
    following_count: int = 0
    likes_count: int = 0
    video_count: int = 0


class ResearchUser(BaseModel):
    display_name: str = ""
    username: str = ""


class LikedVideosPage(BaseModel):
    user_liked_videos: list[ResearchVideo] = Field(default_factory=list)
    cursor: int = 0
    has_more: bool = False


class PinnedVideos(BaseModel):
    user_pinned_videos: list[ResearchVideo] = Field(default_factory=list)


class RepostedVideosPage(BaseModel):
    user_reposted_videos: list[ResearchVideo] = Field(default_factory=list)
    cursor: int = 0
    has_more: bool = False


class FollowersPage(BaseModel):
    user_followers: list[ResearchUser] = Field(default_factory=list)
    cursor: int = 0
    has_more: bool = False


class FollowingPage(BaseModel):
    user_following: list[ResearchUser] = Field(default_factory=list)
    cursor: int = 0
    has_more: bool = False


class ResearchComment(BaseModel):
    id: int = 0
    text: str = ""
    video_id: int = 0
    parent_comment_id: int | None = None
    like_count: int = 0
    reply_count: int = 0
    create_time: int = 0


class CommentsPage(BaseModel):
    comments: list[ResearchComment] = Field(default_factory=list)
    cursor: int = 0
    has_more: bool = False
