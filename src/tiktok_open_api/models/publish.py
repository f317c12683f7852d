"""Content Posting API models.

Contains post metadata, the source declaration for a publish, and the
publish session and status returned by the platform.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Position of the cover image among pulled photos.
DEFAULT_PHOTO_COVER_INDEX = 1


class Source(str, Enum):
    FILE_UPLOAD = "FILE_UPLOAD"
    PULL_FROM_URL = "PULL_FROM_URL"


class PrivacyLevel(str, Enum):
    PUBLIC_TO_EVERYONE = "PUBLIC_TO_EVERYONE"
    MUTUAL_FOLLOW_FRIENDS = "MUTUAL_FOLLOW_FRIENDS"
    FOLLOWER_OF_CREATOR = "FOLLOWER_OF_CREATOR"
    SELF_ONLY = "SELF_ONLY"


class PostMode(str, Enum):
    DIRECT_POST = "DIRECT_POST"
    MEDIA_UPLOAD = "MEDIA_UPLOAD"


class MediaType(str, Enum):
    PHOTO = "PHOTO"


class PublishStatusValue(str, Enum):
    PROCESSING_UPLOAD = "PROCESSING_UPLOAD"
    PROCESSING_DOWNLOAD = "PROCESSING_DOWNLOAD"
    SEND_TO_USER_INBOX = "SEND_TO_USER_INBOX"
    PUBLISH_COMPLETE = "PUBLISH_COMPLETE"
    FAILED = "FAILED"


class PostInfo(BaseModel):
    """Metadata for the post being published."""

    model_config = ConfigDict(frozen=True)

    title: str = ""
    description: str | None = None
    privacy_level: PrivacyLevel
    disable_duet: bool = False
    disable_comment: bool = False
    disable_stitch: bool = False
    video_cover_timestamp_ms: int | None = Field(default=None, ge=0)
    auto_add_music: bool | None = None


class SourceInfo(BaseModel):
    """Where the platform gets the media from.

    Exactly one mode is declared: a local file upload (size and chunking
    metadata), a single video URL, or a list of photo URLs. Mixed
    declarations are rejected on construction. Prefer the
    ``file_upload``, ``pull_from_url`` and ``photos_from_urls``
    constructors.
    """

    model_config = ConfigDict(frozen=True)

    source: Source
    video_size: int | None = Field(default=None, gt=0)
    chunk_size: int | None = Field(default=None, gt=0)
    total_chunk_count: int | None = Field(default=None, gt=0)
    video_url: str | None = None
    photo_cover_index: int | None = Field(default=None, ge=0)
    photo_images: tuple[str, ...] | None = None

    @model_validator(mode="after")
    def check_single_source(self) -> SourceInfo:
        declared = [
            mode
            for mode, present in (
                ("file", self.video_size is not None),
                ("video_url", self.video_url is not None),
                ("photo_images", self.photo_images is not None),
            )
            if present
        ]
        if len(declared) != 1:
            raise ValueError(
                "exactly one of video_size, video_url or photo_images must be "
                f"declared, got {declared or 'none'}"
            )

        if self.source is Source.FILE_UPLOAD and declared != ["file"]:
            raise ValueError("FILE_UPLOAD sources must declare video_size only")
        if self.source is Source.PULL_FROM_URL and declared == ["file"]:
            raise ValueError("PULL_FROM_URL sources must declare a URL")

        if declared != ["file"] and (
            self.chunk_size is not None or self.total_chunk_count is not None
        ):
            raise ValueError("chunk metadata only applies to FILE_UPLOAD")
        if declared != ["photo_images"] and self.photo_cover_index is not None:
            raise ValueError("photo_cover_index only applies to photo sources")
        if self.photo_images is not None and not self.photo_images:
            raise ValueError("photo_images must not be empty")

        return self

    @classmethod
    def file_upload(
        cls,
        video_size: int,
        chunk_size: int | None = None,
        total_chunk_count: int | None = None,
    ) -> SourceInfo:
        """Declare a local upload.

        Chunk fields default to one chunk spanning the whole file, which is
        how ``MediaPublishFlow.upload_bytes`` transfers it. Non-positive
        sizes are left for field validation to reject.
        """
        if chunk_size is None:
            chunk_size = video_size
        if total_chunk_count is None and video_size > 0 and chunk_size > 0:
            total_chunk_count = (video_size + chunk_size - 1) // chunk_size
        return cls(
            source=Source.FILE_UPLOAD,
            video_size=video_size,
            chunk_size=chunk_size,
            total_chunk_count=total_chunk_count,
        )

    @classmethod
    def pull_from_url(cls, video_url: str) -> SourceInfo:
        return cls(source=Source.PULL_FROM_URL, video_url=video_url)

    @classmethod
    def photos_from_urls(
        cls,
        photo_urls: Sequence[str],
        photo_cover_index: int = DEFAULT_PHOTO_COVER_INDEX,
    ) -> SourceInfo:
        return cls(
            source=Source.PULL_FROM_URL,
            photo_images=tuple(photo_urls),
            photo_cover_index=photo_cover_index,
        )

    @property
    def is_photo(self) -> bool:
        return self.photo_images is not None

    @property
    def is_file_upload(self) -> bool:
        return self.source is Source.FILE_UPLOAD


class VideoInitRequest(BaseModel):
    post_info: PostInfo
    source_info: SourceInfo


class PhotoInitRequest(BaseModel):
    post_info: PostInfo
    source_info: SourceInfo
    post_mode: PostMode = PostMode.DIRECT_POST
    media_type: MediaType = MediaType.PHOTO


class PublishSession(BaseModel):
    """Server-side publish record; ``upload_url`` is empty for URL pulls."""

    publish_id: str = ""
    upload_url: str = ""


class PublishStatus(BaseModel):
    publish_id: str = ""
    status: str = ""
    fail_reason: str = ""
    publicaly_available_post_id: list[int] = Field(default_factory=list)
    uploaded_bytes: int = 0
    downloaded_bytes: int = 0

    @property
    def is_complete(self) -> bool:
        return self.status == PublishStatusValue.PUBLISH_COMPLETE.value

    @property
    def is_failed(self) -> bool:
        return self.status == PublishStatusValue.FAILED.value

    @property
    def is_terminal(self) -> bool:
        """No further status changes are expected."""
        return self.is_complete or self.is_failed


class CreatorInfo(BaseModel):
    creator_avatar_url: str = ""
    creator_username: str = ""
    creator_nickname: str = ""
    privacy_level_options: list[str] = Field(default_factory=list)
    comment_disabled: bool = False
    duet_disabled: bool = False
    stitch_disabled: bool = False
    max_video_post_duration_sec: int = 0
