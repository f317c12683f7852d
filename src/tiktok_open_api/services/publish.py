"""Content Posting API publish flow.

Publishing is a linear progression with no backward transitions:

    Declared -> Initialized(publish session) -> [Uploaded] -> StatusKnown

The upload step only exists for FILE_UPLOAD sources; for URL pulls the
platform fetches the media itself. Callers sequence the steps, or use the
``publish_*`` compositions, which stop at the first failure.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from tiktok_open_api.models.envelope import ErrorEnvelope
from tiktok_open_api.models.errors import (
    ResponseParseError,
    UnknownApiError,
    error_from_envelope,
)
from tiktok_open_api.models.publish import (
    DEFAULT_PHOTO_COVER_INDEX,
    CreatorInfo,
    PhotoInitRequest,
    PostInfo,
    PostMode,
    PublishSession,
    PublishStatus,
    SourceInfo,
    VideoInitRequest,
)
from tiktok_open_api.services.base import BaseService

logger = logging.getLogger(__name__)

VIDEO_INIT_PATH = "/v2/post/publish/video/init/"
CONTENT_INIT_PATH = "/v2/post/publish/content/init/"
STATUS_FETCH_PATH = "/v2/post/publish/status/fetch/"
CREATOR_INFO_PATH = "/v2/post/publish/creator_info/query/"

VIDEO_CONTENT_TYPE = "video/mp4"


class MediaPublishFlow(BaseService):
    """Drives a post from declaration to a known publish status.

    Publishing flow (file upload):
    1. POST /v2/post/publish/video/init/ - declare the post and source
    2. PUT upload_url - transfer the bytes
    3. POST /v2/post/publish/status/fetch/ - read the status

    Status is fetched once; callers that need completion re-invoke
    ``fetch_status`` on their own schedule.
    """

    async def init_post(
        self,
        access_token: str,
        post_info: PostInfo,
        source_info: SourceInfo,
        post_mode: PostMode = PostMode.DIRECT_POST,
    ) -> PublishSession:
        """Initialize a publish and return the server-assigned session.

        Video sources use the video init endpoint. Photo sources use the
        content init endpoint with ``post_mode`` and ``media_type=PHOTO``.

        Raises:
            TransportError: If the request, read, or parse fails
            ApiError: If the platform rejects the post
        """
        if source_info.is_photo:
            path = CONTENT_INIT_PATH
            body = PhotoInitRequest(
                post_info=post_info, source_info=source_info, post_mode=post_mode
            )
        else:
            path = VIDEO_INIT_PATH
            body = VideoInitRequest(post_info=post_info, source_info=source_info)

        logger.debug(f"Initializing {source_info.source.value} publish at {path}")

        session = await self._post_envelope(
            path,
            access_token,
            PublishSession,
            json=body.model_dump(mode="json", exclude_none=True),
        )
        logger.info(f"TikTok publish initialized: {session.publish_id}")
        return session

    async def upload_bytes(
        self, upload_url: str, data: bytes, content_type: str = VIDEO_CONTENT_TYPE
    ) -> None:
        """Upload the whole media file to ``upload_url`` in one PUT.

        The ``Content-Range`` spans the full payload. Any chunk metadata
        declared at init time is not used to split the transfer.

        Raises:
            ValueError: If ``data`` is empty
            TransportError: If the request or read fails, or an error body
                cannot be parsed
            ApiError: If the upload is rejected
        """
        if not data:
            raise ValueError("Cannot upload an empty payload")

        size = len(data)
        response = await self._send(
            "PUT",
            upload_url,
            headers={
                "Content-Type": content_type,
                "Content-Range": f"bytes 0-{size - 1}/{size}",
            },
            content=data,
        )

        if response.is_success:
            logger.info(f"Uploaded {size} bytes")
            return

        response_data = self._decode_json(response)
        error = response_data.get("error") if isinstance(response_data, dict) else None
        if not isinstance(error, dict):
            raise ResponseParseError(
                f"Upload failed with HTTP {response.status_code} and no error envelope"
            )

        envelope = ErrorEnvelope.model_validate(error)
        logger.warning(
            f"Upload failed with {response.status_code}: "
            f"{envelope.code} (log_id={envelope.log_id})"
        )
        if envelope.is_ok():
            # Non-2xx status with an "ok" envelope.
            raise UnknownApiError(
                f"http_{response.status_code}", envelope.message, envelope.log_id
            )
        raise error_from_envelope(envelope)

    async def fetch_status(self, access_token: str, publish_id: str) -> PublishStatus:
        """Fetch the current status of a publish."""
        status = await self._post_envelope(
            STATUS_FETCH_PATH,
            access_token,
            PublishStatus,
            json={"publish_id": publish_id},
        )
        if not status.publish_id:
            status = status.model_copy(update={"publish_id": publish_id})
        logger.debug(f"Publish {publish_id} status: {status.status}")
        return status

    async def query_creator_info(self, access_token: str) -> CreatorInfo:
        """Query the creator's posting options before initializing a post."""
        return await self._post_envelope(CREATOR_INFO_PATH, access_token, CreatorInfo)

    async def publish_from_file(
        self,
        access_token: str,
        post_info: PostInfo,
        video: Path | str | bytes,
    ) -> PublishStatus:
        """Publish a local video: init, upload, then fetch status.

        Args:
            access_token: User access token with video.publish scope
            post_info: Post metadata
            video: Path to the video file, or its raw bytes
        """
        data = video if isinstance(video, bytes) else Path(video).read_bytes()
        source_info = SourceInfo.file_upload(video_size=len(data))

        session = await self.init_post(access_token, post_info, source_info)
        if not session.upload_url:
            raise ResponseParseError("Init response did not include an upload URL")

        await self.upload_bytes(session.upload_url, data)
        return await self.fetch_status(access_token, session.publish_id)

    async def publish_from_url(
        self, access_token: str, post_info: PostInfo, video_url: str
    ) -> PublishStatus:
        """Publish a video the platform pulls from ``video_url``.

        The URL's domain must be verified for the app.
        """
        source_info = SourceInfo.pull_from_url(video_url)
        session = await self.init_post(access_token, post_info, source_info)
        return await self.fetch_status(access_token, session.publish_id)

    async def publish_photos_from_urls(
        self,
        access_token: str,
        post_info: PostInfo,
        photo_urls: Sequence[str],
        photo_cover_index: int = DEFAULT_PHOTO_COVER_INDEX,
        post_mode: PostMode = PostMode.DIRECT_POST,
    ) -> PublishStatus:
        """Publish a photo post the platform pulls from ``photo_urls``."""
        source_info = SourceInfo.photos_from_urls(photo_urls, photo_cover_index)
        session = await self.init_post(
            access_token, post_info, source_info, post_mode=post_mode
        )
        return await self.fetch_status(access_token, session.publish_id)
