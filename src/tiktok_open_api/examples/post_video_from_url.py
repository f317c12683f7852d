"""
Publish a video that TikTok pulls from a URL.

You'll need TIKTOK_CLIENT_KEY, TIKTOK_CLIENT_SECRET and a user token with the
video.publish scope in TIKTOK_API_TOKEN. The URL's domain must be verified for
your app: https://developers.tiktok.com/doc/content-posting-api-media-transfer-guide/
"""

import asyncio
import logging
import sys

from dotenv import load_dotenv

from tiktok_open_api.client import TikTokClient
from tiktok_open_api.config import access_token_from_env
from tiktok_open_api.models.errors import TikTokError
from tiktok_open_api.models.publish import PostInfo, PrivacyLevel

VIDEO_URL = "https://example.com/videos/sample.mp4"


async def main(video_url: str) -> int:
    token = access_token_from_env()
    post_info = PostInfo(
        title="Check out this amazing video!",
        privacy_level=PrivacyLevel.SELF_ONLY,
        video_cover_timestamp_ms=1000,
    )

    async with TikTokClient.from_env() as client:
        try:
            status = await client.publish.publish_from_url(token, post_info, video_url)
        except TikTokError as e:
            logging.error(f"Publish failed: {e}")
            return 1

    logging.info(f"Post status: {status.status} (publish_id={status.publish_id})")
    return 0


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(level=logging.INFO)
    sys.exit(asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else VIDEO_URL)))
