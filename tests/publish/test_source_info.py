import pytest
from pydantic import ValidationError

from tiktok_open_api.models.publish import (
    PostInfo,
    PrivacyLevel,
    PublishStatus,
    Source,
    SourceInfo,
)


class TestSourceInfo:
    def test_file_upload_defaults_to_single_chunk(self):
        # Act
        source = SourceInfo.file_upload(video_size=5_000_000)

        # Assert
        assert source.source is Source.FILE_UPLOAD
        assert source.chunk_size == 5_000_000
        assert source.total_chunk_count == 1
        assert source.is_file_upload
        assert not source.is_photo

    def test_file_upload_computes_chunk_count(self):
        source = SourceInfo.file_upload(video_size=25, chunk_size=10)

        assert source.total_chunk_count == 3

    def test_file_upload_rejects_empty_video(self):
        with pytest.raises(ValidationError):
            SourceInfo.file_upload(video_size=0)

    def test_file_upload_rejects_zero_chunk_size(self):
        with pytest.raises(ValidationError):
            SourceInfo.file_upload(video_size=100, chunk_size=0)

    def test_pull_from_url_declares_only_url(self):
        # Act
        source = SourceInfo.pull_from_url("https://cdn.example.com/v.mp4")

        # Assert
        assert source.model_dump(mode="json", exclude_none=True) == {
            "source": "PULL_FROM_URL",
            "video_url": "https://cdn.example.com/v.mp4",
        }

    def test_photos_default_cover_index(self):
        # Act
        source = SourceInfo.photos_from_urls(["https://a/1.jpg", "https://a/2.jpg"])

        # Assert
        assert source.is_photo
        assert source.model_dump(mode="json", exclude_none=True) == {
            "source": "PULL_FROM_URL",
            "photo_cover_index": 1,
            "photo_images": ["https://a/1.jpg", "https://a/2.jpg"],
        }

    def test_photo_cover_index_is_configurable(self):
        source = SourceInfo.photos_from_urls(["https://a/1.jpg"], photo_cover_index=0)

        assert source.photo_cover_index == 0

    @pytest.mark.parametrize(
        "fields",
        [
            {"source": Source.PULL_FROM_URL},
            {
                "source": Source.PULL_FROM_URL,
                "video_url": "https://a/v.mp4",
                "photo_images": ("https://a/1.jpg",),
            },
            {
                "source": Source.FILE_UPLOAD,
                "video_size": 10,
                "video_url": "https://a/v.mp4",
            },
            {"source": Source.FILE_UPLOAD, "video_url": "https://a/v.mp4"},
            {"source": Source.PULL_FROM_URL, "video_size": 10},
            {
                "source": Source.PULL_FROM_URL,
                "video_url": "https://a/v.mp4",
                "chunk_size": 10,
            },
            {
                "source": Source.PULL_FROM_URL,
                "video_url": "https://a/v.mp4",
                "photo_cover_index": 1,
            },
            {"source": Source.PULL_FROM_URL, "photo_images": ()},
            {"source": Source.FILE_UPLOAD, "video_size": 0},
        ],
    )
    def test_invalid_declarations_are_rejected(self, fields):
        with pytest.raises(ValidationError):
            SourceInfo(**fields)

    def test_source_info_is_immutable(self):
        source = SourceInfo.pull_from_url("https://a/v.mp4")

        with pytest.raises(ValidationError):
            source.video_url = "https://b/v.mp4"


class TestPostInfo:
    def test_privacy_level_is_required(self):
        with pytest.raises(ValidationError):
            PostInfo(title="No privacy")

    def test_negative_cover_timestamp_is_rejected(self):
        with pytest.raises(ValidationError):
            PostInfo(
                privacy_level=PrivacyLevel.SELF_ONLY, video_cover_timestamp_ms=-1
            )


class TestPublishStatus:
    @pytest.mark.parametrize(
        "status, complete, failed",
        [
            ("PROCESSING_UPLOAD", False, False),
            ("PUBLISH_COMPLETE", True, False),
            ("FAILED", False, True),
        ],
    )
    def test_terminal_states(self, status, complete, failed):
        publish_status = PublishStatus(publish_id="p", status=status)

        assert publish_status.is_complete is complete
        assert publish_status.is_failed is failed
        assert publish_status.is_terminal is (complete or failed)
