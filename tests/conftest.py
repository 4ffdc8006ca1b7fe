# tests/conftest.py
"""Shared fixtures for vtttracks tests."""

import pytest

from vtttracks.models import Attachment
from vtttracks.storage.sqlite import SQLiteAttachmentRepository


MEDIA_URL = "https://media.example.com/uploads"


def media_url(file: str) -> str:
    """Public URL the test repository resolves ``file`` to."""
    return f"{MEDIA_URL}/{file}"


@pytest.fixture
def sqlite_repo():
    """SQLiteAttachmentRepository backed by in-memory database."""
    return SQLiteAttachmentRepository(":memory:", media_base_url=MEDIA_URL)


@pytest.fixture
def library(sqlite_repo):
    """Repository seeded with a video, its tracks and an unrelated track.

    Tracks are saved out of name order so ordering comes from the query.
    Returns the stored attachments keyed by name.
    """
    attachments = [
        Attachment(
            name="myvideo",
            title="My Video",
            mime_type="video/mp4",
            file="2024/05/myvideo.mp4",
            width=1280,
            height=720,
        ),
        Attachment(
            name="myvideo_subtitles_fr",
            title="French subtitles",
            mime_type="text/vtt",
            file="2024/05/myvideo_subtitles_fr.vtt",
        ),
        Attachment(
            name="myvideo_captions_en",
            title="English captions",
            mime_type="text/vtt",
            file="2024/05/myvideo_captions_en.vtt",
        ),
        Attachment(
            name="unrelated_captions_en",
            title="Other captions",
            mime_type="text/vtt",
            file="2024/05/unrelated_captions_en.vtt",
        ),
    ]
    return {a.name: sqlite_repo.save(a) for a in attachments}


@pytest.fixture
def service(sqlite_repo):
    """TrackService over the in-memory repository with English locale labels."""
    from vtttracks.service import TrackService

    return TrackService(repository=sqlite_repo, ui_locale="en_US")
