# tests/test_admin.py
"""Tests for the attachment edit-screen fields."""

import pytest

from vtttracks.admin import AdminView
from vtttracks.locales import EnglishLocaleNamer
from vtttracks.models import Attachment
from vtttracks.resolver import TrackResolver

from conftest import media_url


@pytest.fixture
def admin(sqlite_repo):
    resolver = TrackResolver(sqlite_repo, locale_namer=EnglishLocaleNamer(), ui_locale="en_US")
    return AdminView(resolver, sqlite_repo, edit_url="")


class TestTrackFields:
    def test_links_to_video(self, admin, library):
        fields = admin.attachment_fields(library["myvideo_captions_en"])
        assert list(fields) == ["video"]
        assert fields["video"].label == "Video"
        assert fields["video"].input == "html"
        assert fields["video"].html == f'<a href="{media_url("2024/05/myvideo.mp4")}">My Video</a>'

    def test_orphan_track(self, admin, library):
        fields = admin.attachment_fields(library["unrelated_captions_en"])
        assert fields["video"].html == "--"


class TestVideoFields:
    def test_one_field_per_kind(self, admin, library):
        fields = admin.attachment_fields(library["myvideo"])
        assert list(fields) == ["video_captions", "video_subtitles"]
        assert fields["video_captions"].label == "Video Captions"
        assert fields["video_subtitles"].label == "Video Subtitles"

    def test_links_labelled_by_locale(self, admin, library):
        fields = admin.attachment_fields(library["myvideo"])
        assert fields["video_subtitles"].html == (
            f'<ol><li><a href="{media_url("2024/05/myvideo_subtitles_fr.vtt")}">French</a></li></ol>'
        )

    def test_video_without_tracks(self, admin, sqlite_repo):
        clip = sqlite_repo.save(Attachment(name="clip", mime_type="video/mp4", file="clip.mp4"))
        assert admin.attachment_fields(clip) == {}


class TestOtherAttachments:
    def test_image(self, admin, sqlite_repo):
        image = sqlite_repo.save(Attachment(name="myvideo_captions_en", mime_type="image/png"))
        assert admin.attachment_fields(image) == {}


class TestLinkHtml:
    def test_edit_url_template(self, sqlite_repo, library):
        resolver = TrackResolver(sqlite_repo, ui_locale="")
        admin = AdminView(resolver, sqlite_repo, edit_url="https://example.com/post.php?post={id}&action=edit")
        video = library["myvideo"]
        assert admin.link_html(video) == (
            f'<a href="https://example.com/post.php?post={video.id}&amp;action=edit">My Video</a>'
        )

    def test_text_is_escaped(self, admin, sqlite_repo):
        clip = sqlite_repo.save(Attachment(name="clip", title="<b>Clip</b>", file="clip.mp4"))
        assert admin.link_html(clip).endswith(">&lt;b&gt;Clip&lt;/b&gt;</a>")
