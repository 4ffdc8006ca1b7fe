# tests/test_service.py
"""Tests for TrackService."""

import pytest

from vtttracks.service import AttachmentAlreadyExistsError, AttachmentNotFoundError

from conftest import media_url


class TestAddAttachment:
    def test_add_track(self, service):
        track = service.add_attachment("2024/05/MyVideo_captions_en.vtt")
        assert track.id > 0
        assert track.name == "myvideo_captions_en"
        assert track.title == "MyVideo_captions_en"
        assert track.mime_type == "text/vtt"

    def test_add_video(self, service):
        video = service.add_attachment("2024/05/myvideo.mp4", title="My Video", width=1920, height=1080)
        assert video.mime_type == "video/mp4"
        assert video.title == "My Video"
        assert video.width == 1920

    def test_explicit_name_and_mime(self, service):
        a = service.add_attachment("uploads/blob", name="clip_chapters_en", mime_type="text/vtt")
        assert a.name == "clip_chapters_en"
        assert a.is_track

    def test_unknown_extension(self, service):
        assert service.add_attachment("blob.zzz-unknown").mime_type == "application/octet-stream"

    def test_duplicate_name(self, service):
        service.add_attachment("myvideo.mp4")
        with pytest.raises(AttachmentAlreadyExistsError):
            service.add_attachment("other/myvideo.mp4")


class TestLookup:
    def test_list(self, service, library):
        assert len(service.list_attachments()) == 4

    def test_get_not_found(self, service):
        with pytest.raises(AttachmentNotFoundError):
            service.get_attachment(999)

    def test_remove(self, service, library):
        service.remove_attachment(library["myvideo"].id)
        with pytest.raises(AttachmentNotFoundError):
            service.get_attachment(library["myvideo"].id)

    def test_remove_not_found(self, service):
        with pytest.raises(AttachmentNotFoundError):
            service.remove_attachment(999)

    def test_attachment_url(self, service, library):
        assert service.attachment_url(library["myvideo"].id) == media_url("2024/05/myvideo.mp4")


class TestTracks:
    def test_tracks_html(self, service, library):
        fragment = service.tracks_html(media_url("2024/05/myvideo.mp4"))
        assert fragment.startswith('<track kind="captions"')

    def test_tracks_json(self, service, library):
        manifest = service.tracks_json("/myvideo.mp4")
        assert [s.srclang for s in manifest] == ["en", "fr"]

    def test_no_tracks(self, service, library):
        assert service.tracks_html("/nothing.mp4") is None
        assert service.tracks_json("/nothing.mp4") is None

    def test_video_for_track(self, service, library):
        assert service.video_for_track("myvideo_subtitles_fr").name == "myvideo"

    def test_attachment_fields(self, service, library):
        fields = service.attachment_fields(library["myvideo"].id)
        assert "English" in fields["video_captions"].html

    def test_attachment_fields_not_found(self, service):
        with pytest.raises(AttachmentNotFoundError):
            service.attachment_fields(999)


class TestRenderVideo:
    MARKUP = "<video controls><source src='x' /></video>"

    def test_splices_tracks_from_attributes(self, service, library):
        result = service.render_video(self.MARKUP, {"mp4": "/2024/05/myvideo.mp4"})
        assert result.count("<track ") == 2
        assert result.endswith('srclang="fr"></video>')

    def test_explicit_video(self, service, library):
        result = service.render_video(self.MARKUP, {}, video="https://example.com/myvideo.m4v")
        assert "<track " in result

    def test_unchanged_without_source(self, service, library):
        assert service.render_video(self.MARKUP, {"width": "640"}) == self.MARKUP

    def test_unchanged_without_tracks(self, service, library):
        assert service.render_video(self.MARKUP, {"src": "/other.mp4"}) == self.MARKUP


class TestPlaylist:
    def test_by_ids(self, service, library):
        data = service.playlist(ids=[library["myvideo"].id], playlist_type="video")
        assert data["type"] == "video"
        assert len(data["tracks"]) == 1
        assert len(data["tracks"][0]["webvtt"]) == 2

    def test_ids_keep_order(self, service, library):
        second = service.add_attachment("2024/05/second.mp4")
        data = service.playlist(ids=[second.id, library["myvideo"].id], playlist_type="video")
        assert [t["title"] for t in data["tracks"]] == ["second", "My Video"]

    def test_by_parent(self, service):
        service.add_attachment("a.mp4", parent_id=7)
        service.add_attachment("b.mp4", parent_id=7)
        service.add_attachment("c.mp4", parent_id=8)
        data = service.playlist(parent_id=7, playlist_type="video", order="DESC", orderby="name")
        assert [t["title"] for t in data["tracks"]] == ["b", "a"]

    def test_type_filters_mime(self, service, library):
        assert service.playlist(ids=[library["myvideo"].id], playlist_type="audio") is None

    def test_track_files_never_listed(self, service, library):
        assert service.playlist(ids=[library["myvideo_captions_en"].id], playlist_type="video") is None

    def test_options_passed_through(self, service, library):
        data = service.playlist(ids=[library["myvideo"].id], playlist_type="video", tracknumbers=False)
        assert data["tracknumbers"] is False

    def test_file_name_with_spaces(self, service):
        video = service.add_attachment("2024/05/My Video.mp4")
        service.add_attachment("2024/05/My Video_captions_en.vtt")
        data = service.playlist(ids=[video.id], playlist_type="video")
        entry = data["tracks"][0]
        assert entry["src"] == media_url("2024/05/My%20Video.mp4")
        assert entry["webvtt"] == [{
            "kind": "captions",
            "src": media_url("2024/05/My%20Video_captions_en.vtt"),
            "srclang": "en",
        }]
