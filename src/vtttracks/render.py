"""Splicing tracks into host-rendered video markup and playlist data."""

from vtttracks.models import Attachment
from vtttracks.resolver import TrackResolver
from vtttracks.storage.repository import AttachmentRepository

# Shortcode attributes that may carry the video source, in priority order
VIDEO_SOURCE_ATTRIBUTES = ("mp4", "webm", "ogv", "m4v", "src")

DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 360
PLAYER_OUTER = 22  # padding and border of the playlist wrapper


def video_source(atts: dict[str, str], video: str | None = None) -> str | None:
    """The video URL a shortcode renders, from ``video`` or its attributes."""
    if video:
        return video
    for key in VIDEO_SOURCE_ATTRIBUTES:
        if atts.get(key):
            return atts[key]
    return None


def splice_tracks(output: str, fragment: str | None) -> str:
    """Insert a ``<track>`` fragment before the closing ``</video>`` tag."""
    if not fragment:
        return output
    return output.replace("</video>", fragment + "</video>")


def player_size(content_width: int = 0) -> tuple[int, int]:
    """Player width and height for the theme's content width (0 for default)."""
    if not content_width:
        return DEFAULT_WIDTH, DEFAULT_HEIGHT
    width = content_width - PLAYER_OUTER
    return width, round(DEFAULT_HEIGHT * width / DEFAULT_WIDTH)


def build_playlist(
    attachments: list[Attachment],
    resolver: TrackResolver,
    repository: AttachmentRepository,
    *,
    playlist_type: str = "audio",
    tracklist: bool = True,
    tracknumbers: bool = True,
    images: bool = True,
    artists: bool = True,
    content_width: int = 0,
) -> dict:
    """Build the JSON document a playlist player is initialised with.

    Each entry carries a ``webvtt`` list of its tracks when it has any.
    Video entries also get original and resized dimensions.
    """
    if playlist_type != "audio":
        playlist_type = "video"
    theme_width, theme_height = player_size(content_width)

    tracks = []
    for attachment in attachments:
        src = repository.resolve_url(attachment.id) or ""
        entry: dict = {"src": src, "title": attachment.title}
        if attachment.caption:
            entry["caption"] = attachment.caption
        if attachment.description:
            entry["description"] = attachment.description

        if src:
            manifest = resolver.build_json_manifest(src)
            if manifest:
                entry["webvtt"] = [source.model_dump(mode="json") for source in manifest]

        if playlist_type == "video":
            if attachment.width and attachment.height:
                width, height = attachment.width, attachment.height
                resized_height = round(height * theme_width / width)
            else:
                width, height = DEFAULT_WIDTH, DEFAULT_HEIGHT
                resized_height = theme_height
            entry["dimensions"] = {
                "original": {"width": width, "height": height},
                "resized": {"width": theme_width, "height": resized_height},
            }

        tracks.append(entry)

    return {
        "type": playlist_type,
        "tracklist": tracklist,
        "tracknumbers": tracknumbers,
        "images": images,
        "artists": artists,
        "tracks": tracks,
    }
