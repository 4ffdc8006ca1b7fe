"""FastMCP server — thin wrapper exposing TrackService as MCP tools."""

from fastmcp import FastMCP

from vtttracks.config import settings
from vtttracks.models import Attachment
from vtttracks.service import AttachmentAlreadyExistsError, AttachmentNotFoundError, TrackService
from vtttracks.storage.sqlite import SQLiteAttachmentRepository


mcp = FastMCP(
    name="vtttracks",
    instructions=(
        "vtttracks links WebVTT track files to videos by file name, "
        "e.g. myvideo_captions_en.vtt belongs to myvideo.mp4. "
        "Use add_attachment to register uploads, then get_tracks_html, "
        "get_tracks_json, find_video and attachment_fields to inspect links."
    ),
)

_service: TrackService | None = None


def _get_service() -> TrackService:
    """Lazy-initialise the service singleton with default dependencies."""
    global _service
    if _service is None:
        settings.ensure_dirs()
        _service = TrackService(repository=SQLiteAttachmentRepository())
    return _service


@mcp.tool(annotations={"readOnlyHint": False, "idempotentHint": False})
def add_attachment(file: str, name: str | None = None, title: str | None = None) -> dict:
    """Register an uploaded file in the media library.

    Args:
        file: File path relative to the media root (e.g. "2024/05/myvideo_captions_en.vtt").
        name: Optional slug; derived from the file name when omitted.
        title: Optional display title.
    """
    try:
        attachment = _get_service().add_attachment(file, name=name, title=title)
        return _attachment_summary(attachment)
    except AttachmentAlreadyExistsError as e:
        return {"error": str(e)}


@mcp.tool(annotations={"readOnlyHint": True})
def list_attachments() -> list[dict]:
    """List all attachments in the media library."""
    return [_attachment_summary(a) for a in _get_service().list_attachments()]


@mcp.tool(annotations={"readOnlyHint": True})
def get_tracks_html(video_url: str) -> dict:
    """HTML5 <track> elements for a video, ready to nest inside <video>.

    Args:
        video_url: URL of an uploaded video.
    """
    fragment = _get_service().tracks_html(video_url)
    return {"video_url": video_url, "html": fragment or ""}


@mcp.tool(annotations={"readOnlyHint": True})
def get_tracks_json(video_url: str) -> dict:
    """Tracks for a video as a list of {kind, src, srclang} entries.

    Args:
        video_url: URL of an uploaded video.
    """
    manifest = _get_service().tracks_json(video_url) or []
    return {
        "video_url": video_url,
        "tracks": [source.model_dump(mode="json") for source in manifest],
    }


@mcp.tool(annotations={"readOnlyHint": True})
def find_video(track_name: str) -> dict:
    """Find the video a track file belongs to.

    Args:
        track_name: Track slug, e.g. "myvideo_captions_en".
    """
    video = _get_service().video_for_track(track_name)
    if video is None:
        return {"error": f"No video for track: {track_name}"}
    return _attachment_summary(video)


@mcp.tool(annotations={"readOnlyHint": True})
def attachment_fields(attachment_id: int) -> dict:
    """Track association fields shown on an attachment's edit screen.

    Args:
        attachment_id: Attachment id.
    """
    try:
        result = _get_service().attachment_fields(attachment_id)
    except AttachmentNotFoundError as e:
        return {"error": str(e)}
    return {key: field.model_dump() for key, field in result.items()}


@mcp.tool(annotations={"readOnlyHint": True})
def get_playlist(ids: list[int], playlist_type: str = "video") -> dict:
    """Playlist JSON data, including each entry's tracks.

    Args:
        ids: Attachment ids in playlist order.
        playlist_type: "audio" or "video".
    """
    data = _get_service().playlist(ids=ids, playlist_type=playlist_type)
    if data is None:
        return {"error": "No matching attachments."}
    return data


@mcp.tool(annotations={"destructiveHint": True})
def remove_attachment(attachment_id: int) -> dict:
    """Remove an attachment from the media library.

    Args:
        attachment_id: Attachment id.
    """
    try:
        _get_service().remove_attachment(attachment_id)
        return {"status": "removed", "attachment_id": attachment_id}
    except AttachmentNotFoundError as e:
        return {"error": str(e)}


def _attachment_summary(attachment: Attachment) -> dict:
    """Compact attachment representation for tool results."""
    return {
        "id": attachment.id,
        "name": attachment.name,
        "title": attachment.title,
        "mime_type": attachment.mime_type,
        "url": _get_service().attachment_url(attachment.id),
    }
