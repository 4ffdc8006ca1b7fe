"""CLI interface — thin wrapper over TrackService and FastMCP server."""

import json

import typer

from vtttracks.config import settings
from vtttracks.service import AttachmentAlreadyExistsError, AttachmentNotFoundError, TrackService
from vtttracks.storage.sqlite import SQLiteAttachmentRepository


app = typer.Typer(
    name="vtttracks",
    help="vtttracks: link WebVTT caption, subtitle and chapter files to the videos they belong to.",
    no_args_is_help=True,
)


def _get_service() -> TrackService:
    """Create a service instance with default dependencies."""
    settings.ensure_dirs()
    return TrackService(repository=SQLiteAttachmentRepository())


def _get_or_exit(svc: TrackService, attachment_id: int):
    """Look up an attachment or exit with error."""
    try:
        return svc.get_attachment(attachment_id)
    except AttachmentNotFoundError as e:
        typer.echo(f"❌ {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def add(
    file: str = typer.Argument(..., help="File path relative to the media root."),
    name: str | None = typer.Option(None, "--name", help="Slug; derived from the file name by default."),
    title: str | None = typer.Option(None, "--title", help="Display title."),
    mime: str | None = typer.Option(None, "--mime", help="MIME type; guessed from the extension by default."),
    parent: int = typer.Option(0, "--parent", help="Id of the post the file is attached to."),
) -> None:
    """Add an uploaded file to the media library."""
    svc = _get_service()
    try:
        attachment = svc.add_attachment(file, name=name, title=title, mime_type=mime, parent_id=parent)
    except AttachmentAlreadyExistsError as e:
        typer.echo(f"⚠️  {e}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"✅ Added: {attachment.name}")
    typer.echo(f"   ID:   {attachment.id}")
    typer.echo(f"   Type: {attachment.mime_type}")


@app.command(name="list")
def list_attachments() -> None:
    """List all attachments in the media library."""
    svc = _get_service()
    attachments = svc.list_attachments()
    if not attachments:
        typer.echo("Library is empty. Use 'vtttracks add <file>' to add a file.")
        return
    for a in attachments:
        typer.echo(f"  {a.id:>4}  {a.mime_type:<16s}  {a.name}")


@app.command()
def remove(attachment_id: int = typer.Argument(..., help="Attachment id.")) -> None:
    """Remove an attachment from the media library."""
    svc = _get_service()
    attachment = _get_or_exit(svc, attachment_id)
    svc.remove_attachment(attachment.id)
    typer.echo(f"🗑️  Removed: {attachment.name} ({attachment.id})")


@app.command()
def tracks(
    video: str = typer.Argument(..., help="URL of an uploaded video."),
    as_json: bool = typer.Option(False, "--json", help="Print the JSON manifest instead of HTML."),
) -> None:
    """Show the tracks that belong to a video."""
    svc = _get_service()
    if as_json:
        manifest = svc.tracks_json(video)
        if manifest is None:
            typer.echo("No tracks found.")
            return
        typer.echo(json.dumps([source.model_dump(mode="json") for source in manifest], indent=2))
        return

    fragment = svc.tracks_html(video)
    typer.echo(fragment if fragment is not None else "No tracks found.")


@app.command()
def video_for(track_name: str = typer.Argument(..., help="Name (slug) of a track file.")) -> None:
    """Show the video a track file belongs to."""
    svc = _get_service()
    video = svc.video_for_track(track_name)
    if video is None:
        typer.echo(f"No video for track: {track_name}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"🎬 {video.title} ({video.id}) — {video.name}")


@app.command()
def fields(attachment_id: int = typer.Argument(..., help="Attachment id.")) -> None:
    """Show the track association fields for an attachment."""
    svc = _get_service()
    attachment = _get_or_exit(svc, attachment_id)
    result = svc.attachment_fields(attachment.id)
    if not result:
        typer.echo("No track fields for this attachment.")
        return
    for key, field in result.items():
        typer.echo(f"{field.label} [{key}]")
        typer.echo(f"   {field.html}")


@app.command()
def playlist(
    ids: list[int] = typer.Argument(..., help="Attachment ids, in playlist order."),
    playlist_type: str = typer.Option("video", "--type", help="Playlist type: audio or video."),
) -> None:
    """Print the playlist JSON data for a set of attachments."""
    svc = _get_service()
    data = svc.playlist(ids=ids, playlist_type=playlist_type)
    if data is None:
        typer.echo("No matching attachments.", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(data, indent=2))


@app.command()
def serve(
    stdio: bool = typer.Option(False, "--stdio", help="Use stdio transport instead of HTTP."),
    host: str = typer.Option(settings.host, "--host", help="Host to bind to."),
    port: int = typer.Option(settings.port, "--port", help="Port to bind to."),
) -> None:
    """Start the vtttracks MCP server."""
    from vtttracks.server import mcp

    if stdio:
        typer.echo("Starting vtttracks MCP server (stdio)...", err=True)
        mcp.run(transport="stdio")
    else:
        typer.echo(f"Starting vtttracks MCP server on http://{host}:{port}/mcp")
        mcp.run(transport="streamable-http", host=host, port=port)
