"""Core business logic for vtttracks."""

import logging
import mimetypes
from pathlib import PurePosixPath

from vtttracks.admin import AdminView
from vtttracks.config import settings
from vtttracks.locales import EnglishLocaleNamer, LocaleNamer
from vtttracks.models import AdminField, Attachment, AttachmentQuery, TrackSource
from vtttracks.naming import NameMatcher
from vtttracks.render import build_playlist, splice_tracks, video_source
from vtttracks.resolver import TrackResolver
from vtttracks.storage.repository import AttachmentRepository

logger = logging.getLogger(__name__)

mimetypes.add_type("text/vtt", ".vtt")


class AttachmentNotFoundError(Exception):
    """Raised when a requested attachment is not in the media library."""


class AttachmentAlreadyExistsError(Exception):
    """Raised when adding an attachment whose name is already taken."""


class TrackService:
    """Core service layer — single orchestration point for all vtttracks operations.

    Both the CLI and MCP server are thin wrappers over this class.
    Dependencies are injected via constructor for testability.
    """

    def __init__(
        self,
        repository: AttachmentRepository,
        locale_namer: LocaleNamer | None = None,
        ui_locale: str | None = None,
    ) -> None:
        self._repo = repository
        self._resolver = TrackResolver(
            repository,
            locale_namer=locale_namer or EnglishLocaleNamer(),
            ui_locale=ui_locale,
        )
        self._admin = AdminView(self._resolver, repository)

    def add_attachment(
        self,
        file: str,
        name: str | None = None,
        title: str | None = None,
        mime_type: str | None = None,
        parent_id: int = 0,
        width: int | None = None,
        height: int | None = None,
    ) -> Attachment:
        """Register an uploaded file in the media library.

        Args:
            file: Path of the file relative to the media root.
            name: Slug; derived from the file name when omitted.
            title: Display title; defaults to the file stem.
            mime_type: Guessed from the file extension when omitted.

        Returns:
            The stored Attachment with its id assigned.

        Raises:
            AttachmentAlreadyExistsError: If the name is already taken.
        """
        stem = PurePosixPath(file).stem
        name = name or NameMatcher.slugify(stem)
        if self._repo.get_by_name(name) is not None:
            raise AttachmentAlreadyExistsError(f"Attachment already in library: {name}")

        attachment = self._repo.save(Attachment(
            name=name,
            title=title or stem,
            mime_type=mime_type or mimetypes.guess_type(file)[0] or "application/octet-stream",
            file=file,
            parent_id=parent_id,
            width=width,
            height=height,
        ))
        logger.info("Attachment added: %d — %s (%s)", attachment.id, attachment.name, attachment.mime_type)
        return attachment

    def list_attachments(self) -> list[Attachment]:
        """List every attachment in the media library."""
        return self._repo.list_all()

    def get_attachment(self, attachment_id: int) -> Attachment:
        """Get an attachment by id.

        Raises:
            AttachmentNotFoundError: If the attachment is not in the library.
        """
        attachment = self._repo.get(attachment_id)
        if attachment is None:
            raise AttachmentNotFoundError(f"Attachment not found: {attachment_id}")
        return attachment

    def remove_attachment(self, attachment_id: int) -> None:
        """Remove an attachment from the library.

        Raises:
            AttachmentNotFoundError: If the attachment is not in the library.
        """
        if not self._repo.exists(attachment_id):
            raise AttachmentNotFoundError(f"Attachment not found: {attachment_id}")
        self._repo.delete(attachment_id)
        logger.info("Attachment removed: %d", attachment_id)

    def attachment_url(self, attachment_id: int) -> str | None:
        """Public URL of an attachment's file, or None if it has none."""
        return self._repo.resolve_url(attachment_id)

    def tracks_html(self, video_url: str) -> str | None:
        """``<track>`` markup for a video URL, or None if it has no tracks."""
        return self._resolver.build_html_fragment(video_url)

    def tracks_json(self, video_url: str) -> list[TrackSource] | None:
        """Track entries for a video URL, or None if it has no tracks."""
        return self._resolver.build_json_manifest(video_url)

    def video_for_track(self, track_name: str) -> Attachment | None:
        """The video a track name belongs to, or None."""
        return self._resolver.find_video_for_track(track_name)

    def attachment_fields(self, attachment_id: int) -> dict[str, AdminField]:
        """Edit-screen fields for an attachment.

        Raises:
            AttachmentNotFoundError: If the attachment is not in the library.
        """
        return self._admin.attachment_fields(self.get_attachment(attachment_id))

    def render_video(self, output: str, atts: dict[str, str], video: str | None = None) -> str:
        """Add ``<track>`` elements to rendered ``<video>`` markup.

        Args:
            output: Markup produced by the host's video renderer.
            atts: The video shortcode attributes.
            video: Explicit video URL; falls back to the source attributes.

        Returns:
            ``output`` with tracks spliced in, or unchanged if the video
            has none or no source could be found.
        """
        source = video_source(atts, video)
        if not source:
            return output
        return splice_tracks(output, self._resolver.build_html_fragment(source))

    def playlist(
        self,
        ids: list[int] | None = None,
        parent_id: int = 0,
        playlist_type: str = "audio",
        order: str = "ASC",
        orderby: str | None = None,
        exclude: list[int] | None = None,
        **options: bool,
    ) -> dict | None:
        """Playlist JSON data for explicit attachment ids or a parent's media.

        Explicit ids keep their given order unless ``orderby`` is set.
        Returns None when no attachments match.
        """
        if playlist_type != "audio":
            playlist_type = "video"

        if ids:
            query = AttachmentQuery(ids=ids, order_by=orderby or "ids")
        else:
            query = AttachmentQuery(
                parent_id=parent_id,
                exclude=exclude or [],
                order_by=orderby or "menu_order",
            )
        query.mime_prefix = f"{playlist_type}/"
        query.status = "inherit"
        query.descending = order.upper() == "DESC"

        attachments = self._repo.query(query)
        if not attachments:
            return None
        return build_playlist(
            attachments,
            self._resolver,
            self._repo,
            playlist_type=playlist_type,
            content_width=settings.content_width,
            **options,
        )
