"""Extra fields for the attachment edit screen."""

import html

from vtttracks.config import settings
from vtttracks.models import AdminField, Attachment, TrackKind
from vtttracks.resolver import TrackResolver
from vtttracks.storage.repository import AttachmentRepository

KIND_LABELS: dict[TrackKind, str] = {
    TrackKind.CAPTIONS: "Video Captions",
    TrackKind.CHAPTERS: "Video Chapters",
    TrackKind.DESCRIPTIONS: "Video Descriptions",
    TrackKind.METADATA: "Video Metadata",
    TrackKind.SUBTITLES: "Video Subtitles",
}

NO_VIDEO = "--"


class AdminView:
    """Shows which tracks belong to a video and which video owns a track."""

    def __init__(
        self,
        resolver: TrackResolver,
        repository: AttachmentRepository,
        edit_url: str | None = None,
    ) -> None:
        self._resolver = resolver
        self._repo = repository
        self._edit_url = settings.admin_edit_url if edit_url is None else edit_url

    def attachment_fields(self, attachment: Attachment) -> dict[str, AdminField]:
        """Fields to add for ``attachment``; empty for non-track, non-video items.

        A track gets a ``video`` field linking to its video (or ``--``).
        A video gets one ``video_<kind>`` field per kind of track it has,
        each an ordered list of links labelled by locale.
        """
        if attachment.is_track:
            video = self._resolver.find_video_for_track(attachment.name)
            return {
                "video": AdminField(
                    label="Video",
                    html=self.link_html(video) if video else NO_VIDEO,
                ),
            }

        if not attachment.is_video:
            return {}

        fields = {}
        for kind, tracks in self._resolver.group_for_admin(attachment.name).items():
            items = "".join(f"<li>{self.link_html(track, label)}</li>" for label, track in tracks)
            fields[f"video_{kind.value}"] = AdminField(
                label=KIND_LABELS[kind],
                html=f"<ol>{items}</ol>",
            )
        return fields

    def link_html(self, attachment: Attachment, text: str | None = None) -> str:
        """An ``<a>`` to the attachment's edit page, or its public URL."""
        if self._edit_url:
            href = self._edit_url.format(id=attachment.id)
        else:
            href = self._repo.resolve_url(attachment.id) or ""
        label = html.escape(text or attachment.title)
        return f'<a href="{html.escape(href)}">{label}</a>'
