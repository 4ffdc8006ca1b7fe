"""Resolve the track files that belong to a video."""

import html
import logging
import threading

from vtttracks.config import settings
from vtttracks.locales import LocaleNamer
from vtttracks.models import Attachment, AttachmentQuery, TrackKind, TrackName, TrackSource
from vtttracks.naming import NameMatcher
from vtttracks.storage.repository import AttachmentRepository

logger = logging.getLogger(__name__)

AdminGrouping = dict[TrackKind, list[tuple[str, Attachment]]]


class TrackResolver:
    """Finds a video's tracks in the store and projects them for output.

    The store query is narrowed by a ``track_base`` filter that this
    resolver registers with the repository once, on its first lookup.
    Base names are slugified before matching, the same way attachment
    names are stored.
    """

    FILTER_NAME = "track_base"

    def __init__(
        self,
        repository: AttachmentRepository,
        locale_namer: LocaleNamer | None = None,
        ui_locale: str | None = None,
        max_tracks: int | None = None,
    ) -> None:
        self._repo = repository
        self._locale_namer = locale_namer
        self._ui_locale = settings.ui_locale if ui_locale is None else ui_locale
        self._max_tracks = max_tracks or settings.max_tracks
        self._filter_registered = False
        self._filter_lock = threading.Lock()

    def _register_filter(self) -> None:
        """Register the track name filter with the store exactly once."""
        if self._filter_registered:
            return
        with self._filter_lock:
            if not self._filter_registered:
                self._repo.register_filter(self.FILTER_NAME, self._track_name_filter)
                self._filter_registered = True

    def _track_name_filter(self, query: AttachmentQuery) -> tuple[str, list] | None:
        """WHERE clause matching ``<base><sep><kind><sep><xx>`` for every kind."""
        base = query.vars.get(self.FILTER_NAME)
        if not base:
            return None
        like = self._repo.escape_like(base)
        escape = self._repo.LIKE_ESCAPE
        clause = " OR ".join(f"name LIKE ? ESCAPE '{escape}'" for _ in NameMatcher.KINDS)
        # Unescaped "_" is the single-character wildcard: separator, then locale.
        return clause, [f"{like}_{kind}___" for kind in NameMatcher.KINDS]

    def find_tracks(self, base_name: str) -> list[Attachment]:
        """Track attachments named after ``base_name``, ordered by name."""
        base = NameMatcher.slugify(base_name)
        if not base:
            return []
        self._register_filter()
        return self._repo.query(AttachmentQuery(
            mime_type=settings.track_mime_type,
            status=None,
            vars={self.FILTER_NAME: base},
            order_by="name",
            limit=self._max_tracks,
        ))

    def _resolved_tracks(self, video: str) -> list[tuple[TrackName, str]]:
        """Parsed name and public URL for each usable track of a video URL."""
        base = NameMatcher.slugify(NameMatcher.derive_base_name(video))
        resolved = []
        for track in self.find_tracks(base):
            parsed = NameMatcher.split_track_name(track.name, base)
            if parsed is None:
                logger.debug("Skipping track with unexpected name: %s", track.name)
                continue
            url = self._repo.resolve_url(track.id)
            if not url:
                logger.debug("Skipping track without a public URL: %s", track.name)
                continue
            resolved.append((parsed, url))
        return resolved

    def build_html_fragment(self, video: str) -> str | None:
        """``<track>`` elements for a video URL, or None if it has no tracks."""
        fragment = "".join(
            f'<track kind="{parsed.kind.value}" src="{html.escape(url)}"'
            f' srclang="{html.escape(parsed.locale)}">'
            for parsed, url in self._resolved_tracks(video)
        )
        return fragment or None

    def build_json_manifest(self, video: str) -> list[TrackSource] | None:
        """JSON-ready track entries for a video URL, or None if it has no tracks."""
        manifest = [
            TrackSource(kind=parsed.kind, src=url, srclang=html.escape(parsed.locale))
            for parsed, url in self._resolved_tracks(video)
        ]
        return manifest or None

    def find_video_for_track(self, track_name: str) -> Attachment | None:
        """The video attachment a track name belongs to, if any."""
        base = NameMatcher.match_video_name(track_name)
        if base is None:
            return None
        return self._repo.get_by_name(base)

    def group_for_admin(self, video_base_name: str) -> AdminGrouping:
        """Tracks grouped by kind, each group ordered by locale label.

        Labels come from the locale namer when one is configured and
        knows the code, otherwise the raw locale code is used.
        """
        base = NameMatcher.slugify(video_base_name)
        groups: dict[TrackKind, dict[str, Attachment]] = {}
        for track in self.find_tracks(base):
            parsed = NameMatcher.split_track_name(track.name, base)
            if parsed is None:
                continue
            groups.setdefault(parsed.kind, {})[self._locale_label(parsed.locale)] = track

        kinds = list(TrackKind)
        return {
            kind: sorted(groups[kind].items())
            for kind in sorted(groups, key=kinds.index)
        }

    def _locale_label(self, code: str) -> str:
        if self._locale_namer is None or not self._ui_locale:
            return code
        return self._locale_namer.display_name(code, self._ui_locale) or code
