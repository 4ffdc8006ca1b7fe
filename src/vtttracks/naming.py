"""Track file naming convention: ``<video>_<kind>_<locale>``."""

import re
from urllib.parse import unquote, urlsplit

from vtttracks.models import TrackKind, TrackName


class NameMatcher:
    """Derives video base names and parses track names.

    A track belongs to a video when its name is the video's base name
    followed by a separator, a track kind, another separator and a
    two character locale, e.g. ``myvideo_captions_en`` or
    ``myvideo-subtitles-fr``. The base is matched lazily so the
    shortest kind/locale suffix wins.
    """

    KINDS = tuple(kind.value for kind in TrackKind)

    _TRACK_PATTERN = re.compile(
        r"(.+?)[\W_](" + "|".join(KINDS) + r")[\W_]([A-Za-z0-9]{2})"
    )
    _SEPARATOR = re.compile(r"[\W_]")
    _LOCALE = re.compile(r"[A-Za-z0-9]{2}")
    _WHITESPACE = re.compile(r"\s+")

    @staticmethod
    def derive_base_name(url: str) -> str:
        """Return the file name of a URL's path without its extension.

        Scheme, host, query string and fragment are ignored, so
        ``https://cdn.example.com/media/bar.mp4?v=2`` and ``/bar.webm``
        both yield ``"bar"``. The path is percent-decoded. Returns an
        empty string when the URL has no path.
        """
        try:
            path = urlsplit(url).path
        except ValueError:
            # Malformed netloc, e.g. an unclosed IPv6 bracket
            path = re.split(r"[?#]", url, maxsplit=1)[0]
        segment = unquote(path).rstrip("/").rpartition("/")[2]
        stem, dot, _ = segment.rpartition(".")
        return stem if dot else segment

    @classmethod
    def slugify(cls, text: str) -> str:
        """Lowercase slug with runs of whitespace turned into hyphens.

        Attachment names are stored in this form, so video base names
        are normalized the same way before being matched against them.
        """
        return cls._WHITESPACE.sub("-", text.strip().lower())

    @classmethod
    def match_track_name(cls, name: str) -> TrackName | None:
        """Parse a track name, or return None if it is not one."""
        match = cls._TRACK_PATTERN.fullmatch(name)
        if match is None:
            return None
        base, kind, locale = match.groups()
        return TrackName(base=base, kind=TrackKind(kind), locale=locale)

    @classmethod
    def match_video_name(cls, name: str) -> str | None:
        """Strip the kind/locale suffix from a track name to get the video base name."""
        parsed = cls.match_track_name(name)
        return parsed.base if parsed else None

    @classmethod
    def split_track_name(cls, name: str, base: str) -> TrackName | None:
        """Split a track name already known to start with ``base``.

        Used on store results, where the query guaranteed the shape and
        only the kind and locale need recovering. Returns None if the
        separators, kind or locale do not fit the convention.
        """
        if len(name) < len(base) + 5:
            return None
        if not (
            cls._SEPARATOR.fullmatch(name[len(base)])
            and cls._SEPARATOR.fullmatch(name[-3])
            and cls._LOCALE.fullmatch(name[-2:])
        ):
            return None
        try:
            kind = TrackKind(name[len(base) + 1 : -3])
        except ValueError:
            return None
        return TrackName(base=base, kind=kind, locale=name[-2:])
