"""Domain models for vtttracks."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class TrackKind(str, Enum):
    """The closed set of HTML5 ``<track>`` kinds.

    Declaration order is lexicographic and doubles as display order.
    """

    CAPTIONS = "captions"
    CHAPTERS = "chapters"
    DESCRIPTIONS = "descriptions"
    METADATA = "metadata"
    SUBTITLES = "subtitles"


class TrackName(BaseModel):
    """A track file name parsed into its base, kind and locale parts."""

    model_config = ConfigDict(frozen=True)

    base: str
    kind: TrackKind
    locale: str  # two word characters, case preserved


class Attachment(BaseModel):
    """An uploaded media library item (video, audio or track file)."""

    id: int = 0  # assigned by the store
    name: str  # slug, e.g. "myvideo_captions_en"
    title: str = ""
    mime_type: str = ""
    status: str = "inherit"
    file: str = ""  # path relative to the media root
    caption: str = ""
    description: str = ""
    width: int | None = None
    height: int | None = None
    parent_id: int = 0
    menu_order: int = 0

    @computed_field
    @property
    def is_track(self) -> bool:
        """Whether this attachment is a WebVTT track file."""
        return self.mime_type == "text/vtt"

    @computed_field
    @property
    def is_video(self) -> bool:
        """Whether this attachment is a video."""
        return self.mime_type.startswith("video/")


class TrackSource(BaseModel):
    """One ``<track>`` element expressed as JSON-ready attributes."""

    kind: TrackKind
    src: str
    srclang: str


class AttachmentQuery(BaseModel):
    """Filter passed to the attachment store.

    ``status=None`` matches any status. ``vars`` carries named values that
    registered store filters consume (e.g. ``track_base``).
    """

    mime_type: str | None = None
    mime_prefix: str | None = None
    status: str | None = None
    name: str | None = None
    parent_id: int | None = None
    ids: list[int] | None = None
    exclude: list[int] = Field(default_factory=list)
    vars: dict[str, str] = Field(default_factory=dict)
    order_by: str = "name"
    descending: bool = False
    limit: int | None = None


class AdminField(BaseModel):
    """An extra read-only field on the attachment edit screen."""

    label: str
    input: str = "html"
    html: str
