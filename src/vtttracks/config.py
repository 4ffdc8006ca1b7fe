"""Configuration management for vtttracks."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable overrides.

    All settings can be overridden via environment variables
    prefixed with VTTTRACKS_ (e.g. VTTTRACKS_DATA_DIR, VTTTRACKS_MEDIA_BASE_URL).
    """

    model_config = {"env_prefix": "VTTTRACKS_"}

    # Storage
    data_dir: Path = Field(
        default_factory=lambda: Path.home() / ".vtttracks",
        description="Root directory for all vtttracks data",
    )

    # Server
    host: str = "127.0.0.1"
    port: int = 9094

    # Public addresses
    media_base_url: str = "http://localhost/uploads"
    admin_edit_url: str = ""  # e.g. "https://example.com/admin/attachments/{id}/edit"

    # Track lookup
    track_mime_type: str = "text/vtt"
    max_tracks: int = 25
    ui_locale: str = "en_US"  # empty disables locale display labels

    # Playlist
    content_width: int = 0  # 0 means the default 640px player

    @property
    def db_path(self) -> Path:
        """SQLite database path."""
        return self.data_dir / "vtttracks.db"

    def ensure_dirs(self) -> None:
        """Create all required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# Module-level singleton — import this throughout the app
settings = Settings()
