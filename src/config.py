"""Configuration management for Shorts Myeongri Master."""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

# Load environment variables (override=True to ensure .env takes precedence)
load_dotenv(override=True)


def _get_env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _get_default_api_key() -> str:
    """Resolve the Gemini key from the environment.

    GOOGLE_API_KEY wins over GEMINI_API_KEY, matching what the google-genai
    client itself prefers when both are set.
    """
    return os.getenv("GOOGLE_API_KEY") or os.getenv("GEMINI_API_KEY", "")


@dataclass
class GeminiConfig:
    """Gemini / Veo model selection."""

    # Structured analysis of the uploaded screenshot
    analysis_model: str = field(
        default_factory=lambda: os.getenv("ANALYSIS_MODEL", "gemini-3-pro-preview")
    )
    # Background video generation (paid tier only)
    video_model: str = field(
        default_factory=lambda: os.getenv("VIDEO_MODEL", "veo-3.1-fast-generate-preview")
    )
    video_resolution: str = "720p"
    video_aspect_ratio: str = "9:16"


@dataclass
class PollingConfig:
    """Veo operation polling."""

    poll_interval: float = field(
        default_factory=lambda: float(os.getenv("VIDEO_POLL_INTERVAL", "10"))
    )
    # 60 polls * 10s = 10 minutes max wait time
    max_polls: int = field(
        default_factory=lambda: int(os.getenv("VIDEO_MAX_POLLS", "60"))
    )
    download_timeout: int = field(
        default_factory=lambda: int(os.getenv("VIDEO_DOWNLOAD_TIMEOUT", "300"))
    )


@dataclass
class DisplayConfig:
    """Viewer presentation options.

    Each option selects between behaviours that used to live in separate
    copies of the viewer screen.
    """

    # "chronological" (oldest birth year first) or "insertion" (script order)
    birth_year_order: str = field(
        default_factory=lambda: os.getenv("BIRTH_YEAR_ORDER", "chronological")
    )
    # "script" reads the whole script, "announcement" reads title + pig guide
    speech_scope: str = field(
        default_factory=lambda: os.getenv("SPEECH_SCOPE", "script")
    )
    # "single" fires one burst, "shower" fires the 3 second money shower
    celebration_intensity: str = field(
        default_factory=lambda: os.getenv("CELEBRATION_INTENSITY", "single")
    )
    floating_years: bool = field(
        default_factory=lambda: _get_env_bool("FLOATING_YEARS", "true")
    )
    blessing_duration: float = field(
        default_factory=lambda: float(os.getenv("BLESSING_DURATION", "2.5"))
    )
    double_click_window: float = field(
        default_factory=lambda: float(os.getenv("DOUBLE_CLICK_WINDOW", "0.6"))
    )


@dataclass
class Config:
    """Main application configuration."""

    # API Keys
    google_api_key: str = field(default_factory=_get_default_api_key)

    # Credential mode: "stored" (paste a key, kept in the local store) or
    # "host" (key supplied by the hosting environment)
    credential_mode: str = field(
        default_factory=lambda: os.getenv("CREDENTIAL_MODE", "stored")
    )
    credential_store_path: Path = field(
        default_factory=lambda: Path(
            os.getenv(
                "CREDENTIAL_STORE_PATH",
                str(Path.home() / ".shorts_myeongri" / "credentials.json"),
            )
        ).expanduser()
    )

    # Sub-configurations
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    polling: PollingConfig = field(default_factory=PollingConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    # Paths
    project_root: Path = field(
        default_factory=lambda: Path(__file__).parent.parent
    )

    @property
    def output_dir(self) -> Path:
        return self.project_root / os.getenv("OUTPUT_DIR", "output")

    @property
    def videos_dir(self) -> Path:
        return self.output_dir / "videos"

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors."""
        errors = []
        if self.credential_mode not in ("stored", "host"):
            errors.append(f"CREDENTIAL_MODE must be 'stored' or 'host', got '{self.credential_mode}'")
        if self.display.birth_year_order not in ("chronological", "insertion"):
            errors.append("BIRTH_YEAR_ORDER must be 'chronological' or 'insertion'")
        if self.display.speech_scope not in ("script", "announcement"):
            errors.append("SPEECH_SCOPE must be 'script' or 'announcement'")
        if self.display.celebration_intensity not in ("single", "shower"):
            errors.append("CELEBRATION_INTENSITY must be 'single' or 'shower'")
        if self.polling.max_polls < 1:
            errors.append("VIDEO_MAX_POLLS must be at least 1")
        return errors

    def ensure_directories(self) -> None:
        """Create output directories if they don't exist."""
        self.videos_dir.mkdir(parents=True, exist_ok=True)


# Global config instance
config = Config()


def reload_environment(dotenv_path: Optional[Path] = None) -> str:
    """Re-read .env and return the key it now provides."""
    load_dotenv(dotenv_path=dotenv_path, override=True)
    return _get_default_api_key()
