"""Data models for Shorts Myeongri Master."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class WorkflowStep(str, Enum):
    """Screens of the workflow, in order."""

    SETUP = "setup"
    ANALYSIS = "analysis"
    VIEWER = "viewer"


class BirthYearOrder(str, Enum):
    INSERTION = "insertion"
    CHRONOLOGICAL = "chronological"


class SpeechScope(str, Enum):
    FULL_SCRIPT = "script"
    ANNOUNCEMENT = "announcement"


class CelebrationIntensity(str, Enum):
    SINGLE = "single"
    SHOWER = "shower"


class CredentialMode(str, Enum):
    STORED = "stored"
    HOST = "host"


class AnalysisResult(BaseModel):
    """Structured output of the screenshot analysis.

    Field aliases are the camelCase keys of the JSON response schema.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    suggested_title: str = Field(alias="suggestedTitle")
    hook: str
    visual_style: str = Field(alias="visualStyle")
    pacing: str
    text_overlay_strategy: str = Field(alias="textOverlayStrategy")
    engagement_factor: str = Field(alias="engagementFactor")
    suggested_fortune_script: str = Field(alias="suggestedFortuneScript")


class AppState(BaseModel):
    """Complete application state (one per browser session)."""

    model_config = ConfigDict(validate_assignment=True)

    current_step: WorkflowStep = WorkflowStep.SETUP

    # Setup
    uploaded_image: Optional[bytes] = None
    uploaded_image_mime: str = "image/png"

    # Analysis
    analysis: Optional[AnalysisResult] = None
    editable_script: str = ""
    editable_title: str = ""

    # Viewer / generation
    video_path: Optional[str] = None
    video_failed: bool = False

    # Busy / status
    is_busy: bool = False
    status_message: str = ""
    alert_message: Optional[str] = None
    needs_key_reselection: bool = False

    @property
    def has_image(self) -> bool:
        return self.uploaded_image is not None

    @property
    def has_script(self) -> bool:
        return bool(self.editable_script.strip())
