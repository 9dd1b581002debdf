"""Workflow controller: Setup -> Analysis -> Viewer.

All state lives in an AppState; the controller replaces fields on user
actions and when a remote call returns. Remote failures are logged here and
turned into the status / alert messages the screens show.
"""

import logging
from typing import Callable, Optional

from src.models.schemas import AppState, WorkflowStep
from src.services.errors import FortuneShortsError, is_invalid_key_error

logger = logging.getLogger(__name__)


ANALYZING_MESSAGE = "명리학적으로 대본을 분석하고 있습니다..."
ANALYSIS_FAILED_MESSAGE = "분석에 실패했습니다."
GENERATING_MESSAGE = "12지신이 쏟아지는 우주 영상을 빚어내고 있습니다..."
GENERATION_DONE_MESSAGE = "영상 제작 완료!"
GENERATION_FAILED_MESSAGE = "생성 실패. 유료 계정 키인지 확인하세요."
PAID_TIER_ALERT = (
    "영상 생성 모델(Veo)에 접근할 수 없습니다. 반드시 '유료 계정'의 API 키를 사용해야 합니다. "
    "ai.google.dev에서 결제 수단이 등록된 프로젝트인지 확인해주세요."
)
INVALID_KEY_ALERT = "API 키가 올바르지 않거나 프로젝트가 존재하지 않습니다. 키를 다시 선택해주세요."

# Steps the close / back controls may return to
RETURN_TARGETS = (WorkflowStep.SETUP, WorkflowStep.ANALYSIS)

ProgressCallback = Optional[Callable[[str, float], None]]


class SessionController:
    """Drives one session's AppState."""

    def __init__(self, state: AppState, gate, analyzer, video_generator):
        self.state = state
        self.gate = gate
        self.analyzer = analyzer
        self.video_generator = video_generator

    @property
    def credential_ready(self) -> bool:
        return self.gate.ready

    def upload_image(self, data: bytes, mime_type: str = "image/png") -> None:
        self.state.uploaded_image = data
        self.state.uploaded_image_mime = mime_type or "image/png"

    def update_script(self, text: str) -> None:
        self.state.editable_script = text

    def update_title(self, text: str) -> None:
        self.state.editable_title = text

    def _handle_invalid_key(self) -> None:
        self.state.needs_key_reselection = True
        self.state.alert_message = INVALID_KEY_ALERT
        self.gate.request_reselection()

    def start_analysis(self, progress_callback: ProgressCallback = None) -> bool:
        """Analyze the uploaded screenshot; returns True on success."""
        state = self.state
        if not state.has_image:
            return False

        state.is_busy = True
        state.status_message = ANALYZING_MESSAGE
        state.alert_message = None

        try:
            result = self.analyzer.analyze(
                state.uploaded_image,
                state.uploaded_image_mime,
                progress_callback=progress_callback,
            )
        except Exception as e:
            logger.error(f"Analysis failed: {e}", exc_info=True)
            state.is_busy = False
            state.status_message = ANALYSIS_FAILED_MESSAGE
            if is_invalid_key_error(e):
                self._handle_invalid_key()
            elif isinstance(e, FortuneShortsError):
                state.alert_message = e.user_message
            else:
                state.alert_message = f"{ANALYSIS_FAILED_MESSAGE} ({str(e)[:100]})"
            return False

        state.analysis = result
        state.editable_script = result.suggested_fortune_script
        state.editable_title = result.suggested_title
        state.needs_key_reselection = False
        state.current_step = WorkflowStep.ANALYSIS
        state.is_busy = False
        state.status_message = ""
        return True

    def start_video_generation(self, progress_callback: ProgressCallback = None) -> bool:
        """Generate the background video; no-op while the script is empty."""
        state = self.state
        if not state.has_script:
            return False

        state.is_busy = True
        state.current_step = WorkflowStep.VIEWER
        state.video_path = None
        state.video_failed = False
        state.status_message = GENERATING_MESSAGE
        state.alert_message = None

        try:
            path = self.video_generator.generate(
                state.editable_script,
                progress_callback=progress_callback,
            )
        except Exception as e:
            logger.error(f"Video generation failed: {e}", exc_info=True)
            state.is_busy = False
            state.video_failed = True
            state.status_message = GENERATION_FAILED_MESSAGE
            if is_invalid_key_error(e):
                self._handle_invalid_key()
            state.alert_message = PAID_TIER_ALERT
            if isinstance(e, FortuneShortsError):
                state.alert_message = f"{PAID_TIER_ALERT}\n\n{e.user_message}"
            return False

        state.video_path = str(path)
        state.is_busy = False
        state.status_message = GENERATION_DONE_MESSAGE
        return True

    def queue_video_generation(self) -> bool:
        """Switch to the viewer with the generating status shown before the job runs."""
        state = self.state
        if not state.has_script:
            return False
        state.current_step = WorkflowStep.VIEWER
        state.video_failed = False
        state.status_message = GENERATING_MESSAGE
        return True

    def open_viewer(self) -> bool:
        """Show the fortune viewer for the current script without generating."""
        if not self.state.has_script:
            return False
        self.state.current_step = WorkflowStep.VIEWER
        return True

    def return_to(self, step: WorkflowStep) -> None:
        if step not in RETURN_TARGETS:
            raise ValueError(f"Cannot return to {step}")
        self.state.current_step = step

    def consume_alert(self) -> Optional[str]:
        message = self.state.alert_message
        self.state.alert_message = None
        return message
