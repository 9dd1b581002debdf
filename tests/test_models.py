"""Tests for data models."""

import pytest
from pydantic import ValidationError

from src.models.schemas import (
    AnalysisResult,
    AppState,
    WorkflowStep,
)


SAMPLE_RESPONSE = {
    "suggestedTitle": "2026 황금운세",
    "hook": "이 영상을 본 당신, 대박입니다",
    "visualStyle": "우주 배경 12지신",
    "pacing": "빠른 컷",
    "textOverlayStrategy": "중앙 큰 자막",
    "engagementFactor": "구독 유도",
    "suggestedFortuneScript": "78년생, 92년생 대박",
}


class TestAnalysisResult:
    def test_parses_camel_case_keys(self):
        result = AnalysisResult.model_validate(SAMPLE_RESPONSE)
        assert result.suggested_title == "2026 황금운세"
        assert result.text_overlay_strategy == "중앙 큰 자막"
        assert result.suggested_fortune_script == "78년생, 92년생 대박"

    def test_accepts_field_names(self):
        result = AnalysisResult(
            suggested_title="t",
            hook="h",
            visual_style="v",
            pacing="p",
            text_overlay_strategy="o",
            engagement_factor="e",
            suggested_fortune_script="s",
        )
        assert result.hook == "h"

    def test_missing_field_rejected(self):
        data = dict(SAMPLE_RESPONSE)
        del data["hook"]
        with pytest.raises(ValidationError):
            AnalysisResult.model_validate(data)

    def test_result_is_immutable(self):
        result = AnalysisResult.model_validate(SAMPLE_RESPONSE)
        with pytest.raises(ValidationError):
            result.suggested_title = "changed"

    def test_dump_by_alias_round_trips_keys(self):
        result = AnalysisResult.model_validate(SAMPLE_RESPONSE)
        assert result.model_dump(by_alias=True) == SAMPLE_RESPONSE


class TestWorkflowStep:
    def test_workflow_steps_exist(self):
        """Test that all workflow steps are defined."""
        steps = list(WorkflowStep)
        assert steps == [WorkflowStep.SETUP, WorkflowStep.ANALYSIS, WorkflowStep.VIEWER]


class TestAppState:
    def test_initial_state(self):
        state = AppState()
        assert state.current_step == WorkflowStep.SETUP
        assert state.uploaded_image is None
        assert state.analysis is None
        assert state.editable_script == ""
        assert state.editable_title == ""
        assert state.video_path is None
        assert state.is_busy is False
        assert state.status_message == ""
        assert state.alert_message is None

    def test_has_script_ignores_whitespace(self):
        state = AppState(editable_script="   \n ")
        assert not state.has_script
        state.editable_script = "78년생"
        assert state.has_script

    def test_state_update(self):
        state = AppState()
        state.uploaded_image = b"\x89PNG"
        state.current_step = WorkflowStep.ANALYSIS

        assert state.has_image
        assert state.current_step == WorkflowStep.ANALYSIS
