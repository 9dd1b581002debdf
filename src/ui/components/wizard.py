"""Wizard progress indicator component."""

import streamlit as st

from src.models.schemas import WorkflowStep


STEPS = [
    (WorkflowStep.SETUP, "준비", "쇼츠 캡처 업로드"),
    (WorkflowStep.ANALYSIS, "대본", "분석 결과와 대본 편집"),
    (WorkflowStep.VIEWER, "영상", "운세 뷰어와 배경 영상"),
]


def render_wizard_progress(current_step: WorkflowStep) -> None:
    """
    Render the wizard progress indicator.

    Args:
        current_step: The current workflow step
    """
    st.markdown("---")

    cols = st.columns(len(STEPS))

    current_idx = next(
        (i for i, (step, _, _) in enumerate(STEPS) if step == current_step),
        0
    )

    for i, (col, (step, label, desc)) in enumerate(zip(cols, STEPS)):
        with col:
            if i < current_idx:
                st.markdown(f"### :white_check_mark: {label}")
            elif current_step == step:
                st.markdown(f"### :large_yellow_circle: **{label}**")
            else:
                st.markdown(f"### :white_circle: {label}")
            st.caption(desc)

    st.markdown("---")
