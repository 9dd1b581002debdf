"""Browser-side effects: confetti bursts, floating birth years, blessing overlay."""

import html
import json

import streamlit as st
import streamlit.components.v1 as components

from src.services.birth_years import floating_offsets
from src.services.celebration import Burst

CONFETTI_CDN = "https://cdn.jsdelivr.net/npm/canvas-confetti@1.9.3/dist/confetti.browser.min.js"


def _confetti_html(bursts: list[Burst]) -> str:
    plan = [{"delay": b.delay_ms, "options": b.to_options()} for b in bursts]
    # Draw on the parent document so the particles cover the whole page
    return f"""
    <script src="{CONFETTI_CDN}"></script>
    <script>
    (function() {{
        const plan = {json.dumps(plan)};
        let fire = window.confetti;
        try {{
            const doc = window.parent.document;
            let canvas = doc.getElementById("fortune-confetti-canvas");
            if (!canvas) {{
                canvas = doc.createElement("canvas");
                canvas.id = "fortune-confetti-canvas";
                canvas.style.cssText = "position:fixed;inset:0;width:100%;height:100%;pointer-events:none;z-index:9999;";
                doc.body.appendChild(canvas);
            }}
            fire = window.confetti.create(canvas, {{ resize: true, useWorker: true }});
        }} catch (e) {{
            console.warn("confetti falls back to the component frame", e);
        }}
        plan.forEach(function(step) {{
            setTimeout(function() {{ fire(step.options); }}, step.delay);
        }});
    }})();
    </script>
    """


def fire_bursts(bursts: list[Burst]) -> None:
    """Schedule confetti bursts in the browser."""
    if not bursts:
        return
    components.html(_confetti_html(bursts), height=0)


def title_html(title: str) -> str:
    return f"<h1 style='text-align:center;'>{html.escape(title)}</h1>"


def render_title(title: str) -> None:
    """Centered viewer headline; the user-edited title is escaped."""
    st.markdown(title_html(title), unsafe_allow_html=True)


def render_birth_years(tokens: list[str], floating: bool = True) -> None:
    """Render each birth year token as its own chip."""
    if not tokens:
        st.caption("대본에서 'NN년생' 표기를 찾지 못했습니다.")
        return

    offsets = floating_offsets(len(tokens)) if floating else [(0.0, 0.0)] * len(tokens)
    chips = "".join(
        f"<span style='display:inline-block;margin:6px 10px;padding:4px 10px;"
        f"color:#FFFFFF;font-family:serif;font-size:1.4em;"
        f"transform:translate({dx}px, {dy}px);'>{html.escape(token)}</span>"
        for token, (dx, dy) in zip(tokens, offsets)
    )
    st.markdown(
        f"<div style='text-align:center;background:#020617;border-radius:24px;padding:16px;'>{chips}</div>",
        unsafe_allow_html=True,
    )


def render_blessing_overlay(duration: float) -> None:
    """Blessing popup that fades out by itself after ``duration`` seconds."""
    components.html(
        f"""
        <style>
        @keyframes blessing-out {{ to {{ opacity: 0; visibility: hidden; }} }}
        .blessing {{
            text-align: center; padding: 12px; border-radius: 16px;
            background: rgba(234,179,8,0.15); border: 1px solid #EAB308;
            color: #F8FAFC; font-family: sans-serif;
            animation: blessing-out 0.3s ease {duration}s forwards;
        }}
        </style>
        <div class="blessing">
            <div style="font-size:1.6em;font-weight:800;">🎉 복 받았습니다! 🎉</div>
            <div style="color:#FACC15;">재물운이 열립니다</div>
        </div>
        """,
        height=90,
    )
