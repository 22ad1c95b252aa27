"""Stamina Rater — Streamlit fatigue viewer.

Minimal interactive application:
    1. Upload a simfile (.sm)
    2. Pick one of its charts and rate it
    3. View the rating, a fatigue-over-time chart and the foot table
    4. Download the per-note annotations as JSON

Constraints:
    - Charts drawn with Streamlit's built-in line chart
    - Simple, readable code
"""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path

import pandas as pd
import streamlit as st

# Ensure the project root is importable
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from src.config import load_config  # noqa: E402
from src.stamina_engine.rate import annotations_to_json_bytes, evaluate  # noqa: E402
from src.stamina_engine.sm_parser import load_sm  # noqa: E402

# ── Page config ───────────────────────────────────────────────
st.set_page_config(
    page_title="Stamina Rater",
    page_icon="🦶",
    layout="wide",
)

st.title("🦶 Stamina Rater")
st.markdown(
    "Upload a simfile, rate a chart by simulated foot fatigue, "
    "and inspect the most tiring foot assignment found."
)
st.divider()

# ── File uploader ─────────────────────────────────────────────
uploaded_file = st.file_uploader(
    "Choose a simfile",
    type=["sm"],
    help="StepMania .sm files; every #NOTES chart is listed.",
)

if uploaded_file is not None:
    # load_sm works on paths, so spill the upload to a temp file
    with tempfile.NamedTemporaryFile(suffix=".sm", delete=False) as tmp:
        tmp.write(uploaded_file.getvalue())
        tmp_path = Path(tmp.name)

    try:
        charts = load_sm(tmp_path)
    except ValueError as exc:
        st.error(str(exc))
        st.stop()
    finally:
        tmp_path.unlink(missing_ok=True)

    if not charts:
        st.warning("No charts found in this simfile.")
        st.stop()

    st.success(f"Loaded: **{uploaded_file.name}** ({len(charts)} charts)")

    labels = [f"{c.description()} — level {c.rating}, {len(c.notes)} notes" for c in charts]
    choice = st.selectbox("Chart", range(len(charts)), format_func=lambda i: labels[i])
    chart = charts[choice]

    if st.button("▶  Rate Chart", type="primary"):
        config = load_config()
        search = config.search
        with st.spinner("Searching foot assignments …"):
            result = evaluate(
                chart.notes, config.params,
                search.window, search.beam_width, search.rating_scale,
            )
        annotations = result.annotations(chart.notes)

        # ── Summary stats ─────────────────────────────────────
        st.subheader("Summary")
        left_count = sum(1 for a in annotations if a["foot"] == "L")

        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Rating", f"{result.rating:.2f}")
        c2.metric("Level", chart.rating)
        c3.metric("Left Foot", left_count)
        c4.metric("Right Foot", len(annotations) - left_count)

        if annotations:
            df = pd.DataFrame(annotations)

            # ── Fatigue over time ─────────────────────────────
            st.subheader("Fatigue Over Time")
            trace = pd.DataFrame(result.trace(chart.notes), columns=["time", "fatigue"])
            st.line_chart(trace, x="time", y="fatigue")

            # ── Annotation table ──────────────────────────────
            st.subheader("Foot Assignment")
            table = df[["time", "x", "y", "foot", "fatigue"]]
            table.columns = ["Time (s)", "X", "Y", "Foot", "Fatigue"]
            st.dataframe(table, use_container_width=True, height=400)

            # ── Downloads ─────────────────────────────────────
            st.subheader("Downloads")
            st.download_button(
                label="⬇  Download annotations.json",
                data=annotations_to_json_bytes(annotations),
                file_name=f"{uploaded_file.name.rsplit('.', 1)[0]}_fatigue.json",
                mime="application/json",
            )
