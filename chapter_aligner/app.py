import json
import os
import sys

import pandas as pd
import streamlit as st

# Ensure project root is in path
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

from chapter_aligner.aligner import align, apply_suggestions
from chapter_aligner.catalog import parse_catalog_chapters
from chapter_aligner.config import AlignmentConfig, ConfigurationError
from chapter_aligner.loaders import load_local_chapters
from chapter_aligner.models import MatchKind
from chapter_aligner.utils import ChapterSourceError, ms_to_hms, setup_logging

setup_logging()

# Page Config
st.set_page_config(
    page_title="Chapter Name Aligner",
    page_icon="📖",
    layout="wide"
)

# Initialize Session State
if 'local_chapters' not in st.session_state:
    st.session_state.local_chapters = []
if 'remote_chapters' not in st.session_state:
    st.session_state.remote_chapters = []
if 'result' not in st.session_state:
    st.session_state.result = None

# Sidebar
st.sidebar.title("Configuration")
time_window = st.sidebar.slider("Time Window (s)", 5, 120, 30) * 1000
weight_time = st.sidebar.slider("Time Weight", 0.0, 1.0, 0.6, 0.05)
insert_cost = st.sidebar.slider("Unmatched Chapter Cost", 0.0, 2.0, 0.7, 0.05)
min_confidence = st.sidebar.slider("Minimum Confidence to Apply", 0.0, 1.0, 0.0, 0.05)

st.title("Chapter Name Aligner 🎧")
st.markdown("Suggest chapter titles for an audiobook from catalog chapter metadata.")

# --- Step 1: Upload ---
st.header("1. Upload Chapters")
col1, col2 = st.columns(2)
with col1:
    local_file = st.file_uploader("Local chapters (JSON or M4B)", type=["json", "m4b", "m4a", "mp3"])
with col2:
    remote_file = st.file_uploader("Catalog chapters (JSON)", type=["json"])

if local_file and remote_file:
    temp_dir = "temp_uploads"
    os.makedirs(temp_dir, exist_ok=True)

    local_path = os.path.join(temp_dir, local_file.name)
    with open(local_path, "wb") as f:
        f.write(local_file.getbuffer())

    try:
        st.session_state.local_chapters = load_local_chapters(local_path)
        st.session_state.remote_chapters = parse_catalog_chapters(json.loads(remote_file.getvalue()))
    except (ChapterSourceError, json.JSONDecodeError) as e:
        st.error(f"Could not read chapters: {e}")
        st.stop()

    st.success(
        f"Loaded {len(st.session_state.local_chapters)} local and "
        f"{len(st.session_state.remote_chapters)} catalog chapters."
    )

    # --- Step 2: Align ---
    st.header("2. Align")
    if st.button("Suggest Names"):
        config = AlignmentConfig(
            time_window_ms=time_window,
            weight_time=weight_time,
            weight_text=round(1.0 - weight_time, 2),
            insert_cost=insert_cost,
            delete_cost=insert_cost,
        )
        try:
            st.session_state.result = align(
                st.session_state.local_chapters, st.session_state.remote_chapters, config
            )
        except ConfigurationError as e:
            st.error(f"Invalid configuration: {e}")

# --- Step 3: Review ---
result = st.session_state.result
if result is not None:
    st.header("3. Review Suggestions")
    st.caption(f"Overall confidence: {result.overall_confidence:.2f}")
    if result.needs_update:
        st.warning("Local titles look like placeholders.")

    data = []
    for entry in result.aligned:
        data.append({
            "Index": entry.index,
            "Start": ms_to_hms(entry.start_ms),
            "Current": entry.current_name,
            "Suggested": entry.suggested_name,
            "Confidence": round(entry.confidence, 2),
            "Reject": entry.kind is MatchKind.INSERTED,
        })

    df = pd.DataFrame(data)

    edited_df = st.data_editor(
        df,
        column_config={
            "Reject": st.column_config.CheckboxColumn(
                "Reject",
                help="Check to keep the current title",
                default=False,
            )
        },
        disabled=["Index", "Start", "Current", "Suggested", "Confidence"],
        hide_index=True,
        width='stretch'
    )

    rejected = edited_df[edited_df["Reject"] == True]["Index"].tolist()
    renamed = apply_suggestions(
        st.session_state.local_chapters, result.aligned,
        rejected=rejected, min_confidence=min_confidence
    )

    # --- Step 4: Download ---
    st.header("4. Download Results")
    json_str = json.dumps([c.to_dict() for c in renamed], indent=4)

    st.download_button(
        label="Download chapters.json",
        data=json_str,
        file_name="chapters.json",
        mime="application/json"
    )

    st.json(result.to_dict())
