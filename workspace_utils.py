"""
Workspace Utilities Module

Loading the wine table into the session and the shared rendering helpers
used by every report page.
"""

import logging
from typing import Any, Dict, List, Optional

import streamlit as st
import pandas as pd

import config
from session_state_keys import (
    SESSION_CURRENT_DATASET,
    SESSION_REPORT_SECTIONS,
    get_data,
    set_data,
)
from utils import load_wine_csv, load_wine_data, validate_wine_data
from eda_utils import dataset_overview
from report_utils import build_report_sections, sections_for_chapter

logger = logging.getLogger(__name__)


def get_wine_data() -> Optional[pd.DataFrame]:
    """
    Current wine table from the session.

    Shows a warning and returns None when no table is loaded yet.
    """
    df = get_data(st.session_state)
    if df is None:
        st.warning("⚠️ **No dataset loaded.**")
        st.info("💡 Load the wine table from the sidebar first")
    return df


def load_dataset_into_workspace(source=None, name: Optional[str] = None) -> bool:
    """
    Read, validate and store the wine table in the session.

    Parameters
    ----------
    source : path, uploaded file or None
        None loads ``config.DATA_PATH``
    name : str, optional
        Display name, defaults to the file name

    Returns
    -------
    bool
        True when the table was loaded
    """
    try:
        if source is None or isinstance(source, str):
            df = load_wine_data(source)
            name = name or str(source or config.DATA_PATH)
        else:
            df = validate_wine_data(load_wine_csv(source))
            name = name or getattr(source, 'name', 'uploaded file')
    except FileNotFoundError as e:
        st.error(f"❌ {e}")
        return False
    except ValueError as e:
        st.error(f"❌ Invalid wine table: {e}")
        return False

    set_data(st.session_state, df, name)
    logger.info("Loaded %s into the workspace (%d wines)", name, len(df))
    st.success(f"✅ **{name}** loaded: {len(df):,} wines")
    return True


def display_dataset_overview(df: pd.DataFrame):
    """Headline metrics of the loaded table."""
    overview = dataset_overview(df)

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Wines", f"{overview['n_rows']:,}")
    with col2:
        st.metric("Attributes", overview['n_attributes'])
    with col3:
        st.metric("Quality range", f"{overview['quality_min']}–{overview['quality_max']}")
    with col4:
        st.metric("Median quality", f"{overview['quality_median']:g}")


def display_workspace_summary():
    """Sidebar summary of the loaded table."""
    df = get_data(st.session_state)
    if df is None:
        st.info("📊 No dataset loaded")
        return

    st.markdown(f"**Name:** `{st.session_state.get(SESSION_CURRENT_DATASET, 'wine table')}`")
    st.markdown(f"**Wines:** {len(df):,}")
    st.markdown(f"**Variables:** {len(df.columns)}")


def get_report_sections(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Report sections for the loaded table, built once per session."""
    if SESSION_REPORT_SECTIONS not in st.session_state:
        with st.spinner("Computing statistics and charts..."):
            st.session_state[SESSION_REPORT_SECTIONS] = build_report_sections(df)
    return st.session_state[SESSION_REPORT_SECTIONS]


def render_section(section: Dict[str, Any], key_prefix: str = "section"):
    """Prose, chart and table of one report section."""
    st.markdown(f"### {section['title']}")
    for paragraph in section['paragraphs']:
        st.markdown(paragraph, unsafe_allow_html=True)

    if section.get('figure') is not None:
        st.plotly_chart(
            section['figure'],
            use_container_width=True,
            key=f"{key_prefix}_{section['id']}",
        )
    if section.get('table') is not None:
        st.dataframe(section['table'], use_container_width=True)


def render_chapter(chapter: str):
    """All sections of one chapter for the loaded table."""
    df = get_wine_data()
    if df is None:
        return
    for section in sections_for_chapter(get_report_sections(df), chapter):
        render_section(section, key_prefix=chapter)
        st.markdown("---")
