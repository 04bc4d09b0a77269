"""
Streamlit Session State Keys - Canonical Definitions
===================================================

Session state keys shared by the report pages. Using constants keeps the
pages consistent and avoids typos in key names.

Usage:
    from session_state_keys import SESSION_CURRENT_DATA

    if SESSION_CURRENT_DATA in st.session_state:
        df = st.session_state[SESSION_CURRENT_DATA]
"""

# ============================================================================
# DATA MANAGEMENT
# ============================================================================

SESSION_CURRENT_DATA = 'current_data'
"""
Validated wine table (pd.DataFrame)
Every report page reads from this key.
Updated by: workspace_utils.load_dataset_into_workspace
"""

SESSION_CURRENT_DATASET = 'current_dataset'
"""
Name of the loaded file (str), for display.
"""

# ============================================================================
# REPORT RESULTS
# ============================================================================

SESSION_REPORT_SECTIONS = 'report_sections'
"""
Narrative sections built from the current table (list[dict])
Cleared whenever a new table is loaded.
"""

SESSION_EDA_RESULTS = 'eda_results'
"""
Per-attribute descriptive statistics (dict[str, dict])
Written by eda_utils.eda_workspace.save_eda_results_to_session
"""

SESSION_REPORT_HTML = 'report_html'
"""
Rendered HTML document offered for download (str)
"""

SESSION_EDA_STATS_CACHE = 'eda_stats_cache'
"""
Summary-tab statistics keyed by (key_prefix, column, confidence) (dict)
Written by eda_utils.eda_workspace.render_eda_tab
"""

SESSION_EDA_EXCEL = 'eda_excel_buffer'
"""
Generated Excel workbooks keyed by key_prefix (dict[str, BytesIO])
"""

# ============================================================================
# PAGE NAVIGATION
# ============================================================================

SESSION_CURRENT_PAGE = 'current_page'
"""
Currently active page (str)
Used by: homepage.py navigation system
"""

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def get_data(session_state) -> 'pd.DataFrame | None':
    """Current wine table, or None when nothing is loaded."""
    return session_state.get(SESSION_CURRENT_DATA, None)


def set_data(session_state, df: 'pd.DataFrame', name: str = None):
    """
    Store a validated table and drop results computed from the previous one.

    Parameters
    ----------
    session_state : st.session_state
    df : pd.DataFrame
    name : str, optional
        Dataset name for display
    """
    clear_results(session_state)
    session_state[SESSION_CURRENT_DATA] = df
    if name:
        session_state[SESSION_CURRENT_DATASET] = name


def clear_results(session_state):
    """Remove everything derived from the current table."""
    for key in (
        SESSION_REPORT_SECTIONS,
        SESSION_EDA_RESULTS,
        SESSION_REPORT_HTML,
        SESSION_EDA_STATS_CACHE,
        SESSION_EDA_EXCEL,
    ):
        if key in session_state:
            del session_state[key]
