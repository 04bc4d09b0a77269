"""
White Wine Quality EDA
Main entry point for the Streamlit report
"""

import streamlit as st

# Set page config FIRST - before any other Streamlit command
st.set_page_config(
    page_title="White Wine Quality EDA",
    page_icon="🍷",
    layout="wide",
    initial_sidebar_state="expanded"
)

if __name__ == "__main__":
    # Import and run the main application (without calling set_page_config again)
    from homepage import main_content
    main_content()
