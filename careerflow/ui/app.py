"""
Main Streamlit Application for CareerFlow.

Entry point for the web interface: a tabbed layout with the experience vault,
the job tracker, the career assistant chat and settings.
"""

import streamlit as st

from careerflow.config import ConfigurationError
from careerflow.ui.components import ChatTab, JobsTab, SettingsTab, VaultTab
from careerflow.ui.session import init_session_state

st.set_page_config(
    page_title="CareerFlow",
    page_icon="🧭",
    layout="wide",
)


def render_configuration_error(error: ConfigurationError):
    """Blocking full-page error shown before any other UI renders."""
    st.markdown("## Configuration Error")
    st.error(str(error))
    st.stop()


def main():
    """Main application entry point."""
    try:
        init_session_state()
    except ConfigurationError as e:
        render_configuration_error(e)

    st.markdown("# 🧭 CareerFlow")

    vault_tab, jobs_tab, chat_tab, settings_tab = st.tabs([
        "🗂️ Vault",
        "💼 Jobs",
        "💬 Assistant",
        "⚙️ Settings",
    ])

    with vault_tab:
        VaultTab().render()

    with jobs_tab:
        JobsTab().render()

    with chat_tab:
        ChatTab().render()

    with settings_tab:
        SettingsTab().render()


if __name__ == "__main__":
    main()
