"""
Settings tab: remote store connection.
"""

import streamlit as st

from careerflow.storage import SETUP_SQL
from careerflow.ui.session import connect_collections


class SettingsTab:
    """Settings tab component."""

    def __init__(self):
        self.config_manager = st.session_state.config_manager

    def render(self):
        st.markdown("### ⚙️ Settings")
        remote = self.config_manager.get_remote_config()

        if remote.is_configured:
            st.success("Connected to cloud database")
        else:
            st.info("Using local storage only")

        if remote.is_from_env:
            st.info(
                "Your configuration is managed via environment variables (.env). "
                "To change settings, update your deployment configuration."
            )
        else:
            self._render_form(remote)

        with st.expander("Database setup SQL"):
            st.code(SETUP_SQL, language="sql")

        with st.expander("Current configuration"):
            st.json(self.config_manager.mask_sensitive_config())

    def _render_form(self, remote):
        if not remote.is_configured:
            st.warning(
                "To sync your data across devices, enter your Supabase Project URL and Anon Key below. "
                "If left blank, data will only be saved on this machine."
            )

        with st.form("remote_settings"):
            url = st.text_input("Project URL", remote.url or "", placeholder="https://your-project.supabase.co")
            key = st.text_input("Anon key", remote.key or "", type="password")
            saved = st.form_submit_button("💾 Save & connect")

        if saved and url and key:
            connect_collections(self.config_manager.update_remote_config(url, key))
            st.rerun()

        if remote.is_configured and st.button("Disconnect"):
            connect_collections(self.config_manager.clear_remote_config())
            st.rerun()
