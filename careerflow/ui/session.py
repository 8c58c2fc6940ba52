"""
Session state management for the Streamlit application.

Builds the configuration, LLM manager and the three synced collections once
per browser session, and runs the async storage/generation calls from
Streamlit's synchronous script runs.
"""

import asyncio
from typing import Any, Awaitable, Callable, List, Union

import streamlit as st

from ..config import get_config_manager, RemoteStoreConfig
from ..ai_processing.llm_manager import LLMManager
from ..storage.collections import create_collections
from ..storage.synchronizer import CollectionSynchronizer
from ..utils import setup_logging, get_ui_logger


def run_async(coro: Awaitable[Any]) -> Any:
    """Run a coroutine to completion from a Streamlit script run."""
    return asyncio.run(coro)


def init_session_state() -> None:
    """
    Initialize all session state variables.

    Raises:
        ConfigurationError: If the AI provider key is missing
    """
    if 'config_manager' not in st.session_state:
        config_manager = get_config_manager()
        setup_logging(config_manager.get_app_config())
        st.session_state.config_manager = config_manager
        st.session_state.logger = get_ui_logger()

    config_manager = st.session_state.config_manager
    config_manager.require_api_key()

    if 'llm_manager' not in st.session_state:
        st.session_state.llm_manager = LLMManager(config_manager.get_llm_config())

    if 'collections' not in st.session_state:
        connect_collections(config_manager.get_remote_config())


def connect_collections(remote_config: RemoteStoreConfig) -> None:
    """(Re)build and load the collections for ``remote_config``."""
    config_manager = st.session_state.config_manager
    collections = create_collections(remote_config, config_manager.local_store)
    run_async(collections.load_all())
    st.session_state.collections = collections
    st.session_state.logger.info(
        "Collections loaded",
        remote=remote_config.is_configured,
        source=remote_config.source,
    )


def mutate(collection: CollectionSynchronizer, action: Union[List[Any], Callable[[List[Any]], List[Any]]]) -> List[Any]:
    """Apply a mutation and let its remote reconciliation finish within this script run."""

    async def _apply():
        result = collection.set(action)
        # asyncio.run cancels pending tasks on exit, so the reconcile finishes here
        await collection.flush()
        return result

    return run_async(_apply())

