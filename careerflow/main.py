"""
Command-line entry point for CareerFlow.

Checks the configuration, loads every collection (remote first, then local)
and reports what was found. The web interface is started separately with
``streamlit run careerflow/ui/app.py``.
"""

import asyncio
import sys

from careerflow.config import get_config_manager
from careerflow.ai_processing.llm_manager import LLMManager
from careerflow.storage.collections import create_collections
from careerflow.utils import setup_logging, get_logger


async def check_system() -> bool:
    """Validate configuration and load all collections."""
    logger = get_logger("careerflow.main")
    config_manager = get_config_manager()

    issues = config_manager.validate_config()
    for warning in issues["warnings"]:
        logger.warning(warning)
    for error in issues["errors"]:
        logger.error(error)

    remote = config_manager.get_remote_config()
    logger.info(f"Remote store: {'configured (' + remote.source + ')' if remote.is_configured else 'local only'}")

    collections = create_collections(remote, config_manager.local_store)
    await collections.load_all()
    logger.info(f"Experiences: {len(collections.experiences.data)}")
    logger.info(f"Jobs: {len(collections.jobs.data)}")
    logger.info(f"Chat messages: {len(collections.messages.data)}")

    providers = LLMManager(config_manager.get_llm_config()).get_available_providers()
    logger.info(f"Available LLM providers: {providers}")

    return not issues["errors"]


def main() -> int:
    setup_logging(get_config_manager().get_app_config())
    ok = asyncio.run(check_system())
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
