"""
The three CareerFlow collections and how they map onto storage.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ..config.settings import RemoteStoreConfig
from ..models import Experience, Job, Message
from .local_store import LocalStore
from .remote_store import RemoteStoreClient
from .synchronizer import CollectionSynchronizer

EXPERIENCES_KEY = "career_experiences"
JOBS_KEY = "career_jobs"
CHAT_HISTORY_KEY = "chat_history"

# Local storage key -> remote table
TABLE_MAPPING: Dict[str, str] = {
    EXPERIENCES_KEY: "experiences",
    JOBS_KEY: "jobs",
    CHAT_HISTORY_KEY: "messages",
}

WELCOME_MESSAGE = "Hello! I'm your CareerFlow assistant. How can I help with your job search today?"


def table_for(key: str) -> str:
    return TABLE_MAPPING.get(key, key)


def default_chat_history():
    return [Message(id="1", role="model", content=WELCOME_MESSAGE)]


def make_remote_client(config: Optional[RemoteStoreConfig]) -> Optional[RemoteStoreClient]:
    """Remote client for ``config``, or None when the remote store is not configured."""
    if config is None or not config.is_configured:
        return None
    return RemoteStoreClient(config)


@dataclass
class Collections:
    experiences: CollectionSynchronizer[Experience]
    jobs: CollectionSynchronizer[Job]
    messages: CollectionSynchronizer[Message]

    async def load_all(self) -> None:
        for collection in (self.experiences, self.jobs, self.messages):
            await collection.load()

    async def flush_all(self) -> None:
        for collection in (self.experiences, self.jobs, self.messages):
            await collection.flush()


def create_collections(remote_config: Optional[RemoteStoreConfig], local_store: LocalStore) -> Collections:
    """
    Build the experience, job and chat collections.

    Call again with the new configuration after the remote settings change.
    """
    remote = make_remote_client(remote_config)
    return Collections(
        experiences=CollectionSynchronizer(
            EXPERIENCES_KEY,
            local_store,
            remote=remote,
            table=table_for(EXPERIENCES_KEY),
            parse=Experience.from_dict,
            serialize=Experience.to_dict,
        ),
        jobs=CollectionSynchronizer(
            JOBS_KEY,
            local_store,
            remote=remote,
            table=table_for(JOBS_KEY),
            parse=Job.from_dict,
            serialize=Job.to_dict,
        ),
        messages=CollectionSynchronizer(
            CHAT_HISTORY_KEY,
            local_store,
            remote=remote,
            table=table_for(CHAT_HISTORY_KEY),
            initial=default_chat_history(),
            parse=Message.from_dict,
            serialize=Message.to_dict,
        ),
    )
