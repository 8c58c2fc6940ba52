"""
Storage backends for CareerFlow.

Local key-value storage, the remote store client and the collection
synchronizer that keeps both in step with the in-memory collections.
"""

from .local_store import LocalStore
from .remote_store import RemoteStoreClient, RemoteStoreError, SETUP_SQL
from .synchronizer import CollectionSynchronizer

__all__ = [
    'LocalStore',
    'RemoteStoreClient',
    'RemoteStoreError',
    'SETUP_SQL',
    'CollectionSynchronizer',
]
