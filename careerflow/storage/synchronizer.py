"""
Collection synchronizer.

Owns the in-memory list of one named collection and keeps the two storage
backends in step with it:

* on load, the remote store is authoritative when configured and reachable,
  then local storage, then the provided default;
* on every mutation the full list is written to local storage before ``set``
  returns, and a reconciliation of the remote table (upsert everything, prune
  rows no longer present) is scheduled in the background.

Stored documents that cannot be parsed into records are kept aside as they
were loaded. They are written back with every local save and their ids stay
in the retained set, so they are neither overwritten nor pruned remotely.

Remote reconciliation is best-effort. Failures are logged and never retried,
and the local write and in-memory state are never rolled back.
"""

import asyncio
from datetime import datetime, timezone
from typing import (
    Any, Callable, Dict, Generic, Iterable, List, Optional, Tuple, TypeVar, Union,
)

from ..utils import get_logger
from .local_store import LocalStore
from .remote_store import RemoteStoreClient

T = TypeVar("T")

Document = Dict[str, Any]
SetAction = Union[List[T], Callable[[List[T]], List[T]]]


def _identity(value: Any) -> Any:
    return value


def _document_id(document: Any) -> Optional[str]:
    if not isinstance(document, dict):
        return None
    record_id = document.get("id")
    if record_id is None or record_id == "":
        return None
    return str(record_id)


class CollectionSynchronizer(Generic[T]):
    """In-memory collection mirrored to local storage and a remote table."""

    def __init__(
        self,
        key: str,
        local_store: LocalStore,
        remote: Optional[RemoteStoreClient] = None,
        table: Optional[str] = None,
        initial: Optional[List[T]] = None,
        parse: Optional[Callable[[Document], T]] = None,
        serialize: Optional[Callable[[T], Document]] = None,
    ):
        """
        Initialize the synchronizer.

        Args:
            key: Local storage key of the collection
            local_store: Local storage adapter
            remote: Remote store client, or None to run local-only
            table: Remote table name (defaults to ``key``)
            initial: Records used when neither backend has data
            parse: Converts a stored document into a record; raising ValueError keeps it unparsed
            serialize: Converts a record back into a document
        """
        self.key = key
        self.table = table or key
        self.local_store = local_store
        self.remote = remote
        self.parse = parse or _identity
        self.serialize = serialize or _identity

        self.logger = get_logger(__name__)
        self.logger.set_context(collection=key, table=self.table)

        self._default: List[T] = list(initial or [])
        self._data: List[T] = list(self._default)
        self._unparsed: List[Document] = []
        self._loaded = False
        self._load_lock = asyncio.Lock()

        self._pending: Optional[Tuple[List[Document], List[str]]] = None
        self._worker: Optional[asyncio.Task] = None

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None and self.remote.is_configured

    @property
    def data(self) -> List[T]:
        return list(self._data)

    @property
    def unparsed(self) -> List[Document]:
        """Stored documents that could not be parsed, preserved as loaded."""
        return list(self._unparsed)

    # Loading
    async def load(self) -> List[T]:
        """Load the collection once; later calls return the current data."""
        if self._loaded:
            return self.data

        async with self._load_lock:
            if not self._loaded:
                self._data, self._unparsed = await self._fetch()
                self._loaded = True
        return self.data

    async def _fetch(self) -> Tuple[List[T], List[Document]]:
        if self.remote_enabled:
            try:
                rows = await self.remote.select_all(self.table)
                records, unparsed = self._parse_documents(
                    [RemoteStoreClient.row_to_record(row) for row in rows]
                )
                self.logger.info(f"Loaded {len(records)} items from {self.table}")
                return records, unparsed
            except Exception as e:
                self.logger.warning(
                    f"Remote load failed for {self.table}, falling back to local storage: {e}"
                )

        if self.local_store.contains(self.key):
            return self._parse_documents(self.local_store.load(self.key))
        return list(self._default), []

    def _parse_documents(self, documents: List[Document]) -> Tuple[List[T], List[Document]]:
        records, unparsed = [], []
        for document in documents:
            try:
                records.append(self.parse(document))
            except (ValueError, TypeError, AttributeError) as e:
                self.logger.warning(f"Keeping unparsed record in '{self.key}' as stored: {e}",
                                    record_id=_document_id(document))
                unparsed.append(document)
        return records, unparsed

    # Mutation
    def set(self, action: SetAction) -> List[T]:
        """
        Replace the collection.

        Args:
            action: Either the next list, or a function from the previous list to the next

        Returns:
            The new list
        """
        next_data = action(self.data) if callable(action) else action
        self._data = list(next_data)

        documents = [self.serialize(record) for record in self._data]
        self.local_store.save(self.key, [*documents, *self._unparsed])

        if self.remote_enabled and self._loaded:
            preserved = [i for i in map(_document_id, self._unparsed) if i is not None]
            self._schedule_reconcile(documents, preserved)

        return self.data

    def _schedule_reconcile(self, documents: List[Document], preserved_ids: List[str]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.logger.warning(f"No running event loop, remote sync skipped for {self.table}")
            return

        # Only the newest snapshot matters; older pending ones are dropped
        self._pending = (documents, preserved_ids)
        worker = self._worker
        if worker is None or worker.done() or worker.get_loop() is not loop:
            self._worker = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not None:
            (documents, preserved_ids), self._pending = self._pending, None
            await self.reconcile(documents, preserved_ids)

    async def reconcile(self, documents: List[Document], preserved_ids: Iterable[str] = ()) -> None:
        """
        Bring the remote table in line with ``documents``: upsert all, then prune the rest.

        Rows whose id is in ``preserved_ids`` are left untouched.
        """
        updated_at = datetime.now(timezone.utc).isoformat()
        rows = []
        for document in documents:
            record_id = _document_id(document)
            if record_id is None:
                continue
            rows.append({"id": record_id, "data": document, "updated_at": updated_at})

        skipped = len(documents) - len(rows)
        if skipped:
            self.logger.warning(f"{skipped} record(s) in '{self.key}' have no id and were not synced")

        try:
            await self.remote.upsert(self.table, rows)
        except Exception as e:
            self.logger.error(f"Remote upsert error for {self.table}: {e}")

        retained = [row["id"] for row in rows]
        retained.extend(record_id for record_id in preserved_ids if record_id not in retained)
        try:
            await self.remote.delete_not_in(self.table, retained)
        except Exception as e:
            self.logger.error(f"Remote delete error for {self.table}: {e}")

    async def flush(self) -> None:
        """Wait until every scheduled reconciliation has finished."""
        loop = asyncio.get_running_loop()
        while self._worker is not None and not self._worker.done():
            if self._worker.get_loop() is not loop:
                break
            await self._worker
