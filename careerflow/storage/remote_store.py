"""
Remote store client for CareerFlow.

A thin aiohttp client for a hosted Postgres exposed through PostgREST (the
Supabase REST API). Every table has the same three columns: ``id`` (text
primary key), ``data`` (the full record as a JSON document) and
``updated_at``.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING

import aiohttp

if TYPE_CHECKING:
    from ..config.settings import RemoteStoreConfig

logger = logging.getLogger(__name__)

# Matches no real id, so "id != sentinel" selects every row
DELETE_ALL_SENTINEL = "placeholder_force_delete_all"

SETUP_SQL = """-- Run this in your Supabase SQL Editor to setup the database

-- 1. Create Tables
create table if not exists experiences (
  id text primary key,
  data jsonb not null default '{}'::jsonb,
  updated_at timestamptz default now()
);

create table if not exists jobs (
  id text primary key,
  data jsonb not null default '{}'::jsonb,
  updated_at timestamptz default now()
);

create table if not exists messages (
  id text primary key,
  data jsonb not null default '{}'::jsonb,
  updated_at timestamptz default now()
);

-- 2. Enable Row Level Security (RLS)
alter table experiences enable row level security;
alter table jobs enable row level security;
alter table messages enable row level security;

-- 3. Create Public Access Policies
create policy "Public Access Experiences" on experiences for all using (true) with check (true);
create policy "Public Access Jobs" on jobs for all using (true) with check (true);
create policy "Public Access Messages" on messages for all using (true) with check (true);
"""


class RemoteStoreError(ConnectionError):
    """Raised when the remote store cannot be reached or rejects a query."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


def _quote_id(record_id: str) -> str:
    escaped = str(record_id).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


class RemoteStoreClient:
    """Per-table select / upsert / delete against a PostgREST endpoint."""

    def __init__(self, config: "RemoteStoreConfig"):
        self.config = config
        self.base_url = f"{(config.url or '').rstrip('/')}/rest/v1"
        self.headers = {
            "apikey": config.key or "",
            "Authorization": f"Bearer {config.key}",
            "Content-Type": "application/json",
        }
        self.timeout = aiohttp.ClientTimeout(total=config.timeout_seconds)

    @property
    def is_configured(self) -> bool:
        return bool(self.config.url and self.config.key)

    async def _request(self, method: str, table: str, *, params: Optional[Dict[str, str]] = None,
                       payload: Any = None, prefer: Optional[str] = None) -> Any:
        if not self.is_configured:
            raise RemoteStoreError("Remote store is not configured")

        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer

        try:
            async with aiohttp.ClientSession(timeout=self.timeout) as session:
                async with session.request(
                    method,
                    f"{self.base_url}/{table}",
                    headers=headers,
                    params=params,
                    data=json.dumps(payload) if payload is not None else None,
                ) as response:
                    body = await response.text()
                    if response.status >= 400:
                        raise RemoteStoreError(
                            f"{method} {table} failed with {response.status}: {body}",
                            status=response.status,
                        )
                    return json.loads(body) if body.strip() else None
        except aiohttp.ClientError as e:
            raise RemoteStoreError(f"{method} {table} failed: {e}") from e
        except asyncio.TimeoutError as e:
            raise RemoteStoreError(f"{method} {table} timed out") from e
        except json.JSONDecodeError as e:
            raise RemoteStoreError(f"{method} {table} returned invalid JSON: {e}") from e

    async def select_all(self, table: str) -> List[Dict[str, Any]]:
        """Fetch every row of ``table``."""
        rows = await self._request("GET", table, params={"select": "*"})
        if not isinstance(rows, list):
            raise RemoteStoreError(f"GET {table} did not return a list of rows")
        return rows

    async def upsert(self, table: str, rows: List[Dict[str, Any]]) -> None:
        """Insert or replace ``rows`` by primary key ``id``."""
        if not rows:
            return
        await self._request(
            "POST",
            table,
            payload=rows,
            prefer="resolution=merge-duplicates,return=minimal",
        )

    async def delete_not_in(self, table: str, retained_ids: Iterable[str]) -> None:
        """Delete every row whose id is not in ``retained_ids``; all rows if it is empty."""
        ids = [str(record_id) for record_id in retained_ids]
        if ids:
            condition = f"not.in.({','.join(_quote_id(record_id) for record_id in ids)})"
        else:
            condition = f"neq.{DELETE_ALL_SENTINEL}"
        await self._request("DELETE", table, params={"id": condition}, prefer="return=minimal")

    @staticmethod
    def row_to_record(row: Dict[str, Any]) -> Dict[str, Any]:
        """Unwrap the ``data`` document of a row, keeping the row id authoritative."""
        data = row.get("data")
        if isinstance(data, dict):
            return {**data, "id": row.get("id")}
        return row
