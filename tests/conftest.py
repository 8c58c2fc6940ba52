import asyncio
import json
from typing import Any, Dict, List, Optional

import pytest
from aiohttp import web

from careerflow.ai_processing.llm_manager import LLMManager, LLMProvider, LLMResponse
from careerflow.config import LLMConfig
from careerflow.storage import LocalStore, RemoteStoreError


class FakeRemote:
    """In-memory stand-in for RemoteStoreClient."""

    def __init__(self, rows: Optional[Dict[str, Dict[str, Any]]] = None, configured: bool = True):
        self.rows: Dict[str, Dict[str, Any]] = dict(rows or {})
        self.configured = configured
        self.fail_reads = False
        self.fail_writes = False
        self.selects: List[str] = []
        self.upserts: List[List[Dict[str, Any]]] = []
        self.deletes: List[List[str]] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def select_all(self, table: str) -> List[Dict[str, Any]]:
        await asyncio.sleep(0)
        self.selects.append(table)
        if self.fail_reads:
            raise RemoteStoreError("connection refused")
        return [
            {"id": record_id, "data": document, "updated_at": "2026-01-01T00:00:00+00:00"}
            for record_id, document in self.rows.items()
        ]

    async def upsert(self, table: str, rows: List[Dict[str, Any]]) -> None:
        await asyncio.sleep(0)
        self.upserts.append(rows)
        if self.fail_writes:
            raise RemoteStoreError("connection refused")
        for row in rows:
            self.rows[row["id"]] = row["data"]

    async def delete_not_in(self, table: str, retained_ids) -> None:
        await asyncio.sleep(0)
        retained = list(retained_ids)
        self.deletes.append(retained)
        if self.fail_writes:
            raise RemoteStoreError("connection refused")
        self.rows = {key: value for key, value in self.rows.items() if key in retained}


class ScriptedProvider(LLMProvider):
    """LLM provider that replays canned replies and records every call."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: List[Dict[str, Any]] = []

    def _next(self, kind: str, prompt: str, system_prompt: str, **kwargs):
        self.calls.append({"kind": kind, "prompt": prompt, "system_prompt": system_prompt, **kwargs})
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def generate_text(self, prompt, system_prompt="", model=None, tools=None, **kwargs):
        return self._next("text", prompt, system_prompt, model=model, tools=tools)

    async def generate_structured_response(self, prompt, system_prompt="", response_schema=None,
                                           model=None, **kwargs):
        reply = self._next("structured", prompt, system_prompt, model=model, response_schema=response_schema)
        if reply.success and reply.data is None:
            try:
                reply.data = json.loads(reply.content)
            except json.JSONDecodeError as e:
                reply.success = False
                reply.error = str(e)
        return reply

    async def stream_chat(self, history, message, system_prompt="", model=None):
        self.calls.append({"kind": "chat", "history": history, "message": message,
                           "system_prompt": system_prompt, "model": model})
        for chunk in self.replies:
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk

    def is_available(self):
        return True

    def get_model_name(self):
        return "scripted"


def text_reply(content: str) -> LLMResponse:
    return LLMResponse(success=True, content=content, model="scripted")


def make_llm(provider: LLMProvider) -> LLMManager:
    return LLMManager(config=LLMConfig(api_key="test-key"), provider=provider)


def _parse_id_filter(condition: str, ids: List[str]) -> List[str]:
    if condition.startswith("neq."):
        excluded = condition[len("neq."):]
        return [record_id for record_id in ids if record_id != excluded]
    if condition.startswith("not.in.(") and condition.endswith(")"):
        body = condition[len("not.in.("):-1]
        retained = {part.strip().strip('"') for part in body.split(",") if part.strip()}
        return [record_id for record_id in ids if record_id not in retained]
    raise ValueError(f"unsupported filter {condition}")


def make_postgrest_app(tables: Dict[str, Dict[str, Dict[str, Any]]], requests: List[Dict[str, Any]],
                       fail_status: Optional[int] = None) -> web.Application:
    """A tiny PostgREST look-alike serving ``/rest/v1/{table}``."""

    async def handler(request: web.Request) -> web.Response:
        body = await request.text()
        requests.append({
            "method": request.method,
            "table": request.match_info["table"],
            "query": dict(request.query),
            "headers": dict(request.headers),
            "body": json.loads(body) if body else None,
        })
        if fail_status:
            return web.json_response({"message": "boom"}, status=fail_status)

        rows = tables.setdefault(request.match_info["table"], {})
        if request.method == "GET":
            return web.json_response(list(rows.values()))
        if request.method == "POST":
            for row in json.loads(body):
                rows[row["id"]] = row
            return web.Response(status=201)
        if request.method == "DELETE":
            for record_id in _parse_id_filter(request.query["id"], list(rows)):
                del rows[record_id]
            return web.Response(status=204)
        return web.Response(status=405)

    app = web.Application()
    app.router.add_route("*", "/rest/v1/{table}", handler)
    return app


@pytest.fixture
def local_store(tmp_path):
    return LocalStore(tmp_path / "storage")


@pytest.fixture
def fake_remote():
    return FakeRemote()
