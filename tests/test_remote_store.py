import asyncio

import pytest
from aiohttp import test_utils

from careerflow.config import RemoteStoreConfig
from careerflow.storage import RemoteStoreClient, RemoteStoreError
from careerflow.storage.remote_store import DELETE_ALL_SENTINEL

from conftest import make_postgrest_app


def run_against_server(tables, scenario, fail_status=None):
    """Run ``scenario(client)`` against a PostgREST look-alike; return the requests it saw."""
    requests = []

    async def main():
        async with test_utils.TestServer(make_postgrest_app(tables, requests, fail_status)) as server:
            config = RemoteStoreConfig(url=str(server.make_url("/")), key="anon-key", source="env")
            return await scenario(RemoteStoreClient(config))

    result = asyncio.run(main())
    return result, requests


def test_select_all_returns_rows_and_sends_auth_headers():
    tables = {"jobs": {"1": {"id": "1", "data": {"id": "1", "title": "Engineer"}, "updated_at": None}}}

    async def scenario(client):
        return await client.select_all("jobs")

    rows, requests = run_against_server(tables, scenario)

    assert rows == [{"id": "1", "data": {"id": "1", "title": "Engineer"}, "updated_at": None}]
    (request,) = requests
    assert request["query"] == {"select": "*"}
    assert request["headers"]["apikey"] == "anon-key"
    assert request["headers"]["Authorization"] == "Bearer anon-key"


def test_upsert_merges_by_id():
    tables = {"jobs": {"1": {"id": "1", "data": {"title": "Old"}}}}
    rows = [
        {"id": "1", "data": {"title": "New"}, "updated_at": "2026-01-01T00:00:00+00:00"},
        {"id": "2", "data": {"title": "Other"}, "updated_at": "2026-01-01T00:00:00+00:00"},
    ]

    async def scenario(client):
        await client.upsert("jobs", rows)

    _, requests = run_against_server(tables, scenario)

    assert tables["jobs"]["1"]["data"] == {"title": "New"}
    assert sorted(tables["jobs"]) == ["1", "2"]
    assert requests[0]["method"] == "POST"
    assert "resolution=merge-duplicates" in requests[0]["headers"]["Prefer"]


def test_upsert_of_nothing_sends_no_request():
    async def scenario(client):
        await client.upsert("jobs", [])

    _, requests = run_against_server({}, scenario)

    assert requests == []


def test_delete_not_in_keeps_retained_ids():
    tables = {"jobs": {key: {"id": key, "data": {}} for key in ("A", "B", "C")}}

    async def scenario(client):
        await client.delete_not_in("jobs", ["A", "C"])

    _, requests = run_against_server(tables, scenario)

    assert sorted(tables["jobs"]) == ["A", "C"]
    assert requests[0]["query"]["id"] == 'not.in.("A","C")'


def test_delete_with_empty_retained_set_removes_everything():
    tables = {"jobs": {key: {"id": key, "data": {}} for key in ("A", "B")}}

    async def scenario(client):
        await client.delete_not_in("jobs", [])

    _, requests = run_against_server(tables, scenario)

    assert tables["jobs"] == {}
    assert requests[0]["query"]["id"] == f"neq.{DELETE_ALL_SENTINEL}"


def test_http_error_raises_remote_store_error():
    async def scenario(client):
        with pytest.raises(RemoteStoreError) as excinfo:
            await client.select_all("jobs")
        return excinfo.value

    error, _ = run_against_server({}, scenario, fail_status=500)

    assert error.status == 500
    assert isinstance(error, ConnectionError)


def test_unreachable_host_raises_remote_store_error():
    config = RemoteStoreConfig(url="http://127.0.0.1:9", key="anon-key", timeout_seconds=2)
    client = RemoteStoreClient(config)

    with pytest.raises(RemoteStoreError):
        asyncio.run(client.select_all("jobs"))


def test_unconfigured_client_refuses_requests():
    client = RemoteStoreClient(RemoteStoreConfig())

    assert not client.is_configured
    with pytest.raises(RemoteStoreError):
        asyncio.run(client.select_all("jobs"))


def test_row_to_record_unwraps_data_and_keeps_row_id():
    row = {"id": "42", "data": {"id": "stale", "title": "Engineer"}, "updated_at": None}

    assert RemoteStoreClient.row_to_record(row) == {"id": "42", "title": "Engineer"}


def test_row_to_record_without_data_returns_row():
    row = {"id": "42", "title": "Engineer"}

    assert RemoteStoreClient.row_to_record(row) == row
