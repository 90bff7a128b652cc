"""
Tests for the engine client, using a fake requests session.
"""

import json
import sys
from pathlib import Path

import pytest
import requests

# Add scripts directory to path so datalathe_tui package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from datalathe_tui.client import (  # noqa: E402
    ChipListing, DatalatheClient, EngineError, Partition, QueryResult, group_by_table,
)
from datalathe_tui.session import Session  # noqa: E402


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Error"
        if text is None:
            text = "" if payload is None else json.dumps(payload)
        self.text = text
        self.content = text.encode()

    def json(self):
        return json.loads(self.text)


class FakeSession:
    """Records requests and replays canned responses keyed by (method, path)."""

    def __init__(self, routes=None, error=None):
        self.routes = routes or {}
        self.error = error
        self.calls = []

    def request(self, method, url, json=None, timeout=None):
        self.calls.append((method, url, json))
        if self.error is not None:
            raise self.error
        path = url.split("://", 1)[-1].split("/", 1)[-1]
        return self.routes.get((method, "/" + path), FakeResponse(404, text="not found"))


def make_client(routes=None, error=None):
    session = FakeSession(routes, error)
    return DatalatheClient("http://engine:3000/", session=session), session


class TestDatalatheClient:
    """Request shapes and response decoding."""

    def test_base_url_trailing_slash_stripped(self):
        client, _ = make_client()
        assert client.base_url == "http://engine:3000"

    def test_get_databases(self):
        client, session = make_client({
            ("GET", "/lathe/stage/databases"): FakeResponse(payload=[
                {"database_name": "sales"},
                {"database_name": "system", "internal": True},
            ]),
        })
        dbs = client.get_databases()
        assert [d.database_name for d in dbs] == ["sales", "system"]
        assert dbs[1].internal is True
        assert session.calls[0][:2] == ("GET", "http://engine:3000/lathe/stage/databases")

    def test_schema_grouped_by_table(self):
        client, _ = make_client({
            ("GET", "/lathe/stage/schema/sales"): FakeResponse(payload=[
                {"database_name": "sales", "schema_name": "public", "table_name": "orders",
                 "column_name": "id", "data_type": "integer", "is_nullable": "NO"},
                {"database_name": "sales", "schema_name": "public", "table_name": "users",
                 "column_name": "email", "data_type": "text", "is_nullable": "YES"},
                {"database_name": "sales", "schema_name": "public", "table_name": "orders",
                 "column_name": "total", "data_type": "numeric", "is_nullable": "YES"},
            ]),
        })
        grouped = group_by_table(client.get_database_schema("sales"))
        assert list(grouped) == ["public.orders", "public.users"]
        assert [c.column_name for c in grouped["public.orders"]] == ["id", "total"]

    def test_list_chips(self):
        client, _ = make_client({
            ("GET", "/lathe/chips"): FakeResponse(payload={
                "chips": [
                    {"chip_id": "c1", "sub_chip_id": "c1", "table_name": "orders"},
                    {"chip_id": "c1", "sub_chip_id": "s1", "table_name": "orders"},
                    {"chip_id": "c2", "table_name": "users"},
                    {"chip_id": "c1", "sub_chip_id": "c1", "table_name": "items"},
                ],
                "metadata": [{"chip_id": "c1", "name": "Orders", "created_at": 1700000000}],
            }),
        })
        listing = client.list_chips()
        assert listing.main_chip_ids() == ["c1", "c2"]
        assert listing.tables_for("c1") == ["orders", "items"]
        assert listing.metadata_map()["c1"].name == "Orders"

    def test_create_chip_payload(self):
        client, session = make_client({
            ("POST", "/lathe/stage/data"): FakeResponse(payload={"chip_id": "new-chip"}),
        })
        chip_id = client.create_chip(
            "sales", "SELECT * FROM orders", "orders",
            Partition("region", partition_values=["us", "eu"]),
        )
        assert chip_id == "new-chip"
        payload = session.calls[0][2]
        assert payload["source_type"] == "MYSQL"
        assert payload["source"]["database_name"] == "sales"
        assert payload["source"]["partition"] == {
            "partition_by": "region", "partition_values": ["us", "eu"],
        }

    def test_create_chip_from_chip_payload(self):
        client, session = make_client({
            ("POST", "/lathe/stage/data"): FakeResponse(payload={"chip_id": "derived"}),
        })
        client.create_chip_from_chip(["a", "b"], "SELECT 1", "data", "chip_from_cache")
        payload = session.calls[0][2]
        assert payload["source_type"] == "CACHE"
        assert payload["source"]["source_chip_ids"] == ["a", "b"]
        assert payload["chip_name"] == "chip_from_cache"

    def test_stage_error_raises(self):
        client, _ = make_client({
            ("POST", "/lathe/stage/data"): FakeResponse(payload={"error": "table not found"}),
        })
        with pytest.raises(EngineError, match="table not found"):
            client.create_chip_from_file("/tmp/data.csv")

    def test_http_error_carries_status(self):
        client, _ = make_client({
            ("DELETE", "/lathe/chips/c1"): FakeResponse(500, text="disk full"),
        })
        with pytest.raises(EngineError) as exc_info:
            client.delete_chip("c1")
        assert exc_info.value.status_code == 500
        assert "disk full" in str(exc_info.value)

    def test_transport_error_wrapped(self):
        client, _ = make_client(error=requests.ConnectionError("refused"))
        with pytest.raises(EngineError, match="Cannot reach http://engine:3000"):
            client.get_databases()

    def test_generate_report(self):
        client, session = make_client({
            ("POST", "/lathe/report"): FakeResponse(payload={"result": {
                "0": {
                    "schema": [{"name": "id"}, {"name": "total"}],
                    "result": [[1, 9.5], [2, None]],
                },
                "1": {"error": "syntax error"},
            }}),
        })
        results = client.generate_report(["c1"], ["SELECT id, total FROM orders", "SELEC"])
        assert results[0].columns == ["id", "total"]
        assert results[0].rows == [{"id": 1, "total": 9.5}, {"id": 2, "total": None}]
        assert results[1].error == "syntax error"
        assert session.calls[0][2]["chip_id"] == ["c1"]


class TestRecords:
    """Decoding edge cases."""

    def test_query_result_from_dict_rows(self):
        result = QueryResult.from_dict({"result": [{"a": 1, "b": 2}]})
        assert result.columns == ["a", "b"]

    def test_empty_listing(self):
        listing = ChipListing.from_dict({})
        assert listing.main_chip_ids() == []


class TestSession:
    """Checked-chip set shared across screens."""

    def test_toggle_and_notify(self):
        session = Session()
        seen = []
        session.subscribe(seen.append)
        assert session.toggle_checked("a") is True
        assert session.toggle_checked("b") is True
        assert session.toggle_checked("a") is False
        assert session.checked_chip_ids == ["b"]
        assert seen == [["a"], ["a", "b"], ["b"]]

    def test_query_chip_ids_puts_current_first(self):
        session = Session()
        session.toggle_checked("a")
        session.toggle_checked("b")
        assert session.query_chip_ids("b") == ["b", "a"]
        assert session.query_chip_ids("z") == ["z", "a", "b"]

    def test_forget_chip(self):
        session = Session()
        session.toggle_checked("a")
        session.forget_chip("a")
        session.forget_chip("missing")
        assert session.checked_chip_ids == []

    def test_connect(self):
        session = Session()
        assert session.connected is False
        client = DatalatheClient("http://x", session=FakeSession())
        session.connect(client, "http://x")
        assert session.connected is True
        assert session.url == "http://x"
