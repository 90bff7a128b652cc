"""
HTTP client for the DataLathe engine.

Thin wrapper over the engine's REST API. Every method is blocking (requests);
screens call them from a worker thread through ``asyncio.to_thread`` so the
Textual event loop never waits on the network.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

_log = logging.getLogger("datalathe.client")

DEFAULT_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 30.0


class EngineError(Exception):
    """Raised when the engine cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# ============================================================================
# Records
# ============================================================================

@dataclass
class Database:
    """An attached database known to the engine."""
    database_name: str
    internal: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "Database":
        return cls(
            database_name=str(data.get("database_name", "")),
            internal=bool(data.get("internal", False)),
        )


@dataclass
class DatabaseColumn:
    """One column of one table, as returned by the schema endpoint."""
    database_name: str
    schema_name: str
    table_name: str
    column_name: str
    data_type: str = ""
    is_nullable: str = ""
    column_default: Optional[str] = None

    @property
    def qualified_table(self) -> str:
        return f"{self.schema_name}.{self.table_name}"

    @classmethod
    def from_dict(cls, data: dict) -> "DatabaseColumn":
        return cls(
            database_name=str(data.get("database_name", "")),
            schema_name=str(data.get("schema_name", "")),
            table_name=str(data.get("table_name", "")),
            column_name=str(data.get("column_name", "")),
            data_type=str(data.get("data_type", "")),
            is_nullable=str(data.get("is_nullable", "")),
            column_default=data.get("column_default"),
        )


@dataclass
class Chip:
    """A chip row. Main chips have ``chip_id == sub_chip_id``."""
    chip_id: str
    sub_chip_id: str
    table_name: str = ""
    partition_value: str = ""
    created_at: Optional[int] = None

    @property
    def is_main(self) -> bool:
        return self.chip_id == self.sub_chip_id

    @classmethod
    def from_dict(cls, data: dict) -> "Chip":
        chip_id = str(data.get("chip_id", ""))
        return cls(
            chip_id=chip_id,
            sub_chip_id=str(data.get("sub_chip_id") or chip_id),
            table_name=str(data.get("table_name", "")),
            partition_value=str(data.get("partition_value") or ""),
            created_at=data.get("created_at"),
        )


@dataclass
class ChipMetadata:
    """User-facing metadata for a chip."""
    chip_id: str
    name: str = ""
    description: str = ""
    query: str = ""
    created_at: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ChipMetadata":
        return cls(
            chip_id=str(data.get("chip_id", "")),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            query=str(data.get("query") or ""),
            created_at=data.get("created_at"),
        )


@dataclass
class ChipListing:
    """Result of listing chips: every chip row plus their metadata."""
    chips: list[Chip] = field(default_factory=list)
    metadata: list[ChipMetadata] = field(default_factory=list)

    def metadata_map(self) -> dict[str, ChipMetadata]:
        return {m.chip_id: m for m in self.metadata}

    def main_chip_ids(self) -> list[str]:
        """Unique ids of main chips, in listing order."""
        seen: dict[str, None] = {}
        for chip in self.chips:
            if chip.is_main:
                seen.setdefault(chip.chip_id, None)
        return list(seen)

    def tables_for(self, chip_id: str) -> list[str]:
        """Unique table names over every row of the chip, sub-chips included."""
        seen: dict[str, None] = {}
        for chip in self.chips:
            if chip.chip_id == chip_id:
                seen.setdefault(chip.table_name, None)
        return list(seen)

    @classmethod
    def from_dict(cls, data: dict) -> "ChipListing":
        return cls(
            chips=[Chip.from_dict(c) for c in data.get("chips") or []],
            metadata=[ChipMetadata.from_dict(m) for m in data.get("metadata") or []],
        )


@dataclass
class Partition:
    """Partitioning options for chip creation."""
    partition_by: str
    partition_query: Optional[str] = None
    partition_values: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"partition_by": self.partition_by}
        if self.partition_query:
            data["partition_query"] = self.partition_query
        if self.partition_values:
            data["partition_values"] = list(self.partition_values)
        return data


@dataclass
class QueryResult:
    """One query's result set, converted to named-column rows."""
    columns: list[str] = field(default_factory=list)
    rows: list[dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "QueryResult":
        schema = data.get("schema") or []
        columns = [str(col.get("name", f"col{i}")) for i, col in enumerate(schema)]
        rows = []
        for raw in data.get("result") or []:
            if isinstance(raw, dict):
                rows.append(raw)
                continue
            names = columns or [f"col{i}" for i in range(len(raw))]
            rows.append(dict(zip(names, raw)))
        if not columns and rows:
            columns = list(rows[0])
        return cls(columns=columns, rows=rows, error=data.get("error"))


# ============================================================================
# Client
# ============================================================================

class DatalatheClient:
    """Blocking client for the DataLathe engine HTTP API."""

    def __init__(
        self,
        base_url: str = DEFAULT_URL,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Any:
        url = f"{self.base_url}{path}"
        _log.debug(f"{method} {url}")
        try:
            resp = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise EngineError(f"Cannot reach {self.base_url}: {e}") from e

        if resp.status_code >= 400:
            detail = resp.text.strip() or resp.reason
            raise EngineError(
                f"{method} {path} failed ({resp.status_code}): {detail}",
                status_code=resp.status_code,
            )
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise EngineError(f"Invalid JSON from {path}: {e}") from e

    # --- Schema ---

    def get_databases(self) -> list[Database]:
        data = self._request("GET", "/lathe/stage/databases") or []
        return [Database.from_dict(d) for d in data]

    def get_database_schema(self, database_name: str) -> list[DatabaseColumn]:
        data = self._request("GET", f"/lathe/stage/schema/{database_name}") or []
        return [DatabaseColumn.from_dict(c) for c in data]

    # --- Chips ---

    def list_chips(self) -> ChipListing:
        return ChipListing.from_dict(self._request("GET", "/lathe/chips") or {})

    def create_chip(
        self,
        source_name: str,
        query: str,
        table_name: str,
        partition: Optional[Partition] = None,
    ) -> str:
        """Stage ``query`` from a database into a new chip; returns the chip id."""
        source: dict[str, Any] = {
            "database_name": source_name,
            "query": query,
            "table_name": table_name,
        }
        if partition is not None:
            source["partition"] = partition.to_dict()
        return self._stage({"source_type": "MYSQL", "source": source})

    def create_chip_from_file(
        self,
        file_path: str,
        table_name: Optional[str] = None,
        partition: Optional[Partition] = None,
    ) -> str:
        source: dict[str, Any] = {"file_path": file_path}
        if table_name:
            source["table_name"] = table_name
        if partition is not None:
            source["partition"] = partition.to_dict()
        return self._stage({"source_type": "FILE", "source": source})

    def create_chip_from_chip(
        self,
        chip_ids: list[str],
        query: Optional[str] = None,
        table_name: Optional[str] = None,
        chip_name: Optional[str] = None,
    ) -> str:
        source: dict[str, Any] = {"source_chip_ids": list(chip_ids)}
        if query:
            source["query"] = query
        if table_name:
            source["table_name"] = table_name
        payload: dict[str, Any] = {"source_type": "CACHE", "source": source}
        if chip_name:
            payload["chip_name"] = chip_name
        return self._stage(payload)

    def _stage(self, payload: dict) -> str:
        data = self._request("POST", "/lathe/stage/data", payload) or {}
        if data.get("error"):
            raise EngineError(str(data["error"]))
        chip_id = data.get("chip_id")
        if not chip_id:
            raise EngineError("Engine did not return a chip id")
        return str(chip_id)

    def delete_chip(self, chip_id: str) -> None:
        self._request("DELETE", f"/lathe/chips/{chip_id}")

    # --- Queries ---

    def generate_report(self, chip_ids: list[str], queries: list[str]) -> dict[int, QueryResult]:
        """Run ``queries`` against ``chip_ids``; results are keyed by query index."""
        data = self._request(
            "POST",
            "/lathe/report",
            {"chip_id": list(chip_ids), "source_type": "LOCAL", "query": list(queries)},
        ) or {}
        results = {}
        for key, entry in (data.get("result") or {}).items():
            results[int(key)] = QueryResult.from_dict(entry or {})
        return results


def group_by_table(columns: list[DatabaseColumn]) -> dict[str, list[DatabaseColumn]]:
    """Group schema rows by "schema.table", preserving first-seen order."""
    grouped: dict[str, list[DatabaseColumn]] = {}
    for col in columns:
        grouped.setdefault(col.qualified_table, []).append(col)
    return grouped
