"""Shared fixtures for unit tests."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import parse_qsl, urlsplit

import pytest

from snacris.acris.datasets import DATASETS

_MEMBERSHIP_RE = re.compile(r"document_id IN \(([^)]*)\)")


class FakeSocrata:
    """In-memory stand-in for the open-data HTTP client.

    Serves rows per dataset, honouring `$select`, `$limit`, `$offset` and the
    `document_id IN (...)` membership predicate. Other predicates are ignored.

    Args:
        tables: Full rows per dataset name
        id_tables: Rows served for document-id projections (defaults to tables)
        failures: Exception to raise per dataset name
    """

    def __init__(
        self,
        tables: dict[str, list[dict[str, Any]]] | None = None,
        *,
        id_tables: dict[str, list[dict[str, Any]]] | None = None,
        failures: dict[str, BaseException] | None = None,
    ) -> None:
        self.tables = tables or {}
        self.id_tables = id_tables or {}
        self.failures = failures or {}
        self.urls: list[str] = []
        self.closed = False

    def calls_for(self, dataset: str) -> list[dict[str, str]]:
        endpoint = DATASETS[dataset].endpoint
        return [
            dict(parse_qsl(urlsplit(url).query))
            for url in self.urls
            if url.split("?")[0] == endpoint
        ]

    async def get(self, url: str) -> Any:
        self.urls.append(url)
        endpoint = url.split("?")[0]
        name = next(n for n, d in DATASETS.items() if d.endpoint == endpoint)
        if name in self.failures:
            raise self.failures[name]

        params = dict(parse_qsl(urlsplit(url).query))
        select = params.get("$select")
        source = self.id_tables if select == "document_id" and name in self.id_tables else self.tables
        rows = list(source.get(name, []))

        match = _MEMBERSHIP_RE.search(params.get("$where", ""))
        if match:
            members = {m.strip().strip("'") for m in match.group(1).split(",")}
            rows = [row for row in rows if row.get("document_id") in members]

        if select == "count(*)":
            return [{"count": str(len(rows))}]
        if select == "document_id":
            rows = [{"document_id": row["document_id"]} for row in rows]

        offset = int(params.get("$offset", 0))
        limit = params.get("$limit")
        end = offset + int(limit) if limit is not None else None
        return rows[offset:end]

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_socrata():
    """Factory for FakeSocrata clients."""
    return FakeSocrata
