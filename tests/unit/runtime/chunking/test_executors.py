"""Unit tests for paged execution."""

from __future__ import annotations

import pytest

from snacris.acris.core import ConfigurationError
from snacris.acris.datasets import get_dataset
from snacris.acris.query import SoqlRequest, build_request
from snacris.acris.runtime.chunking import (
    IdentifierAccumulator,
    PageExecutor,
    PagePolicy,
    RowAccumulator,
    next_page,
)

MASTER = get_dataset("real_property_master")


def _pages(sizes: list[int]):
    """Build a fetch_page stub that serves the given page sizes in order."""
    seen: list[SoqlRequest] = []

    async def fetch_page(request: SoqlRequest) -> list[dict]:
        index = len(seen)
        seen.append(request)
        size = sizes[index] if index < len(sizes) else 0
        return [{"document_id": f"D{index}-{i}"} for i in range(size)]

    return fetch_page, seen


class TestNextPage:
    """Pure pagination step."""

    def test_full_page_continues(self):
        step = next_page(0, 1000, 1000)
        assert step.has_more
        assert step.next_offset == 1000

    def test_short_page_stops(self):
        assert not next_page(2000, 400, 1000).has_more

    def test_empty_page_stops(self):
        assert not next_page(3000, 0, 1000).has_more


class TestPageExecutor:
    """Pagination loop."""

    @pytest.mark.asyncio
    async def test_stops_after_short_page(self):
        fetch_page, seen = _pages([1000, 1000, 400])
        result = await PageExecutor().execute(
            requests=[build_request(MASTER)], fetch_page=fetch_page, accumulator=RowAccumulator()
        )

        assert result.requests_issued == 3
        assert len(result.data) == 2400
        assert [r.offset for r in seen] == [0, 1000, 2000]
        assert all(r.limit == 1000 for r in seen)

    @pytest.mark.asyncio
    async def test_stops_on_empty_page(self):
        fetch_page, seen = _pages([1000, 1000, 1000, 0])
        result = await PageExecutor().execute(
            requests=[build_request(MASTER)], fetch_page=fetch_page, accumulator=RowAccumulator()
        )

        assert result.requests_issued == 4
        assert len(result.data) == 3000
        assert seen[-1].offset == 3000

    @pytest.mark.asyncio
    async def test_caller_limit_is_page_size(self):
        fetch_page, seen = _pages([10, 10, 3])
        result = await PageExecutor().execute(
            requests=[build_request(MASTER, limit=10)],
            fetch_page=fetch_page,
            accumulator=RowAccumulator(),
        )

        assert len(result.data) == 23
        assert [r.offset for r in seen] == [0, 10, 20]

    @pytest.mark.asyncio
    async def test_identifiers_are_deduplicated(self):
        pages = [
            [{"document_id": "A"}, {"document_id": "B"}],
            [{"document_id": "B"}, {"document_id": "C"}],
            [],
        ]

        async def fetch_page(request: SoqlRequest) -> list[dict]:
            return pages[request.offset // 2]

        result = await PageExecutor(PagePolicy(page_size=2)).execute(
            requests=[build_request(MASTER)],
            fetch_page=fetch_page,
            accumulator=IdentifierAccumulator(),
        )

        assert result.data == ["A", "B", "C"]
        assert result.total_rows == 4

    @pytest.mark.asyncio
    async def test_every_descriptor_is_paginated(self):
        fetch_page, seen = _pages([2, 1, 2, 0])
        requests = [build_request(MASTER), build_request(MASTER)]
        result = await PageExecutor(PagePolicy(page_size=2)).execute(
            requests=requests, fetch_page=fetch_page, accumulator=RowAccumulator()
        )

        assert result.descriptors == 2
        assert result.requests_issued == 4
        assert len(result.data) == 5
        assert [r.offset for r in seen] == [0, 2, 0, 2]

    @pytest.mark.asyncio
    async def test_max_pages_guard(self):
        fetch_page, _ = _pages([5] * 10)
        result = await PageExecutor(PagePolicy(page_size=5, max_pages=2)).execute(
            requests=[build_request(MASTER)], fetch_page=fetch_page, accumulator=RowAccumulator()
        )

        assert result.requests_issued == 2

    @pytest.mark.asyncio
    async def test_no_requests(self):
        fetch_page, seen = _pages([])
        result = await PageExecutor().execute(
            requests=[], fetch_page=fetch_page, accumulator=RowAccumulator()
        )
        assert result.data == []
        assert seen == []

    def test_invalid_policy(self):
        with pytest.raises(ConfigurationError):
            PagePolicy(page_size=0)
