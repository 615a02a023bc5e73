"""Unit tests for the dataset fetcher."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from snacris.acris.core import (
    MalformedQueryError,
    NotFoundError,
    ProviderError,
    RateLimitError,
    ValidationError,
)
from snacris.acris.runtime import DatasetFetcher, DatasetResult
from snacris.acris.runtime.chunking import PagePolicy


def _response_error(status: int, headers: dict | None = None) -> aiohttp.ClientResponseError:
    return aiohttp.ClientResponseError(
        request_info=MagicMock(), history=(), status=status, message="boom", headers=headers
    )


def _rows(prefix: str, count: int) -> list[dict]:
    return [{"document_id": f"{prefix}{i}", "crfn": str(i)} for i in range(count)]


class TestFetchRecords:
    """Row aggregation."""

    @pytest.mark.asyncio
    async def test_paginates_until_short_page(self, fake_socrata):
        client = fake_socrata({"real_property_master": _rows("D", 2400)})
        fetcher = DatasetFetcher(client)

        rows = await fetcher.fetch_records("real_property_master", {"doc_type": "DEED"})

        assert len(rows) == 2400
        assert [c["$offset"] for c in client.calls_for("real_property_master")] == ["0", "1000", "2000"]

    @pytest.mark.asyncio
    async def test_exact_multiple_ends_on_empty_page(self, fake_socrata):
        client = fake_socrata({"real_property_master": _rows("D", 3000)})
        rows = await DatasetFetcher(client).fetch_records("real_property_master")

        assert len(rows) == 3000
        assert len(client.urls) == 4

    @pytest.mark.asyncio
    async def test_empty_result_is_not_found(self, fake_socrata):
        fetcher = DatasetFetcher(fake_socrata())
        with pytest.raises(NotFoundError) as exc_info:
            await fetcher.fetch_records("real_property_master", {"crfn": "X"})
        assert exc_info.value.dataset == "real_property_master"


class TestFetchCount:
    """Count projection."""

    @pytest.mark.asyncio
    async def test_count_is_integer_without_page_window(self, fake_socrata):
        client = fake_socrata({"real_property_legals": _rows("D", 42)})
        count = await DatasetFetcher(client).fetch_record_count("real_property_legals", {"borough": "1"})

        assert count == 42
        (call,) = client.calls_for("real_property_legals")
        assert "$limit" not in call
        assert "$offset" not in call

    @pytest.mark.asyncio
    async def test_missing_count_is_not_found(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=[])
        with pytest.raises(NotFoundError):
            await DatasetFetcher(client).fetch_record_count("real_property_legals")

    @pytest.mark.asyncio
    async def test_non_numeric_count(self):
        client = MagicMock()
        client.get = AsyncMock(return_value=[{"count": "many"}])
        with pytest.raises(ProviderError):
            await DatasetFetcher(client).fetch_record_count("real_property_legals")


class TestFetchDocumentIds:
    """Identifier aggregation."""

    @pytest.mark.asyncio
    async def test_unique_ids(self, fake_socrata):
        rows = [{"document_id": "D1"}, {"document_id": "D1"}, {"document_id": "D2"}]
        client = fake_socrata({"real_property_parties": rows})

        ids = await DatasetFetcher(client).fetch_document_ids("real_property_parties", {"name": "smith"})

        assert ids == ["D1", "D2"]
        assert client.calls_for("real_property_parties")[0]["$select"] == "document_id"

    @pytest.mark.asyncio
    async def test_cross_ref_batches_membership(self, fake_socrata):
        legals = _rows("D", 10)
        client = fake_socrata({"real_property_legals": legals})
        fetcher = DatasetFetcher(client, batch_size=4)

        ids = await fetcher.fetch_document_ids_cross_ref(
            "real_property_legals", {"borough": "1"}, ["D1", "D3", "D5", "D7", "D9", "X1"]
        )

        assert ids == ["D1", "D3", "D5", "D7", "D9"]
        calls = client.calls_for("real_property_legals")
        assert len(calls) == 2
        assert calls[0]["$where"] == "borough=1 AND document_id IN ('D1', 'D3', 'D5', 'D7')"

    @pytest.mark.asyncio
    async def test_cross_ref_with_no_ids_issues_no_request(self, fake_socrata):
        client = fake_socrata()
        ids = await DatasetFetcher(client).fetch_document_ids_cross_ref("real_property_legals", {}, [])
        assert ids == []
        assert client.urls == []

    @pytest.mark.asyncio
    async def test_cross_ref_rejects_string(self, fake_socrata):
        with pytest.raises(ValidationError):
            await DatasetFetcher(fake_socrata()).fetch_document_ids_cross_ref(
                "real_property_legals", {}, "D1"
            )


class TestErrorMapping:
    """Transport failures normalized at the fetch boundary."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error,expected,status",
        [
            (_response_error(400), MalformedQueryError, 400),
            (_response_error(429, {"Retry-After": "5"}), RateLimitError, 429),
            (_response_error(503), ProviderError, 503),
            (aiohttp.ClientConnectionError("reset"), ProviderError, None),
            (asyncio.TimeoutError(), ProviderError, None),
            (json.JSONDecodeError("Expecting value", "<html>", 0), ProviderError, None),
        ],
    )
    async def test_errors_are_dataset_scoped(self, error, expected, status):
        client = MagicMock()
        client.get = AsyncMock(side_effect=error)

        with pytest.raises(expected) as exc_info:
            await DatasetFetcher(client).fetch_records("real_property_remarks")

        assert exc_info.value.dataset == "real_property_remarks"
        assert exc_info.value.status_code == status
        assert "real_property_remarks" in str(exc_info.value)
        assert exc_info.value.__cause__ is None

    @pytest.mark.asyncio
    async def test_retry_after_header(self):
        client = MagicMock()
        client.get = AsyncMock(side_effect=_response_error(429, {"Retry-After": "5"}))
        with pytest.raises(RateLimitError) as exc_info:
            await DatasetFetcher(client).fetch_records("real_property_remarks")
        assert exc_info.value.retry_after == 5

    @pytest.mark.asyncio
    async def test_unexpected_payload(self):
        client = MagicMock()
        client.get = AsyncMock(return_value={"error": True, "message": "query timeout"})
        with pytest.raises(ProviderError):
            await DatasetFetcher(client).fetch_records("real_property_remarks")


class TestFetchRecordsByDocumentIds:
    """Bulk fetch with the failure sentinel."""

    @pytest.mark.asyncio
    async def test_rows_across_batches(self, fake_socrata):
        client = fake_socrata({"real_property_master": _rows("D", 200)})
        fetcher = DatasetFetcher(client, records_batch_size=75)

        result = await fetcher.fetch_records_by_document_ids(
            "real_property_master", [f"D{i}" for i in range(160)]
        )

        assert not result.failed
        assert len(result) == 160
        assert len(client.calls_for("real_property_master")) == 3
        assert result.rows_for("D7") == [{"document_id": "D7", "crfn": "7"}]

    @pytest.mark.asyncio
    async def test_failure_returns_sentinel(self, fake_socrata):
        client = fake_socrata(failures={"real_property_master": _response_error(500)})
        result = await DatasetFetcher(client).fetch_records_by_document_ids(
            "real_property_master", ["D1"]
        )

        assert result == DatasetResult.failure("real_property_master")
        assert result.rows == ()

    @pytest.mark.asyncio
    async def test_zero_rows_is_not_failure(self, fake_socrata):
        result = await DatasetFetcher(fake_socrata()).fetch_records_by_document_ids(
            "real_property_master", ["D1"]
        )
        assert not result.failed
        assert len(result) == 0

    @pytest.mark.asyncio
    async def test_undecodable_body_returns_sentinel(self, fake_socrata):
        client = fake_socrata(
            failures={"real_property_master": json.JSONDecodeError("Expecting value", "<html>", 0)}
        )
        result = await DatasetFetcher(client).fetch_records_by_document_ids(
            "real_property_master", ["D1"]
        )

        assert result.failed

    def test_grouped_keeps_row_order_per_id(self):
        result = DatasetResult.success(
            "real_property_parties",
            [
                {"document_id": "D1", "name": "A"},
                {"document_id": "D2", "name": "B"},
                {"document_id": "D1", "name": "C"},
            ],
        )

        groups = result.grouped()

        assert list(groups) == ["D1", "D2"]
        assert [row["name"] for row in groups["D1"]] == ["A", "C"]
        assert groups["D2"] == result.rows_for("D2")


class TestLifecycle:
    """Client ownership."""

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self, fake_socrata):
        client = fake_socrata()
        async with DatasetFetcher(client):
            pass
        assert not client.closed

    def test_custom_page_policy(self, fake_socrata):
        fetcher = DatasetFetcher(fake_socrata(), page_policy=PagePolicy(page_size=50))
        assert fetcher._executor.page_size == 50
