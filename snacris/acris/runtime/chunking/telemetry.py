"""Structured logging for batching and pagination.

This module provides telemetry hooks for the chunking layer, emitting
structured log records for observability.
"""

from __future__ import annotations

import logging

from .definitions import PageResult

logger = logging.getLogger(__name__)


def log_batch_plan(
    *,
    dataset: str,
    total_identifiers: int,
    total_batches: int,
    batch_size: int,
) -> None:
    """Log batch plan creation.

    Args:
        dataset: Dataset name
        total_identifiers: Size of the identifier collection
        total_batches: Number of batches planned
        batch_size: Maximum identifiers per batch
    """
    logger.info(
        "batch_plan_created",
        extra={
            "dataset": dataset,
            "total_identifiers": total_identifiers,
            "total_batches": total_batches,
            "batch_size": batch_size,
        },
    )


def log_page_completed(
    *,
    dataset: str,
    offset: int,
    rows_returned: int,
    latency_ms: float | None = None,
) -> None:
    """Log completion of a single page.

    Args:
        dataset: Dataset name
        offset: Offset of the page
        rows_returned: Rows the page returned
        latency_ms: Latency in milliseconds (optional)
    """
    logger.debug(
        "page_completed",
        extra={
            "dataset": dataset,
            "offset": offset,
            "rows_returned": rows_returned,
            "latency_ms": latency_ms,
        },
    )


def log_pagination_complete(*, dataset: str, result: PageResult) -> None:
    logger.info(
        "pagination_complete",
        extra={
            "dataset": dataset,
            "descriptors": result.descriptors,
            "requests_issued": result.requests_issued,
            "total_rows": result.total_rows,
        },
    )


def log_fetch_error(
    *,
    dataset: str,
    error_type: str,
    error_message: str,
    status_code: int | None = None,
) -> None:
    """Log a transport failure.

    The raw error stays in the log; callers only see the dataset-scoped error.

    Args:
        dataset: Dataset name
        error_type: Exception class name
        error_message: Exception message
        status_code: HTTP status, when the server answered
    """
    logger.error(
        "fetch_error",
        extra={
            "dataset": dataset,
            "error_type": error_type,
            "error_message": error_message,
            "status_code": status_code,
        },
    )
