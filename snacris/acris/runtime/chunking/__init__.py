"""Batching and pagination layer.

This module provides the reusable logic that keeps requests within the
external API's limits: identifier batching for membership conditions and
page-by-page execution with exhaustion detection.

Architecture:
    The chunking layer consists of:
    - definitions.py: Policy structures and the pure pagination step
    - planners.py: Identifier batch planning (BatchPlanner)
    - executors.py: Paged execution and aggregation (PageExecutor)
    - telemetry.py: Structured logging
"""

from __future__ import annotations

from .definitions import (
    BatchPolicy,
    IdentifierBatch,
    PagePolicy,
    PageResult,
    PageStep,
    next_page,
)
from .executors import IdentifierAccumulator, PageExecutor, RowAccumulator
from .planners import BatchPlanner, plan_batches

__all__ = [
    "BatchPolicy",
    "PagePolicy",
    "IdentifierBatch",
    "PageStep",
    "PageResult",
    "next_page",
    "BatchPlanner",
    "plan_batches",
    "PageExecutor",
    "RowAccumulator",
    "IdentifierAccumulator",
]
