"""SNACRIS ACRIS - Cross-reference query engine for NYC ACRIS open data."""

from .api import AcrisAPI, DatasetAPI
from .core import (
    AcrisError,
    ConfigurationError,
    CrossReferenceError,
    DatasetKind,
    MalformedQueryError,
    MatchKind,
    NotFoundError,
    Projection,
    PropertyType,
    ProviderError,
    RateLimitError,
    ValidationError,
)
from .datasets import (
    DATASETS,
    DatasetDescriptor,
    build_filter_expression,
    dataset_for,
    get_dataset,
    list_datasets,
)
from .models import CompositeRecord
from .query import FilterExpression, SoqlRequest, build_request
from .runtime import (
    DOCUMENT_TYPE_PIPELINE,
    PARCEL_PIPELINE,
    PARTY_NAME_PIPELINE,
    REEL_PAGE_PIPELINE,
    UCC_FED_LIEN_PIPELINE,
    CrossReferenceOrchestrator,
    CrossReferencePipeline,
    CrossReferenceStep,
    DatasetFetcher,
    DatasetResult,
    HTTPClient,
)
from .runtime.chunking import BatchPlanner, PageExecutor, plan_batches

__version__ = "0.1.0"

__all__ = [
    # API
    "AcrisAPI",
    "DatasetAPI",
    # Enums
    "PropertyType",
    "DatasetKind",
    "MatchKind",
    "Projection",
    # Exceptions
    "AcrisError",
    "ConfigurationError",
    "ValidationError",
    "ProviderError",
    "MalformedQueryError",
    "RateLimitError",
    "NotFoundError",
    "CrossReferenceError",
    # Datasets
    "DATASETS",
    "DatasetDescriptor",
    "get_dataset",
    "dataset_for",
    "list_datasets",
    "build_filter_expression",
    # Query
    "FilterExpression",
    "SoqlRequest",
    "build_request",
    # Runtime
    "HTTPClient",
    "DatasetFetcher",
    "DatasetResult",
    "BatchPlanner",
    "PageExecutor",
    "plan_batches",
    "CrossReferenceOrchestrator",
    "CrossReferencePipeline",
    "CrossReferenceStep",
    "UCC_FED_LIEN_PIPELINE",
    "REEL_PAGE_PIPELINE",
    "PARCEL_PIPELINE",
    "DOCUMENT_TYPE_PIPELINE",
    "PARTY_NAME_PIPELINE",
    # Models
    "CompositeRecord",
]
