"""Runtime layer: transport, batching, pagination and cross-referencing."""

from .cross_reference import (
    DOCUMENT_TYPE_PIPELINE,
    PARCEL_PIPELINE,
    PARTY_NAME_PIPELINE,
    REEL_PAGE_PIPELINE,
    UCC_FED_LIEN_PIPELINE,
    CrossReferenceOrchestrator,
    CrossReferencePipeline,
    CrossReferenceStep,
    assemble_composites,
)
from .fetcher import DatasetFetcher, DatasetResult
from .rest import HTTPClient

__all__ = [
    "HTTPClient",
    "DatasetFetcher",
    "DatasetResult",
    "CrossReferenceOrchestrator",
    "CrossReferencePipeline",
    "CrossReferenceStep",
    "assemble_composites",
    "UCC_FED_LIEN_PIPELINE",
    "REEL_PAGE_PIPELINE",
    "PARCEL_PIPELINE",
    "DOCUMENT_TYPE_PIPELINE",
    "PARTY_NAME_PIPELINE",
]
