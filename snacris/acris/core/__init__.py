"""Core components."""

from .enums import DatasetKind, MatchKind, Projection, PropertyType
from .exceptions import (
    AcrisError,
    ConfigurationError,
    CrossReferenceError,
    MalformedQueryError,
    NotFoundError,
    ProviderError,
    RateLimitError,
    ValidationError,
)

__all__ = [
    "PropertyType",
    "DatasetKind",
    "MatchKind",
    "Projection",
    "AcrisError",
    "ConfigurationError",
    "ValidationError",
    "ProviderError",
    "MalformedQueryError",
    "RateLimitError",
    "NotFoundError",
    "CrossReferenceError",
]
