"""High-level API."""

from .acris_api import AcrisAPI, DatasetAPI

__all__ = ["AcrisAPI", "DatasetAPI"]
