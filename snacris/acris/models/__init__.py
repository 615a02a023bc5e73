"""Data models."""

from .composite import CompositeRecord

__all__ = ["CompositeRecord"]
