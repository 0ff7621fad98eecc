"""Locator construction and manifest serialization services."""

from .locator_service import LocatorBuilderImpl
from .manifest_service import ManifestService

__all__ = ["LocatorBuilderImpl", "ManifestService"]
