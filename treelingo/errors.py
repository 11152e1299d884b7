"""Error definitions for the Treelingo localization pass."""

from __future__ import annotations


class TreelingoError(Exception):
    """Base exception for all custom errors."""


class CatalogConfigurationError(TreelingoError):
    """Raised when translation catalogs or settings are misconfigured."""


class MalformedTreeError(TreelingoError):
    """Raised when a document node violates its capability contract."""
