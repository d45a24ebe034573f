"""
Exception types for the search package.

Only collaborator boundaries raise these; query derivation itself falls
back to defaults instead of failing.
"""

from typing import Any, Dict, Optional


class SolrSearchError(Exception):
    """Base class for all package errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class SearchBackendError(SolrSearchError):
    """The search backend could not be reached or returned garbage."""


class GraphStoreError(SolrSearchError):
    """The resource index query failed."""


class ConfigurationError(SolrSearchError):
    """Configuration files are missing or invalid."""
