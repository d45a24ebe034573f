"""
Error types and non-fatal error records.
"""

from .errors import (
    SolrSearchError,
    SearchBackendError,
    GraphStoreError,
    ConfigurationError
)
from .error_context import ErrorContext, ErrorContextManager

__all__ = [
    'SolrSearchError',
    'SearchBackendError',
    'GraphStoreError',
    'ConfigurationError',
    'ErrorContext',
    'ErrorContextManager'
]
