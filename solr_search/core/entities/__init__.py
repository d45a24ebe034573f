"""
Core entities module.

This module provides access to all core entity classes used throughout
the package.
"""

from .config_entity import SiteConfig
from .facet_entity import FacetFieldConfig
from .query_entity import (
    FieldOrder,
    HighlightParams,
    QuerySpec
)
from .scope_entity import ScopeFilter
from .result_entity import (
    ResultRecord,
    NavigationSession,
    SearchOutcome
)

__all__ = [
    'SiteConfig',
    'FacetFieldConfig',
    'FieldOrder',
    'HighlightParams',
    'QuerySpec',
    'ScopeFilter',
    'ResultRecord',
    'NavigationSession',
    'SearchOutcome'
]
