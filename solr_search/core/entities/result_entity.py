"""
Data models for post-processed search results.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from .query_entity import QuerySpec
from ...shared.exceptions import ErrorContext


@dataclass
class ResultRecord:
    """
    One display-ready search hit.

    Enriched in place by the post-processor; callers should treat it as
    read-only once returned.
    """
    id: str
    source_document: Dict[str, Any]
    url: str
    content_models: List[str] = field(default_factory=list)
    datastream_ids: List[str] = field(default_factory=list)
    label: Optional[str] = None
    thumbnail_url: str = ""
    navigation_params: Dict[str, Any] = field(default_factory=dict)
    display_fields: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to dictionary representation."""
        return {
            'id': self.id,
            'url': self.url,
            'label': self.label,
            'content_models': self.content_models,
            'datastream_ids': self.datastream_ids,
            'thumbnail_url': self.thumbnail_url,
            'navigation_params': self.navigation_params,
            'display_fields': self.display_fields,
            'source_document': self.source_document
        }


@dataclass
class NavigationSession:
    """Everything needed to rebuild the originating query from a token."""
    token: str
    path: str
    query: str
    query_internal: str
    limit: int
    params: Dict[str, Any] = field(default_factory=dict)
    internal_params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SearchOutcome:
    """
    Result of one search round trip.

    Facet and highlighting sections from the backend are passed through
    unchanged.
    """
    spec: QuerySpec
    records: List[ResultRecord] = field(default_factory=list)
    num_found: int = 0
    facet_counts: Dict[str, Any] = field(default_factory=dict)
    highlighting: Dict[str, Any] = field(default_factory=dict)
    errors: List[ErrorContext] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.records

    def to_dict(self) -> Dict[str, Any]:
        """Convert outcome to dictionary representation."""
        return {
            'query': self.spec.to_dict(),
            'num_found': self.num_found,
            'records': [record.to_dict() for record in self.records],
            'facet_counts': self.facet_counts,
            'highlighting': self.highlighting,
            'errors': [error.to_dict() for error in self.errors]
        }
