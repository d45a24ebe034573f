"""
Data models for compiled search queries.

This module contains the QuerySpec produced by the query builder and the
small value types it is composed of.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from ...shared.exceptions import ErrorContext


@dataclass(frozen=True)
class FieldOrder:
    """A single sort criterion."""
    field: str
    order: str = "asc"

    def __str__(self) -> str:
        return f"{self.field} {self.order}".strip()


@dataclass(frozen=True)
class HighlightParams:
    """Highlighting parameter bundle."""
    fields: str
    snippets: int = 1000
    frag_size: int = 400
    max_analyzed_chars: int = 2000000
    markup_pre: str = '<span class="solr-highlight">'
    markup_post: str = '</span>'

    def to_params(self) -> Dict[str, Any]:
        """Render as backend highlighting parameters."""
        return {
            'hl': 'true',
            'hl.fl': self.fields,
            'hl.snippets': self.snippets,
            'hl.fragsize': self.frag_size,
            'hl.maxAnalyzedChars': self.max_analyzed_chars,
            'hl.simple.pre': self.markup_pre,
            'hl.simple.post': self.markup_post
        }


@dataclass
class QuerySpec:
    """
    Fully derived search request.

    ``raw_query_text`` is the decoded text shown back to the user (a single
    space for an empty search). ``effective_query_text`` is what is sent to
    the backend and is never empty.
    """
    raw_query_text: str
    effective_query_text: str
    limit: int
    page: int = 0
    offset: int = 0
    def_type: Optional[str] = None
    sort: List[FieldOrder] = field(default_factory=list)
    facet_params: Dict[str, Any] = field(default_factory=dict)
    date_or_range_params: Dict[str, Any] = field(default_factory=dict)
    highlight_params: Optional[HighlightParams] = None
    filter_clauses: List[str] = field(default_factory=list)
    query_fields: Optional[str] = None
    display_tag: str = "default"
    internal_params: Dict[str, Any] = field(default_factory=dict)
    is_empty_query: bool = False
    is_full_text_query: bool = False
    errors: List[ErrorContext] = field(default_factory=list)

    def recompute_offset(self) -> int:
        """Derive the offset from the current page and limit."""
        self.offset = max(0, self.page) * self.limit
        return self.offset

    def sort_string(self) -> str:
        return ",".join(str(order) for order in self.sort)

    def to_backend_params(self) -> Dict[str, Any]:
        """
        Flatten the query into the backend parameter map.

        Query text, offset and limit are passed to the backend separately
        and are not part of the map.
        """
        params: Dict[str, Any] = {}
        if self.def_type:
            params['defType'] = self.def_type
        if self.sort:
            params['sort'] = self.sort_string()
        params.update(self.facet_params)
        params.update(self.date_or_range_params)
        if self.highlight_params is not None:
            params.update(self.highlight_params.to_params())
        if self.filter_clauses:
            params['fq'] = list(self.filter_clauses)
        if self.query_fields:
            params['qf'] = self.query_fields
        return params

    def to_dict(self) -> Dict[str, Any]:
        """Convert spec to dictionary representation."""
        return {
            'raw_query_text': self.raw_query_text,
            'effective_query_text': self.effective_query_text,
            'offset': self.offset,
            'limit': self.limit,
            'page': self.page,
            'def_type': self.def_type,
            'sort': [str(order) for order in self.sort],
            'facet_params': self.facet_params,
            'date_or_range_params': self.date_or_range_params,
            'highlight_params': (
                self.highlight_params.to_params() if self.highlight_params else None
            ),
            'filter_clauses': self.filter_clauses,
            'query_fields': self.query_fields,
            'display_tag': self.display_tag,
            'internal_params': self.internal_params,
            'errors': [error.to_dict() for error in self.errors]
        }
