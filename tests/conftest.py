"""
Test configuration and fixtures for the search package tests.
"""

import pytest
from typing import Dict, List, Optional, Sequence, Tuple
from unittest.mock import Mock

from solr_search.core.entities import QuerySpec, SiteConfig
from solr_search.core.interfaces import GraphStoreInterface
from solr_search.domain.query.query_builder import QueryBuilder
from solr_search.domain.results.result_processor import ResultProcessor
from solr_search.domain.scope.collection_scope_resolver import CollectionScopeResolver
from solr_search.infrastructure.session.memory_session_store import InMemorySessionStore
from solr_search.application.services.search_application_service import (
    SearchApplicationService,
)


class FakeGraphStore(GraphStoreInterface):
    """
    In-memory membership graph.

    ``members`` maps a collection PID to (member PID, content model) pairs;
    lookups honour the requested type filter the way the resource index
    does.
    """

    def __init__(
        self,
        members: Optional[Dict[str, List[Tuple[str, str]]]] = None,
        labels: Optional[Dict[str, str]] = None,
    ):
        self.members = members or {}
        self.labels = labels or {}
        self.queried: List[str] = []
        self.label_lookups: List[str] = []

    def subjects_of_type(
        self, relation: str, obj: str, type_filter: Sequence[str]
    ) -> List[Tuple[str, str]]:
        self.queried.append(obj)
        return [
            (f"info:fedora/{pid}", f"info:fedora/{model}")
            for pid, model in self.members.get(obj, [])
            if model in type_filter
        ]

    def label_of(self, subject: str) -> Optional[str]:
        self.label_lookups.append(subject)
        return self.labels.get(subject)


@pytest.fixture
def site_config() -> SiteConfig:
    """Default site configuration."""
    return SiteConfig()


@pytest.fixture
def make_config():
    """Factory for site configurations with overrides."""
    def _make(**overrides) -> SiteConfig:
        return SiteConfig.from_dict(overrides)
    return _make


@pytest.fixture
def make_graph_store():
    """Factory for in-memory graph stores."""
    return FakeGraphStore


@pytest.fixture
def graph_store() -> FakeGraphStore:
    """Empty in-memory graph store."""
    return FakeGraphStore()


@pytest.fixture
def scope_resolver(graph_store) -> CollectionScopeResolver:
    return CollectionScopeResolver(graph_store)


@pytest.fixture
def builder() -> QueryBuilder:
    """Query builder without scope resolver."""
    return QueryBuilder()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def processor(graph_store, session_store) -> ResultProcessor:
    return ResultProcessor(graph_store=graph_store, session_store=session_store)


@pytest.fixture
def query_spec() -> QuerySpec:
    """Plain non-empty query on the third page of ten."""
    spec = QuerySpec(
        raw_query_text="river",
        effective_query_text="river",
        limit=10,
        page=2,
    )
    spec.recompute_offset()
    return spec


@pytest.fixture
def solr_docs() -> List[Dict]:
    """Two backend documents as Solr returns them."""
    return [
        {
            "PID": "ns:1",
            "fgs_label_s": "River photograph",
            "RELS_EXT_hasModel_uri_ms": ["info:fedora/islandora:sp_basic_image"],
            "fedora_datastreams_ms": ["OBJ", "TN"],
        },
        {
            "PID": "ns:2",
            "fgs_label_s": "River report",
            "RELS_EXT_hasModel_uri_ms": ["info:fedora/islandora:sp_pdf"],
            "fedora_datastreams_ms": ["OBJ"],
        },
    ]


@pytest.fixture
def mock_backend(solr_docs):
    """Mock search backend answering with two documents."""
    backend = Mock()
    backend.search.return_value = {
        "responseHeader": {"status": 0},
        "response": {"numFound": 2, "start": 0, "docs": solr_docs},
        "facet_counts": {
            "facet_fields": {"RELS_EXT_hasModel_uri_ms": ["info:fedora/islandora:sp_pdf", 1]}
        },
        "highlighting": {},
    }
    backend.get_version.return_value = None
    backend.request_handler_has_qf.return_value = False
    return backend


@pytest.fixture
def search_service(builder, processor, mock_backend, site_config):
    """Search service with a mocked backend and a mocked logger."""
    return SearchApplicationService(
        builder=builder,
        processor=processor,
        backend=mock_backend,
        config=site_config,
        logger=Mock(),
    )
