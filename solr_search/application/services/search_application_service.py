"""
Search application service.

Coordinates one search round trip: derive the query, call the search
backend, post-process the hits. Also provides the factory wiring the
HTTP adapters from configuration.
"""

import logging
import sys
from dataclasses import replace
from typing import Any, Dict, Optional

from ...core.entities import NavigationSession, QuerySpec, SearchOutcome, SiteConfig
from ...core.interfaces import SearchBackendInterface
from ...domain.query.query_builder import QueryBuilder
from ...domain.results.result_processor import ResultProcessor
from ...domain.scope.collection_scope_resolver import CollectionScopeResolver
from ...infrastructure.config.config_manager import ConfigManager
from ...infrastructure.fedora.resource_index_client import ResourceIndexClient
from ...infrastructure.session.memory_session_store import InMemorySessionStore
from ...infrastructure.solr.solr_client import SolrClient
from ...shared.exceptions import ErrorContextManager, SearchBackendError
from ...shared.logging import LogLevel, StructuredLogger, configure_logging

LOGGER_NAME = "solr_search.application"


class SearchApplicationService:
    """
    Application service for search operations.

    Backend failures are reported on the returned outcome rather than
    raised; every other error propagates.
    """

    def __init__(
        self,
        builder: QueryBuilder,
        processor: ResultProcessor,
        backend: SearchBackendInterface,
        config: SiteConfig,
        logger: Optional[StructuredLogger] = None
    ):
        """
        Initialize the service.

        Args:
            builder: Query builder
            processor: Result post-processor
            backend: Search backend client
            config: Site configuration snapshot
            logger: Optional structured logger
        """
        self.builder = builder
        self.processor = processor
        self.backend = backend
        self.config = config
        self.logger = logger or StructuredLogger(LOGGER_NAME, output=sys.stderr)

    def build_query(
        self,
        raw_query: Optional[str],
        params: Optional[Dict[str, Any]] = None
    ) -> QuerySpec:
        """
        Derive the query for a request without executing it.

        Args:
            raw_query: Query text as received
            params: Request parameters

        Returns:
            QuerySpec: Derived query
        """
        spec = self.builder.build(raw_query, params, self.config)
        for error in spec.errors:
            self.logger.warning(
                f"Query derivation recorded an error: {error.error_message}",
                stage=error.stage
            )
        return spec

    def search(
        self,
        raw_query: Optional[str],
        params: Optional[Dict[str, Any]] = None,
        path: str = ""
    ) -> SearchOutcome:
        """
        Execute a search.

        Args:
            raw_query: Query text as received
            params: Request parameters
            path: Path of the search page, kept with navigation state

        Returns:
            SearchOutcome: Processed records and pass-through backend sections
        """
        spec = self.build_query(raw_query, params)
        self.logger.info(
            "Executing search",
            query=spec.effective_query_text,
            offset=spec.offset,
            limit=spec.limit,
            filters=len(spec.filter_clauses)
        )

        try:
            response = self.backend.search(
                spec.effective_query_text,
                spec.offset,
                spec.limit,
                spec.to_backend_params(),
                method=self.config.http_method
            )
        except SearchBackendError as e:
            self.logger.warning(f"Search backend failed: {e.message}", **e.details)
            context = ErrorContextManager.create_context(
                e,
                stage="backend",
                query=spec.effective_query_text
            )
            return SearchOutcome(spec=spec, errors=list(spec.errors) + [context])

        body = response.get("response", {})
        records = self.processor.process(
            body.get("docs", []),
            spec,
            self.config,
            path=path or None
        )

        outcome = SearchOutcome(
            spec=spec,
            records=records,
            num_found=int(body.get("numFound", 0)),
            facet_counts=response.get("facet_counts", {}),
            highlighting=response.get("highlighting", {}),
            errors=list(spec.errors)
        )
        self.logger.info(
            "Search completed",
            num_found=outcome.num_found,
            returned=len(records)
        )
        return outcome

    def get_navigation_session(self, token: str) -> Optional[NavigationSession]:
        """
        Look up the navigation state stored for a results page.

        Args:
            token: Token handed out with the results

        Returns:
            Optional[NavigationSession]: Stored session, if still known
        """
        store = self.processor.session_store
        if store is None:
            return None
        return store.get(token)


def create_search_service(
    config_manager: Optional[ConfigManager] = None
) -> SearchApplicationService:
    """
    Create a search service from configuration.

    The Solr version is taken from ``search.solr_version`` when set and
    otherwise asked from the backend. Collection scoping and parent title
    lookups are only available when a Fedora URL is configured.

    Args:
        config_manager: Optional configuration manager

    Returns:
        SearchApplicationService: Wired service
    """
    config_manager = config_manager or ConfigManager()
    env = config_manager.get_config()

    level = LogLevel.parse(env.get_log_level())
    output = sys.stdout if env.get_log_output() == "stdout" else sys.stderr
    logging.basicConfig(level=level.numeric, format=env.get_log_format(), stream=output)
    logger = configure_logging(LOGGER_NAME, level, output)
    logger.add_context(environment=config_manager.environment)

    site_config = config_manager.get_site_config()
    backend = SolrClient(env.get_solr_url(), timeout=env.get_solr_timeout())

    if site_config.solr_version is None and env.detect_solr_version():
        version = backend.get_version()
        if version:
            site_config = replace(site_config, solr_version=version)
    logger.debug("Search backend configured", solr_version=site_config.solr_version)

    graph_store = None
    scope_resolver = None
    fedora_url = env.get_fedora_url()
    if fedora_url:
        username, password = env.get_fedora_credentials()
        graph_store = ResourceIndexClient(
            fedora_url,
            username=username,
            password=password,
            timeout=env.get_fedora_timeout()
        )
        scope_resolver = CollectionScopeResolver(
            graph_store,
            max_depth=site_config.scope_max_depth
        )
    else:
        logger.warning("No Fedora URL configured, collection scoping is disabled")

    builder = QueryBuilder(
        scope_resolver=scope_resolver,
        handler_has_qf=backend.request_handler_has_qf
    )
    processor = ResultProcessor(
        graph_store=graph_store,
        session_store=InMemorySessionStore(env.get_session_max_entries())
    )
    return SearchApplicationService(builder, processor, backend, site_config, logger=logger)
