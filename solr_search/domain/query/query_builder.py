"""
Query parameter builder.

Derives a complete QuerySpec from the raw query text, the request
parameters and the site configuration. The derivation steps run in a
fixed order: later steps look at state produced by earlier ones (whether
the query is empty, whether it targets full text, which relevance mode is
active).
"""

import copy
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence
from urllib.parse import unquote_plus

from ...core.entities import (
    FieldOrder,
    HighlightParams,
    QuerySpec,
    SiteConfig
)
from ...core.entities.scope_entity import (
    COLLECTION_CMODEL,
    NEWSPAPER_ISSUE_CMODEL,
    NEWSPAPER_PAGE_CMODEL,
    PAGE_CMODEL,
    strip_fedora_prefix
)
from ...core.interfaces import QueryAlterHook
from ...shared.exceptions import ErrorContext, ErrorContextManager, GraphStoreError
from ..scope.collection_scope_resolver import CollectionScopeResolver
from .date_facet_generator import DateFacetGenerator, supports_legacy_date_facets
from .facet_config_adapter import FacetConfigAdapter

logger = logging.getLogger(__name__)

RELEVANCE_MODES = ("dismax", "edismax")

# Decoded query texts that carry no search terms.
EMPTY_QUERY_SENTINELS = frozenset(["", " ", "/", "%2F", "%252F"])

SLASH_PLACEHOLDER = "~slsh~"
EMPTY_QUERY_SORT = FieldOrder("title_sort", "asc")
SORT_ORDERS = ("asc", "desc")

PID_EXACT_PATTERN = re.compile(r"^PID:\(([^:()\s]+):([^()\s]+)\)$")

# Keys describing pagination or the query text itself.
STRIPPED_PARAMS = ("q", "page")

MEMBERSHIP_EXCLUSIONS = (
    "-RELS_EXT_isMemberOf_uri_ms:[* TO *]",
    "-RELS_EXT_isConstituentOf_uri_ms:[* TO *]",
)
RELEVANCE_EXCLUDED_MODELS = (PAGE_CMODEL, NEWSPAPER_PAGE_CMODEL)
FULL_TEXT_EXCLUDED_MODEL = NEWSPAPER_ISSUE_CMODEL

LEGACY_FULL_TEXT_SEARCH_TYPE = "fulltext"
ADVANCED_SEARCH_TYPE = "advanced"

_SOLR_SPECIAL_CHARS = re.compile(r'([+\-&|!(){}\[\]^"~*?:\\/])')


def solr_escape(value: str) -> str:
    """Backslash-escape Lucene query syntax characters."""
    return _SOLR_SPECIAL_CHARS.sub(r"\\\1", value)


def legacy_full_text_collection_rule(params: Dict[str, Any], is_full_text: bool) -> bool:
    """
    Legacy full-text-with-collection carve-out.

    Requests submitted by the legacy full-text search form with a
    collection scope search across every base filter: when this rule
    fires the builder drops all configured base filters and resolves the
    collection scope even for the repository root.

    Args:
        params: Internal request parameters
        is_full_text: Whether the query targets a full-text field

    Returns:
        bool: True when the carve-out applies
    """
    return (
        params.get('search_type') == LEGACY_FULL_TEXT_SEARCH_TYPE
        and bool(params.get('collection'))
        and is_full_text
    )


def _to_int(value: Any, default: int) -> int:
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_list(value: Any) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and str(v) != ""]
    return [str(value)]


def _split_lines(value: str) -> List[str]:
    return [line.strip() for line in re.split(r"\r\n|\n|\r", value or "") if line.strip()]


class QueryBuilder:
    """
    Builds QuerySpec objects.

    Apart from the registered query hooks, ``build`` is a pure function of
    its arguments: the same raw query, parameters and configuration always
    give an equal spec.
    """

    def __init__(
        self,
        date_facet_generator: Optional[DateFacetGenerator] = None,
        scope_resolver: Optional[CollectionScopeResolver] = None,
        hooks: Sequence[QueryAlterHook] = (),
        handler_has_qf: Optional[Callable[[str], bool]] = None
    ):
        """
        Initialize the builder.

        Args:
            date_facet_generator: Generator for date/range facet parameters
            scope_resolver: Resolver for ``collection`` scoped searches
            hooks: Query alter hooks, run in order after derivation
            handler_has_qf: Callable reporting whether a request handler
                defines its own query fields
        """
        self.date_facet_generator = date_facet_generator or DateFacetGenerator()
        self.scope_resolver = scope_resolver
        self.hooks: List[QueryAlterHook] = list(hooks)
        self.handler_has_qf = handler_has_qf
        self._qf_cache: Dict[str, bool] = {}

    def register_hook(self, hook: QueryAlterHook) -> None:
        """Append a query alter hook."""
        self.hooks.append(hook)

    def build(
        self,
        raw_query: Optional[str],
        params: Optional[Dict[str, Any]],
        config: SiteConfig
    ) -> QuerySpec:
        """
        Build the query spec for a request.

        Args:
            raw_query: Query text as received (possibly URL encoded)
            params: Request parameters
            config: Site configuration snapshot

        Returns:
            QuerySpec: Derived query
        """
        params = copy.deepcopy(dict(params or {}))
        internal_params = {
            key: value for key, value in params.items()
            if key not in STRIPPED_PARAMS
        }

        relevance_mode = self.relevance_mode(internal_params)
        def_type = relevance_mode

        display_text = self.decode_query(raw_query)
        is_empty = display_text in EMPTY_QUERY_SENTINELS
        if is_empty:
            display_text = " "
            effective_text = config.base_query or "*:*"
            def_type = None
        else:
            effective_text = display_text

        sort = self.parse_sort(internal_params.get('sort'), is_empty, config)

        if not is_empty:
            display_text = self.escape_pid_query(display_text)
            effective_text = display_text

        display_tag = str(params.get('display') or config.primary_display)

        limit = _to_int(internal_params.get('limit'), config.results_per_page)
        if limit <= 0:
            limit = config.results_per_page
        page = _to_int(params.get('page', params.get('start')), 0)

        is_full_text = self.is_full_text_query(effective_text, config)

        spec = QuerySpec(
            raw_query_text=display_text,
            effective_query_text=effective_text,
            limit=limit,
            page=page,
            def_type=def_type,
            sort=sort,
            display_tag=display_tag,
            internal_params=internal_params,
            is_empty_query=is_empty,
            is_full_text_query=is_full_text
        )
        spec.recompute_offset()

        self._apply_facets(spec, config)

        if is_full_text:
            spec.highlight_params = HighlightParams(fields=config.highlight_fields)

        spec.filter_clauses = self._build_filters(
            internal_params, config, relevance_mode, is_empty, is_full_text, spec.errors
        )

        if relevance_mode and (
            config.use_ui_qf or not self._request_handler_has_qf(config.request_handler)
        ):
            spec.query_fields = config.query_fields

        self._run_hooks(spec)
        spec.recompute_offset()
        return spec

    @staticmethod
    def relevance_mode(internal_params: Dict[str, Any]) -> Optional[str]:
        """Relevance tuned query parser requested via ``type``, if any."""
        requested = internal_params.get('type')
        return requested if requested in RELEVANCE_MODES else None

    @staticmethod
    def decode_query(raw_query: Optional[str]) -> str:
        """URL-decode the query text and restore escaped slashes."""
        if raw_query is None:
            return ""
        return unquote_plus(str(raw_query)).replace(SLASH_PLACEHOLDER, "/")

    @staticmethod
    def escape_pid_query(text: str) -> str:
        """Rewrite ``PID:(ns:local)`` to ``PID:ns\\:local``."""
        match = PID_EXACT_PATTERN.match(text)
        if not match:
            return text
        namespace, local = match.groups()
        return f"PID:{namespace}\\:{local}"

    @staticmethod
    def is_full_text_query(text: str, config: SiteConfig) -> bool:
        return any(token and token in text for token in config.full_text_fields)

    @staticmethod
    def parse_sort(value: Any, is_empty: bool, config: SiteConfig) -> List[FieldOrder]:
        """
        Derive the sort criteria.

        A list is taken as verbatim ``"field order"`` pairs. A string is read
        as ``"field[ order]"`` where anything but ``asc``/``desc`` falls back
        to ascending.
        """
        if isinstance(value, (list, tuple)):
            orders = []
            for pair in value:
                parts = str(pair).split(None, 1)
                if parts:
                    orders.append(FieldOrder(parts[0], parts[1] if len(parts) > 1 else ""))
            if orders:
                return orders
        elif value is not None and str(value).strip():
            tokens = str(value).split()
            order = tokens[1] if len(tokens) > 1 and tokens[1] in SORT_ORDERS else "asc"
            return [FieldOrder(tokens[0], order)]

        if is_empty:
            return [EMPTY_QUERY_SORT]

        orders = []
        for pair in (config.base_sort or "").split(","):
            parts = pair.split(None, 1)
            if parts:
                orders.append(FieldOrder(parts[0], parts[1] if len(parts) > 1 else "asc"))
        return orders

    def _apply_facets(self, spec: QuerySpec, config: SiteConfig) -> None:
        adapter = FacetConfigAdapter(config)
        facet_params = adapter.global_params()
        if config.request_handler:
            facet_params['qt'] = config.request_handler

        plain_fields = [f.solr_field for f in adapter.plain_fields()]
        if plain_fields:
            facet_params['facet.field'] = plain_fields

        range_fields = adapter.range_fields()
        if range_fields:
            spec.date_or_range_params = self.date_facet_generator.generate(
                range_fields,
                supports_legacy_date_facets(config.solr_version)
            )

        default_sort = adapter.default_sort()
        for facet in adapter.facet_fields():
            if facet.sort_order and facet.sort_order != default_sort:
                facet_params[f"f.{facet.solr_field}.facet.sort"] = facet.sort_order

        spec.facet_params = facet_params

    def _build_filters(
        self,
        internal_params: Dict[str, Any],
        config: SiteConfig,
        relevance_mode: Optional[str],
        is_empty: bool,
        is_full_text: bool,
        errors: List[ErrorContext]
    ) -> List[str]:
        legacy_carve_out = legacy_full_text_collection_rule(internal_params, is_full_text)

        base_filters = [] if legacy_carve_out else _split_lines(config.base_filter)
        filters = list(base_filters)
        filters.extend(_as_list(internal_params.get('hidden_filter')))

        caller_filters = _as_list(internal_params.get('f'))
        if caller_filters:
            filters = caller_filters + filters

        scope_clause = self._scope_clause(
            internal_params, config, legacy_carve_out, is_empty, is_full_text, errors
        )
        if scope_clause:
            filters.append(scope_clause)

        if relevance_mode:
            if is_empty:
                filters.extend(MEMBERSHIP_EXCLUSIONS)
            else:
                filters.extend(
                    self._model_exclusion(config, model) for model in RELEVANCE_EXCLUDED_MODELS
                )
        elif is_full_text:
            filters.append(self._model_exclusion(config, FULL_TEXT_EXCLUDED_MODEL))

        namespace_filter = self.namespace_filter(config.namespace_restriction)
        if namespace_filter:
            filters.append(namespace_filter)

        return filters

    def _scope_clause(
        self,
        internal_params: Dict[str, Any],
        config: SiteConfig,
        legacy_carve_out: bool,
        is_empty: bool,
        is_full_text: bool,
        errors: List[ErrorContext]
    ) -> str:
        collection = internal_params.get('collection')
        if isinstance(collection, (list, tuple)):
            collection = collection[0] if collection else None
        if not collection:
            return ""

        collection = strip_fedora_prefix(collection)
        if collection == config.repository_root_id and not legacy_carve_out:
            return ""

        if self.scope_resolver is None:
            logger.warning(f"No scope resolver configured, ignoring collection {collection}")
            return ""

        is_advanced = internal_params.get('search_type') == ADVANCED_SEARCH_TYPE
        try:
            return self.scope_resolver.resolve(
                collection,
                (not is_empty) or is_advanced,
                is_full_text
            )
        except GraphStoreError as e:
            # Direct membership only; sub-collections cannot be expanded.
            logger.warning(f"Scope resolution for {collection} failed: {e}")
            errors.append(
                ErrorContextManager.create_context(e, stage="scope", collection=collection)
            )
            return self.scope_resolver.fragment(COLLECTION_CMODEL, collection)

    @staticmethod
    def _model_exclusion(config: SiteConfig, content_model: str) -> str:
        return f'-{config.content_model_field}:"info:fedora/{content_model}"'

    @staticmethod
    def namespace_filter(restriction: str) -> str:
        """OR of ``PID:<ns>\\:*`` clauses for a comma/space separated list."""
        namespaces = [ns for ns in re.split(r"[,|\s]+", (restriction or "").strip()) if ns]
        return " OR ".join(f"PID:{solr_escape(ns)}\\:*" for ns in namespaces)

    def _request_handler_has_qf(self, handler: str) -> bool:
        if self.handler_has_qf is None:
            return False
        if handler not in self._qf_cache:
            self._qf_cache[handler] = bool(self.handler_has_qf(handler))
        return self._qf_cache[handler]

    def _run_hooks(self, spec: QuerySpec) -> None:
        for hook in self.hooks:
            name = getattr(hook, '__name__', hook.__class__.__name__)
            try:
                hook(spec)
            except Exception as e:
                logger.exception(f"Query alter hook {name} failed")
                spec.errors.append(
                    ErrorContextManager.create_context(e, stage="query_hook", hook=name)
                )
