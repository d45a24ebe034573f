"""
Result post-processing.

Turns raw backend hits into ResultRecord objects: identifiers, URLs,
labels (with page relabeling), thumbnails, search navigation state and
the shaped display fields.
"""

import logging
import secrets
from typing import Any, Dict, List, Optional, Sequence

from ...core.entities import (
    NavigationSession,
    QuerySpec,
    ResultRecord,
    SiteConfig
)
from ...core.entities.scope_entity import (
    NEWSPAPER_PAGE_CMODEL,
    PAGE_CMODEL,
    strip_fedora_prefix
)
from ...core.interfaces import (
    FieldAccessCheck,
    GraphStoreInterface,
    ResultAlterHook,
    SessionStoreInterface
)
from ...shared.exceptions import ErrorContextManager, GraphStoreError
from .field_transforms import (
    PURL_FIELD,
    build_field_transforms,
    extract_purl,
    first_value
)

logger = logging.getLogger(__name__)

THUMBNAIL_DATASTREAM = "TN"
NAVIGATION_TOKEN_PARAM = "search_nav_id"
NAVIGATION_OFFSET_PARAM = "search_nav_offset"


def _allow_all(field_name: str) -> bool:
    return True


class ResultProcessor:
    """
    Post-processor for backend hits.

    Parent titles are looked up once per ``process`` call and cached for
    the remaining hits of the same page.
    """

    def __init__(
        self,
        graph_store: Optional[GraphStoreInterface] = None,
        session_store: Optional[SessionStoreInterface] = None,
        hooks: Sequence[ResultAlterHook] = (),
        field_access: Optional[FieldAccessCheck] = None
    ):
        """
        Initialize the processor.

        Args:
            graph_store: Graph store used for parent title lookups
            session_store: Store for search navigation sessions
            hooks: Result alter hooks, run in order after processing
            field_access: Predicate telling whether the caller may see a field
        """
        self.graph_store = graph_store
        self.session_store = session_store
        self.hooks: List[ResultAlterHook] = list(hooks)
        self.field_access = field_access or _allow_all
        self._title_cache: Dict[str, Optional[str]] = {}

    def register_hook(self, hook: ResultAlterHook) -> None:
        """Append a result alter hook."""
        self.hooks.append(hook)

    def process(
        self,
        raw_hits: List[Dict[str, Any]],
        spec: QuerySpec,
        config: SiteConfig,
        path: Optional[str] = None
    ) -> List[ResultRecord]:
        """
        Build display records for a page of hits.

        Args:
            raw_hits: ``response.docs`` from the backend
            spec: Query the hits were produced by
            config: Site configuration snapshot
            path: Path of the search page, stored with navigation state

        Returns:
            List[ResultRecord]: One record per hit, in backend order
        """
        self._title_cache = {}
        records = [self._build_record(doc, config) for doc in raw_hits or []]

        for record in records:
            record.display_fields = self.prepare_doc(record.source_document, spec, config)

        if records and config.search_navigation and self.session_store is not None:
            self._attach_navigation(records, spec, config, path)

        self._run_hooks(records, spec)
        return records

    def _build_record(self, doc: Dict[str, Any], config: SiteConfig) -> ResultRecord:
        pid = str(first_value(doc.get(config.identifier_field)) or "")
        record = ResultRecord(
            id=pid,
            source_document=doc,
            url=config.object_path.format(pid=pid)
        )

        if config.content_model_field in doc:
            record.content_models = [
                strip_fedora_prefix(model)
                for model in self._values(doc[config.content_model_field])
            ]
        if config.datastream_field in doc:
            record.datastream_ids = [str(ds) for ds in self._values(doc[config.datastream_field])]

        label = doc.get(config.object_label_field)
        if isinstance(label, (list, tuple)):
            label = ", ".join(str(item) for item in label)
        record.label = label

        self._relabel_page(record, doc, config)

        has_thumbnail = (
            config.datastream_field not in doc
            or THUMBNAIL_DATASTREAM in record.datastream_ids
        )
        record.thumbnail_url = (
            config.thumbnail_path.format(pid=pid) if has_thumbnail
            else config.default_thumbnail
        )
        return record

    def _relabel_page(self, record: ResultRecord, doc: Dict[str, Any], config: SiteConfig) -> None:
        if NEWSPAPER_PAGE_CMODEL in record.content_models:
            template = "{title} (PAGE {number})"
        elif PAGE_CMODEL in record.content_models:
            template = "{title} ({number})"
        else:
            return

        number = first_value(doc.get(config.page_number_field))
        parent = first_value(doc.get(config.page_parent_field))
        if number is None or not parent:
            return

        title = self.parent_title(strip_fedora_prefix(parent))
        if title is None:
            logger.debug(f"No label found for parent of {record.id}")
            record.label = None
            return
        record.label = template.format(title=title, number=number)

    def parent_title(self, pid: str) -> Optional[str]:
        """Label of a parent object, None when it cannot be resolved."""
        if pid in self._title_cache:
            return self._title_cache[pid]
        title = None
        if self.graph_store is not None:
            try:
                title = self.graph_store.label_of(pid)
            except GraphStoreError as e:
                logger.warning(f"Label lookup for {pid} failed: {e}")
        self._title_cache[pid] = title
        return title

    def prepare_doc(
        self,
        doc: Dict[str, Any],
        spec: QuerySpec,
        config: SiteConfig
    ) -> Dict[str, Any]:
        """
        Shape a document's fields for display.

        Args:
            doc: Raw backend document
            spec: Originating query
            config: Site configuration snapshot

        Returns:
            Dict[str, Any]: Visible fields with display values, plus the
            ``PURL`` pseudo-field when a location URL points at one
        """
        transforms = build_field_transforms(config)
        allow_list = set(config.result_fields)
        has_display_title = bool(doc.get(config.display_title_field))

        shaped: Dict[str, Any] = {}
        for name, value in doc.items():
            if name == config.title_field and has_display_title:
                continue
            if not self.field_access(name):
                continue
            if allow_list and name not in allow_list:
                continue

            if name in config.full_text_fields and not spec.is_full_text_query:
                value = ""
            elif name in transforms:
                value = transforms[name](value, self.parent_title)
            shaped[name] = value

        purl = extract_purl(doc.get(config.location_url_field))
        if purl:
            shaped[PURL_FIELD] = purl
        return shaped

    def _attach_navigation(
        self,
        records: List[ResultRecord],
        spec: QuerySpec,
        config: SiteConfig,
        path: Optional[str]
    ) -> None:
        token = secrets.token_hex(16)
        session = NavigationSession(
            token=token,
            path=path or config.search_path,
            query=spec.raw_query_text,
            query_internal=spec.effective_query_text,
            limit=spec.limit,
            params=spec.to_backend_params(),
            internal_params=dict(spec.internal_params)
        )
        self.session_store.put(token, session)

        for position, record in enumerate(records):
            record.navigation_params = {
                NAVIGATION_TOKEN_PARAM: token,
                NAVIGATION_OFFSET_PARAM: spec.offset + position
            }

    def _run_hooks(self, records: List[ResultRecord], spec: QuerySpec) -> None:
        for hook in self.hooks:
            name = getattr(hook, '__name__', hook.__class__.__name__)
            try:
                hook(records, spec)
            except Exception as e:
                logger.exception(f"Result alter hook {name} failed")
                spec.errors.append(
                    ErrorContextManager.create_context(e, stage="result_hook", hook=name)
                )

    @staticmethod
    def _values(value: Any) -> List[Any]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]
