"""
Site configuration snapshot.

Every component receives a SiteConfig explicitly. It is frozen so a
single request can never observe configuration changing underneath it.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, Any, Optional, Tuple


DEFAULT_QUERY_FIELDS = (
    "dc.title^5 dc.subject^2 dc.description^2 dc.creator^2 "
    "dc.contributor^1 dc.type^1 PID^0.5"
)


@dataclass(frozen=True)
class SiteConfig:
    """
    Immutable search configuration.

    Field defaults double as the documented configuration defaults; a
    missing key is never an error.
    """
    # Query derivation
    base_query: str = "*:*"
    base_sort: str = ""
    base_filter: str = ""
    results_per_page: int = 20
    primary_display: str = "default"
    request_handler: str = ""
    query_fields: str = DEFAULT_QUERY_FIELDS
    use_ui_qf: bool = False
    namespace_restriction: str = ""
    repository_root_id: str = "root-collection"
    full_text_fields: Tuple[str, ...] = ("OCR_t", "text_nodes_HOCR_hlt")
    highlight_fields: str = "OCR_t"
    scope_max_depth: int = 16

    # Facets
    facet_fields: Tuple[Dict[str, Any], ...] = ()
    facet_min_count: int = 2
    facet_max_count: int = 20
    facet_display_limit: int = 10
    solr_version: Optional[str] = None

    # Results
    identifier_field: str = "PID"
    object_label_field: str = "fgs_label_s"
    content_model_field: str = "RELS_EXT_hasModel_uri_ms"
    datastream_field: str = "fedora_datastreams_ms"
    page_number_field: str = "RELS_EXT_isSequenceNumber_literal_ms"
    page_parent_field: str = "RELS_EXT_isPageOf_uri_ms"
    title_field: str = "dc.title"
    display_title_field: str = "mods_titleInfo_display_s"
    location_url_field: str = "mods_location_url_ms"
    rights_code_field: str = "rights_code_s"
    reuse_code_field: str = "reuse_code_s"
    parent_fields: Tuple[str, ...] = (
        "RELS_EXT_isMemberOfCollection_uri_ms",
        "RELS_EXT_isMemberOf_uri_ms",
        "RELS_EXT_isPageOf_uri_ms",
    )
    result_fields: Tuple[str, ...] = ()
    object_path: str = "islandora/object/{pid}"
    thumbnail_path: str = "islandora/object/{pid}/datastream/TN/view"
    default_thumbnail: str = "images/defaultimg.png"
    search_path: str = "islandora/search"
    search_navigation: bool = False

    # Transport
    http_method: str = "GET"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'SiteConfig':
        """
        Create a snapshot from a configuration mapping.

        Unknown keys are ignored, list values become tuples and
        ``None`` values fall back to the defaults.
        """
        data = data or {}
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            if isinstance(value, list):
                value = tuple(value)
            values[key] = value
        if "solr_version" in values:
            values["solr_version"] = str(values["solr_version"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
