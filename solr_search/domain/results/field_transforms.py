"""
Field transforms for result display.

Well-known Solr fields are rewritten into human readable values through a
closed table mapping field name to transform function. Lookup tables for
content models and rights/reuse codes live here as well.
"""

from typing import Any, Callable, Dict, Optional

from ...core.entities import SiteConfig
from ...core.entities.scope_entity import strip_fedora_prefix

CONTENT_MODEL_LABELS = {
    "islandora:collectionCModel": "Collection",
    "islandora:bookCModel": "Book",
    "islandora:pageCModel": "Page",
    "islandora:newspaperCModel": "Newspaper",
    "islandora:newspaperIssueCModel": "Newspaper Issue",
    "islandora:newspaperPageCModel": "Newspaper Page",
    "islandora:rootSerialCModel": "Serial",
    "islandora:intermediateSerialCModel": "Serial Section",
    "islandora:compoundCModel": "Compound Object",
    "islandora:sp_basic_image": "Image",
    "islandora:sp_large_image_cmodel": "Large Image",
    "islandora:sp_pdf": "PDF",
    "islandora:sp-audioCModel": "Audio",
    "islandora:sp_videoCModel": "Video",
    "ir:citationCModel": "Citation",
    "ir:thesisCModel": "Thesis",
}

RIGHTS_STATEMENT_LABELS = {
    "InC": "In Copyright",
    "InC-OW-EU": "In Copyright - EU Orphan Work",
    "InC-EDU": "In Copyright - Educational Use Permitted",
    "InC-NC": "In Copyright - Non-Commercial Use Permitted",
    "InC-RUU": "In Copyright - Rights-holder(s) Unlocatable or Unidentifiable",
    "NoC-CR": "No Copyright - Contractual Restrictions",
    "NoC-NC": "No Copyright - Non-Commercial Use Only",
    "NoC-OKLR": "No Copyright - Other Known Legal Restrictions",
    "NoC-US": "No Copyright - United States",
    "CNE": "Copyright Not Evaluated",
    "UND": "Copyright Undetermined",
    "NKC": "No Known Copyright",
}

REUSE_LABELS = {
    "CC0": "CC0 1.0 Universal Public Domain Dedication",
    "CC-BY": "Creative Commons Attribution",
    "CC-BY-SA": "Creative Commons Attribution-ShareAlike",
    "CC-BY-ND": "Creative Commons Attribution-NoDerivs",
    "CC-BY-NC": "Creative Commons Attribution-NonCommercial",
    "CC-BY-NC-SA": "Creative Commons Attribution-NonCommercial-ShareAlike",
    "CC-BY-NC-ND": "Creative Commons Attribution-NonCommercial-NoDerivs",
    "PDM": "Public Domain Mark",
}

PURL_FIELD = "PURL"
PURL_MARKER = "purl."

# A transform receives the raw field value and a title resolver.
TitleResolver = Callable[[str], Optional[str]]
FieldTransform = Callable[[Any, TitleResolver], Any]


def map_values(value: Any, fn: Callable[[Any], Any]) -> Any:
    """Apply ``fn`` to a scalar or to every item of a multi-valued field."""
    if isinstance(value, (list, tuple)):
        return [fn(item) for item in value]
    return fn(value)


def first_value(value: Any) -> Any:
    """First item of a multi-valued field, or the value itself."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def content_model_label(value: Any, resolve_title: TitleResolver) -> Any:
    def label(item):
        model = strip_fedora_prefix(item)
        return CONTENT_MODEL_LABELS.get(model, model)
    return map_values(value, label)


def rights_label(value: Any, resolve_title: TitleResolver) -> Any:
    return map_values(value, lambda item: RIGHTS_STATEMENT_LABELS.get(item, item))


def reuse_label(value: Any, resolve_title: TitleResolver) -> Any:
    return map_values(value, lambda item: REUSE_LABELS.get(item, item))


def parent_title(value: Any, resolve_title: TitleResolver) -> Any:
    def title(item):
        pid = strip_fedora_prefix(item)
        return resolve_title(pid) or pid
    return map_values(value, title)


def build_field_transforms(config: SiteConfig) -> Dict[str, FieldTransform]:
    """
    Field name to transform table for a configuration.

    Args:
        config: Site configuration naming the well-known fields

    Returns:
        Dict[str, FieldTransform]: Transform per field name
    """
    table: Dict[str, FieldTransform] = {
        config.content_model_field: content_model_label,
        config.rights_code_field: rights_label,
        config.reuse_code_field: reuse_label,
    }
    for field_name in config.parent_fields:
        table[field_name] = parent_title
    return table


def extract_purl(value: Any) -> Optional[str]:
    """First location URL pointing at a PURL server, if any."""
    if value is None:
        return None
    values = value if isinstance(value, (list, tuple)) else [value]
    for item in values:
        if item and PURL_MARKER in str(item):
            return str(item)
    return None
