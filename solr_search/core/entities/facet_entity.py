"""
Facet field configuration model.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional


DATE_FIELD_SUFFIXES = ("_dt", "_mdt", "_tdt", "_dts", "_mdts")


@dataclass(frozen=True)
class FacetFieldConfig:
    """
    Settings for a single configured facet field.

    ``is_range`` marks fields served by the date/range parameter families
    instead of the plain ``facet.field`` list. ``is_date_field`` marks
    true date fields, which are eligible for the default date window.
    """
    solr_field: str
    label: str = ""
    is_date_field: bool = False
    is_range: bool = False
    range_start: Optional[str] = None
    range_end: Optional[str] = None
    range_gap: Optional[str] = None
    slider_enabled: bool = False
    sort_order: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FacetFieldConfig':
        """Create a facet field config from its configuration mapping."""
        solr_field = data['solr_field']
        is_date_field = data.get('date_field')
        if is_date_field is None:
            is_date_field = solr_field.endswith(DATE_FIELD_SUFFIXES)

        return cls(
            solr_field=solr_field,
            label=data.get('label') or solr_field,
            is_date_field=bool(is_date_field),
            is_range=bool(data.get('range_facet', False)),
            range_start=_blank_to_none(data.get('range_start')),
            range_end=_blank_to_none(data.get('range_end')),
            range_gap=_blank_to_none(data.get('range_gap')),
            slider_enabled=bool(data.get('range_slider', False)),
            sort_order=_blank_to_none(data.get('sort_by'))
        )


def _blank_to_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None
