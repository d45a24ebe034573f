"""
Facet configuration adapter.

Turns the facet section of the site configuration into plain
FacetFieldConfig values for the query builder.
"""

import logging
from typing import List, Dict, Any

from ...core.entities import SiteConfig, FacetFieldConfig

logger = logging.getLogger(__name__)


class FacetConfigAdapter:
    """Read-only view over the configured facets of one SiteConfig."""

    def __init__(self, config: SiteConfig):
        self.config = config
        self._fields = self._load_fields(config)

    @staticmethod
    def _load_fields(config: SiteConfig) -> List[FacetFieldConfig]:
        loaded = []
        seen = set()
        for entry in config.facet_fields:
            if isinstance(entry, str):
                entry = {'solr_field': entry}
            if not isinstance(entry, dict) or not entry.get('solr_field'):
                logger.warning(f"Ignoring malformed facet configuration entry: {entry!r}")
                continue
            if entry['solr_field'] in seen:
                continue
            seen.add(entry['solr_field'])
            loaded.append(FacetFieldConfig.from_dict(entry))
        return loaded

    def facet_fields(self) -> List[FacetFieldConfig]:
        """All configured facet fields, in configuration order."""
        return list(self._fields)

    def plain_fields(self) -> List[FacetFieldConfig]:
        """Facet fields served by the plain ``facet.field`` list."""
        return [f for f in self._fields if not f.is_range]

    def range_fields(self) -> List[FacetFieldConfig]:
        """Facet fields served by the date/range parameter families."""
        return [f for f in self._fields if f.is_range]

    def default_sort(self) -> str:
        """Facet sort applied when a field does not override it."""
        return "index" if self.config.facet_display_limit <= 0 else "count"

    def global_params(self) -> Dict[str, Any]:
        """Facet toggles shared by every field."""
        return {
            'facet': 'true',
            'facet.mincount': self.config.facet_min_count,
            'facet.limit': self.config.facet_max_count
        }

    def display_options(self) -> Dict[str, Any]:
        """Display related facet settings, keyed by Solr field."""
        return {
            f.solr_field: {
                'label': f.label,
                'slider': f.slider_enabled,
                'display_limit': self.config.facet_display_limit
            }
            for f in self._fields
        }
