"""
Date and range facet parameter generation.

Solr dropped the legacy ``facet.date`` family in 6.0 in favour of
``facet.range``. The generator emits whichever family the connected
backend understands.
"""

import logging
import re
from typing import List, Dict, Any, Optional

from ...core.entities import FacetFieldConfig

logger = logging.getLogger(__name__)

DEFAULT_DATE_START = "NOW/YEAR-20YEARS"
DEFAULT_DATE_END = "NOW"
DEFAULT_DATE_GAP = "+1YEAR"

# First Solr major version without facet.date support.
RANGE_ONLY_MAJOR_VERSION = 6


def supports_legacy_date_facets(version: Optional[str]) -> bool:
    """
    Decide whether a backend still speaks ``facet.date``.

    Unknown or unparseable versions are treated as legacy backends.

    Args:
        version: Backend version string such as ``"4.2.0"``

    Returns:
        bool: True for legacy backends
    """
    if not version:
        return True
    match = re.match(r"\s*(\d+)", str(version))
    if not match:
        logger.debug(f"Unparseable backend version {version!r}, assuming legacy facets")
        return True
    return int(match.group(1)) < RANGE_ONLY_MAJOR_VERSION


class DateFacetGenerator:
    """
    Generator for date/range facet parameters.

    Produces a flat parameter map; list values are sent as repeated
    parameters.
    """

    def generate(
        self,
        fields: List[FacetFieldConfig],
        backend_supports_legacy_date_facets: bool
    ) -> Dict[str, Any]:
        """
        Build the date/range facet parameters for the given fields.

        Non-date range fields without a full start, end and gap are left
        out on modern backends.

        Args:
            fields: Facet fields flagged as date/range facets
            backend_supports_legacy_date_facets: Whether to use ``facet.date``

        Returns:
            Dict[str, Any]: Backend parameters
        """
        if not backend_supports_legacy_date_facets:
            fields = self._complete_range_fields(fields)
        if not fields:
            return {}

        if backend_supports_legacy_date_facets:
            params = self._legacy_params(fields)
        else:
            params = self._range_params(fields)

        for facet in fields:
            if facet.slider_enabled:
                params[f"f.{facet.solr_field}.facet.mincount"] = 0

        return params

    @staticmethod
    def _legacy_params(fields: List[FacetFieldConfig]) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            'facet.date': [facet.solr_field for facet in fields],
            'facet.date.start': DEFAULT_DATE_START,
            'facet.date.end': DEFAULT_DATE_END,
            'facet.date.gap': DEFAULT_DATE_GAP
        }
        for facet in fields:
            prefix = f"f.{facet.solr_field}.facet.date"
            if facet.range_start:
                params[f"{prefix}.start"] = facet.range_start
            if facet.range_end:
                params[f"{prefix}.end"] = facet.range_end
            if facet.range_gap:
                params[f"{prefix}.gap"] = facet.range_gap
        return params

    @staticmethod
    def _complete_range_fields(fields: List[FacetFieldConfig]) -> List[FacetFieldConfig]:
        """Drop range fields Solr would reject for a missing start, end or gap."""
        complete = []
        for facet in fields:
            if facet.is_date_field or (facet.range_start and facet.range_end and facet.range_gap):
                complete.append(facet)
            else:
                logger.warning(
                    f"Skipping range facet {facet.solr_field}: start, end and gap are required"
                )
        return complete

    @staticmethod
    def _range_params(fields: List[FacetFieldConfig]) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            'facet.range': [facet.solr_field for facet in fields]
        }
        for facet in fields:
            prefix = f"f.{facet.solr_field}.facet.range"
            start, end, gap = facet.range_start, facet.range_end, facet.range_gap
            if facet.is_date_field:
                start = start or DEFAULT_DATE_START
                end = end or DEFAULT_DATE_END
                gap = gap or DEFAULT_DATE_GAP
            params[f"{prefix}.start"] = start
            params[f"{prefix}.end"] = end
            params[f"{prefix}.gap"] = gap
        return params
