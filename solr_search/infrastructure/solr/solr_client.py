"""
Solr client for search operations.

Thin HTTP adapter over the Solr ``select`` handler plus the two admin
lookups the query builder needs (backend version and request handler
query fields).
"""

import logging
import xml.etree.ElementTree as ET
from typing import Any, Dict, List, Optional, Tuple

import requests

from ...core.interfaces import SearchBackendInterface
from ...shared.exceptions import SearchBackendError

logger = logging.getLogger(__name__)


class SolrClient(SearchBackendInterface):
    """
    Client for a single Solr core.

    Transport errors, error statuses and undecodable bodies are all
    reported as SearchBackendError.
    """

    def __init__(
        self,
        url: str,
        timeout: Tuple[float, float] = (5, 30),
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            url: Core URL, e.g. ``http://localhost:8080/solr/collection1``
            timeout: (connect, read) timeouts in seconds
            session: Optional preconfigured requests session
        """
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @staticmethod
    def encode_params(
        query: str,
        offset: int,
        limit: int,
        params: Dict[str, Any]
    ) -> List[Tuple[str, str]]:
        """
        Flatten parameters into an ordered list of pairs.

        List values become repeated parameters and booleans are rendered
        the way Solr expects them.
        """
        pairs: List[Tuple[str, str]] = [
            ("q", query),
            ("start", str(offset)),
            ("rows", str(limit)),
            ("wt", "json")
        ]
        for key, value in params.items():
            values = value if isinstance(value, (list, tuple)) else [value]
            for item in values:
                if item is None:
                    continue
                if isinstance(item, bool):
                    item = "true" if item else "false"
                pairs.append((key, str(item)))
        return pairs

    def search(
        self,
        query: str,
        offset: int,
        limit: int,
        params: Dict[str, Any],
        method: str = "GET"
    ) -> Dict[str, Any]:
        """Run a query against the ``select`` handler."""
        payload = self.encode_params(query, offset, limit, params)
        endpoint = f"{self.url}/select"

        try:
            if method.upper() == "POST":
                response = self.session.post(endpoint, data=payload, timeout=self.timeout)
            else:
                response = self.session.get(endpoint, params=payload, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise SearchBackendError(f"Solr request failed: {e}", {"url": endpoint}) from e
        except ValueError as e:
            raise SearchBackendError("Solr returned a malformed response", {"url": endpoint}) from e

        if not isinstance(data, dict) or not isinstance(data.get("response"), dict):
            raise SearchBackendError("Solr response has no 'response' section", {"url": endpoint})
        return data

    def get_version(self) -> Optional[str]:
        """Solr version reported by the system info handler."""
        try:
            response = self.session.get(
                f"{self.url}/admin/system",
                params={"wt": "json"},
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()["lucene"]["solr-spec-version"]
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Could not determine Solr version: {e}")
            return None

    def request_handler_has_qf(self, handler: str) -> bool:
        """Check solrconfig.xml for a ``qf`` default on the request handler."""
        try:
            response = self.session.get(
                f"{self.url}/admin/file",
                params={"file": "solrconfig.xml", "contentType": "text/xml"},
                timeout=self.timeout
            )
            response.raise_for_status()
            root = ET.fromstring(response.content)
        except (requests.RequestException, ET.ParseError) as e:
            logger.warning(f"Could not read solrconfig.xml: {e}")
            return False

        for element in root.iter("requestHandler"):
            name = element.get("name", "")
            if handler:
                matches = name in (handler, f"/{handler.lstrip('/')}")
            else:
                matches = element.get("default") == "true" or name in ("standard", "/select")
            if not matches:
                continue
            for param in element.iter("str"):
                if param.get("name") == "qf" and (param.text or "").strip():
                    return True
        return False
