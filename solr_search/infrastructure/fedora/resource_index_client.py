"""
Fedora resource index client.

Answers the relationship and label lookups used for collection scope
resolution and result labeling through SPARQL queries against the
``risearch`` endpoint.
"""

import csv
import io
import logging
import re
from typing import List, Optional, Sequence, Tuple

import requests

from ...core.interfaces import GraphStoreInterface
from ...shared.exceptions import GraphStoreError

logger = logging.getLogger(__name__)

PID_PATTERN = re.compile(r"^[A-Za-z0-9.~_%-]+:[A-Za-z0-9.~_%:-]+$")
RELATION_PATTERN = re.compile(r"^[A-Za-z]+$")

SUBJECTS_QUERY = """
PREFIX fre: <info:fedora/fedora-system:def/relations-external#>
PREFIX fm: <info:fedora/fedora-system:def/model#>
SELECT ?subject ?type
FROM <#ri>
WHERE {{
  ?subject fre:{relation} <info:fedora/{obj}> ;
           fm:hasModel ?type ;
           fm:state fm:Active .
  FILTER({type_filter})
}}
"""

LABEL_QUERY = """
PREFIX fm: <info:fedora/fedora-system:def/model#>
SELECT ?label
FROM <#ri>
WHERE {{
  <info:fedora/{pid}> fm:label ?label .
}}
"""


def _check_pid(pid: str) -> str:
    if not PID_PATTERN.match(pid or ""):
        raise GraphStoreError(f"Invalid object identifier: {pid!r}")
    return pid


class ResourceIndexClient(GraphStoreInterface):
    """Client for the Fedora resource index."""

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: Tuple[float, float] = (5, 30),
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            url: Fedora base URL, e.g. ``http://localhost:8080/fedora``
            username: Optional user for HTTP basic auth
            password: Optional password for HTTP basic auth
            timeout: (connect, read) timeouts in seconds
            session: Optional preconfigured requests session
        """
        self.url = url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        if username:
            self.session.auth = (username, password or "")

    def query(self, sparql: str) -> List[dict]:
        """
        Run a SPARQL tuple query.

        Args:
            sparql: Query text

        Returns:
            List[dict]: One mapping per result row, keyed by variable name

        Raises:
            GraphStoreError: If the resource index cannot answer
        """
        endpoint = f"{self.url}/risearch"
        try:
            response = self.session.post(
                endpoint,
                data={
                    "type": "tuples",
                    "lang": "sparql",
                    "format": "CSV",
                    "query": sparql
                },
                timeout=self.timeout
            )
            response.raise_for_status()
        except requests.RequestException as e:
            raise GraphStoreError(f"Resource index query failed: {e}", {"url": endpoint}) from e

        reader = csv.DictReader(io.StringIO(response.text))
        return [dict(row) for row in reader]

    def subjects_of_type(
        self,
        relation: str,
        obj: str,
        type_filter: Sequence[str]
    ) -> List[Tuple[str, str]]:
        """Find active subjects with one of the given models related to ``obj``."""
        if not RELATION_PATTERN.match(relation or ""):
            raise GraphStoreError(f"Invalid relation: {relation!r}")
        _check_pid(obj)
        if not type_filter:
            return []

        conditions = " || ".join(
            f"sameTerm(?type, <info:fedora/{_check_pid(model)}>)" for model in type_filter
        )
        rows = self.query(SUBJECTS_QUERY.format(
            relation=relation,
            obj=obj,
            type_filter=conditions
        ))
        return [
            (row["subject"], row["type"])
            for row in rows
            if row.get("subject") and row.get("type")
        ]

    def label_of(self, subject: str) -> Optional[str]:
        """Label of an object; the first row wins."""
        rows = self.query(LABEL_QUERY.format(pid=_check_pid(subject)))
        for row in rows:
            label = row.get("label")
            if label:
                return label
        return None
