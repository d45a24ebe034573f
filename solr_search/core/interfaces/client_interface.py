"""
Client interface definitions for external collaborators.

This module defines the abstract interfaces the search backend and the
graph store adapters must follow.
"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional, Sequence, Tuple


class SearchBackendInterface(ABC):
    """Interface for search backend operations."""

    @abstractmethod
    def search(
        self,
        query: str,
        offset: int,
        limit: int,
        params: Dict[str, Any],
        method: str = "GET"
    ) -> Dict[str, Any]:
        """
        Run a query against the backend.

        Args:
            query: Effective query text
            offset: Index of the first hit
            limit: Maximum number of hits
            params: Additional backend parameters
            method: HTTP method to use

        Returns:
            Dict[str, Any]: Raw decoded backend response

        Raises:
            SearchBackendError: If the backend cannot answer
        """
        pass

    def get_version(self) -> Optional[str]:
        """
        Report the backend version, if it can be determined.

        Returns:
            Optional[str]: Version string or None when unknown
        """
        return None

    def request_handler_has_qf(self, handler: str) -> bool:
        """
        Report whether a request handler configures its own query fields.

        Args:
            handler: Request handler name (empty for the default handler)

        Returns:
            bool: True if the handler defines ``qf``
        """
        return False


class GraphStoreInterface(ABC):
    """Interface for relationship graph queries."""

    @abstractmethod
    def subjects_of_type(
        self,
        relation: str,
        obj: str,
        type_filter: Sequence[str]
    ) -> List[Tuple[str, str]]:
        """
        Find active subjects related to an object.

        Args:
            relation: Relation predicate local name (e.g. isMemberOfCollection)
            obj: Object identifier the subjects point at
            type_filter: Content model identifiers the subjects must have

        Returns:
            List[Tuple[str, str]]: (subject identifier, content model) pairs
        """
        pass

    @abstractmethod
    def label_of(self, subject: str) -> Optional[str]:
        """
        Look up the label of an object.

        Args:
            subject: Object identifier

        Returns:
            Optional[str]: Label of the first match, None if nothing matched
        """
        pass
