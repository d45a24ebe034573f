"""
Session store interface for search navigation state.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..entities import NavigationSession


class SessionStoreInterface(ABC):
    """Token keyed storage for navigation sessions."""

    @abstractmethod
    def put(self, token: str, session: NavigationSession) -> None:
        """
        Store a navigation session.

        Args:
            token: Opaque random token
            session: Session to store
        """
        pass

    @abstractmethod
    def get(self, token: str) -> Optional[NavigationSession]:
        """
        Fetch a navigation session.

        Args:
            token: Token the session was stored under

        Returns:
            Optional[NavigationSession]: Stored session, if any
        """
        pass
