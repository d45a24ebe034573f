"""
In-memory navigation session store.
"""

import logging
from collections import OrderedDict
from typing import Optional

from ...core.entities import NavigationSession
from ...core.interfaces import SessionStoreInterface

logger = logging.getLogger(__name__)


class InMemorySessionStore(SessionStoreInterface):
    """
    Process local session store.

    Keeps at most ``max_entries`` sessions and evicts the least recently
    stored one first.
    """

    def __init__(self, max_entries: int = 1000):
        self.max_entries = max_entries
        self._sessions: "OrderedDict[str, NavigationSession]" = OrderedDict()

    def put(self, token: str, session: NavigationSession) -> None:
        self._sessions[token] = session
        self._sessions.move_to_end(token)
        while len(self._sessions) > self.max_entries:
            evicted, _ = self._sessions.popitem(last=False)
            logger.debug(f"Evicted navigation session {evicted}")

    def get(self, token: str) -> Optional[NavigationSession]:
        return self._sessions.get(token)

    def __len__(self) -> int:
        return len(self._sessions)
