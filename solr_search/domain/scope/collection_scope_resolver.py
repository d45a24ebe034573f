"""
Collection scope resolution.

Walks the collection membership graph below a collection and folds every
reachable container into one disjunctive filter clause.
"""

import logging
from typing import List, Optional

from ...core.entities import ScopeFilter
from ...core.entities.scope_entity import (
    BOOK_CMODEL,
    COLLECTION_CMODEL,
    MEMBERSHIP_RELATION,
    NEWSPAPER_CMODEL,
    SERIAL_ROOT_CMODEL,
    scope_fragment,
    strip_fedora_prefix
)
from ...core.interfaces import GraphStoreInterface

logger = logging.getLogger(__name__)


class CollectionScopeResolver:
    """
    Resolver turning a collection identifier into a scope filter.

    Each collection is expanded at most once per resolution, and the walk
    stops descending after ``max_depth`` levels, so malformed (cyclic or
    runaway) hierarchies terminate.
    """

    def __init__(
        self,
        graph_store: GraphStoreInterface,
        max_depth: int = 16
    ):
        """
        Initialize the resolver.

        Args:
            graph_store: Graph store used for membership lookups
            max_depth: Maximum nesting depth to descend into
        """
        self.graph_store = graph_store
        self.max_depth = max_depth

    @staticmethod
    def type_filter(non_empty_or_advanced: bool, is_full_text: bool) -> List[str]:
        """
        Content models to look for below a collection.

        Args:
            non_empty_or_advanced: The search has query text or came from
                the advanced search form
            is_full_text: The search targets a full-text field

        Returns:
            List[str]: Content model identifiers
        """
        types = [COLLECTION_CMODEL]
        if non_empty_or_advanced:
            types.extend([NEWSPAPER_CMODEL, SERIAL_ROOT_CMODEL])
        if is_full_text:
            types.append(BOOK_CMODEL)
        return types

    def resolve(
        self,
        collection_id: str,
        non_empty_or_advanced: bool,
        is_full_text: bool
    ) -> str:
        """
        Build the scope filter for a collection.

        Args:
            collection_id: Collection identifier (bare or ``info:fedora/`` URI)
            non_empty_or_advanced: Include newspaper and serial roots
            is_full_text: Include books

        Returns:
            str: OR-joined filter clause, anchored by the collection's own
            membership fragment; empty for a blank identifier
        """
        collection_id = strip_fedora_prefix(collection_id or "")
        if not collection_id:
            return ""

        types = self.type_filter(non_empty_or_advanced, is_full_text)
        scope = ScopeFilter()
        scope.visit(collection_id)

        self._collect(collection_id, types, scope, depth=1)
        scope.add(self.fragment(COLLECTION_CMODEL, collection_id))

        logger.debug(
            f"Resolved scope for {collection_id}: {len(scope.clauses)} fragments, "
            f"{len(scope.visited)} collections visited"
        )
        return scope.to_clause()

    @staticmethod
    def fragment(content_model: str, pid: str) -> Optional[str]:
        """Filter fragment for an object of the given content model."""
        return scope_fragment(content_model, pid)

    def _collect(
        self,
        collection_id: str,
        types: List[str],
        scope: ScopeFilter,
        depth: int
    ) -> None:
        if depth > self.max_depth:
            logger.warning(
                f"Collection hierarchy below {collection_id} exceeds depth "
                f"{self.max_depth}; not descending further"
            )
            return

        members = self.graph_store.subjects_of_type(
            MEMBERSHIP_RELATION, collection_id, types
        )
        for subject, content_model in members:
            pid = strip_fedora_prefix(subject)
            content_model = strip_fedora_prefix(content_model)

            if content_model == COLLECTION_CMODEL:
                if not scope.visit(pid):
                    logger.debug(f"Collection {pid} already visited, skipping")
                    continue
                scope.add(self.fragment(COLLECTION_CMODEL, pid))
                self._collect(pid, types, scope, depth + 1)
                continue

            fragment = self.fragment(content_model, pid)
            if fragment is None:
                logger.debug(f"No scope fragment for content model {content_model}")
                continue
            if fragment not in scope.clauses:
                scope.add(fragment)
