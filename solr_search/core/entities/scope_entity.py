"""
Collection scope accumulator and content model constants.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set


FEDORA_URI_PREFIX = "info:fedora/"

COLLECTION_CMODEL = "islandora:collectionCModel"
NEWSPAPER_CMODEL = "islandora:newspaperCModel"
NEWSPAPER_ISSUE_CMODEL = "islandora:newspaperIssueCModel"
NEWSPAPER_PAGE_CMODEL = "islandora:newspaperPageCModel"
SERIAL_ROOT_CMODEL = "islandora:rootSerialCModel"
BOOK_CMODEL = "islandora:bookCModel"
PAGE_CMODEL = "islandora:pageCModel"

MEMBERSHIP_RELATION = "isMemberOfCollection"
COLLECTION_MEMBERSHIP_FIELD = "RELS_EXT_isMemberOfCollection_uri_ms"

# Filter fragment per matched content model; ``{pid}`` is the bare identifier.
SCOPE_FRAGMENT_TEMPLATES = {
    COLLECTION_CMODEL: COLLECTION_MEMBERSHIP_FIELD + ':"info:fedora/{pid}"',
    NEWSPAPER_CMODEL: 'newspaper_parent_ms:"{pid}"',
    SERIAL_ROOT_CMODEL: 'serial_parent_ms:"{pid}"',
    BOOK_CMODEL: 'RELS_EXT_isMemberOf_uri_ms:"info:fedora/{pid}"',
}

SCOPE_JOIN = " OR "


def escape_phrase(value: str) -> str:
    """Escape a value for use inside a double quoted Solr phrase."""
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def scope_fragment(content_model: str, pid: str) -> Optional[str]:
    """Filter fragment for an object of the given content model, if any."""
    template = SCOPE_FRAGMENT_TEMPLATES.get(content_model)
    if template is None:
        return None
    return template.format(pid=escape_phrase(pid))


def strip_fedora_prefix(value: str) -> str:
    """Turn ``info:fedora/ns:1`` into ``ns:1``."""
    value = str(value).strip()
    if value.startswith(FEDORA_URI_PREFIX):
        return value[len(FEDORA_URI_PREFIX):]
    return value


@dataclass
class ScopeFilter:
    """
    Accumulator for one scope resolution.

    Owned by a single resolve() call and discarded once the clause has
    been produced.
    """
    clauses: List[str] = field(default_factory=list)
    visited: Set[str] = field(default_factory=set)

    def visit(self, collection_id: str) -> bool:
        """Mark a collection visited; False if it was already seen."""
        if collection_id in self.visited:
            return False
        self.visited.add(collection_id)
        return True

    def add(self, clause: str) -> None:
        self.clauses.append(clause)

    def to_clause(self) -> str:
        return SCOPE_JOIN.join(self.clauses)
