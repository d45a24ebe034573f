"""
Core interfaces module.

This module provides access to the collaborator interfaces used
throughout the package, plus the hook signatures.
"""

from typing import Callable, List

from ..entities import QuerySpec, ResultRecord
from .client_interface import (
    SearchBackendInterface,
    GraphStoreInterface
)
from .session_interface import SessionStoreInterface

# Extension points, invoked synchronously in registration order.
QueryAlterHook = Callable[[QuerySpec], None]
ResultAlterHook = Callable[[List[ResultRecord], QuerySpec], None]
FieldAccessCheck = Callable[[str], bool]

__all__ = [
    'SearchBackendInterface',
    'GraphStoreInterface',
    'SessionStoreInterface',
    'QueryAlterHook',
    'ResultAlterHook',
    'FieldAccessCheck'
]
