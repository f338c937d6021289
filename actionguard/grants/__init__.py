"""
Grant lookups for actionguard.

Policies fall back to a GrantStore whenever no override answers a
check. ``InMemoryGrantStore`` is a ready-made implementation for tests
and small applications.
"""

from actionguard.grants.base import GrantStore
from actionguard.grants.memory import InMemoryGrantStore

__all__ = [
    "GrantStore",
    "InMemoryGrantStore",
]
