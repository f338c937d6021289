"""
Tests for the in-memory grant store.
"""

from __future__ import annotations

import threading

from actionguard import GLOBAL_SEGMENT, GrantStore, InMemoryGrantStore
from tests.conftest import User


class Document:
    def __init__(self, id: int) -> None:
        self.id = id


class TestInMemoryGrantStore:
    """Tests for InMemoryGrantStore."""

    def test_implements_protocol(self):
        assert isinstance(InMemoryGrantStore(), GrantStore)

    def test_no_grants_is_false(self, user, other_user):
        store = InMemoryGrantStore()

        assert store.has_general_grant(user, 1, User, GLOBAL_SEGMENT) is False
        assert store.has_object_grant(user, 1, other_user, GLOBAL_SEGMENT) is False

    def test_general_grant_is_scoped_to_object_type(self, user):
        store = InMemoryGrantStore()
        store.grant_general(user, 2, User)

        assert store.has_general_grant(user, 2, User, GLOBAL_SEGMENT) is True
        assert store.has_general_grant(user, 2, "User", GLOBAL_SEGMENT) is True
        assert store.has_general_grant(user, 2, Document, GLOBAL_SEGMENT) is False
        assert store.has_general_grant(user, 3, User, GLOBAL_SEGMENT) is False

    def test_object_grant_is_scoped_to_object(self, user, other_user):
        store = InMemoryGrantStore()
        store.grant_object(user, 4, other_user)

        assert store.has_object_grant(user, 4, other_user, GLOBAL_SEGMENT) is True
        assert store.has_object_grant(user, 4, user, GLOBAL_SEGMENT) is False

    def test_object_grant_is_scoped_to_object_type(self, user):
        store = InMemoryGrantStore()
        target = User()
        store.grant_object(user, 4, target)

        assert store.has_object_grant(user, 4, Document(target.id), GLOBAL_SEGMENT) is False

    def test_grants_are_scoped_to_segment(self, user):
        store = InMemoryGrantStore()
        store.grant_general(user, 2, User, segment_id=5)

        assert store.has_general_grant(user, 2, User, 5) is True
        assert store.has_general_grant(user, 2, User, GLOBAL_SEGMENT) is False

    def test_actors_with_same_id_share_grants(self, user):
        store = InMemoryGrantStore()
        store.grant_general(user, 2, User)

        reloaded = User(name=user.name, id=user.id)

        assert store.has_general_grant(reloaded, 2, User, GLOBAL_SEGMENT) is True

    def test_revoke(self, user, other_user):
        store = InMemoryGrantStore()
        store.grant_general(user, 2, User)
        store.grant_object(user, 4, other_user)

        assert store.revoke_general(user, 2, User) is True
        assert store.revoke_general(user, 2, User) is False
        assert store.revoke_object(user, 4, other_user) is True
        assert store.revoke_object(user, 4, other_user) is False
        assert len(store) == 0

    def test_lookup_count_and_clear(self, user):
        store = InMemoryGrantStore()
        store.grant_general(user, 2, User)
        store.has_general_grant(user, 2, User, GLOBAL_SEGMENT)
        store.has_general_grant(user, 3, User, GLOBAL_SEGMENT)

        assert store.lookup_count == 2
        assert len(store) == 1

        store.clear()

        assert store.lookup_count == 0
        assert len(store) == 0

    def test_concurrent_reads(self, user):
        store = InMemoryGrantStore()
        store.grant_general(user, 2, User)
        results: list[bool] = []
        lock = threading.Lock()

        def worker():
            for _ in range(100):
                found = store.has_general_grant(user, 2, User, GLOBAL_SEGMENT)
                with lock:
                    results.append(found)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 800
        assert all(results)
        assert store.lookup_count == 800
