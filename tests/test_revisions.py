"""Tests for RevisionResolver."""

import pytest

from revkv import RevisionResolver, TransportError
from revkv.docstore import Memory


class CountingMemory(Memory):
    def __init__(self) -> None:
        super().__init__()
        self.multi_get_calls: list[list[str]] = []

    def multi_get(self, keys):
        keys = list(keys)
        self.multi_get_calls.append(keys)
        return super().multi_get(keys)


class PartialMemory(Memory):
    """Answers multi_get for existing documents only."""

    def multi_get(self, keys):
        return {k: rev for k, rev in super().multi_get(keys).items() if rev}


class TestResolveSingle:
    def test_existing(self):
        m = Memory()
        rev = m.save("k", None, "v")
        assert RevisionResolver(m).resolve("k") == rev

    def test_missing(self):
        assert RevisionResolver(Memory()).resolve("nope") is None


class TestResolveMany:
    def test_single_round_trip(self):
        m = CountingMemory()
        rev1 = m.save("k1", None, 1)
        rev3 = m.save("k3", None, 3)
        revs = RevisionResolver(m).resolve_many(["k1", "k2", "k3"])
        assert revs == {"k1": rev1, "k2": None, "k3": rev3}
        assert m.multi_get_calls == [["k1", "k2", "k3"]]

    def test_duplicates_collapsed_in_order(self):
        m = CountingMemory()
        RevisionResolver(m).resolve_many(["b", "a", "b"])
        assert m.multi_get_calls == [["b", "a"]]

    def test_keys_missing_from_answer(self):
        m = PartialMemory()
        rev = m.save("a", None, 1)
        assert RevisionResolver(m).resolve_many(["a", "b"]) == {"a": rev, "b": None}

    def test_empty(self):
        m = CountingMemory()
        assert RevisionResolver(m).resolve_many([]) == {}
        assert m.multi_get_calls == []

    def test_store_failure_propagates(self):
        class Broken(Memory):
            def multi_get(self, keys):
                raise TransportError("connection refused")

        with pytest.raises(TransportError):
            RevisionResolver(Broken()).resolve_many(["a"])
