"""Tests for the filter policies."""

import pytest

from process_watcher.models.filter_policy import (
    BlacklistPolicy,
    FilterMode,
    UnrestrictedPolicy,
    WhitelistPolicy,
)
from process_watcher.models.process_record import ProcessRecord

A1 = ProcessRecord(pid=1, name="a")
B1 = ProcessRecord(pid=1, name="b")
A2 = ProcessRecord(pid=2, name="a")
B42 = ProcessRecord(pid=42, name="b")


def test_unrestricted_allows_everything():
    policy = UnrestrictedPolicy()
    assert policy.mode is FilterMode.UNRESTRICTED
    assert all(policy.allows(record) for record in (A1, B1, A2, B42))


class TestWhitelist:
    def test_name_only(self):
        policy = WhitelistPolicy(names=frozenset({"a"}))
        assert policy.allows(A1)
        assert policy.allows(A2)
        assert not policy.allows(B1)

    def test_name_mismatch_suppressed_regardless_of_id(self):
        policy = WhitelistPolicy(names=frozenset({"a"}), ids=frozenset({1}))
        assert policy.allows(A1)
        assert not policy.allows(B1)
        assert not policy.allows(A2)

    def test_id_only(self):
        policy = WhitelistPolicy(ids=frozenset({42}))
        assert policy.allows(B42)
        assert not policy.allows(B1)

    def test_empty_whitelist_allows_everything(self):
        policy = WhitelistPolicy()
        assert policy.mode is FilterMode.WHITELIST
        assert all(policy.allows(record) for record in (A1, B1, A2, B42))


class TestBlacklist:
    def test_excluded_id_dropped_even_if_name_allowed(self):
        policy = BlacklistPolicy(ids=frozenset({42}))
        assert not policy.allows(B42)
        assert policy.allows(B1)

    @pytest.mark.parametrize("record, allowed", [(A1, False), (A2, False), (B1, True)])
    def test_excluded_name(self, record, allowed):
        policy = BlacklistPolicy(names=frozenset({"a"}))
        assert policy.allows(record) is allowed

    def test_either_dimension_excludes(self):
        policy = BlacklistPolicy(names=frozenset({"a"}), ids=frozenset({42}))
        assert not policy.allows(A1)
        assert not policy.allows(B42)
        assert policy.allows(B1)
