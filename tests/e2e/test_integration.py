"""Lookups against a real directory server.

Skipped unless ``LDAP_URL`` and ``TEST_LDAP_UID`` are set; the remaining
connection settings come from the usual layered sources.
"""

from __future__ import annotations

import os

import pytest

from lib_ldap_lookup import Identifier, NotFoundError, load_config, new_searcher

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        not (os.environ.get("LDAP_URL") and os.environ.get("TEST_LDAP_UID")),
        reason="LDAP_URL and TEST_LDAP_UID are required for directory integration tests",
    ),
]


def test_lookup_known_uid() -> None:
    uid = os.environ["TEST_LDAP_UID"]
    with new_searcher(load_config()) as searcher:
        record = searcher.get_user(Identifier.uid(uid))
    assert record.uid == uid


def test_lookup_known_email() -> None:
    with new_searcher(load_config()) as searcher:
        record = searcher.get_user(Identifier.uid(os.environ["TEST_LDAP_UID"]))
        if not record.email:
            pytest.skip("test user has no mail attribute")
        assert searcher.get_user(Identifier.email(record.email)).uid == record.uid


def test_unknown_uid_is_not_found() -> None:
    with new_searcher(load_config()) as searcher:
        with pytest.raises(NotFoundError):
            searcher.get_user(Identifier.uid("nonexistent-user-for-integration-test"))
