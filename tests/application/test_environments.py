from __future__ import annotations

import pytest

from lib_ldap_lookup.application.environments import EnvironmentEntry, select_environment
from lib_ldap_lookup.domain.errors import InvalidFormat

DOCUMENT = {
    "environments": {
        "local": {"ldap_servers": ["ldap://localhost:389"], "verify_ssl": False},
        "prod": {
            "ldap_servers": ["ldap://ldap.example.com:389", "ldap://ldap2.example.com:389"],
            "username": "uid=svc,ou=users,dc=example,dc=com",
            "base_dn": "ou=users,dc=example,dc=com",
            "use_start_tls": True,
            "verify_ssl": True,
            "password_file": "~/.secrets/ldap/prod",
            "comment": "ignored",
        },
    }
}


def test_select_maps_document_keys_onto_fields() -> None:
    entry = select_environment(DOCUMENT, "prod", path="config.yaml")
    assert entry == EnvironmentEntry(
        name="prod",
        fields={
            "servers": ("ldap://ldap.example.com:389", "ldap://ldap2.example.com:389"),
            "bind_dn": "uid=svc,ou=users,dc=example,dc=com",
            "search_base": "ou=users,dc=example,dc=com",
            "use_start_tls": True,
            "verify_ssl": True,
        },
        password_file="~/.secrets/ldap/prod",
    )


def test_partial_entry_only_carries_present_keys() -> None:
    entry = select_environment(DOCUMENT, "local")
    assert entry is not None
    assert entry.fields == {"servers": ("ldap://localhost:389",), "verify_ssl": False}
    assert entry.password_file == ""


def test_missing_environment_returns_none() -> None:
    assert select_environment(DOCUMENT, "staging") is None


@pytest.mark.parametrize("document", [{}, {"environments": None}, {"environments": ["prod"]}])
def test_document_without_environments(document) -> None:
    assert select_environment(document, "prod") is None


def test_empty_entry_is_selected() -> None:
    entry = select_environment({"environments": {"dev": {}}}, "dev")
    assert entry is not None
    assert entry.fields == {}


def test_null_values_are_skipped() -> None:
    entry = select_environment({"environments": {"dev": {"username": None, "base_dn": "dc=x"}}}, "dev")
    assert entry is not None
    assert entry.fields == {"search_base": "dc=x"}


def test_non_mapping_entry_is_invalid() -> None:
    with pytest.raises(InvalidFormat, match="'dev'.*config.yaml"):
        select_environment({"environments": {"dev": "ldap://dev"}}, "dev", path="config.yaml")


def test_string_flag_is_invalid() -> None:
    with pytest.raises(InvalidFormat, match="use_start_tls"):
        select_environment({"environments": {"dev": {"use_start_tls": "yes"}}}, "dev")


def test_servers_of_wrong_type_are_invalid() -> None:
    with pytest.raises(InvalidFormat, match="ldap_servers"):
        select_environment({"environments": {"dev": {"ldap_servers": 389}}}, "dev")


def test_single_server_string_is_accepted() -> None:
    entry = select_environment({"environments": {"dev": {"ldap_servers": "ldap://dev:389"}}}, "dev")
    assert entry is not None
    assert entry.fields["servers"] == ("ldap://dev:389",)
