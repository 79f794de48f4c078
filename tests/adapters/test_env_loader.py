"""Environment loader adapter tests clarifying the variable contract.

The scenarios cover environment selection, override extraction and the
boolean flag semantics, with randomised inputs proving that only the literal
string ``"true"`` enables a flag.
"""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from lib_ldap_lookup.adapters.env.default import DefaultEnvLoader, resolve_environment


def test_resolve_environment_prefers_ldap_env() -> None:
    """LDAP_ENV wins over the generic ENV variable."""

    assert resolve_environment({"LDAP_ENV": "prod", "ENV": "dev"}) == "prod"


def test_resolve_environment_falls_back_to_env() -> None:
    assert resolve_environment({"ENV": "dev"}) == "dev"


def test_resolve_environment_defaults_to_local() -> None:
    assert resolve_environment({}) == "local"


def test_resolve_environment_treats_empty_as_unset() -> None:
    assert resolve_environment({"LDAP_ENV": "", "ENV": "staging"}) == "staging"


def test_resolve_environment_reads_process_environment(monkeypatch) -> None:
    monkeypatch.delenv("LDAP_ENV", raising=False)
    monkeypatch.setenv("ENV", "qa")
    assert resolve_environment() == "qa"


def test_env_loader_collects_overrides() -> None:
    """Set variables map onto config fields; the password stays out of the layer."""

    loader = DefaultEnvLoader(
        environ={
            "LDAP_URL": "ldap://ldap.example.com:389",
            "LDAP_BIND_DN": "uid=svc,dc=example,dc=com",
            "LDAP_BASE_DN": "ou=users,dc=example,dc=com",
            "LDAP_PASSWORD": "secret",
            "LDAP_STARTTLS": "true",
            "LDAP_VERIFY_SSL": "false",
            "OTHER": "ignored",
        }
    )
    data = loader.load()
    assert data == {
        "servers": ("ldap://ldap.example.com:389",),
        "bind_dn": "uid=svc,dc=example,dc=com",
        "search_base": "ou=users,dc=example,dc=com",
        "use_start_tls": True,
        "verify_ssl": False,
    }
    assert loader.password() == "secret"


def test_env_loader_ignores_empty_values() -> None:
    loader = DefaultEnvLoader(environ={"LDAP_URL": "", "LDAP_STARTTLS": "", "LDAP_PASSWORD_FILE": ""})
    assert loader.load() == {}
    assert loader.password_file() == ""


FLAG_VALUES = st.one_of(st.sampled_from(["true", "false", "TRUE", "True", "1", "yes"]), st.text(min_size=1, max_size=8))


@given(starttls=FLAG_VALUES, verify=FLAG_VALUES)
def test_flags_use_literal_true(starttls: str, verify: str) -> None:
    """Any non-empty value overrides; only the exact string ``true`` enables."""

    loader = DefaultEnvLoader(environ={"LDAP_STARTTLS": starttls, "LDAP_VERIFY_SSL": verify})
    data = loader.load()
    assert data["use_start_tls"] is (starttls == "true")
    assert data["verify_ssl"] is (verify == "true")
