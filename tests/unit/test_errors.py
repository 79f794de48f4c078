from __future__ import annotations

import pytest

from lib_ldap_lookup.domain.errors import (
    AuthError,
    ConfigError,
    DirectoryConnectionError,
    DirectoryError,
    InvalidFormat,
    InvalidIdentifierError,
    LdapLookupError,
    MissingPasswordError,
    MissingServerURLError,
    NotConnectedError,
    NotFound,
    NotFoundError,
    SearchError,
    TLSError,
)


def test_config_error_hierarchy() -> None:
    for error in (InvalidFormat, NotFound, MissingServerURLError, MissingPasswordError):
        assert issubclass(error, ConfigError)
    assert issubclass(ConfigError, LdapLookupError)


@pytest.mark.parametrize(
    "error",
    [DirectoryConnectionError, TLSError, AuthError, NotConnectedError, InvalidIdentifierError, NotFoundError, SearchError],
)
def test_directory_error_hierarchy(error: type[Exception]) -> None:
    assert issubclass(error, DirectoryError)
    assert issubclass(error, LdapLookupError)
    assert not issubclass(error, ConfigError)


def test_default_messages() -> None:
    assert str(MissingServerURLError()) == "no server URL configured"
    assert str(MissingPasswordError()) == "no password found in secrets or environment variables"
    assert str(NotConnectedError()) == "LDAP connection not established"


def test_connection_error_names_address() -> None:
    error = DirectoryConnectionError("ldap://ldap.example.com:389", "connection refused")
    assert error.address == "ldap://ldap.example.com:389"
    assert str(error) == "failed to connect to LDAP server ldap://ldap.example.com:389: connection refused"
    assert str(DirectoryConnectionError("ldap://a")) == "failed to connect to LDAP server ldap://a"


def test_not_found_carries_value() -> None:
    error = NotFoundError("jdoe@example.com")
    assert error.value == "jdoe@example.com"
    assert "jdoe@example.com" in str(error)
