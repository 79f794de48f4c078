"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the composition root, and
consuming applications. The hierarchy lives in the domain layer so adapters may
raise it without the domain depending on ``ldap3`` or the filesystem.

Contents
--------
* :class:`LdapLookupError` – umbrella base class for every library failure.
* :class:`ConfigError` – configuration problems; :class:`InvalidFormat` and
  :class:`NotFound` stay inside the loader, :class:`MissingServerURLError` and
  :class:`MissingPasswordError` reach callers of
  :func:`lib_ldap_lookup.core.new_searcher_with_defaults`.
* :class:`DirectoryError` – connection and lookup failures raised by the
  establisher and the :class:`~lib_ldap_lookup.application.search.Searcher`.

System Role
-----------
Callers catch :class:`LdapLookupError` to handle all library failures uniformly
or one of the leaf types to branch on a specific outcome (e.g. "not found").
"""

from __future__ import annotations


class LdapLookupError(Exception):
    """Base type for all exceptions emitted by ``lib_ldap_lookup``."""


class ConfigError(LdapLookupError):
    """Base type for configuration-related failures."""


class InvalidFormat(ConfigError):
    """Raised when a configuration file cannot be parsed into structured data.

    Typical Sources
    ---------------
    Structured file loaders (:mod:`tomllib`, :mod:`json`, :mod:`yaml`). The
    layered loader treats it like a missing file.
    """


class NotFound(ConfigError):
    """Represents missing-but-optional resources (config files, parsers)."""


class MissingServerURLError(ConfigError):
    """No server address was supplied by any configuration source."""

    def __init__(self, message: str = "no server URL configured") -> None:
        super().__init__(message)


class MissingPasswordError(ConfigError):
    """No bind password was supplied by any configuration source."""

    def __init__(self, message: str = "no password found in secrets or environment variables") -> None:
        super().__init__(message)


class DirectoryError(LdapLookupError):
    """Base type for failures talking to the directory server."""


class DirectoryConnectionError(DirectoryError):
    """The server could not be reached (DNS, refusal, socket errors)."""

    def __init__(self, address: str, reason: object = None) -> None:
        self.address = address
        message = f"failed to connect to LDAP server {address}"
        if reason is not None:
            message = f"{message}: {reason}"
        super().__init__(message)


class TLSError(DirectoryError):
    """The StartTLS upgrade of an open connection failed."""


class AuthError(DirectoryError):
    """The server rejected the bind credentials."""


class NotConnectedError(DirectoryError):
    """A search was attempted on a searcher without a live connection."""

    def __init__(self, message: str = "LDAP connection not established") -> None:
        super().__init__(message)


class InvalidIdentifierError(DirectoryError):
    """The identifier kind is unknown or its value is empty."""


class NotFoundError(DirectoryError):
    """No directory entry matched the searched value.

    ``value`` holds the identifier exactly as the caller supplied it, never the
    escaped filter fragment.
    """

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"user not found in LDAP directory: {value}")


class SearchError(DirectoryError):
    """The search request failed for any other reason (bad filter, server error)."""
