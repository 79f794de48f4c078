"""Connection establishment on top of :mod:`ldap3`.

Purpose
-------
Turn a fully resolved :class:`~lib_ldap_lookup.domain.config.LdapConfig` into
a :class:`~lib_ldap_lookup.application.search.Searcher` owning a ready
connection: dial, optionally upgrade with StartTLS, optionally bind.

Key behaviours
--------------
* An empty server list yields a searcher without a connection (no error).
* Exactly one attempt per step; no retries and no client-side timeouts.
* Any failure after the socket is open unbinds the connection before the
  error propagates, so callers never receive a half-initialised handle.
"""

from __future__ import annotations

import ssl
from typing import Final

from ldap3 import NONE, Connection, Server, Tls
from ldap3.core.exceptions import LDAPException

from ...application.ports import ConnectionFactory, DirectoryConnection
from ...application.search import Searcher
from ...domain.config import LdapConfig
from ...domain.errors import AuthError, DirectoryConnectionError, TLSError
from ...observability import log_debug, log_info

_SCHEMES: Final[tuple[str, ...]] = ("ldap://", "ldaps://")


def extract_hostname(url: str) -> str:
    """Return the host part of an LDAP URL for TLS name verification.

    Examples
    --------
    >>> extract_hostname("ldap://example.com:389")
    'example.com'
    >>> extract_hostname("ldaps://secure.example.com:636")
    'secure.example.com'
    >>> extract_hostname("host")
    'host'
    >>> extract_hostname("example.com:389")
    'example.com'
    """

    host = url
    for scheme in _SCHEMES:
        if host.startswith(scheme):
            host = host[len(scheme) :]
            break
    host, _, _ = host.partition(":")
    return host


def build_tls(config: LdapConfig, url: str) -> Tls:
    """Return the TLS settings used for the StartTLS upgrade of *url*."""

    return Tls(
        validate=ssl.CERT_REQUIRED if config.verify_ssl else ssl.CERT_NONE,
        valid_names=[extract_hostname(url)],
    )


def default_connection_factory(config: LdapConfig, url: str) -> DirectoryConnection:
    """Build an unopened synchronous :class:`ldap3.Connection` for *url*.

    Credentials are attached only for an authenticated bind; otherwise the
    connection stays anonymous.
    """

    tls = build_tls(config, url) if config.use_start_tls else None
    server = Server(url, get_info=NONE, tls=tls)
    if config.has_credentials:
        return Connection(server, user=config.bind_dn, password=config.bind_password, raise_exceptions=False)
    return Connection(server, raise_exceptions=False)


def establish(config: LdapConfig, *, connection_factory: ConnectionFactory | None = None) -> Searcher:
    """Open, upgrade and bind a connection described by *config*.

    Raises
    ------
    DirectoryConnectionError
        The first server could not be dialled.
    TLSError
        The StartTLS upgrade failed; the connection is closed first.
    AuthError
        The bind was rejected; the connection is closed first.

    Examples
    --------
    >>> searcher = establish(LdapConfig())
    >>> searcher.connected
    False
    >>> searcher.close()
    """

    if not config.servers:
        log_debug("connection_skipped", layer="connection", path=None, reason="no servers configured")
        return Searcher(config)

    url = config.server_url
    factory = connection_factory or default_connection_factory
    try:
        connection = factory(config, url)
        connection.open()
    except LDAPException as exc:
        raise DirectoryConnectionError(url, exc) from exc
    log_debug("connection_opened", layer="connection", path=None, server=url)

    if config.use_start_tls:
        _start_tls(connection, url)
    if config.has_credentials:
        _bind(connection, config)

    log_info("connection_ready", layer="connection", path=None, server=url, authenticated=config.has_credentials)
    return Searcher(config, connection)


def _start_tls(connection: DirectoryConnection, url: str) -> None:
    try:
        upgraded = connection.start_tls()
    except LDAPException as exc:
        _discard(connection)
        raise TLSError(f"failed to start TLS with {extract_hostname(url)}: {exc}") from exc
    if not upgraded:
        _discard(connection)
        raise TLSError(f"failed to start TLS with {extract_hostname(url)}: {_describe(connection)}")


def _bind(connection: DirectoryConnection, config: LdapConfig) -> None:
    try:
        bound = connection.bind()
    except LDAPException as exc:
        _discard(connection)
        raise AuthError(f"failed to bind to LDAP as {config.bind_dn}: {exc}") from exc
    if not bound:
        _discard(connection)
        raise AuthError(f"failed to bind to LDAP as {config.bind_dn}: {_describe(connection)}")


def _describe(connection: DirectoryConnection) -> str:
    result = connection.result or {}
    return str(result.get("description") or result.get("message") or "rejected by server")


def _discard(connection: DirectoryConnection) -> None:
    """Close *connection* after a failed step; close errors are logged, not raised."""

    try:
        connection.unbind()
    except LDAPException as exc:
        log_debug("connection_close_failed", layer="connection", path=None, error=str(exc))
