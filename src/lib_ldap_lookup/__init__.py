"""Public package surface for ``lib_ldap_lookup``.

Resolve LDAP connection settings from a YAML file, secret files and
environment variables, connect to the directory and look up one user by login
name or email::

    from lib_ldap_lookup import Identifier, load_config, new_searcher_with_defaults

    config = load_config()
    with new_searcher_with_defaults(config) as searcher:
        record = searcher.get_user(Identifier.parse("jdoe"))
"""

from __future__ import annotations

from .adapters.directory.ldap3_client import establish, extract_hostname
from .adapters.secrets.default import read_secret
from .application.search import Searcher
from .core import (
    config_from_env,
    load_config,
    lookup_user,
    new_searcher,
    new_searcher_from_env,
    new_searcher_with_defaults,
    resolve_environment,
)
from .domain.config import EMPTY_CONFIG, LdapConfig
from .domain.errors import (
    AuthError,
    ConfigError,
    DirectoryConnectionError,
    DirectoryError,
    InvalidIdentifierError,
    LdapLookupError,
    MissingPasswordError,
    MissingServerURLError,
    NotConnectedError,
    NotFoundError,
    SearchError,
    TLSError,
)
from .domain.models import Identifier, IdentifierKind, UserRecord
from .observability import bind_trace_id, get_logger

__all__ = [
    "AuthError",
    "ConfigError",
    "DirectoryConnectionError",
    "DirectoryError",
    "EMPTY_CONFIG",
    "Identifier",
    "IdentifierKind",
    "InvalidIdentifierError",
    "LdapConfig",
    "LdapLookupError",
    "MissingPasswordError",
    "MissingServerURLError",
    "NotConnectedError",
    "NotFoundError",
    "SearchError",
    "Searcher",
    "TLSError",
    "UserRecord",
    "bind_trace_id",
    "config_from_env",
    "establish",
    "extract_hostname",
    "get_logger",
    "load_config",
    "lookup_user",
    "new_searcher",
    "new_searcher_from_env",
    "new_searcher_with_defaults",
    "read_secret",
    "resolve_environment",
]
