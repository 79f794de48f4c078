"""Domain-level configuration value objects.

Purpose
-------
Anchor the immutable :class:`LdapConfig` value object that describes how to
reach and authenticate against a directory server. This module contains no
I/O; the layered loader in :mod:`lib_ldap_lookup.core` builds instances and the
connection establisher consumes them.

Contents
--------
* :class:`SourceInfo` – typed metadata describing which layer supplied a field.
* :class:`LdapConfig` – frozen dataclass with provenance helpers.
* :func:`config_from_mapping` – build an :class:`LdapConfig` from a flat
  ``{field: value}`` mapping produced by the merge policy.
* :data:`EMPTY_CONFIG` – canonical empty instance (no-op searcher mode).

System Role
-----------
Every consumer call to :func:`lib_ldap_lookup.core.load_config` receives an
:class:`LdapConfig`. Callers may also construct one directly and hand it to
:func:`lib_ldap_lookup.core.new_searcher`.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Final, TypedDict

#: Placeholder shown instead of the bind password in diagnostic output.
REDACTED: Final[str] = "***"


class SourceInfo(TypedDict):
    """Describe the origin of a resolved configuration field.

    Attributes
    ----------
    layer:
        Logical layer name (``"file"``, ``"password-file"``, ``"secrets-dir"``,
        ``"env-password"`` or ``"env"``).
    path:
        Filesystem path that produced the value; ``None`` for environment
        variables.
    key:
        Field name on :class:`LdapConfig`.
    """

    layer: str
    path: str | None
    key: str


@dataclass(frozen=True, slots=True)
class LdapConfig:
    """Immutable description of one directory server connection.

    Only the first entry of ``servers`` is dialled; further entries are kept
    for a failover strategy that does not exist yet.

    Examples
    --------
    >>> cfg = LdapConfig(servers=("ldap://ldap.example.com:389",), bind_dn="uid=svc", bind_password="s3cret")
    >>> cfg.is_empty, cfg.has_credentials
    (False, True)
    >>> cfg.redacted()["bind_password"]
    '***'
    >>> LdapConfig().is_empty
    True
    """

    servers: tuple[str, ...] = ()
    bind_dn: str = ""
    bind_password: str = field(default="", repr=False)
    search_base: str = ""
    use_start_tls: bool = False
    verify_ssl: bool = False
    _meta: Mapping[str, SourceInfo] = field(default_factory=dict, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "servers", tuple(self.servers))
        object.__setattr__(self, "_meta", MappingProxyType(dict(self._meta)))

    @property
    def server_url(self) -> str:
        """Return the address that will be dialled, or ``""`` when none is set."""

        return self.servers[0] if self.servers else ""

    @property
    def has_credentials(self) -> bool:
        """``True`` when both bind DN and password are present (authenticated bind)."""

        return bool(self.bind_dn and self.bind_password)

    @property
    def is_empty(self) -> bool:
        return self == EMPTY_CONFIG

    def origin(self, key: str) -> SourceInfo | None:
        """Return provenance for field *key* or ``None`` when no layer produced it.

        Examples
        --------
        >>> cfg = LdapConfig(search_base="dc=example,dc=com", _meta={"search_base": {"layer": "env", "path": None, "key": "search_base"}})
        >>> cfg.origin("search_base")["layer"]
        'env'
        >>> cfg.origin("bind_dn") is None
        True
        """

        return self._meta.get(key)

    def provenance(self) -> dict[str, SourceInfo]:
        """Return a mutable copy of the provenance metadata."""

        return {key: dict(info) for key, info in self._meta.items()}  # type: ignore[misc]

    def with_overrides(self, **overrides: Any) -> LdapConfig:
        """Produce a copy with *overrides* applied; provenance is kept as-is.

        Examples
        --------
        >>> base = LdapConfig(servers=("ldap://a",))
        >>> base.with_overrides(use_start_tls=True).use_start_tls
        True
        >>> base.use_start_tls
        False
        """

        return replace(self, **overrides)

    def redacted(self) -> dict[str, Any]:
        """Return a JSON-friendly mapping with the bind password masked."""

        data = {item.name: getattr(self, item.name) for item in fields(self) if not item.name.startswith("_")}
        data["servers"] = list(self.servers)
        if data["bind_password"]:
            data["bind_password"] = REDACTED
        return data

    def to_json(self, *, indent: int | None = None) -> str:
        """Serialise :meth:`redacted` to JSON.

        Examples
        --------
        >>> LdapConfig(servers=("ldap://a",)).to_json()
        '{"servers":["ldap://a"],"bind_dn":"","bind_password":"","search_base":"","use_start_tls":false,"verify_ssl":false}'
        """

        return json.dumps(self.redacted(), indent=indent, separators=(",", ":"), ensure_ascii=False)


def config_from_mapping(
    data: Mapping[str, object],
    meta: Mapping[str, SourceInfo] | None = None,
) -> LdapConfig:
    """Build an :class:`LdapConfig` from a flat mapping of field names.

    Unknown keys are ignored; string ``servers`` values become a one-item tuple.

    Examples
    --------
    >>> config_from_mapping({"servers": "ldap://a", "use_start_tls": True}).servers
    ('ldap://a',)
    >>> config_from_mapping({}) == EMPTY_CONFIG
    True
    """

    servers = data.get("servers", ())
    if isinstance(servers, str):
        servers = (servers,) if servers else ()
    return LdapConfig(
        servers=tuple(str(item) for item in servers if item),  # type: ignore[union-attr]
        bind_dn=str(data.get("bind_dn") or ""),
        bind_password=str(data.get("bind_password") or ""),
        search_base=str(data.get("search_base") or ""),
        use_start_tls=bool(data.get("use_start_tls", False)),
        verify_ssl=bool(data.get("verify_ssl", False)),
        _meta=dict(meta or {}),
    )


#: Shared empty configuration; a searcher built from it holds no connection.
EMPTY_CONFIG = LdapConfig()
