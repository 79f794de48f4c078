"""Selection of a named environment inside a structured configuration document.

A configuration document looks like::

    environments:
      prod:
        ldap_servers: ["ldap://ldap.example.com:389"]
        username: uid=svc-lookup,ou=users,dc=example,dc=com
        base_dn: ou=users,dc=example,dc=com
        use_start_tls: true
        verify_ssl: true
        password_file: ~/.secrets/ldap/password

Every key of an entry is optional. Unknown keys are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from ..domain.errors import InvalidFormat

#: Document key -> LdapConfig field.
_FIELD_MAP = {
    "ldap_servers": "servers",
    "username": "bind_dn",
    "base_dn": "search_base",
    "use_start_tls": "use_start_tls",
    "verify_ssl": "verify_ssl",
}
_BOOLEAN_FIELDS = frozenset({"use_start_tls", "verify_ssl"})


@dataclass(frozen=True)
class EnvironmentEntry:
    """Partial configuration for one environment plus its optional secret file."""

    name: str
    fields: dict[str, object] = field(default_factory=dict)
    password_file: str = ""


def select_environment(document: Mapping[str, object], name: str, *, path: str = "<memory>") -> EnvironmentEntry | None:
    """Return the entry for environment *name* or ``None`` when the document has none.

    Raises :class:`InvalidFormat` when the entry exists but has the wrong shape.

    Examples
    --------
    >>> doc = {"environments": {"dev": {"ldap_servers": "ldap://dev:389", "use_start_tls": True}}}
    >>> entry = select_environment(doc, "dev")
    >>> entry.fields
    {'servers': ('ldap://dev:389',), 'use_start_tls': True}
    >>> select_environment(doc, "prod") is None
    True
    """

    environments = document.get("environments")
    if not isinstance(environments, Mapping):
        return None
    entry = environments.get(name)
    if entry is None:
        return None
    if not isinstance(entry, Mapping):
        raise InvalidFormat(f"Environment {name!r} in {path} is not a mapping")

    collected: dict[str, object] = {}
    for source_key, target_key in _FIELD_MAP.items():
        if source_key not in entry or entry[source_key] is None:
            continue
        value = entry[source_key]
        if target_key == "servers":
            collected[target_key] = _servers(value, name=name, path=path)
        elif target_key in _BOOLEAN_FIELDS:
            if not isinstance(value, bool):
                raise InvalidFormat(f"{source_key} of environment {name!r} in {path} must be a boolean")
            collected[target_key] = value
        else:
            collected[target_key] = str(value)
    password_file = entry.get("password_file") or ""
    return EnvironmentEntry(name=name, fields=collected, password_file=str(password_file))


def _servers(value: object, *, name: str, path: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value if item)
    raise InvalidFormat(f"ldap_servers of environment {name!r} in {path} must be a list of URLs")
