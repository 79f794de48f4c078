"""User lookup over an established directory connection.

Purpose
-------
Own one connection for its whole lifetime and turn an
:class:`~lib_ldap_lookup.domain.models.Identifier` into a
:class:`~lib_ldap_lookup.domain.models.UserRecord` with a single search.

Contents
--------
* :data:`USER_ATTRIBUTES` – directory attribute -> record field table.
* :func:`build_filter` – escaped equality filter for an identifier.
* :func:`record_from_attributes` – map one entry's attributes into a record.
* :class:`Searcher` – connection owner exposing :meth:`Searcher.get_user`.

System Role
-----------
Instances are produced by :func:`lib_ldap_lookup.adapters.directory.ldap3_client.establish`.
A searcher is not safe for concurrent use; parallel lookups need separate
searchers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final

from ldap3 import DEREF_NEVER, SUBTREE
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars

from ..domain.config import LdapConfig
from ..domain.errors import InvalidIdentifierError, NotConnectedError, NotFoundError, SearchError
from ..domain.models import Identifier, IdentifierKind, UserRecord
from ..observability import log_debug, log_info
from .ports import DirectoryConnection

#: Search base used when the configuration does not name one.
DEFAULT_SEARCH_BASE: Final[str] = "ou=users,dc=redhat,dc=com"

#: Directory attribute -> :class:`UserRecord` field. Only these are requested.
USER_ATTRIBUTES: Final[dict[str, str]] = {
    "uid": "uid",
    "mail": "email",
    "cn": "display_name",
    "sn": "surname",
    "title": "title",
    "manager": "manager_uid",
    "rhatCostCenter": "cost_center",
    "rhatCostCenterDesc": "cost_center_desc",
    "rhatLocation": "location",
    "rhatJobCode": "job_code",
    "rhatUUID": "uuid",
    "rhatHireDate": "hire_date",
    "rhatTermDate": "term_date",
    "rhatAdjustedServiceDate": "adj_svc_date",
}

_FILTER_ATTRIBUTES: Final[dict[IdentifierKind, str]] = {
    IdentifierKind.UID: "uid",
    IdentifierKind.EMAIL: "mail",
}

_RESULT_SUCCESS = 0


def build_filter(identifier: Identifier) -> str:
    """Return the equality filter selecting *identifier*.

    The value is escaped so ``*``, ``(``, ``)``, ``\\`` and NUL match literally.

    Examples
    --------
    >>> build_filter(Identifier.uid("jdoe"))
    '(uid=jdoe)'
    >>> build_filter(Identifier.email("a)(uid=*"))
    '(mail=a\\\\29\\\\28uid=\\\\2a)'
    """

    attribute = _FILTER_ATTRIBUTES.get(identifier.kind)  # type: ignore[call-overload]
    if attribute is None:
        raise InvalidIdentifierError(f"unknown identifier type: {identifier.kind!r}")
    if not identifier.value:
        raise InvalidIdentifierError("identifier value must not be empty")
    return f"({attribute}={escape_filter_chars(identifier.value)})"


def record_from_attributes(attributes: Mapping[str, Any]) -> UserRecord:
    """Map directory *attributes* into a :class:`UserRecord`.

    Attribute names match case-insensitively; multi-valued attributes
    contribute their first value and absent attributes become ``""``.

    Examples
    --------
    >>> record = record_from_attributes({"UID": ["jdoe"], "mail": "jdoe@example.com", "sn": []})
    >>> record.uid, record.email, record.surname
    ('jdoe', 'jdoe@example.com', '')
    """

    lowered = {str(key).lower(): value for key, value in attributes.items()}
    values = {field: _first_value(lowered.get(name.lower())) for name, field in USER_ATTRIBUTES.items()}
    return UserRecord(**values)


def _first_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        if not value:
            return ""
        value = value[0]
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class Searcher:
    """Couple one :class:`LdapConfig` with one live (or absent) connection.

    A searcher without a connection is a deliberate no-op placeholder: it can
    be closed but every lookup raises :class:`NotConnectedError`.
    """

    def __init__(self, config: LdapConfig, connection: DirectoryConnection | None = None) -> None:
        self.config = config
        self._connection = connection

    @property
    def connected(self) -> bool:
        return self._connection is not None

    @property
    def search_base(self) -> str:
        return self.config.search_base or DEFAULT_SEARCH_BASE

    def get_user(self, identifier: Identifier) -> UserRecord:
        """Look up *identifier* and return the first matching entry as a record.

        Raises
        ------
        NotConnectedError
            The searcher holds no connection; nothing is sent.
        InvalidIdentifierError
            Unknown identifier kind or empty value.
        SearchError
            ``ldap3`` raised or the server answered with a non-success result.
        NotFoundError
            No entry matched; carries the unescaped value.
        """

        connection = self._connection
        if connection is None:
            raise NotConnectedError()
        search_filter = build_filter(identifier)
        log_debug("search_started", layer="search", path=None, base=self.search_base, filter=search_filter)
        try:
            connection.search(
                search_base=self.search_base,
                search_filter=search_filter,
                search_scope=SUBTREE,
                dereference_aliases=DEREF_NEVER,
                attributes=list(USER_ATTRIBUTES),
                size_limit=0,
                time_limit=0,
            )
        except LDAPException as exc:
            raise SearchError(f"LDAP search failed: {exc}") from exc

        result = connection.result or {}
        code = result.get("result", _RESULT_SUCCESS)
        if code != _RESULT_SUCCESS:
            description = result.get("description") or result.get("message") or code
            raise SearchError(f"LDAP search failed: {description}")

        entries = [item for item in connection.response or () if item.get("type") == "searchResEntry"]
        if not entries:
            raise NotFoundError(identifier.value)
        if len(entries) > 1:
            log_debug("search_multiple_matches", layer="search", path=None, count=len(entries))
        entry = entries[0]
        log_info("user_found", layer="search", path=None, dn=entry.get("dn"))
        return record_from_attributes(entry.get("attributes") or {})

    def close(self) -> None:
        """Release the connection; safe to call repeatedly or without one."""

        connection, self._connection = self._connection, None
        if connection is None:
            return
        try:
            connection.unbind()
        except LDAPException as exc:
            log_debug("connection_close_failed", layer="connection", path=None, error=str(exc))

    def __enter__(self) -> Searcher:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
