"""Environment variable adapter.

Purpose
-------
Translate the process environment into configuration layers. The variable
names are a fixed contract surface:

==========================  ==================================================
``LDAP_ENV`` / ``ENV``      active environment name (``local`` by default)
``LDAP_CONFIG_FILE``        explicit structured configuration file
``LDAP_URL``                server address (replaces the server list)
``LDAP_BIND_DN``            bind identity
``LDAP_BASE_DN``            search base
``LDAP_PASSWORD``           bind password (lowest-precedence password source)
``LDAP_PASSWORD_FILE``      file holding the bind password
``LDAP_STARTTLS``           ``"true"`` enables StartTLS, anything else disables
``LDAP_VERIFY_SSL``         ``"true"`` enables certificate verification
==========================  ==================================================

Key behaviours
--------------
* Empty values count as unset everywhere.
* Boolean flags only produce an override when the variable is non-empty; the
  override is the literal comparison ``value == "true"``.
* Emits structured logging via :mod:`lib_ldap_lookup.observability`; values
  are never logged, only the names of the variables that contributed.
"""

from __future__ import annotations

import os
from typing import Final, Mapping

from ...observability import log_debug

ENV_SELECTOR: Final[str] = "LDAP_ENV"
ENV_SELECTOR_FALLBACK: Final[str] = "ENV"
DEFAULT_ENVIRONMENT: Final[str] = "local"

ENV_CONFIG_FILE: Final[str] = "LDAP_CONFIG_FILE"
ENV_URL: Final[str] = "LDAP_URL"
ENV_BIND_DN: Final[str] = "LDAP_BIND_DN"
ENV_BASE_DN: Final[str] = "LDAP_BASE_DN"
ENV_PASSWORD: Final[str] = "LDAP_PASSWORD"
ENV_PASSWORD_FILE: Final[str] = "LDAP_PASSWORD_FILE"
ENV_STARTTLS: Final[str] = "LDAP_STARTTLS"
ENV_VERIFY_SSL: Final[str] = "LDAP_VERIFY_SSL"


def resolve_environment(environ: Mapping[str, str] | None = None) -> str:
    """Return the active environment name.

    ``LDAP_ENV`` wins over ``ENV``; with neither set the result is ``"local"``.
    The name is not validated: an unknown name simply matches no file entry.

    Examples
    --------
    >>> resolve_environment({"LDAP_ENV": "prod", "ENV": "dev"})
    'prod'
    >>> resolve_environment({"ENV": "dev"})
    'dev'
    >>> resolve_environment({})
    'local'
    """

    source = os.environ if environ is None else environ
    for name in (ENV_SELECTOR, ENV_SELECTOR_FALLBACK):
        value = source.get(name, "")
        if value:
            return value
    return DEFAULT_ENVIRONMENT


class DefaultEnvLoader:
    """Read the LDAP variables from an environment mapping."""

    def __init__(self, *, environ: Mapping[str, str] | None = None) -> None:
        """Initialise the loader with a specific ``environ`` mapping for testability.

        Parameters
        ----------
        environ:
            Mapping to read from. Defaults to :data:`os.environ`.
        """

        self._environ = os.environ if environ is None else environ

    def get(self, name: str) -> str:
        """Return variable *name* or ``""`` when it is unset."""

        return self._environ.get(name, "") or ""

    def environment(self) -> str:
        return resolve_environment(self._environ)

    def load(self) -> dict[str, object]:
        """Return the override layer: fields set through non-empty variables.

        The password is deliberately absent; it follows its own chain (see
        :meth:`password` and :meth:`password_file`).

        Examples
        --------
        >>> loader = DefaultEnvLoader(environ={
        ...     "LDAP_URL": "ldap://ldap.example.com:389",
        ...     "LDAP_BASE_DN": "",
        ...     "LDAP_STARTTLS": "yes",
        ... })
        >>> loader.load()
        {'servers': ('ldap://ldap.example.com:389',), 'use_start_tls': False}
        """

        collected: dict[str, object] = {}
        url = self.get(ENV_URL)
        if url:
            collected["servers"] = (url,)
        bind_dn = self.get(ENV_BIND_DN)
        if bind_dn:
            collected["bind_dn"] = bind_dn
        base_dn = self.get(ENV_BASE_DN)
        if base_dn:
            collected["search_base"] = base_dn
        for variable, key in ((ENV_STARTTLS, "use_start_tls"), (ENV_VERIFY_SSL, "verify_ssl")):
            flag = _flag(self.get(variable))
            if flag is not None:
                collected[key] = flag
        log_debug("env_variables_loaded", layer="env", path=None, keys=sorted(collected.keys()))
        return collected

    def password(self) -> str:
        return self.get(ENV_PASSWORD)

    def password_file(self) -> str:
        return self.get(ENV_PASSWORD_FILE)


def _flag(value: str) -> bool | None:
    """Return the boolean override for *value* or ``None`` when unset.

    Examples
    --------
    >>> _flag("true"), _flag("false"), _flag("TRUE"), _flag("")
    (True, False, False, None)
    """

    if not value:
        return None
    return value == "true"
