"""Composition root for ``lib_ldap_lookup``.

Purpose
-------
Provide the entry points that orchestrate path resolution, file loading,
secret reading, environment ingestion, merge policy enforcement and connection
establishment.

Contents
--------
* :func:`load_config` – layered configuration as an :class:`LdapConfig`.
* :func:`config_from_env` – environment-only configuration.
* :func:`new_searcher` / :func:`new_searcher_from_env` /
  :func:`new_searcher_with_defaults` – searcher constructors.
* :func:`lookup_user` – one-shot convenience: parse, connect, search, close.

System Role
-----------
The configuration is loaded explicitly by the caller's entry point and passed
into whichever constructor needs it; nothing is loaded at import time.

Precedence of :func:`load_config`, lowest first (later layers win per field):

1. ``LDAP_PASSWORD``
2. ``~/.secrets/ldap/password``
3. ``LDAP_PASSWORD_FILE``
4. structured file entry for the active environment (incl. its ``password_file``)
5. ``LDAP_URL`` / ``LDAP_BIND_DN`` / ``LDAP_BASE_DN`` / ``LDAP_STARTTLS`` /
   ``LDAP_VERIFY_SSL``

Layers 1-3 only ever carry a password, so the password resolves "file secret,
then password file, then secrets directory, then direct variable" while every
other field resolves "environment over file".
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Mapping

from .adapters.directory.ldap3_client import establish
from .adapters.env.default import (
    ENV_BASE_DN,
    ENV_BIND_DN,
    ENV_STARTTLS,
    ENV_URL,
    ENV_VERIFY_SSL,
    DefaultEnvLoader,
    resolve_environment,
)
from .adapters.file_loaders.structured import loader_for
from .adapters.path_resolvers.default import DefaultPathResolver
from .adapters.secrets.default import read_secret
from .application.environments import EnvironmentEntry, select_environment
from .application.merge import Layer, merge_layers
from .application.ports import ConnectionFactory, EnvLoader, FileLoader, PathResolver
from .application.search import Searcher
from .domain.config import EMPTY_CONFIG, LdapConfig, config_from_mapping
from .domain.errors import InvalidFormat, MissingPasswordError, MissingServerURLError, NotFound
from .domain.models import Identifier, UserRecord
from .observability import bind_trace_id, log_debug, log_info, make_event


def load_config(
    *,
    environment: str | None = None,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
    home: Path | None = None,
) -> LdapConfig:
    """Return the merged configuration; never raises.

    Parameters
    ----------
    environment:
        Environment name to select in the structured file. Defaults to
        :func:`resolve_environment` (``LDAP_ENV``, ``ENV``, ``"local"``).
    environ / cwd / home:
        Injection points for the environment mapping, working directory and
        home directory; default to the running process.

    Returns
    -------
    LdapConfig
        :data:`EMPTY_CONFIG` when no source supplied anything.

    Examples
    --------
    >>> cfg = load_config(environ={"LDAP_URL": "ldap://ldap.example.com:389", "LDAP_PASSWORD": "pw"}, cwd=Path("/nonexistent"), home=Path("/nonexistent"))
    >>> cfg.servers, cfg.origin("bind_password")["layer"]
    (('ldap://ldap.example.com:389',), 'env-password')
    """

    source = os.environ if environ is None else environ
    env_loader: EnvLoader = DefaultEnvLoader(environ=source)
    resolver: PathResolver = DefaultPathResolver(cwd=cwd, home=home, env=source)
    name = environment or env_loader.environment()

    bind_trace_id(None)

    layers = _collect_layers(env_loader, resolver, name, home)

    data, meta = merge_layers(layers)
    if not data:
        log_info("configuration_empty", layer="none", path=None, environment=name)
        return EMPTY_CONFIG
    log_info("configuration_merged", layer="final", path=None, environment=name, fields=sorted(data))
    return config_from_mapping(data, meta)


def config_from_env(environ: Mapping[str, str] | None = None) -> LdapConfig:
    """Build a configuration from environment variables only.

    Unlike :func:`load_config`, certificate verification is on unless
    ``LDAP_VERIFY_SSL`` is exactly ``"false"``.

    Examples
    --------
    >>> cfg = config_from_env({"LDAP_URL": "ldap://a:389", "LDAP_STARTTLS": "true"})
    >>> cfg.servers, cfg.use_start_tls, cfg.verify_ssl
    (('ldap://a:389',), True, True)
    """

    env = DefaultEnvLoader(environ=os.environ if environ is None else environ)
    return LdapConfig(
        servers=(env.get(ENV_URL),) if env.get(ENV_URL) else (),
        bind_dn=env.get(ENV_BIND_DN),
        bind_password=env.password(),
        search_base=env.get(ENV_BASE_DN),
        use_start_tls=env.get(ENV_STARTTLS) == "true",
        verify_ssl=env.get(ENV_VERIFY_SSL) != "false",
    )


def new_searcher(config: LdapConfig, *, connection_factory: ConnectionFactory | None = None) -> Searcher:
    """Return a searcher for *config* (no connection when it names no server)."""

    return establish(config, connection_factory=connection_factory)


def new_searcher_from_env(
    environ: Mapping[str, str] | None = None,
    *,
    connection_factory: ConnectionFactory | None = None,
) -> Searcher:
    return establish(config_from_env(environ), connection_factory=connection_factory)


def new_searcher_with_defaults(
    config: LdapConfig | None = None,
    *,
    connection_factory: ConnectionFactory | None = None,
) -> Searcher:
    """Validate *config* (loaded via :func:`load_config` when omitted) and connect.

    Raises
    ------
    MissingPasswordError
        No source supplied a bind password.
    MissingServerURLError
        No source supplied a server address.

    Examples
    --------
    >>> new_searcher_with_defaults(LdapConfig(servers=("ldap://a",)))
    Traceback (most recent call last):
    ...
    lib_ldap_lookup.domain.errors.MissingPasswordError: no password found in secrets or environment variables
    >>> new_searcher_with_defaults(LdapConfig(bind_password="pw"))
    Traceback (most recent call last):
    ...
    lib_ldap_lookup.domain.errors.MissingServerURLError: no server URL configured
    """

    resolved = load_config() if config is None else config
    if not resolved.bind_password:
        raise MissingPasswordError()
    if not resolved.servers:
        raise MissingServerURLError()
    return establish(resolved, connection_factory=connection_factory)


def lookup_user(
    text: str,
    config: LdapConfig | None = None,
    *,
    connection_factory: ConnectionFactory | None = None,
) -> UserRecord:
    """Resolve *text* (login name or email) to a :class:`UserRecord`.

    The searcher is always closed, including when the lookup fails.
    """

    identifier = Identifier.parse(text)
    with new_searcher_with_defaults(config, connection_factory=connection_factory) as searcher:
        return searcher.get_user(identifier)


def _collect_layers(env_loader: EnvLoader, resolver: PathResolver, environment: str, home: Path | None) -> list[Layer]:
    """Return the configuration layers for *environment*, lowest precedence first."""

    layers: list[Layer] = [
        ("env-password", {"bind_password": env_loader.password()}, None),
        ("secrets-dir", *_secret_layer(resolver.secrets_file(), home)),
    ]
    password_file = env_loader.password_file()
    if password_file:
        layers.append(("password-file", *_secret_layer(password_file, home)))

    file_layer = _load_file_layer(resolver.config_files(), environment, home)
    if file_layer is not None:
        layers.append(file_layer)
        log_debug("layer_loaded", **make_event("file", file_layer[2], {"environment": environment}))

    layers.append(("env", env_loader.load(), None))
    return layers


def _secret_layer(path: str, home: Path | None) -> tuple[dict[str, object], str | None]:
    """Return ``(payload, path)`` for a password stored in *path*."""

    return {"bind_password": read_secret(path, home=home)}, path


def _load_file_layer(paths: Iterable[str], environment: str, home: Path | None) -> Layer | None:
    """Return the first candidate file layer that defines *environment*.

    Missing, unparsable or entry-less candidates are skipped, so a broken
    ``config.yaml`` never prevents the per-user file from being used.
    """

    for path in paths:
        loader: FileLoader | None = loader_for(path)
        if loader is None:
            continue
        try:
            document = loader.load(path)
            entry = select_environment(document, environment, path=path)
        except NotFound:
            continue
        except InvalidFormat as exc:
            log_debug("layer_error", layer="file", path=path, error=str(exc))
            continue
        if entry is None:
            log_debug("environment_missing", layer="file", path=path, environment=environment)
            continue
        return "file", _entry_payload(entry, home), path
    return None


def _entry_payload(entry: EnvironmentEntry, home: Path | None) -> dict[str, object]:
    payload = dict(entry.fields)
    if entry.password_file:
        payload["bind_password"] = read_secret(entry.password_file, home=home)
    return payload


__all__ = [
    "load_config",
    "config_from_env",
    "new_searcher",
    "new_searcher_from_env",
    "new_searcher_with_defaults",
    "lookup_user",
    "resolve_environment",
]
