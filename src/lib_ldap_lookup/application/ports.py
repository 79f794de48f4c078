"""Application-layer ports describing adapter responsibilities.

Purpose
-------
Define the structural contracts that adapters must satisfy so the composition
root and the searcher can orchestrate behaviour without depending on concrete
implementations.

Contents
--------
* :class:`PathResolver` – yields configuration and secret file candidates.
* :class:`FileLoader` – parses structured configuration artifacts.
* :class:`EnvLoader` – reads the LDAP environment variables.
* :class:`DirectoryConnection` – the subset of :class:`ldap3.Connection` used by
  the establisher and the searcher.
* :data:`ConnectionFactory` – callable building an unopened connection.

System Role
-----------
These protocols keep ``ldap3`` and the filesystem at the edges: tests supply
fakes or ``ldap3`` mock connections through the same seams.
"""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping, Protocol, Sequence, runtime_checkable

from ..domain.config import LdapConfig


@runtime_checkable
class PathResolver(Protocol):
    """Discover configuration artifacts."""

    def config_files(self) -> Iterable[str]:
        """Yield structured configuration file candidates, highest priority first."""

    def secrets_file(self) -> str:
        """Return the conventional password file location."""


@runtime_checkable
class FileLoader(Protocol):
    """Parse a structured configuration file into a mapping."""

    def load(self, path: str) -> Mapping[str, object]:
        """Read *path* and return a mapping or raise ``NotFound`` / ``InvalidFormat``."""


@runtime_checkable
class EnvLoader(Protocol):
    """Translate process environment variables into configuration inputs."""

    def environment(self) -> str:
        """Return the active environment name."""

    def load(self) -> Mapping[str, object]:
        """Return the override layer (server, bind DN, search base, flags)."""

    def password(self) -> str:
        """Return the direct password variable or ``""``."""

    def password_file(self) -> str:
        """Return the password file variable or ``""``."""


class DirectoryConnection(Protocol):
    """Operations the lookup needs from a directory protocol client."""

    result: Mapping[str, Any] | None
    response: Sequence[Mapping[str, Any]] | None

    def open(self) -> None:
        """Dial the server."""

    def start_tls(self) -> bool:
        """Upgrade the open connection to TLS."""

    def bind(self) -> bool:
        """Authenticate with the credentials given at construction."""

    def search(self, search_base: str, search_filter: str, **kwargs: Any) -> bool:
        """Run one search request."""

    def unbind(self) -> bool:
        """Close the connection."""


ConnectionFactory = Callable[[LdapConfig, str], DirectoryConnection]
