"""Filesystem path resolution for the structured configuration layer.

Purpose
-------
Implement the :class:`lib_ldap_lookup.application.ports.PathResolver` protocol.
The adapter is the only component that knows where configuration and secret
files live.

Contents
--------
* :class:`DefaultPathResolver` – ordered configuration-file candidates and the
  conventional secrets-directory password file.

System Role
-----------
Feeds deterministic path lists into :func:`lib_ldap_lookup.core.load_config`.
``cwd``, ``home`` and ``env`` are injectable so tests never touch the real
home directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Mapping

from ...observability import log_debug
from ..env.default import ENV_CONFIG_FILE
from ..secrets.default import expand_home

#: Candidate file names relative to the working directory, tried in order.
_LOCAL_CANDIDATES = (Path("config.yaml"), Path("configs") / "config.yaml")
#: Per-user configuration file relative to the home directory.
_USER_CANDIDATE = Path(".config") / "ldap" / "config.yaml"
#: Conventional password file relative to the home directory.
_SECRETS_FILE = Path(".secrets") / "ldap" / "password"


class DefaultPathResolver:
    """Resolve candidate paths for configuration and secret files."""

    def __init__(
        self,
        *,
        cwd: Path | None = None,
        home: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> None:
        """Store context required to resolve filesystem locations.

        Parameters
        ----------
        cwd:
            Directory holding ``config.yaml`` / ``configs/config.yaml``.
            Defaults to :meth:`Path.cwd`.
        home:
            Home directory used for the per-user file and secrets. Defaults to
            :meth:`Path.home`.
        env:
            Environment mapping consulted for ``LDAP_CONFIG_FILE``. Defaults to
            :data:`os.environ`.
        """

        self.cwd = cwd or Path.cwd()
        self.home = home or Path.home()
        self.env = os.environ if env is None else env

    def config_files(self) -> Iterable[str]:
        """Return configuration file candidates in precedence order.

        The list is not filtered for existence; loaders report missing files.

        Examples
        --------
        >>> resolver = DefaultPathResolver(cwd=Path("/srv/app"), home=Path("/home/demo"), env={})
        >>> [Path(p).as_posix() for p in resolver.config_files()]
        ['/srv/app/config.yaml', '/srv/app/configs/config.yaml', '/home/demo/.config/ldap/config.yaml']
        """

        paths: list[str] = []
        explicit = self.env.get(ENV_CONFIG_FILE, "")
        if explicit:
            paths.append(str(expand_home(explicit, home=self.home)))
        paths.extend(str(self.cwd / candidate) for candidate in _LOCAL_CANDIDATES)
        paths.append(str(self.home / _USER_CANDIDATE))
        log_debug("path_candidates", layer="file", path=None, count=len(paths))
        return paths

    def secrets_file(self) -> str:
        """Return the conventional ``~/.secrets/ldap/password`` location."""

        return str(self.home / _SECRETS_FILE)
