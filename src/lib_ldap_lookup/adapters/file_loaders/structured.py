"""Structured configuration file loaders.

Purpose
-------
Convert on-disk configuration documents into Python mappings. YAML is the
canonical format (``config.yaml``); TOML and JSON are accepted for files named
explicitly through ``LDAP_CONFIG_FILE``.

Contents
--------
* :class:`BaseFileLoader` – shared helpers for reading files and validating
  mapping outputs.
* :class:`YAMLFileLoader` – loader for ``.yaml`` / ``.yml`` via PyYAML.
* :class:`TOMLFileLoader` – loader based on :mod:`tomllib`.
* :class:`JSONFileLoader` – minimal JSON loader.
* :func:`loader_for` – pick a loader by file suffix.

System Role
-----------
Invoked by :func:`lib_ldap_lookup.core.load_config`. Loaders raise
:class:`NotFound` / :class:`InvalidFormat`; the composition root turns both into
"this candidate contributes nothing".
"""

from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Mapping

import yaml

from ...domain.errors import InvalidFormat, NotFound
from ...observability import log_debug, log_error


class BaseFileLoader:
    """Common utilities shared by the structured file loaders."""

    format = "unknown"

    def load(self, path: str) -> Mapping[str, object]:
        raise NotImplementedError

    def _read(self, path: str) -> bytes:
        """Read *path* as bytes, raising :class:`NotFound` when the file is missing or unreadable."""

        file_path = Path(path)
        if not file_path.is_file():
            raise NotFound(f"Configuration file not found: {path}")
        try:
            payload = file_path.read_bytes()
        except OSError as exc:
            raise NotFound(f"Configuration file unreadable: {path}: {exc}") from exc
        log_debug("config_file_read", path=path, layer="file", size=len(payload))
        return payload

    @staticmethod
    def _ensure_mapping(data: object, *, path: str) -> Mapping[str, object]:
        """Ensure *data* behaves like a mapping, otherwise raise ``InvalidFormat``.

        Examples
        --------
        >>> BaseFileLoader._ensure_mapping({"environments": {}}, path="demo")
        {'environments': {}}
        >>> BaseFileLoader._ensure_mapping(["local"], path="demo")
        Traceback (most recent call last):
        ...
        lib_ldap_lookup.domain.errors.InvalidFormat: File demo did not produce a mapping
        """

        if not isinstance(data, Mapping):
            raise InvalidFormat(f"File {path} did not produce a mapping")
        return data

    def _invalid(self, path: str, exc: Exception) -> InvalidFormat:
        log_error("config_file_invalid", layer="file", path=path, format=self.format, error=str(exc))
        return InvalidFormat(f"Invalid {self.format.upper()} in {path}: {exc}")

    def _loaded(self, data: object, path: str) -> Mapping[str, object]:
        result = self._ensure_mapping(data, path=path)
        log_debug("config_file_loaded", layer="file", path=path, format=self.format)
        return result


class YAMLFileLoader(BaseFileLoader):
    """Load YAML documents with ``yaml.safe_load``."""

    format = "yaml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the YAML file at *path*.

        An empty document yields ``{}``.

        Examples
        --------
        >>> from tempfile import NamedTemporaryFile
        >>> tmp = NamedTemporaryFile('w', suffix='.yaml', delete=False, encoding='utf-8')
        >>> _ = tmp.write('environments:\\n  local:\\n    base_dn: dc=example,dc=com\\n')
        >>> tmp.close()
        >>> YAMLFileLoader().load(tmp.name)["environments"]["local"]["base_dn"]
        'dc=example,dc=com'
        >>> Path(tmp.name).unlink()
        """

        payload = self._read(path)
        try:
            data = yaml.safe_load(payload)
        except yaml.YAMLError as exc:
            raise self._invalid(path, exc) from exc
        if data is None:
            data = {}
        return self._loaded(data, path)


class TOMLFileLoader(BaseFileLoader):
    """Load TOML documents using the standard library parser."""

    format = "toml"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the TOML file at *path*."""

        payload = self._read(path)
        try:
            data = tomllib.loads(payload.decode("utf-8"))
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path)


class JSONFileLoader(BaseFileLoader):
    """Load JSON documents."""

    format = "json"

    def load(self, path: str) -> Mapping[str, object]:
        """Return mapping extracted from the JSON file at *path*."""

        payload = self._read(path)
        try:
            data = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise self._invalid(path, exc) from exc
        return self._loaded(data, path)


_LOADERS: dict[str, BaseFileLoader] = {
    ".yaml": YAMLFileLoader(),
    ".yml": YAMLFileLoader(),
    ".toml": TOMLFileLoader(),
    ".json": JSONFileLoader(),
}


def loader_for(path: str) -> BaseFileLoader | None:
    """Return the loader registered for the suffix of *path*, if any.

    Examples
    --------
    >>> type(loader_for("configs/config.yaml")).__name__
    'YAMLFileLoader'
    >>> loader_for("config.ini") is None
    True
    """

    return _LOADERS.get(Path(path).suffix.lower())
