"""Shared fixtures for the lookup test-suite.

* :class:`LdapSandbox` – isolated working directory, home directory and
  environment mapping for layered configuration tests.
* :class:`FakeConnection` – scripted stand-in for :class:`ldap3.Connection`
  recording every call.
* :func:`mock_directory` – connection factory backed by ``ldap3``'s
  ``MOCK_SYNC`` strategy with pre-populated entries.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Mapping

import pytest
from ldap3 import MOCK_SYNC, NONE, Connection, Server

from lib_ldap_lookup import LdapConfig, load_config

LDAP_VARIABLES = (
    "LDAP_ENV",
    "ENV",
    "LDAP_CONFIG_FILE",
    "LDAP_URL",
    "LDAP_BIND_DN",
    "LDAP_BASE_DN",
    "LDAP_PASSWORD",
    "LDAP_PASSWORD_FILE",
    "LDAP_STARTTLS",
    "LDAP_VERIFY_SSL",
)


@dataclass
class LdapSandbox:
    """Temporary cwd/home pair plus the environment handed to the loader."""

    cwd: Path
    home: Path
    env: dict[str, str] = field(default_factory=dict)

    def write_config(self, body: str, relative: str = "config.yaml", *, under: str = "cwd") -> Path:
        """Write a configuration document below the sandbox cwd or home."""

        base = self.home if under == "home" else self.cwd
        path = base / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(body, encoding="utf-8")
        return path

    def write_secret(self, relative: str, value: str, *, mode: int = 0o600) -> Path:
        """Write a secret file below the sandbox home with *mode* permissions."""

        path = self.home / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(value, encoding="utf-8")
        path.chmod(mode)
        return path

    def load(self, **kwargs: Any) -> LdapConfig:
        return load_config(environ=self.env, cwd=self.cwd, home=self.home, **kwargs)

    def apply_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Mirror the sandbox into the real process (env vars, cwd, HOME)."""

        for name in LDAP_VARIABLES:
            monkeypatch.delenv(name, raising=False)
        for key, value in self.env.items():
            monkeypatch.setenv(key, value)
        monkeypatch.setenv("HOME", str(self.home))
        monkeypatch.chdir(self.cwd)


def create_ldap_sandbox(tmp_path: Path) -> LdapSandbox:
    cwd = tmp_path / "project"
    home = tmp_path / "home"
    cwd.mkdir()
    home.mkdir()
    return LdapSandbox(cwd=cwd, home=home)


class FakeConnection:
    """Scripted connection object satisfying ``DirectoryConnection``."""

    def __init__(
        self,
        *,
        open_error: Exception | None = None,
        start_tls_result: bool = True,
        start_tls_error: Exception | None = None,
        bind_result: bool = True,
        search_error: Exception | None = None,
        result: Mapping[str, Any] | None = None,
        entries: list[Mapping[str, Any]] | None = None,
    ) -> None:
        self.open_error = open_error
        self.start_tls_result = start_tls_result
        self.start_tls_error = start_tls_error
        self.bind_result = bind_result
        self.search_error = search_error
        self.search_result = dict(result or {"result": 0, "description": "success"})
        self.entries = list(entries or [])
        self.calls: list[str] = []
        self.searches: list[dict[str, Any]] = []
        self.result: Mapping[str, Any] | None = None
        self.response: list[Mapping[str, Any]] | None = None
        self.closed = True

    def open(self) -> None:
        self.calls.append("open")
        if self.open_error is not None:
            raise self.open_error
        self.closed = False

    def start_tls(self) -> bool:
        self.calls.append("start_tls")
        if self.start_tls_error is not None:
            raise self.start_tls_error
        if not self.start_tls_result:
            self.result = {"result": 2, "description": "protocolError"}
        return self.start_tls_result

    def bind(self) -> bool:
        self.calls.append("bind")
        if not self.bind_result:
            self.result = {"result": 49, "description": "invalidCredentials"}
        return self.bind_result

    def search(self, search_base: str, search_filter: str, **kwargs: Any) -> bool:
        self.calls.append("search")
        self.searches.append({"search_base": search_base, "search_filter": search_filter, **kwargs})
        if self.search_error is not None:
            raise self.search_error
        self.result = self.search_result
        self.response = [{"type": "searchResEntry", **entry} for entry in self.entries]
        return bool(self.entries)

    def unbind(self) -> bool:
        self.calls.append("unbind")
        self.closed = True
        return True


def fake_factory(connection: FakeConnection) -> Callable[[LdapConfig, str], FakeConnection]:
    """Return a connection factory handing out *connection* and recording the URL."""

    def factory(config: LdapConfig, url: str) -> FakeConnection:
        connection.calls.append(f"factory:{url}")
        return connection

    return factory


def mock_directory(
    entries: Mapping[str, Mapping[str, object]],
) -> Callable[[LdapConfig, str], Connection]:
    """Return a factory building ``MOCK_SYNC`` connections populated with *entries*.

    Bind credentials from the configuration are attached the same way the real
    factory does, so an authenticated bind only succeeds when an entry with a
    matching ``userPassword`` exists.
    """

    def factory(config: LdapConfig, url: str) -> Connection:
        server = Server(url, get_info=NONE)
        if config.has_credentials:
            connection = Connection(
                server,
                user=config.bind_dn,
                password=config.bind_password,
                client_strategy=MOCK_SYNC,
                raise_exceptions=False,
            )
        else:
            connection = Connection(server, client_strategy=MOCK_SYNC, raise_exceptions=False)
        for dn, attributes in entries.items():
            connection.strategy.add_entry(dn, dict(attributes))
        return connection

    return factory


__all__ = [
    "FakeConnection",
    "LDAP_VARIABLES",
    "LdapSandbox",
    "create_ldap_sandbox",
    "fake_factory",
    "mock_directory",
]
