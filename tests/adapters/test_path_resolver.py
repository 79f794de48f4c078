"""Path resolver adapter tests exercising configuration file discovery order."""

from __future__ import annotations

from pathlib import Path

from lib_ldap_lookup.adapters.path_resolvers.default import DefaultPathResolver


def test_candidates_in_documented_order(tmp_path: Path) -> None:
    """cwd file, cwd/configs file, then the per-user file."""

    resolver = DefaultPathResolver(cwd=tmp_path / "work", home=tmp_path / "home", env={})
    paths = [Path(p) for p in resolver.config_files()]
    assert paths == [
        tmp_path / "work" / "config.yaml",
        tmp_path / "work" / "configs" / "config.yaml",
        tmp_path / "home" / ".config" / "ldap" / "config.yaml",
    ]


def test_explicit_config_file_comes_first(tmp_path: Path) -> None:
    resolver = DefaultPathResolver(
        cwd=tmp_path,
        home=tmp_path / "home",
        env={"LDAP_CONFIG_FILE": "~/ldap/settings.toml"},
    )
    first = Path(list(resolver.config_files())[0])
    assert first == tmp_path / "home" / "ldap" / "settings.toml"


def test_secrets_file_under_home(tmp_path: Path) -> None:
    resolver = DefaultPathResolver(cwd=tmp_path, home=tmp_path / "home", env={})
    assert Path(resolver.secrets_file()) == tmp_path / "home" / ".secrets" / "ldap" / "password"


def test_defaults_follow_process(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("LDAP_CONFIG_FILE", raising=False)
    resolver = DefaultPathResolver()
    paths = list(resolver.config_files())
    assert Path(paths[0]) == tmp_path / "config.yaml"
    assert Path(paths[-1]) == tmp_path / "home" / ".config" / "ldap" / "config.yaml"
