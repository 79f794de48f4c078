"""CLI adapter for ``lib_ldap_lookup`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the lookup and the layered configuration via a command line interface
so operators can check a user or inspect which source won for each setting
without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_lookup` – connect and print one user record.
* :func:`cli_config` – print the resolved configuration (password redacted).
* :func:`cli_env` – print the active environment name.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`main` / :func:`ldapcheck` – entry points used by ``console_scripts``.

System Role
-----------
The CLI lives in the outermost layer. It loads the configuration once, passes
it to the composition root and leaves exit codes to ``lib_cli_exit_tools``:
every failure ends with a non-zero status and a message on standard error.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from typing import Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import load_config, new_searcher, resolve_environment
from .domain.errors import MissingServerURLError
from .domain.models import Identifier, UserRecord

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DISTRIBUTION: Final[str] = "lib_ldap_lookup"


def _resolve_version() -> str:
    """Return the installed package version, or ``"0.0.0"`` for source checkouts."""

    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Look up directory users over LDAP",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DISTRIBUTION,
    message="lib_ldap_lookup version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        click.echo(f"{_DISTRIBUTION} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DISTRIBUTION)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.11')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("env", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_env() -> None:
    """Print the active environment name (``LDAP_ENV``, ``ENV`` or ``local``)."""

    click.echo(resolve_environment())


@cli.command("config", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--env", "environment", default=None, help="Environment to select (overrides LDAP_ENV/ENV)")
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the source of each resolved field in the output",
)
def cli_config(environment: Optional[str], indent: Optional[int], provenance: bool) -> None:
    """Print the resolved configuration as JSON with the password redacted."""

    config = load_config(environment=environment)
    if provenance:
        payload = {"config": config.redacted(), "provenance": config.provenance()}
        click.echo(json.dumps(payload, indent=indent, separators=(",", ":")))
        return
    click.echo(config.to_json(indent=indent))


@cli.command("lookup", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("identifier")
@click.option("--env", "environment", default=None, help="Environment to select (overrides LDAP_ENV/ENV)")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full record as JSON")
def cli_lookup(identifier: str, environment: Optional[str], as_json: bool) -> None:
    """Look up IDENTIFIER (login name, or email when it contains ``@``)."""

    config = load_config(environment=environment)
    if not config.servers:
        raise MissingServerURLError()
    target = Identifier.parse(identifier)
    with new_searcher(config) as searcher:
        record = searcher.get_user(target)
    if as_json:
        click.echo(json.dumps(record.as_dict(), indent=2))
        return
    _print_record(record)


def _print_record(record: UserRecord) -> None:
    click.echo(f"Found user: {record.uid} ({record.email})")
    click.echo(f"Name: {record.display_name} {record.surname}")
    click.echo(f"Title: {record.title}")
    click.echo(f"Location: {record.location}")
    click.echo(f"Cost Center: {record.cost_center}")
    if record.is_terminated:
        click.echo(f"  Terminated: {record.term_date}")


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DISTRIBUTION,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


def ldapcheck(argv: Optional[Sequence[str]] = None) -> int:
    """``ldapcheck <uid_or_email>``: shortcut for ``lib_ldap_lookup lookup``."""

    args = list(argv) if argv is not None else sys.argv[1:]
    return main(["lookup", *args])


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
