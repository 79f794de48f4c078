"""Filesystem secret adapter.

Purpose
-------
Read a single credential (the bind password) from a file. Secret files are
optional and best-effort: every failure collapses to an empty string so the
layered loader can fall through to its next password source.

Key behaviours
--------------
* Trims surrounding whitespace (editors and ``echo`` leave trailing newlines).
* Expands a leading ``~`` to the user's home directory.
* Warns, without refusing the file, when group or other permission bits are
  set.
"""

from __future__ import annotations

import stat
from pathlib import Path

from ...observability import log_debug, log_warning

#: Permission bits that should never be set on a secret file (anything beyond 0600).
_PERMISSIVE_BITS = stat.S_IRWXG | stat.S_IRWXO


def expand_home(path: str, *, home: Path | None = None) -> Path:
    """Expand a leading ``~`` in *path* using *home* (defaults to :meth:`Path.home`).

    Examples
    --------
    >>> expand_home("~/.secrets/ldap/password", home=Path("/home/demo")).as_posix()
    '/home/demo/.secrets/ldap/password'
    >>> expand_home("/run/secrets/ldap").as_posix()
    '/run/secrets/ldap'
    """

    if path == "~" or path.startswith("~/"):
        base = home if home is not None else Path.home()
        return base / path[2:] if len(path) > 1 else base
    return Path(path)


def read_secret(path: str | Path, *, home: Path | None = None) -> str:
    """Return the trimmed contents of *path* or ``""`` when it cannot be read.

    Never raises: a missing file, a directory, a permission error or
    undecodable content all yield ``""``.

    Examples
    --------
    >>> read_secret("/nonexistent/secret")
    ''
    >>> from tempfile import TemporaryDirectory
    >>> tmp = TemporaryDirectory()
    >>> secret = Path(tmp.name) / "password"
    >>> _ = secret.write_text("  hunter2\\n", encoding="utf-8")
    >>> secret.chmod(0o600)
    >>> read_secret(secret)
    'hunter2'
    >>> tmp.cleanup()
    """

    if not path:
        return ""
    file_path = expand_home(str(path), home=home)
    try:
        mode = file_path.stat().st_mode
        if not stat.S_ISREG(mode):
            return ""
        if mode & _PERMISSIVE_BITS:
            log_warning(
                "secret_file_permissive",
                layer="secret",
                path=str(file_path),
                mode=oct(stat.S_IMODE(mode)),
                expected="0o600",
            )
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        log_debug("secret_file_unreadable", layer="secret", path=str(file_path), error=type(exc).__name__)
        return ""
    return content.strip()
