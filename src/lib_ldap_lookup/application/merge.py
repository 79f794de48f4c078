"""Application-layer merge policy.

Purpose
-------
Convert an ordered sequence of layer payloads into a single flat mapping of
:class:`~lib_ldap_lookup.domain.config.LdapConfig` fields while tracking which
layer supplied each field. The module performs no I/O.

Contents
    - ``merge_layers``: public entry point driven by a simple loop.
    - ``_set_field`` / ``_is_unset``: helpers that narrate how provenance is
      updated when values change.

System Role
-----------
Receives layers from :func:`lib_ldap_lookup.core.load_config` ordered from
lowest to highest precedence. Later layers replace earlier values; unset values
(``None``, ``""``, empty sequences) never replace anything, so a layer only
ever contributes the fields it actually defines.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable

from ..domain.config import SourceInfo

Layer = tuple[str, Mapping[str, object], str | None]


def merge_layers(layers: Iterable[Layer]) -> tuple[dict[str, object], dict[str, SourceInfo]]:
    """Merge configuration *layers* honouring precedence and provenance.

    Parameters
    ----------
    layers:
        Iterable of ``(layer_name, mapping, source_path)`` tuples ordered from
        lowest to highest precedence.

    Returns
    -------
    tuple[dict[str, object], dict[str, SourceInfo]]
        ``(merged_data, provenance)`` where provenance maps each field to
        ``{"layer", "path", "key"}``.

    Examples
    --------
    >>> merged, meta = merge_layers([
    ...     ("file", {"search_base": "dc=file", "bind_dn": "uid=file"}, "/srv/config.yaml"),
    ...     ("env", {"search_base": "dc=env", "bind_dn": ""}, None),
    ... ])
    >>> merged["search_base"], meta["search_base"]["layer"]
    ('dc=env', 'env')
    >>> merged["bind_dn"], meta["bind_dn"]["path"]
    ('uid=file', '/srv/config.yaml')
    """

    merged: dict[str, object] = {}
    meta: dict[str, SourceInfo] = {}

    for layer_name, data, path in layers:
        for key, value in data.items():
            if _is_unset(value):
                continue
            _set_field(merged, meta, key, value, layer_name, path)
    return merged, meta


def _set_field(
    target: dict[str, object],
    meta: dict[str, SourceInfo],
    key: str,
    value: object,
    layer: str,
    path: str | None,
) -> None:
    """Assign a value and update provenance for *key*."""

    target[key] = tuple(value) if isinstance(value, list) else value
    meta[key] = {"layer": layer, "path": path, "key": key}


def _is_unset(value: object) -> bool:
    """Return ``True`` for values that must not override a lower layer.

    ``False`` is a real value: an explicit ``LDAP_STARTTLS=false`` overrides a
    file that enables StartTLS.

    Examples
    --------
    >>> [_is_unset(v) for v in (None, "", (), [], False, "x")]
    [True, True, True, True, False, False]
    """

    if value is None:
        return True
    if isinstance(value, (str, tuple, list)):
        return len(value) == 0
    return False
