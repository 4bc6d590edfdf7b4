"""
Layering of ``.env`` files, process variables and overrides into the flat
mapping read by :meth:`maib_payments.core.config.ClientConfig.from_mapping`.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Mapping, Optional

_EXPORT = "export "


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_env_file(path: Path) -> Dict[str, str]:
    """Read ``KEY=VALUE`` lines; a missing file yields an empty mapping."""
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return {}

    values: Dict[str, str] = {}
    for line in (raw.strip() for raw in lines):
        if line.startswith(_EXPORT):
            line = line[len(_EXPORT):].lstrip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key.strip()] = _unquote(value.strip())
    return values


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Start from ``base`` (:data:`os.environ` when ``None``), fill keys it lacks
    from ``env_file``, then apply ``overrides``. ``env_file=None`` skips the file.
    """
    merged = dict(os.environ if base is None else base)
    if env_file is not None:
        for key, value in parse_env_file(Path(env_file)).items():
            merged.setdefault(key, value)
    merged.update(overrides or {})
    return merged
