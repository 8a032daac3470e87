"""
Runtime configuration.

Merges (in order): defaults <- YAML file (if present) <- environment.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

DEFAULTS: Dict[str, Any] = {
    "log_level": "INFO",
    "log_file": None,
    "strict_ranges": False,  # escalate advisory range violations to blocking
    "include_audit_trace": True,
}

_CONFIG_CANDIDATES = ("clinscore.yaml", "config/clinscore.yaml")


def _load_yaml(path: str | Path) -> dict:
    """Returns {} if the file is missing or empty."""
    p = Path(path)
    if not p.exists():
        return {}
    with p.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{p}: expected a mapping at the top level")
    return data


def _getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in ("1", "true", "yes", "on")


def get_config(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """
    Central place for runtime config.

    ``path`` (or ``$CLINSCORE_CONFIG``) names an explicit YAML file; otherwise
    ``clinscore.yaml`` and ``config/clinscore.yaml`` are tried. Unknown YAML
    keys are dropped.
    """
    load_dotenv(find_dotenv(usecwd=True))

    file_cfg: Dict[str, Any] = {}
    explicit = path or os.getenv("CLINSCORE_CONFIG")
    if explicit:
        file_cfg.update(_load_yaml(explicit))
    else:
        for candidate in _CONFIG_CANDIDATES:
            file_cfg.update(_load_yaml(candidate))

    merged = {**DEFAULTS, **{k: v for k, v in file_cfg.items() if k in DEFAULTS}}

    merged["log_level"] = os.getenv("CLINSCORE_LOG_LEVEL", merged["log_level"])
    merged["log_file"] = os.getenv("CLINSCORE_LOG_FILE", merged["log_file"])
    merged["strict_ranges"] = _getenv_bool("CLINSCORE_STRICT_RANGES", bool(merged["strict_ranges"]))
    merged["include_audit_trace"] = _getenv_bool(
        "CLINSCORE_AUDIT_TRACE", bool(merged["include_audit_trace"])
    )
    return merged
