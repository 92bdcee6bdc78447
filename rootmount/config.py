"""
config.py
Load and validate configuration from TOML (Python 3.11+ tomllib).
Search order:
  1) explicit --config path
  2) $ROOTMOUNT_CONFIG
  3) /etc/rootmount.toml
If nothing is found the built-in defaults are used.
"""

from __future__ import annotations
import os, tomllib
from pathlib import Path
from typing import Any, Dict
from .types import Config

ENV_VAR = "ROOTMOUNT_CONFIG"
SYSTEM_CONFIG_PATH = "/etc/rootmount.toml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _gv(d: Dict[str, Any], path: list[str], default=None):
    cur = d
    for k in path:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def _load_toml(path: Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def find_config(path_arg: str | None) -> Path | None:
    """Pick the config path based on CLI arg, environment and availability."""
    if path_arg:
        # User explicitly specified a config - it must exist
        p = Path(path_arg)
        if not p.exists():
            raise FileNotFoundError(f"Specified config file does not exist: {path_arg}")
        return p

    env = os.environ.get(ENV_VAR)
    if env:
        p = Path(env)
        if not p.exists():
            raise FileNotFoundError(f"{ENV_VAR} points to a missing file: {env}")
        return p

    p = Path(SYSTEM_CONFIG_PATH)
    if p.exists():
        return p
    return None


def _normalize_sysroot(sysroot: str) -> str:
    if not isinstance(sysroot, str) or not sysroot.startswith("/"):
        raise ValueError(f"sandbox.sysroot must be an absolute path, got {sysroot!r}")
    sysroot = sysroot.rstrip("/")
    if not sysroot:
        raise ValueError("sandbox.sysroot cannot be /")
    return sysroot


def load_config(path: Path | None) -> Config:
    cfg = _load_toml(path) if path is not None else {}

    def gv(keys, default=None):
        return _gv(cfg, keys, default)

    log_level = str(gv(["runtime", "log_level"], "INFO")).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"runtime.log_level must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

    return Config(
        sysroot=_normalize_sysroot(gv(["sandbox", "sysroot"], "/sysroot")),
        mount_cmd=gv(["tools", "mount"], "mount"),
        umount_cmd=gv(["tools", "umount"], "umount"),
        lvs_cmd=gv(["tools", "lvs"], "lvs"),
        mount_options=gv(["defaults", "mount_options"], "sync,noatime"),
        readonly_options=gv(["defaults", "readonly_options"], "ro"),
        log_level=log_level,
        dry_run=bool(gv(["runtime", "dry_run"], False)),
    )
