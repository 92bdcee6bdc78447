"""
types.py
Dataclasses used across modules: Config, SandboxContext, MountRecord.

These are intentionally lightweight and stable for logging.
"""
from __future__ import annotations
from dataclasses import dataclass


@dataclass
class Config:
    # sandbox
    sysroot: str
    # tools
    mount_cmd: str
    umount_cmd: str
    lvs_cmd: str
    # defaults
    mount_options: str
    readonly_options: str
    # runtime
    log_level: str
    dry_run: bool


@dataclass
class SandboxContext:
    """State owned by one Mounter: the sandbox root and whether / is established."""
    sysroot: str = "/sysroot"
    root_mounted: bool = False


@dataclass(frozen=True)
class MountRecord:
    device: str
    mountpoint: str
