"""
mounttable.py
Read the live mount table by running `mount` with no arguments and keep the
entries that live under the sandbox root.

Lines have the format:
  /dev/foo on /mountpoint type ext4 (rw,relatime)

This is the human-readable report, not a stable interface, so all knowledge of
its layout stays in parse_mount_table().
"""

from __future__ import annotations
import logging
from typing import List
from .devices import DeviceCanonicalizer, NullCanonicalizer, is_mapper_path, resolve_device
from .errors import ExternalToolError
from .paths import guest_path
from .types import MountRecord
from .util import Runner, run

logger = logging.getLogger(__name__)

ON = " on "


def _under(sysroot: str, mountpoint: str) -> bool:
    return mountpoint == sysroot or mountpoint.startswith(sysroot + "/")


def parse_mount_table(text: str, sysroot: str) -> List[MountRecord]:
    """Parse `mount` output into records whose mountpoint is under `sysroot`, in table order."""
    records: List[MountRecord] = []
    for line in text.splitlines():
        idx = line.find(ON + sysroot)
        if idx < 0:
            continue
        device = line[:idx]
        rest = line[idx + len(ON):]
        mountpoint = rest.split(" ", 1)[0]
        if not device or not _under(sysroot, mountpoint):
            continue
        records.append(MountRecord(device, mountpoint))
    return records


def read_mount_table(
    sysroot: str, runner: Runner = run, mount_cmd: str = "mount"
) -> List[MountRecord]:
    """Snapshot the mount table. Mountpoints keep the sandbox prefix."""
    rc, out, err = runner([mount_cmd])
    if rc != 0:
        diag = err.strip()
        logger.error("%s failed: %s", mount_cmd, diag)
        raise ExternalToolError(f"{mount_cmd}: {diag}", mount_cmd, (), diag, rc)
    return parse_mount_table(out, sysroot)


def read_mounts(
    want_mountpoints: bool,
    sysroot: str,
    runner: Runner = run,
    canon: DeviceCanonicalizer | None = None,
    mount_cmd: str = "mount",
) -> List[str]:
    """
    Devices mounted under the sandbox root, or when `want_mountpoints` is set a flat
    list alternating device, guest mountpoint, device, guest mountpoint, ...
    Device-mapper aliases are replaced by their canonical name where one exists.
    """
    canon = canon or NullCanonicalizer()
    ret: List[str] = []
    for rec in read_mount_table(sysroot, runner, mount_cmd):
        device = rec.device
        if is_mapper_path(device):
            device = resolve_device(canon, device)
        ret.append(device)
        if want_mountpoints:
            ret.append(guest_path(sysroot, rec.mountpoint))
    return ret
