"""
devices.py
Device path helpers and canonicalizers.

Device-mapper nodes (/dev/mapper/vg-lv, /dev/dm-N) are aliases; the stable name for
an LVM logical volume is /dev/<vg>/<lv>. A canonicalizer answers (matched, path):
"no match" is not an error, only a failed lookup is.
"""

from __future__ import annotations
import logging, os
from typing import Protocol, Tuple
from .errors import DeviceError, ExternalToolError
from .util import Runner, run

logger = logging.getLogger(__name__)

DEVICE_PREFIX = "/dev/"
MAPPER_PREFIXES = ("/dev/mapper/", "/dev/dm-")


def is_device_path(path: str) -> bool:
    return path.startswith(DEVICE_PREFIX)


def is_mapper_path(path: str) -> bool:
    return path.startswith(MAPPER_PREFIXES)


class DeviceCanonicalizer(Protocol):
    def canonicalize(self, path: str) -> Tuple[bool, str]: ...


class NullCanonicalizer:
    """Never matches; every device is reported under the name it was given."""

    def canonicalize(self, path: str) -> Tuple[bool, str]:
        return False, path


class LvmCanonicalizer:
    """
    Map a device-mapper alias to /dev/<vg>/<lv> by comparing device numbers
    against every logical volume that `lvs` knows about.
    """

    def __init__(self, lvs_cmd: str = "lvs", runner: Runner = run):
        self.lvs_cmd = lvs_cmd
        self.runner = runner

    def _rdev(self, path: str) -> int:
        try:
            return os.stat(path).st_rdev
        except OSError as e:
            raise DeviceError(f"{path}: {e.strerror or e}") from e

    def logical_volumes(self) -> list[str]:
        cmd = [self.lvs_cmd, "--noheadings", "-o", "vg_name,lv_name", "--separator", "/"]
        rc, out, err = self.runner(cmd)
        if rc != 0:
            diag = err.strip()
            raise ExternalToolError(f"{self.lvs_cmd}: {diag}", self.lvs_cmd, (), diag, rc)
        lvs = []
        for line in out.splitlines():
            name = line.strip()
            if name:
                lvs.append(DEVICE_PREFIX + name)
        return lvs

    def canonicalize(self, path: str) -> Tuple[bool, str]:
        want = self._rdev(path)
        for lv in self.logical_volumes():
            try:
                if os.stat(lv).st_rdev == want:
                    logger.debug("canonical name of %s is %s", path, lv)
                    return True, lv
            except FileNotFoundError:
                # inactive LV has no device node
                continue
            except OSError as e:
                raise DeviceError(f"{lv}: {e.strerror or e}") from e
        return False, path


def resolve_device(canon: DeviceCanonicalizer, path: str) -> str:
    """Return the canonical form of `path` when the canonicalizer knows one, else `path`."""
    matched, canonical = canon.canonicalize(path)
    return canonical if matched else path
