"""
mounter.py
Mount, unmount and enumerate filesystems beneath the sandbox root.

Something must be mounted on "/" (or a mountpoint created with make_mountpoint)
before anything else can be mounted; the Mounter's SandboxContext tracks that.

We call out to the mount/umount utilities rather than mount(2) so that filesystem
type autodetection works and /etc/mtab is kept updated.
"""

from __future__ import annotations
import logging, os
from typing import List, Optional
from .devices import DeviceCanonicalizer, NullCanonicalizer, is_device_path, resolve_device
from .errors import ExternalToolError, MountpointIOError, PreconditionError
from .mounttable import read_mount_table, read_mounts
from .paths import require_abs_path, sysroot_path
from .sequencer import unmount_order
from .types import Config, SandboxContext
from .util import Runner, run

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = "sync,noatime"
READONLY_OPTIONS = "ro"


class Mounter:
    def __init__(
        self,
        ctx: Optional[SandboxContext] = None,
        runner: Runner = run,
        canon: Optional[DeviceCanonicalizer] = None,
        mount_cmd: str = "mount",
        umount_cmd: str = "umount",
        default_options: str = DEFAULT_OPTIONS,
        readonly_options: str = READONLY_OPTIONS,
        dry: bool = False,
    ):
        self.ctx = ctx or SandboxContext()
        self.dry = dry
        self.runner = runner
        self.canon = canon or NullCanonicalizer()
        self.mount_cmd = mount_cmd
        self.umount_cmd = umount_cmd
        self.default_options = default_options
        self.readonly_options = readonly_options

    @classmethod
    def from_config(cls, cfg: Config, canon: Optional[DeviceCanonicalizer] = None) -> "Mounter":
        return cls(
            SandboxContext(sysroot=cfg.sysroot),
            canon=canon,
            mount_cmd=cfg.mount_cmd,
            umount_cmd=cfg.umount_cmd,
            default_options=cfg.mount_options,
            readonly_options=cfg.readonly_options,
            dry=cfg.dry_run,
        )

    @property
    def sysroot(self) -> str:
        return self.ctx.sysroot

    @property
    def root_mounted(self) -> bool:
        return self.ctx.root_mounted

    def _path(self, path: str) -> str:
        return sysroot_path(self.ctx.sysroot, path)

    def _run_tool(self, cmd: List[str], what: str, operands) -> None:
        # only state-changing commands honour dry-run; the mount table is always read
        rc, _, err = self.runner(cmd, dry=self.dry)
        if rc != 0:
            diag = err.strip()
            logger.error("%s failed: %s: %s", cmd[0], what, diag)
            raise ExternalToolError(f"{what}: {diag}", cmd[0], operands, diag, rc)

    # mounting

    def mount_vfs(self, options: str, vfstype: Optional[str], device: str, mountpoint: str) -> None:
        """Mount `device` on guest `mountpoint` with explicit options and optional fs type."""
        require_abs_path(mountpoint)
        is_root = mountpoint == "/"
        if not self.ctx.root_mounted and not is_root:
            raise PreconditionError("you must mount something on / first")

        mp = self._path(mountpoint)
        cmd = [self.mount_cmd]
        if options:
            cmd += ["-o", options]
        if vfstype:
            cmd += ["-t", vfstype]
        cmd += [device, mp]
        self._run_tool(cmd, f"{device} on {mountpoint}", (device, mountpoint))

        logger.info("mounted %s on %s", device, mountpoint)
        if is_root:
            self.ctx.root_mounted = True

    def mount(self, device: str, mountpoint: str) -> None:
        self.mount_vfs(self.default_options, None, device, mountpoint)

    def mount_ro(self, device: str, mountpoint: str) -> None:
        self.mount_vfs(self.readonly_options, None, device, mountpoint)

    def mount_options(self, options: str, device: str, mountpoint: str) -> None:
        self.mount_vfs(options, None, device, mountpoint)

    def mount_loop(self, file: str, mountpoint: str) -> None:
        """
        Mount a regular file inside the guest using a loop device.
        Both the file and the mountpoint are guest paths.
        """
        mp = self._path(mountpoint)
        src = self._path(file)
        self._run_tool(
            [self.mount_cmd, "-o", "loop", src, mp],
            f"{file} on {mountpoint}",
            (file, mountpoint),
        )
        logger.info("loop-mounted %s on %s", file, mountpoint)

    # unmounting

    def umount(self, path_or_device: str) -> None:
        """Unmount by device name (/dev/...) or by guest mountpoint."""
        if is_device_path(path_or_device):
            target = resolve_device(self.canon, path_or_device)
        else:
            target = self._path(path_or_device)
        self._run_tool([self.umount_cmd, target], path_or_device, (path_or_device,))
        logger.info("unmounted %s", path_or_device)
        if path_or_device == "/":
            logger.debug("root unmounted individually; root_mounted flag left set")

    def umount_all(self) -> None:
        """
        Unmount everything under the sandbox root, deepest first.
        Stops at the first failure; whatever was already unmounted stays unmounted.
        """
        records = read_mount_table(self.ctx.sysroot, self.runner, self.mount_cmd)
        for mp in unmount_order(r.mountpoint for r in records):
            self._run_tool([self.umount_cmd, mp], f"{self.umount_cmd}: {mp}", (mp,))
            logger.debug("unmounted %s", mp)

        self.ctx.root_mounted = False
        logger.info("unmounted %d filesystem(s) under %s", len(records), self.ctx.sysroot)

    # enumeration

    def mounts(self) -> List[str]:
        return read_mounts(False, self.ctx.sysroot, self.runner, self.canon, self.mount_cmd)

    def mountpoints(self) -> List[str]:
        return read_mounts(True, self.ctx.sysroot, self.runner, self.canon, self.mount_cmd)

    def refresh_root_flag(self) -> bool:
        """
        Set root_mounted from live state and return it.

        The flag is set when the raw mount table has any entry under the sandbox root,
        or when the sandbox root holds a directory (what make_mountpoint leaves behind).
        Devices are not canonicalized here.
        """
        records = read_mount_table(self.ctx.sysroot, self.runner, self.mount_cmd)
        self.ctx.root_mounted = bool(records) or self._has_mountpoint_dirs()
        return self.ctx.root_mounted

    def _has_mountpoint_dirs(self) -> bool:
        try:
            with os.scandir(self.ctx.sysroot) as it:
                return any(e.is_dir(follow_symlinks=False) for e in it)
        except (FileNotFoundError, NotADirectoryError):
            return False

    # mountpoint directories: no root-mounted check here, these bootstrap the sandbox

    def make_mountpoint(self, path: str) -> None:
        require_abs_path(path)
        if self.dry:
            logger.info("[dry-run] mkdir %s", self._path(path))
            return
        try:
            os.mkdir(self._path(path), 0o777)
        except OSError as e:
            raise MountpointIOError(path, e) from e
        # filesystems may now be mounted here, not just on the sandbox root
        self.ctx.root_mounted = True

    def remove_mountpoint(self, path: str) -> None:
        require_abs_path(path)
        if self.dry:
            logger.info("[dry-run] rmdir %s", self._path(path))
            return
        try:
            os.rmdir(self._path(path))
        except OSError as e:
            raise MountpointIOError(path, e) from e
