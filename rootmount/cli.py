#!/usr/bin/env python3
"""
cli.py
Command-line interface for rootmount.
Parses arguments, loads config, and invokes one Mounter operation per run.
"""
from __future__ import annotations
import argparse, logging, sys
from .config import LOG_LEVELS, SYSTEM_CONFIG_PATH, ENV_VAR, find_config, load_config
from .devices import LvmCanonicalizer, NullCanonicalizer
from .errors import MountError
from .mounter import Mounter
from .util import which_quiet

# commands that need something mounted on / unless they target / themselves
NEEDS_ROOT_FLAG = {"mount", "mount-ro", "mount-options", "mount-vfs"}


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rootmount",
        description="rootmount: mount, unmount and list filesystems under a guest sysroot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="\nMost commands need root privileges to call mount(8) and umount(8).",
    )
    ap.add_argument(
        "--config",
        default=None,
        help=f"path to rootmount.toml (default: ${ENV_VAR} then {SYSTEM_CONFIG_PATH})",
    )
    ap.add_argument("--dry-run", action="store_true", help="show commands without executing")
    ap.add_argument("--log-level", choices=LOG_LEVELS, type=str.upper, help="override runtime.log_level")
    sub = ap.add_subparsers(dest="command", required=True)

    p = sub.add_parser("mount", help="mount DEVICE on MOUNTPOINT (sync,noatime)")
    p.add_argument("device")
    p.add_argument("mountpoint")

    p = sub.add_parser("mount-ro", help="mount DEVICE read-only on MOUNTPOINT")
    p.add_argument("device")
    p.add_argument("mountpoint")

    p = sub.add_parser("mount-options", help="mount with an explicit option string")
    p.add_argument("options")
    p.add_argument("device")
    p.add_argument("mountpoint")

    p = sub.add_parser("mount-vfs", help="mount with explicit options and filesystem type")
    p.add_argument("options")
    p.add_argument("vfstype")
    p.add_argument("device")
    p.add_argument("mountpoint")

    p = sub.add_parser("mount-loop", help="loop-mount a guest FILE on MOUNTPOINT")
    p.add_argument("file")
    p.add_argument("mountpoint")

    p = sub.add_parser("umount", help="unmount a guest mountpoint or a /dev device")
    p.add_argument("path_or_device")

    sub.add_parser("umount-all", help="unmount everything under the sysroot")
    sub.add_parser("mounts", help="list mounted devices")
    sub.add_parser("mountpoints", help="list device and mountpoint pairs")

    p = sub.add_parser("mkmountpoint", help="create a mountpoint directory")
    p.add_argument("path")

    p = sub.add_parser("rmmountpoint", help="remove a mountpoint directory")
    p.add_argument("path")
    return ap


def dispatch(m: Mounter, args) -> int:
    c = args.command
    if c in NEEDS_ROOT_FLAG:
        m.refresh_root_flag()

    if c == "mount":
        m.mount(args.device, args.mountpoint)
    elif c == "mount-ro":
        m.mount_ro(args.device, args.mountpoint)
    elif c == "mount-options":
        m.mount_options(args.options, args.device, args.mountpoint)
    elif c == "mount-vfs":
        m.mount_vfs(args.options, args.vfstype, args.device, args.mountpoint)
    elif c == "mount-loop":
        m.mount_loop(args.file, args.mountpoint)
    elif c == "umount":
        m.umount(args.path_or_device)
    elif c == "umount-all":
        m.umount_all()
    elif c == "mounts":
        for dev in m.mounts():
            print(dev)
    elif c == "mountpoints":
        pairs = m.mountpoints()
        for dev, mp in zip(pairs[0::2], pairs[1::2]):
            print(f"{dev}\t{mp}")
    elif c == "mkmountpoint":
        m.make_mountpoint(args.path)
    elif c == "rmmountpoint":
        m.remove_mountpoint(args.path)
    return 0


def main(argv=None) -> int:
    try:
        args = build_parser().parse_args(argv)

        try:
            cfg = load_config(find_config(args.config))
        except FileNotFoundError as e:
            print(f"❌ Error: {e}")
            print(f"💡 Hint: Check the path, or omit --config to use {SYSTEM_CONFIG_PATH} or the defaults")
            return 1
        except Exception as e:
            print(f"❌ Error: Invalid configuration file: {e}")
            return 1

        if args.dry_run:
            cfg.dry_run = True
        if args.log_level:
            cfg.log_level = args.log_level
        logging.basicConfig(
            level=getattr(logging, cfg.log_level),
            format="%(levelname)s %(name)s: %(message)s",
        )

        canon = LvmCanonicalizer(cfg.lvs_cmd) if which_quiet(cfg.lvs_cmd) else NullCanonicalizer()
        return dispatch(Mounter.from_config(cfg, canon=canon), args)

    except MountError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\n\n⚡ Interrupted by user.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
