"""
paths.py
Translate guest paths to their location under the sandbox root and back.
"""

from __future__ import annotations
from .errors import InvalidPathError, ResourceError


def is_abs_path(path: str) -> bool:
    return path.startswith("/")


def require_abs_path(path: str) -> None:
    if not is_abs_path(path):
        raise InvalidPathError(path)


def sysroot_path(sysroot: str, path: str) -> str:
    """
    Return `path` as seen from outside the guest, i.e. prefixed with `sysroot`.
    `path` must be absolute. No normalisation is done: "/" maps to "<sysroot>/".
    """
    require_abs_path(path)
    try:
        return sysroot + path
    except MemoryError as e:
        raise ResourceError(f"out of memory building path for {path}") from e


def guest_path(sysroot: str, host_path: str) -> str:
    """Inverse of sysroot_path for paths found in the mount table.

    The sandbox root itself becomes "/". Paths not under the root are returned unchanged.
    """
    if host_path == sysroot or host_path == sysroot + "/":
        return "/"
    if host_path.startswith(sysroot + "/"):
        return host_path[len(sysroot):]
    return host_path
