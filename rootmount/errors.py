"""
errors.py
Exception taxonomy for rootmount. Every error carries the operand(s) and,
for external tools, the tool's own diagnostic text.
"""

from __future__ import annotations
from typing import Sequence


class MountError(Exception):
    """Base exception for all rootmount errors."""


class InvalidPathError(MountError, ValueError):
    """Raised when a guest path is not absolute."""

    def __init__(self, path: str):
        super().__init__(f"{path}: path must start with a / character")
        self.path = path


class PreconditionError(MountError):
    """Raised when an operation needs a root filesystem that is not mounted yet."""


class ExternalToolError(MountError):
    """Raised when mount, umount or another helper exits non-zero or cannot be spawned."""

    def __init__(
        self,
        message: str,
        tool: str,
        operands: Sequence[str] = (),
        diagnostic: str = "",
        returncode: int | None = None,
    ):
        super().__init__(message)
        self.tool = tool
        self.operands = tuple(operands)
        self.diagnostic = diagnostic
        self.returncode = returncode


class MountpointIOError(MountError, OSError):
    """Raised when a mountpoint directory cannot be created or removed."""

    def __init__(self, path: str, err: OSError):
        OSError.__init__(self, err.errno, err.strerror, path)
        self.path = path

    def __str__(self) -> str:
        return f"{self.path}: {self.strerror}"


class ResourceError(MountError):
    """Raised when memory runs out while building a path."""


class DeviceError(MountError):
    """Raised when a device cannot be looked up for canonicalization."""
