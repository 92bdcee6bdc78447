"""
rootmount package
- Mount, unmount and enumerate filesystems beneath a guest sysroot, and tear them down in order.
"""
from .errors import (
    DeviceError,
    ExternalToolError,
    InvalidPathError,
    MountError,
    MountpointIOError,
    PreconditionError,
    ResourceError,
)
from .mounter import Mounter
from .types import MountRecord, SandboxContext

__all__ = [
    "Mounter",
    "SandboxContext",
    "MountRecord",
    "MountError",
    "InvalidPathError",
    "PreconditionError",
    "ExternalToolError",
    "MountpointIOError",
    "ResourceError",
    "DeviceError",
]
__version__ = "0.1.0"
