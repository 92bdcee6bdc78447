"""
Pytest configuration and shared fixtures.
"""
import pytest
import tempfile
from pathlib import Path
from rootmount.mounter import Mounter
from rootmount.types import SandboxContext


SAMPLE_TABLE = """\
/dev/sda2 on / type ext4 (rw,relatime)
proc on /proc type proc (rw,nosuid,nodev,noexec,relatime)
/dev/sda1 on /sysroot type ext4 (rw,relatime)
/dev/sda3 on /sysroot/home type xfs (rw,relatime)
/dev/mapper/vg-lv0 on /sysroot/var type ext4 (rw,relatime)
/dev/sdb1 on /sysroot2 type ext4 (rw,relatime)
/sysroot/data.img on /sysroot/mnt/loop type ext2 (rw,relatime)
"""


class FakeRunner:
    """Stands in for util.run: records argv, answers `mount` with a canned table."""

    def __init__(self, table: str = ""):
        self.table = table
        self.calls = []
        self.dry_calls = []
        self.failures = {}

    def fail(self, cmd, err, rc=32):
        self.failures[tuple(cmd)] = (rc, err)

    def __call__(self, cmd, env=None, dry=False):
        cmd = list(cmd)
        self.calls.append(cmd)
        if dry:
            self.dry_calls.append(cmd)
        if tuple(cmd) in self.failures:
            rc, err = self.failures[tuple(cmd)]
            return rc, "", err
        if cmd == ["mount"]:
            return 0, self.table, ""
        return 0, "", ""

    @property
    def commands(self):
        """Calls other than the mount-table listing."""
        return [c for c in self.calls if c != ["mount"]]


class FakeCanonicalizer:
    def __init__(self, mapping=None, error=None):
        self.mapping = mapping or {}
        self.error = error
        self.seen = []

    def canonicalize(self, path):
        self.seen.append(path)
        if self.error is not None:
            raise self.error
        if path in self.mapping:
            return True, self.mapping[path]
        return False, path


@pytest.fixture
def runner():
    return FakeRunner(SAMPLE_TABLE)


@pytest.fixture
def mounter(runner):
    return Mounter(SandboxContext(sysroot="/sysroot"), runner=runner)


@pytest.fixture
def rooted(mounter):
    """A Mounter whose root filesystem is already mounted."""
    mounter.mount("/dev/sda1", "/")
    return mounter

@pytest.fixture
def temp_config_file():
    """Create a temporary configuration file for testing."""
    toml_content = """
version = 1

[sandbox]
sysroot = "/tmp/rootmount-test"

[tools]
mount = "/bin/mount"
umount = "/bin/umount"
lvs = "/sbin/lvs"

[defaults]
mount_options = "noatime"
readonly_options = "ro,noload"

[runtime]
log_level = "debug"
dry_run = true
"""

    with tempfile.NamedTemporaryFile(mode="w", suffix=".toml", delete=False) as f:
        f.write(toml_content)
        f.flush()
        yield Path(f.name)

    # Cleanup
    Path(f.name).unlink(missing_ok=True)
