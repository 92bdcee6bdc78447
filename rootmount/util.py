"""
util.py
Cross-cutting utilities:
- Process execution (list-of-args) with captured stdout/stderr and dry-run support
- PATH helper for optional tools
"""

from __future__ import annotations
import logging, shlex, shutil, subprocess
from typing import Callable, Sequence, Tuple

logger = logging.getLogger(__name__)

# (rc, stdout, stderr)
RunResult = Tuple[int, str, str]
Runner = Callable[..., RunResult]


def run(cmd: Sequence[str], env=None, dry: bool = False) -> RunResult:
    """
    Execute a command and wait for it to exit.
    - Returns (rc, stdout, stderr) as text.
    - A command that cannot be spawned is reported as rc 127 with the OS error as stderr,
      so callers only ever deal with one failure shape.
    """
    cmd_list = list(cmd)
    quoted = " ".join(shlex.quote(c) for c in cmd_list)
    if dry:
        logger.info("[dry-run] %s", quoted)
        return 0, "", ""
    logger.debug("running: %s", quoted)
    try:
        proc = subprocess.run(cmd_list, capture_output=True, env=env)
    except OSError as e:
        logger.debug("cannot run %s: %s", cmd_list[0], e)
        return 127, "", f"{cmd_list[0]}: {e.strerror or e}"
    out = proc.stdout.decode("utf-8", "replace")
    err = proc.stderr.decode("utf-8", "replace")
    if proc.returncode != 0:
        logger.debug("%s exited with status %d: %s", cmd_list[0], proc.returncode, err.strip())
    return proc.returncode, out, err


def which_quiet(name: str) -> bool:
    """Check if command exists silently."""
    return bool(shutil.which(name))
