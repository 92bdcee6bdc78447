"""
sequencer.py
Unmount ordering for umount_all.

Longest path first: a nested mountpoint is always a longer string than the mountpoint
it sits on, so children are detached before parents. Unrelated paths are ordered by
length alone; ties keep their mount-table order.
"""

from __future__ import annotations
from typing import Iterable, List


def unmount_order(mountpoints: Iterable[str]) -> List[str]:
    return sorted(mountpoints, key=len, reverse=True)
