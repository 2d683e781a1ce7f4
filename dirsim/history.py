#!/usr/bin/env python3
"""Bounded navigation stack used by cd, history and undo."""

import logging
from typing import Iterator, List

from .errors import CapacityExceeded, HistoryEmpty

logger = logging.getLogger(__name__)


class NavigationHistory:
    """Stack of previously current directory handles."""

    def __init__(self, max_size: int = 64, strict_capacity: bool = True):
        """Initialize with maximum stack depth."""
        self.max_size = max_size
        self.strict_capacity = strict_capacity
        self.entries: List[int] = []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[int]:
        return iter(self.entries)

    def push(self, dir_id: int) -> bool:
        """Record a directory. Returns False if it was dropped on overflow."""
        if len(self.entries) >= self.max_size:
            if self.strict_capacity:
                raise CapacityExceeded()
            logger.warning("navigation history full (%d), dropping #%d",
                           self.max_size, dir_id)
            return False
        self.entries.append(dir_id)
        logger.debug("history push #%d (depth %d)", dir_id, len(self.entries))
        return True

    def pop(self) -> int:
        """Remove and return the most recent entry."""
        if not self.entries:
            raise HistoryEmpty()
        dir_id = self.entries.pop()
        logger.debug("history pop #%d (depth %d)", dir_id, len(self.entries))
        return dir_id

    def list_all(self) -> List[int]:
        """Entries from oldest to newest."""
        return list(self.entries)

    def discard(self, dir_id: int) -> int:
        """Forget every entry pointing at dir_id; returns how many were removed."""
        before = len(self.entries)
        self.entries = [entry for entry in self.entries if entry != dir_id]
        return before - len(self.entries)
