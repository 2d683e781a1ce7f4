#!/usr/bin/env python3
"""
Batch queue for deferred copy/move of files.

Files are staged with enqueue and later drained, in insertion order, into a
single destination directory. The queue only holds handles; it never owns
nodes.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, List, Optional

from .errors import CapacityExceeded, QueueEmpty
from .tree import NodeKind, TreeStore

logger = logging.getLogger(__name__)


class BatchAction(Enum):
    """What drain_into does with each queued file."""
    COPY = 'copy'
    MOVE = 'move'

    @classmethod
    def parse(cls, text: str) -> Optional['BatchAction']:
        """Map a command word to an action; None if unrecognized."""
        try:
            return cls(text)
        except ValueError:
            return None


@dataclass
class BatchReport:
    """Outcome of one drain_into call, by file name."""
    action: Optional[BatchAction]
    copied: List[str] = field(default_factory=list)
    moved: List[str] = field(default_factory=list)
    conflicts: List[str] = field(default_factory=list)
    overflowed: List[str] = field(default_factory=list)
    discarded: int = 0


class BatchQueue:
    """Bounded FIFO of file handles."""

    def __init__(self, max_size: int = 32, strict_capacity: bool = True):
        self.max_size = max_size
        self.strict_capacity = strict_capacity
        self.items: Deque[int] = deque()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def enqueue(self, file_id: int) -> bool:
        """Stage a file. Returns False if it was dropped on overflow."""
        if len(self.items) >= self.max_size:
            if self.strict_capacity:
                raise CapacityExceeded()
            logger.warning("batch queue full (%d), dropping #%d", self.max_size, file_id)
            return False
        self.items.append(file_id)
        logger.debug("enqueued #%d (depth %d)", file_id, len(self.items))
        return True

    def dequeue(self) -> int:
        if not self.items:
            raise QueueEmpty()
        return self.items.popleft()

    def discard(self, node_id: int) -> int:
        """Drop every staged reference to node_id; returns how many were removed."""
        before = len(self.items)
        self.items = deque(item for item in self.items if item != node_id)
        return before - len(self.items)

    def drain_into(self, tree: TreeStore, dest_id: int,
                   action: Optional[BatchAction]) -> BatchReport:
        """
        Empty the queue into dest_id.

        COPY creates a fresh file with the same name under dest_id. MOVE
        detaches the original from its parent and reattaches it under dest_id,
        keeping its handle. With no recognized action every item is dequeued
        and discarded.

        Items are skipped, not failed, when dest_id already holds another node
        with the same name or has no room left. A skipped move leaves the file
        where it was.
        """
        report = BatchReport(action=action)
        dest = tree.get(dest_id)

        while self.items:
            file_id = self.dequeue()

            if action is None:
                report.discarded += 1
                continue

            node = tree.get(file_id)
            existing = tree.child_named(dest_id, node.name)
            already_here = existing is not None and existing.node_id == file_id

            if existing is not None and not (action is BatchAction.MOVE and already_here):
                logger.info("skipping %r: name taken in %r", node.name, dest.name)
                report.conflicts.append(node.name)
                continue

            if not already_here and not tree.has_room(dest_id):
                logger.warning("skipping %r: %r is full", node.name, dest.name)
                report.overflowed.append(node.name)
                continue

            if action is BatchAction.COPY:
                tree.add_child(dest_id, node.name, NodeKind.FILE)
                report.copied.append(node.name)
                logger.debug("copied %r into %r", node.name, dest.name)
            else:
                source_id = node.parent
                index = tree.find_by_name(source_id, node.name)
                tree.remove_at(source_id, index)
                tree.insert(dest_id, file_id)
                report.moved.append(node.name)
                logger.debug("moved %r from #%d into %r", node.name, source_id, dest.name)

        if action is None and report.discarded:
            logger.warning("unknown batch action, discarded %d queued file(s)",
                           report.discarded)
        return report
