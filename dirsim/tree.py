#!/usr/bin/env python3
"""
tree - the node store behind the dirsim simulator.

Core philosophy:
- All nodes live in one table keyed by an integer handle
- A directory owns its children through an ordered list of handles
- The parent link is a plain handle back into the table, never an owner

Callers are responsible for checking sibling uniqueness before creating a
node; the store only enforces structure (capacity, kind, root protection).
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional

from .errors import (
    CapacityExceeded,
    DirectoryNotEmpty,
    NotADirectory,
    NotFound,
    RootRemoval,
)

logger = logging.getLogger(__name__)

ROOT_NAME = 'root'
SEPARATOR = '/'


class NodeKind(Enum):
    """Kind of entry stored in the tree."""
    FILE = 'file'
    DIRECTORY = 'dir'


@dataclass
class Node:
    """A single directory or file entry."""
    node_id: int
    name: str
    kind: NodeKind
    parent: Optional[int] = None
    children: List[int] = field(default_factory=list)

    def is_dir(self) -> bool:
        return self.kind is NodeKind.DIRECTORY

    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    @property
    def display_name(self) -> str:
        """Name as shown by ls and search: directories get a trailing slash."""
        return self.name + SEPARATOR if self.is_dir() else self.name


class TreeStore:
    """
    Central node table for one simulated filesystem.

    Nodes are addressed by handle. The root is created on construction and
    is the only node without a parent.
    """

    def __init__(self, max_children: int = 32, strict_capacity: bool = True):
        self.max_children = max_children
        self.strict_capacity = strict_capacity

        # The arena: handle -> Node
        self.nodes: Dict[int, Node] = {}
        self._next_id = 0

        self.root_id = self.create(ROOT_NAME, NodeKind.DIRECTORY, None)

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: int) -> bool:
        return node_id in self.nodes

    # Allocation

    def create(self, name: str, kind: NodeKind, parent: Optional[int]) -> int:
        """Allocate a node and return its handle. Does not link it anywhere."""
        node_id = self._next_id
        self._next_id += 1
        self.nodes[node_id] = Node(node_id=node_id, name=name, kind=kind, parent=parent)
        logger.debug("allocated %s %r as #%d", kind.value, name, node_id)
        return node_id

    def release(self, node_id: int):
        """Drop a node from the table. The node must already be detached."""
        node = self.nodes.pop(node_id, None)
        if node is not None:
            logger.debug("released #%d (%r)", node_id, node.name)

    def get(self, node_id: int) -> Node:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise NotFound(f"No node with handle {node_id}.") from None

    # Containment

    def has_room(self, parent_id: int) -> bool:
        return len(self.get(parent_id).children) < self.max_children

    def insert(self, parent_id: int, child_id: int) -> bool:
        """
        Append child to parent's children and point the child back at parent.

        Returns False when the parent is full and overflow is silent; raises
        CapacityExceeded instead when strict_capacity is set.
        """
        parent = self.get(parent_id)
        if not parent.is_dir():
            raise NotADirectory(f"{parent.name} is not a directory.")

        if len(parent.children) >= self.max_children:
            if self.strict_capacity:
                raise CapacityExceeded()
            logger.warning("directory %r is full (%d entries), dropping #%d",
                           parent.name, self.max_children, child_id)
            return False

        child = self.get(child_id)
        parent.children.append(child_id)
        child.parent = parent_id
        return True

    def add_child(self, parent_id: int, name: str, kind: NodeKind) -> Optional[int]:
        """Create a node and insert it under parent in one step.

        The new node is released again if it could not be inserted, so a full
        directory never leaves orphans in the table.
        """
        child_id = self.create(name, kind, parent_id)
        try:
            inserted = self.insert(parent_id, child_id)
        except Exception:
            self.release(child_id)
            raise
        if not inserted:
            self.release(child_id)
            return None
        return child_id

    def remove_at(self, parent_id: int, index: int) -> int:
        """Remove and return the child handle at index, keeping order."""
        parent = self.get(parent_id)
        if index < 0 or index >= len(parent.children):
            raise NotFound(f"No child at index {index} in {parent.name}.")
        return parent.children.pop(index)

    def find_by_name(self, parent_id: int, name: str) -> Optional[int]:
        """Return the index of the child called name, or None."""
        for index, child_id in enumerate(self.get(parent_id).children):
            if self.nodes[child_id].name == name:
                return index
        return None

    def child_named(self, parent_id: int, name: str) -> Optional[Node]:
        index = self.find_by_name(parent_id, name)
        if index is None:
            return None
        return self.nodes[self.get(parent_id).children[index]]

    def children_of(self, parent_id: int) -> List[Node]:
        return [self.nodes[child_id] for child_id in self.get(parent_id).children]

    def delete(self, node_id: int):
        """Detach a file or an empty directory and release it."""
        if node_id == self.root_id:
            raise RootRemoval()

        node = self.get(node_id)
        if node.is_dir() and node.children:
            raise DirectoryNotEmpty()

        parent = self.get(node.parent)
        self.remove_at(parent.node_id, parent.children.index(node_id))
        self.release(node_id)
        logger.debug("deleted %r from %r", node.name, parent.name)

    # Traversal

    def walk(self, start_id: Optional[int] = None) -> Iterator[Node]:
        """Yield nodes breadth-first: parents before children, siblings in order."""
        pending = deque([self.root_id if start_id is None else start_id])
        while pending:
            node = self.nodes[pending.popleft()]
            yield node
            pending.extend(node.children)

    def breadth_first_search(self, pattern: str) -> List[int]:
        """Handles of every node whose name contains pattern, from the global root."""
        return [node.node_id for node in self.walk() if pattern in node.name]

    def display_name(self, node_id: int) -> str:
        return self.get(node_id).display_name

    def path_of(self, node_id: int) -> str:
        """Absolute slash-separated path, used for diagnostics."""
        parts = []
        node = self.get(node_id)
        while node.parent is not None:
            parts.append(node.name)
            node = self.nodes[node.parent]
        return SEPARATOR + SEPARATOR.join(reversed(parts))
