#!/usr/bin/env python3
"""
Command engine for dirsim.

This module maps parsed commands onto the tree store, the navigation history
and the batch queue held by a Session, and turns the outcome into lines of
text.

Design Principles:
- All mutable state lives in an explicit Session, never in module globals
- Core components raise SimulatorError; only execute() converts it to output
- Successful mutations print nothing, failures print a single line
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from .batch import BatchAction, BatchQueue
from .command_parser import Command
from .errors import (
    AlreadyExists,
    DestinationNotFound,
    InvalidName,
    NotFound,
    SimulatorError,
    UnknownCommand,
)
from .history import NavigationHistory
from .tree import Node, NodeKind, TreeStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionLimits:
    """Capacity bounds for one session."""
    max_children: int = 32
    max_history: int = 64
    max_queue: int = 32
    max_name_length: int = 63
    strict_capacity: bool = True  # report overflow instead of dropping silently


class Session:
    """Tree, current directory, history and batch queue for one user session."""

    def __init__(self, limits: Optional[SessionLimits] = None):
        self.limits = limits or SessionLimits()
        self.tree = TreeStore(max_children=self.limits.max_children,
                              strict_capacity=self.limits.strict_capacity)
        self.root_id = self.tree.root_id
        self.current_id = self.root_id
        self.history = NavigationHistory(max_size=self.limits.max_history,
                                         strict_capacity=self.limits.strict_capacity)
        self.queue = BatchQueue(max_size=self.limits.max_queue,
                                strict_capacity=self.limits.strict_capacity)

    @property
    def current(self) -> Node:
        return self.tree.get(self.current_id)


@dataclass
class CommandResult:
    """Output lines and status of one executed command."""
    lines: List[str] = field(default_factory=list)
    exit_code: int = 0
    terminate: bool = False

    @property
    def text(self) -> str:
        return '\n'.join(self.lines)

    def __str__(self) -> str:
        return self.text

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)


class CommandEngine:
    """
    Executes parsed commands against a Session.

    Each verb is handled by a cmd_<verb> method whose docstring doubles as the
    text shown by help.
    """

    # verb -> (required args, accepted args); extra arguments are ignored
    ARITY: Dict[str, Tuple[int, int]] = {
        'mkdir': (1, 1),
        'touch': (1, 1),
        'rm': (1, 1),
        'cd': (1, 1),
        'ls': (0, 0),
        'search': (1, 1),
        'history': (0, 0),
        'undo': (0, 0),
        'enqueue': (1, 1),
        'batch': (2, 2),
        'help': (0, 1),
        'exit': (0, 0),
    }

    def __init__(self, session: Optional[Session] = None):
        self.session = session or Session()

    @property
    def tree(self) -> TreeStore:
        return self.session.tree

    def execute(self, command: Command) -> CommandResult:
        """Run one command and return its result. Never raises SimulatorError."""
        handler = self._get_handler(command.name)
        try:
            if handler is None:
                raise UnknownCommand()
            required, accepted = self.ARITY[command.name]
            if len(command.args) < required:
                raise UnknownCommand()
            result = handler(*command.args[:accepted])
        except SimulatorError as e:
            logger.debug("%s failed: %s", command.name, e.message)
            return CommandResult(lines=[e.message], exit_code=1)

        if isinstance(result, CommandResult):
            return result
        return CommandResult(lines=list(result or []))

    def run(self, name: str, *args: str) -> CommandResult:
        """Execute a verb with arguments without going through the parser."""
        return self.execute(Command(name=name, args=list(args)))

    def _get_handler(self, name: str) -> Optional[Callable]:
        if name not in self.ARITY:
            return None
        return getattr(self, f'cmd_{name}')

    # Helpers

    def _check_name(self, name: str):
        if len(name) > self.session.limits.max_name_length:
            raise InvalidName()
        if name in ('.', '..') or '/' in name:
            raise InvalidName("Invalid name.")

    def _create(self, name: str, kind: NodeKind, exists_message: str) -> List[str]:
        self._check_name(name)
        current_id = self.session.current_id
        if self.tree.find_by_name(current_id, name) is not None:
            raise AlreadyExists(exists_message)
        self.tree.add_child(current_id, name, kind)
        return []

    def _navigate(self, target_id: int):
        previous_id = self.session.current_id
        # the move stands even if recording it overflows the history
        self.session.current_id = target_id
        logger.debug("cd %s -> %s", self.tree.path_of(previous_id),
                     self.tree.path_of(target_id))
        self.session.history.push(previous_id)

    # Commands

    def cmd_mkdir(self, name: str) -> List[str]:
        """Create a directory in the current directory.

        Usage:
            mkdir NAME

        Examples:
            mkdir docs             # Create docs/ here
        """
        return self._create(name, NodeKind.DIRECTORY, "Folder already exists.")

    def cmd_touch(self, name: str) -> List[str]:
        """Create an empty file in the current directory.

        Usage:
            touch NAME

        Examples:
            touch notes.txt        # Create notes.txt here
        """
        return self._create(name, NodeKind.FILE, "File already exists.")

    def cmd_rm(self, name: str) -> List[str]:
        """Remove a file or an empty directory.

        Usage:
            rm NAME

        Examples:
            rm notes.txt           # Delete a file
            rm docs                # Delete docs/ if it is empty
        """
        node = self.tree.child_named(self.session.current_id, name)
        if node is None:
            raise NotFound("Not found.")
        self.tree.delete(node.node_id)

        # no stale handles may survive the node
        self.session.history.discard(node.node_id)
        self.session.queue.discard(node.node_id)
        return []

    def cmd_cd(self, name: str) -> List[str]:
        """Change the current directory.

        Usage:
            cd NAME|..

        Examples:
            cd docs                # Enter docs/
            cd ..                  # Go to the parent directory
        """
        current = self.session.current
        if name == '..':
            if current.parent is not None:
                self._navigate(current.parent)
            return []

        node = self.tree.child_named(current.node_id, name)
        if node is None or not node.is_dir():
            raise NotFound("Directory not found.")
        self._navigate(node.node_id)
        return []

    def cmd_ls(self) -> List[str]:
        """List the current directory, directories suffixed with '/'.

        Usage:
            ls
        """
        return [node.display_name for node in self.tree.children_of(self.session.current_id)]

    def cmd_search(self, pattern: str) -> List[str]:
        """Find names containing a substring, breadth-first from the root.

        Usage:
            search PATTERN

        Examples:
            search .txt            # Every name containing '.txt'
        """
        return [self.tree.display_name(node_id)
                for node_id in self.tree.breadth_first_search(pattern)]

    def cmd_history(self) -> List[str]:
        """Show the navigation history, oldest first.

        Usage:
            history
        """
        lines = ["Navigation history:"]
        for dir_id in self.session.history.list_all():
            lines.append(self.tree.get(dir_id).name + '/')
        return lines

    def cmd_undo(self) -> List[str]:
        """Return to the directory that was current before the last cd.

        Usage:
            undo
        """
        self.session.current_id = self.session.history.pop()
        return []

    def cmd_enqueue(self, name: str) -> List[str]:
        """Stage a file for the next batch operation.

        Usage:
            enqueue NAME

        Examples:
            enqueue a.txt          # Queue a.txt
        """
        node = self.tree.child_named(self.session.current_id, name)
        if node is None or not node.is_file():
            raise NotFound("File not found.")
        self.session.queue.enqueue(node.node_id)
        return []

    def cmd_batch(self, action: str, dest: str) -> CommandResult:
        """Copy or move every queued file into a directory.

        Usage:
            batch copy|move DEST

        Examples:
            batch copy backup      # Duplicate queued files into backup/
            batch move archive     # Relocate queued files into archive/
        """
        target = self.tree.child_named(self.session.current_id, dest)
        if target is None or not target.is_dir():
            raise DestinationNotFound()

        report = self.session.queue.drain_into(self.tree, target.node_id,
                                               BatchAction.parse(action))
        lines = [f"Skipped {name}: already exists in {target.name}."
                 for name in report.conflicts]
        if self.session.limits.strict_capacity:
            lines.extend(f"Skipped {name}: {target.name} is full."
                         for name in report.overflowed)
        return CommandResult(lines=lines, exit_code=1 if lines else 0)

    def cmd_help(self, command: Optional[str] = None) -> CommandResult:
        """Show available commands, or usage for one command.

        Usage:
            help [COMMAND]

        Examples:
            help                   # List commands
            help batch             # Usage for batch
        """
        if command is None:
            lines = ["Available commands:"]
            for name in self.ARITY:
                lines.append(f"  {name:<10} {_summary(self._get_handler(name).__doc__)}")
            return CommandResult(lines=lines)

        handler = self._get_handler(command)
        if handler is None:
            return CommandResult(lines=[f"help: no help available for '{command}'"],
                                 exit_code=1)
        return CommandResult(lines=_format_help(command, handler.__doc__))

    def cmd_exit(self) -> CommandResult:
        """End the session.

        Usage:
            exit
        """
        return CommandResult(terminate=True)


def _summary(docstring: Optional[str]) -> str:
    if not docstring:
        return ''
    return docstring.strip().split('\n')[0]


def _format_help(command: str, docstring: Optional[str]) -> List[str]:
    """Render a cmd_ docstring as help text."""
    if not docstring:
        return [f"{command} - No documentation available"]

    lines = [f"{command} - {_summary(docstring)}"]
    for raw in docstring.strip().split('\n')[1:]:
        line = raw.strip()
        if line in ('Usage:', 'Examples:'):
            lines.append('')
            lines.append(line)
        elif line:
            lines.append(f"    {line}")
    return lines
