"""
dirsim - An in-memory hierarchical filesystem simulator

This package provides a tree of directories and files driven by line-oriented
commands, with a navigation history for undo and a batch queue for deferred
copy/move operations. Nothing is ever written to disk.
"""

__version__ = "0.1.0"

from .tree import (
    TreeStore,
    Node,
    NodeKind,
)

from .history import NavigationHistory

from .batch import (
    BatchQueue,
    BatchAction,
    BatchReport,
)

from .engine import (
    Session,
    SessionLimits,
    CommandEngine,
    CommandResult,
)

from .errors import (
    SimulatorError,
    AlreadyExists,
    NotFound,
    DirectoryNotEmpty,
    DestinationNotFound,
    HistoryEmpty,
    UnknownCommand,
    CapacityExceeded,
    InvalidName,
)

from .command_parser import (
    Command,
    CommandParser,
)

from .terminal import (
    TerminalSession,
    TerminalConfig,
)

__all__ = [
    # Tree store
    "TreeStore",
    "Node",
    "NodeKind",

    # Auxiliary collections
    "NavigationHistory",
    "BatchQueue",
    "BatchAction",
    "BatchReport",

    # Engine
    "Session",
    "SessionLimits",
    "CommandEngine",
    "CommandResult",

    # Errors
    "SimulatorError",
    "AlreadyExists",
    "NotFound",
    "DirectoryNotEmpty",
    "DestinationNotFound",
    "HistoryEmpty",
    "UnknownCommand",
    "CapacityExceeded",
    "InvalidName",

    # Terminal
    "Command",
    "CommandParser",
    "TerminalSession",
    "TerminalConfig",

    # Version info
    "__version__",
]
