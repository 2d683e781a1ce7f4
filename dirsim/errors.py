#!/usr/bin/env python3
"""
Error taxonomy for the dirsim simulator.

Every condition the core can hit is non-fatal. Core components raise one of
these exceptions and never print; the command engine converts them into a
single line of output and the session continues.
"""

from typing import Optional


class SimulatorError(Exception):
    """Base class for all recoverable simulator conditions."""

    default_message = "Error."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AlreadyExists(SimulatorError):
    """A sibling with the requested name is already present."""
    default_message = "Already exists."


class NotFound(SimulatorError):
    """The named child is missing or has the wrong kind."""
    default_message = "Not found."


class DirectoryNotEmpty(SimulatorError):
    """Attempted to delete a directory that still has children."""
    default_message = "Directory not empty."


class DestinationNotFound(SimulatorError):
    """Batch destination is missing or is not a directory."""
    default_message = "Destination directory not found."


class HistoryEmpty(SimulatorError):
    """Undo requested with nothing on the navigation stack."""
    default_message = "No previous directory."


class UnknownCommand(SimulatorError):
    """Input line did not map to a known command."""
    default_message = "Unknown command."


class CapacityExceeded(SimulatorError):
    """A bounded collection (children, history, queue) is full."""
    default_message = "Capacity exceeded."


class InvalidName(SimulatorError):
    """Name is empty or longer than the configured limit."""
    default_message = "Name too long."


class NotADirectory(SimulatorError):
    """Tried to use a file where a directory is required."""
    default_message = "Not a directory."


class RootRemoval(SimulatorError):
    """The root directory can never be removed."""
    default_message = "Cannot remove root."


class QueueEmpty(SimulatorError):
    """Dequeue on an empty batch queue."""
    default_message = "Batch queue is empty."
