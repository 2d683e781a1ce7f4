#!/usr/bin/env python3
"""
Command parser for the dirsim terminal.

Translates one line of input into a Command: a verb plus its arguments.
Tokens are whitespace-delimited; names never contain whitespace, so no
quoting rules apply.

Design Principles:
- Single responsibility: parse commands, don't execute them
- Pure functions with predictable outputs
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Command:
    """
    A single parsed command.

    This is the unit handed to the command engine; it carries no knowledge
    of the raw input line.
    """
    name: str
    args: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return ' '.join([self.name] + self.args)


class CommandParser:
    """Parser for the line-oriented command protocol."""

    comment_prefix = '#'

    def parse(self, command_line: str) -> Optional[Command]:
        """
        Parse a command line into a Command.

        Returns None for blank lines and comments.
        """
        if not command_line:
            return None

        tokens = command_line.split()
        if not tokens or tokens[0].startswith(self.comment_prefix):
            return None

        return Command(name=tokens[0], args=tokens[1:])
