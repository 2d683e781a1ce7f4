#!/usr/bin/env python3
"""
Terminal front end for dirsim.

This module provides the REPL loop around the command engine: it prints the
prompt, reads lines, hands them to the parser and engine, and writes the
result back out.

Design Principles:
- All state changes go through the command engine
- Clean separation between parsing and execution
- One TerminalSession per independent simulated filesystem
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, TextIO

from .command_parser import CommandParser
from .engine import CommandEngine, CommandResult, Session, SessionLimits
from .log import setup_logging

logger = logging.getLogger(__name__)


@dataclass
class TerminalConfig:
    """Configuration for terminal session."""
    prompt_format: str = '[{cwd}]$ '
    max_children: int = 32
    max_history: int = 64
    max_queue: int = 32
    max_name_length: int = 63
    strict_capacity: bool = True
    echo_commands: bool = False  # Echo prompt and command when running scripts

    def limits(self) -> SessionLimits:
        return SessionLimits(
            max_children=self.max_children,
            max_history=self.max_history,
            max_queue=self.max_queue,
            max_name_length=self.max_name_length,
            strict_capacity=self.strict_capacity,
        )


class TerminalSession:
    """
    Main terminal session manager.

    Owns the Session, the parser and the engine, and provides the
    interactive loop as well as single-command and script execution.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 session: Optional[Session] = None):
        """Initialize terminal session."""
        self.config = config or TerminalConfig()
        self.session = session or Session(self.config.limits())
        self.parser = CommandParser()
        self.engine = CommandEngine(self.session)
        self.running = False

    def get_prompt(self) -> str:
        """Generate the command prompt."""
        return self.config.prompt_format.format(cwd=self.session.current.name)

    def execute(self, command_line: str) -> CommandResult:
        """Parse and execute one line, returning the full result."""
        command = self.parser.parse(command_line)
        if command is None:
            return CommandResult()
        logger.debug("executing %s", command)
        return self.engine.execute(command)

    def execute_command(self, command_line: str) -> Optional[str]:
        """
        Execute a command line and return the output.

        Returns None for exit commands.
        """
        result = self.execute(command_line)
        if result.terminate:
            return None
        return result.text

    def run_command(self, command_line: str) -> str:
        """
        Run a single command and return output.

        This method is useful for non-interactive use.
        """
        output = self.execute_command(command_line)
        return output if output is not None else ''

    def run_script(self, script_lines: List[str]) -> List[str]:
        """
        Run a script (list of command lines) and return outputs.

        Blank lines and comments are skipped; exit stops the script.
        """
        outputs = []
        for line in script_lines:
            line = line.strip()
            if not line or line.startswith('#'):
                continue

            if self.config.echo_commands:
                outputs.append(self.get_prompt() + line)

            output = self.execute_command(line)
            if output is None:
                break
            if output:
                outputs.append(output)

        return outputs

    def run_interactive(self, stdin: Optional[TextIO] = None,
                        stdout: Optional[TextIO] = None):
        """Run the interactive REPL loop until exit or end of input."""
        stdin = stdin or sys.stdin
        stdout = stdout or sys.stdout
        self.running = True

        while self.running:
            try:
                stdout.write(self.get_prompt())
                stdout.flush()
                command_line = stdin.readline()
                if not command_line:
                    stdout.write('\n')
                    break

                output = self.execute_command(command_line)
                if output is None:
                    break
                if output:
                    stdout.write(output + '\n')

            except KeyboardInterrupt:
                stdout.write('^C\n')
                continue
            except Exception as e:
                logger.exception("unexpected failure")
                stdout.write(f"Error: {e}\n")

        self.running = False


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the simulator."""
    parser = argparse.ArgumentParser(description='In-memory directory tree simulator')
    parser.add_argument('-c', '--command', action='append',
                        help='Execute command and exit (repeatable)')
    parser.add_argument('-s', '--script', help='Run commands from a file')
    parser.add_argument('--max-children', type=int, default=32,
                        help='Entries allowed per directory')
    parser.add_argument('--max-history', type=int, default=64,
                        help='Depth of the navigation history')
    parser.add_argument('--max-queue', type=int, default=32,
                        help='Files allowed in the batch queue')
    parser.add_argument('--silent-overflow', action='store_true',
                        help='Drop items on overflow instead of reporting it')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log debug output to stderr')
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    config = TerminalConfig(
        max_children=args.max_children,
        max_history=args.max_history,
        max_queue=args.max_queue,
        strict_capacity=not args.silent_overflow,
    )

    if args.command:
        session = TerminalSession(config=config)
        for output in session.run_script(args.command):
            print(output)
    elif args.script:
        config.echo_commands = True
        session = TerminalSession(config=config)
        with open(args.script, encoding='utf-8') as handle:
            lines = handle.readlines()
        for output in session.run_script(lines):
            print(output)
    else:
        TerminalSession(config=config).run_interactive()

    return 0


if __name__ == '__main__':
    sys.exit(main())
