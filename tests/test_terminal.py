#!/usr/bin/env python3
"""
Tests for the dirsim terminal.

This module covers the command parser, the terminal session (prompt,
scripts, interactive loop) and the command line entry point.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io
import logging
import unittest
from unittest.mock import patch

from dirsim.command_parser import CommandParser, Command
from dirsim.terminal import TerminalSession, TerminalConfig, main
from dirsim.log import setup_logging, LOGGER_NAME


def reset_logging():
    """Detach handlers installed by setup_logging."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestCommandParser(unittest.TestCase):
    """Test the command parser."""

    def setUp(self):
        """Set up test fixtures."""
        self.parser = CommandParser()

    def test_parse_simple_command(self):
        """Test parsing a verb without arguments."""
        cmd = self.parser.parse("ls")
        self.assertEqual(cmd.name, "ls")
        self.assertEqual(cmd.args, [])

    def test_parse_command_with_args(self):
        """Test parsing command with arguments."""
        cmd = self.parser.parse("batch copy backup")
        self.assertEqual(cmd.name, "batch")
        self.assertEqual(cmd.args, ["copy", "backup"])

    def test_whitespace_delimited(self):
        """Runs of spaces, tabs and the trailing newline are separators."""
        cmd = self.parser.parse("  mkdir \t docs  \n")
        self.assertEqual(cmd, Command(name="mkdir", args=["docs"]))

    def test_blank_and_comment_lines(self):
        """Blank lines and comments produce no command."""
        self.assertIsNone(self.parser.parse(""))
        self.assertIsNone(self.parser.parse("   \n"))
        self.assertIsNone(self.parser.parse("# setup"))

    def test_str_round_trip(self):
        """Test the canonical text of a command."""
        self.assertEqual(str(self.parser.parse("cd   ..")), "cd ..")


class TestTerminalSession(unittest.TestCase):
    """Test the terminal session."""

    def setUp(self):
        """Set up test fixtures."""
        self.session = TerminalSession()

    def test_prompt_shows_current_directory(self):
        """Test the prompt format."""
        self.assertEqual(self.session.get_prompt(), "[root]$ ")
        self.session.run_command("mkdir docs")
        self.session.run_command("cd docs")
        self.assertEqual(self.session.get_prompt(), "[docs]$ ")

    def test_run_command_output(self):
        """Test single command execution."""
        self.session.run_command("mkdir docs")
        self.session.run_command("touch a.txt")
        self.assertEqual(self.session.run_command("ls"), "docs/\na.txt")

    def test_unknown_command(self):
        """Unrecognized input reports and changes nothing."""
        self.assertEqual(self.session.run_command("dance"), "Unknown command.")
        self.assertEqual(self.session.run_command("ls"), "")

    def test_exit_returns_none(self):
        """exit is signalled as None from execute_command."""
        self.assertIsNone(self.session.execute_command("exit"))
        self.assertEqual(self.session.run_command("exit"), "")

    def test_run_script(self):
        """Test the docs scenario as a script."""
        outputs = self.session.run_script([
            "# build a small tree",
            "mkdir docs",
            "touch a.txt",
            "cd docs",
            "touch b.txt",
            "cd ..",
            "ls",
        ])
        self.assertEqual(outputs, ["docs/\na.txt"])

    def test_run_script_stops_at_exit(self):
        """Lines after exit are not executed."""
        outputs = self.session.run_script(["touch a", "exit", "touch b", "ls"])
        self.assertEqual(outputs, [])
        self.assertEqual(self.session.run_command("ls"), "a")

    def test_run_script_echo(self):
        """With echo_commands the transcript includes prompts."""
        session = TerminalSession(TerminalConfig(echo_commands=True))
        outputs = session.run_script(["mkdir d", "cd d", "undo", "undo"])
        self.assertEqual(outputs, [
            "[root]$ mkdir d",
            "[root]$ cd d",
            "[d]$ undo",
            "[root]$ undo",
            "No previous directory.",
        ])

    def test_config_limits(self):
        """Capacities flow from the config into the session."""
        session = TerminalSession(TerminalConfig(max_children=1))
        session.run_command("touch a")
        self.assertEqual(session.run_command("touch b"), "Capacity exceeded.")

    def test_silent_overflow_config(self):
        """strict_capacity=False drops overflow without a message."""
        session = TerminalSession(TerminalConfig(max_children=1, strict_capacity=False))
        session.run_command("touch a")
        self.assertEqual(session.run_command("touch b"), "")
        self.assertEqual(session.run_command("ls"), "a")


class TestInteractive(unittest.TestCase):
    """Test the REPL loop against in-memory streams."""

    def run_lines(self, text):
        session = TerminalSession()
        stdout = io.StringIO()
        session.run_interactive(stdin=io.StringIO(text), stdout=stdout)
        return session, stdout.getvalue()

    def test_prompt_before_each_command(self):
        """Prompts, outputs and exit."""
        _, output = self.run_lines("mkdir docs\ncd docs\nls\nfoo\nexit\n")
        self.assertEqual(
            output,
            "[root]$ [root]$ [docs]$ [docs]$ Unknown command.\n[docs]$ "
        )

    def test_eof_ends_session(self):
        """End of input stops the loop cleanly."""
        session, output = self.run_lines("touch a\n")
        self.assertEqual(output, "[root]$ [root]$ \n")
        self.assertFalse(session.running)

    def test_keyboard_interrupt_continues(self):
        """Ctrl-C prints ^C and keeps reading."""
        session = TerminalSession()
        stdin = io.StringIO("ls\nexit\n")
        stdout = io.StringIO()
        calls = []
        real = session.execute_command

        def interrupt_once(line):
            if not calls:
                calls.append(line)
                raise KeyboardInterrupt
            return real(line)

        with patch.object(session, 'execute_command', side_effect=interrupt_once):
            session.run_interactive(stdin=stdin, stdout=stdout)

        self.assertEqual(stdout.getvalue(), "[root]$ ^C\n[root]$ ")


class TestMain(unittest.TestCase):
    """Test the command line entry point."""

    def tearDown(self):
        reset_logging()

    def test_command_flags(self):
        """Repeated -c flags run in one session."""
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            code = main(['-c', 'mkdir docs', '-c', 'touch a.txt', '-c', 'ls'])
        self.assertEqual(code, 0)
        self.assertEqual(stdout.getvalue(), "docs/\na.txt\n")

    def test_script_file(self):
        """--script echoes the prompt and command for each line."""
        import tempfile
        with tempfile.NamedTemporaryFile('w', suffix='.txt', delete=False) as handle:
            handle.write("mkdir docs\nls\n")
            path = handle.name
        try:
            with patch('sys.stdout', new_callable=io.StringIO) as stdout:
                code = main(['--script', path])
        finally:
            os.unlink(path)

        self.assertEqual(code, 0)
        self.assertEqual(stdout.getvalue(),
                         "[root]$ mkdir docs\n[root]$ ls\ndocs/\n")

    def test_capacity_flags(self):
        """--max-children and --silent-overflow reach the session."""
        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            main(['--max-children', '1', '-c', 'touch a', '-c', 'touch b'])
        self.assertEqual(stdout.getvalue(), "Capacity exceeded.\n")

        with patch('sys.stdout', new_callable=io.StringIO) as stdout:
            main(['--max-children', '1', '--silent-overflow',
                  '-c', 'touch a', '-c', 'touch b', '-c', 'ls'])
        self.assertEqual(stdout.getvalue(), "a\n")


class TestLogging(unittest.TestCase):
    """Test logging setup."""

    def tearDown(self):
        reset_logging()

    def test_setup_is_idempotent(self):
        """Repeated setup keeps a single handler."""
        setup_logging('DEBUG', stream=io.StringIO())
        logger = setup_logging('DEBUG', stream=io.StringIO())
        self.assertEqual(len(logger.handlers), 1)
        self.assertEqual(logger.level, logging.DEBUG)

    def test_mutations_are_logged(self):
        """Debug records are emitted for tree changes."""
        stream = io.StringIO()
        setup_logging(logging.DEBUG, stream=stream)
        TerminalSession().run_command("mkdir docs")
        self.assertIn("allocated dir 'docs'", stream.getvalue())

    def test_overflow_warning(self):
        """Silent overflow still leaves a warning in the log."""
        stream = io.StringIO()
        setup_logging('WARNING', stream=stream)
        session = TerminalSession(TerminalConfig(max_children=1, strict_capacity=False))
        session.run_command("touch a")
        session.run_command("touch b")
        self.assertIn("WARNING | dirsim.tree | directory 'root' is full", stream.getvalue())


if __name__ == '__main__':
    unittest.main()
