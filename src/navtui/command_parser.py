"""Parse vim-style commands for the TUI."""

import shlex
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class CommandType(Enum):
    """Types of commands supported in TUI."""
    CD = "cd"
    EXEC = "exec"
    BACK = "back"
    FORWARD = "forward"
    UP = "up"
    REFRESH = "refresh"
    AUTH = "auth"
    QUIT = "quit"
    HELP = "help"
    UNKNOWN = "unknown"


@dataclass
class ParsedCommand:
    """Result of parsing a command string."""
    command_type: CommandType
    args: List[str]
    raw_input: str
    error: Optional[str] = None


class CommandParser:
    """Parser for vim-style TUI commands."""

    ALIASES = {
        "g": "cd",
        "e": "exec",
        "x": "exec",
        "b": "back",
        "f": "forward",
        "u": "up",
        "..": "up",
        "r": "refresh",
        "a": "auth",
        "q": "quit",
        "?": "help",
    }

    NO_ARGS = (
        CommandType.BACK,
        CommandType.FORWARD,
        CommandType.UP,
        CommandType.REFRESH,
        CommandType.QUIT,
        CommandType.HELP,
    )

    def parse(self, input_text: str) -> ParsedCommand:
        """Parse command input and return parsed command."""
        input_text = input_text.strip()

        if not input_text:
            return ParsedCommand(CommandType.UNKNOWN, [], input_text, error="Empty command")

        # Must start with : for command mode
        if not input_text.startswith(":"):
            return ParsedCommand(
                CommandType.UNKNOWN, [], input_text, error="Commands must start with ':'"
            )

        command_line = input_text[1:].strip()
        if not command_line:
            return ParsedCommand(CommandType.UNKNOWN, [], input_text, error="No command after ':'")

        try:
            parts = shlex.split(command_line)
        except ValueError as e:
            return ParsedCommand(
                CommandType.UNKNOWN, [], input_text, error=f"Invalid command syntax: {e}"
            )

        if not parts:
            return ParsedCommand(CommandType.UNKNOWN, [], input_text, error="No command specified")

        command = parts[0].lower()
        args = parts[1:]
        resolved_command = self.ALIASES.get(command, command)

        try:
            command_type = CommandType(resolved_command)
        except ValueError:
            return ParsedCommand(
                CommandType.UNKNOWN, args, input_text, error=f"Unknown command: {command}"
            )
        if command_type is CommandType.UNKNOWN:
            return ParsedCommand(
                CommandType.UNKNOWN, args, input_text, error=f"Unknown command: {command}"
            )

        error = self._validate_command_args(command_type, args)
        return ParsedCommand(command_type, args, input_text, error=error)

    def _validate_command_args(self, command_type: CommandType, args: List[str]) -> Optional[str]:
        """Validate arguments for specific command types."""
        if command_type is CommandType.CD:
            if len(args) != 1:
                return "cd command requires exactly one path argument"

        elif command_type in (CommandType.EXEC, CommandType.AUTH):
            if not args:
                return f"{command_type.value} command requires at least one argument"
            if len(args) > 2:
                return f"{command_type.value} command accepts at most two arguments"

        elif command_type in self.NO_ARGS:
            if args:
                return f"{command_type.value} command does not accept arguments"

        return None

    def get_help_text(self) -> str:
        """Get help text for all commands."""
        return """Command Mode Help:

:cd <path> (or :g)            - Go to a path, e.g. :cd /livingroom/lamp
:exec <code> [value] (or :e)  - Send a code to the current path
:back (or :b)                 - Previous location
:forward (or :f)              - Next location
:up (or :u, :..)              - Parent path
:refresh (or :r)              - Reload the current path
:auth <user> [password] (:a)  - Set credentials and retry
:quit (or :q)                 - Exit application
:help (or :?)                 - Show this help

Search Mode:
Type directly (without :) to filter the listing by name

Navigation:
↑↓ - Navigate items
Enter - Open a branch, or send a leaf as a code
Backspace - Parent path
Esc - Back
"""
