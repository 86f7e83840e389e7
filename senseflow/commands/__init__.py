"""Command parsing and execution package."""

from senseflow.commands.executor import NOT_RECOGNIZED_MESSAGE, CommandExecutor
from senseflow.commands.parser import (
    CommandParser,
    parse_amount,
    parse_amount_input,
    parse_command,
)

__all__ = [
    "NOT_RECOGNIZED_MESSAGE",
    "CommandExecutor",
    "CommandParser",
    "parse_amount",
    "parse_amount_input",
    "parse_command",
]
