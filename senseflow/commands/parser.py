"""
Voice Command Parser

Turns a recognized utterance into a ParsedCommand by matching two fixed
templates, each capturing one run of digits:

    withdraw <digits>
    deposit <digits>

The templates are searched anywhere in the text, withdraw first. The first
template that matches wins and only its first captured group is used, so
"withdraw 50 and deposit 20" is a withdrawal of 50.

Also parses the amounts typed into the deposit/withdraw fields, where
anything that is not a number counts as 0.
"""

import re
from typing import Optional

from senseflow.models.account import MAX_AMOUNT
from senseflow.models.commands import CommandKind, CommandSource, ParsedCommand


WITHDRAW_PATTERN = r"withdraw ([0-9]+)"
DEPOSIT_PATTERN = r"deposit ([0-9]+)"

_AMOUNT_RE = re.compile(r"\+?[0-9]+")


def parse_amount(text: str) -> Optional[int]:
    """
    Parse a whole-number amount.

    Returns None unless the text is a non-negative integer that fits in
    64 bits. Surrounding whitespace is not accepted.
    """
    if not _AMOUNT_RE.fullmatch(text):
        return None
    value = int(text)
    if value > MAX_AMOUNT:
        return None
    return value


def parse_amount_input(text: Optional[str]) -> int:
    """
    Parse an amount typed by the user, falling back to 0.

    The text is taken as typed: " 25 " is not a number and counts as 0.
    """
    if text is None:
        return 0
    amount = parse_amount(text)
    return amount if amount is not None else 0


class CommandParser:
    """
    Matches utterances against the withdraw and deposit templates.

    Matching is case-sensitive unless ignore_case is set.
    """

    def __init__(self, ignore_case: bool = False):
        flags = re.ASCII | (re.IGNORECASE if ignore_case else 0)
        self._ignore_case = ignore_case
        self._patterns: tuple[tuple[CommandKind, re.Pattern], ...] = (
            (CommandKind.WITHDRAW, re.compile(WITHDRAW_PATTERN, flags)),
            (CommandKind.DEPOSIT, re.compile(DEPOSIT_PATTERN, flags)),
        )

    @property
    def ignore_case(self) -> bool:
        return self._ignore_case

    def parse(self, text: str) -> ParsedCommand:
        """Parse an utterance. Text matching no template is UNRECOGNIZED."""
        for kind, pattern in self._patterns:
            match = pattern.search(text)
            if match:
                return ParsedCommand(
                    raw_text=text,
                    kind=kind,
                    amount=parse_amount(match.group(1)),
                    source=CommandSource.VOICE,
                )

        return ParsedCommand(
            raw_text=text,
            kind=CommandKind.UNRECOGNIZED,
            source=CommandSource.VOICE,
        )

    @staticmethod
    def manual(kind: CommandKind, text: Optional[str]) -> ParsedCommand:
        """Build a command from an on-screen amount field."""
        return ParsedCommand(
            raw_text=text or "",
            kind=kind,
            amount=parse_amount_input(text),
            source=CommandSource.MANUAL,
        )


def parse_command(text: str, ignore_case: bool = False) -> ParsedCommand:
    """Parse an utterance with a one-off parser."""
    return CommandParser(ignore_case=ignore_case).parse(text)
