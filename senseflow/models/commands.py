"""
Command Models

A command is one request to move money, either spoken ("withdraw 50")
or typed into the deposit/withdraw fields of the banking screen.

Parsing produces a ParsedCommand. Executing it against the account
produces a CommandResult carrying the user-facing message.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from senseflow.models.account import MAX_AMOUNT, OperationResult


class CommandKind(str, Enum):
    """Which ledger operation a command asks for."""
    WITHDRAW = "withdraw"
    DEPOSIT = "deposit"
    UNRECOGNIZED = "unrecognized"


class CommandSource(str, Enum):
    """Where the command came from. Selects the message wording."""
    VOICE = "voice"
    MANUAL = "manual"


class CommandStatus(str, Enum):
    """Outcome of executing a command."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"              # Declined by pre-check or rejected by the ledger
    NOT_RECOGNIZED = "not_recognized"  # No operation attempted


class ParsedCommand(BaseModel):
    """
    A command extracted from text.

    amount is None when the text matched a template but the digits do not
    fit a 64-bit signed integer. Such a command is treated as unrecognized.
    """

    command_id: UUID = Field(default_factory=uuid4)
    received_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    raw_text: str
    kind: CommandKind
    amount: Optional[int] = Field(default=None, ge=0, le=MAX_AMOUNT)
    source: CommandSource = CommandSource.VOICE

    @property
    def is_recognized(self) -> bool:
        return self.kind != CommandKind.UNRECOGNIZED and self.amount is not None


class CommandResult(BaseModel):
    """Result of executing a command against the account."""

    command: ParsedCommand
    status: CommandStatus
    message: str = Field(
        ...,
        description="Message shown to the user"
    )
    operation: Optional[OperationResult] = Field(
        default=None,
        description="Ledger record, present only when an operation fired"
    )
    balance: int = Field(
        ...,
        description="Account balance after the command"
    )

    @property
    def succeeded(self) -> bool:
        return self.status == CommandStatus.SUCCEEDED
