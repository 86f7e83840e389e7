"""
Data Models Package

The account ledger plus the Pydantic models that describe commands,
operation results and audit events.
"""

from senseflow.models.account import (
    MAX_AMOUNT,
    Account,
    AccountKind,
    AccountSnapshot,
    InvalidAmountError,
    LastOperation,
    OperationResult,
    OperationType,
    validate_amount,
)
from senseflow.models.commands import (
    CommandKind,
    CommandResult,
    CommandSource,
    CommandStatus,
    ParsedCommand,
)
from senseflow.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Ledger
    "MAX_AMOUNT",
    "Account",
    "AccountKind",
    "AccountSnapshot",
    "InvalidAmountError",
    "LastOperation",
    "OperationResult",
    "OperationType",
    "validate_amount",
    # Commands
    "CommandKind",
    "CommandResult",
    "CommandSource",
    "CommandStatus",
    "ParsedCommand",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
