"""
Audit Models for SenseFlow

Every attempt to move money, and every voice command heard, is recorded
as an AuditEvent. The events feed the structured log and the session's
recent-activity list.

DESIGN DECISION: Audit events are append-only. They live in memory for the
session and are discarded with it.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from senseflow.models.account import (
    AccountKind,
    AccountSnapshot,
    LastOperation,
    OperationResult,
    OperationType,
)


DESCRIPTION_MAX_LENGTH = 500


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Account lifecycle
    ACCOUNT_OPENED = "account_opened"

    # Ledger operations
    DEPOSIT_APPLIED = "deposit_applied"
    DEPOSIT_REJECTED = "deposit_rejected"
    WITHDRAWAL_APPLIED = "withdrawal_applied"
    WITHDRAWAL_DECLINED = "withdrawal_declined"

    # Voice input
    VOICE_COMMAND_RECEIVED = "voice_command_received"
    VOICE_COMMAND_NOT_RECOGNIZED = "voice_command_not_recognized"
    SPEECH_RECOGNITION_CANCELLED = "speech_recognition_cancelled"
    SPEECH_RECOGNITION_FAILED = "speech_recognition_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'account', 'operation', 'command')"
    )
    entity_id: Optional[UUID] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )
    account_kind: Optional[AccountKind] = None

    # Correlation - one user action (button press, voice request)
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate events caused by one user action"
    )

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "account_kind": self.account_kind.value if self.account_kind else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


def _operation_details(operation: OperationResult) -> dict[str, Any]:
    return {
        "operation": operation.operation.value,
        "requested_amount": operation.requested_amount,
        "applied_amount": operation.applied_amount,
        "outcome": operation.outcome.value,
        "balance_before": operation.balance_before,
        "balance_after": operation.balance_after,
    }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.account_opened(snapshot, correlation_id)
        event = AuditEventBuilder.operation(result, AccountKind.CREDIT, correlation_id)
    """

    @staticmethod
    def account_opened(
        snapshot: AccountSnapshot,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNT_OPENED,
            entity_type="account",
            entity_id=snapshot.account_id,
            account_kind=snapshot.kind,
            correlation_id=correlation_id,
            description=f"{snapshot.kind.value.capitalize()} account opened",
            details={"balance": snapshot.balance},
        )

    @staticmethod
    def operation(
        operation: OperationResult,
        account_kind: AccountKind,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        """Event for a ledger operation that reached the account."""
        if operation.operation == OperationType.WITHDRAW:
            event_type = AuditEventType.WITHDRAWAL_APPLIED
            description = f"Withdrew {operation.applied_amount}"
        elif operation.accepted:
            event_type = AuditEventType.DEPOSIT_APPLIED
            description = f"Deposited {operation.applied_amount}"
            if operation.outcome == LastOperation.DEPOSIT_SUCCESSFUL_PAID_OFF:
                description += " (paid off)"
        else:
            event_type = AuditEventType.DEPOSIT_REJECTED
            description = (
                f"Deposit of {operation.requested_amount} rejected: "
                f"{operation.outcome.value}"
            )

        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.INFO if operation.accepted else AuditSeverity.WARNING,
            entity_type="operation",
            entity_id=operation.operation_id,
            account_kind=account_kind,
            correlation_id=correlation_id,
            description=description,
            details=_operation_details(operation),
            is_user_action=True,
        )

    @staticmethod
    def withdrawal_declined(
        command_id: UUID,
        amount: int,
        balance: int,
        account_kind: AccountKind,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WITHDRAWAL_DECLINED,
            severity=AuditSeverity.WARNING,
            entity_type="command",
            entity_id=command_id,
            account_kind=account_kind,
            correlation_id=correlation_id,
            description=f"Withdrawal of {amount} declined: balance {balance}",
            details={
                "requested_amount": amount,
                "balance": balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def voice_command_received(
        command_id: UUID,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VOICE_COMMAND_RECEIVED,
            entity_type="command",
            entity_id=command_id,
            correlation_id=correlation_id,
            description="Voice command received",
            details={"text": text},
            is_user_action=True,
        )

    @staticmethod
    def voice_command_not_recognized(
        command_id: UUID,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VOICE_COMMAND_NOT_RECOGNIZED,
            severity=AuditSeverity.WARNING,
            entity_type="command",
            entity_id=command_id,
            correlation_id=correlation_id,
            description="Voice command not recognized",
            details={"text": text},
        )

    @staticmethod
    def speech_recognition_cancelled(
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPEECH_RECOGNITION_CANCELLED,
            entity_type="speech",
            correlation_id=correlation_id,
            description="Speech recognition finished without a result",
        )

    @staticmethod
    def speech_recognition_failed(
        recognizer: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SPEECH_RECOGNITION_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="speech",
            correlation_id=correlation_id,
            description=f"Speech recognition failed: {recognizer}"[:DESCRIPTION_MAX_LENGTH],
            error_message=error_message,
            details={"recognizer": recognizer},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}"[:DESCRIPTION_MAX_LENGTH],
            error_message=error_message,
            details={"error_type": error_type, **(details or {})},
            correlation_id=correlation_id,
        )
