"""
Audit Logger

DESIGN DECISION: Every user action on the account is logged:
1. Structured local log via structlog
2. The session's in-memory audit trail, shown as recent activity

The audit logger:
- Runs synchronously, on the same control flow as the ledger
- Never raises because the trail failed (the failure is logged instead)
- Supports correlation IDs to trace the events of one user action
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from senseflow.audit.trail import AuditTrailInterface
from senseflow.models.account import AccountKind, AccountSnapshot
from senseflow.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from senseflow.models.commands import CommandResult, CommandStatus, ParsedCommand


def _processors(log_format: str) -> list:
    renderer = (
        structlog.dev.ConsoleRenderer()
        if log_format == "console"
        else structlog.processors.JSONRenderer()
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


def configure_logging(level: str = "INFO", log_format: str = "json") -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "json" or "console"
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    structlog.configure(
        processors=_processors(log_format),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Default configuration until the application calls configure_logging()
structlog.configure(
    processors=_processors("json"),
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. The audit trail (for the session's activity list)
    """

    def __init__(
        self,
        trail: Optional[AuditTrailInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            trail: Trail to append events to.
                   If None, only logs locally.
        """
        self._trail = trail
        self._logger = structlog.get_logger("senseflow.audit")

    @property
    def trail(self) -> Optional[AuditTrailInterface]:
        return self._trail

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Appends to the trail if available.

        Returns True if the trail write succeeded (or no trail configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._trail is not None:
            try:
                return self._trail.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_trail_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    def log_account_opened(
        self,
        snapshot: AccountSnapshot,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log account creation."""
        self.log(AuditEventBuilder.account_opened(snapshot, correlation_id))

    def log_voice_command_received(
        self,
        command: ParsedCommand,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a recognized utterance before it is executed."""
        self.log(AuditEventBuilder.voice_command_received(
            command_id=command.command_id,
            text=command.raw_text,
            correlation_id=correlation_id,
        ))

    def log_command_result(
        self,
        result: CommandResult,
        account_kind: AccountKind,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """
        Log the outcome of a command.

        An operation that reached the ledger is logged as applied or
        rejected; a declined withdrawal or an unrecognized command is
        logged without touching the ledger record.
        """
        command = result.command

        if result.operation is not None:
            event = AuditEventBuilder.operation(
                operation=result.operation,
                account_kind=account_kind,
                correlation_id=correlation_id,
            )
        elif result.status == CommandStatus.NOT_RECOGNIZED:
            event = AuditEventBuilder.voice_command_not_recognized(
                command_id=command.command_id,
                text=command.raw_text,
                correlation_id=correlation_id,
            )
        else:
            event = AuditEventBuilder.withdrawal_declined(
                command_id=command.command_id,
                amount=command.amount,
                balance=result.balance,
                account_kind=account_kind,
                correlation_id=correlation_id,
            )

        self.log(event)

    def log_speech_cancelled(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a recognizer dismissed without a result."""
        self.log(AuditEventBuilder.speech_recognition_cancelled(correlation_id))

    def log_speech_failed(
        self,
        recognizer: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a speech recognizer failure."""
        self.log(AuditEventBuilder.speech_recognition_failed(
            recognizer=recognizer,
            error_message=error_message,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (button press, voice request)
    and pass it through all subsequent operations.
    """
    return uuid4()
