"""
Main Orchestrator for SenseFlow

This module ties together the account, the command parser/executor and the
audit logger, and defines the end-to-end flows for:
1. Manual entry (amount field → parse → execute → message)
2. Voice input (recognizer → transcript → parse → execute → message)

DESIGN DECISION: Everything runs on one control flow, one action at a time.
The only asynchronous step is waiting for the speech recognizer. Its result
is handed to the same synchronous command handler as the buttons use.
"""

from typing import Optional
from uuid import UUID

import structlog

from senseflow.audit import (
    AuditLogger,
    InMemoryAuditTrail,
    configure_logging,
    create_correlation_id,
)
from senseflow.commands import CommandExecutor, CommandParser
from senseflow.config import Settings, SpeechSettings, get_settings
from senseflow.models.account import Account, AccountSnapshot
from senseflow.models.commands import CommandKind, CommandResult, ParsedCommand
from senseflow.services.speech import SpeechRecognitionError, SpeechRecognizerInterface


logger = structlog.get_logger(__name__)

# Shown before the first operation
INITIAL_MESSAGE = "None"


class BankingSession:
    """
    One user's session with one account.

    Flow per action:
    1. Build a command (typed amount or recognized utterance)
    2. Execute it against the account
    3. Audit the outcome
    4. Keep the message for the screen
    """

    def __init__(
        self,
        account: Optional[Account] = None,
        parser: Optional[CommandParser] = None,
        executor: Optional[CommandExecutor] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._account = account or Account()
        self._parser = parser or CommandParser()
        self._executor = executor or CommandExecutor(self._account)
        self._audit_logger = audit_logger
        self._last_message = INITIAL_MESSAGE
        self._last_result: Optional[CommandResult] = None

        if self._executor.account is not self._account:
            raise ValueError("Executor must operate on the session's account")

        if self._audit_logger:
            self._audit_logger.log_account_opened(self._account.snapshot())

    @property
    def account(self) -> Account:
        return self._account

    @property
    def last_message(self) -> str:
        """Message describing the most recent action."""
        return self._last_message

    @property
    def last_result(self) -> Optional[CommandResult]:
        return self._last_result

    def snapshot(self) -> AccountSnapshot:
        return self._account.snapshot()

    def deposit_from_input(
        self,
        text: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Deposit the amount typed in the deposit field.

        Blank or non-numeric input deposits 0.
        """
        command = CommandParser.manual(CommandKind.DEPOSIT, text)
        return self._run(command, correlation_id or create_correlation_id())

    def withdraw_from_input(
        self,
        text: Optional[str],
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Withdraw the amount typed in the withdraw field.

        Declined, with no change, when the balance does not cover it.
        """
        command = CommandParser.manual(CommandKind.WITHDRAW, text)
        return self._run(command, correlation_id or create_correlation_id())

    def handle_voice_command(
        self,
        text: str,
        correlation_id: Optional[UUID] = None,
    ) -> CommandResult:
        """
        Interpret one recognized utterance and apply it.

        Returns:
            The command result. Unrecognized text changes nothing.
        """
        correlation_id = correlation_id or create_correlation_id()
        command = self._parser.parse(text)

        if self._audit_logger:
            self._audit_logger.log_voice_command_received(command, correlation_id)

        return self._run(command, correlation_id)

    def report_error(
        self,
        action: str,
        error: Exception,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Audit an unexpected failure of a screen action."""
        logger.error(
            "session_action_failed",
            action=action,
            error=str(error),
            error_type=type(error).__name__,
        )
        if self._audit_logger:
            self._audit_logger.log_error(
                error_type=type(error).__name__,
                error_message=str(error),
                details={"action": action, "balance": self._account.balance},
                correlation_id=correlation_id,
            )

    def _run(self, command: ParsedCommand, correlation_id: UUID) -> CommandResult:
        result = self._executor.execute(command)

        self._last_result = result
        self._last_message = result.message

        if self._audit_logger:
            self._audit_logger.log_command_result(
                result,
                account_kind=self._account.kind,
                correlation_id=correlation_id,
            )

        return result


class VoiceInputFlow:
    """
    Orchestrates one voice request.

    Flow:
    1. Ask the recognizer for one utterance (awaited once, no cancellation)
    2. Dismissed recognizer → nothing happens
    3. Otherwise → best transcript goes to the session's command handler
    """

    def __init__(
        self,
        session: BankingSession,
        recognizer: SpeechRecognizerInterface,
        speech_settings: Optional[SpeechSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._session = session
        self._recognizer = recognizer
        self._speech_settings = speech_settings or SpeechSettings()
        self._audit_logger = audit_logger

    async def listen(
        self,
        correlation_id: Optional[UUID] = None,
    ) -> Optional[CommandResult]:
        """
        Listen for one voice command and apply it.

        Returns:
            The command result, or None when the recognizer was dismissed

        Raises:
            SpeechRecognitionError: If the recognizer fails
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            recognition = await self._recognizer.recognize(
                prompt=self._speech_settings.prompt,
                language_model=self._speech_settings.language_model,
            )
        except SpeechRecognitionError as e:
            if self._audit_logger:
                self._audit_logger.log_speech_failed(
                    recognizer=e.recognizer,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if not recognition.completed:
            if self._audit_logger:
                self._audit_logger.log_speech_cancelled(correlation_id)
            return None

        return self._session.handle_voice_command(
            recognition.top_transcript,
            correlation_id=correlation_id,
        )


def create_app_components(
    settings: Optional[Settings] = None,
) -> tuple[BankingSession, InMemoryAuditTrail, AuditLogger]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Defaults to get_settings().

    Returns:
        (banking_session, audit_trail, audit_logger)
    """
    settings = settings or get_settings()
    app_settings = settings.app

    configure_logging(
        app_settings.effective_log_level,
        app_settings.effective_log_format,
    )

    audit_trail = InMemoryAuditTrail(max_events=app_settings.audit_trail_size)
    audit_logger = AuditLogger(audit_trail)

    account = Account(app_settings.account_kind)
    session = BankingSession(
        account=account,
        parser=CommandParser(ignore_case=app_settings.command_ignore_case),
        audit_logger=audit_logger,
    )

    logger.info(
        "session_started",
        account_kind=account.kind.value,
        environment=app_settings.app_environment,
    )

    return session, audit_trail, audit_logger
