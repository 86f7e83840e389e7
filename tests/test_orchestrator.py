"""Tests for the banking session and voice input flows."""

import asyncio

import pytest

from senseflow.audit import AuditLogger, InMemoryAuditTrail
from senseflow.commands import CommandExecutor, CommandParser
from senseflow.config import SpeechSettings
from senseflow.models.account import Account, AccountKind, LastOperation
from senseflow.models.audit import AuditEventType
from senseflow.models.commands import CommandStatus
from senseflow.orchestrator import INITIAL_MESSAGE, BankingSession, VoiceInputFlow
from senseflow.services.speech import (
    RecognitionResult,
    ScriptedSpeechRecognizer,
    SpeechRecognitionError,
)


@pytest.fixture
def trail():
    return InMemoryAuditTrail(max_events=100)


@pytest.fixture
def audit_logger(trail):
    return AuditLogger(trail)


@pytest.fixture
def session(audit_logger):
    return BankingSession(account=Account(AccountKind.CHECKING), audit_logger=audit_logger)


def listen(session, audit_logger, *utterances):
    recognizer = ScriptedSpeechRecognizer(utterances)
    flow = VoiceInputFlow(
        session=session,
        recognizer=recognizer,
        speech_settings=SpeechSettings(),
        audit_logger=audit_logger,
    )
    return asyncio.run(flow.listen()), recognizer


class TestBankingSession:
    """Tests for the manual entry and voice command flows."""

    def test_opening_is_audited(self, session, trail):
        """Test opening the account is recorded."""
        assert session.last_message == INITIAL_MESSAGE
        assert trail.get_events_by_type(AuditEventType.ACCOUNT_OPENED)

    def test_deposit_and_withdraw_from_input(self, session):
        """Test the amount fields move money."""
        session.deposit_from_input("100")
        assert session.account.balance == 100
        assert session.last_message == "Deposit Successful"

        session.withdraw_from_input("30")
        assert session.account.balance == 70
        assert session.last_message == "Withdrawal Successful"

    @pytest.mark.parametrize("text", ["", "abc", None])
    def test_invalid_input_deposits_zero(self, session, text):
        """Test blank or non-numeric input deposits 0."""
        result = session.deposit_from_input(text)
        assert result.succeeded
        assert result.command.amount == 0
        assert session.account.balance == 0
        assert session.account.last_operation == LastOperation.DEPOSIT_SUCCESSFUL

    def test_withdraw_above_balance_declined(self, session, trail):
        """Test a typed withdrawal the balance cannot cover."""
        session.deposit_from_input("10")
        result = session.withdraw_from_input("11")

        assert result.status == CommandStatus.FAILED
        assert session.account.balance == 10
        assert session.last_message == "Withdrawal Failed: Not Enough Balance"
        assert trail.get_events_by_type(AuditEventType.WITHDRAWAL_DECLINED)

    def test_voice_withdraw(self, session):
        """Test a spoken withdrawal within the balance."""
        session.deposit_from_input("100")
        result = session.handle_voice_command("withdraw 50")

        assert result.succeeded
        assert session.account.balance == 50
        assert session.last_message == "Withdrawal of $50 successful"

    def test_voice_withdraw_too_much(self, session):
        """Test a spoken withdrawal above the balance."""
        session.deposit_from_input("100")
        result = session.handle_voice_command("withdraw 500")

        assert result.status == CommandStatus.FAILED
        assert session.account.balance == 100
        assert session.last_message == "Withdrawal failed: Not enough balance"

    def test_voice_unrecognized(self, session, trail):
        """Test unrecognized speech changes nothing."""
        result = session.handle_voice_command("buy milk")

        assert result.status == CommandStatus.NOT_RECOGNIZED
        assert session.last_message == "Command not recognized"
        assert trail.get_events_by_type(AuditEventType.VOICE_COMMAND_NOT_RECOGNIZED)

    def test_voice_events_share_correlation_id(self, session, trail):
        """Test events of one voice command share a correlation ID."""
        result = session.handle_voice_command("deposit 20")
        events = trail.get_events_by_correlation_id(
            trail.get_recent_events(limit=1)[0].correlation_id
        )

        assert [e.event_type for e in events] == [
            AuditEventType.VOICE_COMMAND_RECEIVED,
            AuditEventType.DEPOSIT_APPLIED,
        ]
        assert events[0].entity_id == result.command.command_id

    def test_failing_subscriber_still_audits_and_reports(self, session, trail):
        """Test a raising account subscriber does not lose the result."""
        def broken(snapshot):
            raise RuntimeError("display gone")

        session.account.subscribe(broken)
        result = session.deposit_from_input("100")

        assert result.succeeded
        assert session.account.balance == 100
        assert session.last_message == "Deposit Successful"
        assert trail.get_events_by_type(AuditEventType.DEPOSIT_APPLIED)

    def test_report_error_writes_system_error(self, session, trail):
        """Test a failed screen action is audited as a system error."""
        session.deposit_from_input("40")
        session.report_error("deposit", RuntimeError("display gone"))

        event = trail.get_events_by_type(AuditEventType.SYSTEM_ERROR)[0]
        assert event.error_message == "display gone"
        assert event.details["error_type"] == "RuntimeError"
        assert event.details["action"] == "deposit"
        assert event.details["balance"] == 40

    def test_report_error_without_audit_logger(self):
        """Test reporting still works when nothing is audited."""
        BankingSession().report_error("withdrawal", ValueError("bad"))

    def test_uses_configured_parser(self):
        """Test the session uses the parser it is given."""
        session = BankingSession(parser=CommandParser(ignore_case=True))
        session.handle_voice_command("DEPOSIT 5")
        assert session.account.balance == 5

    def test_rejects_executor_for_other_account(self):
        """Test the executor must work on the session's account."""
        with pytest.raises(ValueError):
            BankingSession(account=Account(), executor=CommandExecutor(Account()))

    def test_works_without_audit_logger(self):
        """Test a session runs with auditing turned off."""
        session = BankingSession()
        session.handle_voice_command("deposit 3")
        assert session.account.balance == 3


class TestVoiceInputFlow:
    """Tests for one voice request through a recognizer."""

    def test_heard_command_is_applied(self, session, audit_logger):
        """Test a heard command reaches the account."""
        session.deposit_from_input("100")
        result, recognizer = listen(session, audit_logger, "withdraw 50")

        assert result.succeeded
        assert session.account.balance == 50
        assert recognizer.prompts == ["Speak now"]

    def test_top_alternative_is_used(self, session, audit_logger):
        """Test only the best alternative is interpreted."""
        heard = RecognitionResult.heard("deposit 7", "deposit 70")
        result, _ = listen(session, audit_logger, heard)

        assert result.command.amount == 7
        assert session.account.balance == 7

    def test_dismissed_recognizer_does_nothing(self, session, audit_logger, trail):
        """Test a dismissed recognizer leaves the session alone."""
        result, _ = listen(session, audit_logger, None)

        assert result is None
        assert session.last_message == INITIAL_MESSAGE
        assert trail.get_events_by_type(AuditEventType.SPEECH_RECOGNITION_CANCELLED)

    def test_empty_transcripts_not_recognized(self, session, audit_logger):
        """Test a result with no alternatives is not recognized."""
        result, _ = listen(session, audit_logger, RecognitionResult(completed=True))

        assert result.status == CommandStatus.NOT_RECOGNIZED
        assert result.command.raw_text == ""

    def test_recognizer_failure_is_audited_and_raised(self, session, audit_logger, trail):
        """Test recognizer failures are audited then raised."""
        with pytest.raises(SpeechRecognitionError):
            listen(session, audit_logger)

        failures = trail.get_events_by_type(AuditEventType.SPEECH_RECOGNITION_FAILED)
        assert failures[0].details["recognizer"] == "scripted"
        assert session.account.balance == 0
