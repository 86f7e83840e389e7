"""
Command Execution Engine

DESIGN DECISION: Execution is separate from parsing. The parser decides
WHAT was asked for; this engine applies it to the account and words the
result for the user.

Withdrawals are pre-checked here (balance must cover the amount) because
the ledger itself does not check. Deposits always reach the ledger; credit
account rejections come back as ledger outcomes.
"""

from senseflow.models.account import Account, LastOperation
from senseflow.models.commands import (
    CommandKind,
    CommandResult,
    CommandSource,
    CommandStatus,
    ParsedCommand,
)


NOT_RECOGNIZED_MESSAGE = "Command not recognized"

_DECLINED_MESSAGES = {
    CommandSource.VOICE: "Withdrawal failed: Not enough balance",
    CommandSource.MANUAL: "Withdrawal Failed: Not Enough Balance",
}

_OUTCOME_MESSAGES = {
    CommandSource.VOICE: {
        LastOperation.WITHDRAWAL_SUCCESSFUL: "Withdrawal of ${amount} successful",
        LastOperation.DEPOSIT_SUCCESSFUL: "Deposit of ${amount} successful",
        LastOperation.DEPOSIT_SUCCESSFUL_PAID_OFF: "Deposit of ${amount} successful: Account paid off",
        LastOperation.DEPOSIT_FAILURE_ALREADY_PAID_OFF: "Deposit failed: Account is already paid off",
        LastOperation.DEPOSIT_FAILURE_GREATER_AMOUNT: "Deposit failed: Amount is greater than the balance owed",
    },
    CommandSource.MANUAL: {
        LastOperation.WITHDRAWAL_SUCCESSFUL: "Withdrawal Successful",
        LastOperation.DEPOSIT_SUCCESSFUL: "Deposit Successful",
        LastOperation.DEPOSIT_SUCCESSFUL_PAID_OFF: "Deposit Successful: Account Paid Off",
        LastOperation.DEPOSIT_FAILURE_ALREADY_PAID_OFF: "Deposit Failed: Account Already Paid Off",
        LastOperation.DEPOSIT_FAILURE_GREATER_AMOUNT: "Deposit Failed: Amount Greater Than Balance Owed",
    },
}


class CommandExecutor:
    """
    Executes parsed commands against one account.

    GUARANTEES:
    - Unrecognized commands never touch the account
    - A withdrawal larger than the balance never reaches the ledger
    - Every result carries the balance after the command
    """

    def __init__(self, account: Account):
        self._account = account

    @property
    def account(self) -> Account:
        return self._account

    def execute(self, command: ParsedCommand) -> CommandResult:
        """Execute a command and return the outcome for the user."""
        if not command.is_recognized:
            return self._result(command, CommandStatus.NOT_RECOGNIZED, NOT_RECOGNIZED_MESSAGE)

        if command.kind == CommandKind.WITHDRAW:
            return self._execute_withdraw(command)
        return self._execute_deposit(command)

    def _execute_withdraw(self, command: ParsedCommand) -> CommandResult:
        if not self._account.can_withdraw(command.amount):
            return self._result(
                command,
                CommandStatus.FAILED,
                _DECLINED_MESSAGES[command.source],
            )

        self._account.withdraw(command.amount)
        return self._operation_result(command)

    def _execute_deposit(self, command: ParsedCommand) -> CommandResult:
        self._account.deposit(command.amount)
        return self._operation_result(command)

    def _operation_result(self, command: ParsedCommand) -> CommandResult:
        operation = self._account.last_result
        template = _OUTCOME_MESSAGES[command.source][operation.outcome]
        status = CommandStatus.SUCCEEDED if operation.accepted else CommandStatus.FAILED
        return CommandResult(
            command=command,
            status=status,
            message=template.format(amount=command.amount),
            operation=operation,
            balance=self._account.balance,
        )

    def _result(
        self,
        command: ParsedCommand,
        status: CommandStatus,
        message: str,
    ) -> CommandResult:
        return CommandResult(
            command=command,
            status=status,
            message=message,
            balance=self._account.balance,
        )
