"""
Account Ledger

Holds the balance of the one account a session works with and applies
deposit/withdraw operations to it under the rules of its kind.

DESIGN DECISION: There is a single Account type. Checking and credit
behaviour is selected through the AccountKind discriminator and the rule
tables below, not through subclasses.

Rules:
- CHECKING: withdraw and deposit always apply. The balance may go negative.
- CREDIT: the balance is money owed (<= 0, where 0 means paid off).
  Withdraw always applies. Deposit is rejected when the account is already
  paid off, or when it would overpay past zero.

CRITICAL: Rejections are reported as LastOperation values, never raised.
The ledger does NOT check for insufficient funds on withdraw. Callers
pre-check with can_withdraw() before they withdraw.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog
from pydantic import BaseModel, ConfigDict, Field


logger = structlog.get_logger(__name__)


# Amounts are bounded to the signed 64-bit range
MAX_AMOUNT = 2**63 - 1


# =============================================================================
# ENUMS
# =============================================================================

class AccountKind(str, Enum):
    """Kind of account. Fixed when the account is opened."""
    CHECKING = "checking"
    CREDIT = "credit"


class LastOperation(str, Enum):
    """
    Outcome of the most recently attempted operation.

    Updated on every attempt, including rejected deposits.
    """
    NONE = "none"
    WITHDRAWAL_SUCCESSFUL = "withdrawal_successful"
    DEPOSIT_SUCCESSFUL = "deposit_successful"
    DEPOSIT_FAILURE_ALREADY_PAID_OFF = "deposit_failure_already_paid_off"
    DEPOSIT_FAILURE_GREATER_AMOUNT = "deposit_failure_greater_amount"
    DEPOSIT_SUCCESSFUL_PAID_OFF = "deposit_successful_paid_off"

    @property
    def is_failure(self) -> bool:
        return self in (
            LastOperation.DEPOSIT_FAILURE_ALREADY_PAID_OFF,
            LastOperation.DEPOSIT_FAILURE_GREATER_AMOUNT,
        )


class OperationType(str, Enum):
    """Ledger operation that was attempted."""
    WITHDRAW = "withdraw"
    DEPOSIT = "deposit"


class InvalidAmountError(ValueError):
    """Amount is not a non-negative 64-bit integer."""

    def __init__(self, amount, message: str):
        self.amount = amount
        super().__init__(message)


# =============================================================================
# SNAPSHOTS AND RESULTS
# =============================================================================

class AccountSnapshot(BaseModel):
    """Immutable view of an account, delivered to subscribers."""
    model_config = ConfigDict(frozen=True)

    account_id: UUID
    kind: AccountKind
    balance: int
    last_operation: LastOperation


class OperationResult(BaseModel):
    """
    Record of one operation attempt.

    applied_amount is 0 when a deposit was rejected.
    """
    model_config = ConfigDict(frozen=True)

    operation_id: UUID = Field(default_factory=uuid4)
    performed_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    operation: OperationType
    requested_amount: int = Field(ge=0, le=MAX_AMOUNT)
    applied_amount: int = Field(ge=0, le=MAX_AMOUNT)
    outcome: LastOperation
    balance_before: int
    balance_after: int

    @property
    def accepted(self) -> bool:
        return not self.outcome.is_failure


# =============================================================================
# PER-KIND RULES
# =============================================================================

# (balance, amount) -> (applied amount, outcome)
Rule = Callable[[int, int], tuple[int, LastOperation]]


def _withdraw_unchecked(balance: int, amount: int) -> tuple[int, LastOperation]:
    return amount, LastOperation.WITHDRAWAL_SUCCESSFUL


def _checking_deposit(balance: int, amount: int) -> tuple[int, LastOperation]:
    return amount, LastOperation.DEPOSIT_SUCCESSFUL


def _credit_deposit(balance: int, amount: int) -> tuple[int, LastOperation]:
    # Order matters: a paid-off account is reported as such even though
    # any positive amount would also overpay.
    if balance == 0:
        return 0, LastOperation.DEPOSIT_FAILURE_ALREADY_PAID_OFF
    if balance + amount > 0:
        return 0, LastOperation.DEPOSIT_FAILURE_GREATER_AMOUNT
    if balance + amount == 0:
        return amount, LastOperation.DEPOSIT_SUCCESSFUL_PAID_OFF
    return amount, LastOperation.DEPOSIT_SUCCESSFUL


# TODO: credit withdrawals are not checked against a credit limit; add one
# once the account carries a limit.
_WITHDRAW_RULES: dict[AccountKind, Rule] = {
    AccountKind.CHECKING: _withdraw_unchecked,
    AccountKind.CREDIT: _withdraw_unchecked,
}

_DEPOSIT_RULES: dict[AccountKind, Rule] = {
    AccountKind.CHECKING: _checking_deposit,
    AccountKind.CREDIT: _credit_deposit,
}


def validate_amount(amount) -> int:
    """
    Check that an amount is a non-negative 64-bit integer.

    Raises:
        InvalidAmountError: If the amount is out of contract
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmountError(
            amount, f"Amount must be an integer, got {type(amount).__name__}"
        )
    if amount < 0:
        raise InvalidAmountError(amount, f"Amount must not be negative: {amount}")
    if amount > MAX_AMOUNT:
        raise InvalidAmountError(amount, f"Amount exceeds {MAX_AMOUNT}: {amount}")
    return amount


# =============================================================================
# ACCOUNT
# =============================================================================

Subscriber = Callable[[AccountSnapshot], None]


class Account:
    """
    A single in-memory account.

    Opened with balance 0 and last_operation NONE. The balance has no
    public setter: withdraw() and deposit() are the only write paths.

    UI layers observe changes through subscribe(), which delivers an
    AccountSnapshot after every operation attempt.
    """

    def __init__(self, kind: AccountKind = AccountKind.CHECKING):
        self._account_id = uuid4()
        self._kind = AccountKind(kind)
        self._balance = 0
        self._last_operation = LastOperation.NONE
        self._last_result: Optional[OperationResult] = None
        self._subscribers: list[Subscriber] = []

    @property
    def account_id(self) -> UUID:
        return self._account_id

    @property
    def kind(self) -> AccountKind:
        return self._kind

    @property
    def balance(self) -> int:
        return self._balance

    @property
    def last_operation(self) -> LastOperation:
        return self._last_operation

    @property
    def last_result(self) -> Optional[OperationResult]:
        """Full record of the most recent attempt, None before the first one."""
        return self._last_result

    def can_withdraw(self, amount: int) -> bool:
        """Pre-check callers run before withdraw(): balance covers amount."""
        return self._balance >= amount

    def withdraw(self, amount: int) -> int:
        """
        Withdraw an amount.

        Returns:
            The amount withdrawn

        Raises:
            InvalidAmountError: If amount is negative or not an integer
        """
        return self._apply(OperationType.WITHDRAW, amount)

    def deposit(self, amount: int) -> int:
        """
        Deposit an amount.

        Returns:
            The amount actually applied (0 if the deposit was rejected)

        Raises:
            InvalidAmountError: If amount is negative or not an integer
        """
        return self._apply(OperationType.DEPOSIT, amount)

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            account_id=self._account_id,
            kind=self._kind,
            balance=self._balance,
            last_operation=self._last_operation,
        )

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """
        Register a callback for account changes.

        A callback that raises is logged and skipped. It never undoes
        the operation or stops the other callbacks.

        Returns:
            A function that removes the subscription
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _apply(self, operation: OperationType, amount: int) -> int:
        amount = validate_amount(amount)

        rules = _WITHDRAW_RULES if operation == OperationType.WITHDRAW else _DEPOSIT_RULES
        applied, outcome = rules[self._kind](self._balance, amount)

        balance_before = self._balance
        if operation == OperationType.WITHDRAW:
            balance_after = balance_before - applied
        else:
            balance_after = balance_before + applied

        self._set_state(balance_after, outcome)
        self._last_result = OperationResult(
            operation=operation,
            requested_amount=amount,
            applied_amount=applied,
            outcome=outcome,
            balance_before=balance_before,
            balance_after=balance_after,
        )
        self._notify()
        return applied

    def _set_state(self, balance: int, outcome: LastOperation) -> None:
        self._balance = balance
        self._last_operation = outcome

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception as e:
                # The operation has already been applied
                logger.error(
                    "account_subscriber_failed",
                    error=str(e),
                    error_type=type(e).__name__,
                    account_id=str(self._account_id),
                )

    def __repr__(self) -> str:
        return (
            f"Account(kind={self._kind.value}, balance={self._balance}, "
            f"last_operation={self._last_operation.value})"
        )
