from __future__ import annotations

import logging
from decimal import Decimal
from typing import Iterable, Optional

from ipro.domain.errors import InvalidTransitionError, NotFoundError
from ipro.domain.models import (
    CashflowSummary,
    CashTransaction,
    Direction,
    PaymentMethod,
    TransactionStatus,
)
from ipro.domain.money import ZERO, to_amount
from ipro.domain.validation import validate_transaction
from ipro.repositories.contracts import TransactionRepository

log = logging.getLogger("ipro.cashflow")


def total_by_direction(transactions: Iterable[CashTransaction], direction: Direction) -> Decimal:
    return sum((t.amount for t in transactions if t.direction == direction), ZERO)


def net_cashflow(transactions: Iterable[CashTransaction]) -> Decimal:
    txns = list(transactions)
    return total_by_direction(txns, Direction.INFLOW) - total_by_direction(txns, Direction.OUTFLOW)


def cashflow_sign(net: Decimal) -> str:
    return "positive" if net >= 0 else "negative"


def _signed(t: CashTransaction) -> Decimal:
    return t.amount if t.direction == Direction.INFLOW else -t.amount


def balance_by_payment_method(
    transactions: Iterable[CashTransaction],
    method: PaymentMethod,
    opening_balance: object = 0,
) -> Decimal:
    """Net of the given transactions on one channel, on top of opening_balance.

    Without an opening balance this is only the net movement inside the
    supplied window, not a reconciled ledger balance.
    """
    movement = sum((_signed(t) for t in transactions if t.payment_method == method), ZERO)
    return to_amount(opening_balance) + movement


def balances_by_payment_method(
    transactions: Iterable[CashTransaction],
    opening_balances: Optional[dict[PaymentMethod, object]] = None,
) -> dict[PaymentMethod, Decimal]:
    txns = list(transactions)
    opening_balances = opening_balances or {}
    return {
        method: balance_by_payment_method(txns, method, opening_balances.get(method, 0))
        for method in PaymentMethod
    }


def total_by_payment_method(
    transactions: Iterable[CashTransaction], direction: Direction
) -> dict[PaymentMethod, Decimal]:
    totals = {method: ZERO for method in PaymentMethod}
    for t in transactions:
        if t.direction == direction:
            totals[t.payment_method] += t.amount
    return totals


def total_by_category(
    transactions: Iterable[CashTransaction], direction: Optional[Direction] = None
) -> dict[str, Decimal]:
    # dict keeps first-occurrence order; callers sort if they need a stable display order
    totals: dict[str, Decimal] = {}
    for t in transactions:
        if direction is not None and t.direction != direction:
            continue
        totals[t.category] = totals.get(t.category, ZERO) + t.amount
    return totals


def filter_by_status(
    transactions: Iterable[CashTransaction], *statuses: TransactionStatus
) -> list[CashTransaction]:
    wanted = set(statuses) or {TransactionStatus.COMPLETED}
    return [t for t in transactions if t.status in wanted]


def summarize(
    transactions: Iterable[CashTransaction],
    opening_balances: Optional[dict[PaymentMethod, object]] = None,
) -> CashflowSummary:
    txns = list(transactions)
    inflow = total_by_direction(txns, Direction.INFLOW)
    outflow = total_by_direction(txns, Direction.OUTFLOW)
    return CashflowSummary(
        total_inflow=inflow,
        total_outflow=outflow,
        net=inflow - outflow,
        balances=balances_by_payment_method(txns, opening_balances),
        outflow_by_category=total_by_category(txns, Direction.OUTFLOW),
    )


class CashflowService:
    def __init__(self, repo: TransactionRepository):
        self.repo = repo

    def list_transactions(self) -> list[CashTransaction]:
        return self.repo.list_transactions()

    def record(self, txn: CashTransaction) -> CashTransaction:
        txn = validate_transaction(txn)
        self.repo.add_transaction(txn)
        log.info(
            "transaction_recorded id=%s direction=%s method=%s amount=%s status=%s",
            txn.id, txn.direction.value, txn.payment_method.value, txn.amount, txn.status.value,
        )
        return txn

    def complete(self, txn_id: str) -> CashTransaction:
        txn = self.repo.get_transaction(txn_id)
        if not txn:
            raise NotFoundError("Transaction not found.")
        if txn.status == TransactionStatus.COMPLETED:
            raise InvalidTransitionError(f"Transaction {txn_id} is already completed.")
        done = txn.complete()
        self.repo.replace_transaction(done)
        log.info("transaction_completed id=%s previous=%s", txn_id, txn.status.value)
        return done

    def summary(self, opening_balances: Optional[dict[PaymentMethod, object]] = None) -> CashflowSummary:
        return summarize(self.repo.list_transactions(), opening_balances)
