"""Ledger engine - commands over immutable ledger snapshots

Every command takes the current LedgerState and returns the next one. A
rejected command (bad input, unknown id, insufficient funds) returns the
snapshot it was given, unchanged and identical, so callers can detect
rejection with an identity check.
"""

import random
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Callable, Optional, Sequence

from vaultswipe.domain.aggregation import (
    pending_by_card,
    should_remind,
    total_card_balances,
    total_pending,
)
from vaultswipe.domain.due_dates import (
    DUE_SOON_DAYS,
    due_label,
    is_due_soon,
    next_due_date,
    sanitize_due_day,
)
from vaultswipe.domain.models import (
    AggregationMode,
    Card,
    CardSummary,
    LedgerState,
    LedgerSummary,
    Transaction,
    TransferDirection,
    TransferOutcome,
)
from vaultswipe.domain.reconciliation import pending_difference, transfer_strict, transfer_unchecked
from vaultswipe.utils.date_utils import parse_iso_date
from vaultswipe.utils.money import parse_amount

DEFAULT_PALETTE = ("#0F766E", "#1D4ED8", "#9333EA", "#B45309", "#065F46")
DEFAULT_DUE_DAY = 1


def generate_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


class LedgerEngine:
    """Command/query surface for cards, transactions and balances"""

    def __init__(
        self,
        palette: Sequence[str] = DEFAULT_PALETTE,
        default_due_day: int = DEFAULT_DUE_DAY,
        id_factory: Callable[[str], str] = generate_id,
        clock: Callable[[], date] = date.today,
        rng: Optional[random.Random] = None,
    ):
        self.palette = tuple(palette) or DEFAULT_PALETTE
        self.default_due_day = sanitize_due_day(default_due_day)
        self.id_factory = id_factory
        self.clock = clock
        self.rng = rng or random.Random()

    def pick_color(self) -> str:
        return self.rng.choice(self.palette)

    # ---------------- Cards ----------------

    def add_card(
        self,
        state: LedgerState,
        name: str,
        color: Optional[str] = None,
        due_day: object = None,
        current_balance: object = None,
    ) -> LedgerState:
        name = (name or "").strip()
        if not name:
            return state

        if due_day is None:
            day = self.default_due_day
        elif parse_amount(due_day) is None:
            return state
        else:
            day = sanitize_due_day(due_day)

        balance = None
        if current_balance is not None:
            balance = parse_amount(current_balance)
            if balance is None:
                return state

        card = Card(
            id=self.id_factory("c"),
            name=name,
            color=(color or "").strip() or self.pick_color(),
            due_day=day,
            current_balance=balance,
        )
        return replace(state, cards={**state.cards, card.id: card})

    def rename_card(self, state: LedgerState, card_id: str, name: str) -> LedgerState:
        name = (name or "").strip()
        if not name:
            return state
        return self._update_card(state, card_id, name=name)

    def recolor_card(self, state: LedgerState, card_id: str, color: str) -> LedgerState:
        color = (color or "").strip()
        if not color:
            return state
        return self._update_card(state, card_id, color=color)

    def change_due_day(self, state: LedgerState, card_id: str, due_day: object) -> LedgerState:
        if parse_amount(due_day) is None:
            return state
        return self._update_card(state, card_id, due_day=sanitize_due_day(due_day))

    def set_card_current_balance(self, state: LedgerState, card_id: str, balance: object) -> LedgerState:
        """Set a statement balance; None clears it"""
        if balance is None:
            return self._update_card(state, card_id, current_balance=None)
        amount = parse_amount(balance)
        if amount is None:
            return state
        return self._update_card(state, card_id, current_balance=amount)

    def delete_card(self, state: LedgerState, card_id: str) -> LedgerState:
        """Remove a card and every transaction recorded against it"""
        if card_id not in state.cards:
            return state
        cards = {cid: c for cid, c in state.cards.items() if cid != card_id}
        transactions = {tid: t for tid, t in state.transactions.items() if t.card_id != card_id}
        return replace(state, cards=cards, transactions=transactions)

    def _update_card(self, state: LedgerState, card_id: str, **changes) -> LedgerState:
        card = state.cards.get(card_id)
        if card is None:
            return state
        return replace(state, cards={**state.cards, card_id: replace(card, **changes)})

    # ---------------- Transactions ----------------

    def add_transaction(
        self,
        state: LedgerState,
        card_id: str,
        amount: object,
        date: object = None,
        merchant: str = "",
        note: str = "",
    ) -> LedgerState:
        if card_id not in state.cards:
            return state

        value = parse_amount(amount)
        if value is None or value <= 0:
            return state

        if date is None or date == "":
            occurred_on = self.clock()
        else:
            occurred_on = parse_iso_date(date)
            if occurred_on is None:
                return state

        txn = Transaction(
            id=self.id_factory("t"),
            card_id=card_id,
            date=occurred_on,
            merchant=(merchant or "").strip(),
            amount=value,
            note=note or "",
        )
        return replace(state, transactions={**state.transactions, txn.id: txn})

    def toggle_cleared(self, state: LedgerState, transaction_id: str) -> LedgerState:
        txn = state.transactions.get(transaction_id)
        if txn is None:
            return state
        return self._put_transaction(state, replace(txn, cleared=not txn.cleared))

    def update_note(self, state: LedgerState, transaction_id: str, note: str) -> LedgerState:
        txn = state.transactions.get(transaction_id)
        if txn is None:
            return state
        return self._put_transaction(state, replace(txn, note=note or ""))

    def _put_transaction(self, state: LedgerState, txn: Transaction) -> LedgerState:
        return replace(state, transactions={**state.transactions, txn.id: txn})

    # ---------------- Balances ----------------

    def set_checking_balance(self, state: LedgerState, amount: object) -> LedgerState:
        value = parse_amount(amount)
        if value is None:
            return state
        return replace(state, checking_balance=value)

    def set_vault_balance(self, state: LedgerState, amount: object) -> LedgerState:
        value = parse_amount(amount)
        if value is None:
            return state
        return replace(state, vault_balance=value)

    def transfer(self, state: LedgerState, direction: TransferDirection, amount: object) -> LedgerState:
        """Strict transfer: rejected when the source balance cannot cover it"""
        return self._transfer(state, direction, amount, transfer_strict)

    def transfer_unchecked(
        self, state: LedgerState, direction: TransferDirection, amount: object
    ) -> LedgerState:
        """Lenient transfer: the source balance may go negative"""
        return self._transfer(state, direction, amount, transfer_unchecked)

    def vault_transaction_amount(self, state: LedgerState, amount: object) -> LedgerState:
        """Move an amount from checking into the vault without a funds check"""
        return self.transfer_unchecked(state, TransferDirection.CHECKING_TO_VAULT, amount)

    def vault_transaction(self, state: LedgerState, transaction_id: str) -> LedgerState:
        txn = state.transactions.get(transaction_id)
        if txn is None:
            return state
        return self.vault_transaction_amount(state, txn.amount)

    def preview_transfer(
        self, state: LedgerState, direction: TransferDirection, amount: object, strict: bool = True
    ) -> TransferOutcome:
        """Outcome a transfer would have, without building a new snapshot"""
        source, target = self._endpoints(state, direction)
        value = parse_amount(amount)
        if value is None:
            return TransferOutcome(applied=False, source=source, target=target, reason="invalid_amount")
        move = transfer_strict if strict else transfer_unchecked
        return move(source, target, value)

    def _transfer(self, state: LedgerState, direction: TransferDirection, amount: object, move) -> LedgerState:
        value = parse_amount(amount)
        if value is None:
            return state

        source, target = self._endpoints(state, direction)
        outcome = move(source, target, value)
        if not outcome.applied:
            return state

        if direction is TransferDirection.CHECKING_TO_VAULT:
            return replace(state, checking_balance=outcome.source, vault_balance=outcome.target)
        return replace(state, vault_balance=outcome.source, checking_balance=outcome.target)

    @staticmethod
    def _endpoints(state: LedgerState, direction: TransferDirection) -> tuple[Decimal, Decimal]:
        if direction is TransferDirection.CHECKING_TO_VAULT:
            return state.checking_balance, state.vault_balance
        return state.vault_balance, state.checking_balance

    # ---------------- Queries ----------------

    def summarize(
        self,
        state: LedgerState,
        mode: AggregationMode = AggregationMode.PENDING_SUM,
        due_soon_days: int = DUE_SOON_DAYS,
    ) -> LedgerSummary:
        """Per-card pending and due information plus ledger-wide totals"""
        today = self.clock()
        cards = list(state.cards.values())
        transactions = list(state.transactions.values())

        pending = pending_by_card(cards, transactions)
        rows = []
        for card in cards:
            due = next_due_date(card.due_day, today)
            days = (due - today).days
            rows.append(
                CardSummary(
                    card=card,
                    pending=pending[card.id],
                    next_due=due,
                    days_until_due=days,
                    due_soon=is_due_soon(days, due_soon_days),
                    due_label=due_label(card.due_day, today),
                )
            )

        pending_total = total_pending(pending)
        exposure = total_card_balances(cards, transactions, mode)

        return LedgerSummary(
            mode=mode,
            cards=rows,
            total_pending=pending_total,
            total_card_balances=exposure,
            pending_difference=pending_difference(exposure, state.vault_balance),
            checking_balance=state.checking_balance,
            vault_balance=state.vault_balance,
            remind=should_remind(pending_total),
        )

    def seed_state(self) -> LedgerState:
        """Starter cards and sample purchases for a first run"""
        state = LedgerState()
        state = self.add_card(state, "Wells Fargo Cash Back", color="#0F766E")
        state = self.add_card(state, "United Mileage Plus", color="#1D4ED8")
        first, second = list(state.cards)

        state = self.add_transaction(state, first, "12.57", date="2025-07-30", merchant="Starbucks")
        state = self.add_transaction(
            state, first, "40.00", date="2025-07-29", merchant="Amazon", note="Waiting for refund"
        )
        state = self.add_transaction(state, second, "18.40", date="2025-07-28", merchant="Lyft")
        return state
