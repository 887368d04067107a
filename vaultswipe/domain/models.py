"""Domain models - immutable dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import List, Mapping, Optional

from vaultswipe.utils.money import ZERO


class AggregationMode(str, Enum):
    """How card exposure is totalled"""

    PENDING_SUM = "pending_sum"  # sum of uncleared transactions
    STATED_BALANCES = "stated_balances"  # sum of manually entered statement balances


class TransferDirection(str, Enum):
    """Which balance funds a transfer"""

    CHECKING_TO_VAULT = "checking_to_vault"
    VAULT_TO_CHECKING = "vault_to_checking"

    def reversed(self) -> "TransferDirection":
        if self is TransferDirection.CHECKING_TO_VAULT:
            return TransferDirection.VAULT_TO_CHECKING
        return TransferDirection.CHECKING_TO_VAULT


@dataclass(frozen=True)
class Card:
    """Credit card tracked by the user"""

    id: str
    name: str
    color: str
    due_day: int  # 1..31, independent of month length
    current_balance: Optional[Decimal] = None  # statement balance, manual


@dataclass(frozen=True)
class Transaction:
    """Purchase recorded manually against a card"""

    id: str
    card_id: str
    date: date
    merchant: str
    amount: Decimal
    note: str = ""
    cleared: bool = False


def _freeze(entries: Mapping) -> Mapping:
    return MappingProxyType(dict(entries))


@dataclass(frozen=True)
class LedgerState:
    """
    Complete snapshot of the ledger.

    Cards and transactions are keyed by id in insertion order. Snapshots are
    never mutated: every command builds a new one.
    """

    checking_balance: Decimal = ZERO
    vault_balance: Decimal = ZERO
    cards: Mapping[str, Card] = field(default_factory=dict)
    transactions: Mapping[str, Transaction] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "cards", _freeze(self.cards))
        object.__setattr__(self, "transactions", _freeze(self.transactions))


@dataclass(frozen=True)
class TransferOutcome:
    """Result of moving money between two balances"""

    applied: bool
    source: Decimal
    target: Decimal
    reason: Optional[str] = None  # "invalid_amount" | "insufficient_funds"


@dataclass(frozen=True)
class CardSummary:
    """Per-card figures shown next to each card"""

    card: Card
    pending: Decimal
    next_due: date
    days_until_due: int
    due_soon: bool
    due_label: str


@dataclass(frozen=True)
class LedgerSummary:
    """Derived totals for the whole ledger"""

    mode: AggregationMode
    cards: List[CardSummary]
    total_pending: Decimal
    total_card_balances: Decimal
    pending_difference: Decimal
    checking_balance: Decimal
    vault_balance: Decimal
    remind: bool
