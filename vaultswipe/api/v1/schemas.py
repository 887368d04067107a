"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
import datetime
from decimal import Decimal
from typing import List, Optional

from vaultswipe.domain.models import (
    AggregationMode,
    Card,
    CardSummary,
    LedgerState,
    LedgerSummary,
    Transaction,
    TransferDirection,
)


class AddCardRequest(BaseModel):
    """Request body for POST /v1/cards"""

    name: str = Field(..., description="Card nickname")
    color: Optional[str] = Field(None, description="Accent color; picked from the palette when omitted")
    due_day: Optional[float] = Field(None, description="Day of month the statement is due (1-31)")
    current_balance: Optional[Decimal] = None


class UpdateCardRequest(BaseModel):
    """Request body for PATCH /v1/cards/{card_id}; only fields sent are applied"""

    name: Optional[str] = None
    color: Optional[str] = None
    due_day: Optional[float] = None
    current_balance: Optional[Decimal] = Field(None, description="Statement balance; explicit null clears it")


class AddTransactionRequest(BaseModel):
    """Request body for POST /v1/transactions"""

    card_id: str
    amount: Optional[Decimal] = None
    date: Optional[datetime.date] = Field(None, description="Defaults to today")
    merchant: str = ""
    note: str = ""


class NoteRequest(BaseModel):
    note: str = ""


class BalanceRequest(BaseModel):
    amount: Decimal


class TransferRequest(BaseModel):
    """Request body for POST /v1/transfers"""

    direction: TransferDirection = TransferDirection.CHECKING_TO_VAULT
    amount: Decimal
    strict: bool = Field(True, description="Reject when the source balance cannot cover the amount")


class CardSchema(BaseModel):
    id: str
    name: str
    color: str
    due_day: int
    current_balance: Optional[float] = None

    @classmethod
    def from_domain(cls, card: Card) -> "CardSchema":
        return cls(
            id=card.id,
            name=card.name,
            color=card.color,
            due_day=card.due_day,
            current_balance=None if card.current_balance is None else float(card.current_balance),
        )


class TransactionSchema(BaseModel):
    id: str
    card_id: str
    date: datetime.date
    merchant: str
    amount: float
    note: str
    cleared: bool

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionSchema":
        return cls(
            id=txn.id,
            card_id=txn.card_id,
            date=txn.date,
            merchant=txn.merchant,
            amount=float(txn.amount),
            note=txn.note,
            cleared=txn.cleared,
        )


class BalancesResponse(BaseModel):
    checking_balance: float
    vault_balance: float

    @classmethod
    def from_state(cls, state: LedgerState) -> "BalancesResponse":
        return cls(checking_balance=float(state.checking_balance), vault_balance=float(state.vault_balance))


class LedgerResponse(BaseModel):
    """Response for GET /v1/ledger"""

    checking_balance: float
    vault_balance: float
    cards: List[CardSchema]
    transactions: List[TransactionSchema]

    @classmethod
    def from_state(cls, state: LedgerState) -> "LedgerResponse":
        return cls(
            checking_balance=float(state.checking_balance),
            vault_balance=float(state.vault_balance),
            cards=[CardSchema.from_domain(c) for c in state.cards.values()],
            transactions=[TransactionSchema.from_domain(t) for t in state.transactions.values()],
        )


class CardSummarySchema(BaseModel):
    card: CardSchema
    pending: float
    next_due: datetime.date
    days_until_due: int
    due_soon: bool
    due_label: str

    @classmethod
    def from_domain(cls, row: CardSummary) -> "CardSummarySchema":
        return cls(
            card=CardSchema.from_domain(row.card),
            pending=float(row.pending),
            next_due=row.next_due,
            days_until_due=row.days_until_due,
            due_soon=row.due_soon,
            due_label=row.due_label,
        )


class SummaryResponse(BaseModel):
    """Response for GET /v1/summary"""

    mode: AggregationMode
    cards: List[CardSummarySchema]
    total_pending: float
    total_card_balances: float
    pending_difference: float
    checking_balance: float
    vault_balance: float
    remind: bool

    @classmethod
    def from_domain(cls, summary: LedgerSummary) -> "SummaryResponse":
        return cls(
            mode=summary.mode,
            cards=[CardSummarySchema.from_domain(row) for row in summary.cards],
            total_pending=float(summary.total_pending),
            total_card_balances=float(summary.total_card_balances),
            pending_difference=float(summary.pending_difference),
            checking_balance=float(summary.checking_balance),
            vault_balance=float(summary.vault_balance),
            remind=summary.remind,
        )
