"""JSON codec for the persisted ledger record

Record shape:
    {"checkingBalance": "0", "vaultBalance": "0", "cards": [...], "transactions": [...]}

Decoding is tolerant one top-level field at a time: a missing or malformed
field falls back to its default without discarding the others, and a
malformed card or transaction entry is skipped on its own.

Amounts are written as decimal strings so they reload exactly; plain JSON
numbers are accepted on load.
"""

import json
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from vaultswipe.domain.due_dates import sanitize_due_day
from vaultswipe.domain.exceptions import SnapshotDecodeError
from vaultswipe.domain.models import Card, LedgerState, Transaction
from vaultswipe.utils.date_utils import parse_iso_date
from vaultswipe.utils.money import ZERO, parse_amount

LEGACY_TRANSACTIONS_KEY = "txns"


class CardRecord(BaseModel):
    """Persisted card"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    color: str = ""
    due_day: int = Field(1, alias="dueDay")
    current_balance: Optional[Decimal] = Field(None, alias="currentBalance")

    @field_validator("due_day", mode="before")
    @classmethod
    def _sanitize_due_day(cls, v: Any) -> int:
        return sanitize_due_day(v)

    @field_validator("color", mode="before")
    @classmethod
    def _color_or_empty(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("current_balance", mode="before")
    @classmethod
    def _finite_balance(cls, v: Any) -> Optional[Decimal]:
        return parse_amount(v)

    @field_serializer("current_balance")
    def _balance_as_text(self, v: Optional[Decimal]) -> Optional[str]:
        return None if v is None else str(v)

    @classmethod
    def from_domain(cls, card: Card) -> "CardRecord":
        return cls(
            id=card.id,
            name=card.name,
            color=card.color,
            due_day=card.due_day,
            current_balance=card.current_balance,
        )

    def to_domain(self) -> Card:
        return Card(
            id=self.id,
            name=self.name,
            color=self.color,
            due_day=self.due_day,
            current_balance=self.current_balance,
        )


class TransactionRecord(BaseModel):
    """Persisted transaction"""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    card_id: str = Field(..., alias="cardId", min_length=1)
    date: date
    merchant: str = ""
    amount: Decimal
    note: str = ""
    cleared: bool = False

    @field_validator("date", mode="before")
    @classmethod
    def _iso_date(cls, v: Any) -> date:
        parsed = parse_iso_date(v)
        if parsed is None:
            raise ValueError("date must be YYYY-MM-DD")
        return parsed

    @field_validator("amount", mode="before")
    @classmethod
    def _finite_amount(cls, v: Any) -> Decimal:
        parsed = parse_amount(v)
        if parsed is None:
            raise ValueError("amount must be a finite number")
        return parsed

    @field_validator("merchant", "note", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> str:
        return "" if v is None else v

    @field_validator("cleared", mode="before")
    @classmethod
    def _cleared_or_pending(cls, v: Any) -> bool:
        return False if v is None else v

    @field_serializer("amount")
    def _amount_as_text(self, v: Decimal) -> str:
        return str(v)

    @field_serializer("date")
    def _date_as_iso(self, v: date) -> str:
        return v.isoformat()

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionRecord":
        return cls(
            id=txn.id,
            card_id=txn.card_id,
            date=txn.date,
            merchant=txn.merchant,
            amount=txn.amount,
            note=txn.note,
            cleared=txn.cleared,
        )

    def to_domain(self) -> Transaction:
        return Transaction(
            id=self.id,
            card_id=self.card_id,
            date=self.date,
            merchant=self.merchant,
            amount=self.amount,
            note=self.note,
            cleared=self.cleared,
        )


def encode_state(state: LedgerState) -> str:
    """Serialize a snapshot to the persisted JSON record"""
    record = {
        "checkingBalance": str(state.checking_balance),
        "vaultBalance": str(state.vault_balance),
        "cards": [CardRecord.from_domain(c).model_dump(by_alias=True) for c in state.cards.values()],
        "transactions": [
            TransactionRecord.from_domain(t).model_dump(by_alias=True) for t in state.transactions.values()
        ],
    }
    return json.dumps(record)


def _decode_balance(record: Dict[str, Any], key: str) -> Decimal:
    value = parse_amount(record.get(key))
    if value is None:
        if key in record:
            logging.warning(f"Ignoring malformed {key} in ledger snapshot")
        return ZERO
    return value


def _decode_entries(record: Dict[str, Any], key: str, model) -> List:
    raw = record.get(key)
    if not isinstance(raw, list):
        if raw is not None:
            logging.warning(f"Ignoring malformed {key} in ledger snapshot")
        return []

    entries = []
    for item in raw:
        try:
            entries.append(model.model_validate(item).to_domain())
        except ValidationError as e:
            logging.warning(f"Skipping malformed {key} entry: {e.error_count()} error(s)")
    return entries


def decode_state(payload: str | bytes) -> LedgerState:
    """
    Parse a persisted record into a snapshot.

    Raises:
        SnapshotDecodeError: payload is not a JSON object at all
    """
    try:
        record = json.loads(payload)
    except (TypeError, ValueError, RecursionError) as e:
        raise SnapshotDecodeError(f"Ledger snapshot is not valid JSON: {e}") from e
    if not isinstance(record, dict):
        raise SnapshotDecodeError(f"Ledger snapshot must be an object, got {type(record).__name__}")

    if "transactions" not in record and LEGACY_TRANSACTIONS_KEY in record:
        record["transactions"] = record[LEGACY_TRANSACTIONS_KEY]

    cards = _decode_entries(record, "cards", CardRecord)
    transactions = _decode_entries(record, "transactions", TransactionRecord)

    return LedgerState(
        checking_balance=_decode_balance(record, "checkingBalance"),
        vault_balance=_decode_balance(record, "vaultBalance"),
        cards={c.id: c for c in cards},
        transactions={t.id: t for t in transactions},
    )
