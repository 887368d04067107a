"""Pending (uncleared) totals per card and across all cards"""

from decimal import Decimal
from typing import Dict, Iterable

from vaultswipe.domain.models import AggregationMode, Card, Transaction
from vaultswipe.utils.money import ZERO


def pending_by_card(cards: Iterable[Card], transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    """
    Sum uncleared transaction amounts per card.

    Every card is present in the result, at zero when it has nothing pending.
    Transactions pointing at an unknown card are ignored.
    """
    totals: Dict[str, Decimal] = {card.id: ZERO for card in cards}

    for txn in transactions:
        if txn.cleared or txn.card_id not in totals:
            continue
        totals[txn.card_id] += txn.amount

    return totals


def total_pending(pending: Dict[str, Decimal]) -> Decimal:
    """Grand total of a pending_by_card mapping"""
    return sum(pending.values(), ZERO)


def total_card_balances(
    cards: Iterable[Card],
    transactions: Iterable[Transaction],
    mode: AggregationMode = AggregationMode.PENDING_SUM,
) -> Decimal:
    """
    Total card exposure.

    PENDING_SUM adds up uncleared purchases. STATED_BALANCES adds up the
    manually entered statement balances; cards without one count as zero.
    """
    cards = list(cards)
    if mode is AggregationMode.STATED_BALANCES:
        return sum((c.current_balance for c in cards if c.current_balance is not None), ZERO)
    return total_pending(pending_by_card(cards, transactions))


def infer_aggregation_mode(cards: Iterable[Card]) -> AggregationMode:
    """STATED_BALANCES as soon as any card carries a statement balance"""
    if any(c.current_balance is not None for c in cards):
        return AggregationMode.STATED_BALANCES
    return AggregationMode.PENDING_SUM


def should_remind(pending_total: Decimal) -> bool:
    """Whether the 'you have pending transfers' reminder applies"""
    return pending_total > 0
