"""Balance reconciliation between card exposure, checking and vault"""

from decimal import Decimal

from vaultswipe.domain.models import TransferOutcome
from vaultswipe.utils.money import ZERO, round_cents


def pending_difference(total_card_balances: Decimal, vault_balance: Decimal) -> Decimal:
    """
    Amount still to move into the vault to cover card exposure.

    A vault holding more than is owed reports 0, never a negative figure.
    """
    return max(total_card_balances - vault_balance, ZERO)


def _move(source: Decimal, target: Decimal, amount: Decimal) -> TransferOutcome:
    return TransferOutcome(
        applied=True,
        source=round_cents(source - amount),
        target=round_cents(target + amount),
    )


def transfer_strict(source: Decimal, target: Decimal, amount: Decimal) -> TransferOutcome:
    """
    Move `amount` from source to target only if source can cover it.

    Rejections leave both balances as given.
    """
    if amount <= 0:
        return TransferOutcome(applied=False, source=source, target=target, reason="invalid_amount")
    if source < amount:
        return TransferOutcome(applied=False, source=source, target=target, reason="insufficient_funds")
    return _move(source, target, amount)


def transfer_unchecked(source: Decimal, target: Decimal, amount: Decimal) -> TransferOutcome:
    """Move `amount` regardless of funds; source may go negative"""
    if amount <= 0:
        return TransferOutcome(applied=False, source=source, target=target, reason="invalid_amount")
    return _move(source, target, amount)
