"""Shared command flow for mutating endpoints

Load snapshot -> apply engine command -> persist when accepted. Rejected
commands leave the stored snapshot untouched.
"""

from fastapi import HTTPException

from vaultswipe.domain.exceptions import UnknownEntityError
from vaultswipe.domain.models import Card, LedgerState, Transaction
from vaultswipe.infrastructure.database.repositories import SnapshotRepository
from vaultswipe.infrastructure.observability.logging import log_command
from vaultswipe.infrastructure.observability.metrics import record_command


def require_card(state: LedgerState, card_id: str) -> Card:
    card = state.cards.get(card_id)
    if card is None:
        raise UnknownEntityError("card", card_id)
    return card


def require_transaction(state: LedgerState, transaction_id: str) -> Transaction:
    txn = state.transactions.get(transaction_id)
    if txn is None:
        raise UnknownEntityError("transaction", transaction_id)
    return txn


def not_found(e: UnknownEntityError, request_id: str, command: str) -> HTTPException:
    record_command(command, accepted=False)
    log_command(request_id, command, accepted=False, reason="not_found", entity_id=e.entity_id)
    return HTTPException(status_code=404, detail=str(e))


def rejected(request_id: str, command: str, reason: str = "validation", status_code: int = 422) -> HTTPException:
    record_command(command, accepted=False)
    log_command(request_id, command, accepted=False, reason=reason)
    return HTTPException(status_code=status_code, detail=f"{command} rejected: {reason}")


def commit_command(
    repo: SnapshotRepository,
    request_id: str,
    command: str,
    before: LedgerState,
    after: LedgerState,
    status_code: int = 422,
    reason: str = "validation",
) -> LedgerState:
    """
    Persist `after` when the engine accepted the command.

    Raises:
        HTTPException: engine returned `before` unchanged (rejected)
    """
    if after is before:
        raise rejected(request_id, command, reason=reason, status_code=status_code)

    try:
        repo.save(after)
        repo.db.commit()
    except Exception:
        repo.db.rollback()
        raise

    record_command(command, accepted=True)
    log_command(request_id, command, accepted=True)
    return after
