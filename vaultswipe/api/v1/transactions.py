"""/v1/transactions - record purchases, clear them, annotate them"""

from fastapi import APIRouter, Depends, Request

from vaultswipe.api.dependencies import get_engine, get_repository, get_request_id
from vaultswipe.api.v1.commands import commit_command, not_found, require_card, require_transaction
from vaultswipe.api.v1.schemas import AddTransactionRequest, BalancesResponse, NoteRequest, TransactionSchema
from vaultswipe.domain.exceptions import UnknownEntityError
from vaultswipe.domain.ledger import LedgerEngine
from vaultswipe.infrastructure.database.repositories import SnapshotRepository
from vaultswipe.infrastructure.observability.logging import log_transfer
from vaultswipe.infrastructure.observability.metrics import record_transfer
from vaultswipe.utils.money import format_amount

router = APIRouter()


@router.post("/transactions", response_model=TransactionSchema, status_code=201)
def add_transaction(
    body: AddTransactionRequest,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    """Record an uncleared purchase; date defaults to today"""
    request_id = get_request_id(request)
    state = repo.load()
    try:
        require_card(state, body.card_id)
    except UnknownEntityError as e:
        raise not_found(e, request_id, "add_transaction")

    updated = engine.add_transaction(
        state,
        body.card_id,
        body.amount,
        date=body.date,
        merchant=body.merchant,
        note=body.note,
    )
    updated = commit_command(repo, request_id, "add_transaction", state, updated, reason="amount must be positive")

    new_id = next(tid for tid in updated.transactions if tid not in state.transactions)
    return TransactionSchema.from_domain(updated.transactions[new_id])


@router.post("/transactions/{transaction_id}/toggle", response_model=TransactionSchema)
def toggle_cleared(
    transaction_id: str,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    """Flip a transaction between pending and cleared"""
    request_id = get_request_id(request)
    state = repo.load()
    try:
        require_transaction(state, transaction_id)
    except UnknownEntityError as e:
        raise not_found(e, request_id, "toggle_cleared")

    updated = commit_command(
        repo, request_id, "toggle_cleared", state, engine.toggle_cleared(state, transaction_id)
    )
    return TransactionSchema.from_domain(updated.transactions[transaction_id])


@router.put("/transactions/{transaction_id}/note", response_model=TransactionSchema)
def update_note(
    transaction_id: str,
    body: NoteRequest,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    request_id = get_request_id(request)
    state = repo.load()
    try:
        require_transaction(state, transaction_id)
    except UnknownEntityError as e:
        raise not_found(e, request_id, "update_note")

    updated = commit_command(
        repo, request_id, "update_note", state, engine.update_note(state, transaction_id, body.note)
    )
    return TransactionSchema.from_domain(updated.transactions[transaction_id])


@router.post("/transactions/{transaction_id}/vault", response_model=BalancesResponse)
def vault_transaction(
    transaction_id: str,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    """
    Move this purchase's amount from checking into the vault.

    No funds check: checking may go negative.
    """
    request_id = get_request_id(request)
    state = repo.load()
    try:
        txn = require_transaction(state, transaction_id)
    except UnknownEntityError as e:
        raise not_found(e, request_id, "vault_transaction")

    updated = engine.vault_transaction(state, transaction_id)
    applied = updated is not state
    record_transfer("unchecked", applied, None if applied else "invalid_amount")
    log_transfer(
        request_id,
        variant="unchecked",
        direction="checking_to_vault",
        amount=format_amount(txn.amount),
        applied=applied,
        reason=None if applied else "invalid_amount",
    )

    updated = commit_command(repo, request_id, "vault_transaction", state, updated, reason="invalid_amount")
    return BalancesResponse.from_state(updated)
