"""/v1/balances and /v1/transfers - checking and vault balances"""

from fastapi import APIRouter, Depends, Request

from vaultswipe.api.dependencies import get_engine, get_repository, get_request_id
from vaultswipe.api.v1.commands import commit_command, rejected
from vaultswipe.api.v1.schemas import BalanceRequest, BalancesResponse, TransferRequest
from vaultswipe.domain.ledger import LedgerEngine
from vaultswipe.infrastructure.database.repositories import SnapshotRepository
from vaultswipe.infrastructure.observability.logging import log_transfer
from vaultswipe.infrastructure.observability.metrics import record_transfer
from vaultswipe.utils.money import format_amount

router = APIRouter()


@router.put("/balances/checking", response_model=BalancesResponse)
def set_checking_balance(
    body: BalanceRequest,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    request_id = get_request_id(request)
    state = repo.load()
    updated = commit_command(
        repo, request_id, "set_checking_balance", state, engine.set_checking_balance(state, body.amount)
    )
    return BalancesResponse.from_state(updated)


@router.put("/balances/vault", response_model=BalancesResponse)
def set_vault_balance(
    body: BalanceRequest,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    request_id = get_request_id(request)
    state = repo.load()
    updated = commit_command(
        repo, request_id, "set_vault_balance", state, engine.set_vault_balance(state, body.amount)
    )
    return BalancesResponse.from_state(updated)


@router.post("/transfers", response_model=BalancesResponse)
def transfer(
    body: TransferRequest,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    """
    Move money between checking and the vault.

    Strict transfers (the default) answer 409 when the source balance is
    short; balances are left untouched in that case.
    """
    request_id = get_request_id(request)
    variant = "strict" if body.strict else "unchecked"
    state = repo.load()

    outcome = engine.preview_transfer(state, body.direction, body.amount, strict=body.strict)
    record_transfer(variant, outcome.applied, outcome.reason)
    log_transfer(
        request_id,
        variant=variant,
        direction=body.direction.value,
        amount=format_amount(body.amount),
        applied=outcome.applied,
        reason=outcome.reason,
    )
    if not outcome.applied:
        status_code = 409 if outcome.reason == "insufficient_funds" else 422
        raise rejected(request_id, "transfer", reason=outcome.reason, status_code=status_code)

    if body.strict:
        updated = engine.transfer(state, body.direction, body.amount)
    else:
        updated = engine.transfer_unchecked(state, body.direction, body.amount)
    updated = commit_command(repo, request_id, "transfer", state, updated)
    return BalancesResponse.from_state(updated)
