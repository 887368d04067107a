"""/v1/cards - add, edit and delete cards"""

from fastapi import APIRouter, Depends, Request

from vaultswipe.api.dependencies import get_engine, get_repository, get_request_id
from vaultswipe.api.v1.commands import commit_command, not_found, rejected, require_card
from vaultswipe.api.v1.schemas import AddCardRequest, CardSchema, LedgerResponse, UpdateCardRequest
from vaultswipe.domain.exceptions import UnknownEntityError
from vaultswipe.domain.ledger import LedgerEngine
from vaultswipe.infrastructure.database.repositories import SnapshotRepository

router = APIRouter()


@router.post("/cards", response_model=CardSchema, status_code=201)
def add_card(
    body: AddCardRequest,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    """Create a card; color and due day fall back to configured defaults"""
    request_id = get_request_id(request)
    state = repo.load()
    updated = engine.add_card(
        state,
        body.name,
        color=body.color,
        due_day=body.due_day,
        current_balance=body.current_balance,
    )
    updated = commit_command(repo, request_id, "add_card", state, updated)

    new_id = next(cid for cid in updated.cards if cid not in state.cards)
    return CardSchema.from_domain(updated.cards[new_id])


@router.patch("/cards/{card_id}", response_model=CardSchema)
def update_card(
    card_id: str,
    body: UpdateCardRequest,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    """
    Rename, recolor, change due day or set the statement balance.

    Fields are applied in that order; any rejected field rejects the whole
    request and nothing is stored.
    """
    request_id = get_request_id(request)
    state = repo.load()
    try:
        require_card(state, card_id)
    except UnknownEntityError as e:
        raise not_found(e, request_id, "update_card")

    sent = body.model_fields_set
    updated = state
    steps = [
        ("name", engine.rename_card),
        ("color", engine.recolor_card),
        ("due_day", engine.change_due_day),
        ("current_balance", engine.set_card_current_balance),
    ]
    for field, command in steps:
        if field not in sent:
            continue
        candidate = command(updated, card_id, getattr(body, field))
        if candidate is updated:
            raise rejected(request_id, "update_card", reason=f"invalid {field}")
        updated = candidate

    if updated is state:
        # empty body
        return CardSchema.from_domain(state.cards[card_id])

    updated = commit_command(repo, request_id, "update_card", state, updated)
    return CardSchema.from_domain(updated.cards[card_id])


@router.delete("/cards/{card_id}", response_model=LedgerResponse)
def delete_card(
    card_id: str,
    request: Request,
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    """Delete a card together with its transactions"""
    request_id = get_request_id(request)
    state = repo.load()
    try:
        require_card(state, card_id)
    except UnknownEntityError as e:
        raise not_found(e, request_id, "delete_card")

    updated = commit_command(repo, request_id, "delete_card", state, engine.delete_card(state, card_id))
    return LedgerResponse.from_state(updated)
