"""GET /v1/ledger and GET /v1/summary - read-only views of the ledger"""

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from vaultswipe.api.dependencies import get_engine, get_repository
from vaultswipe.api.v1.schemas import LedgerResponse, SummaryResponse
from vaultswipe.config import settings
from vaultswipe.domain.aggregation import infer_aggregation_mode
from vaultswipe.domain.ledger import LedgerEngine
from vaultswipe.domain.models import AggregationMode
from vaultswipe.infrastructure.database.repositories import SnapshotRepository
from vaultswipe.infrastructure.observability.metrics import record_summary

router = APIRouter()


@router.get("/ledger", response_model=LedgerResponse)
def get_ledger(repo: SnapshotRepository = Depends(get_repository)):
    """Full stored state: balances, cards and transactions"""
    return LedgerResponse.from_state(repo.load())


@router.get("/summary", response_model=SummaryResponse)
def get_summary(
    mode: Optional[Literal["auto", "pending_sum", "stated_balances"]] = Query(
        None, description="How card exposure is totalled; defaults to the configured mode"
    ),
    engine: LedgerEngine = Depends(get_engine),
    repo: SnapshotRepository = Depends(get_repository),
):
    """
    Pending totals, due dates and the vault shortfall.

    With mode=auto, stated card balances are used as soon as any card has one.
    """
    state = repo.load()

    requested = mode or settings.aggregation_mode
    if requested == "auto":
        aggregation = infer_aggregation_mode(state.cards.values())
    else:
        aggregation = AggregationMode(requested)

    summary = engine.summarize(state, mode=aggregation, due_soon_days=settings.due_soon_days)
    record_summary(summary.total_pending, summary.pending_difference)
    return SummaryResponse.from_domain(summary)
