"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from vaultswipe.config import settings
from vaultswipe.domain.ledger import LedgerEngine
from vaultswipe.infrastructure.database.repositories import SnapshotRepository
from vaultswipe.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_engine() -> LedgerEngine:
    """Provide a ledger engine configured from settings"""
    return LedgerEngine(palette=settings.card_palette, default_due_day=settings.default_due_day)


def get_repository(
    db: Session = Depends(get_db),
    engine: LedgerEngine = Depends(get_engine),
) -> SnapshotRepository:
    """Provide the snapshot repository; an empty store starts from demo data when enabled"""
    if not settings.seed_demo_data:
        return SnapshotRepository(db, settings.storage_key)

    repo = SnapshotRepository(db, settings.storage_key, default_factory=engine.seed_state)
    if repo.ensure_stored():
        db.commit()
    return repo
