"""Data access layer for ledger snapshots"""

import logging
from typing import Callable, Optional
from sqlalchemy.orm import Session
from vaultswipe.infrastructure.database.models import LedgerSnapshot
from vaultswipe.infrastructure.database.snapshot import decode_state, encode_state
from vaultswipe.domain.exceptions import SnapshotDecodeError
from vaultswipe.domain.models import LedgerState


class SnapshotRepository:
    """Repository for the persisted ledger record, one row per storage key"""

    def __init__(self, db: Session, key: str, default_factory: Callable[[], LedgerState] = LedgerState):
        self.db = db
        self.key = key
        self.default_factory = default_factory

    def _get(self) -> Optional[LedgerSnapshot]:
        return self.db.get(LedgerSnapshot, self.key)

    def load(self) -> LedgerState:
        """
        Load the stored snapshot.

        A missing row yields the default state. A row that cannot be parsed
        at all is logged and also yields the default state.
        """
        row = self._get()
        if row is None:
            return self.default_factory()

        try:
            return decode_state(row.payload)
        except SnapshotDecodeError as e:
            logging.warning(f"Discarding unreadable ledger snapshot: {e}", extra={"storage_key": self.key})
            return self.default_factory()

    def ensure_stored(self) -> bool:
        """
        Write the default state when nothing readable is stored yet.

        Keeps ids from a generated default stable across requests. Returns
        True when a row was written; caller commits.
        """
        row = self._get()
        if row is not None:
            try:
                decode_state(row.payload)
                return False
            except SnapshotDecodeError as e:
                logging.warning(f"Replacing unreadable ledger snapshot: {e}", extra={"storage_key": self.key})

        self.save(self.default_factory())
        return True

    def save(self, state: LedgerState) -> None:
        """Write the whole snapshot; caller commits"""
        self.save_raw(encode_state(state))

    def save_raw(self, payload: str) -> None:
        """Store a payload verbatim, e.g. a record exported from another store"""
        row = self._get()
        if row is None:
            self.db.add(LedgerSnapshot(key=self.key, payload=payload))
        else:
            row.payload = payload
        self.db.flush()
