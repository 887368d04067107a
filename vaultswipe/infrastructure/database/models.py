"""SQLAlchemy ORM models for the key-value snapshot store"""

from sqlalchemy import Column, DateTime, Text
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class LedgerSnapshot(Base):
    """Whole ledger record stored as one JSON blob under a key"""

    __tablename__ = "ledger_snapshot"

    key = Column(Text, primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
