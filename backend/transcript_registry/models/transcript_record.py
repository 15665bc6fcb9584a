"""TranscriptRecord ORM — one row per issued transcript.

Invariants:
    - id is the registry-assigned TranscriptId (no autoincrement): a second insert
      of the same id is an IntegrityError, never a silent overwrite
    - record holds core.registry_snapshot.transcript_to_dict output
    - latest_update is NULL until the first amendment, then overwritten by each one
    - student duplicated out of record so the student index rebuilds with an ordered scan

Design Decisions:
    - Row per transcript over a whole-registry document: each call writes O(1) rows
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from transcript_registry.db.base import Base


class TranscriptRecord(Base):
    """Stored transcript plus its latest amendment."""
    __tablename__ = "transcript_records"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False,
    )
    student: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    record: Mapped[dict] = mapped_column(JSON, nullable=False)
    latest_update: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
