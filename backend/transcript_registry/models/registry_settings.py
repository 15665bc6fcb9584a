"""RegistrySettings ORM — fee, capacity, counter, and allow-list as one small row.

Invariants:
    - Exactly one row (id = SETTINGS_ROW_ID)
    - config/access hold core.registry_snapshot.settings_to_snapshot sections
    - Written in the same commit as the transcript row an issuance adds, so the
      stored counter never lags the stored transcripts

Design Decisions:
    - JSON columns over one column per field: the sections mirror the core dataclasses
      and stay small, so rewriting the row per call is constant cost
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from transcript_registry.db.base import Base

SETTINGS_ROW_ID = 1


class RegistrySettings(Base):
    """Single-row registry configuration."""
    __tablename__ = "registry_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    config: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    access: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
