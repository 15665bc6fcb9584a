"""OperationLog ORM — logging table for mutating registry calls.

Invariants:
    - Every mutating call (success or error) is logged
    - result is NULL on failure; error_code is NULL on success
    - Written in its own commit: a log failure never blocks or undoes registry state

Design Decisions:
    - Logging table, not enforcement: observability only, no business logic depends on it
    - JSON columns for input/output: flexible schema for varied operation signatures
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from transcript_registry.db.base import Base


class OperationLog(Base):
    """OperationLog entry — observability for registry mutations."""
    __tablename__ = "operation_log"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    operation: Mapped[str] = mapped_column(String(50), nullable=False)
    caller: Mapped[str | None] = mapped_column(Text, nullable=True)
    input_data: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    result: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    error_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
