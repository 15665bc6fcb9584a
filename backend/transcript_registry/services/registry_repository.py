"""SQL Registry Repository — RegistryRepository implemented on the async session manager.

Invariants:
    - State writes happen BEFORE the in-memory commit; a raised write means the
      call failed and nothing became visible
    - An issuance writes its transcript row and the advanced counter in ONE commit
    - The issuance fee moves after the rows flush and before the commit, so a
      rejected write never charges the issuer
    - The operation log is written in its own commit, separate from state rows
    - SQLAlchemy failures surface as DatabaseError (via DatabaseSessionManager)

Design Decisions:
    - Row per transcript + one settings row: each call writes O(1) rows
    - load_snapshot reassembles the core snapshot shape, so restore reuses
      registry_from_snapshot unchanged
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from transcript_registry.core.errors import DatabaseError
from transcript_registry.infrastructure.database import DatabaseSessionManager
from transcript_registry.models.operation_log import OperationLog
from transcript_registry.models.registry_settings import (
    SETTINGS_ROW_ID, RegistrySettings,
)
from transcript_registry.models.transcript_record import TranscriptRecord

logger = logging.getLogger(__name__)


class SqlRegistryRepository:
    """Persists registry settings, transcript rows, and the operation log."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def load_snapshot(self) -> dict | None:
        """Whole registry in snapshot shape, or None for an empty database."""
        async with self._db.session() as session:
            settings = await session.get(RegistrySettings, SETTINGS_ROW_ID)
            result = await session.execute(
                select(TranscriptRecord).order_by(TranscriptRecord.id),
            )
            rows = result.scalars().all()

        if settings is None and not rows:
            return None
        snapshot = {
            "config": settings.config if settings else {},
            "access": settings.access if settings else {},
            "transcripts": {},
            "transcript_updates": {},
            "transcripts_by_student": {},
        }
        # Ordered by id, so each student's list comes back in issuance order
        for row in rows:
            snapshot["transcripts"][str(row.id)] = row.record
            if row.latest_update is not None:
                snapshot["transcript_updates"][str(row.id)] = row.latest_update
            snapshot["transcripts_by_student"].setdefault(row.student, []).append(row.id)
        return snapshot

    async def save_settings(self, settings: dict) -> None:
        async with self._db.session() as session:
            await _put_settings(session, settings)
            await session.commit()

    async def save_issuance(
        self,
        settings: dict,
        transcript: dict,
        before_commit: Callable[[], Awaitable[None]],
    ) -> None:
        """Insert the transcript row and the new counter; run before_commit between flush and commit."""
        async with self._db.session() as session:
            session.add(TranscriptRecord(
                id=transcript["id"],
                student=transcript["student"],
                record=transcript,
            ))
            await _put_settings(session, settings)
            await session.flush()
            await before_commit()
            try:
                await session.commit()
            except SQLAlchemyError:
                logger.critical(
                    "Issuance fee moved but transcript %s was not stored",
                    transcript["id"],
                    extra={
                        "operation": "issue_transcript",
                        "caller": transcript["issuer"],
                        "transcript_id": transcript["id"],
                    },
                )
                raise

    async def save_amendment(self, transcript: dict, update: dict) -> None:
        async with self._db.session() as session:
            row = await session.get(TranscriptRecord, transcript["id"])
            if row is None:
                raise DatabaseError(f"transcript {transcript['id']} has no row", "update")
            row.record = transcript
            row.latest_update = update
            row.updated_at = datetime.now(timezone.utc)
            await session.commit()

    async def record_operation(
        self,
        operation: str,
        caller: str | None,
        input_data: dict,
        result: dict | None,
        error_code: str | None,
    ) -> None:
        async with self._db.session() as session:
            session.add(OperationLog(
                operation=operation,
                caller=caller,
                input_data=input_data,
                result=result,
                error_code=error_code,
            ))
            await session.commit()


async def _put_settings(session: AsyncSession, settings: dict) -> None:
    """Upsert the single settings row by primary key."""
    row = await session.get(RegistrySettings, SETTINGS_ROW_ID)
    if row is None:
        row = RegistrySettings(id=SETTINGS_ROW_ID)
        session.add(row)
    row.config = settings["config"]
    row.access = settings["access"]
    row.updated_at = datetime.now(timezone.utc)
