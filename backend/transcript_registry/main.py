"""Transcript Registry API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RegistryError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Registry state restored from the DB snapshot (or seeded from settings) exactly once, on startup

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Ledger chosen by settings: ledger_url → HttpLedgerClient, otherwise InMemoryLedger
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from transcript_registry.api.error_handlers import register_error_handlers
from transcript_registry.api.routes import admin, health, students, transcripts
from transcript_registry.config import Settings, get_settings
from transcript_registry.infrastructure.database import init_db
from transcript_registry.infrastructure.ledger_client import (
    HttpLedgerClient, InMemoryLedger,
)
from transcript_registry.infrastructure.observability import setup_logging
from transcript_registry.services.registry_repository import SqlRegistryRepository
from transcript_registry.services.registry_service import (
    RegistryService, init_registry, seed_registry_state,
)

logger = logging.getLogger(__name__)


def _build_ledger(settings: Settings) -> HttpLedgerClient | InMemoryLedger:
    if settings.ledger_url:
        return HttpLedgerClient(
            settings.ledger_url, timeout_seconds=settings.ledger_timeout_seconds,
        )
    logger.warning("LEDGER_URL not set — using in-memory ledger")
    return InMemoryLedger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    repository = SqlRegistryRepository(db)
    snapshot = await repository.load_snapshot()
    state = seed_registry_state(
        snapshot,
        administrator=settings.registry_admin,
        issuers=settings.registry_issuers,
        fee_recipient=settings.registry_fee_recipient,
        issuance_fee=settings.registry_issuance_fee,
        max_transcripts=settings.registry_max_transcripts,
    )
    ledger = _build_ledger(settings)
    init_registry(RegistryService(state, ledger, ledger, repository))
    logger.info(
        "Transcript Registry API started (%s, %d transcripts)",
        "restored" if snapshot else "fresh", state.transcript_count,
    )
    if state.access.administrator is None:
        logger.warning("No registry administrator set: configuration is locked")
    elif not state.config.is_configured:
        logger.warning(
            "Fee recipient unset: issuance blocked until %s configures it",
            state.access.administrator,
        )
    yield
    if isinstance(ledger, HttpLedgerClient):
        await ledger.close()
    await db.dispose()
    logger.info("Transcript Registry API shutting down")


app = FastAPI(
    title="Transcript Registry API", version="1.0.0", lifespan=lifespan,
)

# CORS — configured from settings, not hardcoded
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(admin.router)
app.include_router(transcripts.router)
app.include_router(students.router)

register_error_handlers(app)
