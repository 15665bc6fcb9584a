"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or ledger gateway
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LEDGER_URL", "")
