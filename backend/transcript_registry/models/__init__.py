"""ORM Models — SQLAlchemy declarative models for registry persistence.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all / autogenerate
"""

from transcript_registry.models.registry_settings import RegistrySettings  # noqa: F401
from transcript_registry.models.transcript_record import TranscriptRecord  # noqa: F401
from transcript_registry.models.operation_log import OperationLog  # noqa: F401
