"""Route Dependencies — caller identity and registry service injection.

Invariants:
    - Caller identity arrives already resolved upstream in X-Caller-Identity
    - A missing header is a request validation error (400), never an anonymous caller

Design Decisions:
    - Header over auth scheme: authentication is an external collaborator; the
      registry only needs the resolved identity string
"""

from fastapi import Header

import transcript_registry.services.registry_service as registry_module
from transcript_registry.core.domain_types import Identity
from transcript_registry.services.registry_service import RegistryService


async def get_caller(
    x_caller_identity: str = Header(..., min_length=1),
) -> Identity:
    return Identity(x_caller_identity)


def get_registry_service() -> RegistryService:
    """FastAPI dependency for the process-wide registry service."""
    if not registry_module.registry_service:
        raise RuntimeError("Registry not initialized")
    return registry_module.registry_service
