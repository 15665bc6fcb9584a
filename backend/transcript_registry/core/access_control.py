"""Access Control — issuer allow-list, update ownership, and administrator capability.

Invariants:
    - check_* functions are PURE: return violation dict or None
    - Identity comparison is exact string equality (case-sensitive)
    - Only the administrator may change the allow-list
    - Removing an issuer never rewrites Transcript.issuer on existing records

Design Decisions:
    - Explicit identity set over role types: "who may issue" is data, not dispatch
    - add_issuer / remove_issuer are idempotent: re-adding or removing an absent
      identity succeeds without change (ADR: admin retries are safe)
"""

from transcript_registry.core.domain_types import FailureKind, Identity
from transcript_registry.core.errors import error_from_violation
from transcript_registry.core.records import Transcript
from transcript_registry.core.registry_state import AccessList, RegistryState
from transcript_registry.core.violations import violation


def check_issuer_authorized(access: AccessList, caller: Identity) -> dict | None:
    """Caller must be on the issuer allow-list."""
    if caller not in access.issuers:
        return violation(
            FailureKind.UNAUTHORIZED_ISSUER,
            f"'{caller}' is not an authorized issuer.",
            caller=caller,
        )
    return None


def check_update_ownership(transcript: Transcript, caller: Identity) -> dict | None:
    """Only the original issuer may amend a transcript."""
    if transcript.issuer != caller:
        return violation(
            FailureKind.UNAUTHORIZED,
            f"Only the issuing identity may update transcript {transcript.id}.",
        )
    return None


def check_administrator(access: AccessList, caller: Identity) -> dict | None:
    if access.administrator is None or caller != access.administrator:
        return violation(
            FailureKind.UNAUTHORIZED,
            "Operation requires the registry administrator.",
        )
    return None


def add_issuer(state: RegistryState, issuer: Identity, caller: Identity) -> None:
    """Grant issuer rights. Administrator only."""
    error = check_administrator(state.access, caller)
    if error:
        raise error_from_violation(error)
    state.access.issuers.add(issuer)


def remove_issuer(state: RegistryState, issuer: Identity, caller: Identity) -> None:
    """Revoke issuer rights for future issuance. Administrator only."""
    error = check_administrator(state.access, caller)
    if error:
        raise error_from_violation(error)
    state.access.issuers.discard(issuer)
