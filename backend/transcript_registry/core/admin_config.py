"""Admin Configuration — fee recipient, issuance fee, and capacity rules.

Invariants:
    - Every configuration change is administrator-only (Unauthorized), checked first
    - Fee recipient can be set only while unset (AlreadyConfigured otherwise)
    - Issuance fee can change only after a recipient exists (NotConfigured otherwise)
    - A fee change affects subsequent issuances only
    - Lowering capacity below the current count blocks further issuance
      but never touches existing transcripts
"""

from transcript_registry.core.access_control import check_administrator
from transcript_registry.core.domain_types import FailureKind, Identity
from transcript_registry.core.errors import error_from_violation
from transcript_registry.core.registry_state import AdminConfig, RegistryState
from transcript_registry.core.violations import violation


# --- Rules --------------------------------------------------------------------

def check_recipient_unset(config: AdminConfig) -> dict | None:
    if config.is_configured:
        return violation(
            FailureKind.ALREADY_CONFIGURED,
            "Fee recipient is already configured.",
        )
    return None


def check_recipient_configured(config: AdminConfig) -> dict | None:
    if not config.is_configured:
        return violation(
            FailureKind.NOT_CONFIGURED,
            "Fee recipient must be configured first.",
        )
    return None


def check_capacity(config: AdminConfig) -> dict | None:
    """Identifier counter must stay below max_transcripts."""
    if config.at_capacity:
        return violation(
            FailureKind.MAX_EXCEEDED,
            f"Transcript limit reached ({config.max_transcripts}).",
            max_transcripts=config.max_transcripts,
        )
    return None


# --- Operations ---------------------------------------------------------------

def set_fee_recipient(
    state: RegistryState, recipient: Identity, caller: Identity,
) -> None:
    error = (
        check_administrator(state.access, caller)
        or check_recipient_unset(state.config)
    )
    if error:
        raise error_from_violation(error)
    state.config.fee_recipient = recipient


def set_issuance_fee(
    state: RegistryState, new_fee: int, caller: Identity,
) -> None:
    error = (
        check_administrator(state.access, caller)
        or check_recipient_configured(state.config)
    )
    if error:
        raise error_from_violation(error)
    state.config.issuance_fee = new_fee


def set_max_transcripts(
    state: RegistryState, new_max: int, caller: Identity,
) -> None:
    error = check_administrator(state.access, caller)
    if error:
        raise error_from_violation(error)
    state.config.max_transcripts = new_max
