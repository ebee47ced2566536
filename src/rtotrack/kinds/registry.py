"""Registry of record kinds and their default expiry windows."""

from rtotrack.exceptions import UnknownRecordKindError
from rtotrack.kinds.base import KindPolicy

_KINDS: dict[str, KindPolicy] = {
    policy.name: policy
    for policy in (
        KindPolicy(
            name="fitness",
            label="Fitness Certificate",
            expiring_soon_days=30,
            refresh_window_days=15,
            term_years=1,
        ),
        KindPolicy(
            name="tax",
            label="Tax",
            expiring_soon_days=30,
            refresh_window_days=15,
        ),
        KindPolicy(
            name="insurance",
            label="Insurance",
            expiring_soon_days=30,
            refresh_window_days=15,
            term_years=1,
        ),
        KindPolicy(
            name="temporary_permit_other_state",
            label="Temporary Permit (Other State)",
            expiring_soon_days=7,
            refresh_window_days=7,
        ),
        KindPolicy(
            name="puc",
            label="PUC Certificate",
            expiring_soon_days=30,
            refresh_window_days=30,
        ),
        KindPolicy(
            name="gps",
            label="GPS Subscription",
            expiring_soon_days=30,
            refresh_window_days=30,
        ),
    )
}


def _normalize(name: str) -> str:
    return name.strip().lower().replace("-", "_").replace(" ", "_")


def get_kind(name: str) -> KindPolicy:
    """Get the policy for a record kind.

    Args:
        name: Kind name, e.g. "fitness" (case-insensitive, dashes allowed)

    Returns:
        Built-in KindPolicy for the kind

    Raises:
        UnknownRecordKindError: If the kind is not registered
    """
    key = _normalize(name)
    if key not in _KINDS:
        raise UnknownRecordKindError(name, list_kinds())
    return _KINDS[key]


def list_kinds() -> list[str]:
    """List registered kind names, sorted."""
    return sorted(_KINDS)
