"""
Policy Overrides - Time-bound shadows over learned policies

An override never touches the policy it targets. It only changes what
`get_active_policy_status` reports while it is active, and activity is
recomputed from the clock on every call, so an override lapses on its own.
"""

from collections.abc import Iterable
from datetime import datetime

from authority_engine.kernel.errors import OverrideExpiryOutOfRange, OverrideReasonTooShort
from authority_engine.kernel.governance_policy import GovernancePolicy, default_governance_policy
from authority_engine.kernel.ids import IdFactory, default_id_factory
from authority_engine.kernel.time import days_after
from authority_engine.policy.models import OverrideScope, PolicyOverride, PolicyStatus

DEFAULT_CREATOR = "current-user"


def create_policy_override(
    target_policy_id: str,
    scope: OverrideScope,
    reason: str,
    expiry_days: int,
    *,
    now: datetime,
    created_by: str = DEFAULT_CREATOR,
    id_factory: IdFactory = default_id_factory,
    policy: GovernancePolicy = default_governance_policy,
) -> PolicyOverride:
    """
    Create a shadow over a learned policy

    Args:
        reason: Written reason, trimmed; at least
            `policy.override_reason_min_length` characters
        expiry_days: Lifetime in days, 0 < expiry_days <= `policy.override_max_days`

    Raises:
        OverrideReasonTooShort: If the trimmed reason is too short
        OverrideExpiryOutOfRange: If expiry_days is not positive or too long
    """
    trimmed = (reason or "").strip()
    if len(trimmed) < policy.override_reason_min_length:
        raise OverrideReasonTooShort(len(trimmed), policy.override_reason_min_length)

    if expiry_days <= 0 or expiry_days > policy.override_max_days:
        raise OverrideExpiryOutOfRange(expiry_days, policy.override_max_days)

    return PolicyOverride(
        override_id=id_factory.generate("override"),
        target_policy_id=target_policy_id,
        scope=scope,
        reason=trimmed,
        created_by=created_by,
        created_at=now,
        expires_at=days_after(now, expiry_days),
    )


def is_override_active(override: PolicyOverride, now: datetime) -> bool:
    return override.is_active(now)


def get_active_policy_status(
    policy_status: PolicyStatus,
    overrides: Iterable[PolicyOverride],
    now: datetime,
) -> PolicyStatus:
    """OVERRIDDEN while any given override is active, else the policy's own status"""
    if any(is_override_active(override, now) for override in overrides):
        return PolicyStatus.OVERRIDDEN
    return policy_status


def get_active_overrides_for_policy(
    policy_id: str,
    overrides: Iterable[PolicyOverride],
    now: datetime,
) -> list[PolicyOverride]:
    return [
        override
        for override in overrides
        if override.target_policy_id == policy_id and is_override_active(override, now)
    ]


def get_expired_overrides(
    overrides: Iterable[PolicyOverride], now: datetime
) -> list[PolicyOverride]:
    return [override for override in overrides if not is_override_active(override, now)]
