"""
Policy Lifecycle - Review, renewal and expiry of learned policies

All checks are plain wall-clock comparisons against the injected "now".
Renewal is the only way to extend a policy, and it is refused once the
policy has expired by status or by time: an expired policy needs the full
approval and learning path again.
"""

from datetime import datetime

from authority_engine.kernel.errors import PolicyRenewalForbidden, ReviewIntervalOutOfRange
from authority_engine.kernel.time import days_after
from authority_engine.policy.models import LearnedPolicy, PolicyLifecycle, PolicyStatus

DEFAULT_RENEWAL_MULTIPLIER = 2


def is_expired(lifecycle: PolicyLifecycle, now: datetime) -> bool:
    return now > lifecycle.expires_at


def needs_review(lifecycle: PolicyLifecycle, now: datetime) -> bool:
    return now > lifecycle.next_review_date


def renew_policy(
    policy: LearnedPolicy,
    now: datetime,
    review_interval_days: int | None = None,
    expiry_multiplier: int = DEFAULT_RENEWAL_MULTIPLIER,
) -> LearnedPolicy:
    """
    Start a fresh review period

    Sets last_reviewed_at to now, the next review one interval out and the
    expiry `expiry_multiplier` intervals out, and puts the policy back to
    ACTIVE.

    Args:
        review_interval_days: New interval; keeps the current one if None

    Raises:
        ReviewIntervalOutOfRange: If review_interval_days is given and not positive
        PolicyRenewalForbidden: If the policy is EXPIRED or past its expiry
    """
    if review_interval_days is not None and review_interval_days <= 0:
        raise ReviewIntervalOutOfRange(review_interval_days)

    lifecycle = policy.lifecycle

    if lifecycle.status == PolicyStatus.EXPIRED:
        raise PolicyRenewalForbidden(
            policy.policy_id, "Cannot renew expired policy. Re-approval required."
        )
    if is_expired(lifecycle, now):
        raise PolicyRenewalForbidden(policy.policy_id, "Policy has expired. Re-approval required.")

    interval = (
        lifecycle.review_interval_days if review_interval_days is None else review_interval_days
    )

    renewed = lifecycle.model_copy(
        update={
            "last_reviewed_at": now,
            "review_interval_days": interval,
            "next_review_date": days_after(now, interval),
            "expires_at": days_after(now, interval * expiry_multiplier),
            "status": PolicyStatus.ACTIVE,
        }
    )
    return policy.model_copy(update={"lifecycle": renewed})


def let_policy_expire(policy: LearnedPolicy) -> LearnedPolicy:
    """Force EXPIRED regardless of dates"""
    expired = policy.lifecycle.model_copy(update={"status": PolicyStatus.EXPIRED})
    return policy.model_copy(update={"lifecycle": expired})


def update_policy_status(policy: LearnedPolicy, now: datetime) -> LearnedPolicy:
    """
    Move ACTIVE/UNDER_REVIEW forward by time

    Expiry wins over review. EXPIRED and OVERRIDDEN are left alone. Returns
    the same object when nothing changes.
    """
    lifecycle = policy.lifecycle
    if lifecycle.status in (PolicyStatus.EXPIRED, PolicyStatus.OVERRIDDEN):
        return policy

    status = lifecycle.status
    if is_expired(lifecycle, now):
        status = PolicyStatus.EXPIRED
    elif needs_review(lifecycle, now):
        status = PolicyStatus.UNDER_REVIEW

    if status == lifecycle.status:
        return policy
    return policy.model_copy(update={"lifecycle": lifecycle.model_copy(update={"status": status})})
