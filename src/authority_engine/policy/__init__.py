"""
Policy - Learned policies, their lifecycle and overrides

Learning is monotonic: a learned policy can only restrict or maintain
authority. Every policy expires unless a human renews it.
"""

from authority_engine.policy.models import (
    LearnedPolicy,
    LPSLayer,
    OverrideScope,
    PolicyLifecycle,
    PolicyOverride,
    PolicyStatus,
)
from authority_engine.policy.store import LearnedPolicyStore

__all__ = [
    "LearnedPolicy",
    "LearnedPolicyStore",
    "LPSLayer",
    "OverrideScope",
    "PolicyLifecycle",
    "PolicyOverride",
    "PolicyStatus",
]
