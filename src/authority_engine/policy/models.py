"""
Policy Models - Learned policies, their lifecycle and overrides

A LearnedPolicy is an inert record of a restriction a human taught the
system. It never applies itself. Every policy carries a mandatory lifecycle
with a review date and a hard expiry, so nothing learned lasts forever
without a human looking at it again.

A PolicyOverride is a time-bound shadow over a policy. It holds the target
policy id by value and never edits the policy; whether it is active is
computed from the clock each time it is asked.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from authority_engine.staging.models import PolicyState


class LPSLayer(str, Enum):
    """
    Layers of an agent a change can touch, innermost first

    Only POLICY is freely writable by learning.
    """

    IDENTITY = "IDENTITY"  # Core values, immutable
    MANDATE = "MANDATE"  # Purpose, immutable
    AUTHORITY = "AUTHORITY"  # Restrictive overlays only
    CAPABILITY = "CAPABILITY"  # Conditions may narrow
    POLICY = "POLICY"  # Sole learning surface
    EXECUTION = "EXECUTION"  # Out of scope


class LayerMutability(str, Enum):
    NEVER = "NEVER"
    INDIRECT = "INDIRECT"
    YES = "YES"
    OUT_OF_SCOPE = "OUT_OF_SCOPE"


LPS_MUTABILITY: dict[LPSLayer, LayerMutability] = {
    LPSLayer.IDENTITY: LayerMutability.NEVER,
    LPSLayer.MANDATE: LayerMutability.NEVER,
    LPSLayer.AUTHORITY: LayerMutability.INDIRECT,
    LPSLayer.CAPABILITY: LayerMutability.INDIRECT,
    LPSLayer.POLICY: LayerMutability.YES,
    LPSLayer.EXECUTION: LayerMutability.OUT_OF_SCOPE,
}


class PolicyStatus(str, Enum):
    """
    Lifecycle states of a learned policy

    ACTIVE → UNDER_REVIEW → EXPIRED is driven by time; EXPIRED can also be
    forced by a human. OVERRIDDEN is only ever an effective status computed
    from active overrides.
    """

    ACTIVE = "ACTIVE"
    UNDER_REVIEW = "UNDER_REVIEW"
    EXPIRED = "EXPIRED"
    OVERRIDDEN = "OVERRIDDEN"


class PolicyLifecycle(BaseModel):
    """
    Mandatory review and expiry of a learned policy

    Attributes:
        created_at: When the policy was learned
        last_reviewed_at: Last renewal (None until first renewal)
        review_interval_days: Days between reviews
        next_review_date: When a human must look again
        expires_at: Hard expiry, always after created_at
        status: Stored lifecycle status
    """

    policy_id: str
    created_at: datetime
    last_reviewed_at: datetime | None = None
    review_interval_days: int = Field(ge=1)
    next_review_date: datetime
    expires_at: datetime
    status: PolicyStatus = PolicyStatus.ACTIVE

    model_config = {"frozen": True}


# Validation results


class ValidationCheck(BaseModel):
    passed: bool
    reason: str

    model_config = {"frozen": True}


class EAPPChecks(BaseModel):
    declared_intent: ValidationCheck
    bounded_authority: ValidationCheck
    explainability: ValidationCheck
    drift_prevention: ValidationCheck

    model_config = {"frozen": True}


class EAPPValidation(BaseModel):
    passed: bool
    checks: EAPPChecks
    violations: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class ValidationResult(BaseModel):
    valid: bool
    reason: str
    violations: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class AuthorityDirection(str, Enum):
    EXPAND = "EXPAND"  # Invalid for learned policy
    MAINTAIN = "MAINTAIN"
    RESTRICT = "RESTRICT"


class MonotonicityValidation(BaseModel):
    valid: bool
    direction: AuthorityDirection
    reason: str
    violations: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


# Learned policy


class PolicyConstraintType(str, Enum):
    ALWAYS_REQUIRE_APPROVAL = "ALWAYS_REQUIRE_APPROVAL"
    RESTRICT_TO_DOMAIN = "RESTRICT_TO_DOMAIN"
    NEVER_ALLOW_AUTONOMOUS = "NEVER_ALLOW_AUTONOMOUS"
    REDUCE_AUTHORITY_LEVEL = "REDUCE_AUTHORITY_LEVEL"


class LearnedPolicyConstraint(BaseModel):
    type: PolicyConstraintType
    description: str
    technical_details: str
    affected_scope: str

    model_config = {"frozen": True}


class LearnedPolicy(BaseModel):
    """
    Immutable record of a policy learned from a confirmed proposal

    Holds everything needed to explain it later: the before/after states,
    the human's justification, the system's reasoning and the results of
    all three validators that let it through.
    """

    policy_id: str
    learned_at: datetime
    learned_by: str

    source_approval_intent_id: str
    source_policy_proposal_id: str

    affected_layers: list[LPSLayer]
    primary_layer: LPSLayer = LPSLayer.POLICY

    constraint: LearnedPolicyConstraint

    before_state: PolicyState
    after_state: PolicyState

    human_justification: str
    system_reasoning: str

    eapp_validation: EAPPValidation
    lps_validation: ValidationResult
    monotonicity_validation: MonotonicityValidation

    explanation: str
    lifecycle: PolicyLifecycle

    model_config = {"frozen": True}


# Overrides


class OverrideScope(str, Enum):
    INSTANCE_ONLY = "INSTANCE_ONLY"
    DOMAIN = "DOMAIN"
    ORGANIZATION = "ORGANIZATION"


class PolicyOverride(BaseModel):
    """
    Temporary shadow over a learned policy

    There is no stored "is active" flag: ask `is_active(now)`.
    """

    override_id: str
    target_policy_id: str
    scope: OverrideScope
    reason: str
    created_by: str
    created_at: datetime
    expires_at: datetime

    model_config = {"frozen": True}

    def is_active(self, now: datetime) -> bool:
        return now < self.expires_at
