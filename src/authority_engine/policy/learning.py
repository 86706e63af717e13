"""
Policy Learning - From a confirmed proposal to an immutable learned policy

A learned policy comes into existence only when:
1. The proposal was explicitly CONFIRMED by a human
2. EAPP compliance passes
3. LPS layer boundaries are respected
4. The authority direction is RESTRICT or MAINTAIN

Anything else yields no policy. That is an expected outcome, not an error:
nothing is retried and nothing is partially applied. The validator results
are logged at WARNING so an operator can see why.

Every learned policy is born with a lifecycle: a review date and a hard
expiry, both measured from creation.
"""

from datetime import datetime

from pydantic import BaseModel

from authority_engine.kernel.governance_policy import GovernancePolicy, default_governance_policy
from authority_engine.kernel.ids import IdFactory, default_id_factory
from authority_engine.kernel.logging import get_logger
from authority_engine.kernel.time import days_after
from authority_engine.policy.models import (
    EAPPValidation,
    LearnedPolicy,
    LearnedPolicyConstraint,
    LPSLayer,
    MonotonicityValidation,
    PolicyConstraintType,
    PolicyLifecycle,
    PolicyStatus,
    ValidationResult,
)
from authority_engine.policy.validators import (
    determine_affected_layers,
    validate_eapp_compliance,
    validate_lps_boundaries,
    validate_monotonicity,
)
from authority_engine.staging.models import (
    PolicyChangeProposal,
    ProposalStatus,
    ProposedChangeType,
)

logger = get_logger(__name__)

DEFAULT_LEARNER = "current-user"


class LearningValidation(BaseModel):
    """Results of all three validators for one proposal"""

    eapp: EAPPValidation
    lps: ValidationResult
    monotonicity: MonotonicityValidation

    model_config = {"frozen": True}

    @property
    def passed(self) -> bool:
        return self.eapp.passed and self.lps.valid and self.monotonicity.valid

    @property
    def outcome(self) -> str:
        """First failing validator, in evaluation order, or "learned" """
        if not self.eapp.passed:
            return "rejected_eapp"
        if not self.lps.valid:
            return "rejected_lps"
        if not self.monotonicity.valid:
            return "rejected_monotonicity"
        return "learned"


def validate_proposal(
    proposal: PolicyChangeProposal,
    policy: GovernancePolicy = default_governance_policy,
) -> LearningValidation:
    return LearningValidation(
        eapp=validate_eapp_compliance(proposal, policy.justification_min_length),
        lps=validate_lps_boundaries(proposal),
        monotonicity=validate_monotonicity(proposal),
    )


def create_policy_lifecycle(
    policy_id: str,
    created_at: datetime,
    review_interval_days: int = 90,
    expiry_days: int = 180,
) -> PolicyLifecycle:
    """
    Build the mandatory lifecycle of a new policy

    Raises:
        ValueError: If expiry_days is not positive; a policy without a
            future expiry cannot exist
    """
    if expiry_days <= 0:
        raise ValueError(f"expiry_days must be positive (got {expiry_days})")

    return PolicyLifecycle(
        policy_id=policy_id,
        created_at=created_at,
        last_reviewed_at=None,
        review_interval_days=review_interval_days,
        next_review_date=days_after(created_at, review_interval_days),
        expires_at=days_after(created_at, expiry_days),
        status=PolicyStatus.ACTIVE,
    )


_CONSTRAINTS = {
    ProposedChangeType.AUTHORITY_ADJUSTMENT: (
        PolicyConstraintType.REDUCE_AUTHORITY_LEVEL,
        "Reduced authority for {target}",
        "Authority ceiling lowered for specified action category",
    ),
    ProposedChangeType.ACTION_PERMISSION: (
        PolicyConstraintType.ALWAYS_REQUIRE_APPROVAL,
        "Always require human approval for this action",
        "Action added to approval-required set",
    ),
    ProposedChangeType.ESCALATION_RULE: (
        PolicyConstraintType.NEVER_ALLOW_AUTONOMOUS,
        "Block autonomous execution in this context",
        "Escalation policy enforced for this action category",
    ),
    ProposedChangeType.NONE: (
        PolicyConstraintType.ALWAYS_REQUIRE_APPROVAL,
        "Policy constraint details unavailable",
        "Manual review recommended",
    ),
}


def derive_constraint(proposal: PolicyChangeProposal) -> LearnedPolicyConstraint:
    constraint_type, description, technical_details = _CONSTRAINTS[proposal.proposed_change_type]
    return LearnedPolicyConstraint(
        type=constraint_type,
        description=description.format(target=proposal.target_name),
        technical_details=technical_details,
        affected_scope=f"{proposal.scope.value}: {proposal.target_name}",
    )


def generate_policy_explanation(
    constraint: LearnedPolicyConstraint,
    proposal: PolicyChangeProposal,
    affected_layers: list[LPSLayer],
    validation: LearningValidation,
    primary_layer: LPSLayer = LPSLayer.POLICY,
) -> str:
    """Markdown explanation: what changed, why, impact, layers and validation"""
    lines = [
        "## What Changed",
        constraint.description,
        "",
        f"**Before:** {proposal.before_state.description}",
        f"**After:** {proposal.after_state.description}",
        "",
        "## Why This Was Learned",
        proposal.human_justification,
        "",
        "## What Would Be Different",
        proposal.system_reasoning,
        "",
        "## Affected System Layers",
        f"Primary Layer: {primary_layer.value}",
    ]

    other_layers = [layer.value for layer in affected_layers if layer != primary_layer]
    if other_layers:
        lines.append(f"Additional Layers: {', '.join(other_layers)}")
    lines.append("")

    monotonicity = validation.monotonicity
    lines.extend(
        [
            "## Validation",
            f"✓ EAPP Compliance: {'Passed' if validation.eapp.passed else 'Failed'}",
            f"✓ LPS Boundaries: {'Respected' if validation.lps.valid else 'Violated'}",
            f"✓ Monotonicity: {monotonicity.direction.value if monotonicity.valid else 'Failed'}",
        ]
    )
    return "\n".join(lines)


def derive_learned_policy(
    proposal: PolicyChangeProposal,
    *,
    now: datetime,
    id_factory: IdFactory = default_id_factory,
    policy: GovernancePolicy = default_governance_policy,
    learned_by: str = DEFAULT_LEARNER,
) -> LearnedPolicy | None:
    """
    Materialize a learned policy from a confirmed proposal

    Args:
        proposal: The proposal, which must already be CONFIRMED
        now: Creation time; the lifecycle is measured from here
        policy: Supplies review interval, expiry and justification minimum

    Returns:
        The new LearnedPolicy, or None if the proposal is not confirmed or
        any validator fails
    """
    if proposal.status != ProposalStatus.CONFIRMED:
        logger.warning(
            "Policy learning skipped: proposal not confirmed",
            proposal_id=proposal.proposal_id,
            status=proposal.status.value,
        )
        return None

    validation = validate_proposal(proposal, policy)
    if not validation.passed:
        logger.warning(
            "Policy learning rejected",
            proposal_id=proposal.proposal_id,
            outcome=validation.outcome,
            eapp_violations=validation.eapp.violations,
            lps_violations=validation.lps.violations,
            monotonicity_violations=validation.monotonicity.violations,
        )
        return None

    policy_id = id_factory.generate("learned")
    affected_layers = determine_affected_layers(proposal)
    constraint = derive_constraint(proposal)

    return LearnedPolicy(
        policy_id=policy_id,
        learned_at=now,
        learned_by=learned_by,
        source_approval_intent_id=proposal.source_approval_intent_id,
        source_policy_proposal_id=proposal.proposal_id,
        affected_layers=affected_layers,
        primary_layer=LPSLayer.POLICY,
        constraint=constraint,
        before_state=proposal.before_state,
        after_state=proposal.after_state,
        human_justification=proposal.human_justification,
        system_reasoning=proposal.system_reasoning,
        eapp_validation=validation.eapp,
        lps_validation=validation.lps,
        monotonicity_validation=validation.monotonicity,
        explanation=generate_policy_explanation(
            constraint, proposal, affected_layers, validation
        ),
        lifecycle=create_policy_lifecycle(
            policy_id,
            now,
            review_interval_days=policy.policy_review_interval_days,
            expiry_days=policy.policy_expiry_days,
        ),
    )
