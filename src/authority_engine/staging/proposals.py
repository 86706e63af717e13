"""
Policy Change Proposals - What an approval would imply for future policy

A proposal only describes a change. Confirming it hands it to policy
learning, which may or may not produce a learned policy; nothing is ever
applied to the hierarchy or to authority derivation.
"""

from datetime import datetime

from authority_engine.authority.models import (
    Confidence,
    ExecutionReadiness,
    ReadinessState,
    RuntimeVerdict,
)
from authority_engine.kernel.governance_policy import GovernancePolicy, default_governance_policy
from authority_engine.kernel.ids import IdFactory, default_id_factory
from authority_engine.kernel.logging import get_logger
from authority_engine.policy.learning import DEFAULT_LEARNER, derive_learned_policy
from authority_engine.policy.store import LearnedPolicyStore
from authority_engine.staging.invariants import require_proposed
from authority_engine.staging.models import (
    ApprovalIntent,
    ApprovalScope,
    PolicyChangeProposal,
    PolicyState,
    ProposalScope,
    ProposalStatus,
    ProposedChangeType,
)

logger = get_logger(__name__)


def analyze_required_change(
    readiness: ExecutionReadiness, verdict: RuntimeVerdict
) -> ProposedChangeType:
    """
    Classify which kind of policy change would have let the action run

    Checked in order; the first match wins.
    """
    state = readiness.state
    gates = readiness.gates

    if state == ReadinessState.ELIGIBLE_AUTOMATIC:
        return ProposedChangeType.NONE
    if state == ReadinessState.NOT_ELIGIBLE and not gates.authority_alignment.passed:
        return ProposedChangeType.AUTHORITY_ADJUSTMENT
    if state == ReadinessState.ELIGIBLE_PENDING_APPROVAL:
        return ProposedChangeType.ACTION_PERMISSION
    if state == ReadinessState.BLOCKED_HARD and not gates.escalation_resolution.passed:
        return ProposedChangeType.ESCALATION_RULE
    if verdict.decision.confidence == Confidence.LOW:
        return ProposedChangeType.ESCALATION_RULE
    return ProposedChangeType.NONE


def generate_policy_states(
    change_type: ProposedChangeType, agent_name: str, action_name: str
) -> tuple[PolicyState, PolicyState]:
    """Return the (before, after) pair describing the change"""
    if change_type == ProposedChangeType.AUTHORITY_ADJUSTMENT:
        return (
            PolicyState(
                description=f"{agent_name} has limited authority for {action_name}",
                technical_details="Current authority level insufficient for autonomous execution",
            ),
            PolicyState(
                description=f"{agent_name} would have elevated authority for {action_name}",
                technical_details="Authority level would be increased to permit autonomous execution",
            ),
        )
    if change_type == ProposedChangeType.ACTION_PERMISSION:
        return (
            PolicyState(
                description=f"{action_name} requires human approval",
                technical_details="Action not in permitted set for autonomous execution",
            ),
            PolicyState(
                description=f"{action_name} would be permitted autonomously",
                technical_details="Action would be added to permitted set",
            ),
        )
    if change_type == ProposedChangeType.ESCALATION_RULE:
        return (
            PolicyState(
                description=f"{action_name} requires escalation in this context",
                technical_details="Current escalation policy blocks autonomous execution",
            ),
            PolicyState(
                description=f"{action_name} would not require escalation in similar contexts",
                technical_details="Escalation policy would be relaxed for this action type",
            ),
        )
    return (
        PolicyState(
            description=f"{agent_name} can execute {action_name} autonomously",
            technical_details="No policy barriers exist",
        ),
        PolicyState(
            description="No change needed",
            technical_details="System already supports this action",
        ),
    )


def generate_system_reasoning(
    change_type: ProposedChangeType, agent_name: str, action_name: str
) -> str:
    if change_type == ProposedChangeType.AUTHORITY_ADJUSTMENT:
        return (
            f"If applied, this would adjust {agent_name}'s authority level to permit "
            f"{action_name}. This change would affect future similar actions by raising "
            "the agent's baseline authority for this action category."
        )
    if change_type == ProposedChangeType.ACTION_PERMISSION:
        return (
            f"If applied, this would add {action_name} to {agent_name}'s permitted action "
            "set without requiring human approval. This would enable autonomous execution "
            "for this specific action type in similar contexts."
        )
    if change_type == ProposedChangeType.ESCALATION_RULE:
        return (
            "If applied, this would modify escalation policy to reduce or remove escalation "
            f"requirements for {action_name} in similar contexts. This would allow the agent "
            "to proceed with greater autonomy."
        )
    return (
        "No policy change is required. The current system configuration already supports "
        "this action for autonomous execution. The approval was instance-specific only."
    )


def derive_policy_change_proposal(
    intent: ApprovalIntent,
    *,
    now: datetime,
    id_factory: IdFactory = default_id_factory,
) -> PolicyChangeProposal | None:
    """
    Describe the policy change implied by a POLICY_CHANGE approval

    Returns:
        A PROPOSED proposal scoped to the agent, or None for an
        INSTANCE_ONLY approval
    """
    if intent.scope != ApprovalScope.POLICY_CHANGE:
        return None

    change_type = analyze_required_change(
        intent.execution_readiness_snapshot, intent.runtime_verdict_snapshot
    )
    before, after = generate_policy_states(change_type, intent.agent_name, intent.action_name)

    return PolicyChangeProposal(
        proposal_id=id_factory.generate("proposal"),
        source_approval_intent_id=intent.id,
        created_at=now,
        scope=ProposalScope.AGENT,
        target_id=intent.agent_id,
        target_name=intent.agent_name,
        proposed_change_type=change_type,
        before_state=before,
        after_state=after,
        human_justification=intent.justification,
        system_reasoning=generate_system_reasoning(
            change_type, intent.agent_name, intent.action_name
        ),
    )


def confirm_policy_proposal(
    proposal: PolicyChangeProposal,
    store: LearnedPolicyStore,
    *,
    now: datetime,
    id_factory: IdFactory = default_id_factory,
    policy: GovernancePolicy = default_governance_policy,
    learned_by: str = DEFAULT_LEARNER,
) -> PolicyChangeProposal:
    """
    Confirm a proposal and attempt to learn a policy from it

    A successfully learned policy is appended to `store` and its id is
    recorded on the returned proposal. A failed learning attempt leaves the
    store untouched; the proposal is still CONFIRMED.

    Raises:
        InvalidStateTransition: If the proposal is not PROPOSED
    """
    require_proposed(proposal, "confirm")

    confirmed = proposal.model_copy(
        update={"status": ProposalStatus.CONFIRMED, "confirmed_at": now}
    )

    learned = derive_learned_policy(
        confirmed, now=now, id_factory=id_factory, policy=policy, learned_by=learned_by
    )
    if learned is None:
        return confirmed

    store.append(learned)
    logger.info(
        "Policy learned",
        proposal_id=confirmed.proposal_id,
        policy_id=learned.policy_id,
        constraint_type=learned.constraint.type.value,
        expires_at=learned.lifecycle.expires_at.isoformat(),
    )
    return confirmed.model_copy(update={"learned_policy_id": learned.policy_id})


def dismiss_policy_proposal(proposal: PolicyChangeProposal, now: datetime) -> PolicyChangeProposal:
    """
    Raises:
        InvalidStateTransition: If the proposal is not PROPOSED
    """
    require_proposed(proposal, "dismiss")
    return proposal.model_copy(update={"status": ProposalStatus.DISMISSED, "dismissed_at": now})
