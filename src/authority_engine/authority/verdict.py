"""
Runtime Verdict Derivation - What would happen if the agent tried

For one agent and one do-action, produce a canonical verdict: a decision,
the constraints that shaped it (attributed to ORGANIZATION, DOMAIN, AGENT,
EAPP or RUNTIME, always in that order) and an escalation descriptor when a
human has to step in.

A verdict only explains. Its execution block is fixed to "attempted, not
executed" and the final RUNTIME constraint says so in words.
"""

from datetime import datetime

from authority_engine.authority.models import (
    ActionState,
    AppliedConstraint,
    AuthorityResult,
    Confidence,
    ConstraintSource,
    DecisionStatus,
    DoAction,
    DoActionCategory,
    EscalationDescriptor,
    RuntimeVerdict,
    VerdictAction,
    VerdictActionCategory,
    VerdictDecision,
    VerdictReasoning,
    VerdictSubject,
)
from authority_engine.hierarchy.models import (
    Agent,
    Domain,
    EscalationBehavior,
    ExecutionSurface,
    ExecutionType,
    Organization,
)

RUNTIME_CONSTRAINT = "No execution is permitted in the current system phase."

HUMAN_APPROVER = "Human Operator"
DOMAIN_APPROVER = "Domain Administrator"

_CATEGORY_MAP = {
    DoActionCategory.DATA_ACCESS: VerdictActionCategory.READ,
    DoActionCategory.DATA_MODIFICATION: VerdictActionCategory.WRITE,
    DoActionCategory.DECISION_MAKING: VerdictActionCategory.DECIDE,
    DoActionCategory.EXECUTION: VerdictActionCategory.EXECUTE,
    DoActionCategory.OPERATIONS: VerdictActionCategory.EXECUTE,
    DoActionCategory.ESCALATION: VerdictActionCategory.ESCALATE,
    DoActionCategory.REPORTING: VerdictActionCategory.WRITE,  # Reports are data output
}

_DECISIONS = {
    ActionState.ALLOWED: VerdictDecision(status=DecisionStatus.ALLOWED, confidence=Confidence.HIGH),
    ActionState.BLOCKED: VerdictDecision(status=DecisionStatus.BLOCKED, confidence=Confidence.HIGH),
    ActionState.RESTRICTED: VerdictDecision(
        status=DecisionStatus.ESCALATION_REQUIRED, confidence=Confidence.MEDIUM
    ),
}


def verdict_id_for(agent_id: str, action_id: str) -> str:
    """Same agent and action always give the same id"""
    return f"verdict_{agent_id}_{action_id}"


def map_action_category(category: DoActionCategory) -> VerdictActionCategory:
    return _CATEGORY_MAP.get(category, VerdictActionCategory.READ)


def approver_role_for(agent: Agent) -> str:
    if agent.escalation_behavior == EscalationBehavior.HUMAN_REQUIRED:
        return HUMAN_APPROVER
    return DOMAIN_APPROVER


def collect_applied_constraints(
    do_action: DoAction,
    agent: Agent,
    authority: AuthorityResult,
    domain: Domain,
    organization: Organization,
) -> list[AppliedConstraint]:
    """
    Re-examine the hierarchy signals in canonical order

    The EAPP slot is reserved; ethical blocks are reported by the ethical
    veto, not by verdicts. RUNTIME is always last.
    """
    constraints: list[AppliedConstraint] = []

    def add(source: ConstraintSource, description: str) -> None:
        constraints.append(AppliedConstraint(source=source, description=description))

    if organization.authority_ceiling < 3:
        add(
            ConstraintSource.ORGANIZATION,
            "This organization limits how much authority its members can exercise.",
        )

    if domain.authority_ceiling < organization.authority_ceiling:
        add(
            ConstraintSource.DOMAIN,
            "This domain restricts the scope of actions its agents can perform.",
        )

    if agent.autonomy_level < min(organization.authority_ceiling, domain.authority_ceiling):
        add(ConstraintSource.AGENT, "This agent is configured to operate with limited autonomy.")

    if (
        agent.execution_surface == ExecutionSurface.READ
        and do_action.required_surface != ExecutionSurface.READ
    ):
        add(ConstraintSource.AGENT, "This agent is restricted to reading information.")

    if (
        agent.execution_surface == ExecutionSurface.WRITE
        and do_action.required_surface == ExecutionSurface.EXECUTE
    ):
        add(
            ConstraintSource.AGENT,
            "This agent can modify information but cannot take direct actions.",
        )

    if agent.execution_type == ExecutionType.ADVISORY:
        add(
            ConstraintSource.AGENT,
            "This agent provides recommendations and cannot act independently.",
        )

    if (
        agent.execution_type == ExecutionType.DECISION
        and do_action.category == DoActionCategory.EXECUTION
    ):
        add(
            ConstraintSource.AGENT,
            "This agent can decide what should happen but cannot execute those decisions.",
        )

    add(ConstraintSource.RUNTIME, RUNTIME_CONSTRAINT)
    return constraints


def summarize(do_action: DoAction, agent: Agent) -> str:
    verb = do_action.verb_phrase.lower()
    if do_action.state == ActionState.ALLOWED:
        return f"{agent.name} is permitted to {verb}."
    if do_action.state == ActionState.BLOCKED:
        return f"{agent.name} cannot {verb} due to authority restrictions."
    return f"{agent.name} would need approval to {verb}."


def derive_runtime_verdict(
    agent: Agent,
    do_action: DoAction,
    authority: AuthorityResult,
    domain: Domain,
    organization: Organization,
    evaluated_at: datetime | None = None,
) -> RuntimeVerdict:
    """
    Derive the verdict for one agent attempting one do-action

    Decision mapping: ALLOWED gives (ALLOWED, HIGH), BLOCKED gives
    (BLOCKED, HIGH) and RESTRICTED gives (ESCALATION_REQUIRED, MEDIUM).

    Args:
        evaluated_at: Timestamp to stamp on the verdict. Left as None the
            verdict depends on nothing but its inputs.
    """
    decision = _DECISIONS[do_action.state]

    escalation = None
    if decision.status == DecisionStatus.ESCALATION_REQUIRED:
        escalation = EscalationDescriptor(
            reason=f"This action requires higher authority than {agent.name} currently has.",
            expected_approver_role=approver_role_for(agent),
        )

    return RuntimeVerdict(
        verdict_id=verdict_id_for(agent.id, do_action.id),
        evaluated_at=evaluated_at,
        subject=VerdictSubject(
            agent_id=agent.id,
            agent_name=agent.name,
            domain_id=domain.id,
            organization_id=organization.id,
        ),
        action=VerdictAction(
            action_id=do_action.id,
            action_name=do_action.verb_phrase,
            action_category=map_action_category(do_action.category),
        ),
        decision=decision,
        reasoning=VerdictReasoning(
            summary=summarize(do_action, agent),
            applied_constraints=collect_applied_constraints(
                do_action, agent, authority, domain, organization
            ),
        ),
        escalation=escalation,
    )
