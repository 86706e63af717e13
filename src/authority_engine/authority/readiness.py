"""
Execution Readiness - Four gates folded into one eligibility state

Gates are evaluated independently:

- authority_alignment: effective authority meets the requirement and the
  domain permits the action's category
- action_surface_compatibility: the agent's surface covers the action
- escalation_resolution: a required escalation has someone to go to
- persona_alignment: delegated to a PersonaAlignmentCheck

Fold: authority AND surface failing is BLOCKED_HARD regardless of the rest;
any other failure is NOT_ELIGIBLE; all passing with an escalation is
ELIGIBLE_PENDING_APPROVAL; otherwise ELIGIBLE_AUTOMATIC.

The summary sentences are fixed text that audit trails key on. Do not
reword them.
"""

from typing import Protocol

from authority_engine.authority.models import (
    AuthorityResult,
    DoAction,
    ExecutionReadiness,
    GateResult,
    ReadinessGates,
    ReadinessState,
    RuntimeVerdict,
)
from authority_engine.hierarchy.models import Agent, Domain, Organization

READINESS_SUMMARIES = {
    ReadinessState.ELIGIBLE_AUTOMATIC: (
        "All preconditions are satisfied. This action could run autonomously "
        "if execution were enabled."
    ),
    ReadinessState.ELIGIBLE_PENDING_APPROVAL: (
        "Execution is possible, but only with explicit human approval. "
        "This action cannot run autonomously."
    ),
    ReadinessState.BLOCKED_HARD: (
        "Critical preconditions failed. Execution is not possible and is "
        "explicitly forbidden."
    ),
    ReadinessState.NOT_ELIGIBLE: (
        "This agent is not permitted to perform this action. Execution is not "
        "appropriate in this context."
    ),
}


class PersonaAlignmentCheck(Protocol):
    """Extension point for the persona gate"""

    def check(self, agent: Agent, do_action: DoAction) -> GateResult:
        ...


class PendingPersonaAlignment:
    """Persona gate used when no persona integration is configured: always passes"""

    def check(self, agent: Agent, do_action: DoAction) -> GateResult:
        return GateResult(
            passed=True,
            reason="Persona alignment check passed (EAPP integration pending).",
        )


def evaluate_authority_gate(
    do_action: DoAction, authority: AuthorityResult, domain: Domain
) -> GateResult:
    if authority.effective_authority_level < do_action.required_authority:
        return GateResult(
            passed=False,
            reason=(
                f"This action requires authority level {do_action.required_authority}, "
                f"but effective authority is {authority.effective_authority_level}."
            ),
        )
    if not domain.permits_category(do_action.category.value):
        return GateResult(
            passed=False,
            reason=f"This domain does not permit {do_action.category.value} actions.",
        )
    return GateResult(
        passed=True,
        reason="Authority level meets requirements and domain permits this action category.",
    )


def evaluate_surface_gate(do_action: DoAction, agent: Agent) -> GateResult:
    if not agent.execution_surface.covers(do_action.required_surface):
        return GateResult(
            passed=False,
            reason=(
                f"This action requires {do_action.required_surface.value} surface, "
                f"but agent has {agent.execution_surface.value}."
            ),
        )
    return GateResult(passed=True, reason="Agent execution surface supports this action.")


def evaluate_escalation_gate(verdict: RuntimeVerdict, agent: Agent) -> GateResult:
    if verdict.escalation is None:
        return GateResult(passed=True, reason="No escalation required for this action.")
    if not agent.escalation_behavior:
        return GateResult(
            passed=False,
            reason="Escalation is required but no escalation policy is defined.",
        )
    if not verdict.escalation.expected_approver_role:
        return GateResult(
            passed=False,
            reason="Escalation is required but no approver role is specified.",
        )
    return GateResult(
        passed=True,
        reason=(
            f"Escalation policy defined: {verdict.escalation.expected_approver_role} "
            "approval required."
        ),
    )


def fold_readiness_state(gates: ReadinessGates, verdict: RuntimeVerdict) -> ReadinessState:
    if not gates.authority_alignment.passed and not gates.action_surface_compatibility.passed:
        return ReadinessState.BLOCKED_HARD
    if not gates.all_passed():
        return ReadinessState.NOT_ELIGIBLE
    if verdict.escalation is not None:
        return ReadinessState.ELIGIBLE_PENDING_APPROVAL
    return ReadinessState.ELIGIBLE_AUTOMATIC


def derive_execution_readiness(
    agent: Agent,
    do_action: DoAction,
    authority: AuthorityResult,
    verdict: RuntimeVerdict,
    domain: Domain,
    organization: Organization,
    persona_check: PersonaAlignmentCheck | None = None,
) -> ExecutionReadiness:
    """
    Evaluate the four readiness gates for one agent and do-action

    Args:
        persona_check: Persona gate implementation. Defaults to
            PendingPersonaAlignment, which always passes.
    """
    persona_check = persona_check or PendingPersonaAlignment()

    gates = ReadinessGates(
        authority_alignment=evaluate_authority_gate(do_action, authority, domain),
        action_surface_compatibility=evaluate_surface_gate(do_action, agent),
        escalation_resolution=evaluate_escalation_gate(verdict, agent),
        persona_alignment=persona_check.check(agent, do_action),
    )
    state = fold_readiness_state(gates, verdict)

    return ExecutionReadiness(state=state, gates=gates, summary=READINESS_SUMMARIES[state])
