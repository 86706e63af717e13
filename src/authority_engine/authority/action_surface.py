"""
Action Surface Derivation - Five coarse capabilities of an agent

Maps execution surface, execution type and effective authority onto the
fixed categories READ_DATA, WRITE_DATA, MAKE_DECISIONS, EXECUTE_ACTIONS and
ESCALATE_HUMAN. Within each category the first matching rule decides the
state and supplies the reason.
"""

from authority_engine.authority.models import (
    ActionCategory,
    ActionState,
    ActionStatus,
    ActionSurface,
    AuthorityResult,
)
from authority_engine.hierarchy.models import (
    Agent,
    Domain,
    EscalationBehavior,
    ExecutionSurface,
    ExecutionType,
    Organization,
)


def _read_data(agent: Agent, authority: AuthorityResult) -> ActionStatus:
    return ActionStatus(
        category=ActionCategory.READ_DATA,
        label="Read Data",
        state=ActionState.ALLOWED,
        reason="This agent is allowed to view information.",
    )


def _write_data(agent: Agent, authority: AuthorityResult) -> ActionStatus:
    if agent.execution_surface == ExecutionSurface.READ:
        state, reason = ActionState.BLOCKED, "This agent is restricted to reading information."
    elif agent.execution_type == ExecutionType.ADVISORY:
        state, reason = (
            ActionState.BLOCKED,
            "This agent can advise but cannot modify data on its own.",
        )
    elif authority.effective_authority_level < 2:
        state, reason = (
            ActionState.RESTRICTED,
            "This action is limited by the agent's assigned authority level.",
        )
    else:
        state, reason = ActionState.ALLOWED, "This agent is permitted to modify information."

    return ActionStatus(
        category=ActionCategory.WRITE_DATA, label="Write Data", state=state, reason=reason
    )


def _make_decisions(agent: Agent, authority: AuthorityResult) -> ActionStatus:
    level = authority.effective_authority_level
    if agent.execution_type == ExecutionType.ADVISORY:
        state, reason = (
            ActionState.BLOCKED,
            "This agent provides recommendations and cannot make decisions independently.",
        )
    elif level < 1:
        state, reason = (
            ActionState.BLOCKED,
            "This agent's authority level does not permit decision-making.",
        )
    elif level < 2:
        state, reason = (
            ActionState.RESTRICTED,
            "This agent can make decisions within a limited scope.",
        )
    else:
        state, reason = ActionState.ALLOWED, "This agent is permitted to make decisions."

    return ActionStatus(
        category=ActionCategory.MAKE_DECISIONS, label="Make Decisions", state=state, reason=reason
    )


def _execute_actions(agent: Agent, authority: AuthorityResult) -> ActionStatus:
    if agent.execution_surface != ExecutionSurface.EXECUTE:
        state, reason = (
            ActionState.BLOCKED,
            "This agent is not configured to take direct actions.",
        )
    elif agent.execution_type != ExecutionType.EXECUTION:
        state, reason = (
            ActionState.BLOCKED,
            "This agent's role does not include taking direct actions.",
        )
    elif authority.effective_authority_level < 3:
        state, reason = (
            ActionState.RESTRICTED,
            "This agent can take actions but only within a limited scope.",
        )
    else:
        state, reason = ActionState.ALLOWED, "This agent is permitted to take direct actions."

    return ActionStatus(
        category=ActionCategory.EXECUTE_ACTIONS, label="Execute Actions", state=state, reason=reason
    )


def _escalate_human(agent: Agent, authority: AuthorityResult) -> ActionStatus:
    # Asking a human is never blocked
    if agent.escalation_behavior == EscalationBehavior.HUMAN_REQUIRED:
        reason = "Actions at this level require human involvement."
    else:
        reason = "This agent can request human guidance when appropriate."

    return ActionStatus(
        category=ActionCategory.ESCALATE_HUMAN,
        label="Escalate to Human",
        state=ActionState.ALLOWED,
        reason=reason,
    )


def derive_action_surface(
    agent: Agent,
    authority: AuthorityResult,
    domain: Domain,
    organization: Organization,
) -> ActionSurface:
    """
    Derive the coarse action surface of an agent

    Args:
        agent: The agent being inspected
        authority: Result of derive_agent_authority for the same agent
        domain: The agent's domain
        organization: The owning organization

    Returns:
        ActionSurface with all five categories in canonical order
    """
    return ActionSurface(
        actions=[
            _read_data(agent, authority),
            _write_data(agent, authority),
            _make_decisions(agent, authority),
            _execute_actions(agent, authority),
            _escalate_human(agent, authority),
        ]
    )
