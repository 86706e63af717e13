"""
Do-Action Derivation - Concrete candidate actions per role family

Every agent gets a catalogue of five named actions chosen by its
RoleFamily. Each action is checked in a fixed order and the first failing
check supplies the state and reason:

1. Surface: the agent's execution surface must cover the required surface
2. Type: ADVISORY agents only access data or report; DECISION agents do not
   execute or operate
3. Authority: at or above the requirement is ALLOWED, exactly one level
   short is RESTRICTED, anything lower is BLOCKED
"""

from typing import NamedTuple

from authority_engine.authority.models import (
    ActionState,
    AuthorityResult,
    DoAction,
    DoActionCategory,
    DoActionSurface,
)
from authority_engine.hierarchy.models import (
    Agent,
    Domain,
    ExecutionSurface,
    ExecutionType,
    Organization,
    RoleFamily,
)


class ActionTemplate(NamedTuple):
    id: str
    verb_phrase: str
    category: DoActionCategory
    required_authority: int
    required_surface: ExecutionSurface


_READ = ExecutionSurface.READ
_WRITE = ExecutionSurface.WRITE
_EXECUTE = ExecutionSurface.EXECUTE

ACTION_CATALOGUES: dict[RoleFamily, list[ActionTemplate]] = {
    RoleFamily.SUPPORT: [
        ActionTemplate("support_view_ticket", "View customer ticket", DoActionCategory.DATA_ACCESS, 0, _READ),
        ActionTemplate("support_reply_inquiry", "Reply to customer inquiry", DoActionCategory.DATA_MODIFICATION, 1, _WRITE),
        ActionTemplate("support_update_status", "Update ticket status", DoActionCategory.DATA_MODIFICATION, 1, _WRITE),
        ActionTemplate("support_escalate", "Escalate to specialist", DoActionCategory.ESCALATION, 1, _WRITE),
        ActionTemplate("support_close_ticket", "Close support ticket", DoActionCategory.DECISION_MAKING, 2, _WRITE),
    ],
    RoleFamily.ANALYST: [
        ActionTemplate("analyst_view_data", "View analytics data", DoActionCategory.DATA_ACCESS, 0, _READ),
        ActionTemplate("analyst_export_data", "Export analytics data", DoActionCategory.DATA_ACCESS, 1, _READ),
        ActionTemplate("analyst_generate_report", "Generate compliance report", DoActionCategory.REPORTING, 2, _WRITE),
        ActionTemplate("analyst_schedule_job", "Schedule analysis job", DoActionCategory.EXECUTION, 2, _EXECUTE),
        ActionTemplate("analyst_approve_findings", "Approve analysis findings", DoActionCategory.DECISION_MAKING, 3, _WRITE),
    ],
    RoleFamily.OPERATIONS: [
        ActionTemplate("ops_view_logs", "View system logs", DoActionCategory.DATA_ACCESS, 0, _READ),
        ActionTemplate("ops_update_config", "Update configuration", DoActionCategory.DATA_MODIFICATION, 2, _WRITE),
        ActionTemplate("ops_restart_service", "Restart service", DoActionCategory.EXECUTION, 2, _EXECUTE),
        ActionTemplate("ops_deploy_staging", "Deploy to staging", DoActionCategory.EXECUTION, 2, _EXECUTE),
        ActionTemplate("ops_deploy_production", "Deploy to production", DoActionCategory.EXECUTION, 3, _EXECUTE),
    ],
    RoleFamily.GENERIC: [
        ActionTemplate("generic_read_info", "Read information", DoActionCategory.DATA_ACCESS, 0, _READ),
        ActionTemplate("generic_update_record", "Update record", DoActionCategory.DATA_MODIFICATION, 1, _WRITE),
        ActionTemplate("generic_make_decision", "Make autonomous decision", DoActionCategory.DECISION_MAKING, 2, _WRITE),
        ActionTemplate("generic_execute_action", "Execute system action", DoActionCategory.EXECUTION, 2, _EXECUTE),
        ActionTemplate("generic_escalate", "Escalate to human", DoActionCategory.ESCALATION, 0, _READ),
    ],
}

ADVISORY_CATEGORIES = frozenset({DoActionCategory.DATA_ACCESS, DoActionCategory.REPORTING})
EXECUTING_CATEGORIES = frozenset({DoActionCategory.EXECUTION, DoActionCategory.OPERATIONS})


def catalogue_for(role_family: RoleFamily) -> list[ActionTemplate]:
    return ACTION_CATALOGUES.get(role_family, ACTION_CATALOGUES[RoleFamily.GENERIC])


def check_execution_surface(agent_surface: ExecutionSurface, required: ExecutionSurface) -> str | None:
    """Return the blocking reason, or None if the surface is sufficient"""
    if agent_surface.covers(required):
        return None
    if required == ExecutionSurface.WRITE and agent_surface == ExecutionSurface.READ:
        return "This agent is restricted to reading information."
    if required == ExecutionSurface.EXECUTE:
        return "This agent is not configured to execute actions."
    return "This action requires a higher execution surface than this agent has."


def check_execution_type(execution_type: ExecutionType, category: DoActionCategory) -> str | None:
    if execution_type == ExecutionType.ADVISORY and category not in ADVISORY_CATEGORIES:
        return "This agent provides recommendations and cannot take direct actions."
    if execution_type == ExecutionType.DECISION and category in EXECUTING_CATEGORIES:
        return "This agent can decide what should happen but cannot execute decisions."
    return None


def check_authority_level(effective: int, required: int) -> tuple[ActionState, str] | None:
    if effective >= required:
        return None
    if effective == required - 1:
        return (
            ActionState.RESTRICTED,
            "This action requires higher authority than this agent currently has "
            f"(needs {required}, has {effective}).",
        )
    return (
        ActionState.BLOCKED,
        f"This action requires authority level {required}, but this agent has level {effective}.",
    )


def derive_action_state(
    template: ActionTemplate, agent: Agent, authority: AuthorityResult
) -> tuple[ActionState, str]:
    """Run the surface, type and authority checks in order; first failure wins"""
    surface_reason = check_execution_surface(agent.execution_surface, template.required_surface)
    if surface_reason is not None:
        return ActionState.BLOCKED, surface_reason

    type_reason = check_execution_type(agent.execution_type, template.category)
    if type_reason is not None:
        return ActionState.BLOCKED, type_reason

    authority_failure = check_authority_level(
        authority.effective_authority_level, template.required_authority
    )
    if authority_failure is not None:
        return authority_failure

    return ActionState.ALLOWED, "This agent is permitted to perform this action."


def derive_do_actions(
    agent: Agent,
    authority: AuthorityResult,
    domain: Domain,
    organization: Organization,
) -> DoActionSurface:
    """
    Derive the concrete do-actions available to an agent

    The catalogue is chosen by `agent.role_family`, classified once when the
    agent was constructed. Catalogue order is preserved.
    """
    actions = []
    for template in catalogue_for(agent.role_family):
        state, reason = derive_action_state(template, agent, authority)
        actions.append(
            DoAction(
                id=template.id,
                verb_phrase=template.verb_phrase,
                category=template.category,
                required_authority=template.required_authority,
                required_surface=template.required_surface,
                state=state,
                reason=reason,
            )
        )
    return DoActionSurface(actions=actions)
