"""
Tests for the coarse action surface and the concrete do-action catalogue
"""

import pytest

from authority_engine.authority.action_surface import derive_action_surface
from authority_engine.authority.derivation import derive_agent_authority
from authority_engine.authority.do_actions import (
    ACTION_CATALOGUES,
    check_authority_level,
    derive_do_actions,
)
from authority_engine.authority.models import ActionCategory, ActionState
from authority_engine.hierarchy.models import (
    EscalationBehavior,
    ExecutionSurface,
    ExecutionType,
    RoleFamily,
)
from tests.helpers import make_agent, make_domain, make_org


def surface_for(**agent_kwargs):
    org, domain, agent = make_org(), make_domain(), make_agent(**agent_kwargs)
    authority = derive_agent_authority(org, domain, agent)
    return derive_action_surface(agent, authority, domain, org)


def do_actions_for(org_ceiling: int = 3, domain_ceiling: int = 3, **agent_kwargs):
    org, domain = make_org(ceiling=org_ceiling), make_domain(ceiling=domain_ceiling)
    agent = make_agent(**agent_kwargs)
    authority = derive_agent_authority(org, domain, agent)
    return derive_do_actions(agent, authority, domain, org)


def test_surface_lists_all_categories_in_order() -> None:
    """Test the five categories always appear in canonical order"""
    surface = surface_for()

    assert [s.category for s in surface.actions] == [
        ActionCategory.READ_DATA,
        ActionCategory.WRITE_DATA,
        ActionCategory.MAKE_DECISIONS,
        ActionCategory.EXECUTE_ACTIONS,
        ActionCategory.ESCALATE_HUMAN,
    ]
    assert all(s.state == ActionState.ALLOWED for s in surface.actions)


def test_read_only_advisory_agent_surface() -> None:
    """Test that a READ, ADVISORY agent can only read and escalate"""
    surface = surface_for(
        surface=ExecutionSurface.READ,
        execution_type=ExecutionType.ADVISORY,
        escalation=EscalationBehavior.HUMAN_REQUIRED,
    )

    assert surface.get(ActionCategory.READ_DATA).state == ActionState.ALLOWED
    write = surface.get(ActionCategory.WRITE_DATA)
    assert write.state == ActionState.BLOCKED
    assert write.reason == "This agent is restricted to reading information."
    assert surface.get(ActionCategory.MAKE_DECISIONS).state == ActionState.BLOCKED
    assert surface.get(ActionCategory.EXECUTE_ACTIONS).reason == (
        "This agent is not configured to take direct actions."
    )
    escalate = surface.get(ActionCategory.ESCALATE_HUMAN)
    assert escalate.state == ActionState.ALLOWED
    assert escalate.reason == "Actions at this level require human involvement."


def test_low_authority_restricts_write_and_decisions() -> None:
    """Test that effective authority 1 restricts rather than blocks"""
    surface = surface_for(autonomy_level=1)

    assert surface.get(ActionCategory.WRITE_DATA).state == ActionState.RESTRICTED
    assert surface.get(ActionCategory.MAKE_DECISIONS).state == ActionState.RESTRICTED
    assert surface.get(ActionCategory.EXECUTE_ACTIONS).state == ActionState.RESTRICTED


def test_zero_authority_blocks_decisions() -> None:
    surface = surface_for(autonomy_level=0)

    decisions = surface.get(ActionCategory.MAKE_DECISIONS)
    assert decisions.state == ActionState.BLOCKED
    assert decisions.reason == "This agent's authority level does not permit decision-making."


def test_escalation_is_never_blocked() -> None:
    """Test that asking a human stays ALLOWED for the weakest agent"""
    surface = surface_for(
        autonomy_level=0,
        surface=ExecutionSurface.READ,
        execution_type=ExecutionType.ADVISORY,
    )

    assert surface.get(ActionCategory.ESCALATE_HUMAN).state == ActionState.ALLOWED


@pytest.mark.parametrize("family", list(RoleFamily))
def test_every_family_has_five_actions(family: RoleFamily) -> None:
    assert len(ACTION_CATALOGUES[family]) == 5


def test_catalogue_chosen_by_role_family() -> None:
    """Test that a support role gets the support catalogue"""
    actions = do_actions_for(role="Customer Support Agent")

    assert [a.id for a in actions.actions] == [
        "support_view_ticket",
        "support_reply_inquiry",
        "support_update_status",
        "support_escalate",
        "support_close_ticket",
    ]


def test_write_agent_cannot_reach_execute_actions() -> None:
    """Test the surface check comes first and explains itself"""
    actions = do_actions_for(surface=ExecutionSurface.WRITE)

    execute = actions.find("generic_execute_action")
    assert execute.state == ActionState.BLOCKED
    assert execute.reason == "This agent is not configured to execute actions."

    update = actions.find("generic_update_record")
    assert update.state == ActionState.ALLOWED
    assert update.reason == "This agent is permitted to perform this action."


def test_read_agent_blocked_from_writes() -> None:
    actions = do_actions_for(surface=ExecutionSurface.READ)

    assert actions.find("generic_read_info").state == ActionState.ALLOWED
    assert actions.find("generic_update_record").reason == (
        "This agent is restricted to reading information."
    )


def test_advisory_agent_only_accesses_data() -> None:
    """Test that ADVISORY agents keep DATA_ACCESS and REPORTING only"""
    actions = do_actions_for(execution_type=ExecutionType.ADVISORY)

    assert actions.find("generic_read_info").state == ActionState.ALLOWED
    decision = actions.find("generic_make_decision")
    assert decision.state == ActionState.BLOCKED
    assert decision.reason == "This agent provides recommendations and cannot take direct actions."


def test_decision_agent_cannot_execute() -> None:
    actions = do_actions_for(execution_type=ExecutionType.DECISION)

    assert actions.find("generic_make_decision").state == ActionState.ALLOWED
    execute = actions.find("generic_execute_action")
    assert execute.state == ActionState.BLOCKED
    assert execute.reason == "This agent can decide what should happen but cannot execute decisions."


def test_one_level_short_is_restricted() -> None:
    """Test the RESTRICTED band: exactly one authority level short"""
    actions = do_actions_for(domain_ceiling=1)

    decision = actions.find("generic_make_decision")
    assert decision.state == ActionState.RESTRICTED
    assert decision.reason == (
        "This action requires higher authority than this agent currently has (needs 2, has 1)."
    )


def test_two_levels_short_is_blocked() -> None:
    actions = do_actions_for(role="DevOps Engineer", domain_ceiling=1)

    deploy = actions.find("ops_deploy_production")
    assert deploy.state == ActionState.BLOCKED
    assert deploy.reason == "This action requires authority level 3, but this agent has level 1."


def test_check_authority_level_bands() -> None:
    assert check_authority_level(2, 2) is None
    assert check_authority_level(3, 2) is None
    assert check_authority_level(1, 2)[0] == ActionState.RESTRICTED
    assert check_authority_level(0, 2)[0] == ActionState.BLOCKED


def test_find_unknown_action_returns_none() -> None:
    assert do_actions_for().find("generic_launch_rocket") is None
