"""
Tests for Authority Derivation - The strict top-down minimum

Effective authority can only shrink on the way down the hierarchy. These
tests pin the minimum property, the source path and the wording of the
reasoning steps and blocked-action lines.
"""

import pytest

from authority_engine.authority.derivation import (
    derive_agent_authority,
    derive_domain_authority,
    derive_organization_authority,
)
from authority_engine.authority.models import HierarchyLevel, ReasoningImpact
from authority_engine.hierarchy.models import (
    EscalationBehavior,
    ExecutionSurface,
    ExecutionType,
    RoleFamily,
)
from tests.helpers import make_agent, make_domain, make_org


def test_organization_authority_is_its_ceiling() -> None:
    """Test that the root's effective level is its own ceiling"""
    result = derive_organization_authority(make_org(ceiling=3))

    assert result.effective_authority_level == 3
    assert [e.level for e in result.authority_source_path] == [HierarchyLevel.ORGANIZATION]
    assert result.blocked_actions == []
    assert len(result.reasoning) == 1
    assert result.reasoning[0].impact == ReasoningImpact.ALLOW
    assert result.reasoning[0].rule == "Organization authority ceiling = 3"


def test_organization_threshold_blocks() -> None:
    """Test that a ceiling of 0 falls below every threshold"""
    result = derive_organization_authority(make_org(ceiling=0))

    assert result.blocked_actions == [
        "Blocked: Organization authority ceiling is below maximum (3)",
        "Blocked: Organization authority ceiling restricts mid-level actions",
        "Blocked: Organization authority ceiling restricts all non-advisory actions",
    ]


def test_domain_authority_restricts_below_organization() -> None:
    """Test min(org, domain) and the RESTRICT step"""
    result = derive_domain_authority(make_org(ceiling=3), make_domain(ceiling=2))

    assert result.effective_authority_level == 2
    assert result.reasoning[1].impact == ReasoningImpact.RESTRICT
    assert result.blocked_actions == [
        "Blocked: Domain authority ceiling (2) is lower than organization ceiling (3)",
        "Blocked: Effective authority level (2) restricts high-authority actions",
    ]


def test_domain_cannot_widen_organization() -> None:
    """Test that a domain ceiling above the organization's has no effect"""
    result = derive_domain_authority(make_org(ceiling=1), make_domain(ceiling=3))

    assert result.effective_authority_level == 1
    assert result.reasoning[1].impact == ReasoningImpact.ALLOW
    assert result.reasoning[1].detail == "This domain maintains the organization's authority level."


@pytest.mark.parametrize(
    "org_ceiling,domain_ceiling,autonomy,expected",
    [
        (3, 3, 3, 3),
        (3, 2, 3, 2),
        (3, 3, 1, 1),
        (1, 3, 3, 1),
        (2, 1, 3, 1),
        (0, 3, 3, 0),
    ],
)
def test_agent_authority_is_minimum_of_chain(
    org_ceiling: int, domain_ceiling: int, autonomy: int, expected: int
) -> None:
    """Test that effective authority is never above any ancestor"""
    result = derive_agent_authority(
        make_org(ceiling=org_ceiling),
        make_domain(ceiling=domain_ceiling),
        make_agent(autonomy_level=autonomy),
    )

    assert result.effective_authority_level == expected
    assert result.effective_authority_level <= org_ceiling
    assert result.effective_authority_level <= domain_ceiling
    assert result.effective_authority_level <= autonomy


def test_agent_source_path_is_root_first() -> None:
    """Test the three-entry chain organization, domain, agent"""
    result = derive_agent_authority(
        make_org(ceiling=3), make_domain(ceiling=2), make_agent(autonomy_level=2)
    )

    assert [(e.level, e.name, e.ceiling) for e in result.authority_source_path] == [
        (HierarchyLevel.ORGANIZATION, "Test Org", 3),
        (HierarchyLevel.DOMAIN, "Test Domain", 2),
        (HierarchyLevel.AGENT, "Test Agent", 2),
    ]


def test_agent_blocked_lines_for_reconciler_shape() -> None:
    """
    Test org=3, domain=2, agent=2 (WRITE, EXECUTION, AUTO)

    Fun fact: this is exactly the "Reconciler X" agent of the sample
    organization.
    """
    result = derive_agent_authority(
        make_org(ceiling=3),
        make_domain(ceiling=2),
        make_agent(autonomy_level=2, surface=ExecutionSurface.WRITE),
    )

    assert result.effective_authority_level == 2
    assert result.blocked_actions == [
        "Blocked: Domain ceiling (2) reduces organization ceiling (3)",
        "Blocked: Agent autonomy level (2) is lower than organization ceiling (3)",
        "Blocked: Agent execution surface does not allow EXECUTE actions",
        "Blocked: Effective authority (2) restricts high-risk operations",
    ]


def test_unrestricted_agent_has_no_blocks() -> None:
    """Test that a fully capable agent under full ceilings is not blocked"""
    result = derive_agent_authority(make_org(), make_domain(), make_agent())

    assert result.effective_authority_level == 3
    assert result.blocked_actions == []
    assert [step.impact for step in result.reasoning] == [
        ReasoningImpact.ALLOW,
        ReasoningImpact.ALLOW,
        ReasoningImpact.ALLOW,
    ]


def test_agent_flags_add_blocked_lines() -> None:
    """Test the READ, ADVISORY and HUMAN_REQUIRED lines"""
    result = derive_agent_authority(
        make_org(),
        make_domain(),
        make_agent(
            surface=ExecutionSurface.READ,
            execution_type=ExecutionType.ADVISORY,
            escalation=EscalationBehavior.HUMAN_REQUIRED,
        ),
    )

    assert "Blocked: Agent execution surface is READ-only (no WRITE or EXECUTE)" in result.blocked_actions
    assert (
        "Blocked: Agent execution type is ADVISORY (recommendations only, no direct actions)"
        in result.blocked_actions
    )
    assert (
        "Blocked: Agent requires human approval for escalations (cannot auto-escalate)"
        in result.blocked_actions
    )


@pytest.mark.parametrize(
    "agent_kwargs,detail",
    [
        ({"autonomy_level": 1}, "This agent is configured to operate with limited autonomy."),
        ({"surface": ExecutionSurface.READ}, "This agent is restricted to reading information."),
        (
            {"surface": ExecutionSurface.WRITE},
            "This agent can modify information but cannot take direct actions.",
        ),
        (
            {"execution_type": ExecutionType.ADVISORY},
            "This agent provides recommendations and cannot act independently.",
        ),
        (
            {"execution_type": ExecutionType.DECISION},
            "This agent can decide what should happen but cannot execute those decisions.",
        ),
    ],
)
def test_agent_step_restrict_rules(agent_kwargs: dict, detail: str) -> None:
    """Test that the first matching agent rule supplies the RESTRICT detail"""
    result = derive_agent_authority(make_org(), make_domain(), make_agent(**agent_kwargs))

    agent_step = result.reasoning[2]
    assert agent_step.level == HierarchyLevel.AGENT
    assert agent_step.impact == ReasoningImpact.RESTRICT
    assert agent_step.detail == detail


def test_agent_step_compares_autonomy_with_inherited_ceiling() -> None:
    """Test that autonomy equal to the narrowed ceiling is not a restriction"""
    # Domain already narrows to 2; an autonomy of 2 narrows nothing further
    result = derive_agent_authority(make_org(ceiling=3), make_domain(ceiling=2), make_agent(autonomy_level=2))

    assert result.reasoning[2].impact == ReasoningImpact.ALLOW
    assert result.reasoning[2].rule == "Agent autonomy level = 2, execution surface = EXECUTE"


def test_derivation_does_not_mutate_inputs() -> None:
    """Test that derivation reads its inputs and leaves them untouched"""
    org, domain, agent = make_org(), make_domain(ceiling=1), make_agent(autonomy_level=2)
    before = (org.model_dump(), domain.model_dump(), agent.model_dump())

    derive_agent_authority(org, domain, agent)

    assert (org.model_dump(), domain.model_dump(), agent.model_dump()) == before


def test_derivation_is_deterministic() -> None:
    """Test that equal inputs give equal results"""
    args = (make_org(ceiling=2), make_domain(ceiling=3), make_agent(autonomy_level=1))

    assert derive_agent_authority(*args) == derive_agent_authority(*args)


@pytest.mark.parametrize(
    "role,family",
    [
        ("Customer Support Lead", RoleFamily.SUPPORT),
        ("Data Analyst", RoleFamily.ANALYST),
        ("Product Analytics", RoleFamily.ANALYST),
        ("DevOps Engineer", RoleFamily.OPERATIONS),
        ("Monitor", RoleFamily.GENERIC),
    ],
)
def test_role_family_classification(role: str, family: RoleFamily) -> None:
    """Test that free-text roles map onto catalogue families"""
    assert make_agent(role=role).role_family == family
