"""
Authority Derivation - Effective authority by strict top-down minimum

A node's effective authority is the minimum ceiling along its chain:
organization, then domain, then agent autonomy. A child can narrow what its
parent allows but never widen it, so an organization at 1 keeps every agent
at or below 1 however the domains and agents are configured.

Each derivation also explains itself: a source path (root first), one
reasoning step per level and a list of "Blocked: ..." sentences generated
from fixed thresholds and agent flags. These functions are total and pure;
they never raise and never touch their inputs.
"""

from authority_engine.authority.models import (
    AuthorityResult,
    AuthoritySourceEntry,
    HierarchyLevel,
    ReasoningImpact,
    ReasoningStep,
)
from authority_engine.hierarchy.models import (
    Agent,
    Domain,
    EscalationBehavior,
    ExecutionSurface,
    ExecutionType,
    Organization,
)

# Effective levels below these thresholds each add one blocked-action line
HIGH_AUTHORITY = 3
MID_AUTHORITY = 2
MIN_AUTHORITY = 1


def _organization_entry(org: Organization) -> AuthoritySourceEntry:
    return AuthoritySourceEntry(
        level=HierarchyLevel.ORGANIZATION, name=org.name, ceiling=org.authority_ceiling
    )


def _domain_entry(domain: Domain) -> AuthoritySourceEntry:
    return AuthoritySourceEntry(
        level=HierarchyLevel.DOMAIN, name=domain.name, ceiling=domain.authority_ceiling
    )


def _organization_step(org: Organization, detail: str) -> ReasoningStep:
    return ReasoningStep(
        level=HierarchyLevel.ORGANIZATION,
        rule=f"Organization authority ceiling = {org.authority_ceiling}",
        impact=ReasoningImpact.ALLOW,
        detail=detail,
    )


def _threshold_blocks(level: int, messages: tuple[str, str, str]) -> list[str]:
    """One message per threshold (3, 2, 1) the level falls below"""
    high, mid, low = messages
    blocked = []
    if level < HIGH_AUTHORITY:
        blocked.append(high)
    if level < MID_AUTHORITY:
        blocked.append(mid)
    if level < MIN_AUTHORITY:
        blocked.append(low)
    return blocked


def derive_organization_authority(org: Organization) -> AuthorityResult:
    """
    Derive authority for the organization node

    The organization is the root: its ceiling is its effective level and its
    single reasoning step is always ALLOW.
    """
    blocked_actions = _threshold_blocks(
        org.authority_ceiling,
        (
            "Blocked: Organization authority ceiling is below maximum (3)",
            "Blocked: Organization authority ceiling restricts mid-level actions",
            "Blocked: Organization authority ceiling restricts all non-advisory actions",
        ),
    )

    return AuthorityResult(
        effective_authority_level=org.authority_ceiling,
        authority_source_path=[_organization_entry(org)],
        blocked_actions=blocked_actions,
        reasoning=[
            _organization_step(
                org, "This organization establishes the maximum level of authority available."
            )
        ],
    )


def derive_domain_authority(org: Organization, domain: Domain) -> AuthorityResult:
    """
    Derive authority for a domain node

    Effective level is min(organization, domain). The domain step is
    RESTRICT iff the domain ceiling is strictly below the organization's.
    """
    effective = min(org.authority_ceiling, domain.authority_ceiling)
    domain_restricts = domain.authority_ceiling < org.authority_ceiling

    blocked_actions: list[str] = []
    if domain_restricts:
        blocked_actions.append(
            f"Blocked: Domain authority ceiling ({domain.authority_ceiling}) is lower "
            f"than organization ceiling ({org.authority_ceiling})"
        )
    blocked_actions.extend(
        _threshold_blocks(
            effective,
            (
                f"Blocked: Effective authority level ({effective}) restricts high-authority actions",
                f"Blocked: Effective authority level ({effective}) restricts mid-level actions",
                f"Blocked: Effective authority level ({effective}) restricts all non-advisory actions",
            ),
        )
    )

    if domain_restricts:
        domain_step = ReasoningStep(
            level=HierarchyLevel.DOMAIN,
            rule=f"Domain authority ceiling = {domain.authority_ceiling}",
            impact=ReasoningImpact.RESTRICT,
            detail="This domain limits how much authority its agents can use.",
        )
    else:
        domain_step = ReasoningStep(
            level=HierarchyLevel.DOMAIN,
            rule=f"Domain authority ceiling = {domain.authority_ceiling}",
            impact=ReasoningImpact.ALLOW,
            detail="This domain maintains the organization's authority level.",
        )

    return AuthorityResult(
        effective_authority_level=effective,
        authority_source_path=[_organization_entry(org), _domain_entry(domain)],
        blocked_actions=blocked_actions,
        reasoning=[
            _organization_step(
                org,
                "This organization allows its domains and agents to operate with full authority.",
            ),
            domain_step,
        ],
    )


def _agent_blocks(org: Organization, domain: Domain, agent: Agent) -> list[str]:
    """Chain and configuration flags, each contributing one line"""
    blocked: list[str] = []

    if domain.authority_ceiling < org.authority_ceiling:
        blocked.append(
            f"Blocked: Domain ceiling ({domain.authority_ceiling}) reduces "
            f"organization ceiling ({org.authority_ceiling})"
        )
    if agent.autonomy_level < domain.authority_ceiling:
        blocked.append(
            f"Blocked: Agent autonomy level ({agent.autonomy_level}) is lower than "
            f"domain ceiling ({domain.authority_ceiling})"
        )
    if agent.autonomy_level < org.authority_ceiling:
        blocked.append(
            f"Blocked: Agent autonomy level ({agent.autonomy_level}) is lower than "
            f"organization ceiling ({org.authority_ceiling})"
        )

    if agent.execution_surface == ExecutionSurface.READ:
        blocked.append("Blocked: Agent execution surface is READ-only (no WRITE or EXECUTE)")
    elif agent.execution_surface == ExecutionSurface.WRITE:
        blocked.append("Blocked: Agent execution surface does not allow EXECUTE actions")

    if agent.execution_type == ExecutionType.ADVISORY:
        blocked.append(
            "Blocked: Agent execution type is ADVISORY (recommendations only, no direct actions)"
        )
    elif agent.execution_type == ExecutionType.DECISION:
        blocked.append(
            "Blocked: Agent execution type is DECISION (can decide but cannot execute)"
        )

    if agent.escalation_behavior == EscalationBehavior.HUMAN_REQUIRED:
        blocked.append(
            "Blocked: Agent requires human approval for escalations (cannot auto-escalate)"
        )

    return blocked


def _agent_step(org: Organization, domain: Domain, agent: Agent) -> ReasoningStep:
    """
    Reasoning step for the agent level

    RESTRICT when autonomy is below what the domain passes down, or when the
    surface or execution type narrows what the agent may do. The detail is
    taken from the first matching rule.
    """
    inherited = min(org.authority_ceiling, domain.authority_ceiling)

    if agent.autonomy_level < inherited:
        impact, detail = (
            ReasoningImpact.RESTRICT,
            "This agent is configured to operate with limited autonomy.",
        )
    elif agent.execution_surface == ExecutionSurface.READ:
        impact, detail = (
            ReasoningImpact.RESTRICT,
            "This agent is restricted to reading information.",
        )
    elif agent.execution_surface == ExecutionSurface.WRITE:
        impact, detail = (
            ReasoningImpact.RESTRICT,
            "This agent can modify information but cannot take direct actions.",
        )
    elif agent.execution_type == ExecutionType.ADVISORY:
        impact, detail = (
            ReasoningImpact.RESTRICT,
            "This agent provides recommendations and cannot act independently.",
        )
    elif agent.execution_type == ExecutionType.DECISION:
        impact, detail = (
            ReasoningImpact.RESTRICT,
            "This agent can decide what should happen but cannot execute those decisions.",
        )
    else:
        impact, detail = (
            ReasoningImpact.ALLOW,
            "This agent is permitted to operate within its assigned scope.",
        )

    return ReasoningStep(
        level=HierarchyLevel.AGENT,
        rule=(
            f"Agent autonomy level = {agent.autonomy_level}, "
            f"execution surface = {agent.execution_surface.value}"
        ),
        impact=impact,
        detail=detail,
    )


def derive_agent_authority(org: Organization, domain: Domain, agent: Agent) -> AuthorityResult:
    """
    Derive authority for an agent node

    Effective level is min(organization, domain, agent autonomy).

    Example:
        org=3, domain=2, agent=2 (WRITE, EXECUTION) gives effective level 2,
        a three-entry source path and the blocked line
        "Blocked: Domain ceiling (2) reduces organization ceiling (3)".
    """
    effective = min(org.authority_ceiling, domain.authority_ceiling, agent.autonomy_level)

    blocked_actions = _agent_blocks(org, domain, agent)
    blocked_actions.extend(
        _threshold_blocks(
            effective,
            (
                f"Blocked: Effective authority ({effective}) restricts high-risk operations",
                f"Blocked: Effective authority ({effective}) restricts moderate-risk operations",
                f"Blocked: Effective authority ({effective}) restricts all non-advisory operations",
            ),
        )
    )

    if domain.authority_ceiling < org.authority_ceiling:
        domain_step = ReasoningStep(
            level=HierarchyLevel.DOMAIN,
            rule=f"Domain authority ceiling = {domain.authority_ceiling}",
            impact=ReasoningImpact.RESTRICT,
            detail="This domain restricts the scope of actions its agents can perform.",
        )
    else:
        domain_step = ReasoningStep(
            level=HierarchyLevel.DOMAIN,
            rule=f"Domain authority ceiling = {domain.authority_ceiling}",
            impact=ReasoningImpact.ALLOW,
            detail="This domain maintains the organization's level of authority.",
        )

    return AuthorityResult(
        effective_authority_level=effective,
        authority_source_path=[
            _organization_entry(org),
            _domain_entry(domain),
            AuthoritySourceEntry(
                level=HierarchyLevel.AGENT, name=agent.name, ceiling=agent.autonomy_level
            ),
        ],
        blocked_actions=blocked_actions,
        reasoning=[
            _organization_step(
                org,
                "This organization allows its domains and agents to operate with full authority.",
            ),
            domain_step,
            _agent_step(org, domain, agent),
        ],
    )
