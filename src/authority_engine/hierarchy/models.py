"""
Hierarchy Models - Organization, Domain, Agent

The hierarchy is the source of every authority question the engine answers.
One Organization sets an absolute ceiling; its Domains may only narrow it;
Agents inside a Domain narrow it further with their own autonomy level.

All models are frozen: the engine reads them, never edits them. Editing the
structure is the job of whatever presentation layer owns it.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from authority_engine.kernel.errors import AgentNotFound, DomainNotFound


class OrganizationStatus(str, Enum):
    DRAFT = "DRAFT"
    LOCKED = "LOCKED"


class DomainStatus(str, Enum):
    DRAFT = "DRAFT"
    READY = "READY"


class CommunicationPosture(str, Enum):
    FORMAL = "FORMAL"
    BALANCED = "BALANCED"
    FRIENDLY = "FRIENDLY"


class ExecutionSurface(str, Enum):
    """
    How far an agent can reach into the world

    Ordered: READ < WRITE < EXECUTE. Use `level` for comparisons, never the
    string values.
    """

    READ = "READ"  # Observe only
    WRITE = "WRITE"  # Modify records
    EXECUTE = "EXECUTE"  # Take direct actions

    @property
    def level(self) -> int:
        return _SURFACE_LEVELS[self]

    def covers(self, required: "ExecutionSurface") -> bool:
        """True if this surface is at least as high as `required`"""
        return self.level >= required.level


_SURFACE_LEVELS = {
    ExecutionSurface.READ: 1,
    ExecutionSurface.WRITE: 2,
    ExecutionSurface.EXECUTE: 3,
}


class ExecutionType(str, Enum):
    """What kind of outcome an agent is trusted to produce"""

    ADVISORY = "ADVISORY"  # Recommends only
    DECISION = "DECISION"  # Decides, does not execute
    EXECUTION = "EXECUTION"  # Decides and executes


class EscalationBehavior(str, Enum):
    AUTO = "AUTO"
    HUMAN_REQUIRED = "HUMAN_REQUIRED"


class RoleFamily(str, Enum):
    """
    Family of roles sharing one do-action catalogue

    Classified once from the agent's free-text role. GENERIC is the
    declared fallback for roles that match no family.
    """

    SUPPORT = "SUPPORT"
    ANALYST = "ANALYST"
    OPERATIONS = "OPERATIONS"
    GENERIC = "GENERIC"

    @classmethod
    def classify(cls, role: str) -> "RoleFamily":
        """
        Map a free-text role onto a family by substring match

        Checked in order: support/customer, analyst/analytics,
        ops/operations/devops. First match wins.
        """
        role_lower = role.lower()
        for family, markers in _ROLE_MARKERS:
            if any(marker in role_lower for marker in markers):
                return family
        return cls.GENERIC


_ROLE_MARKERS: list[tuple[RoleFamily, tuple[str, ...]]] = [
    (RoleFamily.SUPPORT, ("support", "customer")),
    (RoleFamily.ANALYST, ("analyst", "analytics")),
    (RoleFamily.OPERATIONS, ("ops", "operations", "devops")),
]


class Organization(BaseModel):
    """
    Root of the hierarchy

    Attributes:
        id: Unique identifier
        name: Human-readable name
        status: DRAFT while being designed, LOCKED once adopted
        authority_ceiling: Absolute ceiling for the whole tree
        global_actions: Action kinds available anywhere in the organization
        escalation_baseline: Organization-wide escalation default
        communication_posture: Tone expected of agents
    """

    id: str
    name: str
    status: OrganizationStatus = OrganizationStatus.DRAFT
    authority_ceiling: int = Field(ge=0)
    global_actions: list[str] = Field(default_factory=list)
    escalation_baseline: str = "HUMAN_SENSITIVE"
    communication_posture: CommunicationPosture = CommunicationPosture.BALANCED

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "org-001",
                    "name": "Nebula Industries AI",
                    "status": "DRAFT",
                    "authority_ceiling": 3,
                    "global_actions": ["READ", "WRITE", "EXECUTE", "ESCALATE"],
                    "escalation_baseline": "HUMAN_SENSITIVE",
                    "communication_posture": "BALANCED",
                }
            ]
        },
    }


class Domain(BaseModel):
    """
    Area of responsibility inside the organization

    A domain's effective ceiling is min(domain, organization): it can only
    narrow authority, never widen it.

    Attributes:
        allowed_action_categories: Do-action categories (DATA_ACCESS,
            REPORTING, ...) the domain permits. None means unrestricted.
        constraints: Free-text operating constraints, informational only
    """

    id: str
    organization_id: str
    name: str
    mission: str = ""
    status: DomainStatus = DomainStatus.DRAFT
    authority_ceiling: int = Field(ge=0)
    allowed_action_categories: list[str] | None = None
    escalation_posture: str = "HUMAN_SENSITIVE"
    scope: str = ""
    constraints: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def permits_category(self, category: str) -> bool:
        if self.allowed_action_categories is None:
            return True
        return category in self.allowed_action_categories


class Agent(BaseModel):
    """
    An actor operating inside one domain

    Effective authority is min(organization, domain, autonomy_level).
    `role_family` is derived from `role` at construction unless given.
    """

    id: str
    domain_id: str
    name: str
    role: str
    execution_type: ExecutionType
    autonomy_level: int = Field(ge=0)
    execution_surface: ExecutionSurface
    escalation_behavior: EscalationBehavior
    role_family: RoleFamily = RoleFamily.GENERIC

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def classify_role(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("role_family") is None:
            data = {**data, "role_family": RoleFamily.classify(str(data.get("role", "")))}
        return data


class OrganizationStructure(BaseModel):
    """
    A complete hierarchy: one organization, its domains and their agents

    Only used for lookups; derivations take the individual entities.
    """

    organization: Organization
    domains: list[Domain] = Field(default_factory=list)
    agents: list[Agent] = Field(default_factory=list)

    model_config = {"frozen": True}

    def get_domain(self, domain_id: str) -> Domain:
        for domain in self.domains:
            if domain.id == domain_id:
                return domain
        raise DomainNotFound(domain_id)

    def get_agent(self, agent_id: str) -> Agent:
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        raise AgentNotFound(agent_id)

    def agents_in_domain(self, domain_id: str) -> list[Agent]:
        return [agent for agent in self.agents if agent.domain_id == domain_id]

    def domain_for_agent(self, agent_id: str) -> Domain:
        return self.get_domain(self.get_agent(agent_id).domain_id)
