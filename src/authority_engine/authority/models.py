"""
Authority Models - Derived values of the read path

Everything in this module is produced fresh by a derivation function and
owned by its caller. Nothing here is stored or cached by the engine.

The RuntimeVerdict's `execution` block is typed with Literal values so that a
verdict claiming an execution happened cannot even be constructed.
"""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from authority_engine.hierarchy.models import ExecutionSurface


class HierarchyLevel(str, Enum):
    ORGANIZATION = "ORGANIZATION"
    DOMAIN = "DOMAIN"
    AGENT = "AGENT"


class ReasoningImpact(str, Enum):
    ALLOW = "ALLOW"
    RESTRICT = "RESTRICT"


class AuthoritySourceEntry(BaseModel):
    """One level of the inheritance chain, root first"""

    level: HierarchyLevel
    name: str
    ceiling: int

    model_config = {"frozen": True}


class ReasoningStep(BaseModel):
    """
    Explanation of one level's contribution to effective authority

    Attributes:
        level: Hierarchy level this step describes
        rule: The numeric rule applied, e.g. "Domain authority ceiling = 2"
        impact: RESTRICT if this level narrowed what the level above allowed
        detail: Plain-language sentence for non-technical readers
    """

    level: HierarchyLevel
    rule: str
    impact: ReasoningImpact
    detail: str

    model_config = {"frozen": True}


class AuthorityResult(BaseModel):
    """
    Effective authority of a hierarchy node with its explanation

    Attributes:
        effective_authority_level: Minimum ceiling across the chain
        authority_source_path: Chain entries in root-to-leaf order
        blocked_actions: Additive "Blocked: ..." explanations
        reasoning: One step per level, root first
    """

    effective_authority_level: int
    authority_source_path: list[AuthoritySourceEntry]
    blocked_actions: list[str] = Field(default_factory=list)
    reasoning: list[ReasoningStep] = Field(default_factory=list)

    model_config = {"frozen": True}


# Action surface


class ActionState(str, Enum):
    ALLOWED = "ALLOWED"
    RESTRICTED = "RESTRICTED"
    BLOCKED = "BLOCKED"


class ActionCategory(str, Enum):
    """Coarse categories of the action surface"""

    READ_DATA = "READ_DATA"
    WRITE_DATA = "WRITE_DATA"
    MAKE_DECISIONS = "MAKE_DECISIONS"
    EXECUTE_ACTIONS = "EXECUTE_ACTIONS"
    ESCALATE_HUMAN = "ESCALATE_HUMAN"


class ActionStatus(BaseModel):
    category: ActionCategory
    label: str
    state: ActionState
    reason: str

    model_config = {"frozen": True}


class ActionSurface(BaseModel):
    """All five coarse categories, always in the same order"""

    actions: list[ActionStatus]

    model_config = {"frozen": True}

    def get(self, category: ActionCategory) -> ActionStatus:
        for status in self.actions:
            if status.category == category:
                return status
        raise KeyError(category)


# Do-actions


class DoActionCategory(str, Enum):
    DATA_ACCESS = "DATA_ACCESS"
    DATA_MODIFICATION = "DATA_MODIFICATION"
    DECISION_MAKING = "DECISION_MAKING"
    EXECUTION = "EXECUTION"
    ESCALATION = "ESCALATION"
    REPORTING = "REPORTING"
    OPERATIONS = "OPERATIONS"


class DoAction(BaseModel):
    """
    A concrete candidate action from a role catalogue

    `state` and `reason` are derived for one specific agent; the remaining
    fields come straight from the catalogue.
    """

    id: str
    verb_phrase: str
    category: DoActionCategory
    required_authority: int
    required_surface: ExecutionSurface
    state: ActionState
    reason: str

    model_config = {"frozen": True}


class DoActionSurface(BaseModel):
    actions: list[DoAction]

    model_config = {"frozen": True}

    def find(self, action_id: str) -> DoAction | None:
        for action in self.actions:
            if action.id == action_id:
                return action
        return None


# Runtime verdict


class VerdictActionCategory(str, Enum):
    READ = "READ"
    WRITE = "WRITE"
    DECIDE = "DECIDE"
    EXECUTE = "EXECUTE"
    ESCALATE = "ESCALATE"


class DecisionStatus(str, Enum):
    ALLOWED = "ALLOWED"
    BLOCKED = "BLOCKED"
    ESCALATION_REQUIRED = "ESCALATION_REQUIRED"


class Confidence(str, Enum):
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class ConstraintSource(str, Enum):
    """Attribution of an applied constraint, in canonical order"""

    ORGANIZATION = "ORGANIZATION"
    DOMAIN = "DOMAIN"
    AGENT = "AGENT"
    EAPP = "EAPP"
    RUNTIME = "RUNTIME"


class VerdictSubject(BaseModel):
    agent_id: str
    agent_name: str
    domain_id: str
    organization_id: str

    model_config = {"frozen": True}


class VerdictAction(BaseModel):
    action_id: str
    action_name: str
    action_category: VerdictActionCategory

    model_config = {"frozen": True}


class VerdictDecision(BaseModel):
    status: DecisionStatus
    confidence: Confidence

    model_config = {"frozen": True}


class AppliedConstraint(BaseModel):
    source: ConstraintSource
    description: str

    model_config = {"frozen": True}


class VerdictReasoning(BaseModel):
    summary: str
    applied_constraints: list[AppliedConstraint]

    model_config = {"frozen": True}


class ExecutionRecord(BaseModel):
    """Structurally fixed: an attempt is described, nothing is executed"""

    attempted: Literal[True] = True
    executed: Literal[False] = False
    execution_path: None = None

    model_config = {"frozen": True}


class EscalationDescriptor(BaseModel):
    required: Literal[True] = True
    reason: str
    expected_approver_role: str

    model_config = {"frozen": True}


class VerdictGuarantees(BaseModel):
    deterministic: Literal[True] = True
    reversible: Literal[True] = True
    persisted: Literal[False] = False
    executable: Literal[False] = False

    model_config = {"frozen": True}


class RuntimeVerdict(BaseModel):
    """
    What would happen if an agent attempted one do-action

    Explanatory only. `escalation` is present iff the decision status is
    ESCALATION_REQUIRED.
    """

    verdict_id: str
    evaluated_at: datetime | None = None
    subject: VerdictSubject
    action: VerdictAction
    decision: VerdictDecision
    reasoning: VerdictReasoning
    execution: ExecutionRecord = Field(default_factory=ExecutionRecord)
    escalation: EscalationDescriptor | None = None
    guarantees: VerdictGuarantees = Field(default_factory=VerdictGuarantees)

    model_config = {"frozen": True}

    @property
    def requires_escalation(self) -> bool:
        return self.decision.status == DecisionStatus.ESCALATION_REQUIRED


# Execution readiness


class ReadinessState(str, Enum):
    NOT_ELIGIBLE = "NOT_ELIGIBLE"
    ELIGIBLE_PENDING_APPROVAL = "ELIGIBLE_PENDING_APPROVAL"
    ELIGIBLE_AUTOMATIC = "ELIGIBLE_AUTOMATIC"
    BLOCKED_HARD = "BLOCKED_HARD"


class GateResult(BaseModel):
    passed: bool
    reason: str

    model_config = {"frozen": True}


class ReadinessGates(BaseModel):
    authority_alignment: GateResult
    action_surface_compatibility: GateResult
    escalation_resolution: GateResult
    persona_alignment: GateResult

    model_config = {"frozen": True}

    def all_passed(self) -> bool:
        return (
            self.authority_alignment.passed
            and self.action_surface_compatibility.passed
            and self.escalation_resolution.passed
            and self.persona_alignment.passed
        )


class ExecutionReadiness(BaseModel):
    state: ReadinessState
    gates: ReadinessGates
    summary: str

    model_config = {"frozen": True}
