"""
Staging Models - Human-reviewable records of the write path

StagedAction: frozen snapshot of a verdict, its readiness and the authority
behind it, awaiting a human decision.
ApprovalIntent: a human's written reason for approving, with a scope.
PolicyChangeProposal: what policy change an approval would imply.

State machines (all terminal states are final):
    StagedAction:          STAGED → APPROVED | REJECTED
    PolicyChangeProposal:  PROPOSED → CONFIRMED | DISMISSED

None of these records executes anything. Approving a staged action records
a decision; confirming a proposal records consent to learn a restriction.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from authority_engine.authority.models import (
    AuthorityResult,
    ExecutionReadiness,
    RuntimeVerdict,
)
from authority_engine.persona.ethics import EthicalEvaluationResult


class StagingState(str, Enum):
    STAGED = "STAGED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class AlignmentStatus(str, Enum):
    ALIGNED = "ALIGNED"
    PENDING = "PENDING"


class PersonaSnapshot(BaseModel):
    alignment_status: AlignmentStatus
    note: str

    model_config = {"frozen": True}


class StagedAction(BaseModel):
    """
    Immutable snapshot of a candidate action awaiting review

    The verdict, readiness and authority are deep copies taken at staging
    time; later changes upstream never reach them. `is_out_of_date` is set
    by a freshness check, not by the engine on its own.
    """

    id: str
    staged_at: datetime
    staged_by: str

    agent_id: str
    agent_name: str
    action_id: str
    action_name: str

    runtime_verdict: RuntimeVerdict
    execution_readiness: ExecutionReadiness
    authority_result: AuthorityResult
    persona_alignment: PersonaSnapshot
    ethical_evaluation: EthicalEvaluationResult | None = None

    state: StagingState = StagingState.STAGED
    state_changed_at: datetime | None = None
    state_changed_by: str | None = None
    rejection_reason: str | None = None

    is_out_of_date: bool = False

    model_config = {"frozen": True}


class ApprovalScope(str, Enum):
    INSTANCE_ONLY = "INSTANCE_ONLY"  # This action, this time
    POLICY_CHANGE = "POLICY_CHANGE"  # Also suggest a policy change


class ApprovalIntent(BaseModel):
    """
    Recorded intent to approve a staged action

    Carries snapshots of the verdict and readiness so the proposal derived
    from it can be explained without looking anything up.
    """

    id: str
    created_at: datetime
    created_by: str

    staged_action_id: str

    scope: ApprovalScope
    justification: str
    conditions: str | None = None

    agent_id: str
    agent_name: str
    action_name: str
    runtime_verdict_snapshot: RuntimeVerdict
    execution_readiness_snapshot: ExecutionReadiness

    model_config = {"frozen": True}


class ProposalScope(str, Enum):
    ORGANIZATION = "ORGANIZATION"
    DOMAIN = "DOMAIN"
    AGENT = "AGENT"


class ProposedChangeType(str, Enum):
    AUTHORITY_ADJUSTMENT = "AUTHORITY_ADJUSTMENT"  # Adjust an authority level
    ACTION_PERMISSION = "ACTION_PERMISSION"  # Add action to the permitted set
    ESCALATION_RULE = "ESCALATION_RULE"  # Modify escalation policy
    NONE = "NONE"  # Nothing needs to change


class ProposalStatus(str, Enum):
    PROPOSED = "PROPOSED"
    CONFIRMED = "CONFIRMED"
    DISMISSED = "DISMISSED"


class PolicyState(BaseModel):
    description: str
    technical_details: str | None = None

    model_config = {"frozen": True}


class PolicyChangeProposal(BaseModel):
    """
    What the system would have to change for an approval to generalize

    Confirming a proposal applies nothing. It only allows the learning
    pipeline to attempt a restrictive learned policy.
    """

    proposal_id: str
    source_approval_intent_id: str
    created_at: datetime

    scope: ProposalScope
    target_id: str
    target_name: str

    proposed_change_type: ProposedChangeType
    before_state: PolicyState
    after_state: PolicyState

    human_justification: str
    system_reasoning: str

    status: ProposalStatus = ProposalStatus.PROPOSED
    confirmed_at: datetime | None = None
    dismissed_at: datetime | None = None

    learned_policy_id: str | None = None

    model_config = {"frozen": True}
