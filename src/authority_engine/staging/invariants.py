"""
Staging Invariants - Preconditions of every staging command

Pure functions that either return quietly (or a normalized value) or raise.
Handlers call these before building a new record, so a failed command never
leaves a half-made record behind.
"""

from authority_engine.authority.models import ExecutionReadiness, ReadinessState
from authority_engine.kernel.errors import (
    ActionNotStageable,
    EthicalVetoViolation,
    InvalidStateTransition,
    JustificationRequired,
)
from authority_engine.persona.ethics import EthicalEvaluationResult
from authority_engine.staging.models import (
    PolicyChangeProposal,
    ProposalStatus,
    StagedAction,
    StagingState,
)


def can_stage_action(readiness: ExecutionReadiness) -> bool:
    """Everything except BLOCKED_HARD may be staged for review"""
    return readiness.state != ReadinessState.BLOCKED_HARD


def validate_stageable(
    action_id: str,
    readiness: ExecutionReadiness,
    ethics: EthicalEvaluationResult | None = None,
) -> None:
    """
    Refuse hard-blocked and ethically blocked actions

    A failed persona gate counts as a veto even when `ethics` is not given.

    Raises:
        EthicalVetoViolation: If the ethical veto blocked the action
        ActionNotStageable: If readiness is BLOCKED_HARD
    """
    if ethics is not None and ethics.blocked:
        raise EthicalVetoViolation(action_id, ethics.explanation)
    persona_gate = readiness.gates.persona_alignment
    if not persona_gate.passed:
        raise EthicalVetoViolation(action_id, persona_gate.reason)
    if not can_stage_action(readiness):
        raise ActionNotStageable(action_id, readiness.state.value)


def require_staged(action: StagedAction, operation: str) -> None:
    """
    Raises:
        InvalidStateTransition: If the action already reached a terminal state
    """
    if action.state != StagingState.STAGED:
        raise InvalidStateTransition(
            entity="staged action",
            entity_id=action.id,
            current_state=action.state.value,
            operation=operation,
            allowed_states=[StagingState.STAGED.value],
        )


def require_proposed(proposal: PolicyChangeProposal, operation: str) -> None:
    if proposal.status != ProposalStatus.PROPOSED:
        raise InvalidStateTransition(
            entity="policy proposal",
            entity_id=proposal.proposal_id,
            current_state=proposal.status.value,
            operation=operation,
            allowed_states=[ProposalStatus.PROPOSED.value],
        )


def normalize_justification(staged_action_id: str, justification: str | None) -> str:
    """
    Return the trimmed justification

    Raises:
        JustificationRequired: If nothing but whitespace was given
    """
    trimmed = (justification or "").strip()
    if not trimmed:
        raise JustificationRequired(staged_action_id)
    return trimmed
