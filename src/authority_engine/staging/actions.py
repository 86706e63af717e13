"""
Staged Actions - Snapshot, approve, reject, record intent

Every function returns a new record and leaves its arguments untouched.
Transitions are only possible from STAGED; APPROVED and REJECTED are final.
Nothing here executes the underlying action.
"""

from datetime import datetime

from authority_engine.authority.models import (
    AuthorityResult,
    DoAction,
    ExecutionReadiness,
    RuntimeVerdict,
)
from authority_engine.hierarchy.models import Agent
from authority_engine.kernel.ids import IdFactory, default_id_factory
from authority_engine.persona.ethics import EthicalEvaluationResult
from authority_engine.staging.invariants import (
    normalize_justification,
    require_staged,
    validate_stageable,
)
from authority_engine.staging.models import (
    AlignmentStatus,
    ApprovalIntent,
    ApprovalScope,
    PersonaSnapshot,
    StagedAction,
    StagingState,
)

# Stands in for an authenticated user until identities are wired in
DEFAULT_ACTOR = "current-user"


def _persona_snapshot(ethics: EthicalEvaluationResult | None) -> PersonaSnapshot:
    if ethics is None:
        return PersonaSnapshot(
            alignment_status=AlignmentStatus.ALIGNED,
            note="Persona alignment check pending LPS integration",
        )
    return PersonaSnapshot(alignment_status=AlignmentStatus.ALIGNED, note=ethics.explanation)


def create_staged_action(
    agent: Agent,
    do_action: DoAction,
    verdict: RuntimeVerdict,
    readiness: ExecutionReadiness,
    authority: AuthorityResult,
    now: datetime,
    *,
    ethics: EthicalEvaluationResult | None = None,
    staged_by: str = DEFAULT_ACTOR,
    id_factory: IdFactory = default_id_factory,
) -> StagedAction:
    """
    Freeze a candidate action for human review

    Args:
        ethics: Result of the ethical veto for this action, if evaluated

    Raises:
        EthicalVetoViolation: If `ethics` is ETHICS_BLOCKED or the persona gate failed
        ActionNotStageable: If readiness is BLOCKED_HARD
    """
    validate_stageable(do_action.id, readiness, ethics)

    return StagedAction(
        id=id_factory.generate("staged"),
        staged_at=now,
        staged_by=staged_by,
        agent_id=agent.id,
        agent_name=agent.name,
        action_id=do_action.id,
        action_name=do_action.verb_phrase,
        runtime_verdict=verdict.model_copy(deep=True),
        execution_readiness=readiness.model_copy(deep=True),
        authority_result=authority.model_copy(deep=True),
        persona_alignment=_persona_snapshot(ethics),
        ethical_evaluation=ethics.model_copy(deep=True) if ethics is not None else None,
    )


def approve_staged_action(
    action: StagedAction, now: datetime, approved_by: str = DEFAULT_ACTOR
) -> StagedAction:
    """
    Raises:
        InvalidStateTransition: If the action is not STAGED
    """
    require_staged(action, "approve")
    return action.model_copy(
        update={
            "state": StagingState.APPROVED,
            "state_changed_at": now,
            "state_changed_by": approved_by,
        }
    )


def reject_staged_action(
    action: StagedAction, reason: str, now: datetime, rejected_by: str = DEFAULT_ACTOR
) -> StagedAction:
    """
    Raises:
        InvalidStateTransition: If the action is not STAGED
    """
    require_staged(action, "reject")
    return action.model_copy(
        update={
            "state": StagingState.REJECTED,
            "state_changed_at": now,
            "state_changed_by": rejected_by,
            "rejection_reason": reason,
        }
    )


def check_staged_action_freshness(
    staged_action: StagedAction, current_authority: AuthorityResult
) -> bool:
    """True if effective authority moved since the action was staged"""
    return (
        staged_action.authority_result.effective_authority_level
        != current_authority.effective_authority_level
    )


def mark_freshness(staged_action: StagedAction, current_authority: AuthorityResult) -> StagedAction:
    out_of_date = check_staged_action_freshness(staged_action, current_authority)
    if out_of_date == staged_action.is_out_of_date:
        return staged_action
    return staged_action.model_copy(update={"is_out_of_date": out_of_date})


def create_approval_intent(
    staged_action: StagedAction,
    scope: ApprovalScope,
    justification: str,
    conditions: str | None = None,
    *,
    now: datetime,
    created_by: str = DEFAULT_ACTOR,
    id_factory: IdFactory = default_id_factory,
) -> ApprovalIntent:
    """
    Record why a human approves a staged action

    The staged action itself is not transitioned; approving it is a
    separate command.

    Raises:
        InvalidStateTransition: If the action was already approved or rejected
        JustificationRequired: If the justification is empty after trimming
    """
    require_staged(staged_action, "record approval intent for")
    trimmed = normalize_justification(staged_action.id, justification)

    return ApprovalIntent(
        id=id_factory.generate("approval"),
        created_at=now,
        created_by=created_by,
        staged_action_id=staged_action.id,
        scope=scope,
        justification=trimmed,
        conditions=(conditions or "").strip() or None,
        agent_id=staged_action.agent_id,
        agent_name=staged_action.agent_name,
        action_name=staged_action.action_name,
        runtime_verdict_snapshot=staged_action.runtime_verdict,
        execution_readiness_snapshot=staged_action.execution_readiness,
    )
