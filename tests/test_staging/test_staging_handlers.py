"""
Tests for Staging Command Handlers

Handlers wire time, ids and the policy store into the pure staging
functions and count the outcome of every learning attempt.
"""

import pytest
from prometheus_client import REGISTRY

from authority_engine.authority.readiness import derive_execution_readiness
from authority_engine.authority.verdict import derive_runtime_verdict
from authority_engine.kernel.errors import InvalidStateTransition
from authority_engine.kernel.governance_policy import GovernancePolicy
from authority_engine.kernel.ids import SequentialIdFactory
from authority_engine.kernel.time import ManualTimeProvider
from authority_engine.policy.store import LearnedPolicyStore
from authority_engine.staging.handlers import StagingCommandHandlers
from authority_engine.staging.models import ApprovalScope, ProposalStatus, StagingState
from tests.helpers import derive_for, make_agent, make_domain, make_org, make_proposal


@pytest.fixture
def handlers(
    test_time: ManualTimeProvider,
    governance_policy: GovernancePolicy,
    policy_store: LearnedPolicyStore,
) -> StagingCommandHandlers:
    return StagingCommandHandlers(
        test_time, governance_policy, policy_store, SequentialIdFactory()
    )


def learning_count(outcome: str) -> float:
    return REGISTRY.get_sample_value(
        "authority_learning_attempts_total", {"outcome": outcome}
    ) or 0.0


def stage_with(handlers: StagingCommandHandlers, action_id: str = "generic_update_record", domain=None):
    org, domain, agent = make_org(), domain or make_domain(), make_agent()
    authority, do_action = derive_for(org, domain, agent, action_id)
    verdict = derive_runtime_verdict(agent, do_action, authority, domain, org)
    readiness = derive_execution_readiness(agent, do_action, authority, verdict, domain, org)
    return handlers.handle_stage_action(agent, do_action, verdict, readiness, authority)


def test_stage_approve_uses_injected_clock(
    handlers: StagingCommandHandlers, test_time: ManualTimeProvider
) -> None:
    staged = stage_with(handlers)
    assert staged.staged_at == test_time.now()

    test_time.advance_seconds(90)
    approved = handlers.handle_approve(staged, approved_by="reviewer")

    assert approved.state == StagingState.APPROVED
    assert approved.state_changed_at == test_time.now()


def test_reject_then_approve_fails(handlers: StagingCommandHandlers) -> None:
    rejected = handlers.handle_reject(stage_with(handlers), "Wrong ledger")

    with pytest.raises(InvalidStateTransition):
        handlers.handle_approve(rejected)


def test_full_path_to_proposal(handlers: StagingCommandHandlers) -> None:
    """Test stage, intent and proposal ids come from the injected factory"""
    staged = stage_with(handlers, "generic_make_decision", domain=make_domain(ceiling=1))
    intent = handlers.handle_record_intent(
        staged, ApprovalScope.POLICY_CHANGE, "Decisions here are routine"
    )
    proposal = handlers.handle_propose_policy(intent)

    assert staged.id == "staged-0001"
    assert intent.id == "approval-0001"
    assert proposal.proposal_id == "proposal-0001"


def test_instance_only_intent_has_no_proposal(handlers: StagingCommandHandlers) -> None:
    intent = handlers.handle_record_intent(
        stage_with(handlers), ApprovalScope.INSTANCE_ONLY, "Just this once"
    )

    assert handlers.handle_propose_policy(intent) is None


def test_confirm_counts_learned_outcome(
    handlers: StagingCommandHandlers, policy_store: LearnedPolicyStore
) -> None:
    before = learning_count("learned")

    confirmed = handlers.handle_confirm_proposal(make_proposal(status=ProposalStatus.PROPOSED))

    assert confirmed.learned_policy_id == "learned-0001"
    assert len(policy_store) == 1
    assert learning_count("learned") == before + 1


def test_confirm_counts_rejection_outcome(
    handlers: StagingCommandHandlers, policy_store: LearnedPolicyStore
) -> None:
    """Test that a too-short justification is counted as an EAPP rejection"""
    before = learning_count("rejected_eapp")

    confirmed = handlers.handle_confirm_proposal(
        make_proposal(status=ProposalStatus.PROPOSED, justification="ok")
    )

    assert confirmed.status == ProposalStatus.CONFIRMED
    assert confirmed.learned_policy_id is None
    assert len(policy_store) == 0
    assert learning_count("rejected_eapp") == before + 1


def test_dismiss(handlers: StagingCommandHandlers) -> None:
    dismissed = handlers.handle_dismiss_proposal(make_proposal(status=ProposalStatus.PROPOSED))

    assert dismissed.status == ProposalStatus.DISMISSED
