"""
Staging Handlers - Human commands on the approval path

Handlers are the orchestration layer. They:
1. Validate preconditions (via staging.invariants)
2. Build the new immutable record
3. Log the transition and count the outcome

All of the interesting rules live in staging.actions, staging.proposals
and policy.learning; handlers only wire time, ids and the policy store in
and make each command observable.
"""

from authority_engine.authority.models import (
    AuthorityResult,
    DoAction,
    ExecutionReadiness,
    RuntimeVerdict,
)
from authority_engine.hierarchy.models import Agent
from authority_engine.kernel.governance_policy import GovernancePolicy
from authority_engine.kernel.ids import IdFactory, default_id_factory
from authority_engine.kernel.logging import LogOperation, get_logger
from authority_engine.kernel.metrics import learning_attempts_total, track_command_duration
from authority_engine.kernel.time import TimeProvider
from authority_engine.persona.ethics import EthicalEvaluationResult
from authority_engine.policy.learning import validate_proposal
from authority_engine.policy.store import LearnedPolicyStore
from authority_engine.staging.actions import (
    DEFAULT_ACTOR,
    approve_staged_action,
    create_approval_intent,
    create_staged_action,
    reject_staged_action,
)
from authority_engine.staging.models import (
    ApprovalIntent,
    ApprovalScope,
    PolicyChangeProposal,
    StagedAction,
)
from authority_engine.staging.proposals import (
    confirm_policy_proposal,
    derive_policy_change_proposal,
    dismiss_policy_proposal,
)

logger = get_logger(__name__)


class StagingCommandHandlers:
    """
    Command handlers for staging, approval and proposals

    Stateless apart from the injected learned-policy store, which only
    `handle_confirm_proposal` writes to.
    """

    def __init__(
        self,
        time_provider: TimeProvider,
        governance_policy: GovernancePolicy,
        store: LearnedPolicyStore,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        """
        Args:
            time_provider: For timestamps (injectable for testing)
            governance_policy: Justification and lifecycle parameters
            store: Receives learned policies
            id_factory: Record id generation
        """
        self.time_provider = time_provider
        self.governance_policy = governance_policy
        self.store = store
        self.id_factory = id_factory

    @track_command_duration("stage_action")
    def handle_stage_action(
        self,
        agent: Agent,
        do_action: DoAction,
        verdict: RuntimeVerdict,
        readiness: ExecutionReadiness,
        authority: AuthorityResult,
        ethics: EthicalEvaluationResult | None = None,
        staged_by: str = DEFAULT_ACTOR,
    ) -> StagedAction:
        """
        Raises:
            EthicalVetoViolation: If the ethical veto blocked the action
            ActionNotStageable: If readiness is BLOCKED_HARD
        """
        with LogOperation(
            logger,
            "stage_action",
            agent_id=agent.id,
            action_id=do_action.id,
            readiness_state=readiness.state.value,
        ):
            staged = create_staged_action(
                agent,
                do_action,
                verdict,
                readiness,
                authority,
                self.time_provider.now(),
                ethics=ethics,
                staged_by=staged_by,
                id_factory=self.id_factory,
            )
            logger.info("Action staged", staged_action_id=staged.id)
            return staged

    @track_command_duration("approve_staged_action")
    def handle_approve(self, action: StagedAction, approved_by: str = DEFAULT_ACTOR) -> StagedAction:
        with LogOperation(logger, "approve_staged_action", staged_action_id=action.id):
            return approve_staged_action(action, self.time_provider.now(), approved_by)

    @track_command_duration("reject_staged_action")
    def handle_reject(
        self, action: StagedAction, reason: str, rejected_by: str = DEFAULT_ACTOR
    ) -> StagedAction:
        with LogOperation(logger, "reject_staged_action", staged_action_id=action.id, reason=reason):
            return reject_staged_action(action, reason, self.time_provider.now(), rejected_by)

    @track_command_duration("record_approval_intent")
    def handle_record_intent(
        self,
        action: StagedAction,
        scope: ApprovalScope,
        justification: str,
        conditions: str | None = None,
        created_by: str = DEFAULT_ACTOR,
    ) -> ApprovalIntent:
        """
        Raises:
            JustificationRequired: If the justification is blank
        """
        with LogOperation(
            logger,
            "record_approval_intent",
            staged_action_id=action.id,
            scope=scope.value,
            justification=justification,
            conditions=conditions,
        ):
            return create_approval_intent(
                action,
                scope,
                justification,
                conditions,
                now=self.time_provider.now(),
                created_by=created_by,
                id_factory=self.id_factory,
            )

    @track_command_duration("propose_policy_change")
    def handle_propose_policy(self, intent: ApprovalIntent) -> PolicyChangeProposal | None:
        proposal = derive_policy_change_proposal(
            intent, now=self.time_provider.now(), id_factory=self.id_factory
        )
        if proposal is None:
            logger.debug(
                "No policy proposal for instance-only approval",
                approval_intent_id=intent.id,
            )
            return None

        logger.info(
            "Policy change proposed",
            proposal_id=proposal.proposal_id,
            approval_intent_id=intent.id,
            change_type=proposal.proposed_change_type.value,
        )
        return proposal

    @track_command_duration("confirm_policy_proposal")
    def handle_confirm_proposal(
        self, proposal: PolicyChangeProposal, learned_by: str = DEFAULT_ACTOR
    ) -> PolicyChangeProposal:
        """
        Confirm a proposal and record the learning outcome

        Raises:
            InvalidStateTransition: If the proposal is not PROPOSED
        """
        with LogOperation(logger, "confirm_policy_proposal", proposal_id=proposal.proposal_id):
            confirmed = confirm_policy_proposal(
                proposal,
                self.store,
                now=self.time_provider.now(),
                id_factory=self.id_factory,
                policy=self.governance_policy,
                learned_by=learned_by,
            )

        if confirmed.learned_policy_id is not None:
            outcome = "learned"
        else:
            outcome = validate_proposal(confirmed, self.governance_policy).outcome
        learning_attempts_total.labels(outcome=outcome).inc()

        return confirmed

    @track_command_duration("dismiss_policy_proposal")
    def handle_dismiss_proposal(self, proposal: PolicyChangeProposal) -> PolicyChangeProposal:
        with LogOperation(logger, "dismiss_policy_proposal", proposal_id=proposal.proposal_id):
            return dismiss_policy_proposal(proposal, self.time_provider.now())
