"""
AuthorityEngine - Main façade class

The primary interface to the engine. It resolves ids against an
organization structure, runs the pure read path and routes human commands
through the staging and policy handlers, keeping the resulting records
addressable by id.

Example:
    >>> from authority_engine import AuthorityEngine
    >>> engine = AuthorityEngine.with_sample_data()
    >>> engine.authority_for_agent("agt-fin-recon").effective_authority_level
    2
    >>> staged = engine.stage_action("agt-fin-recon", "generic_update_record")
    >>> intent = engine.record_intent(staged.id, "POLICY_CHANGE", "Routine ledger correction")
    >>> proposal = engine.propose_policy(intent.id)
    >>> engine.confirm_proposal(proposal.proposal_id).learned_policy_id is not None
    True
"""

from authority_engine.authority.action_surface import derive_action_surface
from authority_engine.authority.derivation import (
    derive_agent_authority,
    derive_domain_authority,
    derive_organization_authority,
)
from authority_engine.authority.do_actions import derive_do_actions
from authority_engine.authority.models import (
    ActionSurface,
    AuthorityResult,
    DoAction,
    DoActionSurface,
    ExecutionReadiness,
    RuntimeVerdict,
)
from authority_engine.authority.readiness import PersonaAlignmentCheck, derive_execution_readiness
from authority_engine.authority.verdict import derive_runtime_verdict
from authority_engine.hierarchy.models import OrganizationStructure
from authority_engine.hierarchy.sample import sample_personas, sample_structure
from authority_engine.kernel.errors import (
    ApprovalIntentNotFound,
    DoActionNotFound,
    ProposalNotFound,
    StagedActionNotFound,
)
from authority_engine.kernel.governance_policy import GovernancePolicy
from authority_engine.kernel.ids import IdFactory, default_id_factory
from authority_engine.kernel.logging import get_logger
from authority_engine.kernel.metrics import (
    ethical_evaluations_total,
    readiness_states_total,
    record_derivation,
)
from authority_engine.kernel.time import RealTimeProvider, TimeProvider
from authority_engine.persona.ethics import EthicalEvaluationResult, evaluate_ethical_compatibility
from authority_engine.persona.models import PersonaIdentity, ProposedAction
from authority_engine.persona.registry import EthicalPersonaAlignment, PersonaRegistry
from authority_engine.policy.handlers import PolicyCommandHandlers
from authority_engine.policy.models import LearnedPolicy, OverrideScope, PolicyOverride, PolicyStatus
from authority_engine.policy.store import LearnedPolicyStore
from authority_engine.staging.actions import DEFAULT_ACTOR, mark_freshness
from authority_engine.staging.handlers import StagingCommandHandlers
from authority_engine.staging.models import (
    ApprovalIntent,
    ApprovalScope,
    PolicyChangeProposal,
    StagedAction,
)

logger = get_logger(__name__)


class AuthorityEngine:
    """
    Authority Engine main façade

    Provides a unified API for:
    - Authority derivation across organization, domain and agent
    - Action surfaces, do-actions, runtime verdicts and execution readiness
    - The ethical veto
    - Staging, approval and policy proposals
    - Learned-policy lifecycle and overrides
    """

    def __init__(
        self,
        structure: OrganizationStructure,
        governance_policy: GovernancePolicy | None = None,
        time_provider: TimeProvider | None = None,
        policy_store: LearnedPolicyStore | None = None,
        personas: PersonaRegistry | None = None,
        id_factory: IdFactory | None = None,
    ) -> None:
        """
        Initialize the engine

        Args:
            structure: Organization, domains and agents
            governance_policy: Safeguard parameters (uses defaults if None)
            time_provider: Time provider (uses real time if None)
            policy_store: Learned policy store (starts empty if None)
            personas: Persona registry (starts empty if None)
            id_factory: Record id generation
        """
        self.structure = structure
        self.governance_policy = governance_policy or GovernancePolicy()
        self.time_provider = time_provider or RealTimeProvider()
        self.policy_store = policy_store if policy_store is not None else LearnedPolicyStore()
        self.id_factory = id_factory or default_id_factory
        self.personas = (
            personas
            if personas is not None
            else PersonaRegistry(self.time_provider, self.id_factory)
        )

        self.staging_handlers = StagingCommandHandlers(
            self.time_provider, self.governance_policy, self.policy_store, self.id_factory
        )
        self.policy_handlers = PolicyCommandHandlers(
            self.time_provider, self.governance_policy, self.policy_store, self.id_factory
        )

        # Records produced by human commands, latest version per id
        self.staged_actions: dict[str, StagedAction] = {}
        self.approval_intents: dict[str, ApprovalIntent] = {}
        self.proposals: dict[str, PolicyChangeProposal] = {}

    @classmethod
    def with_sample_data(cls, time_provider: TimeProvider | None = None, **kwargs) -> "AuthorityEngine":
        """Engine over the sample organization, with sample personas registered"""
        engine = cls(sample_structure(), time_provider=time_provider, **kwargs)
        created_at = engine.time_provider.now()
        for agent_id, identity in sample_personas(created_at).items():
            engine.personas.register(agent_id, identity)
        return engine

    # Authority

    def authority_for_organization(self) -> AuthorityResult:
        record_derivation("organization_authority")
        return derive_organization_authority(self.structure.organization)

    def authority_for_domain(self, domain_id: str) -> AuthorityResult:
        """
        Raises:
            DomainNotFound: If the domain does not exist
        """
        domain = self.structure.get_domain(domain_id)
        record_derivation("domain_authority")
        return derive_domain_authority(self.structure.organization, domain)

    def authority_for_agent(self, agent_id: str) -> AuthorityResult:
        """
        Raises:
            AgentNotFound: If the agent does not exist
        """
        agent = self.structure.get_agent(agent_id)
        domain = self.structure.domain_for_agent(agent_id)
        record_derivation("agent_authority")
        result = derive_agent_authority(self.structure.organization, domain, agent)
        logger.debug(
            "Agent authority derived",
            agent_id=agent_id,
            effective_authority_level=result.effective_authority_level,
            blocked_actions=len(result.blocked_actions),
        )
        return result

    def action_surface(self, agent_id: str) -> ActionSurface:
        agent = self.structure.get_agent(agent_id)
        domain = self.structure.domain_for_agent(agent_id)
        authority = self.authority_for_agent(agent_id)
        record_derivation("action_surface")
        return derive_action_surface(agent, authority, domain, self.structure.organization)

    def do_actions(self, agent_id: str) -> DoActionSurface:
        agent = self.structure.get_agent(agent_id)
        domain = self.structure.domain_for_agent(agent_id)
        authority = self.authority_for_agent(agent_id)
        record_derivation("do_actions")
        return derive_do_actions(agent, authority, domain, self.structure.organization)

    def do_action(self, agent_id: str, action_id: str) -> DoAction:
        """
        Raises:
            AgentNotFound: If the agent does not exist
            DoActionNotFound: If the agent's catalogue has no such action
        """
        action = self.do_actions(agent_id).find(action_id)
        if action is None:
            raise DoActionNotFound(agent_id, action_id)
        return action

    def verdict(self, agent_id: str, action_id: str) -> RuntimeVerdict:
        agent = self.structure.get_agent(agent_id)
        domain = self.structure.domain_for_agent(agent_id)
        do_action = self.do_action(agent_id, action_id)
        authority = self.authority_for_agent(agent_id)
        record_derivation("runtime_verdict")
        return derive_runtime_verdict(
            agent,
            do_action,
            authority,
            domain,
            self.structure.organization,
            evaluated_at=self.time_provider.now(),
        )

    def persona_check(self) -> PersonaAlignmentCheck | None:
        """Ethics-backed persona gate once any persona is registered"""
        if len(self.personas) == 0:
            return None
        return EthicalPersonaAlignment(self.personas)

    def readiness(self, agent_id: str, action_id: str) -> ExecutionReadiness:
        agent = self.structure.get_agent(agent_id)
        domain = self.structure.domain_for_agent(agent_id)
        do_action = self.do_action(agent_id, action_id)
        authority = self.authority_for_agent(agent_id)
        verdict = self.verdict(agent_id, action_id)
        record_derivation("execution_readiness")
        readiness = derive_execution_readiness(
            agent,
            do_action,
            authority,
            verdict,
            domain,
            self.structure.organization,
            persona_check=self.persona_check(),
        )
        readiness_states_total.labels(state=readiness.state.value).inc()
        return readiness

    # Ethics

    def persona_for(self, agent_id: str) -> PersonaIdentity | None:
        self.structure.get_agent(agent_id)
        return self.personas.for_agent(agent_id)

    def evaluate_ethics(self, agent_id: str, action_id: str) -> EthicalEvaluationResult | None:
        """
        Run the ethical veto for an agent's do-action

        Returns:
            The evaluation, or None if the agent has no persona
        """
        persona = self.persona_for(agent_id)
        do_action = self.do_action(agent_id, action_id)
        if persona is None:
            return None

        result = evaluate_ethical_compatibility(persona, ProposedAction.from_do_action(do_action))
        ethical_evaluations_total.labels(verdict=result.verdict.value).inc()
        if result.blocked:
            logger.info(
                "Action ethically blocked",
                agent_id=agent_id,
                action_id=action_id,
                violated_commitments=result.violated_commitments,
            )
        return result

    # Staging and approval

    def stage_action(
        self, agent_id: str, action_id: str, staged_by: str = DEFAULT_ACTOR
    ) -> StagedAction:
        """
        Freeze an agent's do-action for human review

        The ethical veto runs first; a blocked action never reaches staging.

        Raises:
            EthicalVetoViolation: If the agent's persona blocks the action
            ActionNotStageable: If readiness is BLOCKED_HARD
        """
        ethics = self.evaluate_ethics(agent_id, action_id)
        staged = self.staging_handlers.handle_stage_action(
            self.structure.get_agent(agent_id),
            self.do_action(agent_id, action_id),
            self.verdict(agent_id, action_id),
            self.readiness(agent_id, action_id),
            self.authority_for_agent(agent_id),
            ethics=ethics,
            staged_by=staged_by,
        )
        self.staged_actions[staged.id] = staged
        return staged

    def get_staged_action(self, staged_action_id: str) -> StagedAction:
        try:
            return self.staged_actions[staged_action_id]
        except KeyError:
            raise StagedActionNotFound(staged_action_id) from None

    def list_staged_actions(self) -> list[StagedAction]:
        return list(self.staged_actions.values())

    def approve(self, staged_action_id: str, approved_by: str = DEFAULT_ACTOR) -> StagedAction:
        approved = self.staging_handlers.handle_approve(
            self.get_staged_action(staged_action_id), approved_by
        )
        self.staged_actions[approved.id] = approved
        return approved

    def reject(
        self, staged_action_id: str, reason: str, rejected_by: str = DEFAULT_ACTOR
    ) -> StagedAction:
        rejected = self.staging_handlers.handle_reject(
            self.get_staged_action(staged_action_id), reason, rejected_by
        )
        self.staged_actions[rejected.id] = rejected
        return rejected

    def check_freshness(self, staged_action_id: str) -> StagedAction:
        """Re-derive the agent's authority and flag the staged action if it moved"""
        staged = self.get_staged_action(staged_action_id)
        refreshed = mark_freshness(staged, self.authority_for_agent(staged.agent_id))
        self.staged_actions[refreshed.id] = refreshed
        return refreshed

    def record_intent(
        self,
        staged_action_id: str,
        scope: str | ApprovalScope,
        justification: str,
        conditions: str | None = None,
        created_by: str = DEFAULT_ACTOR,
    ) -> ApprovalIntent:
        """
        Record why a human approves a staged action

        Args:
            scope: INSTANCE_ONLY or POLICY_CHANGE

        Raises:
            JustificationRequired: If the justification is blank
        """
        if isinstance(scope, str):
            scope = ApprovalScope(scope)

        intent = self.staging_handlers.handle_record_intent(
            self.get_staged_action(staged_action_id),
            scope,
            justification,
            conditions,
            created_by,
        )
        self.approval_intents[intent.id] = intent
        return intent

    def get_approval_intent(self, intent_id: str) -> ApprovalIntent:
        try:
            return self.approval_intents[intent_id]
        except KeyError:
            raise ApprovalIntentNotFound(intent_id) from None

    # Proposals and learning

    def propose_policy(self, intent_id: str) -> PolicyChangeProposal | None:
        proposal = self.staging_handlers.handle_propose_policy(self.get_approval_intent(intent_id))
        if proposal is not None:
            self.proposals[proposal.proposal_id] = proposal
        return proposal

    def get_proposal(self, proposal_id: str) -> PolicyChangeProposal:
        try:
            return self.proposals[proposal_id]
        except KeyError:
            raise ProposalNotFound(proposal_id) from None

    def confirm_proposal(
        self, proposal_id: str, learned_by: str = DEFAULT_ACTOR
    ) -> PolicyChangeProposal:
        """
        Confirm a proposal; a learned policy is stored if validation passes

        Raises:
            InvalidStateTransition: If the proposal is not PROPOSED
        """
        confirmed = self.staging_handlers.handle_confirm_proposal(
            self.get_proposal(proposal_id), learned_by
        )
        self.proposals[proposal_id] = confirmed
        return confirmed

    def dismiss_proposal(self, proposal_id: str) -> PolicyChangeProposal:
        dismissed = self.staging_handlers.handle_dismiss_proposal(self.get_proposal(proposal_id))
        self.proposals[proposal_id] = dismissed
        return dismissed

    # Learned policies

    def list_learned_policies(self) -> list[LearnedPolicy]:
        return self.policy_store.list()

    def get_learned_policy(self, policy_id: str) -> LearnedPolicy:
        return self.policy_store.get(policy_id)

    def renew_policy(
        self, policy_id: str, review_interval_days: int | None = None
    ) -> LearnedPolicy:
        """
        Raises:
            PolicyNotFound: If the policy does not exist
            PolicyRenewalForbidden: If the policy has expired
            ReviewIntervalOutOfRange: If review_interval_days is not positive
        """
        return self.policy_handlers.handle_renew_policy(policy_id, review_interval_days)

    def let_policy_expire(self, policy_id: str) -> LearnedPolicy:
        return self.policy_handlers.handle_let_policy_expire(policy_id)

    def create_override(
        self,
        policy_id: str,
        scope: str | OverrideScope,
        reason: str,
        expiry_days: int,
        created_by: str = DEFAULT_ACTOR,
    ) -> PolicyOverride:
        """
        Shadow a learned policy for at most `override_max_days`

        Raises:
            PolicyNotFound: If the policy does not exist
            OverrideReasonTooShort: If the reason is too short
            OverrideExpiryOutOfRange: If expiry_days is out of range
        """
        if isinstance(scope, str):
            scope = OverrideScope(scope)
        return self.policy_handlers.handle_create_override(
            policy_id, scope, reason, expiry_days, created_by
        )

    def effective_policy_status(self, policy_id: str) -> PolicyStatus:
        return self.policy_handlers.effective_status(policy_id)

    def refresh_policy_statuses(self) -> list[LearnedPolicy]:
        """Apply time-driven review and expiry to every learned policy"""
        return self.policy_handlers.handle_refresh_statuses()

    def get_governance_policy(self) -> GovernancePolicy:
        return self.governance_policy
