"""
Test Helper Functions - Builders for hierarchy, persona and policy records

Provides reusable builders so each test states only the fields it cares
about. Everything else gets a sensible default.

Fun fact: The Builder pattern was formalized by the Gang of Four in 1994,
but test data builders were popularized by the growing programmer test
movement in the 2000s - we use them to keep tests readable and maintainable!
"""

from datetime import datetime, timezone

from authority_engine.authority.derivation import derive_agent_authority
from authority_engine.authority.do_actions import derive_do_actions
from authority_engine.authority.models import (
    Confidence,
    DecisionStatus,
    ExecutionReadiness,
    GateResult,
    ReadinessGates,
    ReadinessState,
    RuntimeVerdict,
    VerdictAction,
    VerdictActionCategory,
    VerdictDecision,
    VerdictReasoning,
    VerdictSubject,
)
from authority_engine.authority.readiness import READINESS_SUMMARIES, derive_execution_readiness
from authority_engine.authority.verdict import derive_runtime_verdict
from authority_engine.hierarchy.models import (
    Agent,
    Domain,
    EscalationBehavior,
    ExecutionSurface,
    ExecutionType,
    Organization,
)
from authority_engine.kernel.ids import SequentialIdFactory
from authority_engine.persona.models import (
    CapabilityPosture,
    CommunicationStyle,
    DomainBelonging,
    EthicalFrame,
    PersonaIdentity,
    RoleIdentity,
)
from authority_engine.policy.learning import derive_learned_policy
from authority_engine.policy.models import LearnedPolicy
from authority_engine.staging.actions import create_staged_action
from authority_engine.staging.models import (
    PolicyChangeProposal,
    PolicyState,
    ProposalScope,
    ProposalStatus,
    ProposedChangeType,
    StagedAction,
)

T0 = datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_org(ceiling: int = 3, **overrides) -> Organization:
    fields = {"id": "org-test", "name": "Test Org", "authority_ceiling": ceiling}
    fields.update(overrides)
    return Organization(**fields)


def make_domain(ceiling: int = 3, **overrides) -> Domain:
    fields = {
        "id": "dom-test",
        "organization_id": "org-test",
        "name": "Test Domain",
        "authority_ceiling": ceiling,
    }
    fields.update(overrides)
    return Domain(**fields)


def make_agent(
    autonomy_level: int = 3,
    surface: ExecutionSurface = ExecutionSurface.EXECUTE,
    execution_type: ExecutionType = ExecutionType.EXECUTION,
    escalation: EscalationBehavior = EscalationBehavior.AUTO,
    **overrides,
) -> Agent:
    """
    Builder for a test agent

    Defaults to the most capable configuration so each test narrows exactly
    one thing.
    """
    fields = {
        "id": "agt-test",
        "domain_id": "dom-test",
        "name": "Test Agent",
        "role": "Generalist",
        "execution_type": execution_type,
        "autonomy_level": autonomy_level,
        "execution_surface": surface,
        "escalation_behavior": escalation,
    }
    fields.update(overrides)
    return Agent(**fields)


def derive_for(org: Organization, domain: Domain, agent: Agent, action_id: str):
    """Return (authority, do_action) for one catalogue entry"""
    authority = derive_agent_authority(org, domain, agent)
    do_action = derive_do_actions(agent, authority, domain, org).find(action_id)
    assert do_action is not None, f"{action_id} not in catalogue"
    return authority, do_action


def make_persona(
    commitments: list[str] | None = None,
    constraints: list[str] | None = None,
    principles: list[str] | None = None,
) -> PersonaIdentity:
    return PersonaIdentity(
        persona_id="persona-test",
        created_at=T0,
        authored_by="test-author",
        role_identity=RoleIdentity(role_name="Tester", purpose_statement="Exercises the veto."),
        domain_belonging=DomainBelonging(domain_id="dom-test", domain_name="Test Domain"),
        capability_posture=CapabilityPosture.OPERATIONAL,
        communication_style=CommunicationStyle.NEUTRAL,
        ethical_frame=EthicalFrame(
            eapp_principles=principles or [],
            constraints=constraints or [],
            immutable_commitments=commitments or [],
        ),
    )


def gate(passed: bool) -> GateResult:
    return GateResult(passed=passed, reason="passed" if passed else "failed")


def make_readiness(
    state: ReadinessState,
    authority: bool = True,
    surface: bool = True,
    escalation: bool = True,
    persona: bool = True,
) -> ExecutionReadiness:
    """Readiness with hand-picked gates, for classification tests"""
    return ExecutionReadiness(
        state=state,
        gates=ReadinessGates(
            authority_alignment=gate(authority),
            action_surface_compatibility=gate(surface),
            escalation_resolution=gate(escalation),
            persona_alignment=gate(persona),
        ),
        summary=READINESS_SUMMARIES[state],
    )


def make_verdict(
    status: DecisionStatus = DecisionStatus.ALLOWED,
    confidence: Confidence = Confidence.HIGH,
) -> RuntimeVerdict:
    return RuntimeVerdict(
        verdict_id="verdict_agt-test_generic_update_record",
        subject=VerdictSubject(
            agent_id="agt-test",
            agent_name="Test Agent",
            domain_id="dom-test",
            organization_id="org-test",
        ),
        action=VerdictAction(
            action_id="generic_update_record",
            action_name="Update record",
            action_category=VerdictActionCategory.WRITE,
        ),
        decision=VerdictDecision(status=status, confidence=confidence),
        reasoning=VerdictReasoning(summary="Test verdict", applied_constraints=[]),
    )


def make_proposal(
    change_type: ProposedChangeType = ProposedChangeType.ACTION_PERMISSION,
    after: str = "Update record requires approval",
    before: str = "Update record runs autonomously",
    justification: str = "Ledger corrections must be reviewed by finance",
    status: ProposalStatus = ProposalStatus.CONFIRMED,
    system_reasoning: str = "If applied, updates would wait for a human.",
) -> PolicyChangeProposal:
    """
    Builder for a policy change proposal

    Defaults describe a restrictive, confirmed proposal that passes all
    three validators.
    """
    return PolicyChangeProposal(
        proposal_id="proposal-test",
        source_approval_intent_id="approval-test",
        created_at=T0,
        scope=ProposalScope.AGENT,
        target_id="agt-test",
        target_name="Test Agent",
        proposed_change_type=change_type,
        before_state=PolicyState(description=before),
        after_state=PolicyState(description=after),
        human_justification=justification,
        system_reasoning=system_reasoning,
        status=status,
        confirmed_at=T0 if status == ProposalStatus.CONFIRMED else None,
    )


def make_learned_policy(now: datetime = T0) -> LearnedPolicy:
    policy = derive_learned_policy(
        make_proposal(), now=now, id_factory=SequentialIdFactory()
    )
    assert policy is not None
    return policy


def stage(
    agent: Agent | None = None,
    domain: Domain | None = None,
    action_id: str = "generic_update_record",
    ethics=None,
    id_factory=None,
    persona_check=None,
) -> StagedAction:
    """Run the read path for one action and stage it at T0"""
    org = make_org()
    domain = domain or make_domain()
    agent = agent or make_agent()
    authority, do_action = derive_for(org, domain, agent, action_id)
    verdict = derive_runtime_verdict(agent, do_action, authority, domain, org)
    readiness = derive_execution_readiness(
        agent, do_action, authority, verdict, domain, org, persona_check=persona_check
    )
    return create_staged_action(
        agent,
        do_action,
        verdict,
        readiness,
        authority,
        T0,
        ethics=ethics,
        id_factory=id_factory or SequentialIdFactory(),
    )
