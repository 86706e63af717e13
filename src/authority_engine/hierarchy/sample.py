"""
Sample hierarchy - Nebula Industries AI

A small but complete organization used by the CLI when no structure file
is given, and by tests that want realistic data: three domains with
different ceilings and six agents spanning every execution type and
surface. Each agent also has an authored persona identity.

Structures can be loaded from JSON files shaped like
`OrganizationStructure.model_dump(mode="json")`.
"""

from datetime import datetime
from pathlib import Path

from authority_engine.hierarchy.models import (
    Agent,
    CommunicationPosture,
    Domain,
    DomainStatus,
    EscalationBehavior,
    ExecutionSurface,
    ExecutionType,
    Organization,
    OrganizationStatus,
    OrganizationStructure,
)
from authority_engine.persona.models import (
    CapabilityPosture,
    CommunicationStyle,
    DomainBelonging,
    EthicalFrame,
    PersonaIdentity,
    RoleIdentity,
)

SAMPLE_AUTHOR = "system-init"


def sample_structure() -> OrganizationStructure:
    """Build the Nebula Industries AI hierarchy"""
    organization = Organization(
        id="org-001",
        name="Nebula Industries AI",
        status=OrganizationStatus.DRAFT,
        authority_ceiling=3,
        global_actions=["READ", "WRITE", "EXECUTE", "ESCALATE"],
        escalation_baseline="HUMAN_SENSITIVE",
        communication_posture=CommunicationPosture.BALANCED,
    )

    domains = [
        Domain(
            id="dom-fin",
            organization_id="org-001",
            name="Financial Operations",
            mission="Ensure accuracy and compliance in automated financial reporting.",
            status=DomainStatus.READY,
            authority_ceiling=2,
            # Report generation, data reconciliation, fraud detection
            allowed_action_categories=["DATA_ACCESS", "DATA_MODIFICATION", "REPORTING"],
            escalation_posture="HUMAN_SENSITIVE",
            scope="Financial reporting and compliance audit.",
            constraints=["All discrepancy reports require approval"],
        ),
        Domain(
            id="dom-cust",
            organization_id="org-001",
            name="Customer Experience",
            mission="Deliver responsive and empathetic support across digital channels.",
            status=DomainStatus.DRAFT,
            authority_ceiling=1,
            # Inquiry response, ticket triage, sentiment analysis
            allowed_action_categories=["DATA_ACCESS", "DATA_MODIFICATION", "ESCALATION"],
            escalation_posture="ALWAYS_AUTO",
            scope="Customer support and sentiment tracking.",
            constraints=["No access to billing data"],
        ),
        Domain(
            id="dom-tech",
            organization_id="org-001",
            name="Infrastructure Ops",
            mission="Maintain system stability and optimize resource allocation.",
            status=DomainStatus.DRAFT,
            authority_ceiling=3,
            # Log analysis, resource scaling, alert management
            allowed_action_categories=["DATA_ACCESS", "EXECUTION", "OPERATIONS", "ESCALATION"],
            escalation_posture="HUMAN_SENSITIVE",
            scope="System health monitoring and scaling.",
            constraints=["Production scaling requires limits"],
        ),
    ]

    agents = [
        Agent(
            id="agt-fin-audit",
            domain_id="dom-fin",
            name="Audit Sentinel",
            role="Compliance Auditor",
            execution_type=ExecutionType.ADVISORY,
            autonomy_level=1,
            execution_surface=ExecutionSurface.READ,
            escalation_behavior=EscalationBehavior.HUMAN_REQUIRED,
        ),
        Agent(
            id="agt-fin-recon",
            domain_id="dom-fin",
            name="Reconciler X",
            role="Transaction Matcher",
            execution_type=ExecutionType.EXECUTION,
            autonomy_level=2,
            execution_surface=ExecutionSurface.WRITE,
            escalation_behavior=EscalationBehavior.AUTO,
        ),
        Agent(
            id="agt-cust-triage",
            domain_id="dom-cust",
            name="Triage Mate",
            role="Ticket Router",
            execution_type=ExecutionType.DECISION,
            autonomy_level=2,
            execution_surface=ExecutionSurface.WRITE,
            escalation_behavior=EscalationBehavior.AUTO,
        ),
        Agent(
            id="agt-cust-resp",
            domain_id="dom-cust",
            name="Responder Bot",
            role="First Responder",
            execution_type=ExecutionType.EXECUTION,
            autonomy_level=1,
            execution_surface=ExecutionSurface.WRITE,
            escalation_behavior=EscalationBehavior.HUMAN_REQUIRED,
        ),
        Agent(
            id="agt-tech-mon",
            domain_id="dom-tech",
            name="System Watchdog",
            role="Monitor",
            execution_type=ExecutionType.ADVISORY,
            autonomy_level=3,
            execution_surface=ExecutionSurface.READ,
            escalation_behavior=EscalationBehavior.AUTO,
        ),
        Agent(
            id="agt-tech-scale",
            domain_id="dom-tech",
            name="AutoScaler",
            role="Resource Manager",
            execution_type=ExecutionType.EXECUTION,
            autonomy_level=3,
            execution_surface=ExecutionSurface.EXECUTE,
            escalation_behavior=EscalationBehavior.HUMAN_REQUIRED,
        ),
    ]

    return OrganizationStructure(organization=organization, domains=domains, agents=agents)


def _persona(
    agent_id: str,
    created_at: datetime,
    role_name: str,
    purpose: str,
    domain_id: str,
    domain_name: str,
    posture: CapabilityPosture,
    style: CommunicationStyle,
    principles: list[str],
    constraints: list[str],
    commitments: list[str],
) -> PersonaIdentity:
    return PersonaIdentity(
        persona_id=f"persona-{agent_id}",
        created_at=created_at,
        authored_by=SAMPLE_AUTHOR,
        role_identity=RoleIdentity(role_name=role_name, purpose_statement=purpose),
        domain_belonging=DomainBelonging(domain_id=domain_id, domain_name=domain_name),
        capability_posture=posture,
        communication_style=style,
        ethical_frame=EthicalFrame(
            eapp_principles=principles,
            constraints=constraints,
            immutable_commitments=commitments,
        ),
    )


def sample_personas(created_at: datetime) -> dict[str, PersonaIdentity]:
    """
    Persona identities for the sample agents, keyed by agent id

    Args:
        created_at: Timestamp recorded on every identity
    """
    return {
        "agt-cust-resp": _persona(
            "agt-cust-resp",
            created_at,
            "First Responder",
            "Delivers empathetic, timely responses to customer inquiries across digital channels.",
            "dom-cust",
            "Customer Experience",
            CapabilityPosture.OPERATIONAL,
            CommunicationStyle.EMPATHETIC,
            ["Transparency", "User Safety", "Non-Harm"],
            [
                "Must always identify as an automated system",
                "Must not access personally identifiable information without consent",
            ],
            [
                "Must escalate emotionally sensitive cases to a human",
                "Must not impersonate human staff",
            ],
        ),
        "agt-cust-triage": _persona(
            "agt-cust-triage",
            created_at,
            "Ticket Router",
            "Analyzes and routes customer requests to appropriate teams based on complexity and urgency.",
            "dom-cust",
            "Customer Experience",
            CapabilityPosture.ANALYTICAL,
            CommunicationStyle.NEUTRAL,
            ["Transparency", "Fairness"],
            [
                "Must explain routing decisions when requested",
                "Must not downgrade ticket priority without justification",
            ],
            ["Cannot dismiss or close tickets without human approval"],
        ),
        "agt-fin-audit": _persona(
            "agt-fin-audit",
            created_at,
            "Compliance Auditor",
            "Monitors financial transactions for compliance violations and anomalies.",
            "dom-fin",
            "Financial Operations",
            CapabilityPosture.ADVISORY,
            CommunicationStyle.CAUTIOUS,
            ["Accuracy", "Transparency", "Non-Harm"],
            [
                "Must flag all suspicious patterns for human review",
                "Must maintain audit trail for all investigations",
            ],
            [
                "Cannot modify financial records",
                "Cannot approve transactions",
                "Must report all compliance violations",
            ],
        ),
        "agt-fin-recon": _persona(
            "agt-fin-recon",
            created_at,
            "Transaction Matcher",
            "Reconciles financial transactions across systems to ensure data accuracy.",
            "dom-fin",
            "Financial Operations",
            CapabilityPosture.OPERATIONAL,
            CommunicationStyle.NEUTRAL,
            ["Accuracy", "Transparency"],
            [
                "Must escalate discrepancies above $10,000",
                "Must preserve original transaction data",
            ],
            [
                "Cannot delete or modify historical records",
                "Cannot bypass discrepancy reporting",
            ],
        ),
        "agt-tech-mon": _persona(
            "agt-tech-mon",
            created_at,
            "Infrastructure Monitor",
            "Continuously monitors system health and alerts on anomalies or degradation.",
            "dom-tech",
            "Infrastructure Ops",
            CapabilityPosture.ADVISORY,
            CommunicationStyle.CAUTIOUS,
            ["Reliability", "Transparency"],
            [
                "Must alert on all critical system failures",
                "Must not suppress alerting for convenience",
            ],
            ["Cannot disable security monitoring", "Cannot modify log data"],
        ),
        "agt-tech-scale": _persona(
            "agt-tech-scale",
            created_at,
            "Resource Manager",
            "Optimizes infrastructure resource allocation based on demand patterns.",
            "dom-tech",
            "Infrastructure Ops",
            CapabilityPosture.OPERATIONAL,
            CommunicationStyle.NEUTRAL,
            ["Reliability", "Cost Efficiency"],
            [
                "Must maintain minimum redundancy levels",
                "Must not scale down during peak hours",
            ],
            [
                "Cannot terminate production databases",
                "Must escalate cost overruns above threshold",
            ],
        ),
    }


def load_structure(path: str | Path) -> OrganizationStructure:
    """
    Load an organization structure from a JSON file

    Raises:
        pydantic.ValidationError: If the file does not describe a valid structure
    """
    return OrganizationStructure.model_validate_json(Path(path).read_text(encoding="utf-8"))


def dump_structure(structure: OrganizationStructure, path: str | Path) -> None:
    Path(path).write_text(structure.model_dump_json(indent=2), encoding="utf-8")
