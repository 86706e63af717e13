"""
Hierarchy - Organization, Domain and Agent entities

Authority flows strictly downwards: organization ceiling, then domain
ceiling, then agent autonomy.
"""

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
    RoleFamily,
)

__all__ = [
    "Agent",
    "CommunicationPosture",
    "Domain",
    "DomainStatus",
    "EscalationBehavior",
    "ExecutionSurface",
    "ExecutionType",
    "Organization",
    "OrganizationStatus",
    "OrganizationStructure",
    "RoleFamily",
]
