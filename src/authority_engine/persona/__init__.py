"""
Persona - Agent identity and the ethical veto

Ethics is evaluated before authority and its blocks are final.
"""

from authority_engine.persona.ethics import (
    EthicalEvaluationResult,
    EthicalVerdict,
    evaluate_ethical_compatibility,
    get_ethical_frame_summary,
    has_ethical_constraints,
)
from authority_engine.persona.models import (
    CapabilityPosture,
    CommunicationStyle,
    DomainBelonging,
    EthicalFrame,
    PersonaIdentity,
    ProposedAction,
    RoleIdentity,
)
from authority_engine.persona.registry import EthicalPersonaAlignment, PersonaRegistry

__all__ = [
    "CapabilityPosture",
    "CommunicationStyle",
    "DomainBelonging",
    "EthicalFrame",
    "PersonaIdentity",
    "ProposedAction",
    "RoleIdentity",
    "EthicalVerdict",
    "EthicalEvaluationResult",
    "evaluate_ethical_compatibility",
    "has_ethical_constraints",
    "get_ethical_frame_summary",
    "PersonaRegistry",
    "EthicalPersonaAlignment",
]
