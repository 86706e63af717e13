"""
Persona Models - Who an agent is, independent of what it may do

A PersonaIdentity is authored by a human, frozen at creation and never
touched by authority derivation, policy learning or overrides. Its ethical
frame is the input to the ethical veto.

Identity layers, outermost first: role identity, domain belonging,
capability posture, communication style, ethical frame.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from authority_engine.authority.models import DoAction


class CapabilityPosture(str, Enum):
    """How the agent approaches work (not tied to permissions)"""

    ADVISORY = "ADVISORY"
    OPERATIONAL = "OPERATIONAL"
    ANALYTICAL = "ANALYTICAL"
    SUPERVISORY = "SUPERVISORY"

    def describe(self) -> str:
        return _POSTURE_DESCRIPTIONS[self]


_POSTURE_DESCRIPTIONS = {
    CapabilityPosture.ADVISORY: "Provides recommendations and guidance without direct execution",
    CapabilityPosture.OPERATIONAL: "Executes well-defined, routine operations within scope",
    CapabilityPosture.ANALYTICAL: "Analyzes information and generates reports and insights",
    CapabilityPosture.SUPERVISORY: "Oversees and coordinates other systems or agents",
}


class CommunicationStyle(str, Enum):
    NEUTRAL = "NEUTRAL"
    EMPATHETIC = "EMPATHETIC"
    DIRECTIVE = "DIRECTIVE"
    CAUTIOUS = "CAUTIOUS"

    def describe(self) -> str:
        return _STYLE_DESCRIPTIONS[self]


_STYLE_DESCRIPTIONS = {
    CommunicationStyle.NEUTRAL: "Factual and objective, without emotional coloring",
    CommunicationStyle.EMPATHETIC: "Warm and considerate, acknowledges user concerns",
    CommunicationStyle.DIRECTIVE: "Clear and authoritative, provides confident guidance",
    CommunicationStyle.CAUTIOUS: "Emphasizes risks, caveats, and potential uncertainties",
}


class RoleIdentity(BaseModel):
    role_name: str
    purpose_statement: str

    model_config = {"frozen": True}


class DomainBelonging(BaseModel):
    domain_id: str
    domain_name: str

    model_config = {"frozen": True}


class EthicalFrame(BaseModel):
    """
    Ethical commitments of a persona

    Attributes:
        eapp_principles: Named principles, e.g. "Transparency"
        constraints: Operational constraints, e.g. "Must not suppress alerting"
        immutable_commitments: Boundaries no approval can lift,
            e.g. "Cannot modify financial records"
    """

    eapp_principles: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)
    immutable_commitments: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class PersonaIdentity(BaseModel):
    persona_id: str
    created_at: datetime
    authored_by: str
    role_identity: RoleIdentity
    domain_belonging: DomainBelonging
    capability_posture: CapabilityPosture
    communication_style: CommunicationStyle
    ethical_frame: EthicalFrame

    model_config = {"frozen": True}


class ProposedAction(BaseModel):
    """
    Free-text action descriptor evaluated by the ethical veto

    Attributes:
        action_type: Short type label, matched together with the description
        description: What the action does, in words
        target_resource: Optional resource identifier
        parameters: Optional extra detail, not inspected by the veto
    """

    action_type: str
    description: str
    target_resource: str | None = None
    parameters: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @classmethod
    def from_do_action(cls, do_action: DoAction) -> "ProposedAction":
        return cls(
            action_type=do_action.category.value,
            description=do_action.verb_phrase,
            target_resource=do_action.id,
        )
