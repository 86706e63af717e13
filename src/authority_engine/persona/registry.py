"""
Persona Registry - Explicit store of persona identities per agent

Constructed by the caller and injected wherever personas are needed; there
is no module-level registry. Identities are immutable, so the registry only
ever adds, looks up and (for resets) clears.
"""

from authority_engine.authority.models import DoAction, GateResult
from authority_engine.hierarchy.models import Agent
from authority_engine.kernel.errors import PersonaNotFound
from authority_engine.kernel.ids import IdFactory, default_id_factory
from authority_engine.kernel.logging import get_logger
from authority_engine.kernel.time import TimeProvider, default_time_provider
from authority_engine.persona.ethics import evaluate_ethical_compatibility
from authority_engine.persona.models import (
    CapabilityPosture,
    CommunicationStyle,
    DomainBelonging,
    EthicalFrame,
    PersonaIdentity,
    ProposedAction,
    RoleIdentity,
)

logger = get_logger(__name__)


class PersonaRegistry:
    """
    In-process store of persona identities

    Each agent has at most one persona. Registering a second identity for
    the same agent replaces the mapping, never the earlier identity record.
    """

    def __init__(
        self,
        time_provider: TimeProvider = default_time_provider,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        self.time_provider = time_provider
        self.id_factory = id_factory
        self._identities: dict[str, PersonaIdentity] = {}
        self._agent_to_persona: dict[str, str] = {}

    def create(
        self,
        agent_id: str,
        role_identity: RoleIdentity,
        domain_belonging: DomainBelonging,
        capability_posture: CapabilityPosture,
        communication_style: CommunicationStyle,
        ethical_frame: EthicalFrame,
        authored_by: str,
    ) -> PersonaIdentity:
        """Author a new identity and register it for the agent"""
        identity = PersonaIdentity(
            persona_id=self.id_factory.generate("persona"),
            created_at=self.time_provider.now(),
            authored_by=authored_by,
            role_identity=role_identity,
            domain_belonging=domain_belonging,
            capability_posture=capability_posture,
            communication_style=communication_style,
            ethical_frame=ethical_frame,
        )
        self.register(agent_id, identity)
        return identity

    def register(self, agent_id: str, identity: PersonaIdentity) -> None:
        self._identities[identity.persona_id] = identity
        self._agent_to_persona[agent_id] = identity.persona_id
        logger.debug(
            "Persona registered",
            agent_id=agent_id,
            persona_id=identity.persona_id,
        )

    def get(self, persona_id: str) -> PersonaIdentity:
        try:
            return self._identities[persona_id]
        except KeyError:
            raise PersonaNotFound(persona_id) from None

    def for_agent(self, agent_id: str) -> PersonaIdentity | None:
        persona_id = self._agent_to_persona.get(agent_id)
        if persona_id is None:
            return None
        return self._identities[persona_id]

    def list(self) -> list[PersonaIdentity]:
        return list(self._identities.values())

    def clear(self) -> None:
        self._identities.clear()
        self._agent_to_persona.clear()

    def __len__(self) -> int:
        return len(self._identities)


class EthicalPersonaAlignment:
    """
    Persona gate backed by the ethical veto

    Fails the gate when the agent's persona ethically blocks the do-action.
    Agents without a registered persona pass.
    """

    def __init__(self, registry: PersonaRegistry) -> None:
        self.registry = registry

    def check(self, agent: Agent, do_action: DoAction) -> GateResult:
        persona = self.registry.for_agent(agent.id)
        if persona is None:
            return GateResult(
                passed=True,
                reason="No persona identity is registered for this agent; no ethical constraints apply.",
            )

        result = evaluate_ethical_compatibility(persona, ProposedAction.from_do_action(do_action))
        if result.blocked:
            return GateResult(passed=False, reason=result.explanation)
        return GateResult(
            passed=True,
            reason="Persona alignment check passed. Action is compatible with agent's ethical frame.",
        )
