"""
Authority - The pure read path

authority derivation → action surface → do-actions → runtime verdict →
execution readiness. Every function here is deterministic and leaves its
inputs untouched.
"""

from authority_engine.authority.action_surface import derive_action_surface
from authority_engine.authority.derivation import (
    derive_agent_authority,
    derive_domain_authority,
    derive_organization_authority,
)
from authority_engine.authority.do_actions import derive_do_actions
from authority_engine.authority.readiness import (
    PendingPersonaAlignment,
    PersonaAlignmentCheck,
    derive_execution_readiness,
)
from authority_engine.authority.verdict import derive_runtime_verdict

__all__ = [
    "derive_organization_authority",
    "derive_domain_authority",
    "derive_agent_authority",
    "derive_action_surface",
    "derive_do_actions",
    "derive_runtime_verdict",
    "derive_execution_readiness",
    "PersonaAlignmentCheck",
    "PendingPersonaAlignment",
]
