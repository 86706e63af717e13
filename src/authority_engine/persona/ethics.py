"""
Ethical Veto - Non-overridable check of an action against a persona

Each immutable commitment, then each operational constraint, is scanned for
a prohibition ("cannot", "never", "must not", ...). For a prohibition, the
remaining words longer than three letters are keywords; any keyword found
in the action's description or type is a violation.

The first violation decides the explanation. An ETHICS_BLOCKED result is
final: staging refuses it and no approval, learned policy or override can
turn it around.

Matching is plain substring search over fixed English phrase lists, so a
rephrased action can slip past it. It is kept as is; changing it would
change which actions are blocked.
"""

import re
from enum import Enum

from pydantic import BaseModel, Field

from authority_engine.persona.models import PersonaIdentity, ProposedAction

PROHIBITION_TERMS = ("cannot", "never", "must not", "prohibited from", "not allowed", "forbidden")

STOP_WORDS = frozenset({"this", "that", "with", "from", "have"})

_PROHIBITION_PATTERN = re.compile(
    r"cannot|never|must not|not allowed|prohibited from|forbidden"
)
_LEADING_PROHIBITION = re.compile(
    r"^(?:cannot|never|must not|not allowed to|prohibited from)\s+", re.IGNORECASE
)

ALLOWED_EXPLANATION = "Action is compatible with agent's ethical frame."


class EthicalVerdict(str, Enum):
    ETHICS_ALLOWED = "ETHICS_ALLOWED"
    ETHICS_BLOCKED = "ETHICS_BLOCKED"


class EthicalEvaluationResult(BaseModel):
    verdict: EthicalVerdict
    explanation: str
    violated_commitments: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def blocked(self) -> bool:
        return self.verdict == EthicalVerdict.ETHICS_BLOCKED


def is_prohibition(statement: str) -> bool:
    lower = statement.lower()
    return any(term in lower for term in PROHIBITION_TERMS)


def extract_keywords(statement: str) -> list[str]:
    """
    Words of a prohibition that identify what is prohibited

    Example:
        >>> extract_keywords("Cannot modify financial records")
        ['modify', 'financial', 'records']
    """
    cleaned = _PROHIBITION_PATTERN.sub("", statement.lower())
    return [
        word for word in cleaned.split() if len(word) > 3 and word not in STOP_WORDS
    ]


def action_violates(action: ProposedAction, statement: str) -> bool:
    if not is_prohibition(statement):
        return False

    description = action.description.lower()
    action_type = action.action_type.lower()
    return any(
        keyword in description or keyword in action_type
        for keyword in extract_keywords(statement)
    )


def format_block_reason(violation: str) -> str:
    cleaned = _LEADING_PROHIBITION.sub("", violation.strip())
    if cleaned:
        cleaned = cleaned[0].lower() + cleaned[1:]
    return (
        f"This action conflicts with the agent's ethical commitment to {cleaned}. "
        "This restriction cannot be overridden."
    )


def evaluate_ethical_compatibility(
    persona: PersonaIdentity, proposed_action: ProposedAction
) -> EthicalEvaluationResult:
    """
    Evaluate a proposed action against the persona's ethical frame

    Returns:
        ETHICS_BLOCKED with every violated statement (commitments first)
        and an explanation built from the first one, or ETHICS_ALLOWED
    """
    frame = persona.ethical_frame
    violations = [
        statement
        for statement in [*frame.immutable_commitments, *frame.constraints]
        if action_violates(proposed_action, statement)
    ]

    if violations:
        return EthicalEvaluationResult(
            verdict=EthicalVerdict.ETHICS_BLOCKED,
            explanation=format_block_reason(violations[0]),
            violated_commitments=violations,
        )

    return EthicalEvaluationResult(
        verdict=EthicalVerdict.ETHICS_ALLOWED,
        explanation=ALLOWED_EXPLANATION,
    )


def has_ethical_constraints(persona: PersonaIdentity) -> bool:
    frame = persona.ethical_frame
    return bool(frame.immutable_commitments or frame.constraints or frame.eapp_principles)


def get_ethical_frame_summary(persona: PersonaIdentity) -> str:
    """E.g. "3 EAPP principle(s), 3 immutable commitment(s), 2 operational constraint(s)" """
    frame = persona.ethical_frame
    parts = []
    if frame.eapp_principles:
        parts.append(f"{len(frame.eapp_principles)} EAPP principle(s)")
    if frame.immutable_commitments:
        parts.append(f"{len(frame.immutable_commitments)} immutable commitment(s)")
    if frame.constraints:
        parts.append(f"{len(frame.constraints)} operational constraint(s)")

    if not parts:
        return "No ethical constraints defined"
    return ", ".join(parts)
