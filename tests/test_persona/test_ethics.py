"""
Tests for the Ethical Veto

The veto matches prohibitions in a persona's ethical frame against an
action's description and type. Its blocks are final, so the matching rules
are pinned here word for word.

Fun fact: the keyword rule ignores words of three letters or fewer, which
is why "Cannot go to bed" prohibits nothing at all.
"""

import pytest

from authority_engine.persona.ethics import (
    ALLOWED_EXPLANATION,
    EthicalVerdict,
    action_violates,
    evaluate_ethical_compatibility,
    extract_keywords,
    format_block_reason,
    get_ethical_frame_summary,
    has_ethical_constraints,
    is_prohibition,
)
from authority_engine.persona.models import CapabilityPosture, CommunicationStyle, ProposedAction
from tests.helpers import make_persona


def action(description: str, action_type: str = "DATA_MODIFICATION") -> ProposedAction:
    return ProposedAction(action_type=action_type, description=description)


@pytest.mark.parametrize(
    "statement,expected",
    [
        ("Cannot modify financial records", True),
        ("Must never delete logs", True),
        ("Must not impersonate human staff", True),
        ("Is prohibited from sharing data", True),
        ("Sharing is not allowed", True),
        ("Forbidden to reboot", True),
        ("Must maintain audit trail", False),
    ],
)
def test_is_prohibition(statement: str, expected: bool) -> None:
    assert is_prohibition(statement) is expected


def test_extract_keywords_drops_short_and_stop_words() -> None:
    """Test that only words longer than three letters survive"""
    assert extract_keywords("Cannot modify financial records") == ["modify", "financial", "records"]
    assert extract_keywords("Must not change data that is from this system") == [
        "change",
        "data",
        "system",
    ]


def test_commitment_blocks_matching_action() -> None:
    persona = make_persona(commitments=["Cannot modify financial records"])

    result = evaluate_ethical_compatibility(persona, action("Modify financial ledger entry"))

    assert result.verdict == EthicalVerdict.ETHICS_BLOCKED
    assert result.blocked
    assert result.violated_commitments == ["Cannot modify financial records"]
    assert result.explanation == (
        "This action conflicts with the agent's ethical commitment to modify financial "
        "records. This restriction cannot be overridden."
    )


def test_keyword_may_match_action_type() -> None:
    """Test that the action type is searched as well as the description"""
    persona = make_persona(commitments=["Never bypass escalation"])

    assert action_violates(action("Route ticket", action_type="ESCALATION"), "Never bypass escalation")
    assert evaluate_ethical_compatibility(
        persona, action("Route ticket", action_type="ESCALATION")
    ).blocked


def test_non_prohibition_never_blocks() -> None:
    """Test that positive statements are not scanned for keywords"""
    persona = make_persona(constraints=["Must maintain audit trail for records"])

    result = evaluate_ethical_compatibility(persona, action("Update records"))

    assert result.verdict == EthicalVerdict.ETHICS_ALLOWED
    assert result.explanation == ALLOWED_EXPLANATION
    assert result.violated_commitments == []


def test_commitments_reported_before_constraints() -> None:
    """Test that the first violation, a commitment, drives the explanation"""
    persona = make_persona(
        commitments=["Cannot delete customer records"],
        constraints=["Must not touch records without consent"],
    )

    result = evaluate_ethical_compatibility(persona, action("Delete stale records"))

    assert result.violated_commitments == [
        "Cannot delete customer records",
        "Must not touch records without consent",
    ]
    assert "delete customer records" in result.explanation


def test_empty_frame_allows_everything() -> None:
    persona = make_persona()

    assert not evaluate_ethical_compatibility(persona, action("Delete everything")).blocked
    assert not has_ethical_constraints(persona)
    assert get_ethical_frame_summary(persona) == "No ethical constraints defined"


def test_format_block_reason_strips_leading_prohibition() -> None:
    assert format_block_reason("Must not impersonate human staff") == (
        "This action conflicts with the agent's ethical commitment to impersonate human "
        "staff. This restriction cannot be overridden."
    )


def test_frame_summary_counts() -> None:
    persona = make_persona(
        commitments=["Cannot a", "Cannot b", "Cannot c"],
        constraints=["Must x", "Must y"],
        principles=["Accuracy", "Transparency", "Non-Harm"],
    )

    assert get_ethical_frame_summary(persona) == (
        "3 EAPP principle(s), 3 immutable commitment(s), 2 operational constraint(s)"
    )
    assert has_ethical_constraints(persona)


def test_posture_and_style_descriptions() -> None:
    assert CapabilityPosture.ADVISORY.describe() == (
        "Provides recommendations and guidance without direct execution"
    )
    assert CommunicationStyle.CAUTIOUS.describe() == (
        "Emphasizes risks, caveats, and potential uncertainties"
    )
