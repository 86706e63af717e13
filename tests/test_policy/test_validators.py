"""
Tests for the three learning validators: EAPP, LPS boundaries, monotonicity

Each validator is independent. A learned policy needs all three to pass,
and none of them may ever let authority grow.
"""

import pytest

from authority_engine.policy.models import AuthorityDirection, LPSLayer
from authority_engine.policy.validators import (
    determine_affected_layers,
    determine_authority_direction,
    validate_eapp_compliance,
    validate_lps_boundaries,
    validate_monotonicity,
)
from authority_engine.staging.models import ProposalStatus, ProposedChangeType
from authority_engine.staging.proposals import generate_policy_states
from tests.helpers import make_proposal


def engine_generated(change_type: ProposedChangeType):
    """A proposal whose states are exactly what the engine writes"""
    before, after = generate_policy_states(change_type, "Reconciler X", "Update record")
    return make_proposal(change_type=change_type, before=before.description, after=after.description)


# EAPP compliance


def test_restrictive_confirmed_proposal_passes_eapp() -> None:
    result = validate_eapp_compliance(make_proposal())

    assert result.passed
    assert result.violations == []
    assert result.checks.drift_prevention.reason == (
        "Policy explicitly confirmed by human, no automatic propagation."
    )


@pytest.mark.parametrize(
    "justification,reason",
    [
        ("", "No human justification provided. Declared intent requires written reasoning."),
        ("   ", "No human justification provided. Declared intent requires written reasoning."),
        ("too short", "Justification is too brief. Declared intent requires substantive explanation."),
    ],
)
def test_declared_intent_requires_substantive_justification(justification: str, reason: str) -> None:
    result = validate_eapp_compliance(make_proposal(justification=justification))

    assert not result.passed
    assert not result.checks.declared_intent.passed
    assert result.violations == [f"declaredIntent: {reason}"]


def test_justification_minimum_is_configurable() -> None:
    result = validate_eapp_compliance(make_proposal(justification="too short"), 5)

    assert result.checks.declared_intent.passed


def test_elevation_fails_bounded_authority() -> None:
    result = validate_eapp_compliance(engine_generated(ProposedChangeType.AUTHORITY_ADJUSTMENT))

    assert not result.checks.bounded_authority.passed
    assert result.violations == [
        "boundedAuthority: Policy would increase authority. Bounded authority requires "
        "monotonic restriction."
    ]


def test_missing_reasoning_fails_explainability() -> None:
    result = validate_eapp_compliance(make_proposal(system_reasoning="  "))

    assert not result.checks.explainability.passed


def test_unconfirmed_proposal_fails_drift_prevention() -> None:
    result = validate_eapp_compliance(make_proposal(status=ProposalStatus.PROPOSED))

    assert result.violations == [
        "driftPrevention: Policy not explicitly confirmed. Drift prevention requires human "
        "confirmation."
    ]


# LPS boundaries


@pytest.mark.parametrize(
    "change_type,layers",
    [
        (ProposedChangeType.AUTHORITY_ADJUSTMENT, [LPSLayer.POLICY, LPSLayer.AUTHORITY]),
        (ProposedChangeType.ACTION_PERMISSION, [LPSLayer.POLICY, LPSLayer.CAPABILITY]),
        (ProposedChangeType.ESCALATION_RULE, [LPSLayer.POLICY]),
        (ProposedChangeType.NONE, [LPSLayer.POLICY]),
    ],
)
def test_affected_layers(change_type: ProposedChangeType, layers: list[LPSLayer]) -> None:
    assert determine_affected_layers(make_proposal(change_type=change_type)) == layers


def test_elevating_authority_layer_violates_lps() -> None:
    result = validate_lps_boundaries(engine_generated(ProposedChangeType.AUTHORITY_ADJUSTMENT))

    assert not result.valid
    assert result.reason == "Policy violates LPS layer boundaries."
    assert result.violations == [
        "AUTHORITY layer changes must be restrictive. Cannot elevate authority."
    ]


def test_restrictive_authority_change_respects_lps() -> None:
    result = validate_lps_boundaries(
        make_proposal(
            change_type=ProposedChangeType.AUTHORITY_ADJUSTMENT,
            after="Test Agent would have limited authority for Update record",
        )
    )

    assert result.valid
    assert result.reason == "Policy respects LPS layer boundaries."


# Monotonicity


@pytest.mark.parametrize(
    "change_type,direction",
    [
        (ProposedChangeType.AUTHORITY_ADJUSTMENT, AuthorityDirection.EXPAND),
        (ProposedChangeType.ACTION_PERMISSION, AuthorityDirection.EXPAND),
        (ProposedChangeType.ESCALATION_RULE, AuthorityDirection.EXPAND),
        (ProposedChangeType.NONE, AuthorityDirection.MAINTAIN),
    ],
)
def test_engine_generated_directions(
    change_type: ProposedChangeType, direction: AuthorityDirection
) -> None:
    """
    Test the direction of every proposal the engine itself writes

    Fun fact: every engine-generated "after" state except "No change needed"
    describes more autonomy, so monotonicity turns all of them away.
    """
    assert determine_authority_direction(engine_generated(change_type)) == direction


def test_expansion_is_invalid() -> None:
    result = validate_monotonicity(engine_generated(ProposedChangeType.ACTION_PERMISSION))

    assert not result.valid
    assert result.reason == "Authority direction is EXPAND (invalid)."
    assert len(result.violations) == 2


def test_restriction_is_valid() -> None:
    result = validate_monotonicity(make_proposal(after="Refunds requires escalation"))

    assert result.valid
    assert result.direction == AuthorityDirection.RESTRICT
    assert result.reason == "Authority direction is RESTRICT (valid)."


def test_expand_indicator_wins_over_restrict_indicator() -> None:
    proposal = make_proposal(after="Restricted to reads but permitted autonomously")

    assert determine_authority_direction(proposal) == AuthorityDirection.EXPAND
