"""
Policy Validators - The three gates between a proposal and a learned policy

EAPP compliance: declared intent, bounded authority, explainability and
drift prevention.
LPS boundaries: which layers the change touches, and whether it may.
Monotonicity: a learned policy may restrict or maintain authority, never
expand it.

Each validator is independent and pure. A proposal becomes a learned
policy only if all three pass.

Authority direction is read from fixed indicator phrases in the after-state
text. The phrase lists are deliberately literal; the proposal texts they
scan are generated by the engine itself.
"""

from authority_engine.policy.models import (
    AuthorityDirection,
    EAPPChecks,
    EAPPValidation,
    LPSLayer,
    MonotonicityValidation,
    ValidationCheck,
    ValidationResult,
)
from authority_engine.staging.models import (
    PolicyChangeProposal,
    ProposalStatus,
    ProposedChangeType,
)

DEFAULT_MIN_JUSTIFICATION_LENGTH = 10

EXPAND_INDICATORS = (
    "elevated authority",
    "would have elevated",
    "increased to permit",
    "permitted autonomously",
    "not require escalation",
    "greater autonomy",
)

RESTRICT_INDICATORS = (
    "requires approval",
    "limited authority",
    "requires escalation",
    "not permitted",
    "restricted to",
)

FORBIDDEN_LAYER_MESSAGES = {
    LPSLayer.IDENTITY: "Cannot modify IDENTITY layer. Core values are immutable.",
    LPSLayer.MANDATE: "Cannot modify MANDATE layer. Purpose is immutable.",
    LPSLayer.EXECUTION: "Cannot modify EXECUTION layer. Execution is out of scope for policy learning.",
}


# EAPP compliance


def check_declared_intent(
    proposal: PolicyChangeProposal,
    min_length: int = DEFAULT_MIN_JUSTIFICATION_LENGTH,
) -> ValidationCheck:
    justification = (proposal.human_justification or "").strip()
    if not justification:
        return ValidationCheck(
            passed=False,
            reason="No human justification provided. Declared intent requires written reasoning.",
        )
    if len(justification) < min_length:
        return ValidationCheck(
            passed=False,
            reason="Justification is too brief. Declared intent requires substantive explanation.",
        )
    return ValidationCheck(passed=True, reason="Human justification provided with clear intent.")


def check_bounded_authority(proposal: PolicyChangeProposal) -> ValidationCheck:
    expands = (
        proposal.proposed_change_type == ProposedChangeType.AUTHORITY_ADJUSTMENT
        and "would have elevated" in proposal.after_state.description
    )
    if expands:
        return ValidationCheck(
            passed=False,
            reason="Policy would increase authority. Bounded authority requires monotonic restriction.",
        )
    return ValidationCheck(passed=True, reason="Policy does not increase authority.")


def check_explainability(proposal: PolicyChangeProposal) -> ValidationCheck:
    if not proposal.before_state.description or not proposal.after_state.description:
        return ValidationCheck(
            passed=False,
            reason="Before/after states missing. Explainability requires clear state comparison.",
        )
    if not proposal.system_reasoning.strip():
        return ValidationCheck(
            passed=False,
            reason="System reasoning missing. Explainability requires generated explanation.",
        )
    return ValidationCheck(passed=True, reason="Policy includes what changed, why, and impact.")


def check_drift_prevention(proposal: PolicyChangeProposal) -> ValidationCheck:
    if proposal.status != ProposalStatus.CONFIRMED:
        return ValidationCheck(
            passed=False,
            reason="Policy not explicitly confirmed. Drift prevention requires human confirmation.",
        )
    return ValidationCheck(
        passed=True,
        reason="Policy explicitly confirmed by human, no automatic propagation.",
    )


def validate_eapp_compliance(
    proposal: PolicyChangeProposal,
    min_justification_length: int = DEFAULT_MIN_JUSTIFICATION_LENGTH,
) -> EAPPValidation:
    """
    Run the four EAPP checks

    Violations are reported as "<check>: <reason>" in check order.
    """
    checks = EAPPChecks(
        declared_intent=check_declared_intent(proposal, min_justification_length),
        bounded_authority=check_bounded_authority(proposal),
        explainability=check_explainability(proposal),
        drift_prevention=check_drift_prevention(proposal),
    )

    named_checks = [
        ("declaredIntent", checks.declared_intent),
        ("boundedAuthority", checks.bounded_authority),
        ("explainability", checks.explainability),
        ("driftPrevention", checks.drift_prevention),
    ]
    violations = [f"{name}: {check.reason}" for name, check in named_checks if not check.passed]

    return EAPPValidation(passed=not violations, checks=checks, violations=violations)


# LPS boundaries


def determine_affected_layers(proposal: PolicyChangeProposal) -> list[LPSLayer]:
    """POLICY always; AUTHORITY or CAPABILITY in addition depending on change type"""
    layers = [LPSLayer.POLICY]
    if proposal.proposed_change_type == ProposedChangeType.AUTHORITY_ADJUSTMENT:
        layers.append(LPSLayer.AUTHORITY)
    elif proposal.proposed_change_type == ProposedChangeType.ACTION_PERMISSION:
        layers.append(LPSLayer.CAPABILITY)
    return layers


def validate_lps_boundaries(proposal: PolicyChangeProposal) -> ValidationResult:
    layers = determine_affected_layers(proposal)

    violations = [
        message for layer, message in FORBIDDEN_LAYER_MESSAGES.items() if layer in layers
    ]

    if LPSLayer.AUTHORITY in layers:
        elevates = (
            proposal.proposed_change_type == ProposedChangeType.AUTHORITY_ADJUSTMENT
            and "elevated" in proposal.after_state.description
        )
        if elevates:
            violations.append(
                "AUTHORITY layer changes must be restrictive. Cannot elevate authority."
            )

    valid = not violations
    return ValidationResult(
        valid=valid,
        reason=(
            "Policy respects LPS layer boundaries."
            if valid
            else "Policy violates LPS layer boundaries."
        ),
        violations=violations,
    )


# Monotonicity


def determine_authority_direction(proposal: PolicyChangeProposal) -> AuthorityDirection:
    after = proposal.after_state.description.lower()
    if any(indicator in after for indicator in EXPAND_INDICATORS):
        return AuthorityDirection.EXPAND
    if any(indicator in after for indicator in RESTRICT_INDICATORS):
        return AuthorityDirection.RESTRICT
    return AuthorityDirection.MAINTAIN


def validate_monotonicity(proposal: PolicyChangeProposal) -> MonotonicityValidation:
    direction = determine_authority_direction(proposal)

    if direction == AuthorityDirection.EXPAND:
        return MonotonicityValidation(
            valid=False,
            direction=direction,
            reason=f"Authority direction is {direction.value} (invalid).",
            violations=[
                "Policy would increase authority. Monotonic constraint violated.",
                "Learned policies can only restrict or maintain authority, never expand.",
            ],
        )

    return MonotonicityValidation(
        valid=True,
        direction=direction,
        reason=f"Authority direction is {direction.value} (valid).",
    )
