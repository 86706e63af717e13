"""
Governance Policy - Tunable parameters of the engine's safeguards

The GovernancePolicy collects every numeric limit the write path enforces:
how long a learned policy lives before review and expiry, how long an
override may shadow a policy, and how much written justification a human
must give. Derivation rules themselves (authority thresholds, gate folding)
are fixed and not configurable.
"""

from typing import Self

from pydantic import BaseModel, Field, model_validator


class GovernancePolicy(BaseModel):
    """
    Safeguard parameters

    Defaults are conservative: learned policies need review every quarter
    and lapse after half a year; overrides can never outlive a month.
    """

    policy_version: str = Field(
        default="1.0",
        description="Policy version for tracking changes over time",
    )

    # Authority scale
    max_authority_level: int = Field(
        default=3,
        ge=1,
        description="Highest authority level on the ceiling scale",
    )

    # Learned policy lifecycle (mandatory review and expiry)
    policy_review_interval_days: int = Field(
        default=90,
        ge=1,
        description="Days from creation (or last review) until a learned policy needs review",
    )

    policy_expiry_days: int = Field(
        default=180,
        ge=1,
        description="Days from creation until a learned policy expires",
    )

    renewal_expiry_multiplier: int = Field(
        default=2,
        ge=1,
        description="On renewal, expiry is set to this many review intervals from now",
    )

    # Overrides (time-bound shadows)
    override_max_days: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Maximum lifetime of a policy override",
    )

    override_reason_min_length: int = Field(
        default=10,
        ge=1,
        description="Minimum characters of written reason for an override",
    )

    # Declared intent
    justification_min_length: int = Field(
        default=10,
        ge=1,
        description="Minimum characters of justification for a policy to be learned",
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "description": "Safeguard parameters for staging, learning and overrides"
        },
    }

    @model_validator(mode="after")
    def check_expiry_after_review(self) -> Self:
        """A policy must come up for review before it expires"""
        if self.policy_expiry_days <= self.policy_review_interval_days:
            raise ValueError(
                f"policy_expiry_days ({self.policy_expiry_days}) must exceed "
                f"policy_review_interval_days ({self.policy_review_interval_days})"
            )
        return self


default_governance_policy = GovernancePolicy()
