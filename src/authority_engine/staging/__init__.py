"""
Staging - The human approval path

Candidate actions are frozen for review, approved or rejected, and an
approval can carry a written intent that may suggest a policy change.
Nothing in this package executes an action.
"""

from authority_engine.staging.models import (
    ApprovalIntent,
    ApprovalScope,
    PolicyChangeProposal,
    PolicyState,
    ProposalStatus,
    ProposedChangeType,
    StagedAction,
    StagingState,
)

__all__ = [
    "StagedAction",
    "StagingState",
    "ApprovalIntent",
    "ApprovalScope",
    "PolicyChangeProposal",
    "PolicyState",
    "ProposalStatus",
    "ProposedChangeType",
]
