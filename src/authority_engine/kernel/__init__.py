"""
Kernel - Shared infrastructure for the Authority Engine

Clock and id injection, the error hierarchy, safeguard parameters,
structured logging and metrics. Nothing in here knows about organizations
or agents.
"""

from authority_engine.kernel.errors import (
    AuthorityEngineError,
    InputConstraintViolation,
    InvalidStateTransition,
    InvariantViolation,
    NotFoundError,
)
from authority_engine.kernel.governance_policy import GovernancePolicy
from authority_engine.kernel.ids import DefaultIdFactory, IdFactory, SequentialIdFactory, generate_id
from authority_engine.kernel.time import ManualTimeProvider, RealTimeProvider, TimeProvider

__all__ = [
    # IDs
    "IdFactory",
    "DefaultIdFactory",
    "SequentialIdFactory",
    "generate_id",
    # Time
    "TimeProvider",
    "RealTimeProvider",
    "ManualTimeProvider",
    # Config
    "GovernancePolicy",
    # Errors
    "AuthorityEngineError",
    "InvariantViolation",
    "InvalidStateTransition",
    "InputConstraintViolation",
    "NotFoundError",
]
