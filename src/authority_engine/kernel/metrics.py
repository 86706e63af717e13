"""
Prometheus metrics for the Authority Engine.

Counts derivations, command outcomes, readiness states and learning
attempts. The engine never starts an HTTP server itself; a host process
that wants to expose these calls prometheus_client's own exposition helpers.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram

# ============================================================================
# Read path
# ============================================================================

derivations_total = Counter(
    "authority_derivations_total",
    "Total number of pure derivations performed",
    ["derivation"],
)

readiness_states_total = Counter(
    "authority_readiness_states_total",
    "Execution readiness results by state",
    ["state"],
)

ethical_evaluations_total = Counter(
    "authority_ethical_evaluations_total",
    "Ethical veto evaluations by verdict",
    ["verdict"],
)

# ============================================================================
# Write path
# ============================================================================

command_duration_seconds = Histogram(
    "authority_command_duration_seconds",
    "Duration of command processing in seconds",
    ["command_type"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25),
)

commands_processed_total = Counter(
    "authority_commands_processed_total",
    "Total number of commands processed",
    ["command_type", "status"],  # status: success, failure
)

learning_attempts_total = Counter(
    "authority_learning_attempts_total",
    "Policy learning attempts by outcome",
    ["outcome"],  # learned, rejected_eapp, rejected_lps, rejected_monotonicity, not_confirmed
)

# ============================================================================
# Helpers
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_command_duration(command_type: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track command processing duration and outcome.

    Args:
        command_type: Type of command being processed
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            status = "success"
            try:
                return func(*args, **kwargs)
            except Exception:
                status = "failure"
                raise
            finally:
                duration = time.perf_counter() - start
                command_duration_seconds.labels(command_type=command_type).observe(duration)
                commands_processed_total.labels(
                    command_type=command_type, status=status
                ).inc()

        return wrapper

    return decorator


def record_derivation(derivation: str) -> None:
    derivations_total.labels(derivation=derivation).inc()
