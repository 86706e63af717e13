"""
Custom exceptions for the Authority Engine

Three kinds of failure exist:
- Invariant violations: a workflow step was attempted from the wrong state
  (approving an already-decided action, renewing an expired policy). These
  are programmer/workflow errors and always abort the operation.
- Input constraint violations: a human supplied something unusable (empty
  justification, a too-short override reason). The message says how to fix it.
- Lookups that find nothing (facade only).

Derivations that simply produce no result (a learned policy that fails
validation) are NOT errors and never raise.
"""


class AuthorityEngineError(Exception):
    """Base exception for all Authority Engine errors"""

    pass


# Workflow / state-machine errors


class InvariantViolation(AuthorityEngineError):
    """
    Raised when a governance invariant would be violated

    Invariants are the structural guarantees of the engine: terminal states
    stay terminal, ethics blocks stay blocked, expired policies stay expired.
    """

    pass


class InvalidStateTransition(InvariantViolation):
    """Raised when a state-machine command is issued from a disallowed state"""

    def __init__(
        self,
        entity: str,
        entity_id: str,
        current_state: str,
        operation: str,
        allowed_states: list[str],
    ) -> None:
        self.entity = entity
        self.entity_id = entity_id
        self.current_state = current_state
        self.operation = operation
        self.allowed_states = allowed_states
        super().__init__(
            f"Cannot {operation} {entity} {entity_id}: state is {current_state}, "
            f"must be {' or '.join(allowed_states)}"
        )


class ActionNotStageable(InvariantViolation):
    """Raised when staging is attempted for a hard-blocked action"""

    def __init__(self, action_id: str, readiness_state: str) -> None:
        self.action_id = action_id
        self.readiness_state = readiness_state
        super().__init__(
            f"Action {action_id} cannot be staged: execution readiness is "
            f"{readiness_state}"
        )


class EthicalVetoViolation(InvariantViolation):
    """
    Raised when staging is attempted for an action the ethical veto blocked

    There is deliberately no way around this error: ethics blocks are final.
    """

    def __init__(self, action_id: str, explanation: str) -> None:
        self.action_id = action_id
        self.explanation = explanation
        super().__init__(f"Action {action_id} is ethically blocked: {explanation}")


class PolicyRenewalForbidden(InvariantViolation):
    """Raised when renewing a policy that has expired (by status or by time)"""

    def __init__(self, policy_id: str, reason: str) -> None:
        self.policy_id = policy_id
        self.reason = reason
        super().__init__(f"Cannot renew policy {policy_id}: {reason}")


# User input errors


class InputConstraintViolation(AuthorityEngineError):
    """Raised when human-supplied input does not meet a stated constraint"""

    pass


class JustificationRequired(InputConstraintViolation):
    """Raised when an approval intent is created without a justification"""

    def __init__(self, staged_action_id: str) -> None:
        self.staged_action_id = staged_action_id
        super().__init__(
            f"Justification is required for approval of {staged_action_id} - "
            "explain in writing why this action should proceed"
        )


class OverrideReasonTooShort(InputConstraintViolation):
    """Raised when an override reason is shorter than the policy minimum"""

    def __init__(self, length: int, minimum: int) -> None:
        self.length = length
        self.minimum = minimum
        super().__init__(
            f"Override reason must be at least {minimum} characters (got {length})"
        )


class OverrideExpiryOutOfRange(InputConstraintViolation):
    """Raised when override expiry is not positive or exceeds the maximum"""

    def __init__(self, expiry_days: int, maximum: int) -> None:
        self.expiry_days = expiry_days
        self.maximum = maximum
        if expiry_days <= 0:
            message = f"Override expiry must be positive (got {expiry_days} days)"
        else:
            message = (
                f"Override expiry cannot exceed {maximum} days (got {expiry_days})"
            )
        super().__init__(message)


class ReviewIntervalOutOfRange(InputConstraintViolation):
    """Raised when a renewal asks for a review interval that is not positive"""

    def __init__(self, review_interval_days: int) -> None:
        self.review_interval_days = review_interval_days
        super().__init__(
            f"Review interval must be a positive number of days (got {review_interval_days}) - "
            "omit it to keep the current interval"
        )


# Lookup errors


class NotFoundError(AuthorityEngineError):
    """Base class for lookups that found nothing"""

    pass


class DomainNotFound(NotFoundError):
    """Raised when a domain does not exist in the structure"""

    def __init__(self, domain_id: str) -> None:
        self.domain_id = domain_id
        super().__init__(f"Domain {domain_id} not found")


class AgentNotFound(NotFoundError):
    """Raised when an agent does not exist in the structure"""

    def __init__(self, agent_id: str) -> None:
        self.agent_id = agent_id
        super().__init__(f"Agent {agent_id} not found")


class DoActionNotFound(NotFoundError):
    """Raised when an agent's catalogue has no action with the given id"""

    def __init__(self, agent_id: str, action_id: str) -> None:
        self.agent_id = agent_id
        self.action_id = action_id
        super().__init__(f"Action {action_id} not found for agent {agent_id}")


class PolicyNotFound(NotFoundError):
    """Raised when a learned policy does not exist in the store"""

    def __init__(self, policy_id: str) -> None:
        self.policy_id = policy_id
        super().__init__(f"Learned policy {policy_id} not found")


class PersonaNotFound(NotFoundError):
    """Raised when no persona identity is registered under the given id"""

    def __init__(self, persona_id: str) -> None:
        self.persona_id = persona_id
        super().__init__(f"Persona {persona_id} not found")


class StagedActionNotFound(NotFoundError):
    """Raised when no staged action has the given id"""

    def __init__(self, staged_action_id: str) -> None:
        self.staged_action_id = staged_action_id
        super().__init__(f"Staged action {staged_action_id} not found")


class ApprovalIntentNotFound(NotFoundError):
    """Raised when no approval intent has the given id"""

    def __init__(self, intent_id: str) -> None:
        self.intent_id = intent_id
        super().__init__(f"Approval intent {intent_id} not found")


class ProposalNotFound(NotFoundError):
    """Raised when no policy change proposal has the given id"""

    def __init__(self, proposal_id: str) -> None:
        self.proposal_id = proposal_id
        super().__init__(f"Policy proposal {proposal_id} not found")
