"""
Policy Handlers - Human commands on learned policies

Renewal, forced expiry and overrides. Each command reads the current
policy from the store and writes back a superseding record; overrides are
appended next to the policy and never edit it.
"""

from authority_engine.kernel.governance_policy import GovernancePolicy
from authority_engine.kernel.ids import IdFactory, default_id_factory
from authority_engine.kernel.logging import LogOperation, get_logger
from authority_engine.kernel.metrics import track_command_duration
from authority_engine.kernel.time import TimeProvider
from authority_engine.policy.lifecycle import let_policy_expire, renew_policy, update_policy_status
from authority_engine.policy.models import LearnedPolicy, OverrideScope, PolicyOverride, PolicyStatus
from authority_engine.policy.overrides import DEFAULT_CREATOR, create_policy_override, get_active_policy_status
from authority_engine.policy.store import LearnedPolicyStore

logger = get_logger(__name__)


class PolicyCommandHandlers:
    """Command handlers for learned-policy lifecycle and overrides"""

    def __init__(
        self,
        time_provider: TimeProvider,
        governance_policy: GovernancePolicy,
        store: LearnedPolicyStore,
        id_factory: IdFactory = default_id_factory,
    ) -> None:
        self.time_provider = time_provider
        self.governance_policy = governance_policy
        self.store = store
        self.id_factory = id_factory

    @track_command_duration("renew_policy")
    def handle_renew_policy(
        self, policy_id: str, review_interval_days: int | None = None
    ) -> LearnedPolicy:
        """
        Raises:
            PolicyNotFound: If the store has no such policy
            PolicyRenewalForbidden: If the policy has expired
            ReviewIntervalOutOfRange: If review_interval_days is not positive
        """
        with LogOperation(logger, "renew_policy", policy_id=policy_id):
            renewed = renew_policy(
                self.store.get(policy_id),
                self.time_provider.now(),
                review_interval_days,
                self.governance_policy.renewal_expiry_multiplier,
            )
            self.store.supersede(renewed)
            logger.info(
                "Policy renewed",
                policy_id=policy_id,
                next_review_date=renewed.lifecycle.next_review_date.isoformat(),
                expires_at=renewed.lifecycle.expires_at.isoformat(),
            )
            return renewed

    @track_command_duration("let_policy_expire")
    def handle_let_policy_expire(self, policy_id: str) -> LearnedPolicy:
        with LogOperation(logger, "let_policy_expire", policy_id=policy_id):
            expired = let_policy_expire(self.store.get(policy_id))
            self.store.supersede(expired)
            return expired

    @track_command_duration("create_policy_override")
    def handle_create_override(
        self,
        target_policy_id: str,
        scope: OverrideScope,
        reason: str,
        expiry_days: int,
        created_by: str = DEFAULT_CREATOR,
    ) -> PolicyOverride:
        """
        Raises:
            PolicyNotFound: If the target policy does not exist
            OverrideReasonTooShort: If the reason is too short
            OverrideExpiryOutOfRange: If expiry_days is out of range
        """
        with LogOperation(
            logger,
            "create_policy_override",
            policy_id=target_policy_id,
            scope=scope.value,
            expiry_days=expiry_days,
            reason=reason,
        ):
            self.store.get(target_policy_id)
            override = create_policy_override(
                target_policy_id,
                scope,
                reason,
                expiry_days,
                now=self.time_provider.now(),
                created_by=created_by,
                id_factory=self.id_factory,
                policy=self.governance_policy,
            )
            self.store.add_override(override)
            logger.info(
                "Policy override created",
                override_id=override.override_id,
                policy_id=target_policy_id,
                expires_at=override.expires_at.isoformat(),
            )
            return override

    def effective_status(self, policy_id: str) -> PolicyStatus:
        """Stored lifecycle status, or OVERRIDDEN while an override is active"""
        policy = self.store.get(policy_id)
        return get_active_policy_status(
            policy.lifecycle.status,
            self.store.overrides_for(policy_id),
            self.time_provider.now(),
        )

    def handle_refresh_statuses(self) -> list[LearnedPolicy]:
        """
        Apply time-driven status changes to every stored policy

        Returns:
            The policies whose status changed
        """
        now = self.time_provider.now()
        changed = []
        for policy in self.store.list():
            updated = update_policy_status(policy, now)
            if updated is policy:
                continue
            self.store.supersede(updated)
            changed.append(updated)
            logger.info(
                "Policy status changed",
                policy_id=policy.policy_id,
                previous_status=policy.lifecycle.status.value,
                status=updated.lifecycle.status.value,
            )
        return changed
