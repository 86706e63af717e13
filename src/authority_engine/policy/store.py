"""
Learned Policy Store - The only mutable state on the write path

An explicit, in-process, append-only record of learned policies and the
overrides that shadow them. Construct one at startup and hand it to
whatever confirms proposals; there is no module-level instance.

Policies are never edited in place. A renewal or forced expiry produces a
new LearnedPolicy that is appended as the latest version of the same id;
earlier versions stay in the log and are available through history().
"""

from typing import Any

from authority_engine.kernel.errors import PolicyNotFound
from authority_engine.policy.models import LearnedPolicy, PolicyOverride


class LearnedPolicyStore:
    """
    Append-only log of learned policies and overrides

    `policies` holds every version ever recorded, oldest first. Reads
    (get, list, len) see only the latest version of each id. Lookup is a
    linear scan; the store is sized for a human-paced approval workflow,
    not for bulk data.
    """

    def __init__(self) -> None:
        self.policies: list[LearnedPolicy] = []
        self.overrides: list[PolicyOverride] = []

    def append(self, policy: LearnedPolicy) -> None:
        self.policies.append(policy)

    def get(self, policy_id: str) -> LearnedPolicy:
        """
        Raises:
            PolicyNotFound: If no policy has this id
        """
        for policy in reversed(self.policies):
            if policy.policy_id == policy_id:
                return policy
        raise PolicyNotFound(policy_id)

    def history(self, policy_id: str) -> list[LearnedPolicy]:
        """
        Every recorded version of a policy, oldest first

        Raises:
            PolicyNotFound: If no policy has this id
        """
        versions = [p for p in self.policies if p.policy_id == policy_id]
        if not versions:
            raise PolicyNotFound(policy_id)
        return versions

    def supersede(self, policy: LearnedPolicy) -> None:
        """
        Record a new version of an existing policy

        Raises:
            PolicyNotFound: If the policy was never appended
        """
        if not any(p.policy_id == policy.policy_id for p in self.policies):
            raise PolicyNotFound(policy.policy_id)
        self.policies.append(policy)

    def add_override(self, override: PolicyOverride) -> None:
        self.overrides.append(override)

    def overrides_for(self, policy_id: str) -> list[PolicyOverride]:
        """All overrides ever created for a policy, active or not"""
        return [o for o in self.overrides if o.target_policy_id == policy_id]

    def clear(self) -> None:
        """Forget everything (used for resets and tests)"""
        self.policies.clear()
        self.overrides.clear()

    def __len__(self) -> int:
        return len({p.policy_id for p in self.policies})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict"""
        return {
            "policies": [p.model_dump(mode="json") for p in self.policies],
            "overrides": [o.model_dump(mode="json") for o in self.overrides],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LearnedPolicyStore":
        store = cls()
        store.policies = [LearnedPolicy.model_validate(p) for p in data.get("policies", [])]
        store.overrides = [PolicyOverride.model_validate(o) for o in data.get("overrides", [])]
        return store

    # Defined last: inside the class body the name shadows the builtin
    def list(self) -> list[LearnedPolicy]:
        """Latest version of each learned policy, in the order first learned"""
        latest: dict[str, LearnedPolicy] = {}
        for policy in self.policies:
            latest[policy.policy_id] = policy
        return list(latest.values())
