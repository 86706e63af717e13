"""
Pytest configuration and shared fixtures

Fun fact: The name "conftest" comes from pytest's configuration testing
framework. Files named conftest.py are automatically discovered and their
fixtures are available to all tests in the same directory and subdirectories!
"""

from datetime import datetime, timezone

import pytest

from authority_engine.engine import AuthorityEngine
from authority_engine.hierarchy.models import OrganizationStructure
from authority_engine.hierarchy.sample import sample_structure
from authority_engine.kernel.governance_policy import GovernancePolicy
from authority_engine.kernel.ids import SequentialIdFactory
from authority_engine.kernel.time import ManualTimeProvider
from authority_engine.policy.store import LearnedPolicyStore


@pytest.fixture
def test_time() -> ManualTimeProvider:
    """Provide a controllable time provider"""
    return ManualTimeProvider(datetime(2025, 1, 15, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def id_factory() -> SequentialIdFactory:
    """Predictable record ids: staged-0001, approval-0001, ..."""
    return SequentialIdFactory()


@pytest.fixture
def governance_policy() -> GovernancePolicy:
    """Provide the default governance policy"""
    return GovernancePolicy()


@pytest.fixture
def structure() -> OrganizationStructure:
    """The Nebula Industries AI sample hierarchy"""
    return sample_structure()


@pytest.fixture
def policy_store() -> LearnedPolicyStore:
    """Provide an empty learned policy store"""
    return LearnedPolicyStore()


@pytest.fixture
def engine(
    test_time: ManualTimeProvider,
    id_factory: SequentialIdFactory,
    policy_store: LearnedPolicyStore,
) -> AuthorityEngine:
    """Engine over the sample organization with personas registered"""
    return AuthorityEngine.with_sample_data(
        time_provider=test_time, id_factory=id_factory, policy_store=policy_store
    )


@pytest.fixture
def bare_engine(
    structure: OrganizationStructure,
    test_time: ManualTimeProvider,
    id_factory: SequentialIdFactory,
) -> AuthorityEngine:
    """Engine over the sample organization without any personas"""
    return AuthorityEngine(structure, time_provider=test_time, id_factory=id_factory)
