"""
Record identifiers

Staged actions, approval intents, proposals, learned policies and overrides
each get a prefixed, time-ordered id such as
"staged-01908e9a-3b87-7000-8000-123456789abc". The prefix tells a reader in
an audit trail what kind of record the id points at; the UUIDv7-style body
sorts by creation time.
"""

import secrets
import time
from typing import Protocol


class IdFactory(Protocol):
    """Protocol for ID generation strategies"""

    def generate(self, prefix: str) -> str:
        """Generate a new unique ID with the given record-type prefix"""
        ...


def _uuid7_body() -> str:
    """
    Build a UUIDv7-like string

    First 48 bits: Unix timestamp in milliseconds, then version nibble 7,
    12 random bits, variant bits 10 and 62 random bits.
    """
    timestamp_48 = int(time.time() * 1000) & 0xFFFFFFFFFFFF

    rand_12 = secrets.randbits(12)
    rand_62 = secrets.randbits(62)

    time_high = (timestamp_48 >> 32) & 0xFFFF
    time_mid = (timestamp_48 >> 16) & 0xFFFF
    time_low_and_version = ((timestamp_48 & 0xFFFF) << 16) | (0x7000 | rand_12)
    clock_seq_and_variant = 0x8000 | ((rand_62 >> 48) & 0x3FFF)
    node = rand_62 & 0xFFFFFFFFFFFF

    return (
        f"{time_high:04x}{time_mid:04x}-"
        f"{(time_low_and_version >> 16) & 0xFFFF:04x}-"
        f"{time_low_and_version & 0xFFFF:04x}-"
        f"{clock_seq_and_variant:04x}-"
        f"{node:012x}"
    )


def generate_id(prefix: str) -> str:
    """
    Generate a prefixed, time-ordered record id

    Args:
        prefix: Record type, e.g. "staged", "approval", "proposal",
            "learned", "override", "persona"

    Returns:
        Id string such as "learned-01908e9a-3b87-7000-8000-123456789abc"
    """
    return f"{prefix}-{_uuid7_body()}"


class DefaultIdFactory:
    """Default ID factory using UUIDv7-like generation"""

    def generate(self, prefix: str) -> str:
        return generate_id(prefix)


class SequentialIdFactory:
    """
    Deterministic ID factory ("staged-0001", "staged-0002", ...)

    Counters are kept per prefix, so a test that stages two actions and
    learns one policy sees "staged-0001", "staged-0002", "learned-0001".
    """

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def generate(self, prefix: str) -> str:
        self._counters[prefix] = self._counters.get(prefix, 0) + 1
        return f"{prefix}-{self._counters[prefix]:04d}"


default_id_factory = DefaultIdFactory()
