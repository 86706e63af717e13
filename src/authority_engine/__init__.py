"""
Authority Engine - How authority flows from organization to agent

Derives what each agent in an Organization → Domain → Agent hierarchy may
do, explains why, and lets humans teach the system new restrictions from
their approvals. Authority only ever narrows on the way down, ethical
vetoes are final, and every learned policy expires unless renewed.
"""

from authority_engine.engine import AuthorityEngine

__version__ = "0.1.0"
__all__ = ["AuthorityEngine", "__version__"]
