"""fiatbridge testing infrastructure.

Wired bridge-pair fixtures and asset test doubles shared by the unit,
integration, adversarial and property test suites.
"""

from .fixtures import DEFAULT_MIN_GAS_LIMIT, LOCK_CHAIN_ID, MINT_CHAIN_ID, BridgeFixtures
from .mocks import FailingFiatToken, fixtures_with_failing_tokens

__all__ = [
    "BridgeFixtures",
    "FailingFiatToken",
    "fixtures_with_failing_tokens",
    "DEFAULT_MIN_GAS_LIMIT",
    "LOCK_CHAIN_ID",
    "MINT_CHAIN_ID",
]
