"""
fiatbridge: a paired lock/mint bridge for a single fiat token.

The asset is native on the lock side, where the bridge escrows it, and
synthetic on the mint side, where the bridge mints and burns it. The two
bridges talk only through an asynchronous, at-most-once cross-domain
messenger.
"""

from .bridge import BridgeConfig, DepositLedger, DomainRole, FiatBridge, TokenPairing
from .domain import Domain, FiatToken
from .errors import FiatBridgeError
from .messaging import CrossDomainChannel, CrossDomainMessage, CrossDomainMessenger

__all__ = [
    "FiatBridge",
    "BridgeConfig",
    "DomainRole",
    "DepositLedger",
    "TokenPairing",
    "Domain",
    "FiatToken",
    "CrossDomainChannel",
    "CrossDomainMessage",
    "CrossDomainMessenger",
    "FiatBridgeError",
]

__version__ = "1.0.0"
