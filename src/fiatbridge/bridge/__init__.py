"""
Fiat token bridge for fiatbridge.

This module provides the paired bridge protocol:
- Lock-side escrow with a per-pair deposit ledger
- Mint-side mint and burn of the synthetic asset
- Token pairing, pause and caller authorization policy
- Legacy and canonical transfer events
"""

from .authorization import (
    OWNERSHIP_TRANSFERRED,
    PAUSED,
    UNPAUSED,
    ContractCallerHeuristic,
    OwnableMixin,
    PausableMixin,
    require_cross_domain_sender,
)
from .bridge_types import BridgeConfig, DomainRole, TokenPair
from .events import (
    DEPOSIT_FINALIZED,
    EMISSION_POLICIES,
    ERC20_BRIDGE_FINALIZED,
    ERC20_BRIDGE_INITIATED,
    ERC20_DEPOSIT_INITIATED,
    ERC20_WITHDRAWAL_FINALIZED,
    WITHDRAWAL_INITIATED,
    EmissionPolicy,
    policy_for,
)
from .fiat_bridge import (
    FINALIZE_BRIDGE_ERC20,
    FINALIZE_DEPOSIT,
    FINALIZE_ERC20_WITHDRAWAL,
    FiatBridge,
)
from .ledger import DepositLedger
from .pairing import TokenPairing

__all__ = [
    # Types
    "DomainRole",
    "TokenPair",
    "BridgeConfig",
    # Bridge
    "FiatBridge",
    "FINALIZE_BRIDGE_ERC20",
    "FINALIZE_DEPOSIT",
    "FINALIZE_ERC20_WITHDRAWAL",
    # Ledger and pairing
    "DepositLedger",
    "TokenPairing",
    # Authorization
    "OwnableMixin",
    "PausableMixin",
    "ContractCallerHeuristic",
    "require_cross_domain_sender",
    "OWNERSHIP_TRANSFERRED",
    "PAUSED",
    "UNPAUSED",
    # Events
    "EmissionPolicy",
    "EMISSION_POLICIES",
    "policy_for",
    "ERC20_BRIDGE_INITIATED",
    "ERC20_BRIDGE_FINALIZED",
    "ERC20_DEPOSIT_INITIATED",
    "ERC20_WITHDRAWAL_FINALIZED",
    "WITHDRAWAL_INITIATED",
    "DEPOSIT_FINALIZED",
]
