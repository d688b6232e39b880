"""
Bridge transfer events.

Every transfer event is emitted as a pair: a legacy event kept for older
indexers, then the canonical event. Which legacy event is used, and how its
token arguments are ordered, depends only on the domain role, so the
selection is a fixed table rather than something subclasses override.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, List, Tuple

from ..domain import EventSpec
from .bridge_types import DomainRole

if TYPE_CHECKING:
    from ..domain import Contract, EventRecord

_TRANSFER_PARAMS = (
    ("from", "address"),
    ("to", "address"),
    ("amount", "uint256"),
    ("extra_data", "bytes"),
)
_CANONICAL_TOKENS = (("local_token", "address"), ("remote_token", "address"))
_LEGACY_TOKENS = (("l1_token", "address"), ("l2_token", "address"))

ERC20_BRIDGE_INITIATED = EventSpec("ERC20BridgeInitiated", _CANONICAL_TOKENS + _TRANSFER_PARAMS)
ERC20_BRIDGE_FINALIZED = EventSpec("ERC20BridgeFinalized", _CANONICAL_TOKENS + _TRANSFER_PARAMS)

# Lock side legacy events
ERC20_DEPOSIT_INITIATED = EventSpec("ERC20DepositInitiated", _LEGACY_TOKENS + _TRANSFER_PARAMS)
ERC20_WITHDRAWAL_FINALIZED = EventSpec(
    "ERC20WithdrawalFinalized", _LEGACY_TOKENS + _TRANSFER_PARAMS
)

# Mint side legacy events
WITHDRAWAL_INITIATED = EventSpec("WithdrawalInitiated", _LEGACY_TOKENS + _TRANSFER_PARAMS)
DEPOSIT_FINALIZED = EventSpec("DepositFinalized", _LEGACY_TOKENS + _TRANSFER_PARAMS)


@dataclass(frozen=True)
class EmissionPolicy:
    """Which events a bridge of a given role emits, and in what order."""

    role: DomainRole
    legacy_initiated: EventSpec
    legacy_finalized: EventSpec

    def _legacy_tokens(self, local_token: str, remote_token: str) -> Tuple[str, str]:
        # Legacy events are keyed (l1_token, l2_token); the lock side is L1.
        if self.role == DomainRole.LOCK:
            return local_token, remote_token
        return remote_token, local_token

    def emit_initiated(
        self,
        contract: "Contract",
        local_token: str,
        remote_token: str,
        sender: str,
        to: str,
        amount: int,
        extra_data: bytes,
    ) -> List["EventRecord"]:
        l1_token, l2_token = self._legacy_tokens(local_token, remote_token)
        return [
            contract.emit(
                self.legacy_initiated, l1_token, l2_token, sender, to, amount, extra_data
            ),
            contract.emit(
                ERC20_BRIDGE_INITIATED,
                local_token,
                remote_token,
                sender,
                to,
                amount,
                extra_data,
            ),
        ]

    def emit_finalized(
        self,
        contract: "Contract",
        local_token: str,
        remote_token: str,
        sender: str,
        to: str,
        amount: int,
        extra_data: bytes,
    ) -> List["EventRecord"]:
        l1_token, l2_token = self._legacy_tokens(local_token, remote_token)
        return [
            contract.emit(
                self.legacy_finalized, l1_token, l2_token, sender, to, amount, extra_data
            ),
            contract.emit(
                ERC20_BRIDGE_FINALIZED,
                local_token,
                remote_token,
                sender,
                to,
                amount,
                extra_data,
            ),
        ]


EMISSION_POLICIES: Dict[DomainRole, EmissionPolicy] = {
    DomainRole.LOCK: EmissionPolicy(
        role=DomainRole.LOCK,
        legacy_initiated=ERC20_DEPOSIT_INITIATED,
        legacy_finalized=ERC20_WITHDRAWAL_FINALIZED,
    ),
    DomainRole.MINT: EmissionPolicy(
        role=DomainRole.MINT,
        legacy_initiated=WITHDRAWAL_INITIATED,
        legacy_finalized=DEPOSIT_FINALIZED,
    ),
}


def policy_for(role: DomainRole) -> EmissionPolicy:
    """Emission policy for a domain role."""
    return EMISSION_POLICIES[role]
