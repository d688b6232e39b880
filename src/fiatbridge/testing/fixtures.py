"""Test fixtures for fiatbridge.

This module wires a complete bridge pair: two domains, the native and
synthetic tokens, one messenger per domain joined by a channel, and two
initialized bridges.
"""

from typing import Dict, List, Optional, Type

from ..bridge import FINALIZE_BRIDGE_ERC20, BridgeConfig, DomainRole, FiatBridge
from ..domain import Domain, FiatToken
from ..logging import get_logger
from ..messaging import CrossDomainChannel, CrossDomainMessage, CrossDomainMessenger

LOCK_CHAIN_ID = 1
MINT_CHAIN_ID = 10
DEFAULT_MIN_GAS_LIMIT = 200_000


class BridgeFixtures:
    """A wired lock/mint bridge pair."""

    def __init__(
        self,
        only_eoa_direct: bool = True,
        lock_token_factory: Type[FiatToken] = FiatToken,
        mint_token_factory: Type[FiatToken] = FiatToken,
    ):
        self.logger = get_logger("test_fixtures")

        self.lock_domain = Domain("lock", LOCK_CHAIN_ID)
        self.mint_domain = Domain("mint", MINT_CHAIN_ID)
        self.lock_admin = self.lock_domain.create_account("admin")
        self.mint_admin = self.mint_domain.create_account("admin")

        self.lock_token = self.lock_domain.deploy(
            lock_token_factory, "USD Coin", "USDC", 6,
            label="lock-token", deployer=self.lock_admin,
        )
        self.mint_token = self.mint_domain.deploy(
            mint_token_factory, "Bridged USD Coin", "USDC.e", 6,
            label="mint-token", deployer=self.mint_admin,
        )

        self.lock_messenger = self.lock_domain.deploy(
            CrossDomainMessenger, label="messenger", deployer=self.lock_admin
        )
        self.mint_messenger = self.mint_domain.deploy(
            CrossDomainMessenger, label="messenger", deployer=self.mint_admin
        )
        self.channel = CrossDomainChannel("lock-mint")
        self.channel.connect(self.lock_messenger, self.mint_messenger)

        self.lock_bridge = self.lock_domain.deploy(
            FiatBridge, label="bridge", deployer=self.lock_admin
        )
        self.mint_bridge = self.mint_domain.deploy(
            FiatBridge, label="bridge", deployer=self.mint_admin
        )
        self.lock_domain.transact(
            self.lock_admin,
            self.lock_bridge.initialize,
            self.bridge_config(DomainRole.LOCK, only_eoa_direct),
        )
        self.mint_domain.transact(
            self.mint_admin,
            self.mint_bridge.initialize,
            self.bridge_config(DomainRole.MINT, only_eoa_direct),
        )

        # The admin mints the native asset; the mint bridge mints the synthetic one.
        self.lock_domain.transact(
            self.lock_admin, self.lock_token.configure_minter, self.lock_admin
        )
        self.mint_domain.transact(
            self.mint_admin, self.mint_token.configure_minter, self.mint_bridge.address
        )

    def bridge_config(
        self, role: DomainRole, only_eoa_direct: bool = True
    ) -> BridgeConfig:
        """Configuration for the bridge of the given role."""
        if role == DomainRole.LOCK:
            owner, messenger, other = (
                self.lock_admin,
                self.lock_messenger.address,
                self.mint_bridge.address,
            )
        else:
            owner, messenger, other = (
                self.mint_admin,
                self.mint_messenger.address,
                self.lock_bridge.address,
            )
        return BridgeConfig(
            role=role,
            owner=owner,
            messenger=messenger,
            other_bridge=other,
            lock_token=self.lock_token.address,
            mint_token=self.mint_token.address,
            only_eoa_direct=only_eoa_direct,
        )

    # Accounts and balances

    def create_user(self, label: str = "user", balance: int = 0) -> str:
        """Create an externally owned account usable on both domains."""
        user = self.lock_domain.create_account(label)
        if balance:
            self.fund(user, balance)
        return user

    def fund(self, account: str, amount: int) -> None:
        """Mint native tokens to ``account`` on the lock side."""
        self.lock_domain.transact(self.lock_admin, self.lock_token.mint, account, amount)

    # Transfers

    def deposit(
        self,
        user: str,
        amount: int,
        to: Optional[str] = None,
        min_gas_limit: int = DEFAULT_MIN_GAS_LIMIT,
        extra_data: bytes = b"",
    ) -> str:
        """Approve and initiate a lock-to-mint transfer; returns the message hash."""
        self.lock_domain.transact(
            user, self.lock_token.approve, self.lock_bridge.address, amount
        )
        return self.lock_domain.transact(
            user,
            self.lock_bridge.bridge_erc20_to,
            self.lock_token.address,
            self.mint_token.address,
            to or user,
            amount,
            min_gas_limit,
            extra_data,
        )

    def withdraw(
        self,
        user: str,
        amount: int,
        to: Optional[str] = None,
        min_gas_limit: int = DEFAULT_MIN_GAS_LIMIT,
        extra_data: bytes = b"",
    ) -> str:
        """Approve and initiate a mint-to-lock transfer; returns the message hash."""
        self.mint_domain.transact(
            user, self.mint_token.approve, self.mint_bridge.address, amount
        )
        return self.mint_domain.transact(
            user,
            self.mint_bridge.bridge_erc20_to,
            self.mint_token.address,
            self.lock_token.address,
            to or user,
            amount,
            min_gas_limit,
            extra_data,
        )

    def deliver_all(self, rng=None) -> Dict[str, bool]:
        """Deliver every pending message."""
        return self.channel.deliver_all(rng=rng)

    # Accounting

    def escrowed(self) -> int:
        """Ledger entry for the bridged pair."""
        return self.lock_bridge.deposits(self.lock_token.address, self.mint_token.address)

    def synthetic_supply(self) -> int:
        return self.mint_token.total_supply()

    def in_flight(self, destination_chain_id: Optional[int] = None) -> int:
        """Amount carried by messages sent but not successfully finalized.

        Counts pending messages plus delivered messages that failed and have
        not been replayed.
        """
        total = 0
        for envelope in self.unsettled_messages():
            if destination_chain_id is None or (
                envelope.destination_chain_id == destination_chain_id
            ):
                total += self.decode_amount(envelope)
        return total

    def unsettled_messages(self) -> List[CrossDomainMessage]:
        unsettled = list(self.channel.pending())
        for messenger in (self.lock_messenger, self.mint_messenger):
            for message_hash in messenger.failed_messages():
                envelope = self.channel.get_delivered(message_hash)
                if envelope is not None:
                    unsettled.append(envelope)
        return unsettled

    @staticmethod
    def decode_amount(envelope: CrossDomainMessage) -> int:
        """Amount argument of a finalize message."""
        args = FINALIZE_BRIDGE_ERC20.decode_args(envelope.message[4:])
        return args[4]

    def conservation_holds(self) -> bool:
        """Escrow equals synthetic supply plus everything still in flight."""
        return self.escrowed() == self.synthetic_supply() + self.in_flight()
