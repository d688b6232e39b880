#!/usr/bin/env python3
"""
Fiat Bridge Demo for fiatbridge

This demo walks through a lock/mint bridge pair:
- Depositing the native token into lock-side escrow
- Minting the synthetic token on the mint side
- Withdrawing back and releasing escrow
- Pausing initiation while in-flight messages still finalize
- Recovering a failed finalization by replay

Run this demo to see how the two bridges stay reconciled across an
asynchronous, at-most-once message channel.
"""

import random

from fiatbridge.errors import BridgePausedError
from fiatbridge.logging import LogConfig, LogLevel, get_logger, setup_logging
from fiatbridge.testing import fixtures_with_failing_tokens

logger = get_logger("fiatbridge.demo")


class FiatBridgeDemo:
    """Demonstrates the fiat bridge protocol."""

    def __init__(self):
        """Initialize the demo."""
        self.bridges = fixtures_with_failing_tokens(token="mint")
        self.alice = self.bridges.create_user("alice", balance=1_000)
        self.bob = self.bridges.create_user("bob")

    def show_balances(self, title: str) -> None:
        """Show balances on both domains."""
        bridges = self.bridges
        logger.info(f"\n📊 {title}")
        logger.info(f"  Alice (lock side): {bridges.lock_token.balance_of(self.alice)}")
        logger.info(f"  Bob (mint side): {bridges.mint_token.balance_of(self.bob)}")
        logger.info(f"  Escrowed: {bridges.escrowed()}")
        logger.info(f"  Synthetic supply: {bridges.synthetic_supply()}")
        logger.info(f"  In flight: {bridges.in_flight()}")
        logger.info(f"  Conserved: {bridges.conservation_holds()}")

    def demonstrate_deposits(self) -> None:
        """Deposit from alice to bob, delivered out of order."""
        logger.info("\n🔒 Depositing 3 x 100 from alice to bob...")
        for _ in range(3):
            self.bridges.deposit(self.alice, 100, to=self.bob)
        self.show_balances("After initiation")

        results = self.bridges.deliver_all(rng=random.Random(7))
        logger.info(f"  Delivered {len(results)} messages, all succeeded: {all(results.values())}")
        self.show_balances("After delivery")

    def demonstrate_withdrawal(self) -> None:
        """Withdraw part of bob's synthetic balance back to alice."""
        logger.info("\n🔓 Withdrawing 40 from bob to alice...")
        self.bridges.withdraw(self.bob, 40, to=self.alice)
        self.bridges.deliver_all()
        self.show_balances("After withdrawal")

    def demonstrate_pause(self) -> None:
        """Pause blocks new deposits but not in-flight ones."""
        bridges = self.bridges
        logger.info("\n⏸️  Pausing the lock side with a deposit in flight...")
        bridges.deposit(self.alice, 50, to=self.bob)
        bridges.lock_domain.transact(bridges.lock_admin, bridges.lock_bridge.pause)
        try:
            bridges.deposit(self.alice, 50, to=self.bob)
        except BridgePausedError as e:
            logger.info(f"  New deposit rejected: {e.message}")
        bridges.deliver_all()
        bridges.lock_domain.transact(bridges.lock_admin, bridges.lock_bridge.unpause)
        self.show_balances("After paused delivery")

    def demonstrate_replay(self) -> None:
        """A failed mint is recorded and replayed later."""
        bridges = self.bridges
        relayer = bridges.mint_domain.create_account("relayer")
        logger.info("\n🔁 Delivering a deposit while the synthetic token rejects mints...")
        message_hash = bridges.deposit(self.alice, 25, to=self.bob)
        bridges.mint_token.fail_on("mint")
        bridges.deliver_all()
        logger.info(f"  Failed: {bridges.mint_messenger.is_failed(message_hash)}")
        self.show_balances("With a failed message")

        bridges.mint_token.reset()
        bridges.channel.replay(message_hash, relayer)
        self.show_balances("After replay")

    def run_demo(self) -> None:
        """Run the complete fiat bridge demo."""
        logger.info("🌉 FIATBRIDGE LOCK/MINT DEMO")
        logger.info("=" * 60)

        self.show_balances("Initial state")
        self.demonstrate_deposits()
        self.demonstrate_withdrawal()
        self.demonstrate_pause()
        self.demonstrate_replay()

        logger.info("\n🎉 DEMO COMPLETED!")
        logger.info("=" * 60)


def main():
    """Main demo function."""
    setup_logging(LogConfig(level=LogLevel.INFO, format_type="text"))
    demo = FiatBridgeDemo()
    demo.run_demo()


if __name__ == "__main__":
    main()
