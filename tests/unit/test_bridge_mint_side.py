"""
Unit tests for the mint-side bridge.
"""

import pytest

from fiatbridge.bridge import FINALIZE_BRIDGE_ERC20, FINALIZE_DEPOSIT
from fiatbridge.errors import (
    BridgePausedError,
    InsufficientAllowanceError,
    InvalidTokenPairError,
    UnauthorizedFinalizeError,
    ValidationError,
)
from fiatbridge.testing import LOCK_CHAIN_ID


@pytest.fixture
def minted(bridges, funded_user):
    """The funded user holding 100 synthetic tokens on the mint side."""
    bridges.deposit(funded_user, 100)
    bridges.deliver_all()
    return funded_user


class TestMintSideFinalize:
    """Test finalizing deposits on the mint side."""

    def test_mints_to_recipient(self, bridges, funded_user):
        """Test a delivered deposit mints to the recipient."""
        bob = bridges.create_user("bob")
        message_hash = bridges.deposit(funded_user, 100, to=bob)
        results = bridges.deliver_all()

        assert results == {message_hash: True}
        assert bridges.mint_token.balance_of(bob) == 100
        assert bridges.mint_token.total_supply() == 100
        assert bridges.mint_messenger.is_successful(message_hash)

    def test_emits_legacy_then_canonical(self, bridges, funded_user):
        """Test mint-side finalize events use the l1/l2 legacy orientation."""
        bridges.deposit(funded_user, 5)
        bridges.deliver_all()
        legacy, canonical = bridges.mint_domain.get_events(bridges.mint_bridge.address)[-2:]
        assert legacy.name == "DepositFinalized"
        assert legacy.args["l1_token"] == bridges.lock_token.address
        assert legacy.args["l2_token"] == bridges.mint_token.address
        assert canonical.name == "ERC20BridgeFinalized"
        assert canonical.args["local_token"] == bridges.mint_token.address
        assert canonical.args["remote_token"] == bridges.lock_token.address

    def test_direct_finalize_rejected(self, bridges, funded_user):
        """Test finalize called by anyone but the messenger is rejected."""
        with pytest.raises(UnauthorizedFinalizeError):
            bridges.mint_domain.transact(
                funded_user,
                bridges.mint_bridge.finalize_bridge_erc20,
                bridges.mint_token.address,
                bridges.lock_token.address,
                funded_user,
                funded_user,
                100,
                b"",
            )
        assert bridges.mint_token.total_supply() == 0

    def test_legacy_finalize_deposit_calldata(self, bridges, funded_user):
        """Test finalizeDeposit calldata maps (l1, l2) onto the mint side."""
        calldata = FINALIZE_DEPOSIT.encode_call(
            bridges.lock_token.address,
            bridges.mint_token.address,
            funded_user,
            funded_user,
            7,
            b"",
        )
        hash_ = bridges.lock_domain.transact(
            bridges.lock_bridge.address,
            bridges.lock_messenger.send_message,
            bridges.mint_bridge.address,
            calldata,
            0,
        )
        assert bridges.channel.deliver(hash_) is True
        assert bridges.mint_token.balance_of(funded_user) == 7

    def test_finalize_not_paused(self, bridges, funded_user):
        """Test a paused mint side still finalizes in-flight deposits."""
        bridges.deposit(funded_user, 25)
        bridges.mint_domain.transact(bridges.mint_admin, bridges.mint_bridge.pause)
        assert all(bridges.deliver_all().values())
        assert bridges.mint_token.balance_of(funded_user) == 25


class TestMintSideInitiate:
    """Test initiating withdrawals from the mint side."""

    def test_burns_and_queues_message(self, bridges, minted):
        """Test initiate pulls and burns the synthetic tokens."""
        alice = bridges.create_user("alice-l1")
        message_hash = bridges.withdraw(minted, 40, to=alice)

        assert bridges.mint_token.balance_of(minted) == 60
        assert bridges.mint_token.balance_of(bridges.mint_bridge.address) == 0
        assert bridges.mint_token.total_supply() == 60
        assert bridges.mint_bridge.deposits(
            bridges.mint_token.address, bridges.lock_token.address
        ) == 0

        (envelope,) = bridges.channel.pending()
        assert envelope.message_hash == message_hash
        assert envelope.target == bridges.lock_bridge.address
        assert envelope.destination_chain_id == LOCK_CHAIN_ID
        assert FINALIZE_BRIDGE_ERC20.decode_args(envelope.message[4:]) == (
            bridges.lock_token.address,
            bridges.mint_token.address,
            minted,
            alice,
            40,
            b"",
        )

    def test_emits_legacy_then_canonical(self, bridges, minted):
        """Test mint-side initiate events."""
        bridges.withdraw(minted, 1)
        legacy, canonical = bridges.mint_domain.get_events(bridges.mint_bridge.address)[-2:]
        assert legacy.name == "WithdrawalInitiated"
        assert legacy.args["l1_token"] == bridges.lock_token.address
        assert legacy.args["l2_token"] == bridges.mint_token.address
        assert canonical.name == "ERC20BridgeInitiated"

    def test_legacy_withdraw_entry_points(self, bridges, minted):
        """Test withdraw and withdraw_to derive the remote token."""
        bob = bridges.create_user("bob")
        bridges.mint_domain.transact(
            minted, bridges.mint_token.approve, bridges.mint_bridge.address, 30
        )
        bridges.mint_domain.transact(
            minted, bridges.mint_bridge.withdraw, bridges.mint_token.address, 10, 0
        )
        bridges.mint_domain.transact(
            minted,
            bridges.mint_bridge.withdraw_to,
            bridges.mint_token.address,
            bob,
            20,
            0,
        )
        assert bridges.mint_token.total_supply() == 70
        bridges.deliver_all()
        assert bridges.lock_token.balance_of(bob) == 20
        assert bridges.escrowed() == 70

    def test_withdraw_wrong_token(self, bridges, minted):
        """Test withdraw of the native token is an invalid pair."""
        with pytest.raises(InvalidTokenPairError):
            bridges.mint_domain.transact(
                minted, bridges.mint_bridge.withdraw, bridges.lock_token.address, 1, 0
            )

    def test_lock_orientation_rejected(self, bridges, minted):
        """Test the lock-side orientation is invalid on the mint side."""
        bridges.mint_domain.transact(
            minted, bridges.mint_token.approve, bridges.mint_bridge.address, 10
        )
        with pytest.raises(InvalidTokenPairError):
            bridges.mint_domain.transact(
                minted,
                bridges.mint_bridge.bridge_erc20,
                bridges.lock_token.address,
                bridges.mint_token.address,
                10,
                0,
            )
        assert bridges.mint_token.total_supply() == 100

    def test_without_allowance(self, bridges, minted):
        """Test the pull before burn needs an allowance."""
        with pytest.raises(InsufficientAllowanceError):
            bridges.mint_domain.transact(
                minted,
                bridges.mint_bridge.bridge_erc20,
                bridges.mint_token.address,
                bridges.lock_token.address,
                10,
                0,
            )
        assert bridges.mint_token.total_supply() == 100
        assert bridges.channel.pending() == []

    def test_paused_rejects_initiate(self, bridges, minted):
        """Test pause blocks withdrawals."""
        bridges.mint_domain.transact(bridges.mint_admin, bridges.mint_bridge.pause)
        with pytest.raises(BridgePausedError):
            bridges.withdraw(minted, 10)
        assert bridges.mint_token.balance_of(minted) == 100

    def test_deposit_not_available(self, bridges, minted):
        """Test lock-side legacy entry points are rejected on the mint side."""
        with pytest.raises(ValidationError):
            bridges.mint_domain.transact(
                minted,
                bridges.mint_bridge.deposit_erc20,
                bridges.lock_token.address,
                bridges.mint_token.address,
                1,
                0,
            )
