"""
Cross-domain messenger for fiatbridge.

One messenger contract lives on each domain. ``send_message`` records an
envelope and hands it to the channel once the sending transaction commits;
``relay_message`` delivers an inbound envelope to its target, exposing the
originating sender through ``x_domain_message_sender`` for the duration of
the call.

Delivery is at most once per message hash. A target call that fails is
reverted in isolation, the message is recorded as failed, and anyone may
replay it later; a replay succeeds at most once.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Set

from eth_abi import encode
from web3 import Web3

from ..domain import Contract, EventSpec, to_address
from ..errors import (
    MessageAlreadyRelayedError,
    MessengerError,
    UnauthorizedRelayError,
    ValidationError,
    XDomainSenderUnsetError,
)
from ..logging import LogContext, get_logger

if TYPE_CHECKING:
    from .channel import MessageChannel

logger = get_logger(__name__)

SENT_MESSAGE = EventSpec(
    "SentMessage",
    (
        ("target", "address"),
        ("sender", "address"),
        ("message", "bytes"),
        ("message_nonce", "uint256"),
        ("gas_limit", "uint256"),
    ),
)
RELAYED_MESSAGE = EventSpec("RelayedMessage", (("msg_hash", "bytes32"),))
FAILED_RELAYED_MESSAGE = EventSpec("FailedRelayedMessage", (("msg_hash", "bytes32"),))


@dataclass(frozen=True)
class CrossDomainMessage:
    """Envelope for one cross-domain call."""

    nonce: int
    sender: str
    target: str
    message: bytes
    min_gas_limit: int
    source_chain_id: int
    destination_chain_id: int

    @property
    def message_hash(self) -> str:
        encoded = encode(
            ["uint256", "address", "address", "bytes", "uint256", "uint256", "uint256"],
            [
                self.nonce,
                self.sender,
                self.target,
                self.message,
                self.min_gas_limit,
                self.source_chain_id,
                self.destination_chain_id,
            ],
        )
        return Web3.to_hex(Web3.keccak(encoded))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "nonce": self.nonce,
            "sender": self.sender,
            "target": self.target,
            "message": self.message.hex(),
            "min_gas_limit": self.min_gas_limit,
            "source_chain_id": self.source_chain_id,
            "destination_chain_id": self.destination_chain_id,
            "message_hash": self.message_hash,
        }


class CrossDomainMessenger(Contract):
    """Messenger endpoint on one domain."""

    def __init__(self, domain, address: str):
        super().__init__(domain, address)
        self.channel: Optional["MessageChannel"] = None
        self.storage.update(
            {
                "nonce": 0,
                "portal": None,
                "sent": {},
                "successful": set(),
                "failed": set(),
                "x_domain_sender": None,
            }
        )

    def bind_channel(self, channel: "MessageChannel", portal: str) -> None:
        """Attach the channel that carries this messenger's traffic."""
        if self.channel is not None:
            raise MessengerError(f"Messenger {self.address} is already bound to a channel")
        self.channel = channel
        self.storage["portal"] = to_address(portal)

    @property
    def portal(self) -> Optional[str]:
        """Address the channel uses on this domain for first deliveries."""
        return self.storage["portal"]

    @property
    def message_nonce(self) -> int:
        return self.storage["nonce"]

    def sent_message(self, message_hash: str) -> Optional[CrossDomainMessage]:
        return self.storage["sent"].get(message_hash)

    def successful_messages(self) -> Set[str]:
        return set(self.storage["successful"])

    def failed_messages(self) -> Set[str]:
        return set(self.storage["failed"])

    def is_successful(self, message_hash: str) -> bool:
        return message_hash in self.storage["successful"]

    def is_failed(self, message_hash: str) -> bool:
        return message_hash in self.storage["failed"]

    def x_domain_message_sender(self) -> str:
        """Originating sender of the message currently being relayed."""
        sender = self.storage["x_domain_sender"]
        if sender is None:
            raise XDomainSenderUnsetError("x_domain_message_sender is not set")
        return sender

    def send_message(self, target: str, message: bytes, min_gas_limit: int) -> str:
        """Queue a one-way call to ``target`` on the paired domain."""
        if self.channel is None:
            raise MessengerError(f"Messenger {self.address} has no channel")
        if not isinstance(min_gas_limit, int) or min_gas_limit < 0:
            raise ValidationError(
                "min_gas_limit must be a non-negative integer",
                field="min_gas_limit",
                value=min_gas_limit,
            )

        envelope = CrossDomainMessage(
            nonce=self.storage["nonce"],
            sender=self.msg_sender,
            target=to_address(target),
            message=bytes(message),
            min_gas_limit=min_gas_limit,
            source_chain_id=self.domain.chain_id,
            destination_chain_id=self.channel.remote_chain_id(self),
        )
        message_hash = envelope.message_hash

        self.storage["nonce"] += 1
        self.storage["sent"][message_hash] = envelope
        self.emit(
            SENT_MESSAGE,
            envelope.target,
            envelope.sender,
            envelope.message,
            envelope.nonce,
            envelope.min_gas_limit,
        )

        channel = self.channel
        self.domain.after_commit(lambda: channel.enqueue(envelope))
        logger.debug(
            f"Queued message {message_hash} to {envelope.target}",
            context=LogContext(domain=self.domain.name, operation="send_message"),
            extra={"nonce": envelope.nonce, "min_gas_limit": min_gas_limit},
        )
        return message_hash

    def relay_message(
        self, envelope: CrossDomainMessage, gas_limit: Optional[int] = None
    ) -> bool:
        """Deliver an inbound message; returns whether the target call succeeded."""
        message_hash = envelope.message_hash
        caller = self.msg_sender
        context = LogContext(
            domain=self.domain.name, operation="relay_message", correlation_id=message_hash
        )

        if envelope.destination_chain_id != self.domain.chain_id:
            raise MessengerError(
                f"Message for chain {envelope.destination_chain_id} relayed on "
                f"chain {self.domain.chain_id}",
                message_hash=message_hash,
            )
        if message_hash in self.storage["successful"]:
            raise MessageAlreadyRelayedError(
                "Message has already been relayed", message_hash=message_hash
            )

        if caller == self.storage["portal"]:
            if message_hash in self.storage["failed"]:
                raise MessengerError(
                    "Message already failed once; it can only be replayed",
                    message_hash=message_hash,
                )
        elif message_hash not in self.storage["failed"]:
            raise UnauthorizedRelayError(
                f"{caller} cannot deliver a message that has not failed",
                message_hash=message_hash,
            )

        if self.storage["x_domain_sender"] is not None:
            raise MessengerError("Reentrant relay", message_hash=message_hash)

        if gas_limit is not None and gas_limit < envelope.min_gas_limit:
            logger.warning(
                f"Gas limit {gas_limit} below minimum {envelope.min_gas_limit}",
                context=context,
            )
            return self._mark_failed(message_hash)

        snapshot = self.domain.snapshot()
        self.storage["x_domain_sender"] = envelope.sender
        try:
            target = self.domain.contracts.get(envelope.target)
            if target is not None:
                self._call(target.handle_call, envelope.message)
        except Exception as e:
            self.domain.revert_to(snapshot)
            logger.warning(
                f"Target call failed: {type(e).__name__}: {e}", context=context
            )
            return self._mark_failed(message_hash)
        finally:
            self.storage["x_domain_sender"] = None

        self.storage["successful"].add(message_hash)
        self.storage["failed"].discard(message_hash)
        self.emit(RELAYED_MESSAGE, message_hash)
        logger.debug(f"Relayed message to {envelope.target}", context=context)
        return True

    def _mark_failed(self, message_hash: str) -> bool:
        self.storage["failed"].add(message_hash)
        self.emit(FAILED_RELAYED_MESSAGE, message_hash)
        return False
