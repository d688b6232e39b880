"""
Message channel between two paired messengers.

The channel models the transport underneath the messengers: it holds
envelopes that have been committed on their source domain and delivers
them to the destination messenger whenever asked, in any order and after
any delay. It never delivers on its own.
"""

import random
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Dict, List, Optional

from ..errors import MessageNotFoundError, MessengerError
from ..logging import LogContext, get_logger
from .messenger import CrossDomainMessage, CrossDomainMessenger

logger = get_logger(__name__)


class MessageChannel(ABC):
    """Asynchronous, authenticated channel between two domains."""

    @abstractmethod
    def remote_chain_id(self, messenger: CrossDomainMessenger) -> int:
        """Chain id of the domain opposite ``messenger``."""
        pass

    @abstractmethod
    def enqueue(self, envelope: CrossDomainMessage) -> None:
        """Accept a committed outbound message."""
        pass

    @abstractmethod
    def pending(self) -> List[CrossDomainMessage]:
        """Messages accepted but not yet delivered."""
        pass

    @abstractmethod
    def deliver(self, message_hash: str, gas_limit: Optional[int] = None) -> bool:
        """Deliver one pending message to its destination messenger."""
        pass


class CrossDomainChannel(MessageChannel):
    """In-memory channel connecting exactly two messengers."""

    def __init__(self, name: str = "channel"):
        self.name = name
        self._messengers: Dict[int, CrossDomainMessenger] = {}
        self._portals: Dict[int, str] = {}
        self._pending: "OrderedDict[str, CrossDomainMessage]" = OrderedDict()
        self._delivered: Dict[str, CrossDomainMessage] = {}
        self._rejected: Dict[str, CrossDomainMessage] = {}
        self.messages_sent = 0
        self.messages_delivered = 0
        self.messages_rejected = 0

    def connect(
        self, messenger_a: CrossDomainMessenger, messenger_b: CrossDomainMessenger
    ) -> None:
        """Pair two messengers living on different domains."""
        if self._messengers:
            raise MessengerError(f"Channel {self.name} is already connected")
        if messenger_a.domain.chain_id == messenger_b.domain.chain_id:
            raise MessengerError("Cannot connect two messengers on the same chain")

        for messenger in (messenger_a, messenger_b):
            chain_id = messenger.domain.chain_id
            portal = messenger.domain.create_account(f"{self.name}-portal")
            messenger.bind_channel(self, portal)
            self._messengers[chain_id] = messenger
            self._portals[chain_id] = portal

    def messenger_for(self, chain_id: int) -> CrossDomainMessenger:
        """Messenger on the given chain."""
        try:
            return self._messengers[chain_id]
        except KeyError:
            raise MessengerError(f"Chain {chain_id} is not connected to {self.name}")

    def remote_chain_id(self, messenger: CrossDomainMessenger) -> int:
        for chain_id, candidate in self._messengers.items():
            if candidate is not messenger:
                return chain_id
        raise MessengerError(f"Messenger {messenger.address} has no counterpart")

    def enqueue(self, envelope: CrossDomainMessage) -> None:
        self._pending[envelope.message_hash] = envelope
        self.messages_sent += 1
        logger.debug(
            f"Accepted message {envelope.message_hash}",
            context=LogContext(
                component=self.name,
                operation="enqueue",
                correlation_id=envelope.message_hash,
            ),
        )

    def inject(self, envelope: CrossDomainMessage) -> None:
        """Place an arbitrary envelope in the pending set.

        Used to simulate transport faults (duplicates, forged senders) that
        the messenger contract is assumed never to see.
        """
        self._pending[envelope.message_hash] = envelope

    def pending(self) -> List[CrossDomainMessage]:
        return list(self._pending.values())

    def deliver(self, message_hash: str, gas_limit: Optional[int] = None) -> bool:
        """Deliver one pending message.

        The envelope leaves the pending set whatever the outcome. When the
        destination messenger rejects the delivery outright (duplicate,
        wrong chain, unauthorized) the envelope is recorded as rejected and
        the messenger's error propagates; it is never re-queued.
        """
        envelope = self._pending.pop(message_hash, None)
        if envelope is None:
            raise MessageNotFoundError(
                "No pending message with this hash", message_hash=message_hash
            )

        chain_id = envelope.destination_chain_id
        try:
            messenger = self.messenger_for(chain_id)
            success = messenger.domain.transact(
                self._portals[chain_id], messenger.relay_message, envelope, gas_limit
            )
        except MessengerError as e:
            self._rejected[message_hash] = envelope
            self.messages_rejected += 1
            logger.warning(
                f"Delivery of {message_hash} rejected: {e.message}",
                context=LogContext(
                    component=self.name,
                    operation="deliver",
                    correlation_id=message_hash,
                ),
            )
            raise

        self._delivered[message_hash] = envelope
        self.messages_delivered += 1
        logger.debug(
            f"Delivered message {message_hash} (success={success})",
            context=LogContext(
                domain=messenger.domain.name,
                component=self.name,
                operation="deliver",
                correlation_id=message_hash,
            ),
        )
        return success

    def deliver_all(
        self, rng: Optional[random.Random] = None, gas_limit: Optional[int] = None
    ) -> Dict[str, bool]:
        """Deliver every pending message, shuffled when ``rng`` is given.

        A rejected delivery is reported as ``False`` and does not stop the
        remaining messages from being delivered.
        """
        results: Dict[str, bool] = {}
        while self._pending:
            hashes = list(self._pending)
            if rng is not None:
                rng.shuffle(hashes)
            for message_hash in hashes:
                try:
                    results[message_hash] = self.deliver(message_hash, gas_limit)
                except MessengerError:
                    results[message_hash] = False
        return results

    def replay(
        self, message_hash: str, relayer: str, gas_limit: Optional[int] = None
    ) -> bool:
        """Replay a delivered-but-failed message on behalf of ``relayer``."""
        envelope = self._delivered.get(message_hash)
        if envelope is None:
            raise MessageNotFoundError(
                "Message has not been delivered", message_hash=message_hash
            )
        messenger = self.messenger_for(envelope.destination_chain_id)
        return messenger.domain.transact(
            relayer, messenger.relay_message, envelope, gas_limit
        )

    def get_delivered(self, message_hash: str) -> Optional[CrossDomainMessage]:
        return self._delivered.get(message_hash)

    def rejected(self) -> List[CrossDomainMessage]:
        """Envelopes the destination messenger refused to accept."""
        return list(self._rejected.values())
