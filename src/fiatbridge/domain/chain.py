"""
Host-domain model for fiatbridge.

A ``Domain`` is one independently operated ledger. Calls reaching it are
processed one at a time to completion (single writer). Each top-level call
runs through ``Domain.transact`` and either commits all of its effects or
none of them: contract storage, deployed code, the event log and deferred
outbound side effects are restored from a snapshot when the call raises.
"""

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from web3 import Web3

from ..errors import DomainError
from ..logging import LogContext, get_logger
from .abi import EventSpec, to_address

if TYPE_CHECKING:
    from .contract import Contract

logger = get_logger(__name__)


@dataclass
class EventRecord:
    """An event emitted by a contract during a committed transaction."""

    address: str
    name: str
    topic: str
    args: Dict[str, Any]
    block_number: int
    log_index: int

    def matches_filter(
        self, address_filter: Optional[str] = None, name_filter: Optional[str] = None
    ) -> bool:
        """Check if event matches filter criteria."""
        if address_filter and self.address.lower() != address_filter.lower():
            return False
        if name_filter and self.name != name_filter:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        return {
            "address": self.address,
            "name": self.name,
            "topic": self.topic,
            "args": {
                key: value.hex() if isinstance(value, bytes) else value
                for key, value in self.args.items()
            },
            "block_number": self.block_number,
            "log_index": self.log_index,
        }


@dataclass
class DomainSnapshot:
    """Restorable copy of a domain's mutable state."""

    storage: Dict[str, Dict[str, Any]]
    contracts: Dict[str, "Contract"]
    code: Dict[str, bytes]
    event_count: int
    hook_count: int
    block_number: int


class Domain:
    """A single-writer ledger hosting contracts and accounts."""

    def __init__(self, name: str, chain_id: int):
        self.name = name
        self.chain_id = chain_id
        self.contracts: Dict[str, "Contract"] = {}
        self.code: Dict[str, bytes] = {}
        self.events: List[EventRecord] = []
        self.block_number = 0
        self._call_stack: List[str] = []
        self._pending_hooks: List[Callable[[], None]] = []
        self._address_nonce = 0
        self._in_transaction = False

    def __repr__(self) -> str:
        return f"Domain(name={self.name!r}, chain_id={self.chain_id})"

    @property
    def msg_sender(self) -> str:
        """Immediate caller of the currently executing function."""
        if not self._call_stack:
            raise DomainError("No call in progress", domain=self.name)
        return self._call_stack[-1]

    @property
    def in_transaction(self) -> bool:
        return self._in_transaction

    # Accounts and contracts

    def new_address(self, label: str = "account") -> str:
        """Derive a fresh address unique within this domain."""
        self._address_nonce += 1
        digest = Web3.keccak(
            text=f"{self.name}:{self.chain_id}:{label}:{self._address_nonce}"
        )
        return to_address(bytes(digest[-20:]))

    def create_account(self, label: str = "account") -> str:
        """Create an externally owned account (an address with no code)."""
        return self.new_address(label)

    def register(self, contract: "Contract") -> None:
        """Register a contract object at its address."""
        if contract.address in self.contracts:
            raise DomainError(
                f"Address {contract.address} already hosts a contract", domain=self.name
            )
        self.contracts[contract.address] = contract

    def deploy(
        self,
        factory: Callable[..., "Contract"],
        *args: Any,
        label: str = "contract",
        deployer: Optional[str] = None,
        **kwargs: Any,
    ) -> "Contract":
        """Deploy a contract atomically.

        ``factory`` is called as ``factory(domain, address, *args, **kwargs)``.
        Code is recorded at the address only once the factory returns, so
        during construction the new contract reports a code size of zero.
        """
        address = self.new_address(label)

        def construct() -> "Contract":
            contract = factory(self, address, *args, **kwargs)
            self.code[address] = contract.runtime_code()
            return contract

        contract = self.transact(deployer or address, construct)
        logger.debug(
            f"Deployed {type(contract).__name__} at {address}",
            context=LogContext(domain=self.name, operation="deploy"),
        )
        return contract

    def get_contract(self, address: str) -> "Contract":
        """Resolve a contract by address."""
        contract = self.contracts.get(to_address(address))
        if contract is None:
            raise DomainError(f"No contract at {address}", domain=self.name)
        return contract

    def code_size(self, address: str) -> int:
        """Size of the code stored at an address (0 for accounts)."""
        return len(self.code.get(to_address(address), b""))

    # Execution

    def call(self, sender: str, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Invoke ``fn`` with ``sender`` as the immediate caller."""
        self._call_stack.append(to_address(sender))
        try:
            return fn(*args, **kwargs)
        finally:
            self._call_stack.pop()

    def transact(
        self, sender: str, fn: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> Any:
        """Run one top-level call with all-or-nothing effect."""
        if self._in_transaction:
            raise DomainError(
                "Transactions cannot be nested; use call() inside a transaction",
                domain=self.name,
            )

        snapshot = self.snapshot()
        self._in_transaction = True
        self.block_number += 1
        try:
            result = self.call(sender, fn, *args, **kwargs)
        except Exception as e:
            self.revert_to(snapshot)
            logger.debug(
                f"Transaction reverted: {type(e).__name__}: {e}",
                context=LogContext(domain=self.name, operation="transact"),
            )
            raise
        finally:
            self._in_transaction = False

        hooks, self._pending_hooks = self._pending_hooks, []
        for hook in hooks:
            hook()
        return result

    def snapshot(self) -> DomainSnapshot:
        """Capture the domain's mutable state.

        Every contract's storage is deep-copied, so the cost grows with the
        total state held, including append-only history such as a
        messenger's sent, successful and failed records. Domains are meant
        for bounded simulations, not long-running ledgers.
        """
        return DomainSnapshot(
            storage={
                address: copy.deepcopy(contract.storage)
                for address, contract in self.contracts.items()
            },
            contracts=dict(self.contracts),
            code=dict(self.code),
            event_count=len(self.events),
            hook_count=len(self._pending_hooks),
            block_number=self.block_number,
        )

    def revert_to(self, snapshot: DomainSnapshot) -> None:
        """Restore state captured by ``snapshot``."""
        self.contracts = dict(snapshot.contracts)
        for address, contract in self.contracts.items():
            contract.storage = copy.deepcopy(snapshot.storage[address])
        self.code = dict(snapshot.code)
        del self.events[snapshot.event_count :]
        del self._pending_hooks[snapshot.hook_count :]
        self.block_number = snapshot.block_number

    def after_commit(self, hook: Callable[[], None]) -> None:
        """Defer a side effect until the current transaction commits."""
        if not self._in_transaction:
            raise DomainError("after_commit requires an active transaction", domain=self.name)
        self._pending_hooks.append(hook)

    # Events

    def record_event(self, address: str, spec: EventSpec, args: Dict[str, Any]) -> EventRecord:
        """Append an event to the log."""
        record = EventRecord(
            address=address,
            name=spec.name,
            topic=spec.topic,
            args=dict(args),
            block_number=self.block_number,
            log_index=len(self.events),
        )
        self.events.append(record)
        return record

    def get_events(
        self, address: Optional[str] = None, name: Optional[str] = None
    ) -> List[EventRecord]:
        """Get events matching the filter, oldest first."""
        return [event for event in self.events if event.matches_filter(address, name)]
