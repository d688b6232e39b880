"""
Contract base class for the fiatbridge domain model.

Contracts keep every piece of mutable state in ``self.storage`` so that the
hosting ``Domain`` can snapshot and restore it around a transaction. Derived
values must be read from storage on each access rather than cached on the
instance.
"""

from typing import TYPE_CHECKING, Any, Callable, Dict

from web3 import Web3

from ..errors import DomainError
from .abi import EventSpec, FunctionSpec, split_calldata

if TYPE_CHECKING:
    from .chain import Domain, EventRecord


class Contract:
    """A contract hosted on a ``Domain``."""

    #: selector -> function spec for calls arriving as calldata
    EXTERNAL_FUNCTIONS: Dict[bytes, FunctionSpec] = {}

    def __init__(self, domain: "Domain", address: str):
        self.domain = domain
        self.address = address
        self.storage: Dict[str, Any] = {}
        domain.register(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(address={self.address}, domain={self.domain.name!r})"

    @property
    def msg_sender(self) -> str:
        return self.domain.msg_sender

    def runtime_code(self) -> bytes:
        """Stand-in runtime code recorded at the contract's address."""
        return bytes(Web3.keccak(text=type(self).__qualname__))

    def _call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Call another contract with this contract as the caller."""
        return self.domain.call(self.address, fn, *args, **kwargs)

    def emit(self, spec: EventSpec, *values: Any) -> "EventRecord":
        """Emit an event with values given in parameter order."""
        if len(values) != len(spec.params):
            raise DomainError(
                f"Event {spec.signature} takes {len(spec.params)} values, got {len(values)}",
                domain=self.domain.name,
            )
        return self.domain.record_event(
            self.address, spec, dict(zip(spec.param_names, values))
        )

    def handle_call(self, calldata: bytes) -> Any:
        """Dispatch ABI calldata to the matching method."""
        spec, args = split_calldata(self.EXTERNAL_FUNCTIONS, calldata)
        return getattr(self, spec.method)(*args)
