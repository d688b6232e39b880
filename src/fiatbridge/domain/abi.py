"""
ABI helpers for the fiatbridge domain model.

Function calls that cross domains travel as ABI-encoded calldata (4-byte
keccak selector followed by ``eth_abi`` encoded arguments). Events carry a
keccak topic computed from their canonical signature.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from eth_abi import decode, encode
from web3 import Web3

from ..errors import DomainError, ValidationError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def to_address(value: Any) -> str:
    """Normalize an address to its checksummed form."""
    if isinstance(value, (bytes, bytearray)):
        value = "0x" + bytes(value).hex()
    if not isinstance(value, str) or not Web3.is_address(value):
        raise ValidationError(
            f"Invalid address: {value!r}", field="address", value=value
        )
    return Web3.to_checksum_address(value)


def is_zero_address(value: Optional[str]) -> bool:
    """Check whether value is unset or the zero address."""
    return value is None or to_address(value) == ZERO_ADDRESS


def same_address(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two addresses ignoring checksum case."""
    if a is None or b is None:
        return False
    return a.lower() == b.lower()


@dataclass(frozen=True)
class FunctionSpec:
    """An externally callable contract function."""

    name: str
    method: str
    types: Tuple[str, ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.types)})"

    @property
    def selector(self) -> bytes:
        return bytes(Web3.keccak(text=self.signature)[:4])

    def encode_call(self, *args: Any) -> bytes:
        """Encode a call to this function as calldata."""
        if len(args) != len(self.types):
            raise ValidationError(
                f"{self.signature} takes {len(self.types)} arguments, got {len(args)}",
                field="args",
            )
        return self.selector + encode(list(self.types), list(args))

    def decode_args(self, data: bytes) -> Tuple[Any, ...]:
        """Decode calldata arguments (without the selector)."""
        values = decode(list(self.types), data)
        return tuple(
            to_address(value) if abi_type == "address" else value
            for abi_type, value in zip(self.types, values)
        )


@dataclass(frozen=True)
class EventSpec:
    """A contract event: name plus ordered (param name, ABI type) pairs."""

    name: str
    params: Tuple[Tuple[str, str], ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(abi_type for _, abi_type in self.params)})"

    @property
    def topic(self) -> str:
        return Web3.to_hex(Web3.keccak(text=self.signature))

    @property
    def param_names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.params)


def function_table(specs: Iterable[FunctionSpec]) -> Dict[bytes, FunctionSpec]:
    """Build a selector -> function lookup table."""
    return {spec.selector: spec for spec in specs}


def split_calldata(
    table: Dict[bytes, FunctionSpec], data: bytes
) -> Tuple[FunctionSpec, Tuple[Any, ...]]:
    """Resolve calldata to a function spec and its decoded arguments."""
    if len(data) < 4:
        raise DomainError("Calldata shorter than a function selector")
    spec = table.get(bytes(data[:4]))
    if spec is None:
        raise DomainError(f"Unknown function selector 0x{bytes(data[:4]).hex()}")
    return spec, spec.decode_args(bytes(data[4:]))
