"""
Host-domain model for fiatbridge.

This module provides the ledger the bridge runs on:
- Single-writer domains with atomic transactions
- Contracts with snapshotted storage and an event log
- ABI calldata and event topics
- The fiat token asset contract
"""

from .abi import (
    ZERO_ADDRESS,
    EventSpec,
    FunctionSpec,
    function_table,
    is_zero_address,
    same_address,
    to_address,
)
from .chain import Domain, DomainSnapshot, EventRecord
from .contract import Contract
from .token import FiatToken

__all__ = [
    "ZERO_ADDRESS",
    "to_address",
    "is_zero_address",
    "same_address",
    "EventSpec",
    "FunctionSpec",
    "function_table",
    "Domain",
    "DomainSnapshot",
    "EventRecord",
    "Contract",
    "FiatToken",
]
