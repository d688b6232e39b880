"""
Deposit ledger for the lock side of a bridge pair.

The ledger records how much of each local token the bridge holds in escrow
against each remote token. Entries are keyed by the exact
``(local_token, remote_token)`` pair: two remote tokens mapped to the same
local token get independent entries.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, Tuple

from ..domain import to_address
from ..errors import LedgerUnderflowError, create_validation_error

LedgerKey = Tuple[str, str]


def _require_amount(amount: int) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise create_validation_error("amount", amount, "a non-negative integer")


@dataclass
class DepositLedger:
    """Escrowed balance per (local, remote) token pair."""

    balances: Dict[LedgerKey, int] = field(default_factory=dict)

    def balance_of(self, local_token: str, remote_token: str) -> int:
        """Escrowed amount for the pair (0 when never touched)."""
        return self.balances.get((to_address(local_token), to_address(remote_token)), 0)

    def increase(self, local_token: str, remote_token: str, amount: int) -> int:
        """Add to the entry and return the new balance."""
        _require_amount(amount)
        key = (to_address(local_token), to_address(remote_token))
        self.balances[key] = self.balances.get(key, 0) + amount
        return self.balances[key]

    def decrease(self, local_token: str, remote_token: str, amount: int) -> int:
        """Subtract from the entry and return the new balance.

        Raises ``LedgerUnderflowError`` without touching the entry when the
        amount exceeds the escrowed balance.
        """
        _require_amount(amount)
        key = (to_address(local_token), to_address(remote_token))
        balance = self.balances.get(key, 0)
        if amount > balance:
            raise LedgerUnderflowError(key[0], key[1], balance, amount)
        self.balances[key] = balance - amount
        return self.balances[key]

    def entries(self) -> Iterator[Tuple[LedgerKey, int]]:
        return iter(sorted(self.balances.items()))

    def total(self) -> int:
        return sum(self.balances.values())

    def to_dict(self) -> Dict[str, int]:
        """Convert to a JSON-friendly dictionary."""
        return {f"{local}:{remote}": amount for (local, remote), amount in self.entries()}
