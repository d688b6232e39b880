"""
Fiat token asset contract.

An ERC-20 style token with minter-gated ``mint`` and ``burn``. On the lock
side it is the native asset the bridge escrows; on the mint side the bridge
holds the minter role and mints or burns the synthetic representation.
"""

from typing import Set

from ..errors import (
    InsufficientAllowanceError,
    InsufficientBalanceError,
    MinterAuthorizationError,
    NotOwnerError,
    ValidationError,
)
from .abi import ZERO_ADDRESS, EventSpec, to_address
from .contract import Contract

TRANSFER = EventSpec(
    "Transfer", (("from", "address"), ("to", "address"), ("value", "uint256"))
)
APPROVAL = EventSpec(
    "Approval", (("owner", "address"), ("spender", "address"), ("value", "uint256"))
)
MINT = EventSpec(
    "Mint", (("minter", "address"), ("to", "address"), ("amount", "uint256"))
)
BURN = EventSpec("Burn", (("burner", "address"), ("amount", "uint256")))
MINTER_CONFIGURED = EventSpec("MinterConfigured", (("minter", "address"),))
MINTER_REMOVED = EventSpec("MinterRemoved", (("old_minter", "address"),))


def _require_amount(amount: int) -> int:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise ValidationError(
            f"Amount must be a non-negative integer, got {amount!r}",
            field="amount",
            value=amount,
        )
    return amount


class FiatToken(Contract):
    """ERC-20 token with owner-configured minters."""

    def __init__(
        self,
        domain,
        address: str,
        name: str,
        symbol: str,
        decimals: int = 6,
        owner: str = None,
    ):
        super().__init__(domain, address)
        self.storage.update(
            {
                "name": name,
                "symbol": symbol,
                "decimals": decimals,
                "owner": to_address(owner) if owner else domain.msg_sender,
                "total_supply": 0,
                "balances": {},
                "allowances": {},
                "minters": set(),
            }
        )

    # Views

    @property
    def name(self) -> str:
        return self.storage["name"]

    @property
    def symbol(self) -> str:
        return self.storage["symbol"]

    @property
    def decimals(self) -> int:
        return self.storage["decimals"]

    @property
    def owner(self) -> str:
        return self.storage["owner"]

    def total_supply(self) -> int:
        """Get total supply."""
        return self.storage["total_supply"]

    def balance_of(self, account: str) -> int:
        """Get balance of account."""
        return self.storage["balances"].get(to_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        """Get allowance."""
        return self.storage["allowances"].get(to_address(owner), {}).get(
            to_address(spender), 0
        )

    def is_minter(self, account: str) -> bool:
        return to_address(account) in self.storage["minters"]

    @property
    def minters(self) -> Set[str]:
        return set(self.storage["minters"])

    # ERC-20

    def transfer(self, to: str, amount: int) -> bool:
        """Transfer tokens from the caller."""
        self._transfer(self.msg_sender, to, amount)
        return True

    def approve(self, spender: str, amount: int) -> bool:
        """Approve spender."""
        owner = self.msg_sender
        spender = to_address(spender)
        _require_amount(amount)
        self.storage["allowances"].setdefault(owner, {})[spender] = amount
        self.emit(APPROVAL, owner, spender, amount)
        return True

    def transfer_from(self, sender: str, to: str, amount: int) -> bool:
        """Transfer from ``sender`` using the caller's allowance."""
        spender = self.msg_sender
        sender = to_address(sender)
        _require_amount(amount)
        allowed = self.allowance(sender, spender)
        if amount > allowed:
            raise InsufficientAllowanceError(
                f"Allowance {allowed} of {spender} is below {amount}",
                token=self.address,
            )
        self.storage["allowances"].setdefault(sender, {})[spender] = allowed - amount
        self._transfer(sender, to, amount)
        return True

    def _transfer(self, sender: str, to: str, amount: int) -> None:
        sender = to_address(sender)
        to = to_address(to)
        _require_amount(amount)
        if to == ZERO_ADDRESS:
            raise ValidationError("Transfer to the zero address", field="to", value=to)
        balances = self.storage["balances"]
        balance = balances.get(sender, 0)
        if amount > balance:
            raise InsufficientBalanceError(
                f"Balance {balance} of {sender} is below {amount}", token=self.address
            )
        balances[sender] = balance - amount
        balances[to] = balances.get(to, 0) + amount
        self.emit(TRANSFER, sender, to, amount)

    # Mint and burn

    def mint(self, to: str, amount: int) -> bool:
        """Mint tokens to ``to``; caller must be a minter."""
        minter = self._require_minter()
        to = to_address(to)
        _require_amount(amount)
        if to == ZERO_ADDRESS:
            raise ValidationError("Mint to the zero address", field="to", value=to)
        balances = self.storage["balances"]
        balances[to] = balances.get(to, 0) + amount
        self.storage["total_supply"] += amount
        self.emit(MINT, minter, to, amount)
        self.emit(TRANSFER, ZERO_ADDRESS, to, amount)
        return True

    def burn(self, amount: int) -> None:
        """Burn tokens held by the caller; caller must be a minter."""
        burner = self._require_minter()
        _require_amount(amount)
        balances = self.storage["balances"]
        balance = balances.get(burner, 0)
        if amount > balance:
            raise InsufficientBalanceError(
                f"Burn amount {amount} exceeds balance {balance}", token=self.address
            )
        balances[burner] = balance - amount
        self.storage["total_supply"] -= amount
        self.emit(BURN, burner, amount)
        self.emit(TRANSFER, burner, ZERO_ADDRESS, amount)

    def _require_minter(self) -> str:
        caller = self.msg_sender
        if caller not in self.storage["minters"]:
            raise MinterAuthorizationError(
                f"{caller} is not a minter", token=self.address
            )
        return caller

    # Administration

    def configure_minter(self, minter: str) -> None:
        """Grant the minter role; token owner only."""
        self._require_owner()
        minter = to_address(minter)
        self.storage["minters"].add(minter)
        self.emit(MINTER_CONFIGURED, minter)

    def remove_minter(self, minter: str) -> None:
        """Revoke the minter role; token owner only."""
        self._require_owner()
        minter = to_address(minter)
        self.storage["minters"].discard(minter)
        self.emit(MINTER_REMOVED, minter)

    def _require_owner(self) -> None:
        if self.msg_sender != self.storage["owner"]:
            raise NotOwnerError(
                "Caller is not the token owner",
                caller=self.msg_sender,
                required=self.storage["owner"],
            )
