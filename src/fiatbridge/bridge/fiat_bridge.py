"""
Fiat token bridge.

One ``FiatBridge`` runs on each domain of a pair. On the lock side it
escrows the native token and tracks escrow in a ``DepositLedger``; on the
mint side it mints and burns the synthetic token. Initiation mutates local
state and queues a finalize call to the paired bridge in the same domain
transaction, so a deposit can never be recorded without its message (or
the reverse). Finalization is accepted only when the bound messenger
attests that the paired bridge sent it.

Pause blocks new initiations only. Messages already in flight still
finalize on a paused bridge.
"""

from typing import Optional

from ..domain import Contract, FunctionSpec, function_table, to_address
from ..errors import (
    BridgePausedError,
    LedgerUnderflowError,
    NotOwnerError,
    UnauthorizedFinalizeError,
    ValidationError,
)
from ..logging import LogContext, get_logger
from .authorization import (
    ContractCallerHeuristic,
    OwnableMixin,
    PausableMixin,
    require_cross_domain_sender,
)
from .bridge_types import BridgeConfig, DomainRole, TokenPair
from .events import policy_for
from .ledger import DepositLedger
from .pairing import TokenPairing

logger = get_logger(__name__)

_FINALIZE_TYPES = ("address", "address", "address", "address", "uint256", "bytes")

FINALIZE_BRIDGE_ERC20 = FunctionSpec(
    "finalizeBridgeERC20", "finalize_bridge_erc20", _FINALIZE_TYPES
)
FINALIZE_DEPOSIT = FunctionSpec("finalizeDeposit", "finalize_deposit", _FINALIZE_TYPES)
FINALIZE_ERC20_WITHDRAWAL = FunctionSpec(
    "finalizeERC20Withdrawal", "finalize_erc20_withdrawal", _FINALIZE_TYPES
)


class FiatBridge(OwnableMixin, PausableMixin, Contract):
    """Bridge endpoint for one domain of a lock/mint pair."""

    EXTERNAL_FUNCTIONS = function_table(
        [FINALIZE_BRIDGE_ERC20, FINALIZE_DEPOSIT, FINALIZE_ERC20_WITHDRAWAL]
    )

    def __init__(self, domain, address: str):
        super().__init__(domain, address)
        self.storage.update(
            {
                "initializer": domain.msg_sender,
                "initialized": False,
                "owner": None,
                "paused": False,
                "config": None,
                "ledger": None,
            }
        )

    def initialize(self, config: BridgeConfig) -> None:
        """Bind messenger, paired bridge, tokens and owner. Callable once."""
        if self.storage["initialized"]:
            raise ValidationError("Bridge is already initialized", field="initialized")
        if self.msg_sender != self.storage["initializer"]:
            raise NotOwnerError(
                "Only the deployer can initialize the bridge",
                caller=self.msg_sender,
                required=self.storage["initializer"],
            )

        config = config.validate()
        self.storage["config"] = config
        self.storage["initialized"] = True
        if config.role == DomainRole.LOCK:
            self.storage["ledger"] = DepositLedger()
        self._set_owner(config.owner)
        logger.info(
            f"Initialized {config.role.value} bridge",
            context=self._log_context("initialize"),
            extra={"messenger": config.messenger, "other_bridge": config.other_bridge},
        )

    # Views

    @property
    def is_initialized(self) -> bool:
        return self.storage["initialized"]

    @property
    def config(self) -> BridgeConfig:
        config = self.storage["config"]
        if config is None:
            raise ValidationError("Bridge is not initialized", field="initialized")
        return config

    @property
    def role(self) -> DomainRole:
        return self.config.role

    @property
    def messenger(self) -> str:
        return self.config.messenger

    @property
    def other_bridge(self) -> str:
        return self.config.other_bridge

    @property
    def lock_token(self) -> str:
        return self.config.lock_token

    @property
    def mint_token(self) -> str:
        return self.config.mint_token

    @property
    def local_token(self) -> str:
        return self.config.local_token

    @property
    def remote_token(self) -> str:
        return self.config.remote_token

    @property
    def pairing(self) -> TokenPairing:
        config = self.config
        return TokenPairing(config.role, config.lock_token, config.mint_token)

    def deposits(self, local_token: str, remote_token: str) -> int:
        """Escrowed amount for a pair; always 0 on the mint side."""
        ledger = self.storage["ledger"]
        if ledger is None:
            return 0
        return ledger.balance_of(local_token, remote_token)

    # Initiation

    def bridge_erc20(
        self,
        local_token: str,
        remote_token: str,
        amount: int,
        min_gas_limit: int,
        extra_data: bytes = b"",
    ) -> str:
        """Send ``amount`` to the caller's own address on the paired domain."""
        self._require_direct_caller()
        sender = self.msg_sender
        return self._initiate_bridge_erc20(
            local_token, remote_token, sender, sender, amount, min_gas_limit, extra_data
        )

    def bridge_erc20_to(
        self,
        local_token: str,
        remote_token: str,
        to: str,
        amount: int,
        min_gas_limit: int,
        extra_data: bytes = b"",
    ) -> str:
        """Send ``amount`` to ``to`` on the paired domain."""
        return self._initiate_bridge_erc20(
            local_token,
            remote_token,
            self.msg_sender,
            to,
            amount,
            min_gas_limit,
            extra_data,
        )

    def deposit_erc20(
        self,
        l1_token: str,
        l2_token: str,
        amount: int,
        min_gas_limit: int,
        extra_data: bytes = b"",
    ) -> str:
        """Legacy lock-side entry point for ``bridge_erc20``."""
        self._require_role(DomainRole.LOCK, "deposit_erc20")
        self._require_direct_caller()
        sender = self.msg_sender
        return self._initiate_bridge_erc20(
            l1_token, l2_token, sender, sender, amount, min_gas_limit, extra_data
        )

    def deposit_erc20_to(
        self,
        l1_token: str,
        l2_token: str,
        to: str,
        amount: int,
        min_gas_limit: int,
        extra_data: bytes = b"",
    ) -> str:
        """Legacy lock-side entry point for ``bridge_erc20_to``."""
        self._require_role(DomainRole.LOCK, "deposit_erc20_to")
        return self._initiate_bridge_erc20(
            l1_token, l2_token, self.msg_sender, to, amount, min_gas_limit, extra_data
        )

    def withdraw(
        self,
        l2_token: str,
        amount: int,
        min_gas_limit: int,
        extra_data: bytes = b"",
    ) -> str:
        """Legacy mint-side entry point for ``bridge_erc20``."""
        self._require_role(DomainRole.MINT, "withdraw")
        self._require_direct_caller()
        sender = self.msg_sender
        return self._initiate_bridge_erc20(
            l2_token, self.remote_token, sender, sender, amount, min_gas_limit, extra_data
        )

    def withdraw_to(
        self,
        l2_token: str,
        to: str,
        amount: int,
        min_gas_limit: int,
        extra_data: bytes = b"",
    ) -> str:
        """Legacy mint-side entry point for ``bridge_erc20_to``."""
        self._require_role(DomainRole.MINT, "withdraw_to")
        return self._initiate_bridge_erc20(
            l2_token,
            self.remote_token,
            self.msg_sender,
            to,
            amount,
            min_gas_limit,
            extra_data,
        )

    def _initiate_bridge_erc20(
        self,
        local_token: str,
        remote_token: str,
        sender: str,
        to: str,
        amount: int,
        min_gas_limit: int,
        extra_data: bytes,
    ) -> str:
        if self.paused():
            raise BridgePausedError()

        pair = TokenPair(local_token, remote_token).normalized()
        self.pairing.require_valid(pair.local, pair.remote)
        to = to_address(to)
        extra_data = bytes(extra_data)

        token = self.domain.get_contract(pair.local)
        if self.role == DomainRole.LOCK:
            self._call(token.transfer_from, sender, self.address, amount)
            self.storage["ledger"].increase(pair.local, pair.remote, amount)
        else:
            # Pull first so tokens without a third-party burn still work.
            self._call(token.transfer_from, sender, self.address, amount)
            self._call(token.burn, amount)

        policy_for(self.role).emit_initiated(
            self, pair.local, pair.remote, sender, to, amount, extra_data
        )

        remote = pair.swapped()
        message = FINALIZE_BRIDGE_ERC20.encode_call(
            remote.local, remote.remote, sender, to, amount, extra_data
        )
        messenger = self.domain.get_contract(self.messenger)
        message_hash = self._call(
            messenger.send_message, self.other_bridge, message, min_gas_limit
        )

        logger.debug(
            f"Initiated transfer of {amount} from {sender} to {to}",
            context=self._log_context("initiate", message_hash),
            extra={"local_token": pair.local, "remote_token": pair.remote},
        )
        return message_hash

    # Finalization

    def finalize_bridge_erc20(
        self,
        local_token: str,
        remote_token: str,
        sender: str,
        to: str,
        amount: int,
        extra_data: bytes = b"",
    ) -> None:
        """Complete a transfer initiated on the paired domain."""
        self._require_from_other_bridge()

        pair = TokenPair(local_token, remote_token).normalized()
        self.pairing.require_valid(pair.local, pair.remote)
        sender = to_address(sender)
        to = to_address(to)
        extra_data = bytes(extra_data)

        token = self.domain.get_contract(pair.local)
        if self.role == DomainRole.LOCK:
            try:
                self.storage["ledger"].decrease(pair.local, pair.remote, amount)
            except LedgerUnderflowError as e:
                logger.warning(
                    f"Rejected finalize exceeding escrow: {e.message}",
                    context=self._log_context("finalize"),
                )
                raise
            self._call(token.transfer, to, amount)
        else:
            self._call(token.mint, to, amount)

        policy_for(self.role).emit_finalized(
            self, pair.local, pair.remote, sender, to, amount, extra_data
        )
        logger.debug(
            f"Finalized transfer of {amount} from {sender} to {to}",
            context=self._log_context("finalize"),
            extra={"local_token": pair.local, "remote_token": pair.remote},
        )

    def finalize_erc20_withdrawal(
        self,
        l1_token: str,
        l2_token: str,
        sender: str,
        to: str,
        amount: int,
        extra_data: bytes = b"",
    ) -> None:
        """Legacy lock-side entry point for ``finalize_bridge_erc20``."""
        self._require_role(DomainRole.LOCK, "finalize_erc20_withdrawal")
        self.finalize_bridge_erc20(l1_token, l2_token, sender, to, amount, extra_data)

    def finalize_deposit(
        self,
        l1_token: str,
        l2_token: str,
        sender: str,
        to: str,
        amount: int,
        extra_data: bytes = b"",
    ) -> None:
        """Legacy mint-side entry point for ``finalize_bridge_erc20``."""
        self._require_role(DomainRole.MINT, "finalize_deposit")
        self.finalize_bridge_erc20(l2_token, l1_token, sender, to, amount, extra_data)

    # Guards

    def _require_direct_caller(self) -> None:
        if self.config.only_eoa_direct:
            ContractCallerHeuristic.require_externally_owned(self.domain, self.msg_sender)

    def _require_role(self, role: DomainRole, operation: str) -> None:
        if self.role != role:
            raise ValidationError(
                f"{operation} is only available on the {role.value} side",
                field="role",
                value=self.role.value,
                expected=role.value,
            )

    def _require_from_other_bridge(self) -> None:
        messenger = self.domain.get_contract(self.messenger)
        try:
            require_cross_domain_sender(messenger, self.msg_sender, self.other_bridge)
        except UnauthorizedFinalizeError as e:
            logger.warning(
                f"Rejected finalize: {e.message}",
                context=self._log_context("finalize"),
                extra={"caller": e.caller, "required": e.required},
            )
            raise

    def _log_context(
        self, operation: str, correlation_id: Optional[str] = None
    ) -> LogContext:
        return LogContext(
            domain=self.domain.name,
            component="FiatBridge",
            operation=operation,
            correlation_id=correlation_id,
        )
