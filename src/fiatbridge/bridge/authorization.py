"""
Authorization and pause policy for fiatbridge.

- ``OwnableMixin``: a single owner gates administrative calls.
- ``PausableMixin``: an owner-controlled circuit breaker for new transfers.
- ``ContractCallerHeuristic``: the best-effort "is the caller a contract"
  check applied to direct-caller transfers.
- ``require_cross_domain_sender``: finalize authorization, delegated entirely
  to the messenger's attestation of the originating sender.
"""

from typing import TYPE_CHECKING

from ..domain import ZERO_ADDRESS, EventSpec, same_address, to_address
from ..errors import (
    ContractCallerError,
    NotOwnerError,
    UnauthorizedFinalizeError,
    ValidationError,
)
from ..logging import LogContext, get_logger

if TYPE_CHECKING:
    from ..domain import Domain
    from ..messaging import CrossDomainMessenger

logger = get_logger(__name__)

OWNERSHIP_TRANSFERRED = EventSpec(
    "OwnershipTransferred",
    (("previous_owner", "address"), ("new_owner", "address")),
)
PAUSED = EventSpec("Paused", (("account", "address"),))
UNPAUSED = EventSpec("Unpaused", (("account", "address"),))


class OwnableMixin:
    """Single-owner access control; state lives in ``storage["owner"]``."""

    def owner(self) -> str:
        return self.storage["owner"]

    def _set_owner(self, new_owner: str) -> None:
        previous = self.storage.get("owner") or ZERO_ADDRESS
        self.storage["owner"] = new_owner
        self.emit(OWNERSHIP_TRANSFERRED, previous, new_owner)

    def _require_owner(self) -> None:
        caller = self.msg_sender
        if not same_address(caller, self.storage["owner"]):
            raise NotOwnerError(
                "Caller is not the owner", caller=caller, required=self.storage["owner"]
            )

    def transfer_ownership(self, new_owner: str) -> None:
        """Hand administrative control to ``new_owner``."""
        self._require_owner()
        new_owner = to_address(new_owner)
        if new_owner == ZERO_ADDRESS:
            raise ValidationError(
                "New owner is the zero address", field="new_owner", value=new_owner
            )
        self._set_owner(new_owner)
        logger.info(
            f"Ownership transferred to {new_owner}",
            context=LogContext(domain=self.domain.name, operation="transfer_ownership"),
        )


class PausableMixin:
    """Pause flag gating new initiations only; state lives in ``storage["paused"]``."""

    def paused(self) -> bool:
        return self.storage["paused"]

    def pause(self) -> None:
        """Stop new transfers from being initiated."""
        self._require_owner()
        if self.storage["paused"]:
            raise ValidationError("Bridge is already paused", field="paused", value=True)
        self.storage["paused"] = True
        self.emit(PAUSED, self.msg_sender)
        logger.info(
            "Bridge paused", context=LogContext(domain=self.domain.name, operation="pause")
        )

    def unpause(self) -> None:
        """Allow new transfers again."""
        self._require_owner()
        if not self.storage["paused"]:
            raise ValidationError("Bridge is not paused", field="paused", value=False)
        self.storage["paused"] = False
        self.emit(UNPAUSED, self.msg_sender)
        logger.info(
            "Bridge unpaused",
            context=LogContext(domain=self.domain.name, operation="unpause"),
        )


class ContractCallerHeuristic:
    """Best-effort detection of contract callers.

    An account counts as externally owned when no code is stored at its
    address at call time. This is not a security boundary: a contract calling
    from inside its own constructor has no code yet and passes, and nothing
    stops a contract from arranging that. It only reduces accidental loss
    from contract wallets that may not control the same address on the
    remote domain.
    """

    @staticmethod
    def is_externally_owned(domain: "Domain", account: str) -> bool:
        return domain.code_size(account) == 0

    @classmethod
    def require_externally_owned(cls, domain: "Domain", account: str) -> None:
        if not cls.is_externally_owned(domain, account):
            raise ContractCallerError(
                "Account is not an externally owned account",
                caller=account,
                required="externally owned account",
            )


def require_cross_domain_sender(
    messenger: "CrossDomainMessenger", caller: str, expected_sender: str
) -> None:
    """Accept only calls relayed by ``messenger`` from ``expected_sender``."""
    if not same_address(caller, messenger.address):
        raise UnauthorizedFinalizeError(
            "Finalize must be called by the bound messenger",
            caller=caller,
            required=messenger.address,
        )
    sender = messenger.x_domain_message_sender()
    if not same_address(sender, expected_sender):
        raise UnauthorizedFinalizeError(
            "Cross-domain sender is not the paired bridge",
            caller=sender,
            required=expected_sender,
        )
