"""
Token-pair validation.

Each bridge accepts exactly one orientation of the bridged asset: on the
lock side ``(lock_token, mint_token)``, on the mint side
``(mint_token, lock_token)``. The same predicate guards initiation (the
caller's orientation) and finalization (the inbound message's orientation,
which is the sender's with local and remote swapped). There is no partial
matching.
"""

from dataclasses import dataclass

from ..domain import same_address
from ..errors import InvalidTokenPairError
from .bridge_types import DomainRole, TokenPair


@dataclass(frozen=True)
class TokenPairing:
    """The pairing predicate for one domain role."""

    role: DomainRole
    lock_token: str
    mint_token: str

    @property
    def expected(self) -> TokenPair:
        if self.role == DomainRole.LOCK:
            return TokenPair(local=self.lock_token, remote=self.mint_token)
        return TokenPair(local=self.mint_token, remote=self.lock_token)

    def is_valid(self, local_token: str, remote_token: str) -> bool:
        expected = self.expected
        return same_address(local_token, expected.local) and same_address(
            remote_token, expected.remote
        )

    def require_valid(self, local_token: str, remote_token: str) -> None:
        if not self.is_valid(local_token, remote_token):
            raise InvalidTokenPairError(local_token, remote_token)

    def counterpart(self) -> "TokenPairing":
        """The predicate enforced by the paired bridge."""
        other = DomainRole.MINT if self.role == DomainRole.LOCK else DomainRole.LOCK
        return TokenPairing(other, self.lock_token, self.mint_token)
