"""
Bridge types and configuration for fiatbridge.

This module defines the domain role tag, the token pair value object and
the configuration a ``FiatBridge`` is initialized with.
"""

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

from ..domain import ZERO_ADDRESS, to_address
from ..errors import ConfigurationError, ValidationError


class DomainRole(Enum):
    """Which side of the pair a bridge instance serves."""

    LOCK = "lock"  # asset is native here and escrowed by the bridge
    MINT = "mint"  # asset is synthetic here and minted/burned by the bridge


@dataclass(frozen=True)
class TokenPair:
    """A (local, remote) orientation of the bridged asset."""

    local: str
    remote: str

    def swapped(self) -> "TokenPair":
        """The same pair as seen from the other domain."""
        return TokenPair(local=self.remote, remote=self.local)

    def normalized(self) -> "TokenPair":
        return TokenPair(local=to_address(self.local), remote=to_address(self.remote))


@dataclass
class BridgeConfig:
    """Configuration for one bridge instance."""

    role: DomainRole
    owner: str
    messenger: str
    other_bridge: str
    lock_token: str
    mint_token: str
    only_eoa_direct: bool = True

    def validate(self) -> "BridgeConfig":
        """Check the configuration and return a copy with normalized addresses."""
        if not isinstance(self.role, DomainRole):
            raise ConfigurationError(
                f"Unknown domain role {self.role!r}",
                config_key="role",
                config_value=self.role,
            )

        normalized = {}
        for key in ("owner", "messenger", "other_bridge", "lock_token", "mint_token"):
            value = getattr(self, key)
            try:
                address = to_address(value)
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid address for {key}: {value!r}",
                    config_key=key,
                    config_value=value,
                    cause=e,
                )
            if address == ZERO_ADDRESS:
                raise ConfigurationError(
                    f"{key} cannot be the zero address",
                    config_key=key,
                    config_value=value,
                )
            normalized[key] = address

        if normalized["lock_token"] == normalized["mint_token"]:
            raise ConfigurationError(
                "lock_token and mint_token must differ",
                config_key="mint_token",
                config_value=self.mint_token,
            )

        return BridgeConfig(
            role=self.role, only_eoa_direct=bool(self.only_eoa_direct), **normalized
        )

    @property
    def local_token(self) -> str:
        return self.lock_token if self.role == DomainRole.LOCK else self.mint_token

    @property
    def remote_token(self) -> str:
        return self.mint_token if self.role == DomainRole.LOCK else self.lock_token

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "role": self.role.value,
            "owner": self.owner,
            "messenger": self.messenger,
            "other_bridge": self.other_bridge,
            "lock_token": self.lock_token,
            "mint_token": self.mint_token,
            "only_eoa_direct": self.only_eoa_direct,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BridgeConfig":
        """Create from dictionary."""
        try:
            role = DomainRole(data["role"])
        except (KeyError, ValueError) as e:
            raise ConfigurationError(
                f"Missing or unknown role: {data.get('role')!r}",
                config_key="role",
                config_value=data.get("role"),
                cause=e,
            )
        missing = [
            key
            for key in ("owner", "messenger", "other_bridge", "lock_token", "mint_token")
            if key not in data
        ]
        if missing:
            raise ConfigurationError(
                f"Missing configuration keys: {', '.join(missing)}",
                config_key=missing[0],
            )
        return cls(
            role=role,
            owner=data["owner"],
            messenger=data["messenger"],
            other_bridge=data["other_bridge"],
            lock_token=data["lock_token"],
            mint_token=data["mint_token"],
            only_eoa_direct=data.get("only_eoa_direct", True),
        )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "BridgeConfig":
        """Load configuration from a JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot read bridge configuration from {path}: {e}",
                config_key="path",
                config_value=str(path),
                cause=e,
            )
        return cls.from_dict(data)
