"""Exception hierarchy for fiatbridge.

This module defines the structured exceptions raised by the bridge, the
messenger, the asset contract and the host-domain model. Every failure is
synchronous: the domain transaction boundary restores state and re-raises
the exception to the immediate caller.
"""

import time
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""

    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    ARITHMETIC = "arithmetic"
    EXTERNAL = "external"
    MESSAGING = "messaging"
    CONFIGURATION = "configuration"
    DOMAIN = "domain"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """Context information for an error."""

    timestamp: float = field(default_factory=time.time)
    domain: Optional[str] = None
    component: Optional[str] = None
    operation: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary."""
        return {
            "timestamp": self.timestamp,
            "domain": self.domain,
            "component": self.component,
            "operation": self.operation,
            "metadata": self.metadata,
        }


class FiatBridgeError(Exception):
    """Base exception for all fiatbridge errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context or ErrorContext()
        self.cause = cause
        self.metadata = metadata or {}
        self.timestamp = time.time()
        self.traceback = traceback.format_exc()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"{self.__class__.__name__}: {self.message}"]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.severity != ErrorSeverity.MEDIUM:
            parts.append(f"Severity: {self.severity.value}")

        if self.category != ErrorCategory.SYSTEM:
            parts.append(f"Category: {self.category.value}")

        return " | ".join(parts)


class ValidationError(FiatBridgeError):
    """Validation error."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[Any] = None,
        **kwargs,
    ):
        kwargs.setdefault("category", ErrorCategory.VALIDATION)
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.expected = expected

    def to_dict(self) -> Dict[str, Any]:
        """Convert validation error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "field": self.field,
                "value": str(self.value) if self.value is not None else None,
                "expected": str(self.expected) if self.expected is not None else None,
            }
        )
        return data


class InvalidTokenPairError(ValidationError):
    """The (local, remote) pair does not match this domain's orientation."""

    def __init__(self, local_token: str, remote_token: str, **kwargs):
        super().__init__(
            f"Invalid token pair: local={local_token} remote={remote_token}",
            field="token_pair",
            value=(local_token, remote_token),
            error_code="INVALID_TOKEN_PAIR",
            **kwargs,
        )
        self.local_token = local_token
        self.remote_token = remote_token


class BridgePausedError(ValidationError):
    """New transfers cannot be initiated while the bridge is paused."""

    def __init__(self, message: str = "Bridge is paused", **kwargs):
        super().__init__(message, field="paused", error_code="PAUSED", **kwargs)


class ConfigurationError(FiatBridgeError):
    """Configuration error."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs,
    ):
        super().__init__(message, category=ErrorCategory.CONFIGURATION, **kwargs)
        self.config_key = config_key
        self.config_value = config_value

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "config_key": self.config_key,
                "config_value": str(self.config_value)
                if self.config_value is not None
                else None,
            }
        )
        return data


class AuthorizationError(FiatBridgeError):
    """Caller is not allowed to perform the operation."""

    def __init__(
        self,
        message: str,
        caller: Optional[str] = None,
        required: Optional[str] = None,
        **kwargs,
    ):
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, category=ErrorCategory.AUTHORIZATION, **kwargs)
        self.caller = caller
        self.required = required

    def to_dict(self) -> Dict[str, Any]:
        """Convert authorization error to dictionary."""
        data = super().to_dict()
        data.update({"caller": self.caller, "required": self.required})
        return data


class NotOwnerError(AuthorizationError):
    """Administrative call from an account other than the owner."""


class ContractCallerError(AuthorizationError):
    """Direct transfer attempted by an account that has code."""


class UnauthorizedFinalizeError(AuthorizationError):
    """Finalize not relayed by the bound messenger on behalf of the paired bridge."""


class LedgerUnderflowError(FiatBridgeError):
    """A deposit ledger decrement exceeded the escrowed balance."""

    def __init__(
        self,
        local_token: str,
        remote_token: str,
        balance: int,
        amount: int,
        **kwargs,
    ):
        super().__init__(
            f"Deposit ledger underflow for ({local_token}, {remote_token}): "
            f"balance {balance}, requested {amount}",
            error_code="LEDGER_UNDERFLOW",
            category=ErrorCategory.ARITHMETIC,
            severity=ErrorSeverity.CRITICAL,
            **kwargs,
        )
        self.local_token = local_token
        self.remote_token = remote_token
        self.balance = balance
        self.amount = amount

    def to_dict(self) -> Dict[str, Any]:
        """Convert ledger error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "local_token": self.local_token,
                "remote_token": self.remote_token,
                "balance": self.balance,
                "amount": self.amount,
            }
        )
        return data


class AssetError(FiatBridgeError):
    """Failure reported by the asset contract."""

    def __init__(self, message: str, token: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.EXTERNAL, **kwargs)
        self.token = token


class InsufficientBalanceError(AssetError):
    """Transfer or burn exceeds the account balance."""


class InsufficientAllowanceError(AssetError):
    """transfer_from exceeds the approved allowance."""


class MinterAuthorizationError(AssetError):
    """mint or burn called by an account without the minter role."""


class MessengerError(FiatBridgeError):
    """Messenger failure."""

    def __init__(self, message: str, message_hash: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.MESSAGING, **kwargs)
        self.message_hash = message_hash


class MessageAlreadyRelayedError(MessengerError):
    """The message was already delivered successfully."""


class MessageNotFoundError(MessengerError):
    """No pending or failed message with the given hash."""


class XDomainSenderUnsetError(MessengerError):
    """x_domain_message_sender queried outside a relay."""


class UnauthorizedRelayError(MessengerError):
    """First delivery of a message did not come from the channel."""


class DomainError(FiatBridgeError):
    """Host-domain failure (unknown contract, bad call)."""

    def __init__(self, message: str, domain: Optional[str] = None, **kwargs):
        super().__init__(message, category=ErrorCategory.DOMAIN, **kwargs)
        self.domain = domain


def create_validation_error(
    field: str, value: Any, expected: Any, message: Optional[str] = None
) -> ValidationError:
    """Create a validation error."""
    if message is None:
        message = f"Invalid value for field '{field}': expected {expected}, got {value}"

    return ValidationError(message=message, field=field, value=value, expected=expected)
