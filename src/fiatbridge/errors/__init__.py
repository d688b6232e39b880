"""fiatbridge error handling.

Structured exceptions for the bridge protocol, its messenger, the asset
contract and the host-domain model.
"""

from .exceptions import (
    AssetError,
    AuthorizationError,
    BridgePausedError,
    ConfigurationError,
    ContractCallerError,
    DomainError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    FiatBridgeError,
    InsufficientAllowanceError,
    InsufficientBalanceError,
    InvalidTokenPairError,
    LedgerUnderflowError,
    MessageAlreadyRelayedError,
    MessageNotFoundError,
    MessengerError,
    MinterAuthorizationError,
    NotOwnerError,
    UnauthorizedFinalizeError,
    UnauthorizedRelayError,
    ValidationError,
    XDomainSenderUnsetError,
    create_validation_error,
)

__all__ = [
    # Base
    "FiatBridgeError",
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
    # Validation
    "ValidationError",
    "InvalidTokenPairError",
    "BridgePausedError",
    "ConfigurationError",
    "create_validation_error",
    # Authorization
    "AuthorizationError",
    "NotOwnerError",
    "ContractCallerError",
    "UnauthorizedFinalizeError",
    # Arithmetic
    "LedgerUnderflowError",
    # External dependencies
    "AssetError",
    "InsufficientBalanceError",
    "InsufficientAllowanceError",
    "MinterAuthorizationError",
    # Messaging
    "MessengerError",
    "MessageAlreadyRelayedError",
    "MessageNotFoundError",
    "XDomainSenderUnsetError",
    "UnauthorizedRelayError",
    # Host domain
    "DomainError",
]
