"""
Unit tests for the fiatbridge exception hierarchy.
"""

import pytest

from fiatbridge.errors import (
    AssetError,
    AuthorizationError,
    BridgePausedError,
    ConfigurationError,
    ContractCallerError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    FiatBridgeError,
    InsufficientBalanceError,
    InvalidTokenPairError,
    LedgerUnderflowError,
    MessageAlreadyRelayedError,
    MessengerError,
    NotOwnerError,
    UnauthorizedFinalizeError,
    ValidationError,
    create_validation_error,
)


class TestFiatBridgeError:
    """Test FiatBridgeError base class."""

    def test_defaults(self):
        """Test default severity and category."""
        error = FiatBridgeError("boom")
        assert error.message == "boom"
        assert error.severity == ErrorSeverity.MEDIUM
        assert error.category == ErrorCategory.SYSTEM
        assert isinstance(error.context, ErrorContext)
        assert str(error) == "FiatBridgeError: boom"

    def test_str_includes_code_and_category(self):
        """Test string representation with non-default fields."""
        error = FiatBridgeError(
            "boom",
            error_code="E1",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.MESSAGING,
        )
        assert str(error) == (
            "FiatBridgeError: boom | Code: E1 | Severity: high | Category: messaging"
        )

    def test_to_dict(self):
        """Test dictionary conversion."""
        cause = ValueError("inner")
        error = FiatBridgeError(
            "boom",
            context=ErrorContext(domain="lock", operation="initiate"),
            cause=cause,
            metadata={"attempt": 1},
        )
        data = error.to_dict()
        assert data["type"] == "FiatBridgeError"
        assert data["cause"] == "inner"
        assert data["context"]["domain"] == "lock"
        assert data["context"]["operation"] == "initiate"
        assert data["metadata"] == {"attempt": 1}


class TestValidationErrors:
    """Test validation error family."""

    def test_validation_error_fields(self):
        """Test field, value and expected are kept."""
        error = ValidationError("bad", field="amount", value=-1, expected="positive")
        assert error.category == ErrorCategory.VALIDATION
        data = error.to_dict()
        assert data["field"] == "amount"
        assert data["value"] == "-1"
        assert data["expected"] == "positive"

    def test_invalid_token_pair(self):
        """Test invalid token pair error."""
        error = InvalidTokenPairError("0xaaa", "0xbbb")
        assert isinstance(error, ValidationError)
        assert error.local_token == "0xaaa"
        assert error.remote_token == "0xbbb"
        assert error.error_code == "INVALID_TOKEN_PAIR"

    def test_bridge_paused(self):
        """Test paused error."""
        error = BridgePausedError()
        assert isinstance(error, ValidationError)
        assert error.error_code == "PAUSED"
        assert "paused" in error.message

    def test_create_validation_error(self):
        """Test validation error factory."""
        error = create_validation_error("amount", -5, "a non-negative integer")
        assert error.field == "amount"
        assert error.value == -5
        assert "expected a non-negative integer, got -5" in error.message


class TestOtherErrors:
    """Test remaining error categories."""

    def test_configuration_error(self):
        """Test configuration error."""
        error = ConfigurationError("zero", config_key="owner", config_value="0x0")
        assert error.category == ErrorCategory.CONFIGURATION
        assert error.to_dict()["config_key"] == "owner"

    @pytest.mark.parametrize(
        "error_class", [NotOwnerError, ContractCallerError, UnauthorizedFinalizeError]
    )
    def test_authorization_errors(self, error_class):
        """Test authorization errors are high severity."""
        error = error_class("denied", caller="0x1", required="0x2")
        assert isinstance(error, AuthorizationError)
        assert error.severity == ErrorSeverity.HIGH
        assert error.category == ErrorCategory.AUTHORIZATION
        assert error.to_dict()["caller"] == "0x1"

    def test_ledger_underflow(self):
        """Test ledger underflow is a critical arithmetic error."""
        error = LedgerUnderflowError("0xa", "0xb", balance=10, amount=11)
        assert error.category == ErrorCategory.ARITHMETIC
        assert error.severity == ErrorSeverity.CRITICAL
        assert error.to_dict()["balance"] == 10
        assert error.to_dict()["amount"] == 11

    def test_asset_errors(self):
        """Test asset errors are external."""
        error = InsufficientBalanceError("short", token="0xt")
        assert isinstance(error, AssetError)
        assert error.category == ErrorCategory.EXTERNAL
        assert error.token == "0xt"

    def test_messenger_errors(self):
        """Test messenger errors carry the message hash."""
        error = MessageAlreadyRelayedError("again", message_hash="0xh")
        assert isinstance(error, MessengerError)
        assert error.category == ErrorCategory.MESSAGING
        assert error.message_hash == "0xh"
