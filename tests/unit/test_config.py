"""
Unit tests for bridge types and configuration.
"""

import json

import pytest

from fiatbridge.bridge import BridgeConfig, DomainRole, TokenPair
from fiatbridge.domain import ZERO_ADDRESS
from fiatbridge.errors import ConfigurationError

OWNER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
MESSENGER = "0x" + "22" * 20
OTHER_BRIDGE = "0x" + "33" * 20
LOCK_TOKEN = "0x" + "44" * 20
MINT_TOKEN = "0x" + "55" * 20


def _config(**overrides):
    values = {
        "role": DomainRole.LOCK,
        "owner": OWNER,
        "messenger": MESSENGER,
        "other_bridge": OTHER_BRIDGE,
        "lock_token": LOCK_TOKEN,
        "mint_token": MINT_TOKEN,
    }
    values.update(overrides)
    return BridgeConfig(**values)


class TestDomainRole:
    """Test DomainRole enum."""

    def test_domain_role_values(self):
        """Test that DomainRole has expected values."""
        assert DomainRole.LOCK.value == "lock"
        assert DomainRole.MINT.value == "mint"


class TestTokenPair:
    """Test TokenPair."""

    def test_swapped(self):
        """Test swapping local and remote."""
        pair = TokenPair(LOCK_TOKEN, MINT_TOKEN)
        assert pair.swapped() == TokenPair(MINT_TOKEN, LOCK_TOKEN)
        assert pair.swapped().swapped() == pair

    def test_normalized(self):
        """Test addresses are checksummed."""
        pair = TokenPair(OWNER.lower(), MESSENGER).normalized()
        assert pair == TokenPair(OWNER, MESSENGER)


class TestBridgeConfig:
    """Test BridgeConfig."""

    def test_validate_normalizes(self):
        """Test validation returns a normalized copy."""
        config = _config(owner=OWNER.lower()).validate()
        assert config.owner == OWNER
        assert config.only_eoa_direct is True

    @pytest.mark.parametrize(
        "key", ["owner", "messenger", "other_bridge", "lock_token", "mint_token"]
    )
    def test_zero_address_rejected(self, key):
        """Test every address must be non-zero."""
        with pytest.raises(ConfigurationError) as excinfo:
            _config(**{key: ZERO_ADDRESS}).validate()
        assert excinfo.value.config_key == key

    def test_invalid_address_rejected(self):
        """Test malformed addresses are rejected."""
        with pytest.raises(ConfigurationError) as excinfo:
            _config(messenger="0x1234").validate()
        assert excinfo.value.config_key == "messenger"
        assert excinfo.value.cause is not None

    def test_same_tokens_rejected(self):
        """Test lock and mint tokens must differ."""
        with pytest.raises(ConfigurationError):
            _config(mint_token=LOCK_TOKEN.lower()).validate()

    def test_unknown_role_rejected(self):
        """Test role must be a DomainRole."""
        with pytest.raises(ConfigurationError):
            _config(role="lock").validate()

    def test_local_and_remote_tokens(self):
        """Test token orientation follows the role."""
        lock = _config()
        mint = _config(role=DomainRole.MINT)
        assert (lock.local_token, lock.remote_token) == (LOCK_TOKEN, MINT_TOKEN)
        assert (mint.local_token, mint.remote_token) == (MINT_TOKEN, LOCK_TOKEN)

    def test_dict_round_trip(self):
        """Test dictionary conversion."""
        config = _config(role=DomainRole.MINT, only_eoa_direct=False)
        data = config.to_dict()
        assert data["role"] == "mint"
        assert BridgeConfig.from_dict(data) == config

    def test_from_dict_missing_keys(self):
        """Test missing keys are reported."""
        data = _config().to_dict()
        del data["other_bridge"]
        with pytest.raises(ConfigurationError) as excinfo:
            BridgeConfig.from_dict(data)
        assert excinfo.value.config_key == "other_bridge"

    def test_from_dict_bad_role(self):
        """Test unknown role strings are rejected."""
        data = _config().to_dict()
        data["role"] = "escrow"
        with pytest.raises(ConfigurationError):
            BridgeConfig.from_dict(data)

    def test_from_json_file(self, tmp_path):
        """Test loading configuration from JSON."""
        path = tmp_path / "bridge.json"
        path.write_text(json.dumps(_config().to_dict()))
        assert BridgeConfig.from_json_file(path) == _config()

    def test_from_json_file_unreadable(self, tmp_path):
        """Test missing or malformed files raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            BridgeConfig.from_json_file(tmp_path / "missing.json")
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")
        with pytest.raises(ConfigurationError):
            BridgeConfig.from_json_file(broken)
