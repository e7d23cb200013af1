"""
Tests for the identity module.
"""
import pytest

from relayrpc_sdk.exceptions import InvalidKeyFormatError, ValidationError
from relayrpc_sdk.identity import ClientIdentity, derive_address, load_identity
from relayrpc_sdk.identity.ec_constants import SECP256K1_N

from conftest import TEST_ADDRESS, TEST_PRIV_KEY


class TestLoadIdentity:
    """Test parsing private keys into identities."""

    def test_load_with_prefix(self):
        """Test loading a 0x-prefixed key"""
        identity = load_identity(TEST_PRIV_KEY)
        assert isinstance(identity, ClientIdentity)
        assert identity.address == TEST_ADDRESS

    def test_load_without_prefix(self):
        """Test loading a bare hex key gives the same identity"""
        identity = load_identity(TEST_PRIV_KEY[2:])
        assert identity.address == TEST_ADDRESS

    def test_load_uppercase_and_whitespace(self):
        """Test surrounding whitespace and uppercase hex are accepted"""
        identity = load_identity("  0x" + TEST_PRIV_KEY[2:].upper() + "\n")
        assert identity.address == TEST_ADDRESS

    @pytest.mark.parametrize("bad_key", [
        "",
        "0x",
        "0x1234",
        "0x" + "zz" * 32,
        "0x" + "11" * 33,
        "not a key at all",
    ])
    def test_malformed_key(self, bad_key):
        """Test malformed hex is rejected"""
        with pytest.raises(InvalidKeyFormatError):
            load_identity(bad_key)

    @pytest.mark.parametrize("scalar", [0, SECP256K1_N, SECP256K1_N + 1])
    def test_out_of_range_key(self, scalar):
        """Test scalars outside [1, n-1] are rejected"""
        key = "0x" + format(scalar % (1 << 256), "064x")
        with pytest.raises(InvalidKeyFormatError, match="range"):
            load_identity(key)

    def test_max_valid_key(self):
        """Test n-1 is the largest accepted scalar"""
        identity = load_identity("0x" + format(SECP256K1_N - 1, "064x"))
        assert identity.address.startswith("0x")

    def test_non_string_key(self):
        """Test non-string keys are rejected"""
        with pytest.raises(InvalidKeyFormatError):
            load_identity(12345)

    def test_invalid_key_is_validation_error(self):
        """Test key errors are caught as both ValidationError and ValueError"""
        with pytest.raises(ValidationError):
            load_identity("0x00")
        with pytest.raises(ValueError):
            load_identity("0x00")


class TestDeriveAddress:
    """Test address derivation."""

    def test_derive_address(self, identity):
        """Test the derived address matches the known address for the key"""
        assert derive_address(identity) == TEST_ADDRESS

    def test_derive_address_is_stable(self, identity):
        """Test repeated derivation returns the same address"""
        assert derive_address(identity) == derive_address(identity)
        assert derive_address(load_identity(TEST_PRIV_KEY)) == derive_address(identity)

    def test_identity_is_immutable(self, identity):
        """Test identity fields cannot be reassigned"""
        with pytest.raises(Exception):
            identity.account = None

    def test_repr_hides_key(self, identity):
        """Test the private key never appears in repr"""
        text = repr(identity)
        assert TEST_ADDRESS in text
        assert TEST_PRIV_KEY[2:] not in text.lower()
