"""
Key parsing and address derivation for relay identities.
"""
import logging
import string

from eth_account import Account

from ..exceptions import InvalidKeyFormatError
from .ec_constants import PRIVATE_KEY_HEX_LENGTH, SECP256K1_MAX, SECP256K1_MIN
from .types import ClientIdentity

logger = logging.getLogger(__name__)


def _normalize_key_hex(secret_hex: str) -> str:
    """
    Strip the 0x prefix and check the key is 64 hex digits.

    Raises:
        InvalidKeyFormatError: If the key is not a 32-byte hex string
    """
    if not isinstance(secret_hex, str):
        raise InvalidKeyFormatError(f"Private key must be a hex string, got {type(secret_hex).__name__}")

    key = secret_hex.strip()
    if key[:2] in ("0x", "0X"):
        key = key[2:]

    if len(key) != PRIVATE_KEY_HEX_LENGTH:
        raise InvalidKeyFormatError(
            f"Private key must be {PRIVATE_KEY_HEX_LENGTH} hex characters (32 bytes), got {len(key)}"
        )
    if not all(c in string.hexdigits for c in key):
        raise InvalidKeyFormatError("Private key contains non-hex characters")
    return key


def load_identity(secret_hex: str) -> ClientIdentity:
    """
    Parse a hex-encoded private scalar into a client identity.

    Args:
        secret_hex: Private key as hex, with or without 0x prefix

    Returns:
        ClientIdentity wrapping the signing key

    Raises:
        InvalidKeyFormatError: If the hex is malformed or out of the secp256k1 key range
    """
    key = _normalize_key_hex(secret_hex)

    scalar = int(key, 16)
    if not SECP256K1_MIN <= scalar <= SECP256K1_MAX:
        raise InvalidKeyFormatError("Private key is outside the valid secp256k1 range")

    try:
        account = Account.from_key("0x" + key)
    except (ValueError, TypeError) as e:
        raise InvalidKeyFormatError(f"Invalid private key: {e}") from e

    logger.debug(f"Loaded relay identity {account.address}")
    return ClientIdentity(account=account)


def derive_address(identity: ClientIdentity) -> str:
    """
    Get the public account identifier for an identity.

    Args:
        identity: Client identity

    Returns:
        0x-prefixed checksummed Ethereum address
    """
    return identity.address
