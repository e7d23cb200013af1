"""
Request signing for relay authentication.

The relay authenticates a caller by a header of the form
``<address>:<signature>``, where the signature is an EIP-191 personal
message signature over the 0x-prefixed hex keccak256 digest of the exact
request body bytes. The signature is 65 bytes r || s || v with v the raw
recovery id (0 or 1).
"""
import logging

from eth_account import Account
from eth_account.messages import encode_defunct
from web3 import Web3

from .exceptions import SigningError, ValidationError
from .identity import ClientIdentity, derive_address

logger = logging.getLogger(__name__)

DEFAULT_SIGNATURE_HEADER = "X-Relay-Signature"

# r (32) || s (32) || v (1)
SIGNATURE_LENGTH = 65
V_OFFSET = 27


def body_digest_hex(body: bytes) -> str:
    """
    Compute the 0x-prefixed hex keccak256 digest of a request body.

    Args:
        body: Serialized envelope bytes

    Returns:
        Digest as an ASCII hex string
    """
    if not isinstance(body, (bytes, bytearray)):
        raise ValidationError(f"Request body must be bytes, got {type(body).__name__}")
    return Web3.to_hex(Web3.keccak(bytes(body)))


def to_recovery_id_signature(signature: bytes) -> bytes:
    """
    Rewrite a 65-byte signature so its last byte is the raw recovery id.

    eth_account emits v as 27/28; the relay header carries r || s || v
    with v in {0, 1}.
    """
    signature = bytes(signature)
    if len(signature) != SIGNATURE_LENGTH:
        raise SigningError(f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")
    v = signature[-1]
    if v >= V_OFFSET:
        v -= V_OFFSET
    if v not in (0, 1):
        raise SigningError(f"Unexpected signature recovery byte {signature[-1]}")
    return signature[:-1] + bytes([v])


def _to_eth_signature(signature: bytes) -> bytes:
    # Account.recover_message is given v as 27/28 whatever the header carried
    if len(signature) == SIGNATURE_LENGTH and signature[-1] in (0, 1):
        return signature[:-1] + bytes([signature[-1] + V_OFFSET])
    return signature


class RequestSigner:
    """Produces relay signature header values for serialized request bodies"""

    def __init__(self, identity: ClientIdentity):
        """
        Initialize the signer

        Args:
            identity: Identity whose key signs requests
        """
        self.identity = identity

    @property
    def address(self) -> str:
        return derive_address(self.identity)

    def sign(self, body: bytes) -> str:
        """
        Sign a request body and format the header value.

        Args:
            body: Serialized envelope bytes exactly as they will be sent

        Returns:
            Header value "<address>:<0x signature>"

        Raises:
            SigningError: If the signature cannot be produced
        """
        digest = body_digest_hex(body)
        try:
            message = encode_defunct(text=digest)
            signed = self.identity.account.sign_message(message)
        except Exception as e:
            logger.error(f"Request signing failed: {e}")
            raise SigningError(f"Failed to sign request: {e}") from e

        return f"{self.address}:{Web3.to_hex(to_recovery_id_signature(signed.signature))}"


def split_header(header_value: str) -> tuple:
    """
    Split a signature header value into address and signature.

    Raises:
        ValidationError: If the value is not "<address>:<signature>"
    """
    address, sep, signature = header_value.partition(":")
    if not sep or not address or not signature:
        raise ValidationError("Signature header must have the form '<address>:<signature>'")
    return address, signature


def recover_signer(body: bytes, header_value: str) -> str:
    """
    Recover the address that signed a request body.

    Args:
        body: Serialized envelope bytes
        header_value: Signature header value

    Returns:
        Checksummed address recovered from the signature
    """
    _, signature = split_header(header_value)
    message = encode_defunct(text=body_digest_hex(body))
    return Account.recover_message(message, signature=_to_eth_signature(Web3.to_bytes(hexstr=signature)))


def verify_signature(body: bytes, header_value: str) -> bool:
    """
    Check that a header was produced by its claimed address over this body.

    Returns:
        True if the recovered signer matches the header address
    """
    address, _ = split_header(header_value)
    try:
        recovered = recover_signer(body, header_value)
    except Exception as e:
        # eth_keys reports malformed signatures with several unrelated exception types
        logger.debug(f"Signature recovery failed: {e}")
        return False
    return recovered.lower() == address.lower()
