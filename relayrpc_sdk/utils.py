"""
Utility functions for the relay RPC SDK.
"""
import urllib.parse
from typing import Any, Dict, List, Union

from .exceptions import ValidationError

LOCAL_HOSTS = ("localhost", "127.0.0.1")


def to_quantity(value: int) -> str:
    """
    Encode a non-negative integer as a minimal 0x-prefixed hex quantity.

    Args:
        value: Integer to encode (e.g. a block number)

    Returns:
        Hex string such as "0x0" or "0xff"

    Raises:
        ValidationError: If value is not a non-negative integer
    """
    # bool is an int subclass but never a valid quantity
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Quantity must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValidationError(f"Quantity must be non-negative, got {value}")
    return hex(value)


def to_block_reference(block: Union[int, str]) -> str:
    """
    Encode a block reference: an integer block number or the tag "latest".

    Args:
        block: Block number or "latest"

    Returns:
        Hex quantity or "latest"
    """
    if block == "latest":
        return block
    if isinstance(block, str):
        raise ValidationError(f"Block reference must be an integer or 'latest', got {block!r}")
    return to_quantity(block)


def validate_relay_url(url: str) -> str:
    """
    Validate a relay endpoint URL.

    The URL must be non-empty and use https://, except for localhost and
    127.0.0.1 which may use plain http for development relays.

    Args:
        url: Endpoint URL

    Returns:
        The URL with any trailing slash removed

    Raises:
        ValidationError: If the URL is empty or insecure
    """
    if not url or not isinstance(url, str):
        raise ValidationError("Relay URL must be a non-empty string")

    parsed = urllib.parse.urlparse(url)
    host = parsed.hostname or ""
    is_local = host in LOCAL_HOSTS
    if parsed.scheme != "https" and not (is_local and parsed.scheme == "http"):
        raise ValidationError(f"Relay URL must use https:// for security (got: {parsed.scheme}://)")
    if not host:
        raise ValidationError(f"Relay URL has no host: {url}")
    return url.rstrip("/")


def sanitize_params(params: List[Any]) -> List[Any]:
    """
    Replace raw transaction payloads with their lengths for safe logging.

    Args:
        params: Serialized JSON-RPC params

    Returns:
        Copy of params with signed transactions redacted
    """
    result = []
    for item in params:
        if isinstance(item, dict):
            result.append(_sanitize_dict(item))
        else:
            result.append(item)
    return result


def _sanitize_dict(item: Dict[str, Any]) -> Dict[str, Any]:
    safe = dict(item)
    if "txs" in safe and isinstance(safe["txs"], list):
        safe["txs"] = f"[REDACTED - {len(safe['txs'])} txs]"
    if "tx" in safe:
        safe["tx"] = f"[REDACTED - {len(str(safe['tx']))} chars]"
    return safe
