"""
Exceptions for the relay RPC SDK.
"""
from typing import Any, Optional


class RelaySDKError(Exception):
    """Base exception for all relay SDK errors."""
    pass


class ValidationError(RelaySDKError, ValueError):
    """Raised when caller input is rejected before any network call."""
    pass


class InvalidKeyFormatError(ValidationError):
    """Raised when a private key is malformed or outside the secp256k1 key space."""
    pass


class EmptyBundleError(ValidationError):
    """Raised when a bundle operation is called without transactions."""
    pass


class MissingArgumentError(ValidationError):
    """Raised when a required argument is missing or empty."""
    pass


class ConfigurationError(RelaySDKError):
    """Base exception for credential and endpoint configuration errors."""
    pass


class MissingCredentialError(ConfigurationError):
    """Raised when no signing key can be found."""
    pass


class UnknownNetworkError(ConfigurationError, ValueError):
    """Raised when a network label has no known relay endpoint."""
    pass


class SigningError(RelaySDKError):
    """Raised when the request signature cannot be produced."""
    pass


class TransportError(RelaySDKError):
    """
    Raised when the relay cannot be reached or answers with an HTTP failure.

    Attributes:
        status_code: HTTP status code, or None if no response was received
        raw: Raw response body, if any
    """

    def __init__(self, message: str, status_code: Optional[int] = None, raw: Optional[bytes] = None):
        self.status_code = status_code
        self.raw = raw
        super().__init__(message)


class RelayError(RelaySDKError):
    """
    Raised when the relay answers with a JSON-RPC error object.

    Attributes:
        code: JSON-RPC error code
        message: Error message reported by the relay
        data: Optional extra error data
        raw: Raw response body
        status_code: HTTP status code of the reply
    """

    def __init__(
        self,
        code: int,
        message: str,
        data: Any = None,
        raw: Optional[bytes] = None,
        status_code: Optional[int] = None
    ):
        self.code = code
        self.message = message
        self.data = data
        self.raw = raw
        self.status_code = status_code
        super().__init__(f"Relay error {code}: {message}")


class DecodeError(RelaySDKError):
    """
    Raised when a relay reply does not match the expected response shape.

    Attributes:
        status_code: HTTP status code of the reply
        raw: Raw response body
    """

    def __init__(self, message: str, status_code: Optional[int] = None, raw: Optional[bytes] = None):
        self.status_code = status_code
        self.raw = raw
        super().__init__(message)
