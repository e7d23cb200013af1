"""
Identity module for the relay RPC SDK.

This module parses the caller's secp256k1 signing key and derives the
account address the relay uses to attribute signed requests.
"""
from .crypto import derive_address, load_identity
from .types import ClientIdentity

__all__ = [
    'ClientIdentity',
    'load_identity',
    'derive_address',
]
