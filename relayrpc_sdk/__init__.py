"""
relayrpc-sdk: signed JSON-RPC client for block-builder relays.
"""
from .client import RelayClient, decode_response
from .config import NetworkConfig, load_private_key
from .envelope import RpcEnvelope, build_envelope, serialize_envelope
from .exceptions import (
    ConfigurationError, DecodeError, EmptyBundleError, InvalidKeyFormatError,
    MissingArgumentError, MissingCredentialError, RelayError, RelaySDKError,
    SigningError, TransportError, UnknownNetworkError, ValidationError
)
from .identity import ClientIdentity, derive_address, load_identity
from .models import (
    BundleGasEstimate, BundleHashResult, BundleSimulation, BundleStats,
    RelayMethod, RelayResponse, TxSimulation, UserStats
)
from .signer import RequestSigner, recover_signer, verify_signature
from .transport import HttpTransport, RelayTransport, StubTransport
from .version import __version__

__all__ = [
    # Client
    "RelayClient",
    "decode_response",
    # Identity and signing
    "ClientIdentity",
    "load_identity",
    "derive_address",
    "RequestSigner",
    "recover_signer",
    "verify_signature",
    # Envelope
    "RpcEnvelope",
    "build_envelope",
    "serialize_envelope",
    # Config
    "NetworkConfig",
    "load_private_key",
    # Transport
    "RelayTransport",
    "HttpTransport",
    "StubTransport",
    # Models
    "RelayMethod",
    "RelayResponse",
    "BundleHashResult",
    "BundleSimulation",
    "TxSimulation",
    "BundleGasEstimate",
    "UserStats",
    "BundleStats",
    # Errors
    "RelaySDKError",
    "ValidationError",
    "InvalidKeyFormatError",
    "EmptyBundleError",
    "MissingArgumentError",
    "ConfigurationError",
    "MissingCredentialError",
    "UnknownNetworkError",
    "SigningError",
    "TransportError",
    "RelayError",
    "DecodeError",
    "__version__",
]
