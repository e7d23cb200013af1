"""
RelayClient - Main client for the block-builder relay RPC service.
"""
import json
import logging
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import ValidationError as PydanticValidationError

from ._rate_limited_log import rate_limited_log
from .config import DEFAULT_KEY_ENV_VAR, DEFAULT_NETWORK, NetworkConfig, load_private_key
from .envelope import RequestIdCounter, build_envelope, serialize_envelope
from .exceptions import (
    DecodeError, EmptyBundleError, MissingArgumentError, MissingCredentialError,
    RelayError, TransportError, ValidationError
)
from .identity import load_identity
from .models import (
    BundleGasEstimate, BundleHashResult, BundleSimulation, BundleSimulationRequest,
    BundleStats, BundleStatsRequest, BundleSubmission, GasEstimateRequest,
    PrivateTransactionCancellation, PrivateTransactionSubmission, RelayMethod,
    RelayParams, RelayRequest, RelayResponse, RpcErrorObject, UserStats, UserStatsRequest
)
from .signer import DEFAULT_SIGNATURE_HEADER, RequestSigner
from .transport import DEFAULT_TIMEOUT, HttpTransport, RelayTransport
from .utils import sanitize_params, to_block_reference, to_quantity

T = TypeVar('T')

# Read-only methods the transport may retry
IDEMPOTENT_METHODS = frozenset({
    RelayMethod.GET_USER_STATS,
    RelayMethod.GET_BUNDLE_STATS,
})


def decode_response(
    raw: bytes,
    status_code: int,
    result_type: Type[T],
    content_type: Optional[str] = None
) -> RelayResponse[T]:
    """
    Decode a raw relay reply into a typed response.

    Args:
        raw: Raw response body
        status_code: HTTP status code
        result_type: Expected type of the result field
        content_type: Content-Type header of the reply, if known

    Returns:
        RelayResponse with result populated

    Raises:
        RelayError: If the reply carries a JSON-RPC error object
        TransportError: If the HTTP status signals failure without an RPC error
        DecodeError: If the reply does not match the expected shape
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        if status_code >= 400:
            raise TransportError(f"Relay returned HTTP {status_code}", status_code=status_code, raw=raw) from e
        raise DecodeError(f"Relay response is not valid JSON: {e}", status_code=status_code, raw=raw) from e

    if not isinstance(data, dict):
        if status_code >= 400:
            raise TransportError(f"Relay returned HTTP {status_code}", status_code=status_code, raw=raw)
        raise DecodeError(
            f"Relay response must be a JSON object, got {type(data).__name__}",
            status_code=status_code, raw=raw
        )

    if data.get("error") is not None:
        try:
            error = RpcErrorObject.model_validate(data["error"])
        except PydanticValidationError as e:
            raise DecodeError(f"Malformed relay error object: {data['error']!r}", status_code=status_code, raw=raw) from e
        raise RelayError(
            code=error.code,
            message=error.message,
            data=error.data,
            raw=raw,
            status_code=status_code
        )

    if status_code >= 400:
        raise TransportError(f"Relay returned HTTP {status_code}", status_code=status_code, raw=raw)

    if data.get("result") is None:
        raise DecodeError("Relay response has neither result nor error", status_code=status_code, raw=raw)

    try:
        return RelayResponse[result_type].model_validate({
            "id": data.get("id"),
            "jsonrpc": data.get("jsonrpc"),
            "result": data["result"],
            "raw": raw,
            "status_code": status_code,
            "content_type": content_type,
        })
    except PydanticValidationError as e:
        raise DecodeError(f"Unexpected relay result shape: {e}", status_code=status_code, raw=raw) from e


class RelayClient:
    """
    Client for a block-builder relay.

    Every call is built, signed, sent and decoded independently. After
    construction the client holds no mutable state other than its request
    id counter, so one instance can be shared between threads.

    To use this client, you'll need:
    - A secp256k1 private key identifying the searcher to the relay
    - A relay URL, or a known network label such as "mainnet"
    """

    def __init__(
        self,
        priv_key: Optional[str] = None,
        relay_url: Optional[str] = None,
        network: str = DEFAULT_NETWORK,
        transport: Optional[RelayTransport] = None,
        timeout: float = DEFAULT_TIMEOUT,
        retry_count: int = 3,
        signature_header: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the RelayClient

        Args:
            priv_key: Hex private key used to sign requests
            relay_url: Relay endpoint URL (overrides the network's endpoint)
            network: Network label used when relay_url is not given
            transport: Transport to send requests with (defaults to HttpTransport)
            timeout: Timeout for each relay request in seconds
            retry_count: Number of retries for read-only requests
            signature_header: Name of the authentication header
            logger: Optional logger instance to use for debug/info logging

        Raises:
            MissingCredentialError: If no private key is provided
            InvalidKeyFormatError: If the private key is malformed
            UnknownNetworkError: If relay_url is not given and the network is unknown
            ValidationError: If the relay URL is empty or insecure
        """
        if not priv_key:
            raise MissingCredentialError("priv_key must be provided")
        if timeout is None or timeout <= 0:
            raise ValidationError("timeout must be a positive number of seconds")

        self.identity = load_identity(priv_key)
        self.signer = RequestSigner(self.identity)

        self.network = network
        if relay_url:
            self.relay_url = NetworkConfig.get_relay_url(network, override=relay_url)
            default_header = DEFAULT_SIGNATURE_HEADER
        else:
            self.relay_url = NetworkConfig.get_relay_url(network)
            default_header = NetworkConfig.get_signature_header(network)
        self.signature_header = signature_header or default_header

        self.timeout = timeout
        self.transport = transport or HttpTransport(retry_count=retry_count)
        self.logger = logger or logging.getLogger(__name__)
        self._request_ids = RequestIdCounter()

    @classmethod
    def from_env(cls, env_var: str = DEFAULT_KEY_ENV_VAR, **kwargs: Any) -> "RelayClient":
        """
        Create a client with the signing key read from the environment.

        Args:
            env_var: Environment variable holding the private key
            **kwargs: Further RelayClient arguments

        Raises:
            MissingCredentialError: If the variable is unset
        """
        return cls(priv_key=load_private_key(env_var), **kwargs)

    @property
    def address(self) -> str:
        """Address the relay attributes this client's requests to"""
        return self.signer.address

    def __enter__(self) -> "RelayClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    def __repr__(self) -> str:
        return f"RelayClient(address={self.address}, relay_url={self.relay_url})"

    # ------------------------------------------------------------------
    # Relay methods
    # ------------------------------------------------------------------

    def send_bundle(
        self,
        txs: Sequence[str],
        block_number: int,
        min_timestamp: Optional[int] = None,
        max_timestamp: Optional[int] = None,
        reverting_tx_hashes: Optional[List[str]] = None
    ) -> RelayResponse[BundleHashResult]:
        """
        Submit a bundle for inclusion in a target block.

        Args:
            txs: Raw signed transactions in execution order
            block_number: Target block number
            min_timestamp: Earliest valid block timestamp
            max_timestamp: Latest valid block timestamp
            reverting_tx_hashes: Hashes of transactions allowed to revert

        Returns:
            Response carrying the bundle hash

        Raises:
            EmptyBundleError: If txs is empty
            MissingArgumentError: If block_number is not given
            RelayError: If the relay rejects the bundle
        """
        if block_number is None:
            raise MissingArgumentError("block_number must be provided")
        params = self._build(
            BundleSubmission,
            txs=self._require_txs(txs),
            blockNumber=to_quantity(block_number),
            minTimestamp=min_timestamp,
            maxTimestamp=max_timestamp,
            revertingTxHashes=list(reverting_tx_hashes) if reverting_tx_hashes is not None else None
        )
        return self.call(params, BundleHashResult)

    def simulate_bundle(
        self,
        txs: Sequence[str],
        block_number: int,
        state_block_number: Union[int, str] = "latest",
        timestamp: Optional[int] = None
    ) -> RelayResponse[BundleSimulation]:
        """
        Simulate a bundle against a given state block.

        Args:
            txs: Raw signed transactions in execution order
            block_number: Block number the bundle would be included in
            state_block_number: Block whose state to simulate on, or "latest"
            timestamp: Override for the simulated block timestamp

        Returns:
            Response carrying per-transaction results and bundle totals

        Raises:
            EmptyBundleError: If txs is empty
            MissingArgumentError: If block_number is not given
        """
        if block_number is None:
            raise MissingArgumentError("block_number must be provided")
        params = self._build(
            BundleSimulationRequest,
            txs=self._require_txs(txs),
            blockNumber=to_quantity(block_number),
            stateBlockNumber=to_block_reference(state_block_number),
            timestamp=timestamp
        )
        return self.call(params, BundleSimulation)

    def estimate_gas_bundle(
        self,
        txs: Sequence[str],
        block_number: int,
        state_block_number: Union[int, str] = "latest",
        timestamp: Optional[int] = None
    ) -> RelayResponse[BundleGasEstimate]:
        """
        Estimate gas for every transaction in a bundle.

        Raises:
            EmptyBundleError: If txs is empty
            MissingArgumentError: If block_number is not given
        """
        if block_number is None:
            raise MissingArgumentError("block_number must be provided")
        params = self._build(
            GasEstimateRequest,
            txs=self._require_txs(txs),
            blockNumber=to_quantity(block_number),
            stateBlockNumber=to_block_reference(state_block_number),
            timestamp=timestamp
        )
        return self.call(params, BundleGasEstimate)

    def send_private_transaction(
        self,
        raw_tx: str,
        max_block_number: Optional[int] = None,
        preferences: Optional[Dict[str, bool]] = None
    ) -> RelayResponse[str]:
        """
        Send a single transaction privately to the relay.

        Args:
            raw_tx: Raw signed transaction
            max_block_number: Last block the transaction may be included in
            preferences: Relay-specific boolean flags, e.g. {"fast": True}

        Returns:
            Response carrying the relay acknowledgement (transaction hash)

        Raises:
            MissingArgumentError: If raw_tx is empty
        """
        if not raw_tx:
            raise MissingArgumentError("raw_tx must be provided")
        if preferences is not None and not all(isinstance(v, bool) for v in preferences.values()):
            raise ValidationError("preferences values must be booleans")

        params = self._build(
            PrivateTransactionSubmission,
            tx=raw_tx,
            maxBlockNumber=to_quantity(max_block_number) if max_block_number is not None else None,
            preferences=dict(preferences) if preferences is not None else None
        )
        return self.call(params, str)

    def cancel_private_transaction(self, tx_hash: str) -> RelayResponse[bool]:
        """
        Cancel a previously sent private transaction.

        Args:
            tx_hash: Hash of the private transaction

        Returns:
            Response carrying whether the cancellation was accepted

        Raises:
            MissingArgumentError: If tx_hash is empty
        """
        if not tx_hash:
            raise MissingArgumentError("tx_hash must be provided")
        params = self._build(PrivateTransactionCancellation, txHash=tx_hash)
        return self.call(params, bool)

    def get_user_stats(self, block_number: int) -> RelayResponse[UserStats]:
        """
        Get payment and simulation statistics for this client's identity.

        The relay identifies the user from the request signature.

        Args:
            block_number: Current block number

        Raises:
            MissingArgumentError: If block_number is not given
        """
        if block_number is None:
            raise MissingArgumentError("block_number must be provided")
        params = self._build(UserStatsRequest, blockNumber=to_quantity(block_number))
        return self.call(params, UserStats)

    def get_bundle_stats(self, bundle_hash: str, block_number: int) -> RelayResponse[BundleStats]:
        """
        Get simulation and delivery status for a submitted bundle.

        Args:
            bundle_hash: Bundle hash returned by send_bundle
            block_number: Target block of the bundle

        Raises:
            MissingArgumentError: If bundle_hash or block_number is not given
        """
        if not bundle_hash:
            raise MissingArgumentError("bundle_hash must be provided")
        if block_number is None:
            raise MissingArgumentError("block_number must be provided")
        params = self._build(BundleStatsRequest, bundleHash=bundle_hash, blockNumber=to_quantity(block_number))
        return self.call(params, BundleStats)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def call(self, request: RelayParams, result_type: Type[T]) -> RelayResponse[T]:
        """
        Sign and send a relay request, then decode the reply.

        Args:
            request: Per-method request parameters
            result_type: Expected type of the result field

        Returns:
            Decoded response with result populated

        Raises:
            SigningError: If the request cannot be signed
            TransportError: If the relay cannot be reached
            RelayError: If the relay answers with an error object
            DecodeError: If the reply has an unexpected shape
        """
        envelope = build_envelope(request.method, request, request_id=self._request_ids.next())
        body = serialize_envelope(envelope)
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            self.signature_header: self.signer.sign(body),
        }

        self.logger.debug(
            f"Sending {envelope.method.value} (id={envelope.id}) to {self.relay_url}: "
            f"{sanitize_params(envelope.params)}"
        )
        reply = self.transport.post(
            self.relay_url,
            body,
            headers,
            timeout=self.timeout,
            idempotent=envelope.method in IDEMPOTENT_METHODS
        )

        try:
            response = decode_response(
                reply.content, reply.status_code, result_type, content_type=reply.content_type
            )
        except RelayError as e:
            self.logger.info(f"Relay rejected {envelope.method.value} (id={envelope.id}): {e}")
            raise

        if response.id is not None and response.id != envelope.id:
            rate_limited_log(
                f"Relay response id {response.id} does not match request id {envelope.id}",
                logger_instance=self.logger
            )
        return response

    def _require_txs(self, txs: Sequence[str]) -> List[str]:
        if isinstance(txs, (str, bytes)):
            raise ValidationError("txs must be a sequence of signed transactions, not a single string")
        if not txs:
            raise EmptyBundleError("Bundle must contain at least one transaction")
        return list(txs)

    def _build(self, model: Type[RelayRequest], **fields: Any) -> RelayRequest:
        try:
            return model(**fields)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {model.method.value} parameters: {e}") from e
