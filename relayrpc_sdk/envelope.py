"""
JSON-RPC 2.0 envelope construction and serialization.
"""
import itertools
import json
import threading
from typing import Any, List, Union

from pydantic import BaseModel, field_validator

from .exceptions import ValidationError
from .models import RelayMethod, RelayRequest

JSONRPC_VERSION = "2.0"


class RpcEnvelope(BaseModel):
    """JSON-RPC 2.0 request object"""
    jsonrpc: str = JSONRPC_VERSION
    id: int
    method: RelayMethod
    params: List[Any]

    @field_validator("jsonrpc")
    @classmethod
    def validate_jsonrpc(cls, v: str) -> str:
        if v != JSONRPC_VERSION:
            raise ValueError(f"jsonrpc must be '{JSONRPC_VERSION}'")
        return v


class RequestIdCounter:
    """Thread-safe, monotonically increasing JSON-RPC request id source"""

    def __init__(self, start: int = 1):
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next(self) -> int:
        with self._lock:
            return next(self._counter)


def build_envelope(
    method: Union[RelayMethod, str],
    params: Union[RelayRequest, List[Any]],
    request_id: int = 1
) -> RpcEnvelope:
    """
    Assemble a JSON-RPC envelope.

    The params list is used as-is. A RelayRequest renders its own params
    list, and must belong to the requested method.

    Args:
        method: Relay method name
        params: Per-method request model or an already ordered params list
        request_id: JSON-RPC id

    Returns:
        RpcEnvelope ready for serialization

    Raises:
        ValidationError: If the method is unknown or the params belong to another method
    """
    try:
        method = RelayMethod(method)
    except ValueError as e:
        raise ValidationError(f"Unsupported relay method: {method}") from e

    if isinstance(params, RelayRequest):
        if params.method is not method:
            raise ValidationError(
                f"{type(params).__name__} is for {params.method.value}, not {method.value}"
            )
        params = params.to_params()
    elif not isinstance(params, list):
        raise ValidationError(f"params must be a list or RelayRequest, got {type(params).__name__}")

    return RpcEnvelope(id=request_id, method=method, params=params)


def serialize_envelope(envelope: RpcEnvelope) -> bytes:
    """
    Serialize an envelope to compact, deterministic JSON bytes.

    Field order follows the model definition so equal envelopes always
    produce identical bytes.

    Args:
        envelope: Envelope to serialize

    Returns:
        UTF-8 encoded JSON body

    Raises:
        ValidationError: If the params are not JSON serializable
    """
    data = {
        "jsonrpc": envelope.jsonrpc,
        "id": envelope.id,
        "method": envelope.method.value,
        "params": envelope.params,
    }
    try:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=True).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Envelope params are not JSON serializable: {e}") from e
