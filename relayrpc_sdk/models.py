"""
Data models for the relay RPC SDK.

Request parameter models form a closed set: each one is bound to exactly
one relay method and knows how to render its own positional params list.
"""
from enum import Enum
from typing import Any, ClassVar, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel, Field, field_validator

from .exceptions import RelayError

T = TypeVar('T')

HEX_CHARS = set("0123456789abcdefABCDEF")


class RelayMethod(str, Enum):
    """JSON-RPC methods supported by the relay"""
    SEND_BUNDLE = "eth_sendBundle"
    CALL_BUNDLE = "eth_callBundle"
    SEND_PRIVATE_TRANSACTION = "eth_sendPrivateTransaction"
    CANCEL_PRIVATE_TRANSACTION = "eth_cancelPrivateTransaction"
    ESTIMATE_GAS_BUNDLE = "eth_estimateGasBundle"
    GET_USER_STATS = "flashbots_getUserStats"
    GET_BUNDLE_STATS = "flashbots_getBundleStats"


def _check_hex(value: str, field_name: str) -> str:
    if not isinstance(value, str) or not value.startswith("0x") or not set(value[2:]) <= HEX_CHARS:
        raise ValueError(f"{field_name} must be a 0x-prefixed hex string")
    return value


def _check_quantity(value: str, field_name: str) -> str:
    _check_hex(value, field_name)
    digits = value[2:]
    if not digits or (len(digits) > 1 and digits[0] == "0"):
        raise ValueError(f"{field_name} must be a minimal hex quantity, got {value}")
    return value


class RelayRequest(BaseModel):
    """Base class for per-method relay parameters"""
    method: ClassVar[RelayMethod]

    class Config:
        populate_by_name = True

    def to_params(self) -> List[Any]:
        """Render the positional JSON-RPC params list for this request"""
        return [self.model_dump(by_alias=True, exclude_none=True)]


class BundleSubmission(RelayRequest):
    """Parameters for eth_sendBundle"""
    method: ClassVar[RelayMethod] = RelayMethod.SEND_BUNDLE

    txs: List[str]
    block_number: str = Field(..., alias="blockNumber")
    min_timestamp: Optional[int] = Field(None, alias="minTimestamp")
    max_timestamp: Optional[int] = Field(None, alias="maxTimestamp")
    reverting_tx_hashes: Optional[List[str]] = Field(None, alias="revertingTxHashes")

    @field_validator("txs")
    @classmethod
    def validate_txs(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("Bundle must contain at least one transaction")
        for tx in v:
            _check_hex(tx, "Signed transaction")
        return v

    @field_validator("block_number")
    @classmethod
    def validate_block_number(cls, v: str) -> str:
        return _check_quantity(v, "blockNumber")


class BundleSimulationRequest(RelayRequest):
    """Parameters for eth_callBundle"""
    method: ClassVar[RelayMethod] = RelayMethod.CALL_BUNDLE

    txs: List[str]
    block_number: str = Field(..., alias="blockNumber")
    state_block_number: str = Field("latest", alias="stateBlockNumber")
    timestamp: Optional[int] = None

    @field_validator("txs")
    @classmethod
    def validate_txs(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("Bundle must contain at least one transaction")
        for tx in v:
            _check_hex(tx, "Signed transaction")
        return v

    @field_validator("block_number")
    @classmethod
    def validate_block_number(cls, v: str) -> str:
        return _check_quantity(v, "blockNumber")

    @field_validator("state_block_number")
    @classmethod
    def validate_state_block_number(cls, v: str) -> str:
        if v == "latest":
            return v
        return _check_quantity(v, "stateBlockNumber")


class GasEstimateRequest(BundleSimulationRequest):
    """Parameters for eth_estimateGasBundle (same shape as a simulation)"""
    method: ClassVar[RelayMethod] = RelayMethod.ESTIMATE_GAS_BUNDLE


class PrivateTransactionSubmission(RelayRequest):
    """Parameters for eth_sendPrivateTransaction"""
    method: ClassVar[RelayMethod] = RelayMethod.SEND_PRIVATE_TRANSACTION

    tx: str
    max_block_number: Optional[str] = Field(None, alias="maxBlockNumber")
    preferences: Optional[Dict[str, bool]] = None

    @field_validator("tx")
    @classmethod
    def validate_tx(cls, v: str) -> str:
        return _check_hex(v, "tx")

    @field_validator("max_block_number")
    @classmethod
    def validate_max_block_number(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_quantity(v, "maxBlockNumber")


class PrivateTransactionCancellation(RelayRequest):
    """Parameters for eth_cancelPrivateTransaction"""
    method: ClassVar[RelayMethod] = RelayMethod.CANCEL_PRIVATE_TRANSACTION

    tx_hash: str = Field(..., alias="txHash")

    @field_validator("tx_hash")
    @classmethod
    def validate_tx_hash(cls, v: str) -> str:
        return _check_hex(v, "txHash")


class UserStatsRequest(RelayRequest):
    """Parameters for flashbots_getUserStats"""
    method: ClassVar[RelayMethod] = RelayMethod.GET_USER_STATS

    block_number: str = Field(..., alias="blockNumber")

    @field_validator("block_number")
    @classmethod
    def validate_block_number(cls, v: str) -> str:
        return _check_quantity(v, "blockNumber")

    def to_params(self) -> List[Any]:
        # getUserStats takes the block number as a bare positional argument
        return [self.block_number]


class BundleStatsRequest(RelayRequest):
    """Parameters for flashbots_getBundleStats"""
    method: ClassVar[RelayMethod] = RelayMethod.GET_BUNDLE_STATS

    bundle_hash: str = Field(..., alias="bundleHash")
    block_number: str = Field(..., alias="blockNumber")

    @field_validator("bundle_hash")
    @classmethod
    def validate_bundle_hash(cls, v: str) -> str:
        return _check_hex(v, "bundleHash")

    @field_validator("block_number")
    @classmethod
    def validate_block_number(cls, v: str) -> str:
        return _check_quantity(v, "blockNumber")


RelayParams = Union[
    BundleSubmission,
    BundleSimulationRequest,
    GasEstimateRequest,
    PrivateTransactionSubmission,
    PrivateTransactionCancellation,
    UserStatsRequest,
    BundleStatsRequest,
]


class BundleHashResult(BaseModel):
    """Result of eth_sendBundle"""
    bundle_hash: str = Field(..., alias="bundleHash")

    class Config:
        populate_by_name = True


class TxSimulation(BaseModel):
    """Simulation outcome of a single bundle transaction"""
    coinbase_diff: str = Field(..., alias="coinbaseDiff")
    eth_sent_to_coinbase: str = Field(..., alias="ethSentToCoinbase")
    from_address: str = Field(..., alias="fromAddress")
    gas_fees: str = Field(..., alias="gasFees")
    gas_price: str = Field(..., alias="gasPrice")
    gas_used: int = Field(..., alias="gasUsed")
    to_address: Optional[str] = Field(None, alias="toAddress")
    tx_hash: str = Field(..., alias="txHash")
    value: Optional[str] = None
    error: Optional[str] = None
    revert: Optional[str] = None

    class Config:
        populate_by_name = True


class BundleSimulation(BaseModel):
    """Result of eth_callBundle"""
    bundle_gas_price: str = Field(..., alias="bundleGasPrice")
    bundle_hash: str = Field(..., alias="bundleHash")
    coinbase_diff: str = Field(..., alias="coinbaseDiff")
    eth_sent_to_coinbase: str = Field(..., alias="ethSentToCoinbase")
    gas_fees: str = Field(..., alias="gasFees")
    results: List[TxSimulation]
    state_block_number: int = Field(..., alias="stateBlockNumber")
    total_gas_used: int = Field(..., alias="totalGasUsed")

    class Config:
        populate_by_name = True

    @property
    def failed(self) -> List[TxSimulation]:
        """Transactions that reverted or errored during simulation"""
        return [r for r in self.results if r.error or r.revert]


class TxGasEstimate(BaseModel):
    """Gas estimate for a single bundle transaction"""
    gas_used: int = Field(..., alias="gasUsed")
    tx_hash: Optional[str] = Field(None, alias="txHash")

    class Config:
        populate_by_name = True


class BundleGasEstimate(BaseModel):
    """Result of eth_estimateGasBundle"""
    results: List[TxGasEstimate]
    total_gas_used: Optional[int] = Field(None, alias="totalGasUsed")

    class Config:
        populate_by_name = True


class UserStats(BaseModel):
    """Result of flashbots_getUserStats"""
    is_high_priority: bool
    all_time_miner_payments: str
    all_time_gas_simulated: str
    last_7d_miner_payments: str
    last_7d_gas_simulated: str
    last_1d_miner_payments: str
    last_1d_gas_simulated: str


class BundleStats(BaseModel):
    """Result of flashbots_getBundleStats"""
    is_simulated: bool = Field(..., alias="isSimulated")
    is_sent_to_miners: bool = Field(..., alias="isSentToMiners")
    is_high_priority: bool = Field(False, alias="isHighPriority")
    simulated_at: Optional[str] = Field(None, alias="simulatedAt")
    submitted_at: Optional[str] = Field(None, alias="submittedAt")
    sent_to_miners_at: Optional[str] = Field(None, alias="sentToMinersAt")

    class Config:
        populate_by_name = True


class RpcErrorObject(BaseModel):
    """JSON-RPC error object reported by the relay"""
    code: int
    message: str
    data: Optional[Any] = None


class RelayResponse(BaseModel, Generic[T]):
    """
    Decoded relay reply for one method call.

    Exactly one of result or error is populated for a well-formed reply.
    raw, status_code and content_type are kept for diagnostics.
    """
    id: Optional[Union[int, str]] = None
    jsonrpc: Optional[str] = None
    result: Optional[T] = None
    error: Optional[RpcErrorObject] = None
    raw: bytes = b""
    status_code: int = 0
    content_type: Optional[str] = None

    def raise_for_error(self) -> None:
        """
        Raise RelayError if the relay reported an error object.

        Raises:
            RelayError: If error is populated
        """
        if self.error is not None:
            raise RelayError(
                code=self.error.code,
                message=self.error.message,
                data=self.error.data,
                raw=self.raw,
                status_code=self.status_code
            )
