"""
Pytest fixtures for the relay RPC SDK tests.
"""
import json

import pytest

from relayrpc_sdk._rate_limited_log import clear_rate_limited_log
from relayrpc_sdk.client import RelayClient
from relayrpc_sdk.config import NetworkConfig
from relayrpc_sdk.identity import load_identity
from relayrpc_sdk.transport import StubTransport

# Constants for testing (DO NOT USE IN PRODUCTION)
TEST_PRIV_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
TEST_ADDRESS = "0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"
TEST_RELAY_URL = "https://relay.example.com"
TEST_TXS = [
    "0x02f8b20181c8",
    "0x02f8b20181c9",
    "0xf86c0a8502540be400",
]
TEST_BUNDLE_HASH = "0x" + "ab" * 32
TEST_TX_HASH = "0x" + "cd" * 32

USER_STATS_RESULT = {
    "is_high_priority": True,
    "all_time_miner_payments": "1280749594841588639",
    "all_time_gas_simulated": "30049470846",
    "last_7d_miner_payments": "1280749594841588639",
    "last_7d_gas_simulated": "30049470846",
    "last_1d_miner_payments": "142305510537954293",
    "last_1d_gas_simulated": "2731770076",
}

CALL_BUNDLE_RESULT = {
    "bundleGasPrice": "476190476193",
    "bundleHash": TEST_BUNDLE_HASH,
    "coinbaseDiff": "20000000000126000",
    "ethSentToCoinbase": "20000000000000000",
    "gasFees": "126000",
    "results": [
        {
            "coinbaseDiff": "10000000000063000",
            "ethSentToCoinbase": "10000000000000000",
            "fromAddress": "0x02A727155aef8609c9E6fe6d7B8e2AA21eC6c85B",
            "gasFees": "63000",
            "gasPrice": "476190476193",
            "gasUsed": 21000,
            "toAddress": "0x73625f59CAdc5009Cb458B751b3E7b6b48C06f2C",
            "txHash": "0x669b4704a7d993a946cdd6e2f95233f308ce0c4649d2e04944e8299efcaa098a",
            "value": "0x",
        },
        {
            "coinbaseDiff": "10000000000063000",
            "ethSentToCoinbase": "10000000000000000",
            "fromAddress": "0x02A727155aef8609c9E6fe6d7B8e2AA21eC6c85B",
            "gasFees": "63000",
            "gasPrice": "476190476193",
            "gasUsed": 21000,
            "toAddress": "0x73625f59CAdc5009Cb458B751b3E7b6b48C06f2C",
            "txHash": "0xa839ee83465657cac01adc1d50d96c1b586ed498120a84a64749c0034b4f19fa",
            "value": "0x",
        },
    ],
    "stateBlockNumber": 5221585,
    "totalGasUsed": 42000,
}


def rpc_reply(result=None, error=None, request_id=1) -> bytes:
    """Build a JSON-RPC reply body"""
    data = {"jsonrpc": "2.0", "id": request_id}
    if error is not None:
        data["error"] = error
    else:
        data["result"] = result
    return json.dumps(data).encode("utf-8")


@pytest.fixture(autouse=True)
def _reset_caches():
    """Keep the network table and log rate limiter independent between tests."""
    NetworkConfig._networks_cache = None
    clear_rate_limited_log()
    yield
    NetworkConfig._networks_cache = None
    clear_rate_limited_log()


@pytest.fixture
def identity():
    return load_identity(TEST_PRIV_KEY)


@pytest.fixture
def stub_transport():
    return StubTransport()


@pytest.fixture
def client(stub_transport):
    """Client wired to an in-memory transport"""
    return RelayClient(
        priv_key=TEST_PRIV_KEY,
        relay_url=TEST_RELAY_URL,
        transport=stub_transport
    )


def sent_envelope(transport: StubTransport, index: int = -1) -> dict:
    """Decode the JSON body of a request captured by the stub transport"""
    return json.loads(transport.requests[index].body)
