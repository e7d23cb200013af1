#!/usr/bin/env python3
"""
Simple example of using the relay RPC SDK.
"""
import os
import sys

from relayrpc_sdk import RelayClient, RelayError, RelaySDKError


def main():
    """
    Demonstrate basic usage of the RelayClient.

    This example shows how to:
    1. Initialize the client from the environment
    2. Simulate a bundle against the latest state
    3. Submit the bundle for the next block
    """
    # Read configuration from environment
    RELAY_URL = os.environ.get("RELAY_URL")
    TARGET_BLOCK = int(os.environ.get("TARGET_BLOCK", "0"))
    SIGNED_TXS = [tx for tx in os.environ.get("SIGNED_TXS", "").split(",") if tx]

    # Verify configuration
    if not SIGNED_TXS:
        print("ERROR: SIGNED_TXS must hold comma-separated raw signed transactions")
        return 1
    if not TARGET_BLOCK:
        print("ERROR: TARGET_BLOCK environment variable is required")
        return 1

    try:
        # The signing key comes from RELAY_SIGNING_KEY
        client = RelayClient.from_env(relay_url=RELAY_URL)
    except RelaySDKError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"Searcher address: {client.address}")
    print(f"Relay: {client.relay_url}")

    with client:
        try:
            simulation = client.simulate_bundle(SIGNED_TXS, TARGET_BLOCK).result
            print(f"Simulated bundle {simulation.bundle_hash}")
            print(f"  total gas used: {simulation.total_gas_used}")
            print(f"  coinbase diff:  {simulation.coinbase_diff} wei")
            for tx in simulation.failed:
                print(f"  {tx.tx_hash} failed: {tx.error}")
            if simulation.failed:
                return 1

            bundle = client.send_bundle(SIGNED_TXS, TARGET_BLOCK).result
            print(f"Bundle submitted for block {TARGET_BLOCK}: {bundle.bundle_hash}")
        except RelayError as e:
            print(f"Relay rejected the request ({e.code}): {e.message}")
            return 1
        except RelaySDKError as e:
            print(f"Error talking to relay: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
