#!/usr/bin/env python3
"""
Example of using RelayClient with network configuration.
"""
import os
import sys

from relayrpc_sdk import NetworkConfig, RelayClient, RelaySDKError


def main():
    """
    Demonstrate network-based configuration and the stats methods.

    This example shows how to:
    1. List the packaged relay networks
    2. Initialize the client for a network label
    3. Query searcher and bundle statistics
    """
    NETWORK = os.environ.get("RELAY_NETWORK", "sepolia")
    BLOCK_NUMBER = int(os.environ.get("BLOCK_NUMBER", "0"))
    BUNDLE_HASH = os.environ.get("BUNDLE_HASH")

    if not BLOCK_NUMBER:
        print("ERROR: BLOCK_NUMBER environment variable is required")
        return 1

    # Available networks
    print("Available networks:")
    for name, network in NetworkConfig.load_networks().items():
        print(f"  - {name} (chain {network['chainId']}): {network['relay']}")
    print()

    try:
        client = RelayClient.from_env(network=NETWORK)
    except RelaySDKError as e:
        print(f"ERROR: {e}")
        return 1

    with client:
        try:
            stats = client.get_user_stats(BLOCK_NUMBER).result
            print(f"Stats for {client.address} on {NETWORK}:")
            print(f"  high priority:        {stats.is_high_priority}")
            print(f"  all-time payments:    {stats.all_time_miner_payments} wei")
            print(f"  last 7d gas simulated: {stats.last_7d_gas_simulated}")

            if BUNDLE_HASH:
                bundle = client.get_bundle_stats(BUNDLE_HASH, BLOCK_NUMBER).result
                print(f"Bundle {BUNDLE_HASH}:")
                print(f"  simulated:        {bundle.is_simulated} ({bundle.simulated_at})")
                print(f"  sent to miners:   {bundle.is_sent_to_miners} ({bundle.sent_to_miners_at})")
        except RelaySDKError as e:
            print(f"Error talking to relay: {e}")
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
