"""
Network and credential configuration for the relay RPC SDK.
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Optional

from .exceptions import MissingCredentialError, UnknownNetworkError
from .signer import DEFAULT_SIGNATURE_HEADER
from .utils import validate_relay_url

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "mainnet"
DEFAULT_KEY_ENV_VAR = "RELAY_SIGNING_KEY"


class NetworkConfig:
    """Resolves network labels to relay endpoints from the packaged networks.json"""

    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """
        Load the network table, caching it after the first read.

        Returns:
            Mapping of network label to network settings
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("relayrpc_sdk").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
            logger.debug(f"Loaded {len(cls._networks_cache)} relay networks")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get settings for a network label.

        Raises:
            UnknownNetworkError: If the label is not configured
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise UnknownNetworkError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_relay_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the relay URL for a network.

        Precedence: explicit override, then the <NETWORK>_RELAY_URL
        environment variable, then the packaged endpoint.

        Args:
            network: Network label (e.g. "mainnet")
            override: Explicit relay URL

        Returns:
            Validated relay URL
        """
        if override:
            return validate_relay_url(override)

        env_var = f"{network.upper().replace('-', '_')}_RELAY_URL"
        env_url = os.environ.get(env_var)
        if env_url:
            logger.debug(f"Using relay URL from {env_var}")
            return validate_relay_url(env_url)

        return validate_relay_url(cls.get_network(network)["relay"])

    @classmethod
    def get_signature_header(cls, network: str) -> str:
        """Name of the authentication header the network's relay expects"""
        return cls.get_network(network).get("signatureHeader", DEFAULT_SIGNATURE_HEADER)

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return cls.get_network(network)["chainId"]


def load_private_key(env_var: str = DEFAULT_KEY_ENV_VAR) -> str:
    """
    Read the signing key from the environment.

    Args:
        env_var: Name of the environment variable holding the key

    Returns:
        Hex private key as found in the environment

    Raises:
        MissingCredentialError: If the variable is unset or empty
    """
    private_key = os.environ.get(env_var, "").strip()
    if not private_key:
        raise MissingCredentialError(f"{env_var} is not set; a relay signing key is required")
    return private_key
