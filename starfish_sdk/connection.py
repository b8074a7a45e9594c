"""
Connection to a blockchain network node.
"""
import os
import logging
import urllib.parse
from typing import Any, Dict, Optional, Union

from web3 import Web3
from web3.providers import BaseProvider

from ._rate_limited_log import rate_limited_log
from .exceptions import NetworkConnectionError

logger = logging.getLogger(__name__)

UNKNOWN_NETWORK_NAME = "unknown"

NETWORK_NAMES: Dict[int, str] = {
    0: "development",
    1: "main",
    2: "morden",
    3: "ropsten",
    4: "rinkeby",
    42: "kovan",
    77: "POA_Sokol",
    99: "POA_Core",
    100: "xDai",
    1337: "local",      # local private network, for testing
    8995: "nile",       # Ocean Protocol public test net
    8996: "spree",      # Ocean Protocol local test net
    0xcea11: "pacific", # Ocean Protocol public main net
}


def network_name_for_id(network_id: int) -> str:
    """Return the symbolic name of a chain id, or the unknown sentinel."""
    return NETWORK_NAMES.get(network_id, UNKNOWN_NETWORK_NAME)


def validate_rpc_url(url: str) -> None:
    """
    Validate that an RPC URL is secure

    Args:
        url: RPC endpoint URL

    Raises:
        ValueError: If the URL does not use https and is not a local address
    """
    parsed = urllib.parse.urlparse(url)
    host = parsed.hostname or ""
    is_local = host in ("localhost", "127.0.0.1", "::1")
    if parsed.scheme != "https" and not is_local:
        if os.environ.get("STARFISH_INSECURE_RPC") != "1":
            raise ValueError(
                f"RPC URL must use https:// for security (got: {parsed.scheme}://). "
                "Set STARFISH_INSECURE_RPC=1 to allow plain http for development."
            )


class Connection:
    """
    Connection to a network node.

    The chain id is queried once by :meth:`connect`; the network name is
    derived from it and stays the same for the lifetime of the connection.
    A connection is created once by the application and passed to the
    components that need it.
    """

    def __init__(
        self,
        url_or_provider: Union[str, BaseProvider, Web3, Any],
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the connection

        Args:
            url_or_provider: RPC endpoint URL, a web3 provider, or an already
                constructed Web3 instance
            logger: Optional logger instance

        Raises:
            ValueError: If a URL is given that does not use https
        """
        if isinstance(url_or_provider, str):
            validate_rpc_url(url_or_provider)
        self.url_or_provider = url_or_provider
        self.logger = logger or logging.getLogger(__name__)
        self._web3: Optional[Web3] = None
        self._network_id: Optional[int] = None

    @property
    def endpoint(self) -> str:
        if isinstance(self.url_or_provider, str):
            return self.url_or_provider
        endpoint_uri = getattr(self.url_or_provider, "endpoint_uri", None)
        if endpoint_uri:
            return str(endpoint_uri)
        return type(self.url_or_provider).__name__

    def _create_web3(self) -> Web3:
        if isinstance(self.url_or_provider, str):
            return Web3(Web3.HTTPProvider(self.url_or_provider))
        if isinstance(self.url_or_provider, BaseProvider):
            return Web3(self.url_or_provider)
        return self.url_or_provider

    def connect(self) -> "Connection":
        """
        Connect to the network node and read its chain id

        Returns:
            This connection

        Raises:
            NetworkConnectionError: If the node cannot answer the chain id query
        """
        web3 = self._create_web3()
        try:
            network_id = int(web3.eth.chain_id)
        except Exception as e:
            self.logger.error(f"Failed to read chain id from {self.endpoint}: {e}")
            raise NetworkConnectionError(
                f"Unable to connect to network node at {self.endpoint}: {e}",
                endpoint=self.endpoint
            ) from e

        self._web3 = web3
        self._network_id = network_id
        if network_id not in NETWORK_NAMES:
            rate_limited_log(
                f"Connected to unrecognized chain id {network_id} at {self.endpoint}",
                logger_instance=self.logger
            )
        self.logger.info(f"Connected to {self.endpoint}, network {self.network_name} ({network_id})")
        return self

    @property
    def is_connected(self) -> bool:
        return self._web3 is not None

    def _require_connected(self) -> None:
        if self._web3 is None:
            raise NetworkConnectionError(
                f"Connection to {self.endpoint} has not been established, call connect() first",
                endpoint=self.endpoint
            )

    @property
    def web3(self) -> Web3:
        self._require_connected()
        return self._web3

    @property
    def network_id(self) -> int:
        self._require_connected()
        return self._network_id

    @property
    def network_name(self) -> str:
        return network_name_for_id(self.network_id)
