"""
Agent resolution.

An agent address (DID, asset DID or URL) is resolved to its DDO by trying a
fixed, ordered list of strategies. The first strategy that finds a document
wins; if none does, the result is None.
"""
import logging
import urllib.parse
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, TYPE_CHECKING

from ..ddo import DDO
from ..utils import is_did
from .authentication import AgentAuthentication
from .remote_agent_adapter import RemoteAgentAdapter

if TYPE_CHECKING:
    from ..network import Network

logger = logging.getLogger(__name__)


class ResolverStrategy(ABC):
    """One way of finding the DDO text for an agent address"""

    @abstractmethod
    def try_resolve(
        self,
        address: str,
        authentication: Optional[AgentAuthentication] = None
    ) -> Optional[str]:
        """
        Return the DDO text for the address, or None if not found by this strategy.

        Transport failures are raised, not turned into None.
        """
        pass


class DIDRegistryStrategy(ResolverStrategy):
    """Looks DIDs up in the on-chain DID registry"""

    def __init__(self, network: "Network"):
        self.network = network

    def try_resolve(
        self,
        address: str,
        authentication: Optional[AgentAuthentication] = None
    ) -> Optional[str]:
        if not is_did(address):
            return None
        return self.network.resolve_did(address)


class RemoteURLStrategy(ResolverStrategy):
    """Fetches the DDO from an agent URL over HTTP"""

    SCHEMES = ("http", "https")

    def __init__(self, adapter: Optional[RemoteAgentAdapter] = None):
        self.adapter = adapter or RemoteAgentAdapter()

    def try_resolve(
        self,
        address: str,
        authentication: Optional[AgentAuthentication] = None
    ) -> Optional[str]:
        parsed = urllib.parse.urlparse(address)
        if parsed.scheme not in self.SCHEMES or not parsed.netloc:
            return None
        return self.adapter.resolve_url(address, authentication)


class AgentResolver:
    """Resolves agent addresses with an ordered list of strategies"""

    def __init__(self, strategies: Iterable[ResolverStrategy], logger: Optional[logging.Logger] = None):
        self.strategies: List[ResolverStrategy] = list(strategies)
        self.logger = logger or logging.getLogger(__name__)

    def resolve(
        self,
        address: str,
        authentication: Optional[AgentAuthentication] = None
    ) -> Optional[DDO]:
        """
        Resolve an agent address to a DDO

        Args:
            address: DID, asset DID or URL of the agent
            authentication: Optional credentials for remote agents

        Returns:
            DDO if any strategy found one, else None

        Raises:
            RemoteAgentError: If an HTTP request fails
        """
        for strategy in self.strategies:
            ddo_text = strategy.try_resolve(address, authentication)
            if ddo_text:
                self.logger.debug(f"Resolved agent {address} with {type(strategy).__name__}")
                return DDO.create_from_string(ddo_text)
        self.logger.info(f"Agent {address} not found")
        return None
