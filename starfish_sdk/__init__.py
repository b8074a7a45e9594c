"""
Starfish SDK - contract workflows and agent resolution on Ethereum compatible networks.
"""
from .version import __version__
from .account import Account
from .agent import AgentAuthentication, AgentResolver, RemoteAgentAdapter
from .artifacts import ArtifactResolver, ArtifactStore, FileArtifactStore
from .config import NetworkOptions
from .connection import Connection
from .contracts import (
    ContractBase,
    DexTokenContract,
    DIDRegistryContract,
    DirectPurchaseContract,
    DispenserContract,
    NetworkContract,
    ProvenanceContract,
)
from .ddo import DDO
from .exceptions import (
    StarfishError,
    NetworkConnectionError,
    ArtifactNotFoundError,
    UnknownContractError,
    InsufficientFundsError,
    TransactionError,
    RemoteAgentError,
)
from .models import ContractDescriptor, EventLog, TransactionOutcome
from .network import Network
from .utils import create_did, did_to_id, is_did, to_ether, to_wei

__all__ = [
    "__version__",
    "Account",
    "AgentAuthentication",
    "AgentResolver",
    "ArtifactResolver",
    "ArtifactStore",
    "Connection",
    "ContractBase",
    "ContractDescriptor",
    "DDO",
    "DexTokenContract",
    "DIDRegistryContract",
    "DirectPurchaseContract",
    "DispenserContract",
    "EventLog",
    "FileArtifactStore",
    "Network",
    "NetworkContract",
    "NetworkOptions",
    "ProvenanceContract",
    "RemoteAgentAdapter",
    "TransactionOutcome",
    "StarfishError",
    "NetworkConnectionError",
    "ArtifactNotFoundError",
    "UnknownContractError",
    "InsufficientFundsError",
    "TransactionError",
    "RemoteAgentError",
    "create_did",
    "did_to_id",
    "is_did",
    "to_ether",
    "to_wei",
]
