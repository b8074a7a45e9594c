"""
Agent resolution and remote agent access.
"""
from .authentication import AgentAuthentication
from .remote_agent_adapter import RemoteAgentAdapter
from .resolver import AgentResolver, DIDRegistryStrategy, RemoteURLStrategy, ResolverStrategy

__all__ = [
    "AgentAuthentication",
    "AgentResolver",
    "DIDRegistryStrategy",
    "RemoteAgentAdapter",
    "RemoteURLStrategy",
    "ResolverStrategy",
]
