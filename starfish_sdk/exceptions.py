"""
Exceptions for the Starfish SDK.
"""
from decimal import Decimal
from typing import Optional, Union


class StarfishError(Exception):
    """Base exception for all Starfish SDK errors."""
    pass


class NetworkConnectionError(StarfishError):
    """Raised when the network node cannot be reached or has not been connected."""

    def __init__(self, message: str, endpoint: Optional[str] = None):
        self.endpoint = endpoint
        super().__init__(message)


class ArtifactNotFoundError(StarfishError):
    """Raised when no contract artifact exists for a contract name and network."""

    def __init__(self, name: str, network_name: Optional[str], detail: Optional[str] = None):
        self.name = name
        self.network_name = network_name
        message = f"No artifact found for contract {name} on network {network_name}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnknownContractError(StarfishError):
    """Raised when a contract name has no registered wrapper class."""
    pass


class InsufficientFundsError(StarfishError):
    """Raised before submitting a transfer the sender cannot cover."""

    def __init__(
        self,
        address: str,
        available: Union[Decimal, str],
        requested: Union[Decimal, str, int, float],
        currency: str = "tokens"
    ):
        self.address = address
        self.available = available
        self.requested = requested
        super().__init__(
            f"The account {address} has insufficient funds of {available} {currency} "
            f"to send {requested} {currency}"
        )


class TransactionError(StarfishError):
    """Raised when a transaction cannot be built or signed."""
    pass


class RemoteAgentError(StarfishError):
    """Raised when a remote agent HTTP request fails."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)
