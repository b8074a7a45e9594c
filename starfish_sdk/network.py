"""
Network - workflows on a connected blockchain network.
"""
import logging
from decimal import Decimal
from typing import Any, List, Optional, Type, TypeVar, Union

from web3 import Web3
from web3.providers import BaseProvider

from .account import Account
from .agent import AgentAuthentication, AgentResolver, DIDRegistryStrategy, RemoteAgentAdapter, RemoteURLStrategy
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
from .exceptions import InsufficientFundsError
from .models import EventLog
from .utils import Amount, did_to_id, is_balance_insufficient

T = TypeVar("T", bound=ContractBase)

LOCAL_NETWORK_NAME = "local"


class Network:
    """
    Workflows on a blockchain network.

    This class handles:
    1. Ether and token balances and transfers
    2. Token payments recorded with references in an on-chain log
    3. Provenance registration
    4. DID registration and resolution, and agent resolution

    Balance checks are made before a transfer is submitted, but are not atomic
    with the transfer itself. The ledger rejects a transfer that has become
    impossible in between. Multi step workflows are not rolled back when a
    later step fails.
    """

    def __init__(
        self,
        connection: Connection,
        options: Optional[NetworkOptions] = None,
        artifact_store: Optional[ArtifactStore] = None,
        agent_resolver: Optional[AgentResolver] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the network

        Args:
            connection: Connection to the network node
            options: Network options, read from the environment if not given
            artifact_store: Store to read contract artifacts from (defaults to
                a file store at ``options.artifacts_path``)
            agent_resolver: Resolver used by :meth:`resolve_agent` (defaults to
                DID registry lookup, then remote URL fetch)
            logger: Optional logger instance
        """
        self.options = options or NetworkOptions.from_env()
        self.logger = logger or logging.getLogger(__name__)
        self.connection = connection
        if not connection.is_connected:
            connection.connect()

        self.artifact_store = artifact_store or FileArtifactStore(self.options.artifacts_path)
        self.artifacts = ArtifactResolver(
            connection,
            self.artifact_store,
            receipt_timeout=self.options.receipt_timeout,
            poll_interval=self.options.poll_interval
        )
        if self.options.auto_load_local_artifacts and self.network_name == LOCAL_NETWORK_NAME:
            self.artifacts.load_all()

        self.agent_resolver = agent_resolver or AgentResolver([
            DIDRegistryStrategy(self),
            RemoteURLStrategy(RemoteAgentAdapter(timeout=self.options.http_timeout)),
        ])

    @classmethod
    def connect(
        cls,
        url_or_provider: Union[str, BaseProvider, Web3, Any],
        options: Optional[NetworkOptions] = None,
        artifact_store: Optional[ArtifactStore] = None
    ) -> "Network":
        """
        Connect to a network node and return a Network for it

        Args:
            url_or_provider: RPC URL, web3 provider or Web3 instance
            options: Network options
            artifact_store: Store to read contract artifacts from

        Raises:
            NetworkConnectionError: If the node cannot be reached
        """
        connection = Connection(url_or_provider).connect()
        return cls(connection, options=options, artifact_store=artifact_store)

    @property
    def web3(self) -> Web3:
        return self.connection.web3

    @property
    def network_id(self) -> int:
        return self.connection.network_id

    @property
    def network_name(self) -> str:
        return self.connection.network_name

    def get_contract(self, contract_class: Type[T]) -> T:
        """Return the typed wrapper for a contract class."""
        return self.artifacts.get_contract(contract_class)

    def get_contract_by_name(self, name: str) -> ContractBase:
        return self.artifacts.get_contract_by_name(name)

    def _network_contract(self) -> NetworkContract:
        return NetworkContract(
            self.web3,
            chain_id=self.network_id,
            receipt_timeout=self.options.receipt_timeout,
            poll_interval=self.options.poll_interval
        )

    # Balances

    def get_ether_balance(self, account_address: Union[Account, str]) -> Decimal:
        return self._network_contract().get_balance(account_address)

    def get_token_balance(self, account_address: Union[Account, str]) -> Decimal:
        return self.get_contract(DexTokenContract).get_balance(account_address)

    def get_token_allowance(
        self,
        owner_address: Union[Account, str],
        spender_address: Union[Account, str]
    ) -> Decimal:
        return self.get_contract(DexTokenContract).get_allowance(owner_address, spender_address)

    def request_test_tokens(self, account: Account, amount: Amount) -> bool:
        """
        Request tokens from the dispenser. Only works on test networks.

        Returns:
            True if the request succeeded
        """
        contract = self.get_contract(DispenserContract)
        return contract.request_tokens(account, amount).success

    # Transfers

    def send_ether(self, account: Account, to_account_address: Union[Account, str], amount: Amount) -> bool:
        """
        Send ether to another account

        Args:
            account: Account to send from; must be local or unlocked on the node
            to_account_address: Receiving account or address
            amount: Amount of ether to send

        Returns:
            True if the transfer succeeded

        Raises:
            InsufficientFundsError: If the balance is lower than the amount;
                nothing is submitted in that case
        """
        contract = self._network_contract()
        balance = contract.get_balance(account)
        if is_balance_insufficient(balance, amount):
            raise InsufficientFundsError(account.address, balance, amount, currency="ether")
        return contract.send_ether(account, to_account_address, amount).success

    def send_token(self, account: Account, to_account_address: Union[Account, str], amount: Amount) -> bool:
        """
        Send tokens to another account

        Returns:
            True if the transfer succeeded

        Raises:
            InsufficientFundsError: If the token balance is lower than the amount;
                nothing is submitted in that case
        """
        contract = self.get_contract(DexTokenContract)
        balance = contract.get_balance(account)
        if is_balance_insufficient(balance, amount):
            raise InsufficientFundsError(account.address, balance, amount)
        return contract.transfer(account, to_account_address, amount).success

    def send_token_with_log(
        self,
        account: Account,
        to_account_address: Union[Account, str],
        amount: Amount,
        reference1: Optional[str] = None,
        reference2: Optional[str] = None
    ) -> bool:
        """
        Send tokens and record the payment with two optional references.

        The tokens are first approved for the DirectPurchase contract, which
        then transfers them and logs the references. The transfer is only
        attempted if the approval succeeded. If the transfer fails after a
        successful approval the allowance stays granted; the caller can revoke
        it with a zero approval.

        Args:
            account: Account to send from
            to_account_address: Receiving account or address
            amount: Amount of tokens to send
            reference1: Reference saved with the payment
            reference2: Second reference saved with the payment

        Returns:
            True if the payment was made

        Raises:
            InsufficientFundsError: If the token balance is lower than the amount
        """
        token_contract = self.get_contract(DexTokenContract)
        direct_contract = self.get_contract(DirectPurchaseContract)

        balance = token_contract.get_balance(account)
        if is_balance_insufficient(balance, amount):
            raise InsufficientFundsError(account.address, balance, amount)

        approved = token_contract.approve_transfer(account, direct_contract.address, amount)
        if not approved.success:
            self.logger.warning(f"Approval of {amount} tokens from {account.address} failed, payment not sent")
            return False

        outcome = direct_contract.send_token_with_log(account, to_account_address, amount, reference1, reference2)
        if not outcome.success:
            self.logger.warning(
                f"Payment of {amount} tokens from {account.address} failed after approval; "
                f"allowance for {direct_contract.address} is still granted"
            )
        return outcome.success

    def is_token_sent(
        self,
        from_account_address: Union[Account, str],
        to_account_address: Union[Account, str],
        amount: Amount,
        reference1: Optional[str] = None,
        reference2: Optional[str] = None
    ) -> bool:
        """
        Return True if a payment sent with :meth:`send_token_with_log` matches
        the sender, recipient, amount and any given references.
        """
        return len(self.get_token_event_logs(
            from_account_address, to_account_address, amount, reference1, reference2
        )) > 0

    def get_token_event_logs(
        self,
        from_account_address: Optional[Union[Account, str]] = None,
        to_account_address: Optional[Union[Account, str]] = None,
        amount: Optional[Amount] = None,
        reference1: Optional[str] = None,
        reference2: Optional[str] = None
    ) -> List[EventLog]:
        """Return the payment log entries matching every supplied field."""
        contract = self.get_contract(DirectPurchaseContract)
        return contract.get_event_logs(from_account_address, to_account_address, amount, reference1, reference2)

    # Provenance

    def register_provenance(self, account: Account, asset_id: str) -> bool:
        """
        Register provenance of an asset

        Args:
            account: Account registering the asset
            asset_id: ``0x`` followed by 64 hex characters

        Returns:
            True if the registration succeeded
        """
        contract = self.get_contract(ProvenanceContract)
        return contract.register(account, asset_id).success

    def get_provenance_event_logs(self, asset_id: str) -> List[EventLog]:
        contract = self.get_contract(ProvenanceContract)
        return contract.get_event_logs(asset_id)

    # DID registry

    def register_did(self, account: Account, did: str, ddo_text: str) -> bool:
        """
        Register a DID with its DDO text on the network

        Returns:
            True if the registration succeeded

        Raises:
            ValueError: If the DID is not valid
        """
        contract = self.get_contract(DIDRegistryContract)
        return contract.register(account, did_to_id(did), ddo_text).success

    def resolve_did(self, did: str) -> Optional[str]:
        """
        Resolve a DID to the DDO text registered for it

        Returns:
            DDO text, or None if nothing is registered

        Raises:
            ValueError: If the DID is not valid
        """
        contract = self.get_contract(DIDRegistryContract)
        return contract.get_value(did_to_id(did))

    def resolve_agent(
        self,
        agent_address: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        authentication: Optional[AgentAuthentication] = None
    ) -> Optional[DDO]:
        """
        Resolve an agent address to its DDO

        Args:
            agent_address: DID, asset DID or URL of the agent
            username: Username for remote agents, used if no authentication is given
            password: Password for remote agents
            authentication: Credentials object, used instead of username/password

        Returns:
            DDO if the agent is found, else None

        Raises:
            RemoteAgentError: If the HTTP request to the agent fails
        """
        if authentication is None:
            authentication = AgentAuthentication.from_credentials(username, password)
        return self.agent_resolver.resolve(agent_address, authentication)
