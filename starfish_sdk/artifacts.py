"""
Contract artifact storage and resolution.

Artifacts pair a contract ABI with its deployed address on one network. The
file store keeps one JSON file per contract and network, named
``<contractName>.<networkName>.json``.
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Mapping, Optional, Type, TypeVar, Union

from .connection import Connection
from .contracts import CONTRACT_TYPES, ContractBase
from .contracts.base import DEFAULT_POLL_INTERVAL, DEFAULT_RECEIPT_TIMEOUT
from .exceptions import ArtifactNotFoundError, UnknownContractError
from .models import ContractDescriptor

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=ContractBase)


class ArtifactStore(ABC):
    """Lookup of contract descriptors by contract name and network name"""

    @abstractmethod
    def lookup(self, name: str, network_name: str) -> ContractDescriptor:
        """
        Find the descriptor of one contract.

        Raises:
            ArtifactNotFoundError: If the store has no artifact for the pair
        """
        pass

    @abstractmethod
    def load_all(self, network_name: str) -> Dict[str, ContractDescriptor]:
        """Return every descriptor the store holds for a network, keyed by name."""
        pass


class FileArtifactStore(ArtifactStore):
    """Artifact store backed by a directory of JSON files"""

    SUFFIX = ".json"

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _artifact_path(self, name: str, network_name: str) -> Path:
        return self.path / f"{name}.{network_name}{self.SUFFIX}"

    def _read_descriptor(self, file_path: Path, name: str, network_name: str) -> ContractDescriptor:
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ArtifactNotFoundError(name, network_name, f"file {file_path} does not exist")
        except (OSError, json.JSONDecodeError) as e:
            raise ArtifactNotFoundError(name, network_name, f"unable to read {file_path}: {e}")

        if not isinstance(data, dict):
            raise ArtifactNotFoundError(name, network_name, f"{file_path} does not contain an object")
        abi = data.get("abi")
        address = data.get("address")
        if not abi or not address:
            raise ArtifactNotFoundError(name, network_name, f"`abi` or `address` missing in {file_path}")

        return ContractDescriptor(name=name, abi=abi, address=address, network_name=network_name)

    def lookup(self, name: str, network_name: str) -> ContractDescriptor:
        file_path = self._artifact_path(name, network_name)
        logger.debug(f"Reading artifact {file_path}")
        return self._read_descriptor(file_path, name, network_name)

    def load_all(self, network_name: str) -> Dict[str, ContractDescriptor]:
        descriptors: Dict[str, ContractDescriptor] = {}
        if not self.path.is_dir():
            logger.warning(f"Artifacts directory {self.path} does not exist")
            return descriptors

        suffix = f".{network_name}{self.SUFFIX}"
        for file_path in sorted(self.path.iterdir()):
            if not file_path.name.endswith(suffix):
                continue
            name = file_path.name[:-len(suffix)]
            try:
                descriptors[name] = self._read_descriptor(file_path, name, network_name)
            except ArtifactNotFoundError as e:
                logger.warning(f"Skipping artifact {file_path}: {e}")
        return descriptors


class ArtifactResolver:
    """
    Resolves and caches contract descriptors and wrappers for one connection.

    Each name is read from the store at most once per resolver under normal
    use. Concurrent first loads of the same name may both read the store; the
    first result cached wins and later loads return it.
    """

    def __init__(
        self,
        connection: Connection,
        store: ArtifactStore,
        registry: Optional[Mapping[str, Type[ContractBase]]] = None,
        receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None
    ):
        self.connection = connection
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self.store = store
        self.registry = dict(registry if registry is not None else CONTRACT_TYPES)
        self.logger = logger or logging.getLogger(__name__)
        self._descriptors: Dict[str, ContractDescriptor] = {}
        self._contracts: Dict[str, ContractBase] = {}

    @property
    def network_name(self) -> str:
        return self.connection.network_name

    def load(self, name: str) -> ContractDescriptor:
        """
        Load the descriptor for a contract name on the connected network

        Args:
            name: Contract name, e.g. ``DexToken``

        Returns:
            Cached or freshly loaded descriptor

        Raises:
            ArtifactNotFoundError: If no artifact exists for this name and network
        """
        descriptor = self._descriptors.get(name)
        if descriptor is not None:
            return descriptor

        descriptor = self.store.lookup(name, self.network_name)
        self.logger.debug(f"Loaded artifact {name} at {descriptor.address} on {self.network_name}")
        return self._descriptors.setdefault(name, descriptor)

    def load_all(self) -> int:
        """
        Load every artifact for the connected network into the cache

        Returns:
            Number of descriptors loaded
        """
        descriptors = self.store.load_all(self.network_name)
        for name, descriptor in descriptors.items():
            self._descriptors.setdefault(name, descriptor)
        self.logger.info(f"Loaded {len(descriptors)} artifacts for network {self.network_name}")
        return len(descriptors)

    def is_loaded(self, name: str) -> bool:
        return name in self._descriptors

    def get_contract(self, contract_class: Type[T]) -> T:
        """
        Return the wrapper for a contract class, creating it on first use

        Args:
            contract_class: ContractBase subclass with a CONTRACT_NAME

        Returns:
            Wrapper instance of exactly ``contract_class``
        """
        name = contract_class.CONTRACT_NAME
        contract = self._contracts.get(name)
        if isinstance(contract, contract_class):
            return contract

        descriptor = self.load(name)
        contract = contract_class(
            self.connection.web3,
            descriptor,
            receipt_timeout=self.receipt_timeout,
            poll_interval=self.poll_interval
        )
        existing = self._contracts.setdefault(name, contract)
        if isinstance(existing, contract_class):
            return existing
        self._contracts[name] = contract
        return contract

    def get_contract_by_name(self, name: str) -> ContractBase:
        """
        Return the wrapper for a registered contract name

        Raises:
            UnknownContractError: If the name has no registered wrapper class
        """
        contract_class = self.registry.get(name)
        if contract_class is None:
            raise UnknownContractError(
                f"No contract wrapper registered for {name}. "
                f"Registered contracts: {', '.join(sorted(self.registry))}"
            )
        return self.get_contract(contract_class)
