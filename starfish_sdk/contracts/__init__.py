"""
Typed wrappers for the contracts used by the Starfish SDK.

``CONTRACT_TYPES`` maps each artifact contract name to its wrapper class.
"""
from typing import Dict, Type

from .base import ContractBase
from .dex_token import DexTokenContract
from .did_registry import DIDRegistryContract
from .direct_purchase import DirectPurchaseContract
from .dispenser import DispenserContract
from .network_contract import NetworkContract
from .provenance import ProvenanceContract

CONTRACT_TYPES: Dict[str, Type[ContractBase]] = {
    contract_class.CONTRACT_NAME: contract_class
    for contract_class in (
        DexTokenContract,
        DispenserContract,
        DirectPurchaseContract,
        ProvenanceContract,
        DIDRegistryContract,
    )
}

__all__ = [
    "CONTRACT_TYPES",
    "ContractBase",
    "DexTokenContract",
    "DIDRegistryContract",
    "DirectPurchaseContract",
    "DispenserContract",
    "NetworkContract",
    "ProvenanceContract",
]
