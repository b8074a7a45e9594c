"""
DIDRegistry contract wrapper.
"""
from typing import Optional

from ..account import Account
from ..models import TransactionOutcome
from .base import ContractBase


class DIDRegistryContract(ContractBase):
    """Stores a text value (the serialized DDO) for each 32 byte DID key"""

    CONTRACT_NAME = "DIDRegistry"

    def register(self, account: Account, did_id: bytes, value: str) -> TransactionOutcome:
        return self.send_to_contract(
            self.contract.functions.registerDID(did_id, value),
            account
        )

    def get_value(self, did_id: bytes) -> Optional[str]:
        """Return the value stored for the key, or None if nothing is stored."""
        value = self.call(self.contract.functions.getRegister(did_id))
        return value or None
