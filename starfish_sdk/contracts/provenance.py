"""
Provenance contract wrapper.
"""
from typing import List

from ..account import Account
from ..models import EventLog, TransactionOutcome
from ..utils import asset_id_to_bytes
from .base import ContractBase

ASSET_REGISTERED_EVENT = "AssetRegistered"


class ProvenanceContract(ContractBase):
    """Records which account registered an asset"""

    CONTRACT_NAME = "Provenance"
    EVENT_NAMES = (ASSET_REGISTERED_EVENT,)

    def register(self, account: Account, asset_id: str) -> TransactionOutcome:
        """
        Register an asset id from the account.

        Raises:
            ValueError: If the asset id is not ``0x`` followed by 64 hex characters
        """
        return self.send_to_contract(
            self.contract.functions.registerAsset(asset_id_to_bytes(asset_id)),
            account
        )

    def get_event_logs(self, asset_id: str) -> List[EventLog]:
        asset_bytes = asset_id_to_bytes(asset_id)
        return super().get_event_logs(
            ASSET_REGISTERED_EVENT,
            indexed_filters={"_assetId": asset_bytes}
        )
