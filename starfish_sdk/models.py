"""
Data models for the Starfish SDK.
"""
from typing import Dict, Any, Optional, List, Mapping

from pydantic import BaseModel, ConfigDict, Field
from web3 import Web3


def _to_plain(value: Any) -> Any:
    """Convert web3 receipt/log values into JSON friendly python values."""
    if isinstance(value, (bytes, bytearray)):
        return Web3.to_hex(value)
    if isinstance(value, Mapping):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


class ContractDescriptor(BaseModel):
    """Compiled contract interface and deployed address for one network"""
    model_config = ConfigDict(frozen=True)

    name: str
    abi: List[Dict[str, Any]]
    address: str
    network_name: Optional[str] = None


class EventLog(BaseModel):
    """Decoded contract event log entry"""
    event: str
    args: Dict[str, Any]
    block_number: Optional[int] = None
    tx_hash: Optional[str] = None
    log_index: Optional[int] = None
    address: Optional[str] = None

    @classmethod
    def from_event_data(cls, event_data: Mapping[str, Any]) -> "EventLog":
        data = _to_plain(dict(event_data))
        return cls(
            event=data.get("event", ""),
            args=data.get("args") or {},
            block_number=data.get("blockNumber"),
            tx_hash=data.get("transactionHash"),
            log_index=data.get("logIndex"),
            address=data.get("address"),
        )


class TransactionOutcome(BaseModel):
    """Normalized result of a state changing transaction"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    tx_hash: Optional[str] = Field(None, alias="transactionHash")
    block_number: Optional[int] = Field(None, alias="blockNumber")
    gas_used: Optional[int] = Field(None, alias="gasUsed")
    logs: List[Dict[str, Any]] = Field(default_factory=list)
    events: List[EventLog] = Field(default_factory=list)

    @classmethod
    def from_receipt(
        cls,
        receipt: Mapping[str, Any],
        events: Optional[List[EventLog]] = None
    ) -> "TransactionOutcome":
        """
        Convert a web3 transaction receipt to a TransactionOutcome

        Args:
            receipt: The web3 transaction receipt
            events: Events decoded from the receipt logs

        Returns:
            Outcome with success set from the receipt status
        """
        receipt_dict = _to_plain(dict(receipt))
        return cls(
            success=receipt_dict.get("status") == 1,
            tx_hash=receipt_dict.get("transactionHash"),
            block_number=receipt_dict.get("blockNumber"),
            gas_used=receipt_dict.get("gasUsed"),
            logs=receipt_dict.get("logs") or [],
            events=events or [],
        )

    def get_events(self, event_name: str) -> List[EventLog]:
        return [event for event in self.events if event.event == event_name]

    def __bool__(self) -> bool:
        return self.success
