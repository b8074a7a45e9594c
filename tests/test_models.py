"""
Tests for the data models and exception messages.
"""
from decimal import Decimal

from hexbytes import HexBytes
from web3.datastructures import AttributeDict

from starfish_sdk.exceptions import InsufficientFundsError, StarfishError
from starfish_sdk.models import EventLog, TransactionOutcome

TX_HASH = HexBytes("0x" + "aa" * 32)


def test_outcome_from_receipt():
    receipt = AttributeDict({
        "status": 1,
        "transactionHash": TX_HASH,
        "blockNumber": 7,
        "gasUsed": 21000,
        "logs": [AttributeDict({"data": HexBytes("0x01")})],
    })
    outcome = TransactionOutcome.from_receipt(receipt)

    assert outcome.success is True
    assert bool(outcome) is True
    assert outcome.tx_hash == "0x" + "aa" * 32
    assert outcome.block_number == 7
    assert outcome.gas_used == 21000
    assert outcome.logs == [{"data": "0x01"}]


def test_outcome_from_failed_receipt():
    outcome = TransactionOutcome.from_receipt({"status": 0, "transactionHash": TX_HASH})
    assert outcome.success is False
    assert not outcome
    assert outcome.logs == []


def test_outcome_aliases():
    outcome = TransactionOutcome.model_validate({"success": True, "transactionHash": "0x01", "blockNumber": 3})
    assert outcome.tx_hash == "0x01"
    assert outcome.block_number == 3


def test_event_log_from_event_data():
    event_log = EventLog.from_event_data(AttributeDict({
        "event": "TokenSent",
        "args": AttributeDict({"_amount": 5, "_reference1": b"\x01" * 32}),
        "blockNumber": 3,
        "transactionHash": TX_HASH,
        "logIndex": 0,
        "address": "0x1000000000000000000000000000000000000003",
    }))

    assert event_log.event == "TokenSent"
    assert event_log.args == {"_amount": 5, "_reference1": "0x" + "01" * 32}
    assert event_log.tx_hash == "0x" + "aa" * 32
    assert event_log.log_index == 0


def test_insufficient_funds_message():
    error = InsufficientFundsError("0xabc", Decimal("1.5"), "2", currency="ether")
    assert isinstance(error, StarfishError)
    assert str(error) == "The account 0xabc has insufficient funds of 1.5 ether to send 2 ether"
    assert error.available == Decimal("1.5")


def test_outcome_with_decoded_events():
    events = [
        EventLog(event="Approval", args={}),
        EventLog(event="TokenSent", args={"_amount": 5}),
    ]
    outcome = TransactionOutcome.from_receipt({"status": 1, "transactionHash": TX_HASH}, events)

    assert outcome.events == events
    assert [event.args for event in outcome.get_events("TokenSent")] == [{"_amount": 5}]
    assert outcome.get_events("AssetRegistered") == []
    assert TransactionOutcome.from_receipt({"status": 1}).events == []
