"""
Base class for contract wrappers.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from web3 import Web3
from web3.exceptions import Web3Exception
from web3.logs import DISCARD

from .._rate_limited_log import rate_limited_log
from ..account import Account
from ..exceptions import TransactionError
from ..models import ContractDescriptor, EventLog, TransactionOutcome, _to_plain

logger = logging.getLogger(__name__)

DEFAULT_GAS_LIMIT = 300000
GAS_ESTIMATE_BUFFER = 1.1
DEFAULT_RECEIPT_TIMEOUT = 120
DEFAULT_POLL_INTERVAL = 0.1


def _values_match(expected: Any, actual: Any) -> bool:
    expected = _to_plain(expected)
    actual = _to_plain(actual)
    if isinstance(expected, str) and isinstance(actual, str):
        return expected.lower() == actual.lower()
    return expected == actual


class ContractBase:
    """
    Wrapper around a deployed contract.

    Query methods only read from the node. Mutating methods need an
    :class:`Account` to sign or unlock, and return a
    :class:`TransactionOutcome` once the receipt is available.
    """

    CONTRACT_NAME = ""
    # Events decoded from the receipt of every transaction sent to this contract
    EVENT_NAMES: Tuple[str, ...] = ()

    def __init__(
        self,
        web3: Web3,
        descriptor: Optional[ContractDescriptor] = None,
        receipt_timeout: int = DEFAULT_RECEIPT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None
    ):
        self.web3 = web3
        self.descriptor = descriptor
        self.receipt_timeout = receipt_timeout
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)
        self.contract = None
        if descriptor is not None:
            self.contract = web3.eth.contract(
                address=Web3.to_checksum_address(descriptor.address),
                abi=descriptor.abi
            )

    @property
    def name(self) -> str:
        return self.CONTRACT_NAME

    @property
    def address(self) -> Optional[str]:
        if self.descriptor is None:
            return None
        return Web3.to_checksum_address(self.descriptor.address)

    @staticmethod
    def get_account_address(account_or_address: Union[Account, str]) -> str:
        """Return the checksum address of an Account or an address string."""
        if isinstance(account_or_address, Account):
            return account_or_address.checksum_address
        return Web3.to_checksum_address(account_or_address)

    def call(self, function_call: Any) -> Any:
        """Run a read-only contract function call."""
        return function_call.call()

    def send_to_contract(self, function_call: Any, account: Account, value: int = 0) -> TransactionOutcome:
        """
        Build, sign and send a contract function call

        Args:
            function_call: Bound contract function, e.g. ``contract.functions.transfer(to, amount)``
            account: Account paying for and signing the transaction
            value: Amount of wei to send with the call

        Returns:
            Outcome of the mined transaction

        Raises:
            TransactionError: If the transaction cannot be built or signed
            Web3Exception: If the node rejects the transaction
        """
        from_address = account.checksum_address
        tx_params: Dict[str, Any] = {
            "from": from_address,
            "nonce": self.web3.eth.get_transaction_count(from_address),
            "value": value,
        }

        try:
            gas = function_call.estimate_gas({"from": from_address, "value": value})
            tx_params["gas"] = int(gas * GAS_ESTIMATE_BUFFER)
            self.logger.debug(f"Estimated gas: {tx_params['gas']}")
        except Exception as e:
            tx_params["gas"] = DEFAULT_GAS_LIMIT
            rate_limited_log(
                f"Gas estimation failed for {self.name}, using default: {DEFAULT_GAS_LIMIT}. Error: {e}",
                logger_instance=self.logger
            )
        tx_params["gasPrice"] = self.web3.eth.gas_price

        try:
            transaction = function_call.build_transaction(tx_params)
        except Web3Exception:
            raise
        except Exception as e:
            self.logger.error(f"Failed to build transaction for {self.name}: {e}")
            raise TransactionError(f"Failed to build transaction: {str(e)}")

        return self.send_transaction(transaction, account)

    def send_transaction(self, transaction: Dict[str, Any], account: Account) -> TransactionOutcome:
        """
        Sign or unlock, send a built transaction and wait for its receipt

        Raises:
            TransactionError: If signing fails
            Web3Exception: If the node rejects the transaction
        """
        if account.is_local:
            try:
                signed_tx = account.sign_transaction(transaction)
            except Exception as e:
                self.logger.error(f"Transaction signing failed: {e}")
                raise TransactionError(f"Failed to sign transaction: {str(e)}")
            tx_hash = self.web3.eth.send_raw_transaction(signed_tx.raw_transaction)
        else:
            account.unlock(self.web3)
            tx_hash = self.web3.eth.send_transaction(transaction)
        self.logger.info(f"Transaction sent: {Web3.to_hex(tx_hash)}")

        receipt = self.web3.eth.wait_for_transaction_receipt(
            tx_hash,
            timeout=self.receipt_timeout,
            poll_latency=self.poll_interval
        )
        outcome = TransactionOutcome.from_receipt(receipt, self.decode_events(receipt))
        if not outcome.success:
            self.logger.warning(f"Transaction {outcome.tx_hash} failed on {self.name or 'network'}")
        return outcome

    def decode_events(self, receipt: Mapping[str, Any]) -> List[EventLog]:
        """Decode the logs of a receipt emitted by this contract's known events."""
        if self.contract is None:
            return []
        events = []
        for event_name in self.EVENT_NAMES:
            event = getattr(self.contract.events, event_name)
            for entry in event().process_receipt(receipt, errors=DISCARD):
                events.append(EventLog.from_event_data(entry))
        return events

    def get_event_logs(
        self,
        event_name: str,
        indexed_filters: Optional[Mapping[str, Any]] = None,
        match: Optional[Mapping[str, Any]] = None,
        from_block: int = 0
    ) -> List[EventLog]:
        """
        Read past events, keeping only entries matching every given field.

        Args:
            event_name: Name of the contract event
            indexed_filters: Indexed argument values passed to the node as topics
            match: Argument values every returned entry must have; None values are ignored

        Returns:
            Matching event log entries
        """
        topics = {key: value for key, value in (indexed_filters or {}).items() if value is not None}
        wanted = {key: value for key, value in (match or {}).items() if value is not None}
        wanted.update(topics)

        event = getattr(self.contract.events, event_name)
        entries = event().get_logs(from_block=from_block, argument_filters=topics or None)

        event_logs = []
        for entry in entries:
            event_log = EventLog.from_event_data(entry)
            if all(_values_match(value, event_log.args.get(key)) for key, value in wanted.items()):
                event_logs.append(event_log)
        self.logger.debug(f"Found {len(event_logs)} of {len(entries)} {event_name} events")
        return event_logs
