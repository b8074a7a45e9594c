"""
Native currency (ether) operations.
"""
from decimal import Decimal
from typing import Any, Optional, Union

from web3 import Web3

from ..account import Account
from ..models import TransactionOutcome
from ..utils import Amount, to_ether, to_wei
from .base import ContractBase

ETHER_TRANSFER_GAS = 21000


class NetworkContract(ContractBase):
    """
    Ether balance and transfers.

    There is no deployed contract behind this wrapper, it talks to the node
    directly and needs no artifact.
    """

    CONTRACT_NAME = "Network"

    def __init__(self, web3: Web3, chain_id: Optional[int] = None, **kwargs: Any):
        super().__init__(web3, **kwargs)
        self.chain_id = chain_id

    def get_balance(self, account_or_address: Union[Account, str]) -> Decimal:
        address = self.get_account_address(account_or_address)
        return to_ether(self.web3.eth.get_balance(address))

    def send_ether(
        self,
        account: Account,
        to_account_address: Union[Account, str],
        amount: Amount
    ) -> TransactionOutcome:
        from_address = account.checksum_address
        transaction = {
            "from": from_address,
            "to": self.get_account_address(to_account_address),
            "value": to_wei(amount),
            "nonce": self.web3.eth.get_transaction_count(from_address),
            "gas": ETHER_TRANSFER_GAS,
            "gasPrice": self.web3.eth.gas_price,
            "chainId": self.chain_id if self.chain_id is not None else self.web3.eth.chain_id,
        }
        return self.send_transaction(transaction, account)
