"""
Dispenser (test token faucet) contract wrapper.
"""
from ..account import Account
from ..models import TransactionOutcome
from ..utils import Amount, to_wei
from .base import ContractBase


class DispenserContract(ContractBase):
    """Issues test tokens, only deployed on test networks"""

    CONTRACT_NAME = "Dispenser"

    def request_tokens(self, account: Account, amount: Amount) -> TransactionOutcome:
        return self.send_to_contract(
            self.contract.functions.requestTokens(to_wei(amount)),
            account
        )
