"""
DexToken ERC20 contract wrapper.
"""
from decimal import Decimal
from typing import Union

from ..account import Account
from ..models import TransactionOutcome
from ..utils import Amount, to_ether, to_wei
from .base import ContractBase


class DexTokenContract(ContractBase):
    """Fungible token balances, transfers and allowances"""

    CONTRACT_NAME = "DexToken"

    def get_balance(self, account_or_address: Union[Account, str]) -> Decimal:
        address = self.get_account_address(account_or_address)
        amount_wei = self.call(self.contract.functions.balanceOf(address))
        return to_ether(amount_wei)

    def get_total_supply(self) -> Decimal:
        amount_wei = self.call(self.contract.functions.totalSupply())
        return to_ether(amount_wei)

    def get_allowance(
        self,
        owner: Union[Account, str],
        spender: Union[Account, str]
    ) -> Decimal:
        """Return how many tokens ``spender`` may still transfer on behalf of ``owner``."""
        amount_wei = self.call(self.contract.functions.allowance(
            self.get_account_address(owner),
            self.get_account_address(spender)
        ))
        return to_ether(amount_wei)

    def transfer(
        self,
        account: Account,
        to_account_address: Union[Account, str],
        amount: Amount
    ) -> TransactionOutcome:
        to_address = self.get_account_address(to_account_address)
        return self.send_to_contract(
            self.contract.functions.transfer(to_address, to_wei(amount)),
            account
        )

    def approve_transfer(
        self,
        account: Account,
        spender_address: Union[Account, str],
        amount: Amount
    ) -> TransactionOutcome:
        """
        Allow ``spender_address`` to transfer up to ``amount`` tokens from ``account``.

        The allowance replaces any previous allowance for the same spender.
        """
        spender = self.get_account_address(spender_address)
        return self.send_to_contract(
            self.contract.functions.approve(spender, to_wei(amount)),
            account
        )
