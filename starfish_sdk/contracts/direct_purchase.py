"""
DirectPurchase contract wrapper.

Sends tokens through the contract so that each payment is recorded in a
``TokenSent`` event together with two optional references. The references
can later be used to prove that a payment was made.
"""
from typing import List, Optional, Union

from ..account import Account
from ..models import EventLog, TransactionOutcome
from ..utils import Amount, reference_to_bytes32, to_wei
from .base import ContractBase

TOKEN_SENT_EVENT = "TokenSent"

_EMPTY_REFERENCE = b"\x00" * 32


def _encode_reference(reference: Optional[str]) -> bytes:
    if not reference:
        return _EMPTY_REFERENCE
    return reference_to_bytes32(reference)


class DirectPurchaseContract(ContractBase):
    """Token payments with an on-chain audit log"""

    CONTRACT_NAME = "DirectPurchase"
    EVENT_NAMES = (TOKEN_SENT_EVENT,)

    def send_token_with_log(
        self,
        account: Account,
        to_account_address: Union[Account, str],
        amount: Amount,
        reference1: Optional[str] = None,
        reference2: Optional[str] = None
    ) -> TransactionOutcome:
        """
        Transfer tokens already approved for this contract and log the references.

        The sender must have approved at least ``amount`` tokens for this
        contract's address beforehand.
        """
        to_address = self.get_account_address(to_account_address)
        return self.send_to_contract(
            self.contract.functions.sendTokenAndLog(
                to_address,
                to_wei(amount),
                _encode_reference(reference1),
                _encode_reference(reference2)
            ),
            account
        )

    def get_event_logs(
        self,
        from_account_address: Optional[Union[Account, str]] = None,
        to_account_address: Optional[Union[Account, str]] = None,
        amount: Optional[Amount] = None,
        reference1: Optional[str] = None,
        reference2: Optional[str] = None
    ) -> List[EventLog]:
        """
        Return the TokenSent events matching every supplied, non-empty field.
        """
        indexed = {}
        if from_account_address:
            indexed["_from"] = self.get_account_address(from_account_address)
        if to_account_address:
            indexed["_to"] = self.get_account_address(to_account_address)

        match = {}
        if amount is not None and amount != "":
            match["_amount"] = to_wei(amount)
        if reference1:
            match["_reference1"] = reference_to_bytes32(reference1)
        if reference2:
            match["_reference2"] = reference_to_bytes32(reference2)

        return super().get_event_logs(TOKEN_SENT_EVENT, indexed_filters=indexed, match=match)
