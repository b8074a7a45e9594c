"""
Accounts used to sign and pay for transactions.

A local account carries its encrypted key data and signs transactions itself.
A remote account only has an address and password, the node holds the key
and is asked to unlock it before sending.
"""
import os
import json
import logging
from typing import Any, Dict, Optional, TYPE_CHECKING

import portalocker
from eth_account import Account as EthAccount
from eth_account.datastructures import SignedTransaction
from web3 import Web3

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)

LOCK_TIMEOUT = 10


def _lock_path(filename: str) -> str:
    return str(filename) + ".lock"


class Account:
    """Account with an address, an optional password and optional key data"""

    def __init__(
        self,
        address: str,
        password: Optional[str] = None,
        key_filename: Optional[str] = None,
        key_data: Optional[Dict[str, Any]] = None
    ):
        """
        Construct an account. Prefer :meth:`create_new`, :meth:`load_from_file`
        or :meth:`load_from_network`.

        Args:
            address: Address of the account
            password: Password of the account
            key_filename: File the encrypted key data was loaded from
            key_data: Encrypted key data (V3 keystore)

        Raises:
            ValueError: If the address is not a valid address
        """
        if not Web3.is_address(address):
            raise ValueError(f"Invalid account address: {address}")
        self._address = address
        self.password = password
        self.key_filename = key_filename
        self.key_data = key_data

    @classmethod
    def create_new(
        cls,
        password: str,
        entropy: Optional[str] = None,
        kdf: Optional[str] = None,
        iterations: Optional[int] = None
    ) -> "Account":
        """
        Create a new local account encrypted with the password.

        Args:
            password: Password used to encrypt the new key
            entropy: Extra entropy for the key generation
            kdf: Key derivation function for the key data (``scrypt`` or ``pbkdf2``)
            iterations: Work factor for the key derivation function

        Returns:
            New Account object
        """
        local_account = EthAccount.create(entropy or "")
        key_data = EthAccount.encrypt(local_account.key, password, kdf=kdf, iterations=iterations)
        logger.info(f"Created new account {local_account.address}")
        return cls(local_account.address, password, key_data=key_data)

    @classmethod
    def load_from_network(cls, connection: "Connection", address: str, password: str) -> Optional["Account"]:
        """
        Load an account held by the network node.

        Returns:
            Account object, or None if the node does not hold the address
        """
        node_accounts = [Web3.to_checksum_address(item) for item in connection.web3.eth.accounts]
        if Web3.to_checksum_address(address) in node_accounts:
            return cls(address, password)
        logger.debug(f"Account {address} is not held by the node")
        return None

    @classmethod
    def load_from_file(cls, password: str, filename: str) -> Optional["Account"]:
        """
        Load a local account from a key file.

        Args:
            password: Password to decrypt the key data
            filename: Key file name

        Returns:
            Account object, or None if the file does not exist

        Raises:
            ValueError: If the password does not decrypt the key data
        """
        key_data = cls.load_key_file(filename)
        if key_data is None:
            return None
        private_key = EthAccount.decrypt(key_data, password)
        address = EthAccount.from_key(private_key).address
        return cls(address, password, filename, key_data)

    @staticmethod
    def load_key_file(filename: str) -> Optional[Dict[str, Any]]:
        """Read encrypted key data from a file, or return None if it does not exist."""
        if not os.path.exists(filename):
            logger.warning(f"Key file {filename} not found")
            return None
        with portalocker.Lock(_lock_path(filename), timeout=LOCK_TIMEOUT):
            with open(filename, "r") as f:
                return json.load(f)

    def save_to_file(self, filename: str) -> None:
        """
        Save the encrypted key data to a file.

        Raises:
            ValueError: If the account has no key data
        """
        if self.key_data is None:
            raise ValueError(f"Account {self.address} has no key data to save")
        with portalocker.Lock(_lock_path(filename), timeout=LOCK_TIMEOUT):
            with open(filename, "w") as f:
                json.dump(self.key_data, f)
        self.key_filename = filename

    @property
    def address(self) -> str:
        return self._address

    @property
    def checksum_address(self) -> str:
        return Web3.to_checksum_address(self._address)

    @property
    def is_local(self) -> bool:
        return self.key_data is not None

    def sign_transaction(self, transaction: Dict[str, Any]) -> SignedTransaction:
        """
        Sign a transaction with the decrypted key data.

        Raises:
            ValueError: If the account is not local or the password is wrong
        """
        if self.key_data is None:
            raise ValueError(f"Account {self.address} has no key data and cannot sign locally")
        private_key = EthAccount.decrypt(self.key_data, self.password or "")
        return EthAccount.sign_transaction(transaction, private_key)

    def unlock(self, web3: Web3) -> bool:
        """
        Unlock a remote account on the node.

        Returns:
            True if the node unlocked the account, False for local accounts
        """
        if self.key_data is not None:
            return False
        return bool(web3.manager.request_blocking(
            "personal_unlockAccount",
            [self.checksum_address, self.password, None]
        ))

    def export_key(self) -> str:
        return json.dumps(self.key_data)

    def import_key(
        self,
        private_key: str,
        password: str,
        kdf: Optional[str] = None,
        iterations: Optional[int] = None
    ) -> None:
        """
        Import a private key and keep it as encrypted key data.

        Raises:
            ValueError: If the private key does not belong to this account
        """
        imported_address = EthAccount.from_key(private_key).address
        if not self.is_address_equal(imported_address):
            raise ValueError(f"Private key is for {imported_address}, not {self.checksum_address}")
        self.key_data = EthAccount.encrypt(private_key, password, kdf=kdf, iterations=iterations)
        self.password = password

    def is_address_equal(self, address: str) -> bool:
        return Web3.to_checksum_address(address) == self.checksum_address

    def is_password(self) -> bool:
        return self.password is not None

    def __repr__(self) -> str:
        kind = "local" if self.is_local else "remote"
        return f"Account({self.checksum_address}, {kind})"
