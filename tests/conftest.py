"""
Pytest fixtures for the Starfish SDK tests.

``FakeLedger`` stands in for a Web3 instance. It implements the small part of
the web3 API the SDK uses and keeps token balances, allowances, the DID
registry and event logs in memory.
"""
import json
import itertools
from typing import Any, Dict, List, Optional

import pytest
from web3 import Web3
from web3.providers.rpc import HTTPProvider

from starfish_sdk import Account, Connection, Network, NetworkOptions
from starfish_sdk._rate_limited_log import reset_rate_limited_log

# Constants for testing
TEST_RPC_URL = "https://rpc.example.com"
TEST_LOCAL_CHAIN_ID = 1337
TEST_PASSWORD = "secret"

DEX_TOKEN_ADDRESS = "0x1000000000000000000000000000000000000001"
DISPENSER_ADDRESS = "0x1000000000000000000000000000000000000002"
DIRECT_PURCHASE_ADDRESS = "0x1000000000000000000000000000000000000003"
PROVENANCE_ADDRESS = "0x1000000000000000000000000000000000000004"
DID_REGISTRY_ADDRESS = "0x1000000000000000000000000000000000000005"

CONTRACT_ADDRESSES = {
    "DexToken": DEX_TOKEN_ADDRESS,
    "Dispenser": DISPENSER_ADDRESS,
    "DirectPurchase": DIRECT_PURCHASE_ADDRESS,
    "Provenance": PROVENANCE_ADDRESS,
    "DIDRegistry": DID_REGISTRY_ADDRESS,
}

ALICE_ADDRESS = "0x00000000000000000000000000000000000a11ce"
BOB_ADDRESS = "0x0000000000000000000000000000000000000b0b"

WEI = 10 ** 18

# Minimal ABI, the fake ledger dispatches on function names only
TEST_ABI = [{"type": "function", "name": "placeholder", "inputs": [], "outputs": []}]


def checksum(address: str) -> str:
    return Web3.to_checksum_address(address)


class LedgerRevert(Exception):
    """Raised inside the fake ledger when a transaction would revert"""


class FakeFunction:
    def __init__(self, ledger: "FakeLedger", contract: "FakeContract", name: str, args: tuple):
        self.ledger = ledger
        self.contract = contract
        self.fn_name = name
        self.args = args

    def call(self, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.ledger.call(self.contract.name, self.fn_name, self.args)

    def estimate_gas(self, params: Optional[Dict[str, Any]] = None) -> int:
        if self.ledger.fail_gas_estimation:
            raise ValueError("gas estimation failed")
        return 50000

    def build_transaction(self, params: Dict[str, Any]) -> Dict[str, Any]:
        marker = self.ledger.stage(self.contract.name, self.fn_name, self.args)
        transaction = dict(params)
        transaction.update({
            "to": self.contract.address,
            "data": marker,
            "chainId": self.ledger.eth.chain_id,
        })
        self.ledger.last_built = transaction
        return transaction


class FakeFunctions:
    def __init__(self, ledger: "FakeLedger", contract: "FakeContract"):
        self._ledger = ledger
        self._contract = contract

    def __getattr__(self, name: str):
        def bind(*args):
            return FakeFunction(self._ledger, self._contract, name, args)
        return bind


class FakeEvent:
    def __init__(self, ledger: "FakeLedger", contract: "FakeContract", name: str):
        self.ledger = ledger
        self.contract = contract
        self.event_name = name

    def get_logs(self, from_block: int = 0, argument_filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        self.ledger.log_queries.append((self.event_name, argument_filters))
        entries = []
        for entry in self.ledger.events:
            if entry["address"] != self.contract.address or entry["event"] != self.event_name:
                continue
            if entry["blockNumber"] < from_block:
                continue
            if argument_filters and any(entry["args"].get(key) != value for key, value in argument_filters.items()):
                continue
            entries.append(entry)
        return entries

    def process_receipt(self, receipt: Dict[str, Any], errors: Any = None) -> List[Dict[str, Any]]:
        self.ledger.decode_errors_modes.append(errors)
        return [
            entry for entry in self.ledger.events
            if entry["transactionHash"] == receipt["transactionHash"]
            and entry["address"] == self.contract.address
            and entry["event"] == self.event_name
        ]


class FakeEvents:
    def __init__(self, ledger: "FakeLedger", contract: "FakeContract"):
        self._ledger = ledger
        self._contract = contract

    def __getattr__(self, name: str):
        return lambda: FakeEvent(self._ledger, self._contract, name)


class FakeContract:
    def __init__(self, ledger: "FakeLedger", name: str, address: str, abi: List[Dict[str, Any]]):
        self.name = name
        self.address = address
        self.abi = abi
        self.functions = FakeFunctions(ledger, self)
        self.events = FakeEvents(ledger, self)


class FakeManager:
    def __init__(self):
        self.requests = []

    def request_blocking(self, method: str, params: Any) -> Any:
        self.requests.append((method, params))
        return True


class FakeEth:
    def __init__(self, ledger: "FakeLedger", chain_id: int):
        self._ledger = ledger
        self.chain_id = chain_id
        self.gas_price = 10 ** 9
        self.accounts: List[str] = []

    def get_balance(self, address: str) -> int:
        return self._ledger.ether.get(checksum(address), 0)

    def get_transaction_count(self, address: str) -> int:
        return self._ledger.nonces.get(checksum(address), 0)

    def contract(self, address: str, abi: List[Dict[str, Any]]) -> FakeContract:
        address = checksum(address)
        name = self._ledger.contract_names.get(address)
        if name is None:
            raise ValueError(f"No contract deployed at {address}")
        return FakeContract(self._ledger, name, address, abi)

    def send_transaction(self, transaction: Dict[str, Any]) -> bytes:
        return self._ledger.execute(transaction, transaction.get("data"))

    def send_raw_transaction(self, raw_transaction: bytes) -> bytes:
        self._ledger.raw_transactions.append(raw_transaction)
        return self._ledger.execute(self._ledger.last_built, self._ledger.last_built_marker)

    def wait_for_transaction_receipt(self, tx_hash: bytes, timeout: int = 120, poll_latency: float = 0.1):
        return self._ledger.receipts[tx_hash]


class FakeLedger:
    """In-memory ledger behind a web3 shaped interface"""

    def __init__(self, chain_id: int = TEST_LOCAL_CHAIN_ID):
        self.eth = FakeEth(self, chain_id)
        self.manager = FakeManager()
        self.contract_names = {checksum(address): name for name, address in CONTRACT_ADDRESSES.items()}
        self.ether: Dict[str, int] = {}
        self.tokens: Dict[str, int] = {}
        self.allowances: Dict[tuple, int] = {}
        self.registry: Dict[bytes, str] = {}
        self.events: List[Dict[str, Any]] = []
        self.nonces: Dict[str, int] = {}
        self.receipts: Dict[bytes, Dict[str, Any]] = {}
        self.staged: Dict[str, tuple] = {}
        self.revert_functions = set()
        self.raw_transactions: List[bytes] = []
        self.log_queries: List[tuple] = []
        self.decode_errors_modes: List[Any] = []
        self.transactions: List[Dict[str, Any]] = []
        self.fail_gas_estimation = False
        self.submissions = 0
        self.last_built: Optional[Dict[str, Any]] = None
        self.last_built_marker: Optional[str] = None
        self._markers = itertools.count(1)
        self.block_number = 0

    # Test helpers

    def fund(self, address: str, ether: int = 0, tokens: int = 0) -> None:
        address = checksum(address)
        self.ether[address] = self.ether.get(address, 0) + ether * WEI
        self.tokens[address] = self.tokens.get(address, 0) + tokens * WEI

    def add_node_account(self, address: str) -> None:
        self.eth.accounts.append(checksum(address))

    def revert_next(self, fn_name: str) -> None:
        self.revert_functions.add(fn_name)

    # web3 surface

    def stage(self, contract_name: str, fn_name: str, args: tuple) -> str:
        marker = "0x%08x" % next(self._markers)
        self.staged[marker] = (contract_name, fn_name, args)
        self.last_built_marker = marker
        return marker

    def call(self, contract_name: str, fn_name: str, args: tuple) -> Any:
        if fn_name == "balanceOf":
            return self.tokens.get(checksum(args[0]), 0)
        if fn_name == "totalSupply":
            return sum(self.tokens.values())
        if fn_name == "allowance":
            return self.allowances.get((checksum(args[0]), checksum(args[1])), 0)
        if fn_name == "getRegister":
            return self.registry.get(bytes(args[0]), "")
        raise AttributeError(f"{contract_name} has no view function {fn_name}")

    def execute(self, transaction: Dict[str, Any], marker: Optional[str]) -> bytes:
        self.submissions += 1
        self.transactions.append(transaction)
        self.block_number += 1
        sender = checksum(transaction["from"])
        self.nonces[sender] = self.nonces.get(sender, 0) + 1
        tx_hash = Web3.keccak(text=f"tx-{self.submissions}")

        status = 1
        try:
            if marker in self.staged:
                contract_name, fn_name, args = self.staged.pop(marker)
                if fn_name in self.revert_functions:
                    self.revert_functions.discard(fn_name)
                    raise LedgerRevert(fn_name)
                self._apply(contract_name, fn_name, args, sender, tx_hash)
            else:
                self._transfer_ether(sender, checksum(transaction["to"]), transaction.get("value", 0))
        except LedgerRevert:
            status = 0

        self.receipts[tx_hash] = {
            "status": status,
            "transactionHash": tx_hash,
            "blockNumber": self.block_number,
            "gasUsed": 21000,
            "logs": [],
        }
        return tx_hash

    def _transfer_ether(self, sender: str, to: str, value: int) -> None:
        if self.ether.get(sender, 0) < value:
            raise LedgerRevert("insufficient ether")
        self.ether[sender] -= value
        self.ether[to] = self.ether.get(to, 0) + value

    def _transfer_tokens(self, sender: str, to: str, amount: int) -> None:
        if self.tokens.get(sender, 0) < amount:
            raise LedgerRevert("insufficient tokens")
        self.tokens[sender] -= amount
        self.tokens[to] = self.tokens.get(to, 0) + amount

    def _emit(self, contract_name: str, event: str, args: Dict[str, Any], tx_hash: bytes) -> None:
        self.events.append({
            "event": event,
            "args": args,
            "address": checksum(CONTRACT_ADDRESSES[contract_name]),
            "blockNumber": self.block_number,
            "transactionHash": tx_hash,
            "logIndex": 0,
        })

    def _apply(self, contract_name: str, fn_name: str, args: tuple, sender: str, tx_hash: bytes) -> None:
        if fn_name == "transfer":
            self._transfer_tokens(sender, checksum(args[0]), args[1])
        elif fn_name == "approve":
            self.allowances[(sender, checksum(args[0]))] = args[1]
        elif fn_name == "requestTokens":
            self.tokens[sender] = self.tokens.get(sender, 0) + args[0]
        elif fn_name == "sendTokenAndLog":
            to, amount, reference1, reference2 = args
            spender = checksum(DIRECT_PURCHASE_ADDRESS)
            allowance = self.allowances.get((sender, spender), 0)
            if allowance < amount:
                raise LedgerRevert("allowance too low")
            self._transfer_tokens(sender, checksum(to), amount)
            self.allowances[(sender, spender)] = allowance - amount
            self._emit(contract_name, "TokenSent", {
                "_from": sender,
                "_to": checksum(to),
                "_amount": amount,
                "_reference1": reference1,
                "_reference2": reference2,
            }, tx_hash)
        elif fn_name == "registerAsset":
            self._emit(contract_name, "AssetRegistered", {
                "_assetId": args[0],
                "_agentId": sender,
            }, tx_hash)
        elif fn_name == "registerDID":
            self.registry[bytes(args[0])] = args[1]
        else:
            raise AttributeError(f"{contract_name} has no function {fn_name}")


def write_artifacts(path, network_name: str = "local", names=None) -> None:
    """Write one artifact file per contract for a network"""
    path.mkdir(parents=True, exist_ok=True)
    for name in names or CONTRACT_ADDRESSES:
        artifact = {"abi": TEST_ABI, "address": CONTRACT_ADDRESSES[name]}
        (path / f"{name}.{network_name}.json").write_text(json.dumps(artifact))


@pytest.fixture(autouse=True)
def _patch_http_provider(monkeypatch):
    """
    Stub every Web3 HTTP call so no DNS / network traffic is triggered.
    Works for all tests because it is autouse.
    """
    def _dummy(self, method, params=None, _=None):      # signature match
        if method in {"eth_chainId"}:
            return {"jsonrpc": "2.0", "id": 1, "result": hex(TEST_LOCAL_CHAIN_ID)}
        if method in {"eth_gasPrice"}:
            return {"jsonrpc": "2.0", "id": 1, "result": "0x3b9aca00"}  # 1 gwei
        return {"jsonrpc": "2.0", "id": 1, "result": "0x0"}

    monkeypatch.setattr(HTTPProvider, "make_request", _dummy, raising=True)


@pytest.fixture(autouse=True)
def _reset_rate_limited_log():
    reset_rate_limited_log()
    yield
    reset_rate_limited_log()


@pytest.fixture
def ledger():
    return FakeLedger()


@pytest.fixture
def artifacts_dir(tmp_path):
    path = tmp_path / "artifacts"
    write_artifacts(path)
    return path


@pytest.fixture
def options(artifacts_dir):
    return NetworkOptions(artifacts_path=str(artifacts_dir), receipt_timeout=5, poll_interval=0)


@pytest.fixture
def connection(ledger):
    return Connection(ledger).connect()


@pytest.fixture
def network(connection, options):
    return Network(connection, options=options)


@pytest.fixture
def alice(ledger):
    """Remote account held by the node, funded with 10 ether and 100 tokens"""
    ledger.add_node_account(ALICE_ADDRESS)
    ledger.fund(ALICE_ADDRESS, ether=10, tokens=100)
    return Account(checksum(ALICE_ADDRESS), TEST_PASSWORD)


@pytest.fixture
def bob(ledger):
    ledger.add_node_account(BOB_ADDRESS)
    return Account(checksum(BOB_ADDRESS), TEST_PASSWORD)


@pytest.fixture
def local_account(ledger):
    """Local account with fast key derivation, funded with 100 tokens"""
    account = Account.create_new(TEST_PASSWORD, kdf="pbkdf2", iterations=2)
    ledger.fund(account.address, ether=1, tokens=100)
    return account
