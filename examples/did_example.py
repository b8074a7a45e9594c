#!/usr/bin/env python3
"""
Example of registering and resolving a DID with the Starfish SDK.
"""
import os
import logging

from starfish_sdk import Account, DDO, Network, create_did

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    """
    Register a DDO for a new DID, then resolve it back as an agent.
    """
    RPC_URL = os.environ.get("RPC_URL", "http://localhost:8545")
    KEY_FILE = os.environ.get("KEY_FILE", "account.json")
    KEY_PASSWORD = os.environ.get("KEY_PASSWORD", "")
    AGENT_URL = os.environ.get("AGENT_URL", "http://localhost:3030")

    print("\n=== Starfish SDK DID Example ===\n")

    network = Network.connect(RPC_URL)

    account = Account.load_from_file(KEY_PASSWORD, KEY_FILE)
    if account is None:
        account = Account.create_new(KEY_PASSWORD)
        account.save_to_file(KEY_FILE)
        print(f"Created account {account.checksum_address}, fund it before registering")
        return

    did = create_did()
    ddo = DDO(id=did, service=[
        {"type": "DEP.Meta.v1", "serviceEndpoint": f"{AGENT_URL}/api/v1/meta"},
    ])

    if not network.register_did(account, did, ddo.as_text()):
        logger.error(f"Registration of {did} failed")
        return
    print(f"Registered {did}")

    resolved = network.resolve_agent(did)
    if resolved is None:
        print("DID not found")
        return
    print(f"Meta endpoint: {resolved.get_service_endpoint('DEP.Meta.v1')}")

    # Remote agents can also be resolved by URL with credentials
    username = os.environ.get("AGENT_USERNAME")
    if username:
        remote = network.resolve_agent(AGENT_URL, username, os.environ.get("AGENT_PASSWORD"))
        print(f"Remote agent DID: {remote.id if remote else None}")


if __name__ == "__main__":
    main()
