#!/usr/bin/env python3
"""
Simple example of using the Starfish SDK.
"""
import os
from starfish_sdk import Account, Network, NetworkOptions, InsufficientFundsError


def main():
    """
    Demonstrate basic usage of the Network class.

    This example shows how to:
    1. Connect to a network node
    2. Check ether and token balances
    3. Send tokens with a payment reference and verify the payment
    """
    # Read configuration from environment
    RPC_URL = os.environ.get("RPC_URL", "http://localhost:8545")
    ACCOUNT_ADDRESS = os.environ.get("ACCOUNT_ADDRESS")
    ACCOUNT_PASSWORD = os.environ.get("ACCOUNT_PASSWORD")
    RECEIVER_ADDRESS = os.environ.get("RECEIVER_ADDRESS")

    # Verify configuration
    if not ACCOUNT_ADDRESS or not RECEIVER_ADDRESS:
        print("ERROR: ACCOUNT_ADDRESS and RECEIVER_ADDRESS environment variables are required")
        return

    options = NetworkOptions.from_env(artifacts_path=os.environ.get("ARTIFACTS_PATH"))
    network = Network.connect(RPC_URL, options=options)
    print(f"Connected to network {network.network_name} ({network.network_id})")

    account = Account.load_from_network(network.connection, ACCOUNT_ADDRESS, ACCOUNT_PASSWORD)
    if account is None:
        print(f"ERROR: account {ACCOUNT_ADDRESS} is not held by the node")
        return

    print(f"Ether balance: {network.get_ether_balance(account)}")
    print(f"Token balance: {network.get_token_balance(account)}")

    try:
        if network.send_token_with_log(account, RECEIVER_ADDRESS, "1.5", "order-1001", "invoice-77"):
            print("Payment sent")
        else:
            print("Payment failed")
    except InsufficientFundsError as e:
        print(f"Error sending payment: {str(e)}")
        return

    verified = network.is_token_sent(account, RECEIVER_ADDRESS, "1.5", "order-1001", "invoice-77")
    print(f"Payment verified on chain: {verified}")


if __name__ == "__main__":
    main()
