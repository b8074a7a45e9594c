"""
Utility functions for the Starfish SDK.
"""
import re
import secrets
from decimal import Decimal, InvalidOperation, localcontext
from typing import Dict, Optional, Union

from web3 import Web3

Amount = Union[int, float, str, Decimal]

DID_METHOD = "dep"
DID_PREFIX = f"did:{DID_METHOD}:"

_DID_PATTERN = re.compile(
    r"^did:(?P<method>[a-z0-9]+):(?P<id>[0-9a-fA-F]{64})"
    r"(?:/(?P<path>[^#]*))?(?:#(?P<fragment>.*))?$"
)
_ASSET_ID_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

WEI_PER_ETHER = Decimal(10) ** 18


def remove_0x_prefix(value: str) -> str:
    if value.startswith(("0x", "0X")):
        return value[2:]
    return value


def decode_did(did: str) -> Optional[Dict[str, Optional[str]]]:
    """
    Split a DID into its method, id, path and fragment parts

    Args:
        did: DID string, e.g. ``did:dep:<64 hex chars>/<asset id>``

    Returns:
        Dictionary with ``method``, ``id``, ``path`` and ``fragment`` keys,
        or None if the string is not a valid DID
    """
    if not isinstance(did, str):
        return None
    match = _DID_PATTERN.match(did)
    if not match or match.group("method") != DID_METHOD:
        return None
    return {
        "method": match.group("method"),
        "id": match.group("id").lower(),
        "path": match.group("path") or None,
        "fragment": match.group("fragment") or None,
    }


def is_did(value: str) -> bool:
    """Return True if the value is a DID (asset DIDs included)."""
    return decode_did(value) is not None


def is_asset_did(value: str) -> bool:
    data = decode_did(value)
    return data is not None and data["path"] is not None


def create_did(did_id: Optional[str] = None) -> str:
    """
    Create a DID string from a 64 hex character id, or a random one

    Args:
        did_id: Optional id, with or without the 0x prefix

    Returns:
        DID string
    """
    if did_id is None:
        did_id = secrets.token_hex(32)
    did_id = remove_0x_prefix(did_id).lower()
    if not re.fullmatch(r"[0-9a-f]{64}", did_id):
        raise ValueError(f"DID id must be 64 hex characters, got: {did_id}")
    return f"{DID_PREFIX}{did_id}"


def did_to_id(did: str) -> bytes:
    """
    Reduce a DID to the 32 byte key used by the on-chain DID registry.

    Asset DIDs map to the key of their base DID.

    Args:
        did: DID string

    Returns:
        32 byte registry key

    Raises:
        ValueError: If the DID is not valid
    """
    data = decode_did(did)
    if data is None:
        raise ValueError(f"Invalid DID: {did}")
    return bytes.fromhex(data["id"])


def id_to_did(did_id: Union[bytes, str]) -> str:
    if isinstance(did_id, (bytes, bytearray)):
        did_id = did_id.hex()
    return create_did(did_id)


def is_asset_id(value: str) -> bool:
    return isinstance(value, str) and bool(_ASSET_ID_PATTERN.match(value))


def asset_id_to_bytes(asset_id: str) -> bytes:
    """
    Convert a ``0x`` prefixed 64 hex character asset id to bytes32

    Raises:
        ValueError: If the asset id is not in the expected format
    """
    if not is_asset_id(asset_id):
        raise ValueError(f"Asset id must be 0x followed by 64 hex characters, got: {asset_id}")
    return bytes.fromhex(asset_id[2:])


def reference_to_bytes32(reference: Union[str, bytes]) -> bytes:
    """
    Encode a payment reference as bytes32.

    ``0x`` prefixed 64 hex character strings are taken as raw bytes, anything
    else is UTF-8 encoded and right padded with zero bytes.

    Raises:
        ValueError: If the reference does not fit in 32 bytes
    """
    if isinstance(reference, (bytes, bytearray)):
        data = bytes(reference)
    elif is_asset_id(reference):
        data = bytes.fromhex(reference[2:])
    else:
        data = reference.encode("utf-8")
    if len(data) > 32:
        raise ValueError(f"Reference is longer than 32 bytes: {reference!r}")
    return data.ljust(32, b"\x00")


def _to_decimal(amount: Amount) -> Decimal:
    try:
        return Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")


def to_wei(amount: Amount) -> int:
    """
    Convert an ether/token amount to its smallest unit

    Args:
        amount: Amount in ether/token units, e.g. ``"1.5"``

    Returns:
        Amount in wei

    Raises:
        ValueError: If the amount is negative or has sub-wei precision
    """
    value = _to_decimal(amount)
    if value < 0:
        raise ValueError(f"Amount must not be negative, got: {amount}")
    wei = Web3.to_wei(value, "ether")
    with localcontext() as ctx:
        ctx.prec = 999
        exact = value * WEI_PER_ETHER
    if Decimal(wei) != exact:
        raise ValueError(f"Amount {amount} has more precision than 18 decimals")
    return wei


def to_ether(amount_wei: int) -> Decimal:
    """Convert an amount in wei to ether/token units."""
    return Decimal(Web3.from_wei(int(amount_wei), "ether"))


def is_balance_insufficient(balance: Amount, amount: Amount) -> bool:
    return _to_decimal(balance) < _to_decimal(amount)
