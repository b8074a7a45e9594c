"""
Property-based tests for the Starfish SDK.

These tests verify that properties hold true across many random inputs.
"""
from decimal import Decimal

from hypothesis import given, strategies as st, settings

from starfish_sdk.utils import create_did, did_to_id, id_to_did, reference_to_bytes32, to_ether, to_wei

# 64 hex character DID ids
did_id_strategy = st.binary(min_size=32, max_size=32).map(lambda value: value.hex())
wei_strategy = st.integers(min_value=0, max_value=10 ** 30)
reference_strategy = st.text(
    min_size=1,
    max_size=8,
    alphabet=st.characters(whitelist_categories=('Lu', 'Ll', 'Nd'), whitelist_characters='-_')
)


@settings(max_examples=100)
@given(wei=wei_strategy)
def test_amount_round_trip(wei):
    """Converting wei to token units and back is exact"""
    amount = to_ether(wei)
    assert isinstance(amount, Decimal)
    assert to_wei(amount) == wei
    assert to_wei(str(amount)) == wei


@settings(max_examples=100)
@given(did_id=did_id_strategy)
def test_did_to_id_is_deterministic(did_id):
    did = create_did(did_id)
    assert did_to_id(did) == did_to_id(did)
    assert did_to_id(did) == bytes.fromhex(did_id)
    assert id_to_did(did_to_id(did)) == did


@settings(max_examples=100)
@given(first=did_id_strategy, second=did_id_strategy)
def test_did_to_id_is_injective(first, second):
    first_key = did_to_id(create_did(first))
    second_key = did_to_id(create_did(second))
    assert (first_key == second_key) == (first == second)


@settings(max_examples=50)
@given(reference=reference_strategy)
def test_reference_encoding(reference):
    encoded = reference_to_bytes32(reference)
    assert len(encoded) == 32
    assert encoded.rstrip(b"\x00") == reference.encode("utf-8")
