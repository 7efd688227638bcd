import pytest

from vault_solver.models import Interaction, Order
from vault_solver.processors import interactions as interactions_module
from vault_solver.processors.interactions import (
    EncodingError,
    build_deposit_interactions,
    encode_approve,
    encode_deposit,
)

VAULT = "0xe4cb7cfd027c024aca339026b1e70ff68f82305b"
UNDERLYING = "0x1111111111111111111111111111111111111111"

APPROVE_SELECTOR = "095ea7b3"
DEPOSIT_SELECTOR = "b6b55f25"


@pytest.fixture
def order() -> Order:
    return Order(
        sell_token=UNDERLYING,
        buy_token=VAULT,
        sell_amount=1000,
        buy_amount=900,
    )


def _expected_approve(spender: str, amount: int) -> bytes:
    return bytes.fromhex(
        APPROVE_SELECTOR + "00" * 12 + spender.removeprefix("0x") + f"{amount:064x}"
    )


def _expected_deposit(amount: int) -> bytes:
    return bytes.fromhex(DEPOSIT_SELECTOR + f"{amount:064x}")


def test_encode_approve_matches_abi_layout():
    calldata = encode_approve(UNDERLYING, VAULT, 1000)

    assert calldata == _expected_approve(VAULT, 1000)
    assert len(calldata) == 4 + 32 + 32


def test_encode_deposit_matches_abi_layout():
    calldata = encode_deposit(VAULT, 2**255)

    assert calldata == _expected_deposit(2**255)
    assert calldata[:4].hex() == DEPOSIT_SELECTOR


def test_build_deposit_interactions_returns_approve_then_deposit(order):
    approve, deposit = build_deposit_interactions(order)

    assert isinstance(approve, Interaction)
    assert approve.target == UNDERLYING
    assert approve.value == 0
    assert approve.call_data == _expected_approve(VAULT, 1000)

    assert deposit.target == VAULT
    assert deposit.value == 0
    assert deposit.call_data == _expected_deposit(1000)


def test_interactions_leave_reserved_fields_empty(order):
    for interaction in build_deposit_interactions(order):
        assert interaction.exec_plan is None
        assert interaction.inputs == []
        assert interaction.outputs == []


def test_build_is_deterministic(order):
    assert build_deposit_interactions(order) == build_deposit_interactions(order)


def test_encoding_failure_is_reported_as_encoding_error(order, monkeypatch):
    monkeypatch.setattr(interactions_module, "load_vault_abi", lambda: [])

    with pytest.raises(EncodingError, match="deposit") as exc_info:
        build_deposit_interactions(order)

    assert exc_info.value.target == VAULT


def test_invalid_spender_is_reported_as_encoding_error():
    with pytest.raises(EncodingError, match="Invalid spender"):
        encode_approve(UNDERLYING, "0xnot-an-address", 1)


def test_negative_amount_is_reported_as_encoding_error():
    with pytest.raises(EncodingError):
        encode_deposit(VAULT, -1)
