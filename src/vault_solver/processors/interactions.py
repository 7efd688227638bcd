"""Calldata encoding for vault deposit interactions."""

from __future__ import annotations

import logging

from web3 import Web3

from ..abi import load_erc20_abi, load_vault_abi
from ..models import Interaction, Order

logger = logging.getLogger(__name__)


class EncodingError(Exception):
    """Raised when calldata for an order's interactions cannot be produced."""

    def __init__(self, message: str, target: str | None = None):
        super().__init__(message)
        self.target = target


def _encode_call(address: str, abi: list[dict], fn_name: str, args: list) -> bytes:
    w3 = Web3()
    try:
        contract = w3.eth.contract(address=w3.to_checksum_address(address), abi=abi)
        calldata_hex = contract.encode_abi(abi_element_identifier=fn_name, args=args)
    except Exception as e:
        raise EncodingError(
            f"Failed to encode {fn_name}() for {address}: {e}", target=address
        ) from e
    return bytes.fromhex(calldata_hex.removeprefix("0x"))


def encode_approve(token_address: str, spender: str, amount: int) -> bytes:
    """Encode ERC20 approve(spender, amount) calldata."""
    try:
        spender_checksum = Web3.to_checksum_address(spender)
    except ValueError as e:
        raise EncodingError(
            f"Invalid spender {spender}: {e}", target=token_address
        ) from e
    return _encode_call(
        token_address, load_erc20_abi(), "approve", [spender_checksum, amount]
    )


def encode_deposit(vault_address: str, amount: int) -> bytes:
    """Encode vault deposit(amount) calldata."""
    return _encode_call(vault_address, load_vault_abi(), "deposit", [amount])


def build_deposit_interactions(order: Order) -> tuple[Interaction, Interaction]:
    """Build the approve and deposit calls that execute one vault deposit.

    Args:
        order: Accepted order selling the underlying for vault shares

    Returns:
        Tuple of (approve on the sell token, deposit on the vault), in
        execution order

    Raises:
        EncodingError: If either calldata cannot be encoded
    """
    approve_calldata = encode_approve(
        order.sell_token, order.buy_token, order.sell_amount
    )
    deposit_calldata = encode_deposit(order.buy_token, order.sell_amount)

    logger.debug(
        "Encoded approve(%s, %d) on %s and deposit(%d) on %s",
        order.buy_token,
        order.sell_amount,
        order.sell_token,
        order.sell_amount,
        order.buy_token,
    )

    approve = Interaction(
        target=order.sell_token,
        value=0,
        call_data=approve_calldata,
    )
    deposit = Interaction(
        target=order.buy_token,
        value=0,
        call_data=deposit_calldata,
    )
    return approve, deposit
