from __future__ import annotations

from collections.abc import Iterable, Mapping

from ..models import Order


def is_vault_deposit(order: Order, vault_addresses: frozenset[str]) -> bool:
    """Deposits only: vault share tokens are matched as buy tokens."""
    return order.buy_token.lower() in vault_addresses


def select_vault_orders(
    orders: Mapping[int, Order], vault_addresses: Iterable[str]
) -> dict[int, Order]:
    """Select orders that buy a recognized vault share token.

    Args:
        orders: All orders of the batch keyed by order id
        vault_addresses: Allow-list of vault share token addresses

    Returns:
        Matching orders keyed by their original id, in ascending id order
    """
    allowed = frozenset(address.lower() for address in vault_addresses)
    return {
        order_id: orders[order_id]
        for order_id in sorted(orders)
        if is_vault_deposit(orders[order_id], allowed)
    }
