from __future__ import annotations

from ..constants import PRICE_PER_SHARE_SCALE
from ..models import Order


def max_buy_amount(
    sell_amount: int,
    sell_decimals: int,
    vault_decimals: int,
    price_per_share: int,
) -> int:
    """Compute the vault shares obtainable for ``sell_amount`` of the underlying.

    Args:
        sell_amount: Amount of the underlying token in its native units
        sell_decimals: Decimals of the underlying token
        vault_decimals: Decimals of the vault share token
        price_per_share: Underlying per share, 18 decimals

    Returns:
        Share amount in the vault's native units, rounded down.

    Notes:
        - shares = sell_amount * 10**vault_decimals * 1e18
          / (10**sell_decimals * price_per_share)
        - Single floor division over the full numerator; no intermediate
          truncation.
        - The trader never receives more shares than the deposit mints.
    """
    if price_per_share <= 0:
        raise ValueError(f"price_per_share must be positive, got {price_per_share}")
    if sell_decimals < 0 or vault_decimals < 0:
        raise ValueError(
            f"decimals must be non-negative, got {sell_decimals} and {vault_decimals}"
        )
    if sell_amount < 0:
        raise ValueError(f"sell_amount must be non-negative, got {sell_amount}")

    numerator = sell_amount * 10**vault_decimals * PRICE_PER_SHARE_SCALE
    denominator = 10**sell_decimals * price_per_share
    return numerator // denominator


def is_fillable(order: Order, convertible_amount: int) -> bool:
    """An order is filled only if it gets at least the amount it asked for."""
    return order.buy_amount <= convertible_amount
