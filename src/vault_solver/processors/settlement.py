from __future__ import annotations

from collections.abc import Sequence

from ..constants import PLACEHOLDER_PRICE
from ..logger import get_logger
from ..models import ExecutedOrder, Interaction, Order, Settlement

logger = get_logger(__name__)


class SettlementAssembler:
    """Accumulates accepted orders into a settlement.

    Settlement order ids are assigned densely from 0 in the order ``add`` is
    called. Prices are merged per token; the first price recorded for a token
    is kept.
    """

    def __init__(self, placeholder_price: int = PLACEHOLDER_PRICE):
        self.placeholder_price = placeholder_price
        self._orders: dict[int, ExecutedOrder] = {}
        self._prices: dict[str, int] = {}
        self._interactions: list[Interaction] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._orders)

    def add(
        self,
        order: Order,
        exec_buy_amount: int,
        interactions: Sequence[Interaction],
    ) -> int:
        """Record an accepted order and its interactions.

        Args:
            order: The accepted order
            exec_buy_amount: Vault shares the order receives
            interactions: The order's calls, appended as one contiguous block

        Returns:
            The settlement id assigned to the order
        """
        settlement_id = self._next_id
        self._orders[settlement_id] = ExecutedOrder(
            exec_sell_amount=order.sell_amount,
            exec_buy_amount=exec_buy_amount,
        )
        self._interactions.extend(interactions)
        self.merge_price(order.sell_token, self.placeholder_price)
        self.merge_price(order.buy_token, self.placeholder_price)
        self._next_id += 1
        return settlement_id

    def merge_price(self, token: str, price: int) -> None:
        key = token.lower()
        existing = self._prices.setdefault(key, price)
        if existing != price:
            logger.warning(
                "Conflicting price for %s: keeping %d, ignoring %d",
                key,
                existing,
                price,
            )

    def build(self) -> Settlement:
        return Settlement(
            orders=dict(self._orders),
            prices=dict(self._prices),
            interaction_data=list(self._interactions),
        )
