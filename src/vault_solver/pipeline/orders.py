"""Order selection and per-order evaluation."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum

from ..adapters.chain_state import ChainReadError, ChainStateReader
from ..constants import MAX_UINT256
from ..logger import get_logger
from ..models import Interaction, Order
from ..processors import (
    EncodingError,
    build_deposit_interactions,
    is_fillable,
    max_buy_amount,
    select_vault_orders,
)
from .context import SolveContext, SolveStage

logger = get_logger(__name__)


class OrderStatus(str, Enum):
    ACCEPTED = "accepted"
    INSUFFICIENT_AMOUNT = "insufficient_amount"
    READ_FAILED = "read_failed"
    READ_TIMEOUT = "read_timeout"
    ENCODING_FAILED = "encoding_failed"
    AMOUNT_OVERFLOW = "amount_overflow"


RETRYABLE_STATUSES = frozenset({OrderStatus.READ_FAILED, OrderStatus.READ_TIMEOUT})


@dataclass(frozen=True)
class OrderOutcome:
    """Result of evaluating one vault deposit order."""

    order_id: int
    order: Order
    status: OrderStatus
    exec_buy_amount: int | None = None
    interactions: tuple[Interaction, ...] = ()
    reason: str | None = None

    @property
    def accepted(self) -> bool:
        return self.status == OrderStatus.ACCEPTED

    @property
    def retryable(self) -> bool:
        """Network faults may succeed on a later attempt; encoding faults will not."""
        return self.status in RETRYABLE_STATUSES


def select_orders(ctx: SolveContext) -> None:
    """Keep only the batch orders that deposit into a configured vault."""
    ctx.advance(SolveStage.FILTERING)
    s = ctx.state.settings
    ctx.vault_orders = select_vault_orders(ctx.batch.orders, s.vault_address_set)
    ctx.state.logger.info(
        "Selected %d vault deposit order(s) out of %d",
        len(ctx.vault_orders),
        len(ctx.batch.orders),
    )


async def evaluate_order(
    order_id: int,
    order: Order,
    reader: ChainStateReader,
    read_timeout: float,
) -> OrderOutcome:
    """Read chain state, price and encode a single order.

    Per-order faults are returned as a non-accepted outcome instead of being
    raised.
    """
    try:
        async with asyncio.timeout(read_timeout):
            asset, vault = await reader.read_pair(order.sell_token, order.buy_token)
    except asyncio.TimeoutError:
        reason = f"chain reads exceeded {read_timeout}s"
        logger.warning("Skipping order %d: %s", order_id, reason)
        return OrderOutcome(order_id, order, OrderStatus.READ_TIMEOUT, reason=reason)
    except ChainReadError as e:
        logger.warning("Skipping order %d: %s", order_id, e)
        return OrderOutcome(order_id, order, OrderStatus.READ_FAILED, reason=str(e))

    logger.info(
        "Processing order %d: trade from %s to %s", order_id, asset.name, vault.name
    )

    try:
        convertible = max_buy_amount(
            order.sell_amount,
            asset.decimals,
            vault.decimals,
            vault.price_per_share,
        )
    except ValueError as e:
        logger.warning("Skipping order %d: invalid chain state: %s", order_id, e)
        return OrderOutcome(order_id, order, OrderStatus.READ_FAILED, reason=str(e))

    if convertible > MAX_UINT256:
        reason = f"convertible amount {convertible} does not fit in uint256"
        logger.warning("Skipping order %d: %s", order_id, reason)
        return OrderOutcome(
            order_id, order, OrderStatus.AMOUNT_OVERFLOW, reason=reason
        )

    if not is_fillable(order, convertible):
        logger.info(
            "Couldn't do trade %d. Trader wants: %d and we can convert to %d",
            order_id,
            order.buy_amount,
            convertible,
        )
        return OrderOutcome(
            order_id,
            order,
            OrderStatus.INSUFFICIENT_AMOUNT,
            exec_buy_amount=convertible,
            reason=f"requested {order.buy_amount}, convertible {convertible}",
        )

    try:
        interactions = build_deposit_interactions(order)
    except EncodingError as e:
        logger.error("Skipping order %d: %s", order_id, e)
        return OrderOutcome(
            order_id, order, OrderStatus.ENCODING_FAILED, reason=str(e)
        )

    return OrderOutcome(
        order_id,
        order,
        OrderStatus.ACCEPTED,
        exec_buy_amount=convertible,
        interactions=interactions,
    )


async def evaluate_orders(ctx: SolveContext, reader: ChainStateReader) -> None:
    """Evaluate all selected orders with bounded concurrency.

    Outcomes are stored in ascending original order id regardless of
    completion order.
    """
    ctx.advance(SolveStage.EVALUATING)
    s = ctx.state.settings
    orders = ctx.vault_orders_required
    sem = asyncio.Semaphore(s.max_concurrent_orders)

    async def _bounded(order_id: int, order: Order) -> OrderOutcome:
        async with sem:
            return await evaluate_order(order_id, order, reader, s.order_timeout)

    outcomes = await asyncio.gather(
        *[_bounded(order_id, order) for order_id, order in orders.items()]
    )
    ctx.outcomes = sorted(outcomes, key=lambda outcome: outcome.order_id)

    skipped = [outcome for outcome in ctx.outcomes if not outcome.accepted]
    if skipped:
        ctx.state.logger.info(
            "Skipped %d order(s): %s",
            len(skipped),
            ", ".join(f"{o.order_id}={o.status.value}" for o in skipped),
        )
