"""Settlement assembly from evaluated orders."""

from __future__ import annotations

from ..processors import SettlementAssembler
from .context import SolveContext, SolveStage


def assemble_settlement(ctx: SolveContext) -> None:
    """Fold accepted outcomes into the settlement, in original order id order."""
    ctx.advance(SolveStage.ASSEMBLING)
    log = ctx.state.logger

    assembler = SettlementAssembler()
    for outcome in ctx.outcomes_required:
        if not outcome.accepted:
            continue
        assert outcome.exec_buy_amount is not None
        settlement_id = assembler.add(
            outcome.order,
            outcome.exec_buy_amount,
            outcome.interactions,
        )
        log.debug(
            "Order %d settled as %d: sell %d, buy %d",
            outcome.order_id,
            settlement_id,
            outcome.order.sell_amount,
            outcome.exec_buy_amount,
        )

    ctx.settlement = assembler.build()
    ctx.advance(SolveStage.COMPLETED)
    log.info(
        "Found solution with %d order(s) and %d interaction(s)",
        len(ctx.settlement.orders),
        len(ctx.settlement.interaction_data),
    )
