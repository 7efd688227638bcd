"""High-level solve orchestration."""

from __future__ import annotations

import asyncio

from ..adapters.chain_state import ChainStateReader, Web3ChainStateReader
from ..models import BatchAuction, Settlement
from ..state import AppState
from .assembly import assemble_settlement
from .context import SolveContext, SolveStage
from .orders import evaluate_orders, select_orders


async def solve(
    state: AppState,
    batch: BatchAuction,
    reader: ChainStateReader | None = None,
) -> Settlement:
    """Build a settlement for the vault deposit orders of a batch.

    Sequences the pipeline steps:
    1. Order selection (empty settlement when nothing qualifies)
    2. Chain endpoint check
    3. Per-order evaluation
    4. Settlement assembly

    Args:
        state: Application state containing settings and logger
        batch: The batch auction to solve
        reader: Chain state source; a web3 reader on the configured RPC when omitted

    Raises:
        ConnectionError: If the chain endpoint is unreachable
    """
    log = state.logger
    ctx = SolveContext(state=state, batch=batch)

    select_orders(ctx)
    if not ctx.vault_orders_required:
        log.info("No vault deposit order to solve")
        ctx.settlement = Settlement()
        ctx.advance(SolveStage.COMPLETED)
        return ctx.settlement

    if reader is None:
        reader = Web3ChainStateReader(state.settings)
    await reader.check_connection()

    await evaluate_orders(ctx, reader)
    assemble_settlement(ctx)
    return ctx.settlement_required


async def run_solver(
    state: AppState,
    batch: BatchAuction,
    reader: ChainStateReader | None = None,
) -> Settlement:
    """Run ``solve`` under the configured global timeout."""
    s = state.settings
    log = state.logger

    log.info("Starting solve", extra={"orders": len(batch.orders)})

    timeout_s = s.global_timeout_seconds

    try:
        if timeout_s is None or timeout_s <= 0:
            settlement = await solve(state, batch, reader)
        else:
            async with asyncio.timeout(timeout_s):
                settlement = await solve(state, batch, reader)
    except asyncio.TimeoutError as exc:
        log.error("Solve timed out", extra={"timeout_seconds": timeout_s})
        raise asyncio.TimeoutError(
            f"Solve exceeded global timeout {timeout_s}s\n N.B. This can be changed via "
            "`global_timeout_seconds` or CLI flag `--global-timeout-seconds`."
        ) from exc

    log.info("Solve completed")
    return settlement
