"""CLI entrypoint for the vault solver."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any

import typer

from .logger import setup_logging
from .models import BatchAuction
from .settings import Network, SolverSettings
from .state import AppState

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Solve the vault deposit orders of a batch auction.",
)


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("vault_solver")


@app.callback(invoke_without_command=True)
def solve(
    batch_file: Annotated[
        Path | None,
        typer.Argument(help="Batch auction JSON file to solve."),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [vault_solver] table).",
        ),
    ] = None,
    network: Annotated[
        Network | None,
        typer.Option("--network", "-n", help="Network to use (gnosis or mainnet)."),
    ] = None,
    rpc_url: Annotated[
        str | None,
        typer.Option("--rpc-url", help="RPC endpoint; overrides the network default."),
    ] = None,
    vault: Annotated[
        list[str] | None,
        typer.Option(
            "--vault",
            help="Recognized vault share token address. Repeat for several vaults.",
        ),
    ] = None,
    block_number: Annotated[
        int | None,
        typer.Option(
            "--block-number",
            help="Block number to use for rpc calls. If not provided, the latest block will be used.",
        ),
    ] = None,
    global_timeout_seconds: Annotated[
        float | None,
        typer.Option(
            "--global-timeout-seconds",
            help="Abort the whole solve after this many seconds.",
        ),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the settlement JSON here."),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    show_config: Annotated[
        bool,
        typer.Option("--show-config", help="Print effective config and exit."),
    ] = False,
):
    """Solve a batch auction and print the settlement.

    Loads configuration, parses the batch file and runs the solve pipeline.
    """
    if config_path:
        os.environ["VAULT_SOLVER_CONFIG"] = str(config_path)

    init_kwargs: dict[str, Any] = {}
    if network is not None:
        init_kwargs["network"] = network
    if rpc_url is not None:
        init_kwargs["rpc_url"] = rpc_url
    if vault:
        init_kwargs["vault_addresses"] = vault
    if block_number is not None:
        init_kwargs["block_number"] = block_number
    if global_timeout_seconds is not None:
        init_kwargs["global_timeout_seconds"] = global_timeout_seconds
    if log_level is not None:
        init_kwargs["log_level"] = log_level

    settings = SolverSettings(**init_kwargs)

    setup_logging(settings.log_level)
    state = AppState(settings=settings, logger=_build_logger())

    if show_config:
        typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))
        raise typer.Exit(code=0)

    if batch_file is None:
        raise typer.BadParameter("batch_file is required", param_hint="BATCH_FILE")
    if not batch_file.exists():
        raise typer.BadParameter(
            f"{batch_file} does not exist", param_hint="BATCH_FILE"
        )

    batch = BatchAuction.model_validate_json(batch_file.read_text())

    from .pipeline.run import run_solver

    settlement = asyncio.run(run_solver(state, batch))

    payload = settlement.model_dump_json(indent=2)
    if output:
        output.write_text(payload)
        state.logger.info("Settlement written to %s", output)
    else:
        typer.echo(payload)


def run() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    run()
