from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..models import BatchAuction, Order, Settlement
from ..state import AppState

if TYPE_CHECKING:
    from .orders import OrderOutcome


class SolveStage(str, Enum):
    INITIALIZED = "initialized"
    FILTERING = "filtering"
    EVALUATING = "evaluating"
    ASSEMBLING = "assembling"
    COMPLETED = "completed"


@dataclass
class SolveContext:
    state: AppState
    batch: BatchAuction
    stage: SolveStage = SolveStage.INITIALIZED
    vault_orders: dict[int, Order] | None = None
    outcomes: list[OrderOutcome] | None = None
    settlement: Settlement | None = None

    def advance(self, stage: SolveStage) -> None:
        self.state.logger.debug("Solve stage: %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    @property
    def vault_orders_required(self) -> dict[int, Order]:
        if self.vault_orders is None:
            raise RuntimeError(
                "Vault orders have not been set. Ensure select_orders() is called before accessing this property."
            )
        return self.vault_orders

    @property
    def outcomes_required(self) -> list[OrderOutcome]:
        if self.outcomes is None:
            raise RuntimeError(
                "Order outcomes have not been set. Ensure evaluate_orders() is called before accessing this property."
            )
        return self.outcomes

    @property
    def settlement_required(self) -> Settlement:
        if self.settlement is None:
            raise RuntimeError(
                "Settlement has not been set. Ensure assemble_settlement() is called before accessing this property."
            )
        return self.settlement
