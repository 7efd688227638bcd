from __future__ import annotations

from .classifier import is_vault_deposit, select_vault_orders
from .exchange_rate import is_fillable, max_buy_amount
from .interactions import EncodingError, build_deposit_interactions
from .settlement import SettlementAssembler

__all__ = [
    "EncodingError",
    "SettlementAssembler",
    "build_deposit_interactions",
    "is_fillable",
    "is_vault_deposit",
    "max_buy_amount",
    "select_vault_orders",
]
