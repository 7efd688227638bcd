"""Batch auction wire models.

Amounts are unsigned 256-bit integers. They are parsed from decimal strings,
``0x`` hex strings or plain JSON integers and serialized back to decimal
strings. Addresses are normalized to lowercase.
"""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

from .constants import MAX_UINT256

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def _parse_uint256(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid uint256 value: {value!r}")
    if isinstance(value, str):
        text = value.strip()
        try:
            parsed = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError as e:
            raise ValueError(f"Invalid uint256 value: {value!r}") from e
    elif isinstance(value, int):
        parsed = value
    else:
        raise ValueError(f"Invalid uint256 value: {value!r}")

    if not 0 <= parsed <= MAX_UINT256:
        raise ValueError(f"uint256 value out of range: {parsed}")
    return parsed


def _parse_address(value: Any) -> str:
    if not isinstance(value, str) or not _ADDRESS_RE.match(value):
        raise ValueError(f"Invalid address: {value!r}")
    return value.lower()


def _parse_call_data(value: Any) -> Any:
    if isinstance(value, str):
        return bytes.fromhex(value.removeprefix("0x"))
    return value


Uint256 = Annotated[
    int,
    BeforeValidator(_parse_uint256),
    PlainSerializer(str, return_type=str, when_used="json"),
]
Address = Annotated[str, BeforeValidator(_parse_address)]
CallData = Annotated[
    bytes,
    BeforeValidator(_parse_call_data),
    PlainSerializer(lambda b: "0x" + b.hex(), return_type=str, when_used="json"),
]


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class TokenAmount(_WireModel):
    amount: Uint256
    token: Address


class Order(_WireModel):
    """A single order of the batch, keyed by its id in ``BatchAuction.orders``."""

    sell_token: Address
    buy_token: Address
    sell_amount: Uint256
    buy_amount: Uint256
    allow_partial_fill: bool = False
    is_sell_order: bool = True
    is_liquidity_order: bool = False
    fee: TokenAmount | None = None
    cost: TokenAmount | None = None


class TokenInfo(_WireModel):
    decimals: int | None = None
    alias: str | None = None
    external_price: float | None = None
    normalize_priority: int = 0
    internal_buffer: Uint256 | None = None
    accepted_for_internalization: bool = False


class BatchMetadata(_WireModel):
    environment: str | None = None
    auction_id: int | None = None
    run_id: int | None = None
    gas_price: float | None = None
    native_token: Address | None = None


class BatchAuction(_WireModel):
    """Solver input. Only ``orders`` is consumed; the rest is passed through."""

    tokens: dict[Address, TokenInfo] = Field(default_factory=dict)
    orders: dict[int, Order] = Field(default_factory=dict)
    amms: dict[str, Any] = Field(default_factory=dict)
    metadata: BatchMetadata | None = None


class ExecutionCoordinates(_WireModel):
    sequence: int
    position: int


class ExecutionPlan(_WireModel):
    coordinates: ExecutionCoordinates
    internal: bool = False


class Interaction(_WireModel):
    """One on-chain call replayed by the settlement contract."""

    target: Address
    value: Uint256 = 0
    call_data: CallData
    exec_plan: ExecutionPlan | None = None
    inputs: list[TokenAmount] = Field(default_factory=list)
    outputs: list[TokenAmount] = Field(default_factory=list)


class ExecutedOrder(_WireModel):
    exec_sell_amount: Uint256
    exec_buy_amount: Uint256


class Settlement(_WireModel):
    """Solver output: executed orders, reference prices and ordered calls."""

    orders: dict[int, ExecutedOrder] = Field(default_factory=dict)
    prices: dict[Address, Uint256] = Field(default_factory=dict)
    interaction_data: list[Interaction] = Field(default_factory=list)
    amms: dict[str, Any] = Field(default_factory=dict)
    ref_token: Address | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.orders or self.prices or self.interaction_data)
