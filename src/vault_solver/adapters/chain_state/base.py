from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass


class ChainReadError(Exception):
    """Raised when token or vault state cannot be read from the chain."""

    def __init__(self, message: str, address: str | None = None):
        super().__init__(message)
        self.address = address


@dataclass(frozen=True)
class AssetState:
    """Snapshot of an ERC-20 token, read once per settlement attempt."""

    address: str
    name: str
    decimals: int


@dataclass(frozen=True)
class VaultState(AssetState):
    """Snapshot of a vault share token."""

    price_per_share: int  # underlying per share, 18 decimals


class ChainStateReader(ABC):
    """Abstract source of token decimals and vault share prices."""

    async def check_connection(self) -> None:
        """Verify the state source is reachable.

        Raises:
            ConnectionError: If the source cannot be reached
        """
        return None

    @abstractmethod
    async def read_asset(self, address: str) -> AssetState:
        """Read name and decimals of an ERC-20 token."""
        ...

    @abstractmethod
    async def read_vault(self, address: str) -> VaultState:
        """Read name, decimals and price per full share of a vault."""
        ...

    async def read_pair(
        self, sell_token: str, buy_token: str
    ) -> tuple[AssetState, VaultState]:
        """Read the sell token and the vault an order deposits into.

        Both reads run concurrently. When one fails the other is cancelled
        before the error propagates.

        Raises:
            ChainReadError: If either read fails
        """
        try:
            async with asyncio.TaskGroup() as tg:
                asset_task = tg.create_task(self.read_asset(sell_token))
                vault_task = tg.create_task(self.read_vault(buy_token))
        except ExceptionGroup as eg:
            errors = [e for e in eg.exceptions if isinstance(e, ChainReadError)]
            if not errors:
                raise
            raise errors[0] from eg
        return asset_task.result(), vault_task.result()
