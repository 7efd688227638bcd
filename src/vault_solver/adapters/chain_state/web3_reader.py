from __future__ import annotations

import asyncio
import random

import backoff
from eth_typing import URI
from web3 import Web3
from web3.contract import Contract
from web3.exceptions import ProviderConnectionError

from ...abi import load_erc20_abi, load_vault_abi
from ...constants import RPC_MAX_RETRY_SECONDS
from ...logger import get_logger
from ...settings import SolverSettings
from .base import AssetState, ChainReadError, ChainStateReader, VaultState

logger = get_logger(__name__)


class Web3ChainStateReader(ChainStateReader):
    """Reads token and vault state over JSON-RPC with web3."""

    def __init__(self, config: SolverSettings):
        self.config = config
        self.rpc_url = config.rpc_url_required
        self.w3 = Web3(
            Web3.HTTPProvider(
                URI(self.rpc_url), request_kwargs={"timeout": config.rpc_timeout}
            )
        )
        self.block_identifier = (
            config.block_number if config.block_number is not None else "latest"
        )

        self._erc20_abi = load_erc20_abi()
        self._vault_abi = load_vault_abi()

        self._rpc_sem = asyncio.Semaphore(config.max_calls)
        self._rpc_delay = config.rpc_delay  # seconds
        self._rpc_jitter = config.rpc_jitter  # seconds

    @backoff.on_exception(
        backoff.expo,
        ProviderConnectionError,
        max_time=RPC_MAX_RETRY_SECONDS,
        jitter=backoff.full_jitter,
    )
    async def _rpc(self, fn, *args, **kwargs):
        """Throttle + backoff a single RPC."""
        async with self._rpc_sem:
            try:
                return await asyncio.to_thread(fn, *args, **kwargs)
            finally:
                delay = self._rpc_delay + random.random() * self._rpc_jitter
                if delay > 0:
                    await asyncio.sleep(delay)

    def _contract(self, address: str, abi: list[dict]) -> Contract:
        return self.w3.eth.contract(
            address=self.w3.to_checksum_address(address), abi=abi
        )

    async def check_connection(self) -> None:
        connected = await asyncio.to_thread(self.w3.is_connected)
        if not connected:
            raise ConnectionError(f"Failed to connect to RPC: {self.rpc_url}")

    async def read_asset(self, address: str) -> AssetState:
        try:
            token = self._contract(address, self._erc20_abi)
            name = await self._rpc(
                token.functions.name().call, block_identifier=self.block_identifier
            )
            decimals = await self._rpc(
                token.functions.decimals().call,
                block_identifier=self.block_identifier,
            )
        except Exception as e:
            raise ChainReadError(
                f"Failed to read token {address}: {e}", address=address
            ) from e

        logger.debug("Token %s (%s) has %d decimals", address, name, decimals)
        return AssetState(address=address, name=str(name), decimals=int(decimals))

    async def read_vault(self, address: str) -> VaultState:
        try:
            vault = self._contract(address, self._vault_abi)
            name = await self._rpc(
                vault.functions.name().call, block_identifier=self.block_identifier
            )
            decimals = await self._rpc(
                vault.functions.decimals().call,
                block_identifier=self.block_identifier,
            )
            price_per_share = await self._rpc(
                vault.functions.getPricePerFullShare().call,
                block_identifier=self.block_identifier,
            )
        except Exception as e:
            raise ChainReadError(
                f"Failed to read vault {address}: {e}", address=address
            ) from e

        if price_per_share <= 0:
            raise ChainReadError(
                f"Vault {address} reported non-positive price per share: {price_per_share}",
                address=address,
            )

        logger.debug(
            "Vault %s (%s): decimals=%d pricePerFullShare=%d",
            address,
            name,
            decimals,
            price_per_share,
        )
        return VaultState(
            address=address,
            name=str(name),
            decimals=int(decimals),
            price_per_share=int(price_per_share),
        )
