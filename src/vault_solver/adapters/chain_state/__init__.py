from __future__ import annotations

from .base import AssetState, ChainReadError, ChainStateReader, VaultState
from .web3_reader import Web3ChainStateReader

__all__ = [
    "AssetState",
    "ChainReadError",
    "ChainStateReader",
    "VaultState",
    "Web3ChainStateReader",
]
