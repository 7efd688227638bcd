from __future__ import annotations

from .chain_state import ChainStateReader, Web3ChainStateReader

__all__ = ["ChainStateReader", "Web3ChainStateReader"]
