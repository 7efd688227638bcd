"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import json
import os
import re
import tomllib
from enum import Enum
from pathlib import Path
from typing import Annotated, Any

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

load_dotenv()

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


class Network(str, Enum):
    GNOSIS = "gnosis"
    MAINNET = "mainnet"


class TomlConfigSource(PydanticBaseSettingsSource):
    """Lowest-precedence source reading a TOML file (top-level or [vault_solver])."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
        super().__init__(settings_cls)
        self._path = path

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        if not self._path:
            local_config = Path("vault-solver.toml")
            user_config = Path.home() / ".config" / "vault-solver" / "config.toml"
            if local_config.exists():
                self._path = local_config
            elif user_config.exists():
                self._path = user_config
            else:
                return {}

        if not self._path.exists():
            return {}

        with self._path.open("rb") as f:
            data = tomllib.load(f)
        body = data.get("vault_solver", data)
        if not isinstance(body, dict):
            return {}
        return body


class SolverSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with VAULT_SOLVER_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- chain access ---
    network: Network = Network.GNOSIS
    rpc_url: str | None = None
    block_number: int | None = None  # latest when unset

    # --- order selection ---
    vault_addresses: Annotated[list[str] | None, NoDecode] = None

    # --- RPC settings ---
    rpc_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout in seconds for a single JSON-RPC request.",
    )
    order_timeout: float = Field(
        default=30.0,
        gt=0,
        description=(
            "Seconds allowed for all chain reads of one order, counted from the "
            "first read. Includes time spent waiting for one of the max_calls "
            "RPC slots shared by all orders."
        ),
    )
    max_calls: int = Field(default=3, ge=1)
    rpc_delay: float = Field(default=0.0, ge=0)
    rpc_jitter: float = Field(default=0.0, ge=0)
    max_concurrent_orders: int = Field(default=5, ge=1)

    # --- global ---
    global_timeout_seconds: float | None = None

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="VAULT_SOLVER_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("vault_addresses", mode="before")
    @classmethod
    def split_vault_addresses(cls, v: Any) -> Any:
        """Accept a JSON list or a comma separated string (e.g. from the environment)."""
        if isinstance(v, str):
            if v.strip().startswith("["):
                return json.loads(v)
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("vault_addresses")
    @classmethod
    def validate_vault_addresses(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        invalid = [address for address in v if not _ADDRESS_RE.match(address)]
        if invalid:
            raise ValueError(f"Invalid vault address(es): {', '.join(invalid)}")
        return v

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def set_network_defaults(self) -> "SolverSettings":
        """Fill the RPC endpoint and vault allow-list from the network when unset."""
        from .constants import (
            DEFAULT_GNOSIS_RPC_URL,
            DEFAULT_MAINNET_RPC_URL,
            GNOSIS_VAULT_TOKENS,
            MAINNET_VAULT_TOKENS,
        )

        rpc_defaults = {
            Network.GNOSIS: DEFAULT_GNOSIS_RPC_URL,
            Network.MAINNET: DEFAULT_MAINNET_RPC_URL,
        }
        vault_defaults = {
            Network.GNOSIS: GNOSIS_VAULT_TOKENS,
            Network.MAINNET: MAINNET_VAULT_TOKENS,
        }

        if self.rpc_url is None:
            self.rpc_url = rpc_defaults[self.network]
        if self.vault_addresses is None:
            self.vault_addresses = list(vault_defaults[self.network])
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("VAULT_SOLVER_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,
        )

    @property
    def rpc_url_required(self) -> str:
        """Get rpc_url, raising ValueError if not set."""
        if self.rpc_url is None:
            raise ValueError("rpc_url must be configured")
        return self.rpc_url

    @property
    def vault_address_set(self) -> frozenset[str]:
        """Lowercased allow-list used for order selection."""
        return frozenset(address.lower() for address in self.vault_addresses or [])
