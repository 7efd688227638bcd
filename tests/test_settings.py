"""Tests for settings configuration loading."""

from __future__ import annotations

from textwrap import dedent

import pytest
from pydantic import ValidationError

from vault_solver.constants import DEFAULT_GNOSIS_RPC_URL, DEFAULT_MAINNET_RPC_URL
from vault_solver.settings import Network, SolverSettings

VAULT = "0xe4cb7cfd027c024aca339026b1e70ff68f82305b"
VAULT_B = "0x3333333333333333333333333333333333333333"


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for key in (
        "VAULT_SOLVER_CONFIG",
        "VAULT_SOLVER_RPC_URL",
        "VAULT_SOLVER_VAULT_ADDRESSES",
        "VAULT_SOLVER_NETWORK",
        "VAULT_SOLVER_RPC_TIMEOUT",
        "VAULT_SOLVER_ORDER_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_defaults_follow_network():
    settings = SolverSettings()

    assert settings.network == Network.GNOSIS
    assert settings.rpc_url == DEFAULT_GNOSIS_RPC_URL
    assert settings.vault_address_set == frozenset({VAULT})


def test_mainnet_defaults():
    settings = SolverSettings(network=Network.MAINNET)

    assert settings.rpc_url == DEFAULT_MAINNET_RPC_URL
    assert settings.vault_addresses == []


def test_explicit_values_override_network_defaults():
    settings = SolverSettings(
        rpc_url="http://localhost:8545", vault_addresses=[VAULT, VAULT_B]
    )

    assert settings.rpc_url_required == "http://localhost:8545"
    assert settings.vault_address_set == frozenset({VAULT, VAULT_B})


def test_vault_address_set_is_lowercase():
    settings = SolverSettings(vault_addresses=[VAULT.upper().replace("0X", "0x")])

    assert settings.vault_address_set == frozenset({VAULT})


def test_rejects_malformed_vault_address():
    with pytest.raises(ValidationError, match="Invalid vault address"):
        SolverSettings(vault_addresses=["0x1234"])


def test_rejects_non_positive_rpc_timeout():
    with pytest.raises(ValidationError):
        SolverSettings(rpc_timeout=0)


def test_order_timeout_is_separate_from_http_timeout():
    settings = SolverSettings(rpc_timeout=2.0)

    assert settings.rpc_timeout == 2.0
    assert settings.order_timeout == 30.0

    with pytest.raises(ValidationError):
        SolverSettings(order_timeout=0)


def test_env_comma_separated_vault_addresses(monkeypatch):
    monkeypatch.setenv("VAULT_SOLVER_VAULT_ADDRESSES", f"{VAULT}, {VAULT_B}")

    settings = SolverSettings()

    assert settings.vault_addresses == [VAULT, VAULT_B]


def test_env_json_vault_addresses(monkeypatch):
    monkeypatch.setenv("VAULT_SOLVER_VAULT_ADDRESSES", f'["{VAULT_B}"]')

    settings = SolverSettings()

    assert settings.vault_addresses == [VAULT_B]


def test_toml_config_is_loaded(tmp_path, monkeypatch):
    config_path = tmp_path / "solver.toml"
    config_path.write_text(
        dedent(
            f"""
            [vault_solver]
            rpc_url = "https://rpc.example"
            vault_addresses = ["{VAULT_B}"]
            rpc_timeout = 3.5
            max_concurrent_orders = 2
            """
        ).strip()
    )
    monkeypatch.setenv("VAULT_SOLVER_CONFIG", str(config_path))

    settings = SolverSettings()

    assert settings.rpc_url == "https://rpc.example"
    assert settings.vault_addresses == [VAULT_B]
    assert settings.rpc_timeout == 3.5
    assert settings.max_concurrent_orders == 2


def test_local_config_file_is_discovered(tmp_path):
    (tmp_path / "vault-solver.toml").write_text('rpc_url = "https://local.example"\n')

    assert SolverSettings().rpc_url == "https://local.example"


def test_precedence_cli_over_env_over_file(tmp_path, monkeypatch):
    config_path = tmp_path / "solver.toml"
    config_path.write_text('rpc_url = "https://file.example"\nrpc_timeout = 4.0\n')
    monkeypatch.setenv("VAULT_SOLVER_CONFIG", str(config_path))
    monkeypatch.setenv("VAULT_SOLVER_RPC_URL", "https://env.example")
    monkeypatch.setenv("VAULT_SOLVER_RPC_TIMEOUT", "6.0")

    settings = SolverSettings(rpc_url="https://cli.example")

    assert settings.rpc_url == "https://cli.example"
    assert settings.rpc_timeout == 6.0


def test_log_level_is_uppercased():
    assert SolverSettings(log_level="debug").log_level == "DEBUG"
