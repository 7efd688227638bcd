from vault_solver.models import Order
from vault_solver.processors.classifier import is_vault_deposit, select_vault_orders

VAULT = "0xe4cb7cfd027c024aca339026b1e70ff68f82305b"
OTHER_VAULT = "0x3333333333333333333333333333333333333333"
UNDERLYING = "0x1111111111111111111111111111111111111111"
OTHER_TOKEN = "0x2222222222222222222222222222222222222222"


def _order(sell_token: str, buy_token: str) -> Order:
    return Order(
        sell_token=sell_token,
        buy_token=buy_token,
        sell_amount=1000,
        buy_amount=900,
    )


def test_selects_only_orders_buying_vault_tokens():
    orders = {
        0: _order(UNDERLYING, VAULT),
        1: _order(UNDERLYING, OTHER_TOKEN),
        2: _order(VAULT, UNDERLYING),
    }

    selected = select_vault_orders(orders, [VAULT])

    assert list(selected) == [0]
    assert selected[0] is orders[0]


def test_returns_empty_when_nothing_matches():
    orders = {0: _order(UNDERLYING, OTHER_TOKEN)}

    assert select_vault_orders(orders, [VAULT]) == {}


def test_empty_allow_list_selects_nothing():
    orders = {0: _order(UNDERLYING, VAULT)}

    assert select_vault_orders(orders, []) == {}


def test_result_is_sorted_by_order_id():
    orders = {
        9: _order(UNDERLYING, VAULT),
        2: _order(UNDERLYING, OTHER_VAULT),
        5: _order(UNDERLYING, VAULT),
    }

    selected = select_vault_orders(orders, [VAULT, OTHER_VAULT])

    assert list(selected) == [2, 5, 9]


def test_allow_list_match_is_case_insensitive():
    orders = {0: _order(UNDERLYING, VAULT)}

    selected = select_vault_orders(orders, [VAULT.upper().replace("0X", "0x")])

    assert list(selected) == [0]


def test_is_vault_deposit():
    allowed = frozenset({VAULT})

    assert is_vault_deposit(_order(UNDERLYING, VAULT), allowed)
    assert not is_vault_deposit(_order(VAULT, UNDERLYING), allowed)
