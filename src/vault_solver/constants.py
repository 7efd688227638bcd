"""Chain constants and defaults."""

DEFAULT_GNOSIS_RPC_URL = "https://rpc.gnosischain.com"
DEFAULT_MAINNET_RPC_URL = "https://eth.drpc.org"

# Vault share tokens accepted as buy tokens when none are configured
GNOSIS_VAULT_TOKENS: list[str] = [
    "0xe4cb7cfd027c024aca339026b1e70ff68f82305b",  # vTERC
]
MAINNET_VAULT_TOKENS: list[str] = []

# getPricePerFullShare() is expressed with 18 decimals
PRICE_PER_SHARE_DECIMALS = 18
PRICE_PER_SHARE_SCALE = 10**PRICE_PER_SHARE_DECIMALS

# Reference price reported for both sides of an accepted deposit
PLACEHOLDER_PRICE = 1

MAX_UINT256 = 2**256 - 1

RPC_MAX_RETRY_SECONDS = 30
