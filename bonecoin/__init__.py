"""
Bonecoin - Light Wallet
=========================
Light wallet per il ledger UTXO bonecoin con sync fork-aware.

Version: 1.0.0
License: MIT
"""

from bonecoin.constants import SOFTWARE_VERSION

__version__ = SOFTWARE_VERSION
__license__ = "MIT"

# Core imports
from bonecoin.wallet.light_wallet import LightWallet
from bonecoin.config import WalletSettings, get_settings

# Ledger
from bonecoin.network.ledger import LedgerSource, QueryCounter, RetryingLedgerSource
from bonecoin.network.mock_node import MockNode
from bonecoin.network.sync import SyncReport

# Models
from bonecoin.domain.models import (
    Address,
    Block,
    BlockId,
    Coin,
    CoinId,
    Input,
    Signature,
    Transaction,
)

# Constants
from bonecoin.constants import SyncPolicy

__all__ = [
    # Version
    "__version__",

    # Core
    "LightWallet",
    "WalletSettings",
    "get_settings",

    # Ledger
    "LedgerSource",
    "QueryCounter",
    "RetryingLedgerSource",
    "MockNode",
    "SyncReport",

    # Models
    "Address",
    "Block",
    "BlockId",
    "Coin",
    "CoinId",
    "Input",
    "Signature",
    "Transaction",

    # Constants
    "SyncPolicy",
]
