"""
Bonecoin - Network Package
============================
Accesso al ledger e sincronizzazione wallet.
"""

from bonecoin.network.ledger import LedgerSource, QueryCounter, RetryingLedgerSource
from bonecoin.network.mock_node import MockNode
from bonecoin.network.sync import ChainCursor, SyncReport, WalletSynchronizer

__all__ = [
    "LedgerSource",
    "QueryCounter",
    "RetryingLedgerSource",
    "MockNode",
    "ChainCursor",
    "SyncReport",
    "WalletSynchronizer",
]
