"""
Bonecoin - Domain Package
===========================
Modelli del ledger e UTXO store del wallet.
"""

# Models
from bonecoin.domain.models import (
    Address,
    Signature,
    CoinId,
    TransactionId,
    BlockId,
    Coin,
    Input,
    Transaction,
    Block,
)

# UTXO
from bonecoin.domain.utxo import UTXOStore, BlockUndo, UndoJournal

# Genesis
from bonecoin.domain.genesis import create_genesis_block, get_genesis_id

__all__ = [
    "Address",
    "Signature",
    "CoinId",
    "TransactionId",
    "BlockId",
    "Coin",
    "Input",
    "Transaction",
    "Block",
    "UTXOStore",
    "BlockUndo",
    "UndoJournal",
    "create_genesis_block",
    "get_genesis_id",
]
