"""
Bonecoin - Genesis Block
==========================
Il genesis block (blocco 0), unico e fisso.

Genesis Block:
- Height: 0
- Parent: sentinel (64 zeri)
- Body: vuoto

Ogni client conosce implicitamente genesis e il suo id: non viene mai
richiesto al ledger.
"""

from functools import lru_cache

from bonecoin.constants import SENTINEL_HASH, GENESIS_HEIGHT
from bonecoin.domain.models import Block, BlockId


def create_genesis_block() -> Block:
    """
    Crea il genesis block.

    Returns:
        Block: Genesis (parent sentinel, altezza 0, body vuoto)

    Examples:
        >>> create_genesis_block().number
        0
        >>> create_genesis_block() == create_genesis_block()
        True
    """
    return Block(
        parent=BlockId(SENTINEL_HASH),
        number=GENESIS_HEIGHT,
        body=(),
    )


@lru_cache(maxsize=1)
def get_genesis_id() -> BlockId:
    """Id del genesis block (cached)"""
    return create_genesis_block().compute_block_id()


def is_genesis(block_id: BlockId) -> bool:
    """Check se block_id è il genesis"""
    return block_id == get_genesis_id()


__all__ = [
    "create_genesis_block",
    "get_genesis_id",
    "is_genesis",
]
