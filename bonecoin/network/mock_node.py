"""
Bonecoin - Mock Node
======================
Nodo bonecoin in memoria per test e demo.

Last Updated: 2026-10-16
Version: 1.0.0

Il nodo mantiene un fork tree completo (non una chain lineare) indicizzato
per BlockId. L'unica assunzione di validità: ogni blocco ha il parent nel
tree (tranne genesis). Nessuna fork choice rule: il best block si imposta
a mano con set_best().
"""

from __future__ import annotations
from typing import Dict, Iterable, Optional

from bonecoin.domain.genesis import create_genesis_block, get_genesis_id
from bonecoin.domain.models import Block, BlockId, Transaction
from bonecoin.errors import BlockNotFoundError, UnknownParentError
from bonecoin.logging_setup import get_logger
from bonecoin.network.ledger import LedgerSource, QueryCounter


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("mock_node")


# ============================================================================
# MOCK NODE
# ============================================================================

class MockNode(LedgerSource):
    """
    Ledger in memoria con fork tree e best block manuale.

    Traccia il numero di query ricevute tramite un QueryCounter, utile per
    verificare che il wallet non risincronizzi da genesis a ogni chiamata.

    Attributes:
        blocks (dict): Mapping BlockId → Block (content-addressed)
        best_block (BlockId): Blocco considerato best
        counter (QueryCounter): Metriche query

    Examples:
        >>> node = MockNode()
        >>> b1 = node.add_block_as_best(get_genesis_id(), [])
        >>> node.best_block_at_height(1) == b1
        True
    """

    def __init__(self, counter: Optional[QueryCounter] = None):
        genesis = create_genesis_block()
        self.blocks: Dict[BlockId, Block] = {get_genesis_id(): genesis}
        self.best_block: BlockId = get_genesis_id()
        self.counter = counter if counter is not None else QueryCounter()

    # ========================================================================
    # LEDGER SOURCE
    # ========================================================================

    def best_block_at_height(self, height: int) -> Optional[BlockId]:
        self.counter.best_block_queries += 1

        block_id = self.best_block
        block = self.blocks[block_id]

        if height < 0 or height > block.number:
            return None

        # Risale dal best block fino all'altezza richiesta
        while block.number != height:
            block_id = block.parent
            block = self.blocks[block_id]

        return block_id

    def whole_block(self, block_id: BlockId) -> Optional[Block]:
        self.counter.whole_block_queries += 1
        return self.blocks.get(block_id)

    # ========================================================================
    # TREE MANAGEMENT
    # ========================================================================

    def add_block(self, parent_id: BlockId, body: Iterable[Transaction]) -> BlockId:
        """
        Aggiungi blocco sopra parent_id (non diventa best).

        Args:
            parent_id: Parent, deve essere nel tree
            body: Transazioni del blocco

        Returns:
            BlockId: Id del nuovo blocco

        Raises:
            UnknownParentError: Se parent_id non è nel tree
        """
        parent = self.blocks.get(parent_id)
        if parent is None:
            raise UnknownParentError(
                f"Cannot build on unknown block {parent_id.short()}",
                code="UNKNOWN_PARENT",
                details={"parent": parent_id.hex}
            )

        block = Block(parent=parent_id, number=parent.number + 1, body=tuple(body))
        block_id = block.compute_block_id()
        self.blocks[block_id] = block

        logger.debug(
            "Block added to mock node",
            extra_data={"height": block.number, "block_id": block_id.short()}
        )
        return block_id

    def set_best(self, new_best: BlockId) -> None:
        """
        Imposta il best block (nessuna longest chain rule).

        Raises:
            BlockNotFoundError: Se il blocco non è nel tree
        """
        if new_best not in self.blocks:
            raise BlockNotFoundError(
                f"Cannot set unknown block {new_best.short()} as best",
                code="UNKNOWN_BEST_BLOCK",
                details={"block_id": new_best.hex}
            )
        self.best_block = new_best

    def add_block_as_best(self, parent_id: BlockId, body: Iterable[Transaction]) -> BlockId:
        """Aggiungi blocco e impostalo come best"""
        block_id = self.add_block(parent_id, body)
        self.set_best(block_id)
        return block_id

    def best_height(self) -> int:
        return self.blocks[self.best_block].number

    def how_many_queries(self) -> int:
        """Numero totale di query ricevute"""
        return self.counter.total

    def __repr__(self) -> str:
        return (
            f"MockNode(blocks={len(self.blocks)}, "
            f"best_height={self.best_height()}, "
            f"queries={self.counter.total})"
        )


__all__ = [
    "MockNode",
]
