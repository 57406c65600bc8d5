"""
Bonecoin - Wallet Synchronization
===================================
Sincronizzazione fork-aware del light wallet con un ledger source.

Last Updated: 2026-10-16
Version: 1.0.0

Algoritmo (per ogni chiamata sync()):
1. Rollback: finché il blocco canonico all'altezza del cursore non è il
   blocco del cursore, annulla l'ultimo blocco applicato con il suo undo
   record e arretra il cursore al parent.
2. Rollforward: applica i blocchi canonici successivi al cursore, in
   ordine, finché il ledger ne riporta.

Features:
- Undo log per altezza (nessun rescan da genesis senza reorg)
- Policy rescan (nessuno storico, replay completo dopo un mismatch)
- Undo log limitato con fallback a rescan
- Progresso parziale mantenuto se un fetch fallisce
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, asdict
from typing import Deque, Dict, FrozenSet, Iterable, Optional, Any

from bonecoin.config import WalletSettings, get_settings
from bonecoin.constants import MAX_RECONCILE_PASSES
from bonecoin.domain.genesis import get_genesis_id
from bonecoin.domain.models import Address, Block, BlockId
from bonecoin.domain.utxo import UTXOStore, BlockUndo, UndoJournal
from bonecoin.errors import LedgerUnavailableError
from bonecoin.logging_setup import get_logger, PerformanceLogger
from bonecoin.network.ledger import LedgerSource


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("sync")


# ============================================================================
# CHAIN CURSOR
# ============================================================================

@dataclass(frozen=True)
class ChainCursor:
    """
    Blocco che il wallet ritiene canonico.

    Attributes:
        height: Altezza
        block_id: Id del blocco a quell'altezza
    """

    height: int
    block_id: BlockId

    @classmethod
    def genesis(cls) -> ChainCursor:
        return cls(height=0, block_id=get_genesis_id())

    def is_genesis(self) -> bool:
        return self.height == 0


# ============================================================================
# SYNC REPORT
# ============================================================================

@dataclass
class SyncReport:
    """
    Esito di una chiamata sync().

    Attributes:
        start_height: Altezza cursore all'inizio
        end_height: Altezza cursore alla fine
        end_hash: Id blocco cursore alla fine
        rolled_back: Blocchi annullati con undo record
        applied: Blocchi applicati in rollforward
        rescanned: Se lo stato è stato resettato a genesis
        interrupted: Se il pass si è fermato prima di raggiungere il tip
            (dati non disponibili o chain instabile)
        passes: Pass rollback/rollforward eseguiti
        duration_ms: Durata
    """

    start_height: int = 0
    end_height: int = 0
    end_hash: Optional[BlockId] = None
    rolled_back: int = 0
    applied: int = 0
    rescanned: bool = False
    interrupted: bool = False
    passes: int = 0
    duration_ms: float = 0.0

    @property
    def reorg_detected(self) -> bool:
        return self.rolled_back > 0 or self.rescanned

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["end_hash"] = self.end_hash.hex if self.end_hash else None
        data["reorg_detected"] = self.reorg_detected
        return data


# ============================================================================
# WALLET SYNCHRONIZER
# ============================================================================

class WalletSynchronizer:
    """
    Riconcilia cursore e UTXO store con la chain canonica del ledger.

    Stato persistente: (cursor, store, undo_log). Lo store contiene solo
    coin di address tracciati.

    Attributes:
        addresses: Address tracciati
        store: UTXO store del wallet
        settings: Configurazione
        cursor: Blocco ritenuto canonico

    Examples:
        >>> sync = WalletSynchronizer({ALICE}, UTXOStore())
        >>> report = sync.sync(node)
        >>> report.end_height
        2
    """

    def __init__(
        self,
        addresses: Iterable[Address],
        store: UTXOStore,
        settings: Optional[WalletSettings] = None,
    ):
        self.addresses: FrozenSet[Address] = frozenset(addresses)
        self.store = store
        self.settings = settings or get_settings()
        self.cursor = ChainCursor.genesis()

        # Undo record per altezza, il più recente in coda
        self._undo_log: Deque[BlockUndo] = deque()

    # ========================================================================
    # SYNC
    # ========================================================================

    def sync(self, ledger: LedgerSource) -> SyncReport:
        """
        Sincronizza con la chain canonica corrente del ledger.

        Sicuro da chiamare ripetutamente. Se il ledger non è disponibile il
        pass si ferma e i blocchi già applicati restano validi: la chiamata
        successiva riprende da lì.

        Args:
            ledger: Ledger source

        Returns:
            SyncReport: Esito
        """
        report = SyncReport(start_height=self.cursor.height)

        with PerformanceLogger(logger, "sync") as perf:
            try:
                self._reconcile(ledger, report)
            except LedgerUnavailableError as e:
                report.interrupted = True
                logger.warning(
                    "Ledger unavailable, sync pass halted",
                    extra_data={"height": self.cursor.height, "error": e.message}
                )

        report.duration_ms = round(perf.elapsed_ms, 2)
        report.end_height = self.cursor.height
        report.end_hash = self.cursor.block_id

        if report.reorg_detected or report.applied:
            logger.info(
                f"Sync completed at height {report.end_height}",
                extra_data=report.to_dict()
            )

        return report

    def _reconcile(self, ledger: LedgerSource, report: SyncReport) -> None:
        for _ in range(MAX_RECONCILE_PASSES):
            report.passes += 1
            self._rollback(ledger, report)
            if self._rollforward(ledger, report):
                return

        report.interrupted = True
        logger.warning(
            "Canonical chain kept changing during sync, stopping",
            extra_data={"passes": report.passes, "height": self.cursor.height}
        )

    # ========================================================================
    # ROLLBACK
    # ========================================================================

    def _rollback(self, ledger: LedgerSource, report: SyncReport) -> None:
        """
        Arretra il cursore fino al fork point.

        Termina a genesis (mai in mismatch) o al primo match. Se gli undo
        record finiscono prima del fork point, fallback a rescan.
        """
        while self.cursor.height > 0:
            canonical = ledger.best_block_at_height(self.cursor.height)
            if canonical == self.cursor.block_id:
                return

            if not self._undo_log:
                self._rescan(report)
                return

            undo = self._undo_log[-1]
            if undo.height != self.cursor.height or undo.block_id != self.cursor.block_id:
                logger.error(
                    "Undo log out of step with cursor",
                    extra_data={
                        "cursor_height": self.cursor.height,
                        "undo_height": undo.height,
                    }
                )
                self._rescan(report)
                return

            self._undo_log.pop()
            undo.revert(self.store)
            self.cursor = ChainCursor(height=undo.height - 1, block_id=undo.parent_id)
            report.rolled_back += 1

            logger.debug(
                "Block reverted",
                extra_data={
                    "height": undo.height,
                    "block_id": undo.block_id.short(),
                    "coins_reinserted": len(undo.removed),
                    "coins_deleted": len(undo.inserted),
                }
            )

    def _rescan(self, report: SyncReport) -> None:
        """Reset a genesis: il rollforward rigioca l'intera chain"""
        logger.warning(
            "Fork point not reachable from undo log, rescanning from genesis",
            extra_data={"height": self.cursor.height, "undo_records": len(self._undo_log)}
        )
        self.reset()
        report.rescanned = True

    # ========================================================================
    # ROLLFORWARD
    # ========================================================================

    def _rollforward(self, ledger: LedgerSource, report: SyncReport) -> bool:
        """
        Applica i blocchi canonici sopra il cursore.

        Returns:
            bool: False se la chain è cambiata durante il pass (serve un
            nuovo rollback), True altrimenti
        """
        limit = self.settings.max_blocks_per_sync

        while limit is None or report.applied < limit:
            height = self.cursor.height + 1

            block_id = ledger.best_block_at_height(height)
            if block_id is None:
                return True

            block = ledger.whole_block(block_id)
            if block is None:
                report.interrupted = True
                logger.warning(
                    "Canonical block not fetchable, stopping",
                    extra_data={"height": height, "block_id": block_id.short()}
                )
                return True

            if block.parent != self.cursor.block_id:
                logger.info(
                    "Canonical chain changed during sync",
                    extra_data={"height": height, "block_id": block_id.short()}
                )
                return False

            self._apply_block(height, block_id, block)
            report.applied += 1

        return True

    def _apply_block(self, height: int, block_id: BlockId, block: Block) -> BlockUndo:
        """
        Applica le transazioni del blocco in ordine.

        L'ordine conta: una transazione può spendere un coin creato da una
        transazione precedente nello stesso blocco.
        """
        if block.number != height:
            logger.warning(
                "Block number differs from canonical height",
                extra_data={"height": height, "block_number": block.number}
            )

        journal = UndoJournal(self.store)

        for tx in block.body:
            for coin_id in tx.iter_input_coin_ids():
                journal.remove(coin_id)

            for coin_id, coin in tx.iter_output_coins_and_ids(height):
                if coin.owner in self.addresses:
                    journal.insert(coin_id, coin)

        undo = journal.finish(height=height, block_id=block_id, parent_id=self.cursor.block_id)
        self._record_undo(undo)
        self.cursor = ChainCursor(height=height, block_id=block_id)

        logger.debug(
            "Block applied",
            extra_data={
                "height": height,
                "block_id": block_id.short(),
                "txs": len(block.body),
                "coins_inserted": len(undo.inserted),
                "coins_removed": len(undo.removed),
            }
        )
        return undo

    def _record_undo(self, undo: BlockUndo) -> None:
        if not self.settings.uses_undo_log():
            return

        self._undo_log.append(undo)

        depth = self.settings.undo_log_depth
        while depth is not None and len(self._undo_log) > depth:
            self._undo_log.popleft()

    # ========================================================================
    # UTILITIES
    # ========================================================================

    def reset(self) -> None:
        """Riporta store, undo log e cursore a genesis"""
        self.store.clear()
        self._undo_log.clear()
        self.cursor = ChainCursor.genesis()

    @property
    def undo_depth(self) -> int:
        """Numero undo record mantenuti"""
        return len(self._undo_log)

    def get_sync_state(self) -> Dict[str, Any]:
        """Ottieni stato sync"""
        return {
            "height": self.cursor.height,
            "block_id": self.cursor.block_id.hex,
            "undo_records": len(self._undo_log),
            "sync_policy": self.settings.sync_policy.value,
            "tracked_addresses": len(self.addresses),
        }


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "ChainCursor",
    "SyncReport",
    "WalletSynchronizer",
]
