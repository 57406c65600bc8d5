"""
Bonecoin - UTXO Store
=======================
Coin non spesi posseduti dagli address tracciati dal wallet.

Last Updated: 2026-10-16
Version: 1.0.0

UTXO Store:
- Mapping CoinId → Coin
- Index address → CoinId (per query veloci)
- Stato derivato: ricostruibile rigiocando la chain da genesis

Undo:
- BlockUndo: delta netto di un blocco applicato (id inseriti, coin rimossi)
- UndoJournal: registra il valore precedente di ogni id al primo tocco

Concurrency:
    Nessun lock: accesso single-threaded per contratto.

Performance:
- O(1) get/insert/remove
- O(k) query per address (k = coin dell'address)
"""

from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Set, Tuple, Optional, FrozenSet, Iterator, Any

from bonecoin.domain.models import Address, Coin, CoinId, BlockId
from bonecoin.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("utxo")


# ============================================================================
# UTXO STORE
# ============================================================================

class UTXOStore:
    """
    Store dei coin non spesi del wallet.

    Attributes:
        _coins (dict): Mapping CoinId → Coin
        _address_index (dict): Index Address → set[CoinId]

    Examples:
        >>> store = UTXOStore()
        >>> store.insert(coin_id, Coin(100, ALICE))
        >>> store.sum_owned_by(ALICE)
        100
    """

    def __init__(self):
        self._coins: Dict[CoinId, Coin] = {}
        self._address_index: Dict[Address, Set[CoinId]] = defaultdict(set)

    def insert(self, coin_id: CoinId, coin: Coin) -> None:
        """
        Aggiungi coin allo store.

        Un id già presente viene sovrascritto: il ledger non è validato e
        il wallet deve tollerare blocchi malformati.

        Args:
            coin_id: Id del coin
            coin: Coin da aggiungere
        """
        previous = self._coins.get(coin_id)
        if previous is not None:
            logger.warning(
                "Coin id already present, overwriting",
                extra_data={"coin_id": coin_id.short()}
            )
            self._unindex(coin_id, previous)

        self._coins[coin_id] = coin
        self._address_index[coin.owner].add(coin_id)

        logger.debug(
            "Coin inserted",
            extra_data={
                "coin_id": coin_id.short(),
                "value": coin.value,
                "owner": coin.owner.label,
                "total_coins": len(self._coins)
            }
        )

    def remove(self, coin_id: CoinId) -> Optional[Coin]:
        """
        Rimuovi coin dallo store.

        Args:
            coin_id: Id del coin

        Returns:
            Optional[Coin]: Coin rimosso, None se assente (non è un errore:
            il coin può appartenere a un address non tracciato)
        """
        coin = self._coins.pop(coin_id, None)
        if coin is None:
            return None

        self._unindex(coin_id, coin)

        logger.debug(
            "Coin removed",
            extra_data={
                "coin_id": coin_id.short(),
                "value": coin.value,
                "total_coins": len(self._coins)
            }
        )
        return coin

    def _unindex(self, coin_id: CoinId, coin: Coin) -> None:
        ids = self._address_index.get(coin.owner)
        if ids is None:
            return
        ids.discard(coin_id)
        if not ids:
            del self._address_index[coin.owner]

    def get(self, coin_id: CoinId) -> Optional[Coin]:
        """Coin per id, None se assente"""
        return self._coins.get(coin_id)

    def contains(self, coin_id: CoinId) -> bool:
        return coin_id in self._coins

    def __contains__(self, coin_id: object) -> bool:
        return coin_id in self._coins

    def values_owned_by(self, address: Address) -> Set[Tuple[CoinId, int]]:
        """
        Coin posseduti da address.

        Args:
            address: Address da query

        Returns:
            Set[Tuple[CoinId, int]]: Coppie (id, valore)
        """
        return {
            (coin_id, self._coins[coin_id].value)
            for coin_id in self._address_index.get(address, ())
        }

    def sum_owned_by(self, address: Address) -> int:
        """Somma valori dei coin posseduti da address"""
        return sum(
            self._coins[coin_id].value
            for coin_id in self._address_index.get(address, ())
        )

    def total_value(self) -> int:
        """Somma valori di tutti i coin nello store"""
        return sum(coin.value for coin in self._coins.values())

    def items(self) -> Iterator[Tuple[CoinId, Coin]]:
        """Coppie (id, coin) in ordine crescente di id (deterministico)"""
        for coin_id in sorted(self._coins):
            yield coin_id, self._coins[coin_id]

    def address_count(self) -> int:
        """Numero address con almeno un coin"""
        return len(self._address_index)

    def clear(self) -> None:
        """Svuota lo store (rescan da genesis)"""
        self._coins.clear()
        self._address_index.clear()
        logger.info("UTXO store cleared")

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_coins": len(self._coins),
            "total_addresses": self.address_count(),
            "total_value": self.total_value(),
        }

    def __len__(self) -> int:
        return len(self._coins)

    def __repr__(self) -> str:
        return (
            f"UTXOStore(coins={len(self._coins)}, "
            f"addresses={self.address_count()}, "
            f"value={self.total_value()})"
        )


# ============================================================================
# BLOCK UNDO RECORD
# ============================================================================

@dataclass(frozen=True)
class BlockUndo:
    """
    Delta netto di un blocco applicato allo store.

    Un coin creato e speso nello stesso blocco non compare né in inserted
    né in removed: dopo il blocco non esiste e prima non esisteva.

    Attributes:
        height (int): Altezza del blocco
        block_id (BlockId): Blocco applicato
        parent_id (BlockId): Parent, nuovo cursore dopo il revert
        inserted (FrozenSet[CoinId]): Id assenti prima e presenti dopo
        removed (Tuple[Tuple[CoinId, Coin], ...]): Coin presenti prima,
            con il valore pre-blocco
    """

    height: int
    block_id: BlockId
    parent_id: BlockId
    inserted: FrozenSet[CoinId] = frozenset()
    removed: Tuple[Tuple[CoinId, Coin], ...] = ()

    def revert(self, store: UTXOStore) -> None:
        """
        Annulla il blocco sullo store.

        1. Elimina gli id inseriti (se ancora presenti con lo stesso valore)
        2. Re-inserisce i coin rimossi con owner/valore registrati
        """
        for coin_id in self.inserted:
            if store.contains(coin_id):
                store.remove(coin_id)

        for coin_id, coin in self.removed:
            store.insert(coin_id, coin)

    def is_empty(self) -> bool:
        return not self.inserted and not self.removed

    def __repr__(self) -> str:
        return (
            f"BlockUndo(height={self.height}, block={self.block_id.short()}..., "
            f"inserted={len(self.inserted)}, removed={len(self.removed)})"
        )


class UndoJournal:
    """
    Applica mutazioni allo store registrando il valore precedente di ogni id.

    Examples:
        >>> journal = UndoJournal(store)
        >>> journal.remove(spent_id)
        >>> journal.insert(new_id, Coin(10, ALICE))
        >>> undo = journal.finish(height=1, block_id=b1, parent_id=genesis_id)
    """

    def __init__(self, store: UTXOStore):
        self._store = store
        self._prior: Dict[CoinId, Optional[Coin]] = {}

    def _touch(self, coin_id: CoinId) -> None:
        if coin_id not in self._prior:
            self._prior[coin_id] = self._store.get(coin_id)

    def insert(self, coin_id: CoinId, coin: Coin) -> None:
        self._touch(coin_id)
        self._store.insert(coin_id, coin)

    def remove(self, coin_id: CoinId) -> Optional[Coin]:
        if not self._store.contains(coin_id):
            return None
        self._touch(coin_id)
        return self._store.remove(coin_id)

    def finish(self, height: int, block_id: BlockId, parent_id: BlockId) -> BlockUndo:
        """Costruisce il BlockUndo con il delta netto"""
        inserted = frozenset(
            coin_id
            for coin_id, prior in self._prior.items()
            if prior is None and self._store.contains(coin_id)
        )
        removed = tuple(sorted(
            (coin_id, prior)
            for coin_id, prior in self._prior.items()
            if prior is not None
        ))
        return BlockUndo(
            height=height,
            block_id=block_id,
            parent_id=parent_id,
            inserted=inserted,
            removed=removed,
        )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "UTXOStore",
    "BlockUndo",
    "UndoJournal",
]
