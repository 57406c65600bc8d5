"""
Bonecoin - Light Wallet
=========================
Wallet che traccia un insieme di address e si sincronizza con un nodo.

Last Updated: 2026-10-16
Version: 1.0.0

Il wallet si fida completamente del nodo: non valida transazioni, firme o
blocchi. Mantiene solo i coin degli address tracciati e il blocco che
ritiene canonico.

Features:
- Query saldo e coin per address
- Sync fork-aware (rollback + rollforward)
- Costruzione transazioni manuali e automatiche
"""

from typing import Any, Dict, FrozenSet, Iterable, Optional, Sequence, Set, Tuple

from bonecoin.config import WalletSettings, get_settings
from bonecoin.domain.models import Address, BlockId, Coin, CoinId, Transaction
from bonecoin.domain.utxo import UTXOStore
from bonecoin.errors import ForeignAddressError, UnknownCoinError
from bonecoin.logging_setup import get_logger
from bonecoin.network.ledger import LedgerSource, RetryingLedgerSource
from bonecoin.network.sync import SyncReport, WalletSynchronizer
from bonecoin.services.transaction_service import TransactionBuilder


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("wallet")


# ============================================================================
# LIGHT WALLET
# ============================================================================

class LightWallet:
    """
    Light wallet bonecoin.

    Compone UTXO store, synchronizer e transaction builder. Un wallet
    appena creato è a genesis con store vuoto.

    Attributes:
        settings: Configurazione (policy sync, retry ledger)
        store: Coin non spesi degli address tracciati

    Examples:
        >>> wallet = LightWallet([ALICE])
        >>> wallet.sync(node)
        >>> wallet.total_assets_of(ALICE)
        100
        >>> tx = wallet.create_automatic_transaction(BOB, 10, 0)
    """

    def __init__(
        self,
        addresses: Iterable[Address],
        settings: Optional[WalletSettings] = None,
    ):
        self.settings = settings or get_settings()
        self._addresses: FrozenSet[Address] = frozenset(addresses)

        self.store = UTXOStore()
        self._synchronizer = WalletSynchronizer(self._addresses, self.store, self.settings)
        self._builder = TransactionBuilder(self._addresses, self.store)

        logger.info(
            "Light wallet created",
            extra_data={
                "addresses": sorted(str(a) for a in self._addresses),
                "sync_policy": self.settings.sync_policy.value,
            }
        )

    @property
    def addresses(self) -> FrozenSet[Address]:
        """Address tracciati (fissati alla creazione)"""
        return self._addresses

    # ========================================================================
    # CHAIN POSITION
    # ========================================================================

    def best_height(self) -> int:
        """Altezza del blocco che il wallet ritiene canonico"""
        return self._synchronizer.cursor.height

    def best_hash(self) -> BlockId:
        """Id del blocco che il wallet ritiene canonico"""
        return self._synchronizer.cursor.block_id

    # ========================================================================
    # BALANCE QUERIES
    # ========================================================================

    def _require_tracked(self, address: Address) -> None:
        if address not in self._addresses:
            raise ForeignAddressError(
                f"Address {address} not tracked by this wallet",
                code="FOREIGN_ADDRESS",
                details={"address": str(address)}
            )

    def total_assets_of(self, address: Address) -> int:
        """
        Saldo di un address tracciato.

        Raises:
            ForeignAddressError: Se l'address non è tracciato
        """
        self._require_tracked(address)
        return self.store.sum_owned_by(address)

    def net_worth(self) -> int:
        """Somma dei saldi di tutti gli address tracciati"""
        return self.store.total_value()

    def all_coins_of(self, address: Address) -> Set[Tuple[CoinId, int]]:
        """
        Coin di un address tracciato come coppie (id, valore).

        Raises:
            ForeignAddressError: Se l'address non è tracciato
        """
        self._require_tracked(address)
        return self.store.values_owned_by(address)

    def coin_details(self, coin_id: CoinId) -> Coin:
        """
        Dettagli di un coin nello store.

        Raises:
            UnknownCoinError: Se il coin non è nello store
        """
        coin = self.store.get(coin_id)
        if coin is None:
            raise UnknownCoinError(
                f"Coin {coin_id.short()} not known to this wallet",
                code="UNKNOWN_COIN",
                details={"coin_id": coin_id.hex}
            )
        return coin

    # ========================================================================
    # TRANSACTIONS
    # ========================================================================

    def create_manual_transaction(
        self,
        input_coin_ids: Sequence[CoinId],
        output_coins: Sequence[Coin],
    ) -> Transaction:
        """Vedi TransactionBuilder.create_manual"""
        return self._builder.create_manual(input_coin_ids, output_coins)

    def create_automatic_transaction(
        self,
        recipient: Address,
        payment_amount: int,
        tip: int = 0,
    ) -> Transaction:
        """Vedi TransactionBuilder.create_automatic"""
        return self._builder.create_automatic(recipient, payment_amount, tip)

    # ========================================================================
    # SYNC
    # ========================================================================

    def sync(self, ledger: LedgerSource) -> SyncReport:
        """
        Sincronizza con la chain canonica del ledger.

        Le query passano da un RetryingLedgerSource configurato con
        ledger_max_retries e ledger_retry_backoff_seconds.

        Args:
            ledger: Ledger source (nodo)

        Returns:
            SyncReport: Esito della sincronizzazione
        """
        source = RetryingLedgerSource(
            ledger,
            max_retries=self.settings.ledger_max_retries,
            backoff_seconds=self.settings.ledger_retry_backoff_seconds,
        )
        return self._synchronizer.sync(source)

    # ========================================================================
    # STATISTICS
    # ========================================================================

    def get_statistics(self) -> Dict[str, Any]:
        """Statistiche wallet"""
        return {
            **self._synchronizer.get_sync_state(),
            **self.store.get_statistics(),
            "net_worth": self.net_worth(),
        }

    def __repr__(self) -> str:
        return (
            f"LightWallet(addresses={len(self._addresses)}, "
            f"height={self.best_height()}, "
            f"net_worth={self.net_worth()})"
        )


__all__ = [
    "LightWallet",
]
