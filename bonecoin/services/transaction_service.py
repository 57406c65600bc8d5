"""
Bonecoin - Transaction Service
================================
Costruzione transazioni di spesa dal UTXO store del wallet.

Last Updated: 2026-10-16
Version: 1.0.0

Features:
- Transazione manuale (coin e output scelti dal chiamante)
- Transazione automatica (coin selection + change)
- Firma mock con l'owner di ogni coin speso

Il service non modifica lo store: il chiamante invia la transazione al
ledger e poi risincronizza.
"""

from typing import FrozenSet, Iterable, List, Sequence, Tuple

from bonecoin.domain.models import (
    Address,
    Coin,
    CoinId,
    Input,
    Signature,
    Transaction,
)
from bonecoin.domain.utxo import UTXOStore
from bonecoin.errors import (
    InsufficientFundsError,
    NoOwnedAddressesError,
    UnknownCoinError,
    WalletError,
    ZeroCoinValueError,
    ZeroInputsError,
    format_wallet_error,
)
from bonecoin.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("transaction_service")


# ============================================================================
# TRANSACTION BUILDER
# ============================================================================

class TransactionBuilder:
    """
    Costruisce transazioni che spendono coin del wallet.

    Attributes:
        addresses: Address tracciati (destinazione del change)
        store: UTXO store del wallet (sola lettura)

    Examples:
        >>> builder = TransactionBuilder({ALICE}, store)
        >>> tx = builder.create_automatic(BOB, payment_amount=10, tip=1)
        >>> # Invia tx al ledger, poi wallet.sync(node)
    """

    def __init__(self, addresses: Iterable[Address], store: UTXOStore):
        self.addresses: FrozenSet[Address] = frozenset(addresses)
        self.store = store

    # ========================================================================
    # MANUAL
    # ========================================================================

    def create_manual(
        self,
        input_coin_ids: Sequence[CoinId],
        output_coins: Sequence[Coin],
    ) -> Transaction:
        """
        Crea transazione con input e output espliciti.

        Args:
            input_coin_ids: Coin da spendere (devono essere nello store)
            output_coins: Output, nell'ordine dato

        Returns:
            Transaction: Tx con un Input per ogni id

        Raises:
            ZeroInputsError: Se input_coin_ids è vuoto
            UnknownCoinError: Se un id non è nello store
            ZeroCoinValueError: Se un output ha valore 0
        """
        if not input_coin_ids:
            raise format_wallet_error(
                ZeroInputsError,
                "Transaction must spend at least one coin",
                code="ZERO_INPUTS",
            )

        inputs = [self._signed_input(coin_id) for coin_id in input_coin_ids]

        for index, coin in enumerate(output_coins):
            if coin.value == 0:
                raise format_wallet_error(
                    ZeroCoinValueError,
                    f"Output {index} has zero value",
                    code="ZERO_COIN_VALUE",
                    output_index=index,
                    owner=str(coin.owner),
                )

        tx = Transaction(inputs=tuple(inputs), outputs=tuple(output_coins))

        logger.info(
            "Manual transaction created",
            extra_data={
                "txid": tx.compute_txid().short() + "...",
                "inputs": len(tx.inputs),
                "outputs": len(tx.outputs),
            }
        )
        return tx

    def _signed_input(self, coin_id: CoinId) -> Input:
        coin = self.store.get(coin_id)
        if coin is None:
            raise format_wallet_error(
                UnknownCoinError,
                f"Coin {coin_id.short()} not in wallet",
                code="UNKNOWN_COIN",
                coin_id=coin_id.hex,
            )
        return Input(coin_id=coin_id, signature=Signature.valid(coin.owner))

    # ========================================================================
    # AUTOMATIC
    # ========================================================================

    def create_automatic(
        self,
        recipient: Address,
        payment_amount: int,
        tip: int = 0,
    ) -> Transaction:
        """
        Crea pagamento con coin selection automatica.

        Il tip non compare negli output: è la differenza tra valore in
        input e valore in output.

        Args:
            recipient: Destinatario del pagamento
            payment_amount: Valore pagato (> 0)
            tip: Valore bruciato come tip

        Returns:
            Transaction: Tx con output [pagamento] o [pagamento, change]

        Raises:
            ZeroCoinValueError: Se payment_amount non è positivo
            WalletError: Se tip è negativo
            InsufficientFundsError: Se i coin non coprono payment + tip
            NoOwnedAddressesError: Se serve change ma il wallet non ha address

        Examples:
            >>> tx = builder.create_automatic(BOB, 10, 1)
            >>> tx.outputs[0]
            Coin(value=10, owner=Address('bob'))
        """
        if payment_amount <= 0:
            raise format_wallet_error(
                ZeroCoinValueError,
                "Payment amount must be positive",
                code="ZERO_COIN_VALUE",
                recipient=str(recipient),
            )

        if tip < 0:
            raise format_wallet_error(
                WalletError,
                f"Tip must be non-negative, got {tip}",
                code="NEGATIVE_TIP",
                tip=tip,
            )

        required = payment_amount + tip
        selected, total_selected = self._select_coins(required)

        if total_selected < required:
            raise format_wallet_error(
                InsufficientFundsError,
                f"Insufficient funds: need {required}, have {total_selected}",
                code="INSUFFICIENT_FUNDS",
                required=required,
                available=total_selected,
            )

        inputs = [
            Input(coin_id=coin_id, signature=Signature.valid(coin.owner))
            for coin_id, coin in selected
        ]

        outputs = [Coin.create(payment_amount, recipient)]

        change = total_selected - required
        if change > 0:
            outputs.append(Coin.create(change, self._change_address()))

        tx = Transaction(inputs=tuple(inputs), outputs=tuple(outputs))

        logger.info(
            "Automatic transaction created",
            extra_data={
                "txid": tx.compute_txid().short() + "...",
                "recipient": str(recipient),
                "amount": payment_amount,
                "tip": tip,
                "inputs": len(inputs),
                "change": change,
            }
        )
        return tx

    # ========================================================================
    # COIN SELECTION
    # ========================================================================

    def _select_coins(self, target_amount: int) -> Tuple[List[Tuple[CoinId, Coin]], int]:
        """
        Seleziona coin fino a coprire target_amount.

        Strategy: ordine crescente di CoinId (deterministico)

        Returns:
            Tuple: (selected_coins, total_selected); total < target se i
            fondi non bastano
        """
        selected = []
        total = 0

        for coin_id, coin in self.store.items():
            if total >= target_amount:
                break
            selected.append((coin_id, coin))
            total += coin.value

        return selected, total

    def _change_address(self) -> Address:
        """Address più piccolo tra quelli tracciati"""
        if not self.addresses:
            raise format_wallet_error(
                NoOwnedAddressesError,
                "Change output needs a wallet address, none tracked",
                code="NO_OWNED_ADDRESSES",
            )
        return min(self.addresses)


__all__ = [
    "TransactionBuilder",
]
