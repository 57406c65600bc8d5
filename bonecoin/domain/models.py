"""
Bonecoin - Core Domain Models
===============================
Strutture dati fondamentali del ledger.

Last Updated: 2026-10-16
Version: 1.0.0

Models:
- Address: Identificatore opaco di un account
- Signature: Firma mock (tag con l'address autorizzante)
- Coin: Valore in bones + owner
- CoinId / TransactionId / BlockId: Hash content-derived
- Input: Riferimento a un coin da spendere
- Transaction: Input + output
- Block: Parent + altezza + body

Tutte le strutture sono immutabili (frozen). Gli id sono SHA-256 del JSON
canonico (vedi crypto_core.hash_canonical).
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Dict, Any, Iterator
import re

from bonecoin.constants import (
    HASH_HEX_LENGTH,
    DUMMY_INPUT_SEED,
    validate_coin_value,
)
from bonecoin.domain.crypto_core import hash_canonical
from bonecoin.errors import CryptoError, ZeroCoinValueError


_HEX_RE = re.compile(r"^[0-9a-f]+$")


# ============================================================================
# ADDRESS
# ============================================================================

@dataclass(frozen=True, order=True)
class Address:
    """
    Identificatore opaco di un account che può possedere coin.

    Confrontabile e totalmente ordinato (per selezione deterministica).

    Examples:
        >>> ALICE < BOB
        True
        >>> Address.custom(7)
        Address('custom:7')
    """

    label: str

    def __post_init__(self):
        if not self.label or not isinstance(self.label, str):
            raise ValueError("Address label must be non-empty string")

    @classmethod
    def custom(cls, number: int) -> Address:
        """Address numerato (oltre ai nomi predefiniti)"""
        return cls(f"custom:{number}")

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return f"Address({self.label!r})"


ALICE = Address("alice")
BOB = Address("bob")
CHARLIE = Address("charlie")
DAVE = Address("dave")
EVE = Address("eve")


# ============================================================================
# SIGNATURE (MOCK)
# ============================================================================

@dataclass(frozen=True)
class Signature:
    """
    Firma simulata.

    Una firma "valida" nomina l'address che autorizza la spesa. Nessuna
    operazione crittografica viene eseguita e il wallet non verifica mai
    le firme che importa dal ledger.

    Attributes:
        signer (Optional[Address]): Address firmatario, None se invalida
    """

    signer: Optional[Address] = None

    @classmethod
    def valid(cls, address: Address) -> Signature:
        return cls(signer=address)

    @classmethod
    def invalid(cls) -> Signature:
        return cls(signer=None)

    @property
    def is_valid(self) -> bool:
        return self.signer is not None

    def to_dict(self) -> Dict[str, Any]:
        return {"signer": self.signer.label if self.signer else None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Signature:
        signer = data.get("signer")
        return cls(signer=Address(signer) if signer else None)


# ============================================================================
# IDENTIFIERS
# ============================================================================

@dataclass(frozen=True, order=True)
class _HashId:
    """Hash SHA-256 esadecimale (64 caratteri)"""

    hex: str

    def __post_init__(self):
        if (
            not isinstance(self.hex, str)
            or len(self.hex) != HASH_HEX_LENGTH
            or not _HEX_RE.match(self.hex)
        ):
            raise CryptoError(
                f"{type(self).__name__} must be {HASH_HEX_LENGTH} lowercase hex characters",
                code="INVALID_HASH_ID",
                details={"value": str(self.hex)[:80]}
            )

    def short(self) -> str:
        return self.hex[:12]

    def __str__(self) -> str:
        return self.hex

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.hex[:16]}...)"


@dataclass(frozen=True, order=True, repr=False)
class CoinId(_HashId):
    """
    Identificatore univoco di un coin.

    Derivato da (transaction id, altezza del blocco, indice output):
    la stessa transazione inclusa ad altezze diverse produce coin id diversi.
    """


@dataclass(frozen=True, order=True, repr=False)
class TransactionId(_HashId):
    """Hash del contenuto completo della transazione (input + output)"""


@dataclass(frozen=True, order=True, repr=False)
class BlockId(_HashId):
    """Hash del contenuto completo del blocco"""


# ============================================================================
# COIN
# ============================================================================

@dataclass(frozen=True, order=True)
class Coin:
    """
    Coin: valore in bones e owner.

    La costruzione diretta non valida il valore: il wallet deve tollerare
    qualunque dato osservato nel ledger. Ogni coin prodotto dal wallet
    passa invece da Coin.create(), che rifiuta il valore 0.

    Attributes:
        value (int): Valore in bones
        owner (Address): Address che può spendere il coin

    Examples:
        >>> Coin.create(100, ALICE)
        Coin(value=100, owner=Address('alice'))
    """

    value: int
    owner: Address

    @classmethod
    def create(cls, value: int, owner: Address) -> Coin:
        """Costruisce un coin validando value > 0"""
        if not validate_coin_value(value):
            raise ZeroCoinValueError(
                f"Coin value must be a positive integer, got {value}",
                code="ZERO_COIN_VALUE",
                details={"value": value, "owner": str(owner)}
            )
        return cls(value=value, owner=owner)

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "owner": self.owner.label}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Coin:
        return cls(value=data["value"], owner=Address(data["owner"]))


# ============================================================================
# TRANSACTION INPUT
# ============================================================================

@dataclass(frozen=True)
class Input:
    """
    Input di transazione: quale coin viene speso e la firma dell'owner.

    Il wallet usa solo coin_id per il bookkeeping.

    Attributes:
        coin_id (CoinId): Coin consumato
        signature (Signature): Firma mock
    """

    coin_id: CoinId
    signature: Signature

    @classmethod
    def dummy(cls) -> Input:
        """
        Input segnaposto per test (coin id fisso, firma invalida).

        Examples:
            >>> Input.dummy() == Input.dummy()
            True
        """
        return cls(
            coin_id=CoinId(hash_canonical({"dummy": DUMMY_INPUT_SEED})),
            signature=Signature.invalid(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coin_id": self.coin_id.hex,
            "signature": self.signature.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Input:
        return cls(
            coin_id=CoinId(data["coin_id"]),
            signature=Signature.from_dict(data["signature"]),
        )


# ============================================================================
# TRANSACTION
# ============================================================================

@dataclass(frozen=True)
class Transaction:
    """
    Transazione UTXO: consuma input e crea output.

    Il TXID dipende solo dal contenuto (input + output), non dal blocco
    in cui la transazione è inclusa.

    Attributes:
        inputs (Tuple[Input, ...]): Coin consumati
        outputs (Tuple[Coin, ...]): Coin creati, indicizzati per posizione

    Examples:
        >>> tx = Transaction(inputs=[Input.dummy()], outputs=[Coin(100, ALICE)])
        >>> tx.compute_txid() == tx.compute_txid()
        True
    """

    inputs: Tuple[Input, ...] = ()
    outputs: Tuple[Coin, ...] = ()

    def __post_init__(self):
        # Accetta liste, memorizza tuple (hashable)
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "outputs", tuple(self.outputs))

    def compute_txid(self) -> TransactionId:
        """
        Calcola Transaction ID.

        Returns:
            TransactionId: SHA-256 del contenuto serializzato
        """
        return TransactionId(hash_canonical(self.to_dict()))

    def coin_id(self, block_number: int, output_index: int) -> CoinId:
        """
        Calcola id di un coin creato da questa transazione.

        Args:
            block_number: Altezza del blocco che include la transazione
            output_index: Posizione dell'output

        Returns:
            CoinId: Hash di (txid, block_number, output_index)
        """
        return coin_id_for(self.compute_txid(), block_number, output_index)

    def iter_input_coin_ids(self) -> Iterator[CoinId]:
        """Coin id consumati, nell'ordine degli input"""
        return (inp.coin_id for inp in self.inputs)

    def iter_output_coins_and_ids(self, block_number: int) -> Iterator[Tuple[CoinId, Coin]]:
        """Coppie (coin id, coin) create a block_number, nell'ordine degli output"""
        txid = self.compute_txid()
        for index, coin in enumerate(self.outputs):
            yield coin_id_for(txid, block_number, index), coin

    def total_output_value(self) -> int:
        """Somma valori output"""
        return sum(coin.value for coin in self.outputs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inputs": [inp.to_dict() for inp in self.inputs],
            "outputs": [coin.to_dict() for coin in self.outputs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Transaction:
        return cls(
            inputs=tuple(Input.from_dict(i) for i in data.get("inputs", [])),
            outputs=tuple(Coin.from_dict(o) for o in data.get("outputs", [])),
        )

    def __repr__(self) -> str:
        return f"Transaction(inputs={len(self.inputs)}, outputs={len(self.outputs)})"


def coin_id_for(txid: TransactionId, block_number: int, output_index: int) -> CoinId:
    """CoinId da (txid, altezza, indice output)"""
    return CoinId(hash_canonical({
        "txid": txid.hex,
        "block_number": block_number,
        "output_index": output_index,
    }))


# ============================================================================
# BLOCK
# ============================================================================

@dataclass(frozen=True)
class Block:
    """
    Blocco del ledger.

    Non esiste separazione header/body: il BlockId è l'hash dell'intero
    contenuto (parent, altezza, transazioni).

    Attributes:
        parent (BlockId): Blocco precedente (sentinel per genesis)
        number (int): Altezza (parent + 1, 0 per genesis)
        body (Tuple[Transaction, ...]): Transazioni in ordine di applicazione
    """

    parent: BlockId
    number: int
    body: Tuple[Transaction, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "body", tuple(self.body))
        if self.number < 0:
            raise ValueError(f"Block number must be non-negative, got {self.number}")

    def compute_block_id(self) -> BlockId:
        """
        Calcola block id.

        Returns:
            BlockId: SHA-256 del blocco serializzato
        """
        return BlockId(hash_canonical(self.to_dict()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parent": self.parent.hex,
            "number": self.number,
            "body": [tx.to_dict() for tx in self.body],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Block:
        return cls(
            parent=BlockId(data["parent"]),
            number=data["number"],
            body=tuple(Transaction.from_dict(tx) for tx in data.get("body", [])),
        )

    def __repr__(self) -> str:
        return (
            f"Block(number={self.number}, parent={self.parent.short()}..., "
            f"txs={len(self.body)})"
        )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "Address",
    "ALICE",
    "BOB",
    "CHARLIE",
    "DAVE",
    "EVE",
    "Signature",
    "CoinId",
    "TransactionId",
    "BlockId",
    "Coin",
    "Input",
    "Transaction",
    "Block",
    "coin_id_for",
]
