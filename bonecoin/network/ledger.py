"""
Bonecoin - Ledger Source Interface
====================================
Interfaccia con cui un tool off-chain (wallet, indexer, explorer) interroga
un nodo bonecoin.

Last Updated: 2026-10-16
Version: 1.0.0

Query:
- best_block_at_height(h): id del blocco canonico ad altezza h
- whole_block(id): contenuto completo del blocco (anche se orfano)

La chain canonica può cambiare tra due query: nessuno snapshot isolation.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Callable, TypeVar
import time

from bonecoin.domain.models import Block, BlockId
from bonecoin.errors import LedgerUnavailableError
from bonecoin.logging_setup import get_logger


# ============================================================================
# MODULE LOGGER
# ============================================================================

logger = get_logger("ledger")

T = TypeVar("T")


# ============================================================================
# LEDGER SOURCE
# ============================================================================

class LedgerSource(ABC):
    """
    Capability read-only verso un ledger.

    Implementazioni (mock, rete, embedded) possono sollevare
    LedgerUnavailableError per errori transitori.
    """

    @abstractmethod
    def best_block_at_height(self, height: int) -> Optional[BlockId]:
        """
        Id del blocco canonico ad altezza height.

        Returns:
            Optional[BlockId]: None se la chain canonica è più corta
        """

    @abstractmethod
    def whole_block(self, block_id: BlockId) -> Optional[Block]:
        """
        Contenuto completo di un blocco, canonico o no.

        Returns:
            Optional[Block]: None solo se l'id è sconosciuto
        """


# ============================================================================
# QUERY METRICS
# ============================================================================

@dataclass
class QueryCounter:
    """
    Contatore query posseduto dal chiamante (test harness).

    Il ledger lo incrementa, i test lo leggono: non fa parte dello stato
    del wallet.
    """

    best_block_queries: int = 0
    whole_block_queries: int = 0

    @property
    def total(self) -> int:
        return self.best_block_queries + self.whole_block_queries

    def reset(self) -> None:
        self.best_block_queries = 0
        self.whole_block_queries = 0


# ============================================================================
# RETRY WRAPPER
# ============================================================================

class RetryingLedgerSource(LedgerSource):
    """
    Wrapper con retry per ledger di rete.

    Una query che solleva LedgerUnavailableError viene ritentata fino a
    max_retries volte; esauriti i tentativi l'errore viene propagato e il
    synchronizer interrompe il pass corrente senza corrompere lo stato.

    Examples:
        >>> source = RetryingLedgerSource(remote, max_retries=3, backoff_seconds=0.2)
        >>> wallet.sync(source)
    """

    def __init__(
        self,
        inner: LedgerSource,
        max_retries: int = 2,
        backoff_seconds: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_retries < 0:
            raise ValueError(f"max_retries must be non-negative, got {max_retries}")

        self.inner = inner
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep
        self.failures = 0

    def _call(self, operation: str, query: Callable[[], T]) -> T:
        attempt = 0
        while True:
            try:
                return query()
            except LedgerUnavailableError as e:
                attempt += 1
                if attempt > self.max_retries:
                    self.failures += 1
                    logger.warning(
                        f"Ledger {operation} unavailable, giving up",
                        extra_data={"attempts": attempt, "error": e.message}
                    )
                    raise

                logger.debug(
                    f"Ledger {operation} unavailable, retrying",
                    extra_data={"attempt": attempt, "max_retries": self.max_retries}
                )
                if self.backoff_seconds > 0:
                    self._sleep(self.backoff_seconds * attempt)

    def best_block_at_height(self, height: int) -> Optional[BlockId]:
        return self._call(
            "best_block_at_height",
            lambda: self.inner.best_block_at_height(height)
        )

    def whole_block(self, block_id: BlockId) -> Optional[Block]:
        return self._call(
            "whole_block",
            lambda: self.inner.whole_block(block_id)
        )


__all__ = [
    "LedgerSource",
    "QueryCounter",
    "RetryingLedgerSource",
]
