"""
Bonecoin - Core Constants
===========================
Costanti del protocollo e del light wallet.

Last Updated: 2026-10-16
Version: 1.0.0

IMPORTANTE: genesis e sentinel id devono essere identici su ogni client,
altrimenti il cursore iniziale non corrisponde al ledger.
"""

from enum import Enum
from typing import Final

# ============================================================================
# IDENTIFICAZIONE PROGETTO
# ============================================================================

SOFTWARE_VERSION: Final[str] = "1.0.0"

# ============================================================================
# HASHING
# ============================================================================

# SHA-256 digest in hex
HASH_HEX_LENGTH: Final[int] = 64

# Parent del genesis block (nessun blocco precedente)
SENTINEL_HASH: Final[str] = "0" * HASH_HEX_LENGTH

# ============================================================================
# GENESIS
# ============================================================================

GENESIS_HEIGHT: Final[int] = 0

# ============================================================================
# TEST HELPERS
# ============================================================================

# Coin id fittizio per Input.dummy() (cifre decimali di e)
DUMMY_INPUT_SEED: Final[str] = "2718281828459045"

# ============================================================================
# SYNC POLICY
# ============================================================================

class SyncPolicy(str, Enum):
    """
    Strategia di recovery dopo un reorg.

    - UNDO_LOG: undo record per ogni altezza applicata, rollback fino al fork point
    - RESCAN: nessuno storico, reset a genesis e replay completo
    """
    UNDO_LOG = "undo_log"
    RESCAN = "rescan"


# ============================================================================
# LEDGER RETRY DEFAULTS
# ============================================================================

DEFAULT_LEDGER_MAX_RETRIES: Final[int] = 2
DEFAULT_LEDGER_RETRY_BACKOFF_SECONDS: Final[float] = 0.5

# Pass rollback/rollforward per sync() se la chain cambia durante il pass
MAX_RECONCILE_PASSES: Final[int] = 8


def validate_coin_value(value: int) -> bool:
    """
    Valida valore coin prodotto dal wallet.

    Args:
        value: Valore in bones

    Returns:
        bool: True se intero positivo

    Examples:
        >>> validate_coin_value(10)
        True
        >>> validate_coin_value(0)
        False
    """
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


__all__ = [
    "SOFTWARE_VERSION",
    "HASH_HEX_LENGTH",
    "SENTINEL_HASH",
    "GENESIS_HEIGHT",
    "DUMMY_INPUT_SEED",
    "SyncPolicy",
    "DEFAULT_LEDGER_MAX_RETRIES",
    "DEFAULT_LEDGER_RETRY_BACKOFF_SECONDS",
    "MAX_RECONCILE_PASSES",
    "validate_coin_value",
]
