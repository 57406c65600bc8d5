"""
Bonecoin - Custom Exceptions
==============================
Gerarchia di eccezioni del light wallet.

Last Updated: 2026-10-16
Version: 1.0.0
"""

from typing import Optional, Any


# ============================================================================
# BASE EXCEPTION
# ============================================================================

class BonecoinException(Exception):
    """
    Eccezione base per tutte le eccezioni Bonecoin.

    Attributes:
        message (str): Messaggio errore
        code (str): Codice errore (es. "UNKNOWN_COIN")
        details (dict): Dettagli aggiuntivi
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Serializza eccezione per logging"""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================================
# WALLET ERRORS
# ============================================================================

class WalletError(BonecoinException):
    """Errore wallet (query o costruzione transazione)"""
    pass


class ForeignAddressError(WalletError):
    """Address non tracciato da questo wallet"""
    pass


class UnknownCoinError(WalletError):
    """
    Coin non presente nel UTXO store locale.

    Il wallet può non essere sincronizzato, il coin può essere già speso
    oppure non appartenere ad address tracciati.
    """
    pass


class NoOwnedAddressesError(WalletError):
    """Operazione richiede un address del wallet ma non ce ne sono"""
    pass


class InsufficientFundsError(WalletError):
    """Valore disponibile/selezionato inferiore al richiesto"""
    pass


class ZeroCoinValueError(WalletError):
    """Tentativo di creare un coin con valore 0"""
    pass


class ZeroInputsError(WalletError):
    """Tentativo di creare una transazione senza input"""
    pass


# ============================================================================
# LEDGER ERRORS
# ============================================================================

class LedgerError(BonecoinException):
    """Errore ledger source"""
    pass


class LedgerUnavailableError(LedgerError):
    """Ledger temporaneamente non raggiungibile (timeout, connessione)"""
    pass


class BlockNotFoundError(LedgerError):
    """Blocco non trovato"""
    pass


class UnknownParentError(LedgerError):
    """Parent del nuovo blocco non presente nel fork tree"""
    pass


# ============================================================================
# CRYPTOGRAPHY ERRORS
# ============================================================================

class CryptoError(BonecoinException):
    """Errore hashing"""
    pass


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def format_wallet_error(
    error_cls: type,
    issue: str,
    code: Optional[str] = None,
    **details: Any
) -> WalletError:
    """
    Helper per creare WalletError formattati.

    Args:
        error_cls: Sottoclasse di WalletError
        issue: Descrizione problema
        code: Codice errore custom
        **details: Dettagli aggiuntivi

    Returns:
        WalletError: Eccezione formattata

    Example:
        >>> raise format_wallet_error(ZeroInputsError, "no inputs", code="ZERO_INPUTS")
    """
    return error_cls(
        message=issue,
        code=code or "WALLET_ERROR",
        details=details,
    )


# ============================================================================
# EXPORT ALL
# ============================================================================

__all__ = [
    # Base
    "BonecoinException",

    # Wallet
    "WalletError",
    "ForeignAddressError",
    "UnknownCoinError",
    "NoOwnedAddressesError",
    "InsufficientFundsError",
    "ZeroCoinValueError",
    "ZeroInputsError",

    # Ledger
    "LedgerError",
    "LedgerUnavailableError",
    "BlockNotFoundError",
    "UnknownParentError",

    # Crypto
    "CryptoError",

    # Helpers
    "format_wallet_error",
]
