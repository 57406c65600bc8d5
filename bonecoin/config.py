"""
Bonecoin - Configuration Management
=====================================
Configurazione light wallet con Pydantic Settings.
Supporta environment variables, file .env, override runtime.

Last Updated: 2026-10-16
Version: 1.0.0

Features:
- Validazione automatica tipi
- Environment variables con prefisso BONECOIN_
- File .env support
- Preset per test
"""

from pathlib import Path
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from bonecoin.constants import (
    SyncPolicy,
    DEFAULT_LEDGER_MAX_RETRIES,
    DEFAULT_LEDGER_RETRY_BACKOFF_SECONDS,
)
from bonecoin.logging_setup import BonecoinLogger, setup_logging_from_settings


# ============================================================================
# MAIN CONFIGURATION CLASS
# ============================================================================

class WalletSettings(BaseSettings):
    """
    Configurazione principale light wallet.

    Supporta:
    - Caricamento da environment variables (BONECOIN_*)
    - Caricamento da file .env
    - Override programmatici
    - Validazione automatica

    I campi log_* non vengono applicati dal wallet: l'applicazione host
    chiama configure_logging() una volta all'avvio.

    Example:
        # Da environment
        export BONECOIN_SYNC_POLICY=rescan
        export BONECOIN_UNDO_LOG_DEPTH=100

        # Da codice
        config = WalletSettings(sync_policy="rescan")
        config.configure_logging()
    """

    model_config = SettingsConfigDict(
        env_prefix='BONECOIN_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    # ========================================================================
    # SYNCHRONIZATION
    # ========================================================================

    sync_policy: SyncPolicy = Field(
        default=SyncPolicy.UNDO_LOG,
        description="Recovery dopo reorg: undo_log, rescan"
    )

    # None = undo log illimitato
    undo_log_depth: Optional[int] = Field(
        default=None,
        ge=1,
        description="Numero massimo undo record mantenuti"
    )

    # None = nessun limite
    max_blocks_per_sync: Optional[int] = Field(
        default=None,
        ge=1,
        description="Blocchi massimi applicati per chiamata sync()"
    )

    # ========================================================================
    # LEDGER ACCESS
    # ========================================================================

    ledger_max_retries: int = Field(
        default=DEFAULT_LEDGER_MAX_RETRIES,
        ge=0,
        le=100,
        description="Retry per query ledger non disponibile"
    )

    ledger_retry_backoff_seconds: float = Field(
        default=DEFAULT_LEDGER_RETRY_BACKOFF_SECONDS,
        ge=0.0,
        le=60.0,
        description="Attesa tra retry (secondi)"
    )

    # ========================================================================
    # LOGGING
    # ========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )

    log_to_file: bool = Field(
        default=False,
        description="Salva log su file"
    )

    log_dir: Path = Field(
        default=Path("./logs"),
        description="Directory log files"
    )

    log_format: str = Field(
        default="json",
        description="Formato log: json, text"
    )

    enable_console: bool = Field(
        default=True,
        description="Log su console"
    )

    # ========================================================================
    # VALIDATORS
    # ========================================================================

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Valida log level"""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return v_upper

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Valida formato log"""
        valid_formats = ['json', 'text']
        v_lower = v.lower()
        if v_lower not in valid_formats:
            raise ValueError(f"Invalid log_format: {v}. Must be one of {valid_formats}")
        return v_lower

    # ========================================================================
    # HELPER METHODS
    # ========================================================================

    def uses_undo_log(self) -> bool:
        """Check se policy undo log"""
        return self.sync_policy == SyncPolicy.UNDO_LOG

    def configure_logging(self) -> BonecoinLogger:
        """
        Applica log_level, log_format, log_to_file, log_dir, enable_console
        al logger root "bonecoin".

        Returns:
            BonecoinLogger: Logger root configurato
        """
        return setup_logging_from_settings(self)

    def to_dict(self) -> dict:
        """Serializza config"""
        return self.model_dump()

    def to_json(self) -> str:
        """Serializza config in JSON"""
        return self.model_dump_json(indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "WalletSettings":
        """Carica config da JSON"""
        return cls.model_validate_json(json_str)

    def __repr__(self) -> str:
        return (
            f"WalletSettings("
            f"sync_policy={self.sync_policy.value}, "
            f"undo_log_depth={self.undo_log_depth}, "
            f"max_blocks_per_sync={self.max_blocks_per_sync})"
        )


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

@lru_cache(maxsize=1)
def get_settings() -> WalletSettings:
    """
    Ottieni singleton instance di WalletSettings.

    Returns:
        WalletSettings: Instance configurazione

    Example:
        >>> config = get_settings()
        >>> config.sync_policy
        <SyncPolicy.UNDO_LOG: 'undo_log'>
    """
    return WalletSettings()


def reload_settings() -> WalletSettings:
    """
    Ricarica settings (invalida cache).

    Usare quando si cambiano environment variables runtime.
    """
    get_settings.cache_clear()
    return get_settings()


def override_settings(**kwargs) -> WalletSettings:
    """
    Override settings con valori custom.

    Example:
        >>> config = override_settings(sync_policy="rescan")
    """
    return WalletSettings(**kwargs)


# ============================================================================
# PROFILE PRESETS
# ============================================================================

def get_test_config() -> WalletSettings:
    """
    Config preset per test.

    - Nessun file di log
    - Retry immediati
    - Log DEBUG
    """
    return WalletSettings(
        _env_file=None,
        log_level="DEBUG",
        log_to_file=False,
        enable_console=False,
        ledger_retry_backoff_seconds=0.0,
    )


# ============================================================================
# EXPORT
# ============================================================================

__all__ = [
    "WalletSettings",
    "get_settings",
    "reload_settings",
    "override_settings",
    "get_test_config",
]
