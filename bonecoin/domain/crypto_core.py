"""
Bonecoin - Hashing Core
=========================
Hash deterministici per identificatori content-derived.

Last Updated: 2026-10-16
Version: 1.0.0

Tutti gli id (TransactionId, CoinId, BlockId) sono SHA-256 del JSON
canonico (chiavi ordinate, separatori compatti) della struttura.
Le firme sono mock e non richiedono primitive crittografiche.
"""

import hashlib
import json
from typing import Any

from bonecoin.errors import CryptoError


# ============================================================================
# HASH FUNCTIONS
# ============================================================================

def compute_sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.

    Args:
        data: Input data da hashare

    Returns:
        bytes: 32-byte hash digest

    Examples:
        >>> compute_sha256(b"").hex()
        'e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855'
    """
    if not isinstance(data, bytes):
        raise CryptoError(
            f"compute_sha256 requires bytes, got {type(data).__name__}",
            code="INVALID_INPUT_TYPE"
        )

    return hashlib.sha256(data).digest()


def canonical_json(payload: Any) -> bytes:
    """
    Serializza payload in JSON canonico.

    Args:
        payload: Struttura JSON-serializzabile (dict, list, str, int)

    Returns:
        bytes: JSON UTF-8 con chiavi ordinate e senza spazi

    Examples:
        >>> canonical_json({"b": 1, "a": [2]})
        b'{"a":[2],"b":1}'
    """
    try:
        return json.dumps(payload, sort_keys=True, separators=(',', ':')).encode('utf-8')
    except (TypeError, ValueError) as e:
        raise CryptoError(
            f"Payload not serializable: {e}",
            code="NON_CANONICAL_PAYLOAD"
        ) from e


def hash_canonical(payload: Any) -> str:
    """
    Hash SHA-256 (hex) del JSON canonico.

    Deterministico: stesso contenuto → stesso hash, indipendente
    dall'ordine di inserimento delle chiavi.

    Examples:
        >>> hash_canonical({"a": 1}) == hash_canonical({"a": 1})
        True
        >>> len(hash_canonical([]))
        64
    """
    return compute_sha256(canonical_json(payload)).hex()


__all__ = [
    "compute_sha256",
    "canonical_json",
    "hash_canonical",
]
