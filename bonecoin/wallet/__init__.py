"""
Bonecoin - Wallet Package
===========================
Light wallet.
"""

from bonecoin.wallet.light_wallet import LightWallet

__all__ = [
    "LightWallet",
]
