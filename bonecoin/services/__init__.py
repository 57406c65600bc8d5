"""
Bonecoin - Services Package
=============================
High-level service layer.
"""

from bonecoin.services.transaction_service import TransactionBuilder

__all__ = [
    "TransactionBuilder",
]
