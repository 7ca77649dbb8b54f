"""
Receipt storage re-exports.
"""
from core.db.receipts.receipts_store import ReceiptStore

__all__ = ["ReceiptStore"]
