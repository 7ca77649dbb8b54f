"""
Database package: connection helpers, schema bootstrap and the receipt store.
"""
from core.db.base import get_conn, resolve_database_url
from core.db.receipts import ReceiptStore
from core.db.schema import init_db

__all__ = [
    "get_conn",
    "resolve_database_url",
    "ReceiptStore",
    "init_db",
]
