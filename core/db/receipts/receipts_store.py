"""
Receipt storage used by the VAT worker.

Only the `vat` column is ever written here, and only while it is still NULL.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from core.db.base import get_conn

log = logging.getLogger("db")


class ReceiptStore:
    """Explicit handle over one Postgres connection; close() when done."""

    def __init__(self, conn):
        self._conn = conn

    @classmethod
    def connect(cls, database_url: Optional[str] = None) -> "ReceiptStore":
        return cls(get_conn(database_url))

    def fetch_unprocessed(self, limit: int, offset: int = 0) -> List[Dict]:
        """Return up to `limit` receipts without a VAT, oldest scan first."""
        cur = self._conn.cursor()
        cur.execute(
            """
            SELECT id, user_id, qr_data, vat, scanned_at
            FROM receipts
            WHERE vat IS NULL
            ORDER BY scanned_at ASC, id ASC
            LIMIT ? OFFSET ?
            """,
            (int(limit), int(offset)),
        )
        rows = cur.fetchall()
        # Keep the read from holding a transaction open across browser work.
        self._conn.commit()
        return [dict(r) for r in rows]

    def set_vat(self, receipt_id: str, vat: str) -> bool:
        """Store the VAT for one receipt. Returns False if it already had one."""
        cur = self._conn.cursor()
        try:
            cur.execute(
                "UPDATE receipts SET vat = ? WHERE id = ? AND vat IS NULL",
                (vat, receipt_id),
            )
        except Exception:
            self._conn.rollback()
            raise
        updated = cur.rowcount == 1
        self._conn.commit()
        return updated

    def count_unprocessed(self) -> int:
        cur = self._conn.cursor()
        cur.execute("SELECT COUNT(*) AS count FROM receipts WHERE vat IS NULL")
        row = cur.fetchone()
        self._conn.commit()
        return int(row["count"]) if row else 0

    def close(self) -> None:
        if self._conn is None:
            return
        try:
            self._conn.close()
        finally:
            self._conn = None

    def __enter__(self) -> "ReceiptStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["ReceiptStore"]
