"""
Schema bootstrap for local runs and tests.

Production tables are owned by the API's migrations; this only creates the
subset the VAT worker reads and writes, and never alters an existing table.
"""
from __future__ import annotations

from core.db.base import get_conn


def init_db(database_url: str | None = None) -> None:
    """Create the receipts table if it doesn't exist."""
    conn = get_conn(database_url)
    cur = conn.cursor()

    cur.execute(
        """
        CREATE TABLE IF NOT EXISTS receipts(
            id TEXT PRIMARY KEY,
            user_id TEXT NOT NULL,
            qr_data TEXT NOT NULL,
            amount REAL,
            merchant TEXT,
            vat TEXT,
            scanned_at TIMESTAMP NOT NULL DEFAULT NOW()
        )
        """
    )
    cur.execute(
        "CREATE INDEX IF NOT EXISTS receipts_vat_pending_idx ON receipts (scanned_at) WHERE vat IS NULL"
    )

    conn.commit()
    conn.close()


__all__ = ["init_db"]
