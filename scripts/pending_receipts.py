"""
List receipts still waiting for a VAT number.

Usage:
  python scripts/pending_receipts.py          # first 20
  python scripts/pending_receipts.py 50       # first 50
"""
from __future__ import annotations

import sys

from dotenv import load_dotenv

from core.db import ReceiptStore
from worker.vat_engine import is_invoice_url


def main() -> None:
    load_dotenv(override=True)
    limit = int(sys.argv[1]) if len(sys.argv) > 1 else 20

    with ReceiptStore.connect() as store:
        print(f"Receipts awaiting VAT: {store.count_unprocessed()}")
        for row in store.fetch_unprocessed(limit=limit):
            flag = "" if is_invoice_url(row["qr_data"]) else "  (not a URL, will be skipped)"
            print(f" - {row['id']} scanned_at={row['scanned_at']} qr_data={row['qr_data'][:80]}{flag}")


if __name__ == "__main__":
    main()
