import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from core.db.receipts import ReceiptStore
from worker.vat_engine import fetch_vat_number, is_invoice_url

# Load `.env` for local/dev runs (override=True so updates take effect after restart).
load_dotenv(override=True)

# -------- CONFIG --------
BATCH_SIZE = 10  # receipts fetched per page
HEADLESS = os.getenv("PLAYWRIGHT_HEADLESS", "true").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
# ------------------------


def _log_level(name: str) -> int:
    """Map a level name to its number; unknown names fall back to INFO."""
    level = logging.getLevelName((name or "").strip().upper())
    return level if isinstance(level, int) else logging.INFO


logging.basicConfig(
    level=_log_level(LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
log = logging.getLogger("vat_job")


async def run_once(store: ReceiptStore, batch_size: int = BATCH_SIZE) -> int:
    """
    Walk every receipt without a VAT, page by page:
    - skip receipts whose qr_data is not an invoice URL
    - render the invoice and store the VAT when one is found
    - log and move on when a single receipt fails
    Returns number of receipts updated.

    Store errors while fetching a page are not caught here; they end the run.
    """
    offset = 0
    batch_number = 1
    updated = skipped = missed = failed = 0

    while True:
        receipts = store.fetch_unprocessed(limit=batch_size, offset=offset)
        if not receipts:
            log.info("No more receipts to process.")
            break

        log.info("Processing batch %d (%d receipts)", batch_number, len(receipts))

        for receipt in receipts:
            receipt_id = receipt.get("id")
            try:
                url = receipt.get("qr_data")
                if not is_invoice_url(url):
                    log.info("Skipping receipt %s: qr_data is not a valid URL", receipt_id)
                    skipped += 1
                    continue

                vat = await fetch_vat_number(url, headless=HEADLESS)
                if not vat:
                    log.info("Could not extract VAT for receipt %s", receipt_id)
                    missed += 1
                    continue

                if store.set_vat(receipt_id, vat):
                    log.info("Updated receipt %s with VAT %s", receipt_id, vat)
                    updated += 1
                else:
                    log.info("Receipt %s already had a VAT, left unchanged", receipt_id)
            except Exception as e:
                log.error(
                    "Error processing receipt %s: %s",
                    receipt_id,
                    e,
                    extra={"receipt_id": receipt_id, "error": str(e)},
                )
                failed += 1

        # Skipped and failed rows stay at vat IS NULL; they are retried on the next run.
        offset += batch_size
        batch_number += 1

        if len(receipts) < batch_size:
            break

    log.info(
        "Processing complete. Total receipts updated: %d (skipped=%d, missed=%d, failed=%d)",
        updated,
        skipped,
        missed,
        failed,
        extra={"updated": updated, "skipped": skipped, "missed": missed, "failed": failed},
    )
    return updated


async def main() -> int:
    """Run the VAT job once. Returns the process exit code."""
    try:
        store = ReceiptStore.connect()
    except Exception as e:
        log.exception("Could not open receipt store", extra={"error": str(e)})
        return 1

    try:
        log.info("Receipts awaiting VAT: %d", store.count_unprocessed())
        await run_once(store)
    except Exception as e:
        log.exception("VAT job aborted", extra={"error": str(e)})
        return 1
    finally:
        store.close()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
