# Quick reference commands (run from repo root). These are comments only; copy/paste as needed.

# Install dependencies and the Chromium build Playwright drives
# python -m pip install -e ".[test]"
# python -m playwright install chromium

# Run the full test suite (Postgres tests need DATABASE_URL, the rest run without a DB)
# python -m pytest

# Run focused test files
# python -m pytest tests/test_vat_engine.py
# python -m pytest tests/test_vat_job.py
# python -m pytest tests/test_database_url.py
# DATABASE_URL=postgresql://... python -m pytest tests/test_receipts_store.py

# Run the VAT job once (with env vars loaded); exits 0 on success, 1 on a fatal error
# python -m dotenv run -- python main.py
# python -m dotenv run -- python -m worker.vat_job

# Watch the browser while debugging a stubborn invoice page
# PLAYWRIGHT_HEADLESS=false LOG_LEVEL=DEBUG python main.py

# See what is still waiting for a VAT
# python scripts/pending_receipts.py 50
