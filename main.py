"""
Entry point to run the VAT extraction job once.
"""
import asyncio
import sys

from worker.vat_job import main as vat_job_main


if __name__ == "__main__":
    sys.exit(asyncio.run(vat_job_main()))
