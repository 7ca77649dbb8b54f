"""
Render invoice pages with Playwright and read the VAT number from the viewer frame.
"""
import logging
import re
from typing import Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

log = logging.getLogger("vat_engine")

NAVIGATION_TIMEOUT_MS = 20_000
FRAME_TIMEOUT_MS = 10_000
RENDER_TIMEOUT_MS = 10_000
# Invoice viewers that never settle get this long before we read them anyway.
RENDER_FALLBACK_MS = 3_000
MIN_RENDERED_TEXT = 50
LOADING_PLACEHOLDER = "Loading..."

USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
# Drop these if the host's Chrome sandbox works.
CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]

# Label (Greek or Latin), optional ":"/whitespace, then exactly nine digits.
VAT_REGEX = re.compile(
    r"(ΑΦΜ|VAT|Afm|Α\.Φ\.Μ[.:])[:\s]*([0-9]{9})(?![0-9])",
    re.IGNORECASE,
)

_RENDERED_JS = """
([minLength, placeholder]) => {
    const text = document.body ? document.body.innerText : '';
    return text.length > minLength && !text.includes(placeholder);
}
"""


class InvoiceFrameNotFoundError(RuntimeError):
    """The invoice page never showed an embedded viewer frame."""


def is_invoice_url(url: Optional[str]) -> bool:
    return isinstance(url, str) and url.startswith("http")


def extract_vat_number(html: str) -> Optional[str]:
    """Return the first 9-digit VAT number labelled in `html`, or None."""
    if not html:
        return None
    match = VAT_REGEX.search(html)
    if match and match.group(2):
        return match.group(2)
    return None


async def _wait_for_render(frame, page) -> None:
    try:
        await frame.wait_for_function(
            _RENDERED_JS,
            arg=[MIN_RENDERED_TEXT, LOADING_PLACEHOLDER],
            timeout=RENDER_TIMEOUT_MS,
        )
    except PlaywrightTimeoutError:
        log.warning(
            "Invoice frame still rendering, falling back to fixed wait",
            extra={"wait_ms": RENDER_FALLBACK_MS},
        )
        await page.wait_for_timeout(RENDER_FALLBACK_MS)


async def fetch_vat_number(url: str, headless: bool = True) -> Optional[str]:
    """
    Render an invoice URL and read the VAT number from its viewer frame.

    - Launches a fresh Chromium for this URL only
    - Waits for the first <iframe> and for its text to finish loading
    - Returns the VAT, or None if the rendered frame has no VAT label

    Navigation/timeouts raise Playwright errors; a page without a frame raises
    InvoiceFrameNotFoundError. The browser is closed on every path.
    """
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless, args=CHROMIUM_ARGS)
        try:
            context = await browser.new_context(user_agent=USER_AGENT)
            page = await context.new_page()

            log.debug("Loading invoice page", extra={"url": url})
            await page.goto(url, wait_until="domcontentloaded", timeout=NAVIGATION_TIMEOUT_MS)

            try:
                iframe = await page.wait_for_selector(
                    "iframe", state="attached", timeout=FRAME_TIMEOUT_MS
                )
            except PlaywrightTimeoutError as exc:
                raise InvoiceFrameNotFoundError("no invoice frame found") from exc

            frame = await iframe.content_frame() if iframe else None
            if frame is None:
                raise InvoiceFrameNotFoundError("no invoice frame found")

            await _wait_for_render(frame, page)

            html = await frame.content()
            vat = extract_vat_number(html)
            log.debug(
                "Invoice frame read",
                extra={"url": url, "html_length": len(html), "found": bool(vat)},
            )
            return vat
        finally:
            await browser.close()
