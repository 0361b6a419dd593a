"""
PDF Generator — print report HTML to PDF with headless Chromium (Playwright).

The page is rendered exactly as a browser would show it, so client-side
styles survive the export. Chromium must be installed once:
  playwright install chromium
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

PDF_FILENAME = "ai-impact-analysis.pdf"

_PDF_OPTIONS = {
    "format": "A4",
    "print_background": True,
    "margin": {"top": "20mm", "right": "20mm", "bottom": "20mm", "left": "20mm"},
}


async def html_to_pdf(html: str) -> bytes:
    """
    Render an HTML document to PDF bytes.

    Raises RuntimeError if the browser cannot be launched or printing fails.
    """
    from playwright.async_api import async_playwright

    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=True,
                args=["--no-sandbox", "--disable-setuid-sandbox"],
            )
            try:
                page = await browser.new_page()
                await page.set_content(html, wait_until="networkidle")
                pdf = await page.pdf(**_PDF_OPTIONS)
            finally:
                await browser.close()
    except Exception as e:
        logger.error(f"PDF generation failed: {e}")
        raise RuntimeError("PDF generation failed") from e

    logger.info(f"PDF generated via Chromium ({len(pdf)} bytes)")
    return pdf
