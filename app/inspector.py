"""
SelectorInspector: load a page (file or URL) and compute the selector of an
element, optionally unique and minimized.

URLs are fetched with the Playwright async API; the selector work itself is
synchronous and runs on the parsed BeautifulSoup document.
"""

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from playwright.async_api import async_playwright

from utils.io import load_text, report_path, save_json_atomic
from utils.parser import find_first, load_document
from utils.settings import PickerSettings
from web_selectors.minimizer import minimize
from web_selectors.path_synthesizer import synthesize
from web_selectors.query import count_matches

logger = logging.getLogger(__name__)


@dataclass
class InspectionResult:
    source: str
    container: str
    target: str
    selector: str
    match_count: int
    shortest: Optional[str] = None
    saved_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SelectorInspector:
    def __init__(self, out_dir: Optional[Path] = None, settings: Optional[PickerSettings] = None):
        self.out_dir = out_dir
        self.settings = settings or PickerSettings()

    async def _open_page(self, url: str) -> Dict[str, Any]:
        """
        Open page with Playwright async API and return HTML & URL.
        """
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            context = await browser.new_context()
            page = await context.new_page()
            resp = await page.goto(url, wait_until="domcontentloaded", timeout=60000)
            status = resp.status if resp else None
            html = await page.content()
            current_url = page.url
            await browser.close()
            return {"html": html, "status": status, "url": current_url}

    def inspect(
        self,
        html: str,
        target: str,
        container: Optional[str] = None,
        unique: bool = False,
        shortest: bool = False,
        source: str = "<html>",
        ignored_classes=(),
    ) -> InspectionResult:
        """
        Compute the selector of the first element matching ``target``,
        relative to the first element matching ``container`` (the document
        body when omitted).

        Raises:
            MalformedSelectorError: If target or container is not a valid selector
            SelectorError: If target or container matches nothing
        """
        document = load_document(html, self.settings.parser)
        scope = find_first(document, container)
        element = find_first(document, target)
        ignored = tuple(self.settings.ignored_classes) + tuple(ignored_classes)

        selector = synthesize(scope, element, unique, ignored)
        logger.info("Synthesized %s for %s", selector, target)

        result = InspectionResult(
            source=source,
            container=container or "",
            target=target,
            selector=selector,
            match_count=count_matches(selector, scope),
        )
        if shortest:
            result.shortest = minimize(scope, selector, self.settings.max_candidates)
            logger.info("Shortest equivalent selector: %s", result.shortest)
        return result

    async def run(self, target: str, url: Optional[str] = None, html_path: Optional[Path] = None, **options) -> InspectionResult:
        if url:
            payload = await self._open_page(url)
            html, source = payload["html"], payload["url"]
        elif html_path:
            html, source = load_text(html_path), str(html_path)
        else:
            raise ValueError("Either url or html_path is required")

        result = self.inspect(html, target, source=source, **options)

        if self.out_dir is not None:
            dest = report_path(self.out_dir, source)
            result.saved_path = str(save_json_atomic(result.to_dict(), dest))
        return result
