"""
HTML parsing helpers using BeautifulSoup.
"""

from bs4 import BeautifulSoup, Tag
from typing import Optional
import logging

from web_selectors.errors import SelectorError
from web_selectors.query import resolve

logger = logging.getLogger(__name__)


def load_document(html: str, parser: str = "html.parser") -> BeautifulSoup:
    soup = BeautifulSoup(html, parser)
    logger.debug("Parsed document with %s (%d characters)", parser, len(html))
    return soup


def find_first(document: BeautifulSoup, selector: Optional[str]) -> Tag:
    """
    Return the first element matching selector in the document. An empty
    selector designates the document's <body> (or the document itself).

    Raises:
        MalformedSelectorError: If the selector is invalid
        SelectorError: If nothing matches
    """
    if not selector:
        return document.body or document
    matches = resolve(selector, document)
    if not matches:
        raise SelectorError(f"No element found with selector {selector!r}")
    if len(matches) > 1:
        logger.info("Selector %r matches %d elements, using the first", selector, len(matches))
    return matches[0]
