"""
Stylesheet handles used by CssRuleOutliner to paint outlines.

A handle is created once and injected into the outliners; every create()
must be paired with a drop(). Handles are context managers so the style
element they own is removed on exit.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from .errors import RendererResourceUnavailable

logger = logging.getLogger(__name__)

STYLE_ELEMENT_ID = "web-selectors-outlines"


@dataclass(frozen=True, eq=False)
class StyleRule:
    """One materialized rule. Rules compare by identity."""

    selector: str
    css_text: str

    @property
    def text(self) -> str:
        return f"{self.selector}{{{self.css_text}}}"


class StyleSheetHandle:
    """Base class for the places outline rules can be written to."""

    def __init__(self):
        self._rules: List[StyleRule] = []

    @property
    def rules(self) -> List[StyleRule]:
        return list(self._rules)

    def create(self, selector: str, css_text: str) -> StyleRule:
        raise NotImplementedError

    def drop(self, rule: StyleRule) -> None:
        raise NotImplementedError

    def close(self) -> None:
        for rule in list(reversed(self._rules)):
            self.drop(rule)

    def _position(self, rule: StyleRule) -> Optional[int]:
        for i, item in enumerate(self._rules):
            if item is rule:
                return i
        return None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class SoupStyleSheet(StyleSheetHandle):
    """
    Rules written into a ``<style>`` element of a BeautifulSoup document.

    The element is appended to ``<head>`` on first use (``<head>`` is created
    under ``<html>`` when missing).

    Raises:
        RendererResourceUnavailable: If the document has neither head nor html
    """

    def __init__(self, document: BeautifulSoup):
        super().__init__()
        self.document = document
        self._element: Optional[Tag] = None

    def _style_element(self) -> Tag:
        if self._element is not None:
            return self._element

        head = self.document.head
        if head is None:
            html = self.document.html
            if html is None:
                raise RendererResourceUnavailable("Cannot retrieve a stylesheet to edit.")
            head = self.document.new_tag("head")
            html.insert(0, head)

        style = self.document.new_tag("style", attrs={"type": "text/css", "id": STYLE_ELEMENT_ID})
        head.append(style)
        self._element = style
        return style

    def _render(self) -> None:
        style = self._style_element()
        style.clear()
        if self._rules:
            style.append("\n".join(rule.text for rule in self._rules))

    def create(self, selector: str, css_text: str) -> StyleRule:
        self._style_element()
        rule = StyleRule(selector=selector, css_text=css_text)
        self._rules.append(rule)
        self._render()
        logger.debug("Created rule %s", rule.text)
        return rule

    def drop(self, rule: StyleRule) -> None:
        position = self._position(rule)
        if position is None:
            return
        del self._rules[position]
        self._render()
        logger.debug("Dropped rule %s", rule.text)

    def close(self) -> None:
        super().close()
        if self._element is not None:
            self._element.decompose()
            self._element = None

    def css(self) -> str:
        """Current text of the style element."""
        return "\n".join(rule.text for rule in self._rules)


_CREATE_RULE_JS = """([id, text]) => {
    let style = document.getElementById(id);
    if (!style) {
        style = document.createElement('style');
        style.id = id;
        style.type = 'text/css';
        (document.head || document.documentElement).appendChild(style);
    }
    const sheet = style.sheet;
    return sheet.insertRule(text, sheet.cssRules.length);
}"""

_DELETE_RULE_JS = """([id, index]) => {
    const style = document.getElementById(id);
    if (style && style.sheet && index < style.sheet.cssRules.length) {
        style.sheet.deleteRule(index);
    }
}"""

_REMOVE_STYLE_JS = """(id) => {
    const style = document.getElementById(id);
    if (style) {
        style.remove();
    }
}"""


class PageStyleSheet(StyleSheetHandle):
    """
    Rules inserted into a live Playwright page (sync API).

    The handle owns a dedicated ``<style>`` element in the page and keeps its
    own rules in the same order as the page's CSSOM, so a rule is deleted by
    its position.
    """

    def __init__(self, page: Page, element_id: str = STYLE_ELEMENT_ID):
        super().__init__()
        self.page = page
        self.element_id = element_id

    def create(self, selector: str, css_text: str) -> StyleRule:
        rule = StyleRule(selector=selector, css_text=css_text)
        try:
            self.page.evaluate(_CREATE_RULE_JS, [self.element_id, rule.text])
        except PlaywrightError as e:
            logger.warning("Could not insert rule %s: %s", rule.text, e)
            raise RendererResourceUnavailable(f"Cannot create rule {rule.text!r}: {e}") from e
        self._rules.append(rule)
        return rule

    def drop(self, rule: StyleRule) -> None:
        position = self._position(rule)
        if position is None:
            return
        try:
            self.page.evaluate(_DELETE_RULE_JS, [self.element_id, position])
        except PlaywrightError as e:
            raise RendererResourceUnavailable(f"Cannot drop rule {rule.text!r}: {e}") from e
        finally:
            del self._rules[position]

    def close(self) -> None:
        super().close()
        try:
            self.page.evaluate(_REMOVE_STYLE_JS, self.element_id)
        except PlaywrightError as e:
            logger.warning("Could not remove style element %s: %s", self.element_id, e)
