"""
Query engine over BeautifulSoup documents.

Selectors are resolved with soupsieve, the CSS engine behind ``Tag.select``.
Results are ordered in document order and never contain the scope itself.
"""

import logging
from typing import List, Optional, Sequence

import soupsieve
from bs4 import BeautifulSoup, Tag

from .errors import MalformedSelectorError

logger = logging.getLogger(__name__)


def resolve(selector: str, scope: Tag) -> List[Tag]:
    """
    Resolve a selector relative to a scope node.

    Args:
        selector: CSS selector, may reference the scope with ``:scope``
        scope: Node the selector is evaluated against

    Returns:
        Matching nodes in document order (empty when nothing matches)

    Raises:
        MalformedSelectorError: If the selector is empty or invalid
    """
    if not selector or not selector.strip():
        raise MalformedSelectorError(selector or "", "empty selector")
    try:
        return soupsieve.select(selector, scope)
    except soupsieve.SelectorSyntaxError as e:
        raise MalformedSelectorError(selector, str(e).splitlines()[0]) from e


def try_resolve(selector: str, scope: Tag) -> Optional[List[Tag]]:
    """Like resolve() but returns None for a malformed selector."""
    try:
        return resolve(selector, scope)
    except MalformedSelectorError as e:
        logger.debug("Ignoring malformed selector: %s", e)
        return None


def count_matches(selector: str, scope: Tag) -> int:
    return len(resolve(selector, scope))


def same_match_set(first: Sequence[Tag], second: Sequence[Tag]) -> bool:
    """Two match sets are equivalent when they hold the same nodes in the same order."""
    if len(first) != len(second):
        return False
    return all(a is b for a, b in zip(first, second))


def is_element(node) -> bool:
    """True for element tags, false for the document object, strings and None."""
    return isinstance(node, Tag) and not isinstance(node, BeautifulSoup)


def element_parent(node: Tag) -> Optional[Tag]:
    parent = node.parent
    return parent if is_element(parent) else None


def top_level_container(node: Tag) -> Optional[Tag]:
    """
    Return the document's top-level container for a node: the <body> tag when
    the document has one, the document root otherwise.
    """
    root = node
    while root.parent is not None:
        root = root.parent
    body = root.find("body") if isinstance(root, Tag) else None
    return body if body is not None else root


def contains(ancestor: Tag, node: Tag) -> bool:
    """True when node is ancestor itself or one of its descendants."""
    current = node
    while current is not None:
        if current is ancestor:
            return True
        current = current.parent
    return False
