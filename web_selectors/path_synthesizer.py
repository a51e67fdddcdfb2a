"""
Build a selector path for a node relative to a container.

The path is made of one compound selector per ancestor (tag, id and classes)
joined with child combinators. In unique mode, ambiguous paths get an
``:nth-child()`` on the first ancestor where the candidate matches diverge.
"""

import logging
from typing import Iterable, List, Optional, Tuple

import soupsieve
from bs4 import Tag

from .query import element_parent, top_level_container, try_resolve
from .selector import CHILD, SCOPE_MARKER, replace_scope

logger = logging.getLogger(__name__)


def local_selector(node: Tag, ignored_classes: Iterable[str] = ()) -> str:
    """Tag name, then ``#id``, then every class token not ignored, in document order."""
    ignored = set(ignored_classes)
    selector = node.name.lower()

    node_id = node.get("id")
    if node_id:
        selector += "#" + soupsieve.escape(node_id)

    tokens = node.get("class") or []
    if isinstance(tokens, str):
        tokens = tokens.split()
    classes = [c for c in tokens if c and c not in ignored]
    if classes:
        selector += "." + ".".join(soupsieve.escape(c) for c in classes)
    return selector


def sibling_ordinal(node: Tag) -> int:
    """1-based position of a node among its element siblings, whatever their tag."""
    position = 1
    for _ in node.find_previous_siblings(True):
        position += 1
    return position


def _structural_path(container: Tag, target: Tag, ignored: frozenset) -> str:
    """
    Non-unique path from container down to target.

    Walks up from the target until the parent is the container (the path is
    then anchored on the scope marker), the document's top-level container, or
    the top of the tree.
    """
    if target is container:
        return SCOPE_MARKER

    body = top_level_container(target)
    pieces = [local_selector(target, ignored)]
    node = target
    while True:
        parent = element_parent(node)
        if parent is container:
            pieces.append(SCOPE_MARKER)
            break
        if parent is None or parent is body:
            break
        pieces.append(local_selector(parent, ignored))
        node = parent
    return CHILD.join(reversed(pieces))


def _divergence_paths(container: Tag, matches: List[Tag]) -> Optional[List[List[Tag]]]:
    """
    Grow the ancestor chain of every match one level at a time, in lockstep,
    until all chains start with the same node.

    Returns the chains (common ancestor first, match last), or None when the
    walk reaches the container or the document's top-level container without
    converging. Matches at different depths usually end up here.
    """
    body = top_level_container(container)
    paths = [[m] for m in matches]
    while True:
        grown = False
        for path in paths:
            parent = element_parent(path[0])
            if parent is not None:
                path.insert(0, parent)
                grown = True

        head = paths[0][0]
        if all(path[0] is head for path in paths):
            return paths
        if not grown or head is body or head is container:
            return None


def _disambiguate(
    container: Tag, target: Tag, selector: str, ignored: frozenset
) -> Optional[Tuple[str, Tag]]:
    """
    Try to make an ambiguous selector unique.

    Returns the anchored selector of the first divergent ancestor (its path plus
    ``:nth-child()``) together with that ancestor, or None when the selector is
    already unique or cannot be disambiguated.
    """
    matches = try_resolve(selector, container)
    if matches is None:
        logger.debug("Keeping %r: intermediate selector is malformed", selector)
        return None
    if len(matches) <= 1:
        return None

    paths = _divergence_paths(container, matches)
    if paths is None:
        logger.debug("Keeping %r: %d matches never converge", selector, len(matches))
        return None

    own_path = next((p for p in paths if p[-1] is target), None)
    if own_path is None or len(own_path) < 2:
        logger.debug("Keeping %r: target is not among its matches", selector)
        return None

    divergent = own_path[1]
    anchored = "%s:nth-child(%d)" % (
        _structural_path(container, divergent, ignored),
        sibling_ordinal(divergent),
    )
    return anchored, divergent


def synthesize(
    container: Tag,
    target: Tag,
    unique: bool = False,
    ignored_classes: Iterable[str] = (),
) -> str:
    """
    Compute the selector path of ``target`` relative to ``container``.

    Args:
        container: Node the selector is relative to (``:scope``)
        target: Node to describe
        unique: Add ``:nth-child()`` steps until only the target matches,
            where the document structure allows it
        ignored_classes: Class tokens left out of the path

    Returns:
        ``:scope`` when target is container, the selector path otherwise. In
        unique mode the result is best-effort: when no disambiguation is
        possible the plain path is returned.
    """
    ignored = frozenset(ignored_classes)
    prefix = None
    scope = container

    # Each disambiguation step moves the scope down to the first divergent
    # ancestor and continues from there.
    while True:
        selector = _structural_path(scope, target, ignored)
        step = None
        if unique and selector != SCOPE_MARKER:
            step = _disambiguate(scope, target, selector, ignored)

        if step is None:
            return selector if prefix is None else replace_scope(selector, prefix)

        anchored, divergent = step
        prefix = anchored if prefix is None else replace_scope(anchored, prefix)
        scope = divergent
