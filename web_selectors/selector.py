"""
Helpers for taking selector strings apart and putting them back together.

This is not a CSS parser. It only knows enough syntax to find the top-level
combinators between compound selectors (segments) and the delimiters between
the simple selectors of a segment (parts). Brackets, parentheses, quoted
strings and backslash escapes are skipped so ``:not(.a > .b)`` or
``[title="a b"]`` are never cut in half.
"""

from typing import List, Tuple

SCOPE_MARKER = ":scope"

CHILD = ">"
DESCENDANT = " "
SIBLING_COMBINATORS = ("+", "~")

PART_DELIMITERS = "#.:["
HEX_DIGITS = "0123456789abcdefABCDEF"


def _escape_end(selector: str, start: int) -> int:
    """
    Index just past the escape sequence starting with the backslash at start:
    either one escaped character, or up to six hex digits plus one optional
    whitespace (``\\31 x``).
    """
    end = start + 1
    while end < len(selector) and end - start <= 6 and selector[end] in HEX_DIGITS:
        end += 1
    if end == start + 1:
        return min(end + 1, len(selector))
    if end < len(selector) and selector[end].isspace():
        end += 1
    return end


def _scan(selector: str):
    """
    Yield (index, char, depth) for every character outside quoted strings and
    escapes. Escaped and quoted characters are reported with depth -1 so
    callers never treat them as syntax.
    """
    depth = 0
    quote = None
    skip_until = 0
    for i, ch in enumerate(selector):
        if i < skip_until:
            yield i, ch, -1
            continue
        if ch == "\\":
            skip_until = _escape_end(selector, i)
            yield i, ch, -1
            continue
        if quote:
            if ch == quote:
                quote = None
            yield i, ch, -1
            continue
        if ch in "\"'":
            quote = ch
            yield i, ch, -1
            continue
        if ch in "([":
            depth += 1
            yield i, ch, depth - 1
            continue
        if ch in ")]":
            depth = max(depth - 1, 0)
        yield i, ch, depth


def split_segments(selector: str) -> Tuple[List[str], List[str]]:
    """
    Split a selector on its top-level combinators.

    Returns the segments and the combinators between them, so that
    ``len(combinators) == len(segments) - 1``. Whitespace around an explicit
    combinator is dropped; a run of plain whitespace is a descendant combinator.

    Example:
        >>> split_segments("div.a > ul li")
        (['div.a', 'ul', 'li'], ['>', ' '])
    """
    segments: List[str] = []
    combinators: List[str] = []
    current: List[str] = []
    pending = None

    def flush():
        nonlocal pending
        if current:
            if segments:
                combinators.append(pending or DESCENDANT)
            segments.append("".join(current))
            current.clear()
            pending = None

    for _, ch, depth in _scan(selector.strip()):
        if depth == 0 and (ch.isspace() or ch == CHILD or ch in SIBLING_COMBINATORS):
            if current:
                flush()
            if not ch.isspace():
                pending = ch
            continue
        current.append(ch)
    flush()
    return segments, combinators


def join_segments(segments: List[str], combinators: List[str]) -> str:
    """Inverse of split_segments(), producing the compact form (``a>b c``)."""
    if not segments:
        return ""
    out = [segments[0]]
    for combinator, segment in zip(combinators, segments[1:]):
        out.append(combinator)
        out.append(segment)
    return "".join(out)


def split_parts(segment: str) -> List[str]:
    """
    Decompose a compound selector into its ordered parts.

    The tag name (or ``*``) comes first when present; every other part starts
    with one of ``#``, ``.``, ``:`` or ``[``. A ``::`` pseudo-element is kept
    as a single part.

    Example:
        >>> split_parts("li#x.item:nth-child(2)")
        ['li', '#x', '.item', ':nth-child(2)']
    """
    parts: List[str] = []
    current: List[str] = []
    previous = ""
    for _, ch, depth in _scan(segment):
        starts_part = depth == 0 and ch in PART_DELIMITERS and not (ch == ":" and previous == ":")
        if starts_part and current:
            parts.append("".join(current))
            current = []
        current.append(ch)
        previous = ch if depth == 0 else ""
    if current:
        parts.append("".join(current))
    return parts


def has_selector_list(selector: str) -> bool:
    """True when the selector is a comma separated list of selectors."""
    return any(ch == "," and depth == 0 for _, ch, depth in _scan(selector))


def replace_scope(selector: str, prefix: str) -> str:
    """Substitute the first scope marker of a selector with a prefix."""
    return selector.replace(SCOPE_MARKER, prefix, 1)


def to_descendant_form(selector: str) -> str:
    """Replace every top-level child combinator with a descendant combinator."""
    segments, combinators = split_segments(selector)
    return join_segments(segments, [DESCENDANT if c == CHILD else c for c in combinators])


def last_segment(selector: str) -> Tuple[str, str, str]:
    """
    Split a selector into (parent selector, combinator, last segment).
    Parent and combinator are empty when the selector has a single segment.
    """
    segments, combinators = split_segments(selector)
    if not segments:
        return "", "", ""
    if len(segments) == 1:
        return "", "", segments[0]
    return join_segments(segments[:-1], combinators[:-1]), combinators[-1], segments[-1]


def split_child_steps(selector: str) -> List[str]:
    """
    Split a selector on its top-level child combinators only, keeping any
    descendant or sibling combinators inside the steps.

    Example:
        >>> split_child_steps(":scope>div#app section>p")
        [':scope', 'div#app section', 'p']
    """
    steps: List[str] = []
    start = 0
    for i, ch, depth in _scan(selector):
        if ch == CHILD and depth == 0:
            steps.append(selector[start:i].strip())
            start = i + 1
    steps.append(selector[start:].strip())
    return [s for s in steps if s]
