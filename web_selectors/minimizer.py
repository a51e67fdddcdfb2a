"""
Shorten a selector without changing what it matches.

A candidate is accepted only if it resolves to exactly the same nodes, in the
same order, as the selector it replaces. Candidates are tried in a fixed order
(fewest parts first, then lowest part indexes) so results are reproducible.
"""

import logging
from itertools import combinations
from typing import Dict, List, Optional

from bs4 import Tag

from .errors import MalformedSelectorError
from .query import resolve, same_match_set, try_resolve
from .selector import (
    DESCENDANT,
    has_selector_list,
    join_segments,
    last_segment,
    split_parts,
    split_segments,
    to_descendant_form,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_CANDIDATES = 5000


class CandidateBudgetExceeded(Exception):
    """Internal signal: stop trying candidates and keep what we have."""


class _Level:
    """Equivalence tests against the match set of one selector."""

    def __init__(self, minimizer: "SelectorMinimizer", selector: str):
        self.minimizer = minimizer
        self.selector = selector
        self.base = resolve(selector, minimizer.scope)
        self._cache: Dict[str, bool] = {}

    def is_equivalent(self, candidate: str) -> bool:
        if candidate in self._cache:
            return self._cache[candidate]
        self.minimizer.spend()
        matches = try_resolve(candidate, self.minimizer.scope)
        result = matches is not None and same_match_set(self.base, matches)
        self._cache[candidate] = result
        return result

    def shortest_part(self, prefix: str, segment: str) -> str:
        """
        Keep the smallest subset of the segment's parts that still matches the
        same nodes once appended to prefix. Falls back to the whole segment.
        """
        parts = split_parts(segment)
        try:
            for size in range(1, len(parts)):
                for indexes in combinations(range(len(parts)), size):
                    candidate = prefix + "".join(parts[i] for i in indexes)
                    if self.is_equivalent(candidate):
                        return candidate
        except CandidateBudgetExceeded:
            logger.warning("Candidate budget exhausted while shortening %r", segment)
        return prefix + segment


class SelectorMinimizer:
    """
    Selector minimizer bound to a scope node.

    Args:
        scope: Node selectors are resolved against
        max_candidates: Upper bound on equivalence tests for one minimize() call
    """

    def __init__(self, scope: Tag, max_candidates: Optional[int] = DEFAULT_MAX_CANDIDATES):
        self.scope = scope
        self.max_candidates = max_candidates
        self._spent = 0

    def spend(self):
        if self.max_candidates is not None and self._spent >= self.max_candidates:
            raise CandidateBudgetExceeded()
        self._spent += 1

    def minimize(self, selector: str) -> str:
        """
        Return the shortest selector found that resolves to the same nodes.

        Passes are repeated until one leaves the selector unchanged, so the
        result is a fixed point: minimizing it again gives it back. The
        candidate budget is shared by every pass.

        Raises:
            MalformedSelectorError: If the selector itself is malformed
        """
        self._spent = 0
        resolve(selector, self.scope)
        if has_selector_list(selector):
            return selector.strip()

        result = self._minimize_pass(selector)
        seen = {result}
        while True:
            shorter = self._minimize_pass(result)
            if shorter == result or shorter in seen:
                return result
            logger.debug("Another pass shortened %r to %r", result, shorter)
            seen.add(shorter)
            result = shorter

    def _minimize_pass(self, selector: str) -> str:
        segments, combinators = split_segments(selector)
        if not segments:
            raise MalformedSelectorError(selector, "no compound selector")

        # Walk the prefixes from the full selector down to the first one whose
        # last segment stands on its own; then rebuild upwards.
        prefixes = [
            join_segments(segments[: n + 1], combinators[:n]) for n in range(len(segments))
        ]
        levels: List[_Level] = []
        for prefix in reversed(prefixes):
            level = _Level(self, prefix)
            levels.append(level)
            _, _, last = last_segment(prefix)
            try:
                if level.is_equivalent(last):
                    break
            except CandidateBudgetExceeded:
                logger.warning("Candidate budget exhausted, keeping %r", selector)
                return join_segments(segments, combinators)

        bottom = levels.pop()
        _, _, last = last_segment(bottom.selector)
        result = bottom.shortest_part("", last)

        for level in reversed(levels):
            result = self._rejoin(level, result)
        return result

    def _rejoin(self, level: _Level, minimized_parent: str) -> str:
        _, combinator, last = last_segment(level.selector)
        selector = minimized_parent + combinator + last

        try:
            descendant = to_descendant_form(selector)
            if descendant != selector and level.is_equivalent(descendant):
                selector = descendant

            segments, combinators = split_segments(selector)
            if len(segments) > 2 and all(c == DESCENDANT for c in combinators):
                extremes = segments[0] + DESCENDANT + segments[-1]
                if level.is_equivalent(extremes):
                    selector = extremes
        except CandidateBudgetExceeded:
            logger.warning("Candidate budget exhausted while rejoining %r", selector)
            return selector

        prefix = selector[: len(selector) - len(last)]
        return level.shortest_part(prefix, last)


def minimize(scope: Tag, selector: str, max_candidates: Optional[int] = DEFAULT_MAX_CANDIDATES) -> str:
    """Shortest selector matching the same ordered nodes as ``selector`` under ``scope``."""
    return SelectorMinimizer(scope, max_candidates).minimize(selector)

