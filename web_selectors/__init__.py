"""
Selectors package for synthesizing, minimizing and outlining CSS selectors.

This package provides utilities for working with web element selectors:
building a selector path for an element, shortening a selector while keeping
its matches, and showing at most one selector outline at a time.
"""

from .errors import MalformedSelectorError, RendererResourceUnavailable, SelectorError
from .minimizer import SelectorMinimizer, minimize
from .outline_manager import OutlineManager
from .outliners import CombinedOutliner, CssRuleOutliner, Outliner
from .path_synthesizer import local_selector, sibling_ordinal, synthesize
from .query import resolve, same_match_set, try_resolve
from .selector import SCOPE_MARKER
from .stylesheets import PageStyleSheet, SoupStyleSheet, StyleRule, StyleSheetHandle

__version__ = "0.2.0"
__author__ = "Bhavana Kedari"

# Export main classes
__all__ = [
    "SCOPE_MARKER",
    "CombinedOutliner",
    "CssRuleOutliner",
    "MalformedSelectorError",
    "OutlineManager",
    "Outliner",
    "PageStyleSheet",
    "RendererResourceUnavailable",
    "SelectorError",
    "SelectorMinimizer",
    "SoupStyleSheet",
    "StyleRule",
    "StyleSheetHandle",
    "local_selector",
    "minimize",
    "resolve",
    "same_match_set",
    "sibling_ordinal",
    "synthesize",
    "try_resolve",
]
