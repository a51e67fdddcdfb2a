"""
Exceptions raised by the selector helpers.
"""

from typing import Optional


class SelectorError(Exception):
    """Base class for every error raised by web_selectors."""


class MalformedSelectorError(SelectorError):
    """
    Raised when a selector cannot be parsed by the query engine.

    Attributes:
        selector: The offending selector string
        reason: Parser message, if any
    """

    def __init__(self, selector: str, reason: Optional[str] = None):
        self.selector = selector
        self.reason = reason
        message = f"Malformed selector {selector!r}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class RendererResourceUnavailable(SelectorError):
    """Raised when no stylesheet can be acquired to paint an outline."""
