"""
OutlineManager: keeps at most one outline visible at a time.

Outliners are stacked in registration order. Only the most recently added
outliner that has not been removed is shown; the others stay registered but
hidden until they come back on top.
"""

import logging
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .outliners import Outliner

logger = logging.getLogger(__name__)


class OutlineManager:
    def __init__(self):
        self._stack: List["Outliner"] = []

    @property
    def stack(self) -> List["Outliner"]:
        """Registered outliners, bottom first."""
        return list(self._stack)

    @property
    def current(self) -> Optional["Outliner"]:
        return self._stack[-1] if self._stack else None

    def __len__(self) -> int:
        return len(self._stack)

    def __contains__(self, outliner: "Outliner") -> bool:
        return self._index(outliner) is not None

    def _index(self, outliner: "Outliner") -> Optional[int]:
        for i, item in enumerate(self._stack):
            if item is outliner:
                return i
        return None

    def add(self, outliner: "Outliner") -> None:
        """Hide the current top, push the outliner and show it."""
        if self._stack:
            self._stack[-1].hide()
        self._stack.append(outliner)
        logger.debug("Outline stack size %d after add", len(self._stack))
        outliner.show()

    def remove(self, outliner: "Outliner") -> None:
        """Hide and unregister the outliner wherever it sits, then show the new top."""
        index = self._index(outliner)
        if index is not None:
            outliner.hide()
            del self._stack[index]
            logger.debug("Removed outliner at position %d", index)

        if self._stack:
            self._stack[-1].show()
