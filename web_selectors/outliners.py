"""
Outliners: things that can visually mark the nodes matched by a selector.

CssRuleOutliner paints a single stylesheet rule. CombinedOutliner groups
several outliners so they share one slot in the OutlineManager and appear and
disappear together.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Sequence

from .outline_manager import OutlineManager
from .selector import SCOPE_MARKER, replace_scope
from .stylesheets import StyleRule, StyleSheetHandle

logger = logging.getLogger(__name__)


class Outliner(ABC):
    """Interface shared by every outliner."""

    @abstractmethod
    def outline(self, *args) -> None:
        """Record what to outline and register with the stack."""

    @abstractmethod
    def show(self) -> None:
        """Paint the recorded outline, if not painted yet."""

    @abstractmethod
    def hide(self) -> None:
        """Remove the paint but keep what was recorded."""

    @abstractmethod
    def clear(self) -> None:
        """Remove the paint, forget what was recorded and leave the stack."""


class CssRuleOutliner(Outliner):
    """
    Outline the nodes matched by a selector with one stylesheet rule.

    The selector is recorded by the first outline() call and kept until
    clear(). The rule only exists while the outliner is shown.

    Args:
        manager: Stack the outliner registers with. None when the outliner is
            driven by a CombinedOutliner that owns the stack slot.
        stylesheet: Where rules are created and dropped
        css_text: Declarations of the rule, e.g. ``outline: 1px dashed red``
        scope_selector: Replaces a leading ``:scope`` before painting, so
            container-relative selectors can live in a document-wide sheet
    """

    def __init__(
        self,
        manager: Optional[OutlineManager],
        stylesheet: StyleSheetHandle,
        css_text: str,
        scope_selector: Optional[str] = None,
    ):
        self.manager = manager
        self.stylesheet = stylesheet
        self.css_text = css_text
        self.scope_selector = scope_selector
        self.selector = ""
        self._rule: Optional[StyleRule] = None

    @property
    def shown(self) -> bool:
        return self._rule is not None

    def outline(self, selector: str) -> None:
        if not self.selector and selector:
            self.selector = selector
            if self.manager is not None:
                self.manager.add(self)

    def show(self) -> None:
        if self._rule is None and self.selector:
            self._rule = self.stylesheet.create(self.rule_selector(), self.css_text)

    def hide(self) -> None:
        if self._rule is not None:
            self.stylesheet.drop(self._rule)
            self._rule = None

    def clear(self) -> None:
        if self.selector:
            if self.manager is not None:
                self.manager.remove(self)
            else:
                self.hide()
            self.selector = ""

    def rule_selector(self) -> str:
        if self.scope_selector and self.selector.startswith(SCOPE_MARKER):
            return replace_scope(self.selector, self.scope_selector)
        return self.selector


class CombinedOutliner(Outliner):
    """
    Several named outliners behaving as one.

    outline() takes a mapping from outliner name to the arguments for that
    outliner; names without an outliner or without arguments are skipped.
    """

    def __init__(self, manager: OutlineManager, outliners: Dict[str, Outliner]):
        self.manager = manager
        self.outliners = dict(outliners)

    def outline(self, args_by_name: Dict[str, Sequence]) -> None:
        for name, outliner in self.outliners.items():
            args = args_by_name.get(name)
            if outliner and args:
                outliner.outline(*args)

        if self not in self.manager:
            self.manager.add(self)
        elif self.manager.current is self:
            self.show()

    def show(self) -> None:
        for outliner in self.outliners.values():
            outliner.show()

    def hide(self) -> None:
        for outliner in self.outliners.values():
            outliner.hide()

    def clear(self) -> None:
        self.manager.remove(self)
        for outliner in self.outliners.values():
            outliner.clear()
