"""
Headless picker session: the state machine behind an interactive selector
picker, without any widget rendering.

DomSelector follows the hovered element and synthesizes its selector,
CssSelectorPicker holds the selector being edited (optionally minimized),
PathSelector exposes the breadcrumb of that selector. connect_picker() wires
the three together around one OutlineManager.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from bs4 import Tag

from utils.settings import OUTLINE_CURRENT_ELEMENT_CLASS, PickerSettings

from .errors import MalformedSelectorError, RendererResourceUnavailable
from .events import (
    ElementPicked,
    EventBus,
    OutlineEnabledChanged,
    PickingChanged,
    SelectorChanged,
    ShortestRuleChanged,
    UniqueChanged,
)
from .minimizer import minimize
from .outline_manager import OutlineManager
from .outliners import CombinedOutliner, CssRuleOutliner, Outliner
from .path_synthesizer import synthesize
from .query import contains, count_matches, resolve
from .selector import CHILD, split_child_steps
from .stylesheets import StyleSheetHandle

logger = logging.getLogger(__name__)


def paint_outline(outliner: Outliner, *args) -> bool:
    """
    Outline through the given outliner, or log and leave it cleared when no
    stylesheet is available. Returns whether the outline was painted.
    """
    try:
        outliner.outline(*args)
        return True
    except RendererResourceUnavailable as e:
        logger.warning("Outline not shown: %s", e)
    try:
        outliner.clear()
    except RendererResourceUnavailable as e:
        logger.warning("Previous outline not restored: %s", e)
    return False


class DomSelector:
    """
    Tracks the element under the pointer and the selector synthesized for it.

    While picking, hover() makes the hovered element current and click()
    picks it. The current element carries the hover marker class so the
    "over" outline only paints it.
    """

    def __init__(
        self,
        target_area: Tag,
        manager: OutlineManager,
        stylesheet: StyleSheetHandle,
        settings: Optional[PickerSettings] = None,
        scope_selector: Optional[str] = None,
    ):
        self.target_area = target_area
        self.settings = settings or PickerSettings()
        self.events = EventBus()
        self.picking = False
        self.unique = False
        self.outline_enabled = False
        self.selector = ""
        self.element: Optional[Tag] = None
        self.outliner = CombinedOutliner(
            manager,
            {
                "selected": CssRuleOutliner(None, stylesheet, self.settings.selected_css, scope_selector),
                "over": CssRuleOutliner(None, stylesheet, self.settings.over_css, scope_selector),
            },
        )

    @property
    def tooltip(self) -> str:
        """Last step of the current selector, shown next to the hovered element."""
        if not self.picking or not self.selector:
            return ""
        return split_child_steps(self.selector)[-1]

    def hover(self, element: Tag) -> None:
        # pointer events only come from inside the target area
        if self.picking and contains(self.target_area, element):
            self.set_current_element(element)

    def click(self) -> None:
        if self.picking:
            self.pick()

    def pick(self) -> None:
        element, selector = self.element, self.selector
        self.set_picking(False)
        self.events.emit(ElementPicked(element=element, selector=selector))

    def set_picking(self, value: bool) -> None:
        self.picking = value
        if self.picking:
            self.set_outline_enabled(True)
        self.events.emit(PickingChanged(picking=value))
        self.clear_current_element()

    def set_unique(self, value: bool) -> None:
        self.unique = value
        self.events.emit(UniqueChanged(unique=value))

    def set_outline_enabled(self, value: bool) -> None:
        self.clear_selector_outlines()
        self.outline_enabled = value
        self.update_selector_outlines()
        self.events.emit(OutlineEnabledChanged(enabled=value))

    def set_current_element(self, element: Tag) -> None:
        self.clear_current_element()
        classes = list(element.get("class") or [])
        if OUTLINE_CURRENT_ELEMENT_CLASS not in classes:
            element["class"] = classes + [OUTLINE_CURRENT_ELEMENT_CLASS]
        self.element = element
        self.update_current_selector_from_current_element()

    def clear_current_element(self) -> None:
        if self.element is not None:
            classes = [c for c in self.element.get("class") or [] if c != OUTLINE_CURRENT_ELEMENT_CLASS]
            if classes:
                self.element["class"] = classes
            elif self.element.has_attr("class"):
                del self.element["class"]
        self.element = None

    def update_current_selector_from_current_element(self) -> None:
        selector = ""
        if self.element is not None:
            selector = synthesize(
                self.target_area, self.element, self.unique, self.settings.ignored_classes
            )
        self.set_current_selector(selector)

    def set_current_selector(self, selector: str) -> None:
        self.clear_selector_outlines()
        self.selector = selector
        self.events.emit(SelectorChanged(selector=selector))
        self.update_selector_outlines()

    def update_selector_outlines(self) -> None:
        if self.outline_enabled and self.selector:
            # Raises MalformedSelectorError before anything is painted
            resolve(self.selector, self.target_area)
            paint_outline(self.outliner, {
                "selected": [self.selector],
                "over": [self.selector + "." + OUTLINE_CURRENT_ELEMENT_CLASS],
            })

    def clear_selector_outlines(self) -> None:
        self.outliner.clear()


class CssSelectorPicker:
    """
    The selector being edited, with optional minimization and outline.

    set_selector() always clears the current outline first, then minimizes
    (when the shortest-rule option is on), then validates and outlines again.
    """

    def __init__(
        self,
        target_area: Tag,
        manager: OutlineManager,
        stylesheet: StyleSheetHandle,
        settings: Optional[PickerSettings] = None,
        scope_selector: Optional[str] = None,
    ):
        self.target_area = target_area
        self.settings = settings or PickerSettings()
        self.events = EventBus()
        self.shortest_rule = False
        self.outline_enabled = False
        self.selector = ""
        self.outliner = CssRuleOutliner(manager, stylesheet, self.settings.picker_css, scope_selector)

    def set_selector(self, selector: str) -> None:
        old_selector = self.selector
        self.clear_selector_outlines()
        self.selector = selector

        if self.shortest_rule:
            self.apply_shortest_rule(False)

        self.update_selector_outlines()

        if old_selector != self.selector:
            self.handle_selector_change()

    def set_shortest_rule(self, value: bool) -> None:
        self.shortest_rule = value
        self.events.emit(ShortestRuleChanged(enabled=value))

    def set_outline_enabled(self, value: bool) -> None:
        self.clear_selector_outlines()
        self.outline_enabled = value
        self.update_selector_outlines()
        self.events.emit(OutlineEnabledChanged(enabled=value))

    def apply_shortest_rule(self, handle: bool = True) -> None:
        if not self.selector:
            return
        old_selector = self.selector
        self.selector = minimize(self.target_area, self.selector, self.settings.max_candidates)
        logger.debug("Shortened %r to %r", old_selector, self.selector)

        if old_selector != self.selector and handle:
            self.handle_selector_change()

    def handle_selector_change(self) -> None:
        self.events.emit(SelectorChanged(selector=self.selector))

    def update_selector_outlines(self) -> None:
        if self.outline_enabled and self.selector:
            resolve(self.selector, self.target_area)
            paint_outline(self.outliner, self.selector)

    def clear_selector_outlines(self) -> None:
        self.outliner.clear()

    def match_count(self) -> int:
        if not self.selector:
            return 0
        return count_matches(self.selector, self.target_area)

    def input_validity(self, value: str) -> str:
        """
        Apply a selector typed by the user and describe its validity: an empty
        string when it matches something, a message otherwise.
        """
        try:
            self.set_selector(value)
        except MalformedSelectorError as e:
            return "Invalid format: %s" % (e.reason or e.selector)
        if value and self.match_count() == 0:
            return "No element found with this selector"
        return ""


@dataclass(frozen=True)
class PathItem:
    label: str
    path: str


class PathSelector:
    """
    Breadcrumb over the child steps of a selector.

    Hovering an item outlines the selector prefix ending at that item;
    selecting it re-roots the selector to that prefix.
    """

    def __init__(
        self,
        manager: OutlineManager,
        stylesheet: StyleSheetHandle,
        settings: Optional[PickerSettings] = None,
        scope_selector: Optional[str] = None,
    ):
        self.settings = settings or PickerSettings()
        self.events = EventBus()
        self.selector = ""
        self.items: List[PathItem] = []
        self.outliner = CssRuleOutliner(manager, stylesheet, self.settings.path_css, scope_selector)

    def set_selector(self, selector: str, internal: bool = False) -> None:
        if selector == self.selector:
            return
        self.selector = selector
        steps = split_child_steps(selector)
        self.items = [
            PathItem(label=step, path=CHILD.join(steps[: i + 1])) for i, step in enumerate(steps)
        ]
        self.events.emit(SelectorChanged(selector=selector, internal=internal))

    def hover(self, index: int) -> None:
        paint_outline(self.outliner, self.items[index].path)

    def unhover(self) -> None:
        self.outliner.clear()

    def select(self, index: int) -> None:
        self.unhover()
        self.set_selector(self.items[index].path, internal=True)


@dataclass
class PickerEnvironment:
    outline_manager: OutlineManager
    dom_selector: DomSelector
    css_selector_picker: CssSelectorPicker
    path_selector: PathSelector


def connect_picker(
    target_area: Tag,
    stylesheet: StyleSheetHandle,
    settings: Optional[PickerSettings] = None,
    scope_selector: Optional[str] = None,
) -> PickerEnvironment:
    """
    Build the three picker components around one OutlineManager and wire them:
    a picked element sets the edited selector, an edited selector moves the
    current element to its first match, the synthesized selector feeds the
    breadcrumb and a breadcrumb selection feeds the edited selector.
    """
    settings = settings or PickerSettings()
    manager = OutlineManager()
    dom_selector = DomSelector(target_area, manager, stylesheet, settings, scope_selector)
    picker = CssSelectorPicker(target_area, manager, stylesheet, settings, scope_selector)
    path_selector = PathSelector(manager, stylesheet, settings, scope_selector)

    def on_pick(event: ElementPicked):
        picker.set_selector(event.selector)

    def on_picking(event: PickingChanged):
        if not event.picking:
            dom_selector.set_outline_enabled(False)

    def on_picker_selector(event: SelectorChanged):
        if not event.selector:
            return
        matches = resolve(event.selector, target_area)
        if matches:
            dom_selector.set_current_element(matches[0])

    def on_dom_selector(event: SelectorChanged):
        path_selector.set_selector(event.selector)

    def on_path_selector(event: SelectorChanged):
        if event.internal:
            picker.set_selector(event.selector)

    dom_selector.events.subscribe(ElementPicked, on_pick)
    dom_selector.events.subscribe(PickingChanged, on_picking)
    dom_selector.events.subscribe(SelectorChanged, on_dom_selector)
    picker.events.subscribe(SelectorChanged, on_picker_selector)
    path_selector.events.subscribe(SelectorChanged, on_path_selector)

    return PickerEnvironment(
        outline_manager=manager,
        dom_selector=dom_selector,
        css_selector_picker=picker,
        path_selector=path_selector,
    )

