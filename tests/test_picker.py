import logging

import pytest
from bs4 import BeautifulSoup

from utils.settings import OUTLINE_CURRENT_ELEMENT_CLASS, PickerSettings
from web_selectors.errors import MalformedSelectorError
from web_selectors.events import ElementPicked, PickingChanged, SelectorChanged
from web_selectors.outline_manager import OutlineManager
from web_selectors.picker import CssSelectorPicker, DomSelector, PathSelector, connect_picker
from web_selectors.stylesheets import SoupStyleSheet

PAGE = """
<html><head></head><body>
<div id="app">
  <ul class="offers">
    <li class="item">A</li>
    <li class="item">B</li>
    <li class="item">C</li>
  </ul>
  <p class="note">n</p>
</div>
</body></html>
"""

SETTINGS = PickerSettings(
    selected_css="green",
    over_css="red",
    picker_css="blue",
    path_css="purple",
)


def make_page():
    doc = BeautifulSoup(PAGE, "html.parser")
    area = doc.find(id="app")
    return doc, area, OutlineManager(), SoupStyleSheet(doc)


def rule_texts(sheet):
    return [rule.text for rule in sheet.rules]


def test_shortest_rule_minimizes_on_set():
    _, area, manager, sheet = make_page()
    picker = CssSelectorPicker(area, manager, sheet, SETTINGS)
    seen = []
    picker.events.subscribe(SelectorChanged, lambda e: seen.append(e.selector))
    picker.set_shortest_rule(True)

    picker.set_selector(":scope>ul.offers>li.item:nth-child(2)")

    assert picker.selector == "li:nth-child(2)"
    assert seen == ["li:nth-child(2)"]
    assert picker.match_count() == 1


def test_unchanged_selector_is_not_reannounced():
    _, area, manager, sheet = make_page()
    picker = CssSelectorPicker(area, manager, sheet, SETTINGS)
    seen = []
    picker.events.subscribe(SelectorChanged, seen.append)
    picker.set_selector("li")
    picker.set_selector("li")
    assert len(seen) == 1


def test_picker_outline_follows_selector():
    _, area, manager, sheet = make_page()
    picker = CssSelectorPicker(area, manager, sheet, SETTINGS)
    picker.set_outline_enabled(True)
    picker.set_selector("li")
    assert rule_texts(sheet) == ["li{blue}"]

    picker.set_selector("p")
    assert rule_texts(sheet) == ["p{blue}"]
    assert manager.stack == [picker.outliner]

    picker.set_outline_enabled(False)
    assert sheet.rules == []
    assert len(manager) == 0


def test_malformed_selector_leaves_stack_as_before_resolution():
    _, area, manager, sheet = make_page()
    path = PathSelector(manager, sheet, SETTINGS)
    path.set_selector(":scope>ul.offers")
    path.hover(1)

    picker = CssSelectorPicker(area, manager, sheet, SETTINGS)
    picker.set_outline_enabled(True)
    picker.set_selector("li")
    assert manager.stack == [path.outliner, picker.outliner]

    with pytest.raises(MalformedSelectorError):
        picker.set_selector("li[")

    assert manager.stack == [path.outliner]
    assert rule_texts(sheet) == [":scope>ul.offers{purple}"]
    assert picker.selector == "li["


def test_input_validity_messages():
    _, area, manager, sheet = make_page()
    picker = CssSelectorPicker(area, manager, sheet, SETTINGS)
    assert picker.input_validity("li") == ""
    assert picker.input_validity("span") == "No element found with this selector"
    assert picker.input_validity("li[").startswith("Invalid format:")
    assert picker.input_validity("") == ""


def test_hover_while_picking_tracks_element():
    _, area, manager, sheet = make_page()
    dom = DomSelector(area, manager, sheet, SETTINGS, scope_selector="#app")
    second = area.find_all("li")[1]

    dom.hover(second)
    assert dom.element is None

    dom.set_picking(True)
    dom.hover(second)

    assert dom.element is second
    assert OUTLINE_CURRENT_ELEMENT_CLASS in second["class"]
    assert dom.selector == ":scope>ul.offers>li.item"
    assert dom.tooltip == "li.item"
    assert rule_texts(sheet) == [
        "#app>ul.offers>li.item{green}",
        "#app>ul.offers>li.item.%s{red}" % OUTLINE_CURRENT_ELEMENT_CLASS,
    ]
    assert manager.stack == [dom.outliner]


def test_unique_mode_disambiguates_hovered_element():
    _, area, manager, sheet = make_page()
    dom = DomSelector(area, manager, sheet, SETTINGS)
    dom.set_unique(True)
    dom.set_picking(True)
    dom.hover(area.find_all("li")[1])
    assert dom.selector == ":scope>ul.offers>li.item:nth-child(2)"


def test_click_picks_and_restores_classes():
    _, area, manager, sheet = make_page()
    dom = DomSelector(area, manager, sheet, SETTINGS)
    events = []
    dom.events.subscribe(PickingChanged, events.append)
    dom.events.subscribe(ElementPicked, events.append)
    paragraph = area.find("p")

    dom.set_picking(True)
    dom.hover(paragraph)
    dom.click()

    assert not dom.picking
    assert dom.element is None
    assert paragraph["class"] == ["note"]
    assert events[-1] == ElementPicked(element=paragraph, selector=":scope>p.note")
    assert events[-2] == PickingChanged(picking=False)
    assert dom.tooltip == ""


def test_marker_class_is_removed_entirely_when_alone():
    _, area, manager, sheet = make_page()
    dom = DomSelector(area, manager, sheet, SETTINGS)
    ul = area.find("ul")
    del ul["class"]
    dom.set_current_element(ul)
    assert ul["class"] == [OUTLINE_CURRENT_ELEMENT_CLASS]
    dom.clear_current_element()
    assert not ul.has_attr("class")


def test_path_selector_items_and_hover():
    _, _, manager, sheet = make_page()
    path = PathSelector(manager, sheet, SETTINGS, scope_selector="#app")
    path.set_selector(":scope>ul.offers>li.item")

    assert [item.label for item in path.items] == [":scope", "ul.offers", "li.item"]
    assert [item.path for item in path.items] == [
        ":scope",
        ":scope>ul.offers",
        ":scope>ul.offers>li.item",
    ]

    path.hover(1)
    assert rule_texts(sheet) == ["#app>ul.offers{purple}"]
    path.unhover()
    assert sheet.rules == []
    assert len(manager) == 0


def test_path_selector_select_is_internal():
    _, _, manager, sheet = make_page()
    path = PathSelector(manager, sheet, SETTINGS)
    seen = []
    path.events.subscribe(SelectorChanged, seen.append)
    path.set_selector(":scope>ul.offers>li.item")
    path.select(1)

    assert path.selector == ":scope>ul.offers"
    assert seen == [
        SelectorChanged(selector=":scope>ul.offers>li.item"),
        SelectorChanged(selector=":scope>ul.offers", internal=True),
    ]


def test_connected_picker_round_trip():
    doc, area, _, sheet = make_page()
    env = connect_picker(area, sheet, SETTINGS, scope_selector="#app")
    dom, picker, path = env.dom_selector, env.css_selector_picker, env.path_selector
    second = area.find_all("li")[1]

    picker.set_shortest_rule(True)
    dom.set_unique(True)
    dom.set_picking(True)
    dom.hover(second)
    assert path.selector == ":scope>ul.offers>li.item:nth-child(2)"

    dom.click()

    assert picker.selector == "li:nth-child(2)"
    assert dom.element is second
    assert not dom.outline_enabled
    assert len(env.outline_manager) == 0
    assert sheet.rules == []

    path.select(1)

    assert picker.selector == "ul"
    assert dom.element is area.find("ul")
    assert second["class"] == ["item"]


def test_hover_outside_target_area_is_ignored():
    doc, area, manager, sheet = make_page()
    dom = DomSelector(area, manager, sheet, SETTINGS)
    dom.set_picking(True)
    dom.hover(doc.body)
    assert dom.element is None
    assert dom.selector == ""


def broken_stylesheet_page():
    # no <html> and no <head>: the stylesheet has nowhere to live
    doc = BeautifulSoup("<ul><li>a</li><li>b</li></ul>", "html.parser")
    return doc, OutlineManager(), SoupStyleSheet(doc)


def test_picker_keeps_working_without_stylesheet(caplog):
    doc, manager, sheet = broken_stylesheet_page()
    picker = CssSelectorPicker(doc.ul, manager, sheet, SETTINGS)
    seen = []
    picker.events.subscribe(SelectorChanged, lambda e: seen.append(e.selector))
    picker.set_outline_enabled(True)

    with caplog.at_level(logging.WARNING, logger="web_selectors.picker"):
        picker.set_selector("li")

    assert picker.selector == "li"
    assert seen == ["li"]
    assert len(manager) == 0
    assert not picker.outliner.shown
    assert "Outline not shown" in caplog.text


def test_dom_selector_and_breadcrumb_without_stylesheet():
    doc, manager, sheet = broken_stylesheet_page()
    dom = DomSelector(doc.ul, manager, sheet, SETTINGS)
    dom.set_picking(True)
    dom.hover(doc.find_all("li")[1])
    assert dom.selector == ":scope>li"
    assert len(manager) == 0

    path = PathSelector(manager, sheet, SETTINGS)
    path.set_selector(dom.selector)
    path.hover(1)
    assert len(manager) == 0
    assert path.outliner.selector == ""


def test_connected_picker_announces_changes_without_stylesheet():
    doc, _, sheet = broken_stylesheet_page()
    env = connect_picker(doc.ul, sheet, SETTINGS)
    env.css_selector_picker.set_outline_enabled(True)
    env.css_selector_picker.set_selector("li:nth-child(2)")

    assert env.dom_selector.element is doc.find_all("li")[1]
    assert env.path_selector.selector == ":scope>li"
    assert len(env.outline_manager) == 0
