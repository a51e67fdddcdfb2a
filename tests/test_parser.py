import pytest

from utils.parser import find_first, load_document
from web_selectors.errors import MalformedSelectorError, SelectorError

PAGE = "<html><body><main><p class='a'>1</p><p class='a'>2</p></main></body></html>"


def test_empty_selector_is_body():
    doc = load_document(PAGE)
    assert find_first(doc, None) is doc.body
    assert find_first(doc, "") is doc.body


def test_fragment_without_body_is_document():
    doc = load_document("<p>x</p>")
    assert find_first(doc, None) is doc


def test_first_match_is_returned():
    doc = load_document(PAGE)
    assert find_first(doc, "p.a").get_text() == "1"


def test_no_match_raises():
    doc = load_document(PAGE)
    with pytest.raises(SelectorError):
        find_first(doc, "table")


def test_malformed_selector_raises():
    doc = load_document(PAGE)
    with pytest.raises(MalformedSelectorError):
        find_first(doc, "p[")
