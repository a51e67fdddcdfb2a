import json
from pathlib import Path

import pytest

from utils.io import load_text, report_path, save_json_atomic


def test_report_path_flattens_source():
    assert report_path("out", "https://a.org/x?y=1&z=2") == Path("out/https_a.org_x_y_1_z_2.json")
    assert report_path("out", "/tmp/page.html") == Path("out/tmp_page.html.json")


def test_save_json_atomic_creates_directories(tmp_path):
    dest = tmp_path / "nested" / "report.json"
    assert save_json_atomic({"selector": "li"}, dest) == dest
    assert json.loads(load_text(dest)) == {"selector": "li"}
    assert [p.name for p in dest.parent.iterdir()] == ["report.json"]


def test_unserializable_report_leaves_nothing_behind(tmp_path):
    dest = tmp_path / "report.json"
    with pytest.raises(TypeError):
        save_json_atomic({"node": object()}, dest)
    assert list(tmp_path.iterdir()) == []
