"""
Example: pick an element of a fake page, shorten its selector and outline it.
"""

import json

from utils.logging_config import configure_logging
from utils.parser import load_document
from utils.settings import PickerSettings
from web_selectors.picker import connect_picker
from web_selectors.stylesheets import SoupStyleSheet

SAMPLE_FAKE_HTML = """
<html>
<head><title>Fake Loan - Apply</title></head>
<body>
<div id="app">
  <ul class="offers">
    <li class="item">Personal</li>
    <li class="item">Business</li>
    <li class="item">Mortgage</li>
  </ul>
  <form action="/submit" method="post">
    <input name="first_name" />
    <input name="email" type="email" />
  </form>
</div>
</body>
</html>
"""


def run_fake():
    settings = PickerSettings.from_env()
    configure_logging(settings.log_level)

    document = load_document(SAMPLE_FAKE_HTML, settings.parser)
    app = document.select_one("#app")

    with SoupStyleSheet(document) as stylesheet:
        env = connect_picker(app, stylesheet, settings, scope_selector="#app")
        env.dom_selector.set_unique(True)
        env.css_selector_picker.set_shortest_rule(True)
        env.css_selector_picker.set_outline_enabled(True)

        env.dom_selector.set_picking(True)
        env.dom_selector.hover(app.select("li.item")[1])
        env.dom_selector.click()

        summary = {
            "picked": env.path_selector.selector,
            "breadcrumb": [item.label for item in env.path_selector.items],
            "shortest": env.css_selector_picker.selector,
            "matches": env.css_selector_picker.match_count(),
            "stylesheet": stylesheet.css(),
        }
    print(json.dumps(summary, indent=2))


if __name__ == "__main__":
    run_fake()
