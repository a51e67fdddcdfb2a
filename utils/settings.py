"""
Settings read from the environment (and a .env file when present).
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

OUTLINE_CURRENT_ELEMENT_CLASS = "fw-dom-selector-over-outline"


def _int_or_none(value: Optional[str], default: Optional[int]) -> Optional[int]:
    if value is None or value.strip() == "":
        return default
    if value.strip().lower() in ("none", "unlimited"):
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring non-numeric value %r, using %s", value, default)
        return default


@dataclass(frozen=True)
class PickerSettings:
    parser: str = "html.parser"
    ignored_classes: Tuple[str, ...] = field(default_factory=lambda: (OUTLINE_CURRENT_ELEMENT_CLASS,))
    max_candidates: Optional[int] = 5000
    selected_css: str = "outline: 1px dashed green !important;"
    over_css: str = "outline: 1px dashed red !important;"
    picker_css: str = "outline: 1px dashed blue !important;"
    path_css: str = "outline: 1px dashed purple !important;"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "PickerSettings":
        load_dotenv(find_dotenv(usecwd=True))
        defaults = cls()
        extra = os.getenv("WEB_SELECTORS_IGNORED_CLASSES", "")
        ignored = tuple(c.strip() for c in extra.split(",") if c.strip())
        return cls(
            parser=os.getenv("WEB_SELECTORS_PARSER", defaults.parser),
            ignored_classes=defaults.ignored_classes + ignored,
            max_candidates=_int_or_none(os.getenv("WEB_SELECTORS_MAX_CANDIDATES"), defaults.max_candidates),
            selected_css=os.getenv("WEB_SELECTORS_SELECTED_CSS", defaults.selected_css),
            over_css=os.getenv("WEB_SELECTORS_OVER_CSS", defaults.over_css),
            picker_css=os.getenv("WEB_SELECTORS_PICKER_CSS", defaults.picker_css),
            path_css=os.getenv("WEB_SELECTORS_PATH_CSS", defaults.path_css),
            log_level=os.getenv("WEB_SELECTORS_LOG_LEVEL", defaults.log_level).upper(),
        )
