"""
File helpers for inspection reports: read pages, write JSON reports atomically.
"""

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[/?&=:#\\]+")


def report_path(out_dir: Union[str, Path], source: str) -> Path:
    """
    Name of the JSON report for a page source (URL or file path).

    Example:
        >>> report_path("out", "https://a.org/x?y=1")
        PosixPath('out/https_a.org_x_y_1.json')
    """
    name = _UNSAFE_CHARS.sub("_", source).strip("_") or "report"
    return Path(out_dir) / f"{name}.json"


def save_json_atomic(obj: Any, dest: Union[str, Path]) -> Path:
    """
    Write an object as JSON next to its destination, then rename it in place,
    so readers never see a partial report.

    Raises:
        OSError: If the directory or file cannot be written
        TypeError: If the object is not JSON serializable
    """
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp = tempfile.mkstemp(dir=str(dest.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(obj, f, indent=2, ensure_ascii=False)
        os.replace(tmp, dest)
    except (OSError, TypeError) as e:
        logger.error("Failed to save report to %s: %s", dest, e)
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise
    logger.info("Saved report to %s", dest)
    return dest


def load_text(path: Union[str, Path]) -> str:
    return Path(path).read_text(encoding="utf-8")
