"""
Command line entry point.
Usage:
    python -m app.main --html page.html --target "li.item" --unique --shortest
    python -m app.main --url "https://example.org" --container "#main" --target "a.more"
"""

import argparse
import asyncio
import logging
from pathlib import Path

from utils.logging_config import configure_logging
from utils.settings import PickerSettings
from app.inspector import SelectorInspector
from web_selectors.errors import SelectorError

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Build and shorten CSS selectors for an element")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--url", help="Page to load with a headless browser")
    source.add_argument("--html", type=Path, help="Local HTML file")
    parser.add_argument("--target", required=True, help="Selector of the element to describe (first match)")
    parser.add_argument("--container", default=None, help="Selector of the container (defaults to <body>)")
    parser.add_argument("--unique", action="store_true", help="Disambiguate with :nth-child() when needed")
    parser.add_argument("--shortest", action="store_true", help="Also compute the shortest equivalent selector")
    parser.add_argument("--ignore-class", action="append", default=[], help="Class token to leave out (repeatable)")
    parser.add_argument("--out", default=None, help="Output directory for the JSON report")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    settings = PickerSettings.from_env()
    configure_logging(settings.log_level)

    inspector = SelectorInspector(out_dir=Path(args.out) if args.out else None, settings=settings)
    try:
        result = await inspector.run(
            args.target,
            url=args.url,
            html_path=args.html,
            container=args.container,
            unique=args.unique,
            shortest=args.shortest,
            ignored_classes=args.ignore_class,
        )
    except SelectorError as e:
        logger.error("%s", e)
        return 1

    print(result.selector)
    if result.shortest is not None:
        print(result.shortest)
    if result.saved_path:
        logger.info("Report saved to %s", result.saved_path)
    return 0


def run():
    raise SystemExit(asyncio.run(main()))


if __name__ == "__main__":
    run()
