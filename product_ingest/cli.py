"""Command-line interface for submitting a product listing.

Usage:
    python -m product_ingest.cli --name "Linen shirt" --category Shirts \
        --price 19.99 --sizes "S, M, L" --color "#ff0000" --image shirt.jpg
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Optional, Sequence

from product_ingest.core.use_cases import SubmitProductUseCase
from product_ingest.domain.entities import (
    FileAsset,
    PipelineOutcome,
    PipelineState,
    ProductForm,
    SelectionState,
    parse_color,
)
from product_ingest.domain.interfaces import PipelineObserver
from product_ingest.utils import configure_logging, get_config, get_logger, log_failure
from product_ingest.utils.config import AppConfig
from product_ingest.utils.exceptions import (
    AppException,
    CommitError,
    ConfigFileNotFoundError,
    ValidationError,
)

logger = get_logger(__name__)

MSG_SAVED = "Product saved successfully"
MSG_CHECK_INPUTS = "Check your inputs"
MSG_SAVE_FAILED = "Failed to save product"
MSG_UNEXPECTED = "An unexpected error occurred"


def describe_outcome(outcome: PipelineOutcome) -> list[str]:
    """User-facing lines for a terminal outcome."""
    if outcome.succeeded:
        return [MSG_SAVED, f"id: {outcome.record.id}"]

    error = outcome.error
    if isinstance(error, ValidationError):
        return [MSG_CHECK_INPUTS] + [f"  - {field}: {message}" for field, message in error.reasons]
    if isinstance(error, CommitError):
        return [MSG_SAVE_FAILED]
    return [MSG_UNEXPECTED, f"  {error.message}"]


class ConsoleObserver(PipelineObserver):
    """Prints progress the way a loading indicator would show it."""

    def __init__(self, stream=None):
        self.stream = stream or sys.stdout

    def on_loading(self, active: bool) -> None:
        if active:
            print("Saving product...", file=self.stream)

    def on_state(self, state: PipelineState) -> None:
        if not state.is_terminal:
            print(f"  [{state.value}]", file=self.stream)

    def on_outcome(self, outcome: PipelineOutcome) -> None:
        for line in describe_outcome(outcome):
            print(line, file=self.stream)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Compose a product listing and save it to the catalog",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Save a product with two images and two colors
  product-ingest --name "Linen shirt" --category Shirts --price 19.99 \\
      --color "#ff0000" --color "#00ff00" --image front.jpg --image back.jpg

  # Use a custom config with debug logging
  product-ingest --config config/custom.yaml --log-level DEBUG ...
        """
    )

    parser.add_argument('--name', type=str, default="", help='Product name')
    parser.add_argument('--category', type=str, default="", help='Product category')
    parser.add_argument('--price', type=str, default="", help='Price, e.g. 19.99')
    parser.add_argument('--offer', type=str, default="", help='Optional discount percentage (0-100)')
    parser.add_argument('--description', type=str, default="", help='Optional description')
    parser.add_argument('--sizes', type=str, default="", help='Comma-separated sizes, e.g. "S, M, L"')
    parser.add_argument(
        '--color',
        dest='colors',
        action='append',
        default=[],
        help='Color as #RRGGBB or #AARRGGBB (repeatable, order is kept)'
    )
    parser.add_argument(
        '--image',
        dest='images',
        action='append',
        type=Path,
        default=[],
        help='Image file (repeatable, order is kept)'
    )
    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to configuration file (default: auto-detect)'
    )
    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Override log level'
    )

    return parser.parse_args(argv)


def load_cli_config(config_path: Optional[Path]) -> AppConfig:
    """Load config; fall back to defaults only when no path was given."""
    try:
        return get_config(config_path)
    except ConfigFileNotFoundError:
        if config_path is not None:
            raise
        logger.warning("No configuration file found, using defaults")
        return AppConfig()


def build_selection(colors: Sequence[str], images: Sequence[Path]) -> SelectionState:
    """Replay CLI picks into a SelectionState."""
    selection = SelectionState()
    for color in colors:
        selection.add_color(parse_color(color))
    selection.add_images(FileAsset(path) for path in images)
    return selection


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)

    try:
        config = load_cli_config(args.config)
        configure_logging(args.log_level or config.log_level)

        selection = build_selection(args.colors, args.images)
    except (AppException, ValueError) as e:
        log_failure(logger, "reading command-line input", e)
        return 1

    form = ProductForm(
        name=args.name,
        category=args.category,
        price=args.price,
        offer_percentage=args.offer,
        description=args.description,
        sizes=args.sizes,
    )

    if selection.colors:
        logger.info(f"Colors: {selection.describe_colors()}")

    async with SubmitProductUseCase(config) as use_case:
        outcome = await use_case.execute(form, selection, observer=ConsoleObserver())

    selection.clear()
    return 0 if outcome.succeeded else 1


def run() -> None:
    """Console-script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
