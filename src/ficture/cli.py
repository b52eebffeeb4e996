"""Command-line interface for map generation."""

import argparse
import logging
import sys
import time
from pathlib import Path

import structlog

from .config import load_config
from .exceptions import FictureError
from .grid import default_workers
from .image import pixels_to_image, save_image
from .pipeline import DEFAULT_SEA_LEVEL, generate_map, render_biome_chart


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ficture",
        description="Generate a procedural world map image from noise and biome gradients",
    )
    parser.add_argument(
        "--width", type=int, default=1920, help="Map width (default: 1920)"
    )
    parser.add_argument(
        "--height", type=int, default=1080, help="Map height (default: 1080)"
    )
    parser.add_argument(
        "--filepath",
        "-f",
        type=str,
        default="config/config.toml",
        help="Path to the config file (default: config/config.toml)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="image.png",
        help="Output image path (default: image.png)",
    )
    parser.add_argument(
        "--biome-map",
        type=str,
        default="default",
        help="Biome map used for coloring (default: default)",
    )
    parser.add_argument(
        "--sea-level",
        type=float,
        default=DEFAULT_SEA_LEVEL,
        help=f"Normalized elevation below which cells are ocean (default: {DEFAULT_SEA_LEVEL})",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help=f"Worker threads (default: CPU count, {default_workers()} here)",
    )
    parser.add_argument(
        "--chart",
        action="store_true",
        help="Render the biome map's colors (elevation on x, moisture on y) instead of a map",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def configure_logging(verbose: bool) -> None:
    """Configure structlog for console output."""
    level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for map generation.

    Returns:
        Process exit status.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    logger = structlog.get_logger()

    if args.width <= 0 or args.height <= 0:
        logger.error("invalid_dimensions", width=args.width, height=args.height)
        return 1

    output_path = Path(args.output)

    try:
        config = load_config(Path(args.filepath))

        start_time = time.perf_counter()
        if args.chart:
            evaluator = config.get_color_evaluator(args.biome_map)
            grid = render_biome_chart(
                evaluator, args.width, args.height, max_workers=args.workers
            )
        else:
            grid = generate_map(
                config,
                args.width,
                args.height,
                biome_map=args.biome_map,
                sea_level=args.sea_level,
                max_workers=args.workers,
            )
        image = grid.extract(pixels_to_image)
        logger.info(
            "render_complete",
            chart=args.chart,
            elapsed_s=round(time.perf_counter() - start_time, 2),
        )

        save_image(image, output_path)
    except FictureError as e:
        logger.error("generation_failed", error=str(e), error_type=type(e).__name__)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
