"""CLI entry point"""
import argparse
import asyncio
import sys
from typing import Optional

from .features.map.services.map_controller import MapController
from .features.notifications.domain.models import NotificationMessage
from .features.notifications.providers.toast_notifier import ToastNotifier
from .features.places.domain.models import AggregationResult
from .infrastructure.config.settings import Settings
from .shared.logging.config import get_logger, setup_logging
from .shared.utils.datetime_utils import format_duration
from .shared.utils.text import truncate_text

logger = get_logger(__name__)


def _print_toast(toast: NotificationMessage) -> None:
    print(toast.render(), file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find mosques from MasjidiAPI and OpenStreetMap"
    )

    parser.add_argument(
        "--env-file",
        type=str,
        default=".env",
        help="Environment file path (default: .env)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level",
    )
    parser.add_argument(
        "--details",
        action="store_true",
        help="Print the details panel of every mosque found",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    search_parser = subparsers.add_parser("search", help="Search around a place name or ZIP code")
    search_parser.add_argument("query", type=str, help="Place name, address or ZIP code")

    nearby_parser = subparsers.add_parser("nearby", help="Search around coordinates")
    nearby_parser.add_argument("--lat", type=float, required=True, help="Latitude")
    nearby_parser.add_argument("--lng", type=float, required=True, help="Longitude")
    nearby_parser.add_argument("--zoom", type=int, default=13, help="Map zoom level (default: 13)")

    return parser


def print_result(controller: MapController, result: AggregationResult, details: bool) -> None:
    counts = controller.state.counts
    print(
        f"Found {result.count} mosques "
        f"(all={counts.all}, mosque={counts.mosque}, center={counts.center}) "
        f"in {format_duration(result.duration_seconds)}"
    )
    for point in result.points:
        name = truncate_text(point.display_name or "Unknown Mosque")
        print(f"  {name:<60} {point.latitude:.5f},{point.longitude:.5f}  [{point.source}]")

    if details:
        for point in result.points:
            print()
            print(controller.select(point).render())
        controller.close_panel()


async def run(args: argparse.Namespace, settings: Settings) -> int:
    """
    Run one search

    Args:
        args: Parsed arguments
        settings: Application settings

    Returns:
        int: Exit code
    """
    controller = MapController.from_settings(settings, ToastNotifier(display=_print_toast))
    try:
        if args.command == "search":
            if await controller.search(args.query) is None:
                return 1
        else:
            if not controller.set_view(args.lat, args.lng, args.zoom):
                print(f"Zoom in to at least level {settings.min_zoom_for_search} to search")
                return 1

        await controller.wait_idle()

        result: Optional[AggregationResult] = controller.last_result
        if result is None:
            return 1

        print_result(controller, result, args.details)
        return 0
    finally:
        controller.close()


def main() -> int:
    """
    Main entry point

    Returns:
        int: Exit code (0: success, 1: failure)
    """
    args = build_parser().parse_args()

    try:
        settings = Settings(_env_file=args.env_file)

        if args.log_level:
            settings.log_level = args.log_level

        setup_logging(level=settings.log_level)

        logger.info(f"Environment: {settings.environment}")
        return asyncio.run(run(args, settings))

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        return 130  # SIGINT
    except Exception as e:
        logger.error(f"Application failed: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
