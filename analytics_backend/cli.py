"""
Command line entry point - print the resolved period and comparison for a selection

Examples:
    analytics-periods last_7_days
    analytics-periods last_month --compare previous_year --now 2026-01-10T09:00:00
    analytics-periods --from 2026-03-01 --to 2026-03-07 --compare previous_period
"""

import argparse
import json
import sys
from datetime import date, datetime
from typing import List, Optional

import structlog

from analytics_backend.config.settings import get_settings
from analytics_backend.periods.comparison import ComparisonMode
from analytics_backend.periods.controller import SelectionController
from analytics_backend.periods.presets import preset_options
from analytics_backend.periods.query_params import (
    active_label,
    build_query_string,
    comparison_badge,
)
from analytics_backend.utils.logging import setup_logging

logger = structlog.get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        description="Resolve a dashboard period selection into concrete time ranges"
    )
    parser.add_argument(
        "period",
        nargs="?",
        default=settings.default_period,
        help=f"Preset id: {', '.join(preset_options())} (default: {settings.default_period})"
    )
    parser.add_argument("--from", dest="start", type=date.fromisoformat, help="Custom range start (YYYY-MM-DD)")
    parser.add_argument("--to", dest="end", type=date.fromisoformat, help="Custom range end (YYYY-MM-DD)")
    parser.add_argument(
        "--compare",
        choices=[mode.value for mode in ComparisonMode],
        help="Enable comparison with the given mode"
    )
    parser.add_argument("--compare-from", dest="compare_start", type=date.fromisoformat)
    parser.add_argument("--compare-to", dest="compare_end", type=date.fromisoformat)
    parser.add_argument(
        "--now",
        type=datetime.fromisoformat,
        help="Anchor instant (ISO-8601); defaults to the current time"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    for issue in settings.validate_configuration():
        logger.warning("Configuration issue", issue=issue)
    args = _build_parser().parse_args(argv)

    clock = (lambda: args.now) if args.now else None
    controller = SelectionController.from_settings(settings, clock=clock)

    if args.compare:
        controller.change_comparison_mode(args.compare)
        controller.toggle_comparison(True)

    custom = args.start is not None or args.end is not None
    if custom:
        controller.begin_edit()
        controller.set_edit_range(args.start, args.end)
        if args.compare == ComparisonMode.CUSTOM.value:
            controller.set_comparison_edit_range(args.compare_start, args.compare_end)
        if not controller.apply_custom_primary():
            print("Error: --from and --to are both required and must be in order", file=sys.stderr)
            return 2
    else:
        controller.select_preset(args.period)

    comparison = controller.comparison
    output = {
        "label": active_label(controller.period),
        "period": controller.period.to_dict(),
        "query": build_query_string(controller.query_params()),
        "comparison": comparison.to_dict(),
        "comparison_query": build_query_string(controller.comparison_query_params()),
        "comparison_badge": comparison_badge(comparison),
    }
    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
