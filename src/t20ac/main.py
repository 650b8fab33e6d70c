"""Command line entry point for the T20 attribute calculator."""

import argparse
import sys

import structlog

from t20ac.calculator import (
    ATTRIBUTE_NAMES,
    CalculatorError,
    RaceCatalogLoadError,
    RaceValidationError,
)
from t20ac.config import CalculatorConfig, get_settings
from t20ac.logging_config import configure_logging
from t20ac.session import CharacterSession, CharacterSummary

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    argparser = argparse.ArgumentParser(
        prog="t20ac", description="Attribute calculator for Tormenta20"
    )
    argparser.add_argument("--race", help="Race id (see --list-races)")
    argparser.add_argument("--points", type=int, help="Total point pool (enables editing)")
    argparser.add_argument(
        "--choose",
        action="append",
        default=[],
        metavar="ATTRIBUTE",
        help="Attribute receiving a racial bonus slot (repeatable)",
    )
    argparser.add_argument(
        "--other",
        action="append",
        default=[],
        metavar="ATTRIBUTE=VALUE",
        help="Manual adjustment for an attribute (repeatable)",
    )
    argparser.add_argument("--list-races", action="store_true", help="List races and exit")
    for name in ATTRIBUTE_NAMES:
        argparser.add_argument(f"--{name}", type=int, help=f"Base {name}")
    return argparser


def format_summary(summary: CharacterSummary) -> str:
    """Render a summary as a plain text table."""
    columns = ["Name", "Base", "Racial"]
    if summary.show_others:
        columns.append("Other")
    columns.append("Total")

    lines = [
        f"Race: {summary.race or 'Other'}",
        f"Base Points left: {summary.points_left} / {summary.points_total}",
    ]
    if summary.racial_choices_left:
        lines.append(f"Racial bonuses to assign: {summary.racial_choices_left}")
    lines.append("  ".join(f"{column:<12}" for column in columns).rstrip())

    for name in ATTRIBUTE_NAMES:
        row = [name, summary.bases[name], summary.race_bonuses[name]]
        if summary.show_others:
            row.append(summary.other_bonuses[name])
        row.append(summary.totals[name])
        lines.append("  ".join(f"{str(cell):<12}" for cell in row).rstrip())

    if summary.over_budget:
        lines.append("Over budget!")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    """
    Run the calculator once from command line arguments.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(settings)

    config = CalculatorConfig.from_settings(settings)
    if args.points is not None:
        config = config.model_copy(update={"editable_points": True})
    if args.other:
        config = config.model_copy(update={"others_points_section": True})

    try:
        session = CharacterSession(config=config)
    except (RaceCatalogLoadError, RaceValidationError) as e:
        logger.error("race_catalog_unavailable", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.list_races:
        for race_id in session.catalog.keys():
            print(race_id)
        return 0

    session.start()
    try:
        if args.points is not None:
            session.set_total_points(args.points)
        if args.race is not None:
            session.select_race(args.race)
        for attribute in args.choose:
            session.assign_choice(attribute)
        for name in ATTRIBUTE_NAMES:
            value = getattr(args, name)
            if value is not None:
                session.set_base(name, value)
        for item in args.other:
            attribute, _, value = item.partition("=")
            session.set_other(attribute, int(value))
    except (CalculatorError, ValueError) as e:
        logger.error("calculation_rejected", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_summary(session.summary()))
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
