"""
Command-line interface for datesort.
"""

import argparse
import logging
import sys
import zoneinfo
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .config import Config
from .constants import PROGRAM, get_console, get_logger
from .core import DateSorter, FileRecord
from .file_operations import FileOperations
from .metadata import MetadataProvider
from .report import (ReportSettings, ResultsReporter, print_move_failures, print_summary,
                     render_preview)
from .timestamps import DateParser
from .workflow import SortSession, Stage


def create_parser(config: Config) -> argparse.ArgumentParser:
    """Create argument parser with dynamic defaults from config."""
    last_target = config.get_last_target()
    target_help = "Directory whose files are sorted into year/month folders"
    if last_target:
        target_help += f" (prompted when omitted, last: {last_target})"
    else:
        target_help += " (prompted when omitted)"

    parser = argparse.ArgumentParser(
        description="Sort photos and videos into year/month folders by capture date",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} ~/Pictures/Unsorted
  {PROGRAM} --dry-run ~/Pictures/Unsorted
  {PROGRAM} --date-order MDY --yes ~/Pictures/Unsorted
        """
    )

    parser.add_argument(
        "target", nargs="?",
        help=target_help
    )
    parser.add_argument(
        "--yes", "-y", action="store_true",
        help="Confirm both move passes without prompting"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true",
        help="Preview and export results without moving files"
    )
    parser.add_argument(
        "--logs-dir", type=str, metavar="DIR",
        help=f"Directory for results CSV and run logs (default: {config.get_logs_dir()})"
    )
    parser.add_argument(
        "--no-log", action="store_true",
        help="Do not write a run log file"
    )
    parser.add_argument(
        "--date-order", type=str.upper, choices=["DMY", "MDY"],
        help=f"Preferred reading of numeric dates (default: {config.get_date_order()})"
    )
    parser.add_argument(
        "--timezone", "--tz", type=str, metavar="TIMEZONE",
        help=f"Timezone for metadata with UTC offsets (default: {config.get_timezone() or 'system local'})"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="store_true",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def setup_logging(console: Console, verbose: bool) -> logging.Logger:
    """Send warnings (or everything, when verbose) to the console."""
    logger = get_logger()
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    return logger


def prompt_target(config: Config, console: Console) -> Optional[str]:
    """Ask for the target directory, offering the last one as default."""
    last_target = config.get_last_target()
    prompt = "Target directory"
    if last_target:
        prompt += f" [{last_target}]"
    response = console.input(escape(f"{prompt}: ")).strip().strip('"')
    return response or last_target


def show_processing_plan(target: Path, dry_run: bool, parser: DateParser,
                         reporter: ResultsReporter, console: Console) -> None:
    """Display the processing plan before execution."""
    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Target:          [blue]{target}[/blue]")
    console.print(f"  Processing Mode: [cyan]{'DRY RUN' if dry_run else 'MOVE'}[/cyan]")
    console.print(f"  Date Order:      [cyan]{parser.date_order}[/cyan]")
    console.print(f"  Timezone:        [cyan]{parser.timezone_name or 'system local'}[/cyan]")
    console.print(f"  Logs:            [blue]{reporter.settings.logs_dir}[/blue]")
    console.print()


def make_confirm(console: Console, auto_yes: bool) -> Callable[[Stage, List[FileRecord]], bool]:
    """Build the confirmation callback for the two move passes."""
    questions = {
        Stage.CONFIRM_TRUSTED: "Move {count} files with trusted dates (Date taken / Media created)?",
        Stage.CONFIRM_FALLBACK: "Move {count} files dated by modification time only?",
    }

    def confirm(stage: Stage, records: List[FileRecord]) -> bool:
        question = questions[stage].format(count=len(records))
        if auto_yes:
            console.print(f"{question} [green]yes[/green]")
            return True
        response = console.input(escape(f"{question} [y/N]: ")).strip().lower()
        return response in ['y', 'yes']

    return confirm


def main(config_path: Optional[Path] = None, provider: Optional[MetadataProvider] = None,
         clock: Callable[[], datetime] = datetime.now) -> int:
    """Main entry point.

    Args:
        config_path: Optional path to config file (for testing)
        provider: Optional metadata provider (default: installed tools)
        clock: Clock used to name the results CSV and run log
    """
    config = Config(config_path=config_path)
    parser = create_parser(config)
    args = parser.parse_args()

    if args.version:
        from . import __version__, __copyright__
        if args.verbose:
            print(f"{PROGRAM} version {__version__} {__copyright__}")
            print(f"Config: {config.config_path}")
            print(f"Logs:   {config.get_logs_dir()}")
            return 0
        print(__version__)
        return 0

    console = get_console()
    logger = setup_logging(console, args.verbose)

    target_path = args.target
    if not target_path:
        try:
            target_path = prompt_target(config, console)
        except (EOFError, KeyboardInterrupt):
            console.print("\n[red]Operation cancelled[/red]")
            return 1
    if not target_path:
        print("Error: A target directory is required")
        return 1

    target = Path(target_path).expanduser().resolve()

    # Validate target
    if not target.exists():
        print(f"Error: Target directory does not exist: {target}")
        return 1

    if not target.is_dir():
        print(f"Error: Target is not a directory: {target}")
        return 1

    config.update_target(str(target))

    date_order = args.date_order or config.get_date_order()
    timezone = args.timezone or config.get_timezone()
    try:
        date_parser = DateParser(date_order=date_order, timezone_name=timezone)
    except (ValueError, zoneinfo.ZoneInfoNotFoundError) as e:
        print(f"Error: {e}")
        return 1
    if args.date_order:
        config.update_date_order(args.date_order)
    if args.timezone:
        config.update_timezone(args.timezone)

    if args.logs_dir:
        logs_dir = Path(args.logs_dir).expanduser().resolve()
        config.update_logs_dir(str(logs_dir))
    else:
        logs_dir = config.get_logs_dir()

    reporter = ResultsReporter(ReportSettings(
        logs_dir=logs_dir,
        clock=clock,
        write_log=config.get_write_log() and not args.no_log,
    ))

    show_processing_plan(target, args.dry_run, date_parser, reporter, console)

    try:
        reporter.setup_run_logger(logger)
        logger.info(f"Starting sort session: {target}")
        logger.info(f"Mode: {'DRY RUN' if args.dry_run else 'MOVE'}")

        sorter = DateSorter(target, provider=provider, parser=date_parser)
        files = sorter.find_target_files()
        if not files:
            console.print("[yellow]No files found in target directory[/yellow]")
            return 0

        console.print(f"Found {len(files)} files to classify")
        session = SortSession(sorter.build_plan(files), FileOperations(dry_run=args.dry_run))

        records = session.preview()
        render_preview(records, console)
        csv_path = reporter.export(records)
        console.print(f"Results written to [blue]{csv_path}[/blue]")

        results = session.run(make_confirm(console, args.yes))

        print_move_failures(results, console)
        print_summary(session.stats_manager, console)

        unsortable = session.stats_manager.get_unsortable()
        if unsortable:
            console.print(f"[yellow]{unsortable} files without a usable date were left in place[/yellow]")
        console.print("\n[green]✓ Sorting completed![/green]")
        return 0

    except (EOFError, KeyboardInterrupt):
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1
    except Exception as e:
        logger.debug("Fatal error", exc_info=True)
        console.print(f"\n[red]Fatal error: {e}[/red]")
        return 1
    finally:
        reporter.close_run_logger(logger)


if __name__ == "__main__":
    sys.exit(main())
