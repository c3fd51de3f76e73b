"""
mch-summary CLI

Command-line interface for publishing benchmark results to a step summary.
Options fall back to the environment (see config.py), so inside GitHub
Actions the commands usually run without arguments.

Usage:
    # Append the report to $GITHUB_STEP_SUMMARY
    python -m mch_summary append

    # Use explicit paths
    python -m mch_summary append --results mch-results.json --summary summary.md --sha abc123

    # Print the report without touching the step summary
    python -m mch_summary preview --sha abc123
"""

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

import config
from utils.exceptions import McSummaryError
from utils.logging_config import setup_logging

from .reporting import SummaryConfig, SummaryGenerator
from .results import load_results

console = Console()
logger = logging.getLogger(__name__)


def _build_generator(args: argparse.Namespace) -> SummaryGenerator:
    """Resolve renderer options: CLI flags > YAML config > environment."""
    summary_config = SummaryConfig(
        source_root=config.source_root(),
        repository_url=config.repository_url(),
    )
    if args.config:
        summary_config = SummaryConfig.from_yaml(Path(args.config), defaults=summary_config)

    if args.source_root:
        summary_config.source_root = Path(args.source_root)
    if args.repository_url:
        summary_config.repository_url = args.repository_url

    return SummaryGenerator(config=summary_config)


def cmd_append(args: argparse.Namespace) -> int:
    """Render the summary and append it to the step summary file."""
    results_path = Path(args.results) if args.results else config.results_path()
    summary_path = Path(args.summary) if args.summary else config.summary_path()
    run_id = args.sha or config.run_id()

    document = load_results(results_path)
    generator = _build_generator(args)
    generator.append(document, run_id, summary_path)

    console.print(
        f"[green]Appended {len(document.results)} benchmark(s) to {escape(str(summary_path))}[/green]"
    )
    return 0


def cmd_preview(args: argparse.Namespace) -> int:
    """Render the summary to stdout."""
    results_path = Path(args.results) if args.results else config.results_path()
    run_id = args.sha or config.run_id()

    document = load_results(results_path)
    report = _build_generator(args).render(document, run_id)

    console.print(report, markup=False, emoji=False, highlight=False, soft_wrap=True, end="")
    return 0


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--results", "-r", help="Path to results JSON (default: $MCH_RESULTS_PATH)")
    parser.add_argument("--sha", help="Commit SHA for source links (default: $GITHUB_SHA)")
    parser.add_argument("--config", "-c", help="Path to summary config YAML")
    parser.add_argument("--source-root", help="Directory containing worlds/ (default: $MCH_SOURCE_ROOT)")
    parser.add_argument("--repository-url", help="Repository URL used for source links")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="mch-summary",
        description="Publish mch benchmark results as a step summary",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    append_parser = subparsers.add_parser("append", help="Append the report to the step summary")
    _add_common_arguments(append_parser)
    append_parser.add_argument("--summary", "-s", help="Summary file (default: $GITHUB_STEP_SUMMARY)")

    preview_parser = subparsers.add_parser("preview", help="Print the report to stdout")
    _add_common_arguments(preview_parser)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    level = "DEBUG" if config.debug_enabled() else config.log_level()
    setup_logging(level=level, log_dir=config.state_dir() / "logs")

    commands = {
        "append": cmd_append,
        "preview": cmd_preview,
    }

    try:
        return commands[args.command](args)
    except McSummaryError as e:
        logger.error(f"{args.command} failed: {e}")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
