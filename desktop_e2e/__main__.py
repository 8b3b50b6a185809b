"""CLI entry point for the desktop e2e harness.

This module provides the command-line interface for listing and running
keyboard shortcut scenarios against the desktop application.
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import HarnessConfig
from .logging_config import setup_logging
from .reporters import CIReporter, JSONReporter, TerminalReporter
from .scenarios import ALL_SCENARIOS
from .test_runner import TestRunner


logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="desktop-e2e",
        description="Desktop E2E Runner - keyboard shortcut tests for the desktop chat client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List all available scenarios
  desktop-e2e list

  # Run all scenarios
  desktop-e2e run --all

  # Run specific scenarios
  desktop-e2e run view_menu_001 view_menu_004

  # Run with a harness config file
  desktop-e2e run --all --config e2e.json

  # Run with JSON output for CI/CD
  desktop-e2e run --all --no-ui --format=json --output=results.json
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List available scenarios")
    list_parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format",
    )

    run_parser = subparsers.add_parser("run", help="Run scenarios")
    run_parser.add_argument(
        "scenarios",
        nargs="*",
        help="Scenario IDs to run (if not using --all)",
    )
    run_parser.add_argument(
        "--all",
        action="store_true",
        help="Run all registered scenarios",
    )
    run_parser.add_argument(
        "--config",
        type=Path,
        help="Harness config file (JSON); E2E_* environment variables override it",
    )
    run_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Verbose output",
    )
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug logging",
    )
    run_parser.add_argument(
        "--show-logs",
        action="store_true",
        help="Show scenario execution logs",
    )
    run_parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Disable rich terminal UI (plain text)",
    )
    run_parser.add_argument(
        "--format",
        choices=["terminal", "json", "tap"],
        default="terminal",
        help="Output format",
    )
    run_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output file path (for json/tap formats)",
    )
    run_parser.add_argument(
        "--ci",
        action="store_true",
        help="CI mode: plain output, JSON report, exit code by outcome",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"desktop-e2e v{__version__}",
    )

    return parser.parse_args(argv)


def load_config(config_path: Optional[Path]) -> HarnessConfig:
    if config_path is not None:
        return HarnessConfig.from_file(config_path)
    return HarnessConfig.from_env()


def list_scenarios(args: argparse.Namespace) -> int:
    runner = TestRunner()
    runner.register_scenarios(ALL_SCENARIOS)

    scenarios = runner.list_scenarios()

    if args.format == "json":
        print(json.dumps(scenarios, indent=2))
        return 0

    print(f"\nAvailable Scenarios ({len(scenarios)} total):\n")
    print(f"{'ID':<20} {'Priority':<10} {'Timeout':<10} {'Name'}")
    print("-" * 80)
    for scenario in scenarios:
        print(
            f"{scenario['id']:<20} "
            f"{scenario['priority']:<10} "
            f"{scenario['timeout']:<10} "
            f"{scenario['name']}"
        )
    print("")

    return 0


async def run_scenarios(args: argparse.Namespace) -> int:
    """Run scenarios.

    Returns:
        Exit code (0 = success, 1 = failures, 2 = errors, 130 = interrupted)
    """
    if args.all:
        scenario_ids = None
    elif args.scenarios:
        scenario_ids = args.scenarios
    else:
        print("Error: Must specify scenario IDs or use --all")
        return 1

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 2

    setup_logging(verbose=args.verbose, debug=args.debug, level=config.log_level)

    runner = TestRunner(config)
    runner.register_scenarios(ALL_SCENARIOS)

    if args.ci:
        args.no_ui = True
        args.format = "json"
        if not args.output:
            args.output = Path("test-results.json")

    if args.format == "terminal":
        reporter = TerminalReporter(
            verbose=args.verbose,
            show_logs=args.show_logs,
            no_ui=args.no_ui,
        )
        reporter.print_header()
        total = len(scenario_ids) if scenario_ids else len(runner.scenarios)
        reporter.print_start(total)
    else:
        reporter = JSONReporter(output_file=args.output, format_type=args.format)

    try:
        suite_result = await runner.run_scenarios(scenario_ids=scenario_ids)
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Scenario execution failed: {e}", exc_info=True)
        print(f"\nError: {e}")
        return 2

    if isinstance(reporter, TerminalReporter):
        for result in suite_result.test_results:
            reporter.print_scenario_result(result)
        reporter.report_suite(suite_result)
    else:
        content = reporter.report_suite(suite_result)
        if not args.output:
            reporter.print_to_stdout(content)

    ci_reporter = CIReporter()
    if args.ci:
        ci_reporter.print_ci_summary(suite_result)
    return ci_reporter.get_exit_code(suite_result)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    if not args.command:
        print("Error: No command specified. Use -h for help.")
        return 1

    if args.command == "list":
        return list_scenarios(args)

    if args.command == "run":
        try:
            return asyncio.run(run_scenarios(args))
        except KeyboardInterrupt:
            print("\n\nScenario execution interrupted by user")
            return 130

    print(f"Error: Unknown command '{args.command}'")
    return 1


if __name__ == "__main__":
    sys.exit(main())
