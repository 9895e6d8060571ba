"""Main CLI interface for crate-advisor."""

import asyncio
import time
from pathlib import Path
from typing import Any, List, NoReturn, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..core.constraints import ConstraintExpression
from ..core.evaluator import RangeEvaluator
from ..core.models import AdvisoryDetail, ResolutionTarget
from ..core.parsers import LockFileParser
from ..core.resolver import VulnerabilityResolver
from ..output.formatters import ConsoleFormatter, JSONFormatter
from ..store.base import AdvisoryStoreError
from ..store.offline import AdvisoryDatabaseConfig, OfflineAdvisoryStore
from ..utils.logging import get_logger, setup_logging
from ..utils.path_utils import find_lock_files

ADVISORIES_ENV_VAR = "CRATE_ADVISOR_DB"

app = typer.Typer(
    name="crate-advisor",
    help="Check crate versions against security advisories and their patched ranges",
    add_completion=False
)

console = Console()
logger = get_logger("CLI")

CLI_ERRORS = (AdvisoryStoreError, ValueError, OSError)


def _advisories_option() -> Any:
    return typer.Option(
        ...,
        "--advisories",
        "-a",
        envvar=ADVISORIES_ENV_VAR,
        help="Advisory snapshot: a JSON file or a directory of JSON files"
    )


def _fail(message: str) -> NoReturn:
    ConsoleFormatter(console).format_error(message)
    raise typer.Exit(1)


def _open_resolver(advisories: Path) -> VulnerabilityResolver:
    store = OfflineAdvisoryStore(AdvisoryDatabaseConfig(advisories))
    return VulnerabilityResolver(store)


def _report(
    details: List[AdvisoryDetail],
    targets: List[ResolutionTarget],
    scan_time: float,
    json_output: Optional[Path]
) -> None:
    ConsoleFormatter(console).format_results(details, targets, scan_time)

    if json_output:
        json_formatter = JSONFormatter(json_output)
        json_formatter.save_results(json_formatter.format_results(details, targets, scan_time))
        console.print(f"[green]Results saved to {escape(str(json_output))}[/green]")


def _collect_targets(path: Path, ignore_patterns: Optional[List[str]]) -> List[ResolutionTarget]:
    if path.is_file():
        files = [path]
    else:
        files = [lock_file.path for lock_file in find_lock_files(path, ignore_patterns)]

    targets = set()
    for parsed in LockFileParser.parse_files(files):
        console.print(f"  ✓ {escape(str(parsed.source_file))} ({len(parsed.crates)} crates)")
        targets.update(parsed.get_targets())
    return sorted(targets)


@app.command()
def check(
    crate: str = typer.Argument(..., help="Crate name"),
    version: str = typer.Argument(..., help="Crate version"),
    advisories: Path = _advisories_option(),
    json_output: Optional[Path] = typer.Option(
        None,
        "--json-output",
        "-o",
        help="Write results to this JSON file"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    performance: bool = typer.Option(False, "--performance", help="Show performance summary")
) -> None:
    """Check one crate version against the advisory snapshot."""
    setup_logging(verbose=verbose)

    try:
        resolver = _open_resolver(advisories)

        start_time = time.perf_counter()
        details = resolver.resolve(crate, version)
        scan_time = time.perf_counter() - start_time

        _report(details, [ResolutionTarget(crate, version)], scan_time, json_output)
    except CLI_ERRORS as e:
        logger.error(f"Check failed: {e}")
        _fail(str(e))

    if performance:
        resolver.print_performance_summary()


@app.command()
def scan(
    path: Path = typer.Argument(
        Path("."),
        help="Project directory, Cargo.lock, or name/version target list"
    ),
    advisories: Path = _advisories_option(),
    json_output: Optional[Path] = typer.Option(
        None,
        "--json-output",
        "-o",
        help="Write results to this JSON file"
    ),
    ignore_patterns: Optional[List[str]] = typer.Option(
        None,
        "--ignore",
        help="Additional ignore patterns"
    ),
    concurrent: bool = typer.Option(
        False,
        "--concurrent",
        help="Resolve targets concurrently"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    performance: bool = typer.Option(False, "--performance", help="Show performance summary")
) -> None:
    """Resolve every locked crate under PATH against the advisory snapshot."""
    setup_logging(verbose=verbose)

    if not path.exists():
        _fail(f"Path does not exist: {path}")

    try:
        console.print(f"Collecting crates from {path}...", markup=False)
        targets = _collect_targets(path, ignore_patterns)

        if not targets:
            console.print("[yellow]No locked crates found[/yellow]")
            return

        resolver = _open_resolver(advisories)

        start_time = time.perf_counter()
        if concurrent:
            details = asyncio.run(resolver.resolve_many_async(targets))
        else:
            details = resolver.resolve_many(targets)
        scan_time = time.perf_counter() - start_time

        _report(details, targets, scan_time, json_output)
    except CLI_ERRORS as e:
        logger.error(f"Scan failed: {e}")
        _fail(str(e))

    if performance:
        resolver.print_performance_summary()


@app.command("match")
def match_expression(
    expression: str = typer.Argument(..., help="Patched expression, e.g. '>=1.2.0, <2.0.0|^2.1.0'"),
    version: str = typer.Argument(..., help="Version to evaluate")
) -> None:
    """Show how a version evaluates against a patched expression."""
    evaluator = RangeEvaluator()
    parsed = ConstraintExpression.parse(expression)

    rows = [
        {
            "clause": clause.raw,
            "kind": type(clause).__name__.removesuffix("Clause").lower(),
            "satisfied": evaluator.satisfies(clause, version),
        }
        for clause in parsed.clauses
    ]
    ConsoleFormatter(console).format_clause_report(
        expression, version, rows, evaluator.is_vulnerable(parsed, version)
    )


@app.command()
def info(advisories: Path = _advisories_option()) -> None:
    """Show statistics about the advisory snapshot."""
    try:
        stats = OfflineAdvisoryStore(AdvisoryDatabaseConfig(advisories)).get_database_stats()
    except CLI_ERRORS as e:
        _fail(str(e))

    ConsoleFormatter(console).format_info(
        f"Advisories: {stats['unique_advisories']}\n"
        f"Crates: {stats['total_crates']}\n"
        f"Detail records: {stats['total_details']}\n"
        f"Supported lock files: {', '.join(LockFileParser.get_supported_parser_types())}",
        title="Advisory snapshot"
    )


def main() -> None:
    """Main entry point for the crate-advisor CLI."""
    app()


if __name__ == "__main__":
    main()
