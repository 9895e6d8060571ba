"""Output formatters for crate-advisor results."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..core.models import AdvisoryDetail, ResolutionTarget
from ..utils.logging import get_logger


def _truncate(text: str, limit: int = 60) -> str:
    return text[:limit] + "..." if len(text) > limit else text


class ConsoleFormatter:
    """Rich console formatter for resolution results."""

    def __init__(self, console: Optional[Console] = None) -> None:
        """Initialize the console formatter.

        Args:
            console: Rich console instance
        """
        self.console = console or Console()
        self.logger = get_logger("ConsoleFormatter")

    def format_results(
        self,
        details: List[AdvisoryDetail],
        targets: Sequence[ResolutionTarget],
        scan_time: float
    ) -> None:
        """Display a summary panel and a table of exposed advisories.

        Args:
            details: Advisories the targets are exposed to
            targets: Targets that were resolved
            scan_time: Time taken for resolution in seconds
        """
        self.console.print(self._create_summary_panel(details, targets, scan_time))

        if not details:
            self.console.print(Panel("No unpatched advisories found!", style="green"))
            return

        self.console.print(self._create_advisories_table(details))

    def _create_summary_panel(
        self,
        details: List[AdvisoryDetail],
        targets: Sequence[ResolutionTarget],
        scan_time: float
    ) -> Panel:
        affected_crates = len({detail.affected_package for detail in details})

        if details:
            style = "red"
            title = f"Found {len(details)} advisories!"
        else:
            style = "green"
            title = "No advisories found"

        content = (
            f"Crates checked: {len(targets)}\n"
            f"Affected crates: {affected_crates}\n"
            f"Advisories: {len(details)}\n"
            f"Resolution time: {scan_time:.2f}s"
        )
        return Panel(content, title=title, style=style)

    def _create_advisories_table(self, details: List[AdvisoryDetail]) -> Table:
        table = Table(title="Unpatched Advisories")

        table.add_column("Advisory", style="red", no_wrap=True)
        table.add_column("Package", style="cyan", no_wrap=True)
        table.add_column("Patched", style="blue")
        table.add_column("Subtitle", style="white")
        table.add_column("URL", style="dim")

        for detail in details:
            table.add_row(
                escape(detail.id),
                escape(detail.affected_package),
                escape(detail.patched or "none"),
                escape(_truncate(detail.subtitle)),
                detail.url,
            )

        return table

    def format_clause_report(self, expression: str, version: str, rows: List[Dict[str, Any]], vulnerable: bool) -> None:
        """Display per-clause satisfaction of a patched expression.

        Args:
            expression: Raw patched expression
            version: Version that was evaluated
            rows: One ``{"clause", "kind", "satisfied"}`` row per clause
            vulnerable: Overall verdict
        """
        table = Table(title=escape(f"{version} against {expression!r}"))
        table.add_column("Clause", style="cyan")
        table.add_column("Kind", style="blue")
        table.add_column("Satisfied", style="white")

        for row in rows:
            table.add_row(
                escape(repr(row["clause"])),
                row["kind"],
                "[green]yes[/green]" if row["satisfied"] else "[red]no[/red]",
            )
        self.console.print(table)

        if vulnerable:
            self.console.print(Panel(f"{escape(version)} is VULNERABLE", style="red"))
        else:
            self.console.print(Panel(f"{escape(version)} is patched", style="green"))

    def format_error(self, error: str) -> None:
        """Display an error message in a red panel."""
        self.console.print(Panel(f"[bold red]Error:[/bold red] {escape(error)}", style="red"))

    def format_info(self, message: str, title: Optional[str] = None) -> None:
        """Format and display info message."""
        self.console.print(Panel(message, title=title, style="blue"))


class JSONFormatter:
    """JSON formatter for resolution results."""

    def __init__(self, output_file: Optional[Path] = None) -> None:
        """Initialize the JSON formatter.

        Args:
            output_file: Optional output file path
        """
        self.output_file = output_file
        self.logger = get_logger("JSONFormatter")

    def format_results(
        self,
        details: List[AdvisoryDetail],
        targets: Sequence[ResolutionTarget],
        scan_time: Optional[float] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Format resolution results as JSON-serializable data.

        Args:
            details: Advisories the targets are exposed to
            targets: Targets that were resolved
            scan_time: Optional resolution time in seconds
            metadata: Optional additional metadata

        Returns:
            Formatted JSON data
        """
        summary: Dict[str, Any] = {
            "total_targets": len(targets),
            "targets": [str(target) for target in targets],
            "affected_crates": len({detail.affected_package for detail in details}),
            "total_advisories": len(details),
            "timestamp": datetime.now().isoformat(),
        }
        if scan_time is not None:
            summary["scan_time_seconds"] = scan_time

        result: Dict[str, Any] = {
            "summary": summary,
            "advisories": [detail.to_dict() for detail in details],
        }
        if metadata:
            result["metadata"] = metadata

        return result

    def save_results(self, results: Dict[str, Any], output_file: Optional[Path] = None) -> None:
        """Save results to a JSON file.

        Args:
            results: Results dictionary
            output_file: Output file path (uses instance default if None)
        """
        file_path = output_file or self.output_file
        if not file_path:
            raise ValueError("No output file specified")

        try:
            with open(file_path, 'w', encoding='utf-8') as f:
                json.dump(results, f, indent=2, ensure_ascii=False)

            self.logger.info(f"Results saved to {file_path}")
        except IOError as e:
            self.logger.error(f"Failed to save results to {file_path}: {e}")
            raise
