"""Rich display of run results."""

from rich.table import Table

from imgst.core.controller import RunReport
from imgst.utils.formatting import console, print_success


def create_summary_table(report: RunReport) -> Table:
    """Create a Rich table with the final counters of a run.

    Args:
        report: Report of the completed run.

    Returns:
        Rich Table with one row per outcome.
    """
    title = "Summary (Dry Run)" if report.dry_run else "Summary"

    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Outcome", width=10)
    table.add_column("Files", justify="right")

    tally = report.tally
    table.add_row("[success]processed[/success]", str(tally.processed))
    table.add_row("[muted]skipped[/muted]", str(tally.skipped))
    failed_style = "error" if tally.has_failures else "muted"
    table.add_row(f"[{failed_style}]failed[/{failed_style}]", str(tally.failed))

    return table


def print_run_summary(report: RunReport) -> None:
    """Print the summary table and a closing line.

    Args:
        report: Report of the completed run.
    """
    console.print(create_summary_table(report))

    if report.success:
        verb = "would be cleaned" if report.dry_run else "cleaned"
        print_success(f"All {report.tally.processed} file(s) {verb}.")
    else:
        console.print(
            f"\n[success]{report.tally.processed} processed[/success], "
            f"[error]{report.tally.failed} failed[/error]"
        )
