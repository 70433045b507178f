"""
Command-line interface for churnscope.

Provides commands for ranking hotspots and summarizing code per language.
"""
import json
import sys
from pathlib import Path

import click
import pandas as pd

from churnscope.hotspots import hotspots_to_dataframe
from churnscope.logging_config import setup_logging
from churnscope.tools import ToolResult, handle_hotspot, handle_stats


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-q", "--quiet", is_flag=True, help="Only log errors")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also append logs to this file")
def main(verbose, quiet, log_file):
    """churnscope - find files that change often and are hard to change."""
    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)


def _fail_on_error(result: ToolResult) -> None:
    if result.is_error:
        click.echo(f"Error: {result.message}", err=True)
        sys.exit(1)


@main.command()
@click.argument("path", default=".", type=click.Path(path_type=Path))
@click.option("--since", default="", help="git log --since value, e.g. '6 months ago' (default: 1 year ago)")
@click.option("--limit", default=0, type=int, help="Max files to return (default: 20)")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.option("--export-csv", type=click.Path(path_type=Path), help="Export to CSV file")
@click.option("--export-json", type=click.Path(path_type=Path), help="Export to JSON file")
def hotspots(path, since, limit, as_json, export_csv, export_json):
    """
    Rank the files of a Git repository by churn and complexity.

    Files that changed often within the lookback window and carry high
    complexity rank first.
    """
    result = handle_hotspot(str(path), since=since, limit=limit)
    _fail_on_error(result)

    if as_json:
        click.echo(json.dumps(result.data, indent=2))
        return

    df = hotspots_to_dataframe(result.data["hotspots"])
    if export_csv:
        df.to_csv(export_csv, index=False)
        click.echo(f"Exported to {export_csv}")
    elif export_json:
        df.to_json(export_json, orient="records", indent=2)
        click.echo(f"Exported to {export_json}")
    elif df.empty:
        click.echo("No hotspots found")
    else:
        click.echo(df.to_string(index=False))


@main.command()
@click.argument("path", default=".", type=click.Path(path_type=Path))
@click.option("--exclude-dir", multiple=True, help="Directory to exclude (repeatable)")
@click.option("--exclude-ext", multiple=True, help="File extension to exclude, e.g. min.js (repeatable)")
@click.option("--include-ext", multiple=True, help="Only include this file extension (repeatable)")
@click.option("--cocomo/--no-cocomo", default=True, help="Include COCOMO cost estimates")
@click.option("--complexity/--no-complexity", default=True, help="Include complexity counts")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
def stats(path, exclude_dir, exclude_ext, include_ext, cocomo, complexity, as_json):
    """
    Summarize lines of code and complexity per language.
    """
    result = handle_stats(
        str(path),
        cocomo=cocomo,
        complexity=complexity,
        exclude_dir=list(exclude_dir),
        exclude_ext=list(exclude_ext),
        include_ext=list(include_ext),
    )
    _fail_on_error(result)

    if as_json:
        click.echo(json.dumps(result.data, indent=2))
        return

    df = pd.DataFrame(result.data["language_summary"])
    if df.empty:
        click.echo("No source files found")
        return

    click.echo(df.to_string(index=False))
    if cocomo:
        click.echo()
        click.echo(f"Estimated Cost: ${result.data['estimated_cost']:,.0f}")
        click.echo(f"Estimated Schedule: {result.data['estimated_schedule_months']:.2f} months")
        click.echo(f"Estimated People: {result.data['estimated_people']:.2f}")


if __name__ == "__main__":
    main()
