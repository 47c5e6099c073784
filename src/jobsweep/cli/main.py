"""Main CLI entry point for jobsweep."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.table import Table

from jobsweep import __version__
from jobsweep.core.config import DEFAULT_THRESHOLD_DAYS, CleanerSettings
from jobsweep.core.exceptions import JobsweepError
from jobsweep.utils.logging import get_logger, log_error, setup_logging

if TYPE_CHECKING:
    from jobsweep.core.models import RunSummary

console = Console(stderr=True)


def _load_settings(config_path: str | None, **values: object) -> CleanerSettings:
    if config_path:
        return CleanerSettings.from_file(config_path, **values)
    return CleanerSettings.build(**values)


def _print_summary(summary: RunSummary) -> None:
    if not summary.namespaces:
        console.print("[yellow]No matching namespaces found[/yellow]")
        return

    title = f"Cleanup summary for {summary.cluster}"
    if summary.dry_run:
        title += " (dry run)"

    table = Table(title=title)
    table.add_column("Namespace")
    table.add_column("Eligible", justify="right")
    table.add_column("Deleted", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Error")

    for result in summary.results:
        table.add_row(
            result.namespace,
            str(len(result.eligible)),
            str(len(result.deleted)),
            str(len(result.failed)),
            result.error or "",
        )

    console.print(table)

    if summary.has_failures:
        console.print(
            f"[yellow]Completed with failures: {summary.failed_count} job deletion(s) failed, "
            f"{len(summary.skipped_namespaces)} namespace(s) skipped[/yellow]",
            soft_wrap=True,
        )


@click.command()
@click.version_option(version=__version__)
@click.option("--cluster", envvar="JOBSWEEP_CLUSTER", help="Name of the EKS cluster (required)")
@click.option(
    "--profile",
    envvar="JOBSWEEP_PROFILE",
    help="AWS profile with access to the cluster. Provide either --profile or --role-arn",
)
@click.option(
    "--role-arn",
    envvar="JOBSWEEP_ROLE_ARN",
    help="IAM role ARN with access to the cluster. Provide either --profile or --role-arn",
)
@click.option("--region", envvar="JOBSWEEP_REGION", help="AWS region of the EKS cluster")
@click.option("--namespaces", help="Comma-delimited namespaces to clean (default: all)")
@click.option(
    "--days",
    type=click.IntRange(min=0),
    default=None,
    help=f"Jobs older than this day count are cleaned [default: {DEFAULT_THRESHOLD_DAYS}]",
)
@click.option("--dry-run", is_flag=True, help="List eligible jobs without deleting")
@click.option(
    "--max-concurrent",
    type=click.IntRange(min=1),
    default=None,
    help="Max namespaces cleaned at once (default: unbounded)",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML file with defaults for these options",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level [default: INFO]",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"]),
    default=None,
    help="Log format [default: json]",
)
def cli(
    cluster: str | None,
    profile: str | None,
    role_arn: str | None,
    region: str | None,
    namespaces: str | None,
    days: int | None,
    dry_run: bool,
    max_concurrent: int | None,
    config_path: str | None,
    log_level: str | None,
    log_format: str | None,
) -> None:
    """Delete finished Kubernetes jobs older than a number of days from an EKS cluster."""
    from jobsweep.runner import run_cleanup

    try:
        settings = _load_settings(
            config_path,
            cluster=cluster,
            profile=profile,
            role_arn=role_arn,
            region=region,
            namespaces=namespaces,
            days=days,
            dry_run=dry_run or None,
            max_concurrent=max_concurrent,
        )
    except JobsweepError as e:
        console.print(f"Error: {e}", style="red", markup=False, soft_wrap=True)
        sys.exit(1)

    logging_config = settings.logging.model_copy(
        update={
            key: value
            for key, value in {"level": log_level, "format": log_format}.items()
            if value is not None
        }
    )
    setup_logging(
        level=logging_config.level,
        format=logging_config.format,
        output=logging_config.output,
    )
    logger = get_logger(__name__)

    try:
        summary = run_cleanup(settings)
    except JobsweepError as e:
        log_error(logger, e, operation="cleanup", cluster=settings.cluster)
        console.print(f"Error: {e}", style="red", markup=False, soft_wrap=True)
        sys.exit(1)

    _print_summary(summary)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
