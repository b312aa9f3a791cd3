"""
buildloom — CLI entrypoint.

Usage:
    buildloom --help
    buildloom info
    buildloom tasks
    buildloom run build
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from buildloom import __version__
from buildloom.core.observability.logging_config import resolve_level, setup_logging

_STATUS_COLORS = {"ok": "green", "partial": "yellow", "failed": "red"}
_RECEIPT_MARKERS = {"ok": "✓", "skipped": "⊘", "failed": "✗"}


@click.group()
@click.version_option(version=__version__, prog_name="buildloom")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to buildloom.yml or package.json (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """buildloom — build, test, package and publish JS/TS projects."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get("BUILDLOOM_LOG_FILE"),
        log_file_level=os.environ.get("BUILDLOOM_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show the project summary."""
    from buildloom.core.use_cases.status import get_info

    result = get_info(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    data = result.to_dict()
    click.secho(f"\n📋 {data['name']} {data['version']}", fg="cyan", bold=True)
    if data["description"]:
        click.echo(f"   {data['description']}")
    click.echo(f"   Type: {data['type']} ({data['language']})")
    click.echo(f"   Root: {data['root']}")
    click.echo(f"   Config file: {data['config_file_name']}")
    if data["container_targets"]:
        click.echo(f"   Containers: {', '.join(data['container_targets'])}")
    if data["cdk_targets"]:
        click.echo(f"   CDK stacks: {', '.join(data['cdk_targets'])}")
    if data["required_env"]:
        click.echo(f"   Required env: {', '.join(data['required_env'])}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def tasks(ctx: click.Context, as_json: bool) -> None:
    """List every task available for the project."""
    from buildloom.core.use_cases.tasks import list_tasks

    result = list_tasks(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    width = max((len(t.name) for t in result.tasks), default=0)
    for task in result.tasks:
        click.secho(f"  {task.name.ljust(width)}", fg="cyan", nl=False)
        click.echo(f"  {task.description}")


@cli.command("env-check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def env_check(ctx: click.Context, as_json: bool) -> None:
    """Check that every required environment variable is defined."""
    from buildloom.core.use_cases.status import check_environment

    result = check_environment(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if not result.required:
        click.echo("No required environment variables.")
        return

    for name in result.required:
        if name in result.missing:
            click.secho(f"  ✗ {name}", fg="red")
        else:
            click.secho(f"  ✓ {name}", fg="green")

    if result.missing:
        click.secho(f"\n❌ Missing: {', '.join(result.missing)}", fg="red")
        sys.exit(1)


@cli.command()
@click.argument("task_name")
@click.option("--dry-run", is_flag=True, help="Validate actions without executing them.")
@click.option("--mock", is_flag=True, help="Use mock adapters (no tools are run).")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def run(ctx: click.Context, task_name: str, dry_run: bool, mock: bool, as_json: bool) -> None:
    """Run a task (e.g. build, test-unit, watch-lint)."""
    from buildloom.core.use_cases.run import run_task

    try:
        result = run_task(
            task_name,
            config_path=ctx.obj.get("config_path"),
            dry_run=dry_run,
            mock_mode=mock,
        )
    except KeyboardInterrupt:
        click.echo()
        click.secho("Interrupted", fg="yellow")
        sys.exit(130)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if not result.error and result.report and result.report.all_ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    if report is None:
        click.secho(f"❌ {task_name}: nothing was run", fg="red")
        sys.exit(1)

    if not ctx.obj.get("quiet"):
        for receipt in report.receipts:
            marker = _RECEIPT_MARKERS.get(receipt.status, "?")
            line = f"  {marker} {receipt.action_id}"
            if receipt.failed and receipt.error:
                line += f" — {receipt.error}"
            elif receipt.status == "skipped" and receipt.output:
                line += f" — {receipt.output}"
            click.echo(line)

    click.secho(
        f"\n{task_name}: {report.status} "
        f"({report.succeeded} ok, {report.failed} failed, {report.skipped} skipped)",
        fg=_STATUS_COLORS.get(report.status, "white"),
        bold=True,
    )
    if not report.all_ok:
        sys.exit(1)


if __name__ == "__main__":
    cli()
