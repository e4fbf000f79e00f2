# src/s3_deploy_cli/cli.py
"""
CLI implementation using click and rich.
Supports both interactive prompts and flag-based automation.
"""

import sys
from typing import Optional

import click
import questionary
from rich.panel import Panel
from rich.table import Table

from .config import ConfigError, DeployConfig
from .adapters.command_registry import COMMANDS, list_commands
from .adapters.aws.deploy_orchestrator import DeployOrchestrator
from .core.models import OperationResult, Status, SyncMode
from .core.stack_outputs import KNOWN_OUTPUT_KEYS
from .utils.log import ConsoleLog, console


STATUS_STYLES = {
    Status.SUCCESS: "success",
    Status.NOT_FOUND: "warning",
    Status.FAILED: "error",
}


def display_rich_summary(results: list[OperationResult]):
    """Prints one line per completed hook."""
    table = Table(box=None, padding=(0, 2), show_header=False)
    table.add_column("Operation", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Message", overflow="fold")
    for result in results:
        style = STATUS_STYLES[result.status]
        table.add_row(result.operation, f"[{style}]{result.status.value}[/]", result.message)
    console.print(table)


def shared_options(func):
    """Options every deploy command accepts."""
    options = [
        click.option("--bucket", "bucket_name", help="Target S3 bucket (overrides custom.s3Bucket)."),
        click.option("--dist-folder", help="Local build directory. Default: build."),
        click.option("--service", help="Service name used to derive the stack name."),
        click.option("--stage", help="Deployment stage. Default: dev."),
        click.option("--region", help="AWS region. Default: us-east-1."),
        click.option("--profile", help="AWS named profile."),
        click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Path to serverless.yml."),
        click.option("--verbose", "-v", is_flag=True, help="Echo AWS CLI commands and extra diagnostics."),
        click.option("--strict", is_flag=True, help="Exit with status 1 when the operation fails."),
        click.option("--interactive", "-i", is_flag=True, help="Prompt for settings interactively."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
def cli():
    """🚀 S3 Deploy - Sync build output to S3 and manage its CloudFront cache."""
    pass


@cli.command("syncToS3")
@shared_options
@click.option("--mode", "sync_mode", type=click.Choice([m.value for m in SyncMode]), help="sync (changed files) or copy (everything).")
@click.option("--delete", "delete_removed", is_flag=True, help="Remove bucket objects missing from the build directory.")
def sync_to_s3(**options):
    """Deploys the build directory to your bucket."""
    # An unset flag must not override deleteRemoved from serverless.yml
    options["delete_removed"] = options["delete_removed"] or None
    execute("syncToS3", **options)


@cli.command("wipeS3")
@shared_options
def wipe_s3(**options):
    """Removes every object from your bucket."""
    execute("wipeS3", **options)


@cli.command("domainInfo")
@shared_options
@click.option("--output-key", help="Stack output holding the CloudFront domain.")
@click.option("--scheme", "domain_scheme", help="Prefix for the printed domain, e.g. https://")
@click.option("--stack-name", help="Explicit stack name instead of <service>-<stage>.")
def domain_info(**options):
    """Fetches and prints out the deployed CloudFront domain names."""
    execute("domainInfo", **options)


@cli.command("invalidateCache")
@shared_options
def invalidate_cache(**options):
    """Creates new invalidation in CloudFront."""
    execute("invalidateCache", **options)


@cli.command("commands")
def show_commands():
    """Lists the registered commands and their lifecycle events."""
    table = Table(title="Deploy Commands", box=None, padding=(0, 2))
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Lifecycle Events")
    table.add_column("Usage")
    for name in list_commands():
        entry = COMMANDS[name]
        table.add_row(name, ", ".join(entry["lifecycle_events"]), entry["usage"])
    console.print(table)


def execute(
    command: str,
    config_path: Optional[str] = None,
    verbose: bool = False,
    strict: bool = False,
    interactive: bool = False,
    **overrides,
):
    """Loads config, runs the command's hooks and prints a summary."""
    if interactive:
        answers = run_interactive_prompts(command, overrides)
        if answers is None:
            console.print("\n[warning]⚠️  Operation cancelled.[/]")
            return
        overrides.update(answers)

    try:
        deploy_config = DeployConfig.load(config_path, **overrides)
    except ConfigError as e:
        console.print(f"[error]Error:[/] {e}")
        sys.exit(1)

    orchestrator = DeployOrchestrator(deploy_config, log=ConsoleLog(verbose=verbose))
    results = orchestrator.run(command)
    display_rich_summary(results)

    if strict and any(r.failed for r in results):
        sys.exit(1)


def run_interactive_prompts(command: str, current: dict) -> Optional[dict]:
    """Wraps questionary prompts for interactive mode. Returns None if cancelled."""
    console.print(Panel.fit(f"🚀 [bold white]{command}[/]", border_style="blue"))

    answers = {}
    answers["bucket_name"] = questionary.text(
        "S3 bucket:", default=current.get("bucket_name") or ""
    ).ask()

    if command == "syncToS3":
        answers["dist_folder"] = questionary.text(
            "Local build directory:", default=current.get("dist_folder") or "build"
        ).ask()
        answers["sync_mode"] = questionary.select(
            "Upload mode?",
            choices=[m.value for m in SyncMode],
            default=current.get("sync_mode") or SyncMode.SYNC.value,
        ).ask()
        answers["delete_removed"] = questionary.confirm(
            "Delete bucket objects missing locally?", default=False
        ).ask()

    if command == "domainInfo":
        answers["service"] = questionary.text(
            "Service name:", default=current.get("service") or ""
        ).ask()
        answers["stage"] = questionary.text("Stage:", default=current.get("stage") or "dev").ask()
        output_key = current.get("output_key") or KNOWN_OUTPUT_KEYS[0]
        answers["output_key"] = questionary.select(
            "Stack output key:",
            choices=list(dict.fromkeys([*KNOWN_OUTPUT_KEYS, output_key])),
            default=output_key,
        ).ask()

    if any(v is None for v in answers.values()):
        return None
    # Blank text answers fall back to config/env values
    return {k: v for k, v in answers.items() if v != ""}


def main():
    cli()


if __name__ == "__main__":
    main()
