"""hookforge CLI entry point."""

import click

from hookforge.core.config import HookforgeConfig, configure_logging
from hookforge.hooks.kinds import HOOK_KINDS, SyncKindHook


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Logging level (defaults to HOOKFORGE_LOG_LEVEL or WARNING).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None):
    """hookforge: ordered, intercepted plugin hooks."""
    config = HookforgeConfig.from_env()
    if log_level:
        config.log_level = log_level.upper()
    try:
        configure_logging(config)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level") from e
    ctx.obj = config


@cli.command()
def kinds():
    """List the available hook kinds."""
    for name, kind in HOOK_KINDS.items():
        mode = "sync" if issubclass(kind, SyncKindHook) else "async"
        click.echo(f"{name:<26} {mode}")


# Register subcommands
from hookforge.cli.manifest_cmd import taps, validate  # noqa: E402

cli.add_command(validate)
cli.add_command(taps)
