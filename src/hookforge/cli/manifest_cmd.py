"""Manifest CLI commands: validate and show tap order."""

from pathlib import Path

import click

from hookforge.core.config import HookforgeConfig
from hookforge.manifest.loader import ManifestError, ManifestLoader
from hookforge.manifest.validator import validate_manifest_file


def _resolve_manifest(ctx: click.Context, manifest: Path | None) -> Path:
    """Use the explicit argument, else the configured default."""
    if manifest is not None:
        return manifest
    config: HookforgeConfig = ctx.obj
    path = config.manifest_path
    if not path.exists():
        click.echo(f"Error: Manifest not found at {path}", err=True)
        raise SystemExit(1)
    return path


@click.command()
@click.argument(
    "manifest",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
@click.pass_context
def validate(ctx: click.Context, manifest: Path | None, strict: bool):
    """Validate a manifest against the manifest schema."""
    path = _resolve_manifest(ctx, manifest)
    issues = validate_manifest_file(path, strict=strict)

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    click.echo(click.style("Manifest is valid.", fg="green", bold=True))


@click.command()
@click.argument(
    "manifest",
    required=False,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("--hook", "hook_name", default=None, help="Only show this hook.")
@click.pass_context
def taps(ctx: click.Context, manifest: Path | None, hook_name: str | None):
    """Load a manifest and print each hook's resolved tap order."""
    path = _resolve_manifest(ctx, manifest)
    loader = ManifestLoader(path)
    try:
        hooks = loader.load()
    except ManifestError as e:
        click.echo(click.style(f"Failed to load manifest:\n{e}", fg="red"), err=True)
        raise SystemExit(1)

    if hook_name is not None:
        if hook_name not in hooks:
            click.echo(f"Error: Hook '{hook_name}' is not declared in {path}", err=True)
            raise SystemExit(1)
        hooks = {hook_name: hooks[hook_name]}

    for name, hook in hooks.items():
        args = ", ".join(hook.args)
        click.echo(click.style(f"{name} ({type(hook).__name__}: {args})", bold=True))
        if not hook.taps:
            click.echo("  (no taps)")
        for position, tap in enumerate(hook.taps, 1):
            before = f" before {', '.join(tap.before)}" if tap.before else ""
            click.echo(f"  {position}. {tap.name} [{tap.type.value}] stage {tap.stage}{before}")
