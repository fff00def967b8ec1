"""
devstrap — CLI entrypoint.

Usage:
    devstrap                 # same as `devstrap run`
    devstrap run --dry-run
    devstrap run --json      # report on stdout, status lines on stderr
    devstrap check --json
    devstrap catalog
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from devstrap import __version__
from devstrap.adapters.shell.command import CommandRunner
from devstrap.core.config.loader import ConfigError, load_answers, load_catalog
from devstrap.core.engine.context import ProvisionContext, build_context
from devstrap.core.models.catalog import Catalog
from devstrap.core.observability.logging_config import resolve_level, setup_logging
from devstrap.ui.cli.console import ConsoleReporter
from devstrap.ui.cli.prompts import ClickPrompter, Prompter, ScriptedPrompter

_catalog_option = click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Catalog YAML (default: $DEVSTRAP_CATALOG or the built-in catalog).",
)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="devstrap")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential log output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, debug: bool) -> None:
    """devstrap — bootstrap a macOS developer workstation."""
    ctx.ensure_object(dict)

    setup_logging(resolve_level(debug=debug, verbose=verbose, quiet=quiet))

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


def _load_catalog_or_exit(reporter: ConsoleReporter, catalog_path: Path | None) -> Catalog:
    try:
        return load_catalog(catalog_path)
    except ConfigError as e:
        reporter.error(str(e))
        sys.exit(1)


def _provision_context(
    ctx: click.Context,
    catalog: Catalog,
    prompter: Prompter,
    reporter: ConsoleReporter,
    dry_run: bool = False,
) -> ProvisionContext:
    """Build the provisioning context.

    ``ctx.obj`` may carry overrides (runner, home, environ, platform,
    machine) so the CLI can be driven against fakes.
    """
    obj = ctx.find_root().obj or {}
    return build_context(
        catalog,
        obj.get("runner") or CommandRunner(),
        prompter,
        reporter,
        home=obj.get("home"),
        environ=obj.get("environ"),
        platform=obj.get("platform"),
        machine=obj.get("machine"),
        dry_run=dry_run,
    )


# ── Provision ───────────────────────────────────────────────────


@cli.command()
@_catalog_option
@click.option(
    "--answers",
    "answers_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML file of canned prompt answers; unanswered prompts stay interactive.",
)
@click.option("--dry-run", is_flag=True, help="Run every check but change nothing.")
@click.option(
    "--json-output",
    "--json",
    "as_json",
    is_flag=True,
    help="Print the run report as JSON on stdout; status lines and prompts go to stderr.",
)
@click.pass_context
def run(
    ctx: click.Context,
    catalog_path: Path | None,
    answers_path: Path | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Provision this machine (the default command)."""
    from devstrap.core.engine.sequencer import run_sequence
    from devstrap.core.services.plan import build_plan

    reporter = ConsoleReporter(err=as_json)
    catalog = _load_catalog_or_exit(reporter, catalog_path)

    prompter: Prompter = ClickPrompter(err=as_json)
    if answers_path is not None:
        try:
            prompter = ScriptedPrompter(load_answers(answers_path), fallback=prompter)
        except ConfigError as e:
            reporter.error(str(e))
            sys.exit(1)

    context = _provision_context(ctx, catalog, prompter, reporter, dry_run=dry_run)
    report = run_sequence(build_plan(catalog), context)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))

    if report.exit_code:
        sys.exit(report.exit_code)


# ── Observe ─────────────────────────────────────────────────────


@cli.command()
@_catalog_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def check(ctx: click.Context, catalog_path: Path | None, as_json: bool) -> None:
    """Show which catalog items are already present. Changes nothing."""
    from devstrap.core.services.status import provisioning_status

    reporter = ConsoleReporter()
    catalog = _load_catalog_or_exit(reporter, catalog_path)
    context = _provision_context(ctx, catalog, ClickPrompter(), reporter)
    result = provisioning_status(context)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    def mark(ok: bool) -> str:
        return "✅" if ok else "❌"

    platform = result["platform"]
    click.secho("🖥  Host:", fg="cyan", bold=True)
    click.echo(f"   {mark(platform['ok'])} platform {platform['current']} (expected {platform['expected']})")
    click.echo(f"   {mark(result['command_line_tools'])} Command Line Tools")
    click.echo(f"   {mark(result['homebrew'])} Homebrew")
    for name, manager in result["managers"].items():
        click.echo(f"   {mark(manager['available'])} package manager {name} ({manager['type']})")
    click.echo(f"   {mark(result['oh_my_zsh'])} Oh My Zsh")
    click.echo(f"   {mark(result['ssh_key'])} SSH key")
    click.echo()

    for group in result["groups"]:
        suffix = "" if group["available"] else f" ({group['manager']} not available)"
        click.secho(f"📦 {group['title']}{suffix}:", fg="cyan", bold=True)
        for pkg in group["packages"]:
            click.echo(f"   {mark(pkg['installed'])} {pkg['name']}")
        click.echo()

    if result["shell_plugins"]:
        click.secho("🐚 Oh My Zsh plugins:", fg="cyan", bold=True)
        for plugin in result["shell_plugins"]:
            click.echo(f"   {mark(plugin['installed'])} {plugin['name']}")
        click.echo()

    git = result["git"]
    click.secho("🔑 Git identity:", fg="cyan", bold=True)
    click.echo(f"   user.name:  {git['user.name'] or '(unset)'}")
    click.echo(f"   user.email: {git['user.email'] or '(unset)'}")
    click.echo()

    if result["missing"]:
        click.secho(f"⚠️  {result['missing']} item(s) missing — run `devstrap run`", fg="yellow")
    else:
        click.secho("✅ Everything in the catalog is present", fg="green")


@cli.command("catalog")
@_catalog_option
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def show_catalog(catalog_path: Path | None, as_json: bool) -> None:
    """Print the effective provisioning catalog."""
    reporter = ConsoleReporter()
    catalog = _load_catalog_or_exit(reporter, catalog_path)

    if as_json:
        click.echo(json.dumps(catalog.model_dump(mode="json"), indent=2))
        return

    for group in catalog.package_groups:
        policy = " [failures tolerated]" if group.tolerate_failures else ""
        click.secho(f"📦 {group.title} ({group.manager}){policy}", fg="cyan", bold=True)
        for d in group.packages:
            comment = f"  # {d.comment}" if d.comment else ""
            click.echo(f"   • {d.name}{comment}")
        click.echo()

    if catalog.shell_plugins:
        click.secho("🐚 Oh My Zsh plugins", fg="cyan", bold=True)
        for plugin in catalog.shell_plugins:
            click.echo(f"   • {plugin.name}  → {plugin.url}")
        click.echo()

    if catalog.git_defaults:
        click.secho("🔧 Git defaults", fg="cyan", bold=True)
        for key, value in catalog.git_defaults.items():
            click.echo(f"   • {key} = {value}")
        click.echo()

    if catalog.macos_defaults:
        click.secho("🍎 macOS settings (optional)", fg="cyan", bold=True)
        for s in catalog.macos_defaults:
            click.echo(f"   • {s.domain} {s.key} = {s.value_arg()}")
        click.echo()


if __name__ == "__main__":
    cli()
