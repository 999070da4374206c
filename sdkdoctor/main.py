"""
SDK Doctor — CLI entrypoint.

Usage:
    python -m sdkdoctor.main --help
    sdkdoctor locate
    sdkdoctor sdks --json
    sdkdoctor workloads suggest 6.0.100 Microsoft.Android.Sdk
    sdkdoctor install https://example.com/pkg.pkg --title "Android SDK"
"""

from __future__ import annotations

import asyncio
import json
import signal
import sys
from pathlib import Path

import click

from sdkdoctor import __version__
from sdkdoctor.core.observability.logging_config import resolve_level, setup_from_environment


def _load_config(ctx: click.Context):
    from sdkdoctor.core.config.loader import ConfigError, load_config

    try:
        return load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


def _toolchain(ctx: click.Context):
    from sdkdoctor.core.services.toolchain import Toolchain

    return Toolchain.from_config(_load_config(ctx))


def _not_found(toolchain) -> None:
    click.secho("❌ Toolchain not found.", fg="red")
    click.echo("   Searched:")
    for entry in toolchain.locator.searched:
        click.echo(f"     • {entry}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="sdkdoctor")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to doctor.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """SDK Doctor — inspect the toolchain and fix what is missing."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_from_environment(
        resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        quiet_third_party=not debug,
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def locate(ctx: click.Context, as_json: bool) -> None:
    """Show where the toolchain executable was found."""
    toolchain = _toolchain(ctx)
    location = toolchain.locator.location

    if as_json:
        data = location.to_dict()
        data["searched"] = toolchain.locator.searched
        click.echo(json.dumps(data, indent=2))
        sys.exit(0 if location.exists else 1)

    if not location.exists:
        _not_found(toolchain)

    click.secho(f"✓ {location.executable_path}", fg="green")
    click.echo(f"   Root: {location.root_directory}")
    click.echo(f"   Found by: {location.strategy}")


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def sdks(ctx: click.Context, as_json: bool) -> None:
    """List installed SDKs."""
    toolchain = _toolchain(ctx)
    if not toolchain.exists:
        if as_json:
            click.echo(json.dumps({"error": "toolchain not found",
                                   "searched": toolchain.locator.searched}, indent=2))
            sys.exit(1)
        _not_found(toolchain)

    records = toolchain.get_sdks()

    if as_json:
        click.echo(json.dumps([r.to_dict() for r in records], indent=2))
        return

    if not records:
        click.secho("⚠️  No SDKs installed.", fg="yellow")
        return

    click.secho(f"\n📦 SDKs: {len(records)}", fg="cyan", bold=True)
    for record in records:
        click.echo(f"   • {record.version}  → {record.directory}")
    click.echo()


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--sdk", "sdk_version", default=None, help="SDK version (default: latest).")
@click.option("--pack", "packs", multiple=True, help="Pack id the project needs.")
@click.pass_context
def diagnose(ctx: click.Context, as_json: bool, sdk_version: str | None, packs: tuple[str, ...]) -> None:
    """Check the toolchain, its SDKs and (optionally) missing packs."""
    from sdkdoctor.core.use_cases.diagnose import run_diagnose

    result = run_diagnose(
        config=_load_config(ctx),
        missing_packs=list(packs) or None,
        sdk_version=sdk_version,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.location.exists:
        click.secho(f"✓ Toolchain: {result.location.executable_path}", fg="green")
    for record in result.sdks:
        click.echo(f"   • SDK {record.version}")

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    if result.suggestions:
        click.secho("\n🩺 Install these workloads:", fg="yellow", bold=True)
        for suggestion in sorted(result.suggestions, key=lambda s: s.id):
            click.echo(f"   • {suggestion.id}  ({', '.join(sorted(suggestion.provides))})")
    elif packs:
        click.secho("✓ No workloads needed.", fg="green")


@cli.group()
def workloads() -> None:
    """Workload and pack queries."""


@workloads.command("suggest")
@click.argument("sdk_version")
@click.argument("pack_ids", nargs=-1)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def workloads_suggest(ctx: click.Context, sdk_version: str, pack_ids: tuple[str, ...], as_json: bool) -> None:
    """Suggest workloads that provide the given missing PACK_IDS."""
    from sdkdoctor.core.services.workload_manifest import WorkloadManifestError

    toolchain = _toolchain(ctx)
    if not toolchain.exists:
        _not_found(toolchain)

    try:
        suggestions = toolchain.get_workload_suggestions(sdk_version, *pack_ids)
    except WorkloadManifestError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    ordered = sorted(suggestions, key=lambda s: s.id)
    if as_json:
        click.echo(json.dumps([s.to_dict() for s in ordered], indent=2))
        return

    if not ordered:
        click.echo("No workload suggestions.")
        return
    for suggestion in ordered:
        click.secho(f"   • {suggestion.id}", fg="cyan", nl=False)
        click.echo(f"  provides {', '.join(sorted(suggestion.provides))}")


@workloads.command("packs")
@click.argument("sdk_version")
@click.option(
    "--kind",
    type=click.Choice(["sdk", "framework", "library", "template", "tool"]),
    default="sdk",
    show_default=True,
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def workloads_packs(ctx: click.Context, sdk_version: str, kind: str, as_json: bool) -> None:
    """List installed packs of a KIND for SDK_VERSION."""
    from sdkdoctor.core.services.workload_manifest import WorkloadManifestError

    toolchain = _toolchain(ctx)
    if not toolchain.exists:
        _not_found(toolchain)

    try:
        packs = toolchain.get_workload_packs(sdk_version, kind)
    except WorkloadManifestError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([p.to_dict() for p in packs], indent=2))
        return

    click.secho(f"\n📦 {kind} packs: {len(packs)}", fg="cyan", bold=True)
    for pack in packs:
        click.echo(f"   • {pack.resolved_id} {pack.version}  → {pack.path}")
    click.echo()


def _installer(config):
    from sdkdoctor.adapters.installer.bootstrapper import BootstrapperInstaller

    installer = BootstrapperInstaller(
        download_dir=config.installer.download_dir,
        timeout=config.installer.timeout,
    )
    if not installer.is_available():
        click.secho(f"❌ Cannot run installers: '{installer.tool}' not found on PATH.", fg="red")
        sys.exit(1)
    return installer


def _print_status(name: str, message: str, fraction: float) -> None:
    click.echo(f"   [{fraction:>4.0%}] {name}: {message}")


def _execute(remedies, as_json: bool) -> None:
    from sdkdoctor.core.engine.cancellation import CancellationToken
    from sdkdoctor.core.engine.executor import run_remedies

    token = CancellationToken()

    async def _main():
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, token.cancel)
        except (NotImplementedError, RuntimeError):
            pass  # no loop signal handlers on Windows; Ctrl-C cancels the task
        return await run_remedies(remedies, token, on_status=None if as_json else _print_status)

    try:
        report = asyncio.run(_main())
    except (KeyboardInterrupt, asyncio.CancelledError):
        click.secho("\n⊘ Cancelled.", fg="yellow")
        sys.exit(130)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        sys.exit(0 if report.all_ok else 1)

    status_color = {"ok": "green", "partial": "yellow"}.get(report.status, "red")
    click.secho(
        f"\n   Result: {report.succeeded}/{report.total} succeeded ({report.status})",
        fg=status_color,
        bold=True,
    )
    for receipt in report.receipts:
        if receipt.failed:
            click.secho(f"   ✗ {receipt.remedy}: {receipt.error}", fg="red")
    if not report.all_ok:
        sys.exit(1)


@cli.command()
@click.argument("urls", nargs=-1, required=True)
@click.option("--title", "titles", multiple=True, help="Title for each URL, in order.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, urls: tuple[str, ...], titles: tuple[str, ...], as_json: bool) -> None:
    """Download and run installers from URLS, one at a time."""
    from sdkdoctor.core.remedies.boots import BootsRemedy

    config = _load_config(ctx)
    installer = _installer(config)
    entries = [(url, titles[i] if i < len(titles) else "") for i, url in enumerate(urls)]
    _execute([BootsRemedy(installer, entries, name="install")], as_json)


@cli.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def remedy(ctx: click.Context, names: tuple[str, ...], as_json: bool) -> None:
    """Run remedies defined in doctor.yml, in the order given."""
    from sdkdoctor.core.remedies.boots import BootsRemedy

    config = _load_config(ctx)

    definitions = []
    for name in names:
        definition = config.get_remedy(name)
        if definition is None:
            known = ", ".join(r.name for r in config.remedies) or "none defined"
            click.secho(f"❌ Unknown remedy '{name}' (known: {known})", fg="red")
            sys.exit(1)
        definitions.append(definition)

    installer = _installer(config)
    remedies = [BootsRemedy.from_definition(d, installer) for d in definitions]

    _execute(remedies, as_json)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
