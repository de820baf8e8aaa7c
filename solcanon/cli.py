"""solcanon CLI — canonicalize, check and inspect Solidity storage layouts."""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from solcanon import __version__
from solcanon.errors import SolcanonError

console = Console()
err_console = Console(stderr=True)


def _fail(message: str) -> None:
    err_console.print(f"[red]Error:[/] {message}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "-c",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to a solcanon.yaml config file",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: str | None):
    """solcanon — deterministic Solidity storage layouts.

    Rewrites the AST ids solc embeds in storage layouts into stable ids so
    regenerated layouts diff cleanly in version control.
    """
    from solcanon.config import load_settings

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )

    try:
        ctx.obj = load_settings(config_path)
    except SolcanonError as e:
        _fail(str(e))


def _canonical_layout(settings, input_path: str):
    from solcanon.layout.canonicalize import canonicalize_ast_ids
    from solcanon.layout.io import load_layout

    try:
        layout = load_layout(input_path)
    except SolcanonError as e:
        _fail(str(e))

    return canonicalize_ast_ids(
        layout,
        base_id=settings.canon.base_id,
        marker=settings.canon.root_marker,
        longest_match_first=settings.canon.longest_match_first,
    )


# ── Canonicalize ─────────────────────────────────────────────────────


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Write the result here instead of stdout")
@click.pass_obj
def canonicalize(settings, input_path: str, output: str | None):
    """Canonicalize the storage layout in INPUT_PATH.

    INPUT_PATH can be a bare storageLayout JSON file or a compiler artifact
    that contains one.
    """
    from solcanon.layout.io import dump_layout
    from solcanon.snapshot import write_snapshot

    layout = _canonical_layout(settings, input_path)

    if output:
        write_snapshot(layout, output)
        err_console.print(f"[green]Canonical layout written to:[/] {output}")
    else:
        click.echo(dump_layout(layout), nl=False)


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("snapshot_path")
@click.option("--update", is_flag=True, help="Rewrite the snapshot when it drifted")
@click.pass_obj
def check(settings, input_path: str, snapshot_path: str, update: bool):
    """Compare the canonical layout of INPUT_PATH with SNAPSHOT_PATH.

    Exits with status 1 on drift unless --update is given.
    """
    from solcanon.snapshot import check_snapshot, write_snapshot

    layout = _canonical_layout(settings, input_path)
    report = check_snapshot(layout, snapshot_path)

    if not report.has_drift:
        console.print(f"  [green]OK[/] {report.summary()}")
        return

    console.print(f"  [red]DRIFT[/] {report.summary()}")
    for line in report.details:
        if line.startswith("+") and not line.startswith("+++"):
            console.print(f"    {line}", style="green", highlight=False, markup=False)
        elif line.startswith("-") and not line.startswith("---"):
            console.print(f"    {line}", style="red", highlight=False, markup=False)
        else:
            console.print(f"    {line}", highlight=False, markup=False)

    if update:
        write_snapshot(layout, snapshot_path)
        console.print(f"  [yellow]Updated[/] {snapshot_path}")
        return

    sys.exit(1)


# ── Validate ─────────────────────────────────────────────────────────


@main.command()
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False))
def validate(input_path: str):
    """Check that every type referenced in INPUT_PATH is defined."""
    from solcanon.layout.io import load_layout
    from solcanon.layout.validator import validate_layout

    try:
        layout = load_layout(input_path)
    except SolcanonError as e:
        _fail(str(e))

    issues = validate_layout(layout)
    if issues:
        console.print("[red]Validation FAILED:[/]")
        for issue in issues:
            console.print(f"  [red]x[/] {issue}", markup=False)
        sys.exit(1)

    console.print(
        f"  [green]v[/] {len(layout.storage)} storage entries, {len(layout.types)} types, no dangling references"
    )


# ── Block ────────────────────────────────────────────────────────────


@main.command()
@click.argument("block_hash")
@click.option("--l1-url", default=None, help="L1 JSON-RPC endpoint (overrides config)")
@click.option("--trust-rpc", is_flag=True, help="Skip the block hash check")
@click.pass_obj
def block(settings, block_hash: str, l1_url: str | None, trust_rpc: bool):
    """Fetch an L1 block by BLOCK_HASH and print a summary."""
    from solcanon.l1.client import new_fetching_l1

    if l1_url:
        settings.l1.url = l1_url
    if trust_rpc:
        settings.l1.trust_rpc = True

    try:
        client = new_fetching_l1(settings.l1)
        try:
            fetched = client.block_by_hash(block_hash)
        finally:
            client.close()
    except SolcanonError as e:
        _fail(str(e))

    header = fetched.header
    table = Table(title=f"Block {header.number}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("hash", header.hash)
    table.add_row("parent", header.parent_hash)
    table.add_row("timestamp", str(header.timestamp))
    table.add_row("gas used", f"{header.gas_used} / {header.gas_limit}")
    if header.base_fee is not None:
        table.add_row("base fee", str(header.base_fee))
    table.add_row("transactions", str(len(fetched.transactions)))
    console.print(table)


if __name__ == "__main__":
    main()
