"""Click CLI commands for now-upload."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from now_upload.config import get_settings

console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-7s %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """now-upload — content-addressed file uploads to Now."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# ---------------------------------------------------------------------------
# upload
# ---------------------------------------------------------------------------


@cli.command("upload")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option("--token", default=None, help="Now API token (overrides NOW_TOKEN).")
@click.option("--buffered", is_flag=True, help="Read each file whole instead of streaming it.")
@click.option(
    "--manifest",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write a JSON manifest of uploaded files.",
)
def upload(paths: tuple[Path, ...], token: str | None, buffered: bool, manifest: Path | None) -> None:
    """Upload files or directories to Now."""
    from now_upload.pipeline import save_manifest, upload_paths

    settings = get_settings(now_token=token) if token else get_settings()
    if not settings.now_token:
        console.print("[red]No API token.[/red] Set NOW_TOKEN in .env or pass --token")
        sys.exit(1)

    results = asyncio.run(upload_paths(settings, list(paths), stream=not buffered))

    table = Table(title="Uploaded files")
    table.add_column("Name", style="cyan", max_width=60)
    table.add_column("Size", justify="right")
    table.add_column("SHA-1", style="dim")
    for r in results:
        if r is not None:
            table.add_row(r.name, _human_size(r.length), r.digest)
    console.print(table)

    if manifest is not None:
        save_manifest(manifest, results)
        console.print(f"Manifest written to {manifest}")

    uploaded = sum(1 for r in results if r is not None)
    failed = len(results) - uploaded
    console.print(f"\n[green]Done.[/green] Uploaded: {uploaded}, Failed: {failed}")
    if failed:
        sys.exit(1)


# ---------------------------------------------------------------------------
# digest
# ---------------------------------------------------------------------------


@cli.command("digest")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
def digest(paths: tuple[Path, ...]) -> None:
    """Print the SHA-1 each file would be uploaded under."""
    from now_upload.files import collect_files, derive_name
    from now_upload.hasher import sha1_file

    for f in collect_files(paths):
        click.echo(f"{sha1_file(f.path)}  {derive_name(f)}")


def _human_size(nbytes: int) -> str:
    """Convert bytes to a human-readable string."""
    for unit in ("B", "KB", "MB", "GB"):
        if nbytes < 1024:
            return f"{nbytes:.1f} {unit}"
        nbytes /= 1024  # type: ignore[assignment]
    return f"{nbytes:.1f} TB"
