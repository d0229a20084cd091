"""Command-line interface for neocities_api."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
import httpx

from neocities_api import (
    DirectoryEntry,
    NeocitiesAPI,
    NeocitiesError,
    UploadableFile,
    get_token,
)

TOKEN_ENVVAR = "NEOCITIES_API_KEY"

token_option = click.option(
    "--token",
    "-t",
    envvar=TOKEN_ENVVAR,
    help=f"Neocities API key (default: ${TOKEN_ENVVAR})",
)


def _fail(message: str) -> NoReturn:
    click.echo(click.style(message, fg="red"), err=True)
    sys.exit(1)


def _require_token(token: str | None) -> str:
    if not token:
        _fail(f"An API key is required. Pass --token or set {TOKEN_ENVVAR} (see 'neocities key').")
    return token


@click.group()
@click.version_option(package_name="neocities-api")
@click.option("--verbose", "-v", is_flag=True, help="Log HTTP requests to stderr")
def main(verbose: bool) -> None:
    """Neocities CLI - Manage the files of your Neocities site."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


@main.command()
@click.option("--username", "-u", prompt=True, help="Site name or account email")
@click.option("--password", "-p", prompt=True, hide_input=True, help="Account password")
def key(username: str, password: str) -> None:
    """Obtain the API key for your account."""
    try:
        token = asyncio.run(get_token(username, password))
    except (NeocitiesError, httpx.HTTPError) as e:
        _fail(f"Could not obtain API key: {e}")
    click.echo("Your neocities API key (token) is:")
    click.echo(token)


@main.command()
@click.argument("sitename", required=False)
@token_option
def info(sitename: str | None, token: str | None) -> None:
    """Show information about a site.

    SITENAME: Site to look up (default: your own site)
    """
    token = _require_token(token)

    async def run() -> None:
        async with NeocitiesAPI(token) as api:
            site = await api.info(sitename)
        click.echo(click.style(site.sitename, bold=True))
        if site.domain:
            click.echo(f"  domain:       {site.domain}")
        click.echo(f"  hits:         {site.hits}")
        click.echo(f"  views:        {site.views}")
        if site.tags:
            click.echo(f"  tags:         {', '.join(site.tags)}")
        click.echo(f"  created:      {site.created_at.isoformat()}")
        if site.last_updated is not None:
            click.echo(f"  last updated: {site.last_updated.isoformat()}")

    try:
        asyncio.run(run())
    except (NeocitiesError, httpx.HTTPError) as e:
        _fail(f"Error: {e}")


@main.command("ls")
@click.argument("path", required=False)
@token_option
def list_files(path: str | None, token: str | None) -> None:
    """List files on your site.

    PATH: Directory to list (default: the whole site)

    Examples:

        neocities ls

        neocities ls images
    """
    token = _require_token(token)

    async def run() -> None:
        async with NeocitiesAPI(token) as api:
            entries = await api.list(path)
        if not entries:
            click.echo("(no files)")
            return
        for entry in entries:
            if isinstance(entry, DirectoryEntry):
                click.echo(click.style(f"  {entry.path}/", fg="blue"))
            else:
                click.echo(f"  {entry.path}  ({_format_size(entry.size)})")

    try:
        asyncio.run(run())
    except (NeocitiesError, httpx.HTTPError) as e:
        _fail(f"Error: {e}")


@main.command()
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--dest",
    "-d",
    default="",
    help="Directory on the site to upload into (default: site root)",
)
@token_option
def upload(files: tuple[Path, ...], dest: str, token: str | None) -> None:
    """Upload local files to your site.

    FILES: One or more local files to upload.

    Examples:

        neocities upload index.html style.css

        neocities upload photo.jpg --dest images
    """
    token = _require_token(token)
    prefix = dest.strip("/")
    uploads = [
        UploadableFile.from_source(f"{prefix}/{file.name}" if prefix else file.name, file)
        for file in files
    ]

    async def run() -> None:
        async with NeocitiesAPI(token) as api:
            result = await api.upload(uploads)
        for item in uploads:
            click.echo(click.style("✓ ", fg="green") + f"{item.source} -> {item.upload_path}")
        click.echo(click.style(result.message, fg="green"))

    try:
        asyncio.run(run())
    except (NeocitiesError, httpx.HTTPError) as e:
        _fail(f"Upload failed: {e}")


@main.command("rm")
@click.argument("paths", nargs=-1, required=True)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@token_option
def delete(paths: tuple[str, ...], yes: bool, token: str | None) -> None:
    """Delete files or directories from your site.

    PATHS: One or more site paths to delete.
    """
    token = _require_token(token)
    if not yes and not click.confirm(f"Delete {len(paths)} path(s) from your site?"):
        click.echo("Aborted.")
        return

    async def run() -> None:
        async with NeocitiesAPI(token) as api:
            result = await api.delete(list(paths))
        click.echo(click.style(result.message, fg="green"))

    try:
        asyncio.run(run())
    except (NeocitiesError, httpx.HTTPError) as e:
        _fail(f"Delete failed: {e}")


def _format_size(size_bytes: int) -> str:
    """Format file size in human-readable form."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}" if unit != "B" else f"{size_bytes} {unit}"
        size_bytes /= 1024  # type: ignore[assignment]
    return f"{size_bytes:.1f} TB"


if __name__ == "__main__":
    main()
