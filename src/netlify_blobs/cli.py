"""
Netlify Blobs CLI

Thin commands over the store API:
- get: Print or save the value of an entry
- metadata: Show the etag and metadata of an entry
- set: Write an entry from an argument or a file
- delete: Delete an entry
"""
from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Optional

import typer

from .cli_context import CLIContext
from .operations import BlobNotFoundError, run_and_exit

app = typer.Typer(name="netlify-blobs", help="Netlify Blobs CLI")


@app.callback()
def main(
    ctx: typer.Context,
    site_id: Optional[str] = typer.Option(None, "--site-id", envvar="NETLIFY_SITE_ID", help="Site ID"),
    token: Optional[str] = typer.Option(None, "--token", envvar="NETLIFY_AUTH_TOKEN", help="Access token"),
    edge_url: Optional[str] = typer.Option(None, "--edge-url", help="Edge endpoint; enables edge mode"),
) -> None:
    """Access Netlify Blobs stores from the command line."""
    # Tests may inject a prepared context through CliRunner.invoke(obj=...)
    if ctx.obj is None:
        ctx.obj = CLIContext.from_env(site_id=site_id, token=token, edge_url=edge_url)


def _parse_metadata(raw: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Parse the --metadata option.

    Raises:
        ValueError: If the value is not a JSON object
    """
    if raw is None:
        return None
    value = json.loads(raw)
    if not isinstance(value, dict):
        raise ValueError("--metadata must be a JSON object")
    return value


@app.command()
def get(
    ctx: typer.Context,
    store_name: str = typer.Argument(..., metavar="STORE", help="Store name"),
    key: str = typer.Argument(..., help="Blob key"),
    deploy_id: Optional[str] = typer.Option(None, "--deploy-id", help="Read from a deploy store"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the raw value to this file"),
    as_json: bool = typer.Option(False, "--json", help="Parse the value as JSON and pretty-print it"),
) -> None:
    """Print or save the value of an entry."""
    context: CLIContext = ctx.obj

    async def _get() -> Any:
        body_type = "bytes" if output else "json" if as_json else "text"
        async with context.store(store_name, deploy_id=deploy_id) as store:
            return await store.get(key, type=body_type)

    def _run() -> None:
        value = asyncio.run(_get())
        if value is None:
            raise BlobNotFoundError(store_name, key)
        if output:
            output.write_bytes(value)
            typer.echo(f"Wrote {len(value)} bytes to {output}")
        elif as_json:
            typer.echo(json.dumps(value, indent=2))
        else:
            typer.echo(value)

    run_and_exit(_run)


@app.command()
def metadata(
    ctx: typer.Context,
    store_name: str = typer.Argument(..., metavar="STORE", help="Store name"),
    key: str = typer.Argument(..., help="Blob key"),
    deploy_id: Optional[str] = typer.Option(None, "--deploy-id", help="Read from a deploy store"),
) -> None:
    """Show the etag and metadata of an entry."""
    context: CLIContext = ctx.obj

    async def _metadata():
        async with context.store(store_name, deploy_id=deploy_id) as store:
            return await store.get_metadata(key)

    def _run() -> None:
        result = asyncio.run(_metadata())
        if result is None:
            raise BlobNotFoundError(store_name, key)
        typer.echo(json.dumps({"etag": result.etag, "metadata": result.metadata}, indent=2))

    run_and_exit(_run)


@app.command("set")
def set_(
    ctx: typer.Context,
    store_name: str = typer.Argument(..., metavar="STORE", help="Store name"),
    key: str = typer.Argument(..., help="Blob key"),
    value: Optional[str] = typer.Argument(None, help="Value to store as text"),
    input_file: Optional[Path] = typer.Option(None, "--input", "-i", help="Read the value from this file"),
    metadata_json: Optional[str] = typer.Option(None, "--metadata", help="Metadata as a JSON object"),
    only_if_new: bool = typer.Option(False, "--only-if-new", help="Fail if the key already has an entry"),
    only_if_match: Optional[str] = typer.Option(None, "--only-if-match", help="Write only if the etag matches"),
    deploy_id: Optional[str] = typer.Option(None, "--deploy-id", help="Write to a deploy store"),
) -> None:
    """Write an entry from an argument or a file."""
    context: CLIContext = ctx.obj

    async def _set(data):
        async with context.store(store_name, deploy_id=deploy_id) as store:
            return await store.set(
                key,
                data,
                metadata=_parse_metadata(metadata_json),
                only_if_new=only_if_new or None,
                only_if_match=only_if_match,
            )

    def _run() -> None:
        if (value is None) == (input_file is None):
            raise ValueError("Provide exactly one of VALUE or --input")
        data = input_file.read_bytes() if input_file else value

        result = asyncio.run(_set(data))
        if not result.modified:
            typer.echo(f"Not written: the condition on '{key}' was not met")
            return
        typer.echo(f"Stored '{key}' in '{store_name}'")
        if result.etag:
            typer.echo(f"ETag: {result.etag}")

    run_and_exit(_run)


@app.command()
def delete(
    ctx: typer.Context,
    store_name: str = typer.Argument(..., metavar="STORE", help="Store name"),
    key: str = typer.Argument(..., help="Blob key"),
    deploy_id: Optional[str] = typer.Option(None, "--deploy-id", help="Delete from a deploy store"),
) -> None:
    """Delete an entry."""
    context: CLIContext = ctx.obj

    async def _delete() -> None:
        async with context.store(store_name, deploy_id=deploy_id) as store:
            await store.delete(key)

    def _run() -> None:
        asyncio.run(_delete())
        typer.echo(f"Deleted '{key}' from '{store_name}'")

    run_and_exit(_run)


if __name__ == "__main__":
    app()
