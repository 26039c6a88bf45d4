#!/usr/bin/env python3
"""
Merkle Proofs CLI

Command-line interface for computing Merkle roots and generating and
verifying inclusion proofs over lists of SHA-256 file hashes.
"""

import os
import sys
import json
import logging
from dataclasses import replace
from typing import Optional, List, Dict, Any, Tuple
import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from .config import get_settings
from .constants import NodeEncoding
from .api.proof_service import ProofService, ProofServiceError
from .main import generate_merkle_tree

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)

# Trees wider than this are not drawn
MAX_VISUALIZED_LEAVES = 64


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def load_hashes_file(json_file: str) -> List[str]:
    """
    Read file hashes from a JSON file.

    The file holds either a list of hex strings or an object with a
    "file_hashes" (or "fileHashes") list.
    """
    try:
        with open(json_file, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise click.ClickException(f"Failed to read hashes from {json_file}: {e}")

    if isinstance(data, dict):
        data = data.get("file_hashes", data.get("fileHashes"))
    if not isinstance(data, list) or not all(isinstance(h, str) for h in data):
        raise click.ClickException(
            f"{json_file} must contain a list of hex strings or an object with a 'file_hashes' list"
        )
    return data


def collect_hashes(hashes: Tuple[str, ...], json_file: Optional[str]) -> List[str]:
    """Combine hashes given on the command line with those from --json-file."""
    collected = list(hashes)
    if json_file:
        collected = load_hashes_file(json_file) + collected
    if not collected:
        raise click.ClickException("No file hashes given. Pass them as arguments or with --json-file")
    return collected


def print_result(result: Dict[str, Any], title: str, format_output: str = "table"):
    """Print a service result as JSON or as a table."""
    if format_output == "json":
        console.print_json(json.dumps(result))
        return

    table = Table(title=title)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    for key, value in result.items():
        if isinstance(value, list):
            value = "\n".join(value) if value else "(empty)"
        table.add_row(key.replace("_", " ").title(), str(value))

    console.print(table)


def print_verdict(result: Dict[str, Any], format_output: str):
    if format_output == "json":
        console.print_json(json.dumps(result))
    elif result["is_valid"]:
        console.print(f"[green]✅ {result['message']}[/green]")
    else:
        console.print(f"[red]❌ {result['message']}[/red]")


def make_service(ctx) -> ProofService:
    try:
        return ProofService(ctx.obj["settings"])
    except ValueError as e:
        raise click.ClickException(str(e))


format_option = click.option(
    "--format", "format_output",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
json_file_option = click.option(
    "--json-file", "-f",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file with the file hashes",
)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--encoding",
    type=click.Choice([e.value for e in NodeEncoding]),
    envvar="MERKLE_NODE_ENCODING",
    help="How child hashes are joined before hashing (bytes or legacy hex)",
)
@click.pass_context
def cli(ctx, verbose: bool, encoding: Optional[str]):
    """
    Merkle Proofs CLI - Commit file hashes to a Merkle root and prove inclusion.

    Every hash is 64 lowercase hex characters. Leaf order matters: the same
    hashes in a different order give a different root.
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    try:
        settings = get_settings()
    except ValueError as e:
        raise click.ClickException(str(e))
    if encoding:
        settings = replace(settings, node_encoding=NodeEncoding(encoding))
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = settings


@cli.command("hash")
@click.argument("values", nargs=-1, required=True)
@format_option
@click.pass_context
def hash_cmd(ctx, values: Tuple[str, ...], format_output: str):
    """
    Hash raw values (for example file names) into leaf hashes.

    VALUES: Text values to hash
    """
    service = make_service(ctx)
    results = [service.hash_value(value) for value in values]

    if format_output == "json":
        console.print_json(json.dumps(results))
        return

    table = Table(title="Leaf Hashes")
    table.add_column("Value", style="cyan")
    table.add_column("SHA-256", style="green")
    for result in results:
        table.add_row(result["value"], result["hash"])
    console.print(table)


@cli.command()
@click.argument("hashes", nargs=-1)
@json_file_option
@format_option
@click.pass_context
def root(ctx, hashes: Tuple[str, ...], json_file: Optional[str], format_output: str):
    """
    Compute the Merkle root of file hashes.

    HASHES: File hashes in commitment order
    """
    try:
        result = make_service(ctx).compute_root(collect_hashes(hashes, json_file))
        print_result(result, "Merkle Root", format_output)
    except ProofServiceError as e:
        logger.error(f"Error computing Merkle root: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.argument("leaf_index", type=int)
@click.argument("hashes", nargs=-1)
@json_file_option
@format_option
@click.pass_context
def proof(ctx, leaf_index: int, hashes: Tuple[str, ...], json_file: Optional[str], format_output: str):
    """
    Generate an inclusion proof for one leaf.

    LEAF_INDEX: Position of the leaf to prove

    HASHES: File hashes in commitment order
    """
    try:
        result = make_service(ctx).create_proof(collect_hashes(hashes, json_file), leaf_index=leaf_index)
        print_result(result, "Merkle Proof", format_output)
    except ProofServiceError as e:
        logger.error(f"Error generating proof: {e}")
        raise click.ClickException(str(e))


@cli.command("verify-root")
@click.argument("expected_root")
@click.argument("hashes", nargs=-1)
@json_file_option
@format_option
@click.pass_context
def verify_root(ctx, expected_root: str, hashes: Tuple[str, ...], json_file: Optional[str], format_output: str):
    """
    Verify that file hashes reduce to EXPECTED_ROOT.

    Exits with status 1 when verification fails.
    """
    try:
        result = make_service(ctx).verify_root(collect_hashes(hashes, json_file), expected_root)
    except ProofServiceError as e:
        logger.error(f"Error verifying Merkle root: {e}")
        raise click.ClickException(str(e))

    print_verdict(result, format_output)
    if not result["is_valid"]:
        ctx.exit(1)


@cli.command("verify-proof")
@click.argument("leaf_hash")
@click.argument("merkle_root")
@click.argument("siblings", nargs=-1)
@click.option("--index", "-i", "leaf_index", type=int, help="Leaf index; omit to use the legacy left-biased walk")
@click.option("--leaf-count", type=int, help="Number of leaves in the tree")
@format_option
@click.pass_context
def verify_proof(ctx, leaf_hash: str, merkle_root: str, siblings: Tuple[str, ...],
                 leaf_index: Optional[int], leaf_count: Optional[int], format_output: str):
    """
    Verify that LEAF_HASH is committed to MERKLE_ROOT by the SIBLINGS path.

    Exits with status 1 when verification fails.
    """
    try:
        result = make_service(ctx).verify_proof(
            leaf_hash, list(siblings), merkle_root, leaf_index=leaf_index, leaf_count=leaf_count
        )
    except ProofServiceError as e:
        logger.error(f"Error verifying proof: {e}")
        raise click.ClickException(str(e))

    print_verdict(result, format_output)
    if not result["is_valid"]:
        ctx.exit(1)


@cli.command()
@click.argument("file_name")
@click.argument("file_hash")
@click.argument("hashes", nargs=-1)
@json_file_option
@format_option
@click.pass_context
def record(ctx, file_name: str, file_hash: str, hashes: Tuple[str, ...],
           json_file: Optional[str], format_output: str):
    """
    Build the record for FILE_NAME with hash FILE_HASH.

    HASHES: Optional batch the file was committed with
    """
    file_hashes = list(hashes)
    if json_file:
        file_hashes = load_hashes_file(json_file) + file_hashes
    try:
        result = make_service(ctx).build_record(file_name, file_hash, file_hashes)
        print_result(result, "File Record", format_output)
    except ProofServiceError as e:
        logger.error(f"Error building record: {e}")
        raise click.ClickException(str(e))


@cli.command()
@click.argument("hashes", nargs=-1)
@json_file_option
@click.option("--index", "-i", "leaf_index", type=int, help="Highlight the proof path of this leaf")
@click.pass_context
def visualize(ctx, hashes: Tuple[str, ...], json_file: Optional[str], leaf_index: Optional[int]):
    """Visualize the Merkle tree and, optionally, one leaf's proof path."""
    from .visualize import visualize_merkle_proof

    file_hashes = collect_hashes(hashes, json_file)
    if len(file_hashes) > MAX_VISUALIZED_LEAVES:
        raise click.ClickException(
            f"Refusing to draw {len(file_hashes)} leaves; the limit is {MAX_VISUALIZED_LEAVES}"
        )

    service = make_service(ctx)
    try:
        proof_steps = None
        if leaf_index is not None:
            proof_steps = service.create_proof(file_hashes, leaf_index=leaf_index)["proof"]
        else:
            service.compute_root(file_hashes)
        levels = generate_merkle_tree(file_hashes, service.encoding)
    except ProofServiceError as e:
        raise click.ClickException(str(e))

    visualize_merkle_proof(levels, leaf_index, proof_steps, console=console)


@cli.command()
@click.option("--host", default=None, help="Host to bind to (defaults to MERKLE_API_HOST)")
@click.option("--port", default=None, type=int, help="Port to bind to (defaults to MERKLE_API_PORT)")
@click.option("--dev", is_flag=True, help="Enable development mode with auto-reload")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int], dev: bool):
    """Start the REST API server."""
    settings = ctx.obj["settings"]
    host = host or settings.api_host
    port = port or settings.api_port
    try:
        from .api import rest_api
        from .api.rest_api import run_server

        # The reloader imports the app in a fresh process; it reads the environment
        os.environ["MERKLE_NODE_ENCODING"] = settings.node_encoding.value
        rest_api.proof_service = ProofService(settings)

        console.print(
            Panel(
                f"Starting Merkle Proofs API Server\n\n"
                f"🚀 Server: http://{host}:{port}\n"
                f"📖 Docs: http://{host}:{port}/docs\n"
                f"❤️ Health: http://{host}:{port}/health\n\n"
                f"Press Ctrl+C to stop",
                title="API Server",
                border_style="green",
            )
        )

        run_server(host=host, port=port, dev=dev)

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Server error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    cli()
