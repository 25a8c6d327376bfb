"""Simple CLI entrypoint for arxiv-importer.

Imports one paper by arXiv link or id, or lists the PDFs already in a folder.
"""
import argparse
import asyncio
import json
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from .identifiers import parse_arxiv_input
from .importer import import_arxiv_paper
from .library import DEFAULT_MAX_DEPTH, LibraryError, scan_directory_for_pdfs
from .models import SkipReason

console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


async def _import_mode(link: str, output: str, dry_run: bool, as_json: bool) -> int:
    if dry_run:
        identity = parse_arxiv_input(link)
        if identity is None:
            console.print(f"[red]Not an arXiv link or id:[/red] {link}")
            return 1
        version = f"v{identity.version}" if identity.version is not None else "latest version"
        console.print(f"[yellow]Dry run:[/yellow] would import {identity.base_id} ({version}) into {output}")
        return 0

    outcome = await import_arxiv_paper(link, output, "skip")
    if as_json:
        console.print_json(json.dumps(outcome.model_dump(mode="json")))
    elif outcome.downloaded:
        console.print(f"[green]Downloaded:[/green] {outcome.paper.title}")
        console.print(f"  pdf: {outcome.pdf_path} ({outcome.pdf_size} bytes)")
        console.print(f"  metadata: {outcome.metadata_path}")
    else:
        title = f" ({outcome.paper.title})" if outcome.paper else ""
        console.print(f"[yellow]Skipped:[/yellow] {outcome.reason.value}{title}")
        if outcome.pdf_path:
            console.print(f"  existing pdf: {outcome.pdf_path}")

    if outcome.downloaded or outcome.reason == SkipReason.FILE_EXISTS:
        return 0
    return 1


def _scan_mode(directory: str, recursive: bool, max_depth: int, as_json: bool) -> int:
    try:
        result = scan_directory_for_pdfs(directory, recursive=recursive, max_depth=max_depth)
    except LibraryError as exc:
        console.print(f"[red]Scan failed:[/red] {exc}")
        return 1

    if as_json:
        console.print_json(json.dumps(result.model_dump(mode="json")))
        return 0

    console.print(f"[green]Found {result.total_count} PDFs in[/green] {directory}")
    for f in result.files:
        console.print(f"- {f.name} ({f.size} bytes)")
    for err in result.errors:
        console.print(f"[red]{err}[/red]")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(prog="arxiv-importer")
    parser.add_argument("--dry-run", action="store_true", help="Show actions without downloading")
    parser.add_argument("--id", help="arXiv id or URL (e.g., 1706.03762 or https://arxiv.org/abs/1706.03762v7)")
    parser.add_argument("--scan", help="List PDFs in a directory (mutually exclusive with --id)")
    parser.add_argument("--recursive", action="store_true", help="Scan subdirectories too")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH, help="Max depth for recursive scans")
    parser.add_argument("--output", default="downloads", help="Output directory")
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.scan and args.id:
        console.print("[red]Specify either --scan or --id (not both).[/red]")
        sys.exit(2)

    if not args.scan and not args.id:
        console.print("[red]No arXiv id provided. Use --id to specify one.[/red]")
        sys.exit(2)

    _configure_logging(args.verbose)

    if args.scan:
        exit_code = _scan_mode(args.scan, args.recursive, args.max_depth, args.json)
    else:
        exit_code = asyncio.run(_import_mode(args.id, args.output, args.dry_run, args.json))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
