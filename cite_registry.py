#!/usr/bin/env python3
"""
CiteRegistry - Load ISI bibliography records, cite them, print reference lists.

Usage:
    python cite_registry.py "path/to/references.isi" [options]

Options:
    --cite, -c       Citation key to mark as cited (repeatable)
    --cite-all       Mark every reference as cited
    --format, -f     journal (default), xml or keys
    --output, -o     Output file path (default: stdout)
    --strict         Abort on records that yield no citation key
    --verbose, -v    Enable detailed logging
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from loguru import logger

from citeregistry.config import config
from citeregistry.exceptions import CitationRegistryError
from citeregistry.isi_handler import load_file
from citeregistry.isi_record import year
from citeregistry.journal_formatter import JournalFormatter
from citeregistry.logging_setup import init_from_config
from citeregistry.registry import CitationRegistry
from citeregistry.xml_exporter import XMLExporter

console = Console(stderr=True)

FORMATS = ("journal", "xml", "keys")


def build_keys_table(registry: CitationRegistry) -> Table:
    """Overview table of all references in the registry."""
    table = Table(title="References")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Key", style="cyan")
    table.add_column("Year")
    table.add_column("Cited")
    for ref in registry:
        table.add_row(
            str(ref.handle),
            ref.citation_key,
            year(ref.record),
            "[green]yes[/green]" if ref.cited else "no",
        )
    return table


def cite_keys(registry: CitationRegistry, keys: List[str]) -> List[str]:
    """Cite references by key, returning the keys that are unknown."""
    unknown = []
    for key in keys:
        try:
            registry.cite(registry.handle_for_key(key))
        except KeyError:
            unknown.append(key)
    return unknown


def render(registry: CitationRegistry, fmt: str) -> str:
    if fmt == "xml":
        return XMLExporter().export_document(registry)
    return JournalFormatter().format_cited(registry)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Print cited references from an ISI bibliography file"
    )

    parser.add_argument("input_file", help="Path to ISI tagged file")
    parser.add_argument("--cite", "-c", action="append", default=[], metavar="KEY",
                        help="Citation key to mark as cited")
    parser.add_argument("--cite-all", action="store_true", help="Cite every reference")
    parser.add_argument("--format", "-f", choices=FORMATS, default="journal",
                        help="Output format")
    parser.add_argument("--output", "-o", help="Output file path")
    parser.add_argument("--strict", action="store_true",
                        help="Fail on records without a usable citation key")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    init_from_config(verbose=args.verbose)
    logger.debug(f"Configuration: {config.to_dict()}")

    if not Path(args.input_file).exists():
        console.print(f"[red]Error: File not found: {args.input_file}[/red]")
        return 1

    try:
        registry, result = load_file(args.input_file, strict=args.strict)
    except CitationRegistryError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1

    for entry, error in result.skipped:
        console.print(f"[yellow]Skipped record: {error.message}[/yellow]")

    if args.cite_all:
        for ref in registry:
            registry.cite(ref.handle)
    unknown = cite_keys(registry, args.cite)
    for key in unknown:
        console.print(f"[red]Unknown citation key: {key}[/red]")

    if args.format == "keys":
        Console(file=sys.stdout).print(build_keys_table(registry))
        return 1 if unknown else 0

    content = render(registry, args.format)
    if args.output:
        Path(args.output).write_text(content, encoding='utf-8')
        console.print(f"[green]✓ Wrote {args.format} output to {args.output}[/green]")
    else:
        sys.stdout.write(content)

    return 1 if unknown else 0


if __name__ == "__main__":
    sys.exit(main())
