"""Command-line interface for building and querying Tabix indices"""

import argparse
import dataclasses
import sys
from pathlib import Path

from rich.console import Console

from . import __version__
from .builder import compress_and_index, index_bgzf_file
from .config import PRESETS, TabixConfig, get_preset
from .constants import FLAG_UCSC
from .errors import TabixError
from .io.files import GZIP_MAGIC, default_index_path, save_index
from .logging_config import set_log_level
from .query import TabixReader

# Status messages go to stderr so stdout carries only records
console = Console(stderr=True)


def config_from_args(args) -> TabixConfig:
    """Build the record configuration from a preset plus column overrides

    Args:
        args: Parsed command-line arguments from argparse

    Returns:
        TabixConfig for the file being indexed
    """
    config = get_preset(args.preset)
    overrides = {}
    if args.sequence is not None:
        overrides["seq_col"] = args.sequence
    if args.begin is not None:
        overrides["begin_col"] = args.begin
    if args.end is not None:
        overrides["end_col"] = args.end
    if args.comment is not None:
        overrides["comment_char"] = args.comment
    if args.skip_lines is not None:
        overrides["lines_to_skip"] = args.skip_lines
    if args.zero_based:
        overrides["preset"] = config.preset | FLAG_UCSC
    return dataclasses.replace(config, **overrides) if overrides else config


def _is_gzipped(path: Path) -> bool:
    with open(path, "rb") as f:
        return f.read(len(GZIP_MAGIC)) == GZIP_MAGIC


def index_command(args) -> int:
    """Index a sorted file, compressing it first when it is plain text

    Args:
        args: Parsed command-line arguments from argparse

    Returns:
        Exit code: 0 for success, 1 for error
    """
    path = Path(args.file)
    if not path.exists():
        console.print(f"[red]Error:[/red] File does not exist: {path}")
        return 1

    try:
        config = config_from_args(args)

        if _is_gzipped(path):
            data_path = path
            index_path = default_index_path(data_path)
            if index_path.exists() and not args.force:
                console.print(
                    f"[red]Error:[/red] Index already exists: {index_path} "
                    "(use --force to overwrite)"
                )
                return 1
            console.print(f"[cyan]Indexing:[/cyan] {data_path}")
            index = index_bgzf_file(data_path, config)
        else:
            data_path = path.with_name(path.name + ".gz")
            index_path = default_index_path(data_path)
            if (data_path.exists() or index_path.exists()) and not args.force:
                console.print(
                    f"[red]Error:[/red] Output already exists: {data_path} "
                    "(use --force to overwrite)"
                )
                return 1
            console.print(f"[cyan]Compressing and indexing:[/cyan] {path}")
            with open(path, encoding="utf-8") as lines:
                index = compress_and_index(lines, data_path, config)

        save_index(index, index_path)
    except (TabixError, OSError, ValueError) as e:
        console.print(f"[red]Error during indexing:[/red] {e}")
        return 1

    console.print(
        f"[green]✓[/green] Indexed {len(index):,} sequences: {index_path}"
    )
    return 0


def query_command(args) -> int:
    """Print the records overlapping each region

    Args:
        args: Parsed command-line arguments from argparse

    Returns:
        Exit code: 0 for success, 1 for error
    """
    try:
        with TabixReader(args.file, args.index) as reader:
            if args.print_header:
                for line in reader.read_headers():
                    print(line)
            for region in args.regions:
                cursor = reader.query(region)
                for columns in cursor:
                    print("\t".join(columns))
    except (TabixError, OSError, ValueError) as e:
        console.print(f"[red]Error during query:[/red] {e}")
        return 1
    return 0


def headers_command(args) -> int:
    """Print the header lines of an indexed file

    Args:
        args: Parsed command-line arguments from argparse

    Returns:
        Exit code: 0 for success, 1 for error
    """
    try:
        with TabixReader(args.file, args.index) as reader:
            for line in reader.read_headers():
                print(line)
    except (TabixError, OSError, ValueError) as e:
        console.print(f"[red]Error reading headers:[/red] {e}")
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabixindex",
        description="Build and query Tabix (.tbi) indices of sorted, tab-delimited files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tabixindex index -p bed genes.bed              Compress to genes.bed.gz and index it
  tabixindex index -p vcf calls.vcf.gz           Index an existing BGZF file
  tabixindex query calls.vcf.gz chr1:1,000-2,000 Print records overlapping a region
  tabixindex headers calls.vcf.gz                Print the header lines
        """,
    )
    parser.add_argument(
        "--version", action="version", version=f"tabixindex {__version__}"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v", action="store_true", help="Show debug logging"
    )
    verbosity.add_argument(
        "--quiet", "-q", action="store_true", help="Only log errors"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Build an index")
    index_parser.add_argument("file", help="Sorted plain or BGZF-compressed file")
    index_parser.add_argument(
        "--preset",
        "-p",
        default="gff",
        choices=sorted(PRESETS),
        help="Record format (default: gff)",
    )
    index_parser.add_argument(
        "--sequence", "-s", type=int, help="Column of the sequence name (1-based)"
    )
    index_parser.add_argument(
        "--begin", "-b", type=int, help="Column of the start coordinate"
    )
    index_parser.add_argument("--end", "-e", type=int, help="Column of the end coordinate")
    index_parser.add_argument(
        "--skip-lines", "-S", type=int, help="Number of leading lines to skip"
    )
    index_parser.add_argument("--comment", "-c", help="Comment character")
    index_parser.add_argument(
        "--zero-based",
        "-0",
        action="store_true",
        help="Coordinates are 0-based, half-open (BED-style)",
    )
    index_parser.add_argument(
        "--force", "-f", action="store_true", help="Overwrite existing output"
    )
    index_parser.set_defaults(handler=index_command)

    query_parser = subparsers.add_parser("query", help="Print records in regions")
    query_parser.add_argument("file", help="Indexed BGZF file")
    query_parser.add_argument("regions", nargs="+", help="Regions such as chr1:100-200")
    query_parser.add_argument("--index", "-i", help="Index file (default: FILE.tbi)")
    query_parser.add_argument(
        "--print-header", "-H", action="store_true", help="Print header lines first"
    )
    query_parser.set_defaults(handler=query_command)

    headers_parser = subparsers.add_parser("headers", help="Print header lines")
    headers_parser.add_argument("file", help="Indexed BGZF file")
    headers_parser.add_argument("--index", "-i", help="Index file (default: FILE.tbi)")
    headers_parser.set_defaults(handler=headers_command)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the tabixindex command"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level("DEBUG")
    elif args.quiet:
        set_log_level("ERROR")

    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
