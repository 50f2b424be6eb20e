"""Tool for dumping a workspace's pages to the console."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from candy_values.config import CandyConfig
from candy_values.errors import CandyError
from candy_values.parsing import parse_workspace
from candy_values.serialize import to_json, to_string
from candy_values.size import get_data_zone_size, get_value_size
from candy_values.workspace import (
    AddressedChunkArray,
    Workspace,
    get_addressed_chunk_array_size,
    get_workspace_chunk,
    iter_workspace_pages,
)

logger = logging.getLogger(__name__)


def format_page(page_id: int, page: AddressedChunkArray, as_json: bool = False) -> list[str]:
    """Render one page as lines of text."""
    render = to_json if as_json else to_string
    lines = [f"page {page_id} ({len(page)} chunks, {get_addressed_chunk_array_size(page)} bytes)"]
    for zone_index, chunk_index, value in page:
        lines.append(f"  [{zone_index}:{chunk_index}] {value.kind} {render(value)}")
    return lines


def dump_pages(workspace: Workspace, max_page_size: int, as_json: bool = False) -> None:
    """Print every page of the workspace."""
    for page_id, page in enumerate(iter_workspace_pages(workspace, max_page_size)):
        for line in format_page(page_id, page, as_json):
            print(line)


def dump_page(workspace: Workspace, page_id: int, max_page_size: int, as_json: bool = False) -> None:
    """Print a single page and whether more pages follow it."""
    chunking, page = get_workspace_chunk(workspace, page_id, max_page_size)
    for line in format_page(page_id, page, as_json):
        print(line)
    print(chunking.value)


def dump_sizes(workspace: Workspace) -> None:
    """Print the estimated size of every chunk and zone."""
    for zone_index, zone in enumerate(workspace):
        print(f"zone {zone_index}: {get_data_zone_size(zone)} bytes")
        for chunk_index, value in enumerate(zone):
            print(f"  [{zone_index}:{chunk_index}] {value.kind} {get_value_size(value)}")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Dump the pages of a workspace written in value literal notation"
    )
    parser.add_argument(
        "file",
        type=Path,
        help="Path to a file holding 'zone { ... }' blocks",
    )
    parser.add_argument(
        "-m", "--max-page-size",
        type=int,
        default=None,
        help="Page budget in estimated bytes (default: CANDY_MAX_PAGE_SIZE)",
    )
    parser.add_argument(
        "-p", "--page",
        type=int,
        default=None,
        help="Only show this page",
    )
    parser.add_argument(
        "-j", "--json",
        action="store_true",
        help="Render values as JSON",
    )
    parser.add_argument(
        "-s", "--sizes",
        action="store_true",
        help="Show estimated chunk sizes instead of pages",
    )

    args = parser.parse_args(argv)

    try:
        config = CandyConfig.from_env()
    except CandyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(level=config.log_level)

    if not args.file.exists():
        print(f"Error: File not found: {args.file}", file=sys.stderr)
        return 1

    max_page_size = config.max_page_size if args.max_page_size is None else args.max_page_size

    try:
        workspace = parse_workspace(args.file.read_text())
    except (SyntaxError, CandyError) as e:
        print(f"Error parsing {args.file}: {e}", file=sys.stderr)
        return 1
    logger.debug("parsed %d zones from %s", len(workspace), args.file)

    try:
        if args.sizes:
            dump_sizes(workspace)
        elif args.page is not None:
            dump_page(workspace, args.page, max_page_size, args.json)
        else:
            dump_pages(workspace, max_page_size, args.json)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
