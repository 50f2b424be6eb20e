"""Workspace paging.

A Workspace is a list of zones and each zone a list of chunks (values).
Inside a Workspace the (zone, chunk) address of a value is its position;
an AddressedChunkArray spells the address out next to every value so the
workspace can be cut into pages, shipped in any order and reassembled.

Pages are built by a single greedy pass in zone-major, chunk-minor order:
a page is closed as soon as the next value would push its estimated size
over the limit, and that value opens the following page. A value larger
than the limit therefore gets a page of its own; values are never split
or reordered.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, NamedTuple

from candy_values.conversion import nat_to_blob, to_blob
from candy_values.errors import MalformedAddressError
from candy_values.size import base256_digits, get_value_size
from candy_values.types import NONE, Bytes, Value

logger = logging.getLogger(__name__)

DataChunk = Value
DataZone = list[DataChunk]
Workspace = list[DataZone]


class AddressedChunk(NamedTuple):
    """A value together with its (zone, chunk) address."""

    zone_index: int
    chunk_index: int
    value: Value


AddressedChunkArray = list[AddressedChunk]


class ChunkingType(Enum):
    """Whether a page is the last one of its workspace."""

    EOF = "eof"
    CHUNK = "chunk"


def _check_index(index: object, label: str) -> int:
    """Validate an address component coming from outside."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise MalformedAddressError(f"{label} must be an integer, got {index!r}")
    if index < 0:
        raise MalformedAddressError(f"{label} must be non-negative, got {index}")
    return index


def _check_non_negative(number: int, label: str) -> None:
    if number < 0:
        raise ValueError(f"{label} must be non-negative, got {number}")


def count_addressed_chunks(workspace: Workspace) -> int:
    """Total number of chunks across all zones."""
    return sum(len(zone) for zone in workspace)


def to_addressed_chunk_array(workspace: Workspace) -> AddressedChunkArray:
    """Flatten a workspace into addressed chunks, zone-major, chunk-minor."""
    return [
        AddressedChunk(zone_index, chunk_index, chunk)
        for zone_index, zone in enumerate(workspace)
        for chunk_index, chunk in enumerate(zone)
    ]


def from_addressed_chunks(chunks: Iterable[tuple[int, int, Value]]) -> Workspace:
    """Rebuild a dense workspace from addressed chunks.

    The input may be unsorted and sparse. The result has max(zone_index) + 1
    zones; positions no chunk covers hold the empty optional. When two chunks
    share an address the later one wins.

    Raises:
        MalformedAddressError: If an address is negative or not an integer.
    """
    addressed: list[tuple[int, int, Value]] = []
    for zone_index, chunk_index, value in chunks:
        if not isinstance(value, Value):
            raise TypeError(f"Chunk value must be a Value, got {type(value).__name__}")
        addressed.append(
            (_check_index(zone_index, "zone_index"), _check_index(chunk_index, "chunk_index"), value)
        )

    zone_count = max((zone_index for zone_index, _, _ in addressed), default=-1) + 1
    workspace: Workspace = [[] for _ in range(zone_count)]
    for zone_index, chunk_index, value in addressed:
        zone = workspace[zone_index]
        if chunk_index >= len(zone):
            zone.extend(NONE for _ in range(chunk_index + 1 - len(zone)))
        zone[chunk_index] = value
    return workspace


def get_data_chunk(chunks: Iterable[AddressedChunk], zone_index: int, chunk_index: int) -> Value:
    """Look up a chunk by address; a miss returns the empty optional."""
    for chunk in chunks:
        if chunk[0] == zone_index and chunk[1] == chunk_index:
            return chunk[2]
    return NONE


def flatten(chunks: Iterable[AddressedChunk]) -> bytes:
    """Concatenate blob(zone) + blob(chunk) + blob(value) for every chunk.

    The output has no length delimiters and cannot be parsed back without
    knowing the chunk boundaries.

    Raises:
        UnsupportedError: If a chunk value has no blob form.
    """
    return b"".join(
        nat_to_blob(zone_index) + nat_to_blob(chunk_index) + to_blob(value)
        for zone_index, chunk_index, value in chunks
    )


def get_addressed_chunk_array_size(chunks: Iterable[AddressedChunk]) -> int:
    """Estimated size of an addressed chunk array, addresses included."""
    return sum(
        base256_digits(zone_index) + base256_digits(chunk_index) + get_value_size(value)
        for zone_index, chunk_index, value in chunks
    )


def to_bytes_buffer(zone: DataZone) -> list[bytes]:
    """Blob of every chunk in a zone."""
    return [to_blob(chunk) for chunk in zone]


def from_buffer(buffer: Iterable[bytes]) -> DataZone:
    """Wrap every byte string as a frozen Bytes chunk."""
    return [Bytes.frozen(data) for data in buffer]


def iter_workspace_pages(workspace: Workspace, max_page_size: int) -> Iterator[AddressedChunkArray]:
    """Yield the pages of a workspace in order.

    Always yields at least one page; an empty workspace is one empty page.
    """
    _check_non_negative(max_page_size, "max_page_size")
    page: AddressedChunkArray = []
    page_bytes = 0
    page_id = 0
    for zone_index, zone in enumerate(workspace):
        for chunk_index, chunk in enumerate(zone):
            size = get_value_size(chunk)
            if page and page_bytes + size > max_page_size:
                logger.debug(
                    "closing page %d: %d chunks, %d bytes (next chunk %d/%d needs %d)",
                    page_id, len(page), page_bytes, zone_index, chunk_index, size,
                )
                yield page
                page = []
                page_bytes = 0
                page_id += 1
            page.append(AddressedChunk(zone_index, chunk_index, chunk))
            page_bytes += size
    yield page


def get_workspace_chunk_size(workspace: Workspace, max_page_size: int) -> int:
    """Number of pages the workspace splits into for the given page size."""
    return sum(1 for _ in iter_workspace_pages(workspace, max_page_size))


def get_workspace_chunk(
    workspace: Workspace, page_id: int, max_page_size: int
) -> tuple[ChunkingType, AddressedChunkArray]:
    """Return one page and whether more pages follow it.

    A page_id past the last page yields (EOF, []).
    """
    _check_non_negative(page_id, "page_id")
    pages = iter_workspace_pages(workspace, max_page_size)
    for index, page in enumerate(pages):
        if index == page_id:
            has_more = next(pages, None) is not None
            return (ChunkingType.CHUNK if has_more else ChunkingType.EOF), page
    logger.debug("page %d requested past the last page", page_id)
    return ChunkingType.EOF, []
