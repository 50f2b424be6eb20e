"""Candy Values - Tagged value model, codecs and workspace paging."""

from candy_values.config import CandyConfig
from candy_values.conversion import to_blob
from candy_values.errors import (
    CandyConfigError,
    CandyError,
    MalformedAddressError,
    NotRepresentableError,
    PropertyError,
    PropertyErrorKind,
    UnsupportedError,
    ValueOverflowError,
)
from candy_values.parsing import parse_value, parse_workspace
from candy_values.properties import (
    Query,
    QueryMode,
    Update,
    UpdateMode,
    UpdateRequest,
    select_properties,
    update_properties,
)
from candy_values.size import get_value_size
from candy_values.stable import StableValue, destabilize, dump_stable, load_stable, stabilize
from candy_values.types import (
    Array,
    Blob,
    Bool,
    Bytes,
    Empty,
    Field,
    Float,
    Floats,
    Int,
    Int8,
    Int16,
    Int32,
    Int64,
    Map,
    Mutability,
    Nat,
    Nat8,
    Nat16,
    Nat32,
    Nat64,
    Nats,
    OpaqueId,
    Optional,
    Record,
    Set,
    Text,
    Value,
    to_value,
)
from candy_values.workspace import (
    AddressedChunk,
    ChunkingType,
    count_addressed_chunks,
    flatten,
    from_addressed_chunks,
    get_data_chunk,
    get_workspace_chunk,
    get_workspace_chunk_size,
    to_addressed_chunk_array,
)

__all__ = [
    # Value model
    "Value",
    "Mutability",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Nat",
    "Nat8",
    "Nat16",
    "Nat32",
    "Nat64",
    "Float",
    "Text",
    "Bool",
    "Blob",
    "Bytes",
    "OpaqueId",
    "Empty",
    "Nats",
    "Floats",
    "Array",
    "Field",
    "Record",
    "Optional",
    "Map",
    "Set",
    "to_value",
    # Encodings and sizes
    "to_blob",
    "get_value_size",
    # Workspaces
    "AddressedChunk",
    "ChunkingType",
    "to_addressed_chunk_array",
    "from_addressed_chunks",
    "count_addressed_chunks",
    "get_data_chunk",
    "flatten",
    "get_workspace_chunk",
    "get_workspace_chunk_size",
    # Stable form
    "StableValue",
    "stabilize",
    "destabilize",
    "dump_stable",
    "load_stable",
    # Properties
    "Query",
    "QueryMode",
    "Update",
    "UpdateMode",
    "UpdateRequest",
    "select_properties",
    "update_properties",
    # Literal notation
    "parse_value",
    "parse_workspace",
    # Configuration and errors
    "CandyConfig",
    "CandyError",
    "CandyConfigError",
    "NotRepresentableError",
    "ValueOverflowError",
    "UnsupportedError",
    "MalformedAddressError",
    "PropertyError",
    "PropertyErrorKind",
]

__version__ = "0.1.0"
