"""Python bindings for the Redland RDF library."""

from .config import Settings
from .cursor import BindingsCursor, Cursor, NodeCursor, StatementCursor
from .errors import (
    # Error types
    ErrorCode,
    RDFError,
    AllocationError,
    OperationFailedError,
    UseAfterRelease,
    StreamFaultError,
    wrap_native_error,
)
from .formatted import execute_to_string, serialize_to_string
from .model import Model
from .node import Node, NodeKind
from .parser import Parser
from .query import NameNodePair, Query, QueryResultItem, QueryResults
from .serializer import Serializer
from .statement import ALL_PARTS, OBJECT, PREDICATE, SUBJECT, Statement
from .storage import Storage
from .stream import Channel, Stream, StreamState, open_stream
from .uri import Uri
from .world import Environment

__version__ = "0.1.0"

__all__ = [
    "version",
    "Settings",
    "Environment",
    "Uri",
    "Node",
    "NodeKind",
    "Statement",
    "SUBJECT",
    "PREDICATE",
    "OBJECT",
    "ALL_PARTS",
    "Storage",
    "Model",
    "Parser",
    "Serializer",
    "Query",
    "QueryResults",
    "QueryResultItem",
    "NameNodePair",
    "Cursor",
    "StatementCursor",
    "NodeCursor",
    "BindingsCursor",
    "Channel",
    "Stream",
    "StreamState",
    "open_stream",
    "execute_to_string",
    "serialize_to_string",
    # Error types
    "ErrorCode",
    "RDFError",
    "AllocationError",
    "OperationFailedError",
    "UseAfterRelease",
    "StreamFaultError",
    "wrap_native_error",
]


def version() -> str:
    """Return the bindings version string."""
    return __version__
