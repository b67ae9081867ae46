"""One-shot operations that render a whole result into a single string."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .cursor import StatementCursor
from .errors import OperationFailedError, _wrap_native_call
from .serializer import Serializer
from .uri import UriLike

if TYPE_CHECKING:
    from .model import Model
    from .query import Query

logger = logging.getLogger(__name__)


def execute_to_string(query: "Query", model: "Model", format_name: str) -> str:
    """Execute ``query`` on ``model`` and render the full result as ``format_name``.

    Boolean and bindings results use the engine's results formatter (for
    example ``"json"`` or ``"xml"``). Graph results are fed to a serializer
    of that name (for example ``"ntriples"`` or ``"turtle"``).

    Raises:
        OperationFailedError: If the result shape is unrecognised or the
            engine cannot render it
    """
    results = model.execute(query)
    try:
        if results.is_boolean() or results.is_bindings():
            logger.debug("formatting %s results as %s", "boolean" if results.is_boolean() else "bindings", format_name)
            return results.to_string(format_name, query.base_uri)
        if results.is_graph():
            env = model._env
            stream_ptr = _wrap_native_call(env.engine.query_results_as_stream, results._assert_live())
            if stream_ptr is None:
                raise results._failed("graph results have no statement stream")
            cursor = StatementCursor(env, stream_ptr)
            try:
                with Serializer(env, format_name) as serializer:
                    return serializer._serialize_stream(stream_ptr, query.base_uri)
            finally:
                cursor.release()
        raise OperationFailedError("query results have an unrecognised shape", model._env.last_error)
    finally:
        results.release()


def serialize_to_string(serializer: Serializer, model: "Model", base_uri: Optional[UriLike] = None) -> str:
    """Serialize all of ``model`` with ``serializer``."""
    return serializer.serialize_model_to_string(model, base_uri)
