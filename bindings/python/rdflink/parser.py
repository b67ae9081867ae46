"""Parser handles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .engines.base import Ptr
from .errors import AllocationError, _wrap_native_call
from .handle import Handle
from .uri import UriLike, _coerce_uri

if TYPE_CHECKING:
    from .model import Model
    from .world import Environment


class Parser(Handle):
    """Engine parser selected by name (``"rdfxml"``, ``"turtle"``...) or MIME type."""

    _kind = "parser"

    def __init__(self, env: "Environment", name: Optional[str] = None, mime_type: Optional[str] = None) -> None:
        world = env._assert_open()
        ptr = _wrap_native_call(env.engine.new_parser, world, name, mime_type)
        if ptr is None:
            raise AllocationError(f"unable to create parser {name or mime_type!r}", env.last_error)
        super().__init__(env, ptr, owner=env)
        self.name = name
        self.mime_type = mime_type

    def parse_into_model(self, uri: UriLike, base_uri: Optional[UriLike], model: "Model") -> None:
        """Parse the document at ``uri`` into ``model``."""
        ptr = self._assert_live()
        source, source_temporary = _coerce_uri(self._env, uri)
        base, base_temporary = _coerce_uri(self._env, base_uri)
        try:
            base_ptr = base._assert_live() if base is not None else None
            status = _wrap_native_call(
                self._engine.parser_parse_into_model, ptr, source._assert_live(), base_ptr, model._assert_live()
            )
        finally:
            if source_temporary:
                source.release()
            if base_temporary and base is not None:
                base.release()
        if status != 0:
            raise self._failed(f"unable to parse {uri}")

    def parse_string_into_model(self, text: str, base_uri: Optional[UriLike], model: "Model") -> None:
        ptr = self._assert_live()
        base, temporary = _coerce_uri(self._env, base_uri)
        try:
            base_ptr = base._assert_live() if base is not None else None
            status = _wrap_native_call(
                self._engine.parser_parse_string_into_model, ptr, text, base_ptr, model._assert_live()
            )
        finally:
            if temporary and base is not None:
                base.release()
        if status != 0:
            raise self._failed("unable to parse string")

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_parser(ptr)
