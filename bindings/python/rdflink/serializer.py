"""Serializer handles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .engines.base import Ptr
from .errors import AllocationError, _wrap_native_call
from .handle import Handle
from .uri import Uri, UriLike, _coerce_uri

if TYPE_CHECKING:
    from .model import Model
    from .world import Environment


class Serializer(Handle):
    """Engine serializer selected by format name, MIME type or type URI."""

    _kind = "serializer"

    def __init__(
        self,
        env: "Environment",
        name: Optional[str] = None,
        mime_type: Optional[str] = None,
        type_uri: Optional[Uri] = None,
    ) -> None:
        world = env._assert_open()
        type_ptr = type_uri._assert_live() if type_uri is not None else None
        ptr = _wrap_native_call(env.engine.new_serializer, world, name, mime_type, type_ptr)
        if ptr is None:
            raise AllocationError(f"unable to create serializer {name or mime_type!r}", env.last_error)
        super().__init__(env, ptr, owner=env)
        self.name = name
        self.mime_type = mime_type

    def set_namespace(self, uri: UriLike, prefix: str) -> None:
        """Declare ``prefix`` for ``uri`` in serialized output."""
        ptr = self._assert_live()
        namespace, temporary = _coerce_uri(self._env, uri)
        try:
            status = _wrap_native_call(self._engine.serializer_set_namespace, ptr, namespace._assert_live(), prefix)
        finally:
            if temporary:
                namespace.release()
        if status != 0:
            raise self._failed(f"unable to declare namespace prefix {prefix!r}")

    def serialize_model_to_string(self, model: "Model", base_uri: Optional[UriLike] = None) -> str:
        ptr = self._assert_live()
        base, temporary = _coerce_uri(self._env, base_uri)
        try:
            base_ptr = base._assert_live() if base is not None else None
            text = _wrap_native_call(
                self._engine.serializer_serialize_model_to_string, ptr, base_ptr, model._assert_live()
            )
        finally:
            if temporary and base is not None:
                base.release()
        if text is None:
            raise self._failed("unable to serialize model")
        return text

    def _serialize_stream(self, stream_ptr: Ptr, base_uri: Optional[UriLike] = None) -> str:
        ptr = self._assert_live()
        base, temporary = _coerce_uri(self._env, base_uri)
        try:
            base_ptr = base._assert_live() if base is not None else None
            text = _wrap_native_call(self._engine.serializer_serialize_stream_to_string, ptr, base_ptr, stream_ptr)
        finally:
            if temporary and base is not None:
                base.release()
        if text is None:
            raise self._failed("unable to serialize statements")
        return text

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_serializer(ptr)
