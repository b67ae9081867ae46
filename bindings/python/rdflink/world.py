"""The engine context every other handle is created from."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .config import Settings
from .engines import load_engine
from .engines.base import Engine, Ptr
from .errors import AllocationError, UseAfterRelease, _wrap_native_call
from .handle import Handle
from .node import Node
from .uri import UriLike, _coerce_uri

logger = logging.getLogger(__name__)


class Environment(Handle):
    """Engine world: open it before creating handles, close it last.

    Closing releases every live handle created from the environment, newest
    first. A closed environment cannot be reopened.

    Example:
        >>> with Environment(engine="rdflib") as env:
        ...     storage = Storage(env, "memory")
    """

    _kind = "environment"

    def __init__(
        self,
        engine: Optional[str] = None,
        library_path: Optional[str] = None,
        buffer_size: Optional[int] = None,
        *,
        settings: Optional[Settings] = None,
    ) -> None:
        base = settings if settings is not None else Settings.from_env()
        self.settings = base.with_options(engine=engine, library_path=library_path, buffer_size=buffer_size)
        self._engine_impl = load_engine(self.settings)
        ptr = _wrap_native_call(self._engine_impl.new_world)
        if ptr is None:
            raise AllocationError("unable to create environment")
        self._opened = False
        super().__init__(self, ptr)

    @property
    def engine(self) -> Engine:
        return self._engine_impl

    @property
    def buffer_size(self) -> int:
        return self.settings.buffer_size

    def open(self) -> "Environment":
        """Open the world. Opening an open environment is a no-op."""
        with self._lock:
            if self._released:
                raise UseAfterRelease("environment is closed and cannot be reopened")
            if self._opened:
                return self
            _wrap_native_call(self._engine_impl.world_open, self._ptr)
            self._opened = True
        logger.debug("opened %s environment", self._engine_impl.name)
        return self

    def close(self) -> None:
        """Release every child handle, then the world. Safe to call twice."""
        self.release()

    @property
    def is_open(self) -> bool:
        return self._opened and not self._released

    def _assert_open(self) -> Ptr:
        """Raises UseAfterRelease unless the environment is open."""
        if not self.is_open:
            raise UseAfterRelease("environment is not open")
        return self._ptr

    @property
    def last_error(self) -> Optional[str]:
        """Most recent warning or error the engine logged, if any."""
        ptr = self._ptr
        if ptr is None:
            return None
        return self._engine_impl.world_last_error(ptr)

    def guess_parser_name(self, mime_type: Optional[str] = None, identifier: Optional[str] = None) -> Optional[str]:
        """Ask the engine which parser suits a MIME type or a URI/file name."""
        ptr = self._assert_open()
        return _wrap_native_call(self._engine_impl.parser_guess_name, ptr, mime_type, identifier)

    def set_feature(self, feature: UriLike, value: Node) -> None:
        """Set the world feature named by ``feature``; ``value`` stays owned by the caller."""
        ptr = self._assert_open()
        uri, temporary = _coerce_uri(self, feature)
        try:
            status = _wrap_native_call(
                self._engine_impl.world_set_feature, ptr, uri._assert_live(), value._assert_live()
            )
        finally:
            if temporary:
                uri.release()
        if status != 0:
            raise self._failed(f"unable to set feature {feature}")

    def get_feature(self, feature: UriLike) -> Optional[Node]:
        """Owned node holding the feature value, or None when the feature is unset."""
        ptr = self._assert_open()
        uri, temporary = _coerce_uri(self, feature)
        try:
            value = _wrap_native_call(self._engine_impl.world_get_feature, ptr, uri._assert_live())
        finally:
            if temporary:
                uri.release()
        if value is None:
            return None
        return Node._wrap(self, value)

    def set_digest(self, name: str) -> None:
        """Select the message digest the engine uses, for example ``"MD5"``."""
        status = _wrap_native_call(self._engine_impl.world_set_digest, self._assert_open(), name)
        if status != 0:
            raise self._failed(f"unable to use digest {name!r}")

    def _free(self, ptr: Ptr) -> None:
        self._engine_impl.free_world(ptr)

    def _after_release(self) -> None:
        self._opened = False

    def __enter__(self) -> "Environment":
        return self.open()

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "open" if self.is_open else ("closed" if self._released else "new")
        return f"<Environment engine={self._engine_impl.name} {state}>"
