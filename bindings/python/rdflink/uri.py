"""URI handles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple, Union

from .engines.base import Ptr
from .errors import AllocationError, _wrap_native_call
from .handle import Handle

if TYPE_CHECKING:
    from .world import Environment


class Uri(Handle):
    """An absolute or relative identifier owned by the engine."""

    _kind = "uri"

    def __init__(self, env: "Environment", text: str) -> None:
        world = env._assert_open()
        ptr = _wrap_native_call(env.engine.new_uri, world, text)
        if ptr is None:
            raise AllocationError(f"invalid URI {text!r}", env.last_error)
        super().__init__(env, ptr, owner=env)

    @classmethod
    def from_filename(cls, env: "Environment", filename: str) -> "Uri":
        """Build a ``file:`` URI for a local path."""
        world = env._assert_open()
        return cls._wrap(env, _wrap_native_call(env.engine.new_uri_from_filename, world, filename))

    @classmethod
    def normalised_to_base(cls, text: str, source: "Uri", base: "Uri") -> "Uri":
        """Resolve ``text`` against ``source`` and re-root the result on ``base``."""
        env = source._env
        ptr = _wrap_native_call(
            env.engine.new_uri_normalised_to_base, text, source._assert_live(), base._assert_live()
        )
        return cls._wrap(env, ptr)

    def copy(self) -> "Uri":
        return Uri._wrap(self._env, _wrap_native_call(self._engine.new_uri_from_uri, self._assert_live()))

    def with_local_name(self, local_name: str) -> "Uri":
        """Concatenate ``local_name`` onto this URI."""
        ptr = _wrap_native_call(self._engine.new_uri_from_uri_local_name, self._assert_live(), local_name)
        return Uri._wrap(self._env, ptr)

    def relative(self, text: str) -> "Uri":
        """Resolve the relative reference ``text`` against this URI."""
        ptr = _wrap_native_call(self._engine.new_uri_relative_to_base, self._assert_live(), text)
        return Uri._wrap(self._env, ptr)

    def to_string(self) -> str:
        return _wrap_native_call(self._engine.uri_as_string, self._assert_live())

    def to_filename(self) -> Optional[str]:
        """Local path for a ``file:`` URI, ``None`` for anything else."""
        return _wrap_native_call(self._engine.uri_to_filename, self._assert_live())

    def is_file_uri(self) -> bool:
        return bool(_wrap_native_call(self._engine.uri_is_file_uri, self._assert_live()))

    def equals(self, other: "Uri") -> bool:
        return bool(_wrap_native_call(self._engine.uri_equals, self._assert_live(), other._assert_live()))

    def compare(self, other: "Uri") -> int:
        """Negative, zero or positive as this URI sorts before, equal to or after ``other``."""
        result = _wrap_native_call(self._engine.uri_compare, self._assert_live(), other._assert_live())
        return (result > 0) - (result < 0)

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_uri(ptr)

    def __str__(self) -> str:
        return self.to_string()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Uri):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self._released:
            return "<Uri released>"
        return f"<Uri {self.to_string()!r}>"


UriLike = Union[Uri, str]


def _coerce_uri(env: "Environment", value: Optional[UriLike]) -> Tuple[Optional[Uri], bool]:
    """Return ``(uri, temporary)``; temporary URIs must be released by the caller."""
    if value is None or isinstance(value, Uri):
        return value, False
    return Uri(env, value), True
