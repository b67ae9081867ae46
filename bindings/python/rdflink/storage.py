"""Storage handles."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .engines.base import Ptr
from .errors import AllocationError, _wrap_native_call
from .handle import Handle

if TYPE_CHECKING:
    from .world import Environment


class Storage(Handle):
    """Backend for models, chosen by kind (``"memory"``, ``"hashes"``, ``"file"``...).

    ``name`` and ``options`` are handed to the engine as given, for example
    ``Storage(env, "hashes", "test", "hash-type='memory',dir='.'")``.
    Releasing a storage releases every model built on it first.
    """

    _kind = "storage"

    def __init__(self, env: "Environment", kind: str = "memory", name: str = "", options: str = "") -> None:
        world = env._assert_open()
        ptr = _wrap_native_call(env.engine.new_storage, world, kind, name, options)
        if ptr is None:
            raise AllocationError(f"unable to create {kind!r} storage", env.last_error)
        super().__init__(env, ptr, owner=env)
        self.kind = kind
        self.name = name
        self.options = options

    def _free(self, ptr: Ptr) -> None:
        self._engine.free_storage(ptr)

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"<Storage {self.kind} {self.name!r} {state}>"
