"""Ownership shell shared by every engine-backed object."""

from __future__ import annotations

import logging
import threading
import weakref
from typing import TYPE_CHECKING, Any, List, Optional, Type, TypeVar

from .engines.base import Engine, Ptr
from .errors import AllocationError, OperationFailedError, UseAfterRelease

if TYPE_CHECKING:
    from .world import Environment

logger = logging.getLogger(__name__)

H = TypeVar("H", bound="Handle")

_PRUNE_EVERY = 64


class Handle:
    """Owns one engine resource and frees it exactly once.

    A handle is either *owned* (it frees the engine resource on release) or a
    *borrowed view* (it only forgets the pointer). Handles created from
    another handle register with it as dependents; releasing a handle
    releases its live dependents first, newest first.
    """

    _kind = "handle"

    def __init__(
        self,
        env: "Environment",
        ptr: Optional[Ptr],
        *,
        owned: bool = True,
        owner: Optional["Handle"] = None,
    ) -> None:
        self._env = env
        self._ptr = ptr
        self._owned = owned
        self._owner = owner
        self._released = False
        self._lock = threading.RLock()
        self._dependents: List["weakref.ref[Any]"] = []
        self._adopted = 0
        if owner is not None:
            try:
                owner._adopt(self)
            except UseAfterRelease:
                self._released = True
                self._ptr = None
                if owned and ptr is not None:
                    self._free(ptr)
                raise

    @classmethod
    def _wrap(
        cls: Type[H],
        env: "Environment",
        ptr: Optional[Ptr],
        *,
        owned: bool = True,
        owner: Optional["Handle"] = None,
    ) -> H:
        """Build a handle around ``ptr`` without running the public constructor."""
        if ptr is None:
            raise AllocationError(f"unable to create {cls._kind}", env.last_error)
        handle = cls.__new__(cls)
        Handle.__init__(handle, env, ptr, owned=owned, owner=env if owner is None else owner)
        return handle

    @property
    def _engine(self) -> Engine:
        return self._env.engine

    @property
    def released(self) -> bool:
        return self._released

    @property
    def owned(self) -> bool:
        """False for borrowed views, which never free engine memory."""
        return self._owned

    def _adopt(self, dependent: Any) -> None:
        with self._lock:
            if self._released:
                raise UseAfterRelease(f"{self._kind} has been released")
            self._dependents.append(weakref.ref(dependent))
            self._adopted += 1
            if self._adopted % _PRUNE_EVERY == 0:
                self._dependents = [ref for ref in self._dependents if ref() is not None]

    def _release_dependents(self) -> None:
        with self._lock:
            refs = self._dependents
            self._dependents = []
        for ref in reversed(refs):
            dependent = ref()
            if dependent is not None:
                dependent.release()

    def _assert_live(self) -> Ptr:
        if self._released:
            raise UseAfterRelease(f"{self._kind} has been released")
        return self._ptr

    def _failed(self, message: str) -> OperationFailedError:
        return OperationFailedError(message, self._env.last_error)

    def _free(self, ptr: Ptr) -> None:
        raise NotImplementedError

    def _after_release(self) -> None:
        """Hook run once after the engine resource has been freed."""

    def release(self) -> None:
        """Release dependents, then free the engine resource. Safe to call twice."""
        with self._lock:
            if self._released:
                return
            self._released = True
        self._release_dependents()
        with self._lock:
            ptr, self._ptr = self._ptr, None
        try:
            if ptr is not None and self._owned:
                self._free(ptr)
        finally:
            self._after_release()
        logger.debug("released %s%s", self._kind, "" if self._owned else " view")

    def __enter__(self: H) -> H:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.release()

    def __del__(self) -> None:
        if getattr(self, "_released", True):
            return
        try:
            logger.debug("releasing %s from finalizer", self._kind)
            self.release()
        except BaseException:
            pass

    def __repr__(self) -> str:
        state = "released" if self._released else ("owned" if self._owned else "view")
        return f"<{type(self).__name__} {state}>"
