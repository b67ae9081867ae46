"""Error types raised by the rdflink bindings."""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, Optional, Type


# Error code regex: [CODE_NAME] message
_ERROR_CODE_REGEX = re.compile(r'^\[([A-Z_]+)\]\s*')


class ErrorCode:
    """Error codes attached to every RDFError."""
    UNKNOWN = "UNKNOWN"
    ALLOCATION = "ALLOCATION"
    OPERATION_FAILED = "OPERATION_FAILED"
    USE_AFTER_RELEASE = "USE_AFTER_RELEASE"
    STREAM_FAULT = "STREAM_FAULT"


class RDFError(Exception):
    """Base exception class for all rdflink errors."""

    def __init__(self, message: str, code: str = ErrorCode.UNKNOWN, detail: Optional[str] = None):
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.code = code
        self.detail = detail


class AllocationError(RDFError):
    """Error raised when the engine refuses to construct a resource."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, ErrorCode.ALLOCATION, detail)


class OperationFailedError(RDFError):
    """Error raised when the engine reports that a call failed."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, ErrorCode.OPERATION_FAILED, detail)


class UseAfterRelease(RDFError):
    """Error raised when a released handle is used."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, ErrorCode.USE_AFTER_RELEASE, detail)


class StreamFaultError(RDFError):
    """Error raised when a cursor breaks the engine contract while streaming."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, ErrorCode.STREAM_FAULT, detail)


_ERROR_CLASS_MAP: Dict[str, Type[RDFError]] = {
    ErrorCode.ALLOCATION: AllocationError,
    ErrorCode.OPERATION_FAILED: OperationFailedError,
    ErrorCode.USE_AFTER_RELEASE: UseAfterRelease,
    ErrorCode.STREAM_FAULT: StreamFaultError,
}


def wrap_native_error(err: BaseException) -> RDFError:
    """Convert an exception escaping an engine call into a typed error.

    Engines may raise errors formatted as "[CODE_NAME] actual message";
    anything else becomes a generic RDFError.

    Args:
        err: The exception raised by the engine

    Returns:
        A typed RDFError subclass instance
    """
    if isinstance(err, RDFError):
        return err
    message = str(err)
    match = _ERROR_CODE_REGEX.match(message)

    if match:
        code = match.group(1)
        clean_message = message[match.end():]
        error_class = _ERROR_CLASS_MAP.get(code)
        if error_class is not None:
            return error_class(clean_message)
        return RDFError(clean_message, ErrorCode.UNKNOWN)

    return RDFError(message or type(err).__name__, ErrorCode.UNKNOWN)


def _wrap_native_call(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Invoke an engine function and re-raise with typed errors."""
    try:
        return fn(*args, **kwargs)
    except Exception as err:  # noqa: BLE001 - surface engine failures as RDFError
        wrapped = wrap_native_error(err)
        if wrapped is err:
            raise
        raise wrapped from err
