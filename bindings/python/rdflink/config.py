"""Runtime settings for the bindings, read from keyword options or the process environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from typing_extensions import Literal

EngineName = Literal["auto", "librdf", "rdflib"]

ENGINE_NAMES = ("auto", "librdf", "rdflib")
DEFAULT_BUFFER_SIZE = 100

ENV_ENGINE = "RDFLINK_ENGINE"
ENV_LIBRARY = "RDFLINK_LIBRARY"
ENV_BUFFER_SIZE = "RDFLINK_BUFFER_SIZE"


def _env_int(name: str, default: int, environ: Mapping[str, str]) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    return value


@dataclass(frozen=True)
class Settings:
    engine: str = "auto"
    library_path: Optional[str] = None
    buffer_size: int = DEFAULT_BUFFER_SIZE

    def __post_init__(self) -> None:
        if self.engine not in ENGINE_NAMES:
            raise ValueError(f"engine must be one of {', '.join(ENGINE_NAMES)}; got {self.engine!r}")
        if not isinstance(self.buffer_size, int) or isinstance(self.buffer_size, bool) or self.buffer_size < 0:
            raise ValueError("buffer_size must be a non-negative integer")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        engine = (env.get(ENV_ENGINE) or "auto").strip().lower()
        library_path = env.get(ENV_LIBRARY) or None
        buffer_size = _env_int(ENV_BUFFER_SIZE, DEFAULT_BUFFER_SIZE, env)
        return cls(engine=engine, library_path=library_path, buffer_size=buffer_size)

    def with_options(self, **options: Any) -> "Settings":
        """Return a copy with the non-None keyword options applied."""
        unknown = set(options) - {"engine", "library_path", "buffer_size"}
        if unknown:
            raise TypeError(f"unknown option(s): {', '.join(sorted(unknown))}")
        overrides = {key: value for key, value in options.items() if value is not None}
        return replace(self, **overrides)
