"""Engine selection for the rdflink bindings."""

from __future__ import annotations

import logging
import threading
from typing import Dict, Optional, Tuple

from ..config import Settings
from .base import Engine

logger = logging.getLogger(__name__)

_ENGINES: Dict[Tuple[str, Optional[str]], Engine] = {}
_ENGINES_LOCK = threading.Lock()


def _load_librdf(library_path: Optional[str]) -> Engine:
    from .librdf import LibrdfEngine

    return LibrdfEngine(library_path)


def _load_rdflib() -> Engine:
    from .rdflib_engine import RdflibEngine

    return RdflibEngine()


def load_engine(settings: Optional[Settings] = None) -> Engine:
    """Return the engine named by ``settings``, loading it once per process.

    ``"auto"`` tries the native librdf library first and uses the rdflib
    engine when the shared library cannot be loaded.
    """
    settings = settings or Settings.from_env()
    key = (settings.engine, settings.library_path)
    with _ENGINES_LOCK:
        engine = _ENGINES.get(key)
        if engine is not None:
            return engine
        if settings.engine == "librdf":
            engine = _load_librdf(settings.library_path)
        elif settings.engine == "rdflib":
            engine = _load_rdflib()
        else:
            try:
                engine = _load_librdf(settings.library_path)
            except OSError as err:
                logger.info("librdf unavailable (%s); using the rdflib engine", err)
                engine = _load_rdflib()
        logger.debug("using %s engine", engine.name)
        _ENGINES[key] = engine
        return engine


__all__ = ["Engine", "load_engine"]
