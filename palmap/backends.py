"""Registry of vectorization backends."""
import logging
from typing import Callable, Dict, List

from palmap.region_tracer import trace_regions
from palmap.types import BackendUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = "flood"

# A backend takes (buffer, palette, min_area, simplify) and returns polygons
_BACKENDS: Dict[str, Callable] = {
    DEFAULT_BACKEND: trace_regions,
}


def register_backend(name: str, backend: Callable) -> None:
    """Register (or replace) a backend under ``name``."""
    if name in _BACKENDS:
        logger.warning(f"Replacing vectorization backend '{name}'")
    _BACKENDS[name] = backend


def unregister_backend(name: str) -> None:
    """Remove a backend; unknown names are ignored."""
    _BACKENDS.pop(name, None)


def available_backends() -> List[str]:
    """Sorted names of registered backends."""
    return sorted(_BACKENDS)


def get_backend(name: str = DEFAULT_BACKEND) -> Callable:
    """
    Look up a backend by name.

    Raises:
        BackendUnavailableError: If no backend is registered under ``name``
    """
    try:
        return _BACKENDS[name]
    except KeyError:
        raise BackendUnavailableError(
            f"Vectorization backend '{name}' is not available "
            f"(registered: {', '.join(available_backends()) or 'none'})"
        ) from None
