"""
Shared View Parameters

Holds key/value parameters visible to every render call of a View and merges
them with per-call parameters.

Precedence: a shared parameter always wins over a call parameter with the same
name. Call parameters only fill in names the shared set does not define.

Examples:
    >>> store = ParameterStore({"x": "A"})
    >>> store.merge({"x": "B", "y": "C"})
    {'x': 'A', 'y': 'C'}
"""

import threading
from typing import Any, Dict, Mapping, Optional


class ParameterStore:
    """Thread-safe store of shared render parameters."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._lock = threading.Lock()
        self._params: Dict[str, Any] = dict(initial or {})

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._params

    def get(self, name: str, default: Any = None) -> Any:
        """Get a shared parameter, or default when it is not set."""
        with self._lock:
            return self._params.get(name, default)

    def set(self, name: str, value: Any) -> None:
        """Set a shared parameter, silently overwriting any previous value."""
        with self._lock:
            self._params[name] = value

    def update(self, params: Mapping[str, Any]) -> None:
        """Set several shared parameters at once."""
        with self._lock:
            self._params.update(params)

    def all(self) -> Dict[str, Any]:
        """Snapshot copy of every shared parameter."""
        with self._lock:
            return dict(self._params)

    def merge(self, call_params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Build the render scope for one call.

        Args:
            call_params: Parameters passed to a single render call

        Returns:
            New dict holding call_params overlaid by a snapshot of the shared
            parameters (shared values win on name clashes)
        """
        return merge_parameters(call_params, self.all())

    def __len__(self) -> int:
        with self._lock:
            return len(self._params)

    def __repr__(self) -> str:
        return f"ParameterStore({self.all()!r})"


def merge_parameters(
    call_params: Optional[Mapping[str, Any]], shared_params: Mapping[str, Any]
) -> Dict[str, Any]:
    """Merge call and shared parameters; shared values win."""
    return {**(call_params or {}), **shared_params}
