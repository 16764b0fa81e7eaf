"""Pass-scoped registry of generated endpoints."""

from __future__ import annotations

from typing import Dict, List, Tuple

from .errors import DuplicateMethodError
from .models import ParamSignature, RegistryEntry


class EndpointRegistry:
    """Accumulates endpoints for one pass and rejects duplicate definitions."""

    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, RegistryEntry]] = {}
        self._sources: Dict[Tuple[str, str], List[str]] = {}

    def add(
        self, group: str, method: str, signature: ParamSignature, type_name: str
    ) -> RegistryEntry:
        """Insert an entry, raising DuplicateMethodError if the pair exists."""
        methods = self._entries.setdefault(group, {})
        key = (group, method)
        if method in methods:
            raise DuplicateMethodError(group, method, [*self._sources[key], type_name])

        entry = RegistryEntry(
            group=group,
            method=method,
            param_definitions=signature.definitions,
            param_names=signature.names,
        )
        methods[method] = entry
        self._sources.setdefault(key, []).append(type_name)
        return entry

    def get(self, group: str, method: str) -> RegistryEntry | None:
        return self._entries.get(group, {}).get(method)

    def sources(self, group: str, method: str) -> List[str]:
        return list(self._sources.get((group, method), []))

    def groups(self) -> List[Tuple[str, List[RegistryEntry]]]:
        """Return groups and their entries sorted by name.

        Sorting keeps the output independent of directory-walk order.
        """
        return [
            (group, [methods[name] for name in sorted(methods)])
            for group, methods in sorted(self._entries.items())
            if methods
        ]

    def __len__(self) -> int:
        return sum(len(methods) for methods in self._entries.values())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        group, method = key
        return method in self._entries.get(group, {})


__all__ = ["EndpointRegistry"]
