"""Assignment of dense archive-local ids to live resources."""

from __future__ import annotations

from typing import Dict, Generic, Hashable, Iterator, List, Optional, TypeVar

K = TypeVar("K", bound=Hashable)
R = TypeVar("R")


class ResourceIdAssigner(Generic[K, R]):
    """Map dedup keys to sequential ids in order of first registration.

    Registering a key that was already seen returns its existing id and leaves
    the stored resource untouched, so every reference to the same resource
    shares one id while distinct keys never collide.
    """

    def __init__(self) -> None:
        self._ids: Dict[K, int] = {}
        self._resources: List[R] = []

    def get(self, key: K) -> Optional[int]:
        """Return the id assigned to ``key`` or ``None`` when it is unknown."""

        return self._ids.get(key)

    def register(self, key: K, resource: R) -> int:
        existing = self._ids.get(key)
        if existing is not None:
            return existing

        resource_id = len(self._resources)
        self._ids[key] = resource_id
        self._resources.append(resource)
        return resource_id

    def resource(self, resource_id: int) -> R:
        return self._resources[resource_id]

    @property
    def resources(self) -> List[R]:
        return list(self._resources)

    def __len__(self) -> int:
        return len(self._resources)

    def __iter__(self) -> Iterator[R]:
        return iter(self._resources)


__all__ = ["ResourceIdAssigner"]
