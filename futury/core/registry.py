"""
FUTURY - Entity Registry
Per-session keyed store for missions and buildings.
"""

from typing import Dict, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class EntityRegistry(Generic[T]):
    """
    Maps identity -> entity for one session.

    Owned by the session and handed to each lifecycle component at
    construction. Ids are issued sequentially and survive restore via
    `reserve`.
    """

    def __init__(self, prefix: str = ""):
        self.prefix = prefix
        self._entities: Dict[str, T] = {}
        self._next_id = 1

    def new_id(self) -> str:
        entity_id = f"{self.prefix}{self._next_id}"
        self._next_id += 1
        return entity_id

    def reserve(self, entity_id: str):
        """Make sure future ids never collide with a restored one."""
        suffix = entity_id[len(self.prefix):] if entity_id.startswith(self.prefix) else ""
        if suffix.isdigit():
            self._next_id = max(self._next_id, int(suffix) + 1)

    def add(self, entity_id: str, entity: T):
        if entity_id in self._entities:
            raise ValueError(f"Duplicate entity id: {entity_id}")
        self._entities[entity_id] = entity
        self.reserve(entity_id)

    def get(self, entity_id: str) -> Optional[T]:
        return self._entities.get(entity_id)

    def values(self) -> List[T]:
        return list(self._entities.values())

    def clear(self):
        self._entities.clear()
        self._next_id = 1

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._entities.values()))

    def __len__(self) -> int:
        return len(self._entities)
