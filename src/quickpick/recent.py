"""Storage of recently selected candidate keys."""

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class RecentRepository(Protocol):
    """Remembers when candidate keys were last selected."""

    async def add_hit(self, key: str) -> None:
        """Record that key was just selected."""
        ...

    async def get_hits_for_key(self, key: str) -> datetime | None:
        """Return when key was last selected, if ever."""
        ...


class InMemoryRecentRepository:
    """Process-local recent store, namespaced so several pickers can share keys."""

    def __init__(self, name: str):
        if name is None:
            raise ValueError("name is required")
        self.name = name
        self._recents: dict[str, datetime] = {}

    def _full_key(self, key: str) -> str:
        return f"{self.name}_{key}"

    async def add_hit(self, key: str) -> None:
        self._recents[self._full_key(key)] = datetime.now()

    async def get_hits_for_key(self, key: str) -> datetime | None:
        return self._recents.get(self._full_key(key))
