from typing import Iterable, List


class CollectionStore:
    """Insertion-ordered set of canonical image URLs. Grows only."""

    def __init__(self):
        self._seen = set()
        self._items: List[str] = []

    def try_insert(self, ref: str) -> bool:
        if ref in self._seen:
            return False
        self._seen.add(ref)
        self._items.append(ref)
        return True

    def extend(self, refs: Iterable[str]) -> int:
        return sum(1 for ref in refs if self.try_insert(ref))

    def snapshot(self) -> List[str]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, ref: object) -> bool:
        return ref in self._seen
