"""
Identifier generation for tables and columns
"""
import itertools
from typing import Iterable, Set


class IdGenerator:
    """
    Issues identifiers of the form ``{prefix}-{n}``.

    Every id handed out or reserved is remembered, so an id is never issued
    twice during the generator's lifetime, even after the owner is deleted.
    """

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._counter = itertools.count(1)
        self._used: Set[str] = set()

    def reserve(self, ids: Iterable[str]) -> None:
        """Mark externally created ids (e.g. loaded from storage) as taken"""
        self._used.update(ids)

    def __call__(self) -> str:
        while True:
            candidate = f"{self.prefix}-{next(self._counter)}"
            if candidate not in self._used:
                self._used.add(candidate)
                return candidate

    def was_issued(self, identifier: str) -> bool:
        """True if the id was handed out or reserved before"""
        return identifier in self._used
