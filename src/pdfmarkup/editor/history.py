"""
PdfMarkup - Edit History

Linear undo/redo log of whole-markup-set snapshots. Committing after an
undo discards the redo branch.
"""

from collections.abc import Callable
from typing import Generic, TypeVar

from pdfmarkup.utils.logger import logger

T = TypeVar("T")


class HistoryLog(Generic[T]):
    """Ordered snapshots plus a cursor.

    The cursor always points at a valid snapshot; the log is never empty.

    Args:
        initial: Snapshot the log starts from
        limit: Maximum number of snapshots kept, 0 for unbounded
    """

    def __init__(self, initial: T = (), limit: int = 0) -> None:
        if limit < 0:
            raise ValueError("history limit cannot be negative")
        self._limit = limit
        self._snapshots: list[T] = [initial]
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def current(self) -> T:
        return self._snapshots[self._cursor]

    @property
    def can_undo(self) -> bool:
        return self._cursor > 0

    @property
    def can_redo(self) -> bool:
        return self._cursor < len(self._snapshots) - 1

    def __len__(self) -> int:
        return len(self._snapshots)

    def push(self, snapshot: T) -> None:
        """Record a new snapshot after the cursor, dropping any redo states."""
        del self._snapshots[self._cursor + 1 :]
        self._snapshots.append(snapshot)

        if self._limit and len(self._snapshots) > self._limit:
            dropped = len(self._snapshots) - self._limit
            del self._snapshots[:dropped]
            logger.debug(f"History limit reached, dropped {dropped} oldest snapshot(s)")

        self._cursor = len(self._snapshots) - 1

    def undo(self) -> T | None:
        """Step back one snapshot.

        Returns:
            The snapshot now current, or None if nothing to undo
        """
        if not self.can_undo:
            return None
        self._cursor -= 1
        return self.current

    def redo(self) -> T | None:
        """Step forward one snapshot.

        Returns:
            The snapshot now current, or None if nothing to redo
        """
        if not self.can_redo:
            return None
        self._cursor += 1
        return self.current

    def reset(self, snapshot: T = ()) -> None:
        """Discard all history and start again from snapshot."""
        self._snapshots = [snapshot]
        self._cursor = 0

    def remap(self, fn: Callable[[T], T]) -> None:
        """Rewrite every snapshot through fn without moving the cursor."""
        self._snapshots = [fn(snapshot) for snapshot in self._snapshots]
