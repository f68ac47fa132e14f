from __future__ import annotations

from typing import Awaitable, Callable, Optional, TypeVar

from api.errors import InventoryError
from utils.logger import get_logger

_logger = get_logger(__name__)

T = TypeVar("T")

ChangeListener = Callable[["ViewModel"], None]
Confirm = Callable[[], Awaitable[bool]]


class SequenceGuard:
    """
    Numbers outgoing loads so a slow, older response cannot overwrite a
    newer one that already landed.
    """

    def __init__(self) -> None:
        self.issued = 0
        self.applied = 0

    def issue(self) -> int:
        self.issued += 1
        return self.issued

    def is_stale(self, seq: int) -> bool:
        return seq < self.applied

    def apply(self, seq: int) -> None:
        self.applied = seq


class ViewModel:
    """
    Common state of every screen-facing model: a loading flag that always
    settles, the last failure, and a change callback for re-rendering.
    """

    def __init__(self, on_change: Optional[ChangeListener] = None) -> None:
        self.loading = False
        self.last_error: Optional[InventoryError] = None
        self.on_change = on_change
        self._guard = SequenceGuard()
        self._in_flight = 0

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self)

    async def _load_latest(
        self, fetch: Callable[[], Awaitable[T]], apply: Callable[[T], None]
    ) -> bool:
        """
        Run `fetch` and hand its result to `apply` unless a newer load has
        already been applied. Failures are recorded, never raised.
        Returns True if the result was applied.
        """
        seq = self._guard.issue()
        self._in_flight += 1
        self.loading = True
        try:
            result = await fetch()
        except InventoryError as exc:
            if self._guard.is_stale(seq):
                _logger.debug(f"{type(self).__name__}: dropping stale failure #{seq}")
                return False
            _logger.warning(f"{type(self).__name__}: load failed: {exc}")
            self.last_error = exc
            return False
        finally:
            self._in_flight -= 1
            self.loading = self._in_flight > 0
            self._changed()

        if self._guard.is_stale(seq):
            _logger.debug(f"{type(self).__name__}: dropping stale response #{seq}")
            return False
        self._guard.apply(seq)
        apply(result)
        self.last_error = None
        self._changed()
        return True

    async def _mutate(self, action: Callable[[], Awaitable[T]]) -> T:
        """
        Run a write. On failure the error is recorded and re-raised to the
        caller; loaded state is left as it was.
        """
        try:
            return await action()
        except InventoryError as exc:
            _logger.warning(f"{type(self).__name__}: {exc}")
            self.last_error = exc
            self._changed()
            raise
