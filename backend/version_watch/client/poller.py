from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from version_watch.client.checker import CheckResult, PollOutcome, check_compatibility
from version_watch.core.compat import RangeConstraint
from version_watch.core.errors import FetchError

_log = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[str]]
Listener = Callable[[CheckResult], None]

_LEVELS = {
    PollOutcome.compatible: logging.INFO,
    PollOutcome.incompatible: logging.WARNING,
    PollOutcome.fetch_error: logging.WARNING,
    PollOutcome.parse_error: logging.WARNING,
}


class VersionPoller:
    """Periodically fetch a server's version and check it against a range.

    Ticks never overlap: the interval is waited out after a tick finishes, so
    a slow fetch delays the next tick instead of running alongside it. The
    first tick fires immediately. Fetch and parse failures are reported and
    the loop carries on; only :meth:`stop` or task cancellation ends it.
    """

    def __init__(self, fetch: Fetcher, constraint: RangeConstraint, *, interval: float = 10.0):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._fetch = fetch
        self.constraint = constraint
        self.interval = interval
        self._listeners: List[Listener] = []
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> CheckResult:
        try:
            raw_version = await self._fetch()
        except FetchError as exc:
            result = check_compatibility(None, self.constraint, fetch_error=exc)
        else:
            result = check_compatibility(raw_version, self.constraint)
        self._report(result)
        return result

    def _report(self, result: CheckResult) -> None:
        _log.log(_LEVELS[result.outcome], result.message)
        for listener in list(self._listeners):
            try:
                listener(result)
            except Exception:  # noqa: BLE001
                _log.exception("poll listener failed")

    async def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception:  # noqa: BLE001
                _log.exception("poll tick failed")
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                continue

    def start(self) -> asyncio.Task:
        if self.running:
            return self._task  # type: ignore[return-value]
        self._stop_event.clear()
        self._task = asyncio.create_task(self.run())
        return self._task

    def stop(self) -> None:
        self._stop_event.set()

    async def shutdown(self) -> None:
        self.stop()
        task = self._task
        if task is None:
            return
        try:
            await task
        finally:
            self._task = None
