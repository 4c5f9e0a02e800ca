"""RunLoop — thread-confined callback queue for the map-owning thread.

Background work runs on a ThreadPoolExecutor; results are posted back to
the RunLoop and executed only when its owning thread pumps it. All map
style and camera mutation happens inside those callbacks.
"""

from __future__ import annotations

import queue
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable

from loguru import logger


class RunLoop:
    """Callback queue drained by exactly one thread (the owner).

    The owner is the thread that creates the loop unless given explicitly.
    ``post`` may be called from any thread; ``run_pending`` and
    ``run_until`` only from the owner.
    """

    def __init__(self, owner: threading.Thread | None = None) -> None:
        self._owner = owner or threading.current_thread()
        self._queue: queue.Queue[Callable[[], Any]] = queue.Queue()

    @property
    def owner(self) -> threading.Thread:
        return self._owner

    def is_owner_thread(self) -> bool:
        return threading.current_thread() is self._owner

    def assert_owner_thread(self, what: str = "this operation") -> None:
        if not self.is_owner_thread():
            raise RuntimeError(
                f"{what} must run on thread {self._owner.name!r}, "
                f"not {threading.current_thread().name!r}"
            )

    def post(self, callback: Callable[[], Any]) -> None:
        """Queue a callback to run on the owner thread. Thread-safe."""
        self._queue.put(callback)

    def pending(self) -> int:
        return self._queue.qsize()

    def run_pending(self) -> int:
        """Run every queued callback. Returns the number run."""
        self.assert_owner_thread("RunLoop.run_pending")
        count = 0
        while True:
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return count
            callback()
            count += 1

    def run_until(self, predicate: Callable[[], bool], timeout: float) -> bool:
        """Pump callbacks until ``predicate()`` is true or ``timeout`` elapses.

        Returns:
            The final value of ``predicate()``.
        """
        self.assert_owner_thread("RunLoop.run_until")
        deadline = time.monotonic() + timeout
        while not predicate():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.debug(f"RunLoop.run_until timed out after {timeout:.2f}s")
                return predicate()
            try:
                callback = self._queue.get(timeout=min(remaining, 0.05))
            except queue.Empty:
                continue
            callback()
        return True


class BackgroundDispatcher:
    """Submit work to a worker pool and deliver its outcome on a RunLoop."""

    def __init__(self, max_workers: int = 2) -> None:
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="landmarks-bg")

    def submit(
        self,
        work: Callable[[], Any],
        loop: RunLoop,
        on_success: Callable[[Any], None],
        on_error: Callable[[BaseException], None],
    ) -> Future:
        """Run ``work`` in the pool; post ``on_success``/``on_error`` to ``loop``."""

        def _done(future: Future) -> None:
            error = future.exception()
            if error is not None:
                loop.post(lambda: on_error(error))
            else:
                result = future.result()
                loop.post(lambda: on_success(result))

        future = self._pool.submit(work)
        future.add_done_callback(_done)
        return future

    def shutdown(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)

    def __enter__(self) -> BackgroundDispatcher:
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()
