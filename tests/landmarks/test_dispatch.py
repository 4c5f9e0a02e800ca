"""Tests for RunLoop thread confinement and BackgroundDispatcher hand-off."""

import threading

import pytest

from landmarks.dispatch import BackgroundDispatcher, RunLoop


@pytest.mark.unit
class TestRunLoop:

    def test_owner_defaults_to_creating_thread(self):
        loop = RunLoop()
        assert loop.owner is threading.current_thread()
        assert loop.is_owner_thread()

    def test_post_then_run_pending(self):
        loop = RunLoop()
        calls = []
        loop.post(lambda: calls.append(1))
        loop.post(lambda: calls.append(2))
        assert loop.pending() == 2
        assert loop.run_pending() == 2
        assert calls == [1, 2]

    def test_post_from_other_thread(self):
        loop = RunLoop()
        seen = []
        t = threading.Thread(target=lambda: loop.post(lambda: seen.append(threading.current_thread())))
        t.start()
        t.join()
        loop.run_pending()
        assert seen == [threading.current_thread()]

    def test_run_pending_off_owner_thread_raises(self):
        loop = RunLoop()
        errors = []

        def worker():
            try:
                loop.run_pending()
            except RuntimeError as e:
                errors.append(e)

        t = threading.Thread(target=worker)
        t.start()
        t.join()
        assert len(errors) == 1

    def test_run_until_timeout(self):
        loop = RunLoop()
        assert loop.run_until(lambda: False, timeout=0.1) is False

    def test_run_until_predicate(self):
        loop = RunLoop()
        done = []
        loop.post(lambda: done.append(True))
        assert loop.run_until(lambda: bool(done), timeout=1.0) is True


@pytest.mark.unit
class TestBackgroundDispatcher:

    def test_success_delivered_on_loop_thread(self):
        loop = RunLoop()
        results = []
        worker_threads = []

        def work():
            worker_threads.append(threading.current_thread())
            return 42

        with BackgroundDispatcher(max_workers=1) as dispatcher:
            dispatcher.submit(
                work, loop,
                on_success=lambda r: results.append((r, threading.current_thread())),
                on_error=lambda e: results.append(e),
            )
            assert loop.run_until(lambda: bool(results), timeout=5.0)

        assert results == [(42, threading.current_thread())]
        assert worker_threads[0] is not threading.current_thread()

    def test_error_delivered_to_on_error(self):
        loop = RunLoop()
        errors = []

        def work():
            raise ValueError("boom")

        with BackgroundDispatcher(max_workers=1) as dispatcher:
            dispatcher.submit(work, loop, on_success=lambda r: None, on_error=errors.append)
            assert loop.run_until(lambda: bool(errors), timeout=5.0)

        assert isinstance(errors[0], ValueError)
        assert str(errors[0]) == "boom"

    def test_nothing_runs_until_loop_is_pumped(self):
        loop = RunLoop()
        results = []
        with BackgroundDispatcher(max_workers=1) as dispatcher:
            future = dispatcher.submit(lambda: 1, loop, on_success=results.append, on_error=results.append)
            future.result(timeout=5.0)
        assert results == []
        loop.run_until(lambda: loop.pending() == 0 and bool(results), timeout=5.0)
        assert results == [1]
