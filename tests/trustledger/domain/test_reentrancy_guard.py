"""Tests for the ReentrancyGuard that serializes mutating entry points."""

import threading
import time

import pytest

from trustledger.access.guards import ReentrancyGuard
from trustledger.errors import ReentrantCall


class TestReentrancyGuard:
    def test_not_held_initially(self):
        assert ReentrancyGuard().held is False

    def test_held_inside_and_released_after(self):
        guard = ReentrancyGuard()
        with guard.acquire("PostReview"):
            assert guard.held is True
        assert guard.held is False

    def test_released_after_exception(self):
        guard = ReentrancyGuard()
        with pytest.raises(RuntimeError):
            with guard.acquire("PostReview"):
                raise RuntimeError("boom")
        assert guard.held is False

    def test_same_thread_reentry_rejected(self):
        guard = ReentrancyGuard()
        with guard.acquire("PostReview"):
            with pytest.raises(ReentrantCall) as exc:
                with guard.acquire("BroadcastTrustScore"):
                    pass
        assert "PostReview" in str(exc.value.messages)

    def test_other_threads_are_serialized(self):
        guard = ReentrancyGuard()
        order = []

        def worker(name):
            with guard.acquire(name):
                order.append(f"{name}:start")
                time.sleep(0.02)
                order.append(f"{name}:end")

        threads = [threading.Thread(target=worker, args=(f"t{i}",)) for i in range(3)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        # Each start is immediately followed by its own end
        for i in range(0, len(order), 2):
            assert order[i].split(":")[0] == order[i + 1].split(":")[0]
