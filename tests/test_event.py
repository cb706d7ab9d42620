import threading
from concurrent.futures import ThreadPoolExecutor

from imgate.event import Event


def test_new_event_has_not_fired():
    event = Event()
    assert event.has_fired() is False


def test_fire_returns_true_only_once():
    event = Event()
    assert event.fire() is True
    assert event.fire() is False
    assert event.has_fired() is True


def test_wait_times_out_before_fire():
    event = Event()
    assert event.wait(0.01) is False


def test_wait_returns_after_fire():
    event = Event()
    event.fire()
    assert event.wait(0.01) is True


def test_wait_wakes_waiting_thread():
    event = Event()
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(event.wait, 5)
        assert event.fire() is True
        assert future.result(timeout=5) is True
    assert event.has_fired() is True


def test_concurrent_fire_succeeds_exactly_once():
    event = Event()
    barrier = threading.Barrier(20)

    def worker(_):
        barrier.wait()
        return event.fire()

    with ThreadPoolExecutor(max_workers=20) as pool:
        results = list(pool.map(worker, range(20)))
    assert results.count(True) == 1
    assert results.count(False) == 19
    assert event.has_fired() is True