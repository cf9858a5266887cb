from threading import Barrier, Thread

from core.visited import VisitedSet


def test_try_mark_first_time_only():
    visited = VisitedSet()
    assert visited.try_mark("http://x/admin") is True
    assert visited.try_mark("http://x/admin") is False
    assert "http://x/admin" in visited
    assert len(visited) == 1


def test_try_mark_concurrent_single_winner_per_key():
    visited = VisitedSet()
    keys = [f"http://x/{i}" for i in range(200)]
    threads_count = 16
    barrier = Barrier(threads_count)
    wins = [0] * threads_count

    def mark_all(index):
        barrier.wait()
        for key in keys:
            if visited.try_mark(key):
                wins[index] += 1

    threads = [Thread(target=mark_all, args=(i,)) for i in range(threads_count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sum(wins) == len(keys)
    assert len(visited) == len(keys)
