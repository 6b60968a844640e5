import threading

from utils.security import RateLimiter


class FakeClock:
    def __init__(self, start=0.0):
        self.now = start

    def __call__(self):
        return self.now


def test_allows_up_to_max_then_blocks():
    limiter = RateLimiter(3, 60, clock=FakeClock())
    assert all(limiter.hit("ip") is not None for _ in range(3))
    assert limiter.hit("ip") is None
    assert limiter.count("ip") == 3


def test_keys_are_independent():
    limiter = RateLimiter(1, 60, clock=FakeClock())
    assert limiter.hit("a") is not None
    assert limiter.hit("b") is not None
    assert limiter.hit("a") is None


def test_window_is_rolling():
    clock = FakeClock()
    limiter = RateLimiter(2, 60, clock=clock)
    limiter.hit("ip")
    clock.now = 30
    limiter.hit("ip")

    clock.now = 59
    assert limiter.hit("ip") is None
    clock.now = 60
    assert limiter.hit("ip") is not None
    assert limiter.hit("ip") is None
    clock.now = 90
    assert limiter.count("ip") == 1


def test_blocked_attempts_are_not_recorded():
    clock = FakeClock()
    limiter = RateLimiter(1, 60, clock=clock)
    limiter.hit("ip")
    clock.now = 50
    assert limiter.hit("ip") is None
    clock.now = 60
    assert limiter.hit("ip") is not None


def test_release_returns_a_slot():
    clock = FakeClock()
    limiter = RateLimiter(1, 60, clock=clock)
    token = limiter.hit("ip")
    limiter.release("ip", token)
    assert limiter.count("ip") == 0
    assert limiter.hit("ip") is not None

    limiter.release("unknown", 123)


def test_reset():
    limiter = RateLimiter(1, 60, clock=FakeClock())
    limiter.hit("a")
    limiter.hit("b")
    limiter.reset("a")
    assert limiter.count("a") == 0
    assert limiter.count("b") == 1
    limiter.reset()
    assert limiter.count("b") == 0


def test_concurrent_hits_never_exceed_limit():
    limiter = RateLimiter(3, 3600)
    barrier = threading.Barrier(20)
    results = []
    lock = threading.Lock()

    def worker():
        barrier.wait()
        token = limiter.hit("shared")
        with lock:
            results.append(token is not None)

    threads = [threading.Thread(target=worker) for _ in range(20)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 3
    assert limiter.count("shared") == 3
