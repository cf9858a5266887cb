"""Test configuration and fixtures."""

from threading import Lock

import pytest

from utils.config import build_config
from utils.logger import setup_logger


class FakeExecutor:
    """Stands in for RequestExecutor, answering from a target -> (status, body) map."""

    def __init__(self, responses=None, default=(404, b"not found"), failures=()):
        self.responses = responses or {}
        self.default = default
        self.failures = set(failures)
        self.calls = []
        self._lock = Lock()

    def execute(self, job):
        with self._lock:
            self.calls.append(job)
        if job.target in self.failures:
            return None, b"", "ConnectionError: connection refused"
        status, body = self.responses.get(job.target, self.default)
        return status, body, None

    @property
    def targets(self):
        return [job.target for job in self.calls]

    def close(self):
        pass


@pytest.fixture(autouse=True)
def fresh_logger():
    """Give every test its own logger bound to the current stdout."""
    setup_logger()
    yield


@pytest.fixture
def make_wordlist(tmp_path):
    """Write a wordlist file and return its path."""

    def _make(lines, name="words.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return str(path)

    return _make


@pytest.fixture
def make_config(make_wordlist):
    """Build a validated FuzzConfig with a small default wordlist."""

    def _make(words=("admin", "login"), **options):
        options.setdefault("url", "http://x/FUZZ")
        options.setdefault("threads", 4)
        options.setdefault("wordlist", make_wordlist(list(words)))
        return build_config(**options)

    return _make


@pytest.fixture
def executor_factory():
    """Build FakeExecutor instances: executor_factory(responses, default=..., failures=...)."""
    return FakeExecutor
