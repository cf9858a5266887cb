"""
Growable job queue that closes once all outstanding work is finished
"""

from collections import deque
from threading import Condition, Lock
from typing import Optional

from core.models import Job


class QueueClosed(Exception):
    """Raised when a job is added after the queue has closed"""


class JobQueue:
    """
    FIFO of jobs shared by the seed feeder and the workers.

    Every put() adds one unit of outstanding work and every task_done()
    removes one. The queue closes when seal() has been called and no work is
    outstanding; get() then returns None to all waiting workers.

    Bounded puts (seed jobs) wait while `maxsize` jobs are queued. Unbounded
    puts (recursive feedback from workers) never wait, so a worker can always
    hand back its children before acknowledging its own job.
    """

    def __init__(self, maxsize: int = 0):
        self.maxsize = maxsize
        self._jobs = deque()
        self._outstanding = 0
        self._sealed = False
        self._closed = False
        self._lock = Lock()
        self._not_empty = Condition(self._lock)
        self._not_full = Condition(self._lock)

    def put(self, job: Job, bounded: bool = True):
        with self._not_full:
            if bounded and self.maxsize > 0:
                while len(self._jobs) >= self.maxsize and not self._closed:
                    self._not_full.wait()
            if self._closed:
                raise QueueClosed("job queue is closed")
            self._jobs.append(job)
            self._outstanding += 1
            self._not_empty.notify()

    def get(self) -> Optional[Job]:
        """Next job, or None once the queue is closed and drained"""
        with self._not_empty:
            while not self._jobs and not self._closed:
                self._not_empty.wait()
            if not self._jobs:
                return None
            job = self._jobs.popleft()
            self._not_full.notify()
            return job

    def task_done(self):
        with self._lock:
            if self._outstanding <= 0:
                raise ValueError("task_done() called too many times")
            self._outstanding -= 1
            self._close_if_finished()

    def seal(self):
        """No more seed jobs will be added"""
        with self._lock:
            self._sealed = True
            self._close_if_finished()

    def _close_if_finished(self):
        if self._sealed and self._outstanding == 0 and not self._closed:
            self._closed = True
            self._not_empty.notify_all()
            self._not_full.notify_all()

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def outstanding(self) -> int:
        with self._lock:
            return self._outstanding

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
