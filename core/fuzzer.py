"""
Main fuzzing engine with threading support
"""

import time
from queue import Queue
from threading import Lock, Thread
from typing import Callable, Iterator, List, Optional

from core.expander import expand_recursive, seed_jobs
from core.filters import ResponseFilter
from core.models import Job, Result
from core.requester import RequestExecutor
from core.visited import VisitedSet
from core.work_queue import JobQueue
from utils.config import ConfigError, FuzzConfig
from utils.logger import get_logger
from utils.wordlist_loader import iter_wordlist

# Pushed on the result queue by each worker when it exits
_WORKER_DONE = object()


class FuzzStats:
    """Run counters, updated concurrently by the workers"""

    def __init__(self):
        self._lock = Lock()
        self.dispatched = 0
        self.found = 0
        self.filtered = 0
        self.duplicates = 0
        self.errors = 0
        self.start_time = None
        self.end_time = None

    def incr(self, name: str):
        with self._lock:
            setattr(self, name, getattr(self, name) + 1)

    @property
    def elapsed(self) -> float:
        if self.start_time is None:
            return 0.0
        end = self.end_time if self.end_time is not None else time.time()
        return end - self.start_time


class Fuzzer:
    """
    Worker pool driving a run.

    A feeder thread streams the wordlist into the job queue while
    `config.threads` workers take jobs, dispatch them, filter the responses
    and push results. Accepted results within the depth bound are expanded
    and put back on the same queue. The run ends when the queue has been
    sealed by the feeder and every job, recursive ones included, has been
    acknowledged.
    """

    def __init__(self,
                 config: FuzzConfig,
                 executor: Optional[RequestExecutor] = None,
                 response_filter: Optional[ResponseFilter] = None,
                 visited: Optional[VisitedSet] = None):

        self.config = config
        self.executor = executor or RequestExecutor(config)
        self.response_filter = response_filter or ResponseFilter.from_config(config)
        self.visited = visited if visited is not None else VisitedSet()

        self.logger = get_logger()
        self.stats = FuzzStats()

        self.queue = JobQueue(maxsize=config.threads * 2)
        self.result_queue = Queue()
        self._started = False
        self.feed_error = None

    def results(self) -> Iterator[Result]:
        """
        Start the run and yield results as workers produce them.
        Raises ConfigError once the stream ends if the wordlist could not be
        read to the end; queued jobs are dropped as soon as that happens.
        """
        if self._started:
            raise RuntimeError("a Fuzzer instance can only run once")
        self._started = True
        self.stats.start_time = time.time()

        Thread(target=self._feed, name='feeder', daemon=True).start()
        for i in range(self.config.threads):
            Thread(target=self._worker, name=f'worker-{i}', daemon=True).start()

        finished = 0
        while finished < self.config.threads:
            item = self.result_queue.get()
            if item is _WORKER_DONE:
                finished += 1
                continue
            yield item

        self.stats.end_time = time.time()
        if self.feed_error is not None:
            raise self.feed_error

    def run(self, callback: Optional[Callable[[Result], None]] = None) -> List[Result]:
        """Run to completion, optionally calling `callback` for every result"""
        collected = []
        for result in self.results():
            if callback:
                callback(result)
            collected.append(result)
        return collected

    def _feed(self):
        """Push seed jobs from the wordlist, then seal the queue"""
        try:
            for job in seed_jobs(iter_wordlist(self.config.wordlist), self.config):
                self.queue.put(job)
        except OSError as e:
            self.feed_error = ConfigError(f"Failed reading wordlist {self.config.wordlist}: {e}")
            self.logger.debug(f"Wordlist feed stopped: {e}")
        finally:
            self.queue.seal()

    def _worker(self):
        """Worker thread for fuzzing"""
        try:
            while True:
                job = self.queue.get()
                if job is None:
                    break

                try:
                    self._process(job)
                except Exception as e:
                    self.logger.debug(f"Unexpected error: {job.target} : {type(e).__name__}")
                    self.stats.incr('errors')
                    self.result_queue.put(Result(job.target, error=f"{type(e).__name__}: {e}", depth=job.depth))
                finally:
                    self.queue.task_done()
        finally:
            self.result_queue.put(_WORKER_DONE)

    def _process(self, job: Job):
        """Dispatch, filter, emit and expand a single job"""
        if self.feed_error is not None:
            return

        if self.config.recursion and not self.visited.try_mark(job.target):
            self.stats.incr('duplicates')
            self.logger.debug(f"Already visited: {job.target}")
            return

        status_code, body, error = self.executor.execute(job)
        self.stats.incr('dispatched')

        if self.config.delay > 0:
            time.sleep(self.config.delay)

        if error is not None:
            self.stats.incr('errors')
            self.result_queue.put(Result(job.target, error=error, depth=job.depth))
            return

        reason = self.response_filter.rejection_reason(status_code, body)
        if reason:
            self.stats.incr('filtered')
            if self.logger.verbose:
                self.logger.debug(f"Filtered ({reason}): {status_code} {job.target} [size={len(body)}]")
            return

        self.stats.incr('found')
        self.result_queue.put(Result(job.target, status_code, len(body), depth=job.depth))

        if self.config.recursion and job.depth < self.config.recursion_depth:
            children = expand_recursive(job, self.config)
            self.logger.debug(f"Recursing into {job.target} (depth {job.depth + 1}, {len(children)} jobs)")
            for child in children:
                self.queue.put(child, bounded=False)
