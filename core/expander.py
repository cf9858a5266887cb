"""
Turn wordlist entries and accepted results into jobs
"""

from typing import Iterable, Iterator, List

from core.models import Job
from utils.config import PLACEHOLDER, FuzzConfig


def replace_placeholder(template: str, word: str) -> str:
    """Literal replacement of every placeholder occurrence"""
    return template.replace(PLACEHOLDER, word)


def expand_word(word: str, config: FuzzConfig) -> List[Job]:
    """Base job for a word plus one job per configured extension"""
    jobs = []
    for candidate in [word] + [word + ext for ext in config.extensions]:
        jobs.append(Job(
            target=replace_placeholder(config.url, candidate),
            body=replace_placeholder(config.data, candidate),
            depth=0,
        ))
    return jobs


def seed_jobs(words: Iterable[str], config: FuzzConfig) -> Iterator[Job]:
    for word in words:
        yield from expand_word(word, config)


def expand_recursive(job: Job, config: FuzzConfig) -> List[Job]:
    """
    Jobs to resubmit after `job` was accepted: the accepted target with each
    extension appended, then the plain target again, all one level deeper
    """
    depth = job.depth + 1
    jobs = []
    for ext in config.extensions:
        target = job.target + ext
        jobs.append(Job(target=target, body=replace_placeholder(config.data, target), depth=depth))
    jobs.append(Job(target=job.target, body=replace_placeholder(config.data, job.target), depth=depth))
    return jobs
