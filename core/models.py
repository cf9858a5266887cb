"""
Jobs and results passed between the fuzzing stages
"""

from typing import NamedTuple, Optional


class Job(NamedTuple):
    """A single request to dispatch"""
    target: str
    body: str = ''
    depth: int = 0


class Result(NamedTuple):
    """Outcome of dispatching one job"""
    target: str
    status: Optional[int] = None
    length: int = 0
    error: Optional[str] = None
    depth: int = 0

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict:
        data = {
            'url': self.target,
            'status_code': self.status if self.status is not None else 0,
            'length': self.length,
        }
        if self.error is not None:
            data['error'] = self.error
        return data
