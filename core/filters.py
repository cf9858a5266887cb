"""
Response filtering (status allow-list, length bounds, body regex)
"""

import re
from typing import Iterable, Optional, Union

from utils.config import FuzzConfig, compile_regex, parse_status_codes
from utils.logger import get_logger


class ResponseFilter:
    """
    Decide whether a response is reported.

    All configured predicates must pass. An empty status list, a zero length
    bound or a missing regex is never a reason to reject.
    """

    def __init__(self,
                 status_codes: Union[str, Iterable[int], None] = None,
                 min_length: int = 0,
                 max_length: int = 0,
                 regex: Union[str, re.Pattern, None] = None):

        self.logger = get_logger()

        self.status_codes = set(parse_status_codes(status_codes))
        self.min_length = min_length or 0
        self.max_length = max_length or 0
        if isinstance(regex, str):
            regex = compile_regex(regex)
        self.regex = regex

        self._log_filters()

    @classmethod
    def from_config(cls, config: FuzzConfig) -> 'ResponseFilter':
        return cls(
            status_codes=config.match_codes,
            min_length=config.min_length,
            max_length=config.max_length,
            regex=config.match_regex,
        )

    def _log_filters(self):
        """Log active filters"""
        if self.status_codes:
            self.logger.debug(f"Match codes: {sorted(self.status_codes)}")
        if self.min_length:
            self.logger.debug(f"Min length: {self.min_length}")
        if self.max_length:
            self.logger.debug(f"Max length: {self.max_length}")
        if self.regex is not None:
            self.logger.debug(f"Match regex: {self._regex_text()}")

    def _regex_text(self) -> str:
        pattern = self.regex.pattern
        if isinstance(pattern, bytes):
            return pattern.decode('utf-8', errors='replace')
        return pattern

    def rejection_reason(self, status_code: int, body: bytes) -> Optional[str]:
        """None if the response passes, otherwise why it was filtered"""
        if self.status_codes and status_code not in self.status_codes:
            return f"status code {status_code} not matched"

        length = len(body)
        if self.min_length > 0 and length < self.min_length:
            return f"length {length} below {self.min_length}"
        if self.max_length > 0 and length > self.max_length:
            return f"length {length} above {self.max_length}"

        if self.regex is not None:
            subject = body
            if not isinstance(self.regex.pattern, bytes):
                subject = body.decode('utf-8', errors='ignore')
            if not self.regex.search(subject):
                return f"body does not match /{self._regex_text()}/"

        return None

    def accept(self, status_code: int, body: bytes) -> bool:
        return self.rejection_reason(status_code, body) is None

    def has_filters(self) -> bool:
        """Check if any filters are active"""
        return bool(self.status_codes or self.min_length or self.max_length or self.regex is not None)

    def get_summary(self) -> str:
        """Get human-readable summary of active filters"""
        parts = []

        if self.status_codes:
            parts.append(f"Matching codes: {', '.join(map(str, sorted(self.status_codes)))}")
        if self.min_length:
            parts.append(f"Min length: {self.min_length}")
        if self.max_length:
            parts.append(f"Max length: {self.max_length}")
        if self.regex is not None:
            parts.append(f"Matching regex: {self._regex_text()}")

        return " | ".join(parts) if parts else "No filters active"
