"""
HTTP request construction and retry logic
"""

import time
from typing import Optional, Tuple

import requests
import urllib3
from requests.adapters import HTTPAdapter

from core.expander import replace_placeholder
from core.models import Job
from utils.config import FuzzConfig
from utils.logger import get_logger


def build_session(config: FuzzConfig) -> requests.Session:
    """Session shared by all workers, pool sized to the thread count"""
    session = requests.Session()
    adapter = HTTPAdapter(pool_connections=config.threads, pool_maxsize=config.threads)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    session.verify = not config.insecure
    if config.insecure:
        urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
    proxies = config.proxies
    if proxies:
        session.proxies.update(proxies)
    return session


class RequestExecutor:
    """Send one job's request, retrying on transport failures"""

    def __init__(self, config: FuzzConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.session = session or build_session(config)
        self.logger = get_logger()

    def build_headers(self, job: Job) -> dict:
        return {name: replace_placeholder(value, job.target)
                for name, value in self.config.headers.items()}

    def execute(self, job: Job) -> Tuple[Optional[int], bytes, Optional[str]]:
        """
        Returns (status, body, error). Any HTTP response counts as success,
        whatever its status code; only exceptions raised by requests are
        retried. After the last failed attempt status is None and error
        describes the failure.
        """
        request_kwargs = {
            'headers': self.build_headers(job),
            'data': job.body.encode('utf-8') if job.body else None,
            'timeout': self.config.timeout,
            'allow_redirects': self.config.follow_redirects,
            'verify': not self.config.insecure,
        }
        # Per request too, otherwise *_PROXY and *_CA_BUNDLE environment variables take precedence
        if self.config.proxies:
            request_kwargs['proxies'] = self.config.proxies

        error = None
        attempts = self.config.retries + 1
        for attempt in range(attempts):
            if attempt > 0:
                time.sleep(self.config.retry_delay)
            try:
                with self.session.request(self.config.method, job.target, **request_kwargs) as response:
                    body = response.content
                    return response.status_code, body, None
            except requests.exceptions.RequestException as e:
                error = f"{type(e).__name__}: {e}"
                self.logger.debug(f"Attempt {attempt + 1}/{attempts} failed: {job.target} : {type(e).__name__}")

        return None, b'', error

    def close(self):
        self.session.close()
