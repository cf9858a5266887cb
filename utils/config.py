"""
Configuration management for recufuzz
"""

import json
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

PLACEHOLDER = 'FUZZ'
TOR_PROXY = 'socks5h://127.0.0.1:9050'
DEFAULT_CONFIG_FILE = Path.home() / '.recufuzz' / 'config.json'

# Options that may be persisted as defaults
PERSISTED_OPTIONS = (
    'method', 'header', 'extensions', 'threads', 'timeout', 'retries',
    'delay', 'match_code', 'min_length', 'max_length', 'recursion_depth',
    'insecure', 'proxy', 'tor', 'no_color', 'json',
)


class ConfigError(ValueError):
    """Invalid fuzzing configuration, raised before any request is sent"""


@dataclass(frozen=True)
class FuzzConfig:
    """Read-only settings shared by every worker of a run"""
    url: str
    wordlist: str
    method: str = 'GET'
    headers: Mapping[str, str] = field(default_factory=dict)
    data: str = ''
    extensions: Tuple[str, ...] = ()
    threads: int = 10
    min_length: int = 0
    max_length: int = 0
    recursion: bool = False
    recursion_depth: int = 2
    match_codes: Tuple[int, ...] = ()
    match_regex: Optional[re.Pattern] = None
    follow_redirects: bool = True
    timeout: float = 10.0
    insecure: bool = False
    proxy: Optional[str] = None
    tor: bool = False
    retries: int = 1
    retry_delay: float = 0.5
    delay: float = 0.0
    json_output: bool = False
    output: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))
        object.__setattr__(self, 'extensions', tuple(self.extensions))
        object.__setattr__(self, 'match_codes', tuple(self.match_codes))

    @property
    def proxies(self) -> Optional[dict]:
        """Proxy mapping for requests, Tor takes precedence over --proxy"""
        proxy = TOR_PROXY if self.tor else self.proxy
        if not proxy:
            return None
        return {'http': proxy, 'https': proxy}

    def validate(self) -> 'FuzzConfig':
        if not self.url:
            raise ConfigError("URL must not be empty")
        if PLACEHOLDER not in self.url and PLACEHOLDER not in self.data:
            raise ConfigError(f"URL or request body must contain {PLACEHOLDER} keyword")
        if not self.url.startswith(('http://', 'https://')):
            raise ConfigError("URL must start with http:// or https://")
        if not self.method:
            raise ConfigError("HTTP method must not be empty")
        if self.threads < 1:
            raise ConfigError(f"Thread count must be positive, got {self.threads}")
        if self.retries < 0:
            raise ConfigError(f"Retry count cannot be negative, got {self.retries}")
        if self.min_length < 0 or self.max_length < 0:
            raise ConfigError("Length bounds cannot be negative")
        if self.max_length and self.min_length > self.max_length:
            raise ConfigError(
                f"Minimum length {self.min_length} exceeds maximum length {self.max_length}"
            )
        if self.recursion_depth < 0:
            raise ConfigError("Recursion depth cannot be negative")
        if self.timeout <= 0:
            raise ConfigError("Timeout must be positive")
        try:
            with open(self.wordlist, 'rb'):
                pass
        except OSError as e:
            raise ConfigError(f"Cannot read wordlist {self.wordlist}: {e.strerror or e}") from e
        return self


def parse_status_codes(value) -> Tuple[int, ...]:
    """Parse '200,301' or an iterable of codes"""
    if not value:
        return ()
    items = value.split(',') if isinstance(value, str) else value
    codes = []
    for item in items:
        item = str(item).strip()
        if not item:
            continue
        try:
            codes.append(int(item))
        except ValueError:
            raise ConfigError(f"Invalid status code: {item}") from None
    return tuple(codes)


def parse_extensions(value) -> Tuple[str, ...]:
    """Parse '.php,.html'; extensions are appended verbatim"""
    if not value:
        return ()
    items = value.split(',') if isinstance(value, str) else value
    return tuple(ext.strip() for ext in items if ext.strip())


def parse_headers(values: Optional[Iterable[str]]) -> dict:
    """Parse repeated 'Name: value' strings into a header map"""
    headers = {}
    for header in values or []:
        if ':' not in header:
            raise ConfigError(f"Malformed header (expected 'Name: value'): {header}")
        key, val = header.split(':', 1)
        if not key.strip():
            raise ConfigError(f"Malformed header (empty name): {header}")
        headers[key.strip()] = val.strip()
    return headers


def compile_regex(pattern: Optional[str]) -> Optional[re.Pattern]:
    """Compile a body regex; it is matched against the raw response bytes"""
    if not pattern:
        return None
    try:
        return re.compile(pattern.encode('utf-8'))
    except re.error as e:
        raise ConfigError(f"Invalid regex {pattern!r}: {e}") from e


def build_config(url: str,
                 wordlist: str,
                 method: str = 'GET',
                 headers: Optional[Iterable[str]] = None,
                 data: Optional[str] = None,
                 extensions=None,
                 threads: int = 10,
                 min_length: int = 0,
                 max_length: int = 0,
                 recursion: bool = False,
                 recursion_depth: int = 2,
                 match_codes=None,
                 match_regex: Optional[str] = None,
                 follow_redirects: bool = True,
                 timeout: float = 10.0,
                 insecure: bool = False,
                 proxy: Optional[str] = None,
                 tor: bool = False,
                 retries: int = 1,
                 delay: float = 0.0,
                 json_output: bool = False,
                 output: Optional[str] = None) -> FuzzConfig:
    """
    Build and validate a FuzzConfig from raw option values
    Raises ConfigError on the first invalid value
    """
    config = FuzzConfig(
        url=url,
        wordlist=wordlist,
        method=(method or '').upper(),
        headers=parse_headers(headers),
        data=data or '',
        extensions=parse_extensions(extensions),
        threads=threads,
        min_length=min_length,
        max_length=max_length,
        recursion=recursion,
        recursion_depth=recursion_depth,
        match_codes=parse_status_codes(match_codes),
        match_regex=compile_regex(match_regex),
        follow_redirects=follow_redirects,
        timeout=timeout,
        insecure=insecure,
        proxy=proxy,
        tor=tor,
        retries=retries,
        delay=delay,
        json_output=json_output,
        output=output,
    )
    return config.validate()


class Config:
    """Manage persisted default options"""

    def __init__(self, config_file=None):
        self.config_file = Path(config_file) if config_file else DEFAULT_CONFIG_FILE
        self._load_config()

    def _load_config(self):
        """Load configuration from file"""
        self.data = {}
        if not self.config_file.exists():
            return
        try:
            with open(self.config_file, 'r') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot load config file {self.config_file}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigError(f"Config file {self.config_file} must hold a JSON object")
        self.data = loaded

    def save(self):
        """Save configuration to file"""
        os.makedirs(self.config_file.parent, exist_ok=True)
        with open(self.config_file, 'w') as f:
            json.dump(self.data, f, indent=2)

    def get_defaults(self) -> dict:
        """Stored option values usable as argparse defaults"""
        return {k: v for k, v in self.data.get('defaults', {}).items() if k in PERSISTED_OPTIONS}

    def set_defaults(self, options: Mapping):
        """Remember option values for later runs"""
        defaults = self.data.setdefault('defaults', {})
        for key in PERSISTED_OPTIONS:
            if key in options and options[key] is not None:
                defaults[key] = options[key]
