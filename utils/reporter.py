"""
Render results as colored text or JSON lines
"""

import json
import sys
from typing import Optional

from core.models import Result
from utils.logger import Colors


def status_color(status_code: Optional[int]) -> str:
    if status_code is None:
        return Colors.RESET
    if 200 <= status_code < 300:
        return Colors.GREEN
    if 300 <= status_code < 400:
        return Colors.CYAN
    if 400 <= status_code < 500:
        return Colors.YELLOW
    if status_code >= 500:
        return Colors.RED
    return Colors.RESET


def format_result(result: Result, json_output: bool = False, no_color: bool = False) -> str:
    if json_output:
        return json.dumps(result.to_dict())

    if result.failed:
        tag = '[ERROR]' if no_color else f"{Colors.MAGENTA}[ERROR]{Colors.RESET}"
        return f"{tag} {result.target} -> {result.error}"

    if no_color:
        return f"{result.target}\t{result.status}\t{result.length}"
    color = status_color(result.status)
    return f"{color}{result.target}{Colors.RESET}\t{result.status}\t{result.length}"


class ResultReporter:
    """Write each result to stdout and, optionally, to an output file"""

    def __init__(self, json_output=False, no_color=False, output_file=None, stream=None):
        self.json_output = json_output
        self.no_color = no_color
        self.stream = stream or sys.stdout
        self.output_handle = open(output_file, 'w', encoding='utf-8') if output_file else None

    def report(self, result: Result):
        print(format_result(result, self.json_output, self.no_color), file=self.stream, flush=True)
        if self.output_handle:
            self.output_handle.write(format_result(result, self.json_output, no_color=True) + '\n')
            self.output_handle.flush()

    def close(self):
        if self.output_handle:
            self.output_handle.close()
            self.output_handle = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
