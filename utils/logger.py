"""
Logging utilities with colorized output
"""

import sys
import logging
import threading


class Colors:
    """ANSI escape sequences used for logs and results"""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    GRAY = '\033[90m'
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    BLUE = '\033[94m'
    MAGENTA = '\033[95m'
    CYAN = '\033[96m'
    CRITICAL = '\033[97;101m'


class ColoredFormatter(logging.Formatter):
    """
    "[LEVEL] message", level colored unless no_color is set.
    Debug records logged from worker threads are tagged with the thread
    name so interleaved lines can be told apart.
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.GRAY,
        logging.INFO: Colors.BLUE,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.CRITICAL,
    }

    def __init__(self, no_color=False):
        super().__init__()
        self.no_color = no_color

    def format(self, record):
        message = record.getMessage()
        if record.levelno == logging.DEBUG and record.threadName != threading.main_thread().name:
            message = f"({record.threadName}) {message}"

        level = record.levelname
        if not self.no_color:
            level = f"{self.LEVEL_COLORS.get(record.levelno, Colors.RESET)}{level}{Colors.RESET}"
        return f"[{level}] {message}"


class FuzzLogger:
    """Custom logger for recufuzz"""

    def __init__(self, verbose=False, no_color=False, silent=False, stream=None):
        self.verbose = verbose
        self.no_color = no_color
        self.silent = silent
        self.stream = stream or sys.stdout
        self.logger = logging.getLogger('recufuzz')
        self.logger.propagate = False

        if verbose:
            level = logging.DEBUG
        elif silent:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.logger.setLevel(level)

        # Console handler, replacing any left by an earlier setup
        for old in list(self.logger.handlers):
            self.logger.removeHandler(old)
        handler = logging.StreamHandler(self.stream)
        handler.setFormatter(ColoredFormatter(no_color=no_color))
        self.logger.addHandler(handler)

    def colorize(self, text, color):
        """Apply color to text"""
        if self.no_color:
            return text
        return f"{color}{text}{Colors.RESET}"

    def debug(self, msg):
        self.logger.debug(msg)

    def info(self, msg):
        self.logger.info(msg)

    def success(self, msg):
        """Success message (green)"""
        self.logger.info(self.colorize(msg, Colors.GREEN))

    def warning(self, msg):
        self.logger.warning(msg)

    def error(self, msg):
        self.logger.error(msg)

    def critical(self, msg):
        self.logger.critical(msg)

    def stats(self, stats):
        """Print run statistics"""
        if self.silent:
            return
        out = self.stream
        print(f"\n{self.colorize('═' * 80, Colors.CYAN)}", file=out)
        print(f"{self.colorize('Statistics:', Colors.BOLD)}", file=out)
        print(f"  Requests sent:     {stats.dispatched}", file=out)
        print(f"  Results found:     {self.colorize(str(stats.found), Colors.GREEN)}", file=out)
        print(f"  Filtered out:      {stats.filtered}", file=out)
        print(f"  Duplicates:        {stats.duplicates}", file=out)
        print(f"  Errors:            {stats.errors}", file=out)
        print(f"  Elapsed time:      {stats.elapsed:.2f}s", file=out)
        print(f"{self.colorize('═' * 80, Colors.CYAN)}\n", file=out)


# Global logger instance
_logger = None


def setup_logger(verbose=False, no_color=False, silent=False, stream=None):
    """Setup global logger"""
    global _logger
    _logger = FuzzLogger(verbose=verbose, no_color=no_color, silent=silent, stream=stream)
    return _logger


def get_logger():
    """Get global logger instance"""
    global _logger
    if _logger is None:
        _logger = FuzzLogger()
    return _logger


def log_banner(version):
    """Print recufuzz banner"""
    logger = get_logger()
    if logger.silent:
        return
    if not logger.no_color:
        banner = f"""
{Colors.CYAN}{Colors.BOLD}  recufuzz{Colors.RESET} {Colors.GRAY}v{version}{Colors.RESET}
  {Colors.MAGENTA}Recursive content discovery fuzzer{Colors.RESET}
{Colors.CYAN}{'─' * 50}{Colors.RESET}
"""
    else:
        banner = f"""
  recufuzz v{version}
  Recursive content discovery fuzzer
  --------------------------------------------------
"""
    print(banner, file=logger.stream)
