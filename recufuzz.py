#!/usr/bin/env python3
"""
recufuzz - Recursive content discovery fuzzer
Main CLI entry point
"""

import argparse
import sys

from utils.config import Config, ConfigError, build_config
from utils.logger import setup_logger, log_banner
from utils.reporter import ResultReporter
from core.filters import ResponseFilter
from core.fuzzer import Fuzzer

__version__ = '1.0.0'


def build_parser(defaults=None):
    parser = argparse.ArgumentParser(
        prog='recufuzz',
        description='recufuzz - Recursive content discovery fuzzer',
        epilog="Example: recufuzz -u https://target.com/FUZZ -w words.txt -e .php -mc 200,301"
    )

    # HTTP OPTIONS
    http_group = parser.add_argument_group('HTTP OPTIONS', 'Options controlling the HTTP request')
    http_group.add_argument('-u', '--url',
                        help='Target URL, FUZZ goes here or in the body (e.g., https://site.com/FUZZ)')
    http_group.add_argument('-X', '--method', default='GET',
                        help='HTTP method to use (default: GET)')
    http_group.add_argument('-H', '--header', action='append', default=None,
                        help='Custom HTTP header, FUZZ in the value becomes the request URL (repeatable)')
    http_group.add_argument('-d', '--data',
                        help='Request body, FUZZ is replaced like in the URL')
    http_group.add_argument('-k', '--insecure', action='store_true',
                        help='Disable TLS certificate verification')
    http_group.add_argument('--timeout', type=float, default=10,
                        help='Request timeout in seconds (default: 10)')
    http_group.add_argument('--no-follow-redirect', dest='follow_redirect', action='store_false',
                        help='Report redirects instead of following them')
    http_group.add_argument('--proxy',
                        help='Use proxy (e.g., http://127.0.0.1:8080 or socks5://127.0.0.1:1080)')
    http_group.add_argument('--tor', action='store_true',
                        help='Route requests through Tor (socks5h://127.0.0.1:9050)')
    http_group.add_argument('--retries', type=int, default=1,
                        help='Retries per request on connection errors (default: 1)')
    http_group.add_argument('--delay', type=float, default=0,
                        help='Delay between requests per thread in seconds (default: 0)')

    # WORDLIST OPTIONS
    wordlist_group = parser.add_argument_group('WORDLIST OPTIONS', 'Wordlist and expansion')
    wordlist_group.add_argument('-w', '--wordlist',
                        help='Path to wordlist file')
    wordlist_group.add_argument('-e', '--extensions', type=str,
                        help='File extensions to add (comma-separated, e.g., .php,.html)')
    wordlist_group.add_argument('--recursion', action='store_true',
                        help='Fuzz again below every result found')
    wordlist_group.add_argument('--recursion-depth', type=int, default=2,
                        help='Maximum recursion depth (default: 2)')

    # MATCHER OPTIONS
    match_group = parser.add_argument_group('MATCHER OPTIONS', 'Which responses are reported')
    match_group.add_argument('-mc', '--match-code', type=str,
                        help='Match only these status codes (comma-separated)')
    match_group.add_argument('-mr', '--match-regex', type=str,
                        help='Match response body by regex pattern')
    match_group.add_argument('--min-length', type=int, default=0,
                        help='Minimum response body length in bytes (default: no limit)')
    match_group.add_argument('--max-length', type=int, default=0,
                        help='Maximum response body length in bytes (default: no limit)')

    # OUTPUT OPTIONS
    output_group = parser.add_argument_group('OUTPUT OPTIONS', 'Output and result formatting')
    output_group.add_argument('-o', '--output',
                        help='Also save results to file')
    output_group.add_argument('--json', action='store_true',
                        help='Output results as JSON lines')
    output_group.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output with debug information')
    output_group.add_argument('--no-color', action='store_true',
                        help='Disable colored output')
    output_group.add_argument('-s', '--silent', action='store_true',
                        help='Silent mode (only show results)')

    # GENERAL OPTIONS
    general_group = parser.add_argument_group('GENERAL OPTIONS', 'General options')
    general_group.add_argument('-t', '--threads', type=int, default=10,
                        help='Number of concurrent threads (default: 10)')
    general_group.add_argument('--config',
                        help='Load default options from this JSON file (default: ~/.recufuzz/config.json)')
    general_group.add_argument('--save-config', action='store_true',
                        help='Save the current options as defaults')
    general_group.add_argument('-V', '--version', action='version',
                        version=f'recufuzz v{__version__}')

    if defaults:
        parser.set_defaults(**defaults)
    return parser


def parse_arguments(argv=None):
    """Parse arguments, with defaults taken from the config file"""
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument('--config')
    known, _ = pre.parse_known_args(argv)

    config = Config(known.config)
    args = build_parser(config.get_defaults()).parse_args(argv)
    return args, config


def config_from_args(args):
    return build_config(
        url=args.url,
        wordlist=args.wordlist,
        method=args.method,
        headers=args.header,
        data=args.data,
        extensions=args.extensions,
        threads=args.threads,
        min_length=args.min_length,
        max_length=args.max_length,
        recursion=args.recursion,
        recursion_depth=args.recursion_depth,
        match_codes=args.match_code,
        match_regex=args.match_regex,
        follow_redirects=args.follow_redirect,
        timeout=args.timeout,
        insecure=args.insecure,
        proxy=args.proxy,
        tor=args.tor,
        retries=args.retries,
        delay=args.delay,
        json_output=args.json,
        output=args.output,
    )


def main(argv=None):
    try:
        args, user_config = parse_arguments(argv)
    except ConfigError as e:
        setup_logger().error(str(e))
        return 1

    # Keep stdout clean for JSON lines
    log_stream = sys.stderr if args.json else sys.stdout
    logger = setup_logger(verbose=args.verbose, no_color=args.no_color,
                          silent=args.silent, stream=log_stream)

    if args.save_config:
        user_config.set_defaults(vars(args))
        user_config.save()
        logger.success(f"Configuration saved to {user_config.config_file}")
        if not args.url:
            return 0

    if not args.url or not args.wordlist:
        logger.error("-u/--url and -w/--wordlist are required for fuzzing")
        return 1

    try:
        config = config_from_args(args)
    except ConfigError as e:
        logger.error(str(e))
        return 1

    log_banner(__version__)
    logger.info(f"Target: {config.url}")
    logger.info(f"Wordlist: {config.wordlist}")
    logger.info(f"Threads: {config.threads}")
    if config.extensions:
        logger.info(f"Extensions: {', '.join(config.extensions)}")
    if config.recursion:
        logger.info(f"Recursion: enabled (max depth {config.recursion_depth})")
    if config.tor:
        logger.info("Routing through Tor")
    elif config.proxy:
        logger.info(f"Proxy: {config.proxy}")

    response_filter = ResponseFilter.from_config(config)
    if response_filter.has_filters():
        logger.info(f"Filters: {response_filter.get_summary()}")

    fuzzer = Fuzzer(config, response_filter=response_filter)
    logger.info("Starting fuzzing...\n")

    try:
        with ResultReporter(json_output=config.json_output, no_color=args.no_color,
                            output_file=config.output) as reporter:
            for result in fuzzer.results():
                reporter.report(result)
    except KeyboardInterrupt:
        logger.warning("Fuzzing interrupted by user")
        return 0
    except ConfigError as e:
        logger.error(str(e))
        return 1
    except OSError as e:
        logger.error(f"Cannot write output: {e}")
        return 1
    finally:
        fuzzer.executor.close()

    logger.stats(fuzzer.stats)
    if config.output:
        logger.success(f"Results saved to: {config.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
