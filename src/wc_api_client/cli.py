"""
Command-line interface for the WooCommerce API Python client
Provides API calls, signature debugging and raw response inspection
"""

import argparse
import json
import logging
import re
import sys
from dataclasses import replace
from typing import Any, Dict, List, Optional

from . import __version__
from .config import ClientConfig, load_config_from_env, load_config_from_file
from .exceptions import WCClientError
from .http_client import WCApiClient
from .response import extract_pagination, parse_headers, parse_status_code, split_response
from .signing import DEFAULT_API_ENDPOINT, OAuth1Signer, build_query, create_signing_config, to_param_items

_BRACKET_PATTERN = re.compile(r'\[([^\]]*)\]')


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog='wc-api',
        description='WooCommerce REST API client: signed calls, signature debugging and response parsing'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'WooCommerce API Python client {__version__}'
    )

    parser.add_argument(
        '-v', '--verbose',
        action='count',
        default=0,
        help='Increase log verbosity (-v for INFO, -vv for DEBUG)'
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    setup_call_parser(subparsers)
    setup_sign_parser(subparsers)
    setup_parse_parser(subparsers)

    return parser


def setup_call_parser(subparsers):
    """Setup API call subcommand."""
    call_parser = subparsers.add_parser('call', help='Make an API call and print the result')
    call_parser.add_argument('endpoint', help='Endpoint path relative to the API URL, e.g. orders')
    call_parser.add_argument('--method', default='GET', help='HTTP method (default: GET)')
    call_parser.add_argument('--param', action='append', default=[], metavar='KEY=VALUE',
                             help='Query parameter; bracket keys like filter[period]=week nest')
    call_parser.add_argument('--data', help='JSON request body')
    call_parser.add_argument('--config', help='JSON configuration file (default: WC_* environment variables)')
    call_parser.add_argument('--raw', action='store_true', help='Print the body without JSON decoding')


def setup_sign_parser(subparsers):
    """Setup signature debugging subcommand."""
    sign_parser = subparsers.add_parser('sign', help='Print OAuth parameters, base string and signature')
    sign_parser.add_argument('endpoint', help='Endpoint path relative to the API URL')
    sign_parser.add_argument('--url', required=True, help='Store URL')
    sign_parser.add_argument('--key', required=True, help='Consumer key')
    sign_parser.add_argument('--secret', required=True, help='Consumer secret')
    sign_parser.add_argument('--method', default='GET', help='HTTP method (default: GET)')
    sign_parser.add_argument('--api-endpoint', default=DEFAULT_API_ENDPOINT,
                             help=f'API endpoint family (default: {DEFAULT_API_ENDPOINT})')
    sign_parser.add_argument('--hash-algorithm', choices=['SHA1', 'SHA256'], default='SHA256',
                             help='HMAC digest (default: SHA256)')
    sign_parser.add_argument('--param', action='append', default=[], metavar='KEY=VALUE',
                             help='Query parameter')
    sign_parser.add_argument('--timestamp', type=int, help='Fixed oauth_timestamp')
    sign_parser.add_argument('--nonce', help='Fixed oauth_nonce')


def setup_parse_parser(subparsers):
    """Setup raw response parsing subcommand."""
    parse_parser = subparsers.add_parser('parse', help='Split and parse a raw HTTP response dump')
    parse_parser.add_argument('file', help='File holding the raw response ("-" for stdin)')
    parse_parser.add_argument('--api-endpoint', default=DEFAULT_API_ENDPOINT,
                              help='API endpoint family, selects the pagination headers')


def parse_param_args(values: List[str]) -> Dict[str, Any]:
    """
    Turn ``KEY=VALUE`` arguments into a parameter mapping.

    ``filter[period]=week`` becomes ``{'filter': {'period': 'week'}}``.
    """
    params: Dict[str, Any] = {}
    for item in values:
        if '=' not in item:
            raise WCClientError(f"Invalid parameter (expected KEY=VALUE): {item}", "INVALID_ARGUMENT")
        key, value = item.split('=', 1)

        bracket = key.find('[')
        if bracket <= 0:
            params[key] = value
            continue

        path = [key[:bracket]] + _BRACKET_PATTERN.findall(key[bracket:])
        target = params
        for segment in path[:-1]:
            target = target.setdefault(segment, {})
            if not isinstance(target, dict):
                raise WCClientError(f"Conflicting parameter: {item}", "INVALID_ARGUMENT")
        target[path[-1]] = value
    return params


def configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')


def handle_call_command(args) -> int:
    """Handle an API call."""
    config: ClientConfig = load_config_from_file(args.config) if args.config else load_config_from_env()
    if args.raw:
        config = replace(config, return_as_object=False)

    body = json.loads(args.data) if args.data else None

    with WCApiClient(config) as client:
        response = client.make_api_call(args.endpoint, parse_param_args(args.param), args.method.upper(), body)

    print(f"Status: {response.status_code}")
    if response.total is not None:
        print(f"Total: {response.total}")
    if response.total_pages is not None:
        print(f"Total pages: {response.total_pages}")

    if response.error is not None:
        print(f"Error: {response.error.message}", file=sys.stderr)
        print(json.dumps(response.data, indent=2))
        return 1

    if args.raw or response.decode_error is not None:
        print(response.body)
    else:
        print(json.dumps(response.data, indent=2))

    return 0 if response.ok else 1


def handle_sign_command(args) -> int:
    """Handle signature debugging."""
    config = create_signing_config(
        consumer_key=args.key,
        consumer_secret=args.secret,
        store_url=args.url,
        api_endpoint=args.api_endpoint,
        hash_algorithm=args.hash_algorithm,
    )
    signer = OAuth1Signer(config)

    params = signer.build_oauth_parameters(
        parse_param_args(args.param),
        args.method,
        args.endpoint,
        nonce=args.nonce,
        timestamp=args.timestamp,
    )
    unsigned = {k: v for k, v in params.items() if k != 'oauth_signature'}
    details = signer.sign_with_details(unsigned, args.method, args.endpoint)

    print(f"Base string: {details.base_string}")
    print(f"Signature: {details.signature}")
    print(f"URL: {config.api_url}{args.endpoint}?{build_query(to_param_items(params))}")
    return 0


def handle_parse_command(args) -> int:
    """Handle raw response parsing."""
    if args.file == '-':
        raw = sys.stdin.buffer.read()
    else:
        with open(args.file, 'rb') as f:
            raw = f.read()

    split = split_response(raw)
    headers = parse_headers(split.header_blob)
    totals = extract_pagination(headers, args.api_endpoint)

    print(json.dumps({
        'status_code': parse_status_code(split.header_blob),
        'header_blocks': split.blocks,
        'exhausted': split.exhausted,
        'headers': headers,
        'total': totals.total,
        'total_pages': totals.total_pages,
        'body_length': len(split.body),
    }, indent=2))
    return 0


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the CLI

    Args:
        argv: Command line arguments (None to use sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    try:
        if args.command == 'call':
            return handle_call_command(args)
        elif args.command == 'sign':
            return handle_sign_command(args)
        elif args.command == 'parse':
            return handle_parse_command(args)
        else:
            # No command specified, show help
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except WCClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
