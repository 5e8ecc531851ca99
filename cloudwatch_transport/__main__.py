#!/usr/bin/env python3
"""
Ship lines read from stdin to CloudWatch Logs

    some-command | python -m cloudwatch_transport --log-group /app/jobs --log-stream nightly
"""

import argparse
import sys

from pydantic import ValidationError

from .transport import CloudWatchTransport
from .utils.logger import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Forward stdin lines to CloudWatch Logs')
    parser.add_argument('--log-group', required=True, help='CloudWatch Logs group name')
    parser.add_argument('--log-stream', required=True, help='CloudWatch Logs stream name')
    parser.add_argument('--region', help='AWS region (defaults to AWS_REGION)')
    parser.add_argument('--level', default='info', help='Level recorded with every line')
    parser.add_argument('--json', action='store_true', help='Render events as JSON objects')
    parser.add_argument('--flush-interval', type=float, help='Seconds between uploads')
    parser.add_argument('--max-batch-size', type=int, help='Maximum events per upload')
    parser.add_argument('--log-level', help='Level of the transport diagnostics')
    return parser


def main(argv=None) -> int:
    """
    Main entry point for standalone execution
    """
    args = build_parser().parse_args(argv)
    logger = setup_logging(args.log_level)

    failures = []

    def record_failure(error):
        failures.append(error)
        logger.error(f"Upload failed: {error}")

    options = {
        'log_group_name': args.log_group,
        'log_stream_name': args.log_stream,
        'json_message': args.json,
        'error_handler': record_failure,
    }
    if args.region:
        options['region'] = args.region
    if args.flush_interval is not None:
        options['flush_interval'] = args.flush_interval
    if args.max_batch_size is not None:
        options['max_batch_size'] = args.max_batch_size

    try:
        transport = CloudWatchTransport(**options)
    except ValidationError as e:
        logger.error(f"Invalid options: {e}")
        return 2

    lines = 0
    try:
        for line in sys.stdin:
            line = line.rstrip('\n')
            if not line:
                continue
            transport.log(args.level, line)
            lines += 1
    finally:
        transport.close()

    logger.info(f"Forwarded {lines} lines to {args.log_group}/{args.log_stream}, {len(failures)} failed uploads")
    return 1 if failures else 0


if __name__ == '__main__':
    sys.exit(main())
