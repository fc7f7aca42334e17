#!python
import argparse
import json
import logging
import platform
import sys
import time
from typing import Dict, List, Optional

from . import __version__
from . import config as _config
from . import util as _util
from .annotate import main as annotate_main
from .constants import SUBCOMMAND
from .schemas import validate_config
from .util import filepath


def create_parser(argv):
    parser = argparse.ArgumentParser(formatter_class=_config.CustomHelpFormatter)
    parser.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    subp = parser.add_subparsers(dest='command', help='specifies which subprogram to use')
    subp.required = True
    required = {}  # hold required argument group by subparser command name
    optional = {}  # hold optional argument group by subparser command name
    for command in SUBCOMMAND.values():
        subparser = subp.add_parser(
            command, formatter_class=_config.CustomHelpFormatter, add_help=False
        )
        required[command] = subparser.add_argument_group('required arguments')
        optional[command] = subparser.add_argument_group('optional arguments')
        optional[command].add_argument(
            '-h', '--help', action='help', help='show this help message and exit'
        )
        optional[command].add_argument(
            '-v',
            '--version',
            action='version',
            version='%(prog)s version ' + __version__,
            help='Outputs the version number',
        )
        optional[command].add_argument('--log', help='redirect stdout to a log file', default=None)
        optional[command].add_argument(
            '--log_level',
            help='level of logging to output',
            choices=['INFO', 'DEBUG'],
            default='INFO',
        )
        required[command].add_argument(
            '--config', '-c', help='path to the JSON config file', type=filepath, required=True
        )
        required[command].add_argument(
            '-o', '--output', help='path to the output directory', required=True
        )
        required[command].add_argument(
            '-n',
            '--inputs',
            nargs='+',
            help='path to the input files',
            required=True,
            metavar='FILEPATH',
        )

    return parser, parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    loads reference files and redirects into subcommand main functions

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    try:
        _util.logger.info(f'TXANNO: {__version__}')
        _util.logger.info(f'hostname: {platform.node()}')
        _util.log_arguments(args)

        config: Dict = dict()
        with open(args.config, 'r') as fh:
            config = json.load(fh)
        validate_config(config, args.command)

        # try checking the input files exist
        try:
            args.inputs = _util.bash_expands(*args.inputs)
        except FileNotFoundError:
            parser.error('--inputs file(s) for {} {} do not exist'.format(args.command, args.inputs))

        if args.command == SUBCOMMAND.ANNOTATE:
            annotate_main.main(
                inputs=args.inputs,
                output=args.output,
                start_time=start_time,
                config=config,
            )

        duration = int(time.time()) - start_time
        _util.logger.info(f'run time (hh/mm/ss): {_util.format_run_time(duration)}')
        _util.logger.info(f'run time (s): {duration}')
    finally:
        for handler in logging.root.handlers[:]:
            logging.root.removeHandler(handler)
        for handler in original_logging_handlers:
            logging.root.addHandler(handler)


if __name__ == '__main__':
    main()
