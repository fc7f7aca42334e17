import errno
import logging
import os
import time
from glob import glob
from typing import Dict, List, Optional

import pandas as pd
from braceexpand import braceexpand

from .constants import COMPLETE_STAMP, sort_columns

logger = logging.getLogger('txanno')


def bash_expands(*expressions: str) -> List[str]:
    """
    expand a file glob expression, allowing bash-style brackets.

    Returns:
        a list of files

    Raises:
        FileNotFoundError: one of the expressions does not match any files

    Example:
        >>> bash_expands('./{test,doc}/*py')
        [...]
    """
    result = []
    for expression in expressions:
        eresult = []
        for name in braceexpand(expression):
            for fname in glob(name):
                eresult.append(fname)
        if not eresult:
            raise FileNotFoundError('The expression does not match any files', expression)
        result.extend(eresult)
    return [os.path.abspath(f) for f in result]


def filepath(path):
    try:
        file_list = bash_expands(path)
    except FileNotFoundError:
        raise TypeError('File does not exist', path)
    else:
        if len(file_list) > 1:
            raise TypeError('File pattern match multiple files and expected only one', path)
    return file_list[0]


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (Namespace): the namespace to print arguments for
    """
    logger.info('arguments')

    indent = ' '

    for arg, val in sorted(args.__dict__.items()):
        if isinstance(val, list):
            if len(val) <= 1:
                logger.info(f'{indent}{arg} = {val}')
                continue
            logger.info(f'{indent}{arg} = [')
            for v in val:
                logger.info(f'{indent * 2}{repr(v)}')
            logger.info(f'{indent}]')
        elif any([isinstance(val, typ) for typ in [str, int, float, bool, tuple]]) or val is None:
            logger.info(f'{indent}{arg}= {repr(val)}')
        else:
            logger.info(f'{arg} = {object.__repr__(val)}')


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the directory already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    try:
        os.makedirs(dirname)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirname):
            pass
        else:
            raise exc
    return dirname


def format_run_time(duration: int) -> str:
    """
    Example:
        >>> format_run_time(3725)
        '1:02:05'
    """
    hours = duration - duration % 3600
    minutes = duration - hours - (duration - hours) % 60
    seconds = duration - hours - minutes
    return '{}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds)


def output_tabbed_file(rows: List[Dict], filename: str, header=None):
    if header is None:
        header = set()
        for row in rows:
            header.update(row.keys())
    header = sort_columns(header)
    logger.info(f'writing: {filename}')
    df = pd.DataFrame.from_records(rows, columns=header)
    df = df.fillna('None')
    df.to_csv(filename, columns=header, index=False, sep='\t')


def generate_complete_stamp(output_dir: str, start_time: Optional[int] = None) -> str:
    """
    writes a complete stamp, optionally including the run time if start_time is given

    Args:
        output_dir: path to the output dir the stamp should be written in
        start_time: the start time

    Return:
        path to the complete stamp

    Example:
        >>> generate_complete_stamp('some_output_dir')
        'some_output_dir/TXANNO.COMPLETE'
    """
    stamp = os.path.join(output_dir, COMPLETE_STAMP)
    logger.info(f'complete: {stamp}')
    with open(stamp, 'w') as fh:
        if start_time is not None:
            duration = int(time.time()) - start_time
            fh.write('run time (hh/mm/ss): {}\n'.format(format_run_time(duration)))
            fh.write('run time (s): {}\n'.format(duration))
    return stamp
