import os
import time
from typing import Dict, List

from ..schemas import get_by_prefix
from ..util import generate_complete_stamp, logger, mkdirp
from .constants import PASS_FILENAME, AnnotationSettings
from .file_io import load_transcripts, read_variants, write_annotations
from .variant import annotate_variants


def main(
    inputs: List[str],
    output: str,
    config: Dict,
    start_time=int(time.time()),
    **kwargs,
):
    """
    Args:
        inputs: list of input files to read
        output: path to the output directory
        config: the validated config
    """
    settings = AnnotationSettings(**get_by_prefix(config, 'annotate.'))
    index = load_transcripts(*config['reference.transcripts'])
    variants = read_variants(*inputs)

    mkdirp(output)
    results = annotate_variants(variants, index, settings)

    failed = [r for r in results if not r.ok]
    for result in failed:
        logger.warning(f'unable to annotate {result.variant}: {result.error}')
    logger.info(f'annotated {len(results) - len(failed)} of {len(results)} variants')

    write_annotations(results, os.path.join(output, PASS_FILENAME))
    generate_complete_stamp(output, start_time=start_time)
    return results
