"""
module which holds all functions relating to loading reference files and variant inputs and writing the
annotation results
"""
import json
import os
from typing import Dict, List

import pandas as pd
from shortuuid import uuid
from snakemake.utils import validate as snakemake_validate

from ..constants import COLUMNS
from ..error import InconsistentInputError
from ..util import bash_expands, logger, output_tabbed_file
from .base import AnnotationResult, Variant
from .genomic import Transcript, TranscriptIndex

TRANSCRIPTS_SCHEMA = os.path.join(os.path.dirname(__file__), 'transcripts_schema.json')


def parse_transcripts_json(data: Dict) -> List[Transcript]:
    """
    parses a json of gene model information into transcript objects. Transcripts whose sequence does not
    agree with their exons are skipped

    Raises:
        AssertionError: the data does not match the transcripts schema
    """
    try:
        snakemake_validate(data, TRANSCRIPTS_SCHEMA)
    except Exception as err:
        short_msg = '. '.join(
            [line for line in str(err).split('\n') if line.strip()][:3]
        )  # these can get super long
        raise AssertionError(short_msg)

    transcripts = []
    tx_skipped = 0
    for tx_dict in data['transcripts']:
        try:
            transcript = Transcript(
                name=tx_dict['name'],
                chr=tx_dict['chr'],
                strand=tx_dict['strand'],
                exons=[(ex['start'], ex['end']) for ex in tx_dict['exons']],
                seq=tx_dict['seq'],
                gene=tx_dict.get('gene'),
                cds_start=tx_dict.get('cds_start'),
                cds_end=tx_dict.get('cds_end'),
            )
        except InconsistentInputError as err:
            logger.debug(f'skipping transcript {tx_dict["name"]}: {err}')
            tx_skipped += 1
            continue
        transcripts.append(transcript)
    if tx_skipped:
        logger.warning(f'skipped {tx_skipped} transcripts which did not match their exon definitions')
    return transcripts


def load_transcripts(*filepaths: str) -> TranscriptIndex:
    """
    loads gene models from one or more json files

    Args:
        filepaths: paths to the input files

    Returns:
        the transcripts indexed by chromosome and position
    """
    index = TranscriptIndex()
    for filename in filepaths:
        logger.info(f'loading: {filename}')
        with open(filename) as fh:
            data = json.load(fh)
        for transcript in parse_transcripts_json(data):
            index.add(transcript)
    logger.info(f'loaded {len(index)} transcripts')
    return index


def read_variants_file(filename: str) -> List[Variant]:
    """
    reads a tab-delimited file of variants. The expected columns are

    - chr: the chromosome
    - pos: the 1-based position of the first base of the reference allele
    - ref: the reference allele (- or empty for insertions)
    - alt: the alternate allele (- or empty for deletions)
    - id: (optional) a label for the variant. Generated if not given

    For example:

    .. code-block:: text

        chr     pos     ref     alt
        chr11   4519    GGAGGCGGGGACACCAGGGCCTG     G

    Raises:
        KeyError: a required column is missing
    """
    try:
        df = pd.read_csv(
            filename,
            dtype={
                COLUMNS.id: str,
                COLUMNS.chr: str,
                COLUMNS.pos: int,
                COLUMNS.ref: str,
                COLUMNS.alt: str,
            },
            sep='\t',
            comment='#',
            keep_default_na=False,
            na_values=['None', 'none', 'N/A', 'n/a', 'null', 'NULL', 'Null', 'nan', '<NA>', 'NaN'],
        )
        df = df.where(pd.notnull(df), None)
    except pd.errors.EmptyDataError:
        return []

    for col in [COLUMNS.chr, COLUMNS.pos, COLUMNS.ref, COLUMNS.alt]:
        if col not in df:
            raise KeyError(f'missing required column: {col}')

    variants = []
    for row in df.to_dict('records'):
        variants.append(
            Variant(
                chr=row[COLUMNS.chr],
                pos=row[COLUMNS.pos],
                ref=row[COLUMNS.ref],
                alt=row[COLUMNS.alt],
                id=row.get(COLUMNS.id) or uuid(),
            )
        )
    return variants


def read_variants(*inputs: str) -> List[Variant]:
    variants = []
    for finput in bash_expands(*inputs):
        logger.info(f'loading: {finput}')
        variants.extend(read_variants_file(finput))
    logger.info(f'loaded {len(variants)} variants')
    return variants


def write_annotations(results: List[AnnotationResult], filename: str):
    """
    write the resolved annotations as a tab-delimited file, one row per annotation
    """
    rows = []
    for result in results:
        rows.extend(result.flatten())
    output_tabbed_file(rows, filename, header=COLUMNS.values())
