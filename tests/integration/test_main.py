import json
import os
import sys
from unittest.mock import patch

import pandas as pd
import pytest
from txanno.annotate.constants import PASS_FILENAME
from txanno.annotate.main import main as annotate_main
from txanno.constants import COLUMNS, COMPLETE_STAMP, SUBCOMMAND
from txanno.main import main as txanno_main
from txanno.schemas import validate_config

from . import ARGUMENT_ERROR
from ..util import LONG_DELETED, build_long_transcript, build_short_transcript, write_transcripts, write_variants


@pytest.fixture
def inputs(tmp_path):
    transcripts = write_transcripts(
        tmp_path / 'transcripts.json',
        build_short_transcript(name='NM_0001', gene='GENE1'),
        build_long_transcript(name='NM_0002', gene='GENE2', chr='11'),
    )
    variants = write_variants(
        tmp_path / 'variants.tab',
        [
            ['missense', '1', 1009, 'G', 'A'],
            ['frameshift', 'chr11', 4519, 'G' + LONG_DELETED, 'G'],
            ['mismatch', '1', 1009, 'A', 'T'],
            ['intergenic', '1', 5000, 'A', 'C'],
        ],
        header=['id', 'chr', 'pos', 'ref', 'alt'],
    )
    config = {'reference.transcripts': [transcripts], 'annotate.protein_notation': 'hgvs'}
    config_file = tmp_path / 'config.json'
    config_file.write_text(json.dumps(config))
    return {'config': str(config_file), 'variants': variants, 'output': str(tmp_path / 'output')}


def read_output(output):
    df = pd.read_csv(os.path.join(output, PASS_FILENAME), sep='\t', dtype=str)
    return {row[COLUMNS.id]: row for row in df.to_dict('records')}


class TestAnnotateMain:
    def test_main(self, inputs):
        with open(inputs['config']) as fh:
            config = validate_config(json.load(fh), SUBCOMMAND.ANNOTATE)
        results = annotate_main(inputs=[inputs['variants']], output=inputs['output'], config=config)
        assert len(results) == 4
        assert all([r.ok for r in results])
        assert os.path.exists(os.path.join(inputs['output'], COMPLETE_STAMP))

        rows = read_output(inputs['output'])
        assert rows['missense'][COLUMNS.annotation] == 'NM_0001:exon1:c.4G>A:p.Ala2Thr'
        assert rows['frameshift'][COLUMNS.variant_type] == 'frameshift deletion'
        assert rows['frameshift'][COLUMNS.protein_notation] == 'p.Gly1172Glufs*34'
        assert rows['frameshift'][COLUMNS.gene] == 'GENE2'
        assert rows['mismatch'][COLUMNS.annotation_class] == 'error'
        assert rows['intergenic'][COLUMNS.annotation] == 'GENE1(dist=3964),NONE(dist=NONE)'


class TestCommandLine:
    def test_annotate(self, inputs):
        args = [
            'txanno',
            SUBCOMMAND.ANNOTATE,
            '--config',
            inputs['config'],
            '--output',
            inputs['output'],
            '--inputs',
            inputs['variants'],
        ]
        with patch.object(sys, 'argv', args):
            txanno_main()
        rows = read_output(inputs['output'])
        assert rows['missense'][COLUMNS.protein_notation] == 'p.Ala2Thr'
        assert os.path.exists(os.path.join(inputs['output'], COMPLETE_STAMP))

    def test_log_file(self, inputs, tmp_path):
        log = str(tmp_path / 'run.log')
        txanno_main(
            [
                SUBCOMMAND.ANNOTATE,
                '-c',
                inputs['config'],
                '-o',
                inputs['output'],
                '-n',
                inputs['variants'],
                '--log',
                log,
                '--log_level',
                'DEBUG',
            ]
        )
        with open(log) as fh:
            content = fh.read()
        assert 'TXANNO' in content
        assert 'annotated 4 of 4 variants' in content

    def test_missing_inputs(self, inputs, tmp_path):
        with pytest.raises(SystemExit) as err:
            txanno_main(
                [
                    SUBCOMMAND.ANNOTATE,
                    '-c',
                    inputs['config'],
                    '-o',
                    inputs['output'],
                    '-n',
                    str(tmp_path / 'missing*.tab'),
                ]
            )
        assert err.value.code == ARGUMENT_ERROR

    def test_missing_config_file(self, inputs, tmp_path):
        with pytest.raises(SystemExit) as err:
            txanno_main(
                [SUBCOMMAND.ANNOTATE, '-c', str(tmp_path / 'missing.json'), '-o', inputs['output'], '-n', inputs['variants']]
            )
        assert err.value.code == ARGUMENT_ERROR

    def test_bad_config(self, inputs, tmp_path):
        config_file = tmp_path / 'bad.json'
        config_file.write_text(json.dumps({'annotate.unknown_option': 1}))
        with pytest.raises(AssertionError):
            txanno_main(
                [SUBCOMMAND.ANNOTATE, '-c', str(config_file), '-o', inputs['output'], '-n', inputs['variants']]
            )

    def test_no_subcommand(self):
        with pytest.raises(SystemExit) as err:
            txanno_main([])
        assert err.value.code == ARGUMENT_ERROR
