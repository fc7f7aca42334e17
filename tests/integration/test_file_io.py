import json

import pytest
from txanno.annotate.base import Annotation, AnnotationResult, Variant
from txanno.annotate.file_io import (
    load_transcripts,
    parse_transcripts_json,
    read_variants,
    read_variants_file,
    write_annotations,
)
from txanno.constants import COLUMNS, VARIANT_TYPE
from txanno.error import UnresolvableAnnotationError

from ..util import build_short_transcript, transcript_json, write_transcripts, write_variants


class TestLoadTranscripts:
    def test_round_trip(self, tmp_path):
        filename = write_transcripts(
            tmp_path / 'transcripts.json',
            build_short_transcript(),
            build_short_transcript(name='NM_0002', strand='-', exon_lengths=[12, 25], start=5000),
        )
        index = load_transcripts(filename)
        assert len(index) == 2
        transcript = index.find('1', 5000, 5000)[0]
        assert transcript.name == 'NM_0002'
        assert transcript.strand == '-'
        assert transcript.cds_start == 7
        assert len(transcript.exons) == 2

    def test_non_coding(self):
        data = transcript_json(build_short_transcript())
        del data['transcripts'][0]['cds_start']
        del data['transcripts'][0]['cds_end']
        transcripts = parse_transcripts_json(data)
        assert not transcripts[0].is_coding

    def test_skip_inconsistent_transcript(self):
        data = transcript_json(build_short_transcript(), build_short_transcript(name='NM_0002'))
        data['transcripts'][1]['seq'] += 'A'
        transcripts = parse_transcripts_json(data)
        assert [t.name for t in transcripts] == ['NM_0001']

    def test_bad_strand(self):
        data = transcript_json(build_short_transcript())
        data['transcripts'][0]['strand'] = '?'
        with pytest.raises(AssertionError):
            parse_transcripts_json(data)

    def test_missing_sequence(self):
        data = transcript_json(build_short_transcript())
        del data['transcripts'][0]['seq']
        with pytest.raises(AssertionError):
            parse_transcripts_json(data)

    def test_missing_transcripts(self, tmp_path):
        filename = tmp_path / 'transcripts.json'
        filename.write_text(json.dumps({'genes': []}))
        with pytest.raises(AssertionError):
            load_transcripts(str(filename))


class TestReadVariants:
    def test_read(self, tmp_path):
        filename = write_variants(
            tmp_path / 'variants.tab',
            [['v1', 'chr1', 1009, 'G', 'A'], ['v2', '1', 1010, 'CTA', 'C'], ['v3', '1', 1009, '-', 'T']],
            header=['id', 'chr', 'pos', 'ref', 'alt'],
        )
        variants = read_variants_file(filename)
        assert [v.id for v in variants] == ['v1', 'v2', 'v3']
        assert variants[0].chr == '1'
        assert variants[1].ref_allele == 'TA'
        assert variants[2].alt_allele == 'T'

    def test_generated_ids(self, tmp_path):
        filename = write_variants(tmp_path / 'variants.tab', [['1', 1009, 'G', 'A'], ['1', 1009, 'G', 'C']])
        variants = read_variants_file(filename)
        assert len(variants) == 2
        assert variants[0].id
        assert variants[0].id != variants[1].id

    def test_comments_ignored(self, tmp_path):
        filename = tmp_path / 'variants.tab'
        filename.write_text('## a comment\nchr\tpos\tref\talt\n1\t1009\tG\tA\n')
        assert len(read_variants_file(str(filename))) == 1

    def test_missing_column(self, tmp_path):
        filename = write_variants(tmp_path / 'variants.tab', [['1', 1009, 'G']], header=['chr', 'pos', 'ref'])
        with pytest.raises(KeyError):
            read_variants_file(filename)

    def test_empty_file(self, tmp_path):
        filename = tmp_path / 'variants.tab'
        filename.write_text('')
        assert read_variants_file(str(filename)) == []

    def test_expands_globs(self, tmp_path):
        write_variants(tmp_path / 'a.tab', [['1', 1009, 'G', 'A']])
        write_variants(tmp_path / 'b.tab', [['1', 1009, 'G', 'C']])
        assert len(read_variants(str(tmp_path / '*.tab'))) == 2


class TestWriteAnnotations:
    def test_write(self, tmp_path):
        variant = Variant('1', 1009, 'G', 'A', id='v1')
        annotations = [
            Annotation.exonic('NM_1', VARIANT_TYPE.MISSENSE, 1, 'c.4G>A', 'p.A2T', gene='GENE1'),
            Annotation.exonic('NM_2', VARIANT_TYPE.MISSENSE, 2, 'c.7G>A', 'p.A3T', gene='GENE1'),
        ]
        results = [
            AnnotationResult(variant, 'exonic', annotations),
            AnnotationResult(Variant('1', 3000, 'A', 'C', id='v2'), error=UnresolvableAnnotationError('empty')),
        ]
        filename = str(tmp_path / 'annotations.tab')
        write_annotations(results, filename)
        with open(filename) as fh:
            lines = [line.split('\t') for line in fh.read().strip().split('\n')]
        header = lines[0]
        assert header == COLUMNS.values()
        assert len(lines) == 4
        rows = [dict(zip(header, line)) for line in lines[1:]]
        assert rows[0][COLUMNS.annotation] == 'NM_1:exon1:c.4G>A:p.A2T'
        assert rows[1][COLUMNS.transcript] == 'NM_2'
        assert rows[2][COLUMNS.id] == 'v2'
        assert rows[2][COLUMNS.error] == 'empty'
        assert rows[2][COLUMNS.annotation] == 'None'
