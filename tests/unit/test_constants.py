import pytest
from txanno.constants import (
    ANNOTATION_CLASS,
    CODON_TABLE,
    COLUMNS,
    STRAND,
    VARIANT_TYPE,
    reverse_complement,
    sort_columns,
    translate,
    translate_codon,
)
from txanno.error import SequenceContextError


class TestCodonTable:
    def test_all_codons(self):
        assert len(CODON_TABLE) == 64

    def test_stop_codons(self):
        for codon in ['TAA', 'TAG', 'TGA']:
            assert CODON_TABLE[codon] == '*'

    def test_read_only(self):
        with pytest.raises(TypeError):
            CODON_TABLE['TGA'] = 'W'
        assert CODON_TABLE['TGA'] == '*'

    def test_translate_codon(self):
        assert translate_codon('ATG') == 'M'
        assert translate_codon('gga') == 'G'

    def test_translate_incomplete_codon(self):
        with pytest.raises(SequenceContextError):
            translate_codon('TG')

    def test_translate_ambiguous_codon(self):
        with pytest.raises(SequenceContextError):
            translate_codon('ANG')

    def test_translate_missing_codon(self):
        with pytest.raises(SequenceContextError):
            translate_codon(None)


class TestTranslate:
    def test_trailing_bases_ignored(self):
        assert translate('ATGGCTGA') == 'MA'

    def test_reading_frame(self):
        assert translate('CATGGCT', 1) == 'MA'

    def test_reverse_complement(self):
        assert reverse_complement('ATCCGGT') == 'ACCGGAT'
        assert reverse_complement('') == ''

    def test_reverse_complement_bad_input(self):
        with pytest.raises(ValueError):
            reverse_complement('AT-G')


class TestNamespace:
    def test_enforce(self):
        assert STRAND.enforce('-') == '-'
        with pytest.raises(KeyError):
            STRAND.enforce('?')

    def test_class_precedence_order(self):
        assert ANNOTATION_CLASS.values()[:4] == ['exonic', 'ncRNA_exonic', 'UTR5', 'UTR3']
        assert ANNOTATION_CLASS.values()[-2:] == ['intergenic', 'error']

    def test_class_from_variant_type(self):
        assert ANNOTATION_CLASS.from_variant_type(VARIANT_TYPE.SPLICING) == ANNOTATION_CLASS.EXONIC
        assert ANNOTATION_CLASS.from_variant_type(VARIANT_TYPE.NCRNA_SPLICING) == ANNOTATION_CLASS.NCRNA_EXONIC
        assert ANNOTATION_CLASS.from_variant_type(VARIANT_TYPE.UTR3) == ANNOTATION_CLASS.UTR3
        assert ANNOTATION_CLASS.from_variant_type(VARIANT_TYPE.ERROR) == ANNOTATION_CLASS.ERROR

    def test_class_from_bad_variant_type(self):
        with pytest.raises(KeyError):
            ANNOTATION_CLASS.from_variant_type('other')

    def test_sort_columns(self):
        assert sort_columns(['z', COLUMNS.alt, COLUMNS.chr, 'a']) == [COLUMNS.chr, COLUMNS.alt, 'a', 'z']
