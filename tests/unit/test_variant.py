import pytest
from txanno.annotate.base import Variant
from txanno.annotate.collection import AnnotationCollection
from txanno.annotate.constants import AnnotationSettings
from txanno.annotate.genomic import TranscriptIndex
from txanno.annotate.variant import annotate_transcript, annotate_variant, annotate_variants
from txanno.constants import ANNOTATION_CLASS, VARIANT_TYPE
from txanno.error import InconsistentInputError

from ..util import LONG_DELETED, build_long_transcript, build_short_transcript, build_transcript


@pytest.fixture
def transcript():
    return build_short_transcript()


@pytest.fixture
def spliced():
    return build_short_transcript(exon_lengths=[12, 25])


class TestExonic:
    def test_missense(self, transcript):
        ann = annotate_transcript(Variant('1', 1009, 'G', 'A'), transcript)
        assert ann.variant_type == VARIANT_TYPE.MISSENSE
        assert ann.annotation == 'NM_0001:exon1:c.4G>A:p.A2T'

    def test_missense_negative_strand(self):
        transcript = build_short_transcript(strand='-')
        ann = annotate_transcript(Variant('1', 1027, 'C', 'T'), transcript)
        assert ann.variant_type == VARIANT_TYPE.MISSENSE
        assert ann.annotation == 'NM_0001:exon1:c.4G>A:p.A2T'

    def test_frameshift_insertion(self, transcript):
        ann = annotate_transcript(Variant('1', 1009, 'G', 'GT'), transcript)
        assert ann.variant_type == VARIANT_TYPE.FS_INSERTION
        assert ann.annotation == 'NM_0001:exon1:c.4_5insT:p.A2fs'

    def test_second_exon(self, spliced):
        ann = annotate_transcript(Variant('1', 1117, 'G', 'A'), spliced)
        assert ann.annotation == 'NM_0001:exon2:c.12G>A:p.W4X'

    def test_reference_mismatch(self, transcript):
        with pytest.raises(InconsistentInputError) as err:
            annotate_transcript(Variant('1', 1009, 'A', 'T'), transcript)
        assert 'reference allele does not match' in str(err.value)

    def test_long_frameshift_deletion(self):
        transcript = build_long_transcript()
        variant = Variant('1', 4519, 'G' + LONG_DELETED, 'G')
        ann = annotate_transcript(variant, transcript, AnnotationSettings(protein_notation='hgvs'))
        assert ann.variant_type == VARIANT_TYPE.FS_DELETION
        assert ann.annotation == 'NM_0001:exon1:c.3515_3536del:p.Gly1172Glufs*34'
        ann = annotate_transcript(variant, transcript)
        assert ann.annotation == 'NM_0001:exon1:c.3515_3536del:p.G1172fs'


class TestUntranslated:
    def test_utr5(self, transcript):
        ann = annotate_transcript(Variant('1', 1001, 'G', 'A'), transcript)
        assert ann.variant_type == VARIANT_TYPE.UTR5
        assert ann.annotation == 'NM_0001:exon1:c.-5G>A'

    def test_utr3(self, transcript):
        ann = annotate_transcript(Variant('1', 1029, 'T', 'C'), transcript)
        assert ann.variant_type == VARIANT_TYPE.UTR3
        assert ann.annotation == 'NM_0001:exon1:c.*3T>C'

    def test_non_coding(self):
        transcript = build_transcript(utr5='ATGGCTGAATAA')
        ann = annotate_transcript(Variant('1', 1003, 'G', 'T'), transcript)
        assert ann.variant_type == VARIANT_TYPE.NCRNA_EXONIC
        assert ann.annotation == 'NM_0001:exon1:n.4G>T'

    def test_deletion_clipped_at_transcript_start(self, transcript):
        ann = annotate_transcript(Variant('1', 998, 'AAGG', 'A'), transcript)
        assert ann.variant_type == VARIANT_TYPE.UTR5
        assert ann.annotation == 'NM_0001:exon1:c.-6_-5del'


class TestIntronic:
    def test_intronic(self, spliced):
        ann = annotate_transcript(Variant('1', 1050, 'A', 'C'), spliced)
        assert ann.variant_type == VARIANT_TYPE.INTRONIC
        assert ann.annotation == 'GENE1'

    def test_splice_site(self, spliced):
        ann = annotate_transcript(Variant('1', 1013, 'A', 'G'), spliced)
        assert ann.variant_type == VARIANT_TYPE.SPLICING
        assert ann.annotation == 'NM_0001:exon1:c.6+2A>G'

    def test_outside_splice_site_radius(self, spliced):
        ann = annotate_transcript(Variant('1', 1014, 'A', 'G'), spliced)
        assert ann.variant_type == VARIANT_TYPE.INTRONIC
        settings = AnnotationSettings(splice_site_radius=3)
        assert annotate_transcript(Variant('1', 1014, 'A', 'G'), spliced, settings).variant_type == VARIANT_TYPE.SPLICING

    def test_deletion_across_exon_boundary(self, spliced):
        ann = annotate_transcript(Variant('1', 1010, 'CTA', 'C'), spliced)
        assert ann.variant_type == VARIANT_TYPE.SPLICING
        assert ann.annotation == 'NM_0001:exon1:c.6_6+1del'

    def test_non_coding_intron(self):
        transcript = build_transcript(utr5='ATGGCTGAATAA', exon_lengths=[6, 6])
        ann = annotate_transcript(Variant('1', 1050, 'A', 'C'), transcript)
        assert ann.variant_type == VARIANT_TYPE.NCRNA_INTRONIC


class TestFlanking:
    def test_upstream(self, transcript):
        ann = annotate_transcript(Variant('1', 990, 'A', 'C'), transcript)
        assert ann.variant_type == VARIANT_TYPE.UPSTREAM
        assert ann.annotation == 'GENE1'

    def test_downstream(self, transcript):
        ann = annotate_transcript(Variant('1', 1100, 'A', 'C'), transcript)
        assert ann.variant_type == VARIANT_TYPE.DOWNSTREAM

    def test_negative_strand(self):
        transcript = build_short_transcript(strand='-')
        assert annotate_transcript(Variant('1', 990, 'A', 'C'), transcript).variant_type == VARIANT_TYPE.DOWNSTREAM
        assert annotate_transcript(Variant('1', 1100, 'A', 'C'), transcript).variant_type == VARIANT_TYPE.UPSTREAM

    def test_distance_limit(self, transcript):
        settings = AnnotationSettings(upstream_distance=10)
        assert annotate_transcript(Variant('1', 990, 'A', 'C'), transcript, settings) is not None
        assert annotate_transcript(Variant('1', 989, 'A', 'C'), transcript, settings) is None

    def test_too_far(self, transcript):
        assert annotate_transcript(Variant('1', 5000, 'A', 'C'), transcript) is None

    def test_other_chromosome(self, transcript):
        assert annotate_transcript(Variant('2', 1009, 'G', 'A'), transcript) is None


class TestAnnotateVariant:
    def test_error_candidate(self, transcript):
        result = annotate_variant(Variant('1', 1009, 'A', 'T'), [transcript])
        assert result.ok
        assert result.annotation_class == ANNOTATION_CLASS.ERROR
        assert result.annotations[0].annotation == 'NM_0001:reference allele does not match the transcript sequence'

    def test_error_does_not_hide_other_transcripts(self, transcript):
        other = build_short_transcript(name='NM_0002', gene='GENE2', start=1100)
        result = annotate_variant(Variant('1', 1009, 'A', 'T'), [transcript, other])
        assert result.annotation_class == ANNOTATION_CLASS.UPSTREAM
        assert [a.annotation for a in result.annotations] == ['GENE2']

    def test_intergenic(self, transcript):
        right = build_short_transcript(name='NM_0002', gene='GENE2', start=5000)
        result = annotate_variant(Variant('1', 3000, 'A', 'C'), [], neighbours=(transcript, right))
        assert result.annotation_class == ANNOTATION_CLASS.INTERGENIC
        assert result.annotations[0].annotation == 'GENE1(dist=1964),GENE2(dist=2000)'

    def test_intergenic_without_neighbours(self):
        result = annotate_variant(Variant('1', 3000, 'A', 'C'), [])
        assert result.annotations[0].annotation == 'NONE(dist=NONE),NONE(dist=NONE)'

    def test_reused_collection(self, transcript):
        collection = AnnotationCollection()
        first = annotate_variant(Variant('1', 1009, 'G', 'A'), [transcript], collection=collection)
        second = annotate_variant(Variant('1', 990, 'A', 'C'), [transcript], collection=collection)
        assert first.annotation_class == ANNOTATION_CLASS.EXONIC
        assert second.annotation_class == ANNOTATION_CLASS.UPSTREAM
        assert len(second.annotations) == 1


class TestAnnotateVariants:
    @pytest.fixture
    def index(self):
        return TranscriptIndex(
            [build_short_transcript(), build_short_transcript(name='NM_0002', gene='GENE2', start=5000)]
        )

    @pytest.fixture
    def variants(self):
        return [
            Variant('1', 1009, 'G', 'A', id='missense'),
            Variant('1', 3000, 'A', 'C', id='intergenic'),
            Variant('1', 4990, 'A', 'C', id='upstream'),
        ]

    def test_sequential(self, index, variants):
        results = annotate_variants(variants, index)
        assert [r.variant.id for r in results] == ['missense', 'intergenic', 'upstream']
        assert [r.annotation_class for r in results] == [
            ANNOTATION_CLASS.EXONIC,
            ANNOTATION_CLASS.INTERGENIC,
            ANNOTATION_CLASS.UPSTREAM,
        ]
        assert results[1].annotations[0].annotation == 'GENE1(dist=1964),GENE2(dist=2000)'

    def test_parallel_matches_sequential(self, index, variants):
        sequential = annotate_variants(variants, index)
        parallel = annotate_variants(variants, index, AnnotationSettings(processes=2))
        assert [r.variant.id for r in parallel] == [r.variant.id for r in sequential]
        assert [r.annotations for r in parallel] == [r.annotations for r in sequential]
