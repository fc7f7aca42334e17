import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..constants import ANNOTATION_CLASS, COLUMNS, GAP, VARIANT_SHAPE, VARIANT_TYPE
from ..error import InconsistentInputError
from .constants import INTERGENIC_NONE


class ReferenceName(str):
    """
    Class for reference sequence names. Ensures that hg19/hg38 chromosome names match.

    Example:
        >>> ReferenceName('chr1') == ReferenceName('1')
        True
    """

    def __eq__(self, other):
        options = {str(self)}
        if self.startswith('chr'):
            options.add(str(self[3:]))
        else:
            options.add('chr' + str(self))
        return other in options

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash(re.sub('^chr', '', str(self)))


def _clean_allele(allele: Optional[str]) -> str:
    allele = '' if allele is None else str(allele).strip().upper()
    if allele in {GAP, '.'}:
        return ''
    if not re.match(r'^[ACGTN]*$', allele):
        raise InconsistentInputError('unexpected characters in allele', allele)
    return allele


@dataclass(frozen=True)
class Variant:
    """
    a small variant given by an anchor position and the reference/alternate alleles

    On creation the alleles are trimmed of any shared prefix and then any shared suffix. After trimming
    start/end give the genomic range of the affected reference bases. For insertions start and end are
    both the base immediately preceding the inserted bases

    Example:
        >>> v = Variant('1', 100, 'GAT', 'G')
        >>> v.start, v.end, v.ref_allele, v.alt_allele
        (101, 102, 'AT', '')
    """

    chr: str
    pos: int
    ref: str
    alt: str
    id: Optional[str] = None
    start: int = field(init=False)
    end: int = field(init=False)
    ref_allele: str = field(init=False)
    alt_allele: str = field(init=False)

    def __post_init__(self):
        ref = _clean_allele(self.ref)
        alt = _clean_allele(self.alt)
        if ref == alt:
            raise InconsistentInputError('reference and alternate alleles must differ', self.ref, self.alt)

        prefix = 0
        while prefix < min(len(ref), len(alt)) and ref[prefix] == alt[prefix]:
            prefix += 1
        suffix = 0
        while (
            suffix < min(len(ref), len(alt)) - prefix
            and ref[len(ref) - 1 - suffix] == alt[len(alt) - 1 - suffix]
        ):
            suffix += 1
        ref_allele = ref[prefix : len(ref) - suffix]
        alt_allele = alt[prefix : len(alt) - suffix]

        if not ref_allele:
            # an empty input reference means the anchor is the base preceding the insertion
            start = int(self.pos) + prefix - 1 if ref else int(self.pos)
            end = start
        else:
            start = int(self.pos) + prefix
            end = start + len(ref_allele) - 1

        object.__setattr__(self, 'chr', ReferenceName(self.chr))
        object.__setattr__(self, 'pos', int(self.pos))
        object.__setattr__(self, 'start', start)
        object.__setattr__(self, 'end', end)
        object.__setattr__(self, 'ref_allele', ref_allele)
        object.__setattr__(self, 'alt_allele', alt_allele)

    @property
    def shape(self) -> str:
        if not self.ref_allele:
            return VARIANT_SHAPE.INSERTION
        elif not self.alt_allele:
            return VARIANT_SHAPE.DELETION
        elif len(self.ref_allele) == 1 and len(self.alt_allele) == 1:
            return VARIANT_SHAPE.SNV
        elif len(self.ref_allele) == len(self.alt_allele):
            return VARIANT_SHAPE.MNV
        return VARIANT_SHAPE.DELINS

    def __str__(self):
        return '{}:{}{}>{}'.format(
            self.chr, self.start, self.ref_allele or GAP, self.alt_allele or GAP
        )

    def flatten(self) -> Dict:
        return {
            COLUMNS.id: self.id,
            COLUMNS.chr: str(self.chr),
            COLUMNS.pos: self.pos,
            COLUMNS.ref: self.ref,
            COLUMNS.alt: self.alt,
        }


def nucleotide_notation(first: str, last: str, kind: str, alt: str = '', ref: str = '', prefix: str = 'c') -> str:
    """
    Args:
        first: the position notation of the first affected base (or the base preceding an insertion)
        last: the position notation of the last affected base (or the base following an insertion)
        kind: one of 'sub', 'del', 'ins', 'dup' or 'delins'
        alt: inserted bases (transcript orientation)
        ref: reference base for substitutions (transcript orientation)
        prefix: c for coding transcripts, n for non-coding transcripts

    Example:
        >>> nucleotide_notation('3515', '3536', 'del')
        'c.3515_3536del'
        >>> nucleotide_notation('-12', '-12', 'sub', alt='T', ref='G')
        'c.-12G>T'
    """
    span = first if first == last else '{}_{}'.format(first, last)
    if kind == 'sub':
        return '{}.{}{}>{}'.format(prefix, first, ref, alt)
    elif kind in {'del', 'dup'}:
        return '{}.{}{}'.format(prefix, span, kind)
    elif kind == 'ins':
        return '{}.{}_{}ins{}'.format(prefix, first, last, alt)
    elif kind == 'delins':
        return '{}.{}delins{}'.format(prefix, span, alt)
    raise ValueError('unsupported nucleotide change', kind)


@dataclass(frozen=True)
class Annotation:
    """
    a candidate annotation of a variant against a single transcript

    Two candidates are equal when they have the same transcript, classification and display string. The
    remaining attributes are carried for output only. The cds position is only used for ordering and exon
    lookup and is never compared between transcripts

    Attributes:
        transcript: the transcript name (comma delimited when merged)
        variant_type: one of VARIANT_TYPE
        annotation: the display string
        gene: the gene symbol
        cdna: the coding (c.) or non-coding (n.) notation
        protein: the protein (p.) notation
        exon: exon number, 1-based in transcript orientation
        cds_position: CDS-relative position of the change
        degraded: the protein notation could not be fully computed (coding notation only or an imprecise frameshift)
    """

    transcript: Optional[str]
    variant_type: str
    annotation: str
    gene: Optional[str] = field(default=None, compare=False)
    cdna: Optional[str] = field(default=None, compare=False)
    protein: Optional[str] = field(default=None, compare=False)
    exon: Optional[int] = field(default=None, compare=False)
    cds_position: Optional[int] = field(default=None, compare=False)
    degraded: bool = field(default=False, compare=False)

    @property
    def annotation_class(self) -> str:
        return ANNOTATION_CLASS.from_variant_type(self.variant_type)

    @classmethod
    def exonic(
        cls,
        transcript: str,
        variant_type: str,
        exon: int,
        cdna: str,
        protein: Optional[str] = None,
        gene: Optional[str] = None,
        cds_position: Optional[int] = None,
        degraded: bool = False,
    ) -> 'Annotation':
        """
        builds a candidate displayed as transcript:exon:cdna[:protein]

        Example:
            >>> Annotation.exonic('NM_001127179', VARIANT_TYPE.FS_DELETION, 29, 'c.3515_3536del', 'p.G1172fs').annotation
            'NM_001127179:exon29:c.3515_3536del:p.G1172fs'
        """
        text = '{}:exon{}:{}'.format(transcript, exon, cdna)
        if protein:
            text += ':' + protein
        return cls(
            transcript=transcript,
            variant_type=variant_type,
            annotation=text,
            gene=gene,
            cdna=cdna,
            protein=protein,
            exon=exon,
            cds_position=cds_position,
            degraded=degraded,
        )

    @classmethod
    def genic(cls, transcript: str, variant_type: str, gene: Optional[str]) -> 'Annotation':
        """builds a candidate displayed as the gene symbol (intronic, upstream and downstream)"""
        return cls(
            transcript=transcript, variant_type=variant_type, annotation=gene or transcript, gene=gene
        )

    @classmethod
    def intergenic(cls, left=None, left_dist=None, right=None, right_dist=None) -> 'Annotation':
        """
        Example:
            >>> Annotation.intergenic('GENE1', 10, None, None).annotation
            'GENE1(dist=10),NONE(dist=NONE)'
        """
        text = '{}(dist={}),{}(dist={})'.format(
            left or INTERGENIC_NONE,
            left_dist if left_dist is not None else INTERGENIC_NONE,
            right or INTERGENIC_NONE,
            right_dist if right_dist is not None else INTERGENIC_NONE,
        )
        return cls(transcript=None, variant_type=VARIANT_TYPE.INTERGENIC, annotation=text)

    @classmethod
    def error(cls, transcript: str, message: str, gene: Optional[str] = None) -> 'Annotation':
        return cls(
            transcript=transcript,
            variant_type=VARIANT_TYPE.ERROR,
            annotation='{}:{}'.format(transcript, message),
            gene=gene,
        )

    def flatten(self) -> Dict:
        return {
            COLUMNS.annotation_class: self.annotation_class,
            COLUMNS.variant_type: self.variant_type,
            COLUMNS.gene: self.gene,
            COLUMNS.transcript: self.transcript,
            COLUMNS.coding_notation: self.cdna,
            COLUMNS.protein_notation: self.protein,
            COLUMNS.annotation: self.annotation,
        }


@dataclass
class AnnotationResult:
    """
    the outcome of annotating a single variant

    Attributes:
        variant: the input variant
        annotation_class: the bucket selected by precedence (None when resolution failed)
        annotations: the resolved candidates from the selected bucket
        error: the failure raised while resolving, if any
    """

    variant: Variant
    annotation_class: Optional[str] = None
    annotations: List[Annotation] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def flatten(self) -> List[Dict]:
        rows = []
        if not self.ok:
            row = self.variant.flatten()
            row[COLUMNS.error] = str(self.error)
            return [row]
        for ann in self.annotations:
            row = self.variant.flatten()
            row.update(ann.flatten())
            rows.append(row)
        return rows
