"""
module responsible for small utility functions and constants used throughout the txanno package
"""
import re
from types import MappingProxyType
from typing import Any, List, Mapping, Tuple

from Bio.Data.CodonTable import standard_dna_table
from Bio.Seq import Seq

from .error import SequenceContextError


class TxNamespace:
    """
    Namespace to hold module constants

    Example:
        >>> class THING(TxNamespace):
        ...     FIRST: str = 'first'
        >>> THING.values()
        ['first']
    """

    @classmethod
    def items(cls) -> List[Tuple[str, Any]]:
        return [
            (key, value)
            for key, value in vars(cls).items()
            if not key.startswith('_') and not isinstance(value, (classmethod, staticmethod))
        ]

    @classmethod
    def values(cls) -> List[Any]:
        return [v for k, v in cls.items()]

    @classmethod
    def enforce(cls, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist

        Example:
            >>> STRAND.enforce('+')
            '+'
            >>> STRAND.enforce('x')
            Traceback (most recent call last):
            ...
            KeyError: "value 'x' is not a valid STRAND"
        """
        if value not in cls.values():
            raise KeyError(f'value {repr(value)} is not a valid {cls.__name__}')
        return value


class STRAND(TxNamespace):
    """
    holds controlled vocabulary for allowed strand values

    Attributes:
        POS: the forward/positive strand
        NEG: the reverse/negative strand
    """

    POS: str = '+'
    NEG: str = '-'


class VARIANT_SHAPE(TxNamespace):
    """
    the shape of a variant after the alleles have been trimmed to their minimal representation

    Attributes:
        SNV: a single base substitution
        MNV: a multi-base substitution where both alleles are the same length
        INSERTION: bases inserted and no bases removed
        DELETION: bases removed and no bases inserted
        DELINS: bases removed and a different number of bases inserted
    """

    SNV: str = 'snv'
    MNV: str = 'mnv'
    INSERTION: str = 'insertion'
    DELETION: str = 'deletion'
    DELINS: str = 'delins'


class VARIANT_TYPE(TxNamespace):
    """
    holds controlled vocabulary for the classification of a single candidate annotation

    Attributes:
        FS_DELETION: deletion which shifts the reading frame
        NON_FS_DELETION: in-frame deletion (or a deletion which leaves the stop codon intact)
        FS_SUBSTITUTION: block substitution which shifts the reading frame or removes the CDS start/end
        NON_FS_SUBSTITUTION: in-frame block substitution
        FS_INSERTION: insertion which shifts the reading frame
        NON_FS_INSERTION: in-frame insertion
        FS_DUPLICATION: duplication which shifts the reading frame
        NON_FS_DUPLICATION: in-frame duplication
        STOPGAIN: a new stop codon is created
        STOPLOSS: the wild-type stop codon is removed
        START_LOSS: the initiating methionine is removed
        MISSENSE: a single amino acid is changed
        SYNONYMOUS: the amino acid sequence is unchanged
        SPLICING: within the splice site radius of a coding exon/intron junction
        NCRNA_EXONIC: exonic in a non-coding transcript
        NCRNA_SPLICING: within the splice site radius of a non-coding exon/intron junction
        UTR5: in the 5' untranslated region
        UTR3: in the 3' untranslated region
        INTRONIC: intronic in a coding transcript
        NCRNA_INTRONIC: intronic in a non-coding transcript
        UPSTREAM: 5' of the transcript within the upstream distance
        DOWNSTREAM: 3' of the transcript within the downstream distance
        INTERGENIC: not within range of any transcript
        ERROR: the annotation could not be computed for this transcript
    """

    FS_DELETION: str = 'frameshift deletion'
    NON_FS_DELETION: str = 'nonframeshift deletion'
    FS_SUBSTITUTION: str = 'frameshift substitution'
    NON_FS_SUBSTITUTION: str = 'nonframeshift substitution'
    FS_INSERTION: str = 'frameshift insertion'
    NON_FS_INSERTION: str = 'nonframeshift insertion'
    FS_DUPLICATION: str = 'frameshift duplication'
    NON_FS_DUPLICATION: str = 'nonframeshift duplication'
    STOPGAIN: str = 'stopgain'
    STOPLOSS: str = 'stoploss'
    START_LOSS: str = 'startloss'
    MISSENSE: str = 'missense'
    SYNONYMOUS: str = 'synonymous'
    SPLICING: str = 'splicing'
    NCRNA_EXONIC: str = 'ncRNA_exonic'
    NCRNA_SPLICING: str = 'ncRNA_splicing'
    UTR5: str = 'UTR5'
    UTR3: str = 'UTR3'
    INTRONIC: str = 'intronic'
    NCRNA_INTRONIC: str = 'ncRNA_intronic'
    UPSTREAM: str = 'upstream'
    DOWNSTREAM: str = 'downstream'
    INTERGENIC: str = 'intergenic'
    ERROR: str = 'error'


class ANNOTATION_CLASS(TxNamespace):
    """
    the buckets candidate annotations are grouped into. Declared in order of precedence, highest first

    Attributes:
        EXONIC: coding changes and coding splice sites
        NCRNA_EXONIC: non-coding exonic changes and non-coding splice sites
        UTR5: 5' untranslated region
        UTR3: 3' untranslated region
        INTRONIC: coding transcript introns
        NCRNA_INTRONIC: non-coding transcript introns
        UPSTREAM: upstream of a transcript
        DOWNSTREAM: downstream of a transcript
        INTERGENIC: between transcripts
        ERROR: annotation failed
    """

    EXONIC: str = 'exonic'
    NCRNA_EXONIC: str = 'ncRNA_exonic'
    UTR5: str = 'UTR5'
    UTR3: str = 'UTR3'
    INTRONIC: str = 'intronic'
    NCRNA_INTRONIC: str = 'ncRNA_intronic'
    UPSTREAM: str = 'upstream'
    DOWNSTREAM: str = 'downstream'
    INTERGENIC: str = 'intergenic'
    ERROR: str = 'error'

    @classmethod
    def from_variant_type(cls, variant_type: str) -> str:
        """
        the bucket a given candidate classification belongs to

        Example:
            >>> ANNOTATION_CLASS.from_variant_type(VARIANT_TYPE.STOPGAIN)
            'exonic'
        """
        VARIANT_TYPE.enforce(variant_type)
        if variant_type in EXONIC_VARIANT_TYPES:
            return cls.EXONIC
        if variant_type == VARIANT_TYPE.NCRNA_SPLICING:
            return cls.NCRNA_EXONIC
        return cls.enforce(variant_type)


EXONIC_VARIANT_TYPES = frozenset(
    [
        VARIANT_TYPE.FS_DELETION,
        VARIANT_TYPE.NON_FS_DELETION,
        VARIANT_TYPE.FS_SUBSTITUTION,
        VARIANT_TYPE.NON_FS_SUBSTITUTION,
        VARIANT_TYPE.FS_INSERTION,
        VARIANT_TYPE.NON_FS_INSERTION,
        VARIANT_TYPE.FS_DUPLICATION,
        VARIANT_TYPE.NON_FS_DUPLICATION,
        VARIANT_TYPE.STOPGAIN,
        VARIANT_TYPE.STOPLOSS,
        VARIANT_TYPE.START_LOSS,
        VARIANT_TYPE.MISSENSE,
        VARIANT_TYPE.SYNONYMOUS,
        VARIANT_TYPE.SPLICING,
    ]
)
"""classifications which are reported in the exonic bucket"""

GENIC_CLASSES = frozenset(
    [
        ANNOTATION_CLASS.EXONIC,
        ANNOTATION_CLASS.NCRNA_EXONIC,
        ANNOTATION_CLASS.UTR5,
        ANNOTATION_CLASS.UTR3,
        ANNOTATION_CLASS.INTRONIC,
    ]
)
"""buckets which indicate the variant has an impact on a gene"""


class PROTEIN_NOTATION(TxNamespace):
    """
    styles for rendering protein changes

    Attributes:
        ONE_LETTER: one-letter amino acids, X for stop and no termination distance (p.G1172fs)
        HGVS: three-letter amino acids, * for stop (p.Gly1172Glufs*34)
    """

    ONE_LETTER: str = 'one_letter'
    HGVS: str = 'hgvs'


class SUBCOMMAND(TxNamespace):
    ANNOTATE: str = 'annotate'


COMPLETE_STAMP: str = 'TXANNO.COMPLETE'
"""Filename for all complete stamp files"""

CODON_SIZE: int = 3
"""the number of bases making up a codon"""

START_AA: str = 'M'
"""The amino acid expected to start translation
"""
STOP_AA: str = '*'
"""The amino acid expected to end translation
"""

GAP: str = '-'
"""symbol used in place of an empty allele"""


def _build_codon_table() -> Mapping[str, str]:
    table = dict(standard_dna_table.forward_table.items())
    for codon in standard_dna_table.stop_codons:
        table[codon] = STOP_AA
    return MappingProxyType(table)


CODON_TABLE: Mapping[str, str] = _build_codon_table()
"""read-only mapping of all 64 DNA codons to their one-letter amino acid (STOP_AA for stop codons)"""


def translate_codon(codon: str) -> str:
    """
    Args:
        codon: three DNA bases

    Returns:
        the one-letter amino acid for the codon

    Raises:
        SequenceContextError: the codon is incomplete or contains non-ACGT bases

    Example:
        >>> translate_codon('TGA')
        '*'
    """
    try:
        return CODON_TABLE[codon.upper()]
    except (KeyError, AttributeError):
        raise SequenceContextError('cannot translate codon', codon)


def reverse_complement(s: str) -> str:
    """
    wrapper for the Bio.Seq reverse_complement method

    Args:
        s: the input DNA sequence

    Returns:
        str: the reverse complement of the input sequence

    Warning:
        assumes the input is a DNA sequence

    Example:
        >>> reverse_complement('ATCCGGT')
        'ACCGGAT'
    """
    input_string = str(s)
    if not re.match('^[A-Za-z]*$', input_string):
        raise ValueError('unexpected sequence format. cannot reverse complement', input_string)
    return str(Seq(input_string).reverse_complement())


def translate(s: str, reading_frame: int = 0) -> str:
    """
    given a DNA sequence, translates it and returns the protein amino acid sequence

    Args:
        s: the input DNA sequence
        reading_frame: where to start translating the sequence

    Returns:
        the amino acid sequence
    """
    reading_frame = reading_frame % CODON_SIZE

    temp = s[reading_frame:]
    if len(temp) % 3 == 1:
        temp = temp[:-1]
    elif len(temp) % 3 == 2:
        temp = temp[:-2]
    return str(Seq(temp).translate())


# content related to tabbed files for input/output
class COLUMNS(TxNamespace):
    """
    Column names for i/o files
    """

    id: str = 'id'
    chr: str = 'chr'
    pos: str = 'pos'
    ref: str = 'ref'
    alt: str = 'alt'
    annotation_class: str = 'annotation_class'
    variant_type: str = 'variant_type'
    gene: str = 'gene'
    transcript: str = 'transcript'
    coding_notation: str = 'coding_notation'
    protein_notation: str = 'protein_notation'
    annotation: str = 'annotation'
    error: str = 'error'


def sort_columns(input_columns):
    order = {}
    for i, col in enumerate(COLUMNS.values()):
        order[col] = i
    temp = sorted([c for c in input_columns if c in order], key=lambda x: order[x])
    temp = temp + sorted([c for c in input_columns if c not in order])
    return temp
