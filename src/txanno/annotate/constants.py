from ..constants import PROTEIN_NOTATION
from ..schemas import DEFAULTS, get_by_prefix

PASS_FILENAME = 'annotations.tab'

INTERGENIC_NONE = 'NONE'
"""label used for a missing neighbour in intergenic annotations"""


class AnnotationSettings:
    """
    holds the settings used while annotating variants against transcripts

    Attributes:
        upstream_distance (int): max distance 5' of a transcript to report the variant as upstream
        downstream_distance (int): max distance 3' of a transcript to report the variant as downstream
        splice_site_radius (int): number of intronic bases at each exon boundary considered part of the splice site
        frameshift_lookahead (int): number of codons compared when looking for the first residue changed by a frameshift
        protein_notation (str): one of PROTEIN_NOTATION
        merge_upstream (bool): merge upstream candidates the same way downstream candidates are merged
        processes (int): number of worker processes to use for a batch of variants
    """

    def __init__(self, **kwargs):
        inputs = {}
        defaults = get_by_prefix(DEFAULTS, 'annotate.')
        inputs.update(defaults)
        inputs.update(kwargs)
        for arg, val in inputs.items():
            if arg not in defaults:
                raise KeyError('unrecognized argument', arg)
            setattr(self, arg, val)
        PROTEIN_NOTATION.enforce(self.protein_notation)
        if self.frameshift_lookahead < 1:
            raise ValueError('frameshift_lookahead must be at least 1 codon', self.frameshift_lookahead)

    @property
    def flank(self) -> int:
        """the widest window around a transcript in which a variant is still reported against it"""
        return max(self.upstream_distance, self.downstream_distance)

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__,
            ', '.join(['{}={}'.format(k, repr(v)) for k, v in sorted(self.__dict__.items())]),
        )
