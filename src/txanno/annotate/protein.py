"""
protein level consequences of coding changes and their notation
"""
from dataclasses import dataclass
from typing import Optional

from Bio.SeqUtils import seq3

from ..constants import CODON_SIZE, PROTEIN_NOTATION, START_AA, STOP_AA, VARIANT_TYPE, translate, translate_codon
from ..error import SequenceContextError

ONE_LETTER_STOP = 'X'


def aa_position(cds_pos: int) -> int:
    """
    the residue (1-based) a CDS position falls in

    Example:
        >>> aa_position(3515)
        1172
    """
    return (cds_pos - 1) // CODON_SIZE + 1


def frame_offset(cds_pos: int) -> int:
    """
    the position (0, 1 or 2) of a CDS position within its codon
    """
    return (cds_pos - 1) % CODON_SIZE


def residue_at(orf: str, position: int) -> str:
    """
    Args:
        orf: the coding sequence (starting with the start codon)
        position: the residue number (1-based)

    Raises:
        SequenceContextError: the codon is not available
    """
    if position < 1:
        raise SequenceContextError('residue position must be positive', position)
    start = (position - 1) * CODON_SIZE
    return translate_codon(orf[start : start + CODON_SIZE])


def stop_distance(mut_seq: str) -> Optional[int]:
    """
    the number of residues following the first residue of a translated sequence until the first stop

    Args:
        mut_seq: nucleotide sequence starting at the first changed codon

    Returns:
        the index of the first stop after the first residue or None if there is no stop
    """
    aa_seq = translate(mut_seq)
    index = aa_seq.find(STOP_AA, 1)
    return index if index > 0 else None


@dataclass(frozen=True)
class FrameshiftResult:
    """
    Attributes:
        wt_aa: the wild-type residue at the first residue changed
        position: the first residue changed
        mut_aa: the mutant residue replacing it
        ter_distance: residues from the first changed residue (counted as 1) to the new stop, None if no stop found
        is_frameshift: False when no residue differed within the lookahead window
    """

    wt_aa: str
    position: int
    mut_aa: str
    ter_distance: Optional[int] = None
    is_frameshift: bool = True


def scan_frameshift(
    orf: str,
    cds_pos: int,
    deleted_length: int,
    frame: int,
    aa_start: int,
    inserted: str = '',
    lookahead: int = 30,
) -> FrameshiftResult:
    """
    find the first residue changed by a frame shifting event

    The wild-type window is the start of the affected codon, the deleted bases and the lookahead. The mutant
    window is the same with the deleted bases replaced by the inserted bases. Both are translated and compared
    residue by residue from the first affected residue

    Args:
        orf: the coding sequence plus the 3' UTR
        cds_pos: position (1-based) in the orf of the first deleted base (the base following an insertion)
        deleted_length: number of deleted bases
        frame: frame offset of cds_pos
        aa_start: the first affected residue
        inserted: the inserted bases
        lookahead: number of codons past the event to compare

    Raises:
        SequenceContextError: the window runs past either end of the orf
    """
    start = cds_pos - 1
    if start - frame < 0 or start + deleted_length > len(orf):
        raise SequenceContextError('frameshift window is outside the sequence', cds_pos, deleted_length)
    prefix = orf[start - frame : start]
    deleted = orf[start : start + deleted_length]
    rest = orf[start + deleted_length : start + deleted_length + lookahead * CODON_SIZE]

    wt_aa = translate(prefix + deleted + rest)
    mut_aa = translate(prefix + inserted + rest)
    if not wt_aa or not mut_aa:
        raise SequenceContextError('frameshift window is too short to translate', cds_pos)

    for k in range(0, min(len(wt_aa), len(mut_aa))):
        if wt_aa[k] != mut_aa[k]:
            mut_full = translate(prefix + inserted + orf[start + deleted_length :])
            stop = mut_full.find(STOP_AA, k)
            return FrameshiftResult(
                wt_aa[k], aa_start + k, mut_aa[k], stop - k + 1 if stop >= 0 else None
            )
    return FrameshiftResult(wt_aa[0], aa_start, mut_aa[0], is_frameshift=False)


def frameshift_variant_type(result: FrameshiftResult, default: str) -> str:
    """
    the classification of a scanned frameshift. A stop at the first changed residue is a stop gain and a change
    of the wild-type stop is a stop loss
    """
    if not result.is_frameshift:
        return default
    if result.mut_aa == STOP_AA:
        return VARIANT_TYPE.STOPGAIN
    if result.wt_aa == STOP_AA:
        return VARIANT_TYPE.STOPLOSS
    return default


class InframeChange:
    def __init__(self, ref_seq: str, mut_seq: str, offset: int = 1):
        """
        Given two amino acid sequences, assuming there exists a single difference between the two,
        call the change which accounts for it. The common prefix is removed first so that changes in
        repeated residues are placed as far C-terminal as possible

        Args:
            ref_seq: the reference amino acid sequence
            mut_seq: the mutated amino acid sequence
            offset: the residue number of the first residue of both sequences

        Attributes:
            nterm_aligned (int): the number of characters aligned consecutively from the start of both strings
            cterm_aligned (int): the number of characters aligned consecutively from the end of both strings
            del_seq (str): the deleted residues
            ins_seq (str): the inserted residues
            start (int): the first deleted residue or the residue following the inserted residues
            is_dup (bool): the inserted residues duplicate the residues preceding them
        """
        self.ref_seq = ref_seq
        self.mut_seq = mut_seq
        self.offset = offset

        min_len = min(len(ref_seq), len(mut_seq))
        self.nterm_aligned = 0
        while self.nterm_aligned < min_len and ref_seq[self.nterm_aligned] == mut_seq[self.nterm_aligned]:
            self.nterm_aligned += 1
        self.cterm_aligned = 0
        while (
            self.cterm_aligned < min_len - self.nterm_aligned
            and ref_seq[-1 - self.cterm_aligned] == mut_seq[-1 - self.cterm_aligned]
        ):
            self.cterm_aligned += 1

        self.del_seq = ref_seq[self.nterm_aligned : len(ref_seq) - self.cterm_aligned]
        self.ins_seq = mut_seq[self.nterm_aligned : len(mut_seq) - self.cterm_aligned]
        self.start = offset + self.nterm_aligned
        self.is_dup = (
            bool(self.ins_seq)
            and not self.del_seq
            and self.nterm_aligned >= len(self.ins_seq)
            and ref_seq[self.nterm_aligned - len(self.ins_seq) : self.nterm_aligned] == self.ins_seq
        )

    @property
    def end(self) -> int:
        return self.start + len(self.del_seq) - 1

    @property
    def is_synonymous(self) -> bool:
        return not self.del_seq and not self.ins_seq

    @property
    def is_start_loss(self) -> bool:
        return self.start == 1 and self.del_seq.startswith(START_AA)

    @property
    def is_stop_gain(self) -> bool:
        return STOP_AA in self.ins_seq

    @property
    def is_stop_loss(self) -> bool:
        return STOP_AA in self.del_seq and not self.is_stop_gain

    def residue(self, position: int) -> str:
        index = position - self.offset
        if index < 0 or index >= len(self.ref_seq):
            raise SequenceContextError('residue is outside the compared window', position)
        return self.ref_seq[index]

    def __repr__(self):
        return '{}(start={}, del_seq={}, ins_seq={})'.format(
            self.__class__.__name__, self.start, repr(self.del_seq), repr(self.ins_seq)
        )


def inframe_change(orf: str, start: int, end: int, alt: str, context: int = 1) -> InframeChange:
    """
    compare the translation of the codons around an in-frame change

    Args:
        orf: the coding sequence plus the 3' UTR
        start: index (0-based) of the first replaced base
        end: index (0-based, exclusive) following the last replaced base. equal to start for insertions
        alt: the bases replacing orf[start:end]
        context: number of codons on either side of the change to include

    Raises:
        SequenceContextError: the change does not fit within the orf
    """
    if (len(alt) - (end - start)) % CODON_SIZE:
        raise ValueError('change is not in-frame', start, end, alt)
    codon_start = start - start % CODON_SIZE
    codon_end = end + (0 - end) % CODON_SIZE
    if codon_end > len(orf):
        raise SequenceContextError('in-frame change runs past the end of the sequence', start, end)
    window_start = max(0, codon_start - context * CODON_SIZE)
    window_end = min(codon_end + context * CODON_SIZE, len(orf))
    window_end -= (window_end - window_start) % CODON_SIZE

    ref_nt = orf[window_start:window_end]
    mut_nt = orf[window_start:start] + alt + orf[end:window_end]
    return InframeChange(
        translate(ref_nt), translate(mut_nt), window_start // CODON_SIZE + 1
    )


class ProteinNotation:
    """
    renders protein changes in one of the PROTEIN_NOTATION styles

    Example:
        >>> ProteinNotation('hgvs').substitution('G', 12, 'E')
        'p.Gly12Glu'
        >>> ProteinNotation('one_letter').substitution('G', 12, '*')
        'p.G12X'
    """

    def __init__(self, style: str = PROTEIN_NOTATION.ONE_LETTER):
        self.style = PROTEIN_NOTATION.enforce(style)

    @property
    def hgvs(self) -> bool:
        return self.style == PROTEIN_NOTATION.HGVS

    def residues(self, aa_seq: str) -> str:
        if self.hgvs:
            return seq3(aa_seq, custom_map={STOP_AA: STOP_AA})
        return aa_seq.replace(STOP_AA, ONE_LETTER_STOP)

    def _span(self, aa1: str, pos1: int, aa2: Optional[str] = None, pos2: Optional[int] = None) -> str:
        if pos2 is None or pos2 == pos1:
            return '{}{}'.format(self.residues(aa1), pos1)
        return '{}{}_{}{}'.format(self.residues(aa1), pos1, self.residues(aa2), pos2)

    def substitution(self, wt_aa: str, pos: int, mut_aa: str) -> str:
        if self.hgvs and wt_aa == mut_aa:
            return 'p.{}{}='.format(self.residues(wt_aa), pos)
        return 'p.{}{}{}'.format(self.residues(wt_aa), pos, self.residues(mut_aa))

    def stop_loss(self, pos: int, mut_aa: str, extension: Optional[int] = None) -> str:
        if self.hgvs:
            return 'p.{}{}{}ext{}{}'.format(
                STOP_AA, pos, self.residues(mut_aa), STOP_AA, extension if extension else '?'
            )
        return 'p.{}{}{}'.format(ONE_LETTER_STOP, pos, self.residues(mut_aa))

    def start_loss(self) -> str:
        return 'p.{}1?'.format(self.residues(START_AA))

    def deletion(self, aa1: str, pos1: int, aa2: Optional[str] = None, pos2: Optional[int] = None) -> str:
        return 'p.{}del'.format(self._span(aa1, pos1, aa2, pos2))

    def position_deletion(self, pos1: int, pos2: Optional[int] = None) -> str:
        if pos2 is None or pos2 == pos1:
            return 'p.{}del'.format(pos1)
        return 'p.{}_{}del'.format(pos1, pos2)

    def delins(self, aa1: str, pos1: int, aa2: Optional[str], pos2: Optional[int], inserted: str) -> str:
        return 'p.{}delins{}'.format(self._span(aa1, pos1, aa2, pos2), self.residues(inserted))

    def insertion(self, aa1: str, pos1: int, aa2: str, pos2: int, inserted: str) -> str:
        return 'p.{}{}_{}{}ins{}'.format(
            self.residues(aa1), pos1, self.residues(aa2), pos2, self.residues(inserted)
        )

    def duplication(self, aa1: str, pos1: int, aa2: Optional[str] = None, pos2: Optional[int] = None) -> str:
        return 'p.{}dup'.format(self._span(aa1, pos1, aa2, pos2))

    def frameshift_at(self, wt_aa: str, pos: int) -> str:
        return 'p.{}{}fs'.format(self.residues(wt_aa), pos)

    def frameshift(self, result: FrameshiftResult, report_stops: bool = True) -> str:
        """
        Args:
            result: the scanned frameshift
            report_stops: write a stop at the first changed residue as a stop gain and a changed wild-type stop
                as a stop loss. Otherwise both keep the frameshift form
        """
        if not result.is_frameshift:
            return self.delins(result.wt_aa, result.position, None, None, result.mut_aa)
        if report_stops and result.mut_aa == STOP_AA:
            return self.substitution(result.wt_aa, result.position, STOP_AA)
        if report_stops and result.wt_aa == STOP_AA:
            return self.stop_loss(
                result.position, result.mut_aa, result.ter_distance - 1 if result.ter_distance else None
            )
        if self.hgvs:
            return 'p.{}{}{}fs{}{}'.format(
                self.residues(result.wt_aa),
                result.position,
                self.residues(result.mut_aa),
                STOP_AA,
                result.ter_distance if result.ter_distance else '?',
            )
        return self.frameshift_at(result.wt_aa, result.position)

    def inframe(self, change: InframeChange, extension: Optional[int] = None) -> Optional[str]:
        """
        Args:
            change: the protein level difference
            extension: residues added to the protein when the wild-type stop is replaced by a single residue

        Returns:
            the notation for an in-frame change or None if the protein is unchanged
        """
        if change.is_synonymous:
            return None
        if change.is_start_loss:
            return self.start_loss()
        del_seq = change.del_seq
        ins_seq = change.ins_seq
        if STOP_AA in ins_seq:
            index = ins_seq.index(STOP_AA)
            if index == 0:
                wt_aa = del_seq[0] if del_seq else change.residue(change.start)
                return self.substitution(wt_aa, change.start, STOP_AA)
            ins_seq = ins_seq[: index + 1]
        elif del_seq == STOP_AA and len(ins_seq) == 1:
            return self.stop_loss(change.start, ins_seq, extension)

        if del_seq and ins_seq:
            if len(del_seq) == 1 and len(ins_seq) == 1:
                return self.substitution(del_seq, change.start, ins_seq)
            return self.delins(del_seq[0], change.start, del_seq[-1], change.end, ins_seq)
        elif del_seq:
            return self.deletion(del_seq[0], change.start, del_seq[-1], change.end)
        elif change.is_dup:
            first = change.start - len(ins_seq)
            return self.duplication(ins_seq[0], first, ins_seq[-1], change.start - 1)
        return self.insertion(
            change.residue(change.start - 1),
            change.start - 1,
            change.residue(change.start),
            change.start,
            ins_seq,
        )
