"""
annotation of deletions which overlap the coding sequence of a transcript
"""
from ..constants import CODON_SIZE, STOP_AA, VARIANT_TYPE, translate_codon
from ..error import InconsistentInputError, SequenceContextError
from ..util import logger
from .base import Annotation, nucleotide_notation
from .genomic import Transcript
from .normalize import shift_deletion
from .protein import (
    ProteinNotation,
    aa_position,
    frame_offset,
    residue_at,
    scan_frameshift,
    stop_distance,
)


def annotate_deletion(
    transcript: Transcript,
    cdna_start: int,
    length: int,
    notation: ProteinNotation = None,
    lookahead: int = 30,
) -> Annotation:
    """
    annotate the deletion of one or more bases from the coding sequence

    Args:
        transcript: the coding transcript
        cdna_start: position (1-based) in the cdna of the first deleted base
        length: the number of deleted bases
        notation: the style for the protein notation
        lookahead: number of codons compared when looking for the first residue changed by a frameshift

    Returns:
        the candidate annotation

    Raises:
        InconsistentInputError: the deletion (after normalization) does not overlap the coding sequence
        SequenceContextError: the deletion is outside the transcript
    """
    notation = notation or ProteinNotation()
    cdna_start = shift_deletion(transcript.cdna_sequence(), cdna_start, length)[0]
    cdna_end = cdna_start + length - 1
    if cdna_end < transcript.cds_start or cdna_start > transcript.cds_end:
        raise InconsistentInputError('deletion does not overlap the CDS', transcript.name, cdna_start, cdna_end)

    cds_pos = cdna_start - transcript.cds_start + 1
    cdna = nucleotide_notation(
        transcript.cds_notation(cdna_start), transcript.cds_notation(cdna_end), 'del'
    )

    def exonic(variant_type, protein=None, degraded=False):
        return Annotation.exonic(
            transcript.name,
            variant_type,
            transcript.exon_number(cdna_start),
            cdna,
            protein,
            gene=transcript.gene,
            cds_position=cds_pos,
            degraded=degraded,
        )

    if length == 1:
        return _single_base(transcript, cdna_start, cds_pos, notation, lookahead, exonic)
    elif cds_pos <= 1 or cds_pos + length - 1 >= transcript.cds_length:
        return exonic(VARIANT_TYPE.FS_SUBSTITUTION, _boundary_protein(transcript, cds_pos, length, notation))
    elif length % CODON_SIZE == 0:
        variant_type, protein = _inframe_protein(transcript.coding_sequence(), cds_pos, length, notation)
        return exonic(variant_type, protein)

    try:
        result = scan_frameshift(
            transcript.coding_sequence_plus_3utr(),
            cds_pos,
            length,
            frame_offset(cds_pos),
            aa_position(cds_pos),
            lookahead=lookahead,
        )
    except SequenceContextError as err:
        logger.debug(f'reporting coding notation only for {transcript.name}:{cdna}: {err}')
        return exonic(VARIANT_TYPE.FS_DELETION, degraded=True)
    return exonic(VARIANT_TYPE.FS_DELETION, notation.frameshift(result, report_stops=False))


def _boundary_protein(transcript: Transcript, cds_pos: int, length: int, notation: ProteinNotation) -> str:
    """
    deletions removing the first or last codon are reported as the range of residues removed
    """
    terminal = transcript.cds_length // CODON_SIZE
    first = min(max(1, aa_position(cds_pos)), terminal)
    last = max(min(terminal, aa_position(cds_pos + length - 1)), first)
    return notation.position_deletion(first, last)


def _single_base(transcript, cdna_start, cds_pos, notation, lookahead, exonic):
    frame = frame_offset(cds_pos)
    aa_pos = aa_position(cds_pos)
    wt_codon = transcript.get_codon_at(cdna_start, frame)
    try:
        next_codon = transcript.get_codon_at(cdna_start - frame + CODON_SIZE)
    except SequenceContextError:
        logger.debug(f'no codon follows the deletion at {transcript.name}:{cdna_start}, reporting coding notation only')
        return exonic(VARIANT_TYPE.FS_DELETION, degraded=True)

    mut_codon = wt_codon[:frame] + wt_codon[frame + 1 :] + next_codon[0]
    wt_aa = translate_codon(wt_codon)
    mut_aa = translate_codon(mut_codon)

    if wt_aa == STOP_AA:
        if mut_aa == STOP_AA:
            return exonic(VARIANT_TYPE.NON_FS_DELETION, notation.substitution(STOP_AA, aa_pos, STOP_AA))
        orf = transcript.coding_sequence_plus_3utr()
        codon_start = cds_pos - 1 - frame
        mut_orf = orf[codon_start : cds_pos - 1] + orf[cds_pos:]
        return exonic(VARIANT_TYPE.STOPLOSS, notation.stop_loss(aa_pos, mut_aa, stop_distance(mut_orf)))
    elif mut_aa == STOP_AA:
        return exonic(VARIANT_TYPE.STOPGAIN, notation.substitution(wt_aa, aa_pos, STOP_AA))

    try:
        result = scan_frameshift(
            transcript.coding_sequence_plus_3utr(), cds_pos, 1, frame, aa_pos, lookahead=lookahead
        )
    except SequenceContextError as err:
        logger.debug(f'frameshift window unavailable at {transcript.name}:{cdna_start}: {err}')
        return exonic(VARIANT_TYPE.FS_DELETION, notation.frameshift_at(wt_aa, aa_pos), degraded=True)
    return exonic(VARIANT_TYPE.FS_DELETION, notation.frameshift(result, report_stops=False))


def _inframe_protein(cds: str, cds_pos: int, length: int, notation: ProteinNotation):
    """
    protein notation for a deletion of whole codons which does not touch the first or last codon

    Returns:
        tuple of str and str:
            * *str* - the classification
            * *str* - the protein notation
    """
    frame = frame_offset(cds_pos)
    first = aa_position(cds_pos)
    last = aa_position(cds_pos + length - 1)

    if first == last:
        if frame == 0:
            return VARIANT_TYPE.NON_FS_DELETION, notation.deletion(residue_at(cds, first), first)
        return VARIANT_TYPE.NON_FS_DELETION, notation.position_deletion(first)
    elif frame == 0:
        return (
            VARIANT_TYPE.NON_FS_DELETION,
            notation.deletion(residue_at(cds, first), first, residue_at(cds, last), last),
        )

    # the bases left of the deletion in the first codon join the bases right of it in the last codon
    start = cds_pos - 1
    end = start + length
    hybrid = translate_codon(cds[start - frame : start] + cds[end : end + CODON_SIZE - frame])
    absorbed = True
    if hybrid == residue_at(cds, first):
        first += 1
    elif hybrid == residue_at(cds, last):
        last -= 1
    else:
        absorbed = False

    if first >= last:
        return VARIANT_TYPE.NON_FS_DELETION, notation.deletion(residue_at(cds, first), first)
    elif absorbed:
        return (
            VARIANT_TYPE.NON_FS_DELETION,
            notation.deletion(residue_at(cds, first), first, residue_at(cds, last), last),
        )
    return (
        VARIANT_TYPE.STOPGAIN if hybrid == STOP_AA else VARIANT_TYPE.NON_FS_DELETION,
        notation.delins(residue_at(cds, first), first, residue_at(cds, last), last, hybrid),
    )
