"""
annotation of single and multi-base substitutions within the coding sequence of a transcript
"""
from ..constants import CODON_SIZE, START_AA, STOP_AA, VARIANT_TYPE, translate_codon
from ..error import InconsistentInputError, SequenceContextError
from ..util import logger
from .base import Annotation, nucleotide_notation
from .genomic import Transcript
from .protein import (
    ProteinNotation,
    aa_position,
    frame_offset,
    inframe_change,
    residue_at,
    scan_frameshift,
    stop_distance,
)


def annotate_substitution(
    transcript: Transcript,
    cdna_start: int,
    ref: str,
    alt: str,
    notation: ProteinNotation = None,
    lookahead: int = 30,
) -> Annotation:
    """
    annotate the replacement of one or more coding bases

    Args:
        transcript: the coding transcript
        cdna_start: position (1-based) in the cdna of the first replaced base
        ref: the replaced bases (transcript orientation)
        alt: the replacing bases (transcript orientation)
        notation: the style for the protein notation
        lookahead: number of codons compared when looking for the first residue changed by a frameshift

    Raises:
        InconsistentInputError: the replaced bases are not within the coding sequence or do not match the transcript
    """
    notation = notation or ProteinNotation()
    cdna_end = cdna_start + len(ref) - 1
    if not ref or not alt:
        raise InconsistentInputError('substitutions require both a reference and alternate allele', ref, alt)
    if cdna_start < transcript.cds_start or cdna_end > transcript.cds_end:
        raise InconsistentInputError('substitution is not within the CDS', transcript.name, cdna_start, cdna_end)
    if transcript.cdna_sequence()[cdna_start - 1 : cdna_end] != ref:
        raise InconsistentInputError('reference allele does not match the transcript', transcript.name, ref)

    cds_pos = cdna_start - transcript.cds_start + 1
    if len(ref) == 1 and len(alt) == 1:
        cdna = nucleotide_notation(
            transcript.cds_notation(cdna_start), transcript.cds_notation(cdna_start), 'sub', alt=alt, ref=ref
        )
    else:
        cdna = nucleotide_notation(
            transcript.cds_notation(cdna_start), transcript.cds_notation(cdna_end), 'delins', alt=alt
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

    orf = transcript.coding_sequence_plus_3utr()
    if len(ref) == 1 and len(alt) == 1:
        variant_type, protein = _single_base(orf, cds_pos, alt, notation)
        return exonic(variant_type, protein)

    if (len(alt) - len(ref)) % CODON_SIZE:
        try:
            result = scan_frameshift(
                orf,
                cds_pos,
                len(ref),
                frame_offset(cds_pos),
                aa_position(cds_pos),
                inserted=alt,
                lookahead=lookahead,
            )
        except SequenceContextError as err:
            logger.debug(f'reporting coding notation only for {transcript.name}:{cdna}: {err}')
            return exonic(VARIANT_TYPE.FS_SUBSTITUTION, degraded=True)
        return exonic(VARIANT_TYPE.FS_SUBSTITUTION, notation.frameshift(result, report_stops=False))

    change = inframe_change(
        orf, cds_pos - 1, cds_pos - 1 + len(ref), alt, context=max(len(ref), len(alt)) // CODON_SIZE + 1
    )
    if change.is_synonymous:
        aa_pos = aa_position(cds_pos)
        wt_aa = residue_at(orf, aa_pos)
        return exonic(VARIANT_TYPE.SYNONYMOUS, notation.substitution(wt_aa, aa_pos, wt_aa))
    elif change.is_start_loss:
        variant_type = VARIANT_TYPE.START_LOSS
    elif change.is_stop_gain:
        variant_type = VARIANT_TYPE.STOPGAIN
    elif change.is_stop_loss:
        variant_type = VARIANT_TYPE.STOPLOSS
    else:
        variant_type = VARIANT_TYPE.NON_FS_SUBSTITUTION

    extension = None
    if variant_type == VARIANT_TYPE.STOPLOSS:
        mut_orf = orf[: cds_pos - 1] + alt + orf[cds_pos - 1 + len(ref) :]
        extension = stop_distance(mut_orf[(change.start - 1) * CODON_SIZE :])
    return exonic(variant_type, notation.inframe(change, extension))


def _single_base(orf: str, cds_pos: int, alt: str, notation: ProteinNotation):
    frame = frame_offset(cds_pos)
    aa_pos = aa_position(cds_pos)
    codon_start = cds_pos - 1 - frame
    wt_codon = orf[codon_start : codon_start + CODON_SIZE]
    mut_codon = wt_codon[:frame] + alt + wt_codon[frame + 1 :]
    wt_aa = translate_codon(wt_codon)
    mut_aa = translate_codon(mut_codon)

    if wt_aa == mut_aa:
        return VARIANT_TYPE.SYNONYMOUS, notation.substitution(wt_aa, aa_pos, mut_aa)
    elif wt_aa == STOP_AA:
        extension = stop_distance(mut_codon + orf[codon_start + CODON_SIZE :])
        return VARIANT_TYPE.STOPLOSS, notation.stop_loss(aa_pos, mut_aa, extension)
    elif mut_aa == STOP_AA:
        return VARIANT_TYPE.STOPGAIN, notation.substitution(wt_aa, aa_pos, STOP_AA)
    elif aa_pos == 1 and wt_aa == START_AA:
        return VARIANT_TYPE.START_LOSS, notation.start_loss()
    return VARIANT_TYPE.MISSENSE, notation.substitution(wt_aa, aa_pos, mut_aa)
