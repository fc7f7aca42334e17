"""
annotation of insertions and duplications within the coding sequence of a transcript
"""
from ..constants import CODON_SIZE, VARIANT_TYPE
from ..error import InconsistentInputError, SequenceContextError
from ..util import logger
from .base import Annotation, nucleotide_notation
from .genomic import Transcript
from .normalize import is_duplication, shift_insertion
from .protein import (
    ProteinNotation,
    aa_position,
    frame_offset,
    frameshift_variant_type,
    inframe_change,
    scan_frameshift,
    stop_distance,
)


def annotate_insertion(
    transcript: Transcript,
    cdna_after: int,
    inserted: str,
    notation: ProteinNotation = None,
    lookahead: int = 30,
) -> Annotation:
    """
    annotate bases inserted into the coding sequence. The insertion point is shifted 3' first and the insertion
    is reported as a duplication when the inserted bases match the bases immediately 5' of it

    Args:
        transcript: the coding transcript
        cdna_after: position (1-based) in the cdna of the base preceding the inserted bases
        inserted: the inserted bases (transcript orientation)
        notation: the style for the protein notation
        lookahead: number of codons compared when looking for the first residue changed by a frameshift

    Raises:
        InconsistentInputError: the insertion (after normalization) is not within the coding sequence
    """
    notation = notation or ProteinNotation()
    seq = transcript.cdna_sequence()
    cdna_after, inserted = shift_insertion(seq, cdna_after, inserted)
    if cdna_after < transcript.cds_start or cdna_after >= transcript.cds_end:
        raise InconsistentInputError('insertion is not within the CDS', transcript.name, cdna_after, inserted)
    dup = is_duplication(seq, cdna_after, inserted)

    if dup:
        cdna = nucleotide_notation(
            transcript.cds_notation(cdna_after - len(inserted) + 1), transcript.cds_notation(cdna_after), 'dup'
        )
    else:
        cdna = nucleotide_notation(
            transcript.cds_notation(cdna_after), transcript.cds_notation(cdna_after + 1), 'ins', alt=inserted
        )
    # the first base following the inserted bases
    cds_pos = cdna_after - transcript.cds_start + 2
    orf = transcript.coding_sequence_plus_3utr()

    def exonic(variant_type, protein=None, degraded=False):
        return Annotation.exonic(
            transcript.name,
            variant_type,
            transcript.exon_number(cdna_after),
            cdna,
            protein,
            gene=transcript.gene,
            cds_position=cds_pos,
            degraded=degraded,
        )

    if len(inserted) % CODON_SIZE:
        default_type = VARIANT_TYPE.FS_DUPLICATION if dup else VARIANT_TYPE.FS_INSERTION
        try:
            result = scan_frameshift(
                orf,
                cds_pos,
                0,
                frame_offset(cds_pos),
                aa_position(cds_pos),
                inserted=inserted,
                lookahead=lookahead,
            )
        except SequenceContextError as err:
            logger.debug(f'reporting coding notation only for {transcript.name}:{cdna}: {err}')
            return exonic(default_type, degraded=True)
        return exonic(frameshift_variant_type(result, default_type), notation.frameshift(result))

    change = inframe_change(orf, cds_pos - 1, cds_pos - 1, inserted, context=len(inserted) // CODON_SIZE + 1)
    if change.is_start_loss:
        variant_type = VARIANT_TYPE.START_LOSS
    elif change.is_stop_gain:
        variant_type = VARIANT_TYPE.STOPGAIN
    elif change.is_stop_loss:
        variant_type = VARIANT_TYPE.STOPLOSS
    elif dup:
        variant_type = VARIANT_TYPE.NON_FS_DUPLICATION
    else:
        variant_type = VARIANT_TYPE.NON_FS_INSERTION

    extension = None
    if variant_type == VARIANT_TYPE.STOPLOSS:
        mut_orf = orf[: cds_pos - 1] + inserted + orf[cds_pos - 1 :]
        extension = stop_distance(mut_orf[(change.start - 1) * CODON_SIZE :])
    return exonic(variant_type, notation.inframe(change, extension))
