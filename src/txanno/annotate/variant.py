"""
classification of variants against transcripts and resolution of the per-variant annotations
"""
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from typing import Iterable, List, Optional, Tuple

from ..constants import VARIANT_SHAPE, VARIANT_TYPE, reverse_complement
from ..error import AnnotationError, InconsistentInputError, NotSpecifiedError
from ..interval import Interval
from ..util import logger
from .base import Annotation, AnnotationResult, Variant, nucleotide_notation
from .collection import AnnotationCollection
from .constants import AnnotationSettings
from .deletion import annotate_deletion
from .genomic import Transcript, TranscriptIndex
from .insertion import annotate_insertion
from .normalize import is_duplication, shift_deletion, shift_insertion
from .protein import ProteinNotation
from .substitution import annotate_substitution


def _affected_span(variant: Variant) -> Tuple[int, int]:
    """
    the genomic bases touched by the variant. For insertions these are the two bases either side of the inserted bases
    """
    if variant.shape == VARIANT_SHAPE.INSERTION:
        return variant.start, variant.start + 1
    return variant.start, variant.end


def _flanking_annotation(
    variant: Variant, transcript: Transcript, settings: AnnotationSettings
) -> Optional[Annotation]:
    """
    candidate for a variant entirely outside the transcript: upstream, downstream or None if too far away
    """
    if _affected_span(variant)[1] <= transcript.start:
        distance = transcript.start - variant.end
        upstream = transcript.is_plus_strand()
    else:
        distance = variant.start - transcript.end
        if variant.shape == VARIANT_SHAPE.INSERTION:
            distance += 1
        upstream = not transcript.is_plus_strand()

    if upstream and distance <= settings.upstream_distance:
        return Annotation.genic(transcript.name, VARIANT_TYPE.UPSTREAM, transcript.gene)
    elif not upstream and distance <= settings.downstream_distance:
        return Annotation.genic(transcript.name, VARIANT_TYPE.DOWNSTREAM, transcript.gene)
    return None


def _transcript_alleles(variant: Variant, transcript: Transcript) -> Tuple[str, str]:
    if transcript.is_plus_strand():
        return variant.ref_allele, variant.alt_allele
    return reverse_complement(variant.ref_allele), reverse_complement(variant.alt_allele)


def _nucleotide_change(transcript: Transcript, first: int, last: int, shape: str, ref: str, alt: str) -> str:
    """
    the coding (or non-coding) notation of a change given its normalized cdna positions. For insertions first
    and last are the bases either side of the inserted bases
    """
    first_pos = transcript.cds_notation(first)
    last_pos = transcript.cds_notation(last)
    prefix = transcript.notation_prefix
    if shape == VARIANT_SHAPE.SNV:
        return nucleotide_notation(first_pos, last_pos, 'sub', alt=alt, ref=ref, prefix=prefix)
    elif shape == VARIANT_SHAPE.DELETION:
        return nucleotide_notation(first_pos, last_pos, 'del', prefix=prefix)
    elif shape == VARIANT_SHAPE.INSERTION:
        if is_duplication(transcript.cdna_sequence(), first, alt):
            return nucleotide_notation(
                transcript.cds_notation(first - len(alt) + 1), first_pos, 'dup', prefix=prefix
            )
        return nucleotide_notation(first_pos, last_pos, 'ins', alt=alt, prefix=prefix)
    return nucleotide_notation(first_pos, last_pos, 'delins', alt=alt, prefix=prefix)


def _clipped_annotation(variant: Variant, transcript: Transcript) -> Annotation:
    """
    candidate for a variant which overlaps the first or last base of the transcript and extends beyond it
    """
    start = max(variant.start, transcript.start)
    end = min(variant.end, transcript.end)
    first, last = sorted([transcript.convert_genomic_to_cdna(start), transcript.convert_genomic_to_cdna(end)])
    _, alt = _transcript_alleles(variant, transcript)
    cdna = nucleotide_notation(
        transcript.cds_notation(first),
        transcript.cds_notation(last),
        'delins' if alt else 'del',
        alt=alt,
        prefix=transcript.notation_prefix,
    )
    # clipped at the 5' end of the transcript in transcript orientation
    five_prime = first == 1
    exon = transcript.exon_number(first)

    if not transcript.is_coding:
        return Annotation.exonic(transcript.name, VARIANT_TYPE.NCRNA_EXONIC, exon, cdna, gene=transcript.gene)
    elif Interval.overlaps((start, end), transcript.cds):
        if five_prime:
            return Annotation.exonic(
                transcript.name,
                VARIANT_TYPE.START_LOSS,
                exon,
                cdna,
                ProteinNotation().start_loss(),
                gene=transcript.gene,
            )
        return Annotation.exonic(transcript.name, VARIANT_TYPE.STOPLOSS, exon, cdna, gene=transcript.gene)
    return Annotation.exonic(
        transcript.name,
        VARIANT_TYPE.UTR5 if five_prime else VARIANT_TYPE.UTR3,
        exon,
        cdna,
        gene=transcript.gene,
    )


def _intron_annotation(
    variant: Variant, transcript: Transcript, settings: AnnotationSettings
) -> Annotation:
    """
    candidate for a variant inside the transcript which touches an intron: splicing when it crosses an
    exon/intron junction or is within the splice site radius of one, otherwise intronic
    """
    start, end = _affected_span(variant)
    radius = settings.splice_site_radius
    splicing = False
    for exon in transcript.exons:
        if Interval.overlaps((start, end), exon):
            splicing = True
            break
        if exon.start != transcript.start and Interval.overlaps((start, end), (exon.start - radius, exon.start - 1)):
            splicing = True
            break
        if exon.end != transcript.end and Interval.overlaps((start, end), (exon.end + 1, exon.end + radius)):
            splicing = True
            break

    if not splicing:
        variant_type = VARIANT_TYPE.INTRONIC if transcript.is_coding else VARIANT_TYPE.NCRNA_INTRONIC
        return Annotation.genic(transcript.name, variant_type, transcript.gene)

    ref, alt = _transcript_alleles(variant, transcript)
    positions = [transcript.convert_genomic_to_nearest_cdna(pos) for pos in (start, end)]
    if not transcript.is_plus_strand():
        positions = positions[::-1]
    (first, first_shift), (last, last_shift) = positions
    first_pos = transcript.cds_notation(first, first_shift)
    last_pos = transcript.cds_notation(last, last_shift)
    prefix = transcript.notation_prefix

    if variant.shape == VARIANT_SHAPE.SNV:
        cdna = nucleotide_notation(first_pos, last_pos, 'sub', alt=alt, ref=ref, prefix=prefix)
    elif variant.shape == VARIANT_SHAPE.DELETION:
        cdna = nucleotide_notation(first_pos, last_pos, 'del', prefix=prefix)
    elif variant.shape == VARIANT_SHAPE.INSERTION:
        cdna = nucleotide_notation(first_pos, last_pos, 'ins', alt=alt, prefix=prefix)
    else:
        cdna = nucleotide_notation(first_pos, last_pos, 'delins', alt=alt, prefix=prefix)
    return Annotation.exonic(
        transcript.name,
        VARIANT_TYPE.SPLICING if transcript.is_coding else VARIANT_TYPE.NCRNA_SPLICING,
        transcript.exon_number(first),
        cdna,
        gene=transcript.gene,
    )


def _exonic_annotation(
    variant: Variant, transcript: Transcript, settings: AnnotationSettings
) -> Annotation:
    """
    candidate for a variant contained within a single exon
    """
    seq = transcript.cdna_sequence()
    ref, alt = _transcript_alleles(variant, transcript)
    shape = variant.shape

    if shape == VARIANT_SHAPE.INSERTION:
        if transcript.is_plus_strand():
            after = transcript.convert_genomic_to_cdna(variant.start)
        else:
            after = transcript.convert_genomic_to_cdna(variant.start + 1)
        after, alt = shift_insertion(seq, after, alt)
        first, last = after, after + 1
    else:
        first, last = sorted(
            [transcript.convert_genomic_to_cdna(variant.start), transcript.convert_genomic_to_cdna(variant.end)]
        )
        if seq[first - 1 : last] != ref:
            raise InconsistentInputError(
                'reference allele does not match the transcript sequence', transcript.name, ref, seq[first - 1 : last]
            )
        if shape == VARIANT_SHAPE.DELETION:
            first = shift_deletion(seq, first, len(ref))[0]
            last = first + len(ref) - 1
            ref = seq[first - 1 : last]

    exon = transcript.exon_number(first)
    if not transcript.is_coding:
        return Annotation.exonic(
            transcript.name,
            VARIANT_TYPE.NCRNA_EXONIC,
            exon,
            _nucleotide_change(transcript, first, last, shape, ref, alt),
            gene=transcript.gene,
        )

    cds_start = transcript.cds_start
    cds_end = transcript.cds_end
    if shape == VARIANT_SHAPE.INSERTION:
        # inserted between first and last
        utr5 = first < cds_start
        utr3 = first >= cds_end
    else:
        utr5 = last < cds_start
        utr3 = first > cds_end
    if utr5 or utr3:
        return Annotation.exonic(
            transcript.name,
            VARIANT_TYPE.UTR5 if utr5 else VARIANT_TYPE.UTR3,
            exon,
            _nucleotide_change(transcript, first, last, shape, ref, alt),
            gene=transcript.gene,
        )

    notation = ProteinNotation(settings.protein_notation)
    lookahead = settings.frameshift_lookahead
    if shape == VARIANT_SHAPE.DELETION:
        return annotate_deletion(transcript, first, len(ref), notation, lookahead)
    elif shape == VARIANT_SHAPE.INSERTION:
        return annotate_insertion(transcript, first, alt, notation, lookahead)
    elif first < cds_start or last > cds_end:
        # substitutions replacing bases on both sides of the first or last base of the CDS
        cdna = _nucleotide_change(transcript, first, last, shape, ref, alt)
        if first < cds_start:
            return Annotation.exonic(
                transcript.name, VARIANT_TYPE.START_LOSS, exon, cdna, notation.start_loss(), gene=transcript.gene
            )
        return Annotation.exonic(transcript.name, VARIANT_TYPE.STOPLOSS, exon, cdna, gene=transcript.gene)
    return annotate_substitution(transcript, first, ref, alt, notation, lookahead)


def annotate_transcript(
    variant: Variant, transcript: Transcript, settings: Optional[AnnotationSettings] = None
) -> Optional[Annotation]:
    """
    classify a variant against a single transcript

    Args:
        variant: the trimmed variant
        transcript: the transcript to annotate against
        settings: the annotation settings

    Returns:
        the candidate annotation or None if the variant is too far from the transcript to be reported against it

    Raises:
        AnnotationError: the annotation could not be computed
        IndexError: a position could not be converted to the transcript
    """
    settings = settings or AnnotationSettings()
    if variant.chr != transcript.chr:
        return None
    start, end = _affected_span(variant)

    if end <= transcript.start or start >= transcript.end:
        # only insertions can touch a transcript end base and still be outside of it
        if variant.shape == VARIANT_SHAPE.INSERTION or end < transcript.start or start > transcript.end:
            return _flanking_annotation(variant, transcript, settings)

    if variant.shape != VARIANT_SHAPE.INSERTION and (start < transcript.start or end > transcript.end):
        return _clipped_annotation(variant, transcript)

    for exon in transcript.exons:
        if start in exon and end in exon:
            return _exonic_annotation(variant, transcript, settings)
    return _intron_annotation(variant, transcript, settings)


def _error_message(err: Exception) -> str:
    if err.args:
        return str(err.args[0])
    return err.__class__.__name__


def _intergenic_annotation(
    variant: Variant, neighbours: Optional[Tuple[Optional[Transcript], Optional[Transcript]]]
) -> Annotation:
    left, right = neighbours or (None, None)
    return Annotation.intergenic(
        (left.gene or left.name) if left else None,
        variant.start - left.end if left else None,
        (right.gene or right.name) if right else None,
        right.start - variant.end if right else None,
    )


def annotate_variant(
    variant: Variant,
    transcripts: Iterable[Transcript],
    settings: Optional[AnnotationSettings] = None,
    collection: Optional[AnnotationCollection] = None,
    neighbours: Optional[Tuple[Optional[Transcript], Optional[Transcript]]] = None,
) -> AnnotationResult:
    """
    annotate a variant against all transcripts within range of it and resolve the reported annotations

    The candidates for every transcript are generated first and then added to the collection. A failure for
    one transcript is reported as an error candidate for that transcript and does not affect the others

    Args:
        variant: the variant to annotate
        transcripts: the transcripts within range of the variant
        settings: the annotation settings
        collection: collection to reuse. It is cleared before use. A new collection is created if not given
        neighbours: the nearest transcripts either side of the variant, used to label intergenic variants

    Returns:
        the resolved annotations or the failure to resolve them
    """
    settings = settings or AnnotationSettings()
    candidates = []
    for transcript in transcripts:
        try:
            candidate = annotate_transcript(variant, transcript, settings)
        except (AnnotationError, NotSpecifiedError, IndexError) as err:
            logger.debug(f'unable to annotate {variant} against {transcript.name}: {repr(err)}')
            candidate = Annotation.error(transcript.name, _error_message(err), transcript.gene)
        if candidate is not None:
            candidates.append(candidate)

    if collection is None:
        collection = AnnotationCollection(merge_upstream=settings.merge_upstream)
    else:
        collection.clear()

    try:
        for candidate in candidates:
            collection.add(candidate)
        if not candidates:
            collection.add_intergenic(_intergenic_annotation(variant, neighbours))
        annotation_class, annotations = collection.resolve()
    except AnnotationError as err:
        logger.debug(f'unable to resolve the annotations for {variant}: {repr(err)}')
        return AnnotationResult(variant, error=err)
    return AnnotationResult(variant, annotation_class, annotations)


def _annotate_job(job, settings: AnnotationSettings) -> AnnotationResult:
    variant, transcripts, neighbours = job
    return annotate_variant(variant, transcripts, settings, neighbours=neighbours)


def annotate_variants(
    variants: Iterable[Variant], index: TranscriptIndex, settings: Optional[AnnotationSettings] = None
) -> List[AnnotationResult]:
    """
    annotate a batch of variants. Variants share no state and are split across worker processes when more
    than one process is requested

    Args:
        variants: the variants to annotate
        index: the transcripts to annotate against
        settings: the annotation settings

    Returns:
        the result for each variant, in input order
    """
    settings = settings or AnnotationSettings()
    jobs = []
    for variant in variants:
        start, end = _affected_span(variant)
        jobs.append(
            (variant, index.find(variant.chr, start, end, settings.flank), index.nearest(variant.chr, start, end))
        )
    logger.info(f'annotating {len(jobs)} variants')

    if settings.processes > 1 and len(jobs) > 1:
        chunksize = max(1, len(jobs) // (settings.processes * 4))
        with ProcessPoolExecutor(max_workers=settings.processes) as executor:
            return list(executor.map(partial(_annotate_job, settings=settings), jobs, chunksize=chunksize))

    results = []
    collection = AnnotationCollection(merge_upstream=settings.merge_upstream)
    for job in jobs:
        variant, transcripts, neighbours = job
        results.append(annotate_variant(variant, transcripts, settings, collection, neighbours))
    return results
