from bisect import bisect_right
from typing import Dict, Iterable, List, Optional, Tuple

from ..constants import CODON_SIZE, STRAND
from ..error import InconsistentInputError, NotSpecifiedError, SequenceContextError
from ..interval import Interval, IntervalMapping
from .base import ReferenceName


class Transcript:
    """
    a spliced transcript model. Genomic coordinates are 1-based inclusive. The sequence is the spliced cdna
    given 5' to 3' in the transcript orientation (already reverse complemented for the negative strand)
    """

    def __init__(
        self,
        name: str,
        chr: str,
        strand: str,
        exons: Iterable[Tuple[int, int]],
        seq: str,
        gene: Optional[str] = None,
        cds_start: Optional[int] = None,
        cds_end: Optional[int] = None,
    ):
        """
        Args:
            name: the transcript identifier
            chr: the chromosome/reference name
            strand: the genomic strand
            exons: list of genomic exon start/end pairs
            seq: spliced cdna sequence in the transcript orientation
            gene: the gene symbol
            cds_start: lowest genomic position of the coding sequence (including the stop codon)
            cds_end: highest genomic position of the coding sequence (including the stop codon)

        Raises:
            NotSpecifiedError: the sequence or exons are missing
            InconsistentInputError: the sequence does not match the exons or the CDS is not exonic
        """
        self.name = name
        self.gene = gene
        self.chr = ReferenceName(chr)
        self.strand = STRAND.enforce(strand)
        self.exons = sorted([Interval(s, e) for s, e in exons])
        if not self.exons:
            raise NotSpecifiedError('transcript must have at least one exon', name)
        if not seq:
            raise NotSpecifiedError('transcript sequence is required', name)
        self.seq = str(seq).upper()

        if len(self.seq) != sum([len(e) for e in self.exons]):
            raise InconsistentInputError(
                'sequence length does not match the exons', name, len(self.seq), sum([len(e) for e in self.exons])
            )

        self._mapping = IntervalMapping()
        self._cdna_exons: List[Interval] = []
        pos = 1
        for exon in self.exons if self.is_plus_strand() else self.exons[::-1]:
            tgt = Interval(pos, pos + len(exon) - 1)
            self._mapping.add(exon, tgt, opposing_directions=not self.is_plus_strand())
            self._cdna_exons.append(tgt)
            pos = tgt.end + 1

        self.cds: Optional[Interval] = None
        if cds_start is not None and cds_end is not None:
            self.cds = Interval(cds_start, cds_end)
            try:
                first, last = sorted(
                    [self.convert_genomic_to_cdna(cds_start), self.convert_genomic_to_cdna(cds_end)]
                )
            except IndexError:
                raise InconsistentInputError('CDS bounds must be exonic', name, cds_start, cds_end)
            self._cdna_cds = Interval(first, last)

    @property
    def start(self) -> int:
        return self.exons[0].start

    @property
    def end(self) -> int:
        return self.exons[-1].end

    def __len__(self) -> int:
        return len(self.seq)

    def __repr__(self):
        return '{}({}, {}:{}-{}{})'.format(
            self.__class__.__name__, self.name, self.chr, self.start, self.end, self.strand
        )

    def is_plus_strand(self) -> bool:
        return self.strand == STRAND.POS

    @property
    def is_coding(self) -> bool:
        return self.cds is not None

    @property
    def notation_prefix(self) -> str:
        return 'c' if self.is_coding else 'n'

    def cdna_sequence(self) -> str:
        return self.seq

    def _require_cds(self):
        if not self.is_coding:
            raise NotSpecifiedError('transcript is non-coding', self.name)

    @property
    def cds_start(self) -> int:
        """the cdna position (1-based) of the first base of the start codon"""
        self._require_cds()
        return self._cdna_cds.start

    @property
    def cds_end(self) -> int:
        """the cdna position (1-based) of the last base of the stop codon"""
        self._require_cds()
        return self._cdna_cds.end

    @property
    def cds_length(self) -> int:
        self._require_cds()
        return len(self._cdna_cds)

    def coding_sequence(self) -> str:
        return self.seq[self.cds_start - 1 : self.cds_end]

    def coding_sequence_plus_3utr(self) -> str:
        return self.seq[self.cds_start - 1 :]

    def get_codon_at(self, cdna_pos: int, frame: int = 0) -> str:
        """
        Args:
            cdna_pos: position of a base in the cdna (1-based)
            frame: position of the base within its codon (0, 1 or 2)

        Returns:
            the codon containing the base

        Raises:
            SequenceContextError: the codon runs past either end of the sequence
        """
        start = cdna_pos - frame - 1
        codon = self.seq[start : start + CODON_SIZE] if start >= 0 else ''
        if len(codon) != CODON_SIZE:
            raise SequenceContextError('codon is not available', self.name, cdna_pos, frame)
        return codon

    def convert_genomic_to_cdna(self, pos: int) -> int:
        """
        Raises:
            IndexError: the position is not exonic
        """
        return self._mapping.convert_pos(pos)

    def convert_genomic_to_nearest_cdna(self, pos: int) -> Tuple[int, int]:
        """
        converts a genomic position to its cdna equivalent or (if intronic) the nearest cdna and shift

        Returns:
            tuple of int and int:
                * *int* - the exonic cdna position
                * *int* - the intronic shift (positive past the 3' end of an exon, negative before the 5' end)

        Raises:
            IndexError: the position is outside the transcript
        """
        for ex in self.exons:
            if ex.start <= pos <= ex.end:
                return self.convert_genomic_to_cdna(pos), 0
        for ex1, ex2 in zip(self.exons, self.exons[1:]):
            if ex1.end < pos < ex2.start:
                dist1 = pos - ex1.end
                dist2 = ex2.start - pos
                if self.is_plus_strand():
                    # ties go to the 5' exon
                    if dist1 <= dist2:
                        return self.convert_genomic_to_cdna(ex1.end), dist1
                    return self.convert_genomic_to_cdna(ex2.start), 0 - dist2
                if dist2 <= dist1:
                    return self.convert_genomic_to_cdna(ex2.start), dist2
                return self.convert_genomic_to_cdna(ex1.end), 0 - dist1
        raise IndexError('position does not fall within the current transcript', pos, self.name)

    def cds_notation(self, cdna_pos: int, shift: int = 0) -> str:
        """
        converts a cdna position to its coding (or non-coding) notation equivalent

        Example:
            for a transcript with the CDS at cdna positions 61-1959

            - cdna 10 (before the translation start) is ``-50``
            - cdna 2031 (after the translation end) is ``*72``
            - 10 bases into the intron following cdna 110 is ``50+10``
        """
        offset_suffix = ''
        if shift > 0:
            offset_suffix = '+{}'.format(shift)
        elif shift < 0:
            offset_suffix = str(shift)

        if not self.is_coding:
            return '{}{}'.format(cdna_pos, offset_suffix)
        if cdna_pos < self.cds_start:
            return '-{}{}'.format(self.cds_start - cdna_pos, offset_suffix)
        elif cdna_pos > self.cds_end:
            return '*{}{}'.format(cdna_pos - self.cds_end, offset_suffix)
        return '{}{}'.format(cdna_pos - self.cds_start + 1, offset_suffix)

    def exon_number(self, cdna_pos: int) -> int:
        """
        Returns:
            the number of the exon (1-based, transcript orientation) containing a cdna position
        """
        for i, exon in enumerate(self._cdna_exons):
            if cdna_pos in exon:
                return i + 1
        raise IndexError('cdna position is not in the transcript', cdna_pos, self.name)

    def exon_at(self, pos: int) -> Interval:
        """
        Returns:
            the genomic exon containing a genomic position

        Raises:
            IndexError: the position is not exonic
        """
        for exon in self.exons:
            if pos in exon:
                return exon
        raise IndexError('position is not exonic', pos, self.name)

    def introns(self) -> List[Interval]:
        """the genomic intervals between consecutive exons"""
        return [
            Interval(ex1.end + 1, ex2.start - 1)
            for ex1, ex2 in zip(self.exons, self.exons[1:])
            if ex2.start - ex1.end > 1
        ]


class TranscriptIndex:
    """
    position sorted lookup of transcripts by chromosome
    """

    def __init__(self, transcripts: Iterable[Transcript] = ()):
        self._starts: Dict[ReferenceName, List[int]] = {}
        self._transcripts: Dict[ReferenceName, List[Transcript]] = {}
        self._max_length: Dict[ReferenceName, int] = {}
        for transcript in transcripts:
            self.add(transcript)

    def add(self, transcript: Transcript):
        chrom = transcript.chr
        index = bisect_right(self._starts.setdefault(chrom, []), transcript.start)
        self._starts[chrom].insert(index, transcript.start)
        self._transcripts.setdefault(chrom, []).insert(index, transcript)
        self._max_length[chrom] = max(
            self._max_length.get(chrom, 0), transcript.end - transcript.start + 1
        )

    def __len__(self) -> int:
        return sum([len(v) for v in self._transcripts.values()])

    def __iter__(self):
        for chrom in self._transcripts:
            yield from self._transcripts[chrom]

    def find(self, chrom: str, start: int, end: int, flank: int = 0) -> List[Transcript]:
        """
        Returns:
            the transcripts whose span, extended by the flank on either side, overlaps start-end
        """
        chrom = ReferenceName(chrom)
        starts = self._starts.get(chrom, [])
        transcripts = self._transcripts.get(chrom, [])
        result = []
        index = bisect_right(starts, end + flank)
        lowest_start = start - flank - self._max_length.get(chrom, 0)
        while index > 0:
            index -= 1
            transcript = transcripts[index]
            if transcript.start < lowest_start:
                break
            if Interval.overlaps((transcript.start - flank, transcript.end + flank), (start, end)):
                result.append(transcript)
        return result[::-1]

    def nearest(
        self, chrom: str, start: int, end: int
    ) -> Tuple[Optional[Transcript], Optional[Transcript]]:
        """
        Returns:
            the closest transcript entirely 5' (genomic) of start and the closest transcript entirely 3' of end
        """
        chrom = ReferenceName(chrom)
        starts = self._starts.get(chrom, [])
        transcripts = self._transcripts.get(chrom, [])
        max_length = self._max_length.get(chrom, 0)
        left = None
        index = bisect_right(starts, start)
        while index > 0:
            index -= 1
            transcript = transcripts[index]
            if left is not None and transcript.start + max_length - 1 <= left.end:
                break
            if transcript.end < start and (left is None or transcript.end > left.end):
                left = transcript
        index = bisect_right(starts, end)
        right = transcripts[index] if index < len(transcripts) else None
        return left, right
