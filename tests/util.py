import json

from txanno.annotate.genomic import Transcript

# M A E W P K *
SHORT_UTR5 = 'GGGAAA'
SHORT_CDS = 'ATGGCTGAATGGCCCAAATAA'
SHORT_UTR3 = 'GCTTAGCCCC'

# a 22 bp deletion which shifts the frame of the last codons so that the wild-type stop is read through
LONG_UTR5 = 'GCCGCC'
LONG_DELETED = 'GAGGCGGGGACACCAGGGCCTG'
LONG_CDS = 'ATG' + 'GCT' * 1170 + 'G' + LONG_DELETED + 'A'
LONG_UTR3 = 'A' + 'GCT' * 32 + 'TAA' + 'C' * 20


def build_transcript(
    cds='',
    utr5='',
    utr3='',
    start=1000,
    strand='+',
    exon_lengths=None,
    intron=100,
    name='NM_0001',
    gene='GENE1',
    chr='1',
):
    """
    builds a transcript from its parts given in transcript orientation. Exons are laid out from the genomic start
    with a fixed intron length between them. Without a cds the transcript is non-coding
    """
    seq = utr5 + cds + utr3
    exon_lengths = exon_lengths or [len(seq)]
    if sum(exon_lengths) != len(seq):
        raise ValueError('exon lengths do not add up to the sequence length', exon_lengths, len(seq))

    exons = []
    pos = start
    for length in exon_lengths if strand == '+' else exon_lengths[::-1]:
        exons.append((pos, pos + length - 1))
        pos += length + intron
    tx_order = exons if strand == '+' else exons[::-1]

    def genomic(cdna_pos):
        offset = cdna_pos
        for exon_start, exon_end in tx_order:
            length = exon_end - exon_start + 1
            if offset <= length:
                return exon_start + offset - 1 if strand == '+' else exon_end - offset + 1
            offset -= length
        raise IndexError(cdna_pos)

    cds_start = cds_end = None
    if cds:
        cds_start, cds_end = sorted([genomic(len(utr5) + 1), genomic(len(utr5) + len(cds))])
    return Transcript(
        name=name,
        chr=chr,
        strand=strand,
        exons=exons,
        seq=seq,
        gene=gene,
        cds_start=cds_start,
        cds_end=cds_end,
    )


def build_short_transcript(**kwargs):
    kwargs.setdefault('cds', SHORT_CDS)
    kwargs.setdefault('utr5', SHORT_UTR5)
    kwargs.setdefault('utr3', SHORT_UTR3)
    return build_transcript(**kwargs)


def build_long_transcript(**kwargs):
    kwargs.setdefault('cds', LONG_CDS)
    kwargs.setdefault('utr5', LONG_UTR5)
    kwargs.setdefault('utr3', LONG_UTR3)
    return build_transcript(**kwargs)


def transcript_json(*transcripts):
    """the gene model json for one or more transcripts"""
    result = []
    for transcript in transcripts:
        row = {
            'name': transcript.name,
            'gene': transcript.gene,
            'chr': str(transcript.chr),
            'strand': transcript.strand,
            'start': transcript.start,
            'end': transcript.end,
            'exons': [{'start': ex.start, 'end': ex.end} for ex in transcript.exons],
            'seq': transcript.seq,
        }
        if transcript.is_coding:
            row['cds_start'] = transcript.cds.start
            row['cds_end'] = transcript.cds.end
        result.append(row)
    return {'transcripts': result}


def write_transcripts(filename, *transcripts):
    with open(filename, 'w') as fh:
        json.dump(transcript_json(*transcripts), fh)
    return str(filename)


def write_variants(filename, rows, header=('chr', 'pos', 'ref', 'alt')):
    lines = ['\t'.join(header)]
    for row in rows:
        lines.append('\t'.join([str(v) for v in row]))
    with open(filename, 'w') as fh:
        fh.write('\n'.join(lines) + '\n')
    return str(filename)
