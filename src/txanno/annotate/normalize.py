"""
3' normalization of indels. Where an indel lies in a repeated sequence context the exact
placement is ambiguous and the rightmost (most 3') valid placement is reported
"""
from typing import Tuple

from ..constants import CODON_SIZE
from ..error import SequenceContextError


def shift_deletion(seq: str, start: int, length: int, frame: int = 0) -> Tuple[int, str, int]:
    """
    shift a deleted region as far 3' as the sequence allows

    While the base immediately following the region equals the first base of the region, the
    deleted bases are rotated left by one and the region moves one base to the right

    Args:
        seq: the sequence the deletion is relative to
        start: position (1-based) of the first deleted base
        length: the number of deleted bases
        frame: the frame offset at start, advanced by one (mod 3) for each shift

    Returns:
        tuple of int, str and int:
            * *int* - the normalized start
            * *str* - the deleted bases at the normalized position
            * *int* - the frame offset at the normalized start

    Raises:
        SequenceContextError: the region does not fit in the sequence

    Example:
        >>> shift_deletion('ATGCAGCAGTAA', 4, 3)
        (7, 'CAG', 0)
    """
    index = start - 1
    if length < 1 or index < 0 or index + length > len(seq):
        raise SequenceContextError('deleted region is outside the sequence', start, length, len(seq))
    while index + length < len(seq) and seq[index + length] == seq[index]:
        index += 1
        frame = (frame + 1) % CODON_SIZE
    return index + 1, seq[index : index + length], frame


def shift_insertion(seq: str, after: int, inserted: str) -> Tuple[int, str]:
    """
    shift an insertion point as far 3' as the sequence allows

    Args:
        seq: the sequence the insertion is relative to
        after: position (1-based) of the base preceding the insertion (0 when inserted before the first base)
        inserted: the inserted bases

    Returns:
        tuple of int and str:
            * *int* - the normalized position of the preceding base
            * *str* - the inserted bases rotated to match the normalized position

    Example:
        >>> shift_insertion('ATGCAGCAGTAA', 3, 'CAG')
        (9, 'CAG')
    """
    if not inserted:
        raise SequenceContextError('no inserted bases')
    if after < 0 or after > len(seq):
        raise SequenceContextError('insertion point is outside the sequence', after, len(seq))
    while after < len(seq) and seq[after] == inserted[0]:
        inserted = inserted[1:] + inserted[0]
        after += 1
    return after, inserted


def is_duplication(seq: str, after: int, inserted: str) -> bool:
    """
    an insertion is a duplication when the inserted bases equal the bases immediately 5' of the insertion point

    Example:
        >>> is_duplication('ATGCAGCAGTAA', 9, 'CAG')
        True
    """
    return after >= len(inserted) and seq[after - len(inserted) : after] == inserted
