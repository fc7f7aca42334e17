from typing import Dict, Iterable, Optional, Tuple


class Interval:
    def __init__(self, start: int, end: Optional[int] = None):
        """
        Args:
            start: the start of the interval (inclusive)
            end: the end of the interval (inclusive)
        """
        self.start = int(start)
        self.end = int(end) if end is not None else self.start
        if self.start > self.end:
            raise AttributeError('interval start > end is not allowed', self.start, self.end)

    def __getitem__(self, index):
        try:
            index = int(index)
        except ValueError:
            raise IndexError('index input accessor must be an integer', index)
        if index == 0:
            return self.start
        elif index == 1:
            return self.end
        raise IndexError('index input accessor is out of bounds: 1 or 2 only', index)

    @classmethod
    def overlaps(cls, first, other) -> bool:
        """
        checks if two intervals have any portion of their given ranges in common

        Args:
            first (Interval): an interval to be compared
            other (Interval): an interval to be compared

        Example:
            >>> Interval.overlaps(Interval(1, 4), Interval(5, 7))
            False
            >>> Interval.overlaps(Interval(1, 10), Interval(10, 11))
            True
            >>> Interval.overlaps((1, 10), (10, 11))
            True
        """
        if first[1] < other[0]:
            return False
        elif first[0] > other[1]:
            return False
        else:
            return True

    def __len__(self) -> int:
        """
        the length of the interval

        Example:
            >>> len(Interval(1, 11))
            11
        """
        return Interval.length(self)

    def length(self) -> int:
        return self[1] - self[0] + 1

    def __lt__(self, other):
        if self[0] < other[0]:
            return True
        elif self[0] == other[0] and self[1] < other[1]:
            return True
        return False

    def __repr__(self):
        return '{}({}, {})'.format(self.__class__.__name__, self.start, self.end)

    def __eq__(self, other):
        try:
            if self[0] != other[0] or self[1] != other[1]:
                return False
        except (TypeError, IndexError):
            return False
        return True

    def __contains__(self, other):
        try:
            if other[0] >= self[0] and other[1] <= self[1]:
                return True
        except TypeError:
            if other >= self[0] and other <= self[1]:
                return True
        return False

    @classmethod
    def dist(cls, first, other) -> int:
        """returns the minimum distance between intervals

        Example:
            >>> Interval.dist((1, 4), (5, 7))
            -1
            >>> Interval.dist((5, 7), (1, 4))
            1
            >>> Interval.dist((5, 8), (7, 9))
            0
        """
        if first[1] < other[0]:
            return first[1] - other[0]
        elif first[0] > other[1]:
            return first[0] - other[1]
        else:
            return 0

    def __hash__(self):
        return hash((self[0], self[1]))

    @classmethod
    def intersection(cls, *intervals) -> Optional['Interval']:
        """
        Returns:
            the intersection of the input intervals or None if they do not all overlap

        Example:
            >>> Interval.intersection((1, 10), (2, 8), (7, 15))
            Interval(7, 8)
        """
        low = max([i[0] for i in intervals])
        high = min([i[1] for i in intervals])
        if low > high:
            return None
        return Interval(low, high)


class IntervalMapping:
    """
    mapping between coordinate systems using intervals.
    source intervals cannot overlap but no such assertion is enforced on the target intervals
    """

    def __init__(
        self,
        mapping: Optional[Dict[Tuple[int, int], Tuple[int, int]]] = None,
        opposing: Optional[Iterable[Tuple[int, int]]] = None,
    ):
        self.mapping: Dict[Interval, Interval] = {}
        self.opposing_directions: Dict[Interval, bool] = {}
        opposing = {Interval(k[0], k[1]) for k in (opposing or [])}
        for src, tgt in (mapping or {}).items():
            self.add(src, tgt, Interval(src[0], src[1]) in opposing)
        for interval in opposing:
            if interval not in self.mapping:
                raise ValueError(
                    'cannot defined an opposing direction for an interval that in not mapped',
                    interval,
                )

    def keys(self):
        return self.mapping.keys()

    def items(self):
        return self.mapping.items()

    def __getitem__(self, item):
        return self.mapping[item]

    def add(self, src_interval, tgt_interval, opposing_directions: bool = True):
        src_interval = Interval(src_interval[0], src_interval[1])
        tgt_interval = Interval(tgt_interval[0], tgt_interval[1])
        if len(src_interval) != len(tgt_interval):
            raise ValueError('mapped intervals must be the same length', src_interval, tgt_interval)
        for curr in self.mapping:
            if Interval.overlaps(curr, src_interval):
                raise ValueError('source intervals in mapping must not overlap')
        self.mapping[src_interval] = tgt_interval
        self.opposing_directions[src_interval] = opposing_directions

    def convert_pos(self, pos: int) -> int:
        """convert any given position given a mapping of intervals to another range

        Args:
            pos: a position in the first coordinate system

        Returns:
            the position in the alternate coordinate system given the input mapping

        Raises:
            IndexError: if the input position is not in any of the mapped intervals

        Example:
            >>> mapping = IntervalMapping(mapping={(1, 10): (101, 110), (11, 20): (555, 564)})
            >>> mapping.convert_pos(5)
            105
            >>> mapping.convert_pos(15)
            559
        """
        for src_interval, tgt_interval in self.mapping.items():
            if pos in src_interval:
                shift = pos - src_interval.start
                if self.opposing_directions[src_interval]:
                    return tgt_interval.end - shift
                return tgt_interval.start + shift
        raise IndexError(pos, 'position not found in mapping', list(self.mapping.keys()))
