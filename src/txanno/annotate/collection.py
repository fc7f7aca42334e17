from typing import Dict, List, Tuple

from ..constants import ANNOTATION_CLASS, GENIC_CLASSES, VARIANT_TYPE
from ..error import InconsistentInputError, UnresolvableAnnotationError
from .base import Annotation


class AnnotationCollection:
    """
    accumulates the candidate annotations of a single variant and resolves the most informative of them

    Candidates are sorted into one bucket per ANNOTATION_CLASS. On resolution the first non-empty bucket, in
    the order the classes are declared, is selected. Intronic and downstream candidates are merged into a
    single candidate when there is more than one. Upstream candidates are returned separately unless
    merge_upstream is set, in which case they are merged the same way downstream candidates are.

    A collection is scoped to one variant: once resolved it must be cleared before it can be used again

    Example:
        >>> collection = AnnotationCollection()
        >>> collection.add_up_downstream(Annotation.genic('NM_1', VARIANT_TYPE.DOWNSTREAM, 'GENE1'))
        >>> collection.add_up_downstream(Annotation.genic('NM_2', VARIANT_TYPE.DOWNSTREAM, 'GENE2'))
        >>> collection.resolve()[1][0].annotation
        'GENE1,GENE2'
    """

    def __init__(self, merge_upstream: bool = False):
        self.merge_upstream = merge_upstream
        self._buckets: Dict[str, List[Annotation]] = {}
        self._count = 0
        self._resolved = False
        self.clear()

    def clear(self):
        """empty all buckets so the collection can be used for the next variant"""
        self._buckets = {annotation_class: [] for annotation_class in ANNOTATION_CLASS.values()}
        self._count = 0
        self._resolved = False

    @property
    def count(self) -> int:
        """the number of candidates added (duplicates ignored on arrival are not counted)"""
        return self._count

    def __len__(self) -> int:
        return self._count

    def has(self, annotation_class: str) -> bool:
        return len(self._buckets[ANNOTATION_CLASS.enforce(annotation_class)]) > 0

    @property
    def has_genic(self) -> bool:
        """True if any candidate affects a gene (exonic, ncRNA exonic, UTR or intronic)"""
        return any([self.has(c) for c in GENIC_CLASSES])

    def bucket(self, annotation_class: str) -> List[Annotation]:
        return list(self._buckets[ANNOTATION_CLASS.enforce(annotation_class)])

    def _append(self, annotation: Annotation, annotation_class: str, deduplicate: bool = False):
        if self._resolved:
            raise InconsistentInputError('cannot add to a resolved collection without clearing it first')
        if annotation.annotation_class != annotation_class:
            raise InconsistentInputError(
                f'a {annotation.variant_type} candidate does not belong with the {annotation_class} annotations'
            )
        if deduplicate and annotation in self._buckets[annotation_class]:
            return
        self._buckets[annotation_class].append(annotation)
        self._count += 1

    def add_exonic(self, annotation: Annotation):
        self._append(annotation, ANNOTATION_CLASS.EXONIC)

    def add_ncrna_exonic(self, annotation: Annotation):
        self._append(annotation, ANNOTATION_CLASS.NCRNA_EXONIC)

    def add_utr5(self, annotation: Annotation):
        self._append(annotation, ANNOTATION_CLASS.UTR5)

    def add_utr3(self, annotation: Annotation):
        self._append(annotation, ANNOTATION_CLASS.UTR3)

    def add_intronic(self, annotation: Annotation):
        """
        intronic candidates of coding and non-coding transcripts go to separate buckets. Exact duplicates of a
        candidate already added are ignored

        Raises:
            InconsistentInputError: the candidate is not intronic
        """
        if annotation.variant_type == VARIANT_TYPE.NCRNA_INTRONIC:
            self._append(annotation, ANNOTATION_CLASS.NCRNA_INTRONIC, deduplicate=True)
        else:
            self._append(annotation, ANNOTATION_CLASS.INTRONIC, deduplicate=True)

    def add_up_downstream(self, annotation: Annotation):
        """
        Raises:
            InconsistentInputError: the candidate is neither upstream nor downstream
        """
        if annotation.variant_type == VARIANT_TYPE.UPSTREAM:
            self._append(annotation, ANNOTATION_CLASS.UPSTREAM)
        elif annotation.variant_type == VARIANT_TYPE.DOWNSTREAM:
            self._append(annotation, ANNOTATION_CLASS.DOWNSTREAM)
        else:
            raise InconsistentInputError(
                f'expected an upstream or downstream candidate but found {annotation.variant_type}',
                annotation.annotation,
            )

    def add_intergenic(self, annotation: Annotation):
        self._append(annotation, ANNOTATION_CLASS.INTERGENIC)

    def add_error(self, annotation: Annotation):
        self._append(annotation, ANNOTATION_CLASS.ERROR)

    def add(self, annotation: Annotation):
        """add a candidate to the bucket matching its classification"""
        annotation_class = annotation.annotation_class
        if annotation_class in {ANNOTATION_CLASS.INTRONIC, ANNOTATION_CLASS.NCRNA_INTRONIC}:
            self.add_intronic(annotation)
        elif annotation_class in {ANNOTATION_CLASS.UPSTREAM, ANNOTATION_CLASS.DOWNSTREAM}:
            self.add_up_downstream(annotation)
        else:
            self._append(annotation, annotation_class)

    @staticmethod
    def _merge(candidates: List[Annotation], variant_type: str) -> List[Annotation]:
        """
        join the distinct display strings (and transcripts and genes) of the candidates into a single candidate
        """
        if len(candidates) < 2:
            return candidates
        texts = list(dict.fromkeys([c.annotation for c in candidates]))
        transcripts = list(dict.fromkeys([c.transcript for c in candidates if c.transcript]))
        genes = list(dict.fromkeys([c.gene for c in candidates if c.gene]))
        return [
            Annotation(
                transcript=','.join(transcripts) or None,
                variant_type=variant_type,
                annotation=','.join(texts),
                gene=','.join(genes) or None,
            )
        ]

    def resolve(self) -> Tuple[str, List[Annotation]]:
        """
        select the highest precedence non-empty bucket

        Returns:
            tuple of str and list of Annotation:
                * *str* - the selected ANNOTATION_CLASS
                * *list* - the candidates reported for the variant

        Raises:
            InconsistentInputError: the collection was already resolved
            UnresolvableAnnotationError: the collection is empty
        """
        if self._resolved:
            raise InconsistentInputError('collection was already resolved')
        for annotation_class in ANNOTATION_CLASS.values():
            candidates = self._buckets[annotation_class]
            if not candidates:
                continue
            self._resolved = True
            if annotation_class == ANNOTATION_CLASS.INTRONIC:
                return annotation_class, self._merge(candidates, VARIANT_TYPE.INTRONIC)
            elif annotation_class == ANNOTATION_CLASS.DOWNSTREAM:
                return annotation_class, self._merge(candidates, VARIANT_TYPE.DOWNSTREAM)
            elif annotation_class == ANNOTATION_CLASS.UPSTREAM and self.merge_upstream:
                return annotation_class, self._merge(candidates, VARIANT_TYPE.UPSTREAM)
            return annotation_class, list(candidates)
        raise UnresolvableAnnotationError('no candidate annotations were added before resolving')
