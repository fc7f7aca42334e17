class NotSpecifiedError(Exception):
    """
    raised when information is required for a function but has not been given

    for example if a transcript sequence was required but the gene model did not
    include one then this error would be raised
    """

    pass


class AnnotationError(Exception):
    """
    base class for failures while annotating a variant against a transcript
    """

    pass


class SequenceContextError(AnnotationError):
    """
    raised when a codon or sequence window is unavailable, for example the transcript
    is too short or the requested window runs past the end of the available sequence
    """

    pass


class InconsistentInputError(AnnotationError):
    """
    raised when an operation is given input it does not support, for example a candidate
    annotation type which does not belong to the bucket it is being added to
    """

    pass


class UnresolvableAnnotationError(AnnotationError):
    """
    raised when an annotation collection is resolved without any candidates
    """

    pass
