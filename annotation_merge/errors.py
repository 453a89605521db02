"""Exception hierarchy for annotation merging."""


class AnnotationMergeError(Exception):
    """Base exception for annotation merge errors."""


class AnnotationDecodeError(AnnotationMergeError, ValueError):
    """Raised when a single annotation file cannot be decoded."""


class MissingVideoError(AnnotationMergeError, ValueError):
    """Raised when a merge is attempted without any video input."""
