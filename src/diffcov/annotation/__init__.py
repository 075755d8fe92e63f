"""In-source ignore annotations."""

from diffcov.annotation.models import IgnoreProfile, IgnoreType
from diffcov.annotation.parser import DEFAULT_PREFIX, AnnotationParser, CommentAnnotationParser

__all__ = [
    "DEFAULT_PREFIX",
    "AnnotationParser",
    "CommentAnnotationParser",
    "IgnoreProfile",
    "IgnoreType",
]
