"""Subject lists and registry."""

from audis.subjects.index import SUBJECTS_KEY, SubjectIndex

__all__ = [
    "SUBJECTS_KEY",
    "SubjectIndex",
]
