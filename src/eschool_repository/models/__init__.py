"""
Row schemas for every relation the repositories touch.

Importing this package registers all tables on `Base.metadata`:

    from eschool_repository.models import UserRecord, SchoolRecord, school_teacher_table
"""

from .user import UserRecord
from .school import SchoolRecord, school_teacher_table
from .course import CourseRecord
from .review import ReviewRecord
from .certificate import CertificateRecord

__all__ = [
    "UserRecord",
    "SchoolRecord",
    "school_teacher_table",
    "CourseRecord",
    "ReviewRecord",
    "CertificateRecord",
]
