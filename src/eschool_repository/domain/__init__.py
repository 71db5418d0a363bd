from .entities import (
    ID,
    new_id,
    User,
    UserInfo,
    School,
    Course,
    CourseStatus,
    Review,
    Certificate,
    CertificateGrade,
)

__all__ = [
    "ID",
    "new_id",
    "User",
    "UserInfo",
    "School",
    "Course",
    "CourseStatus",
    "Review",
    "Certificate",
    "CertificateGrade",
]
