from enum import Enum


class UserRoleEnum(str, Enum):
    SYSTEM_ADMIN = "system_admin"
    ORG_ADMIN = "org_admin"
    INSTRUCTOR = "instructor"
    STUDENT = "student"

class LessonItemTypeEnum(str, Enum):
    VIDEO = "video"
    TEXT = "text"
    QUESTION = "question"

AUTHOR_ROLES = frozenset({UserRoleEnum.SYSTEM_ADMIN, UserRoleEnum.ORG_ADMIN, UserRoleEnum.INSTRUCTOR})
ADMIN_ROLES = frozenset({UserRoleEnum.SYSTEM_ADMIN, UserRoleEnum.ORG_ADMIN})

QUIZ_PASSING_SCORE = 100
