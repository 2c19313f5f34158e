import enum


class RoleEnum(str, enum.Enum):
    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    PARENT = "parent"
    EDITOR = "editor"


# Roles offered by the public sign-up form
SIGNUP_ROLES = (RoleEnum.TEACHER, RoleEnum.ADMIN, RoleEnum.EDITOR)
