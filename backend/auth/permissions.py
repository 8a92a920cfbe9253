from backend.models.user import Role

ROLE_HOME_PATHS = {
    Role.ADMIN: '/admin',
    Role.TEACHER: '/teacher',
    Role.STUDENT: '/student',
    Role.PARENT: '/parent',
}


def home_path_for(role: Role) -> str:
    """Dashboard a freshly logged-in user is sent to."""
    return ROLE_HOME_PATHS[role]


def permissions_for(role: Role) -> dict[str, bool]:
    return {
        'isAdmin': role is Role.ADMIN,
        'isTeacher': role is Role.TEACHER,
        'isStudent': role is Role.STUDENT,
        'isParent': role is Role.PARENT,
        'canManageUsers': role is Role.ADMIN,
        'canManageClasses': role in {Role.ADMIN, Role.TEACHER},
        'canViewGrades': role in {Role.STUDENT, Role.PARENT, Role.TEACHER},
    }
