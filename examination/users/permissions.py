import enum

from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import UserRole, role_of

# ------------------------------------------------------------
# Role checks: the role is read from the user's Profile and
# decided before any exam logic runs.
# ------------------------------------------------------------


class IsAdminRole(BasePermission):
    """Allows access only to users whose profile role is admin."""

    message = "Admin role required."

    def has_permission(self, request, view):
        return role_of(request.user) == UserRole.ADMIN


class IsStudentRole(BasePermission):
    """Allows access only to users whose profile role is student."""

    message = "Student role required."

    def has_permission(self, request, view):
        return role_of(request.user) == UserRole.STUDENT


class IsAdminRoleOrReadOnly(BasePermission):
    """Read access for any authenticated user, writes for admins only."""

    message = "Admin role required."

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return role_of(request.user) == UserRole.ADMIN


class AnswerKeyAccess(enum.Enum):
    """Whether a caller may see the correct answers of an exam's questions."""

    WITHHELD = "withheld"
    GRANTED = "granted"


def answer_key_access_for(user) -> AnswerKeyAccess:
    """
    Decide whether the answer key may be shown to a user.

    Only admins see it. Students, and callers without a role, never do.
    """
    if role_of(user) == UserRole.ADMIN:
        return AnswerKeyAccess.GRANTED
    return AnswerKeyAccess.WITHHELD
