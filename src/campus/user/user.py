"""User aggregate — the institution's directory of admins, lecturers and students.

Role and institution are fixed when the user is created and are the inputs to
audience resolution. Students may additionally belong to a department and a
class; those two attributes decide which targeted events reach them.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, String

from campus.domain import campus


class UserRole(Enum):
    ADMIN = "admin"
    LECTURER = "lecturer"
    STUDENT = "student"


@campus.aggregate
class User:
    """A person known to one institution.

    The identifier is issued by the credential backend so that the directory
    record and the login credential share the same id.
    """

    email: String(required=True, max_length=254)
    username: String(max_length=254)
    role: String(choices=UserRole, required=True)
    institution: String(required=True, max_length=200)
    department: String(max_length=200)
    class_name: String(max_length=200)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, user_id, email, role, institution, department=None, class_name=None):
        from campus.user.events import UserCreated

        now = datetime.now(UTC)
        user = cls(
            id=user_id,
            email=email,
            username=email.split("@")[0],
            role=role,
            institution=institution,
            department=department or None,
            class_name=class_name or None,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserCreated(
                user_id=str(user.id),
                email=email,
                role=role,
                institution=institution,
                department=user.department,
                class_name=user.class_name,
                created_at=now,
            )
        )
        return user

    def update_profile(self, department=None, class_name=None) -> bool:
        """Move the user to another department or class. ``None`` leaves a field as it is.

        Role and institution never change after creation.
        """
        from campus.user.events import UserUpdated

        changed = False
        if department is not None and department != self.department:
            self.department = department
            changed = True
        if class_name is not None and class_name != self.class_name:
            self.class_name = class_name
            changed = True
        if not changed:
            return False

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            UserUpdated(
                user_id=str(self.id),
                department=self.department,
                class_name=self.class_name,
                updated_at=now,
            )
        )
        return True
