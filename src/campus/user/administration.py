"""Administrative user management — CreateUser / UpdateUser / DeleteUser commands and handler.

Every operation requires an authenticated caller holding the ``admin`` role.
The caller's own directory record is authoritative for role and institution;
new users always join the caller's institution.
"""

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from campus.credentials import get_credentials
from campus.domain import campus
from campus.errors import InvalidArgument, NotFound, PermissionDenied
from campus.shared.caller import Caller
from campus.user.queries import get_user
from campus.user.user import User, UserRole

logger = structlog.get_logger(__name__)


@campus.command(part_of="User")
class CreateUser:
    """Create a login credential and directory record in the caller's institution."""

    caller_id: Identifier()
    email: String(required=True, max_length=254)
    role: String(choices=UserRole, required=True)
    department: String(max_length=200)
    class_name: String(max_length=200)
    temporary_password: String(required=True, max_length=128)


@campus.command(part_of="User")
class UpdateUser:
    """Move a user of the caller's institution to another department or class."""

    caller_id: Identifier()
    user_id: Identifier(required=True)
    department: String(max_length=200)
    class_name: String(max_length=200)


@campus.command(part_of="User")
class DeleteUser:
    """Remove a user's credential and directory record."""

    caller_id: Identifier()
    user_id: Identifier(required=True)


def _load_admin(repo, caller: Caller) -> User:
    try:
        admin = repo.get(caller.user_id)
    except ObjectNotFoundError:
        admin = None
    if admin is None or admin.role != UserRole.ADMIN.value:
        raise PermissionDenied("Only admins can manage users")
    return admin


@campus.command_handler(part_of=User)
class UserAdministrationHandler:
    @handle(CreateUser)
    def create_user(self, command: CreateUser):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(User)
        admin = _load_admin(repo, caller)

        credentials = get_credentials()
        user_id = credentials.create(command.email, command.temporary_password)

        try:
            user = User.create(
                user_id=user_id,
                email=command.email,
                role=command.role,
                institution=admin.institution,
                department=command.department,
                class_name=command.class_name,
            )
            repo.add(user)
        except Exception:
            # The directory write failed, so the credential must not outlive it
            credentials.delete(user_id)
            raise

        logger.info(
            "User created",
            user_id=user_id,
            role=command.role,
            institution=admin.institution,
            created_by=caller.user_id,
        )
        return user_id

    @handle(UpdateUser)
    def update_user(self, command: UpdateUser):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(User)
        admin = _load_admin(repo, caller)

        user = get_user(command.user_id, admin.institution)
        changed = user.update_profile(department=command.department, class_name=command.class_name)
        if changed:
            repo.add(user)

        logger.info("User update processed", user_id=str(user.id), changed=changed, updated_by=caller.user_id)
        return changed

    @handle(DeleteUser)
    def delete_user(self, command: DeleteUser):
        caller = Caller.from_command(command)
        repo = current_domain.repository_for(User)
        admin = _load_admin(repo, caller)

        target_id = str(command.user_id)
        if target_id == caller.user_id:
            raise InvalidArgument("Cannot delete your own account")

        try:
            target = repo.get(target_id)
        except ObjectNotFoundError:
            target = None
        if target is None or target.institution != admin.institution:
            raise PermissionDenied("Cannot delete users from other institutions")

        try:
            get_credentials().delete(target_id)
        except NotFound:
            logger.warning("User had no credential to delete", user_id=target_id)

        repo._dao.delete(target)

        logger.info("User deleted", user_id=target_id, deleted_by=caller.user_id)
