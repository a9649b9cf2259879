"""
Organization user management: invitations, role and status changes,
removal.
"""

from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.core.exceptions import AuthorizationError, DuplicateEntryError, UserNotFoundError, ValidationError
from staysync.core.security import PasswordManager
from staysync.models import User
from staysync.models.base.enums import UserStatus
from staysync.repositories.user import UserRepository
from staysync.schemas.auth import UserInviteRequest, UserUpdateRequest
from staysync.services.base import BaseService


class UserService(BaseService):
    def __init__(self, db_session: Session, settings: Settings):
        super().__init__(db_session)
        self.settings = settings
        self.passwords = PasswordManager(settings.PASSWORD_BCRYPT_ROUNDS)
        self.users = UserRepository(db_session)

    def list_users(self, organization_id: str) -> List[User]:
        return self.users.list_in_org(organization_id, order_by=[User.created_at])

    def invite(self, actor: User, data: UserInviteRequest) -> Tuple[User, str]:
        """
        Create an account in the actor's organization with a temporary
        password, returned once so it can be handed to the new user.

        Raises:
            DuplicateEntryError: If the email is already registered
        """
        if self.users.get_by_email(data.email) is not None:
            raise DuplicateEntryError("User", "email", data.email)

        temporary_password = PasswordManager.generate_temporary_password()
        user = User(
            organization_id=actor.organization_id,
            email=data.email,
            password_hash=self.passwords.hash_password(temporary_password),
            full_name=data.full_name,
            phone=data.phone,
            role=data.role,
            status=UserStatus.ACTIVE,
        )
        with self.transaction():
            self.users.create(user)

        self._logger.info("User invited", extra={"user_id": user.id, "invited_by": actor.id})
        return user, temporary_password

    def update(self, actor: User, user_id: str, data: UserUpdateRequest) -> Tuple[User, Dict[str, Any]]:
        user = self._get_managed_user(actor, user_id, "edit")
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        diff = {
            field: {"from": getattr(user, field), "to": value}
            for field, value in changes.items()
            if getattr(user, field) != value
        }
        with self.transaction():
            self.users.update(user, changes)
        return user, diff

    def delete(self, actor: User, user_id: str) -> User:
        user = self._get_managed_user(actor, user_id, "delete")
        with self.transaction():
            self.users.delete(user)
        self._logger.info("User deleted", extra={"user_id": user.id, "deleted_by": actor.id})
        return user

    def _get_managed_user(self, actor: User, user_id: str, verb: str) -> User:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        if user.organization_id != actor.organization_id:
            raise AuthorizationError("User belongs to another organization")
        if user.id == actor.id:
            raise ValidationError(f"Cannot {verb} your own account")
        return user
