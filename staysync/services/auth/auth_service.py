"""
Registration, login and token resolution.
"""

from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from staysync.config.settings import Settings
from staysync.core.exceptions import AuthenticationError, DuplicateEntryError, ErrorCode
from staysync.core.security import PasswordManager, TokenManager
from staysync.models import Organization, User
from staysync.models.base.enums import UserRole, UserStatus
from staysync.repositories.organization import OrganizationRepository
from staysync.repositories.user import UserRepository
from staysync.schemas.auth import RegisterRequest
from staysync.services.base import BaseService
from staysync.services.system.system_config_service import SystemConfigService
from staysync.utils.date_utils import utc_now


class AuthService(BaseService):
    def __init__(self, db_session: Session, settings: Settings):
        super().__init__(db_session)
        self.settings = settings
        self.passwords = PasswordManager(settings.PASSWORD_BCRYPT_ROUNDS)
        self.tokens = TokenManager(settings)
        self.users = UserRepository(db_session)
        self.organizations = OrganizationRepository(db_session)
        self.config_service = SystemConfigService(db_session, settings)

    def issue_token(self, user: User) -> str:
        return self.tokens.create_token(
            {
                "sub": user.id,
                "org": user.organization_id,
                "role": UserRole(user.role).value,
                "email": user.email,
            }
        )

    def register(self, data: RegisterRequest) -> Tuple[User, str]:
        """
        Create an organization, its OWNER account and its default
        configuration in one transaction.

        Raises:
            DuplicateEntryError: If the email is already registered
        """
        if self.users.get_by_email(data.email) is not None:
            raise DuplicateEntryError("User", "email", data.email)

        with self.transaction():
            organization = self.organizations.create(Organization(name=data.organization_name))
            user = self.users.create(
                User(
                    organization_id=organization.id,
                    email=data.email,
                    password_hash=self.passwords.hash_password(data.password),
                    full_name=data.full_name,
                    phone=data.phone,
                    role=UserRole.OWNER,
                    status=UserStatus.ACTIVE,
                )
            )
            self.db.add(self.config_service.default_config(organization.id, dorm_name=data.organization_name))

        self._logger.info("Organization registered", extra={"organization_id": organization.id, "user_id": user.id})
        return user, self.issue_token(user)

    def login(self, email: str, password: str, now: Optional[datetime] = None) -> Tuple[User, str]:
        """
        Raises:
            AuthenticationError: On unknown email, wrong password or a suspended account
        """
        user = self.users.get_by_email(email)
        if user is None or not self.passwords.verify_password(password, user.password_hash):
            self._logger.warning("Login failed", extra={"email": email})
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AuthenticationError("Account is suspended", ErrorCode.AUTHORIZATION_FAILED)

        with self.transaction():
            user.last_login_at = now or utc_now()

        self._logger.info("User logged in", extra={"user_id": user.id})
        return user, self.issue_token(user)

    def resolve_user(self, token: str) -> User:
        """
        Map a bearer token to an active user.

        Raises:
            AuthenticationError: If the token is invalid or the user is gone or suspended
        """
        payload = self.tokens.verify_token(token)
        user = self.users.get_by_id(payload["sub"])
        if user is None or not user.is_active:
            raise AuthenticationError("User not found or inactive", ErrorCode.TOKEN_INVALID)
        return user
