import logging

from . import errors, schemas
from .auth import hash_password, verify_password
from .entities import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class IdentityStore:
    def __init__(self, users: UserRepository):
        self.users = users

    def get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise errors.NotFound(f"user {user_id} not found")
        return user

    def get_user_by_username(self, username: str) -> User:
        user = self.users.get_by_username(username)
        if user is None:
            raise errors.NotFound(f"user {username!r} not found")
        return user

    def create_user(self, user: schemas.UserCreate, is_admin: bool = False) -> User:
        # Admin accounts come from seeding or the management CLI, never from registration
        if self.users.get_by_username(user.username) is not None:
            raise errors.Conflict(f"username {user.username!r} already exists")
        fields = user.model_dump(exclude={"password"})
        fields["password_hash"] = hash_password(user.password)
        fields["is_admin"] = bool(is_admin)
        created = self.users.add(fields)
        logger.info("user %s registered (admin=%s)", created.id, created.is_admin)
        return created

    def authenticate(self, username: str, password: str) -> User:
        user = self.users.get_by_username(username)
        if user is None or not verify_password(password, user.password_hash):
            raise errors.Unauthorized("invalid credentials")
        return user

    @staticmethod
    def is_admin(user: User) -> bool:
        return user.is_admin is True
