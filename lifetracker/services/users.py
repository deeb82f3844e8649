"""User store access and first-boot admin bootstrap."""

import logging
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from lifetracker.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    hash_password,
)
from lifetracker.core.storage import Storage, StorageError, generate_id
from lifetracker.models.user import Role, User
from lifetracker.services.errors import ValidationFailure

if TYPE_CHECKING:
    from lifetracker.core.config import Settings

logger = logging.getLogger(__name__)

_users_adapter = TypeAdapter(list[User])


def parse_users(raw: Any) -> list[User]:
    """Validate the raw users.json document."""
    try:
        return _users_adapter.validate_python(raw)
    except ValidationError as e:
        raise StorageError("users.json does not match the user schema", e) from e


async def get_user_by_username(storage: Storage, username: str) -> User | None:
    """Case-sensitive exact match."""
    for user in parse_users(await storage.users.read()):
        if user.username == username:
            return user
    return None


async def get_user_by_id(storage: Storage, user_id: str) -> User | None:
    for user in parse_users(await storage.users.read()):
        if user.id == user_id:
            return user
    return None


async def add_user(storage: Storage, username: str, password: str, role: Role = "user") -> User:
    """Create an account; raises ValidationFailure on bad input or a taken username."""
    username = username.strip()
    if not USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN:
        raise ValidationFailure("Invalid username length.")
    if not PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN:
        raise ValidationFailure(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
        )
    user = User(
        id=generate_id(),
        username=username,
        password_hash=hash_password(password),
        role=role,
    )
    async with storage.users.edit() as doc:
        if any(u.username == username for u in parse_users(doc)):
            raise ValidationFailure(f"User '{username}' already exists.")
        doc.append(user.to_document())
    logger.info("User created", extra={"user_id": user.id, "role": role})
    return user


async def initialize_storage(storage: Storage, settings: "Settings") -> None:
    """
    Prepare the data directory at startup.

    Creates missing data files with default content and guarantees an admin
    account exists. If an admin has to be created and ADMIN_PASSWORD is not set,
    or ADMIN_USERNAME is already taken by a regular account, raises RuntimeError
    so the process refuses to start.
    """
    storage.data_dir.mkdir(parents=True, exist_ok=True)
    await storage.categories.read()
    await storage.entries.read()

    users = parse_users(await storage.users.read())
    if any(u.role == "admin" for u in users):
        return
    if settings.ADMIN_PASSWORD is None:
        raise RuntimeError(
            "No admin user exists and ADMIN_PASSWORD is not set; refusing to start."
        )
    try:
        await add_user(
            storage,
            settings.ADMIN_USERNAME,
            settings.ADMIN_PASSWORD.get_secret_value(),
            role="admin",
        )
    except ValidationFailure as e:
        raise RuntimeError(
            f"Cannot create admin user '{settings.ADMIN_USERNAME}': {e.message} "
            "Set ADMIN_USERNAME to an unused name or promote the account in users.json."
        ) from e
    logger.info("Created admin user '%s'", settings.ADMIN_USERNAME)
