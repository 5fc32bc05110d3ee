"""
User application service.

Validates input before any storage access, guards update/delete with an
existence check, and normalises gateway failures into OperationFailed.
RecordNotFound is the one failure that passes through as its own kind.
"""

from typing import List, Optional

from user_registry.errors import InvalidInput, OperationFailed, RecordNotFound, StorageError
from user_registry.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, User
from user_registry.persistence.user_gateway import UserGateway

MIN_AGE = 0
MAX_AGE = 150


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_id(user_id: Optional[int]) -> None:
    if user_id is None or not _is_int(user_id) or user_id <= 0:
        raise InvalidInput("id must be a positive number.")


def validate_name(name: Optional[str]) -> None:
    if name is None or not name.strip():
        raise InvalidInput("name must not be blank.")
    if len(name.strip()) > NAME_MAX_LENGTH:
        raise InvalidInput(f"name length must be <= {NAME_MAX_LENGTH}.")


def validate_email(email: Optional[str]) -> None:
    """
    Check presence, length and shape of an email address.

    Shape: an "@" that is not the first character, then a "." with at least
    one character between it and the "@", and at least one character after
    the last ".". Everything is checked on the trimmed value.
    """
    if email is None or not email.strip():
        raise InvalidInput("email must not be blank.")

    trimmed = email.strip()
    if len(trimmed) > EMAIL_MAX_LENGTH:
        raise InvalidInput(f"email length must be <= {EMAIL_MAX_LENGTH}.")

    at = trimmed.find("@")
    dot = trimmed.rfind(".")
    if at <= 0 or dot <= at + 1 or dot == len(trimmed) - 1:
        raise InvalidInput("email looks invalid (expected something like name@example.com).")


def validate_age(age: Optional[int]) -> None:
    if age is None or not _is_int(age) or age < MIN_AGE or age > MAX_AGE:
        raise InvalidInput(f"age must be between {MIN_AGE} and {MAX_AGE}.")


class UserService:
    """The only entry point front ends use to manage users"""

    def __init__(self, gateway: UserGateway):
        self._gateway = gateway

    def create(self, name: str, email: str, age: int) -> int:
        validate_name(name)
        validate_email(email)
        validate_age(age)

        user = User(name=name.strip(), email=email.strip(), age=age)
        try:
            return self._gateway.create(user)
        except StorageError as exc:
            raise OperationFailed("Cannot create user due to data access error.", cause=exc) from exc

    def find_by_id(self, user_id: int) -> Optional[User]:
        """Return the user, or None when absent. Absence is not an error."""
        validate_id(user_id)
        try:
            return self._gateway.find_by_id(user_id)
        except StorageError as exc:
            raise OperationFailed("Cannot find user due to data access error.", cause=exc) from exc

    def find_all(self) -> List[User]:
        try:
            return self._gateway.find_all()
        except StorageError as exc:
            raise OperationFailed("Cannot load users due to data access error.", cause=exc) from exc

    def update_by_id(self, user_id: int, new_name: str, new_email: str, new_age: int) -> None:
        """
        Replace name, email and age of an existing user.

        Raises:
            InvalidInput: any argument fails validation (no storage call made)
            RecordNotFound: no user with ``user_id`` (no write attempted)
            OperationFailed: the gateway failed, including a row deleted
                concurrently between the existence check and the update
        """
        validate_id(user_id)
        validate_name(new_name)
        validate_email(new_email)
        validate_age(new_age)

        self._require_existing(user_id, "update")
        try:
            self._gateway.update_by_id(user_id, new_name.strip(), new_email.strip(), new_age)
        except StorageError as exc:
            raise OperationFailed("Cannot update user due to data access error.", cause=exc) from exc

    def delete_by_id(self, user_id: int) -> None:
        validate_id(user_id)

        self._require_existing(user_id, "delete")
        try:
            self._gateway.delete_by_id(user_id)
        except StorageError as exc:
            raise OperationFailed("Cannot delete user due to data access error.", cause=exc) from exc

    def _require_existing(self, user_id: int, action: str) -> None:
        try:
            existing = self._gateway.find_by_id(user_id)
        except StorageError as exc:
            raise OperationFailed(f"Cannot {action} user due to data access error.", cause=exc) from exc
        if existing is None:
            raise RecordNotFound(f"User not found, id={user_id}")
