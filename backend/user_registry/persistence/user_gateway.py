"""
User persistence gateway.

Every public method is one unit of work: open a session, run exactly one
logical operation, commit or roll back, close. Low-level errors (SQLAlchemy
or raw driver) never leave this module; they are translated into
ConstraintViolation or StorageFault.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from user_registry.errors import ConstraintViolation, RowNotFound, StorageError, StorageFault
from user_registry.models.user import User

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    # Naive UTC: SQLite drops tzinfo, so this is what a reload returns
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserGateway:
    """Atomic CRUD against the ``users`` table"""

    def __init__(self, engine: Engine):
        self._engine = engine

    def create(self, user: User) -> int:
        """Insert a new user and return the id assigned by the store."""
        user.created_at = _utcnow()
        try:
            with self._unit_of_work("create user") as session:
                session.add(user)
        except StorageError:
            # The insert never happened: leave the record as it was before the call
            user.id = None
            user.created_at = None
            raise

        logger.info("User created with id=%s", user.id)
        return user.id

    def find_by_id(self, user_id: int) -> Optional[User]:
        """Return the user with ``user_id``, or None when there is no such row."""
        with self._unit_of_work(f"find user by id={user_id}") as session:
            return session.get(User, user_id)

    def find_all(self) -> List[User]:
        """Return every user in store-defined order."""
        with self._unit_of_work("load users list") as session:
            return list(session.exec(select(User)).all())

    def update_by_id(self, user_id: int, name: str, email: str, age: int) -> None:
        """
        Replace name, email and age of an existing user as one unit.

        Raises:
            RowNotFound: no row with ``user_id`` exists at load time
            ConstraintViolation: the new email belongs to another user
            StorageFault: any other storage failure
        """
        with self._unit_of_work(f"update user id={user_id}") as session:
            user = session.get(User, user_id)
            if user is None:
                logger.warning("Cannot update: user not found, id=%s", user_id)
                raise RowNotFound(f"Cannot update: user not found, id={user_id}", user_id=user_id)

            user.name = name
            user.email = email
            user.age = age
            session.add(user)

        logger.info("User updated, id=%s", user_id)

    def delete_by_id(self, user_id: int) -> None:
        """
        Delete an existing user.

        Raises:
            RowNotFound: no row with ``user_id`` exists at load time
            StorageFault: any other storage failure
        """
        with self._unit_of_work(f"delete user id={user_id}") as session:
            user = session.get(User, user_id)
            if user is None:
                logger.warning("Cannot delete: user not found, id=%s", user_id)
                raise RowNotFound(f"Cannot delete: user not found, id={user_id}", user_id=user_id)

            session.delete(user)

        logger.info("User deleted, id=%s", user_id)

    # ------------------------------------------------------------------
    # Unit of work
    # ------------------------------------------------------------------

    @contextmanager
    def _unit_of_work(self, action: str) -> Iterator[Session]:
        """Open a session, commit on success, roll back and translate on failure."""
        # expire_on_commit=False keeps returned users readable after the session closes
        with Session(self._engine, expire_on_commit=False) as session:
            try:
                yield session
                session.commit()
            except StorageError:
                self._safe_rollback(session)
                raise
            except IntegrityError as exc:
                self._safe_rollback(session)
                raise ConstraintViolation(
                    f"Cannot {action}: constraint violation (maybe email already exists)."
                ) from exc
            except Exception as exc:
                # Includes driver errors SQLAlchemy does not wrap (e.g. encoding failures at bind time)
                self._safe_rollback(session)
                raise StorageFault(f"Cannot {action} due to unexpected DB error.") from exc

    @staticmethod
    def _safe_rollback(session: Session) -> None:
        # A failed rollback must not replace the error being reported
        try:
            session.rollback()
        except Exception:
            logger.exception("Rollback failed")
