"""Tests for the user persistence gateway against a real SQLite store."""

import logging

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlmodel import Session

from user_registry.errors import ConstraintViolation, RowNotFound, StorageFault
from user_registry.models.user import User


def _user(name="Ann", email="ann@ex.com", age=30) -> User:
    return User(name=name, email=email, age=age)


# ---------------------------------------------------------------------------
# create / find
# ---------------------------------------------------------------------------


def test_create_assigns_id_and_created_at(gateway):
    user = _user()
    assert user.id is None
    assert user.created_at is None

    user_id = gateway.create(user)

    assert user_id == 1
    assert user.id == 1
    assert user.created_at is not None


def test_find_by_id_returns_stored_record(gateway):
    user_id = gateway.create(_user(name="Bob", email="bob@ex.com", age=41))

    found = gateway.find_by_id(user_id)

    assert found is not None
    assert found.id == user_id
    assert found.name == "Bob"
    assert found.email == "bob@ex.com"
    assert found.age == 41
    assert found.created_at is not None


def test_created_at_reloads_unchanged(gateway):
    user = _user()
    gateway.create(user)

    reloaded = gateway.find_by_id(user.id)

    assert reloaded.created_at == user.created_at
    assert reloaded.created_at.tzinfo is None


def test_find_by_id_absent_returns_none(gateway):
    assert gateway.find_by_id(999) is None


def test_find_all_returns_every_row(gateway):
    assert gateway.find_all() == []

    gateway.create(_user(name="A", email="a@ex.com"))
    gateway.create(_user(name="B", email="b@ex.com"))

    users = gateway.find_all()
    assert sorted(u.email for u in users) == ["a@ex.com", "b@ex.com"]


def test_create_duplicate_email_raises_constraint_violation(gateway):
    gateway.create(_user(email="dup@ex.com"))
    loser = _user(name="Other", email="dup@ex.com")

    with pytest.raises(ConstraintViolation):
        gateway.create(loser)

    # The losing record was never persisted
    assert loser.id is None
    assert loser.created_at is None
    users = gateway.find_all()
    assert len(users) == 1
    assert users[0].name == "Ann"


def test_ids_are_not_reused_after_delete(gateway):
    first_id = gateway.create(_user(email="first@ex.com"))
    gateway.delete_by_id(first_id)

    second_id = gateway.create(_user(email="second@ex.com"))

    assert second_id > first_id


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------


def test_update_by_id_replaces_mutable_fields(gateway):
    user_id = gateway.create(_user())
    before = gateway.find_by_id(user_id)

    gateway.update_by_id(user_id, "Ann2", "ann2@ex.com", 31)

    after = gateway.find_by_id(user_id)
    assert after.name == "Ann2"
    assert after.email == "ann2@ex.com"
    assert after.age == 31
    assert after.created_at == before.created_at


def test_update_by_id_absent_raises_row_not_found(gateway):
    with pytest.raises(RowNotFound, match="not found, id=42") as exc_info:
        gateway.update_by_id(42, "X", "x@ex.com", 1)

    # Callers that only know StorageFault still see a storage fault
    assert isinstance(exc_info.value, StorageFault)
    assert exc_info.value.user_id == 42


def test_update_by_id_to_taken_email_rolls_back(gateway):
    gateway.create(_user(name="A", email="a@ex.com", age=20))
    b_id = gateway.create(_user(name="B", email="b@ex.com", age=21))

    with pytest.raises(ConstraintViolation):
        gateway.update_by_id(b_id, "B2", "a@ex.com", 22)

    unchanged = gateway.find_by_id(b_id)
    assert unchanged.name == "B"
    assert unchanged.email == "b@ex.com"
    assert unchanged.age == 21


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


def test_delete_by_id_removes_row(gateway):
    user_id = gateway.create(_user())

    gateway.delete_by_id(user_id)

    assert gateway.find_by_id(user_id) is None
    assert gateway.find_all() == []


def test_delete_by_id_absent_raises_row_not_found(gateway):
    with pytest.raises(RowNotFound, match="Cannot delete"):
        gateway.delete_by_id(7)


# ---------------------------------------------------------------------------
# Storage faults
# ---------------------------------------------------------------------------


def test_storage_fault_wraps_driver_error(engine, gateway):
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE users"))

    with pytest.raises(StorageFault) as exc_info:
        gateway.find_all()

    assert not isinstance(exc_info.value, ConstraintViolation)
    assert isinstance(exc_info.value.__cause__, OperationalError)


def test_unencodable_value_becomes_storage_fault(gateway):
    # A lone surrogate (e.g. from surrogateescape-decoded input) fails at bind time
    user = _user(name="Ann\udc80")

    with pytest.raises(StorageFault) as exc_info:
        gateway.create(user)

    assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)
    assert user.id is None
    assert user.created_at is None
    assert gateway.find_all() == []


def test_storage_fault_on_create_leaves_user_unpersisted(engine, gateway):
    with engine.begin() as conn:
        conn.execute(text("DROP TABLE users"))
    user = _user()

    with pytest.raises(StorageFault):
        gateway.create(user)

    assert user.id is None
    assert user.created_at is None


def test_failed_rollback_is_logged_and_original_error_kept(gateway, monkeypatch, caplog):
    gateway.create(_user(email="dup@ex.com"))

    def failing_rollback(self):
        raise RuntimeError("connection lost during rollback")

    monkeypatch.setattr(Session, "rollback", failing_rollback)

    with caplog.at_level(logging.ERROR, logger="user_registry.persistence.user_gateway"):
        with pytest.raises(ConstraintViolation):
            gateway.create(_user(name="Other", email="dup@ex.com"))

    assert "Rollback failed" in caplog.text


def test_successful_mutations_are_logged(gateway, caplog):
    with caplog.at_level(logging.INFO, logger="user_registry.persistence.user_gateway"):
        user_id = gateway.create(_user())
        gateway.update_by_id(user_id, "Ann2", "ann2@ex.com", 31)
        gateway.delete_by_id(user_id)

    assert f"User created with id={user_id}" in caplog.text
    assert f"User updated, id={user_id}" in caplog.text
    assert f"User deleted, id={user_id}" in caplog.text
