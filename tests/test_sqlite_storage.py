from __future__ import annotations

import sqlite3

import pytest
from sqlalchemy import inspect

from student_api.core.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    StorageConnectionError,
)
from student_api.storage.sqlite import SQLiteStorage


def test_create_then_get_returns_same_fields(storage):
    student_id = storage.create_student("Ada", "ada@x.com", 30)

    assert student_id > 0
    student = storage.get_student_by_id(student_id)
    assert (student.id, student.name, student.email, student.age) == (student_id, "Ada", "ada@x.com", 30)


def test_duplicate_email_is_a_constraint_violation(storage):
    first_id = storage.create_student("Ada", "ada@x.com", 30)

    with pytest.raises(ConstraintViolationError):
        storage.create_student("Impostor", "ada@x.com", 44)

    first = storage.get_student_by_id(first_id)
    assert first.name == "Ada"
    assert first.age == 30
    assert len(storage.get_students()) == 1


def test_get_unknown_id_is_not_found(storage):
    with pytest.raises(NotFoundError):
        storage.get_student_by_id(42)


def test_update_unknown_id_is_not_found_and_changes_nothing(storage):
    storage.create_student("Ada", "ada@x.com", 30)

    with pytest.raises(NotFoundError):
        storage.update_student_by_id(99, "Bob", "bob@x.com", 20)

    students = storage.get_students()
    assert [(s.name, s.email, s.age) for s in students] == [("Ada", "ada@x.com", 30)]


def test_update_replaces_all_fields(storage):
    student_id = storage.create_student("Ada", "ada@x.com", 30)

    updated = storage.update_student_by_id(student_id, "Ada L", "lovelace@x.com", 31)

    assert (updated.id, updated.name, updated.email, updated.age) == (student_id, "Ada L", "lovelace@x.com", 31)
    fetched = storage.get_student_by_id(student_id)
    assert fetched == updated


def test_update_to_taken_email_is_a_constraint_violation(storage):
    storage.create_student("Ada", "ada@x.com", 30)
    bob_id = storage.create_student("Bob", "bob@x.com", 25)

    with pytest.raises(ConstraintViolationError):
        storage.update_student_by_id(bob_id, "Bob", "ada@x.com", 25)

    assert storage.get_student_by_id(bob_id).email == "bob@x.com"


def test_empty_table_lists_nothing(storage):
    assert storage.get_students() == []


def test_list_is_ordered_by_id(storage):
    ids = [
        storage.create_student("Zed", "zed@x.com", 50),
        storage.create_student("Amy", "amy@x.com", 18),
        storage.create_student("Kim", "kim@x.com", 33),
    ]
    storage.update_student_by_id(ids[0], "Zed Z", "zed@x.com", 51)

    listed = [s.id for s in storage.get_students()]
    assert listed == sorted(listed)
    assert listed == ids


def test_ids_are_not_reused(storage, settings):
    first_id = storage.create_student("Ada", "ada@x.com", 30)
    with sqlite3.connect(settings.STORAGE_PATH) as conn:
        conn.execute("DELETE FROM students WHERE id = ?", (first_id,))

    assert storage.create_student("Bob", "bob@x.com", 25) > first_id


def test_missing_storage_path_is_rejected(make_settings):
    with pytest.raises(StorageConnectionError):
        SQLiteStorage(make_settings(STORAGE_PATH=""))


def test_construction_creates_directory_and_table(tmp_path, make_settings):
    path = tmp_path / "nested" / "dir" / "students.db"

    store = SQLiteStorage(make_settings(STORAGE_PATH=str(path)))
    try:
        assert path.exists()
        columns = {c["name"] for c in inspect(store.engine).get_columns("students")}
        assert columns == {"id", "name", "email", "age"}
        assert store.driver == "sqlite"
        store.ping()
    finally:
        store.close()


def test_reopening_keeps_existing_rows(settings, storage):
    storage.create_student("Ada", "ada@x.com", 30)

    reopened = SQLiteStorage(settings)
    try:
        assert [s.email for s in reopened.get_students()] == ["ada@x.com"]
    finally:
        reopened.close()
