"""Shared SQLAlchemy implementation of the storage contract.

Adapters only differ in how they build the engine and what they do before
the first connection; every query goes through the ORM, so values are
always bound as parameters.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List

from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from student_api.core.config import Settings
from student_api.core.database import (
    build_engine,
    build_session_factory,
    check_database_connection,
    create_students_table,
)
from student_api.core.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from student_api.schemas.student import Student
from student_api.services.student import student as crud_student
from student_api.storage.base import Storage

logger = logging.getLogger(__name__)


class SQLStorage(Storage):
    """Storage backed by one SQLAlchemy engine for the life of the process."""

    name = "sql"

    def __init__(self, settings: Settings):
        self.settings = settings
        self._check_settings()
        self._prepare()

        try:
            self.engine: Engine = build_engine(
                self.build_url(settings),
                echo=settings.DB_ECHO_SQL,
                **self._engine_options()
            )
            self._on_engine_created(self.engine)
            check_database_connection(self.engine)
            create_students_table(self.engine)
        except SQLAlchemyError as e:
            raise StorageConnectionError(f"failed to connect to {self.name}: {e}") from e

        self.SessionLocal = build_session_factory(self.engine)

    # ------------------------------------------------------------------
    # Hooks for concrete adapters
    # ------------------------------------------------------------------

    @classmethod
    def build_url(cls, settings: Settings) -> URL:
        raise NotImplementedError

    def _check_settings(self):
        """Raise ``StorageConnectionError`` if no connection target is configured."""

    def _prepare(self):
        """Runs before the engine is created."""

    def _engine_options(self) -> dict:
        return {}

    def _on_engine_created(self, engine: Engine):
        pass

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    @property
    def driver(self) -> str:
        return self.name

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Yield a session and translate driver errors into storage errors."""
        db = self.SessionLocal()
        try:
            yield db
        except IntegrityError as e:
            db.rollback()
            raise ConstraintViolationError(f"constraint violated: {e.orig}") from e
        except DBAPIError as e:
            db.rollback()
            raise StorageConnectionError(f"database error: {e.orig}") from e
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"storage failure: {e}") from e
        finally:
            db.close()

    def create_student(self, name: str, email: str, age: int) -> int:
        with self._session() as db:
            db_student = crud_student.create_student(db, name=name, email=email, age=age)
            return db_student.id

    def get_student_by_id(self, student_id: int) -> Student:
        with self._session() as db:
            db_student = crud_student.get_student(db, student_id=student_id)
            if db_student is None:
                raise NotFoundError(f"no student found with id: {student_id}")
            return Student.model_validate(db_student)

    def get_students(self) -> List[Student]:
        with self._session() as db:
            return [Student.model_validate(s) for s in crud_student.get_students(db)]

    def update_student_by_id(self, student_id: int, name: str, email: str, age: int) -> Student:
        with self._session() as db:
            updated = crud_student.update_student(
                db, student_id=student_id, name=name, email=email, age=age
            )
        if updated == 0:
            raise NotFoundError(f"no student found with id: {student_id}")
        return self.get_student_by_id(student_id)

    def ping(self):
        try:
            check_database_connection(self.engine)
        except SQLAlchemyError as e:
            raise StorageConnectionError(f"{self.name} is unreachable: {e}") from e

    def close(self):
        self.engine.dispose()
        logger.info(f"Closed {self.name} storage")
