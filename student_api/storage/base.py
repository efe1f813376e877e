"""Backend-agnostic storage contract.

The HTTP layer only ever talks to a ``Storage``; the factory decides which
adapter sits behind it.
"""

import abc
from typing import List

from student_api.schemas.student import Student


class Storage(abc.ABC):
    """Repository contract every database adapter implements."""

    @abc.abstractmethod
    def create_student(self, name: str, email: str, age: int) -> int:
        """Insert one student and return the engine-assigned ID.

        Raises:
            ConstraintViolationError: the email is already taken.
            StorageConnectionError: the database cannot be reached.
        """

    @abc.abstractmethod
    def get_student_by_id(self, student_id: int) -> Student:
        """Fetch exactly one student.

        Raises:
            NotFoundError: no student has this ID.
            StorageConnectionError: the database cannot be reached.
        """

    @abc.abstractmethod
    def get_students(self) -> List[Student]:
        """Fetch every student ordered by ID ascending (empty list if none)."""

    @abc.abstractmethod
    def update_student_by_id(self, student_id: int, name: str, email: str, age: int) -> Student:
        """Replace name, email and age of one student and return the re-read record.

        Raises:
            NotFoundError: no student has this ID.
            ConstraintViolationError: the new email belongs to another student.
        """

    @abc.abstractmethod
    def ping(self):
        """Round-trip probe; raises ``StorageConnectionError`` when unreachable."""

    @abc.abstractmethod
    def close(self):
        """Release the database handle."""

    @property
    @abc.abstractmethod
    def driver(self) -> str:
        """Return ``'sqlite'`` or ``'postgres'``."""
