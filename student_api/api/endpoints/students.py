from fastapi import APIRouter, Depends, Path, status
from typing import Annotated, List
from student_api.api.deps import get_storage
from student_api.core.exceptions import StorageError, StorageFailureException
from student_api.core.logging import logger
from student_api.schemas.student import Student, StudentCreate, StudentResponse, StudentUpdate
from student_api.storage.base import Storage

router = APIRouter()

# Identifiers are 64-bit database integers
StudentId = Annotated[int, Path(ge=-2**63, le=2**63 - 1)]


@router.post("/student", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
def create_student(
    student: StudentCreate,
    storage: Storage = Depends(get_storage)
):
    """
    Create a new student

    - **name**: Student name (required, non-empty)
    - **email**: Email (required, valid, unique)
    - **age**: Age between 1 and 100
    """
    try:
        student_id = storage.create_student(student.name, student.email, student.age)
    except StorageError as e:
        logger.error(f"Error creating student record: {e}")
        raise StorageFailureException(e, status_code=status.HTTP_400_BAD_REQUEST)

    logger.info(f"Created student record name={student.name} email={student.email} id={student_id}")

    return StudentResponse(
        id=student_id,
        student=Student(id=student_id, **student.model_dump()),
        message="Student record created successfully",
    )


@router.get("/student/{student_id}", response_model=Student)
def get_student(
    student_id: StudentId,
    storage: Storage = Depends(get_storage)
):
    """
    Get one student by ID
    """
    logger.info(f"Getting student record id={student_id}")
    try:
        return storage.get_student_by_id(student_id)
    except StorageError as e:
        logger.error(f"Error getting student record: {e}")
        raise StorageFailureException(e, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.get("/students", response_model=List[Student])
def get_students(storage: Storage = Depends(get_storage)):
    """
    List every student ordered by ID
    """
    logger.info("Getting all student records")
    try:
        return storage.get_students()
    except StorageError as e:
        logger.error(f"Error getting students: {e}")
        raise StorageFailureException(e, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@router.put("/student/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: StudentId,
    student: StudentUpdate,
    storage: Storage = Depends(get_storage)
):
    """
    Replace name, email and age of a student
    """
    try:
        updated_student = storage.update_student_by_id(
            student_id, student.name, student.email, student.age
        )
    except StorageError as e:
        logger.error(f"Error updating student record id={student_id}: {e}")
        raise StorageFailureException(e, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(
        f"Updated student record name={updated_student.name} "
        f"email={updated_student.email} id={updated_student.id}"
    )

    return StudentResponse(
        id=updated_student.id,
        student=updated_student,
        message="Student record updated successfully",
    )
