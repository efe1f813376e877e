from sqlalchemy.orm import Session
from student_api.models.student import Student
from typing import List, Optional


def get_student(db: Session, student_id: int) -> Optional[Student]:
    """Fetch one student by ID"""
    return db.query(Student).filter(Student.id == student_id).first()


def get_students(db: Session) -> List[Student]:
    """Fetch every student, lowest ID first"""
    return db.query(Student).order_by(Student.id.asc()).all()


def create_student(db: Session, name: str, email: str, age: int) -> Student:
    """Insert a student; the engine assigns the ID"""
    db_student = Student(name=name, email=email, age=age)
    db.add(db_student)
    db.commit()
    db.refresh(db_student)
    return db_student


def update_student(db: Session, student_id: int, name: str, email: str, age: int) -> int:
    """Replace name, email and age in one UPDATE. Returns the number of rows matched."""
    updated = (
        db.query(Student)
        .filter(Student.id == student_id)
        .update(
            {Student.name: name, Student.email: email, Student.age: age},
            synchronize_session=False,
        )
    )
    db.commit()
    return updated
