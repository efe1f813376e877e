import logging
from student_api.core.config import must_load_settings
from student_api.core.exceptions import ConstraintViolationError
from student_api.storage.factory import new_storage

# Setup logging to see output
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_STUDENTS = [
    ("Nguyen Van A", "vana@example.com", 20),
    ("Tran Thi B", "thib@example.com", 21),
    ("Le Van C", "vanc@example.com", 22),
]


def seed_data():
    """
    Insert a few sample students through the storage layer.
    """
    storage = new_storage(must_load_settings())
    try:
        # Check if data already exists to avoid duplication
        if storage.get_students():
            logger.info("Database already contains data. Skipping seed.")
            return

        logger.info("Seeding data...")
        for name, email, age in SAMPLE_STUDENTS:
            try:
                student_id = storage.create_student(name, email, age)
                logger.info(f"Created {name} <{email}> id={student_id}")
            except ConstraintViolationError:
                logger.warning(f"{email} already present, skipped")

        logger.info("Data seeded successfully!")
    finally:
        storage.close()  # Always close the connection


if __name__ == "__main__":
    seed_data()
